"""
In-memory host integration for the pair core.
"""

from .chain import Chain
from .tokens import (
    FalseReturnToken,
    NoReturnToken,
    RevertingToken,
    ScriptedReturnToken,
    StandardToken,
)

__all__ = [
    "Chain",
    "FalseReturnToken",
    "NoReturnToken",
    "RevertingToken",
    "ScriptedReturnToken",
    "StandardToken",
]
