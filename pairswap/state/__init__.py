"""
State management for the pair: share ledger, events, canonical encodings
"""

from .canonical import ZERO_ADDRESS, canonical_address
from .balances import BalanceTable
from .events import Approval, Burn, EventLog, Mint, Swap, Sync, Transfer
from .shares import ShareLedger

__all__ = [
    "ZERO_ADDRESS",
    "canonical_address",
    "BalanceTable",
    "Approval",
    "Burn",
    "EventLog",
    "Mint",
    "Swap",
    "Sync",
    "Transfer",
    "ShareLedger",
]
