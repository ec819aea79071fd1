"""
Gasify Token Contracts.

This module provides:
- ERC20: Fungible token ledger the vault takes deposits in
- TokenLedger: Protocol describing the ledger capability the vault consumes
"""

from .erc20 import ERC20Token, TokenEvent
from .interfaces import TokenLedger

__all__ = [
    "ERC20Token",
    "TokenEvent",
    "TokenLedger",
]
