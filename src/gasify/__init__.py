"""
Gasify - Token Time-Lock Vault

A custodial vault that accepts deposits of a fungible token, keeps at most one
live lock per account, and pays principal plus a share of an admin-funded
reward pool once a lock matures.

Main Components:
- Contracts: the ERC20 token ledger and the ledger Protocol the vault consumes
- DeFi: the vault state machine with its access control, pause gate,
  lock ledger and reward pool
"""

__version__ = "0.1.0"
__author__ = "Gasify Development Team"

__all__ = []
