"""
Gasify DeFi Contracts.

This module provides the time-lock vault and its components:
- Access Control: single administrator gating privileged calls
- Pause Gate: admin switch that stops new deposits
- Lock Ledger: one live lock per account
- Reward Pool: admin-funded pool paying a fixed yield on unlock
- GasifyVault: the state machine tying them together
"""

from .access_control import VaultAccessControl
from .gasify_vault import GasifyVault, VaultEvent
from .lock_ledger import Lock, LockLedger
from .pause_gate import LockStatus, PauseGate
from .reward_pool import RewardPool, compute_reward, mul_div

__all__ = [
    # Vault
    "GasifyVault",
    "VaultEvent",
    # Components
    "VaultAccessControl",
    "PauseGate",
    "LockStatus",
    "LockLedger",
    "Lock",
    "RewardPool",
    "compute_reward",
    "mul_div",
]
