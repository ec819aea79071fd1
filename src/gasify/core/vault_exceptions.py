"""
Vault-specific exception hierarchy for Gasify.

Provides typed exceptions for vault and token-ledger operations so callers can
branch on the failure kind instead of matching revert strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class VaultErrorKind(Enum):
    """Distinguishing failure kinds reported by vault operations."""

    UNAUTHORIZED = "unauthorized"
    PAUSED = "paused"
    ALREADY_PAUSED = "already_paused"
    ALREADY_ACTIVE = "already_active"
    DUPLICATE_LOCK = "duplicate_lock"
    NO_ACTIVE_LOCK = "no_active_lock"
    STILL_LOCKED = "still_locked"
    TRANSFER_FAILED = "transfer_failed"
    INSUFFICIENT_ALLOWANCE = "insufficient_allowance"
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_REWARDS = "insufficient_rewards"
    REENTRANT_CALL = "reentrant_call"
    UNKNOWN = "unknown"


class VaultError(Exception):
    """Base exception for all vault-related errors.

    All vault exceptions inherit from this base class to enable catch-all
    handling when needed while maintaining type specificity.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the same call may succeed later without changes
        kind: Failure kind callers and tests branch on
    """

    kind: VaultErrorKind = VaultErrorKind.UNKNOWN
    default_message: str = "vault operation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "kind": self.kind.value,
            "message": self.message,
            "details": dict(self.details),
            "recoverable": self.recoverable,
        }


# ==================== Access Errors ====================


class UnauthorizedError(VaultError):
    """Raised when a privileged operation is invoked by a non-admin identity."""

    kind = VaultErrorKind.UNAUTHORIZED
    default_message = "Ownable: caller is not the owner"


class ReentrancyError(VaultError):
    """Raised when a mutating call re-enters the vault mid-operation."""

    kind = VaultErrorKind.REENTRANT_CALL
    default_message = "GasifyVault: reentrant call"


# ==================== Pause Gate Errors ====================


class PausedError(VaultError):
    """Raised when a deposit is attempted while the gate is paused."""

    kind = VaultErrorKind.PAUSED
    default_message = "GasifyVault: lock is currently paused"


class AlreadyPausedError(VaultError):
    """Raised when pause is requested while already paused."""

    kind = VaultErrorKind.ALREADY_PAUSED
    default_message = "GasifyVault: lock is currently paused"


class AlreadyActiveError(VaultError):
    """Raised when unpause is requested while already active."""

    kind = VaultErrorKind.ALREADY_ACTIVE
    default_message = "GasifyVault: lock is currently active"


# ==================== Lock Errors ====================


class InvalidAmountError(VaultError):
    """Raised when a deposit or seed amount is not a positive integer."""

    kind = VaultErrorKind.INVALID_AMOUNT
    default_message = "GasifyVault: amount must be positive"


class DuplicateLockError(VaultError):
    """Raised when an account with a live lock attempts another deposit."""

    kind = VaultErrorKind.DUPLICATE_LOCK
    default_message = "GasifyVault: Active lock found"


class NoActiveLockError(VaultError):
    """Raised when unlock is attempted with no recorded lock."""

    kind = VaultErrorKind.NO_ACTIVE_LOCK
    default_message = "GasifyVault: No active lock found"


class StillLockedError(VaultError):
    """Raised when unlock is attempted before maturity.

    Recoverable: the same call succeeds once the maturity time has passed.
    """

    kind = VaultErrorKind.STILL_LOCKED
    default_message = "GasifyVault: stakes is currently locked"

    def __init__(
        self,
        message: Optional[str] = None,
        matures_at: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)
        self.matures_at = matures_at


# ==================== Reward Errors ====================


class InsufficientRewardsError(VaultError):
    """Raised when a payout would drive the rewards pool below zero."""

    kind = VaultErrorKind.INSUFFICIENT_REWARDS
    default_message = "GasifyVault: payout exceeds rewards pool"


# ==================== Token Ledger Errors ====================


class TransferFailedError(VaultError):
    """Raised when the token ledger cannot complete a pull or push of funds."""

    kind = VaultErrorKind.TRANSFER_FAILED
    default_message = "ERC20: transfer failed"


class InsufficientAllowanceError(TransferFailedError):
    """Raised when a transfer-on-behalf exceeds the approved allowance."""

    kind = VaultErrorKind.INSUFFICIENT_ALLOWANCE
    default_message = "ERC20: insufficient allowance"


__all__ = [
    "VaultErrorKind",
    "VaultError",
    "UnauthorizedError",
    "ReentrancyError",
    "PausedError",
    "AlreadyPausedError",
    "AlreadyActiveError",
    "InvalidAmountError",
    "DuplicateLockError",
    "NoActiveLockError",
    "StillLockedError",
    "InsufficientRewardsError",
    "TransferFailedError",
    "InsufficientAllowanceError",
]
