"""
Pause gate for the vault deposit path.

Two-state switch (ACTIVE / PAUSED) controlled by the vault administrator.
Only new deposits consult the gate; withdrawals, reward seeding and the
pause controls themselves are never blocked.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Callable, Dict, Optional

from ..vault_exceptions import AlreadyActiveError, AlreadyPausedError, PausedError
from .access_control import VaultAccessControl

logger = logging.getLogger(__name__)


class LockStatus(IntEnum):
    """Deposit gate state. Integer values are the observable on-chain encoding."""

    ACTIVE = 0
    PAUSED = 1


class PauseGate:
    """
    Manages the pause state of the deposit path.

    Transitions are explicit: pausing a paused gate or unpausing an active one
    is rejected rather than ignored.
    """

    def __init__(
        self,
        access_control: VaultAccessControl,
        time_provider: Optional[Callable[[], int]] = None,
        status: LockStatus = LockStatus.ACTIVE,
    ):
        self.access_control = access_control
        self.status = LockStatus(status)
        self.paused_by: Optional[str] = None
        self.paused_at: Optional[int] = None
        self._time_provider = time_provider or (
            lambda: int(datetime.now(timezone.utc).timestamp())
        )

    @property
    def is_paused(self) -> bool:
        return self.status == LockStatus.PAUSED

    def pause(self, caller: str) -> None:
        """Pauses the deposit path. Admin only; rejects a redundant pause."""
        self.access_control.require_admin(caller, action="pause")
        if self.is_paused:
            raise AlreadyPausedError(details={"paused_by": self.paused_by})

        self.status = LockStatus.PAUSED
        self.paused_by = caller.lower()
        self.paused_at = int(self._time_provider())
        logger.warning(
            "Deposits paused by %s",
            caller,
            extra={"event": "pause_gate.paused", "admin": caller[:10]},
        )

    def unpause(self, caller: str) -> None:
        """Reopens the deposit path. Admin only; rejects a redundant unpause."""
        self.access_control.require_admin(caller, action="unpause")
        if not self.is_paused:
            raise AlreadyActiveError()

        self.status = LockStatus.ACTIVE
        self.paused_by = None
        self.paused_at = None
        logger.info(
            "Deposits unpaused by %s",
            caller,
            extra={"event": "pause_gate.unpaused", "admin": caller[:10]},
        )

    def require_active(self) -> None:
        if self.is_paused:
            raise PausedError(details={"paused_by": self.paused_by})

    def get_status(self) -> Dict[str, Any]:
        return {
            "lock_status": int(self.status),
            "is_paused": self.is_paused,
            "paused_by": self.paused_by,
            "paused_at": self.paused_at,
        }
