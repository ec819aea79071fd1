"""
Administrator access control for vault contracts.

Tracks a single administrator identity fixed at construction and gates the
privileged vault operations (seeding rewards, pausing, unpausing).

The most recent privileged-call decisions are kept in a bounded in-memory
audit trail so that denied attempts are visible after the fact.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Optional

from ..vault_exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

AUDIT_LOG_LIMIT = 256


@dataclass
class VaultAccessControl:
    """
    Single-administrator access control.

    Usage:
        ac = VaultAccessControl(admin="0xDeployer")
        ac.require_admin(caller, action="pause")
        # Only reached when caller is the administrator
    """

    admin: str

    time_provider: Optional[Callable[[], int]] = None

    # Most recent privileged-call decisions, oldest dropped first
    audit_log: Deque[dict[str, Any]] = field(
        default_factory=lambda: deque(maxlen=AUDIT_LOG_LIMIT)
    )

    def __post_init__(self) -> None:
        if not self.admin:
            raise ValueError("Administrator address cannot be empty.")
        self.admin = self.admin.lower()

    def is_admin(self, identity: str) -> bool:
        """
        Check whether identity is the administrator.

        Args:
            identity: Address to check

        Returns:
            True if identity matches the administrator (case-insensitive)
        """
        return bool(identity) and identity.lower() == self.admin

    def require_admin(self, identity: str, action: str = "privileged") -> None:
        """
        Require identity to be the administrator.

        Args:
            identity: Caller address (msg.sender)
            action: Operation name recorded in the audit trail

        Raises:
            UnauthorizedError: If identity is not the administrator
        """
        granted = self.is_admin(identity)
        self.audit_log.append({
            "action": action,
            "caller": (identity or "").lower(),
            "granted": granted,
            "timestamp": self._now(),
        })

        if not granted:
            logger.warning(
                "Access denied: caller is not the administrator",
                extra={
                    "event": "access_control.denied",
                    "action": action,
                    "caller": (identity or "")[:10],
                    "admin": self.admin[:10],
                }
            )
            raise UnauthorizedError(
                details={"caller": identity, "action": action},
            )

    def denied_attempts(self) -> list[dict[str, Any]]:
        """Audit entries for rejected privileged calls."""
        return [entry for entry in self.audit_log if not entry["granted"]]

    def _now(self) -> int:
        if self.time_provider is not None:
            return int(self.time_provider())
        return int(time.time())
