"""
Per-account lock records for the vault.

Holds at most one live lock per account and keeps the running total of locked
principal in step with the records. Token movement is the caller's concern;
this ledger only records.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Iterator

from ..vault_exceptions import DuplicateLockError, InvalidAmountError, NoActiveLockError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lock:
    """An account's outstanding deposit."""

    holder: str
    amount: int
    locked_at: int
    matures_at: int

    @classmethod
    def empty(cls) -> "Lock":
        """Zeroed record reported for accounts without a live lock."""
        return cls(holder="", amount=0, locked_at=0, matures_at=0)

    @property
    def is_empty(self) -> bool:
        return self.amount == 0

    def is_mature(self, now: int) -> bool:
        return now >= self.matures_at

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Lock":
        return cls(
            holder=str(data["holder"]).lower(),
            amount=int(data["amount"]),
            locked_at=int(data["locked_at"]),
            matures_at=int(data["matures_at"]),
        )


def validate_amount(amount: int) -> None:
    """Require a strictly positive integer token amount."""
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise InvalidAmountError(details={"amount": amount})


class LockLedger:
    """Records live locks keyed by holder address."""

    def __init__(self) -> None:
        self._locks: dict[str, Lock] = {}
        self.total_locked = 0

    def create_lock(self, holder: str, amount: int, now: int, lock_duration: int) -> Lock:
        """
        Record a new lock for holder.

        Args:
            holder: Depositing account
            amount: Principal in token base units
            now: Current timestamp
            lock_duration: Seconds until the lock matures

        Returns:
            The recorded lock

        Raises:
            DuplicateLockError: If holder already has a live lock
            InvalidAmountError: If amount is not positive
        """
        holder_norm = holder.lower()
        if holder_norm in self._locks:
            raise DuplicateLockError(
                details={"holder": holder_norm, "amount": self._locks[holder_norm].amount}
            )
        validate_amount(amount)

        lock = Lock(
            holder=holder_norm,
            amount=amount,
            locked_at=now,
            matures_at=now + lock_duration,
        )
        self._locks[holder_norm] = lock
        self.total_locked += amount
        return lock

    def get_lock(self, holder: str) -> Lock | None:
        return self._locks.get(holder.lower())

    def clear_lock(self, holder: str) -> Lock:
        """
        Remove holder's lock and release its principal from the total.

        Raises:
            NoActiveLockError: If holder has no live lock
        """
        holder_norm = holder.lower()
        lock = self._locks.pop(holder_norm, None)
        if lock is None:
            raise NoActiveLockError(details={"holder": holder_norm})
        self.total_locked -= lock.amount
        return lock

    def restore_lock(self, lock: Lock) -> None:
        """Put back a lock removed by clear_lock (rollback of a failed unlock)."""
        lock = replace(lock, holder=lock.holder.lower())
        if lock.holder in self._locks:
            raise DuplicateLockError(details={"holder": lock.holder})
        self._locks[lock.holder] = lock
        self.total_locked += lock.amount

    def locked_amount(self, holder: str) -> int:
        lock = self.get_lock(holder)
        return lock.amount if lock else 0

    def holders(self) -> list[str]:
        return list(self._locks)

    def __iter__(self) -> Iterator[Lock]:
        return iter(list(self._locks.values()))

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, holder: object) -> bool:
        return isinstance(holder, str) and holder.lower() in self._locks
