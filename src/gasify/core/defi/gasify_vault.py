"""
Gasify Vault.

Custodial time-lock vault for a single fungible token:
- lock: deposit principal, one live lock per account
- unlock: after maturity, withdraw principal plus a reward from the pool
- seed_rewards: administrator funds the reward pool
- pause/unpause: administrator gates new deposits

Security features:
- Reentrancy guard on every mutating operation
- Bookkeeping applied before the external token call, rolled back if it fails
- Typed failures (see vault_exceptions) with no partial state on rejection
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterator

from .. import vault_metrics
from ..config import VaultConfig
from ..contracts.interfaces import TokenLedger
from ..logging_config import configure_logging
from ..vault_exceptions import (
    DuplicateLockError,
    NoActiveLockError,
    ReentrancyError,
    StillLockedError,
    TransferFailedError,
    VaultError,
)
from .access_control import VaultAccessControl
from .lock_ledger import Lock, LockLedger
from .pause_gate import LockStatus, PauseGate
from .reward_pool import RewardPool

logger = logging.getLogger(__name__)

LOCKED_EVENT = "Locked"
UNLOCKED_EVENT = "Unlocked"
REWARDS_SEEDED_EVENT = "RewardsSeeded"
PAUSED_EVENT = "Paused"
UNPAUSED_EVENT = "Unpaused"


def _utc_now() -> int:
    return int(datetime.now(timezone.utc).timestamp())


@dataclass
class VaultEvent:
    """Represents an event emitted by the vault."""

    event_type: str
    args: dict[str, Any]
    timestamp: int = 0
    sequence: int = 0


class GasifyVault:
    """
    Time-lock vault with an admin-funded reward pool.

    All balances are held by the token ledger under the vault's address; the
    vault keeps the bookkeeping (live locks, total locked, reward pool) and
    drives transfers through the TokenLedger capability.

    The caller identity (msg.sender) is passed explicitly as the first
    argument of every operation.

    Without an explicit address each instance derives a fresh one from a
    random nonce. Metrics are labelled by address, so processes that rebuild
    the same vault (e.g. from a snapshot) should pass its fixed address.
    """

    def __init__(
        self,
        token: TokenLedger,
        admin: str,
        config: VaultConfig | None = None,
        time_provider: Callable[[], int] | None = None,
        address: str = "",
    ) -> None:
        if not isinstance(token, TokenLedger):
            raise TypeError(f"token must implement TokenLedger, got {type(token).__name__}")

        self.token = token
        self.config = (config or VaultConfig()).validate()
        self._time_provider = time_provider or _utc_now

        self.access_control = VaultAccessControl(admin=admin, time_provider=self._time_provider)
        self.pause_gate = PauseGate(self.access_control, time_provider=self._time_provider)
        self.lock_ledger = LockLedger()
        self.reward_pool = RewardPool(self.config.reward_rate_bps)

        self.events: list[VaultEvent] = []

        if not address:
            addr_hash = hashlib.sha3_256(
                f"vault:{token.address}:{admin}:{secrets.token_hex(16)}".encode()
            ).digest()
            address = f"0x{addr_hash[-20:].hex()}"
        self.address = address.lower()

        # Reentrancy guard; the mutex serializes callers from other threads
        self._entered = False
        self._mutex = threading.RLock()

        self._refresh_gauges()
        logger.info(
            "Vault initialized",
            extra={
                "event": "vault.initialized",
                "vault": self.address[:10],
                "token": token.address[:10],
                "admin": self.admin[:10],
                "lock_duration_seconds": self.config.lock_duration_seconds,
                "reward_rate_bps": self.config.reward_rate_bps,
            }
        )

    @classmethod
    def from_env(
        cls,
        token: TokenLedger,
        admin: str,
        time_provider: Callable[[], int] | None = None,
        address: str = "",
    ) -> "GasifyVault":
        """
        Deploy a vault configured from GASIFY_* environment variables.

        JSON logging (GASIFY_LOG_LEVEL, GASIFY_LOG_FILE) is configured before
        the vault parameters are read, so the config and deployment events
        reach the configured handlers.

        Raises:
            ConfigurationError: If any GASIFY_* value is invalid
        """
        configure_logging()
        return cls(
            token=token,
            admin=admin,
            config=VaultConfig.from_env(),
            time_provider=time_provider,
            address=address,
        )

    # ==================== View Functions ====================

    @property
    def admin(self) -> str:
        return self.access_control.admin

    @property
    def token_address(self) -> str:
        """Address of the deposit token, fixed for the vault lifetime."""
        return self.token.address

    @property
    def total_locked(self) -> int:
        return self.lock_ledger.total_locked

    @property
    def rewards_pool(self) -> int:
        return self.reward_pool.balance

    @property
    def lock_status(self) -> LockStatus:
        return self.pause_gate.status

    @property
    def lock_duration(self) -> int:
        return self.config.lock_duration_seconds

    def get_total_locked_balance(self) -> int:
        return self.total_locked

    def get_lock(self, holder: str) -> Lock | None:
        """Live lock for holder, or None."""
        return self.lock_ledger.get_lock(holder)

    def locks(self, holder: str) -> Lock:
        """Lock record for holder; a zeroed record when none is live."""
        return self.lock_ledger.get_lock(holder) or Lock.empty()

    def get_locked_tokens(self, holder: str) -> int:
        return self.lock_ledger.locked_amount(holder)

    def get_events(self, event_type: str | None = None) -> list[VaultEvent]:
        if event_type is None:
            return list(self.events)
        return [event for event in self.events if event.event_type == event_type]

    def get_status(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "token": self.token_address,
            "admin": self.admin,
            "total_locked": self.total_locked,
            "rewards_pool": self.rewards_pool,
            "active_locks": len(self.lock_ledger),
            "lock_duration_seconds": self.config.lock_duration_seconds,
            "reward_rate_bps": self.config.reward_rate_bps,
            **self.pause_gate.get_status(),
        }

    def invariant_violations(self) -> list[str]:
        """Describe any broken bookkeeping invariant; empty when consistent."""
        violations = []
        live_sum = sum(lock.amount for lock in self.lock_ledger)
        if live_sum != self.total_locked:
            violations.append(
                f"total_locked {self.total_locked} != sum of live locks {live_sum}"
            )
        if self.rewards_pool < 0:
            violations.append(f"rewards_pool is negative ({self.rewards_pool})")
        for lock in self.lock_ledger:
            if lock.amount <= 0:
                violations.append(f"lock for {lock.holder} has non-positive amount")
        return violations

    # ==================== State-Changing Functions ====================

    def lock(self, caller: str, amount: int) -> Lock:
        """
        Deposit amount and open a lock for caller.

        Args:
            caller: Depositing account (msg.sender)
            amount: Principal in token base units

        Returns:
            The recorded lock

        Raises:
            PausedError: If deposits are paused
            DuplicateLockError: If caller already has a live lock
            InvalidAmountError: If amount is not positive
            TransferFailedError: If the token pull fails (InsufficientAllowanceError
                when the vault's allowance is too low)
        """
        with self._operation("lock", caller):
            self.pause_gate.require_active()

            lock = self.lock_ledger.create_lock(
                caller, amount, self._now(), self.config.lock_duration_seconds
            )
            try:
                self._pull(caller, amount)
            except Exception:
                self.lock_ledger.clear_lock(caller)
                raise

            self._emit(LOCKED_EVENT, holder=lock.holder, amount=amount)
            vault_metrics.record_lock(self.address, amount)
            logger.info(
                "Lock created",
                extra={
                    "event": "vault.lock",
                    "vault": self.address[:10],
                    "holder": lock.holder[:10],
                    "amount": amount,
                    "matures_at": lock.matures_at,
                    "total_locked": self.total_locked,
                }
            )
            return lock

    def unlock(self, caller: str) -> int:
        """
        Release caller's matured lock, paying principal plus reward.

        Args:
            caller: Lock holder (msg.sender)

        Returns:
            Total amount paid (principal + reward)

        Raises:
            NoActiveLockError: If caller has no live lock
            StillLockedError: If the lock has not matured
            TransferFailedError: If the token push fails
        """
        with self._operation("unlock", caller):
            lock = self.lock_ledger.get_lock(caller)
            if lock is None:
                raise NoActiveLockError(details={"holder": caller})

            now = self._now()
            if not lock.is_mature(now):
                raise StillLockedError(
                    matures_at=lock.matures_at,
                    details={
                        "holder": lock.holder,
                        "now": now,
                        "matures_at": lock.matures_at,
                        "remaining_seconds": lock.matures_at - now,
                    },
                )

            reward = self.reward_pool.compute_reward(lock.amount, self.total_locked)
            total_paid = lock.amount + reward

            # Effects before interaction
            self.lock_ledger.clear_lock(lock.holder)
            self.reward_pool.pay_out(reward)
            try:
                self._push(lock.holder, total_paid)
            except Exception:
                self.reward_pool.refund(reward)
                self.lock_ledger.restore_lock(lock)
                raise

            self._emit(
                UNLOCKED_EVENT,
                holder=lock.holder,
                amount=total_paid,
                principal=lock.amount,
                reward=reward,
            )
            vault_metrics.record_unlock(self.address, reward)
            logger.info(
                "Lock released",
                extra={
                    "event": "vault.unlock",
                    "vault": self.address[:10],
                    "holder": lock.holder[:10],
                    "principal": lock.amount,
                    "reward": reward,
                    "rewards_pool": self.rewards_pool,
                    "total_locked": self.total_locked,
                }
            )
            return total_paid

    def seed_rewards(self, caller: str, amount: int) -> int:
        """
        Fund the reward pool from the administrator's balance.

        Returns:
            New rewards pool balance

        Raises:
            UnauthorizedError: If caller is not the administrator
            InvalidAmountError: If amount is not positive
            TransferFailedError: If the token pull fails
        """
        with self._operation("seed_rewards", caller):
            self.access_control.require_admin(caller, action="seed_rewards")

            self.reward_pool.seed(amount)
            try:
                self._pull(caller, amount)
            except Exception:
                self.reward_pool.unseed(amount)
                raise

            self._emit(REWARDS_SEEDED_EVENT, admin=caller.lower(), amount=amount)
            vault_metrics.record_seed(self.address, amount)
            logger.info(
                "Rewards seeded",
                extra={
                    "event": "vault.rewards_seeded",
                    "vault": self.address[:10],
                    "amount": amount,
                    "rewards_pool": self.rewards_pool,
                }
            )
            return self.rewards_pool

    def pause(self, caller: str) -> None:
        """Stop new deposits (admin only)."""
        with self._operation("pause", caller):
            self.pause_gate.pause(caller)
            self._emit(PAUSED_EVENT, admin=caller.lower())

    def unpause(self, caller: str) -> None:
        """Reopen deposits (admin only)."""
        with self._operation("unpause", caller):
            self.pause_gate.unpause(caller)
            self._emit(UNPAUSED_EVENT, admin=caller.lower())

    # ==================== Helpers ====================

    @contextmanager
    def _operation(self, action: str, caller: str) -> Iterator[None]:
        with self._mutex:
            if self._entered:
                vault_metrics.record_rejection(self.address, ReentrancyError.kind.value)
                logger.error(
                    "Reentrant vault call rejected",
                    extra={
                        "event": "vault.reentrancy_blocked",
                        "vault": self.address[:10],
                        "action": action,
                        "caller": (caller or "")[:10],
                    }
                )
                raise ReentrancyError(details={"action": action, "caller": caller})

            self._entered = True
            try:
                yield
            except VaultError as exc:
                vault_metrics.record_rejection(self.address, exc.kind.value)
                logger.info(
                    "Vault call rejected: %s",
                    exc.message,
                    extra={
                        "event": "vault.rejected",
                        "vault": self.address[:10],
                        "action": action,
                        "caller": (caller or "")[:10],
                        "kind": exc.kind.value,
                    }
                )
                raise
            finally:
                self._entered = False
                self._refresh_gauges()

    def _now(self) -> int:
        timestamp = self._time_provider()
        try:
            return int(timestamp)
        except (TypeError, ValueError) as exc:
            raise ValueError("time_provider must return an integer timestamp") from exc

    def _pull(self, owner: str, amount: int) -> None:
        """Move amount from owner into vault custody via the owner's allowance."""
        if not self.token.transfer_from(self.address, owner, self.address, amount):
            raise TransferFailedError(
                "ERC20: transferFrom returned false",
                details={"from": owner, "amount": amount},
            )

    def _push(self, recipient: str, amount: int) -> None:
        """Move amount out of vault custody to recipient."""
        if amount == 0:
            return
        if not self.token.transfer(self.address, recipient, amount):
            raise TransferFailedError(
                "ERC20: transfer returned false",
                details={"to": recipient, "amount": amount},
            )

    def _emit(self, event_type: str, **args: Any) -> None:
        self.events.append(
            VaultEvent(
                event_type=event_type,
                args=args,
                timestamp=self._now(),
                sequence=len(self.events),
            )
        )

    def _refresh_gauges(self) -> None:
        vault_metrics.update_vault_state(
            self.address,
            self.total_locked,
            self.rewards_pool,
            self.pause_gate.is_paused,
        )

    # ==================== Serialization ====================

    def to_dict(self) -> dict[str, Any]:
        """Serialize vault state to dictionary."""
        return {
            "address": self.address,
            "token": self.token_address,
            "admin": self.admin,
            "config": self.config.to_dict(),
            "lock_status": int(self.lock_status),
            "paused_by": self.pause_gate.paused_by,
            "paused_at": self.pause_gate.paused_at,
            "rewards_pool": self.rewards_pool,
            "total_locked": self.total_locked,
            "locks": [lock.to_dict() for lock in self.lock_ledger],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        token: TokenLedger,
        time_provider: Callable[[], int] | None = None,
    ) -> "GasifyVault":
        """
        Restore a vault from to_dict output, re-attaching its token ledger.

        Raises:
            ValueError: If the token does not match or the snapshot breaks a
                bookkeeping invariant (duplicate holders, totals that disagree,
                negative pool, non-positive locks)
        """
        if data["token"].lower() != token.address.lower():
            raise ValueError(
                f"Token mismatch: snapshot holds {data['token']}, got {token.address}"
            )

        vault = cls(
            token=token,
            admin=data["admin"],
            config=VaultConfig.from_dict(data.get("config", {})),
            time_provider=time_provider,
            address=data["address"],
        )
        for lock_data in data.get("locks", []):
            try:
                vault.lock_ledger.restore_lock(Lock.from_dict(lock_data))
            except DuplicateLockError as exc:
                raise ValueError(
                    f"Corrupted snapshot: duplicate lock for {exc.details['holder']}"
                ) from exc
        if vault.total_locked != data.get("total_locked", vault.total_locked):
            raise ValueError(
                f"Corrupted snapshot: locks sum to {vault.total_locked}, "
                f"total_locked is {data['total_locked']}"
            )

        try:
            vault.reward_pool = RewardPool(
                vault.config.reward_rate_bps, int(data.get("rewards_pool", 0))
            )
        except ValueError as exc:
            raise ValueError(f"Corrupted snapshot: {exc}") from exc

        violations = vault.invariant_violations()
        if violations:
            raise ValueError(f"Corrupted snapshot: {'; '.join(violations)}")

        vault.pause_gate.status = LockStatus(data.get("lock_status", LockStatus.ACTIVE))
        vault.pause_gate.paused_by = data.get("paused_by")
        vault.pause_gate.paused_at = data.get("paused_at")
        vault._refresh_gauges()
        return vault
