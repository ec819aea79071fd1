"""
Reward pool accounting for the vault.

The pool is funded by the administrator and drawn down by unlock payouts.
Rewards are a fixed yield on the unlocking lock's principal, capped by what is
left in the pool:

    reward = min(lock_amount * reward_rate_bps // 10_000, pool)

Integer arithmetic rounds down, so the pool never pays out fractional units
it does not hold.
"""

from __future__ import annotations

import logging

from ..config import BPS_DENOMINATOR
from ..vault_exceptions import InsufficientRewardsError, InvalidAmountError
from .lock_ledger import validate_amount

logger = logging.getLogger(__name__)


def mul_div(a: int, b: int, denominator: int, round_up: bool = False) -> int:
    """
    Calculate (a * b) / denominator with full precision and controlled rounding.

    Args:
        a: First multiplicand
        b: Second multiplicand
        denominator: Divisor
        round_up: If True, round up (for charging users)
                  If False, round down (for paying users)

    Raises:
        ValueError: If denominator is zero
    """
    if denominator == 0:
        raise ValueError("Division by zero")

    result = a * b
    if round_up:
        return (result + denominator - 1) // denominator
    return result // denominator


def compute_reward(
    lock_amount: int,
    total_locked: int,
    pool: int,
    reward_rate_bps: int,
) -> int:
    """
    Reward owed to a matured lock.

    Args:
        lock_amount: Principal of the unlocking lock
        total_locked: Total locked principal including this lock
        pool: Rewards pool balance at the time of unlock
        reward_rate_bps: Fixed yield in basis points

    Returns:
        Reward in token base units, 0 <= reward <= pool
    """
    if lock_amount < 0 or pool < 0:
        raise InvalidAmountError(
            "GasifyVault: reward inputs cannot be negative",
            details={"lock_amount": lock_amount, "pool": pool},
        )
    if lock_amount > total_locked:
        raise InvalidAmountError(
            "GasifyVault: lock amount exceeds total locked",
            details={"lock_amount": lock_amount, "total_locked": total_locked},
        )

    accrued = mul_div(lock_amount, reward_rate_bps, BPS_DENOMINATOR)
    return min(accrued, pool)


class RewardPool:
    """Tracks the admin-funded reward balance."""

    def __init__(self, reward_rate_bps: int, balance: int = 0) -> None:
        if not 0 <= reward_rate_bps <= BPS_DENOMINATOR:
            raise ValueError(
                f"reward_rate_bps must be within [0, {BPS_DENOMINATOR}], got {reward_rate_bps}"
            )
        if balance < 0:
            raise ValueError("Reward pool balance cannot be negative.")
        self.reward_rate_bps = reward_rate_bps
        self.balance = balance

    def seed(self, amount: int) -> int:
        """Add amount to the pool and return the new balance."""
        validate_amount(amount)
        self.balance += amount
        return self.balance

    def unseed(self, amount: int) -> None:
        """Take back a seed whose token pull failed."""
        self.pay_out(amount)

    def compute_reward(self, lock_amount: int, total_locked: int) -> int:
        return compute_reward(lock_amount, total_locked, self.balance, self.reward_rate_bps)

    def pay_out(self, amount: int) -> None:
        """
        Draw amount from the pool.

        Raises:
            InsufficientRewardsError: If amount exceeds the pool balance
        """
        if amount < 0:
            raise InvalidAmountError(details={"amount": amount})
        if amount > self.balance:
            raise InsufficientRewardsError(
                details={"requested": amount, "available": self.balance}
            )
        self.balance -= amount

    def refund(self, amount: int) -> None:
        """Return a payout whose token push failed."""
        if amount < 0:
            raise InvalidAmountError(details={"amount": amount})
        self.balance += amount
