"""
Vault instrumentation for Gasify.

Provides Prometheus metrics that track deposits, withdrawals, reward flows and
rejected calls per vault, with helper functions that are safe to call from the
operation path.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge

locks_counter = Counter(
    "gasify_vault_locks_total", "Total number of locks created", ["vault"]
)

locked_amount_counter = Counter(
    "gasify_vault_locked_amount_total", "Total token units deposited into locks", ["vault"]
)

unlocks_counter = Counter(
    "gasify_vault_unlocks_total", "Total number of locks released", ["vault"]
)

rewards_paid_counter = Counter(
    "gasify_vault_rewards_paid_total", "Total reward units paid on unlock", ["vault"]
)

rewards_seeded_counter = Counter(
    "gasify_vault_rewards_seeded_total", "Total reward units seeded by the admin", ["vault"]
)

rejections_counter = Counter(
    "gasify_vault_rejections_total",
    "Total number of rejected vault calls by failure kind",
    ["vault", "kind"],
)

total_locked_gauge = Gauge(
    "gasify_vault_total_locked", "Token units currently held in live locks", ["vault"]
)

rewards_pool_gauge = Gauge(
    "gasify_vault_rewards_pool", "Token units currently set aside for rewards", ["vault"]
)

paused_gauge = Gauge(
    "gasify_vault_paused", "1 when the deposit path is paused, 0 otherwise", ["vault"]
)


def record_lock(vault: str, amount: int) -> None:
    """Count a created lock and its principal."""
    if amount <= 0:
        return
    locks_counter.labels(vault=vault).inc()
    locked_amount_counter.labels(vault=vault).inc(amount)


def record_unlock(vault: str, reward: int) -> None:
    """Count a released lock and the reward it drew from the pool."""
    unlocks_counter.labels(vault=vault).inc()
    if reward > 0:
        rewards_paid_counter.labels(vault=vault).inc(reward)


def record_seed(vault: str, amount: int) -> None:
    if amount <= 0:
        return
    rewards_seeded_counter.labels(vault=vault).inc(amount)


def record_rejection(vault: str, kind: str) -> None:
    rejections_counter.labels(vault=vault, kind=kind).inc()


def update_vault_state(vault: str, total_locked: int, rewards_pool: int, paused: bool) -> None:
    """Refresh the state gauges from the vault's bookkeeping."""
    total_locked_gauge.labels(vault=vault).set(total_locked)
    rewards_pool_gauge.labels(vault=vault).set(rewards_pool)
    paused_gauge.labels(vault=vault).set(1 if paused else 0)
