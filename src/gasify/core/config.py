"""
Gasify Vault Configuration

Supports testnet and mainnet with separate defaults. Every value can be
overridden through environment variables prefixed with ``GASIFY_``.

Invalid values raise ConfigurationError at import or validation time rather
than silently falling back to defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class NetworkType(Enum):
    TESTNET = "testnet"
    MAINNET = "mainnet"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


BPS_DENOMINATOR = 10_000
SECONDS_PER_DAY = 24 * 3600


def _get_int_env(env_var: str, default: int) -> int:
    """Read an integer from the environment, failing loudly on garbage."""
    raw = os.getenv(env_var, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{env_var} must be an integer, got {raw!r}"
        ) from exc


def _get_network(env_var: str = "GASIFY_NETWORK") -> NetworkType:
    raw = os.getenv(env_var, NetworkType.TESTNET.value).strip().lower()
    try:
        return NetworkType(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{env_var} must be one of "
            f"{[network.value for network in NetworkType]}, got {raw!r}"
        ) from exc


# Get network type from environment variable
NETWORK = _get_network()  # Default to testnet for safety

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_log_settings() -> tuple[str, Optional[str]]:
    """Read GASIFY_LOG_LEVEL and GASIFY_LOG_FILE at call time."""
    level = os.getenv("GASIFY_LOG_LEVEL", "INFO").strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"GASIFY_LOG_LEVEL must be one of {list(LOG_LEVELS)}, got {level!r}"
        )
    log_file = os.getenv("GASIFY_LOG_FILE", "").strip() or None
    return level, log_file


class TestnetConfig:
    """Testnet Configuration (short lock period for rehearsals)"""

    NETWORK_TYPE = NetworkType.TESTNET
    LOCK_DURATION_SECONDS = SECONDS_PER_DAY
    REWARD_RATE_BPS = 4000


class MainnetConfig:
    """Mainnet Configuration"""

    NETWORK_TYPE = NetworkType.MAINNET
    LOCK_DURATION_SECONDS = 30 * SECONDS_PER_DAY
    REWARD_RATE_BPS = 4000


def get_network_config(network: NetworkType | None = None) -> type:
    """Return the static config class for the given (or configured) network."""
    network = network or NETWORK
    if network == NetworkType.MAINNET:
        return MainnetConfig
    return TestnetConfig


@dataclass(frozen=True)
class VaultConfig:
    """Parameters fixed for the lifetime of a vault instance."""

    lock_duration_seconds: int = 30 * SECONDS_PER_DAY
    reward_rate_bps: int = 4000

    def validate(self) -> "VaultConfig":
        if not isinstance(self.lock_duration_seconds, int) or self.lock_duration_seconds < 0:
            raise ConfigurationError(
                "lock_duration_seconds must be a non-negative integer, "
                f"got {self.lock_duration_seconds!r}"
            )
        if (
            not isinstance(self.reward_rate_bps, int)
            or not 0 <= self.reward_rate_bps <= BPS_DENOMINATOR
        ):
            raise ConfigurationError(
                f"reward_rate_bps must be an integer in [0, {BPS_DENOMINATOR}], "
                f"got {self.reward_rate_bps!r}"
            )
        return self

    @classmethod
    def from_env(cls, network: NetworkType | None = None) -> "VaultConfig":
        """Build a config from network defaults overridden by the environment."""
        defaults = get_network_config(network)
        config = cls(
            lock_duration_seconds=_get_int_env(
                "GASIFY_LOCK_DURATION_SECONDS", defaults.LOCK_DURATION_SECONDS
            ),
            reward_rate_bps=_get_int_env(
                "GASIFY_REWARD_RATE_BPS", defaults.REWARD_RATE_BPS
            ),
        ).validate()
        logger.debug(
            "Vault configuration loaded",
            extra={
                "event": "config.vault_loaded",
                "network": (network or NETWORK).value,
                **asdict(config),
            },
        )
        return config

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VaultConfig":
        return cls(
            lock_duration_seconds=int(
                data.get("lock_duration_seconds", cls.lock_duration_seconds)
            ),
            reward_rate_bps=int(data.get("reward_rate_bps", cls.reward_rate_bps)),
        ).validate()
