from types import SimpleNamespace

import pytest

from gasify.core.config import VaultConfig
from gasify.core.contracts.erc20 import ERC20Token
from gasify.core.defi.gasify_vault import GasifyVault

ONE_TOKEN = 10**18
START_TIME = 1_700_000_000
LOCK_DURATION = 7 * 24 * 3600


class FakeClock:
    """Deterministic time provider that tests advance by hand."""

    def __init__(self, start: int = START_TIME):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def accounts():
    """Deployer (vault admin) and two depositors."""
    return SimpleNamespace(
        deployer="0x" + "d" * 40,
        user1="0x" + "1" * 40,
        user2="0x" + "2" * 40,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token(accounts):
    """Token with the whole supply at the deployer and 100 tokens sent to user1."""
    token = ERC20Token(
        name="Gasify Token",
        symbol="GAS",
        owner=accounts.deployer,
        initial_supply=1_000_000 * ONE_TOKEN,
    )
    token.transfer(accounts.deployer, accounts.user1, 100 * ONE_TOKEN)
    return token


@pytest.fixture
def vault_config():
    return VaultConfig(lock_duration_seconds=LOCK_DURATION, reward_rate_bps=4000)


@pytest.fixture
def vault(token, accounts, clock, vault_config):
    return GasifyVault(
        token=token,
        admin=accounts.deployer,
        config=vault_config,
        time_provider=clock,
    )
