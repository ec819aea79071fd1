"""
Unit tests for the ERC20 token ledger backing the vault.
"""

import pytest

from gasify.core.contracts.erc20 import UINT256_MAX, ZERO_ADDRESS, ERC20Token
from gasify.core.contracts.interfaces import TokenLedger
from gasify.core.vault_exceptions import InsufficientAllowanceError, TransferFailedError

OWNER = "0xOwner000000000000000000000000000000000"
ALICE = "0xAlice000000000000000000000000000000000"
SPENDER = "0xSpender0000000000000000000000000000000"


@pytest.fixture
def erc20():
    return ERC20Token(name="Gasify Token", symbol="GAS", owner=OWNER, initial_supply=1_000)


def test_initial_supply_credited_to_owner(erc20):
    assert erc20.total_supply == 1_000
    assert erc20.balance_of(OWNER) == 1_000
    assert erc20.events[0].event_type == "Transfer"
    assert erc20.events[0].from_address == ZERO_ADDRESS


def test_implements_token_ledger_protocol(erc20):
    assert isinstance(erc20, TokenLedger)


def test_address_derived_and_normalized(erc20):
    assert erc20.address.startswith("0x")
    assert len(erc20.address) == 42
    assert erc20.address == erc20.address.lower()


def test_transfer_moves_balance(erc20):
    assert erc20.transfer(OWNER, ALICE, 250) is True
    assert erc20.balance_of(OWNER) == 750
    assert erc20.balance_of(ALICE.upper()) == 250


def test_transfer_exceeding_balance_fails(erc20):
    with pytest.raises(TransferFailedError, match="exceeds balance"):
        erc20.transfer(ALICE, OWNER, 1)
    assert erc20.balance_of(OWNER) == 1_000


def test_transfer_to_zero_address_fails(erc20):
    with pytest.raises(TransferFailedError, match="zero address"):
        erc20.transfer(OWNER, ZERO_ADDRESS, 1)


@pytest.mark.parametrize("amount", [-1, UINT256_MAX + 1, 1.5])
def test_invalid_amounts_rejected(erc20, amount):
    with pytest.raises(TransferFailedError):
        erc20.transfer(OWNER, ALICE, amount)


def test_transfer_from_uses_allowance(erc20):
    erc20.approve(OWNER, SPENDER, 300)

    assert erc20.transfer_from(SPENDER, OWNER, ALICE, 200) is True
    assert erc20.allowance(OWNER, SPENDER) == 100
    assert erc20.balance_of(ALICE) == 200


def test_transfer_from_without_allowance_fails(erc20):
    with pytest.raises(InsufficientAllowanceError) as exc_info:
        erc20.transfer_from(SPENDER, OWNER, ALICE, 1)
    assert exc_info.value.details["allowance"] == 0
    assert erc20.balance_of(OWNER) == 1_000


def test_transfer_from_exceeding_balance_keeps_allowance(erc20):
    erc20.approve(ALICE, SPENDER, 50)

    with pytest.raises(TransferFailedError):
        erc20.transfer_from(SPENDER, ALICE, OWNER, 50)
    assert erc20.allowance(ALICE, SPENDER) == 50


def test_unlimited_allowance_is_not_decremented(erc20):
    erc20.approve(OWNER, SPENDER, UINT256_MAX)
    erc20.transfer_from(SPENDER, OWNER, ALICE, 10)
    assert erc20.allowance(OWNER, SPENDER) == UINT256_MAX


def test_increase_and_decrease_allowance(erc20):
    erc20.increase_allowance(OWNER, SPENDER, 10)
    erc20.increase_allowance(OWNER, SPENDER, 5)
    assert erc20.allowance(OWNER, SPENDER) == 15

    erc20.decrease_allowance(OWNER, SPENDER, 15)
    assert erc20.allowance(OWNER, SPENDER) == 0

    with pytest.raises(InsufficientAllowanceError):
        erc20.decrease_allowance(OWNER, SPENDER, 1)


def test_approve_emits_event(erc20):
    erc20.approve(OWNER, SPENDER, 7)
    event = erc20.events[-1]
    assert event.event_type == "Approval"
    assert event.value == 7


def test_round_trip_serialization(erc20):
    erc20.transfer(OWNER, ALICE, 10)
    erc20.approve(ALICE, SPENDER, 3)

    restored = ERC20Token.from_dict(erc20.to_dict())

    assert restored.address == erc20.address
    assert restored.total_supply == 1_000
    assert restored.balance_of(ALICE) == 10
    assert restored.allowance(ALICE, SPENDER) == 3
