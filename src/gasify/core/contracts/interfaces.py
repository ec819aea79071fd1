"""
Token ledger Protocol interface.

The vault depends on this capability instead of a concrete token class, so any
ledger exposing transfer/transfer-on-behalf/balance semantics can back it and
tests can substitute instrumented ledgers.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenLedger(Protocol):
    """
    Protocol for a fungible token ledger consumed by the vault.

    Implementations either return True or raise a TransferFailedError
    (InsufficientAllowanceError for allowance shortfalls). A False return is
    treated by the vault as a failed transfer.
    """

    @property
    def address(self) -> str:
        """Contract address of the token."""
        ...

    def balance_of(self, account: str) -> int:
        """Get the token balance of an account."""
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Move tokens owned by sender (msg.sender) to recipient."""
        ...

    def transfer_from(
        self, spender: str, from_addr: str, to_addr: str, amount: int
    ) -> bool:
        """Move tokens from from_addr to to_addr using spender's allowance."""
        ...
