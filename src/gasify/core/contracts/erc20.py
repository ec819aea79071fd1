"""
ERC20 Token Ledger.

This module provides the fungible token the vault takes deposits in:
- Basic token operations (transfer, approve, transferFrom)
- Allowance adjustments (increaseAllowance/decreaseAllowance)
- Metadata (name, symbol, decimals)
- Events (Transfer, Approval)

The full supply is credited to the owner at construction. There is no mint or
burn API; supply policy lives outside this package.

Security features:
- 256-bit amount bounds
- Zero address checks
- Balance underflow prevention
- Allowance validation
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import InitVar, dataclass, field
from typing import Any

from ..vault_exceptions import InsufficientAllowanceError, TransferFailedError

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x" + "0" * 40
UINT256_MAX = 2**256 - 1


@dataclass
class TokenEvent:
    """Represents an ERC20 event."""

    event_type: str  # "Transfer" or "Approval"
    from_address: str
    to_address: str
    value: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ERC20Token:
    """
    ERC20 token ledger.

    All balances and allowances are stored in-memory and can be snapshotted
    with to_dict/from_dict.

    Security considerations:
    - Amounts bounded to uint256
    - Zero address checks on recipients and spenders
    - Allowance race condition mitigation (increaseAllowance/decreaseAllowance)
    """

    # Token metadata
    name: str
    symbol: str
    decimals: int = 18
    total_supply: int = 0

    # Contract address
    address: str = ""

    # Receives the initial supply
    owner: str = ""

    # State
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[str, dict[str, int]] = field(default_factory=dict)

    # Event log
    events: list[TokenEvent] = field(default_factory=list)

    initial_supply: InitVar[int] = 0

    def __post_init__(self, initial_supply: int) -> None:
        """Derive the address and credit the initial supply."""
        if not self.address:
            addr_input = f"{self.name}{self.symbol}{time.time()}".encode()
            addr_hash = hashlib.sha3_256(addr_input).digest()
            self.address = f"0x{addr_hash[-20:].hex()}"
        self.address = self._normalize(self.address)
        self.owner = self._normalize(self.owner)

        if initial_supply:
            self._validate_amount(initial_supply)
            self._validate_address(self.owner, "owner")
            self.total_supply += initial_supply
            self.balances[self.owner] = self.balances.get(self.owner, 0) + initial_supply
            self._emit_transfer(ZERO_ADDRESS, self.owner, initial_supply)

            logger.info(
                "ERC20 token created",
                extra={
                    "event": "erc20.created",
                    "token": self.symbol,
                    "address": self.address,
                    "owner": self.owner[:10],
                    "initial_supply": initial_supply,
                },
            )

    # ==================== View Functions ====================

    def balance_of(self, account: str) -> int:
        """
        Get the token balance of an account.

        Args:
            account: Address to check

        Returns:
            Token balance
        """
        return self.balances.get(self._normalize(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        """
        Get the allowance granted by owner to spender.

        Args:
            owner: Token owner address
            spender: Spender address

        Returns:
            Approved amount
        """
        owner_norm = self._normalize(owner)
        spender_norm = self._normalize(spender)
        return self.allowances.get(owner_norm, {}).get(spender_norm, 0)

    # ==================== State-Changing Functions ====================

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Transfer tokens from sender to recipient.

        Args:
            sender: Address sending tokens (msg.sender)
            recipient: Address receiving tokens
            amount: Amount to transfer

        Returns:
            True if successful

        Raises:
            TransferFailedError: If the balance is short or arguments are invalid
        """
        sender_norm = self._normalize(sender)
        recipient_norm = self._normalize(recipient)

        self._validate_address(recipient_norm, "recipient")
        self._validate_amount(amount)

        sender_balance = self.balances.get(sender_norm, 0)
        if sender_balance < amount:
            raise TransferFailedError(
                f"ERC20: transfer amount exceeds balance ({amount} > {sender_balance})",
                details={"from": sender_norm, "amount": amount, "balance": sender_balance},
            )

        self.balances[sender_norm] = sender_balance - amount
        self.balances[recipient_norm] = self.balances.get(recipient_norm, 0) + amount

        self._emit_transfer(sender_norm, recipient_norm, amount)

        logger.debug(
            "ERC20 transfer",
            extra={
                "event": "erc20.transfer",
                "token": self.symbol,
                "from": sender_norm[:10],
                "to": recipient_norm[:10],
                "amount": amount,
            }
        )

        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """
        Approve spender to spend tokens on behalf of owner.

        Args:
            owner: Token owner (msg.sender)
            spender: Address being approved
            amount: Amount to approve

        Returns:
            True if successful
        """
        owner_norm = self._normalize(owner)
        spender_norm = self._normalize(spender)

        self._validate_address(spender_norm, "spender")
        self._validate_amount(amount)

        self.allowances.setdefault(owner_norm, {})[spender_norm] = amount
        self._emit_approval(owner_norm, spender_norm, amount)

        return True

    def transfer_from(
        self, spender: str, from_addr: str, to_addr: str, amount: int
    ) -> bool:
        """
        Transfer tokens using an allowance.

        Args:
            spender: Address executing transfer (msg.sender)
            from_addr: Token owner
            to_addr: Recipient
            amount: Amount to transfer

        Returns:
            True if successful

        Raises:
            InsufficientAllowanceError: If the allowance does not cover amount
            TransferFailedError: If the owner's balance is short
        """
        spender_norm = self._normalize(spender)
        from_norm = self._normalize(from_addr)
        to_norm = self._normalize(to_addr)

        self._validate_address(to_norm, "recipient")
        self._validate_amount(amount)

        current_allowance = self.allowance(from_norm, spender_norm)
        if current_allowance < amount:
            raise InsufficientAllowanceError(
                f"ERC20: insufficient allowance ({current_allowance} < {amount})",
                details={
                    "owner": from_norm,
                    "spender": spender_norm,
                    "allowance": current_allowance,
                    "amount": amount,
                },
            )

        from_balance = self.balances.get(from_norm, 0)
        if from_balance < amount:
            raise TransferFailedError(
                f"ERC20: transfer amount exceeds balance ({amount} > {from_balance})",
                details={"from": from_norm, "amount": amount, "balance": from_balance},
            )

        # Unlimited approvals are never decremented
        if current_allowance != UINT256_MAX:
            self.allowances[from_norm][spender_norm] = current_allowance - amount

        self.balances[from_norm] = from_balance - amount
        self.balances[to_norm] = self.balances.get(to_norm, 0) + amount

        self._emit_transfer(from_norm, to_norm, amount)

        return True

    def increase_allowance(self, owner: str, spender: str, added_value: int) -> bool:
        """Increase spender's allowance (safer than approve for increments)."""
        self._validate_amount(added_value)
        new_allowance = min(self.allowance(owner, spender) + added_value, UINT256_MAX)
        return self.approve(owner, spender, new_allowance)

    def decrease_allowance(self, owner: str, spender: str, subtracted_value: int) -> bool:
        """
        Decrease spender's allowance (safer than approve for decrements).

        Raises:
            InsufficientAllowanceError: If decrease exceeds current allowance
        """
        self._validate_amount(subtracted_value)
        current = self.allowance(owner, spender)
        if subtracted_value > current:
            raise InsufficientAllowanceError("ERC20: decreased allowance below zero")

        return self.approve(owner, spender, current - subtracted_value)

    # ==================== Helpers ====================

    @staticmethod
    def _normalize(address: str) -> str:
        """Normalize address to lowercase."""
        return (address or "").lower()

    def _validate_address(self, address: str, field_name: str) -> None:
        """Validate address is not zero."""
        if address == ZERO_ADDRESS or not address:
            raise TransferFailedError(f"ERC20: {field_name} is zero address")

    def _validate_amount(self, amount: int) -> None:
        """Validate amount is a uint256."""
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TransferFailedError(f"ERC20: amount must be an integer, got {amount!r}")
        if amount < 0:
            raise TransferFailedError("ERC20: amount cannot be negative")
        if amount > UINT256_MAX:
            raise TransferFailedError("ERC20: amount exceeds uint256")

    def _emit_transfer(self, from_addr: str, to_addr: str, amount: int) -> None:
        self.events.append(
            TokenEvent(
                event_type="Transfer",
                from_address=from_addr,
                to_address=to_addr,
                value=amount,
            )
        )

    def _emit_approval(self, owner: str, spender: str, amount: int) -> None:
        self.events.append(
            TokenEvent(
                event_type="Approval",
                from_address=owner,
                to_address=spender,
                value=amount,
            )
        )

    # ==================== Serialization ====================

    def to_dict(self) -> dict[str, Any]:
        """Serialize token state to dictionary."""
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "total_supply": self.total_supply,
            "address": self.address,
            "owner": self.owner,
            "balances": dict(self.balances),
            "allowances": {k: dict(v) for k, v in self.allowances.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ERC20Token":
        """Deserialize token state from dictionary."""
        token = cls(
            name=data["name"],
            symbol=data["symbol"],
            decimals=data.get("decimals", 18),
            total_supply=data.get("total_supply", 0),
            address=data.get("address", ""),
            owner=data.get("owner", ""),
        )
        token.balances = dict(data.get("balances", {}))
        token.allowances = {
            k: dict(v) for k, v in data.get("allowances", {}).items()
        }
        return token
