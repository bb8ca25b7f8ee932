"""Addresses, coin amounts and transactions."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass

ADDRESS_SIZE = 20
UE_DENOM = "ue"

_U64_MASK = (1 << 64) - 1
_HEX_RE = re.compile(r"[0-9a-fA-F]*")
_DIGITS_RE = re.compile(r"[0-9]+")


def _u64(value: int) -> int:
    """Wrap an integer to the unsigned 64-bit range."""
    return value & _U64_MASK


@dataclass(frozen=True)
class Address:
    """A 20-byte account address."""

    data: bytes = bytes(ADDRESS_SIZE)

    def __post_init__(self) -> None:
        if len(self.data) != ADDRESS_SIZE:
            raise ValueError(
                f"invalid address length: expected {ADDRESS_SIZE}, got {len(self.data)}"
            )

    def __str__(self) -> str:
        return "0x" + self.data.hex()

    def to_bytes(self) -> bytes:
        """Return the raw address bytes."""
        return bytes(self.data)

    def is_zero(self) -> bool:
        """Return True if every byte of the address is zero."""
        return not any(self.data)


def new_address(hex_str: str) -> Address:
    """Build an address from a hex string, with or without a leading ``0x``."""
    digits = hex_str.removeprefix("0x")
    if _HEX_RE.fullmatch(digits) is None or len(digits) % 2:
        raise ValueError(f"invalid hex string: {hex_str!r}")
    raw = bytes.fromhex(digits)
    if len(raw) != ADDRESS_SIZE:
        raise ValueError(
            f"invalid address length: expected {ADDRESS_SIZE}, got {len(raw)}"
        )
    return Address(raw)


@dataclass(frozen=True)
class CoinAmount:
    """An amount of coins in a single denomination."""

    amount: int
    denom: str

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def add(self, other: CoinAmount) -> CoinAmount:
        """Sum two amounts of the same denomination."""
        if self.denom != other.denom:
            raise ValueError(
                f"cannot add different denominations: {self.denom} and {other.denom}"
            )
        return CoinAmount(_u64(self.amount + other.amount), self.denom)

    def sub(self, other: CoinAmount) -> CoinAmount:
        """Subtract an amount of the same denomination, refusing to go negative."""
        if self.denom != other.denom:
            raise ValueError(
                f"cannot subtract different denominations: {self.denom} and {other.denom}"
            )
        if self.amount < other.amount:
            raise ValueError(f"insufficient balance: {self} < {other}")
        return CoinAmount(self.amount - other.amount, self.denom)

    def mul(self, factor: int) -> CoinAmount:
        """Multiply the amount by a factor."""
        return CoinAmount(_u64(self.amount * factor), self.denom)

    def div(self, factor: int) -> CoinAmount:
        """Divide the amount by a factor; dividing by zero gives zero."""
        if factor == 0:
            return CoinAmount(0, self.denom)
        return CoinAmount(self.amount // factor, self.denom)

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0


def ue_coins(amount: int) -> CoinAmount:
    """Return an amount in the native ``ue`` denomination."""
    return CoinAmount(amount, UE_DENOM)


def parse_coin_amount(s: str) -> CoinAmount:
    """Parse text such as ``100ue`` into a coin amount."""
    last_digit = next(
        (i for i in range(len(s) - 1, -1, -1) if "0" <= s[i] <= "9"), None
    )
    if last_digit is None:
        raise ValueError(f"invalid coin amount format: {s}")
    amount_str, denom = s[: last_digit + 1], s[last_digit + 1 :]
    if _DIGITS_RE.fullmatch(amount_str) is None:
        raise ValueError(f"invalid amount: {amount_str!r} is not a number")
    amount = int(amount_str)
    if amount > _U64_MASK:
        raise ValueError(f"invalid amount: {amount_str!r} is out of range")
    return CoinAmount(amount, denom)


@dataclass
class Transaction:
    """A transfer of coins between two addresses."""

    sender: Address
    recipient: Address
    amount: CoinAmount
    gas: int
    gas_price: int
    data: bytes = b""
    nonce: int = 0
    hash: str = ""
    signature: bytes = b""
    timestamp: int = 0

    def calculate_hash(self) -> str:
        """Return the SHA-256 hash of the transaction's contents as ``0x`` hex."""
        text = (
            f"{self.sender}{self.recipient}{self.amount}"
            f"{self.gas}{self.gas_price}{self.nonce}{self.timestamp}"
        )
        if self.data:
            text += self.data.hex()
        return "0x" + hashlib.sha256(text.encode()).hexdigest()

    def validate(self) -> None:
        """Raise ValueError if the transaction is malformed."""
        if self.sender.is_zero():
            raise ValueError("from address cannot be zero")
        if self.recipient.is_zero():
            raise ValueError("to address cannot be zero")
        if self.amount.is_zero():
            raise ValueError("amount cannot be zero")
        if self.gas == 0:
            raise ValueError("gas cannot be zero")
        if self.gas_price == 0:
            raise ValueError("gas price cannot be zero")

    def gas_cost(self) -> int:
        """Return gas multiplied by gas price."""
        return _u64(self.gas * self.gas_price)