"""
Coin and fee types.

Amounts are Decimals end to end so values beyond 64-bit range, and gas
prices with fractional parts, never lose precision.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Tuple, Union

from terrakit.errors import ValidationError

_COIN_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)([a-zA-Z][a-zA-Z0-9/:._-]*)$")


@dataclass(frozen=True)
class Coin:
    """An amount of a single denomination."""

    denom: str
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except InvalidOperation:
                raise ValidationError(f"Invalid coin amount: {self.amount!r}")
        if not self.amount.is_finite() or self.amount < 0:
            raise ValidationError(f"Coin amount must be a finite value >= 0: {self.amount}")
        if not self.denom:
            raise ValidationError("Coin denom must not be empty")

    @classmethod
    def create(cls, denom: str, amount: Union[Decimal, int, str]) -> "Coin":
        return cls(denom=denom, amount=Decimal(str(amount)))

    @classmethod
    def parse(cls, value: str) -> "Coin":
        """
        Parse a coin string such as "100000uluna" or "0.15uusd".

        Raises:
            ValidationError: If the string is not <amount><denom>
        """
        match = _COIN_PATTERN.match(value.strip())
        if not match:
            raise ValidationError(f"Unable to parse coin: {value!r}")
        return cls(denom=match.group(2), amount=Decimal(match.group(1)))

    @classmethod
    def parse_coins(cls, value: str) -> List["Coin"]:
        """Parse a comma separated list, e.g. "1000uluna,20ukrw"."""
        return [cls.parse(part) for part in value.split(",") if part.strip()]

    @classmethod
    def from_json(cls, data: dict) -> "Coin":
        return cls(denom=data["denom"], amount=Decimal(str(data["amount"])))

    @property
    def amount_str(self) -> str:
        """Fixed-point rendering, never exponent notation."""
        return format(self.amount, "f")

    def to_json(self) -> dict:
        return {"amount": self.amount_str, "denom": self.denom}

    def __str__(self) -> str:
        return f"{self.amount_str}{self.denom}"


@dataclass(frozen=True)
class StdFee:
    """Fee attached to a sign document: coins plus a gas limit."""

    amount: Tuple[Coin, ...]
    gas: int

    def __post_init__(self):
        object.__setattr__(self, "amount", tuple(self.amount))
        if self.gas < 0:
            raise ValidationError(f"Gas limit must be >= 0: {self.gas}")

    @classmethod
    def create(cls, coins: Iterable[Coin], gas: int) -> "StdFee":
        return cls(amount=tuple(coins), gas=int(gas))

    @classmethod
    def create_single(cls, coin: Coin, gas: int) -> "StdFee":
        return cls(amount=(coin,), gas=int(gas))

    @classmethod
    def from_json(cls, data: dict) -> "StdFee":
        return cls(
            amount=tuple(Coin.from_json(c) for c in data.get("amount") or []),
            gas=int(data["gas"]),
        )

    def to_json(self) -> dict:
        return {
            "amount": [coin.to_json() for coin in self.amount],
            "gas": str(self.gas),
        }
