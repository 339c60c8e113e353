"""
Transaction messages.

A closed set of amino message variants. Each one renders itself as the
{"type": ..., "value": ...} fragment that goes into the sign document, and
can be parsed back from that fragment through message_from_json().
"""

import base64
import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple, Type, Union

from terrakit.core.coin import Coin
from terrakit.errors import ValidationError


def _coins(coins: Iterable[Coin]) -> list:
    return [coin.to_json() for coin in coins]


def _parse_coins(data: Optional[list]) -> Tuple[Coin, ...]:
    return tuple(Coin.from_json(c) for c in data or [])


@dataclass(frozen=True)
class MsgSend:
    """bank/MsgSend: move coins between accounts."""

    TYPE: ClassVar[str] = "bank/MsgSend"

    from_address: str
    to_address: str
    amount: Tuple[Coin, ...]

    @classmethod
    def create_single(cls, from_address: str, to_address: str, coin: Coin) -> "MsgSend":
        return cls(from_address=from_address, to_address=to_address, amount=(coin,))

    @classmethod
    def from_value(cls, value: dict) -> "MsgSend":
        return cls(
            from_address=value["from_address"],
            to_address=value["to_address"],
            amount=_parse_coins(value.get("amount")),
        )

    def to_json(self) -> dict:
        return {
            "type": self.TYPE,
            "value": {
                "amount": _coins(self.amount),
                "from_address": self.from_address,
                "to_address": self.to_address,
            },
        }


@dataclass(frozen=True)
class MsgSwap:
    """market/MsgSwap: swap a coin into another denomination."""

    TYPE: ClassVar[str] = "market/MsgSwap"

    trader: str
    offer_coin: Coin
    ask_denom: str

    @classmethod
    def from_value(cls, value: dict) -> "MsgSwap":
        return cls(
            trader=value["trader"],
            offer_coin=Coin.from_json(value["offer_coin"]),
            ask_denom=value["ask_denom"],
        )

    def to_json(self) -> dict:
        return {
            "type": self.TYPE,
            "value": {
                "ask_denom": self.ask_denom,
                "offer_coin": self.offer_coin.to_json(),
                "trader": self.trader,
            },
        }


@dataclass(frozen=True)
class MsgStoreCode:
    """wasm/MsgStoreCode: upload contract byte code."""

    TYPE: ClassVar[str] = "wasm/MsgStoreCode"

    sender: str
    wasm_byte_code: bytes = field(repr=False)

    @classmethod
    def from_value(cls, value: dict) -> "MsgStoreCode":
        return cls(sender=value["sender"], wasm_byte_code=base64.b64decode(value["wasm_byte_code"]))

    def to_json(self) -> dict:
        return {
            "type": self.TYPE,
            "value": {
                "sender": self.sender,
                "wasm_byte_code": base64.b64encode(self.wasm_byte_code).decode("ascii"),
            },
        }


@dataclass(frozen=True)
class MsgInstantiateContract:
    """wasm/MsgInstantiateContract: create a contract from stored code."""

    TYPE: ClassVar[str] = "wasm/MsgInstantiateContract"

    sender: str
    code_id: int
    init_msg: Any
    init_coins: Tuple[Coin, ...] = ()
    admin: Optional[str] = None

    @classmethod
    def from_value(cls, value: dict) -> "MsgInstantiateContract":
        return cls(
            sender=value["sender"],
            code_id=int(value["code_id"]),
            init_msg=value["init_msg"],
            init_coins=_parse_coins(value.get("init_coins")),
            admin=value.get("admin") or None,
        )

    def to_json(self) -> dict:
        return {
            "type": self.TYPE,
            "value": {
                "admin": self.admin or "",
                "code_id": str(self.code_id),
                "init_coins": _coins(self.init_coins),
                "init_msg": self.init_msg,
                "sender": self.sender,
            },
        }


@dataclass(frozen=True)
class MsgExecuteContract:
    """wasm/MsgExecuteContract: call a contract's execute entry point."""

    TYPE: ClassVar[str] = "wasm/MsgExecuteContract"

    sender: str
    contract: str
    execute_msg: Any
    coins: Tuple[Coin, ...] = ()

    @classmethod
    def create_from_json(
        cls,
        sender: str,
        contract: str,
        execute_msg: str,
        coins: Iterable[Coin] = (),
    ) -> "MsgExecuteContract":
        """Build from a JSON string, substituting ##SENDER## / ##CONTRACT##."""
        payload = substitute_placeholders(execute_msg, SENDER=sender, CONTRACT=contract)
        return cls(sender=sender, contract=contract, execute_msg=parse_json_payload(payload), coins=tuple(coins))

    @classmethod
    def from_value(cls, value: dict) -> "MsgExecuteContract":
        return cls(
            sender=value["sender"],
            contract=value["contract"],
            execute_msg=value["execute_msg"],
            coins=_parse_coins(value.get("coins")),
        )

    def to_json(self) -> dict:
        return {
            "type": self.TYPE,
            "value": {
                "coins": _coins(self.coins),
                "contract": self.contract,
                "execute_msg": self.execute_msg,
                "sender": self.sender,
            },
        }


@dataclass(frozen=True)
class MsgMigrateContract:
    """wasm/MsgMigrateContract: move a contract to new code."""

    TYPE: ClassVar[str] = "wasm/MsgMigrateContract"

    admin: str
    contract: str
    new_code_id: int
    migrate_msg: Any = None

    @classmethod
    def from_value(cls, value: dict) -> "MsgMigrateContract":
        return cls(
            admin=value["admin"],
            contract=value["contract"],
            new_code_id=int(value["new_code_id"]),
            migrate_msg=value.get("migrate_msg"),
        )

    def to_json(self) -> dict:
        return {
            "type": self.TYPE,
            "value": {
                "admin": self.admin,
                "contract": self.contract,
                "migrate_msg": self.migrate_msg if self.migrate_msg is not None else {},
                "new_code_id": str(self.new_code_id),
            },
        }


Message = Union[
    MsgSend,
    MsgSwap,
    MsgStoreCode,
    MsgInstantiateContract,
    MsgExecuteContract,
    MsgMigrateContract,
]

MESSAGE_TYPES: Dict[str, Type] = {
    cls.TYPE: cls
    for cls in (
        MsgSend,
        MsgSwap,
        MsgStoreCode,
        MsgInstantiateContract,
        MsgExecuteContract,
        MsgMigrateContract,
    )
}


def message_from_json(data: dict) -> Message:
    """
    Parse a {"type", "value"} fragment back into its message variant.

    Raises:
        ValidationError: For unknown message types or malformed values
    """
    msg_type = data.get("type")
    cls = MESSAGE_TYPES.get(msg_type)
    if cls is None:
        raise ValidationError(f"Unknown message type: {msg_type!r}")
    try:
        return cls.from_value(data["value"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Malformed {msg_type} message: {e}") from e


# ============================================================================
# JSON payload helpers
# ============================================================================

def substitute_placeholders(template: str, **values: Optional[Union[str, int]]) -> str:
    """
    Replace ##NAME## placeholders in a JSON template.

    Recognised names are SENDER, ADMIN, CODE_ID, NEW_CODE_ID and CONTRACT;
    placeholders whose value is None are left untouched.
    """
    for name, value in values.items():
        if value is not None:
            template = template.replace(f"##{name}##", str(value))
    return template


def parse_json_payload(payload: str) -> Any:
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON payload: {e}") from e
