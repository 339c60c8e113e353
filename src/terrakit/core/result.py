"""
Records returned by the LCD: accounts and transaction results.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from terrakit.errors import AttributeNotFound


@dataclass(frozen=True)
class AuthAccount:
    """The signer's on-chain state needed to build a sign document."""

    address: str
    account_number: int
    sequence: int = 0
    public_key: Optional[Any] = None

    @classmethod
    def from_lcd(cls, data: dict) -> "AuthAccount":
        """Parse a GET /auth/accounts/{address} response."""
        value = data["result"]["value"]
        # vesting accounts nest the base account
        if "address" not in value and "BaseVestingAccount" in value:
            value = value["BaseVestingAccount"]["BaseAccount"]

        return cls(
            address=value["address"],
            account_number=int(value.get("account_number") or 0),
            sequence=int(value.get("sequence") or 0),
            public_key=value.get("public_key"),
        )


@dataclass(frozen=True)
class TxEvent:
    """An event emitted while executing a message."""

    type: str
    attributes: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def from_json(cls, data: dict) -> "TxEvent":
        return cls(
            type=data.get("type", ""),
            attributes=tuple(
                (attr.get("key", ""), attr.get("value", ""))
                for attr in data.get("attributes") or []
            ),
        )


@dataclass(frozen=True)
class TxLog:
    """Log of a single message within a transaction."""

    msg_index: int
    log: str = ""
    events: Tuple[TxEvent, ...] = ()

    @classmethod
    def from_json(cls, data: dict) -> "TxLog":
        return cls(
            msg_index=int(data.get("msg_index") or 0),
            log=data.get("log") or "",
            events=tuple(TxEvent.from_json(e) for e in data.get("events") or []),
        )


@dataclass(frozen=True)
class TxResult:
    """
    A broadcast or fetched transaction.

    Attributes:
        txhash: Transaction hash
        height: Block height (0 until included)
        code: Execution code as reported; None when the response has none
        codespace: Module reporting the code
        raw_log: Raw log from the chain
        logs: Per-message logs with their events
    """

    txhash: str
    height: int = 0
    code: Optional[int] = None
    codespace: Optional[str] = None
    raw_log: str = ""
    logs: Tuple[TxLog, ...] = field(default_factory=tuple)

    @classmethod
    def from_lcd(cls, data: dict) -> "TxResult":
        """Parse a broadcast response, a /txs/{hash} record or a v1 tx_response."""
        record = data.get("tx_response", data)
        code = record.get("code")
        return cls(
            txhash=record.get("txhash", ""),
            height=int(record.get("height") or 0),
            code=int(code) if code is not None else None,
            codespace=record.get("codespace") or None,
            raw_log=record.get("raw_log") or "",
            logs=tuple(TxLog.from_json(log) for log in record.get("logs") or []),
        )

    @property
    def is_success(self) -> bool:
        return self.code is None

    def get_attribute_from_logs(self, event_type: str, attribute_key: str) -> List[Tuple[int, str]]:
        """
        Find every (msg_index, value) for an event attribute, in log order.

        Args:
            event_type: Event type, e.g. "store_code"
            attribute_key: Attribute key, e.g. "code_id"
        """
        matches = []
        for log in self.logs:
            for event in log.events:
                if event.type != event_type:
                    continue
                for key, value in event.attributes:
                    if key == attribute_key:
                        matches.append((log.msg_index, value))
        return matches

    def attribute(self, event_type: str, attribute_key: str) -> str:
        """
        Return the first matching attribute value.

        Raises:
            AttributeNotFound: If the pair is absent from the logs
        """
        matches = self.get_attribute_from_logs(event_type, attribute_key)
        if not matches:
            raise AttributeNotFound(event_type, attribute_key, self.txhash)
        return matches[0][1]
