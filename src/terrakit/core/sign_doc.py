"""
Sign documents and signed transactions.

The canonical serialization defined here is what actually gets signed: keys
sorted at every nesting level, no insignificant whitespace, numbers rendered
as quoted decimal strings and arrays kept in caller order. A single extra
space or reordered key yields a signature the chain rejects.
"""

import base64
import json
from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

from terrakit.core.coin import StdFee
from terrakit.core.messages import Message, message_from_json
from terrakit.errors import ValidationError

PUBKEY_TYPE = "tendermint/PubKeySecp256k1"


def canonical_json(value: Any) -> str:
    """Serialize with sorted keys and no whitespace."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class StdSignature:
    """A compact secp256k1 signature paired with the signer's public key."""

    signature: bytes
    pub_key: bytes

    @classmethod
    def from_json(cls, data: dict) -> "StdSignature":
        return cls(
            signature=base64.b64decode(data["signature"]),
            pub_key=base64.b64decode(data["pub_key"]["value"]),
        )

    def to_json(self) -> dict:
        return {
            "signature": base64.b64encode(self.signature).decode("ascii"),
            "pub_key": {
                "type": PUBKEY_TYPE,
                "value": base64.b64encode(self.pub_key).decode("ascii"),
            },
        }


@dataclass(frozen=True)
class SignDoc:
    """
    The document whose canonical bytes are signed.

    Attributes:
        chain_id: Chain the transaction is valid for
        account_number: Signer's on-chain account number
        sequence: Signer's current sequence (replay counter)
        fee: Fee coins and gas limit
        msgs: Messages, in execution order
        memo: Free-form memo
    """

    chain_id: str
    account_number: int
    sequence: int
    fee: StdFee
    msgs: Tuple[Message, ...]
    memo: str = ""

    def __post_init__(self):
        object.__setattr__(self, "msgs", tuple(self.msgs))

    def to_json(self) -> dict:
        return {
            "account_number": str(self.account_number),
            "chain_id": self.chain_id,
            "fee": self.fee.to_json(),
            "memo": self.memo,
            "msgs": [msg.to_json() for msg in self.msgs],
            "sequence": str(self.sequence),
        }

    def to_canonical(self) -> str:
        return canonical_json(self.to_json())

    def to_bytes(self) -> bytes:
        """The signing payload."""
        return self.to_canonical().encode("utf-8")

    @classmethod
    def from_json(cls, data: Union[str, bytes, dict]) -> "SignDoc":
        """
        Parse a canonical sign document.

        Raises:
            ValidationError: If a field is missing or malformed
        """
        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Sign document is not valid JSON: {e}") from e

        try:
            return cls(
                chain_id=data["chain_id"],
                account_number=int(data["account_number"]),
                sequence=int(data["sequence"]),
                fee=StdFee.from_json(data["fee"]),
                msgs=tuple(message_from_json(m) for m in data["msgs"]),
                memo=data.get("memo", ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed sign document: {e}") from e


@dataclass(frozen=True)
class StdTx:
    """A sign document together with its positional signatures."""

    sign_doc: SignDoc
    signatures: Tuple[StdSignature, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "signatures", tuple(self.signatures))

    def with_signature(self, signature: StdSignature) -> "StdTx":
        """Return a copy with one more signature appended."""
        return StdTx(self.sign_doc, self.signatures + (signature,))

    def with_signatures(self, signatures: Iterable[StdSignature]) -> "StdTx":
        return StdTx(self.sign_doc, self.signatures + tuple(signatures))

    def to_broadcast(self, mode: str) -> dict:
        """The POST /txs body for the given broadcast mode."""
        return {
            "tx": {
                "msg": [msg.to_json() for msg in self.sign_doc.msgs],
                "fee": self.sign_doc.fee.to_json(),
                "signatures": [sig.to_json() for sig in self.signatures],
                "memo": self.sign_doc.memo,
            },
            "mode": mode,
        }

    def to_broadcast_json(self, mode: str) -> str:
        return json.dumps(self.to_broadcast(mode), separators=(",", ":"), ensure_ascii=False)
