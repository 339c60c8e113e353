"""
Test suite for the canonical sign document and the broadcast envelope.

The byte-level assertions here pin the exact serialization the chain
verifies signatures against.
"""

import base64
import json

import pytest

from conftest import ISLAND_ACCOUNT, ISLAND_PUBKEY, RECIPIENT
from terrakit.core.coin import Coin, StdFee
from terrakit.core.messages import MsgSend, MsgSwap
from terrakit.core.sign_doc import SignDoc, StdSignature, StdTx, canonical_json
from terrakit.errors import ValidationError

TRANSFER_CANONICAL = (
    '{"account_number":"43045","chain_id":"tequila-0004","fee":{"amount":'
    '[{"amount":"50000","denom":"uluna"}],"gas":"90000"},"memo":"PFC-terra-rust/0.1.5",'
    '"msgs":[{"type":"bank/MsgSend","value":{"amount":[{"amount":"100000","denom":"uluna"}],'
    '"from_address":"terra1n3g37dsdlv7ryqftlkef8mhgqj4ny7p8v78lg7",'
    '"to_address":"terra1usws7c2c6cs7nuc8vma9qzaky5pkgvm2uag6rh"}}],"sequence":"3"}'
)

TRANSFER_SIGNATURE = (
    "f1wYTzbSyAYqN2tGR0A4PGmfyNYBUExpuoU7UOiBDpNoRlChF/BMtE7h6pdgbpu/V7jNzitu1Eb0fO35dxVkWA=="
)

TRANSFER_BROADCAST = (
    '{"tx":{"msg":[{"type":"bank/MsgSend","value":{"amount":[{"amount":"100000","denom":"uluna"}],'
    '"from_address":"terra1n3g37dsdlv7ryqftlkef8mhgqj4ny7p8v78lg7",'
    '"to_address":"terra1usws7c2c6cs7nuc8vma9qzaky5pkgvm2uag6rh"}}],'
    '"fee":{"amount":[{"amount":"50000","denom":"uluna"}],"gas":"90000"},'
    '"signatures":[{"signature":"' + TRANSFER_SIGNATURE + '","pub_key":'
    '{"type":"tendermint/PubKeySecp256k1","value":"' + ISLAND_PUBKEY + '"}}],'
    '"memo":"PFC-terra-rust/0.1.5"},"mode":"sync"}'
)


@pytest.fixture
def transfer_doc() -> SignDoc:
    return SignDoc(
        chain_id="tequila-0004",
        account_number=43045,
        sequence=3,
        fee=StdFee.create_single(Coin.create("uluna", 50000), 90000),
        msgs=[MsgSend.create_single(ISLAND_ACCOUNT, RECIPIENT, Coin.create("uluna", 100000))],
        memo="PFC-terra-rust/0.1.5",
    )


class TestCanonicalSerialization:
    """Tests for the signing payload."""

    def test_transfer_bytes(self, transfer_doc):
        assert transfer_doc.to_bytes() == TRANSFER_CANONICAL.encode("utf-8")

    def test_transfer_signature(self, transfer_doc, island_key):
        signature = island_key.sign(transfer_doc.to_bytes())

        assert base64.b64encode(signature.signature).decode() == TRANSFER_SIGNATURE

    def test_round_trip(self):
        doc = SignDoc.from_json(TRANSFER_CANONICAL)

        assert doc.to_canonical() == TRANSFER_CANONICAL
        assert doc.account_number == 43045
        assert doc.sequence == 3

    def test_round_trip_from_bytes(self):
        assert SignDoc.from_json(TRANSFER_CANONICAL.encode()).to_bytes() == TRANSFER_CANONICAL.encode()

    def test_keys_sorted_at_every_level(self):
        assert canonical_json({"b": {"z": 1, "a": 2}, "a": [3, {"y": 0, "x": 0}]}) == (
            '{"a":[3,{"x":0,"y":0}],"b":{"a":2,"z":1}}'
        )

    def test_non_ascii_left_unescaped(self, transfer_doc):
        doc = SignDoc(
            chain_id=transfer_doc.chain_id,
            account_number=1,
            sequence=0,
            fee=transfer_doc.fee,
            msgs=transfer_doc.msgs,
            memo="테라 ☀",
        )

        assert '"memo":"테라 ☀"' in doc.to_canonical()

    def test_large_amounts_stay_exact(self):
        fee = StdFee.create_single(Coin.create("uluna", "123456789012345678901234567890"), 1)
        assert fee.to_json()["amount"][0]["amount"] == "123456789012345678901234567890"

    def test_message_order_preserved(self, transfer_doc):
        swap = MsgSwap(trader=ISLAND_ACCOUNT, offer_coin=Coin.create("ukrw", 10), ask_denom="uluna")
        doc = SignDoc(
            chain_id="tequila-0004",
            account_number=1,
            sequence=0,
            fee=transfer_doc.fee,
            msgs=[swap, transfer_doc.msgs[0]],
        )

        types = [m["type"] for m in json.loads(doc.to_canonical())["msgs"]]
        assert types == ["market/MsgSwap", "bank/MsgSend"]

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            '{"chain_id":"x"}',
            '{"account_number":"1","chain_id":"x","fee":{"amount":[],"gas":"1"},'
            '"memo":"","msgs":[{"type":"bank/Unknown","value":{}}],"sequence":"0"}',
        ],
    )
    def test_malformed_documents_rejected(self, payload):
        with pytest.raises(ValidationError):
            SignDoc.from_json(payload)


class TestStdTx:
    """Tests for signed transactions and the broadcast envelope."""

    def test_broadcast_envelope(self, transfer_doc, island_key):
        tx = StdTx(transfer_doc).with_signature(island_key.sign(transfer_doc.to_bytes()))

        assert tx.to_broadcast_json("sync") == TRANSFER_BROADCAST

    def test_with_signature_is_positional_and_immutable(self, transfer_doc):
        first = StdSignature(signature=b"\x01" * 64, pub_key=b"\x02" * 33)
        second = StdSignature(signature=b"\x03" * 64, pub_key=b"\x03" * 33)

        unsigned = StdTx(transfer_doc)
        once = unsigned.with_signature(first)
        twice = once.with_signature(second)

        assert unsigned.signatures == ()
        assert once.signatures == (first,)
        assert twice.signatures == (first, second)

    def test_signature_json_round_trip(self):
        signature = StdSignature(signature=b"\x07" * 64, pub_key=base64.b64decode(ISLAND_PUBKEY))
        assert StdSignature.from_json(signature.to_json()) == signature
