"""
Test suite for the address codec.
"""

import pytest

from conftest import ISLAND_ACCOUNT, ISLAND_PUBKEY, WONDER_WORDS
from terrakit.errors import InvalidAddress, ValidationError
from terrakit.keys.private import PrivateKey
from terrakit.keys.public import (
    AMINO_SECP256K1_PREFIX,
    AddressRole,
    PublicKey,
    decode_address,
    encode_address,
    hash160,
    is_valid_address,
)


@pytest.fixture
def wonder_public_key() -> PublicKey:
    return PrivateKey.from_words(WONDER_WORDS).public_key()


class TestAddressRoles:
    """Tests for each address encoding."""

    def test_account(self, wonder_public_key):
        assert wonder_public_key.account() == "terra1jnzv225hwl3uxc5wtnlgr8mwy6nlt0vztv3qqm"

    def test_operator_public_key(self, wonder_public_key):
        assert wonder_public_key.operator_address_public_key() == (
            "terravaloperpub1addwnpepqt8ha594svjn3nvfk4ggfn5n8xd3sm3cz6ztxyugwcuqzsuuhhfq5y7accr"
        )

    def test_application_public_key(self, wonder_public_key):
        assert wonder_public_key.application_public_key() == (
            "terrapub1addwnpepqt8ha594svjn3nvfk4ggfn5n8xd3sm3cz6ztxyugwcuqzsuuhhfq5nwzrf9"
        )

    def test_operator_shares_account_payload(self, wonder_public_key):
        account_hrp, account_payload = decode_address(wonder_public_key.account())
        operator_hrp, operator_payload = decode_address(wonder_public_key.operator_address())

        assert account_hrp == "terra"
        assert operator_hrp == "terravaloper"
        assert operator_payload == account_payload == hash160(wonder_public_key.key)

    def test_pub_encodings_carry_amino_prefix(self, wonder_public_key):
        _, payload = decode_address(wonder_public_key.application_public_key())

        assert payload == AMINO_SECP256K1_PREFIX + wonder_public_key.key

    def test_single_parameterized_encoder(self, wonder_public_key):
        for role in AddressRole:
            assert encode_address(wonder_public_key.key, role) == wonder_public_key.address(role)

    def test_base_prefix_parameter(self, wonder_public_key):
        address = wonder_public_key.account(base_prefix="cosmos")
        hrp, payload = decode_address(address)

        assert hrp == "cosmos"
        assert payload == hash160(wonder_public_key.key)

    def test_role_prefixes(self):
        assert AddressRole.ACCOUNT.prefix() == "terra"
        assert AddressRole.OPERATOR.prefix() == "terravaloper"
        assert AddressRole.OPERATOR_PUBKEY.prefix() == "terravaloperpub"
        assert AddressRole.APPLICATION_PUBKEY.prefix() == "terrapub"


class TestPublicKey:
    """Tests for public key construction."""

    def test_from_base64(self):
        public_key = PublicKey.from_base64(ISLAND_PUBKEY)

        assert public_key.account() == ISLAND_ACCOUNT
        assert public_key.to_base64() == ISLAND_PUBKEY

    def test_from_bytes_rejects_uncompressed(self):
        with pytest.raises(ValidationError):
            PublicKey.from_bytes(b"\x04" + b"\x01" * 64)

    def test_from_bytes_rejects_short_key(self):
        with pytest.raises(ValidationError):
            PublicKey.from_bytes(b"\x02" * 20)


class TestDecodeAddress:
    """Tests for decoding and validation."""

    def test_decode_with_expected_prefix(self):
        hrp, payload = decode_address(ISLAND_ACCOUNT, expected_prefix="terra")

        assert hrp == "terra"
        assert len(payload) == 20

    def test_wrong_prefix(self):
        with pytest.raises(InvalidAddress, match="expected prefix"):
            decode_address(ISLAND_ACCOUNT, expected_prefix="terravaloper")

    def test_bad_checksum(self):
        corrupted = ISLAND_ACCOUNT[:-1] + ("q" if ISLAND_ACCOUNT[-1] != "q" else "p")

        with pytest.raises(InvalidAddress):
            decode_address(corrupted)

    def test_is_valid_address(self):
        assert is_valid_address(ISLAND_ACCOUNT)
        assert not is_valid_address("terra1notanaddress")
        assert not is_valid_address(ISLAND_ACCOUNT, expected_prefix="terrapub")
