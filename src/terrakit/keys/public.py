"""
Public keys and the chain's bech32 address encodings.

Every encoding is produced by one function, encode_address, keyed by an
AddressRole. Two payload recipes exist: the RIPEMD160(SHA256(pubkey)) digest
used by account and operator addresses, and the amino type-prefixed raw key
used by the "pub" encodings.
"""

import base64
import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import bech32
from Crypto.Hash import RIPEMD160

from terrakit.core.sign_doc import PUBKEY_TYPE
from terrakit.errors import InvalidAddress, ValidationError

DEFAULT_PREFIX = "terra"

# amino registration prefix of tendermint/PubKeySecp256k1
AMINO_SECP256K1_PREFIX = bytes.fromhex("eb5ae98721")


class AddressRole(Enum):
    """Address roles: (suffix appended to the base prefix, amino payload?)."""
    ACCOUNT = ("", False)
    OPERATOR = ("valoper", False)
    OPERATOR_PUBKEY = ("valoperpub", True)
    APPLICATION_PUBKEY = ("pub", True)

    def __init__(self, suffix: str, amino: bool):
        self.suffix = suffix
        self.amino = amino

    def prefix(self, base_prefix: str = DEFAULT_PREFIX) -> str:
        return base_prefix + self.suffix


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def ripemd160(data: bytes) -> bytes:
    return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))."""
    return ripemd160(sha256(data))


def encode_address(
    public_key: bytes,
    role: AddressRole = AddressRole.ACCOUNT,
    base_prefix: str = DEFAULT_PREFIX,
) -> str:
    """
    Encode a compressed secp256k1 public key as a bech32 address.

    Args:
        public_key: 33-byte compressed public key
        role: Which address encoding to produce
        base_prefix: Chain prefix the role suffix is appended to

    Returns:
        Bech32 address string
    """
    if role.amino:
        payload = AMINO_SECP256K1_PREFIX + public_key
    else:
        payload = hash160(public_key)

    words = bech32.convertbits(payload, 8, 5)
    return bech32.bech32_encode(role.prefix(base_prefix), words)


def decode_address(address: str, expected_prefix: Optional[str] = None) -> Tuple[str, bytes]:
    """
    Decode a bech32 address into (prefix, payload).

    Raises:
        InvalidAddress: On a bad checksum, bad padding or unexpected prefix
    """
    hrp, words = bech32.bech32_decode(address)
    if hrp is None or words is None:
        raise InvalidAddress(address, "bad bech32 checksum")

    payload = bech32.convertbits(words, 5, 8, False)
    if payload is None:
        raise InvalidAddress(address, "bad bech32 padding")

    if expected_prefix is not None and hrp != expected_prefix:
        raise InvalidAddress(address, f"expected prefix {expected_prefix!r}, got {hrp!r}")

    return hrp, bytes(payload)


def is_valid_address(address: str, expected_prefix: Optional[str] = DEFAULT_PREFIX) -> bool:
    try:
        decode_address(address, expected_prefix)
    except InvalidAddress:
        return False
    return True


@dataclass(frozen=True)
class PublicKey:
    """A compressed secp256k1 public key."""

    key: bytes

    def __post_init__(self):
        if len(self.key) != 33 or self.key[0] not in (2, 3):
            raise ValidationError("Public key must be a 33-byte compressed secp256k1 point")

    @classmethod
    def from_bytes(cls, value: bytes) -> "PublicKey":
        return cls(bytes(value))

    @classmethod
    def from_base64(cls, value: str) -> "PublicKey":
        return cls(base64.b64decode(value))

    def to_base64(self) -> str:
        return base64.b64encode(self.key).decode("ascii")

    def to_amino(self) -> dict:
        """The {"type", "value"} form carried by signatures and accounts."""
        return {"type": PUBKEY_TYPE, "value": self.to_base64()}

    def address(self, role: AddressRole, base_prefix: str = DEFAULT_PREFIX) -> str:
        return encode_address(self.key, role, base_prefix)

    def account(self, base_prefix: str = DEFAULT_PREFIX) -> str:
        """Account address, e.g. terra1..."""
        return self.address(AddressRole.ACCOUNT, base_prefix)

    def operator_address(self, base_prefix: str = DEFAULT_PREFIX) -> str:
        """Validator operator address, e.g. terravaloper1..."""
        return self.address(AddressRole.OPERATOR, base_prefix)

    def operator_address_public_key(self, base_prefix: str = DEFAULT_PREFIX) -> str:
        """Validator operator public key, e.g. terravaloperpub1..."""
        return self.address(AddressRole.OPERATOR_PUBKEY, base_prefix)

    def application_public_key(self, base_prefix: str = DEFAULT_PREFIX) -> str:
        """Application public key, e.g. terrapub1..."""
        return self.address(AddressRole.APPLICATION_PUBKEY, base_prefix)
