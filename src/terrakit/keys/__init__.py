"""
Key management.

Mnemonic handling, hierarchical-deterministic derivation, signing and the
chain's address encodings.
"""

from terrakit.keys.public import (
    AddressRole,
    PublicKey,
    decode_address,
    encode_address,
    is_valid_address,
)
from terrakit.keys.private import (
    LUNA_COIN_TYPE,
    ExtendedKey,
    PrivateKey,
    generate_mnemonic,
    mnemonic_to_seed,
)

__all__ = [
    "AddressRole",
    "PublicKey",
    "decode_address",
    "encode_address",
    "is_valid_address",
    "LUNA_COIN_TYPE",
    "ExtendedKey",
    "PrivateKey",
    "generate_mnemonic",
    "mnemonic_to_seed",
]
