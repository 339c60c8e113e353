"""
Private key management.

Derives secp256k1 signing keys from BIP-39 mnemonics along the BIP-44 path
m/44'/coin_type'/account'/0/index and signs payloads with RFC 6979
deterministic ECDSA. Keys live only in memory and are never logged.

WARNING: No security audit has been performed on this module.
"""

import hashlib
from typing import Optional, Union

import structlog
from bip_utils import Bip32KeyError, Bip32KeyIndex, Bip32PathError, Bip32Secp256k1
from ecdsa import SECP256k1, SigningKey
from ecdsa.keys import BadDigestError
from ecdsa.util import sigencode_string_canonize
from mnemonic import Mnemonic

from terrakit.core.sign_doc import StdSignature
from terrakit.errors import InvalidMnemonic, SigningError, ValidationError
from terrakit.keys.public import PublicKey

logger = structlog.get_logger(__name__)

# Coin type used in most Terra derivations
LUNA_COIN_TYPE = 330

HARDENED_OFFSET = 0x80000000

_MNEMONIC = Mnemonic("english")


# ============================================================================
# Mnemonics
# ============================================================================

def normalize_mnemonic(words: str) -> str:
    """Collapse whitespace and validate the BIP-39 checksum."""
    phrase = " ".join(words.split())
    if not phrase or not _MNEMONIC.check(phrase):
        raise InvalidMnemonic("Mnemonic failed wordlist/checksum validation")
    return phrase


def mnemonic_to_seed(words: str, passphrase: str = "") -> bytes:
    """Derive the 64-byte BIP-39 seed for a validated mnemonic."""
    return Mnemonic.to_seed(normalize_mnemonic(words), passphrase=passphrase)


def generate_mnemonic(strength: int = 256) -> str:
    """Generate a fresh mnemonic from the OS entropy source (24 words by default)."""
    return _MNEMONIC.generate(strength=strength)


def derivation_path(coin_type: int, account: int, index: int) -> str:
    return f"m/44'/{coin_type}'/{account}'/0/{index}"


# ============================================================================
# BIP-32
# ============================================================================

class ExtendedKey:
    """
    A BIP-32 extended private key.

    Wraps a bip_utils secp256k1 node; derivation is delegated to it.
    """

    def __init__(self, node: Bip32Secp256k1):
        self._node = node

    @classmethod
    def from_seed(cls, seed: bytes) -> "ExtendedKey":
        """Create the root key from a BIP-39 seed."""
        try:
            return cls(Bip32Secp256k1.FromSeed(seed))
        except (Bip32KeyError, ValueError) as e:
            raise ValidationError(f"Seed produces an invalid master key: {e}") from e

    @property
    def private_key(self) -> bytes:
        return self._node.PrivateKey().Raw().ToBytes()

    @property
    def chain_code(self) -> bytes:
        return self._node.ChainCode().ToBytes()

    @property
    def depth(self) -> int:
        return self._node.Depth().ToInt()

    @property
    def index(self) -> int:
        return self._node.Index().ToInt()

    @property
    def parent_fingerprint(self) -> bytes:
        return self._node.ParentFingerPrint().ToBytes()

    @property
    def public_key(self) -> bytes:
        return self._node.PublicKey().RawCompressed().ToBytes()

    @property
    def fingerprint(self) -> bytes:
        return self._node.FingerPrint().ToBytes()

    @property
    def is_hardened(self) -> bool:
        return self.index >= HARDENED_OFFSET

    def derive_child(self, index: int, hardened: bool = False) -> "ExtendedKey":
        """
        Derive a child private key (BIP-32 CKDpriv).

        Args:
            index: Child index below 2^31
            hardened: Whether to derive the hardened child

        Returns:
            The child extended key
        """
        if not 0 <= index < HARDENED_OFFSET:
            raise ValidationError(f"Child index out of range: {index}")

        if hardened:
            index = Bip32KeyIndex.HardenIndex(index)
        try:
            return ExtendedKey(self._node.ChildKey(index))
        except Bip32KeyError as e:
            raise ValidationError(f"Index {index} yields an invalid child key") from e

    def derive_path(self, path: str) -> "ExtendedKey":
        """Derive along an absolute path such as m/44'/330'/0'/0/0."""
        if not path.strip().startswith("m"):
            raise ValidationError(f"Derivation path must start with 'm': {path!r}")
        try:
            return ExtendedKey(self._node.DerivePath(path.strip()))
        except (Bip32PathError, Bip32KeyError) as e:
            raise ValidationError(f"Invalid derivation path {path!r}: {e}") from e

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtendedKey):
            return NotImplemented
        return (
            self.private_key == other.private_key
            and self.chain_code == other.chain_code
            and self.depth == other.depth
            and self.index == other.index
            and self.parent_fingerprint == other.parent_fingerprint
        )

    def __hash__(self) -> int:
        return hash((self.chain_code, self.depth, self.index))

    def __repr__(self) -> str:
        return f"ExtendedKey(depth={self.depth}, index={self.index})"


# ============================================================================
# Private key
# ============================================================================

class PrivateKey:
    """
    A signing identity derived from a mnemonic.

    The root extended key is retained so further identities can be derived
    with derive_child() without re-parsing the mnemonic.
    """

    def __init__(
        self,
        root: ExtendedKey,
        account: int = 0,
        index: int = 0,
        coin_type: int = LUNA_COIN_TYPE,
        words: Optional[str] = None,
    ):
        self._root = root
        self._words = words
        self._account = account
        self._index = index
        self._coin_type = coin_type
        self._extended = root.derive_path(derivation_path(coin_type, account, index))
        self._signing_key = SigningKey.from_string(self._extended.private_key, curve=SECP256k1)
        self._public_key = PublicKey(self._signing_key.get_verifying_key().to_string("compressed"))

    @classmethod
    def generate(cls, passphrase: str = "", coin_type: int = LUNA_COIN_TYPE) -> "PrivateKey":
        """Generate a new key from a fresh 24-word mnemonic (account 0, index 0)."""
        return cls.from_words(generate_mnemonic(), passphrase, coin_type=coin_type)

    @classmethod
    def from_words(
        cls,
        words: str,
        passphrase: str = "",
        account: int = 0,
        index: int = 0,
        coin_type: int = LUNA_COIN_TYPE,
    ) -> "PrivateKey":
        """
        Recover a key from its mnemonic.

        Raises:
            InvalidMnemonic: If the words fail the checksum
        """
        phrase = normalize_mnemonic(words)
        root = ExtendedKey.from_seed(Mnemonic.to_seed(phrase, passphrase=passphrase))
        return cls(root, account=account, index=index, coin_type=coin_type, words=phrase)

    def derive_child(self, account: int, index: int) -> "PrivateKey":
        """Derive another identity from the same root."""
        return PrivateKey(
            self._root,
            account=account,
            index=index,
            coin_type=self._coin_type,
            words=self._words,
        )

    @property
    def account(self) -> int:
        return self._account

    @property
    def index(self) -> int:
        return self._index

    @property
    def coin_type(self) -> int:
        return self._coin_type

    @property
    def words(self) -> Optional[str]:
        """The mnemonic this key was derived from."""
        return self._words

    @property
    def extended_key(self) -> ExtendedKey:
        return self._extended

    def public_key(self) -> PublicKey:
        return self._public_key

    def sign_bytes(self, blob: Union[bytes, str]) -> bytes:
        """
        Sign SHA-256(blob) and return the 64-byte compact (r, s) signature.

        The nonce is RFC 6979 deterministic and s is normalized to the low
        half of the curve order.
        """
        data = blob.encode("utf-8") if isinstance(blob, str) else blob
        digest = hashlib.sha256(data).digest()
        try:
            return self._signing_key.sign_digest_deterministic(
                digest,
                hashfunc=hashlib.sha256,
                sigencode=sigencode_string_canonize,
            )
        except BadDigestError as e:
            raise SigningError(f"Cannot sign digest: {e}") from e

    def sign(self, blob: Union[bytes, str]) -> StdSignature:
        """Sign a payload and pair the signature with this key's public key."""
        signature = self.sign_bytes(blob)
        logger.debug("payload_signed", address=self._public_key.account())
        return StdSignature(signature=signature, pub_key=self._public_key.key)

    def __repr__(self) -> str:
        return (
            f"PrivateKey(account={self._account}, index={self._index}, "
            f"coin_type={self._coin_type}, address={self._public_key.account()})"
        )
