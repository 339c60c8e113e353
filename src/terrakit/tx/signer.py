"""
Transaction Signer - binds a key to sign documents.

Loads a key from a mnemonic and signs the canonical bytes of sign documents.
"""

from typing import Optional

import structlog

from terrakit.config import TerraConfig, get_config
from terrakit.core.sign_doc import SignDoc, StdTx
from terrakit.errors import ConfigurationError, SigningError
from terrakit.keys.private import PrivateKey

logger = structlog.get_logger(__name__)


class TransactionSigner:
    """
    Handles transaction signing with a single key.

    Keys are held in memory only; they are never written anywhere.
    """

    def __init__(self, config: Optional[TerraConfig] = None, key: Optional[PrivateKey] = None):
        """
        Initialize the transaction signer.

        Args:
            config: terrakit configuration
            key: Already derived key, if any
        """
        self.config = config or get_config()
        self._key = key

    def load_from_phrase(
        self,
        phrase: str,
        passphrase: str = "",
        account: int = 0,
        index: int = 0,
    ) -> None:
        """
        Derive the signing key from a mnemonic.

        Raises:
            InvalidMnemonic: If the phrase fails the checksum
        """
        self._key = PrivateKey.from_words(
            phrase,
            passphrase,
            account=account,
            index=index,
            coin_type=self.config.coin_type,
        )
        logger.info("signing_key_loaded", address=self.address, account=account, index=index)

    def load_from_config(self) -> None:
        """Load signing key from configuration."""
        if self.config.phrase is None:
            raise ConfigurationError("No mnemonic configured")

        self.load_from_phrase(
            self.config.phrase.get_secret_value(),
            self.config.seed_passphrase.get_secret_value(),
            account=self.config.account,
            index=self.config.index,
        )

    @property
    def key(self) -> Optional[PrivateKey]:
        return self._key

    @property
    def address(self) -> Optional[str]:
        """Account address of the loaded key."""
        return self._key.public_key().account() if self._key else None

    @property
    def is_loaded(self) -> bool:
        """Check if a signing key is loaded."""
        return self._key is not None

    def sign_doc(self, sign_doc: SignDoc) -> StdTx:
        """
        Sign a document.

        Args:
            sign_doc: The document to sign

        Returns:
            Transaction carrying exactly one signature
        """
        return self.add_signature_to_transaction(StdTx(sign_doc))

    def add_signature_to_transaction(self, tx: StdTx) -> StdTx:
        """
        Append this key's signature to a transaction.

        Signatures are positional, so the new one goes last.
        """
        if not self._key:
            raise SigningError("No signing key loaded")

        signature = self._key.sign(tx.sign_doc.to_bytes())
        logger.debug(
            "transaction_signed",
            address=self.address,
            sequence=tx.sign_doc.sequence,
            signatures=len(tx.signatures) + 1,
        )
        return tx.with_signature(signature)
