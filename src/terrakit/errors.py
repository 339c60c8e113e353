"""
Error taxonomy for terrakit.

Every failure raised by the key manager, the fee calculator, the LCD adapter
and the submitter derives from TerraError. Only NotYetIndexed is ever
absorbed, and only by the confirmation poller up to its retry bound.
"""

from typing import Optional


class TerraError(Exception):
    """Base class for all terrakit errors."""
    pass


# ============================================================================
# Validation
# ============================================================================

class ValidationError(TerraError):
    """Raised when caller-supplied input is malformed."""
    pass


class InvalidMnemonic(ValidationError):
    """Raised when a mnemonic fails the wordlist checksum."""
    pass


class InvalidAddress(ValidationError):
    """Raised when a bech32 address cannot be decoded or has the wrong prefix."""

    def __init__(self, address: str, reason: str):
        super().__init__(f"Invalid address {address!r}: {reason}")
        self.address = address
        self.reason = reason


class SigningError(TerraError):
    """Raised when the signing primitive rejects its input."""
    pass


# ============================================================================
# Configuration
# ============================================================================

class ConfigurationError(TerraError):
    """Raised when gas/fee options are missing or contradictory."""
    pass


class NoGasOptions(ConfigurationError):
    """Raised when a transaction is built without any GasOptions attached."""

    def __init__(self):
        super().__init__("No gas options configured for transaction submission")


class GasPriceNotFound(ConfigurationError):
    """Raised when a denom is absent from the remote gas price table."""

    def __init__(self, denom: str):
        super().__init__(f"Gas price not found for denom {denom!r}")
        self.denom = denom


# ============================================================================
# Network / chain
# ============================================================================

class NetworkError(TerraError):
    """Raised on transport failure or a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ChainRejection(TerraError):
    """Raised when a broadcast was accepted but execution returned a code."""

    def __init__(self, code: int, txhash: str, raw_log: Optional[str] = None):
        super().__init__(f"Transaction {txhash} rejected with code {code}: {raw_log}")
        self.code = code
        self.txhash = txhash
        self.raw_log = raw_log


class NotYetIndexed(TerraError):
    """Raised when a transaction hash is not (yet) queryable."""

    def __init__(self, txhash: str):
        super().__init__(f"Transaction {txhash} not indexed yet")
        self.txhash = txhash


class TxNotFound(TerraError):
    """Raised when the confirmation poller exhausts its retries."""

    def __init__(self, txhash: str, attempts: int):
        super().__init__(f"Transaction {txhash} not found after {attempts} attempts")
        self.txhash = txhash
        self.attempts = attempts


class AttributeNotFound(TerraError):
    """Raised when a confirmed transaction lacks an expected event attribute."""

    def __init__(self, event_type: str, key: str, txhash: Optional[str] = None):
        super().__init__(f"{event_type}/{key} not present in TX log of {txhash}")
        self.event_type = event_type
        self.key = key
        self.txhash = txhash
