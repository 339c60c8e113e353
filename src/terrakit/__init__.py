"""
terrakit

Client-side transaction engine for Terra: HD keys, bech32 addresses, amino
JSON sign documents, fee calculation, broadcast and confirmation polling.
"""

__version__ = "0.1.0"

from terrakit.client import TerraClient
from terrakit.config import TerraConfig, get_config, set_config
from terrakit.core import Coin, SignDoc, StdFee, StdSignature, StdTx, TxResult
from terrakit.keys import AddressRole, PrivateKey, PublicKey
from terrakit.lcd import LCDClient, LCDInterface
from terrakit.tx import ConfirmationPoller, FeeCalculator, GasOptions

__all__ = [
    "TerraClient",
    "TerraConfig",
    "get_config",
    "set_config",
    "Coin",
    "SignDoc",
    "StdFee",
    "StdSignature",
    "StdTx",
    "TxResult",
    "AddressRole",
    "PrivateKey",
    "PublicKey",
    "LCDClient",
    "LCDInterface",
    "ConfirmationPoller",
    "FeeCalculator",
    "GasOptions",
]
