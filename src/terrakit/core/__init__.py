"""
Core chain types.

Coins, messages, sign documents and transaction records.
"""

from terrakit.core.coin import Coin, StdFee
from terrakit.core.messages import (
    Message,
    MsgExecuteContract,
    MsgInstantiateContract,
    MsgMigrateContract,
    MsgSend,
    MsgStoreCode,
    MsgSwap,
    message_from_json,
)
from terrakit.core.result import AuthAccount, TxEvent, TxLog, TxResult
from terrakit.core.sign_doc import SignDoc, StdSignature, StdTx, canonical_json

__all__ = [
    "Coin",
    "StdFee",
    "Message",
    "MsgExecuteContract",
    "MsgInstantiateContract",
    "MsgMigrateContract",
    "MsgSend",
    "MsgStoreCode",
    "MsgSwap",
    "message_from_json",
    "AuthAccount",
    "TxEvent",
    "TxLog",
    "TxResult",
    "SignDoc",
    "StdSignature",
    "StdTx",
    "canonical_json",
]
