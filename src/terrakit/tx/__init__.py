"""
Transaction construction, signing and submission.
"""

from terrakit.tx.fees import FeeCalculator, GasOptions
from terrakit.tx.signer import TransactionSigner
from terrakit.tx.builder import TransactionBuilder
from terrakit.tx.submitter import ConfirmationPoller, TransactionSubmitter

__all__ = [
    "FeeCalculator",
    "GasOptions",
    "TransactionSigner",
    "TransactionBuilder",
    "ConfirmationPoller",
    "TransactionSubmitter",
]
