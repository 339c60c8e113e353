"""
LCD Integration Layer.

Provides abstracted access to chain state and transaction submission.
"""

from terrakit.lcd.interface import LCDInterface
from terrakit.lcd.client import LCDClient

__all__ = [
    "LCDInterface",
    "LCDClient",
]
