"""
Transaction submission and confirmation polling.
"""

import asyncio
from typing import Optional, Sequence

import structlog

from terrakit.core.messages import Message
from terrakit.core.result import TxResult
from terrakit.core.sign_doc import StdTx
from terrakit.errors import ChainRejection, NotYetIndexed, TxNotFound, ValidationError
from terrakit.lcd.interface import LCDInterface
from terrakit.tx.builder import TransactionBuilder
from terrakit.tx.signer import TransactionSigner

logger = structlog.get_logger(__name__)

DEFAULT_RETRIES = 5
DEFAULT_SLEEP_SECONDS = 3.0


class TransactionSubmitter:
    """
    Signs and broadcasts transactions.
    """

    def __init__(self, lcd: LCDInterface, builder: TransactionBuilder):
        self.lcd = lcd
        self.builder = builder

    async def broadcast(self, tx: StdTx, mode: str = "sync") -> TxResult:
        """Broadcast an already signed transaction."""
        return await self.lcd.broadcast(tx, mode)

    async def submit_sync(
        self,
        signer: TransactionSigner,
        messages: Sequence[Message],
        memo: Optional[str] = None,
    ) -> TxResult:
        """
        Sign and broadcast in sync mode (waits for the mempool check).

        Raises:
            ChainRejection: If the response carries a code, zero included
        """
        tx = await self.builder.generate_transaction_to_broadcast(signer, messages, memo)
        result = await self.broadcast(tx, "sync")

        if result.code is not None:
            logger.warning(
                "tx_rejected",
                txhash=result.txhash,
                code=result.code,
                codespace=result.codespace,
                raw_log=result.raw_log,
            )
            raise ChainRejection(result.code, result.txhash, result.raw_log)

        logger.info("tx_submitted", txhash=result.txhash, mode="sync")
        return result

    async def submit_async(
        self,
        signer: TransactionSigner,
        messages: Sequence[Message],
        memo: Optional[str] = None,
    ) -> str:
        """Sign and broadcast in async mode; returns the hash only."""
        tx = await self.builder.generate_transaction_to_broadcast(signer, messages, memo)
        result = await self.broadcast(tx, "async")
        logger.info("tx_submitted", txhash=result.txhash, mode="async")
        return result.txhash


class ConfirmationPoller:
    """
    Resolves a transaction hash into its final record.

    Makes up to `retries` lookups with a fixed `sleep_seconds` pause between
    consecutive attempts. Only a not-yet-indexed response is retried.
    """

    def __init__(
        self,
        lcd: LCDInterface,
        retries: int = DEFAULT_RETRIES,
        sleep_seconds: float = DEFAULT_SLEEP_SECONDS,
    ):
        if retries < 1:
            raise ValidationError("retries must be at least 1")
        self.lcd = lcd
        self.retries = retries
        self.sleep_seconds = sleep_seconds

    async def wait(self, txhash: str, use_v1: bool = False) -> TxResult:
        """
        Poll until the transaction is found.

        Raises:
            TxNotFound: After `retries` not-yet-indexed responses
        """
        for attempt in range(1, self.retries + 1):
            try:
                result = await self.lcd.get_transaction(txhash, use_v1=use_v1)
            except NotYetIndexed:
                logger.debug("tx_not_indexed", txhash=txhash, attempt=attempt, retries=self.retries)
                if attempt < self.retries:
                    await asyncio.sleep(self.sleep_seconds)
                continue

            logger.info("tx_confirmed", txhash=txhash, height=result.height, attempt=attempt)
            return result

        logger.warning("tx_not_found", txhash=txhash, attempts=self.retries)
        raise TxNotFound(txhash, self.retries)

    async def wait_for_attribute(
        self,
        txhash: str,
        event_type: str,
        attribute_key: str,
        use_v1: bool = False,
    ) -> str:
        """
        Wait for the transaction, then return the first matching attribute.

        Raises:
            TxNotFound: If the transaction never shows up
            AttributeNotFound: If it shows up without the attribute
        """
        result = await self.wait(txhash, use_v1=use_v1)
        return result.attribute(event_type, attribute_key)
