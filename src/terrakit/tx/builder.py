"""
Transaction Builder - assembles and signs sign documents.

Fetches the signer's account number and sequence, computes the fee and
produces a signed transaction ready for broadcast.
"""

from typing import Optional, Sequence

import structlog

from terrakit.core.coin import StdFee
from terrakit.core.messages import Message
from terrakit.core.result import AuthAccount
from terrakit.core.sign_doc import SignDoc, StdTx
from terrakit.errors import SigningError, ValidationError
from terrakit.lcd.interface import LCDInterface
from terrakit.tx.fees import FeeCalculator
from terrakit.tx.signer import TransactionSigner

logger = structlog.get_logger(__name__)

MAX_LOGGED_DOC_LENGTH = 1000


class TransactionBuilder:
    """
    Builds signed transactions.

    Account number and sequence are always read from the chain at signing
    time; a builder never caches them.
    """

    def __init__(
        self,
        lcd: LCDInterface,
        fee_calculator: FeeCalculator,
        chain_id: str,
        default_memo: str = "",
    ):
        """
        Initialize the transaction builder.

        Args:
            lcd: LCD used for account lookups
            fee_calculator: Resolves the fee policy
            chain_id: Chain the documents are signed for
            default_memo: Memo used when the caller passes none
        """
        self.lcd = lcd
        self.fee_calculator = fee_calculator
        self.chain_id = chain_id
        self.default_memo = default_memo

    def build_sign_doc(
        self,
        account: AuthAccount,
        fee: StdFee,
        messages: Sequence[Message],
        memo: Optional[str] = None,
    ) -> SignDoc:
        """Assemble the sign document from already resolved parts."""
        if not messages:
            raise ValidationError("A transaction needs at least one message")

        sign_doc = SignDoc(
            chain_id=self.chain_id,
            account_number=account.account_number,
            sequence=account.sequence,
            fee=fee,
            msgs=tuple(messages),
            memo=self.default_memo if memo is None else memo,
        )
        self._log_sign_doc(sign_doc)
        return sign_doc

    async def generate_transaction_to_broadcast(
        self,
        signer: TransactionSigner,
        messages: Sequence[Message],
        memo: Optional[str] = None,
    ) -> StdTx:
        """
        Build and sign a transaction.

        Args:
            signer: Loaded signer
            messages: Messages, in execution order
            memo: Memo; the builder's default when None

        Returns:
            Signed transaction

        Raises:
            SigningError: If the signer has no key
            NoGasOptions: If the fee calculator has no policy
        """
        if not signer.is_loaded:
            raise SigningError("No signing key loaded")

        account = await self.lcd.get_account(signer.address)
        fee = await self.fee_calculator.calc_fees(account, messages)
        sign_doc = self.build_sign_doc(account, fee, messages, memo)

        return signer.sign_doc(sign_doc)

    def _log_sign_doc(self, sign_doc: SignDoc) -> None:
        payload = sign_doc.to_canonical()
        if len(payload) > MAX_LOGGED_DOC_LENGTH:
            logger.debug(
                "sign_doc_built",
                chain_id=sign_doc.chain_id,
                account_number=sign_doc.account_number,
                sequence=sign_doc.sequence,
                messages=len(sign_doc.msgs),
            )
        else:
            logger.debug("sign_doc_built", sign_doc=payload)
