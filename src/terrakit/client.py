"""
TerraClient - wires the LCD, fee calculator, builder, submitter and poller.

Usage:
    ```python
    async with TerraClient.from_config() as terra:
        key = PrivateKey.from_words(phrase)
        code_id = await terra.store_code(key, wasm)
        contract, _ = await terra.instantiate(key, code_id, '{"owner":"##SENDER##"}')
    ```
"""

from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import structlog

from terrakit.config import TerraConfig, get_config
from terrakit.core.coin import Coin
from terrakit.core.messages import (
    Message,
    MsgExecuteContract,
    MsgInstantiateContract,
    MsgMigrateContract,
    MsgStoreCode,
    parse_json_payload,
    substitute_placeholders,
)
from terrakit.core.result import TxResult
from terrakit.keys.private import PrivateKey
from terrakit.lcd.client import LCDClient
from terrakit.lcd.interface import LCDInterface
from terrakit.market import generate_sweep_messages
from terrakit.tx.builder import TransactionBuilder
from terrakit.tx.fees import FeeCalculator, GasOptions
from terrakit.tx.signer import TransactionSigner
from terrakit.tx.submitter import ConfirmationPoller, TransactionSubmitter

logger = structlog.get_logger(__name__)

JsonPayload = Union[str, dict, list, None]


def _render_payload(payload: JsonPayload, **placeholders: Optional[Union[str, int]]) -> Any:
    """Substitute ##NAME## placeholders in a string template and parse it."""
    if isinstance(payload, str):
        return parse_json_payload(substitute_placeholders(payload, **placeholders))
    return payload


class TerraClient:
    """
    High-level client for signing, submitting and confirming transactions.
    """

    def __init__(
        self,
        config: Optional[TerraConfig] = None,
        lcd: Optional[LCDInterface] = None,
        gas_options: Optional[GasOptions] = None,
    ):
        """
        Initialize the client.

        Args:
            config: terrakit configuration. Uses global config if not provided.
            lcd: Custom LCD interface (an LCDClient is created if not provided)
            gas_options: Fee policy; resolved from config if not provided
        """
        self.config = config or get_config()
        self.lcd = lcd or LCDClient(self.config)

        if gas_options is None:
            gas_options = self.config.gas_options()
        self.fee_calculator = FeeCalculator(self.lcd, gas_options)
        self.builder = TransactionBuilder(
            self.lcd,
            self.fee_calculator,
            chain_id=self.config.chain_id,
            default_memo=self.config.default_memo,
        )
        self.submitter = TransactionSubmitter(self.lcd, self.builder)
        self.poller = ConfirmationPoller(
            self.lcd,
            retries=self.config.retries,
            sleep_seconds=self.config.sleep_seconds,
        )

    @classmethod
    def from_config(cls, config: Optional[TerraConfig] = None) -> "TerraClient":
        return cls(config=config)

    async def __aenter__(self) -> "TerraClient":
        await self.lcd.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.lcd.disconnect()

    @property
    def gas_options(self) -> Optional[GasOptions]:
        return self.fee_calculator.gas_options

    @gas_options.setter
    def gas_options(self, options: Optional[GasOptions]) -> None:
        self.fee_calculator.gas_options = options

    def signer(self, key: PrivateKey) -> TransactionSigner:
        return TransactionSigner(self.config, key=key)

    # ========================================================================
    # Submission
    # ========================================================================

    async def submit_transaction_sync(
        self,
        key: PrivateKey,
        messages: Sequence[Message],
        memo: Optional[str] = None,
    ) -> TxResult:
        """
        Sign and broadcast in sync mode.

        Raises:
            ChainRejection: If the chain returns a non-zero code
        """
        return await self.submitter.submit_sync(self.signer(key), messages, memo)

    async def submit_transaction_async(
        self,
        key: PrivateKey,
        messages: Sequence[Message],
        memo: Optional[str] = None,
    ) -> str:
        """Sign and broadcast in async mode, returning the hash."""
        return await self.submitter.submit_async(self.signer(key), messages, memo)

    async def _submit_and_confirm(
        self,
        key: PrivateKey,
        messages: Sequence[Message],
        memo: Optional[str],
    ) -> TxResult:
        submitted = await self.submit_transaction_sync(key, messages, memo)
        return await self.poller.wait(submitted.txhash)

    # ========================================================================
    # Contract workflows
    # ========================================================================

    async def store_code(self, key: PrivateKey, wasm: bytes, memo: Optional[str] = None) -> int:
        """
        Upload contract byte code.

        Returns:
            The new code id
        """
        sender = key.public_key().account()
        result = await self._submit_and_confirm(
            key, [MsgStoreCode(sender=sender, wasm_byte_code=wasm)], memo
        )
        code_id = int(result.attribute("store_code", "code_id"))
        logger.info("code_stored", txhash=result.txhash, code_id=code_id)
        return code_id

    async def instantiate(
        self,
        key: PrivateKey,
        code_id: int,
        init_msg: JsonPayload,
        coins: Iterable[Coin] = (),
        admin: Optional[str] = None,
        memo: Optional[str] = None,
    ) -> Tuple[str, int]:
        """
        Instantiate a contract from stored code.

        String templates may use ##SENDER##, ##ADMIN## and ##CODE_ID##.

        Returns:
            (contract address, code id)
        """
        sender = key.public_key().account()
        msg = MsgInstantiateContract(
            sender=sender,
            code_id=code_id,
            init_msg=_render_payload(init_msg, SENDER=sender, ADMIN=admin, CODE_ID=code_id),
            init_coins=tuple(coins),
            admin=admin,
        )
        result = await self._submit_and_confirm(key, [msg], memo)

        contract = result.attribute("instantiate_contract", "contract_address")
        new_code_id = int(result.attribute("instantiate_contract", "code_id"))
        logger.info("contract_instantiated", txhash=result.txhash, contract=contract, code_id=new_code_id)
        return contract, new_code_id

    async def migrate(
        self,
        key: PrivateKey,
        contract: str,
        new_code_id: int,
        migrate_msg: JsonPayload = None,
        memo: Optional[str] = None,
    ) -> Tuple[str, int]:
        """
        Migrate a contract to new code; the key must be the contract admin.

        String templates may use ##SENDER##, ##CONTRACT## and ##NEW_CODE_ID##.

        Returns:
            (contract address, code id)
        """
        sender = key.public_key().account()
        msg = MsgMigrateContract(
            admin=sender,
            contract=contract,
            new_code_id=new_code_id,
            migrate_msg=_render_payload(
                migrate_msg, SENDER=sender, CONTRACT=contract, NEW_CODE_ID=new_code_id
            ),
        )
        result = await self._submit_and_confirm(key, [msg], memo)

        migrated = result.attribute("migrate_contract", "contract_address")
        code_id = int(result.attribute("migrate_contract", "code_id"))
        logger.info("contract_migrated", txhash=result.txhash, contract=migrated, code_id=code_id)
        return migrated, code_id

    async def execute(
        self,
        key: PrivateKey,
        contract: str,
        execute_msg: JsonPayload,
        coins: Iterable[Coin] = (),
        memo: Optional[str] = None,
    ) -> str:
        """
        Execute a contract message (sync broadcast).

        String templates may use ##SENDER## and ##CONTRACT##.

        Returns:
            Transaction hash
        """
        sender = key.public_key().account()
        msg = MsgExecuteContract(
            sender=sender,
            contract=contract,
            execute_msg=_render_payload(execute_msg, SENDER=sender, CONTRACT=contract),
            coins=tuple(coins),
        )
        result = await self.submit_transaction_sync(key, [msg], memo)
        return result.txhash

    async def query(
        self,
        contract: str,
        query: JsonPayload,
        height: Optional[int] = None,
    ) -> Any:
        """Run a smart query; string templates may use ##CONTRACT##."""
        return await self.lcd.query_contract(
            contract, _render_payload(query, CONTRACT=contract), height
        )

    # ========================================================================
    # Market
    # ========================================================================

    async def sweep_messages(
        self,
        address: str,
        to_denom: str,
        threshold: Union[int, str] = 0,
    ) -> List[Message]:
        return await generate_sweep_messages(self.lcd, address, to_denom, threshold)

    async def sweep(
        self,
        key: PrivateKey,
        to_denom: str,
        threshold: Union[int, str] = 0,
        memo: Optional[str] = None,
    ) -> Optional[TxResult]:
        """
        Swap every balance worth more than threshold into to_denom.

        Returns:
            The sync broadcast result, or None if nothing was worth swapping
        """
        messages = await self.sweep_messages(key.public_key().account(), to_denom, threshold)
        if not messages:
            logger.info("sweep_nothing_to_swap", ask_denom=to_denom)
            return None
        return await self.submit_transaction_sync(key, messages, memo)
