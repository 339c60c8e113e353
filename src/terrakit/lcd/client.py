"""
LCD adapter.

Provides chain access and transaction broadcast via the Terra LCD REST API.
"""

import json
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import httpx
import structlog

from terrakit.config import TerraConfig, get_config
from terrakit.core.coin import Coin, StdFee
from terrakit.core.messages import Message
from terrakit.core.result import AuthAccount, TxResult
from terrakit.core.sign_doc import StdTx
from terrakit.errors import NetworkError, NotYetIndexed, ValidationError
from terrakit.lcd.interface import LCDInterface

logger = structlog.get_logger(__name__)

BROADCAST_MODES = ("sync", "async", "block")


def _is_not_found(error: NetworkError) -> bool:
    if error.status_code == 404:
        return True
    # some gateways report unknown hashes as 400/500 with a "not found" body
    return error.status_code in (400, 500) and "not found" in (error.body or "").lower()


class LCDClient(LCDInterface):
    """
    LCD adapter.

    Implements the LCDInterface over a single shared httpx.AsyncClient, so
    concurrent calls reuse one connection pool.
    """

    def __init__(
        self,
        config: Optional[TerraConfig] = None,
        lcd_url: Optional[str] = None,
        chain_id: Optional[str] = None,
    ):
        """
        Initialize the LCD adapter.

        Args:
            config: terrakit configuration. Uses global config if not provided.
            lcd_url: Override of config.lcd_url
            chain_id: Override of config.chain_id
        """
        self.config = config or get_config()
        self.base_url = (lcd_url or self.config.lcd_url).rstrip("/")
        self.chain_id = chain_id or self.config.chain_id
        self.fcd_url = self.config.fcd_url.rstrip("/")
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def headers(self) -> dict:
        return {
            "User-Agent": self.config.user_agent,
            "Content-Type": "application/json",
        }

    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.config.request_timeout,
        )
        logger.info("lcd_connected", base_url=self.base_url, chain_id=self.chain_id)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("lcd_disconnected")

    async def __aenter__(self) -> "LCDClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    async def _request(
        self,
        method: str,
        path: str,
        **kwargs,
    ) -> Any:
        """Make an API request; path may be relative to the LCD or absolute."""
        if not self._client:
            await self.connect()

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error("lcd_request_error", path=path, error=str(e))
            raise NetworkError(f"LCD request failed: {e}") from e

        if not response.is_success:
            logger.debug(
                "lcd_request_failed",
                path=path,
                status=response.status_code,
                error=response.text,
            )
            raise NetworkError(
                f"LCD error {response.status_code} for {path}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"LCD returned invalid JSON for {path}: {e}") from e

    async def send_cmd(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        height: Optional[int] = None,
    ) -> Any:
        """GET a path, optionally at a given block height."""
        query = dict(params or {})
        if height is not None:
            query["height"] = height
        return await self._request("GET", path, params=query or None)

    async def post_cmd(self, path: str, body: Any) -> Any:
        """POST a JSON body."""
        return await self._request("POST", path, json=body)

    # ========================================================================
    # Signing flow
    # ========================================================================

    async def get_account(self, address: str, height: Optional[int] = None) -> AuthAccount:
        """Get account number and sequence."""
        data = await self.send_cmd(f"/auth/accounts/{address}", height=height)
        account = AuthAccount.from_lcd(data)
        logger.debug(
            "account_fetched",
            address=address,
            account_number=account.account_number,
            sequence=account.sequence,
        )
        return account

    async def estimate_fee(
        self,
        account: AuthAccount,
        messages: Sequence[Message],
        gas_adjustment: float,
        gas_prices: Sequence[Coin],
    ) -> StdFee:
        """Price the messages with POST /txs/estimate_fee."""
        body = {
            "base_req": {
                "from": account.address,
                "memo": "Fee Estimate",
                "chain_id": self.chain_id,
                "account_number": str(account.account_number),
                "sequence": str(account.sequence),
                "gas": "auto",
                "gas_adjustment": str(gas_adjustment),
                "gas_prices": [coin.to_json() for coin in gas_prices],
                "simulate": False,
            },
            "msgs": [msg.to_json() for msg in messages],
        }
        data = await self.post_cmd("/txs/estimate_fee", body)

        try:
            fee = StdFee.from_json(data["result"]["fee"])
        except (KeyError, TypeError, ValueError) as e:
            raise NetworkError(f"Unexpected fee estimate response: {data!r}") from e

        logger.debug("fee_estimated", gas=fee.gas, amount=[str(c) for c in fee.amount])
        return fee

    async def broadcast(self, tx: StdTx, mode: str) -> TxResult:
        """Broadcast a signed transaction with POST /txs."""
        if mode not in BROADCAST_MODES:
            raise ValidationError(f"Unknown broadcast mode: {mode}")

        data = await self._request(
            "POST",
            "/txs",
            content=tx.to_broadcast_json(mode).encode("utf-8"),
        )
        result = TxResult.from_lcd(data)
        logger.info("tx_broadcast", txhash=result.txhash, mode=mode, code=result.code)
        return result

    async def get_transaction(self, txhash: str, use_v1: bool = False) -> TxResult:
        """Get a transaction by hash."""
        path = f"/cosmos/tx/v1beta1/txs/{txhash}" if use_v1 else f"/txs/{txhash}"
        try:
            data = await self.send_cmd(path)
        except NetworkError as e:
            if _is_not_found(e):
                raise NotYetIndexed(txhash) from e
            raise
        return TxResult.from_lcd(data)

    # ========================================================================
    # Queries
    # ========================================================================

    async def get_balances(self, address: str, height: Optional[int] = None) -> List[Coin]:
        data = await self.send_cmd(f"/bank/balances/{address}", height=height)
        return [Coin.from_json(c) for c in data.get("result") or []]

    async def get_swap_rate(self, offer: Coin, ask_denom: str, height: Optional[int] = None) -> Coin:
        data = await self.send_cmd(
            "/market/swap",
            params={"offer_coin": str(offer), "ask_denom": ask_denom},
            height=height,
        )
        return Coin.from_json(data["result"])

    async def query_contract(self, contract: str, query: Any, height: Optional[int] = None) -> Any:
        query_msg = query if isinstance(query, str) else json.dumps(query, separators=(",", ":"))
        data = await self.send_cmd(
            f"/wasm/contracts/{contract}/store",
            params={"query_msg": query_msg},
            height=height,
        )
        return data.get("result")

    async def get_gas_prices(self, fcd_url: Optional[str] = None) -> Dict[str, Decimal]:
        base = (fcd_url or self.fcd_url).rstrip("/")
        data = await self._request("GET", f"{base}/v1/txs/gas_prices")
        return {denom: Decimal(str(price)) for denom, price in data.items()}

    async def node_info(self) -> dict:
        return await self.send_cmd("/node_info")

    # Oracle

    async def oracle_parameters(self, height: Optional[int] = None) -> dict:
        data = await self.send_cmd("/oracle/parameters", height=height)
        return data["result"]

    async def oracle_votes(self, validator: str, height: Optional[int] = None) -> list:
        data = await self.send_cmd(f"/oracle/voters/{validator}/votes", height=height)
        return data.get("result") or []

    async def oracle_prevotes(self, validator: str, height: Optional[int] = None) -> list:
        data = await self.send_cmd(f"/oracle/voters/{validator}/prevotes", height=height)
        return data.get("result") or []

    async def oracle_feeder(self, validator: str, height: Optional[int] = None) -> str:
        data = await self.send_cmd(f"/oracle/voters/{validator}/feeder", height=height)
        return data["result"]

    async def oracle_miss(self, validator: str, height: Optional[int] = None) -> int:
        data = await self.send_cmd(f"/oracle/voters/{validator}/miss", height=height)
        return int(data["result"])

    # Staking

    async def validators(self) -> list:
        data = await self.send_cmd("/staking/validators")
        return data.get("result") or []

    async def validator(self, operator_address: str) -> dict:
        data = await self.send_cmd(f"/staking/validators/{operator_address}")
        return data["result"]

    async def validator_by_moniker(self, moniker: str) -> Optional[dict]:
        for validator in await self.validators():
            if validator.get("description", {}).get("moniker") == moniker:
                return validator
        return None

    async def validator_delegations(self, operator_address: str) -> list:
        data = await self.send_cmd(f"/staking/validators/{operator_address}/delegations")
        return data.get("result") or []

    async def validator_unbonding_delegations(self, operator_address: str) -> list:
        data = await self.send_cmd(f"/staking/validators/{operator_address}/unbonding_delegations")
        return data.get("result") or []

    async def delegator_delegations(self, address: str, height: Optional[int] = None) -> list:
        data = await self.send_cmd(f"/staking/delegators/{address}/delegations", height=height)
        return data.get("result") or []
