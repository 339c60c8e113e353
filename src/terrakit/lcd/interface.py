"""
Abstract interface for LCD access.

Defines the contract for chain access that the fee calculator, the
transaction builder and the confirmation poller depend on.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from terrakit.core.coin import Coin, StdFee
from terrakit.core.messages import Message
from terrakit.core.result import AuthAccount, TxResult
from terrakit.core.sign_doc import StdTx


class LCDInterface(ABC):
    """
    Abstract interface for LCD access.

    This interface defines all chain operations needed by the signing flow:
    - Account lookup
    - Fee estimation
    - Transaction broadcast and lookup
    - Balance, swap-rate and contract queries
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish connection to the LCD.

        Raises:
            NetworkError: If the connection cannot be established
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the LCD."""
        pass

    @abstractmethod
    async def get_account(self, address: str, height: Optional[int] = None) -> AuthAccount:
        """
        Get account number and sequence for an address.

        Args:
            address: Bech32 account address
            height: Optional block height to query at

        Returns:
            The account's on-chain state
        """
        pass

    @abstractmethod
    async def estimate_fee(
        self,
        account: AuthAccount,
        messages: Sequence[Message],
        gas_adjustment: float,
        gas_prices: Sequence[Coin],
    ) -> StdFee:
        """
        Ask the LCD to simulate the messages and price the fee.

        The adjustment factor is applied remotely.

        Returns:
            Fee coins and gas exactly as returned by the estimator
        """
        pass

    @abstractmethod
    async def broadcast(self, tx: StdTx, mode: str) -> TxResult:
        """
        Broadcast a signed transaction.

        Args:
            tx: Signed transaction
            mode: "sync", "async" or "block"

        Returns:
            The broadcast response
        """
        pass

    @abstractmethod
    async def get_transaction(self, txhash: str, use_v1: bool = False) -> TxResult:
        """
        Get a transaction by hash.

        Args:
            txhash: Transaction hash
            use_v1: Query /cosmos/tx/v1beta1/txs instead of /txs

        Raises:
            NotYetIndexed: If the hash is not queryable yet
        """
        pass

    @abstractmethod
    async def get_balances(self, address: str, height: Optional[int] = None) -> List[Coin]:
        """Get all balances of an account."""
        pass

    @abstractmethod
    async def get_swap_rate(self, offer: Coin, ask_denom: str, height: Optional[int] = None) -> Coin:
        """Quote how much of ask_denom the offered coin is worth."""
        pass

    @abstractmethod
    async def query_contract(self, contract: str, query: Any, height: Optional[int] = None) -> Any:
        """Run a smart query against a contract."""
        pass

    @abstractmethod
    async def get_gas_prices(self, fcd_url: Optional[str] = None) -> Dict[str, Decimal]:
        """Get the gas price table (denom -> price) from the FCD."""
        pass

    async def get_balance(self, address: str, denom: str, height: Optional[int] = None) -> Coin:
        """
        Get the balance of a single denomination.

        Returns:
            The balance, or a zero coin if the account holds none
        """
        for coin in await self.get_balances(address, height):
            if coin.denom == denom:
                return coin
        return Coin(denom=denom, amount=Decimal(0))
