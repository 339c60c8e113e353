"""
Fee policy and fee calculation.

A transaction either carries fixed fee coins with a fixed gas limit, or asks
the LCD to simulate it and price the gas. GasOptions holds exactly one of the
two policies.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple, Union

import structlog

from terrakit.core.coin import Coin, StdFee
from terrakit.core.messages import Message
from terrakit.core.result import AuthAccount
from terrakit.errors import ConfigurationError, GasPriceNotFound, NoGasOptions
from terrakit.lcd.interface import LCDInterface

logger = structlog.get_logger(__name__)

DEFAULT_GAS_PRICE = Coin(denom="ukrw", amount=Decimal("1.0"))
DEFAULT_GAS_ADJUSTMENT = 1.0


@dataclass(frozen=True)
class GasOptions:
    """
    Fee policy for a transaction.

    Attributes:
        fees: Fixed fee coins (fixed mode)
        gas: Fixed gas limit (fixed mode)
        gas_price: Price per unit of gas (estimate mode)
        gas_adjustment: Factor the remote estimator applies (estimate mode)
        estimate_gas: True for estimate mode
    """

    fees: Tuple[Coin, ...] = ()
    gas: Optional[int] = None
    gas_price: Optional[Coin] = None
    gas_adjustment: Optional[float] = None
    estimate_gas: bool = False

    def __post_init__(self):
        object.__setattr__(self, "fees", tuple(self.fees))
        fixed = bool(self.fees) or self.gas is not None
        estimate = self.estimate_gas or self.gas_price is not None or self.gas_adjustment is not None

        if fixed and estimate:
            raise ConfigurationError("GasOptions cannot combine fixed fees with gas estimation")
        if not fixed and not estimate:
            raise ConfigurationError("GasOptions needs either fixed fees or gas estimation")
        if fixed and (not self.fees or self.gas is None):
            raise ConfigurationError("Fixed fees require both fee coins and a gas limit")
        if estimate:
            object.__setattr__(self, "estimate_gas", True)

    @classmethod
    def create_with_fees(
        cls,
        fees: Union[str, Coin, Iterable[Coin]],
        gas: int,
    ) -> "GasOptions":
        """
        Fixed fee policy.

        Args:
            fees: Coin string ("50000uluna" or "1000uluna,20ukrw"), a Coin or coins
            gas: Gas limit
        """
        if isinstance(fees, str):
            coins = Coin.parse_coins(fees)
        elif isinstance(fees, Coin):
            coins = [fees]
        else:
            coins = list(fees)
        return cls(fees=tuple(coins), gas=int(gas))

    @classmethod
    def create_with_gas_estimate(
        cls,
        gas_price: Optional[Union[str, Coin]] = None,
        gas_adjustment: float = DEFAULT_GAS_ADJUSTMENT,
    ) -> "GasOptions":
        """Estimate policy; the gas price defaults to 1.0ukrw when calculating."""
        if isinstance(gas_price, str):
            gas_price = Coin.parse(gas_price)
        return cls(gas_price=gas_price, gas_adjustment=gas_adjustment, estimate_gas=True)

    @classmethod
    async def create_with_fcd(
        cls,
        lcd: LCDInterface,
        fcd_url: Optional[str],
        denom: str,
        gas_adjustment: float = DEFAULT_GAS_ADJUSTMENT,
    ) -> "GasOptions":
        """
        Estimate policy priced from the FCD gas price table.

        Raises:
            GasPriceNotFound: If the table has no entry for denom
        """
        prices = await lcd.get_gas_prices(fcd_url)
        if denom not in prices:
            raise GasPriceNotFound(denom)

        gas_price = Coin(denom=denom, amount=prices[denom])
        logger.debug("gas_price_loaded", denom=denom, price=gas_price.amount_str)
        return cls.create_with_gas_estimate(gas_price, gas_adjustment)


class FeeCalculator:
    """
    Resolves a GasOptions policy into a concrete StdFee.
    """

    def __init__(self, lcd: LCDInterface, gas_options: Optional[GasOptions] = None):
        self.lcd = lcd
        self.gas_options = gas_options

    async def calc_fees(self, account: AuthAccount, messages: Sequence[Message]) -> StdFee:
        """
        Compute the fee for a set of messages.

        Args:
            account: Signer account (from, account_number, sequence)
            messages: Messages to price

        Returns:
            Fixed fee verbatim, or the remote estimate unchanged

        Raises:
            NoGasOptions: If no policy is attached
        """
        options = self.gas_options
        if options is None:
            raise NoGasOptions()

        if not options.estimate_gas:
            return StdFee.create(options.fees, options.gas)

        gas_price = options.gas_price or DEFAULT_GAS_PRICE
        gas_adjustment = options.gas_adjustment if options.gas_adjustment is not None else DEFAULT_GAS_ADJUSTMENT

        fee = await self.lcd.estimate_fee(account, messages, gas_adjustment, [gas_price])
        logger.debug(
            "fees_calculated",
            gas=fee.gas,
            fees=",".join(str(c) for c in fee.amount),
            gas_price=str(gas_price),
            gas_adjustment=gas_adjustment,
        )
        return fee
