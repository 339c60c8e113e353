"""
Test suite for gas options and fee calculation.
"""

from decimal import Decimal

import pytest

from conftest import ISLAND_ACCOUNT, RECIPIENT
from terrakit.core.coin import Coin, StdFee
from terrakit.core.messages import MsgSend
from terrakit.core.result import AuthAccount
from terrakit.errors import ConfigurationError, GasPriceNotFound, NoGasOptions
from terrakit.tx.fees import DEFAULT_GAS_PRICE, FeeCalculator, GasOptions


@pytest.fixture
def account() -> AuthAccount:
    return AuthAccount(address=ISLAND_ACCOUNT, account_number=43045, sequence=3)


@pytest.fixture
def messages():
    return [MsgSend.create_single(ISLAND_ACCOUNT, RECIPIENT, Coin.create("uluna", 100000))]


# ============================================================================
# Gas Options
# ============================================================================

class TestGasOptions:
    """Tests for the fee policy type."""

    def test_fixed_from_string(self):
        options = GasOptions.create_with_fees("50000uluna,10ukrw", 90000)

        assert not options.estimate_gas
        assert options.fees == (Coin.create("uluna", 50000), Coin.create("ukrw", 10))
        assert options.gas == 90000

    def test_estimate(self):
        options = GasOptions.create_with_gas_estimate("0.15uluna", 1.4)

        assert options.estimate_gas
        assert options.gas_price == Coin.create("uluna", "0.15")
        assert options.gas_adjustment == 1.4

    def test_both_modes_rejected(self):
        with pytest.raises(ConfigurationError):
            GasOptions(fees=(Coin.create("uluna", 1),), gas=1, gas_adjustment=1.2)

    def test_neither_mode_rejected(self):
        with pytest.raises(ConfigurationError):
            GasOptions()

    def test_fixed_requires_gas(self):
        with pytest.raises(ConfigurationError):
            GasOptions(fees=(Coin.create("uluna", 1),))

    @pytest.mark.asyncio
    async def test_create_with_fcd(self, mock_lcd):
        mock_lcd.gas_prices = {"uluna": Decimal("0.15"), "ukrw": Decimal("178.05")}

        options = await GasOptions.create_with_fcd(mock_lcd, None, "ukrw", 1.4)

        assert options.gas_price == Coin.create("ukrw", "178.05")
        assert options.gas_adjustment == 1.4

    @pytest.mark.asyncio
    async def test_create_with_fcd_missing_denom(self, mock_lcd):
        mock_lcd.gas_prices = {"uluna": Decimal("0.15")}

        with pytest.raises(GasPriceNotFound) as exc_info:
            await GasOptions.create_with_fcd(mock_lcd, None, "uusd")

        assert exc_info.value.denom == "uusd"


# ============================================================================
# Fee Calculator
# ============================================================================

class TestFeeCalculator:
    """Tests for fee resolution."""

    @pytest.mark.asyncio
    async def test_fixed_fee_verbatim(self, mock_lcd, account, messages):
        calculator = FeeCalculator(mock_lcd, GasOptions.create_with_fees("50000uluna", 90000))

        fee = await calculator.calc_fees(account, messages)

        assert fee == StdFee.create_single(Coin.create("uluna", 50000), 90000)
        assert mock_lcd.estimate_calls == []

    @pytest.mark.asyncio
    async def test_estimate_fee_unchanged(self, mock_lcd, account, messages):
        calculator = FeeCalculator(mock_lcd, GasOptions.create_with_gas_estimate("0.15uluna", 1.4))

        fee = await calculator.calc_fees(account, messages)

        assert fee == mock_lcd.estimated_fee
        (called_account, called_messages, adjustment, prices), = mock_lcd.estimate_calls
        assert called_account == account
        assert list(called_messages) == messages
        assert adjustment == 1.4
        assert list(prices) == [Coin.create("uluna", "0.15")]

    @pytest.mark.asyncio
    async def test_estimate_default_gas_price(self, mock_lcd, account, messages):
        calculator = FeeCalculator(mock_lcd, GasOptions.create_with_gas_estimate(gas_adjustment=1.2))

        await calculator.calc_fees(account, messages)

        _, _, _, prices = mock_lcd.estimate_calls[0]
        assert list(prices) == [DEFAULT_GAS_PRICE]
        assert DEFAULT_GAS_PRICE == Coin.create("ukrw", "1.0")

    @pytest.mark.asyncio
    async def test_no_gas_options(self, mock_lcd, account, messages):
        calculator = FeeCalculator(mock_lcd)

        with pytest.raises(NoGasOptions):
            await calculator.calc_fees(account, messages)
