"""
Pytest configuration and shared fixtures for the test suite.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pytest

from terrakit.config import TerraConfig
from terrakit.core.coin import Coin, StdFee
from terrakit.core.messages import Message
from terrakit.core.result import AuthAccount, TxEvent, TxLog, TxResult
from terrakit.core.sign_doc import StdTx
from terrakit.errors import NotYetIndexed
from terrakit.keys.private import PrivateKey
from terrakit.lcd.interface import LCDInterface


# ============================================================================
# Reference Vectors
# ============================================================================

ISLAND_WORDS = (
    "island relax shop such yellow opinion find know caught erode blue dolphin "
    "behind coach tattoo light focus snake common size analyst imitate employ walnut"
)
ISLAND_ACCOUNT = "terra1n3g37dsdlv7ryqftlkef8mhgqj4ny7p8v78lg7"
ISLAND_PUBKEY = "AiMzHaA2bvnDXfHzkjMM+vkSE/p0ymBtAFKUnUtQAeXe"

WONDER_WORDS = (
    "wonder caution square unveil april art add hover spend smile proud admit "
    "modify old copper throw crew happy nature luggage reopen exhibit ordinary napkin"
)

RECIPIENT = "terra1usws7c2c6cs7nuc8vma9qzaky5pkgvm2uag6rh"


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> TerraConfig:
    """Create a test configuration."""
    return TerraConfig(
        _env_file=None,
        lcd_url="https://lcd.test",
        chain_id="tequila-0004",
        fcd_url="https://fcd.test",
        fees="50000uluna",
        gas=90000,
        retries=3,
        sleep_seconds=0,
        memo="PFC-terra-rust/0.1.5",
        log_level="DEBUG",
    )


# ============================================================================
# Test Data Generators
# ============================================================================

def generate_test_tx_hash(index: int = 0) -> str:
    """Generate a deterministic test transaction hash."""
    base = "ABCD1234" * 8  # 64 chars
    return base[:60] + f"{index:04d}"


def make_tx_result(
    txhash: str,
    events: Sequence[Tuple[str, Sequence[Tuple[str, str]]]] = (),
    height: int = 100,
    code: Optional[int] = None,
) -> TxResult:
    """Build a confirmed transaction whose single log carries the given events."""
    return TxResult(
        txhash=txhash,
        height=height,
        code=code,
        logs=(
            TxLog(
                msg_index=0,
                events=tuple(TxEvent(type=t, attributes=tuple(attrs)) for t, attrs in events),
            ),
        ),
    )


@pytest.fixture
def island_key() -> PrivateKey:
    return PrivateKey.from_words(ISLAND_WORDS)


# ============================================================================
# Mock LCD Interface
# ============================================================================

class MockLCDInterface(LCDInterface):
    """Mock LCD interface for testing."""

    def __init__(self):
        self.accounts: Dict[str, AuthAccount] = {}
        self.estimated_fee = StdFee.create_single(Coin.create("uluna", 698), 46467)
        self.estimate_calls: List[Tuple[AuthAccount, Sequence[Message], float, Sequence[Coin]]] = []
        self.broadcasts: List[Tuple[StdTx, str]] = []
        self.broadcast_results: List[TxResult] = []
        self.transactions: Dict[str, TxResult] = {}
        self.pending_polls: Dict[str, int] = {}
        self.lookup_errors: Dict[str, Exception] = {}
        self.lookups: List[Tuple[str, bool]] = []
        self.balances: Dict[str, List[Coin]] = {}
        self.swap_rates: Dict[str, Union[Coin, Exception]] = {}
        self.swap_calls: List[Tuple[Coin, str]] = []
        self.contract_results: Dict[str, Any] = {}
        self.queries: List[Tuple[str, Any]] = []
        self.gas_prices: Dict[str, Decimal] = {}
        self._connected = False

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def get_account(self, address: str, height: Optional[int] = None) -> AuthAccount:
        return self.accounts.get(address) or AuthAccount(address=address, account_number=1, sequence=0)

    async def estimate_fee(
        self,
        account: AuthAccount,
        messages: Sequence[Message],
        gas_adjustment: float,
        gas_prices: Sequence[Coin],
    ) -> StdFee:
        self.estimate_calls.append((account, messages, gas_adjustment, gas_prices))
        return self.estimated_fee

    async def broadcast(self, tx: StdTx, mode: str) -> TxResult:
        self.broadcasts.append((tx, mode))
        if self.broadcast_results:
            return self.broadcast_results.pop(0)
        return TxResult(txhash=generate_test_tx_hash(len(self.broadcasts)))

    async def get_transaction(self, txhash: str, use_v1: bool = False) -> TxResult:
        self.lookups.append((txhash, use_v1))
        if txhash in self.lookup_errors:
            raise self.lookup_errors[txhash]
        if self.pending_polls.get(txhash, 0) > 0:
            self.pending_polls[txhash] -= 1
            raise NotYetIndexed(txhash)
        if txhash not in self.transactions:
            raise NotYetIndexed(txhash)
        return self.transactions[txhash]

    async def get_balances(self, address: str, height: Optional[int] = None) -> List[Coin]:
        return list(self.balances.get(address, []))

    async def get_swap_rate(self, offer: Coin, ask_denom: str, height: Optional[int] = None) -> Coin:
        self.swap_calls.append((offer, ask_denom))
        rate = self.swap_rates[offer.denom]
        if isinstance(rate, Exception):
            raise rate
        return rate

    async def query_contract(self, contract: str, query: Any, height: Optional[int] = None) -> Any:
        self.queries.append((contract, query))
        return self.contract_results.get(contract)

    async def get_gas_prices(self, fcd_url: Optional[str] = None) -> Dict[str, Decimal]:
        return dict(self.gas_prices)

    def confirm(self, txhash: str, result: TxResult, pending: int = 0) -> None:
        """Make a hash resolvable after `pending` not-yet-indexed lookups."""
        self.transactions[txhash] = result
        self.pending_polls[txhash] = pending


@pytest.fixture
def mock_lcd() -> MockLCDInterface:
    """Create a mock LCD interface."""
    return MockLCDInterface()
