"""
Market helpers.

Converting an account's balances into a single denomination.
"""

import asyncio
from decimal import Decimal
from typing import List, Optional, Union

import structlog

from terrakit.core.coin import Coin
from terrakit.core.messages import MsgSwap
from terrakit.lcd.interface import LCDInterface

logger = structlog.get_logger(__name__)


async def generate_sweep_messages(
    lcd: LCDInterface,
    from_address: str,
    to_denom: str,
    threshold: Union[Decimal, int, str] = 0,
    height: Optional[int] = None,
) -> List[MsgSwap]:
    """
    Build swap messages converting every balance into to_denom.

    Every coin except to_denom is quoted concurrently. Coins whose quote is
    not strictly above the threshold are skipped as dust.

    Args:
        lcd: LCD to query
        from_address: Account to sweep
        to_denom: Denomination to convert into
        threshold: Minimum quoted amount (in to_denom) worth swapping
        height: Optional block height for balances and quotes

    Returns:
        One MsgSwap per coin worth swapping, in balance order

    Raises:
        The first quote failure, after every quote has completed
    """
    threshold = Decimal(str(threshold))
    balances = [
        coin for coin in await lcd.get_balances(from_address, height)
        if coin.denom != to_denom
    ]

    quotes = await asyncio.gather(
        *(lcd.get_swap_rate(coin, to_denom, height) for coin in balances),
        return_exceptions=True,
    )

    for coin, quote in zip(balances, quotes):
        if isinstance(quote, BaseException):
            logger.warning("swap_quote_failed", denom=coin.denom, ask_denom=to_denom, error=str(quote))
            raise quote

    messages = []
    for coin, quote in zip(balances, quotes):
        if quote.amount > threshold:
            messages.append(MsgSwap(trader=from_address, offer_coin=coin, ask_denom=to_denom))
        else:
            logger.debug("sweep_skipped", denom=coin.denom, quoted=str(quote), threshold=str(threshold))

    logger.info("sweep_generated", address=from_address, ask_denom=to_denom, messages=len(messages))
    return messages
