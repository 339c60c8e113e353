#!/usr/bin/env python3
"""
Check the bank balances of an account.

The account is either given directly or derived from TERRA_PHRASE.
"""

import asyncio
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from terrakit.config import TerraConfig
from terrakit.keys.private import PrivateKey
from terrakit.lcd.client import LCDClient


async def check_balance(config: TerraConfig, address: str, to_denom: str = None):
    """Print balances at the address, optionally quoted into to_denom."""
    print(f"\n📬 Address: {address}")

    async with LCDClient(config) as lcd:
        balances = await lcd.get_balances(address)

        if not balances:
            print(f"\n❌ No balance found. Please fund the address:")
            print(f"   Address: {address}")
            return []

        print(f"\n💰 Balances:")
        for coin in balances:
            line = f"   {coin.amount} {coin.denom}"
            if to_denom and coin.denom != to_denom:
                quote = await lcd.get_swap_rate(coin, to_denom)
                line += f"  (~{quote.amount} {quote.denom})"
            print(line)

        return balances


def main():
    parser = argparse.ArgumentParser(description="Check account balances")
    parser.add_argument(
        "address",
        nargs="?",
        help="Account address (default: derived from TERRA_PHRASE)"
    )
    parser.add_argument(
        "--lcd", "-l",
        help="LCD endpoint (default: TERRA_LCD_URL)"
    )
    parser.add_argument(
        "--to-denom", "-t",
        help="Quote every balance into this denom"
    )

    args = parser.parse_args()

    overrides = {"lcd_url": args.lcd} if args.lcd else {}
    config = TerraConfig(**overrides)

    address = args.address
    if address is None:
        if config.phrase is None:
            print("❌ Error: pass an address or set TERRA_PHRASE")
            sys.exit(1)
        key = PrivateKey.from_words(
            config.phrase.get_secret_value(),
            config.seed_passphrase.get_secret_value(),
            account=config.account,
            index=config.index,
            coin_type=config.coin_type,
        )
        address = key.public_key().account()

    asyncio.run(check_balance(config, address, args.to_denom))


if __name__ == "__main__":
    main()
