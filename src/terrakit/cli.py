"""
Command-line interface for terrakit.

Provides commands to store, instantiate, migrate, execute and query smart
contracts, plus key utilities.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from terrakit import __version__
from terrakit.client import TerraClient
from terrakit.config import TerraConfig, set_config
from terrakit.core.coin import Coin
from terrakit.errors import ConfigurationError, ValidationError
from terrakit.keys.private import PrivateKey

logger = structlog.get_logger(__name__)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="terrakit",
        description="Sign and submit Terra transactions",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Network
    parser.add_argument("--lcd", dest="lcd_url", help="LCD URL (env: TERRA_LCD_URL)")
    parser.add_argument("--chain-id", dest="chain_id", help="Chain ID (env: TERRA_CHAIN_ID)")

    # Key
    parser.add_argument("--phrase", help="Mnemonic of the signing key (env: TERRA_PHRASE)")
    parser.add_argument("--seed", dest="seed_passphrase", help="BIP-39 passphrase (env: TERRA_SEED_PASSPHRASE)")
    parser.add_argument("--account", type=int, help="Derivation account (default: 0)")
    parser.add_argument("--index", type=int, help="Derivation index (default: 0)")

    # Fees
    parser.add_argument("--fees", help="Fixed fee coins, e.g. 50000uluna (requires --gas)")
    parser.add_argument("--gas", type=int, help="Gas limit used with --fees")
    parser.add_argument("--gas-prices", dest="gas_prices", help="Gas price for estimates, e.g. 0.15uluna")
    parser.add_argument("--gas-adjustment", dest="gas_adjustment", type=float, help="Estimate adjustment factor")

    # Confirmation polling
    parser.add_argument(
        "--retries",
        type=int,
        help="Amount of times to retry fetching a hash (default: 5)",
    )
    parser.add_argument(
        "--sleep",
        dest="sleep_seconds",
        type=float,
        help="Seconds to wait before retrying to fetch a hash (default: 3)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs in JSON format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Migrate command
    migrate_parser = subparsers.add_parser("migrate", help="Migrate a contract to new code")
    migrate_parser.add_argument("contract", help="Contract address")
    migrate_parser.add_argument("wasm", help="Code ID, or a .wasm file to store first")
    migrate_parser.add_argument("migrate", nargs="?", help="Migrate message: JSON or a path to a JSON file")

    # Exec command
    exec_parser = subparsers.add_parser("exec", help="Execute a contract message")
    exec_parser.add_argument("contract", help="Contract address")
    exec_parser.add_argument("exec", help="Execute message: JSON or a path to a JSON file")
    exec_parser.add_argument("coins", nargs="?", help="Coins sent along, e.g. 1000uluna,20ukrw")

    # Store command
    store_parser = subparsers.add_parser("store", help="Store contract code")
    store_parser.add_argument("wasm", help="Path to the .wasm file")

    # Instantiate command
    instantiate_parser = subparsers.add_parser("instantiate", help="Instantiate a contract")
    instantiate_parser.add_argument("wasm", help="Code ID, or a .wasm file to store first")
    instantiate_parser.add_argument("json", help="Init message: JSON or a path to a JSON file")
    instantiate_parser.add_argument(
        "admin",
        nargs="?",
        help="Contract admin: a terra1 address, 'same' for the signer, or 'none'",
    )
    instantiate_parser.add_argument("coins", nargs="?", help="Coins sent along, e.g. 1000uluna")

    # Query command
    query_parser = subparsers.add_parser("query", help="Query a contract")
    query_parser.add_argument("contract", help="Contract address")
    query_parser.add_argument("query", help="Query message: JSON or a path to a JSON file")

    # Keys commands
    keys_parser = subparsers.add_parser("keys", help="Key utilities")
    keys_subparsers = keys_parser.add_subparsers(dest="keys_command", help="Key command")
    keys_subparsers.add_parser("new", help="Generate a new 24-word mnemonic")
    keys_subparsers.add_parser("show", help="Show the addresses of the configured key")

    return parser


def build_config(args: argparse.Namespace) -> TerraConfig:
    """Layer the command-line options over the environment configuration."""
    overrides = {
        name: getattr(args, name)
        for name in (
            "lcd_url",
            "chain_id",
            "phrase",
            "seed_passphrase",
            "account",
            "index",
            "fees",
            "gas",
            "gas_prices",
            "gas_adjustment",
            "retries",
            "sleep_seconds",
        )
        if getattr(args, name, None) is not None
    }
    overrides["log_level"] = args.log_level
    overrides["log_json"] = args.log_json
    return TerraConfig(**overrides)


def read_json_arg(value: str) -> str:
    """Return the JSON text of an argument that is inline JSON or a file path."""
    path = Path(value)
    if not value.lstrip().startswith(("{", "[")) and path.is_file():
        return path.read_text(encoding="utf-8")
    return value


def parse_coins_arg(value: Optional[str]) -> List[Coin]:
    return Coin.parse_coins(value) if value else []


def require_contract(contract: str) -> str:
    if not contract.startswith("terra1"):
        raise ValidationError(f"Invalid contract address: {contract}")
    return contract


def load_key(config: TerraConfig) -> PrivateKey:
    """Derive the signing key from configuration."""
    if config.phrase is None:
        raise ConfigurationError("No mnemonic given; use --phrase or TERRA_PHRASE")

    return PrivateKey.from_words(
        config.phrase.get_secret_value(),
        config.seed_passphrase.get_secret_value(),
        account=config.account,
        index=config.index,
        coin_type=config.coin_type,
    )


def resolve_admin(admin: Optional[str], key: PrivateKey) -> Optional[str]:
    """
    Interpret the admin argument of instantiate.

    'same' means the signer, a terra1 address is used as is, and 'none' or
    no value leaves the contract without an admin.
    """
    if admin is None or admin == "none":
        return None
    if admin == "same":
        return key.public_key().account()
    if admin.startswith("terra1"):
        return admin
    raise ValidationError(f"Invalid admin: {admin}")


async def resolve_code_id(terra: TerraClient, key: PrivateKey, wasm: str) -> int:
    """Use wasm as a code id, or store the file it names and use the new id."""
    if wasm.isdigit():
        return int(wasm)
    return await terra.store_code(key, Path(wasm).read_bytes())


async def run_command(args: argparse.Namespace, config: TerraConfig) -> None:
    """Run a contract command."""
    if args.command == "query":
        contract = require_contract(args.contract)
        async with TerraClient(config) as terra:
            result = await terra.query(contract, read_json_arg(args.query))
        print(json.dumps(result, indent=2))
        return

    key = load_key(config)

    async with TerraClient(config) as terra:
        if args.command == "store":
            code_id = await terra.store_code(key, Path(args.wasm).read_bytes())
            print(f"Contract: stored with code {code_id}")

        elif args.command == "instantiate":
            code_id = await resolve_code_id(terra, key, args.wasm)
            contract, code_id = await terra.instantiate(
                key,
                code_id,
                read_json_arg(args.json),
                coins=parse_coins_arg(args.coins),
                admin=resolve_admin(args.admin, key),
            )
            print(f"Contract: {contract} running code {code_id}")

        elif args.command == "migrate":
            contract = require_contract(args.contract)
            code_id = await resolve_code_id(terra, key, args.wasm)
            migrate_msg = read_json_arg(args.migrate) if args.migrate else None
            contract, code_id = await terra.migrate(key, contract, code_id, migrate_msg)
            print(f"Contract: {contract} Migrated to {code_id}")

        elif args.command == "exec":
            contract = require_contract(args.contract)
            txhash = await terra.execute(
                key,
                contract,
                read_json_arg(args.exec),
                coins=parse_coins_arg(args.coins),
            )
            print(txhash)


def run_keys(args: argparse.Namespace, config: TerraConfig) -> None:
    """Run a key utility command."""
    if args.keys_command == "new":
        key = PrivateKey.generate(coin_type=config.coin_type)
        print(key.words)
        print(key.public_key().account())
        return

    if args.keys_command == "show":
        public_key = load_key(config).public_key()
        print(f"account:          {public_key.account()}")
        print(f"operator:         {public_key.operator_address()}")
        print(f"operator pubkey:  {public_key.operator_address_public_key()}")
        print(f"application key:  {public_key.application_public_key()}")
        print(f"public key:       {public_key.to_base64()}")
        return

    raise ValidationError("try: terrakit keys new|show")


def log_error(error: BaseException) -> None:
    """Log an error and every error in its __cause__ chain."""
    logger.error("command_failed", error=str(error), error_type=type(error).__name__)
    cause = error.__cause__
    while cause is not None:
        logger.error("because", error=str(cause), error_type=type(cause).__name__)
        cause = cause.__cause__


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level, args.log_json)

    try:
        config = build_config(args)
        set_config(config)

        if args.command == "keys":
            run_keys(args, config)
        else:
            asyncio.run(run_command(args, config))
    except Exception as e:
        log_error(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
