"""
Configuration management for terrakit.

Supports configuration via environment variables and .env files.
"""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from terrakit import __version__
from terrakit.errors import ConfigurationError


class TerraConfig(BaseSettings):
    """
    Configuration settings for the LCD client, signer and confirmation poller.

    All settings can be configured via environment variables with the TERRA_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="TERRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Network settings
    lcd_url: str = Field(
        default="https://lcd.terra.dev",
        description="Base URL of the LCD (REST gateway)"
    )
    chain_id: str = Field(
        default="columbus-5",
        description="Chain ID transactions are signed for"
    )
    fcd_url: str = Field(
        default="https://fcd.terra.dev",
        description="Base URL of the FCD serving the gas price table"
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP request timeout in seconds"
    )

    # Key settings
    phrase: Optional[SecretStr] = Field(
        default=None,
        description="Mnemonic of the signing key"
    )
    seed_passphrase: SecretStr = Field(
        default=SecretStr(""),
        description="Optional BIP-39 passphrase"
    )
    account: int = Field(default=0, ge=0, description="Derivation account")
    index: int = Field(default=0, ge=0, description="Derivation index")
    coin_type: int = Field(default=330, ge=0, description="BIP-44 coin type")

    # Gas / fee settings
    fees: Optional[str] = Field(
        default=None,
        description="Fixed fee coins, e.g. 50000uluna"
    )
    gas: Optional[int] = Field(
        default=None,
        ge=0,
        description="Gas limit used with fixed fees"
    )
    gas_prices: Optional[str] = Field(
        default=None,
        description="Gas price coin for estimates, e.g. 0.15uluna"
    )
    gas_adjustment: Optional[float] = Field(
        default=None,
        gt=0,
        description="Adjustment factor applied by the remote estimator"
    )

    # Confirmation polling
    retries: int = Field(
        default=5,
        ge=1,
        description="Attempts made to fetch a broadcast transaction"
    )
    sleep_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Delay between fetch attempts"
    )

    memo: Optional[str] = Field(
        default=None,
        description="Memo used when the caller supplies none"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )

    @property
    def user_agent(self) -> str:
        return f"PFC-terrakit/{__version__}"

    @property
    def default_memo(self) -> str:
        """Memo injected into sign documents without an explicit memo."""
        return self.memo if self.memo is not None else self.user_agent

    def gas_options(self):
        """
        Resolve the configured fee policy.

        Returns:
            GasOptions, or None when no fee setting is present

        Raises:
            ConfigurationError: If fixed and estimate settings are mixed, or
                fixed fees lack a gas limit
        """
        from terrakit.tx.fees import GasOptions

        estimate = self.gas_prices is not None or self.gas_adjustment is not None
        if self.fees and estimate:
            raise ConfigurationError("Configure either fees+gas or gas_prices/gas_adjustment, not both")

        if self.fees:
            if self.gas is None:
                raise ConfigurationError("Fixed fees require a gas limit")
            return GasOptions.create_with_fees(self.fees, self.gas)

        if estimate:
            return GasOptions.create_with_gas_estimate(
                self.gas_prices,
                self.gas_adjustment if self.gas_adjustment is not None else 1.0,
            )

        return None


# Global config instance
_config: Optional[TerraConfig] = None


def get_config() -> TerraConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = TerraConfig()
    return _config


def set_config(config: TerraConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
