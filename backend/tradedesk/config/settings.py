from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRADEDESK_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    coincap_base_url: str = "https://api.coincap.io"
    coingecko_base_url: str = "https://api.coingecko.com"
    yahoo_base_url: str = "https://query1.finance.yahoo.com"
    relay_base_url: str = "https://api.allorigins.win"
    request_timeout_seconds: float = 10.0


class RefreshSettings(BaseModel):
    interval_seconds: float = 30.0


class ForecastSettings(BaseModel):
    daily_steps: int = 30
    hourly_steps: int = 48
    daily_signal_limit: int = 3
    hourly_signal_limit: int = 5


class LogSettings(BaseModel):
    level: str = "INFO"
    format: str = "console"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRADEDESK_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    default_crypto: str = Field(
        default="bitcoin",
        validation_alias=AliasChoices("DEFAULT_CRYPTO", "TRADEDESK_DEFAULT_CRYPTO"),
    )
    default_stock: str = Field(
        default="AAPL",
        validation_alias=AliasChoices("DEFAULT_STOCK", "TRADEDESK_DEFAULT_STOCK"),
    )
    default_currency: str = "usd"
    currency_rates: Dict[str, float] = Field(
        default_factory=lambda: {"usd": 1.0, "eur": 0.92, "sek": 10.50}
    )
    currency_symbols: Dict[str, str] = Field(
        default_factory=lambda: {"usd": "$", "eur": "€", "sek": "kr"}
    )
    fetch_error_message: str = (
        "Unable to fetch data from any provider. Please try again later."
    )

    refresh: RefreshSettings = Field(default_factory=RefreshSettings)
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)


settings = Settings()
