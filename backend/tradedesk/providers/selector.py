from __future__ import annotations

from typing import Sequence, TypeVar

from tradedesk.errors import NoProviderAvailableError
from tradedesk.log import get_logger
from tradedesk.providers import coincap, coingecko, fixtures, yahoo
from tradedesk.providers.base import Provider, SnapshotQuoteProvider
from tradedesk.schemas.asset import AssetSnapshot, QuoteUpdate, SearchResult
from tradedesk.schemas.provider import ProviderResult

T = TypeVar("T")

logger = get_logger(__name__)


def _attempt(provider: Provider[T], identifier: str) -> ProviderResult:
    try:
        return provider.fetch(identifier)
    except (KeyError, TypeError, ValueError, AttributeError, IndexError) as exc:
        # Normalization blew up on an unexpected payload shape.
        return ProviderResult(
            provider=provider.name,
            identifier=identifier,
            status="error",
            reason=f"malformed payload: {exc!r}",
        )
    except Exception as exc:
        logger.warning(
            "provider.unexpected_error",
            provider=provider.name,
            identifier=identifier,
            exc_info=True,
        )
        return ProviderResult(
            provider=provider.name,
            identifier=identifier,
            status="error",
            reason=f"unexpected error: {exc!r}",
        )


def fetch_with_fallback(identifier: str, providers: Sequence[Provider[T]]) -> T:
    """Return the data of the first provider that succeeds.

    Providers are tried strictly in order, one request each. When all of them
    fail, ``NoProviderAvailableError`` carries every failed attempt.
    """
    attempts: list[ProviderResult] = []
    for provider in providers:
        logger.info("provider.attempt", provider=provider.name, identifier=identifier)
        result = _attempt(provider, identifier)
        if result.ok:
            logger.info("provider.succeeded", provider=provider.name, identifier=identifier)
            return result.data
        logger.warning(
            "provider.failed",
            provider=provider.name,
            identifier=identifier,
            status=result.status,
            reason=result.reason,
        )
        attempts.append(result)

    error = NoProviderAvailableError(identifier, attempts)
    logger.error("provider.all_failed", identifier=identifier, last_reason=error.last_reason)
    raise error


def crypto_providers(currency: str) -> list[Provider[AssetSnapshot]]:
    return [
        coincap.CoinCapAssetProvider(currency),
        coingecko.CoinGeckoAssetProvider(currency),
        coingecko.CoinGeckoMarketsProvider(currency),
    ]


def crypto_refresh_providers(currency: str) -> list[Provider[QuoteUpdate]]:
    return [
        coincap.CoinCapQuoteProvider(currency),
        coingecko.CoinGeckoQuoteProvider(currency),
    ]


def crypto_search_providers() -> list[Provider[list[SearchResult]]]:
    return [
        coincap.CoinCapSearchProvider(),
        coingecko.CoinGeckoSearchProvider(),
    ]


def stock_providers() -> list[Provider[AssetSnapshot]]:
    return [yahoo.YahooQuoteProvider(), fixtures.FixtureStockProvider()]


def stock_refresh_providers() -> list[Provider[QuoteUpdate]]:
    # Fixtures stay out of the refresh chain; a failed tick keeps the live quote.
    return [SnapshotQuoteProvider(yahoo.YahooQuoteProvider())]
