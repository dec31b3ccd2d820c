from __future__ import annotations

from tradedesk.config.settings import settings
from tradedesk.errors import EmptyPayloadError, MalformedPayloadError, RateLimitedError
from tradedesk.providers.base import Provider
from tradedesk.providers.http import build_url, get_json, get_json_via_relay, to_float
from tradedesk.schemas.asset import AssetSnapshot, QuoteUpdate, SearchResult, TrendingAsset


_COIN_PATH = "/api/v3/coins/{id}"
_MARKETS_PATH = "/api/v3/coins/markets"
_SIMPLE_PRICE_PATH = "/api/v3/simple/price"
_SEARCH_PATH = "/api/v3/search"
_TRENDING_PATH = "/api/v3/search/trending"

SYMBOL_TO_ID = {
    "btc": "bitcoin",
    "eth": "ethereum",
    "bnb": "binancecoin",
    "ton": "the-open-network",
    "avax": "avalanche-2",
    "ada": "cardano",
    "dot": "polkadot",
    "sol": "solana",
    "matic": "polygon",
}

# CoinCap ids that differ on CoinGecko.
COINCAP_TO_COINGECKO = {
    "binance-coin": "binancecoin",
    "toncoin": "the-open-network",
    "avalanche": "avalanche-2",
}


def normalize_id(identifier: str) -> str:
    key = identifier.strip().lower()
    key = SYMBOL_TO_ID.get(key, key)
    return COINCAP_TO_COINGECKO.get(key, key)


def _base_url() -> str:
    return settings.providers.coingecko_base_url


def _check_error_status(name: str, payload: dict) -> None:
    status = payload.get("status")
    if isinstance(status, dict) and status.get("error_code"):
        message = status.get("error_message") or f"error code {status['error_code']}"
        if status["error_code"] == 429:
            raise RateLimitedError(name, message)
        raise MalformedPayloadError(name, message)


def _in_currency(values: object, currency: str) -> float | None:
    """Pick ``currency`` from a per-currency mapping, converting usd if absent."""
    if not isinstance(values, dict):
        return None
    value = to_float(values.get(currency))
    if value is not None:
        return value
    usd = to_float(values.get("usd"))
    if usd is None:
        return None
    return usd * settings.currency_rates.get(currency, 1.0)


class CoinGeckoAssetProvider(Provider[AssetSnapshot]):
    name = "CoinGecko"

    def __init__(self, currency: str = "usd") -> None:
        self.currency = currency.lower()

    def _fetch(self, identifier: str) -> AssetSnapshot:
        coin_id = normalize_id(identifier)
        url = build_url(_base_url(), _COIN_PATH.format(id=coin_id))
        payload = get_json(url, self.name)
        if not isinstance(payload, dict):
            raise MalformedPayloadError(self.name, "unexpected payload shape")
        _check_error_status(self.name, payload)
        market_data = payload.get("market_data")
        if not payload.get("id") or not isinstance(market_data, dict):
            raise EmptyPayloadError(self.name, f"no market data for {coin_id!r}")

        change = _in_currency(market_data.get("price_change_24h_in_currency"), self.currency)
        if change is None:
            change = to_float(market_data.get("price_change_24h")) or 0.0
        image = payload.get("image")
        return AssetSnapshot(
            id=payload["id"],
            symbol=(payload.get("symbol") or "").upper(),
            name=payload.get("name") or "Unknown",
            price=_in_currency(market_data.get("current_price"), self.currency) or 0.0,
            change=change,
            change_percent=to_float(market_data.get("price_change_percentage_24h")) or 0.0,
            volume=_in_currency(market_data.get("total_volume"), self.currency),
            market_cap=_in_currency(market_data.get("market_cap"), self.currency),
            image=image.get("small") if isinstance(image, dict) else None,
            currency=self.currency,
            provider=self.name,
        )


class CoinGeckoMarketsProvider(Provider[AssetSnapshot]):
    """CoinGecko ``coins/markets`` fetched through the CORS relay."""

    name = "CoinGecko (Proxy)"

    def __init__(self, currency: str = "usd") -> None:
        self.currency = currency.lower()

    def _fetch(self, identifier: str) -> AssetSnapshot:
        coin_id = normalize_id(identifier)
        target = build_url(
            _base_url(), _MARKETS_PATH, {"vs_currency": self.currency, "ids": coin_id}
        )
        payload = get_json_via_relay(target, self.name)
        if isinstance(payload, dict):
            _check_error_status(self.name, payload)
        if not isinstance(payload, list) or not payload:
            raise EmptyPayloadError(self.name, f"no market entry for {coin_id!r}")
        coin = payload[0]
        if not isinstance(coin, dict) or not coin.get("id"):
            raise MalformedPayloadError(self.name, "market entry has no id")
        return AssetSnapshot(
            id=coin["id"],
            symbol=(coin.get("symbol") or "").upper(),
            name=coin.get("name") or "Unknown",
            price=to_float(coin.get("current_price")) or 0.0,
            change=to_float(coin.get("price_change_24h")) or 0.0,
            change_percent=to_float(coin.get("price_change_percentage_24h")) or 0.0,
            volume=to_float(coin.get("total_volume")),
            market_cap=to_float(coin.get("market_cap")),
            image=coin.get("image"),
            currency=self.currency,
            provider=self.name,
        )


class CoinGeckoQuoteProvider(Provider[QuoteUpdate]):
    name = "CoinGecko"

    def __init__(self, currency: str = "usd") -> None:
        self.currency = currency.lower()

    def _fetch(self, identifier: str) -> QuoteUpdate:
        coin_id = normalize_id(identifier)
        cur = self.currency
        url = build_url(
            _base_url(),
            _SIMPLE_PRICE_PATH,
            {
                "ids": coin_id,
                "vs_currencies": cur,
                "include_24hr_change": "true",
                "include_market_cap": "true",
                "include_24hr_vol": "true",
            },
        )
        payload = get_json(url, self.name)
        if not isinstance(payload, dict):
            raise MalformedPayloadError(self.name, "unexpected payload shape")
        _check_error_status(self.name, payload)
        entry = payload.get(coin_id)
        if not isinstance(entry, dict) or not entry:
            raise EmptyPayloadError(self.name, f"no price entry for {coin_id!r}")
        return QuoteUpdate(
            price=to_float(entry.get(cur)) or None,
            change_percent=to_float(entry.get(f"{cur}_24h_change")),
            volume=to_float(entry.get(f"{cur}_24h_vol")) or None,
            market_cap=to_float(entry.get(f"{cur}_market_cap")) or None,
        )


class CoinGeckoSearchProvider(Provider[list[SearchResult]]):
    name = "CoinGecko"

    def _fetch(self, identifier: str) -> list[SearchResult]:
        target = build_url(_base_url(), _SEARCH_PATH, {"query": identifier})
        payload = get_json_via_relay(target, self.name)
        if not isinstance(payload, dict) or not isinstance(payload.get("coins"), list):
            raise MalformedPayloadError(self.name, "search payload has no coins")
        results: list[SearchResult] = []
        for coin in payload["coins"][:5]:
            if not isinstance(coin, dict) or not coin.get("id"):
                continue
            results.append(
                SearchResult(
                    id=coin["id"],
                    symbol=(coin.get("symbol") or "").upper(),
                    name=coin.get("name") or coin["id"],
                    image=coin.get("thumb"),
                )
            )
        return results


def fetch_trending(limit: int = 6) -> list[TrendingAsset]:
    name = "CoinGecko"
    payload = get_json_via_relay(build_url(_base_url(), _TRENDING_PATH), name)
    if not isinstance(payload, dict) or not isinstance(payload.get("coins"), list):
        raise MalformedPayloadError(name, "trending payload has no coins")

    trending: list[TrendingAsset] = []
    for coin in payload["coins"][:limit]:
        item = coin.get("item") if isinstance(coin, dict) else None
        if not isinstance(item, dict) or not item.get("id"):
            continue
        rank = item.get("market_cap_rank")
        trending.append(
            TrendingAsset(
                id=item["id"],
                name=item.get("name") or item["id"],
                symbol=(item.get("symbol") or "").upper(),
                market_cap_rank=rank if isinstance(rank, int) else None,
                thumb=item.get("thumb"),
                price_btc=to_float(item.get("price_btc")),
            )
        )
    return trending
