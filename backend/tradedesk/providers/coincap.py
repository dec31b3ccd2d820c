from __future__ import annotations

from tradedesk.config.settings import settings
from tradedesk.errors import EmptyPayloadError, MalformedPayloadError
from tradedesk.providers.base import Provider
from tradedesk.providers.http import build_url, get_json, to_float
from tradedesk.schemas.asset import AssetSnapshot, QuoteUpdate, SearchResult


_ASSET_PATH = "/v2/assets/{id}"
_SEARCH_PATH = "/v2/assets"

SYMBOL_TO_ID = {
    "btc": "bitcoin",
    "eth": "ethereum",
    "bnb": "binance-coin",
    "ton": "toncoin",
    "avax": "avalanche",
    "ada": "cardano",
    "dot": "polkadot",
    "sol": "solana",
    "matic": "polygon",
}


def normalize_id(identifier: str) -> str:
    key = identifier.strip().lower()
    return SYMBOL_TO_ID.get(key, key)


def _rate(currency: str) -> float:
    rate = settings.currency_rates.get(currency.lower())
    if rate is None:
        raise MalformedPayloadError("CoinCap", f"no conversion rate for {currency!r}")
    return rate


def _fetch_asset(name: str, identifier: str) -> dict:
    asset_id = normalize_id(identifier)
    url = build_url(settings.providers.coincap_base_url, _ASSET_PATH.format(id=asset_id))
    payload = get_json(url, name)
    if not isinstance(payload, dict):
        raise MalformedPayloadError(name, "unexpected payload shape")
    data = payload.get("data")
    if not isinstance(data, dict) or not data.get("id"):
        raise EmptyPayloadError(name, f"no asset data for {asset_id!r}")
    return data


def normalize_asset(data: dict, currency: str, rate: float) -> AssetSnapshot:
    price_usd = to_float(data.get("priceUsd")) or 0.0
    percent = to_float(data.get("changePercent24Hr")) or 0.0
    volume = to_float(data.get("volumeUsd24Hr"))
    market_cap = to_float(data.get("marketCapUsd"))
    return AssetSnapshot(
        id=data["id"],
        symbol=(data.get("symbol") or "").upper(),
        name=data.get("name") or "Unknown",
        price=price_usd * rate,
        change=price_usd * percent / 100 * rate,
        change_percent=percent,
        volume=volume * rate if volume is not None else None,
        market_cap=market_cap * rate if market_cap is not None else None,
        currency=currency,
        provider="CoinCap",
    )


class CoinCapAssetProvider(Provider[AssetSnapshot]):
    name = "CoinCap"

    def __init__(self, currency: str = "usd") -> None:
        self.currency = currency.lower()

    def _fetch(self, identifier: str) -> AssetSnapshot:
        rate = _rate(self.currency)
        data = _fetch_asset(self.name, identifier)
        return normalize_asset(data, self.currency, rate)


class CoinCapQuoteProvider(Provider[QuoteUpdate]):
    name = "CoinCap"

    def __init__(self, currency: str = "usd") -> None:
        self.currency = currency.lower()

    def _fetch(self, identifier: str) -> QuoteUpdate:
        rate = _rate(self.currency)
        data = _fetch_asset(self.name, identifier)
        price = to_float(data.get("priceUsd"))
        volume = to_float(data.get("volumeUsd24Hr"))
        market_cap = to_float(data.get("marketCapUsd"))
        return QuoteUpdate(
            price=price * rate if price else None,
            change_percent=to_float(data.get("changePercent24Hr")),
            volume=volume * rate if volume else None,
            market_cap=market_cap * rate if market_cap else None,
        )


class CoinCapSearchProvider(Provider[list[SearchResult]]):
    name = "CoinCap"

    def _fetch(self, identifier: str) -> list[SearchResult]:
        url = build_url(
            settings.providers.coincap_base_url,
            _SEARCH_PATH,
            {"search": identifier, "limit": "5"},
        )
        payload = get_json(url, self.name)
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise MalformedPayloadError(self.name, "search payload has no data list")
        results: list[SearchResult] = []
        for coin in payload["data"]:
            if not isinstance(coin, dict) or not coin.get("id"):
                continue
            results.append(
                SearchResult(
                    id=coin["id"],
                    symbol=(coin.get("symbol") or "").upper(),
                    name=coin.get("name") or coin["id"],
                )
            )
        return results
