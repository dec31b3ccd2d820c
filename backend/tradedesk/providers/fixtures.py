from __future__ import annotations

from tradedesk.errors import EmptyPayloadError
from tradedesk.providers.base import Provider
from tradedesk.schemas.asset import AssetSnapshot, SearchResult


STOCK_QUOTES: list[dict] = [
    {"symbol": "AAPL", "name": "Apple Inc.", "price": 175.43, "change": 2.31, "change_percent": 1.33},
    {"symbol": "GOOGL", "name": "Alphabet Inc.", "price": 2847.52, "change": -12.45, "change_percent": -0.44},
    {"symbol": "MSFT", "name": "Microsoft Corp.", "price": 414.78, "change": 8.92, "change_percent": 2.20},
    {"symbol": "TSLA", "name": "Tesla Inc.", "price": 238.45, "change": -5.67, "change_percent": -2.32},
    {"symbol": "NVDA", "name": "NVIDIA Corp.", "price": 875.28, "change": 23.45, "change_percent": 2.75},
]

_FIXTURE_VOLUME = 2_400_000.0


def stock_choices() -> list[SearchResult]:
    return [
        SearchResult(id=quote["symbol"], symbol=quote["symbol"], name=quote["name"])
        for quote in STOCK_QUOTES
    ]


class FixtureStockProvider(Provider[AssetSnapshot]):
    name = "Fixtures"

    def _fetch(self, identifier: str) -> AssetSnapshot:
        symbol = identifier.strip().upper()
        for quote in STOCK_QUOTES:
            if quote["symbol"] == symbol:
                return AssetSnapshot(
                    id=symbol,
                    symbol=symbol,
                    name=quote["name"],
                    price=quote["price"],
                    change=quote["change"],
                    change_percent=quote["change_percent"],
                    volume=_FIXTURE_VOLUME,
                    currency="usd",
                    provider=self.name,
                )
        raise EmptyPayloadError(self.name, f"no fixture quote for {symbol}")
