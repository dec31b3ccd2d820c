from __future__ import annotations

from tradedesk.config.settings import settings
from tradedesk.errors import EmptyPayloadError, MalformedPayloadError
from tradedesk.providers.base import Provider
from tradedesk.providers.http import build_url, get_json_via_relay, to_float
from tradedesk.schemas.asset import AssetSnapshot


_CHART_PATH = "/v8/finance/chart/{symbol}"


def normalize_symbol(identifier: str) -> str:
    return identifier.strip().upper()


class YahooQuoteProvider(Provider[AssetSnapshot]):
    """Stock quotes from the Yahoo chart endpoint, always via the CORS relay."""

    name = "Yahoo Finance (Proxy)"

    def _fetch(self, identifier: str) -> AssetSnapshot:
        symbol = normalize_symbol(identifier)
        target = build_url(
            settings.providers.yahoo_base_url,
            _CHART_PATH.format(symbol=symbol),
            {"interval": "1d", "range": "1d"},
        )
        payload = get_json_via_relay(target, self.name)
        chart = payload.get("chart") if isinstance(payload, dict) else None
        if not isinstance(chart, dict):
            raise MalformedPayloadError(self.name, "payload has no chart")
        error = chart.get("error")
        if error:
            description = error.get("description") if isinstance(error, dict) else str(error)
            raise EmptyPayloadError(self.name, description or f"no chart for {symbol}")
        results = chart.get("result")
        if not isinstance(results, list) or not results:
            raise EmptyPayloadError(self.name, f"no chart for {symbol}")
        meta = results[0].get("meta") if isinstance(results[0], dict) else None
        if not isinstance(meta, dict):
            raise MalformedPayloadError(self.name, "chart result has no meta")

        price = to_float(meta.get("regularMarketPrice"))
        if price is None:
            raise MalformedPayloadError(self.name, f"no market price for {symbol}")
        previous = to_float(meta.get("chartPreviousClose"))
        if previous is None:
            previous = to_float(meta.get("previousClose"))
        change = price - previous if previous else 0.0
        percent = change / previous * 100 if previous else 0.0
        return AssetSnapshot(
            id=symbol,
            symbol=(meta.get("symbol") or symbol).upper(),
            name=meta.get("longName") or meta.get("shortName") or symbol,
            price=price,
            change=change,
            change_percent=percent,
            volume=to_float(meta.get("regularMarketVolume")),
            currency=(meta.get("currency") or "usd").lower(),
            provider=self.name,
        )
