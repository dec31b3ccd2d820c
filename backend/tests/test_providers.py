import json
from unittest.mock import patch

from tradedesk.errors import MalformedPayloadError, ProviderError
from tradedesk.providers import coincap, coingecko, yahoo
from tradedesk.providers.base import SnapshotQuoteProvider
from tradedesk.providers.fixtures import FixtureStockProvider
from tradedesk.providers.http import get_json_via_relay


def test_coincap_converts_usd_to_panel_currency() -> None:
    payload = {
        "data": {
            "id": "ethereum",
            "symbol": "eth",
            "name": "Ethereum",
            "priceUsd": "2000",
            "changePercent24Hr": "5",
            "volumeUsd24Hr": "1000",
            "marketCapUsd": None,
        }
    }
    with patch("tradedesk.providers.coincap.get_json", return_value=payload) as get_mock:
        result = coincap.CoinCapAssetProvider("eur").fetch("ETH")

    assert get_mock.call_args.args[0].endswith("/v2/assets/ethereum")
    assert result.ok
    snapshot = result.data
    assert snapshot.symbol == "ETH"
    assert snapshot.price == 2000 * 0.92
    assert snapshot.change == 100 * 0.92
    assert snapshot.change_percent == 5
    assert snapshot.volume == 1000 * 0.92
    assert snapshot.market_cap is None
    assert snapshot.currency == "eur"


def test_coincap_missing_asset_is_empty_result() -> None:
    with patch("tradedesk.providers.coincap.get_json", return_value={"error": "not found"}):
        result = coincap.CoinCapAssetProvider().fetch("doesnotexist123")

    assert not result.ok
    assert result.status == "empty"


def test_coingecko_rate_limit_in_body() -> None:
    payload = {"status": {"error_code": 429, "error_message": "You've exceeded the Rate Limit"}}
    with patch("tradedesk.providers.coingecko.get_json", return_value=payload):
        result = coingecko.CoinGeckoAssetProvider().fetch("bitcoin")

    assert result.status == "rate_limited"
    assert result.reason == "You've exceeded the Rate Limit"


def test_coingecko_ids_are_translated_from_coincap() -> None:
    assert coingecko.normalize_id("binance-coin") == "binancecoin"
    assert coingecko.normalize_id("TON") == "the-open-network"
    assert coingecko.normalize_id("bitcoin") == "bitcoin"


def test_coingecko_quote_reads_currency_keys() -> None:
    payload = {
        "avalanche-2": {
            "usd": 30.5,
            "usd_24h_change": -2.0,
            "usd_24h_vol": 1000.0,
        }
    }
    with patch("tradedesk.providers.coingecko.get_json", return_value=payload):
        result = coingecko.CoinGeckoQuoteProvider("usd").fetch("avalanche")

    assert result.ok
    assert result.data.price == 30.5
    assert result.data.change_percent == -2.0
    assert result.data.market_cap is None


def test_relay_contents_are_parsed_twice() -> None:
    inner = [{"id": "solana", "symbol": "sol", "name": "Solana", "current_price": 150}]
    wrapper = {"contents": json.dumps(inner), "status": {"http_code": 200}}
    with patch("tradedesk.providers.http.get_json", return_value=wrapper) as get_mock:
        payload = get_json_via_relay("https://api.coingecko.com/api/v3/coins/markets?ids=solana", "relay")

    assert payload == inner
    relay_url = get_mock.call_args.args[0]
    assert relay_url.startswith("https://api.allorigins.win/get?url=")
    assert "https%3A%2F%2Fapi.coingecko.com" in relay_url


def test_relay_without_contents_is_malformed() -> None:
    with patch("tradedesk.providers.http.get_json", return_value={"status": {}}):
        try:
            get_json_via_relay("https://example.test", "relay")
        except MalformedPayloadError as exc:
            assert exc.provider == "relay"
        else:
            raise AssertionError("expected MalformedPayloadError")


def test_coingecko_markets_uses_relay() -> None:
    markets = [
        {
            "id": "solana",
            "symbol": "sol",
            "name": "Solana",
            "current_price": 150,
            "price_change_24h": 3,
            "price_change_percentage_24h": 2,
            "total_volume": 10,
            "market_cap": 20,
            "image": "https://example.test/sol.png",
        }
    ]
    with patch("tradedesk.providers.coingecko.get_json_via_relay", return_value=markets):
        result = coingecko.CoinGeckoMarketsProvider("usd").fetch("sol")

    assert result.ok
    assert result.data.provider == "CoinGecko (Proxy)"
    assert result.data.price == 150


def test_trending_keeps_first_six() -> None:
    coins = [
        {"item": {"id": f"coin-{i}", "name": f"Coin {i}", "symbol": f"c{i}", "market_cap_rank": i, "thumb": "t", "price_btc": 0.1}}
        for i in range(10)
    ]
    with patch("tradedesk.providers.coingecko.get_json_via_relay", return_value={"coins": coins}):
        trending = coingecko.fetch_trending()

    assert [coin.id for coin in trending] == [f"coin-{i}" for i in range(6)]
    assert trending[0].symbol == "C0"


def test_yahoo_quote_from_chart_meta() -> None:
    payload = {
        "chart": {
            "result": [
                {
                    "meta": {
                        "symbol": "MSFT",
                        "currency": "USD",
                        "regularMarketPrice": 420.0,
                        "chartPreviousClose": 400.0,
                        "regularMarketVolume": 123456,
                        "longName": "Microsoft Corporation",
                    }
                }
            ],
            "error": None,
        }
    }
    with patch("tradedesk.providers.yahoo.get_json_via_relay", return_value=payload):
        result = yahoo.YahooQuoteProvider().fetch("msft")

    assert result.ok
    assert result.data.id == "MSFT"
    assert result.data.change == 20.0
    assert result.data.change_percent == 5.0
    assert result.data.volume == 123456


def test_yahoo_reports_unknown_symbol() -> None:
    payload = {"chart": {"result": None, "error": {"code": "Not Found", "description": "No data found"}}}
    with patch("tradedesk.providers.yahoo.get_json_via_relay", return_value=payload):
        result = yahoo.YahooQuoteProvider().fetch("ZZZZ")

    assert result.status == "empty"
    assert result.reason == "No data found"


def test_fixture_provider_and_quote_adapter() -> None:
    provider = FixtureStockProvider()
    assert provider.fetch("tsla").data.price == 238.45
    assert provider.fetch("UNKNOWN").status == "empty"

    update = SnapshotQuoteProvider(provider).fetch("NVDA")
    assert update.ok
    assert update.provider == "Fixtures"
    assert update.data.price == 875.28
    assert update.data.change == 23.45


def test_network_errors_become_failed_results() -> None:
    with patch(
        "tradedesk.providers.coincap.get_json",
        side_effect=ProviderError("CoinCap", "network error: timed out"),
    ):
        result = coincap.CoinCapQuoteProvider().fetch("bitcoin")

    assert result.status == "error"
    assert result.data is None
