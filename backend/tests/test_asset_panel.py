import asyncio
import io
import json
from http.client import RemoteDisconnected
from unittest.mock import patch
from urllib.error import HTTPError, URLError

from tradedesk.config.settings import settings
from tradedesk.errors import NoProviderAvailableError
from tradedesk.panels.asset_panel import CryptoPanel, StockPanel, merge_update
from tradedesk.schemas.asset import AssetSnapshot, QuoteUpdate, SearchResult
from tradedesk.schemas.provider import ProviderResult


def build_snapshot(asset_id: str = "bitcoin", price: float = 60000.0) -> AssetSnapshot:
    return AssetSnapshot(
        id=asset_id,
        symbol="BTC",
        name="Bitcoin",
        price=price,
        change=600.0,
        change_percent=1.0,
        volume=5e9,
        market_cap=1.2e12,
        provider="CoinCap",
    )


def all_failed(identifier: str) -> NoProviderAvailableError:
    attempt = ProviderResult(provider="CoinCap", identifier=identifier, status="error", reason="HTTP 500")
    return NoProviderAvailableError(identifier, [attempt])


def test_select_replaces_snapshot_and_notifies_parent() -> None:
    received: list[AssetSnapshot] = []
    panel = CryptoPanel(on_change=received.append)
    snapshot = build_snapshot(price=65000.0)

    with patch("tradedesk.panels.asset_panel.fetch_with_fallback", return_value=snapshot):
        state = asyncio.run(panel.select("BTC"))

    assert state.snapshot == snapshot
    assert state.identifier == "bitcoin"
    assert state.error is None
    assert state.loading is False
    assert received == [snapshot]


def test_failed_select_keeps_previous_snapshot() -> None:
    panel = CryptoPanel()
    previous = build_snapshot()
    panel.state.snapshot = previous
    panel.state.identifier = "bitcoin"

    with patch(
        "tradedesk.panels.asset_panel.fetch_with_fallback",
        side_effect=all_failed("doesnotexist123"),
    ):
        state = asyncio.run(panel.select("doesnotexist123"))

    assert state.error == settings.fetch_error_message
    assert state.error.startswith("Unable to fetch data")
    assert state.snapshot is previous
    assert state.snapshot.model_dump() == previous.model_dump()
    assert state.identifier == "bitcoin"
    assert state.loading is False


def test_successful_select_clears_previous_error() -> None:
    panel = CryptoPanel()
    panel.state.error = settings.fetch_error_message

    with patch("tradedesk.panels.asset_panel.fetch_with_fallback", return_value=build_snapshot()):
        state = asyncio.run(panel.select("bitcoin"))

    assert state.error is None


def test_blank_identifier_is_ignored() -> None:
    panel = CryptoPanel()
    with patch("tradedesk.panels.asset_panel.fetch_with_fallback") as fetch_mock:
        asyncio.run(panel.select("   "))
    assert fetch_mock.called is False


def test_merge_update_preserves_missing_fields() -> None:
    snapshot = build_snapshot()
    merged = merge_update(snapshot, QuoteUpdate(price=61000.0, change_percent=2.0))

    assert merged.price == 61000.0
    assert merged.change_percent == 2.0
    assert merged.change == 61000.0 * 2.0 / 100
    assert merged.market_cap == snapshot.market_cap
    assert merged.volume == snapshot.volume
    assert merged.name == "Bitcoin"


def test_merge_update_without_fields_returns_same_snapshot() -> None:
    snapshot = build_snapshot()
    assert merge_update(snapshot, QuoteUpdate()) is snapshot


def test_refresh_merges_update_into_current_snapshot() -> None:
    panel = CryptoPanel()
    panel.state.snapshot = build_snapshot()
    panel.state.identifier = "bitcoin"

    with patch(
        "tradedesk.panels.asset_panel.fetch_with_fallback",
        return_value=QuoteUpdate(price=62000.0, volume=6e9),
    ):
        refreshed = asyncio.run(panel.refresh_once())

    assert refreshed is True
    assert panel.state.snapshot.price == 62000.0
    assert panel.state.snapshot.volume == 6e9
    assert panel.state.snapshot.market_cap == 1.2e12


def test_failed_refresh_is_swallowed_and_keeps_stale_data() -> None:
    panel = CryptoPanel()
    stale = build_snapshot()
    panel.state.snapshot = stale
    panel.state.identifier = "bitcoin"

    with patch(
        "tradedesk.panels.asset_panel.fetch_with_fallback",
        side_effect=all_failed("bitcoin"),
    ):
        refreshed = asyncio.run(panel.refresh_once())

    assert refreshed is False
    assert panel.state.snapshot is stale
    assert panel.state.error is None


def test_refresh_without_selection_does_nothing() -> None:
    panel = CryptoPanel()
    with patch("tradedesk.panels.asset_panel.fetch_with_fallback") as fetch_mock:
        assert asyncio.run(panel.refresh_once()) is False
    assert fetch_mock.called is False


def test_live_scope_ticks_and_cancels_timer() -> None:
    panel = CryptoPanel(refresh_interval=0.01)
    panel.state.snapshot = build_snapshot()
    panel.state.identifier = "bitcoin"
    prices = iter(range(1, 1000))

    def fake_fetch(identifier, providers):
        return QuoteUpdate(price=float(next(prices)))

    async def scenario() -> None:
        async with panel.live():
            assert panel.refreshing is True
            await asyncio.sleep(0.1)
        assert panel.refreshing is False

    with patch("tradedesk.panels.asset_panel.fetch_with_fallback", side_effect=fake_fetch):
        asyncio.run(scenario())

    assert panel.state.snapshot.price >= 1.0
    assert panel.state.snapshot.market_cap == 1.2e12


def test_start_twice_keeps_single_timer() -> None:
    panel = CryptoPanel(refresh_interval=60)

    async def scenario() -> None:
        panel.start()
        first = panel._task
        panel.start()
        assert panel._task is first
        await panel.stop()
        assert panel._task is None

    asyncio.run(scenario())


def test_identifier_change_rearms_timer() -> None:
    panel = CryptoPanel(refresh_interval=60)
    panel.state.snapshot = build_snapshot()
    panel.state.identifier = "bitcoin"

    async def scenario() -> None:
        async with panel.live():
            first = panel._task
            with patch(
                "tradedesk.panels.asset_panel.fetch_with_fallback",
                return_value=build_snapshot("ethereum", 3000.0),
            ):
                await panel.select("ethereum")
            assert panel.refreshing is True
            assert panel._task is not first
            assert first.cancelled()

    asyncio.run(scenario())
    assert panel.state.identifier == "ethereum"


def test_search_requires_two_characters() -> None:
    panel = CryptoPanel()
    with patch("tradedesk.panels.asset_panel.fetch_with_fallback") as fetch_mock:
        assert asyncio.run(panel.search("b")) == []
    assert fetch_mock.called is False


def test_search_failure_returns_empty_list() -> None:
    panel = CryptoPanel()
    with patch(
        "tradedesk.panels.asset_panel.fetch_with_fallback",
        side_effect=all_failed("bit"),
    ):
        assert asyncio.run(panel.search("bit")) == []


def test_search_returns_first_provider_results() -> None:
    panel = CryptoPanel()
    results = [SearchResult(id="bitcoin", symbol="BTC", name="Bitcoin")]
    with patch("tradedesk.panels.asset_panel.fetch_with_fallback", return_value=results):
        assert asyncio.run(panel.search("bit")) == results


def test_currency_change_refetches_current_asset() -> None:
    panel = CryptoPanel()
    panel.state.snapshot = build_snapshot()
    panel.state.identifier = "bitcoin"

    with patch(
        "tradedesk.panels.asset_panel.fetch_with_fallback",
        return_value=build_snapshot(price=55000.0),
    ) as fetch_mock:
        state = asyncio.run(panel.set_currency("EUR"))

    assert state.currency == "eur"
    assert state.currency_symbol == "€"
    assert state.snapshot.price == 55000.0
    providers = fetch_mock.call_args.args[1]
    assert all(provider.currency == "eur" for provider in providers)


def test_unsupported_currency_is_rejected() -> None:
    panel = CryptoPanel()
    try:
        asyncio.run(panel.set_currency("jpy"))
    except ValueError as exc:
        assert "jpy" in str(exc)
    else:
        raise AssertionError("expected ValueError")


def test_stock_search_filters_fixture_list() -> None:
    panel = StockPanel()
    results = asyncio.run(panel.search("micro"))
    assert [result.symbol for result in results] == ["MSFT"]


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *args) -> None:
        self.close()


def test_select_falls_back_to_coingecko_and_shows_no_error() -> None:
    payload = {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "market_data": {
            "current_price": {"usd": 65000},
            "price_change_percentage_24h": 1.0,
        },
    }

    def fake_urlopen(request, timeout=None):
        if "coincap" in request.full_url:
            raise HTTPError(request.full_url, 500, "Server Error", {}, None)
        return FakeResponse(json.dumps(payload).encode("utf-8"))

    panel = CryptoPanel()
    with patch("tradedesk.providers.http.urlopen", side_effect=fake_urlopen):
        state = asyncio.run(panel.select("bitcoin"))

    assert state.error is None
    assert state.loading is False
    assert state.snapshot.price == 65000
    assert state.snapshot.provider == "CoinGecko"


def test_dropped_connections_end_in_static_error() -> None:
    panel = CryptoPanel()
    calls: list[str] = []

    def fake_urlopen(request, timeout=None):
        calls.append(request.full_url)
        raise RemoteDisconnected("Remote end closed connection without response")

    with patch("tradedesk.providers.http.urlopen", side_effect=fake_urlopen):
        state = asyncio.run(panel.select("bitcoin"))

    assert len(calls) == 3
    assert state.error == settings.fetch_error_message
    assert state.loading is False
    assert state.snapshot is None


def test_unexpected_select_error_resets_loading() -> None:
    panel = CryptoPanel()
    with patch(
        "tradedesk.panels.asset_panel.fetch_with_fallback",
        side_effect=RuntimeError("boom"),
    ):
        state = asyncio.run(panel.select("bitcoin"))

    assert state.loading is False
    assert state.error == settings.fetch_error_message


def test_refresh_timer_survives_failed_tick() -> None:
    panel = CryptoPanel(refresh_interval=0.01)
    panel.state.snapshot = build_snapshot()
    panel.state.identifier = "bitcoin"
    ticks: list[int] = []

    def fake_fetch(identifier, providers):
        ticks.append(len(ticks))
        if len(ticks) == 1:
            raise ConnectionResetError("connection reset by peer")
        return QuoteUpdate(price=61000.0)

    async def scenario() -> None:
        async with panel.live():
            await asyncio.sleep(0.1)
            assert panel.refreshing is True

    with patch("tradedesk.panels.asset_panel.fetch_with_fallback", side_effect=fake_fetch):
        asyncio.run(scenario())

    assert len(ticks) > 1
    assert panel.state.snapshot.price == 61000.0
    assert panel.state.error is None


def test_failed_currency_change_keeps_old_currency() -> None:
    panel = CryptoPanel()
    panel.state.snapshot = build_snapshot()
    panel.state.identifier = "bitcoin"

    with patch(
        "tradedesk.panels.asset_panel.fetch_with_fallback",
        side_effect=all_failed("bitcoin"),
    ):
        state = asyncio.run(panel.set_currency("sek"))

    assert state.error == settings.fetch_error_message
    assert state.currency == "usd"
    assert state.currency_symbol == "$"
    assert state.snapshot.currency == state.currency

    with patch(
        "tradedesk.panels.asset_panel.fetch_with_fallback",
        return_value=QuoteUpdate(price=60500.0),
    ) as fetch_mock:
        asyncio.run(panel.refresh_once())

    providers = fetch_mock.call_args.args[1]
    assert all(provider.currency == "usd" for provider in providers)


def test_stock_refresh_failure_keeps_live_quote() -> None:
    panel = StockPanel()
    live = AssetSnapshot(
        id="AAPL", symbol="AAPL", name="Apple Inc.", price=231.5, volume=5.1e7, provider="Yahoo Finance (Proxy)"
    )
    panel.state.snapshot = live
    panel.state.identifier = "AAPL"

    def fake_urlopen(request, timeout=None):
        raise URLError("temporary failure in name resolution")

    with patch("tradedesk.providers.http.urlopen", side_effect=fake_urlopen):
        refreshed = asyncio.run(panel.refresh_once())

    assert refreshed is False
    assert panel.state.snapshot is live
    assert [provider.name for provider in panel.refresh_providers()] == ["Yahoo Finance (Proxy)"]
