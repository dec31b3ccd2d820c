"""
Selection state of one asset panel and its background price refresher.

A panel owns exactly one ``PanelState``. A full fetch walks the panel's
provider chain and replaces the snapshot; a refresh tick walks the (shorter)
refresh chain and merges only the fields it received. Failed fetches leave
the snapshot untouched.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncIterator, Callable, Optional, Sequence

from tradedesk.config.settings import settings
from tradedesk.errors import NoProviderAvailableError, ProviderError
from tradedesk.log import get_logger
from tradedesk.providers import coingecko, fixtures
from tradedesk.providers.base import Provider
from tradedesk.providers.selector import (
    crypto_providers,
    crypto_refresh_providers,
    crypto_search_providers,
    fetch_with_fallback,
    stock_providers,
    stock_refresh_providers,
)
from tradedesk.schemas.asset import (
    AssetSnapshot,
    AssetType,
    PanelState,
    QuoteUpdate,
    SearchResult,
    TrendingAsset,
)

logger = get_logger(__name__)

SnapshotCallback = Callable[[AssetSnapshot], None]

MIN_SEARCH_LENGTH = 2


def merge_update(snapshot: AssetSnapshot, update: QuoteUpdate) -> AssetSnapshot:
    """Overlay the fields present in ``update`` onto ``snapshot``."""
    fields = update.model_dump(exclude_none=True)
    if not fields:
        return snapshot
    if "change" not in fields and ("price" in fields or "change_percent" in fields):
        price = fields.get("price", snapshot.price)
        percent = fields.get("change_percent", snapshot.change_percent)
        fields["change"] = price * percent / 100
    return snapshot.model_copy(update=fields)


class AssetPanel:
    asset_type: AssetType = "crypto"

    def __init__(
        self,
        default_identifier: Optional[str] = None,
        currency: str = "usd",
        on_change: Optional[SnapshotCallback] = None,
        refresh_interval: Optional[float] = None,
    ) -> None:
        self.default_identifier = default_identifier
        self.on_change = on_change
        self.refresh_interval = (
            refresh_interval if refresh_interval is not None else settings.refresh.interval_seconds
        )
        self.state = PanelState(asset_type=self.asset_type)
        self._set_currency_fields(currency.lower())
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    def _set_currency_fields(self, currency: str) -> None:
        self.state.currency = currency
        self.state.currency_symbol = settings.currency_symbols.get(currency, currency.upper())

    def providers(self) -> Sequence[Provider[AssetSnapshot]]:
        raise NotImplementedError

    def refresh_providers(self) -> Sequence[Provider[QuoteUpdate]]:
        raise NotImplementedError

    @property
    def snapshot(self) -> Optional[AssetSnapshot]:
        return self.state.snapshot

    @property
    def refreshing(self) -> bool:
        return self._task is not None and not self._task.done()

    async def select(self, identifier: str) -> PanelState:
        identifier = (identifier or "").strip()
        if not identifier:
            return self.state

        self._generation += 1
        generation = self._generation
        self.state.loading = True
        self.state.error = None
        try:
            snapshot = await asyncio.to_thread(fetch_with_fallback, identifier, self.providers())
        except Exception as exc:
            if generation == self._generation:
                if not isinstance(exc, NoProviderAvailableError):
                    logger.error("panel.select_failed", identifier=identifier, exc_info=True)
                self.state.error = settings.fetch_error_message
            return self.state
        finally:
            if generation == self._generation:
                self.state.loading = False

        if generation != self._generation:
            # A newer selection superseded this one while it was in flight.
            return self.state

        previous = self.state.identifier
        self.state.snapshot = snapshot
        self.state.identifier = snapshot.id
        if self.on_change is not None:
            self.on_change(snapshot)
        if self.refreshing and snapshot.id != previous:
            await self.stop()
            self.start()
        return self.state

    async def ensure_loaded(self) -> PanelState:
        if self.state.snapshot is None and self.default_identifier:
            await self.select(self.state.identifier or self.default_identifier)
        return self.state

    async def refresh_once(self) -> bool:
        identifier = self.state.identifier
        if not identifier or self.state.snapshot is None:
            return False
        try:
            update = await asyncio.to_thread(
                fetch_with_fallback, identifier, self.refresh_providers()
            )
        except NoProviderAvailableError as exc:
            logger.warning("panel.refresh_failed", identifier=identifier, reason=exc.last_reason)
            return False
        except Exception:
            logger.warning("panel.refresh_failed", identifier=identifier, exc_info=True)
            return False

        current = self.state.snapshot
        if current is None or self.state.identifier != identifier:
            return False
        self.state.snapshot = merge_update(current, update)
        return True

    async def _refresh_loop(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            await self.refresh_once()

    def start(self) -> None:
        if self.refreshing:
            return
        logger.info("panel.refresh_started", asset_type=self.asset_type, interval=self.refresh_interval)
        self._task = asyncio.create_task(self._refresh_loop())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("panel.refresh_stopped", asset_type=self.asset_type)

    @contextlib.asynccontextmanager
    async def live(self) -> AsyncIterator["AssetPanel"]:
        self.start()
        try:
            yield self
        finally:
            await self.stop()

    async def search(self, query: str) -> list[SearchResult]:
        raise NotImplementedError


class CryptoPanel(AssetPanel):
    asset_type: AssetType = "crypto"

    def providers(self) -> Sequence[Provider[AssetSnapshot]]:
        return crypto_providers(self.state.currency)

    def refresh_providers(self) -> Sequence[Provider[QuoteUpdate]]:
        return crypto_refresh_providers(self.state.currency)

    async def search(self, query: str) -> list[SearchResult]:
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            return []
        try:
            return await asyncio.to_thread(
                fetch_with_fallback, query, crypto_search_providers()
            )
        except NoProviderAvailableError:
            return []

    async def trending(self) -> list[TrendingAsset]:
        try:
            return await asyncio.to_thread(coingecko.fetch_trending)
        except ProviderError as exc:
            logger.warning("panel.trending_failed", reason=exc.message)
            return []

    async def set_currency(self, currency: str) -> PanelState:
        currency = currency.strip().lower()
        if currency not in settings.currency_rates:
            raise ValueError(f"Unsupported currency: {currency}")
        previous = self.state.currency
        if currency == previous:
            return self.state
        self._set_currency_fields(currency)
        if self.state.identifier:
            await self.select(self.state.identifier)
            if self.state.error is not None:
                # The displayed snapshot is still priced in the old currency.
                self._set_currency_fields(previous)
        return self.state


class StockPanel(AssetPanel):
    asset_type: AssetType = "stocks"

    def providers(self) -> Sequence[Provider[AssetSnapshot]]:
        return stock_providers()

    def refresh_providers(self) -> Sequence[Provider[QuoteUpdate]]:
        return stock_refresh_providers()

    async def search(self, query: str) -> list[SearchResult]:
        query = (query or "").strip().casefold()
        if len(query) < MIN_SEARCH_LENGTH:
            return []
        return [
            choice
            for choice in fixtures.stock_choices()
            if query in choice.symbol.casefold() or query in choice.name.casefold()
        ]
