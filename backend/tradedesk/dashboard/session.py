from __future__ import annotations

import contextlib
from typing import AsyncIterator, Optional

from tradedesk.config.settings import settings
from tradedesk.dashboard import model as model_config
from tradedesk.dashboard import strategies as strategy_book
from tradedesk.forecast.generator import build_forecast
from tradedesk.panels.asset_panel import AssetPanel, CryptoPanel, StockPanel
from tradedesk.schemas.asset import AssetSnapshot, AssetType
from tradedesk.schemas.dashboard import (
    ForecastResult,
    ModelConfig,
    ModelState,
    StopLossConfig,
    Strategy,
)
from tradedesk.validation.validator import validate_model_config


class Dashboard:
    """All panel state of one dashboard, held in memory only."""

    def __init__(
        self,
        crypto_panel: Optional[CryptoPanel] = None,
        stock_panel: Optional[StockPanel] = None,
    ) -> None:
        self.crypto_panel = crypto_panel or CryptoPanel(
            default_identifier=settings.default_crypto,
            currency=settings.default_currency,
        )
        self.stock_panel = stock_panel or StockPanel(default_identifier=settings.default_stock)
        self.crypto_panel.on_change = self._on_crypto_change
        self.stock_panel.on_change = self._on_stock_change

        self.crypto_data: Optional[AssetSnapshot] = None
        self.stock_data: Optional[AssetSnapshot] = None
        self.model = model_config.default_config()
        self.is_running = False
        self.stop_loss = StopLossConfig()
        self.strategies: list[Strategy] = strategy_book.default_strategies()

    def _on_crypto_change(self, snapshot: AssetSnapshot) -> None:
        self.crypto_data = snapshot

    def _on_stock_change(self, snapshot: AssetSnapshot) -> None:
        self.stock_data = snapshot

    def panel(self, asset_type: AssetType) -> AssetPanel:
        return self.stock_panel if asset_type == "stocks" else self.crypto_panel

    def current_asset(self, asset_type: AssetType) -> tuple[str, Optional[float]]:
        panel = self.panel(asset_type)
        snapshot = panel.snapshot
        if snapshot is not None:
            return snapshot.symbol or snapshot.id, snapshot.price
        return panel.state.identifier or panel.default_identifier or "", None

    def model_state(self) -> ModelState:
        return ModelState(
            config=self.model,
            available=model_config.MODEL_TYPES,
            is_running=self.is_running,
            validation=validate_model_config(self.model),
        )

    def update_model(self, model_type: str, parameters: Optional[dict[str, int]]) -> ModelState:
        candidate = model_config.apply_change(self.model, model_type, parameters)
        validation = validate_model_config(candidate)
        if validation.status != "fail":
            self.model = candidate
        return ModelState(
            config=self.model,
            available=model_config.MODEL_TYPES,
            is_running=self.is_running,
            validation=validation,
        )

    def run_prediction(self, asset_type: AssetType, seed: Optional[int] = None) -> ForecastResult:
        asset, price = self.current_asset(asset_type)
        self.is_running = True
        try:
            return self.forecast(asset_type, seed=seed, asset=asset, price=price)
        finally:
            self.is_running = False

    def forecast(
        self,
        asset_type: AssetType,
        seed: Optional[int] = None,
        asset: Optional[str] = None,
        price: Optional[float] = None,
    ) -> ForecastResult:
        if asset is None:
            asset, price = self.current_asset(asset_type)
        return build_forecast(
            asset=asset,
            asset_type=asset_type,
            model_type=self.model.type,
            base_price=price,
            seed=seed,
            days=settings.forecast.daily_steps,
            hours=settings.forecast.hourly_steps,
            daily_limit=settings.forecast.daily_signal_limit,
            hourly_limit=settings.forecast.hourly_signal_limit,
        )

    async def load_defaults(self) -> None:
        await self.crypto_panel.ensure_loaded()
        await self.stock_panel.ensure_loaded()

    @contextlib.asynccontextmanager
    async def live(self) -> AsyncIterator["Dashboard"]:
        async with self.crypto_panel.live(), self.stock_panel.live():
            yield self


_dashboard: Optional[Dashboard] = None


def get_dashboard() -> Dashboard:
    global _dashboard
    if _dashboard is None:
        _dashboard = Dashboard()
    return _dashboard
