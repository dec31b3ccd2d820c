from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from tradedesk.dashboard import analysis, news, portfolio, technical
from tradedesk.dashboard import strategies as strategy_book
from tradedesk.dashboard.session import Dashboard, get_dashboard
from tradedesk.panels.categories import CRYPTO_CATEGORIES, display_label
from tradedesk.providers import fixtures
from tradedesk.schemas.asset import (
    AssetType,
    CategoryGroup,
    CurrencyRequest,
    PanelState,
    SearchResult,
    SelectRequest,
    TrendingAsset,
)
from tradedesk.schemas.dashboard import (
    AnalysisSummary,
    ForecastResult,
    ModelConfigRequest,
    ModelState,
    NewsDigest,
    PortfolioOverview,
    StopLossConfig,
    Strategy,
    StrategySummary,
    TechnicalAnalysis,
    ValidationResult,
)

router = APIRouter()


def _raise_on_validation_fail(validation: ValidationResult) -> None:
    if validation.status == "fail":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Validation failed.",
                "validation": validation.model_dump(),
            },
        )


def _require_identifier(payload: SelectRequest) -> str:
    identifier = payload.identifier.strip()
    if not identifier:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Identifier is required.",
        )
    return identifier


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/crypto", response_model=PanelState)
async def crypto_state(dashboard: Dashboard = Depends(get_dashboard)) -> PanelState:
    return await dashboard.crypto_panel.ensure_loaded()


@router.post("/crypto/select", response_model=PanelState)
async def select_crypto(
    payload: SelectRequest, dashboard: Dashboard = Depends(get_dashboard)
) -> PanelState:
    identifier = _require_identifier(payload)
    return await dashboard.crypto_panel.select(identifier.lower())


@router.post("/crypto/refresh", response_model=PanelState)
async def refresh_crypto(dashboard: Dashboard = Depends(get_dashboard)) -> PanelState:
    await dashboard.crypto_panel.refresh_once()
    return dashboard.crypto_panel.state


@router.get("/crypto/search", response_model=list[SearchResult])
async def search_crypto(q: str = "", dashboard: Dashboard = Depends(get_dashboard)) -> list[SearchResult]:
    return await dashboard.crypto_panel.search(q)


@router.get("/crypto/trending", response_model=list[TrendingAsset])
async def trending_crypto(dashboard: Dashboard = Depends(get_dashboard)) -> list[TrendingAsset]:
    return await dashboard.crypto_panel.trending()


@router.get("/crypto/categories", response_model=list[CategoryGroup])
def crypto_categories() -> list[CategoryGroup]:
    return [
        CategoryGroup(
            name=name,
            assets=[
                SearchResult(id=asset_id, symbol=display_label(asset_id), name=asset_id)
                for asset_id in asset_ids
            ],
        )
        for name, asset_ids in CRYPTO_CATEGORIES.items()
    ]


@router.post("/crypto/currency", response_model=PanelState)
async def set_crypto_currency(
    payload: CurrencyRequest, dashboard: Dashboard = Depends(get_dashboard)
) -> PanelState:
    try:
        return await dashboard.crypto_panel.set_currency(payload.currency)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/stocks", response_model=PanelState)
async def stock_state(dashboard: Dashboard = Depends(get_dashboard)) -> PanelState:
    return await dashboard.stock_panel.ensure_loaded()


@router.post("/stocks/select", response_model=PanelState)
async def select_stock(
    payload: SelectRequest, dashboard: Dashboard = Depends(get_dashboard)
) -> PanelState:
    identifier = _require_identifier(payload)
    return await dashboard.stock_panel.select(identifier.upper())


@router.post("/stocks/refresh", response_model=PanelState)
async def refresh_stock(dashboard: Dashboard = Depends(get_dashboard)) -> PanelState:
    await dashboard.stock_panel.refresh_once()
    return dashboard.stock_panel.state


@router.get("/stocks/list", response_model=list[SearchResult])
def list_stocks() -> list[SearchResult]:
    return fixtures.stock_choices()


@router.get("/stocks/search", response_model=list[SearchResult])
async def search_stocks(q: str = "", dashboard: Dashboard = Depends(get_dashboard)) -> list[SearchResult]:
    return await dashboard.stock_panel.search(q)


@router.get("/forecast", response_model=ForecastResult)
def forecast(
    asset_type: AssetType = "stocks",
    seed: Optional[int] = None,
    dashboard: Dashboard = Depends(get_dashboard),
) -> ForecastResult:
    return dashboard.forecast(asset_type, seed=seed)


@router.get("/model", response_model=ModelState)
def get_model(dashboard: Dashboard = Depends(get_dashboard)) -> ModelState:
    return dashboard.model_state()


@router.put("/model", response_model=ModelState)
def update_model(
    payload: ModelConfigRequest, dashboard: Dashboard = Depends(get_dashboard)
) -> ModelState:
    state = dashboard.update_model(payload.type, payload.parameters)
    _raise_on_validation_fail(state.validation)
    return state


@router.post("/model/run", response_model=ForecastResult)
def run_model(
    asset_type: AssetType = "stocks",
    seed: Optional[int] = None,
    dashboard: Dashboard = Depends(get_dashboard),
) -> ForecastResult:
    if dashboard.is_running:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Prediction already running.")
    return dashboard.run_prediction(asset_type, seed=seed)


@router.get("/analysis", response_model=AnalysisSummary)
def get_analysis(
    asset_type: AssetType = "stocks", dashboard: Dashboard = Depends(get_dashboard)
) -> AnalysisSummary:
    asset, price = dashboard.current_asset(asset_type)
    return analysis.summarize(asset, price, dashboard.model)


@router.get("/stop-loss", response_model=StopLossConfig)
def get_stop_loss(dashboard: Dashboard = Depends(get_dashboard)) -> StopLossConfig:
    return dashboard.stop_loss


@router.put("/stop-loss", response_model=StopLossConfig)
def update_stop_loss(
    payload: StopLossConfig, dashboard: Dashboard = Depends(get_dashboard)
) -> StopLossConfig:
    dashboard.stop_loss = payload
    return dashboard.stop_loss


@router.get("/strategies", response_model=StrategySummary)
def list_strategies(dashboard: Dashboard = Depends(get_dashboard)) -> StrategySummary:
    return strategy_book.summarize(dashboard.strategies)


@router.post("/strategies/{strategy_id}/toggle", response_model=Strategy)
def toggle_strategy(strategy_id: str, dashboard: Dashboard = Depends(get_dashboard)) -> Strategy:
    try:
        return strategy_book.toggle(dashboard.strategies, strategy_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")


@router.get("/news", response_model=NewsDigest)
def get_news(
    asset_type: AssetType = "stocks", dashboard: Dashboard = Depends(get_dashboard)
) -> NewsDigest:
    asset, _ = dashboard.current_asset(asset_type)
    return news.news_for(asset, asset_type)


@router.get("/portfolio", response_model=PortfolioOverview)
def get_portfolio() -> PortfolioOverview:
    return portfolio.mock_portfolio()


@router.get("/technical", response_model=TechnicalAnalysis)
def get_technical(
    asset_type: AssetType = "stocks", dashboard: Dashboard = Depends(get_dashboard)
) -> TechnicalAnalysis:
    asset, price = dashboard.current_asset(asset_type)
    return technical.analyze(asset, price)
