from __future__ import annotations

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

SignalType = Literal["BUY", "SELL"]
Sentiment = Literal["positive", "negative", "neutral"]


class PredictionPoint(BaseModel):
    timestamp: datetime.datetime
    label: str
    price: float
    confidence: float
    change_percent: float = 0.0


class TradingSignal(BaseModel):
    timestamp: datetime.datetime
    label: str
    type: SignalType
    price: float
    reason: str
    confidence: float


class ForecastResult(BaseModel):
    asset: str
    asset_type: str
    model_type: str
    base_price: float
    daily: list[PredictionPoint] = Field(default_factory=list)
    hourly: list[PredictionPoint] = Field(default_factory=list)
    daily_signals: list[TradingSignal] = Field(default_factory=list)
    hourly_signals: list[TradingSignal] = Field(default_factory=list)


class ValidationIssue(BaseModel):
    field: str
    level: Literal["warn", "fail"]
    message: str


class ValidationResult(BaseModel):
    status: Literal["ok", "warn", "fail"] = "ok"
    issues: list[ValidationIssue] = Field(default_factory=list)


class ModelConfig(BaseModel):
    type: str = "ARIMA"
    parameters: dict[str, int] = Field(default_factory=lambda: {"p": 1, "d": 1, "q": 1})


class ModelType(BaseModel):
    value: str
    label: str
    description: str


class ModelState(BaseModel):
    config: ModelConfig
    available: list[ModelType] = Field(default_factory=list)
    is_running: bool = False
    validation: ValidationResult = Field(default_factory=ValidationResult)


class ModelConfigRequest(BaseModel):
    type: str
    parameters: Optional[dict[str, int]] = None


class HorizonPrediction(BaseModel):
    period: str
    price: float
    confidence: float


class AnalysisSummary(BaseModel):
    asset: str
    current_price: float
    predicted_price: float
    price_diff: float
    price_change_percent: float
    confidence: float
    trend: Literal["bullish", "bearish"]
    volatility: float
    risk_score: float
    risk_label: Literal["Low", "Medium", "High"]
    model: ModelConfig
    horizons: list[HorizonPrediction] = Field(default_factory=list)


class StopLossConfig(BaseModel):
    enabled: bool = True
    stop_loss_percent: float = Field(default=5, ge=1, le=50)
    trailing_stop: bool = False


class Strategy(BaseModel):
    id: str
    name: str
    description: str
    type: Literal["momentum", "mean-reversion", "trend-following", "arbitrage", "sentiment"]
    performance: float
    win_rate: float
    risk_level: Literal["low", "medium", "high"]
    enabled: bool
    signals: int
    last_signal: Literal["BUY", "SELL", "HOLD"]


class StrategySummary(BaseModel):
    active: int
    total: int
    avg_performance: float
    avg_win_rate: float
    total_signals: int
    strategies: list[Strategy] = Field(default_factory=list)


class NewsItem(BaseModel):
    id: int
    title: str
    summary: str
    sentiment: Sentiment
    sentiment_score: float
    source: str
    published_at: str
    impact: Literal["low", "medium", "high"]
    url: str = "#"


class NewsDigest(BaseModel):
    asset: str
    asset_type: str
    overall_sentiment: float
    overall_label: Literal["Positive", "Negative"]
    positive: int
    negative: int
    items: list[NewsItem] = Field(default_factory=list)


class Position(BaseModel):
    symbol: str
    name: str
    shares: int
    avg_price: float
    current_price: float
    total_value: float
    gain: float
    gain_percent: float
    allocation: float


class PortfolioOverview(BaseModel):
    total_value: float
    total_gain: float
    total_gain_percent: float
    day_change: float
    day_change_percent: float
    cash_balance: float
    positions: list[Position] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class OrderBlock(BaseModel):
    type: Literal["Supply Zone", "Demand Zone"]
    price: float
    strength: int
    volume: Literal["High", "Medium", "Low"]
    status: Literal["Active", "Broken"]


class FibonacciLevel(BaseModel):
    level: str
    price: float
    type: Literal["Extension", "Retracement", "Base"]


class TechnicalAnalysis(BaseModel):
    asset: str
    current_price: Optional[float] = None
    order_blocks: list[OrderBlock] = Field(default_factory=list)
    fibonacci: list[FibonacciLevel] = Field(default_factory=list)
