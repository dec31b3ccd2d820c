from __future__ import annotations

from tradedesk.schemas.dashboard import AnalysisSummary, HorizonPrediction, ModelConfig

FALLBACK_PRICE = 175.43

# Horizon targets as multiples of the current price, with their confidence.
HORIZONS: list[tuple[str, float, float]] = [
    ("1 Day", 177.23 / FALLBACK_PRICE, 92.0),
    ("1 Week", 180.45 / FALLBACK_PRICE, 87.0),
    ("1 Month", 182.75 / FALLBACK_PRICE, 76.0),
    ("3 Months", 185.20 / FALLBACK_PRICE, 64.0),
]

HEADLINE_HORIZON = "1 Month"
HEADLINE_CONFIDENCE = 87.2
VOLATILITY = 18.5
RISK_SCORE = 6.2


def risk_label(score: float) -> str:
    if score <= 3:
        return "Low"
    if score <= 7:
        return "Medium"
    return "High"


def summarize(asset: str, current_price: float | None, model: ModelConfig) -> AnalysisSummary:
    price = current_price if current_price and current_price > 0 else FALLBACK_PRICE
    horizons = [
        HorizonPrediction(period=period, price=round(price * ratio, 2), confidence=confidence)
        for period, ratio, confidence in HORIZONS
    ]
    predicted = next(h.price for h in horizons if h.period == HEADLINE_HORIZON)
    diff = predicted - price
    return AnalysisSummary(
        asset=asset,
        current_price=price,
        predicted_price=predicted,
        price_diff=diff,
        price_change_percent=diff / price * 100,
        confidence=HEADLINE_CONFIDENCE,
        trend="bullish" if diff >= 0 else "bearish",
        volatility=VOLATILITY,
        risk_score=RISK_SCORE,
        risk_label=risk_label(RISK_SCORE),
        model=model,
        horizons=horizons,
    )
