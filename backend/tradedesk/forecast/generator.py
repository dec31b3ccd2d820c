"""
Illustrative price paths and buy/sell markers.

Nothing here looks at history: a path is a base price bent by a random
volatility term, a small linear trend and a sine cycle, and confidence simply
decays with the distance into the future. Signals are read off the
step-over-step percentage moves of that fabricated path.
"""

from __future__ import annotations

import datetime
import math
import random
from dataclasses import dataclass, replace
from typing import Optional

from tradedesk.schemas.dashboard import ForecastResult, PredictionPoint, TradingSignal


@dataclass(frozen=True)
class PathShape:
    volatility: float
    trend: float
    cycle_frequency: float
    cycle_amplitude: float
    confidence_start: float
    confidence_decay: float
    confidence_floor: float


@dataclass(frozen=True)
class SignalRule:
    buy_drop_percent: float
    buy_lookahead: int
    buy_tail_margin: int
    buy_recovery_ratio: float
    sell_rise_percent: float
    sell_min_confidence: float
    limit: int
    buy_reason: str
    sell_reason: str


DAILY_SHAPE = PathShape(
    volatility=0.04,
    trend=0.001,
    cycle_frequency=0.2,
    cycle_amplitude=0.02,
    confidence_start=0.95,
    confidence_decay=0.015,
    confidence_floor=0.5,
)

HOURLY_SHAPE = PathShape(
    volatility=0.02,
    trend=0.0002,
    cycle_frequency=0.3,
    cycle_amplitude=0.01,
    confidence_start=0.95,
    confidence_decay=0.008,
    confidence_floor=0.6,
)

DAILY_SIGNALS = SignalRule(
    buy_drop_percent=-1.2,
    buy_lookahead=3,
    buy_tail_margin=5,
    buy_recovery_ratio=0.998,
    sell_rise_percent=1.5,
    sell_min_confidence=0.6,
    limit=3,
    buy_reason="Technical dip - buy opportunity",
    sell_reason="Take profit - resistance level",
)

HOURLY_SIGNALS = SignalRule(
    buy_drop_percent=-0.4,
    buy_lookahead=2,
    buy_tail_margin=3,
    buy_recovery_ratio=0.999,
    sell_rise_percent=0.6,
    sell_min_confidence=0.6,
    limit=5,
    buy_reason="Intraday dip - scalping opportunity",
    sell_reason="Quick profit - intraday resistance",
)

_HORIZON_LABELS = {0: "Tomorrow", 6: "Next Week", 13: "2 Weeks", 29: "1 Month"}


def default_base_price(rng: random.Random) -> float:
    return 175 + rng.random() * 50


def confidence_at(step: int, shape: PathShape) -> float:
    return max(shape.confidence_floor, shape.confidence_start - step * shape.confidence_decay)


def _price_at(base_price: float, step: int, shape: PathShape, rng: random.Random) -> float:
    volatility = (rng.random() - 0.5) * shape.volatility
    trend_factor = 1 + step * shape.trend
    cycle = math.sin(step * shape.cycle_frequency) * shape.cycle_amplitude
    return base_price * trend_factor * (1 + volatility + cycle)


def horizon_label(index: int) -> str:
    return _HORIZON_LABELS.get(index, f"Day {index + 1}")


def _with_changes(points: list[PredictionPoint]) -> list[PredictionPoint]:
    if not points:
        return points
    first = points[0].price
    for point in points:
        point.change_percent = (point.price - first) / first * 100 if first else 0.0
    return points


def generate_daily(
    base_price: float,
    days: int = 30,
    rng: Optional[random.Random] = None,
    start: Optional[datetime.datetime] = None,
) -> list[PredictionPoint]:
    rng = rng or random.Random()
    start = start or datetime.datetime.now()
    points = []
    for step in range(1, days + 1):
        points.append(
            PredictionPoint(
                timestamp=start + datetime.timedelta(days=step),
                label=horizon_label(step - 1),
                price=_price_at(base_price, step, DAILY_SHAPE, rng),
                confidence=confidence_at(step, DAILY_SHAPE),
            )
        )
    return _with_changes(points)


def generate_hourly(
    base_price: float,
    hours: int = 48,
    rng: Optional[random.Random] = None,
    start: Optional[datetime.datetime] = None,
) -> list[PredictionPoint]:
    rng = rng or random.Random()
    start = (start or datetime.datetime.now()).replace(minute=0, second=0, microsecond=0)
    points = []
    for step in range(hours):
        timestamp = start + datetime.timedelta(hours=step + 1)
        points.append(
            PredictionPoint(
                timestamp=timestamp,
                label=timestamp.strftime("%b %d %H:%M"),
                price=_price_at(base_price, step, HOURLY_SHAPE, rng),
                confidence=confidence_at(step, HOURLY_SHAPE),
            )
        )
    return _with_changes(points)


def find_signals(points: list[PredictionPoint], rule: SignalRule) -> list[TradingSignal]:
    signals: list[TradingSignal] = []
    for index in range(len(points) - 1):
        current = points[index]
        following = points[index + 1]
        move = (following.price - current.price) / current.price * 100

        if move < rule.buy_drop_percent and index < len(points) - rule.buy_tail_margin:
            ahead = points[index + rule.buy_lookahead]
            if ahead.price > current.price * rule.buy_recovery_ratio:
                signals.append(
                    TradingSignal(
                        timestamp=current.timestamp,
                        label=current.label,
                        type="BUY",
                        price=current.price,
                        reason=rule.buy_reason,
                        confidence=current.confidence,
                    )
                )

        if move > rule.sell_rise_percent and current.confidence > rule.sell_min_confidence:
            signals.append(
                TradingSignal(
                    timestamp=current.timestamp,
                    label=current.label,
                    type="SELL",
                    price=current.price,
                    reason=rule.sell_reason,
                    confidence=current.confidence,
                )
            )
    return signals[: rule.limit]


def build_forecast(
    asset: str,
    asset_type: str,
    model_type: str,
    base_price: Optional[float] = None,
    seed: Optional[int] = None,
    days: int = 30,
    hours: int = 48,
    daily_limit: Optional[int] = None,
    hourly_limit: Optional[int] = None,
) -> ForecastResult:
    rng = random.Random(seed)
    if not base_price or base_price <= 0:
        base_price = default_base_price(rng)
    daily = generate_daily(base_price, days, rng)
    hourly = generate_hourly(base_price, hours, rng)

    daily_rule = DAILY_SIGNALS
    if daily_limit is not None:
        daily_rule = replace(daily_rule, limit=daily_limit)
    hourly_rule = HOURLY_SIGNALS
    if hourly_limit is not None:
        hourly_rule = replace(hourly_rule, limit=hourly_limit)

    return ForecastResult(
        asset=asset,
        asset_type=asset_type,
        model_type=model_type,
        base_price=base_price,
        daily=daily,
        hourly=hourly,
        daily_signals=find_signals(daily, daily_rule),
        hourly_signals=find_signals(hourly, hourly_rule),
    )
