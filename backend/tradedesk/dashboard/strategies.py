from __future__ import annotations

from tradedesk.schemas.dashboard import Strategy, StrategySummary


def default_strategies() -> list[Strategy]:
    return [
        Strategy(
            id="momentum-lstm",
            name="LSTM Momentum",
            description="Deep learning model detecting momentum patterns using LSTM networks",
            type="momentum",
            performance=18.4,
            win_rate=67.2,
            risk_level="medium",
            enabled=True,
            signals=12,
            last_signal="BUY",
        ),
        Strategy(
            id="mean-reversion-rf",
            name="Random Forest Mean Reversion",
            description="Ensemble learning approach for mean reversion opportunities",
            type="mean-reversion",
            performance=12.8,
            win_rate=71.5,
            risk_level="low",
            enabled=True,
            signals=8,
            last_signal="HOLD",
        ),
        Strategy(
            id="trend-xgb",
            name="XGBoost Trend Follower",
            description="Gradient boosting model for trend detection and following",
            type="trend-following",
            performance=24.6,
            win_rate=62.3,
            risk_level="high",
            enabled=False,
            signals=15,
            last_signal="BUY",
        ),
        Strategy(
            id="sentiment-bert",
            name="BERT Sentiment Analyzer",
            description="NLP-based sentiment analysis from news and social media",
            type="sentiment",
            performance=9.2,
            win_rate=58.9,
            risk_level="medium",
            enabled=True,
            signals=23,
            last_signal="SELL",
        ),
        Strategy(
            id="arb-neural",
            name="Neural Arbitrage Detector",
            description="Deep neural network for cross-market arbitrage opportunities",
            type="arbitrage",
            performance=6.7,
            win_rate=82.1,
            risk_level="low",
            enabled=False,
            signals=3,
            last_signal="HOLD",
        ),
    ]


def toggle(strategies: list[Strategy], strategy_id: str) -> Strategy:
    for strategy in strategies:
        if strategy.id == strategy_id:
            strategy.enabled = not strategy.enabled
            return strategy
    raise KeyError(strategy_id)


def summarize(strategies: list[Strategy]) -> StrategySummary:
    enabled = [s for s in strategies if s.enabled]
    avg_performance = sum(s.performance for s in enabled) / len(enabled) if enabled else 0.0
    avg_win_rate = sum(s.win_rate for s in enabled) / len(enabled) if enabled else 0.0
    return StrategySummary(
        active=len(enabled),
        total=len(strategies),
        avg_performance=avg_performance,
        avg_win_rate=avg_win_rate,
        total_signals=sum(s.signals for s in enabled),
        strategies=list(strategies),
    )
