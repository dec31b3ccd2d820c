from __future__ import annotations

from tradedesk.schemas.dashboard import PortfolioOverview, Position


def mock_portfolio() -> PortfolioOverview:
    positions = [
        Position(symbol="AAPL", name="Apple Inc.", shares=50, avg_price=165.20,
                 current_price=175.43, total_value=8771.50, gain=511.50,
                 gain_percent=6.19, allocation=7.0),
        Position(symbol="GOOGL", name="Alphabet Inc.", shares=15, avg_price=2850.00,
                 current_price=2847.52, total_value=42712.80, gain=-37.20,
                 gain_percent=-0.09, allocation=34.1),
        Position(symbol="MSFT", name="Microsoft Corp.", shares=80, avg_price=390.50,
                 current_price=414.78, total_value=33182.40, gain=1942.40,
                 gain_percent=6.22, allocation=26.5),
        Position(symbol="TSLA", name="Tesla Inc.", shares=45, avg_price=245.80,
                 current_price=238.45, total_value=10730.25, gain=-330.75,
                 gain_percent=-2.99, allocation=8.6),
        Position(symbol="NVDA", name="NVIDIA Corp.", shares=35, avg_price=820.00,
                 current_price=875.28, total_value=30634.80, gain=1934.80,
                 gain_percent=6.74, allocation=24.4),
    ]
    return PortfolioOverview(
        total_value=125430.75,
        total_gain=8750.23,
        total_gain_percent=7.51,
        day_change=1245.67,
        day_change_percent=1.01,
        cash_balance=15240.50,
        positions=positions,
        recommendations=[
            "Consider reducing GOOGL allocation and increasing NVDA position based on AI predictions.",
            "TSLA approaching stop loss threshold. Consider adjusting strategy.",
        ],
    )
