from __future__ import annotations

from tradedesk.schemas.dashboard import FibonacciLevel, OrderBlock, TechnicalAnalysis

# (type, multiple of current price, price when unknown, strength, volume, status)
_ORDER_BLOCKS = [
    ("Supply Zone", 1.15, 250.0, 85, "High", "Active"),
    ("Demand Zone", 0.92, 200.0, 78, "Medium", "Active"),
    ("Supply Zone", 1.08, 230.0, 65, "Low", "Broken"),
]

# (level, multiple of current price, price when unknown, type)
_FIB_LEVELS = [
    ("100%", 1.20, 260.0, "Extension"),
    ("78.6%", 1.12, 242.0, "Retracement"),
    ("61.8%", 1.05, 227.0, "Retracement"),
    ("50%", 1.00, 216.0, "Retracement"),
    ("38.2%", 0.95, 205.0, "Retracement"),
    ("23.6%", 0.88, 190.0, "Retracement"),
    ("0%", 0.80, 172.0, "Base"),
]


def analyze(asset: str, current_price: float | None) -> TechnicalAnalysis:
    def scaled(multiple: float, fallback: float) -> float:
        return current_price * multiple if current_price else fallback

    return TechnicalAnalysis(
        asset=asset,
        current_price=current_price,
        order_blocks=[
            OrderBlock(type=kind, price=scaled(multiple, fallback), strength=strength,
                       volume=volume, status=status)
            for kind, multiple, fallback, strength, volume, status in _ORDER_BLOCKS
        ],
        fibonacci=[
            FibonacciLevel(level=level, price=scaled(multiple, fallback), type=kind)
            for level, multiple, fallback, kind in _FIB_LEVELS
        ],
    )
