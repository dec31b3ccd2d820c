from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

AssetType = Literal["stocks", "crypto"]


class AssetSnapshot(BaseModel):
    id: str
    symbol: str
    name: str
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    volume: Optional[float] = None
    market_cap: Optional[float] = None
    image: Optional[str] = None
    currency: str = "usd"
    provider: Optional[str] = None


class QuoteUpdate(BaseModel):
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    volume: Optional[float] = None
    market_cap: Optional[float] = None


class SearchResult(BaseModel):
    id: str
    symbol: str
    name: str
    image: Optional[str] = None


class TrendingAsset(BaseModel):
    id: str
    name: str
    symbol: str
    market_cap_rank: Optional[int] = None
    thumb: Optional[str] = None
    price_btc: Optional[float] = None


class PanelState(BaseModel):
    asset_type: AssetType
    identifier: Optional[str] = None
    currency: str = "usd"
    currency_symbol: str = "$"
    snapshot: Optional[AssetSnapshot] = None
    error: Optional[str] = None
    loading: bool = False


class SelectRequest(BaseModel):
    identifier: str


class CurrencyRequest(BaseModel):
    currency: str


class CategoryGroup(BaseModel):
    name: str
    assets: list[SearchResult] = Field(default_factory=list)
