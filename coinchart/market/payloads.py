"""Pydantic models for the CoinGecko payloads the fetcher reads.

Every field is optional upstream. Absent or null values take the defaults
declared here; only a value of the wrong type is a malformed response.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from coinchart.market.models import CoinSnapshot
from coinchart.utils.format_utils import to_decimal


class ImagePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Any: a non-string url is treated as no logo rather than a malformed body
    thumb: Any = None
    small: Any = None
    large: Any = None


class MarketDataPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current_price: Dict[str, Any] = {}
    price_change_percentage_24h: Any = None

    @field_validator("current_price", mode="before")
    @classmethod
    def _price_map_or_empty(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}


class CoinDetailsPayload(BaseModel):
    """Subset of GET /coins/{id} used for the snapshot."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    symbol: Optional[str] = None
    image: Optional[ImagePayload] = None
    market_data: Optional[MarketDataPayload] = None

    @field_validator("image", mode="before")
    @classmethod
    def _image_or_none(cls, value: Any) -> Any:
        # A bare string or list is not the {thumb, small, large} object: treat as no logo
        return value if isinstance(value, dict) else None

    @field_validator("market_data", mode="before")
    @classmethod
    def _market_data_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    def to_snapshot(self, coin_id: str, currency_id: str) -> CoinSnapshot:
        market = self.market_data or MarketDataPayload()
        price = to_decimal(market.current_price.get(currency_id.lower()))
        change = to_decimal(market.price_change_percentage_24h)
        image_url = (self.image.small if self.image else None) or ''

        return CoinSnapshot(
            id=self.id or coin_id,
            name=self.name or coin_id,
            symbol=(self.symbol or '').upper(),
            image_url=image_url if isinstance(image_url, str) else '',
            current_price=max(price, Decimal(0)),
            price_change_pct_24h=change,
        )


class MarketChartPayload(BaseModel):
    """Subset of GET /coins/{id}/market_chart: ordered [timestamp_ms, price] pairs."""
    model_config = ConfigDict(extra="ignore")

    prices: List[Tuple[float, Optional[float]]] = []

    @field_validator("prices", mode="before")
    @classmethod
    def _prices_or_empty(cls, value: Any) -> Any:
        return [] if value is None else value
