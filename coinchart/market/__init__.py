from coinchart.market.fetcher import MarketDataFetcher
from coinchart.market.models import (
    AnalysisResult,
    AnalysisStatus,
    CoinSnapshot,
    FetchResult,
    FetchStatus,
    PricePoint,
    PriceSeries,
    Selection,
)

__all__ = [
    'AnalysisResult',
    'AnalysisStatus',
    'CoinSnapshot',
    'FetchResult',
    'FetchStatus',
    'MarketDataFetcher',
    'PricePoint',
    'PriceSeries',
    'Selection',
]
