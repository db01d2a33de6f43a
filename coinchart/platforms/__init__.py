from coinchart.platforms.base import BaseApiClient
from coinchart.platforms.coingecko import CoinGeckoAPI

__all__ = [
    'BaseApiClient',
    'CoinGeckoAPI',
]
