from coinchart.catalog.constants import (
    ALL_SUPPORTED_COINS,
    ALL_SUPPORTED_CURRENCIES,
    CoinMeta,
    CurrencyMeta,
)
from coinchart.catalog.resolver import CatalogResolver, default_catalog, resolve_coin, resolve_currency

__all__ = [
    'ALL_SUPPORTED_COINS',
    'ALL_SUPPORTED_CURRENCIES',
    'CatalogResolver',
    'CoinMeta',
    'CurrencyMeta',
    'default_catalog',
    'resolve_coin',
    'resolve_currency',
]
