"""Static lookups over the supported coin and currency tables. No I/O."""

from typing import Dict, Iterable, List, Optional, Tuple

from coinchart.catalog.constants import (
    ALL_SUPPORTED_COINS,
    ALL_SUPPORTED_CURRENCIES,
    CHART_FALLBACK_TITLE,
    CoinMeta,
    CurrencyMeta,
)


class CatalogResolver:
    """Maps coin and currency identifiers to display metadata.

    Identifiers are matched case-insensitively. Unknown identifiers resolve to
    None and never raise.
    """

    def __init__(self,
                 coins: Iterable[CoinMeta] = ALL_SUPPORTED_COINS,
                 currencies: Iterable[CurrencyMeta] = ALL_SUPPORTED_CURRENCIES) -> None:
        self._coins: Dict[str, CoinMeta] = {c.id.lower(): c for c in coins}
        self._currencies: Dict[str, CurrencyMeta] = {c.id.lower(): c for c in currencies}

    def resolve_coin(self, coin_id: Optional[str]) -> Optional[CoinMeta]:
        if not coin_id:
            return None
        return self._coins.get(coin_id.strip().lower())

    def resolve_currency(self, currency_id: Optional[str]) -> Optional[CurrencyMeta]:
        if not currency_id:
            return None
        return self._currencies.get(currency_id.strip().lower())

    def currency_symbol(self, currency_id: Optional[str]) -> str:
        currency = self.resolve_currency(currency_id)
        return currency.symbol if currency else ''

    def coin_title(self, coin_id: Optional[str]) -> str:
        """Chart heading such as 'Bitcoin (BTC)', or the generic title for unknown coins."""
        coin = self.resolve_coin(coin_id)
        if coin is None:
            return CHART_FALLBACK_TITLE
        return f"{coin.name} ({coin.symbol.upper()})"

    def coin_options(self) -> List[Tuple[str, str]]:
        """(value, label) pairs for a coin selector, e.g. ('bitcoin', 'Bitcoin (BTC)')."""
        return [(c.id, f"{c.name} ({c.symbol.upper()})") for c in self._coins.values()]

    def currency_options(self) -> List[Tuple[str, str]]:
        """(value, label) pairs for a currency selector, e.g. ('usd', 'USD US Dollar')."""
        return [(c.id, f"{c.id.upper()} {c.name}") for c in self._currencies.values()]


default_catalog = CatalogResolver()


def resolve_coin(coin_id: Optional[str]) -> Optional[CoinMeta]:
    return default_catalog.resolve_coin(coin_id)


def resolve_currency(currency_id: Optional[str]) -> Optional[CurrencyMeta]:
    return default_catalog.resolve_currency(currency_id)
