"""Supported coins and quote currencies, in selector display order."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class CoinMeta:
    id: str        # CoinGecko coin id, e.g. "bitcoin"
    name: str
    symbol: str    # lower-case ticker as CoinGecko reports it


@dataclass(frozen=True, slots=True)
class CurrencyMeta:
    id: str        # CoinGecko vs_currency code, e.g. "usd"
    name: str
    symbol: str


ALL_SUPPORTED_COINS: Tuple[CoinMeta, ...] = (
    CoinMeta("bitcoin", "Bitcoin", "btc"),
    CoinMeta("ethereum", "Ethereum", "eth"),
    CoinMeta("tether", "Tether", "usdt"),
    CoinMeta("binancecoin", "BNB", "bnb"),
    CoinMeta("solana", "Solana", "sol"),
    CoinMeta("usd-coin", "USDC", "usdc"),
    CoinMeta("ripple", "XRP", "xrp"),
    CoinMeta("dogecoin", "Dogecoin", "doge"),
    CoinMeta("tron", "TRON", "trx"),
    CoinMeta("cardano", "Cardano", "ada"),
    CoinMeta("avalanche-2", "Avalanche", "avax"),
    CoinMeta("shiba-inu", "Shiba Inu", "shib"),
    CoinMeta("chainlink", "Chainlink", "link"),
    CoinMeta("polkadot", "Polkadot", "dot"),
    CoinMeta("bitcoin-cash", "Bitcoin Cash", "bch"),
    CoinMeta("litecoin", "Litecoin", "ltc"),
    CoinMeta("uniswap", "Uniswap", "uni"),
    CoinMeta("stellar", "Stellar", "xlm"),
    CoinMeta("monero", "Monero", "xmr"),
    CoinMeta("cosmos", "Cosmos Hub", "atom"),
)

ALL_SUPPORTED_CURRENCIES: Tuple[CurrencyMeta, ...] = (
    CurrencyMeta("usd", "US Dollar", "$"),
    CurrencyMeta("eur", "Euro", "€"),
    CurrencyMeta("gbp", "British Pound", "£"),
    CurrencyMeta("jpy", "Japanese Yen", "¥"),
    CurrencyMeta("cny", "Chinese Yuan", "¥"),
    CurrencyMeta("inr", "Indian Rupee", "₹"),
    CurrencyMeta("krw", "South Korean Won", "₩"),
    CurrencyMeta("aud", "Australian Dollar", "A$"),
    CurrencyMeta("cad", "Canadian Dollar", "C$"),
    CurrencyMeta("chf", "Swiss Franc", "CHF "),
    CurrencyMeta("brl", "Brazilian Real", "R$"),
    CurrencyMeta("rub", "Russian Ruble", "₽"),
    CurrencyMeta("try", "Turkish Lira", "₺"),
    CurrencyMeta("ngn", "Nigerian Naira", "₦"),
    CurrencyMeta("btc", "Bitcoin", "₿"),
    CurrencyMeta("eth", "Ether", "Ξ"),
)

CHART_FALLBACK_TITLE = "Custom Coin Chart"
