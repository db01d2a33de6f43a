"""
Formatting utilities shared by the fetcher, the prompt builder and the view model.

Everything here is pure: no I/O and no hidden state beyond the catalog used for
currency symbols.
"""
from datetime import datetime
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

from coinchart.catalog.resolver import CatalogResolver, default_catalog
from coinchart.contracts.errors import MalformedResponse

Number = Union[int, float, Decimal]

_CENT = Decimal("0.01")

# Wide enough to quantize any finite float (up to ~1.8e308) to 6 fraction digits
_QUANTIZE_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


class PriceColor(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @property
    def hex(self) -> str:
        """CSS color used for price change text and the chart line."""
        return {
            PriceColor.POSITIVE: "#16c784",
            PriceColor.NEGATIVE: "#ea3943",
            PriceColor.NEUTRAL: "inherit",
        }[self]


def to_decimal(value: Optional[Number], default: Decimal = Decimal(0)) -> Decimal:
    """Convert a JSON number to Decimal via its shortest repr; None or junk gives default."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default
    return result if result.is_finite() else default


def _quantize(value: Decimal, exponent: Decimal) -> Decimal:
    return value.quantize(exponent, rounding=ROUND_HALF_UP, context=_QUANTIZE_CONTEXT)


class FormatUtils:
    """Utility class for currency, percentage and timestamp formatting."""

    def __init__(self, catalog: Optional[CatalogResolver] = None):
        self.catalog = catalog or default_catalog

    def currency_symbol(self, currency_id: Optional[str]) -> str:
        """Display symbol for a currency id, empty string if unknown."""
        return self.catalog.currency_symbol(currency_id)

    @staticmethod
    def price_color(pct: Number) -> PriceColor:
        if pct > 0:
            return PriceColor.POSITIVE
        if pct < 0:
            return PriceColor.NEGATIVE
        return PriceColor.NEUTRAL

    @staticmethod
    def round_price(value: Number) -> Decimal:
        """Round a price to 2 fractional digits, half-up: 1234.567 -> 1234.57, 1234.5 -> 1234.50."""
        try:
            return _quantize(to_decimal(value), _CENT)
        except InvalidOperation as e:
            raise MalformedResponse(f"Price {value!r} is out of range") from e

    @staticmethod
    def format_amount(value: Number, min_digits: int = 2, max_digits: int = 6) -> str:
        """en-US grouped number with between min_digits and max_digits fraction digits.

        65000 -> '65,000.00', 0.000123456 -> '0.000123', 1.5 -> '1.50'
        """
        amount = _quantize(to_decimal(value), Decimal(1).scaleb(-max_digits))
        text = f"{amount:,.{max_digits}f}"
        whole, _, fraction = text.partition('.')
        fraction = fraction.rstrip('0')
        if len(fraction) < min_digits:
            fraction = fraction.ljust(min_digits, '0')
        return f"{whole}.{fraction}" if fraction else whole

    def format_price(self, value: Number, currency_id: Optional[str]) -> str:
        """Price prefixed with the currency symbol, e.g. '$65,000.00'."""
        return f"{self.currency_symbol(currency_id)}{self.format_amount(value)}"

    @staticmethod
    def format_percentage(pct: Number) -> str:
        """Signed percentage with 2 decimals: -2.5 -> '-2.50%'. Zero is never signed."""
        rounded = _quantize(to_decimal(pct), _CENT)
        if rounded == 0:
            rounded = abs(rounded)
        return f"{rounded}%"

    @staticmethod
    def format_change_badge(pct: Number) -> str:
        """Arrow badge for a 24h change: '▲2.50%', '▼2.50%', or '' when unchanged."""
        change = to_decimal(pct)
        if change == 0:
            return ''
        arrow = '▲' if change > 0 else '▼'
        return f"{arrow}{_quantize(abs(change), _CENT)}%"

    @staticmethod
    def format_time_label(timestamp_ms: Number, range_days: int) -> str:
        """Axis label for a series point, in local time.

        range_days <= 1 gives 'HH:MM', up to 30 days a calendar date
        'YYYY-MM-DD', longer ranges an abbreviated month and year 'Mar 2024'.
        """
        try:
            dt = datetime.fromtimestamp(float(timestamp_ms) / 1000)
        except (ValueError, TypeError, OverflowError, OSError):
            return "N/A"

        if range_days <= 1:
            return dt.strftime("%H:%M")
        if range_days <= 30:
            return dt.strftime("%Y-%m-%d")
        return dt.strftime("%b %Y")


format_utils = FormatUtils()


def currency_symbol(currency_id: Optional[str]) -> str:
    return format_utils.currency_symbol(currency_id)


def price_color(pct: Number) -> PriceColor:
    return FormatUtils.price_color(pct)
