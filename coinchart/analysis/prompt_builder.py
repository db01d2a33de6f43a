"""
Prompt construction for the market summary.
The prompt is a pure function of the fetched data: same inputs, same text.
"""

from typing import Optional

from coinchart.market.models import CoinSnapshot, PriceSeries
from coinchart.utils.format_utils import FormatUtils, format_utils as default_format_utils


class PromptBuilder:
    """Builds the analysis prompt from a snapshot and its price series."""

    def __init__(self, format_utils: Optional[FormatUtils] = None, summary_words: str = "100-150") -> None:
        """Initialize the PromptBuilder.

        Args:
            format_utils: Formatter used for price and percentage text
            summary_words: Target length of the summary, in words
        """
        self.format_utils = format_utils or default_format_utils
        self.summary_words = summary_words

    def build_prompt(self, snapshot: CoinSnapshot, series: PriceSeries, currency_id: str, range_days: int) -> str:
        """Build the prompt text.

        Embeds the coin name and symbol, the currency code, the current price
        with its currency symbol, the 24h change and every 'label: price' line
        of the series in upstream order.
        """
        currency_code = currency_id.upper()
        price_text = self.format_utils.format_price(snapshot.current_price, currency_id)
        change_text = self.format_utils.format_percentage(snapshot.price_change_pct_24h)
        day_word = "day" if range_days == 1 else "days"

        lines = [
            f"Provide a brief market analysis for {snapshot.name} ({snapshot.symbol}) in {currency_code}.",
            f"Current Price: {price_text}",
            f"24h Price Change: {change_text}",
            f"Historical data points (last {range_days} {day_word}, time: price):",
        ]
        lines.extend(f"{point.label}: {point.price}" for point in series)
        lines.extend([
            "",
            "Focus on the recent price movement (up/down trend), volatility, and potential implications "
            f"based on the provided data. Keep it concise, around {self.summary_words} words.",
        ])
        return "\n".join(lines)
