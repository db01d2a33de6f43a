"""coinchart - CoinGecko market data pipeline with Gemini market summaries."""

__version__ = "0.1.0"
