import asyncio
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from coinchart.logger.logger import Logger

BASE_TS_MS = 1_710_000_000_000  # 2024-03-09
DAY_MS = 86_400_000


def make_coin_payload(coin_id: str = "bitcoin",
                      name: str = "Bitcoin",
                      symbol: str = "btc",
                      prices: Optional[Dict[str, float]] = None,
                      change_24h: Optional[float] = -2.5) -> Dict[str, Any]:
    """Trimmed GET /coins/{id} body."""
    return {
        "id": coin_id,
        "symbol": symbol,
        "name": name,
        "image": {
            "thumb": f"https://assets.example/{coin_id}/thumb.png",
            "small": f"https://assets.example/{coin_id}/small.png",
            "large": f"https://assets.example/{coin_id}/large.png",
        },
        "market_data": {
            "current_price": prices if prices is not None else {"usd": 65000, "eur": 60000.5},
            "price_change_percentage_24h": change_24h,
        },
    }


def make_chart_payload(prices: List[float], step_ms: int = DAY_MS) -> Dict[str, Any]:
    """GET /coins/{id}/market_chart body with evenly spaced points."""
    return {
        "prices": [[BASE_TS_MS + i * step_ms, price] for i, price in enumerate(prices)],
        "market_caps": [],
        "total_volumes": [],
    }


class FakeCoinGeckoAPI:
    """Stands in for CoinGeckoAPI. Responses are keyed by coin id; gates hold a coin's requests open."""

    def __init__(self) -> None:
        self.coin_data: Dict[str, Any] = {}
        self.charts: Dict[str, Any] = {}
        self.errors: Dict[str, BaseException] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[tuple] = []
        self.closed = False

    def gate(self, coin_id: str) -> asyncio.Event:
        self.gates[coin_id] = asyncio.Event()
        return self.gates[coin_id]

    async def _wait(self, coin_id: str) -> None:
        gate = self.gates.get(coin_id)
        if gate is not None:
            await gate.wait()

    async def get_coin_data(self, coin_id: str) -> Any:
        self.calls.append(("coin", coin_id))
        await self._wait(coin_id)
        if coin_id in self.errors:
            raise self.errors[coin_id]
        return self.coin_data[coin_id]

    async def get_market_chart(self, coin_id: str, currency_id: str, days: int) -> Any:
        self.calls.append(("chart", coin_id, currency_id, days))
        return self.charts[coin_id]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    logger = MagicMock(spec=Logger)
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger


@pytest.fixture
def fake_api() -> FakeCoinGeckoAPI:
    api = FakeCoinGeckoAPI()
    api.coin_data["bitcoin"] = make_coin_payload()
    api.charts["bitcoin"] = make_chart_payload([64000.123, 64500.5, 63900, 65100.987, 64800, 64950.25, 65000])
    api.coin_data["ethereum"] = make_coin_payload(
        "ethereum", "Ethereum", "eth", prices={"usd": 3200.5, "eur": 2950.75}, change_24h=1.25
    )
    api.charts["ethereum"] = make_chart_payload([2900.1, 2925.456, 2950.75])
    return api


@pytest.fixture
def stub_config():
    """Minimal object satisfying ConfigProtocol."""
    return SimpleNamespace(
        GOOGLE_STUDIO_API_KEY="test-api-key",
        COINGECKO_API_KEY=None,
        LOGGER_DEBUG=False,
        DEFAULT_COIN="bitcoin",
        DEFAULT_CURRENCY="usd",
        DEFAULT_RANGE_DAYS=7,
        LOG_DIR="logs",
        COINGECKO_BASE_URL="https://api.coingecko.test/api/v3",
        REQUEST_TIMEOUT_SECONDS=5.0,
        MAX_RETRIES=1,
        RETRY_INITIAL_DELAY=0.0,
        RETRY_BACKOFF_FACTOR=2.0,
        RETRY_MAX_DELAY=0.0,
        GOOGLE_STUDIO_MODEL="gemini-2.0-flash",
        ANALYSIS_TIMEOUT_SECONDS=5.0,
        get_model_config=lambda overrides=None: {"temperature": 0.7, "max_tokens": 1024},
    )
