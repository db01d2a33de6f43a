"""
Tests for CoinGeckoAPI request building, status/JSON error mapping and the retry decorator.
The aiohttp session is replaced by a scripted fake so no network is used.
"""
import asyncio
import json
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from coinchart.contracts.errors import FailureKind, MalformedResponse, NetworkFailure, UpstreamStatusFailure
from coinchart.platforms.coingecko import CoinGeckoAPI
from coinchart.utils.decorators import RetryPolicy


class FakeResponse:
    def __init__(self, status=200, body=None, text=None):
        self.status = status
        self._body = body
        self._text = text if text is not None else json.dumps(body)

    async def json(self, content_type=None):
        return json.loads(self._text)

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Replays queued responses or exceptions, one per GET."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []
        self.closed = False

    def get(self, url, params=None):
        self.requests.append((url, params))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self):
        self.closed = True


def make_api(mock_logger, *outcomes, retries=2, api_key=None):
    api = CoinGeckoAPI(
        mock_logger,
        base_url="https://api.coingecko.test/api/v3/",
        api_key=api_key,
        retry_policy=RetryPolicy(max_retries=retries, initial_delay=0.0, max_delay=0.0),
    )
    api.session = FakeSession(*outcomes)
    return api


@pytest.fixture
def no_sleep():
    with patch("coinchart.utils.decorators.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.mark.asyncio
async def test_coin_data_request(mock_logger):
    api = make_api(mock_logger, FakeResponse(body={"id": "bitcoin"}))

    body = await api.get_coin_data("bitcoin")

    assert body == {"id": "bitcoin"}
    url, params = api.session.requests[0]
    assert url == "https://api.coingecko.test/api/v3/coins/bitcoin"
    assert params["market_data"] == "true"
    assert params["tickers"] == "false"
    assert params["localization"] == "false"


@pytest.mark.asyncio
async def test_market_chart_request(mock_logger):
    api = make_api(mock_logger, FakeResponse(body={"prices": []}))

    await api.get_market_chart("ethereum", "eur", 30)

    url, params = api.session.requests[0]
    assert url == "https://api.coingecko.test/api/v3/coins/ethereum/market_chart"
    assert params == {"vs_currency": "eur", "days": 30}


def test_demo_key_header(mock_logger):
    assert CoinGeckoAPI(mock_logger, api_key="cg-key").headers[CoinGeckoAPI.DEMO_KEY_HEADER] == "cg-key"
    assert CoinGeckoAPI.DEMO_KEY_HEADER not in CoinGeckoAPI(mock_logger).headers


def test_from_config(stub_config, mock_logger):
    api = CoinGeckoAPI.from_config(stub_config, mock_logger)
    assert api.base_url == "https://api.coingecko.test/api/v3"
    assert api.retry_policy.max_retries == 1
    assert api.timeout.total == 5.0


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 429, 500])
async def test_error_status_is_not_retried(mock_logger, no_sleep, status):
    api = make_api(mock_logger, FakeResponse(status=status, text="nope"))

    with pytest.raises(UpstreamStatusFailure) as exc_info:
        await api.get_coin_data("not-a-coin")

    assert exc_info.value.status == status
    assert exc_info.value.kind == FailureKind.UPSTREAM_STATUS
    assert str(status) in exc_info.value.message
    assert len(api.session.requests) == 1
    no_sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalid_json_is_malformed(mock_logger, no_sleep):
    api = make_api(mock_logger, FakeResponse(text="<html>oops</html>"))

    with pytest.raises(MalformedResponse):
        await api.get_coin_data("bitcoin")
    assert len(api.session.requests) == 1


@pytest.mark.asyncio
async def test_timeout_is_retried_then_succeeds(mock_logger, no_sleep):
    api = make_api(mock_logger, asyncio.TimeoutError(), FakeResponse(body={"prices": [[1, 2]]}))

    body = await api.get_market_chart("bitcoin", "usd", 7)

    assert body == {"prices": [[1, 2]]}
    assert len(api.session.requests) == 2
    assert no_sleep.await_count == 1
    mock_logger.warning.assert_called_once()


@pytest.mark.asyncio
async def test_retries_are_bounded(mock_logger, no_sleep):
    errors = [aiohttp.ClientConnectionError("refused") for _ in range(3)]
    api = make_api(mock_logger, *errors, retries=2)

    with pytest.raises(NetworkFailure) as exc_info:
        await api.get_coin_data("bitcoin")

    assert exc_info.value.kind == FailureKind.NETWORK
    assert len(api.session.requests) == 3
    assert no_sleep.await_count == 2
    mock_logger.error.assert_called_once()


@pytest.mark.asyncio
async def test_timeout_failure_is_flagged(mock_logger, no_sleep):
    api = make_api(mock_logger, asyncio.TimeoutError(), retries=0)

    with pytest.raises(NetworkFailure) as exc_info:
        await api.get_coin_data("bitcoin")
    assert exc_info.value.timed_out is True


@pytest.mark.asyncio
async def test_close_releases_session(mock_logger):
    api = make_api(mock_logger)
    session = api.session

    await api.close()

    assert session.closed is True
    assert api.session is None
