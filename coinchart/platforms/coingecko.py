from typing import Any, Dict, Optional

from coinchart.contracts.config import ConfigProtocol
from coinchart.logger.logger import Logger
from coinchart.platforms.base import BaseApiClient
from coinchart.utils.decorators import RetryPolicy, retry_async


class CoinGeckoAPI(BaseApiClient):
    """Raw access to the two CoinGecko endpoints the chart needs."""

    COIN_DATA_PATH_TEMPLATE = "coins/{coin_id}"
    MARKET_CHART_PATH_TEMPLATE = "coins/{coin_id}/market_chart"
    DEMO_KEY_HEADER = "x-cg-demo-api-key"

    # Market metadata only: no localization, tickers, community or developer data
    COIN_DATA_PARAMS = {
        "localization": "false",
        "tickers": "false",
        "market_data": "true",
        "community_data": "false",
        "developer_data": "false",
        "sparkline": "false",
    }

    def __init__(
        self,
        logger: Logger,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout_seconds: float = 15,
        api_key: Optional[str] = None,
        retry_policy: Optional[RetryPolicy] = None
    ) -> None:
        headers = {"accept": "application/json"}
        if api_key:
            headers[self.DEMO_KEY_HEADER] = api_key
        super().__init__(base_url, logger, timeout_seconds=timeout_seconds, headers=headers,
                         retry_policy=retry_policy)

    @classmethod
    def from_config(cls, config: ConfigProtocol, logger: Logger) -> "CoinGeckoAPI":
        return cls(
            logger,
            base_url=config.COINGECKO_BASE_URL,
            timeout_seconds=config.REQUEST_TIMEOUT_SECONDS,
            api_key=config.COINGECKO_API_KEY,
            retry_policy=RetryPolicy.from_config(config),
        )

    @retry_async()
    async def get_coin_data(self, coin_id: str) -> Any:
        """GET /coins/{id} with market data for every vs_currency."""
        path = self.COIN_DATA_PATH_TEMPLATE.format(coin_id=coin_id)
        return await self._get_json(path, params=dict(self.COIN_DATA_PARAMS))

    @retry_async()
    async def get_market_chart(self, coin_id: str, currency_id: str, days: int) -> Any:
        """GET /coins/{id}/market_chart: {"prices": [[timestamp_ms, price], ...], ...}."""
        path = self.MARKET_CHART_PATH_TEMPLATE.format(coin_id=coin_id)
        params: Dict[str, Any] = {"vs_currency": currency_id, "days": days}
        return await self._get_json(path, params=params)
