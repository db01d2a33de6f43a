import asyncio
from typing import Any, List, Optional

from pydantic import ValidationError

from coinchart.contracts.errors import MalformedResponse, PipelineError
from coinchart.logger.logger import Logger
from coinchart.market.models import CoinSnapshot, FetchResult, PricePoint, PriceSeries, Selection
from coinchart.market.payloads import CoinDetailsPayload, MarketChartPayload
from coinchart.platforms.coingecko import CoinGeckoAPI
from coinchart.utils.format_utils import FormatUtils, format_utils as default_format_utils


class MarketDataFetcher:
    """Resolves a Selection into a FetchResult with two dependent CoinGecko requests.

    Every call to fetch() starts a new cycle and supersedes the previous one.
    A superseded call returns a CANCELLED result as soon as it regains control,
    whatever its requests produced, so stale data or stale errors never leave
    this class as SUCCESS or FAILED.
    """

    def __init__(self, api: CoinGeckoAPI, logger: Logger, format_utils: Optional[FormatUtils] = None) -> None:
        self.api = api
        self.logger = logger
        self.format_utils = format_utils or default_format_utils
        self._cycle_id = 0

    @property
    def cycle_id(self) -> int:
        return self._cycle_id

    def cancel(self) -> None:
        """Supersede the outstanding cycle without starting a new one."""
        self._cycle_id += 1

    def _is_stale(self, cycle_id: int) -> bool:
        return cycle_id != self._cycle_id

    async def fetch(self, selection: Selection) -> FetchResult:
        self._cycle_id += 1
        cycle_id = self._cycle_id
        self.logger.debug(f"Fetch cycle #{cycle_id} started for {selection}")

        try:
            details = await self.api.get_coin_data(selection.coin_id)
            if self._is_stale(cycle_id):
                return self._superseded(cycle_id, selection)
            snapshot = self.parse_snapshot(details, selection)

            chart = await self.api.get_market_chart(selection.coin_id, selection.currency_id, selection.range_days)
            if self._is_stale(cycle_id):
                return self._superseded(cycle_id, selection)
            series = self.parse_series(chart, selection.range_days)
        except asyncio.CancelledError:
            self.logger.debug(f"Fetch cycle #{cycle_id} for {selection} cancelled")
            raise
        except PipelineError as e:
            if self._is_stale(cycle_id):
                return self._superseded(cycle_id, selection)
            self.logger.warning(f"Fetch cycle #{cycle_id} for {selection} failed: {e.kind.value} - {e}")
            return FetchResult.failed(selection, e.to_failure())
        except Exception as e:
            if self._is_stale(cycle_id):
                return self._superseded(cycle_id, selection)
            self.logger.error(f"Fetch cycle #{cycle_id} for {selection} hit an unexpected error: "
                              f"{type(e).__name__} - {e}", exc_info=True)
            error = MalformedResponse(f"Unexpected error while processing market data: {type(e).__name__}")
            return FetchResult.failed(selection, error.to_failure())

        self.logger.debug(f"Fetch cycle #{cycle_id} resolved {len(series)} points for {selection}")
        return FetchResult.success(selection, snapshot, series)

    def _superseded(self, cycle_id: int, selection: Selection) -> FetchResult:
        self.logger.debug(f"Fetch cycle #{cycle_id} for {selection} superseded by #{self._cycle_id}, dropping result")
        return FetchResult.cancelled(selection)

    @staticmethod
    def parse_snapshot(body: Any, selection: Selection) -> CoinSnapshot:
        if not isinstance(body, dict):
            raise MalformedResponse(f"Coin data for {selection.coin_id} is not a JSON object")
        try:
            payload = CoinDetailsPayload.model_validate(body)
        except ValidationError as e:
            raise MalformedResponse(
                f"Coin data for {selection.coin_id} has unexpected field types",
                details={"errors": e.errors(include_url=False)}
            ) from e
        return payload.to_snapshot(selection.coin_id, selection.currency_id)

    def parse_series(self, body: Any, range_days: int) -> PriceSeries:
        """Turn [timestamp_ms, price] pairs into labelled points, keeping upstream order."""
        if not isinstance(body, dict):
            raise MalformedResponse("Market chart is not a JSON object")
        try:
            payload = MarketChartPayload.model_validate(body)
        except ValidationError as e:
            raise MalformedResponse(
                "Market chart prices are not [timestamp, price] pairs",
                details={"errors": e.errors(include_url=False)}
            ) from e

        points: List[PricePoint] = []
        skipped = 0
        for timestamp_ms, price in payload.prices:
            if price is None:
                skipped += 1
                continue
            points.append(PricePoint(
                label=self.format_utils.format_time_label(timestamp_ms, range_days),
                price=self.format_utils.round_price(price),
            ))
        if skipped:
            self.logger.debug(f"Skipped {skipped} market chart points without a price")
        return tuple(points)
