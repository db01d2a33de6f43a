import asyncio
from typing import Callable, List, Optional

from coinchart.analysis.generator import AnalysisGenerator
from coinchart.contracts.config import ConfigProtocol
from coinchart.logger.logger import Logger
from coinchart.market.fetcher import MarketDataFetcher
from coinchart.market.models import FetchResult, Selection
from coinchart.platforms.coingecko import CoinGeckoAPI
from coinchart.state.chart_state import (
    ChartState,
    apply_analysis_result,
    apply_fetch_result,
    begin_analysis,
    begin_cycle,
)

StateListener = Callable[[ChartState], None]


class SelectionController:
    """Owns the current Selection and ChartState and arbitrates re-fetching.

    All mutation happens on the event loop thread. A new selection cancels the
    task of the previous cycle and bumps the cycle id, and results are applied
    only when their cycle id is still current (last selection wins).
    """

    def __init__(self,
                 fetcher: MarketDataFetcher,
                 generator: AnalysisGenerator,
                 logger: Logger,
                 default_selection: Optional[Selection] = None) -> None:
        self.fetcher = fetcher
        self.generator = generator
        self.logger = logger
        self.default_selection = default_selection or Selection("bitcoin", "usd", 7)
        self._state = ChartState()
        self._listeners: List[StateListener] = []
        self._fetch_task: Optional[asyncio.Task] = None
        self._analysis_task: Optional[asyncio.Task] = None

    @classmethod
    def from_config(cls, config: ConfigProtocol, logger: Logger) -> "SelectionController":
        fetcher = MarketDataFetcher(CoinGeckoAPI.from_config(config, logger), logger)
        generator = AnalysisGenerator.from_config(config, logger)
        default_selection = Selection(config.DEFAULT_COIN, config.DEFAULT_CURRENCY, config.DEFAULT_RANGE_DAYS)
        return cls(fetcher, generator, logger, default_selection=default_selection)

    @property
    def state(self) -> ChartState:
        return self._state

    @property
    def selection(self) -> Selection:
        return self._state.selection or self.default_selection

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a view listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, new_state: ChartState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                self.logger.error(f"State listener {listener!r} failed: {type(e).__name__} - {e}")

    # ----- selection changes -----

    def select(self, selection: Selection) -> asyncio.Task:
        """Start a fetch cycle for selection, superseding any cycle in flight.

        Must be called from a running event loop.
        """
        self._cancel_task(self._fetch_task)
        self._cancel_task(self._analysis_task)

        self._set_state(begin_cycle(self._state, selection))
        cycle_id = self._state.cycle_id
        self.logger.debug(f"Selection changed to {selection}, cycle #{cycle_id}")

        self._fetch_task = asyncio.create_task(self._run_fetch(cycle_id, selection),
                                               name=f"fetch-cycle-{cycle_id}")
        return self._fetch_task

    def set_coin(self, coin_id: str) -> asyncio.Task:
        current = self.selection
        return self.select(Selection(coin_id, current.currency_id, current.range_days))

    def set_currency(self, currency_id: str) -> asyncio.Task:
        current = self.selection
        return self.select(Selection(current.coin_id, currency_id, current.range_days))

    def set_range(self, range_days: int) -> asyncio.Task:
        current = self.selection
        return self.select(Selection(current.coin_id, current.currency_id, range_days))

    def refresh(self) -> asyncio.Task:
        """Refetch the current selection. Nothing is cached, so this always hits the provider."""
        return self.select(self.selection)

    async def _run_fetch(self, cycle_id: int, selection: Selection) -> None:
        try:
            result: FetchResult = await self.fetcher.fetch(selection)
        except asyncio.CancelledError:
            self.logger.debug(f"Fetch cycle #{cycle_id} cancelled")
            return
        new_state = apply_fetch_result(self._state, cycle_id, result)
        if new_state is self._state:
            self.logger.debug(f"Dropped {result.status.value} result of stale cycle #{cycle_id}")
        self._set_state(new_state)

    # ----- analysis -----

    def request_analysis(self) -> Optional[asyncio.Task]:
        """Generate a market summary for the current data set.

        Ignored while a fetch is loading or a summary is already being generated.
        """
        new_state = begin_analysis(self._state)
        if new_state is self._state:
            self.logger.info("Analysis request ignored: data is loading or analysis is already running")
            return None

        self._set_state(new_state)
        cycle_id = new_state.cycle_id
        selection = new_state.selection or self.default_selection
        self._analysis_task = asyncio.create_task(
            self._run_analysis(cycle_id, new_state.fetch, selection),
            name=f"analysis-cycle-{cycle_id}",
        )
        return self._analysis_task

    async def _run_analysis(self, cycle_id: int, fetch: FetchResult, selection: Selection) -> None:
        try:
            result = await self.generator.generate(fetch.snapshot, fetch.series, selection.currency_id,
                                                   selection.range_days)
        except asyncio.CancelledError:
            self.logger.debug(f"Analysis for cycle #{cycle_id} cancelled")
            return
        self._set_state(apply_analysis_result(self._state, cycle_id, result))

    # ----- lifecycle -----

    @staticmethod
    def _cancel_task(task: Optional[asyncio.Task]) -> None:
        if task is not None and not task.done():
            task.cancel()

    async def wait_idle(self) -> ChartState:
        """Wait until no fetch or analysis task is pending and return the final state."""
        while True:
            pending = [t for t in (self._fetch_task, self._analysis_task) if t is not None and not t.done()]
            if not pending:
                return self._state
            await asyncio.wait(pending)

    async def close(self) -> None:
        self._cancel_task(self._fetch_task)
        self._cancel_task(self._analysis_task)
        tasks = [t for t in (self._fetch_task, self._analysis_task) if t is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.fetcher.cancel()
        await self.fetcher.api.close()
        await self.generator.client.close()
