"""Chart state and the pure reducers that move it between fetch and analysis stages.

Each reducer returns a new ChartState, or the very same object when the update
belongs to a superseded cycle and must be dropped.
"""
from dataclasses import dataclass, field, replace
from typing import Optional

from coinchart.market.models import AnalysisResult, AnalysisStatus, FetchResult, FetchStatus, Selection


@dataclass(frozen=True, slots=True)
class ChartState:
    selection: Optional[Selection] = None
    cycle_id: int = 0
    fetch: FetchResult = field(default_factory=lambda: FetchResult(FetchStatus.EMPTY))
    analysis: AnalysisResult = field(default_factory=AnalysisResult.idle)
    analysis_cycle_id: int = 0

    @property
    def is_loading(self) -> bool:
        return self.fetch.status == FetchStatus.LOADING

    @property
    def is_generating(self) -> bool:
        return self.analysis.status == AnalysisStatus.GENERATING

    @property
    def can_generate(self) -> bool:
        """Whether an analysis trigger should be enabled."""
        return self.fetch.status == FetchStatus.SUCCESS and not self.is_generating


def begin_cycle(state: ChartState, selection: Selection) -> ChartState:
    """Start a new fetch cycle. The previous cycle becomes stale."""
    return ChartState(
        selection=selection,
        cycle_id=state.cycle_id + 1,
        fetch=FetchResult.loading(selection, previous=state.fetch),
        analysis=AnalysisResult.idle(),
        analysis_cycle_id=state.analysis_cycle_id,
    )


def apply_fetch_result(state: ChartState, cycle_id: int, result: FetchResult) -> ChartState:
    """Store a fetch result if it is the first terminal result of the current cycle."""
    if cycle_id != state.cycle_id:
        return state
    if result.status in (FetchStatus.CANCELLED, FetchStatus.LOADING):
        return state
    if result.selection != state.selection or state.fetch.is_terminal:
        return state
    return replace(state, fetch=result)


def begin_analysis(state: ChartState) -> ChartState:
    """Mark an analysis as in flight for the current cycle. Ignored while one is already running."""
    if state.is_generating or state.is_loading:
        return state
    return replace(state, analysis=AnalysisResult.generating(), analysis_cycle_id=state.cycle_id)


def apply_analysis_result(state: ChartState, cycle_id: int, result: AnalysisResult) -> ChartState:
    """Store an analysis result produced for the current cycle."""
    if cycle_id != state.cycle_id or cycle_id != state.analysis_cycle_id or not state.is_generating:
        return state
    if result.status in (AnalysisStatus.IDLE, AnalysisStatus.GENERATING):
        return state
    return replace(state, analysis=result)
