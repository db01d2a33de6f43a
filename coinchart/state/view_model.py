"""Read-only view data for a chart widget, derived from ChartState."""
from dataclasses import dataclass
from typing import Optional, Tuple

from coinchart.contracts.errors import FailureKind
from coinchart.market.models import AnalysisStatus, FetchStatus, PricePoint
from coinchart.state.chart_state import ChartState
from coinchart.utils.format_utils import FormatUtils, PriceColor, format_utils as default_format_utils

CHART_SUBTITLE = "Powered by CoinGecko API"
LOADING_MESSAGE = "Loading chart data..."
NO_DATA_MESSAGE = "No chart data available for this selection."
FETCH_ERROR_MESSAGE = "Failed to fetch data. Please try again."


@dataclass(frozen=True, slots=True)
class ChartView:
    title: str
    subtitle: str
    pair_label: str = ''
    coin_name: str = ''
    logo_url: Optional[str] = None
    price_text: str = ''
    change_text: str = ''
    change_color: str = PriceColor.NEUTRAL.hex
    line_color: str = PriceColor.POSITIVE.hex
    x_axis_label: str = ''
    y_axis_label: str = ''
    points: Tuple[PricePoint, ...] = ()
    message: Optional[str] = None
    error: Optional[str] = None
    analysis_button_label: str = "Generate Analysis"
    analysis_enabled: bool = False
    analysis_text: str = ''


def build_chart_view(state: ChartState, format_utils: Optional[FormatUtils] = None) -> ChartView:
    fmt = format_utils or default_format_utils
    selection = state.selection
    fetch = state.fetch
    snapshot = fetch.snapshot

    title = fmt.catalog.coin_title(selection.coin_id if selection else None)
    currency_symbol = fmt.currency_symbol(selection.currency_id) if selection else ''

    message = None
    error = None
    if fetch.status == FetchStatus.LOADING and not fetch.series:
        message = LOADING_MESSAGE
    elif fetch.status == FetchStatus.FAILED:
        error = FETCH_ERROR_MESSAGE
        if fetch.failure is not None:
            error = f"{FETCH_ERROR_MESSAGE} ({fetch.failure.reason})"
    elif not fetch.series:
        message = NO_DATA_MESSAGE

    view = dict(
        title=title,
        subtitle=CHART_SUBTITLE,
        points=fetch.series,
        message=message,
        error=error,
        analysis_button_label="Generating..." if state.is_generating else "Generate Analysis",
        analysis_enabled=state.can_generate,
        analysis_text=_analysis_text(state),
    )

    if selection is not None:
        view.update(
            x_axis_label=f"Time (Last {selection.range_days} Days)",
            y_axis_label=f"Price ({currency_symbol})",
        )

    if snapshot is not None and selection is not None:
        change = snapshot.price_change_pct_24h
        view.update(
            coin_name=snapshot.name,
            pair_label=f"{snapshot.symbol}/{selection.currency_id.upper()}",
            logo_url=snapshot.image_url or None,
            price_text=fmt.format_price(snapshot.current_price, selection.currency_id),
            change_text=fmt.format_change_badge(change),
            change_color=fmt.price_color(change).hex,
            line_color=(PriceColor.NEGATIVE if change < 0 else PriceColor.POSITIVE).hex,
        )

    return ChartView(**view)


def _analysis_text(state: ChartState) -> str:
    analysis = state.analysis
    if analysis.status == AnalysisStatus.GENERATING:
        return "Generating analysis..."
    if analysis.status == AnalysisStatus.SUCCEEDED:
        return analysis.text
    if analysis.status == AnalysisStatus.FAILED and analysis.failure is not None:
        if analysis.failure.kind == FailureKind.NO_DATA:
            return "No data available to generate analysis."
        return f"Error generating analysis: {analysis.failure.reason}"
    return ''
