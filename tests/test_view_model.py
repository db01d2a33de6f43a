"""Tests for build_chart_view: header, messages, colors and the analysis panel."""
from decimal import Decimal

from coinchart.contracts.errors import Failure, FailureKind
from coinchart.market.models import AnalysisResult, CoinSnapshot, FetchResult, PricePoint, Selection
from coinchart.state.chart_state import (
    ChartState, apply_analysis_result, apply_fetch_result, begin_analysis, begin_cycle
)
from coinchart.state.view_model import (
    CHART_SUBTITLE, FETCH_ERROR_MESSAGE, LOADING_MESSAGE, NO_DATA_MESSAGE, build_chart_view
)

BTC = Selection("bitcoin", "usd", 7)
SERIES = (PricePoint("2024-03-09", Decimal("64000.00")), PricePoint("2024-03-10", Decimal("65000.00")))


def snapshot(change="-2.5", image_url="https://assets.example/bitcoin/small.png"):
    return CoinSnapshot("bitcoin", "Bitcoin", "BTC", image_url=image_url,
                        current_price=Decimal("65000"), price_change_pct_24h=Decimal(change))


def resolved(result, selection=BTC):
    state = begin_cycle(ChartState(), selection)
    return apply_fetch_result(state, state.cycle_id, result)


def test_initial_view():
    view = build_chart_view(ChartState())
    assert view.title == "Custom Coin Chart"
    assert view.subtitle == CHART_SUBTITLE
    assert view.message == NO_DATA_MESSAGE
    assert view.analysis_enabled is False


def test_loading_view():
    view = build_chart_view(begin_cycle(ChartState(), BTC))
    assert view.title == "Bitcoin (BTC)"
    assert view.message == LOADING_MESSAGE
    assert view.error is None
    assert view.analysis_enabled is False


def test_success_view():
    view = build_chart_view(resolved(FetchResult.success(BTC, snapshot(), SERIES)))

    assert view.pair_label == "BTC/USD"
    assert view.coin_name == "Bitcoin"
    assert view.logo_url == "https://assets.example/bitcoin/small.png"
    assert view.price_text == "$65,000.00"
    assert view.change_text == "▼2.50%"
    assert view.change_color == "#ea3943"
    assert view.line_color == "#ea3943"
    assert view.x_axis_label == "Time (Last 7 Days)"
    assert view.y_axis_label == "Price ($)"
    assert view.points == SERIES
    assert view.message is None
    assert view.analysis_enabled is True
    assert view.analysis_button_label == "Generate Analysis"


def test_flat_change_has_no_badge_and_green_line():
    view = build_chart_view(resolved(FetchResult.success(BTC, snapshot(change="0", image_url=""), SERIES)))
    assert view.change_text == ""
    assert view.change_color == "inherit"
    assert view.line_color == "#16c784"
    assert view.logo_url is None


def test_empty_series_view():
    view = build_chart_view(resolved(FetchResult.success(BTC, snapshot(), ())))
    assert view.message == NO_DATA_MESSAGE
    assert view.price_text == "$65,000.00"
    assert view.analysis_enabled is False


def test_failed_view_includes_reason():
    failure = Failure(FailureKind.UPSTREAM_STATUS, "Request failed with status 404")
    view = build_chart_view(resolved(FetchResult.failed(BTC, failure)))
    assert view.error == f"{FETCH_ERROR_MESSAGE} (Request failed with status 404)"
    assert view.pair_label == ""
    assert view.points == ()


def test_analysis_panel_texts():
    state = resolved(FetchResult.success(BTC, snapshot(), SERIES))
    generating = begin_analysis(state)

    view = build_chart_view(generating)
    assert view.analysis_button_label == "Generating..."
    assert view.analysis_enabled is False
    assert view.analysis_text == "Generating analysis..."

    done = apply_analysis_result(generating, generating.cycle_id, AnalysisResult.succeeded("Uptrend."))
    assert build_chart_view(done).analysis_text == "Uptrend."
    assert build_chart_view(done).analysis_enabled is True

    no_data = apply_analysis_result(
        generating, generating.cycle_id, AnalysisResult.failed(Failure(FailureKind.NO_DATA, "no data"))
    )
    assert build_chart_view(no_data).analysis_text == "No data available to generate analysis."

    failed = apply_analysis_result(
        generating, generating.cycle_id, AnalysisResult.failed(Failure(FailureKind.NETWORK, "timed out"))
    )
    assert build_chart_view(failed).analysis_text == "Error generating analysis: timed out"
