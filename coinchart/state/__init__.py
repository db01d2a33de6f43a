from coinchart.state.chart_state import (
    ChartState,
    apply_analysis_result,
    apply_fetch_result,
    begin_analysis,
    begin_cycle,
)
from coinchart.state.controller import SelectionController
from coinchart.state.view_model import ChartView, build_chart_view

__all__ = [
    'ChartState',
    'ChartView',
    'SelectionController',
    'apply_analysis_result',
    'apply_fetch_result',
    'begin_analysis',
    'begin_cycle',
    'build_chart_view',
]
