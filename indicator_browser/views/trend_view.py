from __future__ import annotations

import plotly.graph_objects as go

from indicator_browser.core.base_view import BaseView, ViewData
from indicator_browser.core.filter_state import FilterProfile, FilterState

CHART_TYPES = ("line", "area", "bar")


class TrendView(BaseView):
    """
    Time series per resolved series: x = period, y = value.

    Missing values stay None so Plotly draws gaps instead of dropping to zero.
    """

    id = "trend"
    label = "Trend"
    filter_profile = FilterProfile(dimensions=True, period=False, chart_type=True)

    def compute_data(self, state: FilterState) -> ViewData:
        return self.query(state)

    def _trace(self, chart_type: str, name: str, color: str, x, y):
        if chart_type == "bar":
            return go.Bar(x=x, y=y, name=name, marker_color=color)
        if chart_type == "area":
            return go.Scatter(
                x=x,
                y=y,
                name=name,
                mode="lines",
                line=dict(color=color),
                fill="tozeroy",
                connectgaps=False,
            )
        return go.Scatter(
            x=x,
            y=y,
            name=name,
            mode="lines+markers",
            line=dict(color=color),
            connectgaps=False,
        )

    def render_figure(self, data: ViewData, state: FilterState) -> go.Figure:
        if data is None or data.is_empty:
            return self.empty_figure(data.message() if data is not None else "No data to display")

        chart_type = state.chart_type if state.chart_type in CHART_TYPES else "line"

        fig = go.Figure()
        for cs in data.series:
            fig.add_trace(
                self._trace(
                    chart_type,
                    cs.label,
                    cs.color,
                    [p.period for p in cs.points],
                    [p.value for p in cs.points],
                )
            )

        fig.update_layout(
            title=f"{self.dataset.name}",
            height=500,
            margin=dict(l=40, r=40, t=40, b=40),
            xaxis_title=self.dataset.table.period_column,
            legend_title="Series",
            barmode="group",
        )
        return fig
