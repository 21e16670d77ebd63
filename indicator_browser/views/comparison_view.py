from __future__ import annotations

import plotly.graph_objects as go

from indicator_browser.core.base_view import BaseView, ViewData
from indicator_browser.core.filter_state import FilterProfile, FilterState


class ComparisonView(BaseView):
    """
    Cross-section for a single period: one bar per resolved series, in
    dimension order. Defaults to the latest period.
    """

    id = "comparison"
    label = "Comparison"
    filter_profile = FilterProfile(dimensions=True, period=True, chart_type=False)

    def compute_data(self, state: FilterState) -> ViewData:
        return self.query(state, self.target_period(state))

    def render_figure(self, data: ViewData, state: FilterState) -> go.Figure:
        if data is None or data.is_empty:
            return self.empty_figure(data.message() if data is not None else "No data to display")

        labels = [cs.label for cs in data.series]
        values = [cs.points[0].value if cs.points else None for cs in data.series]
        colors = [cs.color for cs in data.series]

        fig = go.Figure(go.Bar(x=labels, y=values, marker_color=colors))
        fig.update_layout(
            title=f"{self.dataset.name} ({data.result.period})",
            height=500,
            margin=dict(l=40, r=40, t=40, b=40),
            showlegend=False,
        )
        return fig
