from __future__ import annotations

import plotly.graph_objects as go

from indicator_browser.core.base_view import BaseView, ViewData
from indicator_browser.core.filter_state import FilterProfile, FilterState


class DistributionView(BaseView):
    """
    Share of each resolved series in a single period, as a pie.

    Slices that are missing or not positive are left out.
    """

    id = "distribution"
    label = "Distribution"
    filter_profile = FilterProfile(dimensions=True, period=True, chart_type=False)

    def compute_data(self, state: FilterState) -> ViewData:
        data = self.query(state, self.target_period(state))
        # colors were assigned before dropping slices, so they match the other views
        data.series = [
            cs for cs in data.series
            if cs.points and cs.points[0].value is not None and cs.points[0].value > 0
        ]
        return data

    def render_figure(self, data: ViewData, state: FilterState) -> go.Figure:
        if data is None or data.is_empty:
            return self.empty_figure(data.message() if data is not None else "No data to display")

        fig = go.Figure(
            go.Pie(
                labels=[cs.label for cs in data.series],
                values=[cs.points[0].value for cs in data.series],
                marker=dict(colors=[cs.color for cs in data.series]),
                sort=False,
            )
        )
        fig.update_layout(
            title=f"{self.dataset.name} ({data.result.period})",
            height=500,
            margin=dict(l=40, r=40, t=40, b=40),
        )
        return fig
