from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import plotly.graph_objs as go

from .dataset import Dataset
from .filter_state import FilterState, FilterProfile
from .parser import Period
from .pivot import QueryResult, QueryStatus
from .presentation import ChartSeries


@dataclass
class ViewData:
    """
    What a view computed for one FilterState: the raw query result (for its
    status) and the chart-ready series.
    """
    result: QueryResult
    series: List[ChartSeries] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.series

    def message(self) -> str:
        if self.result.status == QueryStatus.UNKNOWN_PERIOD:
            return f"No data for period {self.result.period}"
        if self.result.status == QueryStatus.NO_MATCH:
            return "No data for this combination - adjust filters"
        return "No data to display"


class BaseView(ABC):
    """
    One chart kind over one Dataset.

    Subclasses set `id` (FilterState.view_id), `label` (view dropdown) and
    `filter_profile` (which controls apply), then turn a FilterState into
    ViewData and ViewData into a Plotly figure. Labels and colors come from
    the dataset's presentation resolver; a view only lays them out.
    """

    id: Optional[str] = None
    label: Optional[str] = None
    filter_profile: FilterProfile = FilterProfile()

    def __init__(self, dataset: Dataset):
        self.dataset = dataset

    @abstractmethod
    def compute_data(self, state: FilterState) -> ViewData:
        """Query the dataset for `state` (trend or cross-section)."""
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: ViewData, state: FilterState) -> go.Figure:
        """Draw `data`; empty data gets `empty_figure(data.message())`."""
        raise NotImplementedError()

    def query(self, state: FilterState, period: Optional[Period] = None) -> ViewData:
        result = self.dataset.query(state.selections, period)
        return ViewData(result=result, series=self.dataset.presentation.resolve(result))

    def target_period(self, state: FilterState) -> Optional[Period]:
        """The period picked in the UI, else the dataset's latest period."""
        if state.period is not None:
            return state.period
        periods = self.dataset.periods
        return periods[-1] if periods else None

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
            height=500,
        )
        return fig
