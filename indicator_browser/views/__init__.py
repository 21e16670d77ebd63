from .trend_view import TrendView
from .comparison_view import ComparisonView
from .distribution_view import DistributionView

__all__ = ["TrendView", "ComparisonView", "DistributionView"]
