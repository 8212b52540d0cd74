from .config import AnalyticsConfig
from .metrics import compute_metrics, summarize_by_game
from .prepare import load_and_prepare
from .smoothing import ewma_by_session
from .plots import plot_score_trend, plot_accuracy_by_game, plot_speed_vs_accuracy

__all__ = [
    "AnalyticsConfig",
    "compute_metrics",
    "summarize_by_game",
    "load_and_prepare",
    "ewma_by_session",
    "plot_score_trend",
    "plot_accuracy_by_game",
    "plot_speed_vs_accuracy",
]
