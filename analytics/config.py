from __future__ import annotations

"""Analytics configuration (hyperparameters) using Pydantic."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Hyperparameters for analytics computations and smoothing.

    - alpha: response-time penalty scale (>0)
    - T_ref_ms: reference response time in ms (>0)
    - hint_weight: penalty weight per hint used per attempt (>=0)
    - smoothing_span: EWMA span in sessions (>1)
    - improvement_window: sessions averaged at each end for improvement (>=1)
    - min_sessions: sessions required before improvement is reported
    """

    alpha: float = Field(0.5, gt=0)
    T_ref_ms: int = Field(2000, gt=0)
    hint_weight: float = Field(0.5, ge=0)
    smoothing_span: int = Field(5, gt=1)
    improvement_window: int = Field(3, ge=1)
    min_sessions: int = Field(6, ge=2)
