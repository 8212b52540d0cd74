from __future__ import annotations

"""Smoothing utilities (EWMA over play order)."""

import pandas as pd


def ewma_by_session(
    df: pd.DataFrame,
    value_col: str,
    span: int,
    group_cols: list[str] | None = None,
    order_col: str = "session_idx",
) -> pd.DataFrame:
    """Apply EWMA smoothing per group over session order.

    Groups a Series (not the DataFrame) so pandas does not warn about
    DataFrameGroupBy.apply. Returns a copy of df with a new column
    f"{value_col}_smooth" and rows sorted by `order_col`.
    """
    g = df.sort_values(order_col, kind="stable").copy()
    values = g[value_col].astype("float64")
    if group_cols:
        smooth = values.groupby([g[c] for c in group_cols], observed=True).transform(lambda s: s.ewm(span=span).mean())
    else:
        smooth = values.ewm(span=span).mean()
    g[f"{value_col}_smooth"] = smooth.astype("float32")
    return g
