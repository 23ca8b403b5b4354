"""Reusable Plotly chart components."""

import pandas as pd
import plotly.graph_objects as go


def rate_curve_chart(
    df: pd.DataFrame,
    current_utilization: float | None = None,
    title: str = "Interest Rate Curve",
) -> go.Figure:
    """Rate curve with variable, stable and deposit rates.

    Args:
        df: DataFrame from ``InterestRateStrategy.rate_curve``.
        current_utilization: If provided, marks current utilization on chart.
        title: Chart title.
    """
    fig = go.Figure()

    for column, name, color in (
        ("variable_rate", "Variable Borrow Rate", "#ef4444"),
        ("stable_rate", "Stable Borrow Rate", "#f59e0b"),
        ("liquidity_rate", "Deposit Rate", "#22c55e"),
    ):
        fig.add_trace(
            go.Scatter(
                x=df["utilization"] * 100,
                y=df[column] * 100,
                name=name,
                line=dict(color=color, width=2),
                hovertemplate=f"Utilization: %{{x:.1f}}%<br>{name}: %{{y:.2f}}%<extra></extra>",
            )
        )

    if current_utilization is not None:
        fig.add_vline(
            x=current_utilization * 100,
            line_dash="dash",
            line_color="#6b7280",
            annotation_text=f"Current: {current_utilization*100:.1f}%",
        )

    fig.update_layout(
        title=title,
        xaxis_title="Utilization (%)",
        yaxis_title="Rate (%)",
        hovermode="x unified",
        template="plotly_dark",
        height=450,
    )
    return fig


def index_projection_chart(df: pd.DataFrame, title: str = "Index Projection") -> go.Figure:
    """Liquidity and variable borrow index growth over time.

    Args:
        df: DataFrame from ``project_indices``.
    """
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=df["elapsed_days"],
            y=df["liquidity_index"],
            name="Liquidity Index",
            line=dict(color="#22c55e", width=2),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=df["elapsed_days"],
            y=df["variable_borrow_index"],
            name="Variable Borrow Index",
            line=dict(color="#ef4444", width=2),
        )
    )
    fig.update_layout(
        title=title,
        xaxis_title="Days",
        yaxis_title="Index",
        hovermode="x unified",
        template="plotly_dark",
        height=450,
    )
    return fig
