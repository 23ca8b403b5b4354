"""Tests for the Plotly chart builders."""

from lendcore.dashboard.charts import index_projection_chart, rate_curve_chart
from lendcore.data.constants import WAD
from lendcore.simulation.accrual import project_indices


class TestRateCurveChart:
    def test_three_rate_traces(self, weth_reserve) -> None:
        df = weth_reserve.interest_rate_strategy.rate_curve(reserve_factor=1_000, n_points=21)
        fig = rate_curve_chart(df)

        assert [trace.name for trace in fig.data] == [
            "Variable Borrow Rate",
            "Stable Borrow Rate",
            "Deposit Rate",
        ]
        assert len(fig.data[0].x) == 21
        assert fig.data[0].x[-1] == 100.0

    def test_current_utilization_marker(self, weth_reserve) -> None:
        df = weth_reserve.interest_rate_strategy.rate_curve(n_points=11)
        fig = rate_curve_chart(df, current_utilization=0.5)
        assert len(fig.layout.shapes) == 1


class TestIndexProjectionChart:
    def test_two_index_traces(self, weth_reserve, actions, clock) -> None:
        actions.deposit(weth_reserve, "alice", 10 * WAD)
        actions.borrow_variable(weth_reserve, "bob", 5 * WAD)
        fig = index_projection_chart(project_indices(weth_reserve, clock.now), title="WETH")

        assert [trace.name for trace in fig.data] == ["Liquidity Index", "Variable Borrow Index"]
        assert fig.layout.title.text == "WETH"
