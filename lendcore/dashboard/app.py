"""Reserve accrual dashboard: Streamlit entry point.

Run with ``streamlit run lendcore/dashboard/app.py``.
"""

import os

import streamlit as st

from lendcore.dashboard.charts import index_projection_chart, rate_curve_chart
from lendcore.data.constants import RAY, SUPPORTED_ASSETS
from lendcore.data.ledger import Clock, create_in_memory_reserve
from lendcore.data.provider_factory import RPC_URL_ENV, create_provider
from lendcore.protocol.interest_rate import InterestRateStrategy
from lendcore.protocol.registry import ReserveRegistry
from lendcore.simulation.accrual import project_indices


def main() -> None:
    st.set_page_config(page_title="Reserve Accrual Dashboard", layout="wide")
    st.title("Reserve Accrual Dashboard")

    st.sidebar.header("Data Source")
    use_onchain = st.sidebar.checkbox(
        "Use on-chain data", value=bool(os.environ.get(RPC_URL_ENV))
    )
    provider = create_provider(use_onchain=use_onchain)

    st.sidebar.header("Reserve")
    asset = st.sidebar.selectbox("Asset", SUPPORTED_ASSETS)
    configuration = provider.get_reserve_configuration(asset)
    reserve_factor_pct = st.sidebar.slider(
        "Reserve Factor (%)",
        min_value=0.0,
        max_value=100.0,
        value=configuration.get_reserve_factor() / 100,
        step=0.5,
    )
    configuration.set_reserve_factor(int(reserve_factor_pct * 100))

    deposits = st.sidebar.number_input("Deposits", min_value=1.0, value=1_000_000.0, step=10_000.0)
    borrows = st.sidebar.number_input(
        "Variable Borrows", min_value=0.0, max_value=float(deposits), value=600_000.0, step=10_000.0
    )

    strategy = InterestRateStrategy(asset, provider.get_strategy_params(asset), provider)
    market_rate = provider.get_market_borrow_rate(asset)

    # Build a single-reserve market and open the positions
    clock = Clock()
    reserve = create_in_memory_reserve(ReserveRegistry(), asset, strategy, configuration, clock)
    unit = 10 ** configuration.get_decimals()
    reserve.deposit_token.mint("depositor", int(deposits * unit), reserve.liquidity_index)
    if borrows > 0:
        amount = int(borrows * unit)
        reserve.variable_debt_token.mint("borrower", amount, reserve.variable_borrow_index)
        reserve.deposit_token.transfer_underlying_out(amount)
    rates = reserve.update_interest_rates()

    utilization = borrows / deposits
    col1, col2, col3 = st.columns(3)
    col1.metric("Utilization", f"{utilization*100:.1f}%")
    col2.metric("Variable Borrow Rate", f"{rates.variable_borrow_rate / RAY * 100:.2f}%")
    col3.metric("Deposit Rate", f"{rates.liquidity_rate / RAY * 100:.2f}%")

    df_curve = strategy.rate_curve(
        reserve_factor=configuration.get_reserve_factor(), market_rate=market_rate
    )
    st.plotly_chart(
        rate_curve_chart(df_curve, current_utilization=utilization, title=f"{asset} Rate Curve"),
        use_container_width=True,
    )

    st.divider()
    st.subheader("One-Year Index Projection")
    df_indices = project_indices(reserve, start=clock.now)
    st.plotly_chart(index_projection_chart(df_indices), use_container_width=True)

    final = df_indices.iloc[-1]
    c1, c2 = st.columns(2)
    c1.metric("Liquidity Index after 1y", f"{final['liquidity_index']:.6f}")
    c2.metric("Variable Borrow Index after 1y", f"{final['variable_borrow_index']:.6f}")


if __name__ == "__main__":
    main()
