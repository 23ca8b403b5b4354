"""Contract addresses and minimal ABIs for Aave V2 market data."""

# ---------------------------------------------------------------------------
# Asset addresses (Ethereum mainnet)
# ---------------------------------------------------------------------------
ASSET_ADDRESSES: dict[str, str] = {
    "WETH": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    "USDC": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    "DAI": "0x6B175474E89094C44Da98b954EedeAC495271d0F",
}

# ---------------------------------------------------------------------------
# Aave V2 contract addresses
# ---------------------------------------------------------------------------
LENDING_POOL = "0x7d2768dE32b0b80b7a3454c06BdAc94A69DDc7A9"
PRICE_ORACLE = "0xA50ba011c48153De246E5192C8f9258A2ba79Ca9"
LENDING_RATE_ORACLE = "0x8A32f49FFbA88aba6EFF96F45D8BD1D4b3f35c7D"

# ---------------------------------------------------------------------------
# Minimal ABIs, view functions only
# ---------------------------------------------------------------------------

_RESERVE_DATA_COMPONENTS = [
    {
        "components": [{"name": "data", "type": "uint256"}],
        "name": "configuration",
        "type": "tuple",
    },
    {"name": "liquidityIndex", "type": "uint128"},
    {"name": "variableBorrowIndex", "type": "uint128"},
    {"name": "currentLiquidityRate", "type": "uint128"},
    {"name": "currentVariableBorrowRate", "type": "uint128"},
    {"name": "currentStableBorrowRate", "type": "uint128"},
    {"name": "lastUpdateTimestamp", "type": "uint40"},
    {"name": "aTokenAddress", "type": "address"},
    {"name": "stableDebtTokenAddress", "type": "address"},
    {"name": "variableDebtTokenAddress", "type": "address"},
    {"name": "interestRateStrategyAddress", "type": "address"},
    {"name": "id", "type": "uint8"},
]

LENDING_POOL_ABI = [
    {
        "inputs": [{"name": "asset", "type": "address"}],
        "name": "getConfiguration",
        "outputs": [
            {
                "components": [{"name": "data", "type": "uint256"}],
                "name": "",
                "type": "tuple",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "asset", "type": "address"}],
        "name": "getReserveData",
        "outputs": [
            {"components": _RESERVE_DATA_COMPONENTS, "name": "", "type": "tuple"}
        ],
        "stateMutability": "view",
        "type": "function",
    },
]


def _uint_getter(name: str) -> dict:
    return {
        "inputs": [],
        "name": name,
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }


RATE_STRATEGY_ABI = [
    _uint_getter("OPTIMAL_UTILIZATION_RATE"),
    _uint_getter("baseVariableBorrowRate"),
    _uint_getter("variableRateSlope1"),
    _uint_getter("variableRateSlope2"),
    _uint_getter("stableRateSlope1"),
    _uint_getter("stableRateSlope2"),
]

PRICE_ORACLE_ABI = [
    {
        "inputs": [{"name": "asset", "type": "address"}],
        "name": "getAssetPrice",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

LENDING_RATE_ORACLE_ABI = [
    {
        "inputs": [{"name": "asset", "type": "address"}],
        "name": "getMarketBorrowRate",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]
