"""Asset identifiers and protocol constants."""

# Asset symbols
WETH = "WETH"
USDC = "USDC"
DAI = "DAI"

# Decimals
WETH_DECIMALS = 18
USDC_DECIMALS = 6
DAI_DECIMALS = 18

# Fixed-point units
WAD = 10**18
HALF_WAD = WAD // 2
RAY = 10**27
HALF_RAY = RAY // 2
WAD_RAY_RATIO = 10**9

# Percentages carry two decimals: 10000 = 100.00%
PERCENTAGE_FACTOR = 10**4
HALF_PERCENT = PERCENTAGE_FACTOR // 2

# Word and storage ceilings
MAX_UINT256 = 2**256 - 1
MAX_UINT128 = 2**128 - 1
TIMESTAMP_MASK = 2**40 - 1

# Accrual is annualised over a 365 day year
SECONDS_PER_YEAR = 365 * 24 * 3600

# Health factor is a wad; positions below 1.0 can be liquidated
HEALTH_FACTOR_LIQUIDATION_THRESHOLD = WAD
HEALTH_FACTOR_INFINITE = MAX_UINT256

# Two bits per reserve in a 256-bit user bitmap
MAX_NUMBER_RESERVES = 128

SUPPORTED_ASSETS = (WETH, USDC, DAI)
