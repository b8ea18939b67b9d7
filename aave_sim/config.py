# aave_sim/config.py

"""
Global constants and parameters for the Aave/Uniswap liquidation simulation.
Amounts are integers in token-native units; prices follow the lending
market's 8 decimal base currency.
"""

# --- Logging Configuration ---
VERBOSE_LOGGING = False  # Per-step agent and transaction output


# Simulation Setup
N_BORROWERS = 10
N_LIQUIDATORS = 1
N_NOISE_AGENTS = 1
SIMULATION_STEPS = 100
ADVERSARIAL = False     # Liquidators front-run the pool instead of liquidating directly

# External market (GBM) parameters
PRICES_MU = 0.0
PRICES_DT = 0.01
PRICES_SIGMA = 0.3
PRICE_IMPACT_DECAY = 2.0   # Transient impact decays as exp(-PRICE_IMPACT_DECAY * dt)

# Token prices in the base currency
BASE_CURRENCY_UNIT = 100_000_000        # 1.0 in the base currency (8 decimals)
TOKEN_A_INITIAL_PRICE = 100_000_000_000  # Collateral token, 1000.0
TOKEN_B_INITIAL_PRICE = 100_000_000      # Debt token, 1.0

# Aave reserve parameters (basis points)
TOKEN_A_LIQUIDATION_THRESHOLD = 8000
TOKEN_B_LIQUIDATION_THRESHOLD = 8500
TOKEN_A_BASE_LTV = 7500
TOKEN_B_BASE_LTV = 8000
LIQUIDATION_BONUS = 10500

# Uniswap pool parameters
LIQUIDITY = 1e5          # In whole tokens, scaled by 10**18 at deployment
UNISWAP_FEE = 500        # Pips, i.e. 0.05%

# Borrower Agent Parameters
BORROW_ACTIVATION_RATE = 0.1
BORROWER_SUPPLY_AMOUNT = 10**20
BORROW_FRACTION_RANGE = (9000, 10000)  # Basis points of the available borrow capacity
BORROW_INTEREST_RATE_MODE = 2          # Variable rate

# Noise Agent Parameters
NOISE_TRADE_SCALE = 10**6  # Trade notional drawn in millionths of a token

# Fixed point settings for the square root price encoding
SQRT_PRICE_PRECISION_BITS = 20
SWAP_SIZE_SHIFT_BITS = 48
ADVERSARIAL_CLOSE_FACTOR_DIVISOR = 2
PRICE_RATIO_DECIMALS = 10
UPPER_BOUND_DECIMALS = 5

# Funding
START_BALANCE = 10**20   # Native balance provisioned for every agent
MINT_AMOUNT = 10**35     # Token balance minted and approved for every agent

# Agent address ranges, class membership is recoverable from the address
AGENT_INDEX_RANGES = {
    'BorrowAgent': 1000,
    'LiquidationAgent': 2000,
    'UniswapPriceAgent': 3000,
    'UniswapNoiseAgent': 4000,
}
AGENT_INDEX_RANGE_SIZE = 1000

# Transaction ordering
BASE_GAS_PRICE = 20          # Gwei
FRONT_RUN_GAS_BOOST = 1.1    # Adversarial front-running trades outbid everything else in the block

# Market shock (disabled with step -1)
MARKET_SHOCK_STEP = -1
MARKET_SHOCK_FACTOR = 1.0

# --- Parameters for batch runs ---
SEEDS = list(range(10, 20))
RESULTS_FILE = "sim_dat.json"
