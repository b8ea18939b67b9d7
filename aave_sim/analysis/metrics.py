# aave_sim/analysis/metrics.py

"""
Functions to calculate various metrics from the simulation model's output.
These are used as model reporters in Mesa's DataCollector.
"""

import numpy as np

from .. import calls
from .. import config
from ..core.fixed_point import price_from_sqrt_price_x96


def latest_snapshots(model) -> list:
    """Account snapshots recorded by the first liquidator in the last step."""
    liquidator_records = model.records["liquidation_agents"]
    if not liquidator_records or not liquidator_records[0]:
        return []
    return liquidator_records[0][-1]


def get_external_price(model) -> float:
    """Token A price in token B on the external market, including price impact."""
    return model.price_agent.external_market.price_of_a()


def get_pool_price(model) -> float:
    """Price of token0 in token1 on the Uniswap pool."""
    slot0 = calls.get_slot0(model.env, model.price_agent.address, model.deployment.uniswap_pool)
    return price_from_sqrt_price_x96(slot0.sqrt_price_x96)


def get_oracle_price(model) -> float:
    """Lending market oracle price of token A, in units of the base currency."""
    return calls.get_asset_price(model.env, model.deployment.oracle, model.deployment.token_a) / config.BASE_CURRENCY_UNIT


def get_min_health_factor(model) -> float:
    """Lowest health factor among accounts with debt. NaN when nobody has borrowed yet."""
    health_factors = np.array([s.health_factor for s in latest_snapshots(model) if s.total_debt_base > 0])
    if health_factors.size == 0:
        return np.nan
    return float(health_factors.min())


def get_liquidatable_positions(model) -> int:
    health_factors = np.array([s.health_factor for s in latest_snapshots(model)])
    return int(np.count_nonzero(health_factors < 1.0))


def get_executed_liquidations(model) -> int:
    return sum(1 for tx in model.transaction_log
               if tx.function == calls.LiquidationCall.function and tx.status == "Executed")


def get_failed_transactions(model) -> int:
    return sum(1 for tx in model.transaction_log if tx.status == "Failed")
