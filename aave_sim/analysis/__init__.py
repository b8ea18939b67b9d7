# aave_sim/analysis/__init__.py

"""
Makes the analysis components (metrics, plotting) importable.
"""
from .metrics import (
    get_external_price,
    get_pool_price,
    get_oracle_price,
    get_min_health_factor,
    get_liquidatable_positions,
    get_executed_liquidations,
    get_failed_transactions,
)
