# aave_sim/__init__.py

"""
Agent based simulation of liquidations on an Aave lending pool whose
collateral is priced by a Uniswap pool.
"""
from .model import AaveSimModel
from .deployment import Deployment
from .runner import SimData, run_batch, run_simulation, save_results
