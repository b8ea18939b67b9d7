# aave_sim/agents/__init__.py

"""
Makes the agent classes importable.
"""
from .base_agent import BaseAgent
from .borrow_agent import BorrowAgent, BorrowState
from .liquidation_agent import AdversarialLiquidation, DirectLiquidation, LiquidationAgent, LiquidationStrategy
from .uniswap_agent import UniswapPriceAgent
from .uniswap_noise_agent import UniswapNoiseAgent
