# aave_sim/core/__init__.py

"""
Makes the core components importable.
"""
from .accounts import ZERO_ADDRESS, address_from_index, agent_class_from_address, index_from_address
from .environment import Environment, RevertError
from .fixed_point import MAX_UINT256, Q96, WAD, div_to_float, price_from_sqrt_price_x96, scale_data_value, sqrt_price_x96_of
from .gbm import Gbm
from .user_data import AccountSnapshot
