# aave_sim/core/fixed_point.py

"""
Integer/float conversions used when reading contract values.
Uniswap prices are square roots encoded at 2**96 scale, Aave health
factors are WAD (10**18) scaled.
"""

import math

from .. import config

Q96 = 2**96
WAD = 10**18
MAX_UINT256 = 2**256 - 1


def div_to_float(numerator: int, denominator: int, decimals: int = config.PRICE_RATIO_DECIMALS) -> float:
    """Integer division truncated to `decimals` decimal places, returned as float."""
    scale = 10**decimals
    return (int(numerator) * scale // int(denominator)) / scale


def scale_data_value(value: int, decimals: int, precision: int) -> float:
    """
    Converts a fixed point integer with `decimals` decimals into a float,
    keeping `precision` decimal places.
    """
    return (int(value) // 10 ** (decimals - precision)) / 10**precision


def sqrt_price_x96_of(numerator_price: float, denominator_price: float) -> int:
    """
    Square root of numerator/denominator at 2**96 scale. The root is taken
    with SQRT_PRICE_PRECISION_BITS of fractional precision and shifted up
    afterwards so the float never has to carry the full 96 bits.
    """
    n = config.SQRT_PRICE_PRECISION_BITS
    root = math.sqrt(numerator_price / denominator_price) * 2**n
    return int(root) << (96 - n)


def price_from_sqrt_price_x96(sqrt_price_x96: int) -> float:
    """Price of token0 in units of token1."""
    return div_to_float(sqrt_price_x96, Q96) ** 2
