# aave_sim/agents/uniswap_agent.py

import math
from typing import Optional

import mesa

from .base_agent import BaseAgent
from .. import calls
from .. import config
from ..core.fixed_point import price_from_sqrt_price_x96
from ..core.gbm import Gbm


def swap_size(liquidity: int, sqrt_price_delta_x96: int) -> int:
    """
    token1 amount that moves the pool root price by `sqrt_price_delta_x96`
    (dy = L * d(sqrt P)). Both factors are shifted down before multiplying.
    """
    shift = config.SWAP_SIZE_SHIFT_BITS
    return (liquidity >> shift) * (sqrt_price_delta_x96 >> shift)


class UniswapPriceAgent(BaseAgent):
    """
    Arbitrageur that trades the pool back to the external market price every
    step. The external market reacts to the pool through a transient price
    impact that decays exponentially.
    """
    def __init__(self, model: mesa.Model, env, idx: int,
                 pool: str,
                 fee: int,
                 swap_router: str,
                 token_b: str,
                 token_a_price: float,
                 token_b_price: float,
                 mu: float = config.PRICES_MU,
                 dt: float = config.PRICES_DT,
                 sigma: float = config.PRICES_SIGMA):
        super().__init__(model, idx)
        self.pool = pool
        self.fee = fee
        self.swap_router = swap_router
        self.token_b = token_b  # Numeraire, the debt token of the lending market
        self.token0 = calls.get_token0(env, self.address, pool)
        self.token1 = calls.get_token1(env, self.address, pool)
        self.external_market = Gbm(dt, mu, sigma, token_a_price, token_a_price, token_b_price)
        self.dt = float(dt)
        self.transient_price_impact = 0.0
        self.current_step = 0

    def price_impact(self, sqrt_price_uniswap_x96: int) -> float:
        """Gap between the pool price of token A and the external market price."""
        price_uniswap = price_from_sqrt_price_x96(sqrt_price_uniswap_x96)
        price_external_market = self.external_market.price_of_a()
        if self.token_b == self.token1:
            return price_uniswap - price_external_market
        return 1.0 / price_uniswap - price_external_market

    def external_sqrt_price_x96(self) -> int:
        """External market price expressed the way the pool quotes it (token0 in token1)."""
        if self.token1 == self.token_b:
            return self.external_market.sqrt_price_token_a_x96()
        return self.external_market.sqrt_price_token_b_x96()

    def increase_price_params(self, sqrt_price_external_x96: int, sqrt_price_uniswap_x96: int,
                              liquidity: int) -> Optional[calls.ExactInputSingle]:
        """Sell token1 for token0 to lift the pool price up to the external one."""
        amount_in = swap_size(liquidity, sqrt_price_external_x96 - sqrt_price_uniswap_x96)
        if amount_in <= 0:
            return None
        return calls.ExactInputSingle(
            token_in=self.token1, token_out=self.token0, fee=self.fee,
            recipient=self.address, amount_in=amount_in,
        )

    def decrease_price_params(self, sqrt_price_external_x96: int, sqrt_price_uniswap_x96: int,
                              liquidity: int) -> Optional[calls.ExactOutputSingle]:
        """Buy token1 with token0 to push the pool price down to the external one."""
        amount_out = swap_size(liquidity, sqrt_price_uniswap_x96 - sqrt_price_external_x96)
        if amount_out <= 0:
            return None
        return calls.ExactOutputSingle(
            token_in=self.token0, token_out=self.token1, fee=self.fee,
            recipient=self.address, amount_out=amount_out,
        )

    def update(self, rng, env) -> list:
        sqrt_price_uniswap_x96 = calls.get_slot0(env, self.address, self.pool).sqrt_price_x96

        if self.current_step > 0:
            decay = math.exp(-config.PRICE_IMPACT_DECAY * self.dt)
            self.transient_price_impact = decay * self.transient_price_impact + self.price_impact(sqrt_price_uniswap_x96)

        self.external_market.advance(rng, self.transient_price_impact)

        sqrt_price_external_x96 = self.external_sqrt_price_x96()
        liquidity = calls.get_liquidity(env, self.address, self.pool)

        txs = []
        if sqrt_price_external_x96 > sqrt_price_uniswap_x96:
            params = self.increase_price_params(sqrt_price_external_x96, sqrt_price_uniswap_x96, liquidity)
            if params is not None:
                txs.append(calls.exact_input_swap_call(self.address, self.swap_router, params))
        else:
            params = self.decrease_price_params(sqrt_price_external_x96, sqrt_price_uniswap_x96, liquidity)
            if params is not None:
                txs.append(calls.exact_output_swap_call(self.address, self.swap_router, params))

        if config.VERBOSE_LOGGING:
            print(f"    [PriceAgent] External price: {self.external_market.price_of_a():.4f}, "
                  f"pool price: {price_from_sqrt_price_x96(sqrt_price_uniswap_x96):.4f}, "
                  f"impact: {self.transient_price_impact:.6f}")
        self.current_step += 1
        return txs

    def record(self, env) -> tuple:
        return (self.external_market.price_a, self.external_market.price_b)
