# aave_sim/agents/uniswap_noise_agent.py

import mesa

from .base_agent import BaseAgent
from .. import calls
from .. import config
from ..processing.transaction import Transaction


class UniswapNoiseAgent(BaseAgent):
    """Trades a random amount of token A in a random direction every step."""
    def __init__(self, model: mesa.Model, env, idx: int,
                 fee: int,
                 swap_router: str,
                 token_a: str,
                 token_b: str):
        super().__init__(model, idx)
        self.fee = fee
        self.swap_router = swap_router
        self.token_a = token_a
        self.token_b = token_b
        self.token_a_decimals = calls.get_decimals(env, self.address, token_a)

    def trade_amount(self, u: float) -> int:
        scale = config.NOISE_TRADE_SCALE
        return int(u * scale) * 10**self.token_a_decimals // scale

    def update(self, rng, env) -> list[Transaction]:
        amount = self.trade_amount(rng.random())
        sell_token_a = rng.random() <= 0.5
        if amount == 0:
            return []
        if sell_token_a:
            params = calls.ExactInputSingle(
                token_in=self.token_a, token_out=self.token_b, fee=self.fee,
                recipient=self.address, amount_in=amount,
            )
            return [calls.exact_input_swap_call(self.address, self.swap_router, params)]
        params = calls.ExactOutputSingle(
            token_in=self.token_b, token_out=self.token_a, fee=self.fee,
            recipient=self.address, amount_out=amount,
        )
        return [calls.exact_output_swap_call(self.address, self.swap_router, params)]
