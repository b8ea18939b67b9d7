# aave_sim/agents/borrow_agent.py

from enum import Enum

import mesa

from .base_agent import BaseAgent
from .. import calls
from .. import config


class BorrowState(Enum):
    IDLE = "Idle"
    SUPPLIED = "Supplied"
    BORROWED = "Borrowed"


class BorrowAgent(BaseAgent):
    """
    Supplies collateral once, then borrows a random fraction of its borrow
    capacity once. Each move needs its own activation draw.
    """
    def __init__(self, model: mesa.Model, idx: int,
                 activation_rate: float,
                 borrow_token_decimals: int,
                 pool_address: str,
                 oracle_address: str,
                 supply_token_address: str,
                 borrow_token_address: str,
                 supply_amount: int = config.BORROWER_SUPPLY_AMOUNT):
        super().__init__(model, idx)
        if not 0.0 <= activation_rate <= 1.0:
            raise ValueError(f"activation_rate must be within [0, 1], got {activation_rate}")
        self.activation_rate = float(activation_rate)
        self.borrow_token_decimals = borrow_token_decimals
        self.pool_address = pool_address
        self.oracle_address = oracle_address
        self.supply_token_address = supply_token_address
        self.borrow_token_address = borrow_token_address
        self.supply_amount = supply_amount
        self.state = BorrowState.IDLE

    def borrow_amount(self, available_borrows_base: int, borrow_asset_price: int, fraction_bps: int) -> int:
        """
        Amount of borrow token (native units) worth `fraction_bps` basis points
        of the available capacity. Capacity and price share the base currency
        decimals, so only the token decimals and basis points need rescaling.
        """
        scale = 10 ** (self.borrow_token_decimals - 4)
        return scale * available_borrows_base * fraction_bps // borrow_asset_price

    def update(self, rng, env) -> list:
        if rng.random() >= self.activation_rate:
            return []

        if self.state is BorrowState.IDLE:
            self.state = BorrowState.SUPPLIED
            if config.VERBOSE_LOGGING:
                print(f"    [Borrower {self.address}] Supplying {self.supply_amount} collateral.")
            return [calls.supply_call(self.address, self.pool_address,
                                      self.supply_token_address, self.supply_amount)]

        if self.state is BorrowState.SUPPLIED:
            user_data = calls.get_user_data(env, self.pool_address, self.address)
            price = calls.get_asset_price(env, self.oracle_address, self.borrow_token_address)
            fraction_bps = rng.randrange(*config.BORROW_FRACTION_RANGE)
            amount = self.borrow_amount(user_data.available_borrows_base, price, fraction_bps)
            if amount <= 0:
                return []
            self.state = BorrowState.BORROWED
            if config.VERBOSE_LOGGING:
                print(f"    [Borrower {self.address}] Borrowing {amount} ({fraction_bps / 100:.2f}% of capacity).")
            return [calls.borrow_call(self.address, self.pool_address, self.borrow_token_address, amount)]

        return []
