# aave_sim/agents/liquidation_agent.py

from typing import Optional

import mesa

from .base_agent import BaseAgent
from .. import calls
from .. import config
from ..core.environment import RevertError
from ..core.fixed_point import MAX_UINT256, WAD, div_to_float, scale_data_value
from ..core.user_data import AccountSnapshot
from ..processing.transaction import Transaction


def liquidation_is_profitable(seized_collateral: int, swap_cost: int) -> bool:
    """A liquidation pays off only if it seizes more collateral than buying back the debt costs."""
    return seized_collateral > swap_cost


def upper_bound_health_factor(current_sqrt_price_x96: int, sqrt_price_after_x96: int) -> float:
    """
    Highest health factor that a swap moving the pool from `current` to
    `after` can push under the liquidation boundary. Liquidity is constant
    over the swap, so the price ratio is the square of the root price ratio.
    """
    sqrt_ratio = div_to_float(current_sqrt_price_x96, sqrt_price_after_x96, config.UPPER_BOUND_DECIMALS)
    return sqrt_ratio ** 2


def adversarial_debt_to_cover(total_debt_base: int, debt_decimals: int, debt_asset_price: int) -> int:
    """Half of an account's debt, converted from base currency into debt token units."""
    return total_debt_base * 10**debt_decimals // (config.ADVERSARIAL_CLOSE_FACTOR_DIVISOR * debt_asset_price)


class LiquidationStrategy:
    """Decides which liquidation related transactions to send in one step."""

    def decide(self, agent: "LiquidationAgent", env, accounts: list, collateral_balance: int) -> list[Transaction]:
        raise NotImplementedError


class DirectLiquidation(LiquidationStrategy):
    """Liquidates every account under the boundary that is profitable to liquidate right now."""

    def is_profitable(self, agent: "LiquidationAgent", env, user: str) -> bool:
        """
        Dry-runs the maximal liquidation of `user` and compares the seized
        collateral with the cost of buying back the repaid debt on the pool.
        A reverted dry run counts as not profitable.
        """
        try:
            _, events = env.query(agent.address, agent.pool_address, calls.LiquidationCall(
                collateral_asset=agent.collateral_token_address,
                debt_asset=agent.debt_token_address,
                user=user,
                debt_to_cover=MAX_UINT256,
            ))
        except RevertError as e:
            if config.VERBOSE_LOGGING:
                print(f"    [Liquidator {agent.address}] Dry run for {user} reverted: {e.reason}")
            return False

        event = [ev for ev in events if isinstance(ev, calls.LiquidationCallEvent)][-1]
        quote = calls.quote_exact_output_swap(
            env, agent.address, agent.quoter,
            agent.collateral_token_address, agent.debt_token_address,
            agent.uniswap_fee, event.debt_to_cover,
        )
        swap_cost = quote.amount_in if quote is not None else event.liquidated_collateral_amount
        return liquidation_is_profitable(event.liquidated_collateral_amount, swap_cost)

    def decide(self, agent, env, accounts, collateral_balance):
        at_risk = [user for user, data in accounts if data.health_factor < WAD]
        txs = []
        for user in at_risk:
            if self.is_profitable(agent, env, user):
                if config.VERBOSE_LOGGING:
                    print(f"    >>>> [Liquidator {agent.address}] Liquidating {user}. <<<<")
                txs.append(agent.liquidation_tx(user))
        return txs


class AdversarialLiquidation(LiquidationStrategy):
    """
    Liquidates accounts under the boundary and front-runs the pool to push
    accounts that are close to it under the boundary for a later step.
    """

    def decide(self, agent, env, accounts, collateral_balance):
        debt_decimals = calls.get_decimals(env, agent.address, agent.debt_token_address)
        debt_asset_price = calls.get_asset_price(env, agent.oracle_address, agent.debt_token_address)
        current_sqrt_price_x96 = calls.get_slot0(env, agent.address, agent.uniswap_pool).sqrt_price_x96

        targets = []
        for user, data in accounts:
            debt_to_cover = adversarial_debt_to_cover(data.total_debt_base, debt_decimals, debt_asset_price)
            if debt_to_cover <= 0:
                continue
            quote = calls.quote_exact_output_swap(
                env, agent.address, agent.quoter,
                agent.collateral_token_address, agent.debt_token_address,
                agent.uniswap_fee, debt_to_cover,
            )
            sqrt_price_after_x96 = quote.sqrt_price_x96_after if quote is not None else current_sqrt_price_x96
            bound = upper_bound_health_factor(current_sqrt_price_x96, sqrt_price_after_x96)
            if scale_data_value(data.health_factor, 18, 12) < bound:
                targets.append((user, data.health_factor, debt_to_cover))

        liquidations = [agent.liquidation_tx(user) for user, hf, _ in targets if hf < WAD]
        front_run_size = sum(debt_to_cover for _, hf, debt_to_cover in targets if hf >= WAD)

        txs = []
        if front_run_size > 0:
            if config.VERBOSE_LOGGING:
                print(f"    >>>> [Liquidator {agent.address}] Front-running pool with {front_run_size} debt token. <<<<")
            txs.append(agent.buy_debt_tx(front_run_size, collateral_balance,
                                         gas_price=config.BASE_GAS_PRICE * config.FRONT_RUN_GAS_BOOST))
        txs.extend(liquidations)
        return txs


class LiquidationAgent(BaseAgent):
    """
    Watches a fixed set of borrowers and liquidates them according to its
    strategy. Debt repaid in a liquidation is bought back on the pool in
    the following step.
    """
    def __init__(self, model: mesa.Model, idx: int,
                 pool_address: str,
                 oracle_address: str,
                 collateral_token_address: str,
                 debt_token_address: str,
                 liquidation_addresses: list[str],
                 strategy: LiquidationStrategy,
                 uniswap_pool: str,
                 quoter: str,
                 swap_router: str,
                 uniswap_fee: int):
        super().__init__(model, idx)
        self.pool_address = pool_address
        self.oracle_address = oracle_address
        self.collateral_token_address = collateral_token_address
        self.debt_token_address = debt_token_address
        self.liquidation_addresses = list(liquidation_addresses)
        self.strategy = strategy
        self.uniswap_pool = uniswap_pool
        self.quoter = quoter
        self.swap_router = swap_router
        self.uniswap_fee = uniswap_fee

        self.current_user_data = []
        self.balance_collateral_asset = []
        self.balance_debt_asset = []
        self.current_step = 0

    @property
    def adversarial(self) -> bool:
        return isinstance(self.strategy, AdversarialLiquidation)

    def liquidation_tx(self, user: str) -> Transaction:
        return calls.liquidation_call(self.address, self.pool_address,
                                      self.collateral_token_address, self.debt_token_address, user)

    def buy_debt_tx(self, amount_out: int, max_collateral: int,
                    gas_price: float = config.BASE_GAS_PRICE) -> Transaction:
        return calls.exact_output_swap_call(self.address, self.swap_router, calls.ExactOutputSingle(
            token_in=self.collateral_token_address,
            token_out=self.debt_token_address,
            fee=self.uniswap_fee,
            recipient=self.address,
            amount_out=amount_out,
            amount_in_maximum=max_collateral,
        ), gas_price=gas_price)

    def hedge_tx(self, collateral_balance: int, debt_balance: int) -> Optional[Transaction]:
        """Buys back the debt token spent since the previous step, if any."""
        if self.current_step == 0 or not self.balance_debt_asset:
            return None
        previous_debt_balance = self.balance_debt_asset[-1]
        if previous_debt_balance <= debt_balance:
            return None
        deficit = previous_debt_balance - debt_balance
        if config.VERBOSE_LOGGING:
            print(f"    [Liquidator {self.address}] Closing short position of {deficit} debt token.")
        return self.buy_debt_tx(deficit, collateral_balance)

    def update(self, rng, env) -> list:
        collateral_balance = calls.balance_of(env, self.address, self.collateral_token_address)
        debt_balance = calls.balance_of(env, self.address, self.debt_token_address)

        accounts = [(user, calls.get_user_data(env, self.pool_address, user))
                    for user in self.liquidation_addresses]
        self.current_user_data = [AccountSnapshot.from_account_data(data) for _, data in accounts]

        txs = self.strategy.decide(self, env, accounts, collateral_balance)
        hedge = self.hedge_tx(collateral_balance, debt_balance)
        if hedge is not None:
            txs.append(hedge)

        self.balance_collateral_asset.append(collateral_balance)
        self.balance_debt_asset.append(debt_balance)
        self.current_step += 1
        return txs

    def record(self, env) -> list[AccountSnapshot]:
        user_data, self.current_user_data = self.current_user_data, []
        return user_data
