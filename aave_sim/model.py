# aave_sim/model.py

import mesa

from . import config
from .deployment import (
    Deployment,
    fund_agents,
    initialise_borrow_agents,
    initialise_liquidation_agents,
    initialise_uniswap_noise_agents,
    initialise_uniswap_price_agent,
)
from .processing.mempool import Mempool
from .processing.block_producer import BlockProducer
from .analysis import metrics


class AaveSimModel(mesa.Model):
    """
    Borrowers, liquidators and Uniswap traders acting against an Aave lending
    pool whose collateral oracle follows the Uniswap pool price.

    All protocol state lives in `env`; the model only schedules agents, turns
    their decisions into a block and records what they observed.
    """
    def __init__(self, env, deployment: Deployment,
                 n_borrowers: int = config.N_BORROWERS,
                 n_liquidators: int = config.N_LIQUIDATORS,
                 n_noise_agents: int = config.N_NOISE_AGENTS,
                 activation_rate: float = config.BORROW_ACTIVATION_RATE,
                 adversarial: bool = config.ADVERSARIAL,
                 prices_mu: float = config.PRICES_MU,
                 prices_dt: float = config.PRICES_DT,
                 prices_sigma: float = config.PRICES_SIGMA,
                 token_a_initial_price: float = config.TOKEN_A_INITIAL_PRICE,
                 token_b_initial_price: float = config.TOKEN_B_INITIAL_PRICE,
                 n_steps: int = config.SIMULATION_STEPS,
                 market_shock_step: int = config.MARKET_SHOCK_STEP,
                 market_shock_factor: float = config.MARKET_SHOCK_FACTOR,
                 seed=None):

        super().__init__(seed=seed)

        self.env = env
        self.deployment = deployment
        self.adversarial = adversarial
        self.n_steps = n_steps
        self.market_shock_step = market_shock_step
        self.market_shock_factor = market_shock_factor

        self.mempool = Mempool()
        self.block_producer = BlockProducer(model=self)
        self.transaction_log = []

        self.borrow_agents = initialise_borrow_agents(self, env, deployment, n_borrowers, activation_rate)
        self.liquidation_agents = initialise_liquidation_agents(
            self, deployment, n_liquidators, [a.address for a in self.borrow_agents], adversarial
        )
        self.price_agent = initialise_uniswap_price_agent(
            self, env, deployment, token_a_initial_price, token_b_initial_price,
            prices_mu, prices_dt, prices_sigma,
        )
        self.noise_agents = initialise_uniswap_noise_agents(self, env, deployment, n_noise_agents)
        fund_agents(env, deployment, self.borrow_agents, self.liquidation_agents,
                    [self.price_agent], self.noise_agents)

        # Per agent, one recorded value per step
        self.records = {
            "borrow_agents": [[] for _ in self.borrow_agents],
            "liquidation_agents": [[] for _ in self.liquidation_agents],
            "uniswap_price_agent": [[]],
            "uniswap_noise_agents": [[] for _ in self.noise_agents],
        }

        if config.VERBOSE_LOGGING:
            print(f"--- Model Initialized: Adversarial = {self.adversarial}, ShockStep = {self.market_shock_step} ---")
            print(f"Agents Created: Borrowers={len(self.borrow_agents)}, Liquidators={len(self.liquidation_agents)}, "
                  f"Noise={len(self.noise_agents)}. Total in model.agents: {len(self.agents)}")

        self.datacollector = mesa.DataCollector(
            model_reporters={
                "Steps": "steps",
                "ExternalPriceA": metrics.get_external_price,
                "PoolPriceA": metrics.get_pool_price,
                "OraclePriceA": metrics.get_oracle_price,
                "MinHealthFactor": metrics.get_min_health_factor,
                "LiquidatablePositions": metrics.get_liquidatable_positions,
                "ExecutedLiquidations": metrics.get_executed_liquidations,
                "FailedTransactions": metrics.get_failed_transactions,
            },
            agent_reporters={
                "AgentType": lambda a: a.__class__.__name__,
                "Address": "address",
            }
        )
        self.running = True
        self.datacollector.collect(self)

    @property
    def agents_in_update_order(self) -> list:
        return [*self.borrow_agents, *self.liquidation_agents, self.price_agent, *self.noise_agents]

    def record_agents(self):
        recorded_sets = (
            ("borrow_agents", self.borrow_agents),
            ("liquidation_agents", self.liquidation_agents),
            ("uniswap_price_agent", [self.price_agent]),
            ("uniswap_noise_agents", self.noise_agents),
        )
        for key, agents in recorded_sets:
            for i, agent in enumerate(agents):
                self.records[key][i].append(agent.record(self.env))

    def step(self):
        if self.market_shock_step != -1 and self.steps == self.market_shock_step:
            self.price_agent.external_market.apply_shock(self.market_shock_factor)

        for agent in self.agents_in_update_order:
            for tx in agent.update(self.random, self.env):
                tx.submission_step = self.steps
                self.mempool.add_transaction(tx)

        self.block_producer.process_transactions(self.mempool.get_transactions_for_block())

        self.record_agents()
        self.datacollector.collect(self)
        if self.steps >= self.n_steps:
            self.running = False
