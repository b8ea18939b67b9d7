# aave_sim/deployment.py

"""
Addresses and parameters of a deployed Aave/Uniswap scenario, and helpers
that create the agent sets against it and fund them.
"""

from dataclasses import dataclass

from . import calls
from . import config
from .agents.borrow_agent import BorrowAgent
from .agents.liquidation_agent import AdversarialLiquidation, DirectLiquidation, LiquidationAgent
from .agents.uniswap_agent import UniswapPriceAgent
from .agents.uniswap_noise_agent import UniswapNoiseAgent


@dataclass(frozen=True)
class Deployment:
    token_a: str         # Collateral token, token0 of the pool
    token_b: str         # Debt token
    faucet: str
    lending_pool: str
    oracle: str
    data_provider: str
    uniswap_pool: str
    swap_router: str
    quoter: str
    uniswap_fee: int = config.UNISWAP_FEE


def initialise_borrow_agents(model, env, deployment: Deployment, n_agents: int,
                             activation_rate: float) -> list[BorrowAgent]:
    borrow_token_config = calls.get_reserve_configuration_data(env, deployment.data_provider, deployment.token_b)
    return [
        BorrowAgent(
            model=model, idx=i,
            activation_rate=activation_rate,
            borrow_token_decimals=borrow_token_config.decimals,
            pool_address=deployment.lending_pool,
            oracle_address=deployment.oracle,
            supply_token_address=deployment.token_a,
            borrow_token_address=deployment.token_b,
        )
        for i in range(n_agents)
    ]


def initialise_liquidation_agents(model, deployment: Deployment, n_agents: int,
                                  borrower_addresses: list[str], adversarial: bool) -> list[LiquidationAgent]:
    agents = []
    for i in range(n_agents):
        strategy = AdversarialLiquidation() if adversarial else DirectLiquidation()
        agents.append(LiquidationAgent(
            model=model, idx=i,
            pool_address=deployment.lending_pool,
            oracle_address=deployment.oracle,
            collateral_token_address=deployment.token_a,
            debt_token_address=deployment.token_b,
            liquidation_addresses=borrower_addresses,
            strategy=strategy,
            uniswap_pool=deployment.uniswap_pool,
            quoter=deployment.quoter,
            swap_router=deployment.swap_router,
            uniswap_fee=deployment.uniswap_fee,
        ))
    return agents


def initialise_uniswap_price_agent(model, env, deployment: Deployment,
                                   token_a_price: float, token_b_price: float,
                                   mu: float, dt: float, sigma: float) -> UniswapPriceAgent:
    return UniswapPriceAgent(
        model=model, env=env, idx=0,
        pool=deployment.uniswap_pool,
        fee=deployment.uniswap_fee,
        swap_router=deployment.swap_router,
        token_b=deployment.token_b,
        token_a_price=token_a_price,
        token_b_price=token_b_price,
        mu=mu, dt=dt, sigma=sigma,
    )


def initialise_uniswap_noise_agents(model, env, deployment: Deployment, n_agents: int) -> list[UniswapNoiseAgent]:
    return [
        UniswapNoiseAgent(
            model=model, env=env, idx=i,
            fee=deployment.uniswap_fee,
            swap_router=deployment.swap_router,
            token_a=deployment.token_a,
            token_b=deployment.token_b,
        )
        for i in range(n_agents)
    ]


def approve_and_mint(env, addresses: list[str], faucet: str, token: str, spender: str,
                     amount: int = config.MINT_AMOUNT):
    """Mints `amount` of `token` to each address and approves `spender` to use it."""
    for address in addresses:
        for request, target in ((calls.FaucetMint(token=token, to=address, amount=amount), faucet),
                                (calls.Approve(spender=spender, amount=amount), token)):
            env.execute(address, target, request)


def fund_agents(env, deployment: Deployment, borrow_agents: list, liquidation_agents: list,
                price_agents: list, noise_agents: list,
                start_balance: int = config.START_BALANCE, mint_amount: int = config.MINT_AMOUNT):
    """
    Native balance for everyone, then the token approvals each agent class
    needs: borrowers supply token A to the lending pool, liquidators repay
    token B there and sell token A on the router, the pool traders use both
    tokens on the router.
    """
    for agent in [*borrow_agents, *liquidation_agents, *price_agents, *noise_agents]:
        env.provision(agent.address, start_balance)

    borrowers = [a.address for a in borrow_agents]
    liquidators = [a.address for a in liquidation_agents]
    traders = [a.address for a in [*price_agents, *noise_agents]]

    approve_and_mint(env, borrowers, deployment.faucet, deployment.token_a, deployment.lending_pool, mint_amount)
    approve_and_mint(env, liquidators, deployment.faucet, deployment.token_b, deployment.lending_pool, mint_amount)
    approve_and_mint(env, liquidators, deployment.faucet, deployment.token_a, deployment.swap_router, mint_amount)
    approve_and_mint(env, traders, deployment.faucet, deployment.token_a, deployment.swap_router, mint_amount)
    approve_and_mint(env, traders, deployment.faucet, deployment.token_b, deployment.swap_router, mint_amount)

    if config.VERBOSE_LOGGING:
        print(f"Funded {len(borrowers)} borrowers, {len(liquidators)} liquidators and {len(traders)} traders "
              f"with {mint_amount} tokens each.")
