"""Unit tests for the borrower state machine."""

import random

import pytest

from aave_sim import calls
from aave_sim.agents.borrow_agent import BorrowAgent, BorrowState
from aave_sim.core.environment import RevertError
from aave_sim.deployment import initialise_borrow_agents

AVAILABLE_BORROWS_BASE = 750_000_000_000      # 7500.0 in base currency
BORROW_ASSET_PRICE = 100_000_000              # 1.0 in base currency


class StubLendingEnv:
    """Answers the two reads a borrower makes and counts them."""
    def __init__(self, available_borrows_base=AVAILABLE_BORROWS_BASE, price=BORROW_ASSET_PRICE):
        self.available_borrows_base = available_borrows_base
        self.price = price
        self.queries = []

    def query(self, caller, target, request):
        self.queries.append(request)
        if isinstance(request, calls.GetUserAccountData):
            return calls.UserAccountData(10**12, 0, self.available_borrows_base, 8000, 7500, 2**256 - 1), []
        if isinstance(request, calls.GetAssetPrice):
            return self.price, []
        raise RevertError(f"unexpected request {request}")


def make_borrower(model, activation_rate=0.5, idx=0):
    return BorrowAgent(
        model=model, idx=idx,
        activation_rate=activation_rate,
        borrow_token_decimals=18,
        pool_address="pool", oracle_address="oracle",
        supply_token_address="token_a", borrow_token_address="token_b",
    )


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize("activation_rate", [0.1, 0.5, 1.0])
def test_at_most_one_supply_then_at_most_one_borrow(mesa_model, seed, activation_rate):
    agent = make_borrower(mesa_model, activation_rate)
    env = StubLendingEnv()
    rng = random.Random(seed)

    functions = []
    for _ in range(200):
        txs = agent.update(rng, env)
        assert len(txs) <= 1
        functions.extend(tx.function for tx in txs)

    assert functions.count("supply") <= 1
    assert functions.count("borrow") <= 1
    if "borrow" in functions:
        assert functions.index("supply") < functions.index("borrow")


def test_full_activation_supplies_then_borrows(mesa_model):
    agent = make_borrower(mesa_model, activation_rate=1.0)
    env = StubLendingEnv()
    rng = random.Random(3)

    first = agent.update(rng, env)
    assert [tx.function for tx in first] == ["supply"]
    assert first[0].call.amount == 10**20
    assert first[0].checked
    assert agent.state is BorrowState.SUPPLIED
    assert env.queries == []

    second = agent.update(rng, env)
    assert [tx.function for tx in second] == ["borrow"]
    assert second[0].call.interest_rate_mode == 2
    assert second[0].call.on_behalf_of == agent.address
    assert agent.state is BorrowState.BORROWED

    assert agent.update(rng, env) == []
    assert agent.record(env) == 0


def test_zero_activation_never_acts(mesa_model):
    agent = make_borrower(mesa_model, activation_rate=0.0)
    rng = random.Random(0)
    assert all(agent.update(rng, StubLendingEnv()) == [] for _ in range(50))
    assert agent.state is BorrowState.IDLE


@pytest.mark.parametrize("seed", range(20))
def test_borrowed_amount_is_a_fraction_of_the_ceiling(mesa_model, seed):
    agent = make_borrower(mesa_model, activation_rate=1.0)
    env = StubLendingEnv()
    rng = random.Random(seed)
    agent.update(rng, env)
    borrow = agent.update(rng, env)[0]

    ceiling = AVAILABLE_BORROWS_BASE * 10**18 // BORROW_ASSET_PRICE
    assert borrow.call.amount < ceiling
    assert borrow.call.amount >= ceiling * 9 // 10


def test_borrow_amount_scaling(mesa_model):
    agent = make_borrower(mesa_model)
    # 7500.0 available, price 2.0, 95% -> 3562.5 tokens
    assert agent.borrow_amount(750_000_000_000, 200_000_000, 9500) == 3_562_500_000_000_000_000_000


def test_zero_borrow_amount_stays_supplied(mesa_model):
    agent = make_borrower(mesa_model, activation_rate=1.0)
    env = StubLendingEnv(available_borrows_base=0)
    rng = random.Random(1)
    agent.update(rng, env)

    for _ in range(3):
        assert agent.update(rng, env) == []
        assert agent.state is BorrowState.SUPPLIED

    env.available_borrows_base = AVAILABLE_BORROWS_BASE
    assert [tx.function for tx in agent.update(rng, env)] == ["borrow"]


def test_activation_rate_is_validated(mesa_model):
    with pytest.raises(ValueError):
        make_borrower(mesa_model, activation_rate=1.5)


def test_initialiser_reads_borrow_token_decimals(mesa_model, env, deployment):
    agents = initialise_borrow_agents(mesa_model, env, deployment, 3, 0.5)

    assert [agent.idx for agent in agents] == [0, 1, 2]
    assert all(agent.borrow_token_decimals == 18 for agent in agents)
    assert all(agent.borrow_token_address == deployment.token_b for agent in agents)
    assert len({agent.address for agent in agents}) == 3
