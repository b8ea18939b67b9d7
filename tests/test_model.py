"""End to end runs of the full model against the local protocol."""

import pytest

from aave_sim import calls
from aave_sim import config
from aave_sim.model import AaveSimModel
from aave_sim.runner import run_model
from local_env import deploy_local_protocol

SHOCKED = dict(n_borrowers=10, n_liquidators=1, n_noise_agents=1, activation_rate=0.1,
               market_shock_step=50, market_shock_factor=0.5)


def liquidations(model):
    return [tx for tx in model.transaction_log if tx.function == calls.LiquidationCall.function]


def assert_liquidations_follow_observations(model):
    """Every liquidation was sent for an account the liquidator saw under the boundary that step."""
    liquidator = model.liquidation_agents[0]
    records = model.records["liquidation_agents"][0]
    for tx in liquidations(model):
        borrower_index = liquidator.liquidation_addresses.index(tx.call.user)
        snapshot = records[tx.submission_step - 1][borrower_index]
        assert snapshot.health_factor < 1.0


@pytest.fixture(scope="module")
def shocked_model():
    env, deployment = deploy_local_protocol()
    return run_model(env, deployment, seed=101, n_steps=100, **SHOCKED)


class TestShockedRun:

    def test_runs_to_completion(self, shocked_model):
        assert shocked_model.steps == 100
        assert not shocked_model.running
        records = shocked_model.records
        assert all(len(agent_records) == 100 for agent_records in records["borrow_agents"])
        assert len(records["liquidation_agents"][0]) == 100
        assert len(records["uniswap_price_agent"][0]) == 100
        assert len(records["uniswap_noise_agents"][0]) == 100

    def test_shock_puts_accounts_under_the_boundary(self, shocked_model):
        observed = [snapshot.health_factor
                    for step in shocked_model.records["liquidation_agents"][0]
                    for snapshot in step]
        assert min(observed) < 1.0

    def test_external_price_halves_at_the_shock(self, shocked_model):
        prices = [price_a for price_a, _ in shocked_model.records["uniswap_price_agent"][0]]
        assert prices[49] < 0.6 * prices[48]

    def test_liquidations_target_observed_positions(self, shocked_model):
        assert_liquidations_follow_observations(shocked_model)
        for tx in liquidations(shocked_model):
            assert tx.execution_step == tx.submission_step

    def test_only_liquidations_fail(self, shocked_model):
        failed = [tx for tx in shocked_model.transaction_log if tx.status == "Failed"]
        assert all(not tx.checked for tx in failed)

    def test_blocks_follow_gas_then_submission_order(self, shocked_model):
        by_step = {}
        for tx in shocked_model.transaction_log:
            by_step.setdefault(tx.execution_step, []).append(tx.gas_price)
        for gas_prices in by_step.values():
            assert gas_prices == sorted(gas_prices, reverse=True)

    def test_data_collector_rows(self, shocked_model):
        frame = shocked_model.datacollector.get_model_vars_dataframe()
        assert len(frame) == 101
        assert list(frame["Steps"])[-1] == 100
        assert frame["ExecutedLiquidations"].is_monotonic_increasing
        assert frame["PoolPriceA"].iloc[-1] < frame["PoolPriceA"].iloc[0]
        assert (frame["MinHealthFactor"].dropna() < 1.0).any()


def test_unshocked_default_scenario():
    env, deployment = deploy_local_protocol()
    model = run_model(env, deployment, seed=101, n_steps=100, n_borrowers=10, n_liquidators=1,
                      n_noise_agents=1, activation_rate=0.1)

    assert model.steps == 100
    assert len(model.records["liquidation_agents"][0]) == 100
    borrows = [tx for tx in model.transaction_log if tx.function == calls.Borrow.function]
    assert borrows and all(tx.status == "Executed" for tx in borrows)
    observed = [snapshot.health_factor
                for step in model.records["liquidation_agents"][0]
                for snapshot in step]
    assert min(observed) < 1.0
    assert_liquidations_follow_observations(model)


def test_unshocked_run_liquidates_only_observed_positions():
    env, deployment = deploy_local_protocol()
    model = run_model(env, deployment, seed=7, n_steps=60, n_borrowers=5, activation_rate=0.2)
    assert model.steps == 60
    assert_liquidations_follow_observations(model)


def test_same_seed_same_run():
    runs = []
    for _ in range(2):
        env, deployment = deploy_local_protocol()
        runs.append(run_model(env, deployment, seed=5, n_steps=25, n_borrowers=4, activation_rate=0.3))
    first, second = runs
    assert first.records == second.records
    assert [(tx.function, tx.sender, tx.status) for tx in first.transaction_log] == \
           [(tx.function, tx.sender, tx.status) for tx in second.transaction_log]


def test_different_seeds_diverge():
    price_paths = []
    for seed in (1, 2):
        env, deployment = deploy_local_protocol()
        model = run_model(env, deployment, seed=seed, n_steps=10, n_borrowers=2)
        price_paths.append(model.records["uniswap_price_agent"][0])
    assert price_paths[0] != price_paths[1]


def test_adversarial_run_front_runs_ahead_of_liquidations():
    env, deployment = deploy_local_protocol()
    model = run_model(env, deployment, seed=3, n_steps=20, n_borrowers=8, activation_rate=1.0,
                      adversarial=True, market_shock_step=10, market_shock_factor=0.96)

    assert model.steps == 20
    assert model.liquidation_agents[0].adversarial
    borrows = [tx for tx in model.transaction_log if tx.function == calls.Borrow.function]
    assert {tx.execution_step for tx in borrows} == {2}
    assert all(tx.status == "Executed" for tx in borrows)

    for step in {tx.execution_step for tx in model.transaction_log}:
        block = [tx for tx in model.transaction_log if tx.execution_step == step]
        front_runs = [i for i, tx in enumerate(block) if tx.gas_price > config.BASE_GAS_PRICE]
        liquidation_calls = [i for i, tx in enumerate(block) if tx.function == calls.LiquidationCall.function]
        assert all(block[i].function == calls.ExactOutputSingle.function for i in front_runs)
        if front_runs and liquidation_calls:
            assert max(front_runs) < min(liquidation_calls)


def test_model_wires_agents_and_funding():
    env, deployment = deploy_local_protocol()
    model = AaveSimModel(env, deployment, n_borrowers=3, n_liquidators=2, n_noise_agents=2, seed=1)

    assert len(model.borrow_agents) == 3
    assert len(model.liquidation_agents) == 2
    assert len(model.noise_agents) == 2
    assert len(model.agents) == 3 + 2 + 1 + 2
    assert model.agents_in_update_order[0] is model.borrow_agents[0]
    assert model.agents_in_update_order[-1] is model.noise_agents[-1]
    for liquidator in model.liquidation_agents:
        assert liquidator.liquidation_addresses == [a.address for a in model.borrow_agents]
        assert calls.balance_of(env, liquidator.address, deployment.token_b) > 0
    assert env.native_balances[model.price_agent.address] > 0
