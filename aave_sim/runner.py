# aave_sim/runner.py

"""
Runs simulations for one or more seeds and collects the per step agent
records, keyed by agent class, into SimData objects.
"""

import json
import os
from dataclasses import asdict, dataclass

import pandas as pd

from . import config
from .core.user_data import AccountSnapshot
from .model import AaveSimModel


@dataclass
class SimData:
    seed: int
    borrow_agents: list
    liquidation_agents: list
    uniswap_price_agent: list
    uniswap_noise_agents: list

    @classmethod
    def from_model(cls, model: AaveSimModel, seed: int) -> "SimData":
        return cls(seed=seed, **model.records)

    def to_dict(self) -> dict:
        # NamedTuple snapshots serialise as plain arrays
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SimData":
        liquidation_agents = [
            [[AccountSnapshot(*snapshot) for snapshot in step] for step in agent_records]
            for agent_records in data["liquidation_agents"]
        ]
        uniswap_price_agent = [[tuple(prices) for prices in agent_records]
                               for agent_records in data["uniswap_price_agent"]]
        return cls(
            seed=data["seed"],
            borrow_agents=data["borrow_agents"],
            liquidation_agents=liquidation_agents,
            uniswap_price_agent=uniswap_price_agent,
            uniswap_noise_agents=data["uniswap_noise_agents"],
        )


def run_model(env, deployment, seed: int, n_steps: int = config.SIMULATION_STEPS, **model_params) -> AaveSimModel:
    """
    Steps a model to completion. A reverted checked transaction propagates
    and ends the run.
    """
    model = AaveSimModel(env, deployment, n_steps=n_steps, seed=seed, **model_params)
    while model.running and model.steps < n_steps:
        model.step()
    return model


def run_simulation(env, deployment, seed: int, n_steps: int = config.SIMULATION_STEPS, **model_params) -> SimData:
    model = run_model(env, deployment, seed, n_steps, **model_params)
    return SimData.from_model(model, seed)


def run_batch(env_factory, seeds: list = config.SEEDS, n_steps: int = config.SIMULATION_STEPS,
              **model_params) -> list[SimData]:
    """
    One independent run per seed. `env_factory` returns a fresh
    `(env, deployment)` pair for every run so that no state is shared.
    """
    results = []
    for i, seed in enumerate(seeds):
        print(f"--- Running seed {seed} ({i + 1}/{len(seeds)}) ---")
        env, deployment = env_factory()
        results.append(run_simulation(env, deployment, seed, n_steps, **model_params))
    return results


def model_results_frame(model: AaveSimModel, seed=None) -> pd.DataFrame:
    model_df = model.datacollector.get_model_vars_dataframe()
    if seed is not None:
        model_df["seed"] = seed
    return model_df


def save_results(results: list[SimData], path: str = config.RESULTS_FILE):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w") as f:
        json.dump([sim.to_dict() for sim in results], f)
    print(f"Saved {len(results)} runs to: {os.path.abspath(path)}")


def load_results(path: str = config.RESULTS_FILE) -> list[SimData]:
    with open(path) as f:
        return [SimData.from_dict(data) for data in json.load(f)]
