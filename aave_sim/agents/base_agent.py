# aave_sim/agents/base_agent.py

import mesa

from ..core.accounts import address_from_index, agent_index


class BaseAgent(mesa.Agent):
    """
    Common shape of every simulation agent: a fixed on-chain address, an
    `update` that turns the current environment state into transactions, and
    a `record` hook called once per step.
    """
    def __init__(self, model: mesa.Model, idx: int):
        super().__init__(model)
        self.idx = idx
        self.address = address_from_index(agent_index(self.__class__.__name__, idx))

    def update(self, rng, env) -> list:
        raise NotImplementedError

    def record(self, env):
        return 0

    def __repr__(self):
        return f"{self.__class__.__name__}(id={self.unique_id}, address={self.address})"
