# aave_sim/core/accounts.py

"""
Agent addresses. Each agent class owns a block of integer indices, so the
class of an agent can be recovered from its address alone.
"""

from .. import config

ZERO_ADDRESS = "0x" + "00" * 20


def address_from_index(idx: int) -> str:
    if idx < 0:
        raise ValueError(f"Address index must be non-negative, got {idx}")
    return f"0x{idx:040x}"


def index_from_address(address: str) -> int:
    return int(address, 16)


def agent_class_from_address(address: str) -> str:
    idx = index_from_address(address)
    for class_name, start in config.AGENT_INDEX_RANGES.items():
        if start <= idx < start + config.AGENT_INDEX_RANGE_SIZE:
            return class_name
    raise ValueError(f"Address {address} is outside every agent index range")


def agent_index(class_name: str, i: int) -> int:
    """Index of the i-th agent of `class_name`."""
    if class_name not in config.AGENT_INDEX_RANGES:
        raise ValueError(f"Unknown agent class {class_name}")
    if not 0 <= i < config.AGENT_INDEX_RANGE_SIZE:
        raise ValueError(f"Agent number {i} does not fit in the {class_name} index range")
    return config.AGENT_INDEX_RANGES[class_name] + i
