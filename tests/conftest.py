"""Shared fixtures: a freshly deployed local protocol and a bare mesa model."""

import mesa
import pytest

from local_env import deploy_local_protocol


@pytest.fixture
def local_protocol():
    return deploy_local_protocol()


@pytest.fixture
def env(local_protocol):
    return local_protocol[0]


@pytest.fixture
def deployment(local_protocol):
    return local_protocol[1]


@pytest.fixture
def mesa_model():
    return mesa.Model(seed=42)
