"""Pytest fixtures for dashboard tests."""

import random

import pytest
import structlog

from pai_dashboard.registry import AgentRegistry
from pai_dashboard.state import DashboardState, ViewState
from tests.helpers import NOW, make_test_agent


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def agents():
    """Ten agents with distinct ids, all Running."""
    return [make_test_agent(i) for i in range(10)]


@pytest.fixture
def state(agents, now):
    view = ViewState(last_refresh=now, loading=False, width=140, height=40)
    return DashboardState(AgentRegistry(agents), view)
