"""Shared test helpers: scripted randomness and agent factories."""

from __future__ import annotations

from datetime import datetime, timedelta

from pai_dashboard.models import Agent, ISCCriterion, Phase, Status

NOW = datetime(2026, 3, 1, 12, 0, 0)


class ScriptedRandom:
    """Stand-in for ``random.Random`` with fully scripted draws.

    ``random()`` pops from *floats* (then returns *default_float*, which
    by default is high enough that no probabilistic branch fires);
    ``randrange()`` and ``choice()`` pop from *ints* (then return 0).
    """

    def __init__(self, floats=(), ints=(), default_float: float = 0.99):
        self.floats = list(floats)
        self.ints = list(ints)
        self.default_float = default_float

    def random(self) -> float:
        if self.floats:
            return self.floats.pop(0)
        return self.default_float

    def randrange(self, n: int) -> int:
        v = self.ints.pop(0) if self.ints else 0
        assert 0 <= v < n, f"scripted draw {v} outside range({n})"
        return v

    def choice(self, seq):
        return seq[self.randrange(len(seq))]


def make_test_agent(index: int = 0, **overrides) -> Agent:
    fields = dict(
        id=f"pai-t{index:03d}",
        name="Engineer",
        model="claude-sonnet-4-5",
        status=Status.RUNNING,
        phase=Phase.PLAN,
        progress=30,
        tokens_per_sec=100.0,
        tokens_in=10_000,
        tokens_out=2_000,
        task="Implement auth middleware for API",
        current_tool="Edit",
        last_activity="Edit config/database.yaml",
        last_active_at=NOW - timedelta(seconds=5),
        started_at=NOW - timedelta(seconds=125),
        tools_used=7,
        isc=[
            ISCCriterion("Tests pass for auth module", True),
            ISCCriterion("All lint checks green", False),
            ISCCriterion("No regressions in CI pipeline", True),
        ],
    )
    fields.update(overrides)
    return Agent(**fields)


def assert_invariants(agent: Agent) -> None:
    assert 0 <= agent.progress <= 100
    assert agent.tokens_per_sec >= 0
    assert len(agent.events) <= 20
    assert agent.phase in set(Phase)
    assert agent.isc
    if agent.status is Status.STOPPED:
        assert agent.tokens_per_sec == 0
        assert agent.progress == 0
    if agent.status is Status.IDLE:
        assert agent.phase is Phase.DONE
        assert agent.progress == 100
        assert agent.tokens_per_sec == 0
    if agent.tokens_per_sec > 0:
        assert agent.status is Status.RUNNING
        assert agent.phase < Phase.DONE
