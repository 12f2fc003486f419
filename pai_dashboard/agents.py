"""Synthetic agent construction."""

from __future__ import annotations

import random
from collections.abc import Collection
from datetime import datetime, timedelta

from pai_dashboard.constants import (
    ACTIVITIES,
    AGENT_NAMES,
    ISC_POOL,
    MODEL_THROUGHPUT,
    MODELS,
    P_ISC_PASSED,
    PROGRESS_PER_PHASE,
    TASK_DESCS,
    TOOL_NAMES,
)
from pai_dashboard.models import Agent, ISCCriterion, Phase, Status

BIRTH_STATUSES = (Status.RUNNING, Status.IDLE, Status.PAUSED)


def clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def new_agent_id(rng: random.Random, taken: Collection[str] = ()) -> str:
    """Return a ``pai-XXXX`` identifier not already in *taken*."""
    while True:
        agent_id = f"pai-{rng.randrange(0x10000):04x}"
        if agent_id not in taken:
            return agent_id


def make_agent(
    rng: random.Random,
    now: datetime,
    taken: Collection[str] = (),
) -> Agent:
    """Build one randomized agent as of *now*.

    Newborn agents are Running, Idle or Paused; Idle ones have already
    finished every phase.
    """
    agent_id = new_agent_id(rng, taken)
    name = rng.choice(AGENT_NAMES)
    model = rng.choice(MODELS)
    status = rng.choice(BIRTH_STATUSES)
    phase = Phase(rng.randrange(Phase.DONE))

    isc = [
        ISCCriterion(rng.choice(ISC_POOL), rng.random() < P_ISC_PASSED)
        for _ in range(3 + rng.randrange(4))
    ]

    seeded: list[tuple[datetime, str]] = []
    for _ in range(4 + rng.randrange(5)):
        ts = now - timedelta(seconds=rng.randrange(300))
        seeded.append(
            (ts, f"[{ts:%H:%M:%S}] {rng.choice(TOOL_NAMES)}: {rng.choice(ACTIVITIES)}")
        )
    seeded.sort(key=lambda item: item[0])

    lo, hi = MODEL_THROUGHPUT[model]
    tokens_per_sec = lo + rng.random() * (hi - lo)
    progress = clamp(phase * PROGRESS_PER_PHASE + rng.randrange(PROGRESS_PER_PHASE), 0, 100)

    agent = Agent(
        id=agent_id,
        name=name,
        model=model,
        status=status,
        phase=phase,
        progress=progress,
        tokens_per_sec=tokens_per_sec,
        tokens_in=5000 + rng.randrange(50000),
        tokens_out=1000 + rng.randrange(20000),
        task=rng.choice(TASK_DESCS),
        current_tool=rng.choice(TOOL_NAMES),
        last_activity=rng.choice(ACTIVITIES),
        last_active_at=now - timedelta(seconds=rng.randrange(20)),
        started_at=now - timedelta(seconds=rng.randrange(600)),
        tools_used=rng.randrange(40),
        isc=isc,
    )
    for _, entry in seeded:
        agent.log(entry)

    if status is Status.IDLE:
        agent.finish()
    elif status is Status.PAUSED:
        agent.tokens_per_sec = 0.0
    return agent


def make_population(rng: random.Random, now: datetime, count: int) -> list[Agent]:
    agents: list[Agent] = []
    for _ in range(count):
        agents.append(make_agent(rng, now, {a.id for a in agents}))
    return agents
