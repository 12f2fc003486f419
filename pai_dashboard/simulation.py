"""Transition engine and population controller.

One call to :func:`simulate_tick` represents ``TICK_INTERVAL`` seconds of
agent activity.  All randomness comes from the injected generator, so a
seeded ``random.Random`` replays the exact same history.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta

import structlog

from pai_dashboard.agents import clamp, make_agent
from pai_dashboard.constants import (
    ACTIVITIES,
    MAX_POPULATION,
    MIN_POPULATION,
    MODEL_THROUGHPUT,
    P_COLLECT,
    P_ERROR_RECOVERS,
    P_IDLE_RESUMES,
    P_ISC_FLIP,
    P_PAUSED_RESUMES,
    P_PHASE_ADVANCE,
    P_RUNNING_LEAVES,
    P_SPAWN,
    PROGRESS_CAP,
    PROGRESS_PER_PHASE,
    TASK_DESCS,
    THROUGHPUT_JITTER,
    TICK_INTERVAL,
    TOOL_NAMES,
)
from pai_dashboard.models import Agent, Phase, Status
from pai_dashboard.registry import AgentRegistry

log = structlog.get_logger("simulation")

LEAVE_RUNNING = (Status.IDLE, Status.PAUSED, Status.ERROR)


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------

def transition_status(agent: Agent, rng: random.Random) -> None:
    """Apply one probabilistic lifecycle step to *agent*.

    Stopped agents never move on their own; only the start/stop command
    brings them back.
    """
    if agent.status is Status.RUNNING:
        if rng.random() < P_RUNNING_LEAVES:
            target = rng.choice(LEAVE_RUNNING)
            if target is Status.IDLE:
                agent.finish()
            else:
                agent.suspend(target)
    elif agent.status is Status.IDLE:
        if rng.random() < P_IDLE_RESUMES:
            agent.restart(task=rng.choice(TASK_DESCS))
    elif agent.status is Status.PAUSED:
        if rng.random() < P_PAUSED_RESUMES:
            agent.status = Status.RUNNING
    elif agent.status is Status.ERROR:
        if rng.random() < P_ERROR_RECOVERS:
            agent.restart()


def transition_some(agents: list[Agent] | tuple[Agent, ...], rng: random.Random) -> None:
    """Pick 1-2 agents at random and give each a status transition pass."""
    picks = 1 + rng.randrange(2)
    for _ in range(picks):
        if not agents:
            return
        transition_status(rng.choice(agents), rng)


# ---------------------------------------------------------------------------
# Running agents
# ---------------------------------------------------------------------------

def progress_target(phase: Phase, rng: random.Random) -> int:
    """Phase-appropriate progress percentage, never reaching 100."""
    return clamp((phase + 1) * PROGRESS_PER_PHASE + rng.randrange(5), 0, PROGRESS_CAP)


def sample_throughput(model: str, rng: random.Random) -> float:
    lo, hi = MODEL_THROUGHPUT[model]
    base = (lo + hi) / 2
    jitter = (rng.random() - 0.5) * (hi - lo) * THROUGHPUT_JITTER
    tps = base + jitter
    if tps <= 0:
        tps = lo
    return tps


def advance_running(agent: Agent, rng: random.Random, now: datetime) -> None:
    """Advance phase, progress, tokens and activity for a Running agent."""
    if agent.phase < Phase.DONE and rng.random() < P_PHASE_ADVANCE:
        agent.phase = agent.phase.next()
        if agent.phase is Phase.DONE:
            agent.finish()
            return

    target = progress_target(agent.phase, rng)
    if agent.progress < target:
        agent.progress = min(target, agent.progress + 1 + rng.randrange(4))

    agent.tokens_per_sec = sample_throughput(agent.model, rng)

    new_out = int(agent.tokens_per_sec * TICK_INTERVAL)
    agent.tokens_out += new_out
    agent.tokens_in += new_out * (2 + rng.randrange(3))

    agent.current_tool = rng.choice(TOOL_NAMES)
    agent.last_activity = rng.choice(ACTIVITIES)
    agent.last_active_at = now - timedelta(seconds=rng.randrange(3))
    agent.tools_used += 1
    agent.log(f"[{now:%H:%M:%S}] {agent.current_tool} → {agent.last_activity}")

    if agent.isc and rng.random() < P_ISC_FLIP:
        agent.isc[rng.randrange(len(agent.isc))].flip()


# ---------------------------------------------------------------------------
# Population controller
# ---------------------------------------------------------------------------

def step_population(registry: AgentRegistry, rng: random.Random, now: datetime) -> None:
    """Spawn and/or garbage-collect at most one agent each."""
    if rng.random() < P_SPAWN and len(registry) < MAX_POPULATION:
        agent = make_agent(rng, now, registry.ids())
        registry.replace(registry.with_appended(agent))
        log.debug("agent_spawned", agent_id=agent.id, population=len(registry))

    if rng.random() < P_COLLECT and len(registry) > MIN_POPULATION:
        idx = rng.randrange(len(registry))
        victim = registry[idx]
        if victim.status is Status.STOPPED:
            registry.replace(registry.without(idx))
            log.debug("agent_collected", agent_id=victim.id, population=len(registry))


# ---------------------------------------------------------------------------
# Tick
# ---------------------------------------------------------------------------

def simulate_tick(registry: AgentRegistry, rng: random.Random, now: datetime) -> None:
    agents = registry.agents
    transition_some(agents, rng)

    for agent in agents:
        if agent.status is Status.RUNNING:
            advance_running(agent, rng, now)

    step_population(registry, rng, now)
