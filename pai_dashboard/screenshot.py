"""Deterministic single-frame capture (``--screenshot``)."""

from __future__ import annotations

import random
from datetime import datetime
from typing import Any

from rich.console import Console

from pai_dashboard.constants import (
    SCREENSHOT_CLOCK,
    SCREENSHOT_HEIGHT,
    SCREENSHOT_SEED,
    SCREENSHOT_WIDTH,
)
from pai_dashboard.models import Phase, Status
from pai_dashboard.render import make_console, render_frame
from pai_dashboard.state import DashboardState, Snapshot

# Field overrides for the first registry slots, applied best effort.
STAGED: list[dict[str, Any]] = [
    dict(name="Engineer", status=Status.RUNNING, phase=Phase.BUILD, progress=58,
         tokens_per_sec=42.0, current_tool="Edit", last_activity="Edit config/database.yaml",
         model="claude-opus-4-6", task="Implement auth middleware for API"),
    dict(name="ClaudeResearcher", status=Status.RUNNING, phase=Phase.EXECUTE, progress=72,
         tokens_per_sec=135.0, current_tool="WebSearch",
         last_activity="WebSearch: Go TUI frameworks", model="claude-sonnet-4-5"),
    dict(name="Architect", status=Status.IDLE, phase=Phase.DONE, progress=100,
         tokens_per_sec=0.0),
    dict(name="GeminiResearcher", status=Status.RUNNING, phase=Phase.OBSERVE, progress=12,
         tokens_per_sec=245.0, current_tool="Read",
         last_activity="Read src/auth/middleware.ts", model="claude-haiku-4-5"),
    dict(name="QATester", status=Status.ERROR, progress=45, tokens_per_sec=0.0),
    dict(name="Pentester", status=Status.RUNNING, phase=Phase.VERIFY, progress=88,
         tokens_per_sec=98.0, current_tool="Bash", last_activity="Bash: npm run test",
         model="gemini-2.5-pro"),
    dict(name="Designer", status=Status.PAUSED, phase=Phase.PLAN, progress=35,
         tokens_per_sec=0.0),
    dict(name="Algorithm", status=Status.RUNNING, phase=Phase.THINK, progress=28,
         tokens_per_sec=112.0, current_tool="Task",
         last_activity="Task: spawned Intern agent", model="claude-sonnet-4-5"),
]


def stage(state: DashboardState) -> int:
    """Apply :data:`STAGED` to the leading slots; returns how many were staged.

    Slots beyond the current population are skipped silently.
    """
    staged = 0
    for index, overrides in enumerate(STAGED):
        agent = state.registry.get(index)
        if agent is None:
            continue
        for name, value in overrides.items():
            setattr(agent, name, value)
        staged += 1
    return staged


def build_snapshot(
    seed: int = SCREENSHOT_SEED,
    now: datetime = SCREENSHOT_CLOCK,
    width: int = SCREENSHOT_WIDTH,
    height: int = SCREENSHOT_HEIGHT,
) -> Snapshot:
    rng = random.Random(seed)
    state = DashboardState.create(rng, now)
    view = state.view
    view.loading = False
    view.width = width
    view.height = height
    view.detail_open = True
    stage(state)
    return state.snap(now)


def capture(console: Console | None = None, seed: int = SCREENSHOT_SEED) -> Snapshot:
    """Render one frame to *console* (stdout by default) and return its snapshot."""
    snapshot = build_snapshot(seed)
    if console is None:
        console = make_console(snapshot.width, snapshot.height, color=None)
    console.print(render_frame(snapshot))
    return snapshot
