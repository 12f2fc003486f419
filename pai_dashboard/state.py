"""Dashboard state: registry + view state, and read-only snapshots."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime

from pai_dashboard.agents import make_population
from pai_dashboard.constants import DEFAULT_WIDTH, INITIAL_POPULATION
from pai_dashboard.models import Agent, AgentSnapshot
from pai_dashboard.registry import AgentRegistry
from pai_dashboard.simulation import simulate_tick


@dataclass
class ViewState:
    """Ephemeral UI-only state.  Never persisted."""

    last_refresh: datetime
    selected: int = 0
    detail_open: bool = False
    width: int = 0
    height: int = 0
    loading: bool = True
    ticks: int = 0

    def move_up(self) -> None:
        if self.selected > 0:
            self.selected -= 1

    def move_down(self, count: int) -> None:
        if self.selected < count - 1:
            self.selected += 1

    def toggle_detail(self, count: int) -> None:
        if count > 0:
            self.detail_open = not self.detail_open

    def clamp_selection(self, count: int) -> None:
        self.selected = max(0, min(self.selected, count - 1))


@dataclass(frozen=True)
class Snapshot:
    """Everything the renderer needs for one frame."""

    agents: tuple[AgentSnapshot, ...]
    now: datetime
    last_refresh: datetime
    selected: int = 0
    detail_open: bool = False
    width: int = DEFAULT_WIDTH
    height: int = 0
    loading: bool = False
    ticks: int = 0

    @property
    def selected_agent(self) -> AgentSnapshot | None:
        if 0 <= self.selected < len(self.agents):
            return self.agents[self.selected]
        return None


class DashboardState:
    """Mutable handle used by the tick and input handlers."""

    def __init__(self, registry: AgentRegistry, view: ViewState):
        self.registry = registry
        self.view = view

    @classmethod
    def create(
        cls,
        rng: random.Random,
        now: datetime,
        population: int = INITIAL_POPULATION,
    ) -> DashboardState:
        registry = AgentRegistry(make_population(rng, now, population))
        return cls(registry, ViewState(last_refresh=now))

    @property
    def selected_agent(self) -> Agent | None:
        return self.registry.get(self.view.selected)

    def tick(self, rng: random.Random, now: datetime) -> None:
        """One simulation step, then keep the cursor on a valid row."""
        simulate_tick(self.registry, rng, now)
        self.view.clamp_selection(len(self.registry))
        self.view.last_refresh = now

    def snap(self, now: datetime) -> Snapshot:
        v = self.view
        return Snapshot(
            agents=self.registry.freeze(),
            now=now,
            last_refresh=v.last_refresh,
            selected=v.selected,
            detail_open=v.detail_open,
            width=v.width or DEFAULT_WIDTH,
            height=v.height,
            loading=v.loading,
            ticks=v.ticks,
        )
