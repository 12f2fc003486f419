"""Agent data model: status/phase enums, ISC criteria and agent records."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum

from pai_dashboard.constants import (
    COLOR_ACCENT,
    COLOR_ERROR,
    COLOR_IDLE,
    COLOR_PAUSED,
    COLOR_RUNNING,
    COLOR_STOPPED,
    EVENT_LOG_CAPACITY,
)


@dataclass(frozen=True)
class Badge:
    """Display record for one enum variant."""

    label: str
    color: str
    icon: str


class Status(Enum):
    RUNNING = "running"
    IDLE = "idle"
    PAUSED = "paused"
    ERROR = "error"
    STOPPED = "stopped"

    @property
    def badge(self) -> Badge:
        return STATUS_BADGES[self]

    @property
    def label(self) -> str:
        return self.badge.label


class Phase(IntEnum):
    """PAI Algorithm phase.  Ordered; DONE marks completion."""

    OBSERVE = 0
    THINK = 1
    PLAN = 2
    BUILD = 3
    EXECUTE = 4
    VERIFY = 5
    LEARN = 6
    DONE = 7

    @property
    def badge(self) -> Badge:
        return PHASE_BADGES[self]

    @property
    def label(self) -> str:
        return self.badge.label

    @property
    def icon(self) -> str:
        return self.badge.icon

    @property
    def short(self) -> str:
        return self.badge.label[:3]

    def next(self) -> Phase:
        return Phase(min(self + 1, Phase.DONE))


STATUS_BADGES: dict[Status, Badge] = {
    Status.RUNNING: Badge("Running", COLOR_RUNNING, "⚡"),
    Status.IDLE: Badge("Idle", COLOR_IDLE, "✓"),
    Status.PAUSED: Badge("Paused", COLOR_PAUSED, "⏸"),
    Status.ERROR: Badge("Error", COLOR_ERROR, "✗"),
    Status.STOPPED: Badge("Stopped", COLOR_STOPPED, "■"),
}

PHASE_BADGES: dict[Phase, Badge] = {
    Phase.OBSERVE: Badge("OBSERVE", COLOR_ACCENT, "👁️"),
    Phase.THINK: Badge("THINK", COLOR_ACCENT, "🧠"),
    Phase.PLAN: Badge("PLAN", COLOR_ACCENT, "📋"),
    Phase.BUILD: Badge("BUILD", COLOR_ACCENT, "🔨"),
    Phase.EXECUTE: Badge("EXECUTE", COLOR_ACCENT, "⚡"),
    Phase.VERIFY: Badge("VERIFY", COLOR_ACCENT, "✅"),
    Phase.LEARN: Badge("LEARN", COLOR_ACCENT, "📚"),
    Phase.DONE: Badge("DONE", COLOR_IDLE, "🏁"),
}

# The seven working phases shown on the timeline
WORK_PHASES = tuple(p for p in Phase if p < Phase.DONE)


@dataclass
class ISCCriterion:
    """One independent success check with pass/fail state."""

    text: str
    passed: bool = False

    def flip(self) -> None:
        self.passed = not self.passed


@dataclass(frozen=True)
class AgentSnapshot:
    """Immutable copy of an agent, handed to the renderer."""

    id: str
    name: str
    model: str
    status: Status
    phase: Phase
    progress: int
    tokens_per_sec: float
    tokens_in: int
    tokens_out: int
    task: str
    current_tool: str
    last_activity: str
    last_active_at: datetime
    started_at: datetime
    tools_used: int
    isc: tuple[tuple[str, bool], ...]
    events: tuple[str, ...]

    @property
    def isc_passed(self) -> int:
        return sum(1 for _, ok in self.isc if ok)

    @property
    def tokens_total(self) -> int:
        return self.tokens_in + self.tokens_out


@dataclass
class Agent:
    """A simulated PAI worker with real-time metrics."""

    id: str
    name: str
    model: str
    status: Status
    phase: Phase
    progress: int
    tokens_per_sec: float
    tokens_in: int
    tokens_out: int
    task: str
    current_tool: str
    last_activity: str
    last_active_at: datetime
    started_at: datetime
    tools_used: int = 0
    isc: list[ISCCriterion] = field(default_factory=list)
    events: deque[str] = field(
        default_factory=lambda: deque(maxlen=EVENT_LOG_CAPACITY)
    )

    def __post_init__(self) -> None:
        if self.events.maxlen != EVENT_LOG_CAPACITY:
            self.events = deque(self.events, maxlen=EVENT_LOG_CAPACITY)

    # -- event log ----------------------------------------------------------

    def log(self, entry: str) -> None:
        """Append to the event log, evicting the oldest entry when full."""
        self.events.append(entry)

    # -- lifecycle ----------------------------------------------------------

    def finish(self) -> None:
        """All phases complete: go Idle with a full bar and no throughput."""
        self.status = Status.IDLE
        self.phase = Phase.DONE
        self.progress = 100
        self.tokens_per_sec = 0.0

    def restart(self, task: str | None = None) -> None:
        """Resume work from OBSERVE, optionally on a new task."""
        self.status = Status.RUNNING
        self.phase = Phase.OBSERVE
        self.progress = 0
        if task is not None:
            self.task = task

    def suspend(self, status: Status) -> None:
        """Leave RUNNING for PAUSED or ERROR."""
        self.status = status
        self.tokens_per_sec = 0.0

    def start(self, now: datetime) -> None:
        self.restart()
        self.started_at = now

    def stop(self) -> None:
        self.status = Status.STOPPED
        self.progress = 0
        self.tokens_per_sec = 0.0

    def freeze(self) -> AgentSnapshot:
        return AgentSnapshot(
            id=self.id,
            name=self.name,
            model=self.model,
            status=self.status,
            phase=self.phase,
            progress=self.progress,
            tokens_per_sec=self.tokens_per_sec,
            tokens_in=self.tokens_in,
            tokens_out=self.tokens_out,
            task=self.task,
            current_tool=self.current_tool,
            last_activity=self.last_activity,
            last_active_at=self.last_active_at,
            started_at=self.started_at,
            tools_used=self.tools_used,
            isc=tuple((c.text, c.passed) for c in self.isc),
            events=tuple(self.events),
        )
