"""Input controller -- maps key presses onto state mutations."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import structlog

from pai_dashboard.models import Status
from pai_dashboard.state import DashboardState

log = structlog.get_logger("controller")


class Command(Enum):
    UP = "up"
    DOWN = "down"
    DETAIL = "detail"
    REFRESH = "refresh"
    TOGGLE = "start/stop"
    QUIT = "quit"


@dataclass(frozen=True)
class Binding:
    command: Command
    keys: tuple[str, ...]
    help_key: str


BINDINGS: tuple[Binding, ...] = (
    Binding(Command.UP, ("up", "k"), "↑/k"),
    Binding(Command.DOWN, ("down", "j"), "↓/j"),
    Binding(Command.DETAIL, ("enter",), "⏎"),
    Binding(Command.REFRESH, ("r",), "r"),
    Binding(Command.TOGGLE, ("s",), "s"),
    Binding(Command.QUIT, ("q",), "q"),
)

_KEYMAP: dict[str, Command] = {k: b.command for b in BINDINGS for k in b.keys}


def resolve(key: str) -> Command | None:
    """Return the command bound to *key*, or None for unbound keys."""
    return _KEYMAP.get(key)


def help_entries() -> list[tuple[str, str]]:
    return [(b.help_key, b.command.value) for b in BINDINGS]


def toggle_selected(state: DashboardState, now: datetime) -> None:
    """Start a Stopped agent, stop anything else."""
    agent = state.selected_agent
    if agent is None:
        return
    if agent.status is Status.STOPPED:
        agent.start(now)
    else:
        agent.stop()
    log.info("agent_toggled", agent_id=agent.id, status=agent.status.value)


def apply(
    state: DashboardState,
    command: Command,
    rng: random.Random,
    now: datetime,
) -> bool:
    """Apply *command* synchronously.  Returns False once the user quits."""
    count = len(state.registry)

    if command is Command.QUIT:
        return False
    if command is Command.UP:
        state.view.move_up()
    elif command is Command.DOWN:
        state.view.move_down(count)
    elif command is Command.DETAIL:
        state.view.toggle_detail(count)
    elif command is Command.REFRESH:
        state.tick(rng, now)
    elif command is Command.TOGGLE:
        toggle_selected(state, now)

    log.debug("command", command=command.value, selected=state.view.selected)
    return True


def handle_key(
    state: DashboardState,
    key: str,
    rng: random.Random,
    now: datetime,
) -> bool:
    command = resolve(key)
    if command is None:
        return True
    return apply(state, command, rng, now)
