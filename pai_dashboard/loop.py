"""Single-consumer event loop: timers, key presses and render passes.

Producers (key poller, timers, terminal size polling) only enqueue
messages; the loop takes them off the queue one at a time, applies each
to completion and renders after every one.  Nothing else mutates the
registry or the view state.
"""

from __future__ import annotations

import queue
import random
import signal
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Union

import structlog
from rich.console import Console
from rich.live import Live

from pai_dashboard.constants import LOAD_DELAY, POLL_INTERVAL, SPINNER_INTERVAL, TICK_INTERVAL
from pai_dashboard.controller import handle_key
from pai_dashboard.render import render_frame
from pai_dashboard.state import DashboardState
from pai_dashboard.terminal import KeyPoller

log = structlog.get_logger("loop")


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Tick:
    at: datetime


@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class Loaded:
    pass


@dataclass(frozen=True)
class SpinnerTick:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Quit:
    pass


Message = Union[Tick, KeyPress, Loaded, SpinnerTick, Resize, Quit]


# ---------------------------------------------------------------------------
# Timers
# ---------------------------------------------------------------------------

class Timer:
    """Deadline on a monotonic clock, re-armed each time it fires."""

    def __init__(self, interval: float, now: float, *, repeat: bool = True):
        self.interval = interval
        self.repeat = repeat
        self.deadline: float | None = now + interval

    @property
    def armed(self) -> bool:
        return self.deadline is not None

    def fire(self, now: float) -> bool:
        if self.deadline is None or now < self.deadline:
            return False
        self.deadline = now + self.interval if self.repeat else None
        return True

    def cancel(self) -> None:
        self.deadline = None


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------

class EventLoop:
    def __init__(
        self,
        state: DashboardState,
        rng: random.Random,
        *,
        clock: Callable[[], datetime] = datetime.now,
        monotonic: Callable[[], float] = time.monotonic,
        tick_interval: float = TICK_INTERVAL,
        load_delay: float = LOAD_DELAY,
    ):
        self.state = state
        self.rng = rng
        self.clock = clock
        self.monotonic = monotonic
        self.queue: queue.Queue[Message] = queue.Queue()
        self.running = True
        self.interrupted = False

        start = monotonic()
        self.tick_timer = Timer(tick_interval, start)
        self.load_timer = Timer(load_delay, start, repeat=False)
        self.spinner_timer = Timer(SPINNER_INTERVAL, start)
        if not state.view.loading:
            self.load_timer.cancel()
            self.spinner_timer.cancel()

    # -- producers ----------------------------------------------------------

    def post(self, msg: Message) -> None:
        self.queue.put(msg)

    def pump_timers(self) -> None:
        now = self.monotonic()
        if self.load_timer.fire(now):
            self.post(Loaded())
        if self.spinner_timer.fire(now):
            self.post(SpinnerTick())
        if self.tick_timer.fire(now):
            self.post(Tick(self.clock()))

    def poll_input(self, keys: KeyPoller) -> None:
        key = keys.poll()
        while key:
            self.post(KeyPress(key))
            key = keys.poll()

    def poll_size(self, console: Console) -> None:
        width, height = console.size
        view = self.state.view
        if (width, height) != (view.width, view.height):
            self.post(Resize(width, height))

    # -- consumer -----------------------------------------------------------

    def dispatch(self, msg: Message) -> None:
        """Apply one message to completion."""
        state = self.state
        view = state.view

        if isinstance(msg, Tick):
            state.tick(self.rng, msg.at)
            view.ticks += 1
            log.debug("tick", ticks=view.ticks, population=len(state.registry))
        elif isinstance(msg, KeyPress):
            if not handle_key(state, msg.key, self.rng, self.clock()):
                self.stop()
        elif isinstance(msg, Loaded):
            view.loading = False
            self.spinner_timer.cancel()
        elif isinstance(msg, SpinnerTick):
            pass
        elif isinstance(msg, Resize):
            view.width = msg.width
            view.height = msg.height
        elif isinstance(msg, Quit):
            self.stop()

    def stop(self) -> None:
        self.running = False
        self.tick_timer.cancel()
        self.load_timer.cancel()
        self.spinner_timer.cancel()

    def _handle_sigint(self, signum, frame) -> None:
        # Only flag here; the loop turns it into a Quit between messages.
        self.interrupted = True

    def check_interrupt(self) -> bool:
        if self.interrupted and self.running:
            self.dispatch(Quit())
        return self.interrupted

    def drain(self, on_render: Callable[[], None] | None = None) -> int:
        """Dispatch every queued message, rendering after each one."""
        handled = 0
        while self.running and not self.interrupted:
            try:
                msg = self.queue.get_nowait()
            except queue.Empty:
                break
            self.dispatch(msg)
            handled += 1
            if on_render is not None and self.running:
                on_render()
        return handled

    def frame(self):
        return render_frame(self.state.snap(self.clock()))

    def run(self, console: Console, keys: KeyPoller) -> None:
        log.info("loop_started", population=len(self.state.registry))
        self.poll_size(console)
        previous = signal.signal(signal.SIGINT, self._handle_sigint)
        try:
            with Live(
                self.frame(),
                console=console,
                screen=True,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            ) as live:

                def render() -> None:
                    live.update(self.frame(), refresh=True)

                while self.running:
                    self.poll_input(keys)
                    self.poll_size(console)
                    self.pump_timers()
                    self.drain(render)
                    if self.check_interrupt():
                        break
                    if self.running:
                        time.sleep(POLL_INTERVAL)
        finally:
            signal.signal(signal.SIGINT, previous)
        log.info("loop_stopped", ticks=self.state.view.ticks, interrupted=self.interrupted)
