"""Tests for the message-driven event loop (no real terminal)."""

import random

from pai_dashboard.loop import EventLoop, KeyPress, Loaded, Quit, Resize, SpinnerTick, Tick, Timer
from tests.helpers import NOW


class FakeClock:
    def __init__(self):
        self.t = 100.0

    def __call__(self):
        return self.t


class FakeKeys:
    def __init__(self, keys):
        self.keys = list(keys)

    def poll(self):
        return self.keys.pop(0) if self.keys else ""


def make_loop(state, loading=True):
    state.view.loading = loading
    mono = FakeClock()
    loop = EventLoop(state, random.Random(0), clock=lambda: NOW, monotonic=mono)
    return loop, mono


class TestTimer:
    """Tests for the re-arming timer."""

    def test_fires_and_rearms(self):
        timer = Timer(2.0, 0.0)
        assert not timer.fire(1.9)
        assert timer.fire(2.0)
        assert timer.deadline == 4.0
        assert timer.fire(4.5)
        assert timer.deadline == 6.5

    def test_one_shot(self):
        timer = Timer(1.5, 0.0, repeat=False)
        assert timer.fire(1.5)
        assert not timer.armed
        assert not timer.fire(10.0)

    def test_cancel(self):
        timer = Timer(2.0, 0.0)
        timer.cancel()
        assert not timer.fire(5.0)


class TestTimers:
    """Timers only enqueue; the loop applies them."""

    def test_tick_every_two_seconds(self, state):
        loop, mono = make_loop(state, loading=False)
        mono.t += 1.0
        loop.pump_timers()
        assert loop.queue.empty()

        mono.t += 1.0
        loop.pump_timers()
        assert loop.queue.get_nowait() == Tick(NOW)

    def test_loaded_after_delay_stops_spinner(self, state):
        loop, mono = make_loop(state, loading=True)
        mono.t += 1.5
        loop.pump_timers()
        messages = []
        while not loop.queue.empty():
            messages.append(loop.queue.get_nowait())
        assert Loaded() in messages
        assert SpinnerTick() in messages

        for msg in messages:
            loop.dispatch(msg)
        assert state.view.loading is False
        assert not loop.spinner_timer.armed

    def test_no_loading_timers_when_not_loading(self, state):
        loop, _ = make_loop(state, loading=False)
        assert not loop.load_timer.armed
        assert not loop.spinner_timer.armed


class TestDispatch:
    """Tests for message handling."""

    def test_tick_advances_counter(self, state):
        loop, _ = make_loop(state, loading=False)
        loop.dispatch(Tick(NOW))
        loop.dispatch(Tick(NOW))
        assert state.view.ticks == 2
        assert state.view.last_refresh == NOW

    def test_keys_are_applied_in_order(self, state):
        loop, _ = make_loop(state, loading=False)
        loop.poll_input(FakeKeys(["j", "j", "k", "enter"]))
        renders = []
        handled = loop.drain(lambda: renders.append(state.view.selected))
        assert handled == 4
        assert renders == [1, 2, 1, 1]
        assert state.view.detail_open is True

    def test_resize(self, state):
        loop, _ = make_loop(state, loading=False)
        loop.dispatch(Resize(100, 30))
        assert (state.view.width, state.view.height) == (100, 30)

    def test_quit_key_stops_loop_and_timers(self, state):
        loop, mono = make_loop(state, loading=False)
        loop.post(KeyPress("q"))
        loop.post(KeyPress("j"))
        loop.drain()
        assert loop.running is False
        assert state.view.selected == 0
        assert not loop.tick_timer.armed
        mono.t += 10
        loop.pump_timers()
        assert loop.queue.qsize() == 1  # the unconsumed "j"

    def test_quit_message(self, state):
        loop, _ = make_loop(state, loading=False)
        loop.dispatch(Quit())
        assert loop.running is False

    def test_frame_renders_snapshot(self, state):
        loop, _ = make_loop(state, loading=False)
        assert loop.frame() is not None

    def test_refresh_key_keeps_tick_schedule(self, state):
        loop, _ = make_loop(state, loading=False)
        deadline = loop.tick_timer.deadline
        before = [a.tools_used for a in state.registry]
        loop.post(KeyPress("r"))
        assert loop.drain() == 1
        assert loop.tick_timer.deadline == deadline
        assert state.view.ticks == 0
        assert [a.tools_used for a in state.registry] != before


class TestInterrupt:
    """Ctrl+C only flags the loop; messages are never cut short."""

    def test_interrupt_stops_before_next_message(self, state):
        loop, _ = make_loop(state, loading=False)
        loop.post(KeyPress("j"))
        loop.post(KeyPress("j"))
        loop._handle_sigint(2, None)
        assert loop.drain() == 0
        assert loop.check_interrupt()
        assert loop.running is False
        assert state.view.selected == 0
        assert not loop.tick_timer.armed

    def test_interrupt_between_messages(self, state):
        loop, _ = make_loop(state, loading=False)
        loop.post(KeyPress("j"))
        loop.post(KeyPress("j"))

        def render():
            loop._handle_sigint(2, None)

        assert loop.drain(render) == 1
        assert state.view.selected == 1
        assert loop.check_interrupt()
        assert loop.running is False

    def test_no_interrupt(self, state):
        loop, _ = make_loop(state, loading=False)
        assert not loop.check_interrupt()
        assert loop.running is True
