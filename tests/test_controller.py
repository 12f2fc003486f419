"""Tests for the input controller and view state."""

from datetime import timedelta

import pytest

from pai_dashboard.controller import BINDINGS, Command, apply, handle_key, help_entries, resolve
from pai_dashboard.models import Phase, Status
from pai_dashboard.registry import AgentRegistry
from pai_dashboard.state import DashboardState, ViewState
from tests.helpers import NOW, ScriptedRandom, make_test_agent


class TestKeymap:
    """Tests for key -> command resolution."""

    @pytest.mark.parametrize("key,command", [
        ("up", Command.UP), ("k", Command.UP),
        ("down", Command.DOWN), ("j", Command.DOWN),
        ("enter", Command.DETAIL),
        ("r", Command.REFRESH),
        ("s", Command.TOGGLE),
        ("q", Command.QUIT),
    ])
    def test_bound_keys(self, key, command):
        assert resolve(key) is command

    def test_unbound_key(self):
        assert resolve("x") is None

    def test_every_command_has_a_binding(self):
        assert {b.command for b in BINDINGS} == set(Command)

    def test_help_entries(self):
        assert help_entries()[0] == ("↑/k", "up")
        assert ("s", "start/stop") in help_entries()


class TestNavigation:
    """Tests for cursor movement and the detail toggle."""

    def test_down_at_last_row_is_noop(self, state, rng):
        state.view.selected = len(state.registry) - 1
        handle_key(state, "down", rng, NOW)
        assert state.view.selected == len(state.registry) - 1

    def test_up_at_first_row_is_noop(self, state, rng):
        handle_key(state, "k", rng, NOW)
        assert state.view.selected == 0

    def test_down_then_up(self, state, rng):
        handle_key(state, "j", rng, NOW)
        handle_key(state, "j", rng, NOW)
        handle_key(state, "up", rng, NOW)
        assert state.view.selected == 1

    def test_toggle_detail(self, state, rng):
        handle_key(state, "enter", rng, NOW)
        assert state.view.detail_open is True
        handle_key(state, "enter", rng, NOW)
        assert state.view.detail_open is False

    def test_toggle_detail_on_empty_registry(self, rng):
        state = DashboardState(AgentRegistry(), ViewState(last_refresh=NOW))
        handle_key(state, "enter", rng, NOW)
        assert state.view.detail_open is False

    def test_unbound_key_changes_nothing(self, state, rng):
        before = state.registry.freeze()
        assert handle_key(state, "z", rng, NOW) is True
        assert state.registry.freeze() == before
        assert state.view.selected == 0


class TestStartStop:
    """Tests for the start/stop command."""

    def test_start_stopped_agent(self, rng):
        agent = make_test_agent(status=Status.STOPPED, phase=Phase.VERIFY,
                                progress=0, tokens_per_sec=0.0)
        state = DashboardState(AgentRegistry([agent]), ViewState(last_refresh=NOW))
        later = NOW + timedelta(minutes=3)

        handle_key(state, "s", rng, later)

        assert agent.status is Status.RUNNING
        assert agent.phase is Phase.OBSERVE
        assert agent.progress == 0
        assert agent.started_at == later

    @pytest.mark.parametrize("status", [Status.RUNNING, Status.IDLE, Status.PAUSED, Status.ERROR])
    def test_stop_anything_else(self, status, rng):
        agent = make_test_agent(status=status)
        state = DashboardState(AgentRegistry([agent]), ViewState(last_refresh=NOW))

        handle_key(state, "s", rng, NOW)

        assert agent.status is Status.STOPPED
        assert agent.tokens_per_sec == 0
        assert agent.progress == 0

    def test_toggle_targets_selected_row(self, state, rng):
        state.view.selected = 3
        handle_key(state, "s", rng, NOW)
        assert state.registry[3].status is Status.STOPPED
        assert state.registry[2].status is Status.RUNNING

    def test_toggle_on_empty_registry(self, rng):
        state = DashboardState(AgentRegistry(), ViewState(last_refresh=NOW))
        assert handle_key(state, "s", rng, NOW) is True


class TestRefreshAndQuit:
    """Tests for manual refresh and quit."""

    def test_refresh_runs_one_tick(self, state, monkeypatch):
        calls = []
        monkeypatch.setattr("pai_dashboard.state.simulate_tick",
                            lambda registry, rng, now: calls.append(now))
        later = NOW + timedelta(seconds=1)

        apply(state, Command.REFRESH, ScriptedRandom(), later)

        assert calls == [later]
        assert state.view.last_refresh == later
        assert state.view.ticks == 0

    def test_quit(self, state, rng):
        assert apply(state, Command.QUIT, rng, NOW) is False
        assert handle_key(state, "q", rng, NOW) is False


class TestSelectionClamp:
    """The cursor follows the registry when agents are collected."""

    def test_clamp_after_collection(self, state, monkeypatch):
        def collect_last(registry, rng, now):
            registry.replace(registry.without(len(registry) - 1))

        monkeypatch.setattr("pai_dashboard.state.simulate_tick", collect_last)
        state.view.selected = 9

        state.tick(ScriptedRandom(), NOW)

        assert len(state.registry) == 9
        assert state.view.selected == 8

    def test_clamp_on_empty(self):
        view = ViewState(last_refresh=NOW, selected=4)
        view.clamp_selection(0)
        assert view.selected == 0
