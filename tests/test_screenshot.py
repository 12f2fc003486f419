"""Tests for deterministic screenshot mode."""

import io
import random

from pai_dashboard.models import Phase, Status
from pai_dashboard.registry import AgentRegistry
from pai_dashboard.render import frame_text, make_console
from pai_dashboard.screenshot import STAGED, build_snapshot, capture, stage
from pai_dashboard.state import DashboardState, ViewState
from tests.helpers import NOW, make_test_agent


class TestScreenshot:
    def test_byte_identical_frames(self):
        assert frame_text(build_snapshot()) == frame_text(build_snapshot())

    def test_capture_is_repeatable(self):
        outputs = []
        for _ in range(2):
            buf = io.StringIO()
            capture(make_console(160, 50, file=buf))
            outputs.append(buf.getvalue())
        assert outputs[0] == outputs[1]
        assert "PAI Agent Dashboard" in outputs[0]
        assert "Agent Detail" in outputs[0]

    def test_staged_slots(self):
        snap = build_snapshot()
        assert snap.width == 160 and snap.detail_open and not snap.loading
        assert len(snap.agents) == 10
        first = snap.agents[0]
        assert (first.name, first.status, first.phase, first.progress) == (
            "Engineer", Status.RUNNING, Phase.BUILD, 58)
        assert snap.agents[2].status is Status.IDLE
        assert snap.agents[4].status is Status.ERROR
        assert snap.agents[6].status is Status.PAUSED

    def test_staging_is_best_effort(self):
        agents = [make_test_agent(i) for i in range(3)]
        state = DashboardState(AgentRegistry(agents), ViewState(last_refresh=NOW))
        assert stage(state) == 3
        assert [a.name for a in agents] == [s["name"] for s in STAGED[:3]]

    def test_different_seed_differs(self):
        assert frame_text(build_snapshot(seed=1)) != frame_text(build_snapshot(seed=2))

    def test_does_not_touch_global_random(self):
        random.seed(0)
        expected = random.random()
        random.seed(0)
        build_snapshot()
        assert random.random() == expected
