"""Shared constants for the PAI agent dashboard."""

from __future__ import annotations

from datetime import datetime

# ---------------------------------------------------------------------------
# Timing (single source of truth)
# ---------------------------------------------------------------------------

TICK_INTERVAL = 2.0             # seconds of simulated agent time per tick
LOAD_DELAY = 1.5                # "connecting" splash before the first frame
SPINNER_INTERVAL = 0.1          # spinner redraw cadence while loading
POLL_INTERVAL = 0.02            # idle sleep between loop iterations

# ---------------------------------------------------------------------------
# Population & buffers
# ---------------------------------------------------------------------------

INITIAL_POPULATION = 10
MIN_POPULATION = 6
MAX_POPULATION = 14
EVENT_LOG_CAPACITY = 20
RECENT_EVENTS = 8

# ---------------------------------------------------------------------------
# Transition probabilities (per tick)
# ---------------------------------------------------------------------------

P_RUNNING_LEAVES = 0.15         # split evenly between Idle / Paused / Error
P_IDLE_RESUMES = 0.30
P_PAUSED_RESUMES = 0.40
P_ERROR_RECOVERS = 0.30
P_PHASE_ADVANCE = 0.25
P_ISC_FLIP = 0.20
P_SPAWN = 0.12
P_COLLECT = 0.06
P_ISC_PASSED = 0.6

PROGRESS_PER_PHASE = 14
PROGRESS_CAP = 99               # only reaching DONE yields 100
THROUGHPUT_JITTER = 0.6         # +-30% of the model's range

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

DEFAULT_WIDTH = 140             # used until the first terminal size is known
MIN_PROCESS_WIDTH = 15

# Column widths: ID, name, status, phase, progress, tok/s, uptime
COL_ID = 11
COL_NAME = 16
COL_STATUS = 9
COL_PHASE = 9
COL_PROGRESS = 16
COL_TOKENS = 8
COL_UPTIME = 8
COL_GAPS = 10

# ---------------------------------------------------------------------------
# Screenshot mode
# ---------------------------------------------------------------------------

SCREENSHOT_SEED = 42
SCREENSHOT_WIDTH = 160
SCREENSHOT_HEIGHT = 50
SCREENSHOT_CLOCK = datetime(2026, 2, 14, 14, 32, 10)

# ---------------------------------------------------------------------------
# Colour palette -- Tokyo Night
# ---------------------------------------------------------------------------

COLOR_TITLE = "#7aa2f7"
COLOR_RUNNING = "#e0af68"
COLOR_IDLE = "#9ece6a"
COLOR_PAUSED = "#7dcfff"
COLOR_ERROR = "#f7768e"
COLOR_STOPPED = "#565f89"
COLOR_BORDER = "#3b4261"
COLOR_FG = "#c0caf5"
COLOR_DIM = "#565f89"
COLOR_SEL_BG = "#283457"
COLOR_ACCENT = "#bb9af7"        # phases
COLOR_BAR = "#9ece6a"
COLOR_BAR_BG = "#1a1b26"

# ---------------------------------------------------------------------------
# Synthetic data pools
# ---------------------------------------------------------------------------

AGENT_NAMES = [
    "Engineer", "Architect", "ClaudeResearcher", "GeminiResearcher",
    "GrokResearcher", "QATester", "Designer", "Pentester",
    "Explore", "Algorithm", "Intern",
]

TASK_DESCS = [
    "Implement auth middleware for API",
    "Design database schema for users",
    "Research best practices for caching",
    "Security audit of payment flow",
    "Explore codebase for dead imports",
    "Evaluate ISC criteria satisfaction",
    "Build React component library",
    "Test checkout E2E flow in browser",
    "Analyze API response time patterns",
    "Refactor state management layer",
]

TOOL_NAMES = [
    "Read", "Write", "Edit", "Bash", "Grep", "Glob",
    "WebSearch", "Task", "WebFetch", "Skill", "AskUserQuestion",
]

ACTIVITIES = [
    "Read src/auth/middleware.ts",
    "Bash: npm run test",
    "Write api/routes.go",
    "Edit config/database.yaml",
    "Grep: 'async function'",
    "Glob: **/*.test.ts",
    "WebSearch: Go TUI frameworks",
    "Task: spawned Intern agent",
    "WebFetch: API docs",
    "ISC verified: tests pass",
    "Browser: screenshot captured",
    "Bash: go build ./...",
]

# Model -> (min, max) throughput in tok/s
MODEL_THROUGHPUT: dict[str, tuple[float, float]] = {
    "claude-opus-4-6": (25.0, 65.0),
    "claude-sonnet-4-5": (80.0, 160.0),
    "claude-haiku-4-5": (150.0, 300.0),
    "gemini-2.5-pro": (60.0, 130.0),
    "grok-3": (70.0, 140.0),
}
MODELS = list(MODEL_THROUGHPUT)

ISC_POOL = [
    "Tests pass for auth module",
    "No security vulnerabilities detected",
    "API response time under 200ms",
    "All lint checks green",
    "Code coverage above 80 percent",
    "E2E login flow verified in browser",
    "No regressions in CI pipeline",
    "Database migrations reversible",
    "No credentials exposed in code",
    "Component renders without errors",
]
