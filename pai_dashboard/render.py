"""Layout renderer: snapshot -> Rich renderables / text frame.

Every function here is a pure function of a :class:`Snapshot`; nothing
in this module touches the live registry.
"""

from __future__ import annotations

import io

from rich import box
from rich.align import Align
from rich.cells import cell_len
from rich.console import Console, Group, RenderableType
from rich.padding import Padding
from rich.panel import Panel
from rich.rule import Rule
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from pai_dashboard import __version__
from pai_dashboard.constants import (
    COL_GAPS,
    COL_ID,
    COL_NAME,
    COL_PHASE,
    COL_PROGRESS,
    COL_STATUS,
    COL_TOKENS,
    COL_UPTIME,
    COLOR_ACCENT,
    COLOR_BAR,
    COLOR_BAR_BG,
    COLOR_BORDER,
    COLOR_DIM,
    COLOR_ERROR,
    COLOR_FG,
    COLOR_IDLE,
    COLOR_PAUSED,
    COLOR_RUNNING,
    COLOR_SEL_BG,
    COLOR_TITLE,
    MIN_PROCESS_WIDTH,
    RECENT_EVENTS,
)
from pai_dashboard.controller import help_entries
from pai_dashboard.models import WORK_PHASES, AgentSnapshot, Phase, Status
from pai_dashboard.state import Snapshot

TITLE = f"bold {COLOR_TITLE}"
LABEL = f"bold {COLOR_FG}"


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _pad(s: str, width: int) -> str:
    """Left-align *s* in *width* terminal cells; never truncates."""
    return s + " " * max(0, width - cell_len(s))


def fmt_duration(seconds: float) -> str:
    if seconds < 0:
        return "--"
    m = int(seconds // 60)
    s = int(seconds) % 60
    if m > 0:
        return f"{m}m{s:02d}s"
    return f"{s}s"


def fmt_tokens(n: int) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def truncate(text: str, width: int) -> str:
    """Cut *text* to fit *width*, keeping one cell for the ellipsis."""
    if len(text) > width - 1:
        return text[: width - 2] + "…"
    return text


def process_width(total: int) -> int:
    """Width left over for the CURRENT PROCESS column."""
    fixed = COL_ID + COL_NAME + COL_STATUS + COL_PHASE + COL_PROGRESS + COL_TOKENS + COL_UPTIME
    return max(MIN_PROCESS_WIDTH, total - fixed - COL_GAPS)


def render_progress_bar(pct: int, width: int) -> Text:
    """Draw ``████░░░░  45%`` in *width* cells (at least 8)."""
    width = max(width, 8)
    bar_w = max(width - 5, 4)
    filled = bar_w * pct // 100
    bar = Text()
    bar.append("█" * filled, style=COLOR_BAR)
    bar.append("░" * (bar_w - filled), style=COLOR_BAR_BG)
    bar.append(f" {pct:3d}%", style=COLOR_FG)
    return bar


def _uptime(a: AgentSnapshot, s: Snapshot) -> str:
    if a.status is Status.STOPPED:
        return "--"
    return fmt_duration((s.now - a.started_at).total_seconds())


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def render_title(s: Snapshot) -> Panel:
    txt = Text(
        f"⚡ PAI Agent Dashboard v{__version__}  │  {len(s.agents)} agents  │  {s.now:%H:%M:%S}",
        style=TITLE,
    )
    return Panel(
        Align.center(txt),
        box=box.ROUNDED,
        border_style=COLOR_BORDER,
        padding=(0, 2),
        width=s.width,
    )


def _phase_cell(a: AgentSnapshot) -> Text:
    if a.status is Status.RUNNING and a.phase < Phase.DONE:
        return Text(_pad(f"{a.phase.icon} {a.phase.short}", COL_PHASE), style=f"bold {COLOR_ACCENT}")
    if a.phase is Phase.DONE:
        return Text(_pad(f"{Phase.DONE.icon} DONE", COL_PHASE), style=COLOR_IDLE)
    return Text(_pad("--", COL_PHASE), style=COLOR_DIM)


def _progress_cell(a: AgentSnapshot) -> Text:
    if a.status is Status.STOPPED:
        return Text(_pad("   --", COL_PROGRESS), style=COLOR_DIM)
    return render_progress_bar(a.progress, COL_PROGRESS)


def _tokens_cell(a: AgentSnapshot) -> Text:
    if a.status is Status.RUNNING and a.tokens_per_sec > 0:
        color = COLOR_IDLE if a.tokens_per_sec >= 50 else COLOR_RUNNING
        return Text(_pad(f"{a.tokens_per_sec:.0f}", COL_TOKENS), style=color)
    return Text(_pad("--", COL_TOKENS), style=COLOR_DIM)


def _process_cell(a: AgentSnapshot, width: int) -> Text:
    if a.status is Status.RUNNING:
        return Text(truncate(f"{a.current_tool} → {a.last_activity}", width))
    if a.status is Status.PAUSED:
        return Text("⏳ Awaiting input", style=COLOR_PAUSED)
    if a.status is Status.ERROR:
        return Text("✗ Error, see detail", style=COLOR_ERROR)
    return Text("--", style=COLOR_DIM)


def render_row(a: AgentSnapshot, s: Snapshot, selected: bool = False) -> Text:
    c_proc = process_width(s.width)
    row = Text(no_wrap=True, overflow="crop")
    row.append(f" {_pad(a.id, COL_ID)} {_pad(a.name, COL_NAME)} ")
    row.append(_pad(a.status.label, COL_STATUS), style=a.status.badge.color)
    row.append(" ")
    row.append_text(_phase_cell(a))
    row.append(" ")
    row.append_text(_progress_cell(a))
    row.append(" ")
    row.append_text(_tokens_cell(a))
    row.append(f" {_pad(_uptime(a, s), COL_UPTIME)} ")
    row.append_text(_process_cell(a, c_proc))
    if selected:
        if row.cell_len < s.width:
            row.pad_right(s.width - row.cell_len)
        row.stylize(f"on {COLOR_SEL_BG}")
    return row


def render_table(s: Snapshot) -> Group:
    c_proc = process_width(s.width)
    header = Text(
        " " + " ".join([
            _pad("AGENT ID", COL_ID),
            _pad("NAME", COL_NAME),
            _pad("STATUS", COL_STATUS),
            _pad("PHASE", COL_PHASE),
            _pad("PROGRESS", COL_PROGRESS),
            _pad("TOK/S", COL_TOKENS),
            _pad("UPTIME", COL_UPTIME),
            _pad("CURRENT PROCESS", c_proc),
        ]),
        style=f"bold underline {COLOR_FG}",
        no_wrap=True,
        overflow="crop",
    )
    rows: list[RenderableType] = [header]
    for i, a in enumerate(s.agents):
        rows.append(render_row(a, s, selected=i == s.selected))
    return Group(*rows)


def _field(label: str, value: str | Text) -> Text:
    line = Text()
    line.append(label, style=LABEL)
    line.append(" ")
    if isinstance(value, Text):
        line.append_text(value)
    else:
        line.append(value)
    return line


def render_timeline(a: AgentSnapshot) -> Text:
    line = Text("  ")
    for i, p in enumerate(WORK_PHASES):
        if i:
            line.append(" → ", style=COLOR_DIM)
        chunk = f"{p.icon} {p.short}"
        if p < a.phase:
            line.append(chunk, style=COLOR_IDLE)
        elif p == a.phase:
            line.append("▶" + chunk, style=f"bold {COLOR_ACCENT}")
        else:
            line.append(chunk, style=COLOR_DIM)
    return line


def render_detail(a: AgentSnapshot, s: Snapshot) -> Panel:
    """Comprehensive view of one agent."""
    half = max(1, (s.width - 8) // 2)

    col1 = Text("\n").join([
        _field("Type:", a.name),
        _field("Model:", a.model),
        _field("Status:", Text(a.status.label, style=a.status.badge.color)),
        _field("Phase:", f"{a.phase.icon} {a.phase.label}"),
    ])
    col2 = Text("\n").join([
        _field("Uptime:", _uptime(a, s)),
        _field("Task:", a.task),
        _field("Tools used:", str(a.tools_used)),
        _field("Progress:", render_progress_bar(a.progress, 20)),
    ])
    meta = Table.grid()
    meta.add_column(width=half)
    meta.add_column(width=half)
    meta.add_row(col1, col2)

    tokens = Text("  ")
    tokens.append_text(_field("Throughput:", f"{a.tokens_per_sec:.1f} tok/s   "))
    tokens.append_text(_field("Input:", f"{fmt_tokens(a.tokens_in)} in   "))
    tokens.append_text(_field("Output:", f"{fmt_tokens(a.tokens_out)} out   "))
    tokens.append_text(_field("Total:", f"{fmt_tokens(a.tokens_total)} total"))

    isc_lines: list[RenderableType] = []
    for text, passed in a.isc:
        line = Text()
        if passed:
            line.append("  ✓ ", style=COLOR_IDLE)
        else:
            line.append("  ✗ ", style=COLOR_ERROR)
        line.append(text)
        isc_lines.append(line)
    isc_lines.append(Text(f"  [{a.isc_passed}/{len(a.isc)} passed]", style=COLOR_DIM))

    events = [Text("  " + entry) for entry in a.events[-RECENT_EVENTS:]]

    body = Group(
        Text(f"Agent Detail: {a.id}", style=TITLE),
        meta,
        Text("Token Metrics", style=TITLE),
        tokens,
        Text("Phase Timeline", style=TITLE),
        render_timeline(a),
        Text("ISC Criteria", style=TITLE),
        *isc_lines,
        Text("Recent Events", style=TITLE),
        *events,
    )
    return Panel(
        body,
        box=box.ROUNDED,
        border_style=COLOR_BORDER,
        padding=(0, 1),
        width=s.width - 2,
    )


STATUS_BAR_PARTS = (
    (Status.RUNNING, "running"),
    (Status.IDLE, "idle"),
    (Status.PAUSED, "paused"),
    (Status.ERROR, "err"),
    (Status.STOPPED, "stopped"),
)


def render_status_line(s: Snapshot) -> Text:
    counts = {st: 0 for st in Status}
    total_tok = 0.0
    for a in s.agents:
        counts[a.status] += 1
        total_tok += a.tokens_per_sec

    sep = "  │  "
    left = Text(f"Agents: {len(s.agents)}")
    for status, word in STATUS_BAR_PARTS:
        left.append(sep)
        left.append(f"{status.badge.icon}{counts[status]} {word}", style=status.badge.color)
    left.append(f"{sep}Σ {total_tok:.0f} tok/s")

    right = Text(f"⟳ {s.last_refresh:%H:%M:%S}", style=COLOR_DIM)
    gap = max(1, s.width - left.cell_len - right.cell_len - 4)
    return Text.assemble(left, " " * gap, right, no_wrap=True, overflow="crop")


def render_status_bar(s: Snapshot) -> Group:
    return Group(
        Rule(style=COLOR_BORDER),
        Padding(render_status_line(s), (0, 1)),
    )


def render_help() -> Align:
    txt = Text(" • ".join(f"{k} {desc}" for k, desc in help_entries()), style=COLOR_DIM)
    return Align.center(txt)


def render_loading(s: Snapshot) -> Align:
    spinner = Spinner(
        "dots",
        text=Text("  Connecting to PAI orchestration layer...", style=COLOR_TITLE),
        style=COLOR_TITLE,
    )
    return Align.center(spinner, vertical="middle", height=s.height or None)


def render_empty(s: Snapshot) -> Align:
    txt = Text("No agents active.", style=COLOR_DIM)
    return Align.center(txt, vertical="middle", height=s.height or None)


# ---------------------------------------------------------------------------
# Frame
# ---------------------------------------------------------------------------

def render_frame(s: Snapshot) -> RenderableType:
    if s.loading:
        return render_loading(s)
    if not s.agents:
        return render_empty(s)

    sections: list[RenderableType] = [render_title(s), render_table(s)]
    agent = s.selected_agent
    if s.detail_open and agent is not None:
        sections.append(render_detail(agent, s))
    sections.append(render_status_bar(s))
    sections.append(render_help())
    return Group(*sections)


def make_console(
    width: int,
    height: int | None = None,
    *,
    color: bool | None = False,
    file=None,
) -> Console:
    """Console of fixed size.  ``color=None`` lets Rich detect the terminal."""
    if color is None:
        color_system, force = "auto", None
    else:
        color_system, force = ("truecolor" if color else None), color
    return Console(
        file=file,
        width=width,
        height=height,
        color_system=color_system,
        force_terminal=force,
        highlight=False,
        emoji=False,
        legacy_windows=False,
    )


def frame_text(s: Snapshot, *, color: bool = False) -> str:
    """Render *s* to a string at the snapshot's width."""
    buf = io.StringIO()
    console = make_console(s.width, s.height or None, color=color, file=buf)
    console.print(render_frame(s))
    return buf.getvalue()
