"""CLI entrypoint for the PAI agent dashboard.

Usage:
    pai-dashboard                       # interactive full-screen view
    pai-dashboard --screenshot          # one deterministic frame to stdout
    pai-dashboard --log-file dash.log   # JSON event log while running
"""

from __future__ import annotations

import argparse
import random
import sys
from datetime import datetime
from pathlib import Path

import structlog
from rich.console import Console

from pai_dashboard import __version__
from pai_dashboard.constants import COLOR_TITLE, SCREENSHOT_SEED, TICK_INTERVAL
from pai_dashboard.logging import configure_structlog
from pai_dashboard.loop import EventLoop
from pai_dashboard.render import fmt_tokens
from pai_dashboard.screenshot import capture
from pai_dashboard.state import DashboardState
from pai_dashboard.terminal import KeyPoller, TerminalUnavailableError, require_terminal

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pai-dashboard",
        description="PAI Agent Dashboard: real-time orchestration view",
    )
    ap.add_argument("--screenshot", action="store_true",
                    help="Render one deterministic frame to stdout and exit")
    ap.add_argument("--seed", type=int, default=None,
                    help=f"Random seed (screenshot default {SCREENSHOT_SEED})")
    ap.add_argument("--tick-interval", type=float, default=TICK_INTERVAL,
                    help=f"Seconds between simulation ticks (default {TICK_INTERVAL:g})")
    ap.add_argument("--log-file", type=Path, default=None,
                    help="Append JSON log lines to this file")
    ap.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None,
                    help="Log level (default WARNING, DEBUG with --log-file)")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def run_interactive(args: argparse.Namespace) -> DashboardState:
    require_terminal()
    rng = random.Random(args.seed)
    state = DashboardState.create(rng, datetime.now())
    loop = EventLoop(state, rng, tick_interval=args.tick_interval)
    console = Console()
    with KeyPoller() as keys:
        loop.run(console, keys)
    return state


def print_summary(console: Console, state: DashboardState) -> None:
    agents = state.registry.agents
    throughput = sum(a.tokens_per_sec for a in agents)
    tokens = sum(a.tokens_in + a.tokens_out for a in agents)
    console.print()
    console.print(f"[bold {COLOR_TITLE}]PAI Dashboard Session Complete[/]")
    console.print(f"  Ticks       {state.view.ticks}")
    console.print(f"  Agents      {len(agents)}")
    console.print(f"  Throughput  {throughput:.0f} tok/s")
    console.print(f"  Tokens      {fmt_tokens(tokens)}")
    console.print()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = args.log_level or ("DEBUG" if args.log_file else "WARNING")
    configure_structlog(level, args.log_file)
    log = structlog.get_logger("cli")

    if args.screenshot:
        seed = SCREENSHOT_SEED if args.seed is None else args.seed
        capture(seed=seed)
        return 0

    try:
        state = run_interactive(args)
    except TerminalUnavailableError as exc:
        log.info("startup_failed", error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print_summary(Console(), state)
    return 0


if __name__ == "__main__":
    sys.exit(main())
