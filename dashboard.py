#!/usr/bin/env python3
"""
PAI Agent Dashboard -- Rich Terminal UI
=======================================
Real-time view of a simulated fleet of PAI agents: lifecycle status,
algorithm phase, throughput and recent activity, refreshed every 2 s.

Usage:
    python dashboard.py                 # interactive full-screen dashboard
    python dashboard.py --screenshot    # one deterministic frame to stdout
"""

import sys

from pai_dashboard.cli import main

if __name__ == "__main__":
    sys.exit(main())
