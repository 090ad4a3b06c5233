"""parlorgames reporting module.

Usage:
    from rich.console import Console
    from parlorgames.reporting import render_scoreboard

    Console().print(render_scoreboard(session.tracker))
"""

from .scoreboard import (
    describe_streak,
    format_history_entry,
    format_timestamp,
    render_scoreboard,
    scoreboard_summary,
)

__all__ = [
    "describe_streak",
    "format_history_entry",
    "format_timestamp",
    "render_scoreboard",
    "scoreboard_summary",
]
