"""Scoreboard formatting and rich rendering for session stats.

The formatting helpers are plain functions so any front end can reuse them;
``render_scoreboard`` assembles them into a rich display for terminals.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from parlorgames.core.stats import MatchRecord, SessionTracker, Streak

EMPTY_HISTORY = "No matches yet. Start a round to populate your timeline."
NO_STREAK = "—"

PLAYER_COLORS = {
    "X": "cyan",
    "O": "magenta",
    1: "red",
    2: "yellow",
}


def player_label(player: Any) -> str:
    """'X' stays 'X'; numeric ids read as 'Player 1'."""
    if isinstance(player, int):
        return f"Player {player}"
    return str(player)


def describe_streak(streak: Streak) -> str:
    if streak.player is None:
        return NO_STREAK
    return f"{player_label(streak.player)} ×{streak.length}"


def format_timestamp(value: Any, now: datetime | None = None) -> str:
    """Relative time within the last day, otherwise 'Oct 19, 14:05'."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "Just now"
    try:
        when = datetime.fromtimestamp(value / 1000)
    except (OverflowError, OSError, ValueError):
        return "Just now"

    now = now or datetime.now()
    seconds = (now - when).total_seconds()
    if 0 <= seconds < 60:
        return "just now"
    if 0 <= seconds < 3600:
        return f"{int(seconds // 60)} min ago"
    if 0 <= seconds < 86400:
        return f"{int(seconds // 3600)} h ago"
    return when.strftime("%b %d, %H:%M")


def format_history_entry(
    record: MatchRecord, now: datetime | None = None
) -> tuple[str, str]:
    """Return (headline, detail) for one history record."""
    if record.outcome == "win":
        headline = f"{player_label(record.player)} victory"
    else:
        headline = "Stalemate"
    moves = record.moves or 0
    plural = "" if moves == 1 else "s"
    detail = f"{moves} move{plural} • {format_timestamp(record.timestamp, now)}"
    return headline, detail


def scoreboard_summary(tracker: SessionTracker) -> str:
    parts = [f"Matches played: {tracker.total_matches}"]
    for player in tracker.players:
        parts.append(f"{player_label(player)} win rate: {tracker.win_rate(player)}%")
    return " • ".join(parts)


# ── Rich panels ───────────────────────────────────────────────────


def build_stats_panel(tracker: SessionTracker) -> Panel:
    """Win counts, draws, rates, streak and total matches."""
    stats = tracker.stats
    table = Table(show_header=False, show_edge=False, pad_edge=False, expand=True)
    table.add_column("label", style="dim")
    table.add_column("value", justify="right")

    for player in tracker.players:
        color = PLAYER_COLORS.get(player, "white")
        table.add_row(
            Text(f"{player_label(player)} wins", style=f"bold {color}"),
            f"{stats.wins[player]}  ({tracker.win_rate(player)}%)",
        )
    table.add_row("Draws", str(stats.draws))
    table.add_row("Streak", describe_streak(stats.streak))
    table.add_row("Matches", str(tracker.total_matches))

    return Panel(
        table, title="[bold]Scoreboard[/bold]", border_style="green", padding=(0, 1)
    )


def build_history_panel(
    tracker: SessionTracker, now: datetime | None = None
) -> Panel:
    """Most recent rounds, newest first."""
    lines: list[Text] = []
    if not tracker.stats.history:
        lines.append(Text(f"  {EMPTY_HISTORY}", style="dim italic"))
    else:
        for record in tracker.stats.history:
            headline, detail = format_history_entry(record, now)
            line = Text()
            if record.outcome == "win":
                color = PLAYER_COLORS.get(record.player, "white")
                line.append(f"  {headline}", style=f"bold {color}")
            else:
                line.append(f"  {headline}", style="bold yellow")
            line.append(f"  {detail}", style="dim")
            lines.append(line)

    return Panel(
        Group(*lines),
        title="[bold]Match History[/bold]",
        border_style="yellow",
        padding=(0, 1),
    )


def render_scoreboard(tracker: SessionTracker, now: datetime | None = None) -> Group:
    """Build the full scoreboard display."""
    return Group(
        Text(scoreboard_summary(tracker), style="bold"),
        build_stats_panel(tracker),
        build_history_panel(tracker, now),
    )
