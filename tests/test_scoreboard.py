"""Tests for scoreboard formatting and rich rendering."""

import re
from datetime import datetime, timedelta

import pytest
from rich.console import Console
from parlorgames.core.stats import MatchRecord, Streak
from parlorgames.reporting import (
    describe_streak,
    format_history_entry,
    format_timestamp,
    render_scoreboard,
    scoreboard_summary,
)
from parlorgames.session import connectfour_session, tictactoe_session

NOW = datetime(2026, 10, 19, 12, 0, 0)


def _ms(dt):
    return int(dt.timestamp() * 1000)


def _render(renderable):
    console = Console(record=True, width=100, color_system=None)
    console.print(renderable)
    return console.export_text()


# ------------------------------------------------------------------
# Formatting helpers
# ------------------------------------------------------------------

class TestStreak:
    def test_no_streak(self):
        assert describe_streak(Streak()) == "—"

    def test_letter_player(self):
        assert describe_streak(Streak("X", 2)) == "X ×2"

    def test_numeric_player(self):
        assert describe_streak(Streak(1, 3)) == "Player 1 ×3"


class TestTimestamp:
    @pytest.mark.parametrize("delta, expected", [
        (timedelta(seconds=5), "just now"),
        (timedelta(minutes=5, seconds=10), "5 min ago"),
        (timedelta(hours=3, minutes=59), "3 h ago"),
    ])
    def test_relative(self, delta, expected):
        assert format_timestamp(_ms(NOW - delta), now=NOW) == expected

    def test_absolute_after_a_day(self):
        value = _ms(datetime(2026, 10, 12, 14, 5))
        assert format_timestamp(value, now=NOW) == "Oct 12, 14:05"

    def test_future_is_absolute(self):
        value = _ms(NOW + timedelta(hours=2))
        assert re.match(r"^[A-Z][a-z]{2} \d{2}, \d{2}:\d{2}$", format_timestamp(value, now=NOW))

    @pytest.mark.parametrize("value", [None, "yesterday", True, float("nan")])
    def test_unparsable(self, value):
        assert format_timestamp(value, now=NOW) == "Just now"


class TestHistoryEntry:
    def test_win(self):
        record = MatchRecord("win", 5, _ms(NOW - timedelta(minutes=2)), "X")
        assert format_history_entry(record, NOW) == ("X victory", "5 moves • 2 min ago")

    def test_draw_single_move_wording(self):
        record = MatchRecord("draw", 1, _ms(NOW), None)
        assert format_history_entry(record, NOW) == ("Stalemate", "1 move • just now")

    def test_connectfour_label(self):
        record = MatchRecord("win", 7, _ms(NOW), 2)
        assert format_history_entry(record, NOW)[0] == "Player 2 victory"


# ------------------------------------------------------------------
# Summary and rich rendering
# ------------------------------------------------------------------

class TestScoreboard:
    def test_summary(self, store, clock):
        session = tictactoe_session(store, clock=clock)
        for p in (0, 3, 1, 4, 2):
            session.play(p)
        assert scoreboard_summary(session.tracker) == (
            "Matches played: 1 • X win rate: 100% • O win rate: 0%"
        )

    def test_summary_connectfour(self, store):
        session = connectfour_session(store)
        assert scoreboard_summary(session.tracker) == (
            "Matches played: 0 • Player 1 win rate: 0% • Player 2 win rate: 0%"
        )

    def test_empty_history_placeholder(self, store):
        text = _render(render_scoreboard(tictactoe_session(store).tracker))
        assert "No matches yet" in text
        assert "Scoreboard" in text

    def test_rendered_stats(self, store):
        clock = lambda: _ms(NOW - timedelta(minutes=1))
        session = tictactoe_session(store, clock=clock)
        for p in (0, 3, 1, 4, 2):
            session.play(p)
        text = _render(render_scoreboard(session.tracker, now=NOW))
        assert "X wins" in text
        assert "1  (100%)" in text
        assert "X ×1" in text
        assert "X victory" in text
        assert "5 moves • 1 min ago" in text
