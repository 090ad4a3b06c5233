"""SessionTracker — scores, streaks and match history across rounds.

One tracker per game. State lives in a ``SessionStats`` instance that is
only mutated through ``record_win`` / ``record_draw`` (and ``clear``), and
is written back to the key-value store after every mutation.

Loading walks an ordered chain of loaders, first success wins:

    current key  ->  legacy key (bare scores)  ->  defaults

A blob that fails to parse or validate is logged and treated as absent.
"""

from __future__ import annotations

import json
import logging
import math
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable

import jsonschema

from parlorgames.core.schemas import legacy_scores_schema
from parlorgames.core.store import KeyValueStore

logger = logging.getLogger(__name__)

HISTORY_CAPACITY = 8


class CorruptPersistedState(Exception):
    """A stored blob could not be parsed or failed schema validation."""


@dataclass
class Streak:
    """Consecutive rounds won by one player. ``player`` is None when broken."""

    player: Any = None
    length: int = 0


@dataclass(frozen=True)
class MatchRecord:
    """One completed round in the history log."""

    outcome: str  # "win" or "draw"
    moves: int
    timestamp: int | None  # epoch milliseconds
    player: Any = None


@dataclass
class SessionStats:
    wins: dict[Any, int]
    draws: int = 0
    match_count: int = 0
    streak: Streak = field(default_factory=Streak)
    history: deque = field(default_factory=deque)

    @property
    def scores(self) -> dict:
        """Wins per player plus the ``draws`` count."""
        return {**self.wins, "draws": self.draws}


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class SessionTracker:
    """Accumulates and persists the statistics of one game.

    ``players`` fixes the player-id type: the native ids ("X"/"O", 1/2)
    are stringified for JSON object keys and parsed back on load.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        players: tuple,
        schema: dict,
        storage_key: str,
        legacy_key: str | None = None,
        capacity: int = HISTORY_CAPACITY,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._store = store
        self._players = tuple(players)
        self._players_by_key = {str(p): p for p in self._players}
        self._schema = schema
        self._legacy_schema = legacy_scores_schema(schema)
        self._storage_key = storage_key
        self._legacy_key = legacy_key
        self._capacity = capacity
        self._clock = clock or _epoch_ms
        self._loaders: tuple[Callable[[], SessionStats | None], ...] = (
            self._load_current,
            self._load_legacy,
        )
        self._stats = self._default_stats()
        self.load()

    @property
    def stats(self) -> SessionStats:
        return self._stats

    @property
    def players(self) -> tuple:
        return self._players

    @property
    def storage_key(self) -> str:
        return self._storage_key

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_win(self, player: Any, moves: int) -> SessionStats:
        if isinstance(player, bool) or player not in self._players:
            raise ValueError(f"Unknown player: {player!r}")
        stats = self._stats
        stats.wins[player] += 1
        stats.match_count += 1
        if stats.streak.player == player:
            stats.streak = Streak(player, stats.streak.length + 1)
        else:
            stats.streak = Streak(player, 1)
        self._add_history(MatchRecord("win", moves, self._clock(), player))
        self.save()
        return stats

    def record_draw(self, moves: int) -> SessionStats:
        stats = self._stats
        stats.draws += 1
        stats.match_count += 1
        stats.streak = Streak()
        self._add_history(MatchRecord("draw", moves, self._clock()))
        self.save()
        return stats

    def clear(self) -> SessionStats:
        """Drop all statistics and persist the empty state."""
        self._stats = self._default_stats()
        self.save()
        return self._stats

    def _add_history(self, record: MatchRecord) -> None:
        # deque(maxlen) drops from the right: the oldest entry
        self._stats.history.appendleft(record)

    # ------------------------------------------------------------------
    # Derived figures
    # ------------------------------------------------------------------

    @property
    def total_matches(self) -> int:
        stats = self._stats
        return stats.match_count or (sum(stats.wins.values()) + stats.draws)

    def win_rate(self, player: Any) -> int:
        """Percentage of matches won by ``player``, rounded half up."""
        total = self.total_matches
        if not total:
            return 0
        return math.floor(self._stats.wins[player] / total * 100 + 0.5)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> SessionStats:
        for loader in self._loaders:
            try:
                stats = loader()
            except CorruptPersistedState as exc:
                logger.warning("Discarding persisted stats: %s", exc)
                continue
            if stats is not None:
                logger.debug("Loaded stats via %s", loader.__name__)
                self._stats = stats
                return stats
        self._stats = self._default_stats()
        return self._stats

    def save(self) -> None:
        """Write the current-format blob. The legacy key is never written."""
        self._store.set(self._storage_key, json.dumps(self.to_payload()))
        logger.debug("Saved stats under %s", self._storage_key)

    def to_payload(self) -> dict:
        stats = self._stats
        scores = {str(p): stats.wins[p] for p in self._players}
        scores["draws"] = stats.draws
        return {
            "scores": scores,
            "history": [self._record_to_dict(r) for r in stats.history],
            "matches": stats.match_count,
            "streak": {
                "player": stats.streak.player,
                "length": stats.streak.length,
            },
        }

    def _load_current(self) -> SessionStats | None:
        blob = self._read(self._storage_key, self._schema)
        if blob is None:
            return None

        stats = self._stats_from_scores(blob.get("scores", {}))
        matches = int(blob.get("matches", 0))
        if matches > 0:
            stats.match_count = matches
        records = [self._record_from_dict(r) for r in blob.get("history", [])]
        stats.history.extend(records[: self._capacity])

        streak = blob.get("streak") or {}
        streak_player = self._parse_player(streak.get("player"))
        if streak_player is not None:
            stats.streak = Streak(streak_player, int(streak.get("length", 0)))
        return stats

    def _load_legacy(self) -> SessionStats | None:
        if self._legacy_key is None:
            return None
        blob = self._read(self._legacy_key, self._legacy_schema)
        if blob is None:
            return None
        logger.info("Migrating legacy scores from %s", self._legacy_key)
        return self._stats_from_scores(blob)

    def _read(self, key: str, schema: dict) -> dict | None:
        raw = self._store.get(key)
        if not raw:
            return None
        try:
            blob = json.loads(raw)
            jsonschema.validate(blob, schema)
        except json.JSONDecodeError as e:
            raise CorruptPersistedState(f"{key}: JSON parse error: {e}") from e
        except jsonschema.ValidationError as e:
            raise CorruptPersistedState(f"{key}: {e.message}") from e
        return blob

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _default_stats(self) -> SessionStats:
        return SessionStats(
            wins={p: 0 for p in self._players},
            history=deque(maxlen=self._capacity),
        )

    def _stats_from_scores(self, scores: dict) -> SessionStats:
        stats = self._default_stats()
        for key, player in self._players_by_key.items():
            stats.wins[player] = int(scores.get(key, 0))
        stats.draws = int(scores.get("draws", 0))
        stats.match_count = sum(stats.wins.values()) + stats.draws
        return stats

    def _parse_player(self, value: Any) -> Any:
        if value is None:
            return None
        return self._players_by_key.get(str(value))

    def _record_from_dict(self, entry: dict) -> MatchRecord:
        return MatchRecord(
            outcome=entry["outcome"],
            moves=int(entry.get("moves", 0)),
            timestamp=entry.get("timestamp"),
            player=self._parse_player(entry.get("player")),
        )

    @staticmethod
    def _record_to_dict(record: MatchRecord) -> dict:
        entry = {
            "outcome": record.outcome,
            "moves": record.moves,
            "timestamp": record.timestamp,
        }
        if record.outcome == "win":
            entry["player"] = record.player
        return entry
