"""GameSession — one board engine paired with one stats tracker.

The caller owns the session and drives it move by move:

    session = tictactoe_session(store)
    result = session.play(4)

A terminal outcome is recorded in the tracker exactly once, and registered
listeners are told about every resolved move and every stats change. For
animated UIs, ``begin`` places the piece and ``resolve`` finishes the move
after the caller's presentation delay; the engine rejects input in between.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

from parlorgames.config import GamesConfig
from parlorgames.core.stats import SessionStats, SessionTracker
from parlorgames.core.store import InMemoryStore, JsonFileStore, KeyValueStore
from parlorgames.events.base import BoardEngine, MoveResult, OutcomeKind
from parlorgames.events.connectfour.engine import ConnectFourEngine
from parlorgames.events.tictactoe.engine import TicTacToeEngine

MoveListener = Callable[[MoveResult], None]
StatsListener = Callable[[SessionStats], None]


class GameSession:
    def __init__(
        self,
        engine: BoardEngine,
        tracker: SessionTracker,
        *,
        resolve_delay_ms: int = 500,
    ) -> None:
        self._engine = engine
        self._tracker = tracker
        self._resolve_delay_ms = resolve_delay_ms
        self._pending: MoveResult | None = None
        self._move_listeners: list[MoveListener] = []
        self._stats_listeners: list[StatsListener] = []

    @property
    def engine(self) -> BoardEngine:
        return self._engine

    @property
    def tracker(self) -> SessionTracker:
        return self._tracker

    @property
    def stats(self) -> SessionStats:
        return self._tracker.stats

    @property
    def resolve_delay_ms(self) -> int:
        """How long a UI should show a placed piece before calling ``resolve``."""
        return self._resolve_delay_ms

    def on_move(self, callback: MoveListener) -> None:
        self._move_listeners.append(callback)

    def on_stats(self, callback: StatsListener) -> None:
        self._stats_listeners.append(callback)

    # ------------------------------------------------------------------
    # Play
    # ------------------------------------------------------------------

    def play(self, position: Any) -> MoveResult:
        """Place and resolve a move in one call."""
        placed = self.begin(position)
        if not placed.accepted:
            return placed
        return self.resolve()

    def begin(self, position: Any) -> MoveResult:
        """Placement phase. Rejected moves are returned, never raised."""
        placed = self._engine.begin_move(position)
        if placed.accepted:
            self._pending = placed
        return placed

    def resolve(self) -> MoveResult:
        """Resolution phase: outcome, stats update, listener notification."""
        if self._pending is None:
            raise RuntimeError("No move is awaiting resolution")
        outcome = self._engine.resolve_move()
        result = replace(self._pending, outcome=outcome)
        self._pending = None

        if outcome.kind is OutcomeKind.WIN:
            self._tracker.record_win(outcome.player, self._engine.move_count)
        elif outcome.kind is OutcomeKind.DRAW:
            self._tracker.record_draw(self._engine.move_count)

        for listener in self._move_listeners:
            listener(result)
        if outcome.is_terminal:
            self._notify_stats()
        return result

    def new_round(self) -> None:
        """Clear the board. Statistics carry over."""
        self._pending = None
        self._engine.reset()

    def clear_stats(self) -> None:
        self._tracker.clear()
        self._notify_stats()

    def _notify_stats(self) -> None:
        for listener in self._stats_listeners:
            listener(self._tracker.stats)


# ----------------------------------------------------------------------
# Factories
# ----------------------------------------------------------------------

def open_store(config: GamesConfig) -> KeyValueStore:
    """File store when a storage path is configured, else in-memory."""
    if config.storage_path is not None:
        return JsonFileStore(config.storage_path)
    return InMemoryStore()


def _build_session(
    engine: BoardEngine,
    name: str,
    store: KeyValueStore,
    config: GamesConfig | None,
    clock: Callable[[], int] | None,
) -> GameSession:
    config = config or GamesConfig()
    game = config.game(name)
    tracker = SessionTracker(
        store,
        players=engine.players,
        schema=engine.stats_schema,
        storage_key=game.storage_key,
        legacy_key=game.legacy_key,
        capacity=config.history_capacity,
        clock=clock,
    )
    return GameSession(engine, tracker, resolve_delay_ms=config.resolve_delay_ms)


def tictactoe_session(
    store: KeyValueStore,
    config: GamesConfig | None = None,
    clock: Callable[[], int] | None = None,
) -> GameSession:
    return _build_session(TicTacToeEngine(), "tictactoe", store, config, clock)


def connectfour_session(
    store: KeyValueStore,
    config: GamesConfig | None = None,
    clock: Callable[[], int] | None = None,
) -> GameSession:
    return _build_session(ConnectFourEngine(), "connectfour", store, config, clock)
