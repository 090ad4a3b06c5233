"""BoardEngine — abstract base class for the two-player board games.

Each game variant is a self-contained engine that implements this interface.
Callers (a GameSession or a UI) interact with engines only through these
methods.

Class hierarchy:
    BoardEngine (ABC)
    ├── TicTacToeEngine — 3×3 board, cells addressed by index 0-8
    └── ConnectFourEngine — 7×6 board, pieces dropped by column

A move has two phases. ``begin_move`` places the mark immediately and puts
the round into the RESOLVING sub-state; ``resolve_move`` then checks for a
win or draw and hands the turn over. A UI can wait out an animation between
the two calls. ``apply_move`` runs both phases back to back.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

from parlorgames.core.schemas import load_schema


class RoundState(Enum):
    ACTIVE = "active"
    RESOLVING = "resolving"
    WON = "won"
    DRAWN = "drawn"


class OutcomeKind(Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


class IllegalMove(Enum):
    """Why a move was rejected. A rejected move never touches the board."""

    ROUND_OVER = "round_over"
    RESOLVING = "resolving"
    OCCUPIED = "occupied"
    COLUMN_FULL = "column_full"
    OUT_OF_BOUNDS = "out_of_bounds"


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a move against the board."""

    legal: bool
    reason: str | None = None
    violation: IllegalMove | None = None


@dataclass(frozen=True)
class RoundOutcome:
    """What a resolved move did to the round."""

    kind: OutcomeKind
    player: Any = None
    line: tuple = ()

    @classmethod
    def in_progress(cls) -> RoundOutcome:
        return cls(OutcomeKind.IN_PROGRESS)

    @classmethod
    def win(cls, player: Any, line: tuple) -> RoundOutcome:
        return cls(OutcomeKind.WIN, player, tuple(line))

    @classmethod
    def draw(cls) -> RoundOutcome:
        return cls(OutcomeKind.DRAW)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not OutcomeKind.IN_PROGRESS


@dataclass(frozen=True)
class MoveResult:
    """Everything the rendering side needs to know about one move.

    ``outcome`` stays None for rejected moves and for moves that were placed
    but not yet resolved.
    """

    accepted: bool
    player: Any = None
    cell: Any = None
    move_number: int = 0
    outcome: RoundOutcome | None = None
    violation: IllegalMove | None = None
    reason: str | None = None


class BoardEngine(ABC):
    """Abstract base for a single-round board engine.

    Subclasses set ``players`` (first entry moves first) and implement the
    board geometry hooks. The stats schema is read from ``schema.json`` in
    the subclass's package directory.
    """

    players: tuple = ()

    def __init__(self) -> None:
        self._stats_schema = self._load_event_schema()

        # Round state (reset in reset())
        self._board: list = []
        self._state: RoundState = RoundState.ACTIVE
        self._active_player: Any = None
        self._move_count: int = 0
        self._pending_cell: Any = None
        self._last_cell: Any = None
        self._winning_line: tuple = ()
        self.reset()

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Start a new round. Session statistics are not touched."""
        self._state = RoundState.ACTIVE
        self._active_player = self.first_player
        self._move_count = 0
        self._pending_cell = None
        self._last_cell = None
        self._winning_line = ()
        self._init_board()

    def validate_move(self, position: Any) -> ValidationResult:
        """Check if a move is legal. Does not modify state."""
        if self._state is RoundState.RESOLVING:
            return ValidationResult(
                legal=False,
                reason="Previous move is still resolving.",
                violation=IllegalMove.RESOLVING,
            )
        if self._state is not RoundState.ACTIVE:
            return ValidationResult(
                legal=False,
                reason="Round is over. Start a new round.",
                violation=IllegalMove.ROUND_OVER,
            )
        return self._validate_position(position)

    def begin_move(self, position: Any) -> MoveResult:
        """Place the current player's mark and hold the round for resolution."""
        check = self.validate_move(position)
        if not check.legal:
            return MoveResult(
                accepted=False,
                player=self._active_player,
                violation=check.violation,
                reason=check.reason,
            )

        player = self._active_player
        cell = self._place(position, player)
        self._move_count += 1
        self._last_cell = cell
        self._pending_cell = cell
        self._state = RoundState.RESOLVING
        return MoveResult(
            accepted=True,
            player=player,
            cell=cell,
            move_number=self._move_count,
        )

    def resolve_move(self) -> RoundOutcome:
        """Finish the pending move: win check, then draw check, then hand over."""
        if self._state is not RoundState.RESOLVING:
            raise RuntimeError("No move is awaiting resolution")

        cell = self._pending_cell
        player = self._active_player
        self._pending_cell = None

        line = self._winning_line_through(cell, player)
        if line:
            self._state = RoundState.WON
            self._winning_line = tuple(line)
            return RoundOutcome.win(player, line)
        if self._board_full():
            self._state = RoundState.DRAWN
            return RoundOutcome.draw()

        self._state = RoundState.ACTIVE
        self._active_player = self.opponent(player)
        return RoundOutcome.in_progress()

    def apply_move(self, position: Any) -> MoveResult:
        """Place and resolve a move in one call."""
        placed = self.begin_move(position)
        if not placed.accepted:
            return placed
        return replace(placed, outcome=self.resolve_move())

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def first_player(self) -> Any:
        return self.players[0]

    @property
    def current_player(self) -> Any:
        return self._active_player

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def move_count(self) -> int:
        return self._move_count

    @property
    def accepting_input(self) -> bool:
        return self._state is RoundState.ACTIVE

    @property
    def is_terminal(self) -> bool:
        return self._state in (RoundState.WON, RoundState.DRAWN)

    @property
    def winning_line(self) -> tuple:
        return self._winning_line

    @property
    def stats_schema(self) -> dict:
        """JSON Schema of this game's persisted session stats."""
        return self._stats_schema

    @property
    def display_name(self) -> str:
        name = type(self).__name__
        return name.removesuffix("Engine") or name

    def opponent(self, player: Any) -> Any:
        return self.players[1] if player == self.players[0] else self.players[0]

    def get_state_snapshot(self) -> dict:
        """Return a serializable snapshot of the current round."""
        return {
            "board": self._board_snapshot(),
            "state": self._state.value,
            "current_player": self._active_player,
            "move_count": self._move_count,
            "last_cell": self._last_cell,
            "winning_line": list(self._winning_line),
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_event_schema(self) -> dict:
        """Load schema.json from the subclass's package directory."""
        mod = sys.modules[type(self).__module__]
        schema_path = Path(mod.__file__).parent / "schema.json"
        return load_schema(schema_path)

    @staticmethod
    def _is_index(value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    # ------------------------------------------------------------------
    # Abstract — board geometry
    # ------------------------------------------------------------------

    @abstractmethod
    def _init_board(self) -> None:
        """Replace the board with an empty one."""

    @abstractmethod
    def _validate_position(self, position: Any) -> ValidationResult:
        """Bounds and occupancy checks for an active round."""

    @abstractmethod
    def _place(self, position: Any, player: Any) -> Any:
        """Mark the board for a validated move and return the cell used."""

    @abstractmethod
    def _winning_line_through(self, cell: Any, player: Any) -> tuple:
        """Return the winning line made by ``player`` at ``cell``, or ()."""

    @abstractmethod
    def _board_full(self) -> bool:
        """True when no empty cell remains."""

    @abstractmethod
    def _board_snapshot(self) -> list:
        """Return a copy of the board for snapshots."""

    @abstractmethod
    def cell(self, position: Any) -> Any:
        """Return the player occupying a cell, or None if it is empty."""

    @abstractmethod
    def legal_moves(self) -> list:
        """Return every position a move may currently target."""

    @abstractmethod
    def render(self) -> str:
        """Render the board as ASCII text."""
