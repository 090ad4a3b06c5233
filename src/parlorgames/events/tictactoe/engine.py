"""Tic-Tac-Toe engine — implements the BoardEngine ABC for a single round.

The board is a flat sequence of 9 cells, index 0 top-left through 8
bottom-right (row-major). X always opens the round, so a round is at most
9 moves.
"""

from __future__ import annotations

from typing import Any

from parlorgames.events.base import BoardEngine, IllegalMove, ValidationResult

__all__ = ["TicTacToeEngine"]

CELLS = 9

# Eight lines to check for a win: 3 rows, 3 cols, 2 diagonals
_WIN_LINES = (
    # Rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # Columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # Diagonals
    (0, 4, 8),
    (2, 4, 6),
)


class TicTacToeEngine(BoardEngine):
    """Single-round tic-tac-toe engine. Positions are cell indices 0-8."""

    players = ("X", "O")

    # ------------------------------------------------------------------
    # BoardEngine ABC
    # ------------------------------------------------------------------

    def cell(self, position: int) -> str | None:
        if not self._is_index(position) or not (0 <= position < CELLS):
            raise IndexError(f"No such cell: {position!r}")
        return self._board[position]

    def legal_moves(self) -> list[int]:
        """Return empty cell indices, or [] when the round takes no input."""
        if not self.accepting_input:
            return []
        return [i for i in range(CELLS) if self._board[i] is None]

    def render(self) -> str:
        """Render ASCII board; empty cells show their index."""
        lines = []
        for r in range(3):
            cells = " | ".join(
                self._board[r * 3 + c] or str(r * 3 + c) for c in range(3)
            )
            lines.append(f" {cells}")
            if r < 2:
                lines.append("---+---+---")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _init_board(self) -> None:
        self._board = [None] * CELLS

    def _validate_position(self, position: Any) -> ValidationResult:
        if not self._is_index(position) or not (0 <= position < CELLS):
            return ValidationResult(
                legal=False,
                reason=f"Position must be an integer 0-8. Got: {position!r}.",
                violation=IllegalMove.OUT_OF_BOUNDS,
            )
        if self._board[position] is not None:
            return ValidationResult(
                legal=False,
                reason=f"Square {position} is already occupied "
                f"by '{self._board[position]}'.",
                violation=IllegalMove.OCCUPIED,
            )
        return ValidationResult(legal=True)

    def _place(self, position: int, player: str) -> int:
        self._board[position] = player
        return position

    def _winning_line_through(self, cell: int, player: str) -> tuple:
        """Check all 8 win lines for the mover. Return the line or ()."""
        for line in _WIN_LINES:
            if all(self._board[i] == player for i in line):
                return line
        return ()

    def _board_full(self) -> bool:
        return None not in self._board

    def _board_snapshot(self) -> list:
        return list(self._board)
