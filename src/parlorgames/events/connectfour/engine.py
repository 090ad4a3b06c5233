"""Connect Four engine — implements the BoardEngine ABC for a single round.

A round has at most 42 moves (7 columns × 6 rows). Cells are addressed as
``(column, row)`` with row 0 at the bottom; a move names only a column and
the piece drops to the lowest empty row. Player 1 always opens the round.
"""

from __future__ import annotations

from typing import Any

from parlorgames.events.base import BoardEngine, IllegalMove, ValidationResult

__all__ = ["ConnectFourEngine"]

COLUMNS = 7
ROWS = 6
CONNECT = 4

# Vertical, horizontal, diagonal, anti-diagonal
_AXES = ((0, 1), (1, 0), (1, 1), (1, -1))


class ConnectFourEngine(BoardEngine):
    """Single-round Connect Four engine. Positions are column indices 0-6."""

    players = (1, 2)

    # ------------------------------------------------------------------
    # BoardEngine ABC
    # ------------------------------------------------------------------

    def cell(self, position: tuple[int, int]) -> int | None:
        col, row = position
        if not (
            self._is_index(col) and self._is_index(row)
            and 0 <= col < COLUMNS and 0 <= row < ROWS
        ):
            raise IndexError(f"No such cell: {position!r}")
        return self._board[col][row]

    def legal_moves(self) -> list[int]:
        """Return columns that are not full, or [] when input is closed."""
        if not self.accepting_input:
            return []
        return [c for c in range(COLUMNS) if self._drop_row(c) is not None]

    def render(self) -> str:
        """Render ASCII board, top row first, with column numbers."""
        symbols = {None: " ", 1: "1", 2: "2"}
        lines = ["  " + "   ".join(f"{c}" for c in range(COLUMNS))]
        lines.append("+---" * COLUMNS + "+")
        for r in range(ROWS - 1, -1, -1):
            cells = "| " + " | ".join(
                symbols[self._board[c][r]] for c in range(COLUMNS)
            ) + " |"
            lines.append(f"{cells}  {r}")
            lines.append("+---" * COLUMNS + "+")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _init_board(self) -> None:
        self._board = [[None] * ROWS for _ in range(COLUMNS)]

    def _validate_position(self, position: Any) -> ValidationResult:
        if not self._is_index(position) or not (0 <= position < COLUMNS):
            return ValidationResult(
                legal=False,
                reason=f"Column must be an integer 0-6. Got: {position!r}.",
                violation=IllegalMove.OUT_OF_BOUNDS,
            )
        if self._drop_row(position) is None:
            return ValidationResult(
                legal=False,
                reason=f"Column {position} is full.",
                violation=IllegalMove.COLUMN_FULL,
            )
        return ValidationResult(legal=True)

    def _place(self, position: int, player: int) -> tuple[int, int]:
        row = self._drop_row(position)
        self._board[position][row] = player
        return (position, row)

    def _drop_row(self, col: int) -> int | None:
        """Find the lowest empty row in a column (gravity)."""
        for r in range(ROWS):
            if self._board[col][r] is None:
                return r
        return None

    def _winning_line_through(self, cell: tuple[int, int], player: int) -> tuple:
        """Scan the four axes through ``cell``; first run of 4+ wins."""
        for dx, dy in _AXES:
            forward = self._run(cell, dx, dy, player)
            backward = self._run(cell, -dx, -dy, player)
            if 1 + len(forward) + len(backward) >= CONNECT:
                return tuple(reversed(backward)) + (cell,) + tuple(forward)
        return ()

    def _run(self, cell: tuple[int, int], dx: int, dy: int, player: int) -> list:
        """Collect up to 3 consecutive ``player`` cells stepping from ``cell``."""
        col, row = cell
        run = []
        for step in range(1, CONNECT):
            x = col + dx * step
            y = row + dy * step
            if not (0 <= x < COLUMNS and 0 <= y < ROWS):
                break
            if self._board[x][y] != player:
                break
            run.append((x, y))
        return run

    def _board_full(self) -> bool:
        return all(self._board[c][ROWS - 1] is not None for c in range(COLUMNS))

    def _board_snapshot(self) -> list:
        return [column[:] for column in self._board]
