"""Core rules for a single 3x3 tic-tac-toe board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

X: Player = "X"
O: Player = "O"
# Server-internal marker for an unoccupied cell
EMPTY = " "

BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def other_player(player: Player) -> Player:
    return O if player == X else X


# ---------- Outcome ----------


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating a board.

    ``winner``/``line`` are set for a win, ``tie`` for a full board with no
    line; all three empty means the game is still in progress.
    """

    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None
    tie: bool = False

    @property
    def finished(self) -> bool:
        return self.winner is not None or self.tie

    @property
    def in_progress(self) -> bool:
        return not self.finished


IN_PROGRESS = Outcome()
TIE = Outcome(tie=True)


def evaluate(board: Sequence[str]) -> Outcome:
    """Return the outcome of ``board``; the first matching line in table order wins."""
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")

    for line in WINNING_LINES:
        a, b, c = line
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return Outcome(winner=v, line=line)

    if all(c != EMPTY for c in board):
        return TIE
    return IN_PROGRESS


def empty_cells(board: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    board: List[str] = field(default_factory=lambda: [EMPTY] * BOARD_SIZE)
    current_player: Player = X
    winner: Optional[Player] = None
    winning_line: Optional[Tuple[int, int, int]] = None
    drawn: bool = False

    # ---- API used by UI & AI ----

    @property
    def finished(self) -> bool:
        return self.winner is not None or self.drawn

    def outcome(self) -> Outcome:
        return evaluate(self.board)

    def available_moves(self) -> List[int]:
        if self.finished:
            return []
        return empty_cells(self.board)

    def play_move(self, index: int) -> None:
        """Place the current player's mark at ``index`` and pass the turn."""
        if self.finished:
            raise ValueError("Game already finished")
        if not 0 <= index < BOARD_SIZE:
            raise ValueError(f"Cell index {index} is off the board")
        if self.board[index] != EMPTY:
            raise ValueError("Cell already occupied")

        self.board[index] = self.current_player
        self._update_state()
        self.current_player = other_player(self.current_player)

    def reset(self) -> None:
        self.board = [EMPTY] * BOARD_SIZE
        self.current_player = X
        self.winner = None
        self.winning_line = None
        self.drawn = False

    def clone(self) -> "TicTacToeGame":
        return TicTacToeGame(
            board=self.board.copy(),
            current_player=self.current_player,
            winner=self.winner,
            winning_line=self.winning_line,
            drawn=self.drawn,
        )

    # ---- helpers ----

    def _update_state(self) -> None:
        result = evaluate(self.board)
        self.winner = result.winner
        self.winning_line = result.line
        self.drawn = result.tie
