"""Minimax AI with alpha-beta pruning and a difficulty-weighted random policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union
import logging
import math
import random

from .game import EMPTY, O, Player, TicTacToeGame, empty_cells, evaluate, other_player

logger = logging.getLogger(__name__)

WIN_SCORE = 10


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Chance of ignoring the search and playing a uniformly random legal move
RANDOM_MOVE_PROBABILITY = {
    Difficulty.EASY: 0.70,
    Difficulty.MEDIUM: 0.30,
    Difficulty.HARD: 0.0,
}


def random_move_probability(difficulty: Union[Difficulty, str]) -> float:
    return RANDOM_MOVE_PROBABILITY[Difficulty(difficulty)]


# ---- core search ----


def score(
    board: List[str],
    depth: int,
    maximizing: bool,
    alpha: float = -math.inf,
    beta: float = math.inf,
    player: Player = O,
) -> int:
    """Minimax value of ``board`` from ``player``'s point of view.

    Wins are worth ``10 - depth`` and losses ``depth - 10`` so that faster wins
    and slower losses are preferred. Moves are tried in ascending cell order and
    every placement is undone before the next one, so ``board`` is unchanged
    when this returns.
    """
    result = evaluate(board)
    if result.winner == player:
        return WIN_SCORE - depth
    if result.winner is not None:
        return depth - WIN_SCORE
    if result.tie:
        return 0

    if maximizing:
        value = -math.inf
        for move in empty_cells(board):
            board[move] = player
            try:
                child = score(board, depth + 1, False, alpha, beta, player)
            finally:
                board[move] = EMPTY
            value = max(value, child)
            alpha = max(alpha, child)
            if beta <= alpha:
                break
    else:
        opponent = other_player(player)
        value = math.inf
        for move in empty_cells(board):
            board[move] = opponent
            try:
                child = score(board, depth + 1, True, alpha, beta, player)
            finally:
                board[move] = EMPTY
            value = min(value, child)
            beta = min(beta, child)
            if beta <= alpha:
                break
    return int(value)


def best_move(board: List[str], player: Player = O) -> int:
    """Deterministic optimal move for ``player``; lowest index wins ties."""
    moves = empty_cells(board)
    if not moves:
        raise RuntimeError("No valid moves available")

    best, best_value = moves[0], -math.inf
    for move in moves:
        board[move] = player
        try:
            value = score(board, 0, False, -math.inf, math.inf, player)
        finally:
            board[move] = EMPTY
        if value > best_value:
            best, best_value = move, value
    return best


def choose_move(
    board: List[str],
    difficulty: Union[Difficulty, str],
    player: Player = O,
    rng: Optional[random.Random] = None,
) -> int:
    """Pick ``player``'s next cell on a non-terminal board.

    With the difficulty's random-move probability a legal cell is drawn
    uniformly; otherwise the full search decides. Hard never touches ``rng``.
    """
    if evaluate(board).finished:
        raise ValueError("Game already finished")
    moves = empty_cells(board)
    if not moves:
        raise RuntimeError("No valid moves available")

    source = rng if rng is not None else random
    probability = random_move_probability(difficulty)
    if probability > 0.0 and source.random() < probability:
        move = source.choice(moves)
        logger.debug("Random move %d for %s (%s)", move, player, Difficulty(difficulty).value)
        return move

    move = best_move(board, player)
    logger.debug("Search move %d for %s (%s)", move, player, Difficulty(difficulty).value)
    return move


# ---- shell-facing player ----


@dataclass
class MinimaxAI:
    """Automated opponent bound to one mark and one difficulty.

      - MinimaxAI(player="O", difficulty=Difficulty.MEDIUM)
      - choose(game) -> cell_index
    """

    player: Player = O
    difficulty: Difficulty = Difficulty.MEDIUM
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, game: TicTacToeGame) -> int:
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")
        return choose_move(game.board.copy(), self.difficulty, self.player, self.rng)
