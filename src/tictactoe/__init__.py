"""Tic-tac-toe package exposing game logic, the minimax AI, and the web application."""

from .ai import Difficulty, MinimaxAI, choose_move, score
from .game import Outcome, TicTacToeGame, evaluate
from .ui import app

__all__ = [
    "Difficulty",
    "MinimaxAI",
    "Outcome",
    "TicTacToeGame",
    "app",
    "choose_move",
    "evaluate",
    "score",
]
