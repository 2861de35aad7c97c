"""Tic-tac-toe package exposing game rules, the minimax AI, and the web application."""

from .ai import MinimaxAI, best_move
from .game import TicTacToeGame, check_winner, is_terminal
from .ui import app

__all__ = ["TicTacToeGame", "MinimaxAI", "app", "best_move", "check_winner", "is_terminal"]
