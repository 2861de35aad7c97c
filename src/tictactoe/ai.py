"""Exhaustive minimax search for the computer player (always ``O``).

Terminal positions score ``+1 / depth`` for an ``O`` win, ``-1 / depth`` for
an ``X`` win and ``0`` for a draw, so quicker wins and slower losses rank
higher. The whole remaining tree is searched on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional
import math
import random

from .game import (
    COMPUTER,
    EMPTY,
    HUMAN,
    BOARD_SIZE,
    Board,
    Player,
    TicTacToeGame,
    check_winner,
    empty_cells,
)

CENTER = 4


class SearchResult(NamedTuple):
    move: int
    score: float


def minimax(board: Board, depth: int, maximizing: bool) -> float:
    """Score ``board`` from O's point of view.

    ``depth`` is the ply at which this position was reached. The board is
    mutated while exploring and restored before returning.
    """
    winner = check_winner(board)
    if winner == COMPUTER:
        return 1 / depth
    if winner == HUMAN:
        return -1 / depth

    moves = empty_cells(board)
    if not moves:
        return 0.0

    if maximizing:
        value = -math.inf
        for move in moves:
            board[move] = COMPUTER
            score = minimax(board, depth + 1, False)
            board[move] = EMPTY
            value = max(value, score)
    else:
        value = math.inf
        for move in moves:
            board[move] = HUMAN
            score = minimax(board, depth + 1, True)
            board[move] = EMPTY
            value = min(value, score)
    return value


def search(board: Board) -> SearchResult:
    """Score every empty cell in index order and keep the first best one."""
    moves = empty_cells(board)
    if not moves:
        raise ValueError("No valid moves available")

    best = SearchResult(moves[0], -math.inf)
    for move in moves:
        board[move] = COMPUTER
        score = minimax(board, 1, False)
        board[move] = EMPTY
        # Strict comparison: the earliest candidate keeps ties
        if score > best.score:
            best = SearchResult(move, score)
    return best


def best_move(board: Board) -> int:
    """Return the computer's move for ``board``."""
    # Every opening is a draw, so an empty board would otherwise tie on cell 0
    if len(empty_cells(board)) == BOARD_SIZE:
        return CENTER
    return search(board).move


def random_move(board: Board, rng: Optional[random.Random] = None) -> int:
    """Pick a uniformly random empty cell."""
    moves = empty_cells(board)
    if not moves:
        raise ValueError("No valid moves available")
    return (rng or random).choice(moves)


@dataclass
class MinimaxAI:
    """Computer opponent. Always plays ``O``; there are no strength settings."""

    player: Player = COMPUTER

    def __post_init__(self) -> None:
        if self.player != COMPUTER:
            raise ValueError(f"The computer always plays {COMPUTER}")

    def choose(self, game: TicTacToeGame) -> int:
        if game.is_over():
            raise ValueError("Game already finished")
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")
        # Search on a copy so callers never see intermediate placements
        return best_move(game.board.copy())
