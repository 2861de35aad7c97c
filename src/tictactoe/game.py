"""Core rules for 3x3 tic-tac-toe.

The board helpers are plain functions over a 9-cell list and never raise for
bad input: invalid moves are reported through their return values.
:class:`TicTacToeGame` wraps a board with turn tracking for the web layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Player = str  # "X" or "O"
Board = List[str]

EMPTY = " "
HUMAN: Player = "X"
COMPUTER: Player = "O"
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


@dataclass(frozen=True)
class GameOutcome:
    """Result of a position: a win for one player, a draw, or still running."""

    winner: Optional[Player] = None
    drawn: bool = False

    @classmethod
    def win(cls, player: Player) -> "GameOutcome":
        return cls(winner=player)

    @property
    def in_progress(self) -> bool:
        return self.winner is None and not self.drawn


IN_PROGRESS = GameOutcome()
DRAW = GameOutcome(drawn=True)


# ---------- Board rules ----------


def new_board() -> Board:
    return [EMPTY] * BOARD_SIZE


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


def is_valid_move(board: Board, index: int) -> bool:
    if not isinstance(index, int) or isinstance(index, bool):
        return False
    return 0 <= index < BOARD_SIZE and board[index] == EMPTY


def apply_move(board: Board, index: int, player: Player) -> bool:
    """Place ``player`` on ``index`` if legal; the board is untouched otherwise."""
    if not is_valid_move(board, index):
        return False
    board[index] = player
    return True


def empty_cells(board: Board) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


def winning_line(board: Board) -> Optional[Tuple[int, int, int]]:
    # Rows, then columns, then diagonals
    for line in WINNING_LINES:
        a, b, c = line
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return line
    return None


def check_winner(board: Board) -> Optional[Player]:
    line = winning_line(board)
    if line is None:
        return None
    return board[line[0]]


def is_terminal(board: Board) -> bool:
    return check_winner(board) is not None or not empty_cells(board)


def outcome(board: Board) -> GameOutcome:
    winner = check_winner(board)
    if winner is not None:
        return GameOutcome.win(winner)
    if not empty_cells(board):
        return DRAW
    return IN_PROGRESS


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    board: Board = field(default_factory=new_board)
    current_player: Player = "X"
    winner: Optional[Player] = None
    drawn: bool = False

    # ---- API used by UI & AI ----

    def available_moves(self) -> List[int]:
        if self.is_over():
            return []
        return empty_cells(self.board)

    def is_over(self) -> bool:
        return self.winner is not None or self.drawn

    def play_move(self, index: int) -> None:
        """Apply a legal move for the side to move and hand the turn over."""
        if self.is_over():
            raise ValueError("Game already finished")
        if not apply_move(self.board, index, self.current_player):
            raise ValueError("Cell is not available")

        self._update_state()
        if not self.is_over():
            self.current_player = other_player(self.current_player)

    def outcome(self) -> GameOutcome:
        return outcome(self.board)

    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return winning_line(self.board)

    def clone(self) -> "TicTacToeGame":
        return TicTacToeGame(
            board=self.board.copy(),
            current_player=self.current_player,
            winner=self.winner,
            drawn=self.drawn,
        )

    def reset(self) -> None:
        self.board = new_board()
        self.current_player = "X"
        self.winner = None
        self.drawn = False

    # ---- helpers ----

    def _update_state(self) -> None:
        result = outcome(self.board)
        self.winner = result.winner
        self.drawn = result.drawn
