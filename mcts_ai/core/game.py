"""
Rules and match flow for the reference m,n,k grid game.

Two players take turns placing a stone on an empty cell of a rows x columns
board. The first to line up `target` stones horizontally, vertically or
diagonally wins; a full board without such a line is a draw.

This module defines:
- GameEngine: move validation and game-over detection
- Game: a match between two players on one board
"""
from __future__ import annotations
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple
import time

import numpy as np

from mcts_ai.core.board import create_board, copy_board, is_full
from mcts_ai.core.constants import (
    EMPTY, DRAW, PLAYER_X, PLAYER_O, DIRECTIONS,
    DEFAULT_ROWS, DEFAULT_COLUMNS, DEFAULT_TARGET
)
from mcts_ai.mcts.errors import RuleViolation


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()
    DRAW = auto()


class GameEngine:
    """
    Rules of an m,n,k game.

    The engine is stateless apart from the board geometry, so one engine can
    be shared by any number of games and searches.
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        columns: int = DEFAULT_COLUMNS,
        target: int = DEFAULT_TARGET
    ):
        """
        Initialize the rules.

        Args:
            rows: Number of board rows
            columns: Number of board columns
            target: Stones in a row needed to win

        Raises:
            ValueError: If a size is not positive or the target cannot fit
        """
        if rows <= 0 or columns <= 0:
            raise ValueError("rows and columns must be positive")

        if target <= 0:
            raise ValueError("target must be positive")

        if target > max(rows, columns):
            raise ValueError(f"target {target} does not fit on a {rows}x{columns} board")

        self.rows = rows
        self.columns = columns
        self.target = target

    def new_board(self) -> np.ndarray:
        return create_board(self.rows, self.columns)

    def evaluate(self, board: np.ndarray, side: int, row: int, col: int) -> Tuple[bool, int]:
        """
        Evaluate placing a stone for `side` at (row, col) without placing it.

        Args:
            board: Current board (not mutated)
            side: Side making the move
            row: Target row
            col: Target column

        Returns:
            Tuple of (game over, winner) where winner 0 means a draw

        Raises:
            RuleViolation: If the side is unknown, or the cell is off the
                board or already occupied
        """
        if side not in (PLAYER_X, PLAYER_O):
            raise RuleViolation(f"unknown side {side}", side=side)

        if board.shape != (self.rows, self.columns):
            raise RuleViolation(
                f"board shape {board.shape} does not match {self.rows}x{self.columns}",
                side=side
            )

        if not (0 <= row < self.rows and 0 <= col < self.columns):
            raise RuleViolation(f"cell ({row}, {col}) is off the board", side=side)

        if board[row, col] != EMPTY:
            raise RuleViolation(f"cell ({row}, {col}) is already occupied", side=side)

        if self._completes_line(board, side, row, col):
            return True, side

        # The move fills the last empty cell
        if np.count_nonzero(board == EMPTY) == 1:
            return True, DRAW

        return False, DRAW

    def _completes_line(self, board: np.ndarray, side: int, row: int, col: int) -> bool:
        """Check whether a stone at (row, col) makes `target` in a row."""
        for dr, dc in DIRECTIONS:
            count = 1
            for sign in (1, -1):
                r, c = row + sign * dr, col + sign * dc
                while 0 <= r < self.rows and 0 <= c < self.columns and board[r, c] == side:
                    count += 1
                    r += sign * dr
                    c += sign * dc
            if count >= self.target:
                return True
        return False

    def winner_of(self, board: np.ndarray) -> Tuple[bool, int]:
        """
        Inspect a whole board for a finished game.

        Returns:
            Tuple of (game over, winner)
        """
        for r in range(self.rows):
            for c in range(self.columns):
                side = int(board[r, c])
                if side != EMPTY and self._completes_line(board, side, r, c):
                    return True, side
        return is_full(board), DRAW

    def __str__(self) -> str:
        return f"GameEngine({self.rows}x{self.columns}, target={self.target})"


class Game:
    """
    A match between two players.

    Players must provide a `name` and a `select_action(board, side)` method
    returning a move with `row` and `col` attributes. They receive a copy of
    the board, never the game's own board.
    """

    def __init__(self, engine: GameEngine, player1, player2, board: Optional[np.ndarray] = None):
        """
        Initialize a match.

        Args:
            engine: Rules of the game
            player1: Player moving first (X)
            player2: Player moving second (O)
            board: Optional starting position (copied)
        """
        self.engine = engine
        self.players = {PLAYER_X: player1, PLAYER_O: player2}
        self.board = engine.new_board() if board is None else copy_board(board)

        self.current_side = PLAYER_X
        self.history: List[Tuple[int, int, int]] = []  # (side, row, col)
        self.game_over, self.winner = engine.winner_of(self.board)
        self.start_time = time.time()
        self.end_time: Optional[float] = None

    @property
    def result(self) -> GameResult:
        if not self.game_over:
            return GameResult.IN_PROGRESS
        if self.winner == DRAW:
            return GameResult.DRAW
        return GameResult.WINNER

    def play(self) -> bool:
        """
        Play one turn.

        Returns:
            True while the game goes on, False once it is over

        Raises:
            RuleViolation: If the current player picks an illegal move
        """
        if self.game_over:
            return False

        side = self.current_side
        player = self.players[side]
        move = player.select_action(self.board.copy(), side)

        game_over, winner = self.engine.evaluate(self.board, side, move.row, move.col)
        self.board[move.row, move.col] = side
        self.history.append((side, move.row, move.col))

        if game_over:
            self.game_over = True
            self.winner = winner
            self.end_time = time.time()
            return False

        self.current_side = PLAYER_O if side == PLAYER_X else PLAYER_X
        return True

    def play_to_end(self) -> int:
        """
        Play until the game is over.

        Returns:
            Winner (0 for a draw)
        """
        while self.play():
            pass
        return self.winner

    def get_result(self) -> Tuple[bool, int]:
        """Get (game over, winner)."""
        return self.game_over, self.winner

    def get_game_statistics(self) -> Dict[str, Any]:
        end = self.end_time if self.end_time is not None else time.time()
        return {
            "moves": len(self.history),
            "result": self.result.name,
            "winner": self.winner,
            "winner_name": self.players[self.winner].name if self.winner else None,
            "game_duration": end - self.start_time,
        }
