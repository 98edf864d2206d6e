"""
MCTS collaborators for the reference grid game.

This module plugs the grid game into the search engine:
- GridMove: a stone placement with an optional evaluation
- GridMoveGenerator: proposes every empty cell as a child move
- GridMoveEvaluator: applies moves and plays random moves during rollouts
- RandomPlayer: a baseline opponent
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from mcts_ai.core.board import empty_cells
from mcts_ai.core.constants import DRAW, NUM_PLAYERS
from mcts_ai.core.game import GameEngine
from mcts_ai.mcts.agent import MCTSAgent
from mcts_ai.mcts.config import MCTSConfig
from mcts_ai.mcts.errors import RuleViolation
from mcts_ai.mcts.interfaces import Evaluator, Expander, Move


@dataclass(frozen=True)
class GridMove(Move):
    """Placement of a stone for `side` at (row, col)."""
    row: int
    col: int
    side: int
    score: float = 0.0

    def evaluation(self) -> float:
        return self.score

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


class GridMoveGenerator(Expander):
    """Lists every empty cell, in row-major order, as a neutral move."""

    def expand(self, board: np.ndarray, side: int) -> List[Move]:
        return [GridMove(row, col, side) for row, col in empty_cells(board)]


class GridMoveEvaluator(Evaluator):
    """
    Rules collaborator backed by a GameEngine.

    The random generator belongs to the caller. Two searches running at the
    same time must not share one evaluator.
    """

    def __init__(self, engine: GameEngine, rng: Optional[np.random.Generator] = None):
        """
        Initialize the evaluator.

        Args:
            engine: Rules of the game
            rng: Random generator used for rollout moves
        """
        self.engine = engine
        self.rng = rng if rng is not None else np.random.default_rng()

    def random_move(self, board: np.ndarray, side: int) -> Optional[Move]:
        cells = empty_cells(board)
        if not cells:
            return None
        row, col = cells[self.rng.integers(len(cells))]
        return GridMove(row, col, side)

    def apply_move(self, board: np.ndarray, side: int, move: Move) -> Tuple[bool, int]:
        if not isinstance(move, GridMove):
            raise RuleViolation(f"unsupported move type {type(move).__name__}", side=side, move=move)

        game_over, winner = self.engine.evaluate(board, side, move.row, move.col)
        # A game won by someone other than the mover leaves the board as is
        if game_over and winner != DRAW and winner != side:
            return game_over, winner

        board[move.row, move.col] = side
        return game_over, winner

    def next_player(self, side: int) -> int:
        return NUM_PLAYERS + 1 - side

    def prev_player(self, side: int) -> int:
        return NUM_PLAYERS + 1 - side


class RandomPlayer:
    """Player picking a uniformly random empty cell."""

    def __init__(self, rng: Optional[np.random.Generator] = None, name: str = "Random"):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.name = name

    def select_action(self, board: np.ndarray, side: int) -> GridMove:
        cells = empty_cells(board)
        if not cells:
            raise ValueError(f"No valid moves for side {side}")
        row, col = cells[self.rng.integers(len(cells))]
        return GridMove(row, col, side)


def create_mcts_agent(
    engine: GameEngine,
    config: Optional[MCTSConfig] = None,
    seed: Optional[int] = None,
    name: str = "MCTS Agent",
    verbose: bool = False
) -> MCTSAgent:
    """
    Create an MCTS agent for the grid game with its own random generator.

    Args:
        engine: Rules of the game
        config: Search configuration
        seed: Seed for the agent's rollout generator
        name: Name of the agent
        verbose: Whether the agent prints search summaries

    Returns:
        MCTSAgent
    """
    evaluator = GridMoveEvaluator(engine, np.random.default_rng(seed))
    return MCTSAgent(
        evaluator=evaluator,
        expander=GridMoveGenerator(),
        config=config,
        name=name,
        verbose=verbose
    )
