"""
Collaborator interfaces consumed by the MCTS engine.

The engine never looks at board semantics. It only talks to:
- a Move, which reports its own evaluation score
- an Evaluator, which applies moves, detects game over and defines turn order
- an Expander, which lists candidate moves for a position

Boards are rectangular integer grids (numpy arrays): 0 is an empty cell and
positive integers identify the occupying player.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

import numpy as np


class Move(ABC):
    """
    A move that can be applied to a board.

    The Expander that lists moves may attach an evaluation to each of them,
    which is propagated to the ancestors of the node the move creates.
    """

    @abstractmethod
    def evaluation(self) -> float:
        """
        Self-reported score of the move from the mover's perspective.

        Nominal range is [-1.0, 1.0]: -1.0 is clearly losing, 0.0 is neutral
        or drawn and 1.0 is clearly winning.
        """
        pass


class Evaluator(ABC):
    """Rules collaborator: move application, random moves and turn order."""

    @abstractmethod
    def random_move(self, board: np.ndarray, side: int) -> Optional[Move]:
        """
        Pick a uniformly random legal move for a side.

        Returns:
            A move, or None when the side has no legal move
        """
        pass

    @abstractmethod
    def apply_move(self, board: np.ndarray, side: int, move: Move) -> Tuple[bool, int]:
        """
        Apply a move to the board in place.

        If the move ends the game with a winner other than the mover, the
        board must be left unchanged.

        Args:
            board: Board to mutate
            side: Side making the move
            move: Move to apply

        Returns:
            Tuple of (game over, winner) where winner 0 means a draw

        Raises:
            RuleViolation: If the move is illegal on this board
        """
        pass

    @abstractmethod
    def next_player(self, side: int) -> int:
        """Side that moves after `side`."""
        pass

    @abstractmethod
    def prev_player(self, side: int) -> int:
        """Side that moved before `side`."""
        pass


class Expander(ABC):
    """Move generator: candidate (preferably legal) moves for a position."""

    @abstractmethod
    def expand(self, board: np.ndarray, side: int) -> List[Move]:
        """
        List the moves to add to the tree as children.

        Args:
            board: Board to generate moves for (must not be mutated)
            side: Side to move

        Returns:
            Candidate moves, possibly empty
        """
        pass
