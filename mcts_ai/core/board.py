"""
Board helpers for the reference grid game.

A board is a 2D numpy integer array. These helpers never mutate their input
except where stated.
"""
from typing import List, Sequence, Tuple, Union

import numpy as np

from mcts_ai.core.constants import EMPTY, CELL_SYMBOLS


def create_board(rows: int, columns: int) -> np.ndarray:
    """Create an empty board."""
    return np.full((rows, columns), EMPTY, dtype=int)


def copy_board(board: Union[np.ndarray, Sequence[Sequence[int]]]) -> np.ndarray:
    """
    Copy a board into a new array.

    Accepts nested lists as well, so callers may keep plain Python grids.
    """
    return np.array(board, dtype=int, copy=True)


def empty_cells(board: np.ndarray) -> List[Tuple[int, int]]:
    """
    List the empty cells of a board in row-major order.

    Args:
        board: Board to scan

    Returns:
        List of (row, column) pairs
    """
    return [(int(r), int(c)) for r, c in np.argwhere(board == EMPTY)]


def is_full(board: np.ndarray) -> bool:
    return not np.any(board == EMPTY)


def board_to_string(board: np.ndarray) -> str:
    """
    Render a board as text, one row per line.

    Returns:
        Board with column indices on top and row indices on the left
    """
    rows, columns = board.shape
    width = len(str(max(rows, columns) - 1))
    header = " " * (width + 1) + " ".join(str(c).rjust(width) for c in range(columns))
    lines = [header]
    for r in range(rows):
        cells = " ".join(CELL_SYMBOLS.get(int(v), str(int(v))).rjust(width) for v in board[r])
        lines.append(f"{str(r).rjust(width)} {cells}")
    return "\n".join(lines)
