"""
Constants for the reference m,n,k grid game.

Cells hold 0 when empty and the occupying side otherwise. The first player
is X (side 1) and the second is O (side 2).
"""
from typing import Dict, Final


EMPTY: Final[int] = 0
DRAW: Final[int] = 0

PLAYER_X: Final[int] = 1
PLAYER_O: Final[int] = 2

NUM_PLAYERS: Final[int] = 2

# Classic tic-tac-toe
DEFAULT_ROWS: Final[int] = 3
DEFAULT_COLUMNS: Final[int] = 3
DEFAULT_TARGET: Final[int] = 3

# Symbols for terminal display
CELL_SYMBOLS: Final[Dict[int, str]] = {
    EMPTY: ".",
    PLAYER_X: "X",
    PLAYER_O: "O",
}

# Row/column steps of the four line directions
DIRECTIONS: Final = ((0, 1), (1, 0), (1, 1), (1, -1))
