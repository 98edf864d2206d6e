"""
MCTS AI Core Package

This package contains a reference m,n,k grid game used to exercise the
search engine, including:
- Board helpers and constants
- Game rules and match flow
- Collaborators connecting the game to the engine

All core components can be imported directly from this package.
"""

# Game
from mcts_ai.core.game import GameEngine, Game, GameResult

# Board
from mcts_ai.core.board import (
    create_board, copy_board, empty_cells, is_full, board_to_string
)

# Collaborators and players
from mcts_ai.core.collaborators import (
    GridMove, GridMoveGenerator, GridMoveEvaluator,
    RandomPlayer, create_mcts_agent
)

# Constants
from mcts_ai.core.constants import (
    EMPTY, DRAW, PLAYER_X, PLAYER_O,
    DEFAULT_ROWS, DEFAULT_COLUMNS, DEFAULT_TARGET
)

__all__ = [
    # Game
    'GameEngine', 'Game', 'GameResult',

    # Board
    'create_board', 'copy_board', 'empty_cells', 'is_full', 'board_to_string',

    # Collaborators
    'GridMove', 'GridMoveGenerator', 'GridMoveEvaluator',
    'RandomPlayer', 'create_mcts_agent',

    # Constants
    'EMPTY', 'DRAW', 'PLAYER_X', 'PLAYER_O',
    'DEFAULT_ROWS', 'DEFAULT_COLUMNS', 'DEFAULT_TARGET'
]
