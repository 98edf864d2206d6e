"""
MCTS AI - A pure Monte Carlo Tree Search engine for grid board games.

This package provides a game-agnostic MCTS engine driven by pluggable rules
and move-generation collaborators, along with a reference m,n,k game
(tic-tac-toe and its larger variants) to play with it.
"""

__version__ = "0.1.0"
__author__ = "MCTS AI Team"

# Make key components available at package level
from mcts_ai.mcts.search import MCTS
from mcts_ai.mcts.config import MCTSConfig
from mcts_ai.mcts.errors import SearchError, RuleViolation, NoChildrenAtDecision

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
