"""
Monte Carlo Tree Search (MCTS) engine for grid board games.

The engine is game agnostic: it only talks to a rules Evaluator and a move
Expander. Every iteration of the search works in four steps:

1. Selection: starting from the root, follow the child with the highest UCB1
   value until reaching a terminal node or a node without children.
2. Expansion: create a child for every move the Expander proposes, seeding
   the statistics of all ancestors with each move's own evaluation.
3. Simulation: from the first new child, play uniformly random moves until
   the game ends.
4. Backpropagation: update visits and win scores from that child to the root.

When the time or iteration budget runs out, the most visited root child is
the recommended move.
"""

from mcts_ai.mcts.interfaces import Move, Evaluator, Expander
from mcts_ai.mcts.errors import SearchError, RuleViolation, NoChildrenAtDecision
from mcts_ai.mcts.config import MCTSConfig
from mcts_ai.mcts.node import TreeNode, SearchTree
from mcts_ai.mcts.search import (
    MCTS,
    SearchResult,
    mcts_search,
    select_node,
    expand_node,
    simulate,
    backpropagate,
    best_child,
)
from mcts_ai.mcts.agent import MCTSAgent

__all__ = [
    'Move',
    'Evaluator',
    'Expander',
    'SearchError',
    'RuleViolation',
    'NoChildrenAtDecision',
    'MCTSConfig',
    'TreeNode',
    'SearchTree',
    'MCTS',
    'SearchResult',
    'mcts_search',
    'select_node',
    'expand_node',
    'simulate',
    'backpropagate',
    'best_child',
    'MCTSAgent',
]
