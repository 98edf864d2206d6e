"""
Monte Carlo Tree Search (MCTS) algorithm.

This module implements the core MCTS loop with the four standard phases:
1. Selection: descend from the root along the highest UCB1 child
2. Expansion: create a child for every candidate move of the selected leaf
3. Simulation: play a random game from the first new child
4. Backpropagation: update visit counts and win scores up to the root

Expansion also seeds the statistics of every ancestor with the evaluation
each move reports for itself. Both signals end up in the same win score.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple, Union
import logging
import math
import time

import numpy as np

from mcts_ai.mcts.config import MCTSConfig
from mcts_ai.mcts.errors import NoChildrenAtDecision, SearchError
from mcts_ai.mcts.interfaces import Evaluator, Expander, Move
from mcts_ai.mcts.node import SearchTree, TreeNode

logger = logging.getLogger(__name__)


def ucb_score(
    node: TreeNode,
    parent_visits: int,
    exploration_weight: float = math.sqrt(2)
) -> float:
    """
    Calculate the UCB1 score for a child node.

    UCB1 = win_score / visits + exploration_weight * sqrt(ln(parent_visits) / visits)

    Args:
        node: Child node to score
        parent_visits: Visit count of the child's parent
        exploration_weight: Weight of the exploration term

    Returns:
        UCB1 score (infinite for an unvisited node)
    """
    if node.visits == 0:
        return float('inf')

    visits = float(node.visits)
    exploitation = node.win_score / visits
    exploration = math.sqrt(math.log(parent_visits) / visits)
    return exploitation + exploration_weight * exploration


def highest_ucb_child(
    tree: SearchTree,
    node: TreeNode,
    exploration_weight: float = math.sqrt(2)
) -> TreeNode:
    """
    Pick the child of `node` with the highest UCB1 score.

    The first unvisited child is returned right away. Among visited children
    the earliest one wins ties.
    """
    best: Optional[TreeNode] = None
    best_value = -math.inf
    for child in tree.children(node):
        if child.visits == 0:
            return child
        value = ucb_score(child, node.visits, exploration_weight)
        if best is None or value > best_value:
            best = child
            best_value = value

    if best is None:
        raise ValueError("Cannot select child from node with no children")
    return best


def select_node(
    tree: SearchTree,
    root: TreeNode,
    exploration_weight: float = math.sqrt(2)
) -> TreeNode:
    """
    Descend from `root` to the most promising leaf.

    Stops at a terminal node or at a node without children.

    Args:
        tree: Search tree
        root: Node to start from
        exploration_weight: UCB1 exploration parameter

    Returns:
        Selected node
    """
    current = root
    while current.has_children() and not current.is_terminal():
        current = highest_ucb_child(tree, current, exploration_weight)
    return current


def expand_node(
    tree: SearchTree,
    node: TreeNode,
    evaluator: Evaluator,
    expander: Expander,
    max_depth: int = 0
) -> List[TreeNode]:
    """
    Create a child for every candidate move of `node`.

    Nothing happens when the node is terminal, was already expanded, or sits
    at `max_depth` (when `max_depth` > 0). Every move is applied to its own
    copy of the board before any child is attached, so a rules error leaves
    the tree as it was.

    Each attached child then seeds its ancestors, itself included: one visit,
    and its move's evaluation added for ancestors of the child's side and
    subtracted for the others.

    Args:
        tree: Search tree
        node: Node to expand
        evaluator: Rules collaborator
        expander: Move generator
        max_depth: Depth limit (0 = unlimited)

    Returns:
        The new children, in expansion order

    Raises:
        RuleViolation: If the evaluator rejects one of the moves
    """
    if node.is_terminal() or node.expanded:
        return []
    if max_depth > 0 and node.depth >= max_depth:
        return []

    side = evaluator.next_player(node.side)
    moves = expander.expand(node.board, side)

    pending = []
    for move in moves:
        child = tree.new_child(node, side, move)
        game_over, winner = evaluator.apply_move(child.board, side, move)
        if game_over:
            child.game_over = True
            child.winner = winner
        pending.append(child)

    node.expanded = True
    children = []
    for child in pending:
        tree.attach(child)
        seed_statistics(tree, child)
        children.append(child)

    return children


def seed_statistics(tree: SearchTree, child: TreeNode) -> None:
    """
    Propagate a fresh child's move evaluation up to the root.

    Args:
        tree: Search tree
        child: Newly attached child
    """
    score = child.move.evaluation() if child.move is not None else 0.0
    for ancestor in tree.path_to_root(child):
        ancestor.visits += 1
        if ancestor.side == child.side:
            ancestor.win_score += score
        else:
            ancestor.win_score -= score


def first_child_or_itself(tree: SearchTree, node: TreeNode) -> TreeNode:
    """Node to roll out after expanding `node`."""
    if node.is_terminal():
        return node
    child = tree.first_child(node)
    return child if child is not None else node


def simulate(node: TreeNode, evaluator: Evaluator) -> int:
    """
    Play a random game from `node` and report the winner.

    The playout runs on a scratch copy of the node's board, starting with the
    side after `node.side`. A side without any legal move ends the playout
    as a draw.

    Args:
        node: Node to simulate from
        evaluator: Rules collaborator

    Returns:
        Winning side, or 0 for a draw

    Raises:
        RuleViolation: If the evaluator rejects a random move
    """
    if node.is_terminal():
        return node.winner

    board = node.board.copy()
    side = evaluator.next_player(node.side)
    while True:
        move = evaluator.random_move(board, side)
        if move is None:
            return 0
        game_over, winner = evaluator.apply_move(board, side, move)
        if game_over:
            return winner
        side = evaluator.next_player(side)


def backpropagate(tree: SearchTree, node: TreeNode, winner: int) -> None:
    """
    Update statistics from `node` up to the root.

    Every node on the path gains a visit. When there is a winner, nodes of
    the winning side gain 1.0 and the others lose 1.0. Draws only count the
    visit.

    Args:
        tree: Search tree
        node: Node the playout started from
        winner: Playout winner (0 = draw)
    """
    for current in tree.path_to_root(node):
        current.visits += 1
        if winner != 0:
            if current.side == winner:
                current.win_score += 1.0
            else:
                current.win_score -= 1.0


def best_child(tree: SearchTree, node: TreeNode) -> TreeNode:
    """
    Get the most visited child; the first one created wins ties.

    Raises:
        NoChildrenAtDecision: If the node has no children
    """
    best: Optional[TreeNode] = None
    for child in tree.children(node):
        if best is None or child.visits > best.visits:
            best = child

    if best is None:
        raise NoChildrenAtDecision("could not find any children")
    return best


@dataclass
class SearchResult:
    """Outcome of one search call."""
    move: Move
    root_visits: int
    iterations: int
    time_elapsed: float
    node_count: int
    action_visits: Dict[str, int] = field(default_factory=dict)
    action_scores: Dict[str, float] = field(default_factory=dict)
    principal_variation: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def iterations_per_second(self) -> float:
        return self.iterations / max(0.001, self.time_elapsed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "move": str(self.move),
            "root_visits": self.root_visits,
            "iterations": self.iterations,
            "time_elapsed": self.time_elapsed,
            "iterations_per_second": self.iterations_per_second,
            "node_count": self.node_count,
            "action_visits": dict(self.action_visits),
            "action_scores": dict(self.action_scores),
            "principal_variation": list(self.principal_variation),
        }


class MCTS:
    """
    Monte Carlo Tree Search driver.

    Each call to `search` or `run` builds a fresh tree from the given board
    and throws it away on return, so one instance may serve many calls. The
    collaborators are used as given; give every concurrent caller its own
    evaluator when the evaluator holds a random generator.
    """

    def __init__(
        self,
        evaluator: Evaluator,
        expander: Expander,
        config: Optional[MCTSConfig] = None
    ):
        """
        Initialize the search.

        Args:
            evaluator: Rules collaborator
            expander: Move generator
            config: Default budget and exploration settings
        """
        self.evaluator = evaluator
        self.expander = expander
        self.config = config or MCTSConfig()

    def search(
        self,
        board: Union[np.ndarray, List[List[int]]],
        side: int,
        duration: Optional[Union[float, timedelta]] = None,
        max_depth: Optional[int] = None,
        max_iters: Optional[int] = None
    ) -> Tuple[Move, int]:
        """
        Search the best move for `side` on `board`.

        Args:
            board: Current position (never mutated)
            side: Side to move
            duration: Time budget in seconds or as a timedelta
            max_depth: Expansion depth limit (0 or less = unlimited)
            max_iters: Iteration cap (0 or less = bounded by duration only)

        Returns:
            Tuple of (chosen move, root visit count)

        Raises:
            RuleViolation: If a collaborator rejects a move during the search
            NoChildrenAtDecision: If the root could never be expanded
        """
        result = self.run(board, side, duration, max_depth, max_iters)
        return result.move, result.root_visits

    def run(
        self,
        board: Union[np.ndarray, List[List[int]]],
        side: int,
        duration: Optional[Union[float, timedelta]] = None,
        max_depth: Optional[int] = None,
        max_iters: Optional[int] = None
    ) -> SearchResult:
        """
        Run a search and return the chosen move with search statistics.

        Arguments left as None fall back to the instance configuration.
        """
        duration = MCTSConfig.seconds(self.config.duration if duration is None else duration)
        max_depth = self.config.max_depth if max_depth is None else max_depth
        max_iters = self.config.max_iterations if max_iters is None else max_iters
        weight = self.config.exploration_weight

        start_time = time.monotonic()
        tree = SearchTree()
        root = tree.add_root(board, self.evaluator.prev_player(side))

        iterations = 0
        try:
            # Always run at least one iteration
            while iterations == 0 or time.monotonic() - start_time < duration:
                if max_iters > 0 and iterations >= max_iters:
                    break
                iterations += 1

                node = select_node(tree, root, weight)
                expand_node(tree, node, self.evaluator, self.expander, max_depth)
                node = first_child_or_itself(tree, node)
                winner = simulate(node, self.evaluator)
                backpropagate(tree, node, winner)

            chosen = best_child(tree, root)
        except SearchError as e:
            logger.warning("Search for side %d aborted after %d iterations: %s",
                           side, iterations, e)
            raise
        except Exception:
            logger.debug("Search for side %d failed after %d iterations",
                         side, iterations, exc_info=True)
            raise

        elapsed = time.monotonic() - start_time
        result = SearchResult(
            move=chosen.move,
            root_visits=root.visits,
            iterations=iterations,
            time_elapsed=elapsed,
            node_count=len(tree),
        )
        for child in tree.children(root):
            action_str = str(child.move)
            result.action_visits[action_str] = child.visits
            result.action_scores[action_str] = child.mean_score()
        result.principal_variation = [
            (str(move), value) for move, value in get_principal_variation(tree)
        ]

        logger.debug("Side %d: %d iterations in %.3fs, %d nodes, chose %s (%d/%d visits)",
                     side, iterations, elapsed, len(tree), chosen.move,
                     chosen.visits, root.visits)
        return result


def mcts_search(
    board: Union[np.ndarray, List[List[int]]],
    side: int,
    evaluator: Evaluator,
    expander: Expander,
    config: Optional[MCTSConfig] = None
) -> Tuple[Move, Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best move.

    Args:
        board: Current position
        side: Side to move
        evaluator: Rules collaborator
        expander: Move generator
        config: MCTS configuration parameters

    Returns:
        Tuple of (best move, search statistics)
    """
    result = MCTS(evaluator, expander, config).run(board, side)
    return result.move, result.to_dict()


def get_principal_variation(
    tree: SearchTree,
    max_depth: int = 10
) -> List[Tuple[Move, float]]:
    """
    Get the principal variation (most visited path) from the root.

    Args:
        tree: Search tree
        max_depth: Maximum number of moves to follow

    Returns:
        List of (move, mean score) pairs
    """
    result = []
    current = tree.root
    while current.has_children() and len(result) < max_depth:
        current = best_child(tree, current)
        result.append((current.move, current.mean_score()))
    return result
