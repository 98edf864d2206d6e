"""
Search tree storage for Monte Carlo Tree Search.

This module defines the TreeNode class, which holds one reached position and
its statistics, and the SearchTree class, which owns every node of a single
search in an arena. Nodes refer to each other by arena index: a node owns
its children's indices, and keeps its parent's index only for walking back
up the tree during seeding and backpropagation.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import numpy as np

from mcts_ai.mcts.interfaces import Move


@dataclass(eq=False)
class TreeNode:
    """
    A node in the Monte Carlo Tree Search.

    `side` is the player whose move produced this node. The root uses the
    player preceding the side the search was asked to move for.
    """
    index: int
    board: np.ndarray
    side: int
    move: Optional[Move] = None
    parent: Optional[int] = None
    depth: int = 0

    # Statistics
    visits: int = 0
    win_score: float = 0.0

    # Terminal state, fixed when the node is created
    game_over: bool = False
    winner: int = 0

    children: List[int] = field(default_factory=list)
    expanded: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def is_terminal(self) -> bool:
        """Check if this node's board ends the game."""
        return self.game_over

    def has_children(self) -> bool:
        return bool(self.children)

    def mean_score(self) -> float:
        """Average win score per visit (0.0 for an unvisited node)."""
        if self.visits == 0:
            return 0.0
        return self.win_score / self.visits

    def __str__(self) -> str:
        return (f"TreeNode(index={self.index}, side={self.side}, "
                f"depth={self.depth}, visits={self.visits}, "
                f"score={self.win_score:.2f}, children={len(self.children)}, "
                f"game_over={self.game_over}, winner={self.winner})")


class SearchTree:
    """
    Arena of tree nodes for one search call.

    Nodes are only ever appended, so an index stays valid for the lifetime
    of the tree. Every board stored in the tree is a private copy.
    """

    def __init__(self):
        self._nodes: List[TreeNode] = []

    def add_root(self, board: np.ndarray, side: int) -> TreeNode:
        """
        Create the root node.

        Args:
            board: Starting position (copied)
            side: Side preceding the one to move

        Returns:
            The root node
        """
        if self._nodes:
            raise ValueError("Search tree already has a root")

        root = TreeNode(index=0, board=np.array(board, dtype=int, copy=True), side=side)
        self._nodes.append(root)
        return root

    @property
    def root(self) -> TreeNode:
        if not self._nodes:
            raise ValueError("Search tree has no root")
        return self._nodes[0]

    def new_child(self, parent: TreeNode, side: int, move: Move) -> TreeNode:
        """
        Allocate a child of `parent` without attaching it.

        The child gets its own copy of the parent's board. It becomes part of
        the tree only once passed to `attach`.

        Args:
            parent: Node the move is played from
            side: Side making the move
            move: Move producing the child

        Returns:
            Detached child node
        """
        return TreeNode(
            index=-1,
            board=parent.board.copy(),
            side=side,
            move=move,
            parent=parent.index,
            depth=parent.depth + 1,
        )

    def attach(self, child: TreeNode) -> TreeNode:
        """
        Store a node created by `new_child` and link it to its parent.

        Args:
            child: Detached child node

        Returns:
            The same node, now addressable by index
        """
        if child.parent is None or child.index >= 0:
            raise ValueError("Only detached child nodes can be attached")

        parent = self._nodes[child.parent]
        child.index = len(self._nodes)
        self._nodes.append(child)
        parent.children.append(child.index)
        return child

    def add_child(self, parent: TreeNode, side: int, move: Move) -> TreeNode:
        """Allocate and attach a child in one step."""
        return self.attach(self.new_child(parent, side, move))

    def node(self, index: int) -> TreeNode:
        return self._nodes[index]

    def parent(self, node: TreeNode) -> Optional[TreeNode]:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def children(self, node: TreeNode) -> Iterator[TreeNode]:
        """Iterate over a node's children in expansion order."""
        for index in node.children:
            yield self._nodes[index]

    def first_child(self, node: TreeNode) -> Optional[TreeNode]:
        if not node.children:
            return None
        return self._nodes[node.children[0]]

    def path_to_root(self, node: TreeNode) -> Iterator[TreeNode]:
        """
        Walk from a node up to the root, both inclusive.

        Args:
            node: Starting node

        Yields:
            The node, its parent, and so on up to the root
        """
        current: Optional[TreeNode] = node
        while current is not None:
            yield current
            current = self.parent(current)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self._nodes)
