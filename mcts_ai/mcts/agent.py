"""
Monte Carlo Tree Search agent.

This module provides the MCTSAgent class, a ready-to-use player that runs a
fresh search for every decision and keeps statistics about its searches.
"""
from typing import Any, Dict, List, Optional, Tuple
import json

import numpy as np

from mcts_ai.mcts.config import MCTSConfig
from mcts_ai.mcts.interfaces import Evaluator, Expander, Move
from mcts_ai.mcts.search import MCTS, SearchResult


class MCTSAgent:
    """
    Monte Carlo Tree Search player.

    The agent owns its collaborators. When several agents play at the same
    time, each one needs its own evaluator (and therefore its own random
    generator).
    """

    def __init__(
        self,
        evaluator: Evaluator,
        expander: Expander,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False
    ):
        """
        Initialize an MCTS agent.

        Args:
            evaluator: Rules collaborator
            expander: Move generator
            config: Search budget and exploration settings
            name: Name of the agent
            verbose: Whether to print a summary after every search
        """
        self.config = config or MCTSConfig()
        self.search = MCTS(evaluator, expander, self.config)
        self.name = name
        self.verbose = verbose

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.action_history: List[Tuple[Move, Dict[str, Any]]] = []

    def select_action(self, board: np.ndarray, side: int) -> Move:
        """
        Select a move using Monte Carlo Tree Search.

        Args:
            board: Current position
            side: Side to move

        Returns:
            Selected move
        """
        result = self.search.run(board, side)
        stats = result.to_dict()

        self.last_stats = stats
        self.action_history.append((result.move, stats))

        if self.verbose:
            self._print_search_info(result)

        return result.move

    def _print_search_info(self, result: SearchResult) -> None:
        """
        Print information about the search.

        Args:
            result: Result of the last search
        """
        print(f"\n{self.name} selected: {result.move}")
        print(f"Iterations: {result.iterations}")
        print(f"Time: {result.time_elapsed:.3f}s ({result.iterations_per_second:.1f} it/s)")
        print(f"Nodes: {result.node_count}")
        print(f"Root visits: {result.root_visits}")

        # Print top moves by visit count
        print("\nTop moves:")
        moves_by_visits = sorted(
            result.action_visits.items(),
            key=lambda x: x[1],
            reverse=True
        )
        for i, (move_str, visits) in enumerate(moves_by_visits[:5]):
            score = result.action_scores.get(move_str, 0.0)
            print(f"{i+1}. {move_str} - {visits} visits, {score:.3f} value")

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[str, float]]:
        """
        Get the principal variation (most visited path) from the last search.

        Returns:
            List of (move, value) pairs
        """
        return list(self.last_stats.get("principal_variation", []))

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []

    def save_statistics(self, filename: str) -> None:
        """
        Save statistics to a JSON file.

        Args:
            filename: Name of the file to save to
        """
        history = []
        for move, stats in self.action_history:
            history.append({
                "move": str(move),
                "stats": {k: v for k, v in stats.items() if not isinstance(v, (dict, list))}
            })

        data = {
            "agent_name": self.name,
            "config": self.config.to_dict(),
            "history": history,
            "total_actions": len(self.action_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        return (f"{self.name} (MCTS, {self.config.duration}s, "
                f"{self.config.max_iterations or 'unlimited'} iterations)")
