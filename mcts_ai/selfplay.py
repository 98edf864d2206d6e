#!/usr/bin/env python
"""
Self-play series between two MCTS agents.

Games are played one after the other. Each agent gets its own random
generator, so a seeded series is reproducible when the budget is bounded by
iterations rather than time.

Example usage:
    # 3x3 board, 3 in a row: well-searched play should always draw
    python -m mcts_ai.selfplay --games 20 --iterations 3000

    # 4x4 board, 3 in a row: the first player should always win
    python -m mcts_ai.selfplay --rows 4 --columns 4 --games 20 --iterations 3000
"""
import argparse
import logging
import time
from typing import Any, Dict, Optional

from tqdm import tqdm

from mcts_ai.core.collaborators import create_mcts_agent
from mcts_ai.core.constants import PLAYER_X, PLAYER_O
from mcts_ai.core.game import Game, GameEngine
from mcts_ai.mcts.config import MCTSConfig
from mcts_ai.utils import setup_logging

logger = logging.getLogger(__name__)


def run_series(
    engine: GameEngine,
    num_games: int,
    config: Optional[MCTSConfig] = None,
    seed: Optional[int] = None,
    progress: bool = False
) -> Dict[str, Any]:
    """
    Play a series of MCTS-vs-MCTS games.

    Args:
        engine: Rules of the game
        num_games: Number of games to play
        config: Search configuration shared by both agents
        seed: Base seed; game i seeds its agents with seed + 2i and seed + 2i + 1
        progress: Whether to show a progress bar

    Returns:
        Dictionary with win/draw counts, move counts and timing
    """
    config = config or MCTSConfig()
    stats = {
        "games": num_games,
        "x_wins": 0,
        "o_wins": 0,
        "draws": 0,
        "total_moves": 0,
    }

    start_time = time.time()
    for i in tqdm(range(num_games), desc="Self-play", disable=not progress):
        seed_x = None if seed is None else seed + 2 * i
        seed_o = None if seed is None else seed + 2 * i + 1
        player_x = create_mcts_agent(engine, config, seed=seed_x, name="MCTS X")
        player_o = create_mcts_agent(engine, config, seed=seed_o, name="MCTS O")

        game = Game(engine, player_x, player_o)
        winner = game.play_to_end()
        stats["total_moves"] += len(game.history)

        if winner == PLAYER_X:
            stats["x_wins"] += 1
        elif winner == PLAYER_O:
            stats["o_wins"] += 1
        else:
            stats["draws"] += 1
        logger.debug("Game %d finished after %d moves, winner %d",
                     i + 1, len(game.history), winner)

    stats["elapsed_time"] = time.time() - start_time
    stats["average_moves"] = stats["total_moves"] / max(1, num_games)
    return stats


def main():
    """Run a self-play series with command-line arguments."""
    parser = argparse.ArgumentParser(description="Play MCTS agents against each other.")
    parser.add_argument("--rows", type=int, default=3, help="Board rows")
    parser.add_argument("--columns", type=int, default=3, help="Board columns")
    parser.add_argument("--target", type=int, default=3, help="Stones in a row to win")
    parser.add_argument("--games", type=int, default=10, help="Number of games")
    parser.add_argument("--duration", type=float, default=0.2,
                        help="Seconds of search per move")
    parser.add_argument("--iterations", type=int, default=0,
                        help="Iteration cap per move (0 = time only)")
    parser.add_argument("--max-depth", type=int, default=0,
                        help="Expansion depth limit (0 = unlimited)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Log every game")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    engine = GameEngine(args.rows, args.columns, args.target)
    config = MCTSConfig(
        duration=args.duration,
        max_iterations=args.iterations,
        max_depth=args.max_depth
    )

    print(f"{engine}, {args.games} games, {config}")
    stats = run_series(engine, args.games, config, seed=args.seed, progress=True)

    print("\nSeries Summary:")
    print(f"  Duration: {stats['elapsed_time']:.2f} seconds")
    print(f"  X wins: {stats['x_wins']}")
    print(f"  O wins: {stats['o_wins']}")
    print(f"  Draws: {stats['draws']}")
    print(f"  Average moves per game: {stats['average_moves']:.1f}")


if __name__ == "__main__":
    main()
