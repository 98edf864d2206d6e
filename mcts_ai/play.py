#!/usr/bin/env python
"""
Interactive grid game interface for playing against AI agents.

This script provides a command-line interface for playing tic-tac-toe style
m,n,k games against a random player or an MCTS agent.

Example usage:
    # Classic tic-tac-toe against MCTS, human moves first
    python -m mcts_ai.play --first

    # 4x4 board with 3 in a row, half a second per MCTS move
    python -m mcts_ai.play --rows 4 --columns 4 --target 3 --duration 0.5
"""
import argparse
import os
import sys

import numpy as np

from mcts_ai.core.board import empty_cells
from mcts_ai.core.collaborators import GridMove, RandomPlayer, create_mcts_agent
from mcts_ai.core.constants import PLAYER_X, PLAYER_O, CELL_SYMBOLS
from mcts_ai.core.game import Game, GameEngine, GameResult
from mcts_ai.mcts.config import MCTSConfig
from mcts_ai.utils import setup_logging


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    YELLOW = "\033[93m"
    DIM = "\033[90m"

    @staticmethod
    def side_color(side: int) -> str:
        """Get ANSI color code for a side."""
        if side == PLAYER_X:
            return Colors.BLUE
        elif side == PLAYER_O:
            return Colors.RED
        else:
            return Colors.DIM


def display_board(board: np.ndarray) -> None:
    """Display the board with colored stones and coordinates."""
    rows, columns = board.shape
    print("\n   " + " ".join(str(c % 10) for c in range(columns)))
    for r in range(rows):
        cells = []
        for v in board[r]:
            side = int(v)
            cells.append(Colors.side_color(side) + CELL_SYMBOLS.get(side, "?") + Colors.RESET)
        print(f"{r:2d} " + " ".join(cells))


class HumanPlayer:
    """Player reading moves from standard input."""

    def __init__(self, name: str = "You"):
        self.name = name

    def select_action(self, board: np.ndarray, side: int) -> GridMove:
        display_board(board)
        legal = set(empty_cells(board))
        while True:
            text = input(f"\nYour move as {CELL_SYMBOLS[side]} (row col): ").strip()
            try:
                row, col = (int(part) for part in text.replace(",", " ").split())
            except ValueError:
                print("Please enter two numbers, e.g. '1 2'.")
                continue

            if (row, col) not in legal:
                print("That cell is not free.")
                continue

            return GridMove(row, col, side)


def parse_args():
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play an m,n,k game against AI agents")

    # Board configuration
    parser.add_argument("--rows", type=int, default=3, help="Board rows")
    parser.add_argument("--columns", type=int, default=3, help="Board columns")
    parser.add_argument("--target", type=int, default=3, help="Stones in a row to win")

    # Opponent configuration
    parser.add_argument("--opponent", type=str, default="mcts",
                        choices=["random", "mcts"],
                        help="Type of AI opponent")

    # MCTS configuration
    parser.add_argument("--duration", type=float, default=1.0,
                        help="Seconds of search per MCTS move")
    parser.add_argument("--iterations", type=int, default=0,
                        help="Iteration cap per MCTS move (0 = time only)")
    parser.add_argument("--max-depth", type=int, default=0,
                        help="Expansion depth limit (0 = unlimited)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    # Game configuration
    parser.add_argument("--first", action="store_true",
                        help="Human player goes first")
    parser.add_argument("--debug", action="store_true",
                        help="Show search information")

    return parser.parse_args()


def create_opponent(args, engine: GameEngine):
    """Create an AI opponent based on command-line arguments."""
    if args.opponent == "random":
        return RandomPlayer(np.random.default_rng(args.seed), name="Random AI")

    config = MCTSConfig(
        duration=args.duration,
        max_iterations=args.iterations,
        max_depth=args.max_depth
    )
    return create_mcts_agent(engine, config, seed=args.seed, name="MCTS AI", verbose=args.debug)


def announce_opponent_move(game: Game, human_side: int, opponent_name: str) -> bool:
    """
    Print the last move if the opponent made it.

    Returns:
        True if a move was announced
    """
    if not game.history:
        return False

    last_side, row, col = game.history[-1]
    if last_side == human_side:
        return False

    print(f"\n{opponent_name} plays ({row}, {col})")
    return True


def play_game(args) -> None:
    """Play one game between the human and the configured opponent."""
    engine = GameEngine(args.rows, args.columns, args.target)
    human = HumanPlayer()
    opponent = create_opponent(args, engine)

    if args.first:
        game = Game(engine, human, opponent)
        human_side = PLAYER_X
    else:
        game = Game(engine, opponent, human)
        human_side = PLAYER_O

    print(f"\n{engine}: {human.name} play {CELL_SYMBOLS[human_side]} "
          f"against {opponent.name}")

    while game.play():
        announce_opponent_move(game, human_side, opponent.name)
    # Final move
    announce_opponent_move(game, human_side, opponent.name)

    display_board(game.board)
    print("\n" + Colors.BOLD + Colors.YELLOW + "=== GAME OVER ===" + Colors.RESET)

    if game.result == GameResult.DRAW:
        print(Colors.BOLD + Colors.YELLOW + "It's a draw!" + Colors.RESET)
    elif game.winner == human_side:
        print(Colors.BOLD + Colors.GREEN + "You win!" + Colors.RESET)
    else:
        print(Colors.BOLD + Colors.RED + f"{opponent.name} wins!" + Colors.RESET)

    print(f"\nTotal moves: {len(game.history)}")


def main():
    """Main function."""
    args = parse_args()
    setup_logging(verbose=args.debug)

    # Set up colored output for Windows
    if os.name == 'nt':
        os.system('color')

    print(Colors.BOLD + Colors.YELLOW + "Welcome to MCTS m,n,k!" + Colors.RESET)
    print("Line up stones before the AI does.")

    try:
        play_game(args)
    except KeyboardInterrupt:
        print("\nGame interrupted by user.")
        sys.exit(0)

    # Ask to play again
    while True:
        play_again = input("\nPlay again? (y/n): ").lower()
        if play_again in ['y', 'yes']:
            play_game(args)
        elif play_again in ['n', 'no']:
            print("Thanks for playing!")
            break
        else:
            print("Please enter 'y' or 'n'.")


if __name__ == "__main__":
    main()
