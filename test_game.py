#!/usr/bin/env python
"""
Tests for the reference grid game and full MCTS games.

This script tests:
1. The m,n,k rules engine
2. The collaborators plugging the game into the search
3. Match flow with random and MCTS players
4. End-to-end self-play on 3x3 and 4x4 boards (3 in a row)

The end-to-end games run a few thousand iterations per move and take a
while; set MCTS_SKIP_SLOW=1 to skip them.
"""
import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import numpy as np

from mcts_ai.core.board import board_to_string, copy_board, create_board, empty_cells, is_full
from mcts_ai.core.collaborators import (
    GridMove, GridMoveEvaluator, GridMoveGenerator, RandomPlayer, create_mcts_agent
)
from mcts_ai.core.constants import DRAW, PLAYER_X, PLAYER_O
from mcts_ai.core.game import Game, GameEngine, GameResult
from mcts_ai.mcts.config import MCTSConfig
from mcts_ai.mcts.errors import RuleViolation
from mcts_ai.play import announce_opponent_move
from mcts_ai.selfplay import run_series


SKIP_SLOW = bool(os.environ.get("MCTS_SKIP_SLOW"))


class ScriptedPlayer:
    """Plays a fixed list of cells."""

    def __init__(self, cells, name: str = "Scripted"):
        self.cells = list(cells)
        self.name = name
        self.boards = []

    def select_action(self, board: np.ndarray, side: int) -> GridMove:
        self.boards.append(board)
        row, col = self.cells.pop(0)
        return GridMove(row, col, side)


class TestGameEngine(unittest.TestCase):
    """Test case for the rules engine."""

    def setUp(self):
        self.engine = GameEngine(3, 3, 3)

    def test_invalid_sizes(self):
        with self.assertRaises(ValueError):
            GameEngine(0, 3, 3)
        with self.assertRaises(ValueError):
            GameEngine(3, 3, 0)
        with self.assertRaises(ValueError):
            GameEngine(3, 3, 4)

    def test_lines(self):
        cases = [
            (np.array([[1, 1, 0], [0, 0, 0], [0, 0, 0]]), (0, 2)),  # row
            (np.array([[1, 0, 0], [1, 0, 0], [0, 0, 0]]), (2, 0)),  # column
            (np.array([[1, 0, 0], [0, 1, 0], [0, 0, 0]]), (2, 2)),  # diagonal
            (np.array([[0, 0, 1], [0, 0, 0], [1, 0, 0]]), (1, 1)),  # anti-diagonal
        ]
        for board, (row, col) in cases:
            self.assertEqual(self.engine.evaluate(board, PLAYER_X, row, col), (True, PLAYER_X))

    def test_no_line(self):
        board = np.array([[1, 2, 0], [0, 0, 0], [0, 0, 0]])
        self.assertEqual(self.engine.evaluate(board, PLAYER_X, 1, 1), (False, DRAW))

    def test_last_cell_draw(self):
        board = np.array([[1, 2, 1], [1, 2, 2], [2, 1, 0]])
        self.assertEqual(self.engine.evaluate(board, PLAYER_X, 2, 2), (True, DRAW))

    def test_win_on_last_cell(self):
        board = np.array([[1, 2, 1], [2, 1, 2], [2, 1, 0]])
        self.assertEqual(self.engine.evaluate(board, PLAYER_X, 2, 2), (True, PLAYER_X))

    def test_evaluate_does_not_mutate(self):
        board = np.array([[1, 1, 0], [2, 2, 0], [0, 0, 0]])
        before = board.copy()
        self.engine.evaluate(board, PLAYER_X, 0, 2)
        np.testing.assert_array_equal(board, before)

    def test_illegal_moves(self):
        board = np.array([[1, 0, 0], [0, 0, 0], [0, 0, 0]])
        with self.assertRaises(RuleViolation):
            self.engine.evaluate(board, PLAYER_O, 0, 0)
        with self.assertRaises(RuleViolation):
            self.engine.evaluate(board, PLAYER_O, 3, 0)
        with self.assertRaises(RuleViolation):
            self.engine.evaluate(board, PLAYER_O, 0, -1)
        with self.assertRaises(RuleViolation):
            self.engine.evaluate(board, 3, 1, 1)
        with self.assertRaises(RuleViolation):
            self.engine.evaluate(np.zeros((4, 4), dtype=int), PLAYER_X, 0, 0)

    def test_longer_board(self):
        engine = GameEngine(4, 4, 3)
        board = np.array([[0, 1, 1, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.assertEqual(engine.evaluate(board, PLAYER_X, 0, 0), (True, PLAYER_X))
        self.assertEqual(engine.evaluate(board, PLAYER_X, 0, 3), (True, PLAYER_X))
        self.assertEqual(engine.evaluate(board, PLAYER_X, 1, 1), (False, DRAW))

    def test_winner_of(self):
        self.assertEqual(self.engine.winner_of(create_board(3, 3)), (False, DRAW))
        board = np.array([[2, 1, 0], [2, 1, 0], [2, 0, 1]])
        self.assertEqual(self.engine.winner_of(board), (True, PLAYER_O))
        full = np.array([[1, 2, 1], [1, 2, 2], [2, 1, 1]])
        self.assertEqual(self.engine.winner_of(full), (True, DRAW))


class TestBoard(unittest.TestCase):
    """Test case for board helpers."""

    def test_helpers(self):
        board = create_board(2, 3)
        self.assertEqual(board.shape, (2, 3))
        self.assertEqual(empty_cells(board), [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)])

        board[0, 1] = PLAYER_X
        self.assertEqual(empty_cells(board)[:2], [(0, 0), (0, 2)])
        self.assertFalse(is_full(board))

        copy = copy_board(board)
        copy[1, 1] = PLAYER_O
        self.assertEqual(board[1, 1], 0)

        self.assertIn("X", board_to_string(board))


class TestCollaborators(unittest.TestCase):
    """Test case for the grid collaborators."""

    def setUp(self):
        self.engine = GameEngine(3, 3, 3)
        self.evaluator = GridMoveEvaluator(self.engine, np.random.default_rng(0))

    def test_generator_lists_empty_cells(self):
        board = np.array([[1, 0, 0], [0, 2, 0], [0, 0, 1]])
        moves = GridMoveGenerator().expand(board, PLAYER_O)
        self.assertEqual([(m.row, m.col) for m in moves],
                         [(0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1)])
        self.assertTrue(all(m.side == PLAYER_O and m.evaluation() == 0.0 for m in moves))

    def test_apply_move_places_stone(self):
        board = create_board(3, 3)
        result = self.evaluator.apply_move(board, PLAYER_X, GridMove(1, 1, PLAYER_X))
        self.assertEqual(result, (False, DRAW))
        self.assertEqual(board[1, 1], PLAYER_X)

    def test_apply_move_other_side_wins(self):
        engine = mock.Mock()
        engine.evaluate.return_value = (True, PLAYER_O)
        evaluator = GridMoveEvaluator(engine, np.random.default_rng(0))

        board = create_board(3, 3)
        result = evaluator.apply_move(board, PLAYER_X, GridMove(0, 0, PLAYER_X))
        self.assertEqual(result, (True, PLAYER_O))
        self.assertEqual(np.count_nonzero(board), 0)

    def test_apply_illegal_move(self):
        board = np.array([[1, 0, 0], [0, 0, 0], [0, 0, 0]])
        with self.assertRaises(RuleViolation):
            self.evaluator.apply_move(board, PLAYER_O, GridMove(0, 0, PLAYER_O))
        self.assertEqual(board[0, 0], PLAYER_X)

    def test_random_move(self):
        board = np.array([[1, 0, 2], [0, 1, 2], [2, 1, 0]])
        free = set(empty_cells(board))
        for _ in range(50):
            move = self.evaluator.random_move(board, PLAYER_X)
            self.assertIn((move.row, move.col), free)
            self.assertEqual(move.side, PLAYER_X)

    def test_random_move_on_full_board(self):
        board = np.array([[1, 2, 1], [1, 2, 2], [2, 1, 1]])
        self.assertIsNone(self.evaluator.random_move(board, PLAYER_X))

    def test_turn_order(self):
        self.assertEqual(self.evaluator.next_player(PLAYER_X), PLAYER_O)
        self.assertEqual(self.evaluator.next_player(PLAYER_O), PLAYER_X)
        for side in (PLAYER_X, PLAYER_O):
            self.assertEqual(self.evaluator.prev_player(self.evaluator.next_player(side)), side)


class TestGame(unittest.TestCase):
    """Test case for match flow."""

    def setUp(self):
        self.engine = GameEngine(3, 3, 3)

    def test_scripted_win(self):
        x = ScriptedPlayer([(0, 0), (0, 1), (0, 2)], name="X")
        o = ScriptedPlayer([(1, 0), (1, 1)], name="O")
        game = Game(self.engine, x, o)

        self.assertEqual(game.result, GameResult.IN_PROGRESS)
        self.assertEqual(game.play_to_end(), PLAYER_X)
        self.assertEqual(game.result, GameResult.WINNER)
        self.assertEqual(game.get_result(), (True, PLAYER_X))
        self.assertEqual(len(game.history), 5)
        self.assertFalse(game.play())
        self.assertEqual(game.get_game_statistics()["winner_name"], "X")

    def test_players_get_board_copies(self):
        x = ScriptedPlayer([(0, 0), (2, 2)])
        o = ScriptedPlayer([(1, 1)])
        game = Game(self.engine, x, o)
        game.play()
        x.boards[0][2, 2] = PLAYER_O
        self.assertEqual(game.board[2, 2], 0)

    def test_illegal_move_raises(self):
        x = ScriptedPlayer([(0, 0)])
        o = ScriptedPlayer([(0, 0)])
        game = Game(self.engine, x, o)
        game.play()
        with self.assertRaises(RuleViolation):
            game.play()

    def test_random_players_finish(self):
        game = Game(self.engine,
                    RandomPlayer(np.random.default_rng(1)),
                    RandomPlayer(np.random.default_rng(2)))
        winner = game.play_to_end()
        self.assertIn(winner, (DRAW, PLAYER_X, PLAYER_O))
        self.assertTrue(game.game_over)
        self.assertLessEqual(len(game.history), 9)

    def test_mcts_beats_blunder(self):
        # O can only stop X at (0, 2)
        board = np.array([[1, 1, 0], [0, 2, 0], [0, 0, 0]])
        config = MCTSConfig(duration=60.0, max_iterations=1500)
        o = create_mcts_agent(self.engine, config, seed=3)
        game = Game(self.engine, ScriptedPlayer([(2, 0)]), o, board=board)
        game.current_side = PLAYER_O
        game.play()
        self.assertEqual(game.history[-1], (PLAYER_O, 0, 2))


class TestPlayCLI(unittest.TestCase):
    """Test case for move announcements in the interactive game."""

    def setUp(self):
        self.engine = GameEngine(3, 3, 3)

    def announce(self, game: Game, human_side: int):
        out = io.StringIO()
        with redirect_stdout(out):
            announced = announce_opponent_move(game, human_side, "Bot")
        return announced, out.getvalue()

    def test_winning_move_is_announced(self):
        human = ScriptedPlayer([(1, 0), (1, 1), (2, 2)])
        bot = ScriptedPlayer([(0, 0), (0, 1), (0, 2)])
        game = Game(self.engine, bot, human)
        game.play_to_end()

        self.assertTrue(game.game_over)
        announced, text = self.announce(game, PLAYER_O)
        self.assertTrue(announced)
        self.assertIn("Bot plays (0, 2)", text)

    def test_own_move_is_not_announced(self):
        game = Game(self.engine, ScriptedPlayer([(0, 0)]), ScriptedPlayer([]))
        self.assertEqual(self.announce(game, PLAYER_X), (False, ""))

        game.play()
        self.assertEqual(self.announce(game, PLAYER_X), (False, ""))


class TestMCTSAgent(unittest.TestCase):
    """Test case for the MCTS agent wrapper."""

    def setUp(self):
        self.engine = GameEngine(3, 3, 3)
        self.agent = create_mcts_agent(
            self.engine, MCTSConfig(duration=60.0, max_iterations=50), seed=0, name="Tester"
        )

    def test_select_action_records_statistics(self):
        move = self.agent.select_action(create_board(3, 3), PLAYER_X)
        self.assertIsInstance(move, GridMove)
        self.assertEqual(move.side, PLAYER_X)

        stats = self.agent.get_last_statistics()
        self.assertEqual(stats["iterations"], 50)
        self.assertEqual(stats["move"], str(move))
        self.assertEqual(len(stats["action_visits"]), 9)
        self.assertEqual(len(self.agent.action_history), 1)
        self.assertTrue(self.agent.get_principal_variation())

        self.agent.reset_statistics()
        self.assertEqual(self.agent.get_last_statistics(), {})
        self.assertEqual(self.agent.action_history, [])

    def test_save_statistics(self):
        self.agent.select_action(create_board(3, 3), PLAYER_X)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "stats.json")
            self.agent.save_statistics(path)
            with open(path) as f:
                data = json.load(f)

        self.assertEqual(data["agent_name"], "Tester")
        self.assertEqual(data["total_actions"], 1)
        self.assertEqual(data["config"]["max_iterations"], 50)


@unittest.skipIf(SKIP_SLOW, "slow end-to-end games")
class TestSelfPlay(unittest.TestCase):
    """End-to-end games between two well-searched MCTS agents."""

    def test_3x3_three_in_a_row_is_a_draw(self):
        engine = GameEngine(3, 3, 3)
        config = MCTSConfig(duration=120.0, max_iterations=5000)
        stats = run_series(engine, 5, config, seed=42)
        self.assertEqual(stats["draws"], stats["games"])
        self.assertEqual(stats["total_moves"], 45)

    def test_4x4_three_in_a_row_first_player_wins(self):
        engine = GameEngine(4, 4, 3)
        config = MCTSConfig(duration=120.0, max_iterations=5000)
        stats = run_series(engine, 5, config, seed=7)
        self.assertEqual(stats["x_wins"], stats["games"])


if __name__ == "__main__":
    unittest.main()
