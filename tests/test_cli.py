import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from game import GameResult, Cell, Tier, db_record_game
from othello_core.cli import _parse_move, main


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self._tmp.name, "othello.db")

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, argv, inputs):
        out = io.StringIO()
        with patch("builtins.input", side_effect=inputs), redirect_stdout(out):
            main(argv + ["--db", self.db_path])
        return out.getvalue()

    def test_given_move_text_when_parsing_then_comma_or_space(self):
        self.assertEqual(_parse_move("2,3"), (2, 3))
        self.assertEqual(_parse_move("2 3"), (2, 3))
        self.assertEqual(_parse_move(" 4 ,5"), (4, 5))
        with self.assertRaises(ValueError):
            _parse_move("23")

    def test_given_ai_game_when_moves_typed_then_ai_replies_and_errors_reported(self):
        text = self._run(["--ai", "normal", "--hint"], ["2,3", "bad", "9,9", "0,0", EOFError()])
        self.assertIn("AI (normal) plays white.", text)
        self.assertIn("AI (white) plays 2,2", text)
        self.assertIn("Could not parse. Try again.", text)
        self.assertIn("Off the board. Try again.", text)
        self.assertIn("Illegal move (no_flips). Try again.", text)
        self.assertIn("Best move: (2, 3)", text)

    def test_given_stored_games_when_stats_flag_then_printed(self):
        db_record_game(self.db_path, GameResult(40, 24, Cell.BLACK, "win", vs_ai=True), Tier.HARD, 120.0)
        text = self._run(["--stats"], [])
        self.assertIn("Games: 1  wins: 1  losses: 0  draws: 0", text)
        self.assertIn("Win rate: 100.0%", text)
        self.assertIn("Highest score: 40", text)


if __name__ == '__main__':
    unittest.main(verbosity=2)
