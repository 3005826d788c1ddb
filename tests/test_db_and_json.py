import os
import sqlite3
import tempfile
import unittest

from app import ai_from_json, ai_to_json, board_from_json, board_to_json, json_to_state, state_to_json
from game import (
    AIConfig,
    Board,
    Cell,
    GameResult,
    GameState,
    Settings,
    Statistics,
    Tier,
    db_record_game,
    load_settings,
    load_stats,
    record_game,
    reset_stats,
    save_settings,
    save_stats,
)


def _result(black, white, outcome, vs_ai=True):
    winner = None if black == white else (Cell.BLACK if black > white else Cell.WHITE)
    return GameResult(black, white, winner, outcome, vs_ai=vs_ai)


class TestJson(unittest.TestCase):
    def test_given_board_when_roundtrip_json_then_equal(self):
        board = Board()
        board.set(0, 0, Cell.BLACK)
        rows = board_to_json(board)
        self.assertEqual(len(rows), 8)
        self.assertEqual(rows[0][0], -1)
        self.assertEqual(rows[3][3], 1)
        back = board_from_json(rows)
        self.assertEqual(back.grid, board.grid)

        with self.assertRaises(ValueError):
            board_from_json([[0] * 8] * 7)
        with self.assertRaises(ValueError):
            board_from_json([[0] * 7] * 8)
        with self.assertRaises(ValueError):
            board_from_json([[2] * 8] * 8)

    def test_given_state_when_roundtrip_json_then_equal(self):
        s = GameState(board=Board(), current_player=Cell.WHITE, active=True)
        ai = AIConfig(Tier.HARD, Cell.BLACK)
        sj = state_to_json(s, ai)
        self.assertEqual(sj["currentPlayer"], "white")
        self.assertEqual(sj["ai"], {"level": "hard", "side": "black"})

        s2, ai2 = json_to_state(sj)
        self.assertEqual(s2.board.grid, s.board.grid)
        self.assertEqual(s2.current_player, Cell.WHITE)
        self.assertTrue(s2.active)
        self.assertEqual(ai2, ai)

        self.assertIsNone(ai_to_json(None))
        self.assertIsNone(ai_from_json(None))
        with self.assertRaises(ValueError):
            ai_from_json({"level": "hard", "side": "empty"})


class TestStatistics(unittest.TestCase):
    def test_given_wins_then_loss_when_recording_then_streak_tracks_and_resets(self):
        stats = Statistics()
        record_game(stats, _result(40, 24, "win"), Tier.NORMAL, 100.0)
        record_game(stats, _result(50, 14, "win"), Tier.NORMAL, 200.0)
        self.assertEqual(stats.current_streak, 2)
        self.assertEqual(stats.max_streak, 2)
        record_game(stats, _result(20, 44, "loss"), Tier.HARD, 300.0)
        self.assertEqual(stats.current_streak, 0)
        self.assertEqual(stats.max_streak, 2)
        record_game(stats, _result(32, 32, "draw"), Tier.HARD, 0.0)

        self.assertEqual((stats.total_games, stats.wins, stats.losses, stats.draws), (4, 2, 1, 1))
        self.assertEqual(stats.win_rate, 0.5)
        self.assertEqual(stats.total_play_time, 600.0)
        self.assertEqual(stats.average_game_time, 150.0)
        self.assertEqual(stats.highest_score, 50)
        self.assertEqual(stats.ai_stats["normal"], {"wins": 2, "losses": 0})
        self.assertEqual(stats.ai_stats["hard"], {"wins": 0, "losses": 1})
        self.assertEqual(stats.ai_stats["easy"], {"wins": 0, "losses": 0})

    def test_given_two_human_game_when_recording_then_no_win_or_loss(self):
        stats = Statistics(current_streak=3, max_streak=3)
        record_game(stats, _result(64, 0, "black", vs_ai=False), None, 60.0)
        self.assertEqual(stats.total_games, 1)
        self.assertEqual((stats.wins, stats.losses, stats.draws), (0, 0, 0))
        self.assertEqual(stats.current_streak, 3)
        self.assertEqual(stats.perfect_wins, 1)
        self.assertEqual(stats.highest_score, 64)

    def test_given_partial_dict_when_loading_then_defaults_fill_gaps(self):
        stats = Statistics.from_dict({"wins": 3, "ai_stats": {"easy": {"wins": 2}}, "bogus": 1})
        self.assertEqual(stats.wins, 3)
        self.assertEqual(stats.ai_stats["easy"], {"wins": 2, "losses": 0})
        self.assertEqual(stats.ai_stats["hard"], {"wins": 0, "losses": 0})
        self.assertIn("win_rate", stats.to_dict())


class TestSettings(unittest.TestCase):
    def test_given_defaults_when_building_ai_config_then_none_until_ai_mode(self):
        s = Settings()
        self.assertIsNone(s.ai_config())
        s2 = s.update({"game_mode": "ai", "ai_level": "HARD", "ai_player": "Black"})
        self.assertEqual(s2.ai_level, "hard")
        self.assertEqual(s2.ai_player, "black")
        self.assertEqual(s2.ai_config(), AIConfig(Tier.HARD, Cell.BLACK))
        # update() leaves the original alone
        self.assertEqual(s.game_mode, "human")

    def test_given_bad_values_when_validating_then_value_error(self):
        for bad in [{"game_mode": "online"}, {"ai_level": "expert"}, {"ai_player": "empty"}, {"volume": -0.1}]:
            with self.assertRaises(ValueError):
                Settings.from_dict(bad)


class TestDb(unittest.TestCase):
    def test_given_fresh_db_when_loading_then_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            db_path = os.path.join(td, "othello.db")
            self.assertEqual(load_settings(db_path), Settings())
            self.assertEqual(load_stats(db_path), Statistics())

    def test_given_settings_when_saved_then_loaded_back(self):
        with tempfile.TemporaryDirectory() as td:
            db_path = os.path.join(td, "othello.db")
            settings = Settings(game_mode="ai", ai_level="easy", ai_player="black", volume=0.25, sound_enabled=False)
            save_settings(db_path, settings)
            self.assertEqual(load_settings(db_path), settings)

    def test_given_games_when_recorded_then_stats_accumulate_and_reset(self):
        with tempfile.TemporaryDirectory() as td:
            db_path = os.path.join(td, "othello.db")
            db_record_game(db_path, _result(40, 24, "win"), Tier.EASY, 30.0)
            db_record_game(db_path, _result(10, 54, "loss"), Tier.EASY, 90.0)
            stats = load_stats(db_path)
            self.assertEqual(stats.total_games, 2)
            self.assertEqual(stats.max_streak, 1)
            self.assertEqual(stats.current_streak, 0)
            self.assertEqual(stats.average_game_time, 60.0)
            self.assertEqual(stats.ai_stats["easy"], {"wins": 1, "losses": 1})

            # A single row holds the aggregate
            conn = sqlite3.connect(db_path)
            try:
                count = conn.execute("SELECT COUNT(*) FROM statistics").fetchone()[0]
            finally:
                conn.close()
            self.assertEqual(count, 1)

            self.assertEqual(reset_stats(db_path), Statistics())
            self.assertEqual(load_stats(db_path).total_games, 0)

    def test_given_nested_path_when_saving_then_directories_created(self):
        with tempfile.TemporaryDirectory() as td:
            nested = os.path.join(td, "deep", "nest", "file.db")
            save_stats(nested, Statistics(wins=1, total_games=1))
            self.assertTrue(os.path.exists(nested))
            self.assertEqual(load_stats(nested).wins, 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
