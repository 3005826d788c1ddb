import random
import unittest

from game import (
    STRATEGIES,
    THINKING_TIME,
    Board,
    Cell,
    GameState,
    Tier,
    advance_turn,
    apply_move,
    best_move,
    choose_move,
    flips_for,
    legal_moves,
)

EMPTY_ROW = "........"


def make_board(*top_rows):
    rows = list(top_rows) + [EMPTY_ROW] * (8 - len(top_rows))
    return Board.from_rows(rows)


# Black can take the (0,0) corner for one stone or play (4,5) for two.
CORNER_BOARD = (
    ".OX.....",
    EMPTY_ROW,
    EMPTY_ROW,
    EMPTY_ROW,
    "..XOO...",
)

# Black can take the (0,3) edge for one stone or play (4,5) for two.
EDGE_BOARD = (
    EMPTY_ROW,
    "...O....",
    "...X....",
    EMPTY_ROW,
    "..XOO...",
)


class TestTiers(unittest.TestCase):
    def test_given_tier_names_when_parsing_then_enum_or_error(self):
        self.assertIs(Tier.parse("HARD"), Tier.HARD)
        self.assertIs(Tier.parse("easy"), Tier.EASY)
        with self.assertRaises(ValueError):
            Tier.parse("impossible")
        self.assertEqual(set(STRATEGIES), set(Tier))
        self.assertEqual(THINKING_TIME[Tier.EASY], 0.5)
        self.assertEqual(THINKING_TIME[Tier.HARD], 1.5)

    def test_given_no_legal_moves_when_choosing_then_value_error(self):
        board = make_board("X.......")
        for tier in Tier:
            with self.assertRaises(ValueError):
                choose_move(board, Cell.WHITE, tier)


class TestEasy(unittest.TestCase):
    def test_given_seeds_when_choosing_then_legal_and_varied(self):
        board = Board()
        legal = legal_moves(board, Cell.BLACK)
        picks = set()
        for seed in range(20):
            move = choose_move(board, Cell.BLACK, Tier.EASY, random.Random(seed))
            self.assertIn(move, legal)
            picks.add(move)
        self.assertGreater(len(picks), 1)

    def test_given_same_seed_when_choosing_then_reproducible(self):
        board = Board()
        a = choose_move(board, Cell.BLACK, Tier.EASY, random.Random(42))
        b = choose_move(board, Cell.BLACK, Tier.EASY, random.Random(42))
        self.assertEqual(a, b)


class TestNormal(unittest.TestCase):
    def test_given_opening_ties_when_greedy_then_first_in_scan_order(self):
        self.assertEqual(choose_move(Board(), Cell.BLACK, Tier.NORMAL), (2, 3))

    def test_given_bigger_capture_when_greedy_then_takes_it_over_corner(self):
        board = make_board(*CORNER_BOARD)
        self.assertEqual(legal_moves(board, Cell.BLACK), [(0, 0), (4, 5)])
        self.assertEqual(choose_move(board, Cell.BLACK, Tier.NORMAL), (4, 5))

    def test_given_many_positions_when_greedy_then_never_fewer_flips_than_alternatives(self):
        rng = random.Random(5)
        state = GameState()
        checked = 0
        while state.active:
            player = state.current_player
            pick = choose_move(state.board, player, Tier.NORMAL)
            most = max(len(flips_for(state.board, m, player)) for m in legal_moves(state.board, player))
            self.assertEqual(len(flips_for(state.board, pick, player)), most)
            checked += 1
            move = choose_move(state.board, player, Tier.EASY, rng)
            apply_move(state.board, move, player)
            advance_turn(state)
        self.assertGreater(checked, 10)


class TestHard(unittest.TestCase):
    def test_given_corner_available_when_hard_then_corner_even_with_fewer_flips(self):
        board = make_board(*CORNER_BOARD)
        self.assertEqual(choose_move(board, Cell.BLACK, Tier.HARD), (0, 0))

    def test_given_edge_but_no_corner_when_hard_then_edge(self):
        board = make_board(*EDGE_BOARD)
        self.assertEqual(legal_moves(board, Cell.BLACK), [(0, 3), (4, 5)])
        self.assertEqual(choose_move(board, Cell.BLACK, Tier.HARD), (0, 3))
        self.assertEqual(choose_move(board, Cell.BLACK, Tier.NORMAL), (4, 5))

    def test_given_no_border_moves_when_hard_then_falls_back_to_greedy(self):
        self.assertEqual(choose_move(Board(), Cell.BLACK, Tier.HARD), (2, 3))

    def test_given_games_when_hard_moves_then_corner_whenever_one_is_legal(self):
        rng = random.Random(9)
        state = GameState()
        corners = {(0, 0), (0, 7), (7, 0), (7, 7)}
        while state.active:
            player = state.current_player
            legal = legal_moves(state.board, player)
            pick = choose_move(state.board, player, Tier.HARD)
            if corners & set(legal):
                self.assertIn(pick, corners)
            move = choose_move(state.board, player, Tier.EASY, rng)
            apply_move(state.board, move, player)
            advance_turn(state)

    def test_given_hint_and_hard_when_choosing_then_live_board_untouched(self):
        board = make_board(*CORNER_BOARD)
        before = list(board.grid)
        choose_move(board, Cell.BLACK, Tier.HARD)
        best_move(board, Cell.BLACK)
        self.assertEqual(board.grid, before)


if __name__ == '__main__':
    unittest.main(verbosity=2)
