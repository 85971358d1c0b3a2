"""Tests for GameState move application, captures and win detection."""

import numpy as np
import pytest

from errors import GameOverError, InvalidMoveError
from game import GameState, CAPTURES_TO_WIN
from rules import BLACK, WHITE, EMPTY, BOARD_SIZE, DIRECTIONS


def snapshot(s: GameState):
    return (s.board.copy(), s.black_captures, s.white_captures, s.next_player,
            s.finished, s.top_left, s.bottom_right, s.move_count)


def assert_same(a, b):
    assert np.array_equal(a[0], b[0])
    assert a[1:] == b[1:]


class TestNewGame:
    def test_initial_state(self, state):
        assert state.board.shape == (BOARD_SIZE * BOARD_SIZE,)
        assert not state.board.any()
        assert state.black_captures == 0
        assert state.white_captures == 0
        assert state.next_player == WHITE
        assert state.finished == EMPTY
        assert state.relevant_coords() == []

    def test_index_coord_bijection(self):
        for index in range(BOARD_SIZE * BOARD_SIZE):
            coord = GameState.index_to_coord(index)
            assert GameState.coord_to_index(coord) == index
        assert GameState.index_to_coord(BOARD_SIZE + 2) == (2, 1)

    def test_coord_to_index_off_board(self):
        with pytest.raises(InvalidMoveError):
            GameState.coord_to_index((BOARD_SIZE, 0))


class TestMoveApplication:
    @pytest.mark.parametrize("coord", [(-1, 0), (0, -1), (BOARD_SIZE, 0), (0, BOARD_SIZE), (25, 25)])
    def test_off_board_move_rejected_without_change(self, state, coord):
        state.make_play((9, 9))
        before = snapshot(state)
        with pytest.raises(InvalidMoveError):
            state.make_play(coord)
        assert_same(snapshot(state), before)

    def test_occupied_cell_rejected_without_change(self, state):
        state.make_play((9, 9))
        before = snapshot(state)
        with pytest.raises(InvalidMoveError, match="Could not place piece at 9, 9"):
            state.make_play((9, 9))
        assert_same(snapshot(state), before)

    def test_invalid_move_is_a_value_error(self, state):
        state.make_play((0, 0))
        with pytest.raises(ValueError):
            state.make_play((0, 0))

    def test_players_alternate_on_successful_moves_only(self, state):
        assert state.next_player == WHITE
        state.make_play((9, 9))
        assert state.next_player == BLACK
        with pytest.raises(InvalidMoveError):
            state.make_play((9, 9))
        assert state.next_player == BLACK
        state.make_play((10, 9))
        assert state.next_player == WHITE
        assert state.board[9 + 9 * BOARD_SIZE] == WHITE
        assert state.board[10 + 9 * BOARD_SIZE] == BLACK

    def test_two_opening_moves(self, state):
        assert state.make_play((9, 9)) is False
        assert state.make_play((10, 9)) is False
        assert state.next_player == WHITE
        assert np.count_nonzero(state.board) == 2
        assert state.black_captures == 0
        assert state.white_captures == 0
        assert state.finished == EMPTY
        assert state.move_count == 2
        assert state.last_move == (10, 9)

    def test_is_empty_predicate(self, state):
        state.make_play((3, 4))
        assert not state.is_empty((3, 4))
        assert state.is_empty((4, 3))
        assert not state.is_empty((-1, 4))
        assert not state.is_empty((3, BOARD_SIZE))


class TestDirtyRegion:
    def test_region_expands_with_margin(self, state):
        state.make_play((2, 10))
        assert state.top_left == (1, 9)
        assert state.bottom_right == (3, 11)

    def test_region_clamped_to_board(self, state):
        state.make_play((0, 0))
        assert state.top_left == (0, 0)
        assert state.bottom_right == (1, 1)
        state.make_play((18, 18))
        assert state.top_left == (0, 0)
        assert state.bottom_right == (18, 18)

    def test_region_never_shrinks(self, state):
        state.make_play((5, 5))
        state.make_play((12, 3))
        state.make_play((7, 7))
        assert state.top_left == (4, 2)
        assert state.bottom_right == (13, 8)


class TestCaptures:
    def test_flanked_pair_is_captured(self, make_state):
        s = make_state(black=[(3, 0)], white=[(1, 0), (2, 0)], next_player=BLACK)
        assert s.make_play((0, 0)) is False
        assert s.get_piece((1, 0)) == EMPTY
        assert s.get_piece((2, 0)) == EMPTY
        assert s.get_piece((0, 0)) == BLACK
        assert s.get_piece((3, 0)) == BLACK
        assert s.black_captures == 1
        assert s.white_captures == 0

    def test_white_captures_black_pair(self, make_state):
        s = make_state(black=[(5, 6), (5, 7)], white=[(5, 8)], next_player=WHITE)
        s.make_play((5, 5))
        assert s.white_captures == 1
        assert s.get_piece((5, 6)) == EMPTY
        assert s.get_piece((5, 7)) == EMPTY

    @pytest.mark.parametrize("dx,dy", [tuple(d) for d in DIRECTIONS.tolist()])
    def test_capture_in_every_direction(self, make_state, dx, dy):
        x, y = 9, 9
        s = make_state(
            black=[(x + 3 * dx, y + 3 * dy)],
            white=[(x + dx, y + dy), (x + 2 * dx, y + 2 * dy)],
            next_player=BLACK,
        )
        s.make_play((x, y))
        assert s.black_captures == 1
        assert np.count_nonzero(s.board) == 2

    def test_three_stones_are_not_captured(self, make_state):
        s = make_state(black=[(4, 0)], white=[(1, 0), (2, 0), (3, 0)], next_player=BLACK)
        s.make_play((0, 0))
        assert s.black_captures == 0
        assert np.count_nonzero(s.board) == 5

    def test_single_stone_is_not_captured(self, make_state):
        s = make_state(black=[(2, 0)], white=[(1, 0)], next_player=BLACK)
        s.make_play((0, 0))
        assert s.black_captures == 0
        assert s.get_piece((1, 0)) == WHITE

    def test_own_pair_is_not_captured(self, make_state):
        s = make_state(black=[(1, 0), (2, 0)], white=[(3, 0)], next_player=BLACK)
        s.make_play((0, 0))
        assert s.black_captures == 0
        assert s.white_captures == 0

    def test_pair_against_board_edge_is_safe(self, make_state):
        s = make_state(white=[(17, 0), (18, 0)], next_player=BLACK)
        s.make_play((16, 0))
        assert s.black_captures == 0

    def test_multiple_captures_in_one_move(self, make_state):
        s = make_state(
            black=[(8, 5), (2, 5), (5, 8)],
            white=[(6, 5), (7, 5), (4, 5), (3, 5), (5, 6), (5, 7)],
            next_player=BLACK,
        )
        s.make_play((5, 5))
        assert s.black_captures == 3
        assert np.count_nonzero(s.board == WHITE) == 0


class TestWinDetection:
    @pytest.mark.parametrize("dx,dy", [tuple(d) for d in DIRECTIONS.tolist()])
    def test_five_in_a_row_every_direction(self, make_state, dx, dy):
        s = make_state(black=[(9 + i * dx, 9 + i * dy) for i in range(1, 5)], next_player=BLACK)
        assert s.make_play((9, 9)) is True
        assert s.finished == BLACK
        assert s.winner == BLACK
        assert s.next_player == WHITE

    def test_four_in_a_row_does_not_win(self, make_state):
        s = make_state(black=[(1, 3), (2, 3), (3, 3)], next_player=BLACK)
        assert s.make_play((0, 3)) is False
        assert s.finished == EMPTY

    def test_line_played_out_by_alternating_moves(self, state):
        moves = [(0, 0), (0, 5), (1, 0), (1, 5), (2, 0), (2, 5), (3, 0), (3, 5)]
        for move in moves:
            assert state.make_play(move) is False
        assert state.make_play((4, 0)) is True
        assert state.finished == WHITE

    def test_line_detected_only_from_end_stone(self, make_state):
        # The check walks outward from the placed stone in one direction at a time
        # (deliberate, see "Line detection" under Open questions in DESIGN.md)
        s = make_state(black=[(0, 5), (1, 5), (3, 5), (4, 5)], next_player=BLACK)
        assert s.make_play((2, 5)) is False

    def test_no_moves_after_game_over(self, make_state):
        s = make_state(white=[(1, 1), (2, 2), (3, 3), (4, 4)], next_player=WHITE)
        assert s.make_play((0, 0)) is True
        before = snapshot(s)
        with pytest.raises(GameOverError):
            s.make_play((10, 10))
        assert_same(snapshot(s), before)

    def test_fifth_capture_wins(self, make_state):
        s = make_state(black=[(3, 0)], white=[(1, 0), (2, 0)], next_player=BLACK)
        s.black_captures = CAPTURES_TO_WIN - 1
        assert s.make_play((0, 0)) is True
        assert s.black_captures == CAPTURES_TO_WIN
        assert s.finished == BLACK

    def test_line_and_capture_win_together(self, make_state):
        s = make_state(
            black=[(1, 10), (2, 10), (3, 10), (4, 10), (0, 13)],
            white=[(0, 11), (0, 12)],
            next_player=BLACK,
        )
        s.black_captures = CAPTURES_TO_WIN - 1
        assert s.make_play((0, 10)) is True
        assert s.finished == BLACK
        assert s.black_captures == CAPTURES_TO_WIN
        with pytest.raises(GameOverError):
            s.make_play((9, 9))

    def test_capture_threshold_is_attributed_to_mover(self, make_state):
        """The threshold check does not look at whose counter reached five.

        In real play only the mover's counter can grow, and the game stops the
        moment either counter hits five, so the other side never sits at five.
        A hand-built position where it does still credits the mover.
        """
        s = make_state(next_player=BLACK)
        s.white_captures = CAPTURES_TO_WIN
        assert s.make_play((9, 9)) is True
        assert s.finished == BLACK


class TestClone:
    def test_clone_is_independent(self, state):
        state.make_play((9, 9))
        copy = state.clone()
        copy.make_play((10, 10))
        assert state.get_piece((10, 10)) == EMPTY
        assert state.next_player == BLACK
        assert copy.next_player == WHITE
        assert state.bottom_right == (10, 10)
        assert copy.bottom_right == (11, 11)

    def test_same_moves_give_same_state(self, make_state):
        original = make_state(black=[(3, 0)], white=[(1, 0), (2, 0)], next_player=WHITE)
        copy = original.clone()
        moves = [(9, 9), (0, 0), (10, 9), (5, 5), (11, 9)]
        for move in moves:
            original.make_play(move)
            copy.make_play(move)
        assert_same(snapshot(original), snapshot(copy))
        assert copy.black_captures == 1


class TestRender:
    def test_render_shows_stones_and_captures(self, state):
        state.make_play((0, 0))
        state.make_play((1, 0))
        state.white_captures = 2
        state.black_captures = 1
        text = str(state)
        assert ' a  b  c ' in text
        assert '│██│[]│' in text
        assert 'White Captures: 4/10      Black Captures: 2/10' in text
        assert 'Next: White' in text

    def test_render_shows_last_move(self, state):
        assert 'Last move' not in state.render()
        state.make_play((9, 9))
        state.make_play((2, 15))
        assert 'Last move: c15' in state.render()

    def test_captures_by_player(self, make_state):
        s = make_state(black=[(3, 0)], white=[(1, 0), (2, 0)], next_player=BLACK)
        s.make_play((0, 0))
        assert s.captures(BLACK) == 1
        assert s.captures(WHITE) == 0

    def test_render_has_one_line_per_row(self, state):
        rows = [line for line in state.render().splitlines() if line.startswith('│')]
        assert len(rows) == BOARD_SIZE
        assert rows[-1].endswith('18')
