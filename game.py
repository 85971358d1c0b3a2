"""
Pente Game Environment (five in a row with pair captures)
Fixed 19x19 board, White moves first; five in a row or five captured pairs wins.
"""
import numpy as np
from typing import List, Optional, Tuple

from errors import GameOverError, InvalidMoveError
from rules import (
    BOARD_SIZE, EMPTY, BLACK, WHITE,
    check_captures, check_line, get_piece_safe, is_relevant, relevant_coords,
)

CAPTURES_TO_WIN = 5
COLUMNS = 'abcdefghijklmnopqrs'
PLAYER_NAMES = {BLACK: 'Black', WHITE: 'White'}

Coord = Tuple[int, int]


class GameState:
    """
    Pente game state.
    Board representation (flat, index = x + y * BOARD_SIZE):
        0 = empty
        1 = black
        -1 = white (first player)
    """

    def __init__(self):
        self.reset()

    def reset(self) -> 'GameState':
        """Reset the game to initial state."""
        self.board = np.zeros(BOARD_SIZE * BOARD_SIZE, dtype=np.int8)
        self.black_captures = 0
        self.white_captures = 0
        self.next_player = WHITE
        self.finished = EMPTY  # EMPTY = in progress, otherwise the winner
        # Dirty region, starts inverted so it contains nothing
        self.top_left: Coord = (BOARD_SIZE, BOARD_SIZE)
        self.bottom_right: Coord = (-1, -1)
        self.last_move: Optional[Coord] = None
        self.move_count = 0
        return self

    @staticmethod
    def index_to_coord(index: int) -> Coord:
        """Convert flat board index to (x, y) coordinates."""
        if not 0 <= index < BOARD_SIZE * BOARD_SIZE:
            raise InvalidMoveError(f"Index {index} is off the board.")
        return (index % BOARD_SIZE, index // BOARD_SIZE)

    @staticmethod
    def coord_to_index(coord: Coord) -> int:
        """Convert (x, y) coordinates to flat board index."""
        x, y = coord
        if not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE):
            raise InvalidMoveError(f"Coordinate {x}, {y} is off the board.")
        return x + y * BOARD_SIZE

    def get_piece(self, coord: Coord) -> int:
        """Stone at coord; off-board coordinates read as EMPTY."""
        return get_piece_safe(self.board, int(coord[0]), int(coord[1]))

    def is_empty(self, coord: Coord) -> bool:
        """Legality predicate: coord is on the board and unoccupied."""
        x, y = int(coord[0]), int(coord[1])
        return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE and self.board[x + y * BOARD_SIZE] == EMPTY

    def is_relevant(self, coord: Coord) -> bool:
        return is_relevant(self.board, int(coord[0]), int(coord[1]))

    def is_full(self) -> bool:
        return not np.any(self.board == EMPTY)

    @property
    def game_over(self) -> bool:
        return self.finished != EMPTY

    @property
    def winner(self) -> int:
        """BLACK or WHITE once the game has ended, EMPTY before."""
        return self.finished

    def captures(self, player: int) -> int:
        return self.black_captures if player == BLACK else self.white_captures

    def expand_region(self, coord: Coord):
        """Grow the dirty region to cover coord plus one cell of margin, clamped to the board."""
        x, y = coord
        self.top_left = (
            min(self.top_left[0], max(x - 1, 0)),
            min(self.top_left[1], max(y - 1, 0)),
        )
        self.bottom_right = (
            max(self.bottom_right[0], min(x + 1, BOARD_SIZE - 1)),
            max(self.bottom_right[1], min(y + 1, BOARD_SIZE - 1)),
        )

    def make_play(self, coord: Coord) -> bool:
        """
        Play a stone for the side to move.

        Args:
            coord: (x, y) board coordinate

        Returns:
            True if this move ended the game

        Raises:
            GameOverError: the game has already ended
            InvalidMoveError: coord is off the board or occupied
        """
        if self.finished != EMPTY:
            raise GameOverError("The game has ended. No more moves can be played.")

        x, y = int(coord[0]), int(coord[1])
        if not self.is_empty((x, y)):
            raise InvalidMoveError(f"Could not place piece at {x}, {y}.")

        player = self.next_player
        self.board[x + y * BOARD_SIZE] = player
        self.expand_region((x, y))
        self.last_move = (x, y)
        self.move_count += 1

        captured = check_captures(self.board, x, y, player)
        if player == BLACK:
            self.black_captures += captured
        else:
            self.white_captures += captured

        # Either threshold ends the game in the mover's favour
        if self.check_capture_win() or check_line(self.board, x, y, player):
            self.finished = player

        self.next_player = -player
        return self.finished != EMPTY

    def check_capture_win(self) -> bool:
        return self.black_captures >= CAPTURES_TO_WIN or self.white_captures >= CAPTURES_TO_WIN

    def relevant_coords(self) -> List[Coord]:
        """Empty cells next to a stone inside the dirty region, in board index order."""
        cells = relevant_coords(self.board, self.top_left[0], self.top_left[1],
                                self.bottom_right[0], self.bottom_right[1])
        return [(int(x), int(y)) for x, y in cells]

    def clone(self) -> 'GameState':
        """Create a deep copy of the game state."""
        state = GameState.__new__(GameState)
        state.board = self.board.copy()
        state.black_captures = self.black_captures
        state.white_captures = self.white_captures
        state.next_player = self.next_player
        state.finished = self.finished
        state.top_left = self.top_left
        state.bottom_right = self.bottom_right
        state.last_move = self.last_move
        state.move_count = self.move_count
        return state

    def render(self) -> str:
        """Return a string representation of the board."""
        symbols = {EMPTY: '  ', BLACK: '[]', WHITE: '██'}
        lines = ['', '', ' ' + ''.join(f'{c}  ' for c in COLUMNS)]

        top = '┌' + '┬'.join(['──'] * BOARD_SIZE) + '┐'
        middle = '├' + '┼'.join(['──'] * BOARD_SIZE) + '┤'
        bottom = '└' + '┴'.join(['──'] * BOARD_SIZE) + '┘'

        lines.append(top)
        for y in range(BOARD_SIZE):
            row = self.board[y * BOARD_SIZE:(y + 1) * BOARD_SIZE]
            lines.append('│' + ''.join(f'{symbols[int(v)]}│' for v in row) + f'{y}')
            lines.append(bottom if y == BOARD_SIZE - 1 else middle)

        # Each capture removes a pair
        lines.append(f"White Captures: {self.captures(WHITE) * 2}/{CAPTURES_TO_WIN * 2}      "
                     f"Black Captures: {self.captures(BLACK) * 2}/{CAPTURES_TO_WIN * 2}")
        if self.last_move is not None:
            x, y = self.last_move
            lines.append(f"Last move: {COLUMNS[x]}{y}")
        if self.finished == EMPTY:
            lines.append(f"Next: {PLAYER_NAMES[self.next_player]}")
        return '\n'.join(lines)

    def __str__(self) -> str:
        return self.render()
