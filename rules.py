"""
Rule kernels for Pente (five in a row with pair captures) using Numba JIT compilation.

All kernels work on the flat board array, index = x + y * BOARD_SIZE.
Reads past the board edge return EMPTY, so directional walks need no bounds checks.
"""
import numpy as np
from numba import njit

BOARD_SIZE = 19
EMPTY = 0
BLACK = 1
WHITE = -1

# The 8 compass directions as (dx, dy), zero vector excluded
DIRECTIONS = np.array([
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
], dtype=np.int64)


@njit(cache=True, nogil=True)
def get_piece_safe(board: np.ndarray, x: int, y: int) -> int:
    """Guarded cell read: off-board coordinates read as EMPTY."""
    if 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE:
        return int(board[x + y * BOARD_SIZE])
    return EMPTY


@njit(cache=True, nogil=True)
def check_captures(board: np.ndarray, x: int, y: int, player: int) -> int:
    """
    Remove every opponent pair flanked by the stone just placed at (x, y).

    A capture is `player` at (x, y), two opponent stones, then `player` again.
    Each direction is checked once; there is no re-scan after a removal.

    Returns:
        Number of pairs captured
    """
    captures = 0
    for k in range(DIRECTIONS.shape[0]):
        dx = DIRECTIONS[k, 0]
        dy = DIRECTIONS[k, 1]
        if (get_piece_safe(board, x + dx, y + dy) == -player
                and get_piece_safe(board, x + 2 * dx, y + 2 * dy) == -player
                and get_piece_safe(board, x + 3 * dx, y + 3 * dy) == player):
            board[(x + dx) + (y + dy) * BOARD_SIZE] = EMPTY
            board[(x + 2 * dx) + (y + 2 * dy) * BOARD_SIZE] = EMPTY
            captures += 1
    return captures


@njit(cache=True, nogil=True)
def check_line(board: np.ndarray, x: int, y: int, player: int) -> bool:
    """True if four more `player` stones extend from (x, y) in one direction."""
    for k in range(DIRECTIONS.shape[0]):
        dx = DIRECTIONS[k, 0]
        dy = DIRECTIONS[k, 1]
        found = True
        for i in range(1, 5):
            if get_piece_safe(board, x + i * dx, y + i * dy) != player:
                found = False
                break
        if found:
            return True
    return False


@njit(cache=True, nogil=True)
def is_relevant(board: np.ndarray, x: int, y: int) -> bool:
    """A cell is relevant when at least one of its 8 neighbours holds a stone."""
    for k in range(DIRECTIONS.shape[0]):
        if get_piece_safe(board, x + DIRECTIONS[k, 0], y + DIRECTIONS[k, 1]) != EMPTY:
            return True
    return False


@njit(cache=True, nogil=True)
def relevant_coords(board: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
    """
    Empty relevant cells inside the box (x0, y0)-(x1, y1), bounds inclusive.

    The x-range and y-range are iterated independently, rows outer, so the
    result follows board index order. An inverted box yields no cells.

    Returns:
        Array of shape (n, 2) holding (x, y) pairs
    """
    x0 = max(x0, 0)
    y0 = max(y0, 0)
    x1 = min(x1, BOARD_SIZE - 1)
    y1 = min(y1, BOARD_SIZE - 1)

    out = np.empty((BOARD_SIZE * BOARD_SIZE, 2), np.int64)
    count = 0
    for y in range(y0, y1 + 1):
        for x in range(x0, x1 + 1):
            if board[x + y * BOARD_SIZE] == EMPTY and is_relevant(board, x, y):
                out[count, 0] = x
                out[count, 1] = y
                count += 1
    return out[:count]


@njit(cache=True, nogil=True)
def heuristic_score(board: np.ndarray, x0: int, y0: int, x1: int, y1: int, colour: int) -> int:
    """
    Run-length heuristic over the relevant cells of a box.

    From every relevant empty cell, walk each direction over the run of
    same-coloured stones starting next to it. A run of length c scores +c^2
    for `colour` and -c^2 for the opponent.
    """
    cells = relevant_coords(board, x0, y0, x1, y1)
    score = 0
    for n in range(cells.shape[0]):
        x = cells[n, 0]
        y = cells[n, 1]
        for k in range(DIRECTIONS.shape[0]):
            dx = DIRECTIONS[k, 0]
            dy = DIRECTIONS[k, 1]
            run_colour = get_piece_safe(board, x + dx, y + dy)
            if run_colour == EMPTY:
                continue
            count = 1
            while get_piece_safe(board, x + (count + 1) * dx, y + (count + 1) * dy) == run_colour:
                count += 1
            if run_colour == colour:
                score += count * count
            else:
                score -= count * count
    return score
