"""
Minimax search with Alpha-Beta pruning for the Pente computer opponent.

The root is parallel: every candidate first move is searched as an
independent task on its own clone of the game state, and the driver joins
all of them before picking the best. Below the root the search is a plain
single-threaded recursion over cloned states.
"""
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from errors import GameOverError, PenteError
from game import GameState, Coord
from rules import BOARD_SIZE, EMPTY, heuristic_score, relevant_coords

# Terminal positions score outside any heuristic value
MAX_SCORE = 2 ** 127 - 1
MIN_SCORE = -(2 ** 127)

DEFAULT_DEPTH = 6
CENTER = (BOARD_SIZE // 2, BOARD_SIZE // 2)


def evaluate(state: GameState, colour: int) -> int:
    """
    Score a position from `colour`'s point of view.

    Decided games return MAX_SCORE / MIN_SCORE; otherwise the run-length
    heuristic over the relevant cells of the dirty region.
    """
    if state.finished != EMPTY:
        return MAX_SCORE if state.finished == colour else MIN_SCORE
    return int(heuristic_score(state.board, state.top_left[0], state.top_left[1],
                               state.bottom_right[0], state.bottom_right[1], colour))


def alpha_beta(state: GameState, depth: int, alpha: int, beta: int, colour: int) -> int:
    """
    Alpha-Beta minimax with a fixed perspective.

    Args:
        state: Position to search (never mutated)
        depth: Remaining plies
        alpha: Lower bound of the window
        beta: Upper bound of the window
        colour: Player the score is computed for, independent of the side to move

    Returns:
        Score of the position for `colour`
    """
    if state.finished != EMPTY:
        return MAX_SCORE if state.finished == colour else MIN_SCORE
    if depth <= 0:
        return evaluate(state, colour)

    coords = state.relevant_coords()
    if not coords:
        return evaluate(state, colour)

    if state.next_player == colour:
        value = MIN_SCORE
        for coord in coords:
            future = state.clone()
            try:
                future.make_play(coord)
            except PenteError:
                continue
            value = max(value, alpha_beta(future, depth - 1, alpha, beta, colour))
            if value >= beta:
                break
            alpha = max(alpha, value)
        return value
    else:
        value = MAX_SCORE
        for coord in coords:
            future = state.clone()
            try:
                future.make_play(coord)
            except PenteError:
                continue
            value = min(value, alpha_beta(future, depth - 1, alpha, beta, colour))
            if value <= alpha:
                break
            beta = min(beta, value)
        return value


def root_candidates(state: GameState) -> List[Coord]:
    """Every empty relevant cell on the whole board, in board index order."""
    cells = relevant_coords(state.board, 0, 0, BOARD_SIZE - 1, BOARD_SIZE - 1)
    return [(int(x), int(y)) for x, y in cells]


def _search_candidate(state: GameState, depth: int, colour: int) -> int:
    """Worker entry point: full-window search of one root child."""
    return alpha_beta(state, depth, MIN_SCORE, MAX_SCORE, colour)


@dataclass
class SearchResult:
    """Outcome of a root search."""
    move: Coord
    score: int
    scores: List[Tuple[Coord, int]] = field(default_factory=list)  # (move, score) in scan order


class ParallelSearch:
    """
    Parallel root driver.
    Spawns one task per candidate first move; tasks share nothing and
    return only their score.
    """

    def __init__(
        self,
        depth: int = DEFAULT_DEPTH,
        max_workers: Optional[int] = None,
        use_processes: bool = True,
    ):
        """
        Args:
            depth: Search depth in plies, root move included
            max_workers: Worker count (None = executor default)
            use_processes: Process pool if True, thread pool otherwise
        """
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.depth = depth
        self.max_workers = max_workers
        self.use_processes = use_processes

    def _executor(self):
        if self.use_processes:
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers)

    def search(self, state: GameState, colour: Optional[int] = None) -> SearchResult:
        """
        Find the best move for `colour` (defaults to the side to move).

        Any exception raised inside a task propagates to the caller.
        """
        if state.finished != EMPTY:
            raise GameOverError("The game has ended. No more moves can be played.")
        if colour is None:
            colour = state.next_player

        candidates = root_candidates(state)
        if not candidates:
            # Nothing on the board to be next to: open in the centre
            return SearchResult(move=CENTER, score=0)

        with self._executor() as pool:
            futures = []
            for coord in candidates:
                possibility = state.clone()
                possibility.make_play(coord)
                futures.append(pool.submit(_search_candidate, possibility, self.depth - 1, colour))
            scores = [(coord, future.result()) for coord, future in zip(candidates, futures)]

        best_move, best_score = scores[0]
        for coord, score in scores[1:]:
            if score > best_score:
                best_move, best_score = coord, score

        return SearchResult(move=best_move, score=best_score, scores=scores)


def find_best_move(
    state: GameState,
    depth: int = DEFAULT_DEPTH,
    colour: Optional[int] = None,
    max_workers: Optional[int] = None,
    use_processes: bool = True,
) -> Coord:
    """
    Convenience function for a single root search.

    Returns:
        (x, y) of the chosen move
    """
    search = ParallelSearch(depth=depth, max_workers=max_workers, use_processes=use_processes)
    return search.search(state, colour).move
