"""
Play interface for Pente.
Human vs AI, two humans at one terminal, and AI match evaluation.
"""
import argparse
import re
from typing import Callable, Optional

import numpy as np
from tqdm import tqdm

from errors import InvalidMoveError, MalformedInputError
from game import GameState, Coord, COLUMNS, PLAYER_NAMES
from rules import BOARD_SIZE, BLACK, WHITE, EMPTY
from search import DEFAULT_DEPTH, CENTER, ParallelSearch, root_candidates

MOVE_PATTERN = re.compile(r'([a-s])([0-9]{1,2})')


def parse_move(text: str) -> Coord:
    """
    Parse move text such as 'j9' or 'c15' into (x, y).

    The column is a lowercase letter a-s, the row one or two digits 0-18.

    Raises:
        MalformedInputError: text is not a coordinate on the board
    """
    text = text.strip()
    match = MOVE_PATTERN.fullmatch(text)
    if match is None:
        if not text or text[0] not in COLUMNS:
            raise MalformedInputError("First character must be a lowercase letter a-s.")
        raise MalformedInputError("Row must be a number between 0 and 18.")

    x = COLUMNS.index(match.group(1))
    y = int(match.group(2))
    if y >= BOARD_SIZE:
        raise MalformedInputError(f"Invalid number size: {y}. Row must be a number between 0 and 18.")
    return (x, y)


def format_move(coord: Coord) -> str:
    return f'{COLUMNS[coord[0]]}{coord[1]}'


class PentePlayer:
    """Base class for Pente players."""

    def get_action(self, state: GameState) -> Coord:
        raise NotImplementedError


class HumanPlayer(PentePlayer):
    """Human player via command line input."""

    def __init__(self, input_fn: Callable[[str], str] = input):
        self.input_fn = input_fn

    def get_action(self, state: GameState) -> Coord:
        while True:
            try:
                coord = parse_move(self.input_fn("Enter move (e.g. j9): "))
            except MalformedInputError as e:
                print(e.message)
                continue

            if state.is_empty(coord):
                return coord
            print("Invalid piece location.")


class AIPlayer(PentePlayer):
    """AI player using parallel Alpha-Beta search."""

    def __init__(
        self,
        depth: int = DEFAULT_DEPTH,
        max_workers: Optional[int] = None,
        use_processes: bool = True,
        verbose: bool = True,
    ):
        self.search = ParallelSearch(depth=depth, max_workers=max_workers, use_processes=use_processes)
        self.verbose = verbose

    def get_action(self, state: GameState) -> Coord:
        if self.verbose:
            print("AI thinking...")
        result = self.search.search(state)

        # Show top moves
        if self.verbose and result.scores:
            top = sorted(result.scores, key=lambda s: s[1], reverse=True)[:3]
            for coord, score in top:
                print(f"  {format_move(coord)}: {score}")

        return result.move


class RandomPlayer(PentePlayer):
    """Random player that only plays next to existing stones."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def get_action(self, state: GameState) -> Coord:
        candidates = root_candidates(state)
        if not candidates:
            return CENTER
        return candidates[self.rng.integers(len(candidates))]


def play_game(
    white_player: PentePlayer,
    black_player: PentePlayer,
    show_board: bool = True,
    max_moves: Optional[int] = None,
) -> int:
    """
    Play a game between two players.

    Args:
        white_player: White player (moves first)
        black_player: Black player
        show_board: Whether to print the board
        max_moves: Stop and call it a draw after this many moves

    Returns:
        Winner: WHITE, BLACK, or EMPTY for a draw
    """
    state = GameState()
    players = {WHITE: white_player, BLACK: black_player}

    if show_board:
        print(state)

    while not state.game_over:
        if state.is_full() or (max_moves is not None and state.move_count >= max_moves):
            break

        mover = state.next_player
        if show_board:
            print(f"\n{PLAYER_NAMES[mover]}'s turn:")

        coord = players[mover].get_action(state)
        try:
            state.make_play(coord)
        except InvalidMoveError as e:
            print(e.message)
            continue

        if show_board:
            print(f"Move: {format_move(coord)}")
            print(state)

    if show_board:
        if state.winner == EMPTY:
            print("\nGame over: Draw!")
        else:
            print(f"\n{PLAYER_NAMES[state.winner]} wins!")

    return state.winner


def interactive_game(
    depth: int = DEFAULT_DEPTH,
    max_workers: Optional[int] = None,
    use_processes: bool = True,
) -> int:
    """
    Play an interactive game against the AI. The human plays White and moves first.
    """
    print(f"\n{'='*50}")
    print("Pente: Human vs AI")
    print(f"{'='*50}")
    print(f"Search depth: {depth}")
    print("You are: White")
    print(f"{'='*50}")

    ai = AIPlayer(depth=depth, max_workers=max_workers, use_processes=use_processes)
    return play_game(HumanPlayer(), ai)


def hotseat_game() -> int:
    """Two humans sharing one terminal."""
    print(f"\n{'='*50}")
    print("Pente: Human vs Human")
    print(f"{'='*50}")
    return play_game(HumanPlayer(), HumanPlayer())


def evaluate_players(
    num_games: int = 10,
    depth1: int = 2,
    depth2: int = 2,
    random2: bool = False,
    max_moves: int = 200,
    max_workers: Optional[int] = None,
    use_processes: bool = True,
    seed: Optional[int] = None,
):
    """
    Play a match between two computer players, alternating colours.

    Args:
        num_games: Number of games to play
        depth1: Search depth of the first AI
        depth2: Search depth of the second AI
        random2: Replace the second AI with a random mover
        max_moves: Moves per game before it is scored as a draw
        max_workers: Worker count for the root searches
        use_processes: Process pool if True, thread pool otherwise
        seed: Seed for the random mover

    Returns:
        (player1_wins, player2_wins, draws)
    """
    if num_games < 1:
        raise ValueError(f"Number of games must be at least 1, got {num_games}")

    player1 = AIPlayer(depth1, max_workers, use_processes, verbose=False)
    player1_name = f"AI depth {depth1}"
    if random2:
        player2 = RandomPlayer(seed)
        player2_name = "Random"
    else:
        player2 = AIPlayer(depth2, max_workers, use_processes, verbose=False)
        player2_name = f"AI depth {depth2}"

    print(f"\nEvaluating: {player1_name} vs {player2_name}")
    print(f"Number of games: {num_games}")

    player1_wins = 0
    player2_wins = 0
    draws = 0

    with tqdm(total=num_games, desc="Evaluate") as pbar:
        for game_idx in range(num_games):
            # Alternate colours
            if game_idx % 2 == 0:
                player1_colour = WHITE
                result = play_game(player1, player2, show_board=False, max_moves=max_moves)
            else:
                player1_colour = BLACK
                result = play_game(player2, player1, show_board=False, max_moves=max_moves)

            if result == EMPTY:
                draws += 1
            elif result == player1_colour:
                player1_wins += 1
            else:
                player2_wins += 1

            pbar.update(1)
            pbar.set_postfix(p1=player1_wins, p2=player2_wins, draws=draws)

    print(f"\n{'='*50}")
    print("Final Results:")
    print(f"{'='*50}")
    print(f"{player1_name}: {player1_wins} ({player1_wins/num_games*100:.1f}%)")
    print(f"{player2_name}: {player2_wins} ({player2_wins/num_games*100:.1f}%)")
    print(f"Draws: {draws} ({draws/num_games*100:.1f}%)")

    return player1_wins, player2_wins, draws


def positive_int(text: str) -> int:
    """argparse type for counts and depths that must be at least 1."""
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def main(argv=None):
    parser = argparse.ArgumentParser(description='Play Pente against AI')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Play command
    play_parser = subparsers.add_parser('play', help='Play against AI')
    play_parser.add_argument('--depth', type=positive_int, default=DEFAULT_DEPTH, help='Search depth in plies')
    play_parser.add_argument('--workers', type=int, default=None, help='Root search workers')
    play_parser.add_argument('--threads', action='store_true', help='Use threads instead of processes')

    # Hotseat command
    subparsers.add_parser('hotseat', help='Two humans on one terminal')

    # Evaluate command
    eval_parser = subparsers.add_parser('evaluate', help='AI vs AI match')
    eval_parser.add_argument('--games', type=positive_int, default=10, help='Number of games')
    eval_parser.add_argument('--depth1', type=positive_int, default=2, help='First AI search depth')
    eval_parser.add_argument('--depth2', type=positive_int, default=2, help='Second AI search depth')
    eval_parser.add_argument('--random2', action='store_true', help='Second player moves at random')
    eval_parser.add_argument('--max-moves', type=positive_int, default=200, help='Moves before a game is drawn')
    eval_parser.add_argument('--workers', type=int, default=None, help='Root search workers')
    eval_parser.add_argument('--threads', action='store_true', help='Use threads instead of processes')
    eval_parser.add_argument('--seed', type=int, default=None, help='Random mover seed')

    args = parser.parse_args(argv)

    if args.command == 'hotseat':
        hotseat_game()
    elif args.command == 'evaluate':
        evaluate_players(
            num_games=args.games,
            depth1=args.depth1,
            depth2=args.depth2,
            random2=args.random2,
            max_moves=args.max_moves,
            max_workers=args.workers,
            use_processes=not args.threads,
            seed=args.seed,
        )
    elif args.command == 'play':
        interactive_game(
            depth=args.depth,
            max_workers=args.workers,
            use_processes=not args.threads,
        )
    else:
        # Default: play against the AI
        interactive_game()


if __name__ == '__main__':
    main()
