"""
Error hierarchy for the Pente engine.

Rule and input errors also subclass ValueError, so callers that only care
about "bad move" can keep catching ValueError.

Usage:
    from errors import InvalidMoveError

    try:
        state.make_play((x, y))
    except InvalidMoveError as e:
        print(e.message)
"""

__all__ = [
    'PenteError',
    'GameOverError',
    'InvalidMoveError',
    'MalformedInputError',
]


class PenteError(Exception):
    """Base exception for all Pente errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error description
    """
    code: str = 'PENTE_ERROR'

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def __str__(self) -> str:
        return f'[{self.code}] {self.message}'


class GameOverError(PenteError, ValueError):
    """A move was attempted after the game reached a terminal state."""
    code: str = 'GAME_OVER'


class InvalidMoveError(PenteError, ValueError):
    """Move targets an occupied cell or a coordinate off the board."""
    code: str = 'INVALID_MOVE'


class MalformedInputError(PenteError, ValueError):
    """Move text could not be parsed into a board coordinate."""
    code: str = 'MALFORMED_INPUT'
