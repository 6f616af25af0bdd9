"""
Exceptions raised outside of the engine's contract.

The Rules Engine itself never raises for bad input (it answers False / empty instead).
The layers around it (search, service, API) use these to signal what went wrong.
"""


class ChessError(Exception):
    """Base class for everything this application raises on purpose"""


class GameError(ChessError):
    """Something about the state of a game prevents the request"""


class GameStateError(GameError):
    pass


class IllegalMoveError(GameError):
    pass


class NoMoveAvailableError(GameError):
    """The search was asked for a move while the side to move has none"""


class InvalidFENError(ChessError):
    pass


class RepositoryError(ChessError):
    pass


class InvalidRequestError(ChessError):
    """Raised from request validators. NOTE: not a ValueError, so pydantic lets it through unwrapped."""
