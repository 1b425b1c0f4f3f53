"""
Custom exceptions shared by all layers.

Everything deriving from GameError is recoverable: the request is refused and no state was changed.
The caller (input layer / API) can surface the message to the player and keep its selection intact.
"""


class GameError(Exception):
    """Top-level exception for anything the player did wrong."""


class InvalidDestinationError(GameError):
    """Square lies off the board, or a square name could not be parsed."""


class InvalidPlacementError(GameError):
    """Piece placement (the first field of a FEN string) is malformed."""


class NoPieceSelectedError(GameError):
    """No (live) piece matches the request."""


class IllegalMoveError(GameError):
    """Destination is not in the legal move set of the piece (blocked, wrong pattern or self-check)."""


class PromotionPendingError(GameError):
    """A pawn is waiting for its promotion decision. No other move is accepted until then."""


class NotYourTurnError(GameError):
    """The piece belongs to the player that is not on turn."""


class GameStateError(GameError):
    """The requested operation does not fit the current state of the game."""


class InvalidPromotionError(GameError):
    """A pawn can only promote into a queen, rook, bishop or knight."""


class InvalidRequestError(GameError):
    """Request models failed validation at the boundary."""


class GameNotFoundError(GameError):
    """No game registered under the requested ID."""


class CorruptBoardError(Exception):
    """
    Broken board invariant (ex. a king is missing).

    NOTE: Not a GameError. Only raised when the board was mutated without going through the Game,
    and it propagates instead of being reported back to the player.
    """
