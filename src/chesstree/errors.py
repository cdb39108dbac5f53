"""Exception hierarchy shared by every layer of the game tree engine."""

from __future__ import annotations


class ChessTreeError(Exception):
    """Base class for all engine errors."""


class InvalidFenError(ChessTreeError, ValueError):
    """Raised when a FEN string cannot be parsed."""


class IllegalMoveError(ChessTreeError, ValueError):
    """Raised when a move is rejected in the given position."""


class IllegalEditError(ChessTreeError):
    """Raised when an action cannot be applied to the current tree."""


class PgnTokenizeError(ChessTreeError, ValueError):
    """Raised when PGN text cannot be split into tokens."""


class PgnDecodeError(ChessTreeError, ValueError):
    """Raised when a token stream cannot be turned into a tree.

    ``token_index`` points at the offending token when it is known.
    """

    def __init__(self, message: str, token_index: int | None = None) -> None:
        super().__init__(message)
        self.token_index = token_index

    def __str__(self) -> str:
        base = super().__str__()
        if self.token_index is None:
            return base
        return f"{base} (token {self.token_index})"


class ReferenceDatabaseError(ChessTreeError):
    """Raised by reference database adapters when a lookup fails."""


class StateFormatError(ChessTreeError, ValueError):
    """Raised when a persisted tree state cannot be read."""
