"""Core enumerations for the game tree."""

from __future__ import annotations

from enum import StrEnum


class Color(StrEnum):
    """Side color."""

    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def parity(self) -> int:
        """Half-move parity of nodes where this side is to move."""
        return 0 if self is Color.WHITE else 1

    @classmethod
    def to_move(cls, half_moves: int) -> Color:
        """Side to move at a node with *half_moves* plies played."""
        return cls.WHITE if half_moves % 2 == 0 else cls.BLACK

    @classmethod
    def mover(cls, half_moves: int) -> Color:
        """Side that played the move leading to a node."""
        return cls.WHITE if half_moves % 2 == 1 else cls.BLACK


class ScoreKind(StrEnum):
    """Unit of an engine evaluation."""

    CENTIPAWN = "cp"
    MATE = "mate"


class Brush(StrEnum):
    """Colors available for drawn arrows and square markers."""

    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"
    BLUE = "blue"

    @property
    def letter(self) -> str:
        """Single-letter code used by ``[%csl]`` / ``[%cal]`` tags."""
        return self.value[0].upper()

    @classmethod
    def from_letter(cls, letter: str) -> Brush | None:
        for brush in cls:
            if brush.letter == letter.upper():
                return brush
        return None


class Outcome(StrEnum):
    """PGN game termination markers."""

    WHITE_WINS = "1-0"
    BLACK_WINS = "0-1"
    DRAW = "1/2-1/2"
    UNKNOWN = "*"
