"""Repertoire coverage data models and the reference-database contract."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from chesstree.core.models import Path

SUMMARY_MOVE = "*"


@dataclass(slots=True, frozen=True)
class PositionStats:
    """Reference-database result counts for one move from a position.

    The synthetic move ``"*"`` counts games that ended in the position.
    """

    move: str
    white: int = 0
    draws: int = 0
    black: int = 0

    @property
    def games(self) -> int:
        return self.white + self.draws + self.black


class ReferenceDatabase(Protocol):
    """Protocol for the game database queried during coverage analysis.

    Implementations raise :class:`~chesstree.errors.ReferenceDatabaseError`
    when a lookup fails; the error propagates to the caller unchanged.
    """

    def search_position(self, fen: str) -> list[PositionStats]:
        """Per-move counts for games that reached *fen* exactly."""
        ...


@dataclass(slots=True, frozen=True)
class CoverageSettings:
    """Policy constants of the coverage computation.

    ``min_games`` is both the minimum sample size below which a position
    counts as covered and the per-move threshold for opponent replies.
    """

    min_games: int = 5


@dataclass(slots=True)
class CoverageReport:
    """Coverage fraction and reference game count per visited path."""

    coverage: dict[Path, float] = field(default_factory=dict)
    games: dict[Path, int] = field(default_factory=dict)

    def coverage_at(self, path: Path) -> float:
        return self.coverage.get(tuple(path), 0.0)

    def games_at(self, path: Path) -> int:
        return self.games.get(tuple(path), 0)


@dataclass(slots=True, frozen=True)
class PositionMove:
    """One candidate reply at a position, merged from the tree and the database.

    ``child_index`` is ``-1`` for database moves the tree does not contain.
    """

    san: str
    games: int
    total_games: int
    frequency: float
    white: float
    draw: float
    black: float
    in_repertoire: bool
    coverage: float
    child_index: int
