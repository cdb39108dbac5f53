"""Data models produced and consumed by move analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from chesstree.core.annotation import Annotation
from chesstree.core.models import Score


class ReviewClassification(StrEnum):
    """Game-review move quality buckets."""

    BEST = "best"
    EXCELLENT = "excellent"
    GOOD = "good"
    INACCURACY = "inaccuracy"
    MISTAKE = "mistake"
    BLUNDER = "blunder"
    BOOK = "book"
    FORCED = "forced"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def symbol(self) -> str:
        """Short marker shown next to the move."""
        return _REVIEW_SYMBOL[self]

    @property
    def color(self) -> str:
        """Named UI color for the classification."""
        return _REVIEW_COLOR[self]


_REVIEW_SYMBOL: dict[ReviewClassification, str] = {
    ReviewClassification.BEST: "★",
    ReviewClassification.EXCELLENT: "!",
    ReviewClassification.GOOD: "✓",
    ReviewClassification.INACCURACY: "?!",
    ReviewClassification.MISTAKE: "?",
    ReviewClassification.BLUNDER: "??",
    ReviewClassification.BOOK: "≡",
    ReviewClassification.FORCED: "□",
}

_REVIEW_COLOR: dict[ReviewClassification, str] = {
    ReviewClassification.BEST: "green",
    ReviewClassification.EXCELLENT: "teal",
    ReviewClassification.GOOD: "lime",
    ReviewClassification.INACCURACY: "yellow",
    ReviewClassification.MISTAKE: "orange",
    ReviewClassification.BLUNDER: "red",
    ReviewClassification.BOOK: "brown",
    ReviewClassification.FORCED: "gray",
}


@dataclass(slots=True, frozen=True)
class BestMoves:
    """One candidate line reported by an engine for a position."""

    score: Score
    san_moves: tuple[str, ...] = ()
    depth: int | None = None


@dataclass(slots=True, frozen=True)
class AnalysisEntry:
    """Engine output for one main-line position, in main-line order."""

    best: tuple[BestMoves, ...]
    novelty: bool = False
    is_sacrifice: bool = False


@dataclass(slots=True, frozen=True)
class SideStats:
    """Aggregate quality metrics for one side."""

    moves: int
    cp_loss: float
    accuracy: float
    annotations: dict[Annotation, int] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class GameStats:
    white: SideStats
    black: SideStats
