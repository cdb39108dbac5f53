"""Practice card models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from chesstree.core.models import Path


class MasteryLevel(StrEnum):
    """Rungs of the review ladder, lowest first."""

    UNSEEN = "unseen"
    LEARNING = "learning"
    REVIEWING = "reviewing"
    MASTERED = "mastered"

    @property
    def rank(self) -> int:
        return _LADDER.index(self)

    def promoted(self) -> MasteryLevel:
        return _LADDER[min(self.rank + 1, len(_LADDER) - 1)]

    def demoted(self) -> MasteryLevel:
        return _LADDER[max(self.rank - 1, 0)]


_LADDER: tuple[MasteryLevel, ...] = tuple(MasteryLevel)


@dataclass(slots=True, frozen=True)
class Card:
    """A position where the trained side must find ``answer_san``."""

    fen: str
    path: Path
    answer_san: str
    repetitions: int = 0
    level: MasteryLevel = MasteryLevel.UNSEEN


@dataclass(slots=True, frozen=True)
class PracticeSettings:
    """Card selection policy; ``seed`` makes random selection repeatable."""

    random: bool = False
    seed: int | None = None


@dataclass(slots=True, frozen=True)
class PracticeStats:
    unseen: int = 0
    learning: int = 0
    reviewing: int = 0
    mastered: int = 0
    total: int = 0
