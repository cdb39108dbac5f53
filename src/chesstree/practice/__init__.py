"""Repertoire practice: cards built from the tree and their review ladder."""

from chesstree.practice.models import (
    Card,
    MasteryLevel,
    PracticeSettings,
    PracticeStats,
)
from chesstree.practice.scheduler import (
    build_cards,
    get_card_for_review,
    practice_stats,
    update_card_performance,
)

__all__ = [
    "Card",
    "MasteryLevel",
    "PracticeSettings",
    "PracticeStats",
    "build_cards",
    "get_card_for_review",
    "practice_stats",
    "update_card_performance",
]
