"""Card extraction from a repertoire tree and the four-level review ladder."""

from __future__ import annotations

import dataclasses
import logging
import random
from collections.abc import Sequence

from chesstree.core.enums import Color
from chesstree.core.models import Path, TreeNode
from chesstree.core.tree import is_prefix, iter_dfs
from chesstree.practice.models import (
    Card,
    MasteryLevel,
    PracticeSettings,
    PracticeStats,
)

_LOGGER = logging.getLogger(__name__)


def build_cards(root: TreeNode, color: Color, start_path: Path = ()) -> list[Card]:
    """One card per distinct position where *color* must play the main reply.

    Positions on the way to *start_path* (the start itself included) are
    not the repertoire's responsibility and are skipped.
    """
    cards: list[Card] = []
    seen: set[str] = set()
    for path, node in iter_dfs(root):
        if not node.children or is_prefix(path, start_path):
            continue
        answer = node.children[0].san
        if not answer or node.fen in seen:
            continue
        if node.turn != color:
            continue
        seen.add(node.fen)
        cards.append(Card(fen=node.fen, path=path, answer_san=answer))
    _LOGGER.debug("Built %d practice cards for %s", len(cards), color)
    return cards


def get_card_for_review(
    cards: Sequence[Card],
    settings: PracticeSettings | None = None,
    rng: random.Random | None = None,
) -> int | None:
    """Index of the next card to review, or ``None`` for an empty deck.

    The lowest mastery level wins, first card first. With
    ``settings.random`` any card may be chosen.
    """
    if not cards:
        return None
    opts = settings or PracticeSettings()
    if opts.random:
        chooser = rng or random.Random(opts.seed)
        return chooser.randrange(len(cards))
    return min(range(len(cards)), key=lambda i: cards[i].level.rank)


def update_card_performance(cards: list[Card], index: int, success: bool) -> Card:
    """Move card *index* one rung up (success) or down (failure) the ladder."""
    card = cards[index]
    level = card.level.promoted() if success else card.level.demoted()
    updated = dataclasses.replace(
        card, level=level, repetitions=card.repetitions + 1
    )
    cards[index] = updated
    return updated


def practice_stats(cards: Sequence[Card]) -> PracticeStats:
    counts = {level: 0 for level in MasteryLevel}
    for card in cards:
        counts[card.level] += 1
    return PracticeStats(
        unseen=counts[MasteryLevel.UNSEEN],
        learning=counts[MasteryLevel.LEARNING],
        reviewing=counts[MasteryLevel.REVIEWING],
        mastered=counts[MasteryLevel.MASTERED],
        total=len(cards),
    )
