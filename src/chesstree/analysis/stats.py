"""Game-level accuracy and centipawn-loss aggregation over the main line."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from chesstree.analysis.models import GameStats, SideStats
from chesstree.analysis.scoring import INITIAL_SCORE, accuracy, cp_loss
from chesstree.core.annotation import BASIC_ANNOTATIONS, Annotation
from chesstree.core.enums import Color
from chesstree.core.models import TreeNode
from chesstree.core.tree import iter_main_line


@dataclass(slots=True)
class _SideAcc:
    cp_losses: list[float] = field(default_factory=list)
    accuracies: list[float] = field(default_factory=list)
    annotations: dict[Annotation, int] = field(
        default_factory=lambda: dict.fromkeys(BASIC_ANNOTATIONS, 0)
    )
    moves: int = 0


def mean(values: Iterable[float]) -> float:
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def harmonic_mean(values: Iterable[float]) -> float:
    """Harmonic mean with every value floored at 1.

    A single very low value drags the result down much harder than an
    arithmetic mean would.
    """
    items = list(values)
    if not items:
        return 0.0
    return len(items) / sum(1 / max(1.0, value) for value in items)


def get_game_stats(root: TreeNode) -> GameStats:
    """Per-side CPL (arithmetic mean), accuracy (harmonic mean) and symbols."""
    sides = {Color.WHITE: _SideAcc(), Color.BLACK: _SideAcc()}
    prev_score = root.score or INITIAL_SCORE

    for path, node in iter_main_line(root):
        if not path:
            continue
        color = Color.mover(node.half_moves)
        acc = sides[color]
        acc.moves += 1
        for annotation in node.annotations:
            if annotation in acc.annotations:
                acc.annotations[annotation] += 1
        if node.score is None:
            continue
        acc.cp_losses.append(cp_loss(prev_score, node.score, color))
        acc.accuracies.append(accuracy(prev_score, node.score, color))
        prev_score = node.score

    return GameStats(
        white=_side_stats(sides[Color.WHITE]),
        black=_side_stats(sides[Color.BLACK]),
    )


def _side_stats(acc: _SideAcc) -> SideStats:
    return SideStats(
        moves=acc.moves,
        cp_loss=mean(acc.cp_losses),
        accuracy=harmonic_mean(acc.accuracies),
        annotations=dict(acc.annotations),
    )
