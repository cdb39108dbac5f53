"""Win-probability scoring and move classification.

All comparisons first normalize scores so that the side that just moved is
positive; mate scores are flattened to :data:`CP_CEILING`.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from chesstree.analysis.models import BestMoves, ReviewClassification
from chesstree.core.annotation import Annotation
from chesstree.core.enums import Color, ScoreKind
from chesstree.core.models import Score

WIN_CHANCE_K = 0.00368208
CP_CEILING = 1000
INITIAL_SCORE = Score.cp(15)

_BLUNDER_MIN_DROP = 20
_MISTAKE_MIN_DROP = 10
_DUBIOUS_MIN_DROP = 5
_ONLY_MOVE_MIN_GAP = 10
_SWING_MIN_GAIN = 5
_SOUND_SACRIFICE_MIN_CP = -200

_EXCELLENT_MAX_CP_LOSS = 20
_GOOD_MAX_CP_LOSS = 50
_INACCURACY_MAX_CP_LOSS = 100
_MISTAKE_MAX_CP_LOSS = 200

_ZERO = Score.cp(0)


def win_chance(centipawns: float) -> float:
    """Winning percentage (0-100) for a centipawn advantage."""
    return 50 + 50 * (2 / (1 + math.exp(-WIN_CHANCE_K * centipawns)) - 1)


def normalize_score(score: Score, color: Color) -> int:
    """Score in centipawns from *color*'s side, clamped to the ceiling."""
    cp = score.value
    if color == Color.BLACK:
        cp = -cp
    if score.kind == ScoreKind.MATE:
        cp = int(math.copysign(CP_CEILING, cp)) if cp else 0
    return max(-CP_CEILING, min(CP_CEILING, cp))


def cp_loss(prev: Score, next_: Score, color: Color) -> int:
    """Centipawns lost by *color*'s move (never negative)."""
    return max(0, normalize_score(prev, color) - normalize_score(next_, color))


def win_chance_drop(prev: Score, next_: Score, color: Color) -> float:
    return win_chance(normalize_score(prev, color)) - win_chance(
        normalize_score(next_, color)
    )


def accuracy(prev: Score, next_: Score, color: Color) -> float:
    """Per-move accuracy percentage derived from the win-chance drop."""
    drop = win_chance_drop(prev, next_, color)
    raw = 103.1668 * math.exp(-0.04354 * drop) - 3.1669 + 1
    return max(0.0, min(100.0, raw))


def annotation_for_drop(drop: float) -> Annotation:
    """Basic quality symbol for a win-chance drop in percentage points."""
    if drop > _BLUNDER_MIN_DROP:
        return Annotation.BLUNDER
    if drop > _MISTAKE_MIN_DROP:
        return Annotation.MISTAKE
    if drop > _DUBIOUS_MIN_DROP:
        return Annotation.DUBIOUS
    return Annotation.NONE


def classify_move(
    prev_score: Score | None,
    prev_prev_score: Score | None,
    next_score: Score,
    mover_color: Color,
    candidate_lines: Sequence[BestMoves] = (),
    is_sacrifice: bool = False,
    san: str = "",
) -> Annotation:
    """Annotate a played move from the evaluations around it.

    *candidate_lines* are the engine lines for the position the move was
    played from, best first. A move only earns ``!``/``!!`` when it is the
    single good option there; a sound sacrifice that is not the only move
    earns ``!?``.
    """
    prev = prev_score or _ZERO
    annotation = annotation_for_drop(win_chance_drop(prev, next_score, mover_color))
    if annotation != Annotation.NONE:
        return annotation

    if len(candidate_lines) > 1:
        best, second = candidate_lines[0], candidate_lines[1]
        gap = win_chance_drop(best.score, second.score, mover_color)
        best_san = best.san_moves[0] if best.san_moves else None
        if gap > _ONLY_MOVE_MIN_GAP and san == best_san:
            if is_sacrifice:
                return Annotation.BRILLIANT
            gain = -win_chance_drop(prev_prev_score or _ZERO, best.score, mover_color)
            if gain > _SWING_MIN_GAIN:
                return Annotation.GOOD
        elif (
            is_sacrifice
            and normalize_score(next_score, mover_color) > _SOUND_SACRIFICE_MIN_CP
        ):
            return Annotation.INTERESTING
    return Annotation.NONE


def review_classification(
    loss: float,
    is_best_move: bool,
    *,
    is_book: bool = False,
    is_forced: bool = False,
) -> ReviewClassification:
    """Game-review bucket for a move's centipawn loss."""
    if is_book:
        return ReviewClassification.BOOK
    if is_forced:
        return ReviewClassification.FORCED
    if is_best_move:
        return ReviewClassification.BEST
    if loss < _EXCELLENT_MAX_CP_LOSS:
        return ReviewClassification.EXCELLENT
    if loss <= _GOOD_MAX_CP_LOSS:
        return ReviewClassification.GOOD
    if loss <= _INACCURACY_MAX_CP_LOSS:
        return ReviewClassification.INACCURACY
    if loss <= _MISTAKE_MAX_CP_LOSS:
        return ReviewClassification.MISTAKE
    return ReviewClassification.BLUNDER


def format_score(score: Score, precision: int = 2) -> str:
    """Human-readable score such as ``+0.35`` or ``-M3``."""
    if score.kind == ScoreKind.MATE:
        text = f"M{abs(score.value)}"
    else:
        text = f"{abs(score.value) / 100:.{precision}f}"
    if score.value > 0:
        return f"+{text}"
    if score.value < 0:
        return f"-{text}"
    return text
