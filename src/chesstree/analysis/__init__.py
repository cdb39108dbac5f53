"""Move scoring, annotation and game statistics."""

from chesstree.analysis.models import (
    AnalysisEntry,
    BestMoves,
    GameStats,
    ReviewClassification,
    SideStats,
)
from chesstree.analysis.scoring import (
    INITIAL_SCORE,
    accuracy,
    annotation_for_drop,
    classify_move,
    cp_loss,
    format_score,
    normalize_score,
    review_classification,
    win_chance,
)
from chesstree.analysis.stats import get_game_stats, harmonic_mean, mean

__all__ = [
    "AnalysisEntry",
    "BestMoves",
    "GameStats",
    "INITIAL_SCORE",
    "ReviewClassification",
    "SideStats",
    "accuracy",
    "annotation_for_drop",
    "classify_move",
    "cp_loss",
    "format_score",
    "get_game_stats",
    "harmonic_mean",
    "mean",
    "normalize_score",
    "review_classification",
    "win_chance",
]
