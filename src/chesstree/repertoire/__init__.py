"""Opening-repertoire coverage against a reference game database."""

from chesstree.repertoire.coverage import (
    compute_coverage,
    find_biggest_gap,
    find_next_gap,
    position_moves,
)
from chesstree.repertoire.models import (
    CoverageReport,
    CoverageSettings,
    PositionMove,
    PositionStats,
    ReferenceDatabase,
)

__all__ = [
    "CoverageReport",
    "CoverageSettings",
    "PositionMove",
    "PositionStats",
    "ReferenceDatabase",
    "compute_coverage",
    "find_biggest_gap",
    "find_next_gap",
    "position_moves",
]
