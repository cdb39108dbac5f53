"""Actions understood by the tree reducer.

Every action is an immutable value; :data:`Action` is the closed union the
reducer matches on.
"""

from __future__ import annotations

from dataclasses import dataclass

from chesstree.analysis.models import AnalysisEntry
from chesstree.core.annotation import Annotation
from chesstree.core.enums import Color, Outcome
from chesstree.core.models import DrawShape, GameHeaders, Path, Score, TreeState
from chesstree.core.rules import MoveLike

# ── Navigation ───────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class GoToNext:
    pass


@dataclass(slots=True, frozen=True)
class GoToPrevious:
    pass


@dataclass(slots=True, frozen=True)
class GoToStart:
    """Jump to the repertoire start (``headers.start``) or the root."""


@dataclass(slots=True, frozen=True)
class GoToEnd:
    """Jump to the last node of the main line."""


@dataclass(slots=True, frozen=True)
class GoToMove:
    path: Path


@dataclass(slots=True, frozen=True)
class GoToBranchStart:
    pass


@dataclass(slots=True, frozen=True)
class GoToBranchEnd:
    pass


@dataclass(slots=True, frozen=True)
class NextBranch:
    pass


@dataclass(slots=True, frozen=True)
class PreviousBranch:
    pass


@dataclass(slots=True, frozen=True)
class NextBranching:
    pass


@dataclass(slots=True, frozen=True)
class PreviousBranching:
    pass


@dataclass(slots=True, frozen=True)
class GoToAnnotation:
    """Move to the next node carrying *annotation* played by *color*."""

    annotation: Annotation
    color: Color


# ── Structural edits ─────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class MakeMove:
    """Play *move* (SAN, UCI or :class:`chess.Move`) from the cursor.

    ``mainline`` inserts the new node as child 0 instead of appending it.
    """

    move: MoveLike
    change_position: bool = True
    mainline: bool = False
    clock: int | None = None
    change_headers: bool = True


@dataclass(slots=True, frozen=True)
class AppendMove:
    """Play *move* after the last node of the main line."""

    move: MoveLike
    clock: int | None = None


@dataclass(slots=True, frozen=True)
class MakeMoves:
    """Play a sequence of SAN/UCI moves from the cursor, all or nothing."""

    moves: tuple[str, ...]
    mainline: bool = False
    change_headers: bool = True


@dataclass(slots=True, frozen=True)
class DeleteMove:
    """Remove the subtree at *path* (the cursor when ``None``)."""

    path: Path | None = None


@dataclass(slots=True, frozen=True)
class PromoteVariation:
    path: Path


@dataclass(slots=True, frozen=True)
class PromoteToMainline:
    path: Path


# ── Node payload edits ───────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class SetAnnotation:
    annotation: Annotation


@dataclass(slots=True, frozen=True)
class SetComment:
    comment: str


@dataclass(slots=True, frozen=True)
class SetScore:
    score: Score


@dataclass(slots=True, frozen=True)
class SetShapes:
    """Toggle the first shape at the cursor; an empty tuple clears all."""

    shapes: tuple[DrawShape, ...]


@dataclass(slots=True, frozen=True)
class ClearShapes:
    pass


@dataclass(slots=True, frozen=True)
class AddAnalysis:
    """Per-position engine output aligned with the main line, root first."""

    entries: tuple[AnalysisEntry, ...]


# ── Whole-tree / metadata edits ──────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class SetFen:
    fen: str


@dataclass(slots=True, frozen=True)
class SetHeaders:
    headers: GameHeaders


@dataclass(slots=True, frozen=True)
class SetResult:
    result: Outcome


@dataclass(slots=True, frozen=True)
class SetStart:
    path: Path


@dataclass(slots=True, frozen=True)
class SetState:
    state: TreeState


@dataclass(slots=True, frozen=True)
class Reset:
    pass


@dataclass(slots=True, frozen=True)
class Save:
    """Acknowledge a save: clears the dirty flag."""


Action = (
    GoToNext
    | GoToPrevious
    | GoToStart
    | GoToEnd
    | GoToMove
    | GoToBranchStart
    | GoToBranchEnd
    | NextBranch
    | PreviousBranch
    | NextBranching
    | PreviousBranching
    | GoToAnnotation
    | MakeMove
    | AppendMove
    | MakeMoves
    | DeleteMove
    | PromoteVariation
    | PromoteToMainline
    | SetAnnotation
    | SetComment
    | SetScore
    | SetShapes
    | ClearShapes
    | AddAnalysis
    | SetFen
    | SetHeaders
    | SetResult
    | SetStart
    | SetState
    | Reset
    | Save
)
