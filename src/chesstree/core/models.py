"""Tree data model: nodes, headers, and the aggregate tree state."""

from __future__ import annotations

from dataclasses import dataclass, field

import chess

from chesstree.core.annotation import Annotation
from chesstree.core.enums import Brush, Color, Outcome, ScoreKind

Path = tuple[int, ...]


@dataclass(slots=True, frozen=True)
class Score:
    """Engine evaluation from white's point of view."""

    kind: ScoreKind
    value: int

    @classmethod
    def cp(cls, value: int) -> Score:
        return cls(ScoreKind.CENTIPAWN, value)

    @classmethod
    def mate(cls, value: int) -> Score:
        return cls(ScoreKind.MATE, value)


@dataclass(slots=True, frozen=True)
class DrawShape:
    """An arrow (``dest`` set) or a square marker (``dest`` is ``None``)."""

    orig: str
    dest: str | None = None
    brush: Brush = Brush.GREEN

    @property
    def is_arrow(self) -> bool:
        return self.dest is not None

    def same_target(self, other: DrawShape) -> bool:
        return self.orig == other.orig and self.dest == other.dest


@dataclass(slots=True)
class TreeNode:
    """One ply of the game together with its continuations.

    ``children[0]`` is the main continuation; further children are side
    variations.
    """

    fen: str
    move: chess.Move | None = None
    san: str | None = None
    children: list[TreeNode] = field(default_factory=list)
    score: Score | None = None
    depth: int | None = None
    half_moves: int = 0
    shapes: list[DrawShape] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)
    comment: str = ""
    clock: int | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def turn(self) -> Color:
        """Side to move in this node's position."""
        return Color.to_move(self.half_moves)


@dataclass(slots=True)
class GameHeaders:
    """PGN header metadata plus the repertoire-specific fields."""

    id: int = 0
    fen: str = chess.STARTING_FEN
    event: str = ""
    site: str = ""
    date: str | None = None
    time: str | None = None
    round: str | None = None
    white: str = ""
    white_elo: int | None = None
    black: str = ""
    black_elo: int | None = None
    result: Outcome = Outcome.UNKNOWN
    time_control: str | None = None
    eco: str | None = None
    variant: str | None = None
    start: Path | None = None
    orientation: Color | None = None
    extra: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class TreeState:
    """The whole game tree, the cursor, headers and the unsaved-changes flag."""

    root: TreeNode
    headers: GameHeaders = field(default_factory=GameHeaders)
    position: Path = ()
    dirty: bool = False
