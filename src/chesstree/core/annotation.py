"""Move annotation symbols and their PGN NAG mapping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Annotation(StrEnum):
    """Annotation glyphs a node may carry."""

    NONE = ""
    GOOD = "!"
    BRILLIANT = "!!"
    MISTAKE = "?"
    BLUNDER = "??"
    INTERESTING = "!?"
    DUBIOUS = "?!"
    WHITE_WINNING = "+-"
    WHITE_ADVANTAGE = "±"
    WHITE_EDGE = "⩲"
    EQUAL = "="
    UNCLEAR = "∞"
    BLACK_EDGE = "⩱"
    BLACK_ADVANTAGE = "∓"
    BLACK_WINNING = "-+"
    NOVELTY = "N"
    DEVELOPMENT = "↑↑"
    INITIATIVE = "↑"
    ATTACK = "→"
    COUNTERPLAY = "⇆"
    WITH_COMPENSATION = "=∞"
    TIME_TROUBLE = "⊕"
    WITH_IDEA = "∆"
    ONLY_MOVE = "□"
    ZUGZWANG = "⨀"

    @property
    def nag(self) -> int:
        """Canonical PGN NAG number (0 for :attr:`NONE`)."""
        return ANNOTATION_INFO[self].nag

    @property
    def group(self) -> str | None:
        """Mutually exclusive group, or ``None`` for free-standing symbols."""
        return ANNOTATION_INFO[self].group

    @property
    def label(self) -> str:
        return ANNOTATION_INFO[self].name

    @property
    def is_basic(self) -> bool:
        """Whether this is a move-quality symbol (``!``, ``??``, ...)."""
        return self.group == "basic"


@dataclass(slots=True, frozen=True)
class AnnotationInfo:
    name: str
    nag: int
    group: str | None = None


ANNOTATION_INFO: dict[Annotation, AnnotationInfo] = {
    Annotation.NONE: AnnotationInfo("None", 0),
    Annotation.BRILLIANT: AnnotationInfo("Brilliant", 3, "basic"),
    Annotation.GOOD: AnnotationInfo("Good", 1, "basic"),
    Annotation.INTERESTING: AnnotationInfo("Interesting", 5, "basic"),
    Annotation.DUBIOUS: AnnotationInfo("Dubious", 6, "basic"),
    Annotation.MISTAKE: AnnotationInfo("Mistake", 2, "basic"),
    Annotation.BLUNDER: AnnotationInfo("Blunder", 4, "basic"),
    Annotation.WHITE_WINNING: AnnotationInfo("White is winning", 18, "advantage"),
    Annotation.WHITE_ADVANTAGE: AnnotationInfo(
        "White has a clear advantage", 16, "advantage"
    ),
    Annotation.WHITE_EDGE: AnnotationInfo(
        "White has a slight advantage", 14, "advantage"
    ),
    Annotation.EQUAL: AnnotationInfo("Equal position", 10, "advantage"),
    Annotation.UNCLEAR: AnnotationInfo("Unclear position", 13, "advantage"),
    Annotation.BLACK_EDGE: AnnotationInfo(
        "Black has a slight advantage", 15, "advantage"
    ),
    Annotation.BLACK_ADVANTAGE: AnnotationInfo(
        "Black has a clear advantage", 17, "advantage"
    ),
    Annotation.BLACK_WINNING: AnnotationInfo("Black is winning", 19, "advantage"),
    Annotation.NOVELTY: AnnotationInfo("Novelty", 146),
    Annotation.DEVELOPMENT: AnnotationInfo("Development", 32),
    Annotation.INITIATIVE: AnnotationInfo("Initiative", 36),
    Annotation.ATTACK: AnnotationInfo("Attack", 40),
    Annotation.COUNTERPLAY: AnnotationInfo("Counterplay", 132),
    Annotation.WITH_COMPENSATION: AnnotationInfo("With compensation", 44),
    Annotation.TIME_TROUBLE: AnnotationInfo("Time Trouble", 138),
    Annotation.WITH_IDEA: AnnotationInfo("With the idea", 140),
    Annotation.ONLY_MOVE: AnnotationInfo("Only move", 7),
    Annotation.ZUGZWANG: AnnotationInfo("Zugzwang", 22),
}

# PGN allows a white- and a black-perspective NAG for several symbols; both
# decode to the same annotation, and encoding always uses ANNOTATION_INFO.
NAG_INFO: dict[int, Annotation] = {
    1: Annotation.GOOD,
    2: Annotation.MISTAKE,
    3: Annotation.BRILLIANT,
    4: Annotation.BLUNDER,
    5: Annotation.INTERESTING,
    6: Annotation.DUBIOUS,
    7: Annotation.ONLY_MOVE,
    10: Annotation.EQUAL,
    13: Annotation.UNCLEAR,
    14: Annotation.WHITE_EDGE,
    15: Annotation.BLACK_EDGE,
    16: Annotation.WHITE_ADVANTAGE,
    17: Annotation.BLACK_ADVANTAGE,
    18: Annotation.WHITE_WINNING,
    19: Annotation.BLACK_WINNING,
    22: Annotation.ZUGZWANG,
    23: Annotation.ZUGZWANG,
    32: Annotation.DEVELOPMENT,
    33: Annotation.DEVELOPMENT,
    36: Annotation.INITIATIVE,
    37: Annotation.INITIATIVE,
    40: Annotation.ATTACK,
    41: Annotation.ATTACK,
    44: Annotation.WITH_COMPENSATION,
    45: Annotation.WITH_COMPENSATION,
    132: Annotation.COUNTERPLAY,
    133: Annotation.COUNTERPLAY,
    138: Annotation.TIME_TROUBLE,
    139: Annotation.TIME_TROUBLE,
    140: Annotation.WITH_IDEA,
    146: Annotation.NOVELTY,
}

BASIC_ANNOTATIONS: tuple[Annotation, ...] = (
    Annotation.BRILLIANT,
    Annotation.GOOD,
    Annotation.INTERESTING,
    Annotation.DUBIOUS,
    Annotation.MISTAKE,
    Annotation.BLUNDER,
)


def annotation_from_nag(nag: str | int) -> Annotation | None:
    """Map ``$n`` (or the bare number) to an :class:`Annotation`.

    Unknown or malformed NAGs return ``None``.
    """
    if isinstance(nag, str):
        text = nag[1:] if nag.startswith("$") else nag
        if not text.isdigit():
            return None
        nag = int(text)
    return NAG_INFO.get(nag)


def toggle_annotation(
    annotations: list[Annotation], symbol: Annotation
) -> list[Annotation]:
    """Return *annotations* with *symbol* toggled.

    Adding a grouped symbol evicts any other symbol of the same group; the
    result is ordered by NAG number.
    """
    if symbol in annotations:
        return [a for a in annotations if a != symbol]
    kept = [a for a in annotations if a.group is None or a.group != symbol.group]
    return sorted([*kept, symbol], key=lambda a: a.nag)


def assign_annotation(
    annotations: list[Annotation], symbol: Annotation
) -> list[Annotation]:
    """Like :func:`toggle_annotation` but never removes *symbol* itself."""
    if symbol in annotations:
        return list(annotations)
    return toggle_annotation(annotations, symbol)
