"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from chesstree.core.models import DrawShape, Path, Score


class TokenKind(StrEnum):
    """Kinds of PGN lexemes the tree builder understands."""

    PAREN_OPEN = "ParenOpen"
    PAREN_CLOSE = "ParenClose"
    COMMENT = "Comment"
    SAN = "San"
    HEADER = "Header"
    NAG = "Nag"
    OUTCOME = "Outcome"


@dataclass(slots=True, frozen=True)
class Token:
    """One PGN lexeme. ``tag`` is only set for header tokens."""

    kind: TokenKind
    value: str = ""
    tag: str = ""

    @classmethod
    def paren_open(cls) -> Token:
        return cls(TokenKind.PAREN_OPEN)

    @classmethod
    def paren_close(cls) -> Token:
        return cls(TokenKind.PAREN_CLOSE)

    @classmethod
    def comment(cls, text: str) -> Token:
        return cls(TokenKind.COMMENT, text)

    @classmethod
    def san(cls, san: str) -> Token:
        return cls(TokenKind.SAN, san)

    @classmethod
    def header(cls, tag: str, value: str) -> Token:
        return cls(TokenKind.HEADER, value, tag)

    @classmethod
    def nag(cls, nag: str) -> Token:
        return cls(TokenKind.NAG, nag)

    @classmethod
    def outcome(cls, outcome: str) -> Token:
        return cls(TokenKind.OUTCOME, outcome)


@dataclass(slots=True)
class ParsedComment:
    """A PGN comment split into embedded tags and leftover free text."""

    text: str = ""
    score: Score | None = None
    shapes: list[DrawShape] = field(default_factory=list)
    clock: int | None = None


@dataclass(slots=True, frozen=True)
class EncodeOptions:
    """What the PGN encoder emits.

    ``path`` restricts the output to the single line through that node,
    continuing along the main line past its end.
    """

    headers: bool = True
    symbols: bool = True
    comments: bool = True
    variations: bool = True
    special_tags: bool = True
    path: Path | None = None
