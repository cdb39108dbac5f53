"""Embedded comment tags: ``[%eval]``, ``[%csl]``, ``[%cal]`` and ``[%clk]``."""

from __future__ import annotations

import logging
import re

from chesstree.core.enums import Brush, ScoreKind
from chesstree.core.models import DrawShape, Score, TreeNode
from chesstree.notation.models import ParsedComment

_LOGGER = logging.getLogger(__name__)

_EVAL_RE = re.compile(r"\[%eval\s+([^\]\s]+)\s*\]")
_CSL_RE = re.compile(r"\[%csl\s+([^\]]*)\]")
_CAL_RE = re.compile(r"\[%cal\s+([^\]]*)\]")
_CLK_RE = re.compile(r"\[%clk\s+(\d+):(\d{1,2}):(\d{1,2}(?:\.\d+)?)\s*\]")
_SQUARE_RE = re.compile(r"^([RGYB]?)([a-h][1-8])$", re.IGNORECASE)
_ARROW_RE = re.compile(r"^([RGYB]?)([a-h][1-8])([a-h][1-8])$", re.IGNORECASE)


def parse_eval(text: str) -> Score | None:
    """Parse an ``[%eval]`` payload such as ``0.36``, ``-1.2`` or ``#-3``."""
    try:
        if text.startswith("#"):
            return Score.mate(int(text[1:]))
        return Score.cp(round(float(text) * 100))
    except ValueError:
        _LOGGER.warning("Ignoring unparseable [%%eval %s]", text)
        return None


def format_eval(score: Score) -> str:
    if score.kind == ScoreKind.MATE:
        return f"#{score.value}"
    pawns = f"{abs(score.value) / 100:.2f}"
    if score.value > 0:
        return f"+{pawns}"
    if score.value < 0:
        return f"-{pawns}"
    return pawns


def _parse_square_markers(payload: str) -> list[DrawShape]:
    shapes: list[DrawShape] = []
    for entry in payload.replace(" ", "").split(","):
        match = _SQUARE_RE.match(entry)
        if match is None:
            continue
        brush = Brush.from_letter(match.group(1)) or Brush.GREEN
        shapes.append(DrawShape(match.group(2).lower(), None, brush))
    return shapes


def _parse_arrows(payload: str) -> list[DrawShape]:
    shapes: list[DrawShape] = []
    for entry in payload.replace(" ", "").split(","):
        match = _ARROW_RE.match(entry)
        if match is None:
            continue
        brush = Brush.from_letter(match.group(1)) or Brush.GREEN
        shapes.append(
            DrawShape(match.group(2).lower(), match.group(3).lower(), brush)
        )
    return shapes


def parse_clock(hours: str, minutes: str, seconds: str) -> int:
    """Convert ``h:mm:ss(.f)`` parts to milliseconds."""
    total = int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    return round(total * 1000)


def format_clock(clock_ms: int) -> str:
    seconds_total, millis = divmod(clock_ms, 1000)
    hours, rest = divmod(seconds_total, 3600)
    minutes, seconds = divmod(rest, 60)
    text = f"{hours}:{minutes:02d}:{seconds:02d}"
    if millis:
        text += f".{millis // 100}"
    return text


def parse_comment(comment: str) -> ParsedComment:
    """Extract embedded tags from *comment* and keep the remaining text."""
    parsed = ParsedComment()

    for match in _EVAL_RE.finditer(comment):
        parsed.score = parse_eval(match.group(1))
    for match in _CSL_RE.finditer(comment):
        parsed.shapes.extend(_parse_square_markers(match.group(1)))
    for match in _CAL_RE.finditer(comment):
        parsed.shapes.extend(_parse_arrows(match.group(1)))
    for match in _CLK_RE.finditer(comment):
        parsed.clock = parse_clock(*match.groups())

    text = comment
    for pattern in (_EVAL_RE, _CSL_RE, _CAL_RE, _CLK_RE):
        text = pattern.sub(" ", text)
    parsed.text = " ".join(text.split())
    return parsed


def apply_comment(node: TreeNode, parsed: ParsedComment) -> None:
    """Merge a parsed comment into *node*; later comments extend earlier ones."""
    if parsed.score is not None:
        node.score = parsed.score
    if parsed.clock is not None:
        node.clock = parsed.clock
    for shape in parsed.shapes:
        if not any(existing.same_target(shape) for existing in node.shapes):
            node.shapes.append(shape)
    if parsed.text:
        node.comment = f"{node.comment} {parsed.text}" if node.comment else parsed.text


def format_comment(node: TreeNode, *, comments: bool, special_tags: bool) -> str:
    """Serialize the comment body of *node* (without braces)."""
    parts: list[str] = []
    if special_tags:
        if node.score is not None:
            parts.append(f"[%eval {format_eval(node.score)}]")
        if node.clock is not None:
            parts.append(f"[%clk {format_clock(node.clock)}]")
        squares = [s for s in node.shapes if not s.is_arrow]
        arrows = [s for s in node.shapes if s.is_arrow]
        if squares:
            body = ",".join(f"{s.brush.letter}{s.orig}" for s in squares)
            parts.append(f"[%csl {body}]")
        if arrows:
            body = ",".join(f"{s.brush.letter}{s.orig}{s.dest}" for s in arrows)
            parts.append(f"[%cal {body}]")
    if comments and node.comment:
        # PGN comments cannot contain a closing brace.
        parts.append(node.comment.replace("}", "]"))
    return " ".join(parts)
