"""PGN tree builder (tokens -> tree) and serializer (tree -> PGN text)."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

import chess

from chesstree.core.annotation import annotation_from_nag
from chesstree.core.enums import Color, Outcome
from chesstree.core.models import GameHeaders, Path, TreeNode, TreeState
from chesstree.core.rules import apply_move, initial_half_moves
from chesstree.core.tree import create_node
from chesstree.errors import IllegalMoveError, InvalidFenError, PgnDecodeError
from chesstree.notation.comments import apply_comment, format_comment, parse_comment
from chesstree.notation.lexer import tokenize
from chesstree.notation.models import EncodeOptions, Token, TokenKind

_LOGGER = logging.getLogger(__name__)

_PGN_RESULT_TOKENS = {outcome.value for outcome in Outcome}


def outcome_from_pgn(token: str) -> Outcome:
    """Convert a PGN result token to :class:`Outcome` (``*`` when unknown)."""
    if token in _PGN_RESULT_TOKENS:
        return Outcome(token)
    return Outcome.UNKNOWN


# ── Headers ──────────────────────────────────────────────────────────────────


def _parse_start(value: str) -> Path | None:
    text = value.strip()
    if not text:
        return None
    try:
        if text.startswith("["):
            return tuple(int(i) for i in json.loads(text))
        return tuple(int(i) for i in text.split(","))
    except (ValueError, TypeError):
        _LOGGER.warning("Ignoring malformed Start header: %s", value)
        return None


def _parse_elo(value: str) -> int | None:
    return int(value) if value.strip().isdigit() else None


def headers_from_tokens(tokens: Sequence[Token]) -> GameHeaders:
    """Collect every header token into :class:`GameHeaders`."""
    headers = GameHeaders()
    for token in tokens:
        if token.kind != TokenKind.HEADER:
            continue
        tag, value = token.tag, token.value
        match tag:
            case "Event":
                headers.event = value
            case "Site":
                headers.site = value
            case "Date":
                headers.date = value
            case "Time" | "UTCTime":
                headers.time = value
            case "Round":
                headers.round = value
            case "White":
                headers.white = value
            case "Black":
                headers.black = value
            case "WhiteElo":
                headers.white_elo = _parse_elo(value)
            case "BlackElo":
                headers.black_elo = _parse_elo(value)
            case "Result":
                headers.result = outcome_from_pgn(value)
            case "TimeControl":
                headers.time_control = value
            case "ECO":
                headers.eco = value
            case "Variant":
                headers.variant = value
            case "FEN":
                headers.fen = value.strip()
            case "SetUp":
                pass
            case "Start":
                headers.start = _parse_start(value)
            case "Orientation":
                if value in (Color.WHITE.value, Color.BLACK.value):
                    headers.orientation = Color(value)
            case _:
                headers.extra[tag] = value
    return headers


def _escape_header(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def header_lines(headers: GameHeaders) -> list[str]:
    """Render *headers* as PGN tag pairs, seven-tag roster first."""
    pairs: list[tuple[str, str]] = [
        ("Event", headers.event or "?"),
        ("Site", headers.site or "?"),
        ("Date", headers.date or "????.??.??"),
        ("Round", headers.round or "?"),
        ("White", headers.white or "?"),
        ("Black", headers.black or "?"),
        ("Result", headers.result.value),
    ]
    if headers.time:
        pairs.append(("Time", headers.time))
    if headers.white_elo is not None:
        pairs.append(("WhiteElo", str(headers.white_elo)))
    if headers.black_elo is not None:
        pairs.append(("BlackElo", str(headers.black_elo)))
    if headers.time_control:
        pairs.append(("TimeControl", headers.time_control))
    if headers.eco:
        pairs.append(("ECO", headers.eco))
    if headers.variant:
        pairs.append(("Variant", headers.variant))
    if headers.fen != chess.STARTING_FEN:
        pairs.append(("SetUp", "1"))
        pairs.append(("FEN", headers.fen))
    if headers.start is not None:
        pairs.append(("Start", json.dumps(list(headers.start))))
    if headers.orientation is not None:
        pairs.append(("Orientation", headers.orientation.value))
    pairs.extend(headers.extra.items())
    return [f'[{key} "{_escape_header(value)}"]' for key, value in pairs]


# ── Decoding ─────────────────────────────────────────────────────────────────


def _matching_close(tokens: Sequence[Token], open_index: int, offset: int) -> int:
    depth = 0
    for index in range(open_index + 1, len(tokens)):
        kind = tokens[index].kind
        if kind == TokenKind.PAREN_OPEN:
            depth += 1
        elif kind == TokenKind.PAREN_CLOSE:
            if depth == 0:
                return index
            depth -= 1
    raise PgnDecodeError("Unterminated variation", offset + open_index)


def _build_tree(
    tokens: Sequence[Token], fen: str, half_moves: int, offset: int
) -> TreeNode:
    """Build the line described by *tokens*, starting from *fen*.

    Moves extend a single chain; each parenthesized block is built
    recursively from the position before the last move and spliced in as
    side variations of that move.
    """
    root = TreeNode(fen=fen, half_moves=half_moves)
    current = root
    parent: TreeNode | None = None

    index = 0
    while index < len(tokens):
        token = tokens[index]
        match token.kind:
            case TokenKind.PAREN_OPEN:
                close = _matching_close(tokens, index, offset)
                if parent is None:
                    raise PgnDecodeError("Variation before any move", offset + index)
                variation = _build_tree(
                    tokens[index + 1 : close],
                    parent.fen,
                    parent.half_moves,
                    offset + index + 1,
                )
                if variation.comment and variation.children:
                    # A comment before the first move belongs to that move.
                    first = variation.children[0]
                    first.comment = " ".join(
                        text for text in (variation.comment, first.comment) if text
                    )
                parent.children.extend(variation.children)
                index = close
            case TokenKind.PAREN_CLOSE:
                raise PgnDecodeError("Unbalanced ')'", offset + index)
            case TokenKind.COMMENT:
                apply_comment(current, parse_comment(token.value))
            case TokenKind.SAN:
                try:
                    applied = apply_move(current.fen, token.value)
                except IllegalMoveError as exc:
                    raise PgnDecodeError(
                        f"Illegal move {token.value!r}", offset + index
                    ) from exc
                node = create_node(
                    fen=applied.fen,
                    move=applied.move,
                    san=applied.san,
                    half_moves=current.half_moves + 1,
                )
                current.children.append(node)
                parent, current = current, node
            case TokenKind.NAG:
                annotation = annotation_from_nag(token.value)
                if annotation is None:
                    _LOGGER.warning("Ignoring unknown NAG %s", token.value)
                elif annotation not in current.annotations:
                    current.annotations.append(annotation)
            case TokenKind.HEADER:
                pass
            case TokenKind.OUTCOME:
                break
        index += 1
    return root


def decode_pgn(
    tokens: Sequence[Token],
    start_fen: str | None = None,
    start_halfmove: int | None = None,
) -> TreeState:
    """Build a brand-new :class:`TreeState` from a PGN token stream.

    A ``FEN`` header takes precedence over *start_fen*. Raises
    :class:`~chesstree.errors.PgnDecodeError` naming the offending token.
    """
    headers = headers_from_tokens(tokens)
    fen_index = next(
        (
            i
            for i, token in enumerate(tokens)
            if token.kind == TokenKind.HEADER and token.tag == "FEN"
        ),
        None,
    )
    fen = headers.fen if fen_index is not None else (start_fen or chess.STARTING_FEN)

    try:
        half_moves = initial_half_moves(fen)
    except InvalidFenError as exc:
        raise PgnDecodeError(f"Invalid starting FEN {fen!r}", fen_index) from exc
    if start_halfmove is not None:
        half_moves = start_halfmove

    root = _build_tree(tokens, fen, half_moves, 0)
    headers.fen = fen

    if headers.result == Outcome.UNKNOWN:
        outcome = next((t for t in tokens if t.kind == TokenKind.OUTCOME), None)
        if outcome is not None:
            headers.result = outcome_from_pgn(outcome.value)

    return TreeState(root=root, headers=headers, position=(), dirty=False)


def parse_pgn(pgn_text: str, start_fen: str | None = None) -> TreeState:
    """Tokenize and decode the first game in *pgn_text*."""
    return decode_pgn(tokenize(pgn_text), start_fen=start_fen)


# ── Encoding ─────────────────────────────────────────────────────────────────


def _move_text(node: TreeNode, options: EncodeOptions, first: bool) -> list[str]:
    parts: list[str] = []
    number = (node.half_moves + 1) // 2
    if node.half_moves % 2 == 1:
        parts.append(f"{number}.")
    elif first:
        parts.append(f"{number}...")
    parts.append(node.san or "")
    if options.symbols:
        parts.extend(f"${a.nag}" for a in node.annotations if a.nag)
    comment = _comment_block(node, options)
    if comment:
        parts.append(comment)
    return parts


def _comment_block(node: TreeNode, options: EncodeOptions) -> str:
    body = format_comment(
        node, comments=options.comments, special_tags=options.special_tags
    )
    return f"{{{body}}}" if body else ""


def _continuation(
    node: TreeNode,
    options: EncodeOptions,
    line: Path | None,
    first: bool,
) -> list[str]:
    """Movetext for everything after *node*.

    The main child is written first, then every side variation in
    parentheses, then the rest of the main line.
    """
    if not node.children:
        return []

    if line is not None:
        main_index = line[0] if line and line[0] < len(node.children) else 0
        rest: Path | None = line[1:]
    else:
        main_index = 0
        rest = None
    main = node.children[main_index]

    parts = _move_text(main, options, first)

    emitted_variation = False
    if options.variations and line is None:
        for index, child in enumerate(node.children):
            if index == main_index:
                continue
            inner = _move_text(child, options, True)
            inner.extend(_continuation(child, options, None, False))
            parts.append(f"({' '.join(inner)})")
            emitted_variation = True

    parts.extend(_continuation(main, options, rest, emitted_variation))
    return parts


def encode_pgn(
    root: TreeNode,
    headers: GameHeaders | None = None,
    options: EncodeOptions | None = None,
) -> str:
    """Serialize the tree under *root* (and optionally *headers*) to PGN."""
    opts = options or EncodeOptions()
    parts: list[str] = []

    root_comment = _comment_block(root, opts)
    if root_comment:
        parts.append(root_comment)
    parts.extend(_continuation(root, opts, opts.path, True))

    result = headers.result if headers is not None else Outcome.UNKNOWN
    parts.append(result.value)
    movetext = " ".join(part for part in parts if part)

    if headers is None or not opts.headers:
        return movetext
    return "\n".join([*header_lines(headers), "", movetext, ""])


def encode_state(state: TreeState, options: EncodeOptions | None = None) -> str:
    """Serialize a whole :class:`TreeState` including headers."""
    return encode_pgn(state.root, state.headers, options)
