"""Notation package: PGN tokens, embedded comment tags, tree codec."""

from chesstree.notation.comments import format_comment, parse_comment
from chesstree.notation.lexer import tokenize
from chesstree.notation.models import EncodeOptions, ParsedComment, Token, TokenKind
from chesstree.notation.pgn import (
    decode_pgn,
    encode_pgn,
    encode_state,
    header_lines,
    headers_from_tokens,
    outcome_from_pgn,
    parse_pgn,
)

__all__ = [
    "EncodeOptions",
    "ParsedComment",
    "Token",
    "TokenKind",
    "decode_pgn",
    "encode_pgn",
    "encode_state",
    "format_comment",
    "header_lines",
    "headers_from_tokens",
    "outcome_from_pgn",
    "parse_comment",
    "parse_pgn",
    "tokenize",
]
