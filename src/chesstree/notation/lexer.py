"""PGN tokenizer built on the python-chess visitor API.

The tree builder only consumes :class:`Token` lists; this module is the
adapter that produces them from PGN text.
"""

from __future__ import annotations

import io

import chess
import chess.pgn

from chesstree.errors import PgnTokenizeError
from chesstree.notation.models import Token


class _TokenVisitor(chess.pgn.BaseVisitor[list[Token]]):
    """Flattens a parsed PGN game into a token list."""

    def __init__(self) -> None:
        self._tokens: list[Token] = []

    def visit_header(self, tagname: str, tagvalue: str) -> None:
        self._tokens.append(Token.header(tagname, tagvalue))

    def visit_move(self, board: chess.Board, move: chess.Move) -> None:
        self._tokens.append(Token.san(board.san(move)))

    def visit_comment(self, comment: str | list[str]) -> None:
        text = comment if isinstance(comment, str) else " ".join(comment)
        if text.strip():
            self._tokens.append(Token.comment(text))

    def visit_nag(self, nag: int) -> None:
        self._tokens.append(Token.nag(f"${nag}"))

    def begin_variation(self) -> None:
        self._tokens.append(Token.paren_open())

    def end_variation(self) -> None:
        self._tokens.append(Token.paren_close())

    def visit_result(self, result: str) -> None:
        self._tokens.append(Token.outcome(result))

    def handle_error(self, error: Exception) -> None:
        raise PgnTokenizeError(f"Cannot tokenize PGN: {error}") from error

    def result(self) -> list[Token]:
        return self._tokens


def tokenize(pgn_text: str) -> list[Token]:
    """Split the first game of *pgn_text* into tokens.

    Returns an empty list when the text holds no game.
    """
    tokens = chess.pgn.read_game(io.StringIO(pgn_text), Visitor=_TokenVisitor)
    return tokens if tokens is not None else []
