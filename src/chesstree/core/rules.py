"""Move-legality adapter over python-chess.

The tree never decides legality itself: every move goes through
:func:`apply_move`, which either returns the resolved move with the resulting
position or raises :class:`~chesstree.errors.IllegalMoveError`.
"""

from __future__ import annotations

from dataclasses import dataclass

import chess

from chesstree.errors import IllegalMoveError, InvalidFenError

STARTING_FEN = chess.STARTING_FEN

MoveLike = chess.Move | str


@dataclass(slots=True, frozen=True)
class AppliedMove:
    """A legal move played from a FEN, with the resulting position facts."""

    move: chess.Move
    san: str
    fen: str
    is_checkmate: bool
    is_stalemate: bool
    is_insufficient_material: bool
    turn: chess.Color

    @property
    def is_capture(self) -> bool:
        return "x" in self.san


def position_from_fen(fen: str) -> chess.Board:
    """Parse *fen* into a board, raising :class:`InvalidFenError`."""
    try:
        return chess.Board(fen.strip())
    except ValueError as exc:
        raise InvalidFenError(f"Invalid FEN: {fen!r}") from exc


def truncate_fen(fen: str) -> str:
    """Drop the half-move clock and full-move number from *fen*."""
    return " ".join(fen.split()[:4])


def resolve_move(board: chess.Board, move: MoveLike) -> chess.Move:
    """Resolve a SAN/UCI string or :class:`chess.Move` to a legal move."""
    if isinstance(move, chess.Move):
        if not board.is_legal(move):
            raise IllegalMoveError(f"Illegal move {move.uci()} in {board.fen()}")
        return move

    text = move.strip()
    try:
        return board.parse_san(text)
    except ValueError:
        pass
    try:
        parsed = chess.Move.from_uci(text)
    except ValueError as exc:
        raise IllegalMoveError(f"Cannot parse move {text!r}") from exc
    if not board.is_legal(parsed):
        raise IllegalMoveError(f"Illegal move {text!r} in {board.fen()}")
    return parsed


def apply_move(fen: str, move: MoveLike) -> AppliedMove:
    """Play *move* from *fen* and describe the resulting position."""
    board = position_from_fen(fen)
    resolved = resolve_move(board, move)
    san = board.san(resolved)
    board.push(resolved)
    return AppliedMove(
        move=resolved,
        san=san,
        fen=board.fen(),
        is_checkmate=board.is_checkmate(),
        is_stalemate=board.is_stalemate(),
        is_insufficient_material=board.is_insufficient_material(),
        turn=board.turn,
    )


def is_game_over(fen: str) -> bool:
    """Whether no further move can be played from *fen* (mate or draw)."""
    board = position_from_fen(fen)
    return (
        board.is_checkmate()
        or board.is_stalemate()
        or board.is_insufficient_material()
    )


def initial_half_moves(fen: str) -> int:
    """Ply count implied by the FEN's full-move number and side to move."""
    board = position_from_fen(fen)
    return 2 * (board.fullmove_number - 1) + (0 if board.turn == chess.WHITE else 1)


def resets_fifty_move_count(san: str) -> bool:
    """Whether a move in SAN is a pawn move, capture, or promotion."""
    if not san:
        return False
    return san[0] in "abcdefgh" or "x" in san or "=" in san
