"""Tests for the PGN tree builder and serializer."""

from __future__ import annotations

import chess
import pytest

from chesstree.core.annotation import Annotation
from chesstree.core.enums import Brush, Color, Outcome
from chesstree.core.models import DrawShape, Score, TreeNode, TreeState
from chesstree.core.tree import default_tree, iter_dfs, node_at
from chesstree.errors import PgnDecodeError
from chesstree.notation import (
    EncodeOptions,
    Token,
    decode_pgn,
    encode_pgn,
    encode_state,
    header_lines,
    parse_pgn,
    tokenize,
)
from chesstree.state import (
    GoToMove,
    MakeMove,
    SetAnnotation,
    SetComment,
    SetScore,
    SetShapes,
    apply,
)

SCANDI_FEN = "rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 2"


def _shape(state: TreeState) -> list[tuple[tuple[int, ...], str | None]]:
    return [(path, node.san) for path, node in iter_dfs(state.root)]


def _payload(node: TreeNode) -> tuple[object, ...]:
    return (
        node.san,
        node.comment,
        tuple(node.annotations),
        tuple(node.shapes),
        node.score,
        node.clock,
    )


def _annotated_game(state: TreeState) -> TreeState:
    """1. e4 {..} e5 (1... c5 $1 2. Nf3) 2. Nf3 ?! with tags."""
    state = apply(state, GoToMove((0,)))
    state = apply(state, SetComment("king pawn"))
    state = apply(state, SetScore(Score.cp(36)))
    state = apply(state, SetShapes((DrawShape("e4"),)))
    state = apply(state, SetShapes((DrawShape("g1", "f3", Brush.RED),)))
    state = apply(state, MakeMove("c5"))
    state = apply(state, SetAnnotation(Annotation.GOOD))
    state = apply(state, MakeMove("Nf3"))
    state = apply(state, GoToMove((0, 0, 0)))
    state = apply(state, SetAnnotation(Annotation.DUBIOUS))
    state = apply(state, SetAnnotation(Annotation.NOVELTY))
    return apply(state, SetScore(Score.mate(-4)))


class TestEncode:
    def test_main_line(self, open_game: TreeState) -> None:
        assert encode_pgn(open_game.root) == "1. e4 e5 2. Nf3 *"

    def test_variation_resumes_with_black_number(self, fresh: TreeState) -> None:
        state = apply(fresh, MakeMove("e4"))
        state = apply(state, MakeMove("e5"))
        state = apply(state, GoToMove(()))
        state = apply(state, MakeMove("d4"))
        assert encode_pgn(state.root) == "1. e4 (1. d4) 1... e5 *"

    def test_black_variation_number(self, open_game: TreeState) -> None:
        state = apply(open_game, GoToMove((0,)))
        state = apply(state, MakeMove("c5"))
        assert encode_pgn(state.root) == "1. e4 e5 (1... c5) 2. Nf3 *"

    def test_symbols_and_comments(self, open_game: TreeState) -> None:
        state = _annotated_game(open_game)
        assert encode_pgn(state.root) == (
            "1. e4 {[%eval +0.36] [%csl Ge4] [%cal Rg1f3] king pawn} e5 "
            "(1... c5 $1 2. Nf3) 2. Nf3 $6 $146 {[%eval #-4]} *"
        )

    def test_options_strip_everything(self, open_game: TreeState) -> None:
        state = _annotated_game(open_game)
        options = EncodeOptions(
            symbols=False, comments=False, variations=False, special_tags=False
        )
        assert encode_pgn(state.root, options=options) == "1. e4 e5 2. Nf3 *"

    def test_path_option_follows_one_line(self, open_game: TreeState) -> None:
        state = _annotated_game(open_game)
        options = EncodeOptions(symbols=False, special_tags=False, path=(0, 1))
        assert encode_pgn(state.root, options=options) == (
            "1. e4 {king pawn} c5 2. Nf3 *"
        )

    def test_headers(self, open_game: TreeState) -> None:
        open_game.headers.white = "Alice"
        open_game.headers.black = 'Bob "the rook"'
        open_game.headers.result = Outcome.WHITE_WINS
        text = encode_state(open_game)
        lines = text.split("\n")
        assert lines[0] == '[Event "?"]'
        assert '[White "Alice"]' in lines
        assert '[Black "Bob \\"the rook\\""]' in lines
        assert '[Result "1-0"]' in lines
        assert lines[-2] == "1. e4 e5 2. Nf3 1-0"
        assert lines[-1] == ""

    def test_custom_start_emits_fen(self) -> None:
        state = default_tree(SCANDI_FEN)
        lines = header_lines(state.headers)
        assert '[SetUp "1"]' in lines
        assert f'[FEN "{SCANDI_FEN}"]' in lines

    def test_standard_start_has_no_fen(self, fresh: TreeState) -> None:
        assert not any(line.startswith("[FEN") for line in header_lines(fresh.headers))

    def test_repertoire_headers(self, fresh: TreeState) -> None:
        fresh.headers.start = (0, 1)
        fresh.headers.orientation = Color.BLACK
        lines = header_lines(fresh.headers)
        assert '[Start "[0, 1]"]' in lines
        assert '[Orientation "black"]' in lines


class TestDecode:
    def test_variation_scenario(self) -> None:
        state = parse_pgn("1. e4 (1. d4) 1... e5 *")
        assert [c.san for c in state.root.children] == ["e4", "d4"]
        assert node_at(state.root, (0, 0)).san == "e5"
        assert node_at(state.root, (1,)).children == []
        assert state.position == ()
        assert not state.dirty

    def test_nested_variations(self) -> None:
        state = parse_pgn("1. e4 e5 (1... c5 2. Nf3 (2. c3 d5) 2... d6) 2. Nf3 *")
        assert _shape(state) == [
            ((), None),
            ((0,), "e4"),
            ((0, 0), "e5"),
            ((0, 0, 0), "Nf3"),
            ((0, 1), "c5"),
            ((0, 1, 0), "Nf3"),
            ((0, 1, 0, 0), "d6"),
            ((0, 1, 1), "c3"),
            ((0, 1, 1, 0), "d5"),
        ]

    def test_half_moves(self) -> None:
        state = parse_pgn("1. e4 e5 (1... c5) 2. Nf3 *")
        for path, node in iter_dfs(state.root):
            assert node.half_moves == len(path)

    def test_headers_and_result(self) -> None:
        pgn = (
            '[Event "Club"]\n[White "A"]\n[Black "B"]\n[WhiteElo "2100"]\n'
            '[Result "0-1"]\n[Annotator "C"]\n\n1. f3 e5 2. g4 Qh4# 0-1\n'
        )
        state = parse_pgn(pgn)
        assert state.headers.event == "Club"
        assert state.headers.white_elo == 2100
        assert state.headers.result == Outcome.BLACK_WINS
        assert state.headers.extra == {"Annotator": "C"}

    def test_outcome_token_fills_unknown_result(self) -> None:
        state = decode_pgn([Token.san("e4"), Token.outcome("1/2-1/2")])
        assert state.headers.result == Outcome.DRAW

    def test_fen_header_wins_over_argument(self) -> None:
        tokens = [Token.header("FEN", SCANDI_FEN), Token.san("exd5")]
        state = decode_pgn(tokens, start_fen=chess.STARTING_FEN)
        assert state.root.fen == SCANDI_FEN
        assert state.root.half_moves == 2
        assert state.root.children[0].san == "exd5"

    def test_start_fen_argument(self) -> None:
        state = decode_pgn([Token.san("exd5")], start_fen=SCANDI_FEN)
        assert state.headers.fen == SCANDI_FEN

    def test_start_halfmove_override(self) -> None:
        state = decode_pgn([Token.san("e4")], start_halfmove=10)
        assert state.root.half_moves == 10
        assert state.root.children[0].half_moves == 11

    def test_comments_and_nags(self) -> None:
        state = parse_pgn(
            "{opening} 1. e4 $1 {[%eval 0.3] [%clk 0:05:00] best by test} "
            "e5 $250 $2 *"
        )
        e4 = node_at(state.root, (0,))
        assert state.root.comment == "opening"
        assert e4.annotations == [Annotation.GOOD]
        assert e4.score == Score.cp(30)
        assert e4.clock == 300_000
        assert e4.comment == "best by test"
        assert node_at(state.root, (0, 0)).annotations == [Annotation.MISTAKE]

    def test_comment_before_first_variation_move(self) -> None:
        tokens = [
            Token.san("e4"),
            Token.paren_open(),
            Token.comment("start"),
            Token.san("d4"),
            Token.comment("queen pawn"),
            Token.paren_close(),
            Token.san("e5"),
        ]
        state = decode_pgn(tokens)
        assert node_at(state.root, (1,)).comment == "start queen pawn"
        assert state.root.comment == ""

    def test_outcome_stops_parsing(self) -> None:
        state = decode_pgn([Token.san("e4"), Token.outcome("*"), Token.san("e5")])
        assert node_at(state.root, (0,)).children == []

    def test_repertoire_headers(self) -> None:
        state = parse_pgn('[Start "[0, 1]"]\n[Orientation "black"]\n\n1. e4 *')
        assert state.headers.start == (0, 1)
        assert state.headers.orientation == Color.BLACK

    def test_empty_text(self) -> None:
        assert tokenize("") == []
        assert parse_pgn("").root.children == []


class TestDecodeErrors:
    def test_illegal_san(self) -> None:
        with pytest.raises(PgnDecodeError) as info:
            decode_pgn([Token.san("e4"), Token.san("e4")])
        assert info.value.token_index == 1
        assert "(token 1)" in str(info.value)

    def test_illegal_san_inside_variation(self) -> None:
        tokens = [
            Token.san("e4"),
            Token.paren_open(),
            Token.san("d4"),
            Token.san("d4"),
            Token.paren_close(),
        ]
        with pytest.raises(PgnDecodeError) as info:
            decode_pgn(tokens)
        assert info.value.token_index == 3

    def test_variation_before_first_move(self) -> None:
        tokens = [Token.paren_open(), Token.san("e4"), Token.paren_close()]
        with pytest.raises(PgnDecodeError) as info:
            decode_pgn(tokens)
        assert info.value.token_index == 0

    def test_unbalanced_close(self) -> None:
        with pytest.raises(PgnDecodeError) as info:
            decode_pgn([Token.san("e4"), Token.paren_close()])
        assert info.value.token_index == 1

    def test_unterminated_variation(self) -> None:
        with pytest.raises(PgnDecodeError) as info:
            decode_pgn([Token.san("e4"), Token.paren_open(), Token.san("d4")])
        assert info.value.token_index == 1

    def test_bad_fen_header(self) -> None:
        with pytest.raises(PgnDecodeError) as info:
            decode_pgn([Token.header("FEN", "garbage"), Token.san("e4")])
        assert info.value.token_index == 0


class TestRoundTrip:
    def test_annotated_tree(self, open_game: TreeState) -> None:
        state = _annotated_game(open_game)
        decoded = parse_pgn(encode_state(state))
        original = [(p, _payload(n)) for p, n in iter_dfs(state.root)]
        restored = [(p, _payload(n)) for p, n in iter_dfs(decoded.root)]
        assert restored == original

    def test_nested_variations_with_comments_and_nags(self) -> None:
        pgn = (
            "1. e4 {a} e5 (1... c5 {b} 2. Nf3 (2. c3 $2 d5 (2... Nf6 3. e5)) 2... d6) "
            "(1... e6) 2. Nf3 $1 Nc6 *"
        )
        state = parse_pgn(pgn)
        assert node_at(state.root, (0, 1, 1, 1, 0)).san == "e5"
        assert node_at(state.root, (0, 1, 1)).annotations == [Annotation.MISTAKE]
        assert node_at(state.root, (0, 1)).comment == "b"
        decoded = parse_pgn(encode_state(state))
        original = [(p, _payload(n)) for p, n in iter_dfs(state.root)]
        restored = [(p, _payload(n)) for p, n in iter_dfs(decoded.root)]
        assert restored == original

    def test_custom_start_position(self) -> None:
        state = parse_pgn(f'[SetUp "1"]\n[FEN "{SCANDI_FEN}"]\n\n2. exd5 Qxd5 *')
        again = parse_pgn(encode_state(state))
        assert again.root.fen == SCANDI_FEN
        assert _shape(again) == _shape(state)

    def test_black_to_move_start(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        state = decode_pgn([Token.san("e5"), Token.san("Nf3")], start_fen=fen)
        assert encode_pgn(state.root) == "1... e5 2. Nf3 *"
        again = parse_pgn(encode_state(state))
        assert _shape(again) == _shape(state)
