"""Tests for repertoire coverage and gap finding."""

from __future__ import annotations

import pytest

from chesstree.core.enums import Color
from chesstree.core.models import TreeNode
from chesstree.core.tree import node_at
from chesstree.errors import ReferenceDatabaseError
from chesstree.notation import parse_pgn
from chesstree.repertoire import (
    CoverageSettings,
    PositionStats,
    compute_coverage,
    find_biggest_gap,
    find_next_gap,
    position_moves,
)


class _StubDatabase:
    """In-memory reference database keyed by exact FEN."""

    def __init__(self, results: dict[str, list[PositionStats]]) -> None:
        self._results = results
        self.queries: list[str] = []

    def search_position(self, fen: str) -> list[PositionStats]:
        self.queries.append(fen)
        return list(self._results.get(fen, []))

    def add(self, fen: str, *stats: PositionStats) -> None:
        self._results[fen] = list(stats)


class _BrokenDatabase:
    def search_position(self, fen: str) -> list[PositionStats]:
        raise ReferenceDatabaseError(f"lookup failed for {fen}")


def _fen(root: TreeNode, path: tuple[int, ...]) -> str:
    return node_at(root, path).fen


def _e4_database(root: TreeNode) -> _StubDatabase:
    """100 games after 1. e4: 60 x e5, 30 x c5, 3 x d5, 7 ended there."""
    return _StubDatabase(
        {
            root.fen: [PositionStats("e4", white=50, draws=30, black=20)],
            _fen(root, (0,)): [
                PositionStats("e5", white=30, draws=20, black=10),
                PositionStats("c5", white=10, draws=10, black=10),
                PositionStats("d5", white=1, draws=1, black=1),
                PositionStats("*", draws=7),
            ],
            _fen(root, (0, 0)): [PositionStats("Nf3", white=20, draws=20, black=10)],
        }
    )


class TestComputeCoverage:
    def test_missing_reply_lowers_coverage(self) -> None:
        root = parse_pgn("1. e4 e5 2. Nf3 *").root
        report = compute_coverage(root, Color.WHITE, _e4_database(root))
        assert report.coverage_at((0, 0)) == pytest.approx(1.0)
        assert report.coverage_at((0,)) == pytest.approx(60 / 90)
        assert report.coverage_at(()) == pytest.approx(60 / 90)
        assert report.games_at((0,)) == 100
        assert report.games_at(()) == 100

    def test_values_stay_in_unit_interval(self) -> None:
        root = parse_pgn("1. e4 e5 (1... c5) 2. Nf3 *").root
        report = compute_coverage(root, Color.WHITE, _e4_database(root))
        assert all(0.0 <= v <= 1.0 for v in report.coverage.values())

    def test_all_significant_replies_answered(self) -> None:
        root = parse_pgn("1. e4 e5 (1... c5 2. Nf3) 2. Nf3 *").root
        db = _e4_database(root)
        db.add(_fen(root, (0, 1)), PositionStats("Nf3", white=25))
        report = compute_coverage(root, Color.WHITE, db)
        assert report.coverage_at(()) == pytest.approx(1.0)

    def test_unanswered_own_move_is_zero(self) -> None:
        root = parse_pgn("1. e4 e5 (1... c5) 2. Nf3 *").root
        db = _e4_database(root)
        db.add(_fen(root, (0, 1)), PositionStats("Nf3", white=25))
        report = compute_coverage(root, Color.WHITE, db)
        assert report.coverage_at((0, 1)) == 0.0
        assert report.coverage_at((0,)) == pytest.approx(60 / 90)

    def test_opponent_leaf_gets_partial_credit(self) -> None:
        root = parse_pgn("1. e4 e5 2. Nf3 *").root
        db = _e4_database(root)
        db.add(_fen(root, (0, 0, 0)), PositionStats("Nc6", draws=50))
        report = compute_coverage(root, Color.WHITE, db)
        assert report.coverage_at((0, 0, 0)) == pytest.approx(0.1)

    def test_thin_sample_counts_as_covered(self) -> None:
        root = parse_pgn("1. e4 *").root
        report = compute_coverage(root, Color.WHITE, _StubDatabase({}))
        assert report.coverage_at(()) == 1.0
        assert report.games_at(()) == 0

    def test_min_games_setting(self) -> None:
        root = parse_pgn("1. e4 e5 2. Nf3 *").root
        settings = CoverageSettings(min_games=200)
        db = _e4_database(root)
        report = compute_coverage(root, Color.WHITE, db, settings=settings)
        assert report.coverage_at(()) == 1.0

    def test_zero_threshold_with_empty_database(self) -> None:
        root = parse_pgn("1. e4 *").root
        settings = CoverageSettings(min_games=0)
        report = compute_coverage(
            root, Color.WHITE, _StubDatabase({}), settings=settings
        )
        assert report.coverage_at((0,)) == 1.0
        assert report.coverage_at(()) == 1.0

    def test_start_path(self) -> None:
        root = parse_pgn("1. e4 e5 2. Nf3 *").root
        report = compute_coverage(root, Color.WHITE, _e4_database(root), (0, 0))
        assert set(report.coverage) == {(0, 0), (0, 0, 0)}

    def test_transposed_leaf_reuses_prepared_line(self) -> None:
        root = parse_pgn("1. Nf3 (1. Nc3 Nf6 2. Nf3) 1... Nf6 2. Nc3 d5 3. d4 *").root
        twin = _fen(root, (0, 0, 0))
        assert _fen(root, (1, 0, 0)) == twin
        db = _StubDatabase(
            {
                root.fen: [
                    PositionStats("Nf3", white=50),
                    PositionStats("Nc3", white=50),
                ],
                _fen(root, (0,)): [PositionStats("Nf6", white=20)],
                _fen(root, (1,)): [PositionStats("Nf6", white=20)],
                _fen(root, (0, 0)): [PositionStats("Nc3", white=20)],
                _fen(root, (1, 0)): [PositionStats("Nf3", white=20)],
                twin: [PositionStats("d5", white=20)],
                _fen(root, (0, 0, 0, 0)): [PositionStats("d4", white=20)],
            }
        )
        report = compute_coverage(root, Color.BLACK, db)
        assert report.coverage_at((0, 0, 0)) == pytest.approx(1.0)
        assert report.coverage_at((1, 0, 0)) == pytest.approx(1.0)
        assert report.coverage_at(()) == pytest.approx(1.0)

    def test_database_results_are_memoized(self) -> None:
        root = parse_pgn("1. e4 e5 2. Nf3 *").root
        db = _e4_database(root)
        compute_coverage(root, Color.WHITE, db)
        assert len(db.queries) == len(set(db.queries))

    def test_database_errors_propagate(self) -> None:
        root = parse_pgn("1. e4 *").root
        with pytest.raises(ReferenceDatabaseError):
            compute_coverage(root, Color.WHITE, _BrokenDatabase())


class TestGaps:
    def test_missing_opponent_reply(self) -> None:
        root = parse_pgn("1. e4 e5 2. Nf3 *").root
        report = compute_coverage(root, Color.WHITE, _e4_database(root))
        assert find_next_gap(root, (), Color.WHITE, report) == (0,)
        assert find_biggest_gap(root, Color.WHITE, report) == (0,)

    def test_next_gap_prefers_the_deep_unanswered_move(self) -> None:
        root = parse_pgn("1. e4 e5 (1... c5) 2. Nf3 *").root
        db = _e4_database(root)
        db.add(_fen(root, (0, 1)), PositionStats("Nf3", white=25))
        report = compute_coverage(root, Color.WHITE, db)
        assert find_next_gap(root, (), Color.WHITE, report) == (0, 1)
        assert find_biggest_gap(root, Color.WHITE, report) == (0,)

    def test_no_gap_when_covered(self) -> None:
        root = parse_pgn("1. e4 e5 (1... c5 2. Nf3) 2. Nf3 *").root
        db = _e4_database(root)
        db.add(_fen(root, (0, 1)), PositionStats("Nf3", white=25))
        report = compute_coverage(root, Color.WHITE, db)
        assert find_next_gap(root, (), Color.WHITE, report) is None
        assert find_biggest_gap(root, Color.WHITE, report) is None

    def test_gap_must_be_below_start(self) -> None:
        root = parse_pgn("1. e4 e5 2. Nf3 *").root
        report = compute_coverage(root, Color.WHITE, _e4_database(root))
        assert find_next_gap(root, (0,), Color.WHITE, report) is None
        assert find_biggest_gap(root, Color.WHITE, report, start_path=(0,)) is None


class TestPositionMoves:
    def test_merges_database_and_tree(self) -> None:
        root = parse_pgn("1. e4 e5 (1... e6) 2. Nf3 *").root
        db = _e4_database(root)
        report = compute_coverage(root, Color.WHITE, db)
        moves = position_moves(node_at(root, (0,)), (0,), db, report)

        assert [m.san for m in moves] == ["e5", "c5", "d5", "e6"]
        e5, c5, d5, e6 = moves
        assert e5.games == 60
        assert e5.total_games == 93
        assert e5.frequency == pytest.approx(60 / 93)
        assert e5.white == pytest.approx(0.5)
        assert e5.in_repertoire
        assert e5.child_index == 0
        assert e5.coverage == pytest.approx(1.0)
        assert not c5.in_repertoire
        assert c5.child_index == -1
        assert c5.coverage == 0.0
        assert d5.games == 3
        assert e6.games == 0
        assert e6.in_repertoire
        assert e6.child_index == 1

    def test_without_report(self) -> None:
        root = parse_pgn("1. e4 *").root
        moves = position_moves(root, (), _e4_database(root))
        assert [(m.san, m.coverage) for m in moves] == [("e4", 0.0)]
