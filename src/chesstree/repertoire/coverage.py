"""Probability-weighted repertoire coverage and gap finding."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from chesstree.core.enums import Color
from chesstree.core.models import Path, TreeNode
from chesstree.core.rules import truncate_fen
from chesstree.core.tree import node_at
from chesstree.repertoire.models import (
    SUMMARY_MOVE,
    CoverageReport,
    CoverageSettings,
    PositionMove,
    PositionStats,
    ReferenceDatabase,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _DbMoves:
    moves: dict[str, int]  # san -> games continuing with it
    total: int


def _summarize(stats: list[PositionStats]) -> _DbMoves:
    moves: dict[str, int] = {}
    ended = 0
    for entry in stats:
        if entry.move == SUMMARY_MOVE:
            ended += entry.games
        else:
            moves[entry.move] = moves.get(entry.move, 0) + entry.games
    return _DbMoves(moves=moves, total=ended + sum(moves.values()))


def _is_my_turn(node: TreeNode, color: Color) -> bool:
    return node.half_moves % 2 == color.parity


class _CoverageRun:
    """State of a single coverage computation: the report and its caches."""

    __slots__ = (
        "_color",
        "_db",
        "_min_games",
        "_db_cache",
        "_fen_cache",
        "report",
    )

    def __init__(
        self, color: Color, db: ReferenceDatabase, settings: CoverageSettings
    ) -> None:
        self._color = color
        self._db = db
        self._min_games = settings.min_games
        self._db_cache: dict[str, _DbMoves] = {}
        self._fen_cache: dict[str, float] = {}
        self.report = CoverageReport()

    def lookup(self, fen: str) -> _DbMoves:
        cached = self._db_cache.get(fen)
        if cached is None:
            cached = _summarize(self._db.search_position(fen))
            self._db_cache[fen] = cached
        return cached

    def compute(self, node: TreeNode, path: Path) -> float:
        key = truncate_fen(node.fen)
        known = self._fen_cache.get(key)
        if known is not None and not node.children:
            # A transposed leaf inherits the coverage of its prepared twin.
            _LOGGER.debug("Coverage transposition hit at %s", list(path))
            self.report.coverage[path] = known
            self.report.games[path] = self.lookup(node.fen).total
            return known

        coverage = self._compute_node(node, path)
        if node.children and key not in self._fen_cache:
            self._fen_cache[key] = coverage
        return coverage

    def _compute_node(self, node: TreeNode, path: Path) -> float:
        db_moves = self.lookup(node.fen)
        total = db_moves.total
        self.report.games[path] = total

        if total < self._min_games:
            coverage = 1.0
        elif not _is_my_turn(node, self._color):
            coverage = self._opponent_coverage(node, path, db_moves)
        elif node.children:
            coverage = self.compute(node.children[0], (*path, 0))
        else:
            coverage = 0.0

        self.report.coverage[path] = coverage
        return coverage

    def _opponent_coverage(
        self, node: TreeNode, path: Path, db_moves: _DbMoves
    ) -> float:
        if not node.children:
            if db_moves.total == 0:
                return 1.0
            return min(self._min_games / db_moves.total, 1.0)

        significant = {
            san: games
            for san, games in db_moves.moves.items()
            if games >= self._min_games
        }
        significant_total = sum(significant.values())
        if significant_total == 0:
            return 1.0

        coverage = 0.0
        for san, games in significant.items():
            index = next(
                (i for i, child in enumerate(node.children) if child.san == san), None
            )
            if index is None:
                continue
            child_coverage = self.compute(node.children[index], (*path, index))
            coverage += games / significant_total * child_coverage
        return min(coverage, 1.0)


def compute_coverage(
    root: TreeNode,
    color: Color,
    db: ReferenceDatabase,
    start_path: Path = (),
    settings: CoverageSettings | None = None,
) -> CoverageReport:
    """Coverage of the repertoire for *color* below *start_path*.

    Recomputes from scratch; database results and transpositions are only
    memoized within this call.
    """
    run = _CoverageRun(color, db, settings or CoverageSettings())
    start = tuple(start_path)
    run.compute(node_at(root, start), start)
    return run.report


def _is_gap(node: TreeNode, path: Path, start_path: Path, color: Color) -> bool:
    if len(path) <= len(start_path):
        return False
    if _is_my_turn(node, color):
        return not node.children
    return True


def _is_settled(report: CoverageReport, path: Path, min_games: int) -> bool:
    return report.coverage_at(path) >= 1 or report.games_at(path) < min_games


def find_next_gap(
    root: TreeNode,
    start_path: Path,
    color: Color,
    report: CoverageReport,
    settings: CoverageSettings | None = None,
) -> Path | None:
    """First under-covered node strictly below *start_path*, depth-first.

    Children are searched before their parent, so the deepest unanswered
    position along the first incomplete line is returned.
    """
    min_games = (settings or CoverageSettings()).min_games
    start = tuple(start_path)

    def visit(node: TreeNode, path: Path) -> Path | None:
        if _is_settled(report, path, min_games):
            return None
        for index, child in enumerate(node.children):
            found = visit(child, (*path, index))
            if found is not None:
                return found
        return path if _is_gap(node, path, start, color) else None

    return visit(node_at(root, start), start)


def find_biggest_gap(
    root: TreeNode,
    color: Color,
    report: CoverageReport,
    settings: CoverageSettings | None = None,
    start_path: Path = (),
) -> Path | None:
    """Shallowest under-covered node below *start_path*, breadth-first."""
    min_games = (settings or CoverageSettings()).min_games
    start = tuple(start_path)
    queue: deque[tuple[TreeNode, Path]] = deque([(node_at(root, start), start)])
    while queue:
        node, path = queue.popleft()
        if _is_settled(report, path, min_games):
            continue
        if _is_gap(node, path, start, color):
            return path
        queue.extend(
            (child, (*path, index)) for index, child in enumerate(node.children)
        )
    return None


def position_moves(
    node: TreeNode,
    path: Path,
    db: ReferenceDatabase,
    report: CoverageReport | None = None,
) -> list[PositionMove]:
    """Database replies at *node* merged with the tree's own children.

    Database moves come first, most frequent first; tree moves unknown to
    the database follow with zero games.
    """
    stats = [s for s in db.search_position(node.fen) if s.move != SUMMARY_MOVE]
    total = sum(s.games for s in stats)
    coverage = report or CoverageReport()
    child_index = {
        child.san: i for i, child in enumerate(node.children) if child.san
    }

    moves: list[PositionMove] = []
    for entry in stats:
        games = entry.games
        index = child_index.get(entry.move, -1)
        in_repertoire = index != -1
        move_coverage = coverage.coverage_at((*path, index)) if in_repertoire else 0.0
        moves.append(
            PositionMove(
                san=entry.move,
                games=games,
                total_games=total,
                frequency=games / total if total else 0.0,
                white=entry.white / games if games else 0.0,
                draw=entry.draws / games if games else 0.0,
                black=entry.black / games if games else 0.0,
                in_repertoire=in_repertoire,
                coverage=move_coverage,
                child_index=index,
            )
        )
    moves.sort(key=lambda m: m.frequency, reverse=True)

    known = {s.move for s in stats}
    for san, index in child_index.items():
        if san in known:
            continue
        moves.append(
            PositionMove(
                san=san,
                games=0,
                total_games=total,
                frequency=0.0,
                white=0.0,
                draw=0.0,
                black=0.0,
                in_repertoire=True,
                coverage=coverage.coverage_at((*path, index)),
                child_index=index,
            )
        )
    return moves
