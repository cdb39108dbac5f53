"""Read-only traversal and query helpers over a game tree."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import chess

from chesstree.core.models import GameHeaders, Path, TreeNode, TreeState
from chesstree.core.rules import initial_half_moves, truncate_fen


@dataclass(slots=True, frozen=True)
class TreeStats:
    total: int
    leafs: int
    depth: int


# ── Construction ─────────────────────────────────────────────────────────────


def default_tree(fen: str | None = None) -> TreeState:
    """Create a fresh tree rooted at *fen* (standard start when omitted).

    Raises :class:`~chesstree.errors.InvalidFenError` for a malformed FEN.
    """
    root_fen = fen.strip() if fen else chess.STARTING_FEN
    root = TreeNode(fen=root_fen, half_moves=initial_half_moves(root_fen))
    return TreeState(root=root, headers=GameHeaders(fen=root_fen))


def create_node(
    *,
    fen: str,
    move: chess.Move,
    san: str,
    half_moves: int,
    clock: int | None = None,
) -> TreeNode:
    return TreeNode(fen=fen, move=move, san=san, half_moves=half_moves, clock=clock)


# ── Addressing ───────────────────────────────────────────────────────────────


def node_at(root: TreeNode, path: Sequence[int]) -> TreeNode:
    """Walk *path* from *root*.

    A stale path does not raise: the walk stops at the deepest node that
    still exists.
    """
    node = root
    for index in path:
        if index < 0 or index >= len(node.children):
            return node
        node = node.children[index]
    return node


def valid_prefix(root: TreeNode, path: Sequence[int]) -> Path:
    """Longest prefix of *path* that resolves in the tree."""
    node = root
    valid: list[int] = []
    for index in path:
        if index < 0 or index >= len(node.children):
            break
        valid.append(index)
        node = node.children[index]
    return tuple(valid)


def is_valid_path(root: TreeNode, path: Sequence[int]) -> bool:
    return len(valid_prefix(root, path)) == len(path)


def is_prefix(shorter: Sequence[int], longer: Sequence[int]) -> bool:
    if len(shorter) > len(longer):
        return False
    return all(a == b for a, b in zip(shorter, longer, strict=False))


def has_more_priority(left: Sequence[int], right: Sequence[int]) -> bool:
    """Whether *left* should be preferred over *right* as a canonical path.

    A strict prefix wins; otherwise the first differing index decides and
    the smaller one wins.
    """
    for a, b in zip(left, right, strict=False):
        if a != b:
            return a < b
    return len(left) < len(right)


# ── Iteration ────────────────────────────────────────────────────────────────


def iter_dfs(root: TreeNode) -> Iterator[tuple[Path, TreeNode]]:
    """Pre-order walk yielding ``(path, node)`` pairs, main line first."""
    stack: list[tuple[Path, TreeNode]] = [((), root)]
    while stack:
        path, node = stack.pop()
        yield path, node
        for index in range(len(node.children) - 1, -1, -1):
            stack.append(((*path, index), node.children[index]))


def iter_main_line(root: TreeNode) -> Iterator[tuple[Path, TreeNode]]:
    """Yield ``(path, node)`` following child 0 from *root* to the end."""
    path: Path = ()
    node = root
    while True:
        yield path, node
        if not node.children:
            return
        path = (*path, 0)
        node = node.children[0]


def main_line_ply_count(root: TreeNode) -> int:
    count = 0
    node = root
    while node.children:
        count += 1
        node = node.children[0]
    return count


def main_line_end(root: TreeNode) -> Path:
    path: Path = ()
    for path, _ in iter_main_line(root):
        pass
    return path


def nodes_along(root: TreeNode, path: Sequence[int]) -> list[TreeNode]:
    """Nodes from *root* down to the node at *path*, inclusive."""
    nodes = [root]
    node = root
    for index in valid_prefix(root, path):
        node = node.children[index]
        nodes.append(node)
    return nodes


# ── Queries ──────────────────────────────────────────────────────────────────


def find_fen(root: TreeNode, fen: str) -> Path:
    """Path of the first node (pre-order) whose FEN is exactly *fen*.

    Returns the root path when nothing matches.
    """
    for path, node in iter_dfs(root):
        if node.fen == fen:
            return path
    return ()


def find_transpositions(root: TreeNode, fen: str) -> list[Path]:
    """All paths reaching the same position as *fen*, ignoring move counters."""
    key = truncate_fen(fen)
    return [path for path, node in iter_dfs(root) if truncate_fen(node.fen) == key]


def canonical_transposition(root: TreeNode, fen: str) -> Path | None:
    """Highest-priority occurrence of *fen* in the tree, if any."""
    best: Path | None = None
    for path in find_transpositions(root, fen):
        if best is None or has_more_priority(path, best):
            best = path
    return best


def tree_stats(root: TreeNode) -> TreeStats:
    total = -1
    leafs = 0
    depth = 0
    for path, node in iter_dfs(root):
        total += 1
        if not node.children:
            leafs += 1
        depth = max(depth, len(path))
    return TreeStats(total=total, leafs=leafs, depth=depth)


def game_name(headers: GameHeaders) -> str:
    if (headers.white and headers.white != "?") or (
        headers.black and headers.black != "?"
    ):
        return f"{headers.white} - {headers.black}"
    if headers.event:
        return headers.event
    return "Unknown"
