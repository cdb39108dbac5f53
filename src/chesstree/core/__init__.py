"""Core tree layer: node model, read-only traversal, legality adapter.

Quick start::

    from chesstree.core import default_tree, iter_main_line

    state = default_tree()
    for path, node in iter_main_line(state.root):
        print(path, node.san)
"""

from chesstree.core.annotation import (
    ANNOTATION_INFO,
    BASIC_ANNOTATIONS,
    NAG_INFO,
    Annotation,
    annotation_from_nag,
)
from chesstree.core.enums import Brush, Color, Outcome, ScoreKind
from chesstree.core.models import (
    DrawShape,
    GameHeaders,
    Path,
    Score,
    TreeNode,
    TreeState,
)
from chesstree.core.rules import STARTING_FEN, apply_move, position_from_fen
from chesstree.core.serialization import dump_state, dumps, load_state, loads
from chesstree.core.tree import (
    TreeStats,
    canonical_transposition,
    create_node,
    default_tree,
    find_fen,
    find_transpositions,
    game_name,
    has_more_priority,
    is_prefix,
    iter_dfs,
    iter_main_line,
    main_line_ply_count,
    node_at,
    tree_stats,
)

__all__ = [
    # Enums / symbols
    "ANNOTATION_INFO",
    "Annotation",
    "BASIC_ANNOTATIONS",
    "Brush",
    "Color",
    "NAG_INFO",
    "Outcome",
    "ScoreKind",
    "annotation_from_nag",
    # Model
    "DrawShape",
    "GameHeaders",
    "Path",
    "Score",
    "TreeNode",
    "TreeState",
    "TreeStats",
    # Rules
    "STARTING_FEN",
    "apply_move",
    "position_from_fen",
    # Traversal
    "canonical_transposition",
    "create_node",
    "default_tree",
    "find_fen",
    "find_transpositions",
    "game_name",
    "has_more_priority",
    "is_prefix",
    "iter_dfs",
    "iter_main_line",
    "main_line_ply_count",
    "node_at",
    "tree_stats",
    # Persistence
    "dump_state",
    "dumps",
    "load_state",
    "loads",
]
