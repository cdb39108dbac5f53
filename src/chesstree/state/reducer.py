"""Pure tree reducer: ``(state, action) -> state``.

Every action is applied to a deep copy of the input state, so a rejected
action (illegal move, stale path, bad FEN) leaves the caller's state exactly
as it was. Handlers below mutate the copy in place.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import assert_never

import chess

from chesstree.analysis.models import AnalysisEntry
from chesstree.analysis.scoring import classify_move
from chesstree.core.annotation import (
    Annotation,
    assign_annotation,
    toggle_annotation,
)
from chesstree.core.enums import Color, Outcome
from chesstree.core.models import DrawShape, GameHeaders, Path, TreeNode, TreeState
from chesstree.core.rules import (
    AppliedMove,
    MoveLike,
    apply_move,
    is_game_over,
    resets_fifty_move_count,
    truncate_fen,
)
from chesstree.core.tree import (
    create_node,
    default_tree,
    is_prefix,
    is_valid_path,
    iter_main_line,
    main_line_end,
    node_at,
    nodes_along,
    tree_stats,
    valid_prefix,
)
from chesstree.errors import ChessTreeError, IllegalEditError
from chesstree.state.actions import (
    Action,
    AddAnalysis,
    AppendMove,
    ClearShapes,
    DeleteMove,
    GoToAnnotation,
    GoToBranchEnd,
    GoToBranchStart,
    GoToEnd,
    GoToMove,
    GoToNext,
    GoToPrevious,
    GoToStart,
    MakeMove,
    MakeMoves,
    NextBranch,
    NextBranching,
    PreviousBranch,
    PreviousBranching,
    PromoteToMainline,
    PromoteVariation,
    Reset,
    Save,
    SetAnnotation,
    SetComment,
    SetFen,
    SetHeaders,
    SetResult,
    SetScore,
    SetShapes,
    SetStart,
    SetState,
)

_LOGGER = logging.getLogger(__name__)

_THREEFOLD_PRIOR_OCCURRENCES = 2
_FIFTY_MOVE_PLIES = 100


@dataclass(slots=True, frozen=True)
class ActionResult:
    """Outcome of :func:`reduce`.

    ``error`` is set when the action was rejected; ``state`` is then the
    untouched input state.
    """

    state: TreeState
    error: ChessTreeError | None = None

    @property
    def accepted(self) -> bool:
        return self.error is None


def reduce(state: TreeState, action: Action) -> ActionResult:
    draft = copy.deepcopy(state)
    try:
        _dispatch(draft, action)
    except ChessTreeError as exc:
        _LOGGER.debug("Rejected %s: %s", type(action).__name__, exc)
        return ActionResult(state, exc)
    return ActionResult(draft)


def apply(state: TreeState, action: Action) -> TreeState:
    """Apply *action*; rejected actions return *state* unchanged."""
    return reduce(state, action).state


def _dispatch(state: TreeState, action: Action) -> None:
    match action:
        # Navigation
        case GoToNext():
            _go_to_next(state)
        case GoToPrevious():
            state.position = valid_prefix(state.root, state.position)[:-1]
        case GoToStart():
            state.position = valid_prefix(state.root, state.headers.start or ())
        case GoToEnd():
            state.position = main_line_end(state.root)
        case GoToMove(path=path):
            state.position = valid_prefix(state.root, path)
        case GoToBranchStart():
            _go_to_branch_start(state)
        case GoToBranchEnd():
            _go_to_branch_end(state)
        case NextBranch():
            _cycle_branch(state, 1)
        case PreviousBranch():
            _cycle_branch(state, -1)
        case NextBranching():
            _go_to_next_branching(state)
        case PreviousBranching():
            _go_to_previous_branching(state)
        case GoToAnnotation(annotation=annotation, color=color):
            _go_to_annotation(state, annotation, color)

        # Structural edits
        case MakeMove():
            _make_move(
                state,
                action.move,
                last=False,
                change_position=action.change_position,
                mainline=action.mainline,
                clock=action.clock,
                change_headers=action.change_headers,
            )
        case AppendMove(move=move, clock=clock):
            _make_move(state, move, last=True, clock=clock)
        case MakeMoves(moves=moves, mainline=mainline, change_headers=headers):
            for move in moves:
                _make_move(
                    state,
                    move,
                    last=False,
                    mainline=mainline,
                    change_headers=headers,
                )
        case DeleteMove(path=path):
            _delete_move(state, state.position if path is None else path)
        case PromoteVariation(path=path):
            _require_path(state, path)
            if _promote_once(state, path) is not None:
                state.dirty = True
        case PromoteToMainline(path=path):
            _promote_to_mainline(state, path)

        # Node payload
        case SetAnnotation(annotation=annotation):
            _set_annotation(state, annotation)
        case SetComment(comment=comment):
            _current(state).comment = comment
            state.dirty = True
        case SetScore(score=score):
            _current(state).score = score
            state.dirty = True
        case SetShapes(shapes=shapes):
            _set_shapes(state, shapes)
        case ClearShapes():
            node = _current(state)
            if node.shapes:
                node.shapes = []
                state.dirty = True
        case AddAnalysis(entries=entries):
            _add_analysis(state, entries)

        # Whole tree / metadata
        case SetFen(fen=fen):
            fresh = default_tree(fen)
            fresh.headers = state.headers
            fresh.headers.fen = fresh.root.fen
            _replace(state, fresh, dirty=True)
        case SetHeaders(headers=headers):
            _set_headers(state, headers)
        case SetResult(result=result):
            state.headers.result = result
            state.dirty = True
        case SetStart(path=path):
            state.headers.start = tuple(path)
            state.dirty = True
        case SetState(state=new_state):
            _replace(state, copy.deepcopy(new_state), dirty=new_state.dirty)
        case Reset():
            _replace(state, default_tree(), dirty=False)
        case Save():
            state.dirty = False
        case _:
            assert_never(action)


# ── Helpers ──────────────────────────────────────────────────────────────────


def _current(state: TreeState) -> TreeNode:
    return node_at(state.root, state.position)


def _require_path(state: TreeState, path: Sequence[int]) -> None:
    if not is_valid_path(state.root, path):
        raise IllegalEditError(f"No node at path {list(path)}")


def _replace(state: TreeState, other: TreeState, *, dirty: bool) -> None:
    state.root = other.root
    state.headers = other.headers
    state.position = valid_prefix(other.root, other.position)
    state.dirty = dirty


# ── Navigation ───────────────────────────────────────────────────────────────


def _go_to_next(state: TreeState) -> None:
    position = valid_prefix(state.root, state.position)
    if node_at(state.root, position).children:
        state.position = (*position, 0)
    else:
        state.position = position


def _go_to_branch_start(state: TreeState) -> None:
    """Walk up to the node right after the closest fork above the cursor."""
    position = list(valid_prefix(state.root, state.position))
    while position:
        parent = node_at(state.root, position[:-1])
        if len(parent.children) > 1:
            break
        position.pop()
    state.position = tuple(position)


def _go_to_branch_end(state: TreeState) -> None:
    position = list(valid_prefix(state.root, state.position))
    node = node_at(state.root, position)
    while node.children:
        position.append(0)
        node = node.children[0]
    state.position = tuple(position)


def _cycle_branch(state: TreeState, step: int) -> None:
    position = valid_prefix(state.root, state.position)
    if not position:
        return
    parent = node_at(state.root, position[:-1])
    node = parent.children[position[-1]]
    if len(parent.children) <= 1:
        # No siblings to cycle through: step into the fork below, if any.
        if len(node.children) >= 2:
            state.position = (*position, 0)
        return
    index = (position[-1] + step) % len(parent.children)
    state.position = (*position[:-1], index)


def _go_to_next_branching(state: TreeState) -> None:
    position = list(valid_prefix(state.root, state.position))
    node = node_at(state.root, position)
    if not node.children:
        return
    position.append(0)
    node = node.children[0]
    while len(node.children) == 1:
        position.append(0)
        node = node.children[0]
    state.position = tuple(position)


def _go_to_previous_branching(state: TreeState) -> None:
    position = list(valid_prefix(state.root, state.position))
    if not position:
        return
    position.pop()
    while position and len(node_at(state.root, position).children) == 1:
        position.pop()
    state.position = tuple(position)


def _go_to_annotation(state: TreeState, annotation: Annotation, color: Color) -> None:
    """Step forward (wrapping to the root at a leaf) to the next match.

    The walk is bounded by the tree size so a tree without any match leaves
    the cursor where it was.
    """
    position = list(valid_prefix(state.root, state.position))
    node = node_at(state.root, position)
    budget = tree_stats(state.root).total + len(position) + 1
    for _ in range(budget):
        if node.children:
            position.append(0)
            node = node.children[0]
        else:
            position = []
            node = state.root
        if (
            node.san is not None
            and annotation in node.annotations
            and Color.mover(node.half_moves) == color
        ):
            state.position = tuple(position)
            return


# ── Move insertion ───────────────────────────────────────────────────────────


def _make_move(
    state: TreeState,
    move: MoveLike,
    *,
    last: bool,
    change_position: bool = True,
    mainline: bool = False,
    clock: int | None = None,
    change_headers: bool = True,
) -> None:
    if last:
        base = main_line_end(state.root)
    else:
        base = valid_prefix(state.root, state.position)
    parent = node_at(state.root, base)
    applied = apply_move(parent.fen, move)

    existing = next(
        (i for i, child in enumerate(parent.children) if child.san == applied.san),
        None,
    )
    if existing is not None:
        if change_position:
            state.position = (*base, existing)
        return

    if change_headers:
        outcome = _detect_outcome(state, base, applied)
        if outcome is not None:
            state.headers.result = outcome

    node = create_node(
        fen=applied.fen,
        move=applied.move,
        san=applied.san,
        half_moves=parent.half_moves + 1,
        clock=clock,
    )
    if mainline:
        parent.children.insert(0, node)
        index = 0
    else:
        parent.children.append(node)
        index = len(parent.children) - 1
    state.dirty = True
    if change_position:
        state.position = (*base, index)


def _detect_outcome(
    state: TreeState, base: Path, applied: AppliedMove
) -> Outcome | None:
    if applied.is_checkmate:
        if applied.turn == chess.WHITE:
            return Outcome.BLACK_WINS
        return Outcome.WHITE_WINS
    if applied.is_stalemate or applied.is_insufficient_material:
        return Outcome.DRAW
    line = nodes_along(state.root, base)
    if _is_threefold(line, applied.fen) or _is_fifty_moves(line, applied.san):
        return Outcome.DRAW
    return None


def _is_threefold(line: list[TreeNode], fen: str) -> bool:
    key = truncate_fen(fen)
    seen = sum(1 for node in line if truncate_fen(node.fen) == key)
    return seen >= _THREEFOLD_PRIOR_OCCURRENCES


def _is_fifty_moves(line: list[TreeNode], san: str) -> bool:
    fields = line[0].fen.split()
    count = int(fields[4]) if len(fields) > 4 and fields[4].isdigit() else 0
    for node in line[1:]:
        count = 0 if resets_fifty_move_count(node.san or "") else count + 1
    count = 0 if resets_fifty_move_count(san) else count + 1
    return count >= _FIFTY_MOVE_PLIES


# ── Deletion / promotion ─────────────────────────────────────────────────────


def _delete_move(state: TreeState, path: Sequence[int]) -> None:
    target = tuple(path)
    if not target:
        raise IllegalEditError("Cannot delete the root node")
    _require_path(state, target)

    parent_path = target[:-1]
    del node_at(state.root, parent_path).children[target[-1]]
    state.dirty = True

    position = state.position
    if is_prefix(target, position):
        state.position = parent_path
    elif len(position) >= len(target) and is_prefix(parent_path, position):
        # Cursor sits in a sibling subtree at the same depth.
        clamped = (*parent_path, 0, *position[len(target) :])
        state.position = valid_prefix(state.root, clamped)
    else:
        state.position = valid_prefix(state.root, position)


def _promote_once(state: TreeState, path: Sequence[int]) -> Path | None:
    """Rotate the deepest non-zero index of *path* to 0.

    Returns the node's new path, or ``None`` when it is already on the
    main line of its subtree.
    """
    fork = next((i for i in range(len(path) - 1, -1, -1) if path[i] != 0), None)
    if fork is None:
        return None
    parent_path = tuple(path[:fork])
    moved = path[fork]
    siblings = node_at(state.root, parent_path).children
    siblings.insert(0, siblings.pop(moved))

    position = state.position
    if len(position) > fork and is_prefix(parent_path, position):
        index = position[fork]
        if index == moved:
            index = 0
        elif index < moved:
            index += 1
        state.position = (*position[:fork], index, *position[fork + 1 :])
    return (*parent_path, 0, *path[fork + 1 :])


def _promote_to_mainline(state: TreeState, path: Sequence[int]) -> None:
    _require_path(state, path)
    current: Path | None = tuple(path)
    changed = False
    while current is not None:
        current = _promote_once(state, current)
        changed = changed or current is not None
    if changed:
        state.dirty = True


# ── Node payload ─────────────────────────────────────────────────────────────


def _set_annotation(state: TreeState, annotation: Annotation) -> None:
    node = _current(state)
    if annotation == Annotation.NONE:
        node.annotations = []
    else:
        node.annotations = toggle_annotation(node.annotations, annotation)
    state.dirty = True


def _set_shapes(state: TreeState, shapes: Sequence[DrawShape]) -> None:
    node = _current(state)
    if not shapes:
        node.shapes = []
    else:
        shape = shapes[0]
        index = next(
            (i for i, s in enumerate(node.shapes) if s.same_target(shape)), None
        )
        if index is None:
            node.shapes.append(shape)
        else:
            del node.shapes[index]
    state.dirty = True


def _add_analysis(state: TreeState, entries: Sequence[AnalysisEntry]) -> None:
    main_line = [node for _, node in iter_main_line(state.root)]
    if len(entries) != len(main_line):
        _LOGGER.warning(
            "Analysis has %d entries but the main line has %d positions; "
            "applying the aligned prefix only",
            len(entries),
            len(main_line),
        )

    for index, (node, entry) in enumerate(zip(main_line, entries, strict=False)):
        if not entry.best or is_game_over(node.fen):
            continue
        best = entry.best[0]
        node.score = best.score
        if best.depth is not None:
            node.depth = best.depth
        if entry.novelty:
            node.annotations = assign_annotation(node.annotations, Annotation.NOVELTY)
        if node.san is None:
            continue

        previous = entries[index - 1]
        prev_score = previous.best[0].score if previous.best else None
        prev_prev_score = None
        if index >= 2 and entries[index - 2].best:
            prev_prev_score = entries[index - 2].best[0].score
        annotation = classify_move(
            prev_score,
            prev_prev_score,
            best.score,
            Color.mover(node.half_moves),
            previous.best,
            entry.is_sacrifice,
            node.san,
        )
        if annotation != Annotation.NONE:
            node.annotations = assign_annotation(node.annotations, annotation)
    state.dirty = True


# ── Metadata ─────────────────────────────────────────────────────────────────


def _set_headers(state: TreeState, headers: GameHeaders) -> None:
    new_headers = copy.deepcopy(headers)
    if new_headers.fen != state.root.fen:
        fresh = default_tree(new_headers.fen)
        state.root = fresh.root
        state.position = ()
    state.headers = new_headers
    state.dirty = True
