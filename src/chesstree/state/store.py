"""TreeStore — owns one session's tree and funnels every edit through the reducer.

Emits events via simple callbacks so a host UI / tests can subscribe.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from chesstree.core.models import TreeNode, TreeState
from chesstree.core.tree import default_tree, node_at
from chesstree.errors import ChessTreeError
from chesstree.state.actions import Action
from chesstree.state.reducer import reduce

# ── Event definitions ────────────────────────────────────────────────────────

ChangeCallback = Callable[[Action, TreeState], None]  # action, new state
RejectCallback = Callable[[Action, ChessTreeError], None]


@dataclass
class TreeEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_change: list[ChangeCallback] = field(default_factory=list)
    on_rejected: list[RejectCallback] = field(default_factory=list)


# ── Store ────────────────────────────────────────────────────────────────────


class TreeStore:
    """Holds the current :class:`TreeState` of one tab/session.

    Not thread-safe: a store is driven from a single thread. Callers must
    not dispatch structural edits while an ``AddAnalysis`` batch computed
    against an earlier snapshot is still pending.
    """

    __slots__ = ("_state", "events")

    def __init__(self, state: TreeState | None = None) -> None:
        self._state = state if state is not None else default_tree()
        self.events = TreeEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> TreeState:
        return self._state

    @property
    def dirty(self) -> bool:
        return self._state.dirty

    def current_node(self) -> TreeNode:
        return node_at(self._state.root, self._state.position)

    # ── Dispatch ─────────────────────────────────────────────────────────

    def dispatch(self, action: Action) -> bool:
        """Apply *action*; return ``False`` when it was rejected."""
        result = reduce(self._state, action)
        if result.error is not None:
            for cb in self.events.on_rejected:
                cb(action, result.error)
            return False
        self._state = result.state
        for cb in self.events.on_change:
            cb(action, self._state)
        return True

    def dispatch_all(self, actions: list[Action]) -> int:
        """Dispatch *actions* in order; return how many were accepted."""
        return sum(1 for action in actions if self.dispatch(action))
