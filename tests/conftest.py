"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chesstree.core.models import TreeState
from chesstree.core.tree import default_tree
from chesstree.state import GoToMove, MakeMove, apply


def _play(state: TreeState, *moves: str) -> TreeState:
    for move in moves:
        state = apply(state, MakeMove(move))
    return state


@pytest.fixture
def fresh() -> TreeState:
    """An empty tree at the standard starting position."""
    return default_tree()


@pytest.fixture
def open_game() -> TreeState:
    """1. e4 e5 2. Nf3 with the cursor on Nf3."""
    return _play(default_tree(), "e4", "e5", "Nf3")


@pytest.fixture
def branched() -> TreeState:
    """1. e4 e5 with side lines 1. d4 d5 and 1. c4; cursor at the root.

    Layout: ``(0,)`` e4, ``(0, 0)`` e5, ``(1,)`` d4, ``(1, 0)`` d5, ``(2,)`` c4.
    """
    state = _play(default_tree(), "e4", "e5")
    state = _play(apply(state, GoToMove(())), "d4", "d5")
    state = _play(apply(state, GoToMove(())), "c4")
    return apply(state, GoToMove(()))
