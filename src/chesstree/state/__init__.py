"""Mutation engine: actions, the pure reducer and the session store."""

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
from chesstree.state.reducer import ActionResult, apply, reduce
from chesstree.state.store import TreeEvents, TreeStore

__all__ = [
    "Action",
    "ActionResult",
    "AddAnalysis",
    "AppendMove",
    "ClearShapes",
    "DeleteMove",
    "GoToAnnotation",
    "GoToBranchEnd",
    "GoToBranchStart",
    "GoToEnd",
    "GoToMove",
    "GoToNext",
    "GoToPrevious",
    "GoToStart",
    "MakeMove",
    "MakeMoves",
    "NextBranch",
    "NextBranching",
    "PreviousBranch",
    "PreviousBranching",
    "PromoteToMainline",
    "PromoteVariation",
    "Reset",
    "Save",
    "SetAnnotation",
    "SetComment",
    "SetFen",
    "SetHeaders",
    "SetResult",
    "SetScore",
    "SetShapes",
    "SetStart",
    "SetState",
    "TreeEvents",
    "TreeStore",
    "apply",
    "reduce",
]
