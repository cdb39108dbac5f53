"""Structural (JSON-compatible) persistence of a :class:`TreeState`.

PGN is the interchange format; this layout only exists so a session can be
cached and restored exactly, cursor and dirty flag included.
"""

from __future__ import annotations

import json
from typing import Any

import chess

from chesstree.core.annotation import Annotation
from chesstree.core.enums import Brush, Color, Outcome, ScoreKind
from chesstree.core.models import DrawShape, GameHeaders, Score, TreeNode, TreeState
from chesstree.errors import StateFormatError

STATE_VERSION = 1


def dump_node(node: TreeNode) -> dict[str, Any]:
    return {
        "fen": node.fen,
        "move": node.move.uci() if node.move is not None else None,
        "san": node.san,
        "children": [dump_node(child) for child in node.children],
        "score": (
            {"type": node.score.kind.value, "value": node.score.value}
            if node.score is not None
            else None
        ),
        "depth": node.depth,
        "half_moves": node.half_moves,
        "shapes": [
            {"orig": s.orig, "dest": s.dest, "brush": s.brush.value}
            for s in node.shapes
        ],
        "annotations": [a.value for a in node.annotations],
        "comment": node.comment,
        "clock": node.clock,
    }


def load_node(data: dict[str, Any]) -> TreeNode:
    raw_score = data.get("score")
    raw_move = data.get("move")
    return TreeNode(
        fen=data["fen"],
        move=chess.Move.from_uci(raw_move) if raw_move else None,
        san=data.get("san"),
        children=[load_node(child) for child in data.get("children", [])],
        score=(
            Score(ScoreKind(raw_score["type"]), int(raw_score["value"]))
            if raw_score
            else None
        ),
        depth=data.get("depth"),
        half_moves=int(data.get("half_moves", 0)),
        shapes=[
            DrawShape(s["orig"], s.get("dest"), Brush(s.get("brush", "green")))
            for s in data.get("shapes", [])
        ],
        annotations=[Annotation(a) for a in data.get("annotations", [])],
        comment=data.get("comment", ""),
        clock=data.get("clock"),
    )


def dump_headers(headers: GameHeaders) -> dict[str, Any]:
    return {
        "id": headers.id,
        "fen": headers.fen,
        "event": headers.event,
        "site": headers.site,
        "date": headers.date,
        "time": headers.time,
        "round": headers.round,
        "white": headers.white,
        "white_elo": headers.white_elo,
        "black": headers.black,
        "black_elo": headers.black_elo,
        "result": headers.result.value,
        "time_control": headers.time_control,
        "eco": headers.eco,
        "variant": headers.variant,
        "start": list(headers.start) if headers.start is not None else None,
        "orientation": (
            headers.orientation.value if headers.orientation is not None else None
        ),
        "extra": dict(headers.extra),
    }


def load_headers(data: dict[str, Any]) -> GameHeaders:
    start = data.get("start")
    orientation = data.get("orientation")
    return GameHeaders(
        id=data.get("id", 0),
        fen=data.get("fen", chess.STARTING_FEN),
        event=data.get("event", ""),
        site=data.get("site", ""),
        date=data.get("date"),
        time=data.get("time"),
        round=data.get("round"),
        white=data.get("white", ""),
        white_elo=data.get("white_elo"),
        black=data.get("black", ""),
        black_elo=data.get("black_elo"),
        result=Outcome(data.get("result", "*")),
        time_control=data.get("time_control"),
        eco=data.get("eco"),
        variant=data.get("variant"),
        start=tuple(start) if start is not None else None,
        orientation=Color(orientation) if orientation else None,
        extra=dict(data.get("extra", {})),
    )


def dump_state(state: TreeState) -> dict[str, Any]:
    return {
        "version": STATE_VERSION,
        "state": {
            "root": dump_node(state.root),
            "headers": dump_headers(state.headers),
            "position": list(state.position),
            "dirty": state.dirty,
        },
    }


def load_state(data: dict[str, Any]) -> TreeState:
    """Rebuild a :class:`TreeState` from :func:`dump_state` output."""
    version = data.get("version")
    if version != STATE_VERSION:
        raise StateFormatError(f"Unsupported tree state version: {version!r}")
    try:
        payload = data["state"]
        return TreeState(
            root=load_node(payload["root"]),
            headers=load_headers(payload.get("headers", {})),
            position=tuple(payload.get("position", [])),
            dirty=bool(payload.get("dirty", False)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise StateFormatError(f"Malformed tree state: {exc}") from exc


def dumps(state: TreeState) -> str:
    return json.dumps(dump_state(state), ensure_ascii=False)


def loads(text: str) -> TreeState:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StateFormatError(f"Tree state is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StateFormatError("Tree state must be a JSON object")
    return load_state(data)
