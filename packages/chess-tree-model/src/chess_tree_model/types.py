from __future__ import annotations

from typing import Literal, TypedDict

from typing_extensions import NotRequired


PlyPolicy = Literal["lenient", "strict"]
DuplicatePolicy = Literal["branch", "reuse"]


class WireNodeDict(TypedDict):
    id: str
    parentId: str | None
    children: list[str]
    move: NotRequired[str]  # SAN, root omitted
    uci: NotRequired[str]
    fen: str
    ply: int


class WireTree(TypedDict):
    nodes: dict[str, WireNodeDict]
    rootId: str
