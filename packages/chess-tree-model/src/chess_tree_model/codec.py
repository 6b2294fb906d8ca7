"""Canonical JSON encoding of a move tree.

Keys are sorted and separators fixed, so encode -> decode -> encode yields the
same string for any tree.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, get_args

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from .errors import FormatError, InvalidTree, MissingField, NotFound
from .tree import MoveNode, MoveTree
from .types import PlyPolicy, WireNodeDict, WireTree
from .utils import IdAllocator


class WireNode(BaseModel):
    """One node as stored; restates loosely typed input into the declared shape."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    parent_id: str | None = Field(default=None, alias="parentId")
    children: list[str] = Field(default_factory=list)
    san: str | None = Field(default=None, alias="move")
    uci: str | None = None
    fen: str
    ply: int = 0

    @field_validator("id", "fen", mode="before")
    @classmethod
    def _as_str(cls, v: Any) -> str:
        return v if isinstance(v, str) else str(v)

    @field_validator("parent_id", "san", "uci", mode="before")
    @classmethod
    def _optional_str(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("children", mode="before")
    @classmethod
    def _child_ids(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [str(c) for c in v]

    @field_validator("ply", mode="before")
    @classmethod
    def _ply(cls, v: Any, info: ValidationInfo) -> int:
        if isinstance(v, int) and not isinstance(v, bool):
            return v
        if isinstance(v, float) and v.is_integer():
            return int(v)
        policy = (info.context or {}).get("ply_policy", "lenient")
        if policy == "strict":
            raise ValueError(f"expected an integer ply, got {v!r}")
        return 0

    @classmethod
    def from_node(cls, node: MoveNode) -> WireNode:
        return cls(
            id=node.id,
            parent_id=node.parent_id,
            children=list(node.children),
            san=node.san,
            uci=node.uci,
            fen=node.fen,
            ply=node.ply,
        )

    def to_node(self) -> MoveNode:
        return MoveNode(
            id=self.id,
            fen=self.fen,
            ply=self.ply,
            parent_id=self.parent_id,
            children=list(self.children),
            san=self.san,
            uci=self.uci,
        )

    def to_wire(self) -> WireNodeDict:
        data = self.model_dump(by_alias=True)
        for key in ("move", "uci"):
            if data[key] is None:
                del data[key]
        return data  # type: ignore[return-value]


def encode_tree(tree: MoveTree | None) -> str:
    if tree is None:
        raise InvalidTree("Tree must be a MoveTree, got None")
    nodes = getattr(tree, "nodes", None)
    if not isinstance(nodes, Mapping):
        raise InvalidTree("Tree must have a nodes mapping")
    root_id = getattr(tree, "root_id", None)
    if not root_id:
        raise InvalidTree("Tree must have a root id")
    if root_id not in nodes:
        raise InvalidTree(f"Root node {root_id!r} does not exist in nodes")

    payload: WireTree = {
        "nodes": {node_id: WireNode.from_node(node).to_wire() for node_id, node in nodes.items()},
        "rootId": root_id,
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def decode_tree(
    text: str | bytes,
    *,
    ply_policy: PlyPolicy = "lenient",
    ids: IdAllocator | None = None,
) -> MoveTree:
    """Rebuild a tree from its wire form.

    Only the envelope is checked here; call `validate_tree` for structural
    guarantees.
    """
    if ply_policy not in get_args(PlyPolicy):
        raise ValueError(f"Unknown ply policy: {ply_policy!r}")
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(f"Wire bytes are not UTF-8: {e}") from e
    if not text or not text.strip():
        raise FormatError("Wire string cannot be empty")

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise FormatError("Invalid JSON: nested too deeply") from e
    if not isinstance(parsed, Mapping):
        raise FormatError(f"Expected a JSON object, got {type(parsed).__name__}")

    raw_nodes = parsed.get("nodes")
    if raw_nodes is None:
        raise MissingField("nodes")
    if not isinstance(raw_nodes, Mapping):
        raise FormatError("'nodes' must map node ids to nodes")

    raw_root = parsed.get("rootId")
    if raw_root is None or raw_root == "":
        raise MissingField("rootId")
    root_id = str(raw_root)
    if root_id not in raw_nodes:
        raise NotFound(root_id, "root node")

    nodes: dict[str, MoveNode] = {}
    for key, raw in raw_nodes.items():
        if not isinstance(raw, Mapping):
            raise FormatError(f"Node {key!r} must be an object")
        if raw.get("fen") is None:
            raise MissingField(f"nodes.{key}.fen")
        if ply_policy == "strict" and "ply" not in raw:
            raise FormatError(f"Node {key!r} has no ply")
        data = dict(raw)
        if data.get("id") is None:
            data["id"] = key
        try:
            wire = WireNode.model_validate(data, context={"ply_policy": ply_policy})
        except ValidationError as e:
            raise FormatError(f"Node {key!r}: {e}") from e
        nodes[key] = wire.to_node()

    logger.debug("Decoded tree with {} nodes (root {})", len(nodes), root_id)
    return MoveTree(nodes, root_id, ids=ids)
