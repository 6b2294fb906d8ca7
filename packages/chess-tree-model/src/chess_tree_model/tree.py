"""In-memory move tree: the node repository behind a solving session."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from loguru import logger

from .errors import Conflict, InvalidTree, NotFound
from .utils import ROOT_ID, CounterIds, IdAllocator


@dataclass(slots=True)
class MoveNode:
    """One position, reached by playing `san`/`uci` from the parent position."""

    id: str
    fen: str
    ply: int = 0
    parent_id: str | None = None
    children: list[str] = field(default_factory=list)  # mainline first
    san: str | None = None
    uci: str | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


class MoveTree:
    """Node mapping plus root pointer, owned by a single writer.

    Nodes are only ever added by extending an existing node; nothing is rewired
    or deleted, which keeps the parent relation acyclic.
    """

    def __init__(
        self,
        nodes: dict[str, MoveNode],
        root_id: str,
        *,
        ids: IdAllocator | None = None,
    ) -> None:
        self._nodes = nodes
        self._root_id = root_id
        self._ids: IdAllocator = ids or CounterIds()
        self._version = 0

    @classmethod
    def create_root(
        cls,
        fen: str,
        *,
        root_id: str = ROOT_ID,
        ids: IdAllocator | None = None,
    ) -> MoveTree:
        root = MoveNode(id=root_id, fen=fen, ply=0)
        return cls({root_id: root}, root_id, ids=ids)

    @property
    def nodes(self) -> dict[str, MoveNode]:
        return self._nodes

    @property
    def root_id(self) -> str:
        return self._root_id

    @property
    def root(self) -> MoveNode:
        return self.get_node(self._root_id)

    @property
    def version(self) -> int:
        """Bumped on every accepted mutation."""
        return self._version

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[MoveNode]:
        return iter(self._nodes.values())

    def is_root(self, node_id: str) -> bool:
        return node_id == self._root_id

    def get_node(self, node_id: str) -> MoveNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NotFound(node_id) from None

    def children_of(self, node_id: str) -> list[MoveNode]:
        node = self.get_node(node_id)
        return [self._nodes[c] for c in node.children if c in self._nodes]

    def find_child(self, parent_id: str, uci: str) -> MoveNode | None:
        for child in self.children_of(parent_id):
            if child.uci == uci:
                return child
        return None

    def add_child(
        self,
        parent_id: str,
        *,
        fen: str,
        san: str | None = None,
        uci: str | None = None,
        expected_children: int | None = None,
    ) -> str:
        """Append a new node under `parent_id` and return its id.

        `expected_children` is the parent's child count observed before the move
        was computed; a different count at commit time raises Conflict.
        """
        parent = self.get_node(parent_id)
        if expected_children is not None and len(parent.children) != expected_children:
            raise Conflict(parent_id, expected_children, len(parent.children))

        # distinct ids from the allocator must reach a free one within len(nodes) + 1 calls
        for _ in range(len(self._nodes) + 1):
            node_id = self._ids()
            if node_id not in self._nodes:
                break
        else:
            raise InvalidTree(f"Id allocator keeps returning ids already in use (last {node_id!r})")

        self._nodes[node_id] = MoveNode(
            id=node_id,
            fen=fen,
            ply=parent.ply + 1,
            parent_id=parent_id,
            san=san,
            uci=uci,
        )
        parent.children.append(node_id)
        self._version += 1
        logger.debug(
            "Added {} under {} (ply {}, variation {})",
            node_id,
            parent_id,
            parent.ply + 1,
            len(parent.children) - 1,
        )
        return node_id

    def get_path(self, node_id: str) -> list[MoveNode]:
        """Nodes from the root down to `node_id`, inclusive."""
        node = self.get_node(node_id)
        path = [node]
        seen = {node.id}
        while node.parent_id is not None:
            if node.parent_id in seen:
                raise InvalidTree(f"Parent chain of {node_id!r} loops at {node.parent_id!r}")
            parent = self._nodes.get(node.parent_id)
            if parent is None:
                raise InvalidTree(
                    f"Parent chain of {node_id!r} breaks at missing node {node.parent_id!r}"
                )
            seen.add(parent.id)
            path.append(parent)
            node = parent
        path.reverse()
        return path

    def mainline(self, start: str | None = None) -> list[MoveNode]:
        """Follow first children from `start` (default: root) to a leaf."""
        node = self.get_node(start or self._root_id)
        line = [node]
        seen = {node.id}
        while node.children:
            nxt = self._nodes.get(node.children[0])
            if nxt is None or nxt.id in seen:
                break
            seen.add(nxt.id)
            line.append(nxt)
            node = nxt
        return line
