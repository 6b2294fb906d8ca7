from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from .tree import MoveNode, MoveTree

if TYPE_CHECKING:
    from .applier import MoveApplier, MoveRequest


class Navigator:
    """Cursor over a move tree: where play currently is."""

    def __init__(self, tree: MoveTree, current_id: str | None = None) -> None:
        self._tree = tree
        self._current_id = tree.root_id
        if current_id is not None:
            self.goto(current_id)

    @property
    def tree(self) -> MoveTree:
        return self._tree

    @property
    def current_id(self) -> str:
        return self._current_id

    def current(self) -> MoveNode:
        return self._tree.get_node(self._current_id)

    def goto(self, node_id: str) -> MoveNode:
        node = self._tree.get_node(node_id)
        self._current_id = node_id
        return node

    def back(self) -> bool:
        """Step to the parent; False (and no move) when already at the root."""
        parent_id = self.current().parent_id
        if parent_id is None:
            logger.debug("Already at root {}", self._current_id)
            return False
        self.goto(parent_id)
        return True

    def forward(self, variation: int = 0) -> bool:
        """Step into a child; 0 is the mainline continuation."""
        children = self.current().children
        if not 0 <= variation < len(children):
            return False
        self.goto(children[variation])
        return True

    def to_root(self) -> MoveNode:
        return self.goto(self._tree.root_id)

    def path(self) -> list[MoveNode]:
        return self._tree.get_path(self._current_id)

    def reset(self, tree: MoveTree) -> None:
        self._tree = tree
        self._current_id = tree.root_id

    def play(self, applier: MoveApplier, request: MoveRequest) -> MoveNode:
        """Apply a move from the cursor and advance onto the resulting node.

        From a non-leaf this adds a variation; existing children keep their order.
        """
        node_id = applier.apply_move(self._tree, self._current_id, request)
        return self.goto(node_id)
