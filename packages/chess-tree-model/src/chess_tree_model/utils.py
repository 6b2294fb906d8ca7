from __future__ import annotations

import itertools
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from .tree import MoveTree


ROOT_ID = "n:root"

IdAllocator = Callable[[], str]


class CounterIds:
    """Monotonic ids scoped to one allocator instance: n:1, n:2, ..."""

    def __init__(self, prefix: str = "n:", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


def uuid_ids(prefix: str = "n:") -> IdAllocator:
    def allocate() -> str:
        return f"{prefix}{uuid4().hex[:12]}"

    return allocate


@dataclass(frozen=True, slots=True)
class TreeStats:
    node_count: int
    branching_points: int
    leaf_count: int
    max_depth: int  # nodes on the longest root-to-leaf path


def _walk_levels(tree: MoveTree) -> Iterator[tuple[str, int]]:
    # visited set keeps this linear even when decoded adjacency loops back
    root_id = tree.root_id
    if root_id not in tree.nodes:
        return
    seen = {root_id}
    queue: deque[tuple[str, int]] = deque([(root_id, 1)])
    while queue:
        node_id, level = queue.popleft()
        yield node_id, level
        for child_id in tree.nodes[node_id].children:
            if child_id in seen or child_id not in tree.nodes:
                continue
            seen.add(child_id)
            queue.append((child_id, level + 1))


def tree_depth(tree: MoveTree) -> int:
    depth = 0
    for _, level in _walk_levels(tree):
        depth = max(depth, level)
    return depth


def tree_stats(tree: MoveTree) -> TreeStats:
    branching = 0
    leaves = 0
    for node in tree.nodes.values():
        if len(node.children) > 1:
            branching += 1
        elif not node.children:
            leaves += 1
    return TreeStats(
        node_count=len(tree.nodes),
        branching_points=branching,
        leaf_count=leaves,
        max_depth=tree_depth(tree),
    )
