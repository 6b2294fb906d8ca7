from __future__ import annotations

from collections import Counter
from collections.abc import Mapping

from pydantic import BaseModel

from .tree import MoveNode, MoveTree


class ValidationReport(BaseModel):
    valid: bool
    errors: list[str]


def _report(errors: list[str]) -> ValidationReport:
    return ValidationReport(valid=not errors, errors=errors)


def _valid_ply(ply: object) -> bool:
    return isinstance(ply, int) and not isinstance(ply, bool) and ply >= 0


def validate_tree(tree: MoveTree | None) -> ValidationReport:
    """Structural check of a move tree.

    Collects every violation instead of stopping at the first one, and never
    raises: a tree missing its node mapping or root id is reported, not rejected.
    """
    errors: list[str] = []

    if tree is None:
        return _report(["Tree must be a MoveTree, got None"])
    nodes = getattr(tree, "nodes", None)
    if not isinstance(nodes, Mapping):
        return _report(["Tree must have a nodes mapping"])
    root_id = getattr(tree, "root_id", None)
    if not isinstance(root_id, str) or not root_id:
        return _report(["Tree must have a non-empty root id"])

    root = nodes.get(root_id)
    if root is None:
        errors.append(f"Root node {root_id!r} does not exist in nodes")
    elif isinstance(root, MoveNode) and root.parent_id is not None:
        errors.append(f"Root node {root_id!r} should have no parent, got {root.parent_id!r}")

    for node_id, node in nodes.items():
        if not isinstance(node, MoveNode):
            errors.append(f"Node {node_id!r} is not a MoveNode")
            continue
        is_root = node_id == root_id

        if node.id != node_id:
            errors.append(f"Node {node_id!r} has mismatched id {node.id!r}")

        parent: MoveNode | None = None
        if not is_root:
            if node.parent_id is None:
                errors.append(f"Node {node_id!r} has no parent but is not the root {root_id!r}")
            elif node.parent_id not in nodes:
                errors.append(f"Node {node_id!r} references non-existent parent {node.parent_id!r}")
            else:
                candidate = nodes[node.parent_id]
                parent = candidate if isinstance(candidate, MoveNode) else None

        if not isinstance(node.children, list):
            errors.append(f"Node {node_id!r} has invalid children (expected a list)")
        else:
            for child_id in dict.fromkeys(node.children):
                child = nodes.get(child_id)
                if child is None:
                    errors.append(f"Node {node_id!r} references non-existent child {child_id!r}")
                elif not isinstance(child, MoveNode) or child.parent_id != node_id:
                    child_parent = getattr(child, "parent_id", None)
                    errors.append(
                        f"Node {child_id!r} parentId {child_parent!r} does not match parent {node_id!r}"
                    )
            for child_id, count in Counter(node.children).items():
                if count > 1:
                    errors.append(f"Node {node_id!r} lists child {child_id!r} {count} times")

        if not _valid_ply(node.ply):
            errors.append(f"Node {node_id!r} has invalid ply {node.ply!r} (expected int >= 0)")
        elif is_root:
            if node.ply != 0:
                errors.append(f"Root node {node_id!r} must have ply 0, got {node.ply}")
        elif parent is not None and _valid_ply(parent.ply) and node.ply != parent.ply + 1:
            errors.append(
                f"Node {node_id!r} has ply {node.ply}, expected {parent.ply + 1} "
                f"(parent {parent.id!r} has ply {parent.ply})"
            )

    return _report(errors)
