"""Shared test fixtures."""

import pytest
from fakes import FakeRules

from chess_tree_model import MoveTree


@pytest.fixture
def rules() -> FakeRules:
    return FakeRules()


@pytest.fixture
def opening_tree() -> MoveTree:
    """1. e4 e5 (1... c5) 2. Nf3 (1. d4 d5), with placeholder positions.

    Ids: n:1 e4, n:2 d4, n:3 e5, n:4 Nf3, n:5 d5, n:6 c5.
    """
    tree = MoveTree.create_root("start")
    e4 = tree.add_child(tree.root_id, fen="p-e4", san="e4", uci="e2e4")
    d4 = tree.add_child(tree.root_id, fen="p-d4", san="d4", uci="d2d4")
    e5 = tree.add_child(e4, fen="p-e4e5", san="e5", uci="e7e5")
    tree.add_child(e5, fen="p-e4e5nf3", san="Nf3", uci="g1f3")
    tree.add_child(d4, fen="p-d4d5", san="d5", uci="d7d5")
    tree.add_child(e4, fen="p-e4c5", san="c5", uci="c7c5")
    return tree


@pytest.fixture
def wide_tree() -> MoveTree:
    """50 nodes over 10 plies: 4 moves at ply 1, then 5 per ply spread over the previous ply."""
    tree = MoveTree.create_root("start")
    level = [tree.root_id]
    for ply in range(1, 11):
        width = 4 if ply == 1 else 5
        nxt = []
        for i in range(width):
            parent_id = level[i % len(level)]
            nxt.append(tree.add_child(parent_id, fen=f"pos-{ply}-{i}", san=f"m{ply}{i}", uci=f"a{ply % 8 + 1}b{i + 1}"))
        level = nxt
    return tree
