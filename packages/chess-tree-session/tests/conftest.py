"""Shared test fixtures."""

import pytest
from redis_fakes import FakeRedis

from chess_tree_session import ChessRules, MemoryTreeStore

RUY_LOPEZ_PGN = """[Event "Demo"]
[White "A"]
[Black "B"]

1. e4 e5 (1... c5 2. Nf3 d6) 2. Nf3 Nc6 3. Bb5 (3. Bc4 Bc5) 3... a6 *
"""


@pytest.fixture
def chess_rules() -> ChessRules:
    return ChessRules()


@pytest.fixture
def memory_store() -> MemoryTreeStore:
    return MemoryTreeStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def ruy_lopez_pgn() -> str:
    return RUY_LOPEZ_PGN
