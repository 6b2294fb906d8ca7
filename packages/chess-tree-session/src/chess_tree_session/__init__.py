from .notation import NotationLine, NotationToken, build_notation_lines
from .pgn import build_tree_from_pgn, tree_to_pgn
from .rules import ChessRules, normalize_fen
from .session import MoveTreeSession
from .store import MemoryTreeStore, RedisTreeStore, TreeStore

__all__ = [
    "ChessRules",
    "MemoryTreeStore",
    "MoveTreeSession",
    "NotationLine",
    "NotationToken",
    "RedisTreeStore",
    "TreeStore",
    "build_notation_lines",
    "build_tree_from_pgn",
    "normalize_fen",
    "tree_to_pgn",
]
