from .applier import MoveApplier, MoveRequest, MoveResult, RulesEngine
from .codec import WireNode, decode_tree, encode_tree
from .config import Settings
from .errors import Conflict, FormatError, IllegalMove, InvalidTree, MissingField, MoveTreeError, NotFound
from .logging_config import configure_logging
from .navigator import Navigator
from .tree import MoveNode, MoveTree
from .utils import ROOT_ID, CounterIds, IdAllocator, TreeStats, tree_depth, tree_stats, uuid_ids
from .validate import ValidationReport, validate_tree

__all__ = [
    "ROOT_ID",
    "Conflict",
    "CounterIds",
    "FormatError",
    "IdAllocator",
    "IllegalMove",
    "InvalidTree",
    "MissingField",
    "MoveApplier",
    "MoveNode",
    "MoveRequest",
    "MoveResult",
    "MoveTree",
    "MoveTreeError",
    "Navigator",
    "NotFound",
    "RulesEngine",
    "Settings",
    "TreeStats",
    "ValidationReport",
    "WireNode",
    "configure_logging",
    "decode_tree",
    "encode_tree",
    "tree_depth",
    "tree_stats",
    "uuid_ids",
    "validate_tree",
]
