from __future__ import annotations

import threading

from loguru import logger

from chess_tree_model import (
    InvalidTree,
    MoveApplier,
    MoveNode,
    MoveRequest,
    MoveTree,
    MoveTreeError,
    Navigator,
    RulesEngine,
    Settings,
    decode_tree,
    encode_tree,
    validate_tree,
)

from .rules import ChessRules, normalize_fen
from .store import MemoryTreeStore, TreeStore


class MoveTreeSession:
    """One solving/playing session: a tree, a cursor and the lock guarding both.

    Every mutation runs under the session lock, so at most one move is in
    flight per session.
    """

    def __init__(
        self,
        session_id: str,
        tree: MoveTree,
        *,
        rules: RulesEngine | None = None,
        settings: Settings | None = None,
        store: TreeStore | None = None,
    ) -> None:
        self.session_id = session_id
        self.settings = settings if settings is not None else Settings()
        self.rules: RulesEngine = rules if rules is not None else ChessRules()
        # MemoryTreeStore defines __len__: an empty store is falsy
        self.store: TreeStore = store if store is not None else MemoryTreeStore(self.settings.key_prefix)
        self.applier = MoveApplier(
            self.rules,
            duplicate_policy=self.settings.duplicate_policy,
            validate_on_mutation=self.settings.validate_on_mutation,
        )
        self.navigator = Navigator(tree)
        self._lock = threading.RLock()

    @classmethod
    def start(
        cls,
        session_id: str,
        fen: str = "start",
        *,
        rules: RulesEngine | None = None,
        settings: Settings | None = None,
        store: TreeStore | None = None,
    ) -> MoveTreeSession:
        tree = MoveTree.create_root(normalize_fen(fen))
        logger.info("Session {} started at {}", session_id, tree.root.fen)
        return cls(session_id, tree, rules=rules, settings=settings, store=store)

    @classmethod
    def restore(
        cls,
        session_id: str,
        ref: str,
        store: TreeStore,
        *,
        rules: RulesEngine | None = None,
        settings: Settings | None = None,
    ) -> MoveTreeSession:
        """Load a saved tree, refusing it unless it validates cleanly."""
        settings = settings if settings is not None else Settings()
        tree = decode_tree(store.get(ref), ply_policy=settings.ply_policy)
        report = validate_tree(tree)
        if not report.valid:
            logger.warning("Refusing tree {} for session {}: {} error(s)", ref, session_id, len(report.errors))
            raise InvalidTree(f"Stored tree {ref!r} is invalid", report.errors)
        logger.info("Session {} restored from {} ({} nodes)", session_id, ref, len(tree))
        return cls(session_id, tree, rules=rules, settings=settings, store=store)

    @property
    def tree(self) -> MoveTree:
        return self.navigator.tree

    def current(self) -> MoveNode:
        return self.navigator.current()

    def legal_moves(self) -> set[str]:
        return self.rules.legal_moves(self.current().fen)

    def play(self, request: MoveRequest, *, from_node_id: str | None = None) -> MoveNode:
        """Play from the cursor, or from `from_node_id` (goto + move as one step).

        A rejected move leaves the cursor where it was before the call.
        """
        with self._lock:
            previous = self.navigator.current_id
            if from_node_id is not None:
                self.navigator.goto(from_node_id)
            try:
                return self.navigator.play(self.applier, request)
            except MoveTreeError:
                self.navigator.goto(previous)
                raise

    def goto(self, node_id: str) -> MoveNode:
        with self._lock:
            return self.navigator.goto(node_id)

    def back(self) -> bool:
        with self._lock:
            return self.navigator.back()

    def reset(self, fen: str | None = None) -> MoveTree:
        """Drop the whole tree and start over from `fen` (default: current root)."""
        with self._lock:
            start = normalize_fen(fen) if fen else self.tree.root.fen
            tree = MoveTree.create_root(start)
            self.navigator.reset(tree)
        logger.info("Session {} reset to {}", self.session_id, start)
        return tree

    def save(self) -> str:
        with self._lock:
            blob = encode_tree(self.tree)
        ref = self.store.put(self.session_id, blob)
        logger.info("Session {} saved as {} ({} nodes)", self.session_id, ref, len(self.tree))
        return ref
