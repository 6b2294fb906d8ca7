from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, get_args, runtime_checkable

from loguru import logger

from .errors import IllegalMove, InvalidTree
from .tree import MoveTree
from .types import DuplicatePolicy
from .validate import validate_tree

_UCI_RE = re.compile(r"^([a-h][1-8])([a-h][1-8])([qrbn])?$")


@dataclass(frozen=True, slots=True)
class MoveRequest:
    """A proposed move: squares (plus promotion piece) or a SAN string."""

    from_square: str | None = None
    to_square: str | None = None
    promotion: str | None = None
    san: str | None = None

    @classmethod
    def from_uci(cls, text: str) -> MoveRequest:
        m = _UCI_RE.match(text.strip().lower())
        if m is None:
            raise IllegalMove("", text, "malformed move code")
        return cls(from_square=m.group(1), to_square=m.group(2), promotion=m.group(3))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> MoveRequest:
        """Board drop payload: {"from": "e2", "to": "e4", "promotion": "q" | None}."""
        promotion = payload.get("promotion")
        return cls(
            from_square=payload.get("from") or None,
            to_square=payload.get("to") or None,
            promotion=str(promotion) if promotion else None,
            san=payload.get("san") if not payload.get("from") else None,
        )

    @property
    def uci(self) -> str | None:
        if not self.from_square or not self.to_square:
            return None
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"

    def __str__(self) -> str:
        return self.uci or self.san or "?"


@dataclass(frozen=True, slots=True)
class MoveResult:
    san: str
    uci: str
    fen: str  # position after the move


@runtime_checkable
class RulesEngine(Protocol):
    """Legality oracle consumed by the applier."""

    def legal_moves(self, fen: str) -> set[str]:
        """Candidate moves in `fen`, as move codes."""
        ...

    def apply_move(self, fen: str, request: MoveRequest) -> MoveResult:
        """Play `request` in `fen`; raise IllegalMove if it is not legal."""
        ...


class MoveApplier:
    def __init__(
        self,
        rules: RulesEngine,
        *,
        duplicate_policy: DuplicatePolicy = "branch",
        validate_on_mutation: bool = False,
    ) -> None:
        if duplicate_policy not in get_args(DuplicatePolicy):
            raise ValueError(f"Unknown duplicate move policy: {duplicate_policy!r}")
        self.rules = rules
        self.duplicate_policy = duplicate_policy
        self.validate_on_mutation = validate_on_mutation

    def apply_move(self, tree: MoveTree, from_node_id: str, request: MoveRequest) -> str:
        """Play `request` from `from_node_id` and return the id of the resulting node.

        The tree is left untouched when the rules engine rejects the move.
        """
        node = tree.get_node(from_node_id)
        seen_children = len(node.children)

        try:
            result = self.rules.apply_move(node.fen, request)
        except IllegalMove:
            logger.warning("Rejected {} at {}", request, from_node_id)
            raise

        if self.duplicate_policy == "reuse":
            existing = tree.find_child(from_node_id, result.uci)
            if existing is not None:
                logger.debug("Reusing {} for {} at {}", existing.id, result.uci, from_node_id)
                return existing.id

        node_id = tree.add_child(
            from_node_id,
            fen=result.fen,
            san=result.san,
            uci=result.uci,
            expected_children=seen_children,
        )

        if self.validate_on_mutation:
            report = validate_tree(tree)
            if not report.valid:
                raise InvalidTree(f"Tree invalid after adding {node_id!r}", report.errors)
        return node_id
