from __future__ import annotations

from collections.abc import Sequence


class MoveTreeError(Exception):
    """Base class for every move tree failure."""


class NotFound(MoveTreeError, KeyError):
    def __init__(self, node_id: str, what: str = "node") -> None:
        self.node_id = node_id
        self.what = what
        super().__init__(f"Unknown {what}: {node_id!r}")

    def __str__(self) -> str:
        # KeyError would repr() the message.
        return str(self.args[0])


class FormatError(MoveTreeError, ValueError):
    """Malformed wire input."""


class MissingField(FormatError):
    def __init__(self, field: str, msg: str | None = None) -> None:
        self.field = field
        super().__init__(msg or f"missing required field {field!r}")


class InvalidTree(MoveTreeError, ValueError):
    def __init__(self, msg: str, errors: Sequence[str] = ()) -> None:
        self.errors = list(errors)
        if self.errors:
            msg = f"{msg}: " + "; ".join(self.errors)
        super().__init__(msg)


class IllegalMove(MoveTreeError, ValueError):
    def __init__(self, fen: str, move: str, reason: str = "illegal move") -> None:
        self.fen = fen
        self.move = move
        self.reason = reason
        super().__init__(f"{reason}: {move!r} in {fen!r}")


class Conflict(MoveTreeError, RuntimeError):
    """Raised when a parent was extended between snapshot and commit."""

    def __init__(self, parent_id: str, expected: int, actual: int) -> None:
        self.parent_id = parent_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Node {parent_id!r} changed concurrently: expected {expected} children, found {actual}"
        )
