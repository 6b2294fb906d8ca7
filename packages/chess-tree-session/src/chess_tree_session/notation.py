from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from chess_tree_model import MoveTree


@dataclass(frozen=True, slots=True)
class NotationOptions:
    show_move_numbers: bool = True
    max_variation_depth: int | None = None
    indent_px: int = 18


def _opts(options: dict[str, Any] | None) -> NotationOptions:
    if not options:
        return NotationOptions()
    depth = options.get("max_variation_depth")
    return NotationOptions(
        show_move_numbers=bool(options.get("show_move_numbers", True)),
        max_variation_depth=None if depth in (None, "") else int(depth),
        indent_px=int(options.get("indent_px", 18)),
    )


def _move_number_prefix(ply: int, *, line_start: bool) -> str | None:
    """Return 'N.' / 'N...' prefix or None."""
    num = (ply + 1) // 2
    if ply % 2 == 1:
        return f"{num}."
    if line_start:
        return f"{num}..."
    return None


class NotationToken(BaseModel):
    kind: str  # "moveno" | "move" | "text" | "elided"
    text: str = ""
    node_id: str = ""


class NotationLine(BaseModel):
    depth: int
    indent: str
    tokens: list[NotationToken]

    def text(self) -> str:
        return " ".join(t.text for t in self.tokens if t.text)


class _Builder:
    def __init__(self, tree: MoveTree, o: NotationOptions) -> None:
        self.tree = tree
        self.o = o
        self.seen: set[str] = set()

    def line(self, depth: int, tokens: list[NotationToken]) -> NotationLine:
        return NotationLine(depth=depth, indent=f"{depth * self.o.indent_px}px", tokens=tokens)

    def move_tokens(self, node_id: str, *, line_start: bool) -> list[NotationToken]:
        node = self.tree.get_node(node_id)
        out: list[NotationToken] = []
        prefix = _move_number_prefix(node.ply, line_start=line_start) if self.o.show_move_numbers else None
        if prefix:
            out.append(NotationToken(kind="moveno", text=prefix))
        out.append(NotationToken(kind="move", text=node.san or node.uci or "?", node_id=node_id))
        return out

    def follow(self, start_id: str, depth: int, tokens: list[NotationToken]) -> list[NotationLine]:
        """Extend `tokens` along the mainline from `start_id`; return nested variation lines."""
        nested: list[NotationLine] = []
        cur = start_id
        first = not tokens
        while True:
            children = [c for c in self.tree.get_node(cur).children if c in self.tree and c not in self.seen]
            if not children:
                break
            main = children[0]
            self.seen.add(main)
            tokens.extend(self.move_tokens(main, line_start=first))
            nested.extend(self.variations(cur, children[1:], depth + 1))
            first = False
            cur = main
        return nested

    def variations(self, parent_id: str, siblings: list[str], depth: int) -> list[NotationLine]:
        if not siblings:
            return []
        if self.o.max_variation_depth is not None and depth > self.o.max_variation_depth:
            return [self.line(depth, [NotationToken(kind="elided", text="(…)", node_id=parent_id)])]

        lines: list[NotationLine] = []
        for v in siblings:
            if v in self.seen:
                continue
            self.seen.add(v)
            head = [NotationToken(kind="text", text="(")]
            head.extend(self.move_tokens(v, line_start=True))
            nested = self.follow(v, depth, head)
            head.append(NotationToken(kind="text", text=")"))
            lines.append(self.line(depth, head))
            lines.extend(nested)
        return lines


def build_notation_lines(tree: MoveTree, options: dict[str, Any] | None = None) -> list[NotationLine]:
    """Render a move tree as lines: the mainline first, then each variation indented.

    The result is JSON-serializable and can be shipped to a client as-is.
    """
    b = _Builder(tree, _opts(options))
    b.seen.add(tree.root_id)
    tokens: list[NotationToken] = []
    nested = b.follow(tree.root_id, 0, tokens)
    if not tokens:
        return []
    return [b.line(0, tokens), *nested]
