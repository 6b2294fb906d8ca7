from __future__ import annotations

import io
from collections.abc import Mapping

import chess
import chess.pgn
from loguru import logger

from chess_tree_model import IdAllocator, InvalidTree, MoveTree


def build_tree_from_pgn(pgn: str, *, ids: IdAllocator | None = None) -> MoveTree:
    """Read the first game in `pgn` into a move tree, variations included."""
    game = chess.pgn.read_game(io.StringIO(pgn))
    if game is None:
        raise ValueError("PGN: no game found")
    if game.errors:
        raise ValueError(f"PGN: {game.errors[0]}")

    tree = MoveTree.create_root(game.board().fen(), ids=ids)

    # explicit stack: deep games must not hit the recursion limit
    stack: list[tuple[chess.pgn.GameNode, str]] = [(game, tree.root_id)]
    while stack:
        parent, parent_id = stack.pop()
        board = parent.board()
        pending: list[tuple[chess.pgn.GameNode, str]] = []
        for child in parent.variations:
            node_id = tree.add_child(
                parent_id,
                fen=child.board().fen(),
                san=board.san(child.move),
                uci=child.move.uci(),
            )
            pending.append((child, node_id))
        stack.extend(reversed(pending))

    logger.debug("Built tree with {} nodes from PGN", len(tree))
    return tree


def tree_to_pgn(tree: MoveTree, headers: Mapping[str, str] | None = None) -> str:
    """Export the tree as PGN text; first children become the mainline."""
    game = chess.pgn.Game()
    for key, value in (headers or {}).items():
        game.headers[str(key)] = str(value)
    root = tree.root
    if root.fen != chess.STARTING_FEN:
        game.setup(root.fen)

    stack: list[tuple[chess.pgn.GameNode, str]] = [(game, tree.root_id)]
    while stack:
        gnode, node_id = stack.pop()
        board = gnode.board()
        for child in tree.children_of(node_id):
            if not child.uci and not child.san:
                raise InvalidTree(f"Node {child.id!r} has no move")
            try:
                move = chess.Move.from_uci(child.uci) if child.uci else board.parse_san(child.san)
            except ValueError as e:
                raise InvalidTree(f"Node {child.id!r} holds an unreadable move: {e}") from e
            if move not in board.legal_moves:
                raise InvalidTree(f"Node {child.id!r} holds an illegal move {move.uci()!r}")
            stack.append((gnode.add_variation(move), child.id))

    exporter = chess.pgn.StringExporter(headers=True, variations=True, comments=False)
    return game.accept(exporter)
