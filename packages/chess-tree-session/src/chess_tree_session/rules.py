from __future__ import annotations

import chess

from chess_tree_model import IllegalMove, MoveRequest, MoveResult


def normalize_fen(fen: str | None) -> str:
    """Map the "start" sentinel (or nothing) to the standard starting FEN."""
    if not fen or fen in ("start", "startpos"):
        return chess.STARTING_FEN
    return fen


def _board(fen: str) -> chess.Board:
    try:
        return chess.Board(normalize_fen(fen))
    except ValueError as e:
        raise IllegalMove(fen, "", f"invalid position ({e})") from e


def _promotion_piece(symbol: str | None) -> chess.PieceType | None:
    if not symbol:
        return None
    try:
        return chess.Piece.from_symbol(symbol.lower()).piece_type
    except ValueError:
        return None


class ChessRules:
    """Rules engine backed by python-chess."""

    def legal_moves(self, fen: str) -> set[str]:
        return {m.uci() for m in _board(fen).legal_moves}

    def apply_move(self, fen: str, request: MoveRequest) -> MoveResult:
        board = _board(fen)
        move = self._parse(board, fen, request)
        if move not in board.legal_moves:
            raise IllegalMove(fen, str(request))
        san = board.san(move)
        board.push(move)
        return MoveResult(san=san, uci=move.uci(), fen=board.fen())

    def _parse(self, board: chess.Board, fen: str, request: MoveRequest) -> chess.Move:
        if request.from_square and request.to_square:
            try:
                from_sq = chess.parse_square(request.from_square)
                to_sq = chess.parse_square(request.to_square)
            except ValueError as e:
                raise IllegalMove(fen, str(request), "malformed square") from e
            promotion = _promotion_piece(request.promotion)
            if request.promotion and promotion is None:
                raise IllegalMove(fen, str(request), "unknown promotion piece")
            if promotion is None and board.piece_type_at(from_sq) == chess.PAWN:
                if chess.square_rank(to_sq) in (0, 7):
                    promotion = chess.QUEEN
            return chess.Move(from_sq, to_sq, promotion=promotion)

        if request.san:
            try:
                return board.parse_san(request.san)
            except ValueError as e:
                raise IllegalMove(fen, request.san) from e

        raise IllegalMove(fen, str(request), "empty move request")
