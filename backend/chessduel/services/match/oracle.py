"""Rules oracle: the only place that knows chess.

The authority treats positions as opaque values and asks the oracle to apply
moves and describe positions. Any object with the methods of `RulesOracle`
can stand in, which is how the authority is tested against scripted outcomes.
"""

from typing import Any, Optional, Protocol

import chess
import chess.pgn

from chessduel.shared_types import Side


class RulesOracle(Protocol):
    def initial_position(self) -> Any: ...

    def move(self, position: Any, request: Any) -> Optional[Any]:
        """Return the position after `request`, or None when it is rejected."""
        ...

    def turn_of(self, position: Any) -> Side: ...

    def is_in_check(self, position: Any) -> bool: ...

    def is_checkmate(self, position: Any) -> bool: ...

    def is_draw(self, position: Any) -> bool: ...

    def serialize(self, position: Any) -> str: ...

    def last_move(self, position: Any) -> Optional[dict]:
        """Describe the move that produced `position`, or None at the start."""
        ...

    def history(self, position: Any) -> str: ...


class ChessOracle:
    """python-chess backed oracle. Positions are `chess.Board` instances and
    are never mutated in place."""

    def initial_position(self) -> chess.Board:
        return chess.Board()

    def move(self, position: chess.Board, request) -> Optional[chess.Board]:
        move = self._parse(position, request)
        if move is None or move not in position.legal_moves:
            return None
        board = position.copy()
        board.push(move)
        return board

    def turn_of(self, position: chess.Board) -> Side:
        return Side.WHITE if position.turn == chess.WHITE else Side.BLACK

    def is_in_check(self, position: chess.Board) -> bool:
        return position.is_check()

    def is_checkmate(self, position: chess.Board) -> bool:
        return position.is_checkmate()

    def is_draw(self, position: chess.Board) -> bool:
        return (
            position.is_stalemate()
            or position.is_insufficient_material()
            or position.is_fifty_moves()
            or position.is_repetition(3)
        )

    def serialize(self, position: chess.Board) -> str:
        return position.fen()

    def last_move(self, position: chess.Board) -> Optional[dict]:
        if not position.move_stack:
            return None
        move = position.peek()
        before = position.copy()
        before.pop()
        piece = before.piece_at(move.from_square)
        described = {
            'from': chess.square_name(move.from_square),
            'to': chess.square_name(move.to_square),
            'san': before.san(move),
            'piece': piece.symbol().lower() if piece else None,
        }
        if move.promotion:
            described['promotion'] = chess.piece_symbol(move.promotion)
        return described

    def history(self, position: chess.Board) -> str:
        """Movetext of the game so far, without headers."""
        exporter = chess.pgn.StringExporter(headers=False, variations=False, comments=False)
        return chess.pgn.Game.from_board(position).accept(exporter)

    def _parse(self, position: chess.Board, request) -> Optional[chess.Move]:
        from_name = getattr(request, 'from_square', None)
        to_name = getattr(request, 'to_square', None)
        if not isinstance(from_name, str) or not isinstance(to_name, str):
            return None
        try:
            from_sq = chess.parse_square(from_name.lower())
            to_sq = chess.parse_square(to_name.lower())
        except ValueError:
            return None
        if from_sq == to_sq:
            return None

        # Promotion piece only matters for a pawn reaching the back rank
        promotion = None
        piece = position.piece_at(from_sq)
        if piece is not None and piece.piece_type == chess.PAWN and chess.square_rank(to_sq) in (0, 7):
            symbol = getattr(request, 'promotion', None) or 'q'
            if not isinstance(symbol, str):
                return None
            try:
                promotion = chess.Piece.from_symbol(symbol.lower()).piece_type
            except ValueError:
                return None
            if promotion in (chess.PAWN, chess.KING):
                return None
        return chess.Move(from_sq, to_sq, promotion=promotion)
