"""Position wrapper over python-chess with strict make/unmake discipline."""

from typing import List, Optional

import chess
import chess.polyglot


class Position:
    """The single mutable board shared by the driver, nodes and quiescence.

    Every ``do_move`` must be matched by an ``undo_move`` in LIFO order. The
    token returned by ``do_move`` is the move itself; ``undo_move`` asserts
    it is the move on top of the stack.
    """

    def __init__(self, fen: Optional[str] = None):
        """Initialize from FEN or the standard starting position."""
        self.board = chess.Board(fen) if fen else chess.Board()
        self.pending = 0  # do_move calls not yet undone

    def reset(self):
        """Reset to the initial position."""
        assert self.pending == 0, "reset during a search"
        self.board.reset()

    def set_fen(self, fen: str):
        """Set board state from a FEN string. Raises ValueError if invalid."""
        assert self.pending == 0, "set_fen during a search"
        self.board.set_fen(fen)

    def fen(self) -> str:
        return self.board.fen()

    @property
    def turn(self) -> chess.Color:
        return self.board.turn

    # --- make / unmake -------------------------------------------------

    def do_move(self, move: chess.Move) -> chess.Move:
        self.board.push(move)
        self.pending += 1
        return move

    def undo_move(self, token: chess.Move):
        assert self.pending > 0, "undo_move without a matching do_move"
        assert self.board.peek() == token, f"undo {token} but top is {self.board.peek()}"
        self.board.pop()
        self.pending -= 1

    def make_move(self, move_str: str) -> bool:
        """Play a UCI move (e.g. 'e2e4') on the game position. Returns True if legal."""
        try:
            move = chess.Move.from_uci(move_str)
        except ValueError:
            return False
        if move not in self.board.legal_moves:
            return False
        self.board.push(move)
        return True

    # --- predicates ----------------------------------------------------

    def legal_moves(self) -> List[chess.Move]:
        return list(self.board.legal_moves)

    def has_legal_moves(self) -> bool:
        return any(self.board.generate_legal_moves())

    def is_check(self) -> bool:
        return self.board.is_check()

    def gives_check(self, move: chess.Move) -> bool:
        return self.board.gives_check(move)

    def is_capture(self, move: chess.Move) -> bool:
        return self.board.is_capture(move)

    def is_draw(self, ply: int) -> bool:
        """Fifty-move rule or a repetition.

        A single repetition is a draw when the earlier occurrence lies
        strictly after the search root, fewer than ``ply`` half-moves back.
        Repeating game history from before the root needs the position to
        have occurred twice already.
        """
        board = self.board
        if board.halfmove_clock >= 100:
            # Checkmate on the hundredth half-move still counts as mate
            return not board.is_check() or self.has_legal_moves()
        if ply <= 0 or not board.is_repetition(2):
            return False
        return self._repetition_distance() < ply or board.is_repetition(3)

    def _repetition_distance(self) -> int:
        """Half-moves back to the latest earlier occurrence of this position."""
        board = self.board
        key = chess.polyglot.zobrist_hash(board)
        undone = []
        try:
            while board.move_stack:
                move = board.pop()
                undone.append(move)
                if board.is_irreversible(move):
                    break
                if len(undone) % 2 == 0 and chess.polyglot.zobrist_hash(board) == key:
                    return len(undone)
        finally:
            while undone:
                board.push(undone.pop())
        return len(board.move_stack) + 1

    def is_game_over(self) -> bool:
        return self.board.is_game_over()

    def copy(self) -> "Position":
        position = Position.__new__(Position)
        position.board = self.board.copy()
        position.pending = 0
        return position

    def __str__(self) -> str:
        return str(self.board)
