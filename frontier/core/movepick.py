"""Forcing-move generation and ordering for the quiescence search."""

from typing import Dict, Iterator, List, Optional

import chess

from frontier.config import SearchConfig
from frontier.core.see import PIECE_VALUES

RECAPTURE_BONUS = 1_000_000
PROMOTION_BONUS = 10_000


def _relative(sq: chess.Square, color: chess.Color) -> chess.Square:
    return sq if color == chess.WHITE else chess.square_mirror(sq)


class ForcingMovePicker:
    """Yields the moves a quiescence node may search, best candidates first.

    Stages:
      - in check: every legal evasion, captures before quiet moves;
      - otherwise captures and queen promotions, then (only while
        ``depth >= checks_depth``) quiet moves that give check.

    Once ``depth <= recapture_depth`` only recaptures on the previous
    move's destination are generated. Ordering ties are broken on
    colour-relative squares so a position and its mirror are searched in
    the same order.
    """

    def __init__(self, board: chess.Board, depth: int, prev_sq: Optional[chess.Square],
                 cfg: SearchConfig, values: Optional[Dict[int, int]] = None):
        self.board = board
        self.depth = depth
        self.prev_sq = prev_sq
        self.cfg = cfg
        self.values = values or PIECE_VALUES

    def __iter__(self) -> Iterator[chess.Move]:
        board = self.board
        if board.is_check():
            yield from self._ordered(list(board.generate_legal_moves()))
            return

        to_mask = chess.BB_ALL
        if self.depth <= self.cfg.recapture_depth and self.prev_sq is not None:
            to_mask = chess.BB_SQUARES[self.prev_sq]

        captures = [m for m in board.generate_legal_captures(chess.BB_ALL, to_mask)
                    if m.promotion in (None, chess.QUEEN)]
        if to_mask == chess.BB_ALL:
            seventh = chess.BB_RANK_7 if board.turn == chess.WHITE else chess.BB_RANK_2
            promoting = board.pawns & board.occupied_co[board.turn] & seventh
            if promoting:
                captures.extend(
                    m for m in board.generate_legal_moves(promoting, chess.BB_ALL & ~board.occupied)
                    if m.promotion == chess.QUEEN
                )
        yield from self._ordered(captures)

        if self.depth >= self.cfg.checks_depth:
            checks = [m for m in board.generate_legal_moves()
                      if not m.promotion and not board.is_capture(m) and board.gives_check(m)]
            yield from self._ordered(checks)

    def score(self, move: chess.Move) -> int:
        """MVV-LVA, with recaptures on the previous destination first."""
        board = self.board
        score = 0
        if board.is_capture(move):
            if board.is_en_passant(move):
                victim = chess.PAWN
            else:
                victim = board.piece_type_at(move.to_square)
            attacker = board.piece_type_at(move.from_square)
            score += self.values[victim] * 10 - self.values[attacker] // 10 + PROMOTION_BONUS
            if move.to_square == self.prev_sq:
                score += RECAPTURE_BONUS
        if move.promotion:
            score += PROMOTION_BONUS + self.values[move.promotion]
        return score

    def _ordered(self, moves: List[chess.Move]) -> List[chess.Move]:
        turn = self.board.turn
        return sorted(
            moves,
            key=lambda m: (
                self.score(m),
                _relative(m.from_square, turn),
                _relative(m.to_square, turn),
                m.promotion or 0,
            ),
            reverse=True,
        )
