"""
Evaluator Module
================

Static evaluation used by the quiescence search for stand-pat values.

Key Features:
    - Tapered Evaluation (interpolating between Middle Game and End Game).
    - Piece-square tables mirrored per colour, so a position and its colour
      mirror always evaluate to the same side-to-move score.
    - Pawn structure (doubled, isolated, passed) using bitwise operations.

Author: Medo
License: MIT
"""

from typing import List, Optional

import chess

from frontier.config import CONFIG, EvalConfig

# Represents a vertical file (File A) as a 64-bit integer.
FILE_A: int = 0x0101010101010101

# Array of bitmasks for all 8 files (File A to File H).
FILES: List[int] = [FILE_A << i for i in range(8)]

PHASE_WEIGHTS = {
    chess.PAWN: 0,
    chess.KNIGHT: 1,
    chess.BISHOP: 1,
    chess.ROOK: 2,
    chess.QUEEN: 4,
    chess.KING: 0,
}


class Evaluator:
    """
    Stateless static evaluator for chess positions.

    Only configuration and pre-computed masks are kept on the instance.
    """

    def __init__(self, cfg: Optional[EvalConfig] = None) -> None:
        self.cfg = cfg or CONFIG.eval

        # neighbor_masks[i] contains bits for files adjacent to file i.
        self.neighbor_masks: List[int] = [0] * 8
        for f in range(8):
            if f > 0:
                self.neighbor_masks[f] |= FILES[f - 1]
            if f < 7:
                self.neighbor_masks[f] |= FILES[f + 1]

        # "Front spans" for passed pawn detection, indexed [color][square].
        self.passed_masks: List[List[int]] = [[0] * 64, [0] * 64]
        self._init_passed_masks()

        # (mg, eg) tables per piece type; a missing EG table reuses the MG one.
        self.tables = {}
        for pt in chess.PIECE_TYPES:
            p_name = chess.piece_name(pt).upper()
            table_mg = getattr(self.cfg, f"PST_{p_name}_MG", None)
            table_eg = getattr(self.cfg, f"PST_{p_name}_EG", None) or table_mg
            self.tables[pt] = (table_mg, table_eg)

    def _init_passed_masks(self) -> None:
        """A pawn is passed if no enemy pawn sits on its file or an adjacent
        file anywhere in front of it."""
        for sq in range(64):
            f, r = chess.square_file(sq), chess.square_rank(sq)
            for ff in range(max(0, f - 1), min(7, f + 1) + 1):
                for rr in range(r + 1, 8):
                    self.passed_masks[chess.WHITE][sq] |= chess.BB_SQUARES[chess.square(ff, rr)]
                for rr in range(0, r):
                    self.passed_masks[chess.BLACK][sq] |= chess.BB_SQUARES[chess.square(ff, rr)]

    def evaluate(self, board: chess.Board) -> int:
        """
        Calculates the static value of the current board position.

        Args:
            board (chess.Board): The position to evaluate.

        Returns:
            int: The score in centipawns, positive values favor the side to move.
        """
        if board.is_insufficient_material():
            return 0

        mg = [0, 0]
        eg = [0, 0]
        phase = 0

        for color in chess.COLORS:
            for pt in chess.PIECE_TYPES:
                squares = board.pieces(pt, color)
                if not squares:
                    continue
                p_name = chess.piece_name(pt).upper()
                count = len(squares)
                phase += count * PHASE_WEIGHTS[pt]
                mg[color] += count * self.cfg.MATERIAL_MG[p_name]
                eg[color] += count * self.cfg.MATERIAL_EG[p_name]

                table_mg, table_eg = self.tables[pt]
                if table_mg is None:
                    continue
                for sq in squares:
                    # Tables are printed rank 8 first: mirror White's squares.
                    idx = chess.square_mirror(sq) if color == chess.WHITE else sq
                    mg[color] += table_mg[idx]
                    eg[color] += table_eg[idx]

            if len(board.pieces(chess.BISHOP, color)) >= 2:
                mg[color] += self.cfg.BISHOP_PAIR_BONUS
                eg[color] += self.cfg.BISHOP_PAIR_BONUS

            pawn_score = self._eval_pawns_bitwise(
                board.pieces_mask(chess.PAWN, color),
                board.pieces_mask(chess.PAWN, not color),
                color,
            )
            # Pawn structure matters more once pieces come off
            mg[color] += pawn_score // 2
            eg[color] += pawn_score

        # Blends MG and EG scores based on remaining material on the board.
        phase = min(phase, 24)
        mg_score = mg[chess.WHITE] - mg[chess.BLACK]
        eg_score = eg[chess.WHITE] - eg[chess.BLACK]
        blended = mg_score * phase + eg_score * (24 - phase)
        # Round toward zero so negating the score commutes with the division
        final_score = blended // 24 if blended >= 0 else -(-blended // 24)

        # Return score relative to the side to move (Negamax requirement)
        if board.turn == chess.BLACK:
            final_score = -final_score
        return final_score + self.cfg.TEMPO_BONUS

    def _eval_pawns_bitwise(self, my_pawns: int, opp_pawns: int, color: bool) -> int:
        """
        Calculates score for pawn structure features using bitwise operations.

        Features Evaluated:
            - Doubled Pawns: Penalty for two pawns on the same file.
            - Isolated Pawns: Penalty for having no friendly pawns on adjacent files.
            - Passed Pawns: Bonus for having no enemy pawns blocking the path to promotion.
        """
        score = 0

        for f in range(8):
            pawns_on_file = chess.popcount(my_pawns & FILES[f])
            if pawns_on_file > 1:
                score += (pawns_on_file - 1) * self.cfg.DOUBLED_PAWN_PENALTY

        for sq in chess.SquareSet(my_pawns):
            if (my_pawns & self.neighbor_masks[chess.square_file(sq)]) == 0:
                score += self.cfg.ISOLATED_PAWN_PENALTY

            if (self.passed_masks[color][sq] & opp_pawns) == 0:
                rank = chess.square_rank(sq)
                rel_rank = rank if color == chess.WHITE else 7 - rank
                score += self.cfg.PASSED_PAWN_BONUS[rel_rank]

        return score
