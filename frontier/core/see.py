"""Static exchange evaluation.

Resolves the capture sequence on one square with a swap list, always
recapturing with the least valuable attacker and uncovering x-ray sliders as
pieces leave the square's lines. Pins are ignored.
"""

from typing import Dict, Optional

import chess

from frontier.config import CONFIG

# Least valuable first
_ATTACKER_ORDER = (chess.PAWN, chess.KNIGHT, chess.BISHOP, chess.ROOK, chess.QUEEN, chess.KING)


def piece_values(values: Optional[Dict[str, int]] = None) -> Dict[int, int]:
    values = values or CONFIG.eval.SEE_VALUES
    return {pt: values[chess.piece_name(pt).upper()] for pt in chess.PIECE_TYPES}


PIECE_VALUES = piece_values()


def _attackers(board: chess.Board, square: chess.Square, occupied: int) -> int:
    """Pieces of both colours attacking ``square`` given an occupancy mask."""
    queens_and_rooks = board.queens | board.rooks
    queens_and_bishops = board.queens | board.bishops
    return occupied & (
        (chess.BB_KING_ATTACKS[square] & board.kings)
        | (chess.BB_KNIGHT_ATTACKS[square] & board.knights)
        | (chess.BB_RANK_ATTACKS[square][chess.BB_RANK_MASKS[square] & occupied] & queens_and_rooks)
        | (chess.BB_FILE_ATTACKS[square][chess.BB_FILE_MASKS[square] & occupied] & queens_and_rooks)
        | (chess.BB_DIAG_ATTACKS[square][chess.BB_DIAG_MASKS[square] & occupied] & queens_and_bishops)
        | (chess.BB_PAWN_ATTACKS[chess.WHITE][square] & board.pawns & board.occupied_co[chess.BLACK])
        | (chess.BB_PAWN_ATTACKS[chess.BLACK][square] & board.pawns & board.occupied_co[chess.WHITE])
    )


def see(board: chess.Board, move: chess.Move, values: Optional[Dict[int, int]] = None) -> int:
    """Net material the side to move wins by playing ``move``.

    Castling, en passant and promotions are scored as an even trade.
    """
    values = values or PIECE_VALUES
    if board.is_castling(move) or board.is_en_passant(move) or move.promotion:
        return 0

    from_sq, to_sq = move.from_square, move.to_square
    mover = board.piece_type_at(from_sq)
    if mover is None:
        return 0
    victim = board.piece_type_at(to_sq)

    gain = [values[victim] if victim else 0]
    on_square = values[mover]
    occupied = board.occupied & ~chess.BB_SQUARES[from_sq]
    side = not board.turn

    while True:
        attackers = _attackers(board, to_sq, occupied) & board.occupied_co[side]
        if not attackers:
            break
        for pt in _ATTACKER_ORDER:
            candidates = attackers & board.pieces_mask(pt, side)
            if candidates:
                break
        if pt == chess.KING and _attackers(board, to_sq, occupied) & board.occupied_co[not side]:
            # The king may not recapture into a defended square
            break
        sq = chess.lsb(candidates)
        gain.append(on_square - gain[-1])
        on_square = values[pt]
        occupied &= ~chess.BB_SQUARES[sq]
        side = not side

    for d in range(len(gain) - 1, 0, -1):
        gain[d - 1] = -max(-gain[d - 1], gain[d])
    return gain[0]


def see_ge(board: chess.Board, move: chess.Move, threshold: int = 0) -> bool:
    """True if the exchange started by ``move`` wins at least ``threshold``."""
    return see(board, move) >= threshold
