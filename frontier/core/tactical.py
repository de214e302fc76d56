"""Quiescence search used to seed the value of every new search edge.

The search only follows forcing moves (captures, queen promotions, checks
near the root of the quiescence tree, and every evasion when in check), so
it answers "what is this position worth once the tactics settle" without
ever searching the full game tree.
"""

from typing import Optional

import chess

from frontier.config import CONFIG, SearchConfig
from frontier.core.board import Position
from frontier.core.evaluator import Evaluator
from frontier.core.movepick import ForcingMovePicker
from frontier.core.see import PIECE_VALUES, see_ge


class TacticalEvaluator:
    def __init__(self, cfg: Optional[SearchConfig] = None, evaluator: Optional[Evaluator] = None):
        self.cfg = cfg or CONFIG.search
        self.evaluator = evaluator or Evaluator()
        self.nodes = 0

    def static_eval(self, board: chess.Board) -> int:
        """Static evaluation clamped strictly inside the non-mate range."""
        bound = -self.cfg.loss_threshold - 1
        return max(-bound, min(bound, self.evaluator.evaluate(board)))

    def search(self, position: Position, alpha: int, beta: int, ply: int,
               prev_move: Optional[chess.Move], depth: int = 0, pv_node: bool = True) -> int:
        """
        Negamax over forcing moves.

        Args:
            position: Shared position, restored before returning.
            alpha, beta: Search window, ``-INF <= alpha < beta <= INF``.
            ply: Distance from the root of the whole search.
            prev_move: The move that led here; recaptures on its destination
                are tried first and never futility pruned.
            depth: Remaining quiescence depth, 0 at the first call.
            pv_node: Principal variation node; non-PV calls use a null window.

        Returns:
            Value from the side to move's perspective, strictly inside
            ``(-INF, INF)``.
        """
        cfg = self.cfg
        inf = cfg.infinite
        assert -inf <= alpha < beta <= inf
        assert pv_node or alpha == beta - 1
        assert depth <= 0

        self.nodes += 1
        board = position.board
        in_check = board.is_check()

        # Check for an immediate draw or maximum ply reached
        if position.is_draw(ply) or ply >= cfg.max_ply:
            if ply >= cfg.max_ply and not in_check:
                return self.static_eval(board)
            return cfg.draw_value

        assert 0 <= ply < cfg.max_ply

        if in_check:
            best_value = futility_base = -inf
        else:
            best_value = self.static_eval(board)
            # Stand pat
            if best_value >= beta:
                return best_value
            if pv_node and best_value > alpha:
                alpha = best_value
            futility_base = best_value + cfg.futility_margin

        prev_sq = prev_move.to_square if prev_move is not None else None
        hopeless = cfg.loss_threshold
        move_count = 0
        quiet_evasions = 0

        for move in ForcingMovePicker(board, depth, prev_sq, cfg):
            gives_check = board.gives_check(move)
            capture = board.is_capture(move)
            move_count += 1

            if (best_value > hopeless
                    and not gives_check
                    and move.to_square != prev_sq
                    and futility_base > -cfg.known_win
                    and not move.promotion):
                if move_count > cfg.futility_move_cap:
                    continue

                victim = board.piece_type_at(move.to_square)
                futility_value = futility_base + (PIECE_VALUES[victim] if victim else 0)
                if futility_value <= alpha:
                    best_value = max(best_value, futility_value)
                    continue

                if futility_base <= alpha and not see_ge(board, move, 1):
                    best_value = max(best_value, futility_base)
                    continue

            # Do not search moves that lose material in the exchange
            if best_value > hopeless and not see_ge(board, move, 0):
                continue

            # Move count pruning for quiet check evasions
            if (best_value > hopeless
                    and quiet_evasions >= cfg.quiet_evasion_cap
                    and not capture
                    and in_check):
                continue

            if in_check and not capture:
                quiet_evasions += 1

            token = position.do_move(move)
            value = -self.search(position, -beta, -alpha, ply + 1, move, depth - 1, pv_node)
            position.undo_move(token)

            assert -inf < value < inf

            if value > best_value:
                best_value = value
                if value > alpha:
                    if pv_node and value < beta:
                        alpha = value
                    else:
                        break  # Fail high

        if best_value == -inf:
            # Nothing searched while in check: no evasion exists
            assert not position.has_legal_moves()
            return cfg.mated_in(ply)

        if move_count == 0 and not position.has_legal_moves():
            return cfg.draw_value  # Stalemate

        assert -inf < best_value < inf
        return best_value
