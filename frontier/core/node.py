"""Search tree node for the frontier search."""

from typing import List, Optional

import chess

from frontier.core.board import Position
from frontier.core.tactical import TacticalEvaluator


class SearchNode:
    """One position reached by the frontier search.

    ``moves``, ``values`` and ``children`` are parallel lists fixed in length
    at construction. ``values`` are from the perspective of the side to move
    at this node and are seeded by the tactical evaluator; afterwards only
    the driver changes them, through ``update_value``.
    """

    __slots__ = ("moves", "values", "children", "parent", "ply", "tactical", "in_check")

    def __init__(self, position: Position, parent: Optional["SearchNode"], ply: int,
                 tactical: TacticalEvaluator):
        cfg = tactical.cfg
        assert 0 <= ply < cfg.max_ply

        self.parent = parent
        self.ply = ply
        self.tactical = tactical
        self.in_check = position.is_check()
        self.moves: List[chess.Move] = position.legal_moves()
        self.children: List[Optional[SearchNode]] = [None] * len(self.moves)
        self.values: List[int] = []

        # Seed each edge with a quiescence value seen from this side
        for move in self.moves:
            token = position.do_move(move)
            value = -tactical.search(position, -cfg.infinite, cfg.infinite, ply + 1, move)
            position.undo_move(token)
            self.values.append(value)

    def __len__(self) -> int:
        return len(self.moves)

    @property
    def is_terminal(self) -> bool:
        return not self.moves

    def best_index(self) -> int:
        best_value = -self.tactical.cfg.infinite - 1
        best_idx = 0
        for i, value in enumerate(self.values):
            if value > best_value:
                best_value = value
                best_idx = i
        return best_idx

    def best_move(self) -> Optional[chess.Move]:
        if not self.moves:
            return None
        return self.moves[self.best_index()]

    def best_child(self) -> Optional["SearchNode"]:
        if not self.moves:
            return None
        return self.children[self.best_index()]

    def second_best_value(self) -> int:
        best_value = second_best = -self.tactical.cfg.infinite
        for value in self.values:
            if value > best_value:
                second_best = best_value
                best_value = value
            elif value > second_best:
                second_best = value
        return second_best

    def value(self) -> int:
        """Best edge value; a terminal node mirrors its parent's best edge."""
        if self.moves:
            return self.values[self.best_index()]
        if self.parent is not None:
            return -self.parent.value()
        cfg = self.tactical.cfg
        return cfg.mated_in(self.ply) if self.in_check else cfg.draw_value

    def expand_best(self, position: Position, ply: int) -> "SearchNode":
        """Play the best edge and return its child, building it on first visit."""
        idx = self.best_index()
        position.do_move(self.moves[idx])
        child = self.children[idx]
        if child is None:
            child = SearchNode(position, self, ply, self.tactical)
            self.children[idx] = child
        return child

    def update_value(self, value: int):
        inf = self.tactical.cfg.infinite
        assert -inf <= value <= inf
        self.values[self.best_index()] = value

    def backtrack(self, position: Position) -> "SearchNode":
        """Undo the move that led here and return the parent."""
        assert self.parent is not None, "cannot backtrack from the root"
        position.undo_move(self.parent.best_move())
        return self.parent

    def pv(self) -> List[chess.Move]:
        moves = []
        node = self
        while node is not None and node.moves:
            moves.append(node.best_move())
            node = node.best_child()
        return moves

    def pv_depth(self) -> int:
        depth = 0
        node = self.best_child()
        while node is not None:
            depth += 1
            node = node.best_child()
        return depth

    def __repr__(self) -> str:
        best = self.best_move()
        return f"SearchNode(ply={self.ply}, edges={len(self.moves)}, best={best}, value={self.value()})"
