"""
Best-first ("frontier") search driver.

Instead of searching to a fixed depth, the driver spends a budget of node
expansions. Each iteration walks one ply further along the current best
path, building the next node on first visit (its edges seeded by the
quiescence search). A live alpha-beta window is carried along the path:

    alpha  the best alternative the side to move already has somewhere on
           the path (the largest second-best edge value, per perspective)
    beta   the same bound for the opponent, negated

While the frontier value stays inside the window the path is still the
principal variation and the next iteration simply goes deeper. When it falls
outside, the driver backtracks, writing the refuted value into each
ancestor's best edge, until an ancestor absorbs it. The window is then
rebuilt along the (possibly new) best path from the root. Nothing is thrown
away: a sibling that becomes best again resumes from its existing subtree.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import chess

from frontier.config import CONFIG, SearchConfig
from frontier.core.board import Position
from frontier.core.node import SearchNode
from frontier.core.tactical import TacticalEvaluator
from frontier.core.utils import format_info

_log = logging.getLogger(__name__)


@dataclass
class SearchResult:
    best_move: Optional[chess.Move]
    value: int
    pv: List[chess.Move]
    pv_depth: int
    max_depth: int
    iterations: int
    expansions: int
    repairs: int
    nodes: int
    elapsed: float
    window: Tuple[int, int]
    root: SearchNode = field(repr=False)


class FrontierSearch:
    def __init__(self, cfg: Optional[SearchConfig] = None,
                 tactical: Optional[TacticalEvaluator] = None):
        self.cfg = cfg or CONFIG.search
        self.tactical = tactical or TacticalEvaluator(self.cfg)
        self.expansions = 0
        self.repairs = 0

    def search(self, position: Position, nodes: Optional[int] = None) -> SearchResult:
        """Run ``nodes`` iterations from ``position`` and return the result.

        The position is back at its starting state when this returns.
        """
        cfg = self.cfg
        budget = cfg.nodes if nodes is None else nodes
        assert budget >= 0, "node budget must be non-negative"

        start_time = time.monotonic()
        deadline = None
        if cfg.time_limit_ms is not None:
            deadline = start_time + cfg.time_limit_ms / 1000
        self.tactical.nodes = 0
        self.expansions = 0
        self.repairs = 0

        root = SearchNode(position, None, 0, self.tactical)
        node = root
        alpha = self._tighten(-cfg.infinite, cfg.infinite, root.second_best_value())
        beta = cfg.infinite
        depth = max_depth = iterations = 0

        for _ in range(budget):
            if node.is_terminal:
                break
            if depth + 1 >= cfg.max_ply:
                _log.warning("Frontier reached max ply %d, stopping early", cfg.max_ply)
                break

            # Expand best move of current best node
            if node.best_child() is None:
                self.expansions += 1
            node = node.expand_best(position, depth + 1)
            depth += 1
            iterations += 1
            alpha, beta = -beta, -alpha
            max_depth = max(max_depth, depth)

            value = node.value()
            if value > beta + cfg.epsilon or value < alpha - cfg.epsilon:
                node, depth = self._repair(root, node, position, value, alpha, beta, depth)
                alpha, beta = self._path_window(root, node)

            alpha = self._tighten(alpha, beta, node.second_best_value())
            assert alpha < beta

            if deadline is not None and time.monotonic() >= deadline:
                break

        # Backtrack to root
        while node is not root:
            node = node.backtrack(position)

        result = SearchResult(
            best_move=root.best_move(),
            value=root.value(),
            pv=root.pv(),
            pv_depth=root.pv_depth(),
            max_depth=max_depth,
            iterations=iterations,
            expansions=self.expansions,
            repairs=self.repairs,
            nodes=self.tactical.nodes,
            elapsed=time.monotonic() - start_time,
            window=(alpha, beta),
            root=root,
        )
        _log.info(format_info(result, cfg))
        return result

    def _repair(self, root: SearchNode, node: SearchNode, position: Position,
                value: int, alpha: int, beta: int, depth: int) -> Tuple[SearchNode, int]:
        """Walk back up until an ancestor's value fits its window again.

        Each step hands the refuted value to the parent's best edge. A parent
        whose new best value lands inside its window (for a fail low that
        means exactly on alpha, i.e. the alternative that set alpha is now
        best) stops the walk; so does the root.
        """
        self.repairs += 1
        _log.debug("Window (%d, %d) violated by %d at ply %d", alpha, beta, value, depth)
        while node is not root:
            value = -value
            alpha, beta = -beta, -alpha
            node = node.backtrack(position)
            node.update_value(value)
            depth -= 1
            value = node.value()
            if alpha <= value <= beta:
                break
        return node, depth

    def _path_window(self, root: SearchNode, node: SearchNode) -> Tuple[int, int]:
        """Rebuild the window from second-best values along the best path."""
        inf = self.cfg.infinite
        alpha, beta = -inf, inf
        path = root
        while path is not node:
            alpha = self._tighten(alpha, beta, path.second_best_value())
            alpha, beta = -beta, -alpha
            path = path.best_child()
        return alpha, beta

    @staticmethod
    def _tighten(alpha: int, beta: int, bound: int) -> int:
        # Only a bound strictly inside the window may raise alpha
        return bound if alpha < bound < beta else alpha
