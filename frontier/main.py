from typing import Optional

from frontier.config import CONFIG
from frontier.core.board import Position
from frontier.core.search import FrontierSearch


class Engine:
    def __init__(self, nodes: Optional[int] = None, fen: Optional[str] = None):
        self.position = Position(fen)
        self.nodes = CONFIG.search.nodes if nodes is None else nodes
        self.search = FrontierSearch()
        self.last_result = None

    def get_best_move(self, nodes: Optional[int] = None):
        self.last_result = self.search.search(self.position, self.nodes if nodes is None else nodes)
        move = self.last_result.best_move
        return (move.uci() if move else None), self.last_result.value

    def make_move(self, move_uci: str):
        return self.position.make_move(move_uci)
