"""Core search components: position, evaluators, search tree and driver."""

from .board import Position
from .evaluator import Evaluator
from .node import SearchNode
from .search import FrontierSearch, SearchResult
from .tactical import TacticalEvaluator
