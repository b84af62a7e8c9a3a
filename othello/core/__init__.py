"""Core engine components: board, rules, evaluator and search."""

from .board import BoardState, Player
from .evaluator import Evaluator
from .search import SearchEngine
