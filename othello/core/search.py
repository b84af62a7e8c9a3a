import logging
import time
from typing import Optional, Tuple

from othello.config import CONFIG
from othello.core.board import BoardState, Player, iter_indices
from othello.core.evaluator import Evaluator
from othello.core.rules import apply_move, apply_pass, is_terminal, legal_moves, legal_moves_for
from othello.core.utils import format_info

logger = logging.getLogger(__name__)

INF = 1000000000


class SearchEngine:
    """Depth-bounded minimax with alpha-beta pruning over pure board snapshots."""

    def __init__(self, evaluator: Optional[Evaluator] = None, depth: Optional[int] = None):
        self.evaluator = evaluator or Evaluator()
        self.max_depth = depth if depth is not None else CONFIG.search.depth
        self.nodes = 0

    def clamp_depth(self, depth: Optional[int]) -> int:
        """Keep the requested depth within [1, CONFIG.search.max_depth]."""
        if depth is None:
            depth = self.max_depth
        return max(1, min(depth, CONFIG.search.max_depth))

    def find_best_move(self, state: BoardState, depth: Optional[int] = None) -> Tuple[Optional[int], int]:
        """Return (move, score); move is None when the side to move must pass."""
        d = self.clamp_depth(depth)
        self.nodes = 0
        start_time = time.time()

        move, score = self._root(state, d)

        elapsed = time.time() - start_time
        logger.info(format_info(d, score, self.nodes, elapsed, move))
        return move, score

    def best_move(self, state: BoardState, depth: Optional[int] = None) -> Optional[int]:
        """Best cell index for the side to move, or None for a pass."""
        move, _ = self.find_best_move(state, depth)
        return move

    def _root(self, state: BoardState, depth: int) -> Tuple[Optional[int], int]:
        moves = legal_moves(state)
        ai_player = state.current_player
        if not moves:
            return None, self.evaluator.evaluate(state, ai_player)

        best_move = None
        best_value = -INF
        # Ascending index order; strict '>' keeps the first move on ties.
        for move in iter_indices(moves):
            value = self.search(apply_move(state, move), depth - 1, -INF, INF, False, ai_player)
            if best_move is None or value > best_value:
                best_value = value
                best_move = move
        return best_move, best_value

    def search(self, state: BoardState, depth: int, alpha: int, beta: int,
               maximizing: bool, ai_player: Player) -> int:
        self.nodes += 1
        moves = legal_moves(state)
        other_moves = legal_moves_for(state, state.current_player.other())

        if depth == 0 or is_terminal(state, moves, other_moves):
            return self.evaluator.evaluate(state, ai_player)

        # Only the mover is blocked: pass without spending depth.
        if not moves:
            return self.search(apply_pass(state), depth, alpha, beta, not maximizing, ai_player)

        if maximizing:
            max_eval = -INF
            for move in iter_indices(moves):
                value = self.search(apply_move(state, move), depth - 1, alpha, beta, False, ai_player)
                max_eval = max(max_eval, value)
                alpha = max(alpha, max_eval)
                if beta <= alpha:
                    break
            return max_eval

        min_eval = INF
        for move in iter_indices(moves):
            value = self.search(apply_move(state, move), depth - 1, alpha, beta, True, ai_player)
            min_eval = min(min_eval, value)
            beta = min(beta, min_eval)
            if beta <= alpha:
                break
        return min_eval

    def minimax(self, state: BoardState, depth: int, maximizing: bool, ai_player: Player) -> int:
        """Unpruned minimax with the same pass and cutoff rules as ``search``."""
        self.nodes += 1
        moves = legal_moves(state)
        other_moves = legal_moves_for(state, state.current_player.other())

        if depth == 0 or is_terminal(state, moves, other_moves):
            return self.evaluator.evaluate(state, ai_player)
        if not moves:
            return self.minimax(apply_pass(state), depth, not maximizing, ai_player)

        values = [
            self.minimax(apply_move(state, move), depth - 1, not maximizing, ai_player)
            for move in iter_indices(moves)
        ]
        return max(values) if maximizing else min(values)
