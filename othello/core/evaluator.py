"""
Evaluator Module
================

Static evaluation of Othello positions on 64-bit masks (bitboards).

Three terms are scored for each side and the result is
``own aggregate - opponent aggregate``:
    - Mobility: number of legal moves that side would have, weighted.
    - Position: per-cell weight table (corners high, X-squares negative).
    - Material: disc difference scaled by a game-phase multiplier that
      grows towards the endgame.

The weight table is folded into one mask per distinct weight at
construction, so the positional term is a handful of popcounts.
"""

from typing import Dict, List, Tuple

from othello.config import CONFIG
from othello.core.board import BoardState, Player
from othello.core.rules import disc_count, legal_moves_for


class Evaluator:
    """
    Stateless position scorer. Only the configuration and the pre-computed
    weight masks are kept on the instance.
    """

    def __init__(self) -> None:
        self.cfg = CONFIG.eval
        if len(self.cfg.position_weights) != 64:
            raise ValueError("position_weights must have 64 entries")

        # weight -> mask of every cell carrying that weight
        masks: Dict[int, int] = {}
        for sq, weight in enumerate(self.cfg.position_weights):
            masks[weight] = masks.get(weight, 0) | (1 << sq)
        self.weight_masks: List[Tuple[int, int]] = sorted(masks.items())

    def positional(self, discs: int) -> int:
        """Sum of the table weights over every cell in ``discs``."""
        return sum(weight * disc_count(discs & mask) for weight, mask in self.weight_masks)

    def phase_weight(self, total_discs: int) -> float:
        if total_discs <= self.cfg.opening_max_discs:
            return self.cfg.opening_disc_weight
        if total_discs <= self.cfg.midgame_max_discs:
            return self.cfg.midgame_disc_weight
        return self.cfg.endgame_disc_weight

    def evaluate(self, state: BoardState, perspective: Player) -> int:
        """
        Score ``state`` for ``perspective``; higher is better for that side.

        Args:
            state: The position to evaluate.
            perspective: The side whose advantage is measured.

        Returns:
            int: own aggregate minus opponent aggregate.
        """
        opponent = perspective.other()
        own_discs = state.occupancy(perspective)
        opp_discs = state.occupancy(opponent)

        # 1. Mobility
        own_score = disc_count(legal_moves_for(state, perspective)) * self.cfg.mobility_weight
        opp_score = disc_count(legal_moves_for(state, opponent)) * self.cfg.mobility_weight

        # 2. Position
        own_score += self.positional(own_discs)
        opp_score += self.positional(opp_discs)

        # 3. Material, truncated toward zero
        own_count, opp_count = disc_count(own_discs), disc_count(opp_discs)
        weight = self.phase_weight(own_count + opp_count)
        own_score += int((own_count - opp_count) * weight)

        return own_score - opp_score
