# othello/analyzer.py
from typing import Any, Dict, List, Optional

from othello.config import CONFIG
from othello.core.board import BoardState, bit, coordinate_to_index, index_to_coordinate
from othello.core.rules import apply_move, apply_pass, legal_moves
from othello.core.search import INF
from othello.errors import IllegalMove, IllegalPass


class Analyzer:
    def __init__(self, search_engine):
        self.search_engine = search_engine
        self.cfg = CONFIG.analyzer

    def _label(self, delta: int) -> str:
        if delta <= self.cfg.TH_BEST:
            return "Best move"
        if delta <= self.cfg.TH_EXCELLENT:
            return "Excellent"
        if delta <= self.cfg.TH_GOOD:
            return "Good"
        if delta <= self.cfg.TH_INACCURACY:
            return "Inaccuracy"
        if delta <= self.cfg.TH_MISTAKE:
            return "Mistake"
        return "Blunder"

    def classify_move(self, state: BoardState, move: int, depth: Optional[int] = None) -> Dict[str, Any]:
        """
        Classify a single move.
        - state: position BEFORE the move (a snapshot, so it is never altered).
        - move: the player's chosen cell index; must be legal.
        Values are search scores from the mover's point of view, so
        ``delta_vs_best`` is never negative.
        """
        mover = state.current_player
        d = self.search_engine.clamp_depth(depth)
        best_move, best_score = self.search_engine.find_best_move(state, d)

        if move == best_move:
            move_score = best_score
        else:
            move_score = self.search_engine.search(apply_move(state, move), d - 1, -INF, INF, False, mover)

        delta = best_score - move_score
        label = "Best move" if move == best_move else self._label(delta)
        return {
            "move": index_to_coordinate(move),
            "player": mover.value,
            "best_move": index_to_coordinate(best_move) if best_move is not None else None,
            "best_score": best_score,
            "move_score": move_score,
            "delta_vs_best": delta,
            "label": label,
        }

    def analyze_game(self, moves: List[str], depth: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Replay ``moves`` (coordinates or "PASS") from the start position and
        classify each one. Raises IllegalMove / IllegalPass on the first bad entry.
        """
        state = BoardState.initial()
        report = []
        for text in moves:
            legal = legal_moves(state)
            if text.strip().upper() == "PASS":
                if legal:
                    raise IllegalPass()
                report.append({"move": "PASS", "player": state.current_player.value, "label": "Forced pass"})
                state = apply_pass(state)
                continue
            index = coordinate_to_index(text)
            if not legal & bit(index):
                raise IllegalMove(index_to_coordinate(index))
            report.append(self.classify_move(state, index, depth))
            state = apply_move(state, index)
        return report
