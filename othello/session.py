"""Game session: snapshot history plus move/pass/undo/AI operations."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from othello.core.board import BoardState, Player, bit, coordinate_to_index, index_to_coordinate
from othello.core.rules import (
    apply_move,
    apply_pass,
    is_terminal,
    legal_moves,
    legal_moves_for,
    score,
)
from othello.core.search import SearchEngine
from othello.errors import GameOver, IllegalMove, IllegalPass, NoHistory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameOutcome:
    winner: Optional[Player]  # None is a draw
    black: int
    white: int

    @property
    def is_draw(self) -> bool:
        return self.winner is None


class GameSession:
    def __init__(self, human: Player = Player.BLACK, depth: Optional[int] = None,
                 engine: Optional[SearchEngine] = None):
        """Start from the initial position; the AI plays the other color."""
        self.human = human
        self.ai = human.other()
        self.engine = engine or SearchEngine(depth=depth)
        self.history: List[BoardState] = [BoardState.initial()]

    def reset(self):
        self.history = [BoardState.initial()]

    def current(self) -> BoardState:
        return self.history[-1]

    def legal_moves(self) -> int:
        return legal_moves(self.current())

    def is_ai_turn(self) -> bool:
        return self.current().current_player is self.ai

    def submit_move(self, index: int):
        """Append the position after ``index``; legality is the caller's job."""
        state = apply_move(self.current(), index)
        self.history.append(state)
        logger.debug("%s played %s", state.current_player.other().label, state.last_move)

    def submit_pass(self):
        state = apply_pass(self.current())
        self.history.append(state)
        logger.debug("%s passed", state.current_player.other().label)

    def play(self, coordinate: str) -> int:
        """Validate a coordinate against the move-set and play it."""
        index = coordinate_to_index(coordinate.strip())
        if self.terminal_summary() is not None:
            raise GameOver()
        if not self.legal_moves() & bit(index):
            raise IllegalMove(index_to_coordinate(index))
        self.submit_move(index)
        return index

    def request_pass(self):
        if self.terminal_summary() is not None:
            raise GameOver()
        if self.legal_moves():
            raise IllegalPass()
        self.submit_pass()

    def undo(self) -> bool:
        """
        Drop the last position; if that hands the turn to the AI, drop one
        more so the human is to move again. False if nothing was removed.
        """
        if len(self.history) <= 1:
            return False
        self.history.pop()
        if self.current().current_player is self.ai and len(self.history) > 1:
            self.history.pop()
        logger.debug("undo -> %d positions", len(self.history))
        return True

    def require_undo(self):
        if not self.undo():
            raise NoHistory()

    def query_ai_move(self, depth: Optional[int] = None) -> Optional[int]:
        """Engine's choice for the side to move; None means pass."""
        return self.engine.best_move(self.current(), depth)

    def play_ai_turn(self, depth: Optional[int] = None) -> Optional[int]:
        move = self.query_ai_move(depth)
        if move is None:
            self.submit_pass()
        else:
            self.submit_move(move)
        return move

    def terminal_summary(self, mover_moves: Optional[int] = None) -> Optional[GameOutcome]:
        """Final result if the current position ends the game, else None."""
        state = self.current()
        if mover_moves is None:
            mover_moves = legal_moves(state)
        other_moves = legal_moves_for(state, state.current_player.other())
        if not is_terminal(state, mover_moves, other_moves):
            return None
        black, white = score(state)
        if black > white:
            winner = Player.BLACK
        elif white > black:
            winner = Player.WHITE
        else:
            winner = None
        return GameOutcome(winner, black, white)
