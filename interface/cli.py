"""Terminal front-end: board renderer, command parser and the game loop."""

import argparse
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from othello.config import CONFIG, Config
from othello.core.board import BoardState, Player, bit, coordinate_to_index, index_to_coordinate
from othello.core.rules import score
from othello.errors import IllegalMove, IllegalPass, InvalidCoordinate, NoHistory, UnknownCommand
from othello.logging_setup import configure_logging
from othello.session import GameOutcome, GameSession

logger = logging.getLogger(__name__)

DISC = {Player.BLACK: "●", Player.WHITE: "○"}
HIGHLIGHT = "·"


def render_board(state: BoardState, legal: int = 0, human: Player = Player.BLACK) -> str:
    """Text picture of ``state``; cells in ``legal`` are marked with a dot."""
    lines = ["  A B C D E F G H", " +-----------------"]
    for row in range(8):
        cells = []
        for col in range(8):
            index = row * 8 + col
            owner = state.cell(index)
            if owner is not None:
                cells.append(DISC[owner])
            elif legal & bit(index):
                cells.append(HIGHLIGHT)
            else:
                cells.append(" ")
        lines.append(f"{row + 1}| " + " ".join(cells) + " |")
    lines.append(" +-----------------")

    black, white = score(state)
    lines.append(f"Score: {DISC[Player.BLACK]} Black: {black} | {DISC[Player.WHITE]} White: {white}")
    mover = state.current_player
    who = "You" if mover is human else "AI"
    lines.append(f"Turn: {DISC[mover]} {mover.label} ({who})")
    lines.append(f"Last move: {state.last_move}")
    return "\n".join(lines)


def render_outcome(outcome: GameOutcome) -> str:
    if outcome.winner is None:
        return f"=== GAME OVER: DRAW! ({outcome.black} - {outcome.white}) ==="
    if outcome.winner is Player.BLACK:
        return f"=== GAME OVER: BLACK ({DISC[Player.BLACK]}) WINS! ({outcome.black} - {outcome.white}) ==="
    return f"=== GAME OVER: WHITE ({DISC[Player.WHITE]}) WINS! ({outcome.white} - {outcome.black}) ==="


class CommandKind(Enum):
    INVALID = "invalid"
    MOVE = "move"
    UNDO = "undo"
    HINT = "hint"
    PASS = "pass"
    QUIT = "quit"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    index: Optional[int] = None  # set only for MOVE
    error: Optional[str] = None  # set only for INVALID


def _invalid(err) -> Command:
    return Command(CommandKind.INVALID, error=err.message)


def _move_command(coord: str, legal: int) -> Command:
    try:
        index = coordinate_to_index(coord)
    except InvalidCoordinate as e:
        return _invalid(e)
    if not legal & bit(index):
        return _invalid(IllegalMove(index_to_coordinate(index)))
    return Command(CommandKind.MOVE, index=index)


def parse_command(line: str, legal: int) -> Command:
    """Turn one input line into a Command, validating moves against ``legal``."""
    tokens = line.split()
    if not tokens:
        return _invalid(UnknownCommand(line))
    token = tokens[0].lower()

    if token in ("quit", "exit"):
        return Command(CommandKind.QUIT)
    if token == "undo":
        return Command(CommandKind.UNDO)
    if token == "hint":
        return Command(CommandKind.HINT)
    if token == "pass":
        if legal:
            return _invalid(IllegalPass())
        return Command(CommandKind.PASS)
    if token == "move":
        if len(tokens) < 2:
            return _invalid(UnknownCommand(line, "MOVE needs a coordinate (e.g. MOVE D3)."))
        return _move_command(tokens[1], legal)
    # bare coordinate shortcut, e.g. "d3"
    if len(token) == 2 and token[0].isalpha() and token[1].isdigit():
        return _move_command(token, legal)
    return _invalid(UnknownCommand(line))


class GameLoop:
    """Alternates human and AI turns until the game ends or the human quits."""

    def __init__(self, session: GameSession,
                 read: Optional[Callable[[str], str]] = None,
                 write: Optional[Callable[[str], None]] = None,
                 ai_delay_s: Optional[float] = None):
        self.session = session
        self.read = read or input
        self.write = write or print
        self.ai_delay_s = CONFIG.ui.ai_delay_s if ai_delay_s is None else ai_delay_s

    def banner(self):
        human, ai = self.session.human, self.session.ai
        self.write("======================================")
        self.write(CONFIG.ui.engine_name.upper())
        self.write("======================================")
        self.write(f"You ({DISC[human]} {human.label}) vs AI ({DISC[ai]} {ai.label}, depth {self.session.engine.clamp_depth(None)})")
        self.write("Commands: MOVE D3, UNDO, PASS, HINT, QUIT")

    def run(self) -> Optional[GameOutcome]:
        """Play until the end; returns the outcome, or None if the human quit."""
        self.banner()
        while True:
            state = self.session.current()
            legal = self.session.legal_moves()

            outcome = self.session.terminal_summary(legal)
            if outcome is not None:
                self.write(render_board(state, human=self.session.human))
                self.write(render_outcome(outcome))
                return outcome

            if self.session.is_ai_turn():
                self._ai_turn(state)
            elif not self._human_turn(state, legal):
                self.write("Thanks for playing!")
                return None

    def _human_turn(self, state: BoardState, legal: int) -> bool:
        """Handle one human input; False means quit."""
        mover = state.current_player
        self.write(render_board(state, legal, human=self.session.human))
        if not legal:
            self.write(f"({DISC[mover]} {mover.label} has no legal moves. Passing automatically.)")
            self.session.submit_pass()
            return True

        try:
            line = self.read(f"\n{DISC[mover]} {mover.label} to move > ")
        except EOFError:
            return False

        cmd = parse_command(line, legal)
        if cmd.kind is CommandKind.MOVE:
            self.session.submit_move(cmd.index)
        elif cmd.kind is CommandKind.UNDO:
            try:
                self.session.require_undo()
                self.write(">> Undo done. Your turn again.")
            except NoHistory as e:
                self.write(f">> Error: {e.message}")
        elif cmd.kind is CommandKind.HINT:
            self.write(">> Searching for a hint...")
            hint = self.session.query_ai_move()
            self.write(f">> Hint: {index_to_coordinate(hint) if hint is not None else 'PASS'}")
        elif cmd.kind is CommandKind.PASS:
            self.session.submit_pass()
            self.write(f">> {mover.label} passes.")
        elif cmd.kind is CommandKind.QUIT:
            return False
        else:
            self.write(f">> Error: {cmd.error}")
        return True

    def _ai_turn(self, state: BoardState):
        mover = state.current_player
        self.write(render_board(state, human=self.session.human))
        self.write(f"\n{DISC[mover]} {mover.label} (AI) is thinking...")
        move = self.session.play_ai_turn()
        if move is None:
            self.write(f">> AI passes ({mover.label} has no legal moves).")
        else:
            self.write(f">> AI plays {index_to_coordinate(move)}")
        if self.ai_delay_s > 0:
            time.sleep(self.ai_delay_s)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Othello against the computer.")
    parser.add_argument("--depth", type=int, default=None, help="AI search depth in plies")
    parser.add_argument("--config", default=None, help="path to a config.toml")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--delay", type=float, default=1.0, help="pause after each AI move, in seconds")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.config:
        loaded = Config.load_from_toml(args.config)
        CONFIG.search, CONFIG.eval, CONFIG.analyzer, CONFIG.ui = (
            loaded.search, loaded.eval, loaded.analyzer, loaded.ui)
        CONFIG.log_level = loaded.log_level
    configure_logging(args.log_level)

    human = Player(CONFIG.ui.human_color.lower())
    session = GameSession(human=human, depth=args.depth)
    logger.debug("human=%s depth=%d", human.value, session.engine.max_depth)
    GameLoop(session, ai_delay_s=args.delay).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
