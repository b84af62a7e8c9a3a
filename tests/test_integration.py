"""
Integration test suite for the Othello engine.

Tests components working together end-to-end:
- Full game simulations (engine vs engine)
- Terminal front-end (parser, renderer, scripted game loop, entry point)
- FastAPI REST API integration
- Analyzer pipeline
"""

import builtins

import pytest

from othello.core.board import BoardState, Player, bit, coordinate_to_index
from othello.core.rules import apply_pass, legal_moves, score
from othello.core.search import SearchEngine
from othello.analyzer import Analyzer
from othello.errors import IllegalMove, IllegalPass
from othello.session import GameOutcome, GameSession
from interface.cli import (
    CommandKind,
    GameLoop,
    main,
    parse_command,
    render_board,
    render_outcome,
)


def sq(*coords):
    mask = 0
    for c in coords:
        mask |= bit(coordinate_to_index(c))
    return mask


# Black to move with A1, C1 and E1 available; only A1 takes a corner.
CORNER_POSITION = BoardState(black=sq("C3", "E3"), white=sq("B2", "D2"))


class ScriptedIO:
    """Feeds canned input lines and records everything written."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.out = []

    def read(self, prompt=""):
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)

    def write(self, text=""):
        self.out.append(text)

    @property
    def text(self):
        return "\n".join(self.out)


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE: FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


def _self_play(depth):
    session = GameSession(depth=depth)
    for _ in range(200):  # safety limit
        if session.terminal_summary() is not None:
            break
        session.play_ai_turn()
    return session


class TestFullGame:
    """The engine can play complete games against itself."""

    def test_engine_vs_engine_completes(self):
        session = _self_play(1)
        outcome = session.terminal_summary()
        assert outcome is not None
        black, white = score(session.current())
        assert (outcome.black, outcome.white) == (black, white)
        assert black + white <= 64
        assert len(session.history) > 10

    def test_every_step_keeps_board_consistent(self):
        session = _self_play(2)
        for before, after in zip(session.history, session.history[1:]):
            assert after.black & after.white == 0
            assert after.current_player is before.current_player.other()
            if after.last_move == "PASS":
                assert legal_moves(before) == 0
                assert after.total_discs() == before.total_discs()
            else:
                placed = bit(coordinate_to_index(after.last_move))
                assert legal_moves(before) & placed
                assert after.total_discs() == before.total_discs() + 1
                assert after.occupancy(before.current_player) & placed

    def test_self_play_is_deterministic(self):
        first = _self_play(1).history
        second = _self_play(1).history
        assert first == second

    def test_winner_matches_disc_count(self):
        outcome = _self_play(1).terminal_summary()
        if outcome.black > outcome.white:
            assert outcome.winner is Player.BLACK
        elif outcome.white > outcome.black:
            assert outcome.winner is Player.WHITE
        else:
            assert outcome.is_draw


# ════════════════════════════════════════════════════════════════════════════
#  TERMINAL FRONT-END
# ════════════════════════════════════════════════════════════════════════════


class TestCommandParser:
    def setup_method(self):
        self.legal = legal_moves(BoardState.initial())

    def test_move_command(self):
        cmd = parse_command("MOVE d3", self.legal)
        assert cmd.kind is CommandKind.MOVE
        assert cmd.index == coordinate_to_index("D3")

    def test_bare_coordinate(self):
        cmd = parse_command("e6", self.legal)
        assert cmd.kind is CommandKind.MOVE
        assert cmd.index == coordinate_to_index("E6")

    def test_keywords_are_case_insensitive(self):
        assert parse_command("Undo", self.legal).kind is CommandKind.UNDO
        assert parse_command("HINT", self.legal).kind is CommandKind.HINT
        assert parse_command("quit", self.legal).kind is CommandKind.QUIT
        assert parse_command("exit", self.legal).kind is CommandKind.QUIT

    def test_blank_line_is_invalid(self):
        cmd = parse_command("   ", self.legal)
        assert cmd.kind is CommandKind.INVALID
        assert "Unknown command" in cmd.error

    def test_unknown_word(self):
        cmd = parse_command("hello world", self.legal)
        assert cmd.kind is CommandKind.INVALID
        assert "Unknown command" in cmd.error

    def test_move_without_coordinate(self):
        cmd = parse_command("move", self.legal)
        assert cmd.kind is CommandKind.INVALID
        assert "MOVE needs a coordinate" in cmd.error

    def test_bad_coordinate(self):
        cmd = parse_command("move Z9", self.legal)
        assert cmd.kind is CommandKind.INVALID
        assert "is not valid" in cmd.error
        assert parse_command("d9", self.legal).kind is CommandKind.INVALID

    def test_illegal_cell(self):
        cmd = parse_command("move A1", self.legal)
        assert cmd.kind is CommandKind.INVALID
        assert "A1 is not legal" in cmd.error

    def test_pass_only_when_blocked(self):
        assert parse_command("pass", self.legal).kind is CommandKind.INVALID
        assert parse_command("pass", 0).kind is CommandKind.PASS


class TestRendering:
    def test_initial_board(self):
        state = BoardState.initial()
        text = render_board(state, legal_moves(state))
        lines = text.splitlines()
        assert lines[0] == "  A B C D E F G H"
        assert lines[5].startswith("4|")
        assert "○ ●" in lines[5]
        assert "● ○" in lines[6]
        assert text.count("·") == 4
        assert "Score: ● Black: 2 | ○ White: 2" in text
        assert "Turn: ● Black (You)" in text
        assert "Last move: START" in text

    def test_no_highlight_without_legal_mask(self):
        assert "·" not in render_board(BoardState.initial())

    def test_ai_turn_label(self):
        state = apply_pass(BoardState.initial())
        text = render_board(state)
        assert "Turn: ○ White (AI)" in text
        assert "Last move: PASS" in text

    def test_outcome_lines(self):
        assert render_outcome(GameOutcome(None, 32, 32)) == "=== GAME OVER: DRAW! (32 - 32) ==="
        assert render_outcome(GameOutcome(Player.BLACK, 40, 24)) == "=== GAME OVER: BLACK (●) WINS! (40 - 24) ==="
        assert render_outcome(GameOutcome(Player.WHITE, 10, 54)) == "=== GAME OVER: WHITE (○) WINS! (54 - 10) ==="


class TestGameLoop:
    def _loop(self, session, lines):
        io = ScriptedIO(lines)
        return GameLoop(session, read=io.read, write=io.write, ai_delay_s=0), io

    def test_scripted_session(self):
        session = GameSession(depth=1)
        loop, io = self._loop(session, [
            "hint", "pass", "foo", "move Z9", "move A1", "d3", "undo", "quit",
        ])
        assert loop.run() is None
        assert ">> Hint: D3" in io.text
        assert "Cannot pass" in io.text
        assert "Unknown command" in io.text
        assert "is not valid" in io.text
        assert "is not legal" in io.text
        assert ">> AI plays" in io.text
        assert "Undo done" in io.text
        assert "Thanks for playing!" in io.text
        assert len(session.history) == 1

    def test_banner(self):
        loop, io = self._loop(GameSession(depth=3), ["quit"])
        loop.run()
        assert "You (● Black) vs AI (○ White, depth 3)" in io.text

    def test_banner_shows_clamped_depth(self):
        loop, io = self._loop(GameSession(depth=50), ["quit"])
        loop.run()
        assert "depth 10)" in io.text
        assert "depth 50" not in io.text

    def test_eof_quits(self):
        loop, io = self._loop(GameSession(depth=1), [])
        assert loop.run() is None
        assert "Thanks for playing!" in io.text

    def test_undo_at_start(self):
        session = GameSession(depth=1)
        loop, io = self._loop(session, ["undo", "quit"])
        loop.run()
        assert "Nothing to undo" in io.text
        assert len(session.history) == 1

    def test_auto_pass_then_ai_wins(self):
        session = GameSession(depth=1)
        session.history = [BoardState(black=sq("B1"), white=sq("A1"))]
        loop, io = self._loop(session, [])
        outcome = loop.run()
        assert "Passing automatically" in io.text
        assert ">> AI plays C1" in io.text
        assert outcome.winner is Player.WHITE
        assert "WHITE (○) WINS! (3 - 0)" in io.text

    def test_two_passes_end_in_draw(self):
        session = GameSession(depth=1)
        s = BoardState.initial()
        session.history = [s, apply_pass(s), apply_pass(apply_pass(s))]
        loop, io = self._loop(session, [])
        outcome = loop.run()
        assert outcome.is_draw
        assert "GAME OVER: DRAW! (2 - 2)" in io.text


class TestEntryPoint:
    def test_main_quits_on_eof(self, monkeypatch, capsys):
        def no_input(prompt=""):
            raise EOFError

        monkeypatch.setattr(builtins, "input", no_input)
        assert main(["--depth", "1", "--delay", "0"]) == 0
        out = capsys.readouterr().out
        assert "depth 1" in out
        assert "Thanks for playing!" in out


# ════════════════════════════════════════════════════════════════════════════
#  FASTAPI REST API INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests the FastAPI REST endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface import api

        self.api = api
        self.client = TestClient(api.app)
        # Reset state before each test
        api.session.reset()

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["turn"] == "black"
        assert (data["black"], data["white"]) == (2, 2)
        assert data["legal_moves"] == ["D3", "C4", "F5", "E6"]
        assert data["last_move"] == "START"
        assert data["is_game_over"] is False
        assert data["result"] is None

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "d3"})
        assert response.status_code == 200
        data = response.json()
        assert data["turn"] == "white"
        assert (data["black"], data["white"]) == (4, 1)
        assert data["last_move"] == "D3"
        assert data["legal_moves"] == ["C3", "E3", "C5"]

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"move": "A1"})
        assert response.status_code == 400
        assert "not legal" in response.json()["detail"]

    def test_post_move_invalid_coordinate(self):
        response = self.client.post("/move", json={"move": "Z9"})
        assert response.status_code == 400
        assert "not valid" in response.json()["detail"]

    def test_pass_rejected_with_moves(self):
        response = self.client.post("/pass")
        assert response.status_code == 400
        assert "Cannot pass" in response.json()["detail"]

    def test_undo_at_start(self):
        response = self.client.post("/undo")
        assert response.status_code == 400
        assert "Nothing to undo" in response.json()["detail"]

    def test_search_does_not_move(self):
        response = self.client.post("/search", json={"depth": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["best_move"] == "D3"
        assert data["turn"] == "black"
        assert len(self.api.session.history) == 1

    def test_ai_move_then_undo(self):
        self.client.post("/move", json={"move": "D3"})
        response = self.client.post("/ai-move")
        assert response.status_code == 200
        data = response.json()
        assert data["ai_move"] in ("C3", "E3", "C5")
        assert data["turn"] == "black"

        response = self.client.post("/undo")
        assert response.status_code == 200
        assert response.json()["last_move"] == "START"
        assert len(self.api.session.history) == 1

    def test_ai_move_refused_on_human_turn(self):
        response = self.client.post("/ai-move")
        assert response.status_code == 400
        assert "Not the AI" in response.json()["detail"]
        assert len(self.api.session.history) == 1

    def test_game_over_endpoints(self):
        self.api.session.history = [BoardState(black=sq("A1", "B1"), white=0)]
        data = self.client.get("/board").json()
        assert data["is_game_over"] is True
        assert data["result"] == "black"
        assert self.client.post("/search", json={}).status_code == 400
        assert self.client.post("/ai-move").status_code == 400
        assert self.client.post("/move", json={"move": "C1"}).status_code == 400

    def test_reset(self):
        self.client.post("/move", json={"move": "D3"})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["legal_moves"] == ["D3", "C4", "F5", "E6"]


# ════════════════════════════════════════════════════════════════════════════
#  ANALYZER PIPELINE
# ════════════════════════════════════════════════════════════════════════════


class TestAnalyzerIntegration:
    def setup_method(self):
        self.analyzer = Analyzer(SearchEngine(depth=1))

    def test_best_move_label(self):
        result = self.analyzer.classify_move(BoardState.initial(), coordinate_to_index("D3"), depth=1)
        assert result["label"] == "Best move"
        assert result["best_move"] == "D3"
        assert result["delta_vs_best"] == 0
        assert result["player"] == "black"

    def test_missed_corner_is_a_mistake(self):
        result = self.analyzer.classify_move(CORNER_POSITION, coordinate_to_index("C1"), depth=1)
        assert result["best_move"] == "A1"
        assert result["delta_vs_best"] == 135
        assert result["label"] == "Mistake"

    def test_delta_never_negative(self):
        state = BoardState.initial()
        legal = legal_moves(state)
        for coord in ("D3", "C4", "F5", "E6"):
            result = self.analyzer.classify_move(state, coordinate_to_index(coord), depth=2)
            assert legal & bit(coordinate_to_index(coord))
            assert result["delta_vs_best"] >= 0

    def test_analyze_game(self):
        report = self.analyzer.analyze_game(["D3", "C3"], depth=1)
        assert [r["move"] for r in report] == ["D3", "C3"]
        assert [r["player"] for r in report] == ["black", "white"]

    def test_analyze_game_rejects_illegal(self):
        with pytest.raises(IllegalMove):
            self.analyzer.analyze_game(["A1"])

    def test_analyze_game_rejects_needless_pass(self):
        with pytest.raises(IllegalPass):
            self.analyzer.analyze_game(["PASS"])
