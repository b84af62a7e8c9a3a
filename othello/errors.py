"""
Othello error taxonomy.

Every error here is user-facing and recoverable: it is raised before any
state change, reported to the player, and the game continues. The rules
functions themselves never raise; callers validate through
``legal_moves`` first.

Usage:
    from othello.errors import IllegalMove

    try:
        session.play("D3")
    except OthelloError as e:
        print(f"Error: {e.message}")
"""

from typing import Any, Dict, Optional

__all__ = [
    "OthelloError",
    "InvalidCoordinate",
    "IllegalMove",
    "IllegalPass",
    "NoHistory",
    "UnknownCommand",
    "GameOver",
]


class OthelloError(Exception):
    """Base exception for all Othello errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra details (coordinate, command, ...)
    """
    code: str = "OTHELLO_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class InvalidCoordinate(OthelloError):
    """Malformed coordinate text (wrong length, file or rank out of range)."""
    code: str = "INVALID_COORDINATE"

    def __init__(self, text: str):
        super().__init__(
            f"Coordinate {text!r} is not valid. Use A1-H8 (e.g. D3).",
            context={"coordinate": text},
        )


class IllegalMove(OthelloError):
    """Well-formed coordinate that is not in the current move-set."""
    code: str = "ILLEGAL_MOVE"

    def __init__(self, coordinate: str):
        super().__init__(
            f"Move {coordinate} is not legal. Try one of the marked cells.",
            context={"coordinate": coordinate},
        )


class IllegalPass(OthelloError):
    """Pass attempted while the side to move still has legal moves."""
    code: str = "ILLEGAL_PASS"

    def __init__(self):
        super().__init__("Cannot pass: you still have legal moves.")


class NoHistory(OthelloError):
    """Undo attempted with only the initial position left."""
    code: str = "NO_HISTORY"

    def __init__(self):
        super().__init__("Nothing to undo (only the starting position is left).")


class UnknownCommand(OthelloError):
    """Input that does not parse as any command."""
    code: str = "UNKNOWN_COMMAND"

    def __init__(self, text: str = "", message: Optional[str] = None):
        super().__init__(
            message or "Unknown command. Try MOVE D3, UNDO, HINT, PASS or QUIT.",
            context={"input": text},
        )


class GameOver(OthelloError):
    """Action attempted after the game reached a terminal position."""
    code: str = "GAME_OVER"

    def __init__(self):
        super().__init__("The game is already over.")
