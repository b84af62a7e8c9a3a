from typing import Optional

from othello.core.board import index_to_coordinate


def format_info(depth: int, score: int, nodes: int, elapsed: float, move: Optional[int]) -> str:
    """One-line search summary; ``elapsed`` is in seconds."""
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    move_str = index_to_coordinate(move) if move is not None else "PASS"
    return f"info depth {depth} score {score} nodes {nodes} nps {nps} time {int(elapsed * 1000)} move {move_str}"
