"""
Rules Module
============

Pure Othello rules over ``BoardState`` bitboards: legal move generation,
capture sets, move/pass application and game-end detection.

Bit ``i`` is cell ``i`` in row-major order (A1 = 0, H1 = 7, A8 = 56), so a
shift of +1 moves one file east and +8 moves one rank up. Shifts that
change the file are masked first so a ray never wraps from file H to
file A or back.

None of these functions validate their input. ``apply_move`` and
``flips_for_move`` assume the index came from ``legal_moves``.
"""

from dataclasses import replace
from typing import List, Tuple

from othello.core.board import (
    FULL_BOARD,
    BoardState,
    Player,
    bit,
    index_to_coordinate,
)


# --- Constants ---

# Every file except A / except H.
NOT_FILE_A: int = 0xFEFEFEFEFEFEFEFE
NOT_FILE_H: int = 0x7F7F7F7F7F7F7F7F

# (shift, pre-shift mask). East-going shifts drop file H before moving,
# west-going shifts drop file A. Vertical shifts need no mask.
DIRECTIONS: List[Tuple[int, int]] = [
    (-9, NOT_FILE_A),  # south-west
    (-8, FULL_BOARD),  # south
    (-7, NOT_FILE_H),  # south-east
    (-1, NOT_FILE_A),  # west
    (1, NOT_FILE_H),   # east
    (7, NOT_FILE_A),   # north-west
    (8, FULL_BOARD),   # north
    (9, NOT_FILE_H),   # north-east
]


def _step(bitset: int, shift: int, mask: int) -> int:
    bitset &= mask
    if shift > 0:
        return (bitset << shift) & FULL_BOARD
    return bitset >> -shift


def _flips_in_direction(move_mask: int, own: int, opp: int, shift: int, mask: int) -> int:
    """Opponent discs bracketed along one ray, or 0 if the ray is not closed."""
    flipped = 0
    current = _step(move_mask, shift, mask)
    while current & opp:
        flipped |= current
        current = _step(current, shift, mask)
    if current & own:
        return flipped
    return 0


def disc_count(bitset: int) -> int:
    return bitset.bit_count()


def legal_moves(state: BoardState) -> int:
    """
    Bitset of cells where the side to move may place a disc.

    For each direction, flood from our discs across contiguous opponent
    discs; an empty cell directly beyond such a run is a legal move. A run
    holds at most six discs, so five extra propagation steps suffice.
    """
    own, opp = state.own(), state.opponent()
    empty = state.empty()
    moves = 0
    for shift, mask in DIRECTIONS:
        run = _step(own, shift, mask) & opp
        for _ in range(5):
            run |= _step(run, shift, mask) & opp
        moves |= _step(run, shift, mask) & empty
    return moves


def legal_moves_for(state: BoardState, player: Player) -> int:
    """Move-set ``player`` would have on the same discs."""
    return legal_moves(state.with_turn(player))


def flips_for_move(state: BoardState, index: int) -> int:
    """Union of opponent discs captured by playing at ``index``."""
    move_mask = bit(index)
    own, opp = state.own(), state.opponent()
    flips = 0
    for shift, mask in DIRECTIONS:
        flips |= _flips_in_direction(move_mask, own, opp, shift, mask)
    return flips


def apply_move(state: BoardState, index: int) -> BoardState:
    """Place a disc for the side to move and return the resulting position."""
    move_mask = bit(index)
    flips = flips_for_move(state, index)
    if state.current_player is Player.BLACK:
        black = state.black | move_mask | flips
        white = state.white & ~flips
    else:
        white = state.white | move_mask | flips
        black = state.black & ~flips
    return BoardState(
        black=black,
        white=white,
        current_player=state.current_player.other(),
        pass_count=0,
        last_move=index_to_coordinate(index),
    )


def apply_pass(state: BoardState) -> BoardState:
    return replace(
        state,
        current_player=state.current_player.other(),
        pass_count=state.pass_count + 1,
        last_move="PASS",
    )


def score(state: BoardState) -> Tuple[int, int]:
    """(black discs, white discs)."""
    return disc_count(state.black), disc_count(state.white)


def is_terminal(state: BoardState, mover_moves: int, other_moves: int) -> bool:
    """
    True when the game is over. Any one condition suffices:
    full board, two consecutive passes, a color wiped out, or neither side
    able to move.
    """
    black, white = score(state)
    total = black + white
    if total == 64:
        return True
    if state.pass_count >= 2:
        return True
    if black == 0 or white == 0:
        return True
    if mover_moves == 0 and other_moves == 0:
        return True
    return False
