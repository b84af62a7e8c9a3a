"""Immutable bitboard game state and coordinate helpers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator

from othello.errors import InvalidCoordinate

FULL_BOARD: int = 0xFFFFFFFFFFFFFFFF
FILES = "ABCDEFGH"


class Player(Enum):
    BLACK = "black"
    WHITE = "white"

    def other(self) -> "Player":
        return Player.WHITE if self is Player.BLACK else Player.BLACK

    @property
    def label(self) -> str:
        return self.value.capitalize()


def bit(index: int) -> int:
    return 1 << index


def iter_indices(bitset: int) -> Iterator[int]:
    """Yield the indices of the set bits, lowest first."""
    while bitset:
        low = bitset & -bitset
        yield low.bit_length() - 1
        bitset ^= low


def coordinate_to_index(text: str) -> int:
    """Convert 'D3' (any case) to a 0-63 cell index. A1 = 0, H8 = 63."""
    coord = text.upper() if isinstance(text, str) else ""
    if len(coord) != 2:
        raise InvalidCoordinate(text)
    file_char, rank_char = coord[0], coord[1]
    if file_char not in FILES or rank_char not in "12345678":
        raise InvalidCoordinate(text)
    row = int(rank_char) - 1
    col = FILES.index(file_char)
    return row * 8 + col


def index_to_coordinate(index: int) -> str:
    """Inverse of coordinate_to_index; 'XX' for anything outside 0-63."""
    if not 0 <= index <= 63:
        return "XX"
    return FILES[index % 8] + str(index // 8 + 1)


@dataclass(frozen=True)
class BoardState:
    """One game position. Never mutated; transitions build a new instance."""

    black: int
    white: int
    current_player: Player = Player.BLACK
    pass_count: int = 0
    last_move: str = "START"

    def __post_init__(self):
        if self.black & self.white:
            raise ValueError("a cell cannot hold both colors")

    @classmethod
    def initial(cls) -> "BoardState":
        """Standard start: White on D4/E5, Black on E4/D5, Black to move."""
        d4, e4 = coordinate_to_index("D4"), coordinate_to_index("E4")
        d5, e5 = coordinate_to_index("D5"), coordinate_to_index("E5")
        return cls(black=bit(e4) | bit(d5), white=bit(d4) | bit(e5))

    def occupancy(self, player: Player) -> int:
        return self.black if player is Player.BLACK else self.white

    def own(self) -> int:
        return self.occupancy(self.current_player)

    def opponent(self) -> int:
        return self.occupancy(self.current_player.other())

    def empty(self) -> int:
        return ~(self.black | self.white) & FULL_BOARD

    def total_discs(self) -> int:
        return (self.black | self.white).bit_count()

    def with_turn(self, player: Player) -> "BoardState":
        """Same discs with ``player`` to move (used for mobility probes)."""
        if player is self.current_player:
            return self
        return replace(self, current_player=player)

    def cell(self, index: int) -> Player | None:
        mask = bit(index)
        if self.black & mask:
            return Player.BLACK
        if self.white & mask:
            return Player.WHITE
        return None
