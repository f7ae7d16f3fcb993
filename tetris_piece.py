"""Piece model: coordinates, rotation tables, falling block"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, NamedTuple, Tuple

log = logging.getLogger(__name__)

COLS, ROWS = 10, 23
# rows above the visible field; pieces spawn with their anchor on the first visible row
SPAWN_ROWS = 4
# a settled cell in the top two buffer rows ends the game
GAME_OVER_ROWS = 2

KINDS = ("I", "J", "L", "O", "S", "T", "Z")
COLORS = ("red", "blue", "orange", "yellow", "green", "violet", "brown")


class GeometryError(ValueError):
    """A piece cell would land above row 0 or left of column 0."""


class Coord(NamedTuple):
    row: int
    col: int

    def offset(self, dr: int, dc: int) -> "Coord":
        row, col = self.row + dr, self.col + dc
        if row < 0 or col < 0:
            raise GeometryError(f"({self.row},{self.col}) + ({dr},{dc}) leaves the grid")
        return Coord(row, col)

    def up(self, n: int = 1) -> "Coord": return self.offset(-n, 0)
    def down(self, n: int = 1) -> "Coord": return self.offset(n, 0)
    def left(self, n: int = 1) -> "Coord": return self.offset(0, -n)
    def right(self, n: int = 1) -> "Coord": return self.offset(0, n)


Offsets = List[Tuple[int, int]]

# (row delta, col delta) per rotation, anchor first.
# I, S and Z have two shapes, O has one; the rotation index picks by modulo.
OFFSETS: Dict[str, List[Offsets]] = {
    "I": [[(0,0),(0,1),(0,2),(0,-1)],
          [(0,0),(-1,0),(-2,0),(1,0)]],
    "J": [[(0,0),(0,-1),(0,1),(1,1)],
          [(0,0),(-1,0),(1,0),(1,-1)],
          [(0,0),(0,1),(0,-1),(-1,-1)],
          [(0,0),(-1,0),(-1,1),(1,0)]],
    "L": [[(0,0),(0,1),(0,-1),(-1,1)],
          [(0,0),(-1,0),(1,0),(1,1)],
          [(0,0),(0,1),(0,-1),(1,-1)],
          [(0,0),(1,0),(-1,0),(-1,-1)]],
    "O": [[(0,0),(0,1),(-1,0),(-1,1)]],
    "S": [[(0,0),(0,-1),(-1,0),(-1,1)],
          [(0,0),(-1,0),(0,1),(1,1)]],
    "T": [[(0,0),(0,-1),(0,1),(1,0)],
          [(0,0),(1,0),(-1,0),(0,-1)],
          [(0,0),(0,1),(0,-1),(-1,0)],
          [(0,0),(-1,0),(1,0),(0,1)]],
    "Z": [[(0,0),(0,-1),(1,0),(1,1)],
          [(0,0),(1,0),(0,1),(-1,1)]],
}


def _offsets(kind: str, rotation: int) -> Offsets:
    if kind not in OFFSETS:
        raise ValueError(f"unknown piece kind: {kind!r}")
    if not 0 <= rotation < 4:
        raise ValueError(f"rotation index out of range: {rotation}")
    table = OFFSETS[kind]
    return table[rotation % len(table)]


def piece_cells(kind: str, rotation: int, anchor: Coord) -> Tuple[Coord, ...]:
    """Absolute cells of a piece; raises GeometryError instead of wall-kicking."""
    return tuple(anchor.offset(dr, dc) for dr, dc in _offsets(kind, rotation))


def shape_offsets(kind: str, rotation: int) -> Tuple[Tuple[int, int], ...]:
    """Offsets shifted so the topmost/leftmost cell is at (0, 0); used for previews."""
    offs = _offsets(kind, rotation)
    top = min(dr for dr, _ in offs)
    left = min(dc for _, dc in offs)
    return tuple(sorted((dr - top, dc - left) for dr, dc in offs))


@dataclass
class Block:
    cells: Tuple[Coord, ...]
    color: str
    kind: str
    rotation: int

    @staticmethod
    def spawn(rng) -> "Block":
        kind, color, rotation = rng.kind(), rng.color(), rng.rotation()
        anchor = Coord(SPAWN_ROWS, COLS // 2)
        return Block(piece_cells(kind, rotation, anchor), color, kind, rotation)

    @property
    def anchor(self) -> Coord:
        return self.cells[0]

    def copy(self) -> "Block":
        return replace(self)

    def down(self):
        self.cells = tuple(c.down() for c in self.cells)

    def right(self):
        self.cells = tuple(c.right() for c in self.cells)

    def left(self):
        if all(c.col > 0 for c in self.cells):
            self.cells = tuple(c.left() for c in self.cells)

    def rotate(self):
        rotation = (self.rotation + 1) % 4
        try:
            cells = piece_cells(self.kind, rotation, self.anchor)
        except GeometryError as e:
            log.debug("rotation of %s rejected: %s", self.kind, e)
            return
        self.rotation, self.cells = rotation, cells
