"""Board helpers: occupancy, collide, merge, sweep, game over"""
import logging
from typing import List, Optional

from tetris_piece import Block, Coord, COLS, ROWS, GAME_OVER_ROWS

log = logging.getLogger(__name__)

Cell = Optional[str]  # None when empty, else the settled color
Board = List[List[Cell]]


def new_board() -> Board:
    return [[None] * COLS for _ in range(ROWS)]


def is_occupied(board: Board, coord: Coord) -> bool:
    # no clamping: an out-of-range coord raises IndexError
    if coord.row >= ROWS or coord.col >= COLS:
        raise IndexError(f"{coord} outside {ROWS}x{COLS} board")
    return board[coord.row][coord.col] is not None


def collide(board: Board, block: Block) -> bool:
    return any(c.col >= COLS or c.row >= ROWS or is_occupied(board, c) for c in block.cells)


def merge(board: Board, block: Block):
    for c in block.cells:
        if is_occupied(board, c):
            raise ValueError(f"cannot lock {block.kind} onto occupied cell {c}")
    for c in block.cells:
        board[c.row][c.col] = block.color


def is_row_complete(row: List[Cell]) -> bool:
    return all(cell is not None for cell in row)


def sweep(board: Board) -> int:
    """Drop every completed row at once and refill from the top; returns the count."""
    kept = [row for row in board if not is_row_complete(row)]
    cleared = len(board) - len(kept)
    if cleared:
        board[:] = [[None] * COLS for _ in range(cleared)] + kept
        log.debug("cleared %d line(s)", cleared)
    return cleared


def is_game_over(board: Board) -> bool:
    return any(cell is not None for row in board[:GAME_OVER_ROWS] for cell in row)
