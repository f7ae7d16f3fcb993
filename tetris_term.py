"""Curses terminal frontend: raw mode, renderer and stdin key source"""
import curses
import locale
import os
import sys
from typing import Callable, Dict, Optional

from tetris_game import Snapshot
from tetris_input import Key, read_key
from tetris_piece import COLS

MENU_TEXT = """TETRIS


KEYS:

P => Play

A (or ←) => Move Block to the left

D (or →) => Move Block to the right

S (or ↓) => Move Block down

W (or ↑) => Rotate Block


[SPACE] => Pause

Q => Quit"""

LEFT_WALL, RIGHT_WALL, FLOOR = "▐", "▌", "▔"
CELL = "[]"

# (basic curses color, 256-color index when available)
PALETTE = {
    "red": (curses.COLOR_RED, 196),
    "blue": (curses.COLOR_BLUE, 27),
    "orange": (curses.COLOR_YELLOW, 208),
    "yellow": (curses.COLOR_YELLOW, 226),
    "green": (curses.COLOR_GREEN, 46),
    "violet": (curses.COLOR_MAGENTA, 129),
    "brown": (curses.COLOR_RED, 94),
}


class TerminalRenderer:
    """Draws snapshots onto a curses window. Only the consumer thread calls it."""
    def __init__(self, stdscr):
        self.scr = stdscr
        self.pairs: Dict[str, int] = {}
        self._init_curses()

    def _init_curses(self):
        curses.curs_set(0)
        curses.noecho()
        curses.raw()
        if not curses.has_colors():
            return
        curses.start_color()
        curses.use_default_colors()
        rich = curses.COLORS >= 256
        for i, (name, (basic, extended)) in enumerate(PALETTE.items(), start=1):
            curses.init_pair(i, extended if rich else basic, -1)
            self.pairs[name] = i

    def _attr(self, color: str) -> int:
        pair = self.pairs.get(color)
        return curses.color_pair(pair) | curses.A_BOLD if pair else curses.A_BOLD

    def _put(self, y: int, x: int, text: str, attr: int = 0):
        try:
            self.scr.addstr(y, x, text, attr)
        except curses.error:
            # writing into the bottom-right corner or past a small terminal
            pass

    def clear(self):
        self.scr.erase()
        self.scr.refresh()

    def draw_menu(self):
        self.scr.erase()
        for y, line in enumerate(MENU_TEXT.splitlines()):
            self._put(y, 0, line)
        self.scr.refresh()

    def draw(self, snap: Snapshot):
        rows = snap.frame()
        width = COLS * len(CELL)
        for y, row in enumerate(rows):
            self._put(y, 0, LEFT_WALL)
            for x, cell in enumerate(row):
                if cell is None:
                    self._put(y, 1 + x * len(CELL), " " * len(CELL))
                else:
                    self._put(y, 1 + x * len(CELL), CELL, self._attr(cell))
            self._put(y, 1 + width, RIGHT_WALL)
        y = len(rows)
        self._put(y, 0, FLOOR * (width + 2))
        self._put(y + 2, 0, f"Points: {snap.points}")
        for i, line in enumerate(snap.message):
            self._put(y + 4 + i, 0, line.ljust(40))
        self._draw_next(snap, 4 + width)
        self.scr.refresh()

    def _draw_next(self, snap: Snapshot, x0: int):
        self._put(0, x0, "Next:")
        for r in range(4):
            self._put(1 + r, x0, " " * (4 * len(CELL)))
        for r, c in snap.next_shape:
            self._put(1 + r, x0 + c * len(CELL), CELL, self._attr(snap.next_color))


def stdin_reader(fd: Optional[int] = None) -> Callable[[int], bytes]:
    """Blocking byte reader on the raw stdin descriptor, bypassing curses.

    Each call returns whatever is waiting, up to n bytes, so a lone Esc
    only costs the keypress that follows it.
    """
    fd = sys.stdin.fileno() if fd is None else fd

    def read(n: int) -> bytes:
        return os.read(fd, n)
    return read


def key_source(fd: Optional[int] = None) -> Callable[[], Optional[Key]]:
    read = stdin_reader(fd)
    return lambda: read_key(read)


def run(play: Callable[["TerminalRenderer", Callable[[], Optional[Key]]], None]):
    """Enter raw mode, hand a renderer and key source to `play`, restore the terminal after."""
    def _main(stdscr):
        play(TerminalRenderer(stdscr), key_source())
    locale.setlocale(locale.LC_ALL, "")
    curses.wrapper(_main)
