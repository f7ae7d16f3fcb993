"""Game session and state machine.

A `Tetris` session owns every piece of mutable game data: the board, the
falling block, the preview block, the points and the current state. It is
driven one event at a time by `handle()`, which is only ever called from
the consumer loop, so nothing here needs locking. The only value shared
with other threads is the optional state flag, which the session writes on
every transition so the gravity ticker knows whether to fire.

Every move follows the same contract: copy the block, apply the move to
the copy, test the copy against the board, then either commit it and
redraw or drop it. A downward move that collides settles the block
instead: lock, clear lines, check for game over, promote the preview.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from tetris_board import Board, Cell, collide, is_game_over, merge, new_board, sweep
from tetris_input import GameEvent, Key
from tetris_piece import Block, Coord, SPAWN_ROWS, shape_offsets
from tetris_rng import PieceRandom

log = logging.getLogger(__name__)


class GameState(Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSE = "pause"
    END_SCREEN = "end_screen"


MESSAGES = {
    GameState.PAUSE: ("GAME PAUSED", ""),
    GameState.END_SCREEN: ("YOU LOST!", "Press p to restart or q to quit"),
}


@dataclass(frozen=True)
class Snapshot:
    """Read-only view handed to the renderer after each change."""
    grid: Tuple[Tuple[Cell, ...], ...]
    cells: Tuple[Coord, ...]
    color: str
    next_kind: str
    next_color: str
    next_shape: Tuple[Tuple[int, int], ...]
    points: int
    state: GameState

    @property
    def message(self) -> Tuple[str, str]:
        return MESSAGES.get(self.state, ("", ""))

    def frame(self) -> List[List[Cell]]:
        """Visible rows with the falling block painted in while the game is live."""
        rows = [list(r) for r in self.grid]
        # after a blocked spawn the locked cells may already have been swept away
        cells = () if self.state is GameState.END_SCREEN else self.cells
        for c in cells:
            rows[c.row][c.col] = self.color
        return rows[SPAWN_ROWS:]


class Tetris:
    def __init__(self, rng: Optional[PieceRandom] = None, renderer=None, flag=None):
        self.rng = rng or PieceRandom()
        self.renderer = renderer
        self.flag = flag
        self.board: Board = new_board()
        self.current = Block.spawn(self.rng)
        self.next = Block.spawn(self.rng)
        self.points = 0
        self.state = GameState.MENU
        if flag is not None:
            flag.set(self.state)

    # ---------- event entry point ----------
    def handle(self, event: GameEvent) -> bool:
        """Apply one event. Returns False when the player quits."""
        if event.key is Key.QUIT:
            log.info("quit from %s with %d point(s)", self.state.value, self.points)
            return False
        if self.state is GameState.MENU:
            if event.key is Key.PLAY:
                self.start()
        elif self.state is GameState.PLAYING:
            self._playing(event)
        elif self.state is GameState.PAUSE:
            if event.key is Key.PAUSE:
                self._enter(GameState.PLAYING)
                self.redraw()
        elif self.state is GameState.END_SCREEN:
            if event.key is Key.PLAY:
                self.restart()
        return True

    def _playing(self, event: GameEvent):
        if event.is_tick or event.key is Key.DOWN:
            self.move_down()
        elif event.key is Key.LEFT:
            self.move_left()
        elif event.key is Key.RIGHT:
            self.move_right()
        elif event.key is Key.ROTATE:
            self.rotate()
        elif event.key is Key.PAUSE:
            self._enter(GameState.PAUSE)
            self.redraw()

    # ---------- transitions ----------
    def _enter(self, state: GameState):
        log.debug("state %s -> %s", self.state.value, state.value)
        self.state = state
        if self.flag is not None:
            self.flag.set(state)

    def reset(self):
        self.board = new_board()
        self.points = 0

    def start(self):
        self.current = Block.spawn(self.rng)
        self.next = Block.spawn(self.rng)
        if self.renderer is not None:
            self.renderer.clear()
        self._enter(GameState.PLAYING)
        self.redraw()

    def restart(self):
        self.reset()
        self.start()

    def _end(self):
        self._enter(GameState.END_SCREEN)
        log.info("game over with %d point(s)", self.points)

    # ---------- moves ----------
    def _try(self, move: Callable[[Block], None]) -> bool:
        tentative = self.current.copy()
        move(tentative)
        if collide(self.board, tentative):
            return False
        self.current = tentative
        self.redraw()
        return True

    def move_left(self) -> bool:
        return self._try(Block.left)

    def move_right(self) -> bool:
        return self._try(Block.right)

    def rotate(self) -> bool:
        return self._try(Block.rotate)

    def move_down(self) -> bool:
        """Step down one row, settling the block when it cannot fall."""
        if self._try(Block.down):
            return True
        self.settle()
        return False

    def settle(self):
        merge(self.board, self.current)
        cleared = sweep(self.board)
        self.points += cleared
        log.debug("locked %s at %s, %d line(s)", self.current.kind, list(self.current.cells), cleared)
        if is_game_over(self.board):
            self._end()
        elif collide(self.board, self.next):
            log.debug("no room to spawn %s", self.next.kind)
            self._end()
        else:
            self.current = self.next
            self.next = Block.spawn(self.rng)
        self.redraw()

    # ---------- rendering ----------
    def snapshot(self) -> Snapshot:
        return Snapshot(
            grid=tuple(tuple(row) for row in self.board),
            cells=self.current.cells,
            color=self.current.color,
            next_kind=self.next.kind,
            next_color=self.next.color,
            next_shape=shape_offsets(self.next.kind, self.next.rotation),
            points=self.points,
            state=self.state,
        )

    def show_menu(self):
        if self.renderer is not None:
            self.renderer.draw_menu()

    def redraw(self):
        if self.renderer is not None:
            self.renderer.draw(self.snapshot())
