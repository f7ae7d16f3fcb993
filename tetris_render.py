"""
Pygame window frontend.

- Pre-render one cell Surface per color and blit it.
- Pre-render the static background (grid + panel frame) once.
- Cache HUD text surfaces; re-render only when values change.
- Key source blocks on pygame.event.wait() and maps to the same keys
  as the terminal decoder.
"""
from __future__ import annotations
import pygame
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
from tetris_game import Snapshot, MESSAGES
from tetris_input import Key
from tetris_config import CONFIG
from tetris_piece import COLORS as COLOR_NAMES, COLS, ROWS, SPAWN_ROWS

VISIBLE_ROWS = ROWS - SPAWN_ROWS


@dataclass(frozen=True)
class Dims:
    """Window geometry; everything derives from the cell size."""
    cell: int
    margin: int = 16
    panel_w: int = 200

    @property
    def board_x(self) -> int: return self.margin
    @property
    def board_y(self) -> int: return self.margin
    @property
    def board_w(self) -> int: return COLS * self.cell
    @property
    def board_h(self) -> int: return VISIBLE_ROWS * self.cell
    @property
    def panel_x(self) -> int: return self.board_x + self.board_w + self.margin
    @property
    def panel_y(self) -> int: return self.margin
    @property
    def total_w(self) -> int: return self.panel_x + self.panel_w + self.margin
    @property
    def total_h(self) -> int: return self.board_h + 2 * self.margin


RGB: Dict[str, Tuple[int,int,int]] = dict(zip(COLOR_NAMES, [
    (235, 70, 70),    # red
    (80, 120, 255),   # blue
    (255, 158, 94),   # orange
    (255, 224, 102),  # yellow
    (94, 224, 142),   # green
    (200, 119, 255),  # violet
    (150, 100, 60),   # brown
]))

KEYMAP: Dict[int, Key] = {
    pygame.K_w: Key.ROTATE, pygame.K_UP: Key.ROTATE,
    pygame.K_s: Key.DOWN, pygame.K_DOWN: Key.DOWN,
    pygame.K_a: Key.LEFT, pygame.K_LEFT: Key.LEFT,
    pygame.K_d: Key.RIGHT, pygame.K_RIGHT: Key.RIGHT,
    pygame.K_p: Key.PLAY,
    pygame.K_SPACE: Key.PAUSE,
    pygame.K_q: Key.QUIT,
}

MENU_LINES = [
    "TETRIS", "",
    "P  Play",
    "A / ←  Left",
    "D / →  Right",
    "S / ↓  Down",
    "W / ↑  Rotate",
    "Space  Pause",
    "Q  Quit",
]


def pygame_key(event) -> Optional[Key]:
    if event.type == pygame.QUIT:
        return Key.QUIT
    if event.type == pygame.KEYDOWN:
        return KEYMAP.get(event.key)
    return None


def key_source() -> Callable[[], Optional[Key]]:
    return lambda: pygame_key(pygame.event.wait())


@dataclass
class HudCache:
    points: int = -1
    message: Tuple[str, str] = ("", "")
    title: Optional[pygame.Surface] = None
    points_s: Optional[pygame.Surface] = None
    next_label: Optional[pygame.Surface] = None
    message_s: Optional[list] = None


class WindowRenderer:
    """Holds all pre-rendered assets and draws snapshots to the display."""
    def __init__(self, dims: Optional[Dims] = None):
        pygame.init()
        pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN])
        self.dims = dims or Dims(int(CONFIG["CELL_SIZE"]))
        self.screen = pygame.display.set_mode((self.dims.total_w, self.dims.total_h))
        pygame.display.set_caption("Tetris")
        self.font = pygame.font.SysFont(None, 24)
        self.big_font = pygame.font.SysFont(None, 40)
        self._make_static()
        self._make_cells()
        self.hud = HudCache()

    # ---------- Static background (grid + panel) ----------
    def _make_static(self):
        d = self.dims
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill((10,13,34))
        grid_col = (40,50,90)
        for x in range(COLS+1):
            X = d.board_x + x*d.cell
            pygame.draw.line(self.bg, grid_col, (X, d.board_y), (X, d.board_y + d.board_h))
        for y in range(VISIBLE_ROWS+1):
            Y = d.board_y + y*d.cell
            pygame.draw.line(self.bg, grid_col, (d.board_x, Y), (d.board_x + d.board_w, Y))
        panel_rect = pygame.Rect(d.panel_x, d.panel_y, d.panel_w, d.board_h)
        pygame.draw.rect(self.bg, (21,25,53), panel_rect)
        pygame.draw.rect(self.bg, (50,60,100), panel_rect, 1)
        self.pv_cell = max(14, int(d.cell*0.75))
        self.pv_x = d.panel_x + 12
        self.pv_y = d.panel_y + 110
        frame = pygame.Rect(self.pv_x-6, self.pv_y-6, self.pv_cell*4+12, self.pv_cell*4+12)
        pygame.draw.rect(self.bg, (15,18,40), frame)
        pygame.draw.rect(self.bg, (55,65,110), frame, 1)

    def _make_cells(self):
        self.cell_surf: Dict[str, pygame.Surface] = {}
        self.pv_surf: Dict[str, pygame.Surface] = {}
        c = self.dims.cell
        for name, col in RGB.items():
            s = pygame.Surface((c-2, c-2))
            s.fill(col)
            self.cell_surf[name] = s
            p = pygame.Surface((self.pv_cell-2, self.pv_cell-2))
            p.fill(col)
            self.pv_surf[name] = p

    # ---------- Renderer protocol ----------
    def clear(self):
        self.screen.blit(self.bg, (0,0))
        pygame.display.flip()

    def draw_menu(self):
        self.screen.fill((10,13,34))
        y = 40
        for i, line in enumerate(MENU_LINES):
            f = self.big_font if i == 0 else self.font
            self.screen.blit(f.render(line, True, (200,210,240)), (40, y))
            y += 44 if i == 0 else 26
        pygame.display.flip()

    def draw(self, snap: Snapshot):
        d = self.dims
        self.screen.blit(self.bg, (0,0))
        for y, row in enumerate(snap.frame()):
            for x, cell in enumerate(row):
                if cell is not None:
                    self.screen.blit(self.cell_surf[cell], (d.board_x + x*d.cell + 1, d.board_y + y*d.cell + 1))
        self._draw_panel(snap)
        self._draw_message(snap)
        pygame.display.flip()

    # ---------- HUD / Panel ----------
    def _draw_panel(self, snap: Snapshot):
        d = self.dims
        f = self.font
        if self.hud.title is None:
            self.hud.title = f.render("Tetris", True, (197,202,233))
            self.hud.next_label = f.render("Next:", True, (200,210,240))
        if snap.points != self.hud.points:
            self.hud.points = snap.points
            self.hud.points_s = f.render(f"Points: {snap.points}", True, (200,210,240))
        self.screen.blit(self.hud.title, (d.panel_x + 12, d.panel_y + 12))
        self.screen.blit(self.hud.points_s, (d.panel_x + 12, d.panel_y + 44))
        self.screen.blit(self.hud.next_label, (d.panel_x + 12, d.panel_y + 80))
        for r, c in snap.next_shape:
            self.screen.blit(self.pv_surf[snap.next_color], (self.pv_x + c*self.pv_cell + 1, self.pv_y + r*self.pv_cell + 1))

    def _draw_message(self, snap: Snapshot):
        message = MESSAGES.get(snap.state)
        if not message:
            return
        if message != self.hud.message or self.hud.message_s is None:
            self.hud.message = message
            self.hud.message_s = [self.big_font.render(message[0], True, (255,220,220)),
                                  self.font.render(message[1], True, (255,220,220))]
        d = self.dims
        cy = d.board_y + d.board_h // 2
        for i, surf in enumerate(self.hud.message_s):
            rect = surf.get_rect(center=(d.board_x + d.board_w // 2, cy + i * 36))
            self.screen.blit(surf, rect)


def run(play: Callable[["WindowRenderer", Callable[[], Optional[Key]]], None]):
    renderer = WindowRenderer()
    try:
        play(renderer, key_source())
    finally:
        pygame.quit()
