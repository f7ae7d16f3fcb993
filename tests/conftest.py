import pytest

from tetris_config import CONFIG
from tetris_events import StateFlag
from tetris_game import Tetris
from tetris_piece import Block, Coord, piece_cells
from tetris_rng import PieceRandom


class RecordingRenderer:
    def __init__(self):
        self.calls = []
        self.snapshots = []

    def clear(self):
        self.calls.append("clear")

    def draw_menu(self):
        self.calls.append("menu")

    def draw(self, snap):
        self.calls.append("draw")
        self.snapshots.append(snap)


def make_block(kind, rotation, row, col, color="red"):
    return Block(piece_cells(kind, rotation, Coord(row, col)), color, kind, rotation)


@pytest.fixture
def rng():
    return PieceRandom(1234)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def flag():
    return StateFlag()


@pytest.fixture
def game(rng, renderer, flag):
    return Tetris(rng, renderer=renderer, flag=flag)


@pytest.fixture
def restore_config():
    saved = dict(CONFIG)
    yield CONFIG
    CONFIG.clear()
    CONFIG.update(saved)
