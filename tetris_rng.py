"""Uniform piece randomizer"""
import random
from typing import Optional

from tetris_piece import COLORS, KINDS


class PieceRandom:
    """Independent uniform draws for kind, color and starting rotation.

    Pass a seed to replay the exact same sequence of pieces.
    """
    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def kind(self) -> str:
        return self._rng.choice(KINDS)

    def color(self) -> str:
        return self._rng.choice(COLORS)

    def rotation(self) -> int:
        return self._rng.randrange(4)
