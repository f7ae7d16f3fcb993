"""Input events and raw terminal key decoding"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class Key(Enum):
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ROTATE = "rotate"
    PLAY = "play"
    PAUSE = "pause"
    QUIT = "quit"


@dataclass(frozen=True)
class GameEvent:
    """One item on the event queue: a gravity tick, a key, or a producer failure."""
    key: Optional[Key] = None
    error: Optional[BaseException] = None

    @staticmethod
    def tick() -> "GameEvent":
        return TICK

    @staticmethod
    def of(key: Key) -> "GameEvent":
        return GameEvent(key=key)

    @staticmethod
    def fault(error: BaseException) -> "GameEvent":
        return GameEvent(error=error)

    @property
    def is_tick(self) -> bool:
        return self.key is None and self.error is None


TICK = GameEvent()

ESC = b"\x1b"

LETTERS = {
    b"w": Key.ROTATE,
    b"s": Key.DOWN,
    b"a": Key.LEFT,
    b"d": Key.RIGHT,
    b"p": Key.PLAY,
    b" ": Key.PAUSE,
    b"q": Key.QUIT,
}
LETTERS.update({k.upper(): v for k, v in LETTERS.items() if k.isalpha()})

# ESC [ <final>
ARROWS = {
    b"[A": Key.ROTATE,
    b"[B": Key.DOWN,
    b"[C": Key.RIGHT,
    b"[D": Key.LEFT,
}


def decode_key(first: bytes, read: Callable[[int], bytes]) -> Optional[Key]:
    """Map one keypress to a Key.

    `first` is the byte just read; `read(n)` is called for the two bytes
    that follow an escape. Unknown input gives None.
    """
    if first == ESC:
        return ARROWS.get(read(2))
    return LETTERS.get(first)


def read_key(read: Callable[[int], bytes]) -> Optional[Key]:
    """Block for one keypress on a raw byte stream; EOFError when it closes."""
    first = read(1)
    if not first:
        raise EOFError("input stream closed")
    return decode_key(first, read)
