"""Event dispatch: gravity ticker, input pump and the single consumer loop"""
import logging
import queue
import threading
import time
from typing import Callable, Optional

from tetris_config import CONFIG
from tetris_game import GameState, Tetris
from tetris_input import GameEvent, Key

log = logging.getLogger(__name__)


class ChannelError(RuntimeError):
    """A producer thread died; the event stream can no longer be trusted."""


class StateFlag:
    """Lock-guarded copy of the game state, written by the consumer, read by the ticker."""
    def __init__(self, state: GameState = GameState.MENU):
        self._lock = threading.Lock()
        self._state = state

    def set(self, state: GameState):
        with self._lock:
            self._state = state

    def get(self) -> GameState:
        with self._lock:
            return self._state

    def is_playing(self) -> bool:
        return self.get() is GameState.PLAYING


class _Producer(threading.Thread):
    def __init__(self, events: "queue.Queue[GameEvent]", name: str):
        super().__init__(name=name, daemon=True)
        self.events = events

    def run(self):
        try:
            self.produce()
        except Exception as e:
            log.exception("%s stopped", self.name)
            self.events.put(GameEvent.fault(e))

    def produce(self):
        raise NotImplementedError


class Ticker(_Producer):
    """Emits a tick every interval, but only while the game is being played."""
    def __init__(self, events, flag: StateFlag, interval_ms: Optional[int] = None,
                 sleep: Callable[[float], None] = time.sleep):
        super().__init__(events, "ticker")
        self.flag = flag
        self.interval = (interval_ms or CONFIG["TICK_MS"]) / 1000.0
        self.sleep = sleep

    def produce(self):
        while True:
            self.sleep(self.interval)
            if self.flag.is_playing():
                self.events.put(GameEvent.tick())


class InputPump(_Producer):
    """Forwards every decoded key; relevance is decided by the consumer."""
    def __init__(self, events, read_key: Callable[[], Optional[Key]]):
        super().__init__(events, "input")
        self.read_key = read_key

    def produce(self):
        while True:
            key = self.read_key()
            if key is not None:
                self.events.put(GameEvent.of(key))


class EventLoop:
    """Owns the queue and runs the consumer on the calling thread."""
    def __init__(self, game: Tetris, flag: StateFlag, read_key: Callable[[], Optional[Key]],
                 interval_ms: Optional[int] = None):
        self.events: "queue.Queue[GameEvent]" = queue.Queue()
        self.game = game
        self.flag = flag
        self.ticker = Ticker(self.events, flag, interval_ms)
        self.pump = InputPump(self.events, read_key)

    def start(self):
        self.ticker.start()
        self.pump.start()

    def run(self):
        """Start the producers and consume until Quit."""
        self.start()
        self.game.show_menu()
        self.consume()

    def consume(self):
        while True:
            event = self.events.get()
            if event.error is not None:
                raise ChannelError(f"event producer failed: {event.error!r}") from event.error
            if not self.game.handle(event):
                return
