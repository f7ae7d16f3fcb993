import argparse
import logging
import sys
from typing import List, Optional

from tetris_config import CONFIG, apply_overrides, load_env
from tetris_events import EventLoop, StateFlag
from tetris_game import Tetris
from tetris_rng import PieceRandom

log = logging.getLogger("tetris")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Falling-block puzzle for the terminal")
    p.add_argument("--ui", choices=("term", "window"), help="terminal (default) or pygame window")
    p.add_argument("--seed", type=int, help="replay a fixed piece sequence")
    p.add_argument("--tick-ms", type=int, help="gravity interval in milliseconds")
    p.add_argument("--cell-size", type=int, help="pixel size of a cell in the window ui")
    p.add_argument("--log-file", help="write logs here (the terminal is busy drawing)")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return p.parse_args(argv)


def configure_logging():
    root = logging.getLogger()
    if CONFIG["LOG_FILE"]:
        handler = logging.FileHandler(CONFIG["LOG_FILE"])
        handler.setFormatter(logging.Formatter("%(asctime)s %(threadName)s %(name)s %(levelname)s %(message)s"))
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)
    root.setLevel(str(CONFIG["LOG_LEVEL"]).upper())


def play(renderer, read_key):
    flag = StateFlag()
    game = Tetris(PieceRandom(CONFIG["SEED"]), renderer=renderer, flag=flag)
    EventLoop(game, flag, read_key, CONFIG["TICK_MS"]).run()


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    apply_overrides(vars(parse_args(argv)))
    configure_logging()
    log.info("starting %s ui, seed=%s, tick=%dms", CONFIG["UI"], CONFIG["SEED"], CONFIG["TICK_MS"])
    if CONFIG["UI"] == "window":
        import tetris_render as frontend
    else:
        import tetris_term as frontend
    frontend.run(play)
    return 0


if __name__ == '__main__':
    sys.exit(main())
