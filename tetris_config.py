"""Runtime tunables"""
import os
from typing import Any, Dict, Mapping, Optional

CONFIG: Dict[str, Any] = {
    "TICK_MS": 1000,
    "SEED": None,
    "UI": "term",
    "CELL_SIZE": 28,
    "LOG_FILE": None,
    "LOG_LEVEL": "WARNING",
}

_CASTS = {"TICK_MS": int, "SEED": int, "CELL_SIZE": int}


def _cast(key: str, value: Any) -> Any:
    if value is None or key not in _CASTS:
        return value
    return _CASTS[key](value)


def load_env(environ: Optional[Mapping[str, str]] = None) -> None:
    """Pick up TETRIS_<KEY> variables, e.g. TETRIS_TICK_MS=500."""
    environ = os.environ if environ is None else environ
    for key in CONFIG:
        raw = environ.get("TETRIS_" + key)
        if raw is not None and raw != "":
            CONFIG[key] = _cast(key, raw)


def apply_overrides(values: Mapping[str, Any]) -> None:
    for key, value in values.items():
        key = key.upper()
        if key not in CONFIG:
            raise KeyError(f"unknown setting: {key}")
        if value is None:
            continue
        CONFIG[key] = _cast(key, value)
    if CONFIG["TICK_MS"] <= 0:
        raise ValueError("TICK_MS must be positive")
