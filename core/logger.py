"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/logger.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Logging setup for DokuMini. Console output goes to stderr so
                command output on stdout stays machine-readable; an optional
                log file, per-component levels and an SQL trace channel for
                the embedded store complete it.
------------------------------------------------------------------------------
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

APP_LOGGER_NAME = "dokumini"
SQL_CHANNEL = "db.sql"

DEFAULT_FORMAT = "%(asctime)s [%(levelname).4s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_BINARY_TYPES = (bytes, bytearray, memoryview)


def _level_from_name(name: str, fallback: Optional[int]) -> Optional[int]:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else fallback


def _build_handlers(log_file: Optional[str], console: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(path), encoding="utf-8"))
    return handlers


def reset_logging() -> None:
    """Detaches and closes every handler on the application root logger."""
    root = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    component_levels: Optional[Dict[str, str]] = None,
    console: bool = True
) -> None:
    """
    (Re)configures the 'dokumini' logger tree.

    Args:
        level: Level name for the application root (unknown names mean WARNING).
        log_file: Optional file receiving the same records as the console.
        component_levels: Overrides such as {"db": "DEBUG"}.
        console: Whether to attach the stderr handler.
    """
    reset_logging()

    root = logging.getLogger(APP_LOGGER_NAME)
    root.setLevel(_level_from_name(level, logging.WARNING))

    formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT)
    for handler in _build_handlers(log_file, console):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for component, cmp_level in (component_levels or {}).items():
        set_component_level(component, cmp_level)


def get_logger(name: str) -> logging.Logger:
    """Component logger below 'dokumini'; already qualified names pass through."""
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def set_component_level(component: str, level: str) -> None:
    """Overrides the level of one component. Unknown level names are ignored."""
    numeric_level = _level_from_name(level, None)
    if numeric_level is not None:
        get_logger(component).setLevel(numeric_level)


def _mask_params(params: Sequence) -> tuple:
    return tuple(f"<{len(p)} bytes>" if isinstance(p, _BINARY_TYPES) else p for p in params)


def log_sql_query(query: str, params: Optional[Sequence] = None, result_count: int = 0) -> None:
    """
    Traces one statement on 'dokumini.db.sql' at DEBUG level.
    Document payloads are logged by size only.
    """
    logger = get_logger(SQL_CHANNEL)
    if not logger.isEnabledFor(logging.DEBUG):
        return
    parts = [f"SQL: {' '.join(query.split())}"]
    if params:
        parts.append(f"PARAMS: {_mask_params(params)}")
    parts.append(f"RESULTS: {result_count}")
    logger.debug(" | ".join(parts))
