from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler, QueueHandler, QueueListener
from queue import Queue
from pathlib import Path
from typing import Optional

from .levels import register_levels, to_level
from .formatter import ConsoleFormatter, JSONFormatter

_listener: QueueListener | None = None


def _console_handler(default_level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    console_level = os.getenv("LOG_CONSOLE_LEVEL", "")
    handler.setLevel(to_level(console_level) if console_level else default_level)
    handler.setFormatter(ConsoleFormatter())
    return handler


def _start_file_listener(path: Path, level: int, max_bytes: int, backup_count: int) -> QueueHandler:
    global _listener
    path.parent.mkdir(parents=True, exist_ok=True)
    json_handler = RotatingFileHandler(str(path), maxBytes=max_bytes, backupCount=backup_count)
    json_handler.setLevel(level)
    json_handler.setFormatter(JSONFormatter())
    q: Queue[logging.LogRecord] = Queue(-1)
    _listener = QueueListener(q, json_handler, respect_handler_level=True)
    _listener.start()
    return QueueHandler(q)


def bootstrap_logging(
    *,
    service: str = "stats",
    level: str | int | None = None,
    log_dir: Optional[Path] = None,
    log_file_name: str = "stats.jsonl",
    console: Optional[bool] = None,
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> None:
    """Configure the root logger: optional console output plus JSON lines on disk.

    File writes go through a queue listener so a slow disk never stalls the
    event loop that serves lookups.
    """
    register_levels()
    shutdown_logging()
    root = logging.getLogger()
    root.handlers.clear()
    lvl = to_level(level or os.getenv("LOG_LEVEL", "INFO"))
    root.setLevel(lvl)

    if console is None:
        console = os.getenv("LOG_CONSOLE", "false").strip().lower() == "true"
    if console:
        root.addHandler(_console_handler(lvl))

    if log_dir:
        root.addHandler(_start_file_listener(log_dir / log_file_name, lvl, max_bytes, backup_count))

    logging.getLogger("httpx").setLevel(max(lvl, logging.WARNING))
    logging.getLogger(__name__).debug("logging ready", extra={"service": service})


def shutdown_logging() -> None:
    global _listener
    if _listener is not None:
        _listener.stop()
        _listener = None
