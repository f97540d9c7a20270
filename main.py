"""Main CLI entry-point."""
from __future__ import annotations

import asyncio
import shutil
import sys

from core.logging.config import bootstrap_logging, shutdown_logging
from config import settings

_BRIGHT_GREEN = "\033[1;92m"
_CYAN = "\033[96m"
_RESET = "\033[0m"


def _g(s: str) -> str:
    return f"{_BRIGHT_GREEN}{s}{_RESET}"


def _c(s: str) -> str:
    return f"{_CYAN}{s}{_RESET}"


_LOGO = r"""
  ██╗      ██████╗ ██╗         ███████╗████████╗ █████╗ ████████╗███████╗
  ██║     ██╔═══██╗██║         ██╔════╝╚══██╔══╝██╔══██╗╚══██╔══╝██╔════╝
  ██║     ██║   ██║██║         ███████╗   ██║   ███████║   ██║   ███████╗
  ██║     ██║   ██║██║         ╚════██║   ██║   ██╔══██║   ██║   ╚════██║
  ███████╗╚██████╔╝███████╗    ███████║   ██║   ██║  ██║   ██║   ███████║
  ╚══════╝ ╚═════╝ ╚══════╝    ╚══════╝   ╚═╝   ╚═╝  ╚═╝   ╚═╝   ╚══════╝
"""


def _print_logo() -> None:
    cols = shutil.get_terminal_size(fallback=(100, 20)).columns
    div = "═" * min(cols, 80)
    print(_g(div))
    for line in _LOGO.splitlines():
        print(_g(line))
    print(_c("  Matchups, builds, runes and skill orders from Lolalytics"))
    print(_g(div))


def main(argv: list[str]) -> int:
    settings.validate()
    settings.create_directories()
    bootstrap_logging(
        service="stats",
        level=settings.LOG_LEVEL,
        log_dir=settings.LOG_DIR,
        log_file_name="stats.jsonl",
    )
    try:
        # Lazy import keeps --help fast and logging configured before any module logs
        from presentation.cli import StatsCommand

        if "--json" not in argv:
            _print_logo()
        return asyncio.run(StatsCommand().execute(argv))
    finally:
        shutdown_logging()


def run() -> None:
    """Console-script entry point."""
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
