"""Logging de la CLI.

La librería solo usa `logging.getLogger(__name__)`; quien la embebe decide
handlers y niveles. La CLI instala aquí un `RichHandler` sobre stderr.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAMES = ("core", "adapters", "cli")


def resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level!r}")
    return resolved


def configure_logging(level: str | int = "WARNING", *, console: Console | None = None) -> None:
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logging.basicConfig(level=resolve_level(level), handlers=[handler], force=True)
    # httpx loguea cada request a INFO; solo interesa en modo DEBUG.
    if resolve_level(level) > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
