"""Console output and debug logging (Rich).

Two channels:
- `console` prints the human-readable status lines the user follows, with
  the `info`/`success`/`warning`/`error` styles of `THEME`.
- The stdlib `logging` tree under `add_host` carries debug tracing
  (request construction, raw responses) through a `RichHandler`, enabled
  only in debug mode.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAME = "add_host"

THEME = Theme(
    {
        "info": "blue",
        "success": "green",
        "warning": "yellow",
        "error": "red",
        "debug": "magenta",
    }
)

console = Console(theme=THEME)


def get_logger(name: str) -> logging.Logger:
    """Logger under the `add_host` hierarchy for a module name."""

    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(debug: bool = False, target: Console | None = None) -> logging.Logger:
    """Install a single RichHandler on the `add_host` logger.

    Safe to call more than once: previous handlers are replaced.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=target or console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
    return logger

