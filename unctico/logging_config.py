"""
Logging setup for Unctico.

Modules log through ``logging.getLogger(__name__)``; this installs a single
rich handler on the package logger so CLI and server output share a format.

Usage:
    from unctico.logging_config import setup_logging

    setup_logging("INFO")
"""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "unctico"


def setup_logging(level: Union[str, int] = "WARNING", console: Console | None = None) -> logging.Logger:
  """
  Configure the package logger.

  Safe to call more than once; later calls only change the level.

  Args:
    level: Logging level name or number
    console: Rich console to write to (defaults to stderr)

  Returns:
    The configured package logger
  """
  logger = logging.getLogger(PACKAGE_LOGGER)
  if isinstance(level, str):
    level = logging.getLevelName(level.upper())
    if not isinstance(level, int):
      level = logging.WARNING
  logger.setLevel(level)

  if not any(isinstance(h, RichHandler) for h in logger.handlers):
    handler = RichHandler(
      console=console or Console(stderr=True),
      show_path=False,
      rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

  return logger
