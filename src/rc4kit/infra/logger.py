from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "rc4kit"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"


def setup_logging(
    level: str | int = "INFO",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Calling this again replaces the handler installed by a previous call, so
    the level and stream can be changed without duplicating output.

    Args:
        level: Logging level name (``"DEBUG"``, ``"INFO"``...) or number.
        stream: Destination stream. Defaults to ``sys.stderr``.

    Returns:
        The configured ``rc4kit`` logger.

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    if isinstance(level, str):
        name = level.upper()
        resolved = logging.getLevelName(name)
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_rc4kit_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    handler._rc4kit_handler = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
