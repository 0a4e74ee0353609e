"""Package logger and the handlers attached for the duration of a publish run."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

_LOGGER_NAME = "docpublish"
_CONSOLE_FORMAT = "[docpublish] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the docpublish hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


@contextmanager
def publish_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> Iterator[logging.Logger]:
    """Attach run-scoped handlers to the docpublish logger.

    ``verbose`` adds a console handler at DEBUG; ``log_file`` appends INFO
    (DEBUG when verbose) records to a UTF-8 file. Handlers and the logger level
    are restored when the run ends, and records keep propagating to whatever
    the host configured. With neither option the logger is left untouched.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if not verbose and log_file is None:
        yield logger
        return

    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = []
    if verbose:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        handlers.append(console)
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(sink)

    previous_level = logger.level
    logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    try:
        yield logger
    finally:
        for handler in handlers:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(previous_level)


__all__ = ["get_logger", "publish_logging"]
