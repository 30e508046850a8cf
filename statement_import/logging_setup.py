"""Logging for the ``statement_import`` package.

Library modules only call :func:`get_logger` and never attach handlers, so an
application embedding the pipeline decides where records go. The CLI calls
:func:`configure_logging` with the level from ``--log-level``; without one the
level comes from ``STATEMENT_IMPORT_LOG_LEVEL`` and then defaults to INFO.

Calling :func:`configure_logging` again swaps the CLI handler instead of
stacking a second one, so repeated invocations in one process (tests, a REPL)
do not duplicate output.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "statement_import"
LEVEL_ENV_VAR = "STATEMENT_IMPORT_LOG_LEVEL"

_HANDLER_NAME = "statement_import.cli"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def parse_level(level: int | str) -> int:
    """Turn ``"debug"``, ``"10"`` or ``10`` into a numeric level.

    Raises ``ValueError`` for names the ``logging`` module does not know.
    """

    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    if numeric is None:
        raise ValueError(f"unknown log level {level!r}")
    return numeric


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Route package records to ``stream`` (default: current ``sys.stderr``).

    An explicit ``level`` that cannot be parsed raises ``ValueError``. A bad
    ``STATEMENT_IMPORT_LOG_LEVEL`` falls back to INFO and is reported as a
    warning once the handler is in place. Returns the package logger.
    """

    bad_env: str | None = None
    if level is not None:
        resolved = parse_level(level)
    else:
        raw = os.getenv(LEVEL_ENV_VAR, "").strip()
        try:
            resolved = parse_level(raw) if raw else logging.INFO
        except ValueError:
            resolved, bad_env = logging.INFO, raw

    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        if h.get_name() == _HANDLER_NAME or isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False

    if bad_env is not None:
        logger.warning("configure_logging:invalid_level env=%s value=%r", LEVEL_ENV_VAR, bad_env)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``.

    Until something is configured the package logger carries a ``NullHandler``
    so records are not printed by logging's last-resort handler.
    """

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LEVEL_ENV_VAR", "PACKAGE_LOGGER", "configure_logging", "get_logger", "parse_level"]
