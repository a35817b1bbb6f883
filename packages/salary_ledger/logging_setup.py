"""Logging for the ``salary_ledger`` package.

Modules log through ``get_logger("salary_ledger.<module>")`` and stay silent
until the CLI calls :func:`configure_logging`. The level comes from
``--log-level``, then ``SALARY_LEDGER_LOG_LEVEL``, then INFO.
"""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER = "salary_ledger"
LEVEL_ENV_VAR = "SALARY_LEDGER_LOG_LEVEL"

_root = logging.getLogger(ROOT_LOGGER)
_root.addHandler(logging.NullHandler())

_console = logging.StreamHandler(sys.stderr)
_console.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level name, number or numeric string into a logging level.

    Unknown names fall back to INFO.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(level: int | str | None = None) -> None:
    """Send package logs to stderr. Calling again only changes the level."""

    _root.setLevel(resolve_level(level))
    if _console not in _root.handlers:
        _root.addHandler(_console)
    _root.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["LEVEL_ENV_VAR", "ROOT_LOGGER", "configure_logging", "get_logger", "resolve_level"]
