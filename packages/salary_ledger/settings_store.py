"""Persist the user's :class:`BudgetConfig` between sessions.

Layout (relative to the state root, default ``./.salary_ledger``)::

    <state_root>/budget.json

File shape::

    {"schema_version": 1, "budget": {...BudgetConfig fields...}}

A broken or outdated file never blocks startup: it is logged at WARNING and
the defaults are used instead. Writes target ``.tmp`` first and then
``os.replace`` into place.
"""

from __future__ import annotations

import contextlib
import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .logging_setup import get_logger
from .models import DEFAULT_BUDGET, BudgetConfig

# Bump only when the on-disk JSON shape changes.
SCHEMA_VERSION: int = 1

BUDGET_FILENAME = "budget.json"

_logger = get_logger("salary_ledger.settings_store")


def get_state_root() -> Path:
    """Return the state directory.

    Default: ``./.salary_ledger`` under the current working directory.
    Override: ``SALARY_LEDGER_STATE_DIR`` environment variable.
    """

    root = os.getenv("SALARY_LEDGER_STATE_DIR")
    if root and root.strip():
        return Path(root).expanduser().resolve()
    return (Path.cwd() / ".salary_ledger").resolve()


def budget_path() -> Path:
    return get_state_root() / BUDGET_FILENAME


def load_budget(path: str | os.PathLike[str] | None = None) -> BudgetConfig:
    p = Path(path) if path is not None else budget_path()
    if not p.exists():
        return DEFAULT_BUDGET

    try:
        data: Any = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        _logger.warning("Ignoring unreadable budget settings at %s: %s", os.fspath(p), e)
        return DEFAULT_BUDGET

    if not isinstance(data, dict) or data.get("schema_version") != SCHEMA_VERSION:
        _logger.warning("Ignoring budget settings at %s: unsupported schema", os.fspath(p))
        return DEFAULT_BUDGET

    try:
        return BudgetConfig.model_validate(data.get("budget"))
    except ValidationError as e:
        _logger.warning(
            "Ignoring invalid budget settings at %s (%d errors)", os.fspath(p), e.error_count()
        )
        return DEFAULT_BUDGET


def save_budget(config: BudgetConfig, path: str | os.PathLike[str] | None = None) -> Path:
    """Write ``config`` atomically and return the file path."""

    p = Path(path) if path is not None else budget_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(p.suffix + ".tmp")

    payload = {"schema_version": SCHEMA_VERSION, "budget": config.model_dump(mode="json")}
    try:
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, p)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise
    _logger.debug("Saved budget settings to %s", os.fspath(p))
    return p


__all__ = [
    "BUDGET_FILENAME",
    "SCHEMA_VERSION",
    "budget_path",
    "get_state_root",
    "load_budget",
    "save_budget",
]
