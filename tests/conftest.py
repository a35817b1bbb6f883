"""Pytest configuration for test isolation.

Budget settings are persisted under a project-relative state directory
(``./.salary_ledger``). When tests run in the same working tree, a settings
file written by one test would leak into the next, so an autouse fixture
redirects the state root to a per-test temporary directory.

Statement-source environment variables are cleared for the same reason: a
developer's local ``SALARY_LEDGER_CSV`` must not change what tests see.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `salary_ledger` is importable
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
# Ensure `packages/` precedes the repo root on sys.path so local packages resolve first.
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]


@pytest.fixture(autouse=True)
def _isolate_state_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Force a per-test state root so tests don't share on-disk settings."""

    state_root = tmp_path / "state"
    state_root.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("SALARY_LEDGER_STATE_DIR", os.fspath(state_root))
    for name in ("SALARY_LEDGER_CSV", "SALARY_LEDGER_URL", "SALARY_LEDGER_RULES"):
        monkeypatch.delenv(name, raising=False)
    return state_root


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    from tests.helpers.statements import SAMPLE_STATEMENT

    path = tmp_path / "statement.csv"
    path.write_text(SAMPLE_STATEMENT, encoding="utf-8")
    return path
