import json
import os
from pathlib import Path

import pytest

from salary_ledger.models import DEFAULT_BUDGET, BudgetConfig, MandatoryPayments
from salary_ledger.settings_store import (
    SCHEMA_VERSION,
    budget_path,
    get_state_root,
    load_budget,
    save_budget,
)


def test_state_root_follows_env(_isolate_state_dir: Path):
    assert get_state_root() == _isolate_state_dir.resolve()
    assert budget_path() == _isolate_state_dir.resolve() / "budget.json"


def test_state_root_defaults_to_cwd(monkeypatch, tmp_path):
    monkeypatch.delenv("SALARY_LEDGER_STATE_DIR")
    monkeypatch.chdir(tmp_path)
    assert get_state_root() == (tmp_path / ".salary_ledger").resolve()


def test_missing_file_yields_defaults():
    assert load_budget() == DEFAULT_BUDGET


def test_save_then_load():
    cfg = BudgetConfig(
        income=200000,
        paid_debt=1000,
        mandatory=MandatoryPayments(housing=40000, subscriptions=0, debt_payment=15000),
    )
    path = save_budget(cfg)
    assert path == budget_path()
    assert load_budget() == cfg

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["schema_version"] == SCHEMA_VERSION
    assert on_disk["budget"]["mandatory"]["housing"] == 40000
    assert not path.with_suffix(".json.tmp").exists()


def test_save_creates_missing_directories(tmp_path):
    target = tmp_path / "nested" / "dir" / "budget.json"
    save_budget(DEFAULT_BUDGET, target)
    assert load_budget(target) == DEFAULT_BUDGET


def test_corrupt_file_falls_back_to_defaults():
    p = budget_path()
    p.write_text("{not json", encoding="utf-8")
    assert load_budget() == DEFAULT_BUDGET


def test_schema_mismatch_falls_back_to_defaults():
    p = budget_path()
    p.write_text(json.dumps({"schema_version": 99, "budget": {"income": 1}}), encoding="utf-8")
    assert load_budget() == DEFAULT_BUDGET


def test_invalid_values_fall_back_to_defaults():
    p = budget_path()
    p.write_text(
        json.dumps({"schema_version": SCHEMA_VERSION, "budget": {"income": -5}}),
        encoding="utf-8",
    )
    assert load_budget() == DEFAULT_BUDGET


def test_partial_budget_fills_defaults():
    p = budget_path()
    p.write_text(
        json.dumps({"schema_version": SCHEMA_VERSION, "budget": {"daily_target": 900}}),
        encoding="utf-8",
    )
    cfg = load_budget()
    assert cfg.daily_target == 900
    assert cfg.income == DEFAULT_BUDGET.income


def test_failed_write_leaves_previous_file(monkeypatch):
    save_budget(BudgetConfig(income=1))

    def _fail(src, dst):
        raise OSError("disk full")

    with monkeypatch.context() as m:
        m.setattr(os, "replace", _fail)
        with pytest.raises(OSError):
            save_budget(BudgetConfig(income=2))

    assert load_budget().income == 1
    assert not budget_path().with_suffix(".json.tmp").exists()
