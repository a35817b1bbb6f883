import json
from pathlib import Path

from typer.testing import CliRunner

from salary_ledger.cli import app
from salary_ledger.settings_store import budget_path, load_budget

runner = CliRunner()


def _lines(output: str) -> list[list[str]]:
    return [line.split("\t") for line in output.strip().splitlines()]


def _as_dict(output: str) -> dict[str, str]:
    return {cells[0]: cells[1] for cells in _lines(output)}


def test_no_subcommand_shows_help():
    result = runner.invoke(app, [])
    assert "summary" in result.output


def test_summary(sample_csv: Path):
    result = runner.invoke(app, ["summary", "--csv-path", str(sample_csv)])
    assert result.exit_code == 0, result.output
    data = _as_dict(result.output)
    assert data["period"] == "2025-11"
    assert data["range"] == "23 Nov - 22 Dec"
    assert data["day"] == "4/30"
    assert data["days_remaining"] == "27"
    assert data["daily_pool_spent"] == "1250.00"
    assert data["monthly_pool_spent"] == "20500.00"
    assert data["mandatory_spent"] == "20000.00"
    assert data["daily_budget"] == "1620.37"
    assert data["status"] == "ok"
    assert data["surplus_or_deficit"] == "60000.00"
    assert (data["transactions"], data["counted"], data["excluded"]) == ("8", "6", "2")


def test_summary_reads_source_from_env(sample_csv: Path, monkeypatch):
    monkeypatch.setenv("SALARY_LEDGER_CSV", str(sample_csv))
    result = runner.invoke(app, ["summary"])
    assert result.exit_code == 0, result.output
    assert _as_dict(result.output)["period"] == "2025-11"


def test_summary_without_source_fails():
    result = runner.invoke(app, ["summary"])
    assert result.exit_code == 1
    assert "Error: No statement source" in result.output


def test_missing_csv_fails(tmp_path: Path):
    result = runner.invoke(app, ["periods", "--csv-path", str(tmp_path / "missing.csv")])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_periods(sample_csv: Path):
    result = runner.invoke(app, ["periods", "--csv-path", str(sample_csv)])
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [
        ["2025-11", "23 Nov - 22 Dec", "21750.00", "150000.00", "1250.00", "20500.00", "20000.00"],
        ["2025-10", "23 Oct - 22 Nov", "150.50", "0.00", "150.50", "0.00", "0.00"],
    ]


def test_days_defaults_to_current_period(sample_csv: Path):
    result = runner.invoke(app, ["days", "--csv-path", str(sample_csv)])
    assert result.exit_code == 0, result.output
    assert [cells[0] for cells in _lines(result.output)] == [
        "2025-11-26",
        "2025-11-25",
        "2025-11-24",
        "2025-11-23",
    ]


def test_days_all_lists_whole_period(sample_csv: Path):
    result = runner.invoke(app, ["days", "2025-10", "--all", "--csv-path", str(sample_csv)])
    assert result.exit_code == 0, result.output
    rows = _lines(result.output)
    assert len(rows) == 31
    assert rows[0][0] == "2025-10-23"
    assert rows[-1] == ["2025-11-22", "150.50", "0.00", "150.50", "0.00", "0.00"]


def test_days_rejects_bad_period(sample_csv: Path):
    result = runner.invoke(app, ["days", "2025-13", "--csv-path", str(sample_csv)])
    assert result.exit_code == 1
    assert "invalid period key" in result.output


def test_categories_for_period(sample_csv: Path):
    result = runner.invoke(
        app, ["categories", "--period", "2025-11", "--top", "1", "--csv-path", str(sample_csv)]
    )
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [["Переводы", "20000.00", "92.0", "1"]]


def test_categories_all_time(sample_csv: Path):
    result = runner.invoke(app, ["categories", "--csv-path", str(sample_csv)])
    assert result.exit_code == 0, result.output
    assert [cells[0] for cells in _lines(result.output)] == [
        "Переводы",
        "Супермаркеты",
        "Транспорт",
        "Рестораны",
    ]


def test_transactions_excluded_show_reason(sample_csv: Path):
    result = runner.invoke(app, ["transactions", "--excluded", "--csv-path", str(sample_csv)])
    assert result.exit_code == 0, result.output
    rows = _lines(result.output)
    assert [r[-1] for r in rows] == ["Refund/compensation", "Transfers category"]


def test_transactions_for_period(sample_csv: Path):
    result = runner.invoke(
        app, ["transactions", "--period", "2025-10", "--csv-path", str(sample_csv)]
    )
    assert result.exit_code == 0, result.output
    [tx] = _lines(result.output)
    assert tx[1:] == ["2025-11-22 14:30:00", "-150.50", "Рестораны", "daily", "Кафе Пример"]


def test_custom_rules_file(sample_csv: Path, tmp_path: Path):
    rules = tmp_path / "rules.json"
    rules.write_text(
        json.dumps({"daily_categories": ["Супермаркеты", "Рестораны", "Фастфуд", "Кафе", "Транспорт"]}),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["periods", "--csv-path", str(sample_csv), "--rules", str(rules)])
    assert result.exit_code == 0, result.output
    nov = _lines(result.output)[0]
    assert nov[4:6] == ["1750.00", "20000.00"]


def test_config_set_persists_and_show_reads_back():
    result = runner.invoke(app, ["config-set", "--income", "200000", "--housing", "40000"])
    assert result.exit_code == 0, result.output
    assert budget_path().exists()
    assert load_budget().income == 200000

    shown = _as_dict(runner.invoke(app, ["config-show"]).output)
    assert shown["income"] == "200000.00"
    assert shown["housing"] == "40000.00"
    assert shown["subscriptions"] == "2000.00"
    assert shown["mandatory_total"] == "62000.00"


def test_config_set_rejects_negative_values():
    result = runner.invoke(app, ["config-set", "--income=-5"])
    assert result.exit_code == 1
    assert "invalid budget settings" in result.output
    assert not budget_path().exists()


def test_config_set_requires_a_change():
    result = runner.invoke(app, ["config-set"])
    assert result.exit_code == 1


def test_config_changes_feed_summary(sample_csv: Path):
    runner.invoke(app, ["config-set", "--daily-target", "1000"])
    result = runner.invoke(app, ["summary", "--csv-path", str(sample_csv)])
    assert _as_dict(result.output)["daily_budget"] == f"{(1000 * 30 - 1250) / 27:.2f}"


def test_config_reset_keeps_paid_debt():
    runner.invoke(app, ["config-set", "--income", "1", "--paid-debt", "5000", "--food-pool-budget", "7"])
    result = runner.invoke(app, ["config-reset"])
    assert result.exit_code == 0, result.output
    cfg = load_budget()
    assert cfg.income == 150000
    assert cfg.paid_debt == 5000
    assert cfg.food_pool_budget == 7
