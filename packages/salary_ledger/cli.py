# ruff: noqa: I001
"""CLI for the ``salary_ledger`` package.

Every reporting command loads the statement (``--csv-path``/``--url`` or the
``SALARY_LEDGER_CSV``/``SALARY_LEDGER_URL`` environment variables), combines
it with the persisted budget settings and prints tab-separated lines.
Environment variables are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. Business logic lives in
``salary_ledger.ledger`` and related modules.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import OptionInfo

from .ledger import LedgerStore
from .logging_setup import configure_logging
from .models import CategoryData, MandatoryPayments, Transaction
from .rules import load_rules
from .salary_calendar import contains, format_period_label, parse_day_key, parse_period_key
from .settings_store import load_budget, save_budget
from .source import StatementSourceError, resolve_source


# ---- Small module-level helpers used by CLI commands -------------------------


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def _row(*cells: object) -> None:
    typer.echo("\t".join(_fmt(c) if isinstance(c, float) else str(c) for c in cells))


def _error(msg: str) -> int:
    print(f"Error: {msg}", file=sys.stderr)
    return 1


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


def _parse_today(value: str | None) -> datetime | None:
    if value is None:
        return None
    d = parse_day_key(value)
    return datetime(d.year, d.month, d.day)


def _open_ledger(csv_path: Path | None, url: str | None, rules_path: Path | None) -> LedgerStore:
    """Build a store from persisted settings and load the statement into it.

    Raises ``StatementSourceError`` when no source is configured or the load
    fails; rule-file problems propagate from :func:`load_rules`.
    """

    rules = load_rules(rules_path)
    fetch = resolve_source(csv_path, url)
    store = LedgerStore(config=load_budget(), rules=rules)
    if not store.load(fetch):
        raise StatementSourceError(store.error or "failed to load statement")
    return store


def _print_categories(categories: list[CategoryData] | tuple[CategoryData, ...]) -> None:
    for c in categories:
        _row(c.name, c.amount, f"{c.percentage:.1f}", c.count)


def _print_transaction(tx: Transaction, *, with_reason: bool = False) -> None:
    cells: list[object] = [
        tx.id,
        tx.date.strftime("%Y-%m-%d %H:%M:%S"),
        tx.amount,
        tx.category,
        tx.pool,
        tx.description,
    ]
    if with_reason:
        cells.append(tx.filter_reason or "")
    _row(*cells)


# ---- Command handlers --------------------------------------------------------


def cmd_summary(
    csv_path: Path | None, url: str | None, rules_path: Path | None, today: str | None
) -> int:
    try:
        today_dt = _parse_today(today)
        store = _open_ledger(csv_path, url, rules_path)
    except (StatementSourceError, OSError, ValueError, ValidationError) as e:
        return _error(str(e))

    stats = store.current_period_stats(today_dt)
    projection = store.pool_projection(today_dt)
    structure = store.budget_structure(today_dt)
    counts = store.counts()

    _row("period", stats.current_month)
    _row("range", format_period_label(stats.current_month))
    _row("day", f"{stats.current_day}/{stats.days_in_month}")
    _row("days_remaining", stats.days_remaining)
    _row("daily_pool_spent", stats.daily_pool_spent)
    _row("monthly_pool_spent", stats.monthly_pool_spent)
    _row("mandatory_spent", stats.mandatory_spent)
    _row("daily_budget", stats.daily_budget)
    _row("food_pool_remaining", projection.food_pool_remaining)
    _row("monthly_pool_remaining", projection.monthly_pool_remaining)
    _row("effective_daily_allowance", projection.effective_daily_allowance)
    _row("status", projection.status)
    _row("surplus_or_deficit", projection.surplus_or_deficit)
    if projection.realized_surplus_or_deficit is not None:
        _row("realized_surplus_or_deficit", projection.realized_surplus_or_deficit)
    _row("planned_daily_pool", structure.daily_pool)
    _row("planned_monthly_pool", structure.monthly_pool)
    _row("transactions", counts.total)
    _row("counted", counts.counted)
    _row("excluded", counts.excluded)
    return 0


def cmd_periods(csv_path: Path | None, url: str | None, rules_path: Path | None) -> int:
    try:
        store = _open_ledger(csv_path, url, rules_path)
    except (StatementSourceError, OSError, ValueError, ValidationError) as e:
        return _error(str(e))

    for m in store.period_breakdown():
        _row(
            m.month,
            format_period_label(m.month),
            m.total_expenses,
            m.total_income,
            m.daily_pool_spent,
            m.monthly_pool_spent,
            m.mandatory_spent,
        )
    return 0


def cmd_days(
    period: str | None,
    csv_path: Path | None,
    url: str | None,
    rules_path: Path | None,
    *,
    all_days: bool,
) -> int:
    try:
        if period is not None:
            parse_period_key(period)
        store = _open_ledger(csv_path, url, rules_path)
    except (StatementSourceError, OSError, ValueError, ValidationError) as e:
        return _error(str(e))

    key = period or store.current_period()
    days = store.daily_series(key) if all_days else store.day_breakdown(key)
    for d in days:
        _row(d.date, d.expenses, d.income, d.daily_pool_spent, d.monthly_pool_spent, d.mandatory_spent)
    return 0


def cmd_categories(
    period: str | None,
    csv_path: Path | None,
    url: str | None,
    rules_path: Path | None,
    *,
    top: int | None,
) -> int:
    try:
        if period is not None:
            parse_period_key(period)
        store = _open_ledger(csv_path, url, rules_path)
    except (StatementSourceError, OSError, ValueError, ValidationError) as e:
        return _error(str(e))

    if period is not None:
        categories = list(store.period_data(period).categories)
    else:
        categories = store.category_breakdown(t for t in store.filtered() if t.type == "expense")
    _print_categories(categories[:top] if top is not None else categories)
    return 0


def cmd_transactions(
    period: str | None,
    csv_path: Path | None,
    url: str | None,
    rules_path: Path | None,
    *,
    excluded: bool,
    current: bool,
) -> int:
    try:
        if period is not None:
            parse_period_key(period)
        store = _open_ledger(csv_path, url, rules_path)
    except (StatementSourceError, OSError, ValueError, ValidationError) as e:
        return _error(str(e))

    if excluded:
        txs = store.excluded()
    elif current:
        txs = store.current_period_transactions()
    else:
        txs = store.filtered()
    if period is not None:
        txs = [t for t in txs if contains(t.date, period)]
    for tx in txs:
        _print_transaction(tx, with_reason=excluded)
    return 0


def _print_config(store: LedgerStore) -> None:
    cfg = store.config
    _row("income", cfg.income)
    _row("housing", cfg.mandatory.housing)
    _row("subscriptions", cfg.mandatory.subscriptions)
    _row("debt_payment", cfg.mandatory.debt_payment)
    _row("mandatory_total", cfg.mandatory.total)
    _row("daily_target", cfg.daily_target)
    _row("total_debt", cfg.total_debt)
    _row("paid_debt", cfg.paid_debt)
    _row("food_pool_budget", cfg.food_pool_budget)
    _row("monthly_pool_budget", cfg.monthly_pool_budget)
    debt = store.debt_progress()
    _row("debt_remaining", debt.remaining)
    _row("debt_percent_paid", f"{debt.percent_paid:.1f}")


def cmd_config_show() -> int:
    _print_config(LedgerStore(config=load_budget()))
    return 0


def cmd_config_set(changes: dict[str, float], mandatory_changes: dict[str, float]) -> int:
    store = LedgerStore(config=load_budget())
    if not changes and not mandatory_changes:
        return _error("nothing to change; pass at least one option (see --help)")

    try:
        fields: dict[str, object] = dict(changes)
        if mandatory_changes:
            fields["mandatory"] = MandatoryPayments.model_validate(
                {**store.config.mandatory.model_dump(), **mandatory_changes}
            )
        store.update_config(**fields)
        save_budget(store.config)
    except ValidationError as e:
        return _error(f"invalid budget settings: {e.errors()[0].get('msg', e)}")
    except OSError as e:
        return _error(f"failed to save budget settings: {e}")

    _print_config(store)
    return 0


def cmd_config_reset() -> int:
    store = LedgerStore(config=load_budget())
    store.reset_config()
    try:
        save_budget(store.config)
    except OSError as e:
        return _error(f"failed to save budget settings: {e}")
    _print_config(store)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Salary-month budget ledger over a bank statement export. "
        "Loads settings from a local .env before running."
    ),
)


CSV_PATH_OPTION: OptionInfo = typer.Option(
    "--csv-path",
    help="Path to the semicolon-delimited statement export (falls back to SALARY_LEDGER_CSV).",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)

URL_OPTION: OptionInfo = typer.Option(
    "--url",
    help="URL of the statement export (falls back to SALARY_LEDGER_URL).",
)

RULES_OPTION: OptionInfo = typer.Option(
    "--rules",
    help="JSON file overriding the classification lists (falls back to SALARY_LEDGER_RULES).",
    dir_okay=False,
)

PERIOD_OPTION: OptionInfo = typer.Option(
    "--period",
    help="Salary period key YYYY-MM (the period starting on the 23rd of that month).",
)


@app.command("summary")
def summary_cmd(
    csv_path: Annotated[Path | None, CSV_PATH_OPTION] = None,
    url: Annotated[str | None, URL_OPTION] = None,
    rules_path: Annotated[Path | None, RULES_OPTION] = None,
    today: Annotated[
        str | None,
        typer.Option("--today", help="Reference day YYYY-MM-DD used when the ledger is empty."),
    ] = None,
) -> None:
    """Current period: spend per pool, daily budget and allowance status."""

    _exit(cmd_summary(csv_path, url, rules_path, today))


@app.command("periods")
def periods_cmd(
    csv_path: Annotated[Path | None, CSV_PATH_OPTION] = None,
    url: Annotated[str | None, URL_OPTION] = None,
    rules_path: Annotated[Path | None, RULES_OPTION] = None,
) -> None:
    """Totals per salary period, newest first."""

    _exit(cmd_periods(csv_path, url, rules_path))


@app.command("days")
def days_cmd(
    period: Annotated[str | None, typer.Argument(help="Period key YYYY-MM (default: current).")] = None,
    csv_path: Annotated[Path | None, CSV_PATH_OPTION] = None,
    url: Annotated[str | None, URL_OPTION] = None,
    rules_path: Annotated[Path | None, RULES_OPTION] = None,
    all_days: Annotated[
        bool, typer.Option("--all", help="List every day of the period in order, empty days included.")
    ] = False,
) -> None:
    """Totals per day of one salary period."""

    _exit(cmd_days(period, csv_path, url, rules_path, all_days=all_days))


@app.command("categories")
def categories_cmd(
    period: Annotated[str | None, PERIOD_OPTION] = None,
    csv_path: Annotated[Path | None, CSV_PATH_OPTION] = None,
    url: Annotated[str | None, URL_OPTION] = None,
    rules_path: Annotated[Path | None, RULES_OPTION] = None,
    top: Annotated[int | None, typer.Option("--top", min=1, help="Show only the N largest.")] = None,
) -> None:
    """Expense categories by amount (all time, or one period)."""

    _exit(cmd_categories(period, csv_path, url, rules_path, top=top))


@app.command("transactions")
def transactions_cmd(
    period: Annotated[str | None, PERIOD_OPTION] = None,
    csv_path: Annotated[Path | None, CSV_PATH_OPTION] = None,
    url: Annotated[str | None, URL_OPTION] = None,
    rules_path: Annotated[Path | None, RULES_OPTION] = None,
    excluded: Annotated[
        bool, typer.Option("--excluded", help="List excluded transactions with their reason.")
    ] = False,
    current: Annotated[
        bool, typer.Option("--current", help="Only expenses of the current period.")
    ] = False,
) -> None:
    """List transactions, newest first."""

    _exit(cmd_transactions(period, csv_path, url, rules_path, excluded=excluded, current=current))


@app.command("config-show")
def config_show_cmd() -> None:
    """Print the persisted budget settings."""

    _exit(cmd_config_show())


@app.command("config-set")
def config_set_cmd(
    income: Annotated[float | None, typer.Option(help="Declared monthly income.")] = None,
    daily_target: Annotated[float | None, typer.Option(help="Per-day spending target.")] = None,
    total_debt: Annotated[float | None, typer.Option(help="Total debt.")] = None,
    paid_debt: Annotated[float | None, typer.Option(help="Debt paid so far.")] = None,
    food_pool_budget: Annotated[float | None, typer.Option(help="Daily (food) pool ceiling.")] = None,
    monthly_pool_budget: Annotated[float | None, typer.Option(help="Monthly pool ceiling.")] = None,
    housing: Annotated[float | None, typer.Option(help="Mandatory payment: housing.")] = None,
    subscriptions: Annotated[float | None, typer.Option(help="Mandatory payment: subscriptions.")] = None,
    debt_payment: Annotated[float | None, typer.Option(help="Mandatory payment: debt.")] = None,
) -> None:
    """Change budget settings and persist them."""

    top_level = {
        "income": income,
        "daily_target": daily_target,
        "total_debt": total_debt,
        "paid_debt": paid_debt,
        "food_pool_budget": food_pool_budget,
        "monthly_pool_budget": monthly_pool_budget,
    }
    mandatory = {"housing": housing, "subscriptions": subscriptions, "debt_payment": debt_payment}
    _exit(
        cmd_config_set(
            {k: v for k, v in top_level.items() if v is not None},
            {k: v for k, v in mandatory.items() if v is not None},
        )
    )


@app.command("config-reset")
def config_reset_cmd() -> None:
    """Restore default income, mandatory payments, daily target and total debt."""

    _exit(cmd_config_reset())


@app.callback()
def _root(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (falls back to SALARY_LEDGER_LOG_LEVEL)."),
    ] = None,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging.
    """

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging(log_level)


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m salary_ledger.cli`
    app()
