"""In-memory ledger: the transaction set, budget settings and derived queries.

:class:`LedgerStore` holds one immutable snapshot of the parsed transactions
(replaced whole, never edited in place) plus the user's
:class:`~salary_ledger.models.BudgetConfig`. Every aggregate is computed on
demand from the counted (non-filtered) transactions; nothing is cached, so
the same snapshot and key always produce the same result.

Aggregation rules shared by period and day views:

- expense totals sum ``abs(amount)``; income totals sum ``amount``;
- ``daily_pool_spent`` is the ``daily`` pool only;
- ``monthly_pool_spent`` is every expense *outside* the daily pool, so the
  two always add up to total expenses;
- ``mandatory_spent`` repeats the ``mandatory`` share separately.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from typing import Any

from . import projector
from .logging_setup import get_logger
from .models import (
    DEFAULT_BUDGET,
    BudgetConfig,
    CategoryData,
    ClassificationRules,
    CurrentPeriodStats,
    DailyData,
    LedgerCounts,
    LedgerOverview,
    MonthlyData,
    Transaction,
)
from .parser import parse_statement
from .rules import DEFAULT_RULES
from .salary_calendar import (
    contains,
    day_index_within,
    day_key_of,
    length_of,
    period_days,
    period_key_of,
    range_of,
)
from .source import StatementSourceError

_logger = get_logger("salary_ledger.ledger")


# ---------------------------------------------------------------------------
# Pure aggregation helpers
# ---------------------------------------------------------------------------


def _spent(txs: Iterable[Transaction]) -> float:
    return sum(abs(t.amount) for t in txs)


def _pool_split(expenses: Sequence[Transaction]) -> tuple[float, float, float]:
    """Return ``(daily, monthly_complement, mandatory)`` spend for expenses."""

    daily = _spent(t for t in expenses if t.pool == "daily")
    monthly = _spent(t for t in expenses if t.pool != "daily")
    mandatory = _spent(t for t in expenses if t.pool == "mandatory")
    return daily, monthly, mandatory


def category_breakdown(txs: Iterable[Transaction]) -> list[CategoryData]:
    """Group by category, largest total first.

    Ties keep the order in which categories were first seen.
    """

    groups: dict[str, list[float]] = {}
    for tx in txs:
        entry = groups.setdefault(tx.category, [0.0, 0])
        entry[0] += abs(tx.amount)
        entry[1] += 1

    total = sum(amount for amount, _ in groups.values())
    result = [
        CategoryData(
            name=name,
            amount=amount,
            percentage=(amount / total) * 100 if total > 0 else 0.0,
            count=int(count),
        )
        for name, (amount, count) in groups.items()
    ]
    return sorted(result, key=lambda c: c.amount, reverse=True)


def _monthly_data(key: str, txs: Sequence[Transaction]) -> MonthlyData:
    expenses = [t for t in txs if t.type == "expense"]
    daily, monthly, mandatory = _pool_split(expenses)
    return MonthlyData(
        month=key,
        total_expenses=_spent(expenses),
        total_income=sum(t.amount for t in txs if t.type == "income"),
        daily_pool_spent=daily,
        monthly_pool_spent=monthly,
        mandatory_spent=mandatory,
        categories=tuple(category_breakdown(expenses)),
    )


def _daily_data(key: str, txs: Sequence[Transaction]) -> DailyData:
    expenses = [t for t in txs if t.type == "expense"]
    daily, monthly, mandatory = _pool_split(expenses)
    return DailyData(
        date=key,
        expenses=_spent(expenses),
        income=sum(t.amount for t in txs if t.type == "income"),
        daily_pool_spent=daily,
        monthly_pool_spent=monthly,
        mandatory_spent=mandatory,
        categories=tuple(category_breakdown(expenses)),
    )


def _group_by(txs: Iterable[Transaction], key: Callable[[Transaction], str]) -> dict[str, list[Transaction]]:
    groups: dict[str, list[Transaction]] = {}
    for tx in txs:
        groups.setdefault(key(tx), []).append(tx)
    return groups


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class LedgerStore:
    """Transaction snapshot, budget settings and the query surface over them."""

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        config: BudgetConfig | None = None,
        *,
        rules: ClassificationRules = DEFAULT_RULES,
    ) -> None:
        self._transactions: tuple[Transaction, ...] = tuple(transactions)
        self._config: BudgetConfig = config if config is not None else DEFAULT_BUDGET
        self.rules = rules

        self.is_loading = False
        self.error: str | None = None

        # Selection state owned by the presentation layer; not used by queries.
        self.selected_period: str | None = None
        self.selected_day: str | None = None

    # ---- state -------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    @property
    def config(self) -> BudgetConfig:
        return self._config

    def set_transactions(self, transactions: Iterable[Transaction]) -> None:
        self._transactions = tuple(transactions)

    def replace_config(self, config: BudgetConfig) -> None:
        self._config = config

    def update_config(self, **fields: Any) -> BudgetConfig:
        """Replace the named config fields wholesale and return the new config.

        Unknown field names and invalid values raise pydantic's
        ``ValidationError``; the current config is left unchanged then.
        """

        data = self._config.model_dump()
        data.update(fields)
        self._config = BudgetConfig.model_validate(data)
        return self._config

    def reset_config(self) -> BudgetConfig:
        """Restore income, mandatory payments, daily target and total debt.

        Paid debt and both pool budgets keep their current values.
        """

        return self.update_config(
            income=DEFAULT_BUDGET.income,
            mandatory=DEFAULT_BUDGET.mandatory,
            daily_target=DEFAULT_BUDGET.daily_target,
            total_debt=DEFAULT_BUDGET.total_debt,
        )

    def select_period(self, key: str | None) -> None:
        self.selected_period = key
        self.selected_day = None

    def select_day(self, key: str | None) -> None:
        self.selected_day = key

    def load(self, fetch: Callable[[], str]) -> bool:
        """Fetch statement text, parse it and replace the transaction set.

        On failure the previous transactions stay in place, ``error`` holds a
        user-facing message and ``False`` is returned. Loads are not guarded
        against overlap; callers serialize them.
        """

        self.is_loading = True
        try:
            text = fetch()
            parsed = parse_statement(text, self.rules)
        except (OSError, UnicodeDecodeError, StatementSourceError) as e:
            _logger.error("Failed to load statement: %s", e)
            self.error = str(e) or e.__class__.__name__
            return False
        finally:
            self.is_loading = False

        self._transactions = tuple(parsed)
        self.error = None
        counts = self.counts()
        _logger.info("Loaded %d transactions (%d counted, %d excluded)", counts.total, counts.counted, counts.excluded)
        return True

    # ---- queries -----------------------------------------------------------

    def filtered(self) -> list[Transaction]:
        """Transactions that count toward budget totals."""

        return [t for t in self._transactions if not t.is_filtered]

    def excluded(self) -> list[Transaction]:
        """Transactions kept only for audit, each with a ``filter_reason``."""

        return [t for t in self._transactions if t.is_filtered]

    def counts(self) -> LedgerCounts:
        return LedgerCounts(total=len(self._transactions), counted=len(self.filtered()))

    @staticmethod
    def category_breakdown(txs: Iterable[Transaction]) -> list[CategoryData]:
        return category_breakdown(txs)

    def period_breakdown(self) -> list[MonthlyData]:
        """One entry per salary period with counted transactions, newest first."""

        groups = _group_by(self.filtered(), lambda t: period_key_of(t.date))
        result = [_monthly_data(key, txs) for key, txs in groups.items()]
        return sorted(result, key=lambda m: m.month, reverse=True)

    def period_data(self, key: str) -> MonthlyData:
        """Totals for one period; zero-filled when nothing falls inside it."""

        range_of(key)  # validates the key
        return _monthly_data(key, [t for t in self.filtered() if period_key_of(t.date) == key])

    def day_breakdown(self, period_key: str) -> list[DailyData]:
        """One entry per day of ``period_key`` with counted transactions, newest first."""

        inside = [t for t in self.filtered() if contains(t.date, period_key)]
        groups = _group_by(inside, lambda t: day_key_of(t.date))
        result = [_daily_data(key, txs) for key, txs in groups.items()]
        return sorted(result, key=lambda d: d.date, reverse=True)

    def daily_series(self, period_key: str) -> list[DailyData]:
        """Every day of the period in calendar order, empty days zero-filled."""

        by_day = {d.date: d for d in self.day_breakdown(period_key)}
        days = (day_key_of(d) for d in period_days(period_key))
        return [by_day.get(key) or DailyData(date=key) for key in days]

    def _latest_date(self, today: datetime | None = None) -> datetime:
        filtered = self.filtered()
        if filtered:
            return max(filtered, key=lambda t: t.date).date
        return today if today is not None else datetime.now()

    def current_period(self, today: datetime | None = None) -> str:
        """Period of the newest counted transaction, or of ``today`` when empty."""

        return period_key_of(self._latest_date(today))

    def current_period_stats(self, today: datetime | None = None) -> CurrentPeriodStats:
        latest = self._latest_date(today)
        current = period_key_of(latest)
        current_day = day_index_within(latest)

        expenses = [t for t in self.filtered() if t.type == "expense" and contains(t.date, current)]
        daily, monthly, mandatory = _pool_split(expenses)

        days_in_month = length_of(current)
        days_remaining = days_in_month - current_day + 1

        return CurrentPeriodStats(
            daily_pool_spent=daily,
            monthly_pool_spent=monthly,
            mandatory_spent=mandatory,
            days_remaining=days_remaining,
            daily_budget=projector.projected_daily_budget(
                self._config.daily_target, days_in_month, daily, days_remaining
            ),
            current_month=current,
            current_day=current_day,
            days_in_month=days_in_month,
        )

    def current_period_transactions(self) -> list[Transaction]:
        """Counted expenses of the current period, newest first."""

        filtered = self.filtered()
        if not filtered:
            return []
        current = self.current_period()
        expenses = [t for t in filtered if t.type == "expense" and contains(t.date, current)]
        return sorted(expenses, key=lambda t: t.date, reverse=True)

    def overview(self, *, recent: int = 6, top: int = 8) -> LedgerOverview:
        """All-time totals plus the newest periods and the biggest categories."""

        filtered = self.filtered()
        expenses = [t for t in filtered if t.type == "expense"]
        daily, monthly, _ = _pool_split(expenses)
        return LedgerOverview(
            daily_pool_total=daily,
            monthly_pool_total=monthly,
            income_total=sum(t.amount for t in filtered if t.type == "income"),
            recent_periods=tuple(self.period_breakdown()[:recent]),
            top_categories=tuple(category_breakdown(expenses)[:top]),
        )

    # ---- projections -------------------------------------------------------

    def pool_projection(self, today: datetime | None = None) -> projector.PoolProjection:
        stats = self.current_period_stats(today)
        income = self.period_data(stats.current_month).total_income
        return projector.project_pools(self._config, stats, period_income=income)

    def budget_structure(self, today: datetime | None = None) -> projector.BudgetStructure:
        return projector.budget_structure(self._config, length_of(self.current_period(today)))

    def debt_progress(self) -> projector.DebtProgress:
        return projector.debt_progress(self._config)


__all__ = ["LedgerStore", "category_breakdown"]
