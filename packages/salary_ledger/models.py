"""Data models for ``salary_ledger``.

Records produced by the statement parser are frozen dataclasses with explicit
field order, the same way the canonical row views are modelled elsewhere in
the package. Aggregates returned by :class:`~salary_ledger.ledger.LedgerStore`
are frozen dataclasses too: they are recomputed on every query and never
stored.

Configuration that is edited by a user or loaded from disk
(:class:`BudgetConfig`, :class:`ClassificationRules`) is modelled with
pydantic so it is validated at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

type Pool = Literal["daily", "monthly", "mandatory", "other"]
"""Spending bucket of an expense. Income is always ``"other"``."""

type TransactionType = Literal["expense", "income"]


@dataclass(frozen=True, slots=True)
class RawRow:
    """One well-formed statement line before any business rules.

    Column order mirrors the export (0-indexed): operation date, payment date,
    card number, status, operation amount, operation currency, payment amount,
    payment currency, cashback, category, MCC, description, then three optional
    trailing columns (bonuses, investment rounding, amount with rounding).
    """

    operation_date: str
    payment_date: str
    card_number: str
    status: str
    operation_amount: float
    operation_currency: str
    payment_amount: float
    payment_currency: str
    cashback: str
    category: str
    mcc: str
    description: str
    bonuses: str = ""
    invest_rounding: str = ""
    amount_with_rounding: str = ""


@dataclass(frozen=True, slots=True)
class Transaction:
    """A parsed, classified transaction.

    ``type`` always agrees with the sign of ``amount``. ``is_filtered`` marks
    a transaction excluded from every budget total; it is kept for audit and
    always carries a ``filter_reason``.
    """

    id: str
    date: datetime
    amount: float
    category: str
    description: str
    card_number: str
    mcc: str
    type: TransactionType
    is_filtered: bool = False
    filter_reason: str | None = None
    pool: Pool = "other"

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"


class FilterResult(NamedTuple):
    """Outcome of an inclusion rule: counted or excluded with a reason."""

    should_include: bool
    reason: str | None = None


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CategoryData:
    name: str
    amount: float
    percentage: float
    count: int


@dataclass(frozen=True, slots=True)
class MonthlyData:
    """Totals for one salary period (``month`` is the period key ``YYYY-MM``).

    ``monthly_pool_spent`` covers every expense outside the daily pool
    (monthly, mandatory and other together); ``mandatory_spent`` repeats the
    mandatory share on its own.
    """

    month: str
    total_expenses: float = 0.0
    total_income: float = 0.0
    daily_pool_spent: float = 0.0
    monthly_pool_spent: float = 0.0
    mandatory_spent: float = 0.0
    categories: tuple[CategoryData, ...] = ()


@dataclass(frozen=True, slots=True)
class DailyData:
    """Totals for one calendar day (``date`` is the day key ``YYYY-MM-DD``)."""

    date: str
    expenses: float = 0.0
    income: float = 0.0
    daily_pool_spent: float = 0.0
    monthly_pool_spent: float = 0.0
    mandatory_spent: float = 0.0
    categories: tuple[CategoryData, ...] = ()


@dataclass(frozen=True, slots=True)
class CurrentPeriodStats:
    daily_pool_spent: float
    monthly_pool_spent: float
    mandatory_spent: float
    days_remaining: int
    daily_budget: float
    current_month: str
    current_day: int
    days_in_month: int


@dataclass(frozen=True, slots=True)
class LedgerOverview:
    """All-time totals over the counted transactions."""

    daily_pool_total: float
    monthly_pool_total: float
    income_total: float
    recent_periods: tuple[MonthlyData, ...] = ()
    top_categories: tuple[CategoryData, ...] = ()


@dataclass(frozen=True, slots=True)
class LedgerCounts:
    total: int
    counted: int

    @property
    def excluded(self) -> int:
        return self.total - self.counted


# ---------------------------------------------------------------------------
# User-adjustable budget settings
# ---------------------------------------------------------------------------


class MandatoryPayments(BaseModel):
    """Fixed monthly payments that come off the income before any pool."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    housing: float = Field(35_000.0, ge=0.0)
    subscriptions: float = Field(2_000.0, ge=0.0)
    debt_payment: float = Field(20_000.0, ge=0.0)

    @property
    def total(self) -> float:
        return self.housing + self.subscriptions + self.debt_payment


class BudgetConfig(BaseModel):
    """Budget settings edited by the user and persisted between sessions.

    Edits replace whole fields (``mandatory`` included); nothing is patched
    incrementally.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    income: float = Field(150_000.0, ge=0.0)
    mandatory: MandatoryPayments = Field(default_factory=MandatoryPayments)
    daily_target: float = Field(1_500.0, ge=0.0)
    total_debt: float = Field(300_000.0, ge=0.0)
    paid_debt: float = Field(0.0, ge=0.0)
    food_pool_budget: float = Field(50_000.0, ge=0.0)
    monthly_pool_budget: float = Field(40_000.0, ge=0.0)


DEFAULT_BUDGET = BudgetConfig()


# ---------------------------------------------------------------------------
# Classification configuration
# ---------------------------------------------------------------------------


class ClassificationRules(BaseModel):
    """Static lists that drive inclusion and pool assignment.

    Every list is treated as opaque data. Empty lists simply never match.
    ``bank_tokens`` name the counterparty whose transfers still count as
    spending and whose payments land in the mandatory pool.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    excluded_income_descriptions: tuple[str, ...] = ()
    excluded_expense_descriptions: tuple[str, ...] = ()
    excluded_people: tuple[str, ...] = ()
    refund_keywords: tuple[str, ...] = ()
    expense_categories: frozenset[str] = frozenset()
    daily_categories: frozenset[str] = frozenset()
    monthly_categories: frozenset[str] = frozenset()
    transfers_category: str = "Переводы"
    bank_tokens: tuple[str, ...] = ("sovcombank", "совкомбанк")
    success_status: str = "OK"

    @field_validator(
        "excluded_income_descriptions",
        "excluded_expense_descriptions",
        "excluded_people",
        "refund_keywords",
        "bank_tokens",
        mode="before",
    )
    @classmethod
    def _drop_blank_entries(cls, v: object) -> object:
        # A blank substring would match every description.
        if v is None:
            return ()
        if isinstance(v, (list, tuple)):
            return tuple(s for s in v if isinstance(s, str) and s.strip())
        return v

    @field_validator("expense_categories", "daily_categories", "monthly_categories", mode="before")
    @classmethod
    def _normalize_category_sets(cls, v: object) -> object:
        if v is None:
            return frozenset()
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(s.strip() for s in v if isinstance(s, str) and s.strip())
        return v


__all__ = [
    "BudgetConfig",
    "CategoryData",
    "ClassificationRules",
    "CurrentPeriodStats",
    "DEFAULT_BUDGET",
    "DailyData",
    "FilterResult",
    "LedgerCounts",
    "LedgerOverview",
    "MandatoryPayments",
    "MonthlyData",
    "Pool",
    "RawRow",
    "Transaction",
    "TransactionType",
]
