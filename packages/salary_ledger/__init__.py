"""Public interface for the ``salary_ledger`` package.

This module exposes the parser, the ledger store and the public models as the
stable import surface. There is no runtime logic here, only symbol re-exports.
"""

from .classifier import classify, classify_expense, classify_income, determine_pool
from .ledger import LedgerStore, category_breakdown
from .models import (
    DEFAULT_BUDGET,
    BudgetConfig,
    CategoryData,
    ClassificationRules,
    CurrentPeriodStats,
    DailyData,
    FilterResult,
    LedgerCounts,
    LedgerOverview,
    MandatoryPayments,
    MonthlyData,
    Pool,
    RawRow,
    Transaction,
    TransactionType,
)
from .parser import parse_statement, parse_statement_rows
from .projector import (
    BudgetStructure,
    DebtProgress,
    PoolProjection,
    budget_structure,
    debt_progress,
    project_pools,
    projected_daily_budget,
)
from .rules import DEFAULT_RULES, load_rules
from .salary_calendar import (
    contains,
    day_index_within,
    format_period_label,
    length_of,
    period_key_of,
    range_of,
)
from .settings_store import load_budget, save_budget
from .source import StatementSourceError, fetch_statement, read_statement_file, resolve_source

__all__ = [
    # Parsing and classification
    "parse_statement",
    "parse_statement_rows",
    "classify",
    "classify_income",
    "classify_expense",
    "determine_pool",
    "DEFAULT_RULES",
    "load_rules",
    # Calendar
    "period_key_of",
    "range_of",
    "contains",
    "length_of",
    "day_index_within",
    "format_period_label",
    # Ledger and projections
    "LedgerStore",
    "category_breakdown",
    "projected_daily_budget",
    "project_pools",
    "budget_structure",
    "debt_progress",
    # Settings and sources
    "load_budget",
    "save_budget",
    "StatementSourceError",
    "read_statement_file",
    "fetch_statement",
    "resolve_source",
    # Models / types
    "RawRow",
    "Transaction",
    "TransactionType",
    "Pool",
    "FilterResult",
    "CategoryData",
    "MonthlyData",
    "DailyData",
    "CurrentPeriodStats",
    "LedgerOverview",
    "LedgerCounts",
    "BudgetConfig",
    "MandatoryPayments",
    "DEFAULT_BUDGET",
    "ClassificationRules",
    "PoolProjection",
    "BudgetStructure",
    "DebtProgress",
]
