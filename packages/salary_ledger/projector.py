"""Daily-allowance formulas.

Two allowances exist side by side and differ:

- :func:`projected_daily_budget` spreads what is left of the fixed daily
  target over the remaining days and is floored at zero.
- :attr:`PoolProjection.effective_daily_allowance` spreads what is left of the
  food pool ceiling and is *not* floored; a negative value signals overspend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .models import BudgetConfig, CurrentPeriodStats

# Allowance status thresholds (currency units per day).
ALLOWANCE_OK = 1200.0
ALLOWANCE_WARNING = 800.0

type AllowanceStatus = Literal["ok", "warning", "critical"]


@dataclass(frozen=True, slots=True)
class PoolProjection:
    food_pool_budget: float
    monthly_pool_budget: float
    food_pool_spent: float
    monthly_pool_spent: float
    food_pool_remaining: float
    monthly_pool_remaining: float
    effective_daily_allowance: float
    surplus_or_deficit: float
    realized_surplus_or_deficit: float | None
    food_pool_percent_used: float
    monthly_pool_percent_used: float
    period_percent_elapsed: float
    status: AllowanceStatus


@dataclass(frozen=True, slots=True)
class BudgetStructure:
    """How the declared income splits into mandatory, daily and monthly money."""

    income: float
    mandatory_total: float
    daily_pool: float
    monthly_pool: float


@dataclass(frozen=True, slots=True)
class DebtProgress:
    total: float
    paid: float
    remaining: float
    percent_paid: float


def projected_daily_budget(
    daily_target: float,
    period_length: int,
    daily_pool_spent: float,
    days_remaining: int,
) -> float:
    """``max(0, (daily_target * period_length - spent) / days_remaining)``."""

    if days_remaining <= 0:
        return 0.0
    return max(0.0, (daily_target * period_length - daily_pool_spent) / days_remaining)


def allowance_status(allowance: float) -> AllowanceStatus:
    if allowance >= ALLOWANCE_OK:
        return "ok"
    if allowance >= ALLOWANCE_WARNING:
        return "warning"
    return "critical"


def _percent(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def project_pools(
    config: BudgetConfig,
    stats: CurrentPeriodStats,
    *,
    period_income: float | None = None,
) -> PoolProjection:
    """Compare the two pool ceilings with what the current period has spent.

    ``period_income`` is the income actually received in the period; when
    given, ``realized_surplus_or_deficit`` is reported next to the figure
    based on declared income.
    """

    food_remaining = config.food_pool_budget - stats.daily_pool_spent
    monthly_remaining = config.monthly_pool_budget - stats.monthly_pool_spent
    allowance = food_remaining / max(1, stats.days_remaining)
    planned = config.food_pool_budget + config.monthly_pool_budget

    return PoolProjection(
        food_pool_budget=config.food_pool_budget,
        monthly_pool_budget=config.monthly_pool_budget,
        food_pool_spent=stats.daily_pool_spent,
        monthly_pool_spent=stats.monthly_pool_spent,
        food_pool_remaining=food_remaining,
        monthly_pool_remaining=monthly_remaining,
        effective_daily_allowance=allowance,
        surplus_or_deficit=config.income - planned,
        realized_surplus_or_deficit=None if period_income is None else period_income - planned,
        food_pool_percent_used=_percent(stats.daily_pool_spent, config.food_pool_budget),
        monthly_pool_percent_used=_percent(stats.monthly_pool_spent, config.monthly_pool_budget),
        period_percent_elapsed=_percent(stats.current_day, stats.days_in_month),
        status=allowance_status(allowance),
    )


def budget_structure(config: BudgetConfig, period_length: int) -> BudgetStructure:
    mandatory_total = config.mandatory.total
    daily_pool = config.daily_target * period_length
    return BudgetStructure(
        income=config.income,
        mandatory_total=mandatory_total,
        daily_pool=daily_pool,
        monthly_pool=config.income - mandatory_total - daily_pool,
    )


def debt_progress(config: BudgetConfig) -> DebtProgress:
    return DebtProgress(
        total=config.total_debt,
        paid=config.paid_debt,
        remaining=config.total_debt - config.paid_debt,
        percent_paid=_percent(config.paid_debt, config.total_debt),
    )


__all__ = [
    "ALLOWANCE_OK",
    "ALLOWANCE_WARNING",
    "BudgetStructure",
    "DebtProgress",
    "PoolProjection",
    "allowance_status",
    "budget_structure",
    "debt_progress",
    "project_pools",
    "projected_daily_budget",
]
