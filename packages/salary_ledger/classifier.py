"""Inclusion rules and pool assignment for parsed transactions.

Every function here is pure: it reads one :class:`Transaction` and an injected
:class:`ClassificationRules` and never raises. Rule order is significant;
the first matching rule decides the outcome.

Income
------
1. description contains an excluded-income substring (case-insensitive)
2. description contains an excluded person (case-sensitive)
3. description contains a refund keyword (case-insensitive)
4. category is an expense category (a refund posted against spending)

Expense
-------
1. transfers category: excluded unless the description names the bank
2. description contains an excluded-expense substring (either case)
3. description contains an excluded person (case-sensitive)

Pools are assigned independently of the inclusion decision so excluded rows
carry the same pool they would have had if counted.
"""

from __future__ import annotations

import dataclasses

from .models import ClassificationRules, FilterResult, Pool, Transaction
from .rules import DEFAULT_RULES


def _mentions_bank(description_lower: str, rules: ClassificationRules) -> bool:
    return any(token.lower() in description_lower for token in rules.bank_tokens)


def classify_income(tx: Transaction, rules: ClassificationRules = DEFAULT_RULES) -> FilterResult:
    desc = tx.description.lower()

    for excluded in rules.excluded_income_descriptions:
        if excluded.lower() in desc:
            return FilterResult(False, f"Excluded: {excluded}")

    for person in rules.excluded_people:
        if person in tx.description:
            return FilterResult(False, f"Transfer from {person}")

    for keyword in rules.refund_keywords:
        if keyword.lower() in desc:
            return FilterResult(False, "Refund/compensation")

    if tx.category in rules.expense_categories:
        return FilterResult(False, f"Refund in category {tx.category}")

    return FilterResult(True)


def classify_expense(tx: Transaction, rules: ClassificationRules = DEFAULT_RULES) -> FilterResult:
    desc = tx.description.lower()

    if tx.category == rules.transfers_category:
        if _mentions_bank(desc, rules):
            return FilterResult(True)
        return FilterResult(False, "Transfers category")

    for excluded in rules.excluded_expense_descriptions:
        if excluded.lower() in desc or excluded in tx.description:
            return FilterResult(False, excluded)

    for person in rules.excluded_people:
        if person in tx.description:
            return FilterResult(False, f"Transfer for {person}")

    return FilterResult(True)


def determine_pool(tx: Transaction, rules: ClassificationRules = DEFAULT_RULES) -> Pool:
    if tx.type == "income":
        return "other"

    if tx.category in rules.daily_categories:
        return "daily"

    if tx.category in rules.monthly_categories:
        return "monthly"

    if _mentions_bank(tx.description.lower(), rules):
        return "mandatory"

    return "other"


def classify(tx: Transaction, rules: ClassificationRules = DEFAULT_RULES) -> Transaction:
    """Return a copy of ``tx`` with inclusion flag, reason and pool applied."""

    result = classify_expense(tx, rules) if tx.type == "expense" else classify_income(tx, rules)
    return dataclasses.replace(
        tx,
        is_filtered=not result.should_include,
        filter_reason=None if result.should_include else result.reason,
        pool=determine_pool(tx, rules),
    )


__all__ = ["classify", "classify_expense", "classify_income", "determine_pool"]
