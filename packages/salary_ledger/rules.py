"""Default classification lists and loading of custom rule files.

The lists below are plain data: the classifier never hardcodes business names
and receives a :class:`~salary_ledger.models.ClassificationRules` instance at
call time. A JSON file with the same keys can replace any subset of the
defaults (see :func:`load_rules`).
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from .logging_setup import get_logger
from .models import ClassificationRules

_logger = get_logger("salary_ledger.rules")

# Own-account movements that are neither income nor spending.
EXCLUDED_DESCRIPTIONS_INCOME: tuple[str, ...] = (
    "Между своими счетами",
    "Перевод между счетами",
    "Пополнение вклада",
    "Инвесткопилка",
)

EXCLUDED_DESCRIPTIONS_EXPENSE: tuple[str, ...] = (
    "Между своими счетами",
    "Перевод между счетами",
    "Пополнение вклада",
    "Инвесткопилка",
    "Брокерский счет",
)

REFUND_KEYWORDS: tuple[str, ...] = (
    "возврат",
    "компенсация",
    "отмена",
    "refund",
)

# Categories that only ever hold spending; positive amounts in them are refunds.
EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Супермаркеты",
    "Рестораны",
    "Фастфуд",
    "Кафе",
    "Транспорт",
    "Такси",
    "Аптеки",
    "Здоровье",
    "Одежда и обувь",
    "Маркетплейсы",
    "Связь",
    "ЖКХ",
    "Развлечения",
    "Дом и ремонт",
    "Красота",
    "Сервис",
)

DAILY_CATEGORIES: tuple[str, ...] = (
    "Супермаркеты",
    "Рестораны",
    "Фастфуд",
    "Кафе",
)

MONTHLY_CATEGORIES: tuple[str, ...] = (
    "Связь",
    "ЖКХ",
    "Транспорт",
    "Такси",
    "Аптеки",
    "Здоровье",
    "Одежда и обувь",
    "Маркетплейсы",
    "Развлечения",
    "Дом и ремонт",
    "Красота",
    "Сервис",
)

DEFAULT_RULES = ClassificationRules(
    excluded_income_descriptions=EXCLUDED_DESCRIPTIONS_INCOME,
    excluded_expense_descriptions=EXCLUDED_DESCRIPTIONS_EXPENSE,
    excluded_people=(),
    refund_keywords=REFUND_KEYWORDS,
    expense_categories=frozenset(EXPENSE_CATEGORIES),
    daily_categories=frozenset(DAILY_CATEGORIES),
    monthly_categories=frozenset(MONTHLY_CATEGORIES),
)


def load_rules(path: str | os.PathLike[str] | None = None) -> ClassificationRules:
    """Return classification rules, overlaying a JSON file on the defaults.

    ``path`` falls back to the ``SALARY_LEDGER_RULES`` environment variable.
    Keys absent from the file keep their default values. A missing or invalid
    file raises (``OSError``, ``json.JSONDecodeError`` or pydantic's
    ``ValidationError``); rules are explicit configuration, so a typo must not
    silently fall back to defaults.
    """

    if path is None:
        env_val = os.getenv("SALARY_LEDGER_RULES")
        if not env_val or not env_val.strip():
            return DEFAULT_RULES
        path = env_val.strip()

    p = Path(path).expanduser()
    overrides = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(overrides, dict):
        raise ValueError(f"rules file must contain a JSON object: {os.fspath(p)}")

    merged = DEFAULT_RULES.model_dump()
    merged.update(overrides)
    rules = ClassificationRules.model_validate(merged)
    _logger.debug("Loaded classification rules from %s (%d keys overridden)", os.fspath(p), len(overrides))
    return rules


__all__ = [
    "DAILY_CATEGORIES",
    "DEFAULT_RULES",
    "EXCLUDED_DESCRIPTIONS_EXPENSE",
    "EXCLUDED_DESCRIPTIONS_INCOME",
    "EXPENSE_CATEGORIES",
    "MONTHLY_CATEGORIES",
    "REFUND_KEYWORDS",
    "load_rules",
]
