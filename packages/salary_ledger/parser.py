"""Statement text → classified :class:`Transaction` records.

Input format
------------
Semicolon-delimited text; the first line is a header and is ignored. Columns
(0-indexed): operation date, payment date, card number, status, operation
amount, operation currency, payment amount, payment currency, cashback,
category, MCC, description, bonuses, investment rounding, amount with
rounding. The last three are optional; lines with fewer than 12 columns are
dropped.

Quoting is lighter than RFC 4180: a ``"`` toggles an
"inside quotes" state in which ``;`` is literal, and the quote itself is not
kept. Doubled quotes are not unescaped.

Numbers use a comma as decimal separator (``"-150,50"``); dates are
``DD.MM.YYYY[ HH:MM[:SS]]``.

Failure mode
------------
Parsing never raises for an individual line. Short lines, unparsable dates and
rows whose status is not the success status are skipped; counts are logged at
DEBUG level.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from datetime import datetime
from decimal import Decimal

from .classifier import classify
from .logging_setup import get_logger
from .models import ClassificationRules, RawRow, Transaction
from .rules import DEFAULT_RULES

MIN_COLUMNS = 12

_logger = get_logger("salary_ledger.parser")

# Leading float prefix, the way ``parseFloat`` reads it.
_FLOAT_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_WHITESPACE_RE = re.compile(r"\s")
_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


# ---------------------------------------------------------------------------
# Token-level helpers
# ---------------------------------------------------------------------------


def _clean_token(value: str) -> str:
    s = value.strip()
    if s.startswith('"'):
        s = s[1:]
    if s.endswith('"'):
        s = s[:-1]
    return s


def split_line(line: str) -> list[str]:
    """Split one line on ``;`` outside of quotes."""

    tokens: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == ";" and not in_quotes:
            tokens.append(_clean_token("".join(current)))
            current = []
        else:
            current.append(ch)
    tokens.append(_clean_token("".join(current)))
    return tokens


def parse_amount(value: str | None) -> float:
    """Parse a locale-formatted amount; anything unreadable is ``0.0``."""

    if not value:
        return 0.0
    cleaned = _WHITESPACE_RE.sub("", value).replace(",", ".", 1).replace('"', "")
    m = _FLOAT_PREFIX_RE.match(cleaned)
    if m is None:
        return 0.0
    try:
        return float(m.group(0))
    except ValueError:  # pragma: no cover - the pattern only admits valid floats
        return 0.0


def parse_date(value: str) -> datetime:
    """Parse ``DD.MM.YYYY[ HH:MM[:SS]]`` into a naive datetime.

    Raises ``ValueError`` when the value is not a real calendar date/time.
    """

    cleaned = value.replace('"', "").strip()
    parts = cleaned.split()
    if not parts:
        raise ValueError("date is empty")
    dm = _DATE_RE.fullmatch(parts[0])
    if dm is None:
        raise ValueError(f"invalid DD.MM.YYYY date: {value!r}")
    hour = minute = second = 0
    if len(parts) > 1:
        tm = _TIME_RE.fullmatch(parts[1])
        if tm is None:
            raise ValueError(f"invalid HH:MM[:SS] time: {value!r}")
        hour, minute = int(tm.group(1)), int(tm.group(2))
        second = int(tm.group(3) or 0)
    day, month, year = int(dm.group(1)), int(dm.group(2)), int(dm.group(3))
    return datetime(year, month, day, hour, minute, second)


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


def _js_number(value: float) -> str:
    """Render a float the way JavaScript's ``Number#toString`` prints it.

    ``100.0`` -> ``100``, ``5e-07`` -> ``5e-7``, ``1e16`` -> ``10000000000000000``
    and ``1e21`` -> ``1e+21``.
    """

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr gives the shortest round-trip digits, the same digits JS picks.
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = k + exponent

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        body = "0." + "0" * -n + digits
    else:
        mantissa = digits[0] if k == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if n > 0 else '-'}{abs(n - 1)}"
    return sign + body


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def rolling_hash(text: str) -> int:
    """32-bit ``h * 31 + c`` rolling hash over UTF-16 code units (signed result)."""

    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + code_unit) & 0xFFFFFFFF
    return h - 0x1_0000_0000 if h & 0x8000_0000 else h


def generate_id(raw: RawRow, line_index: int) -> str:
    """Content-derived id, stable across re-parses of the same file.

    ``line_index`` is the position of the line in the input (header is 0).
    """

    key = f"{raw.operation_date}-{_js_number(raw.operation_amount)}-{raw.description}-{line_index}"
    return _to_base36(abs(rolling_hash(key)))


# ---------------------------------------------------------------------------
# Rows and transactions
# ---------------------------------------------------------------------------


def _to_raw_row(values: list[str]) -> RawRow:
    def opt(i: int) -> str:
        return values[i] if len(values) > i else ""

    return RawRow(
        operation_date=values[0],
        payment_date=values[1],
        card_number=values[2],
        status=values[3],
        operation_amount=parse_amount(values[4]),
        operation_currency=values[5],
        payment_amount=parse_amount(values[6]),
        payment_currency=values[7],
        cashback=values[8],
        category=values[9],
        mcc=values[10],
        description=values[11],
        bonuses=opt(12),
        invest_rounding=opt(13),
        amount_with_rounding=opt(14),
    )


def parse_statement_rows(text: str) -> Iterator[tuple[int, RawRow]]:
    """Yield ``(line_index, RawRow)`` for every line with enough columns.

    Status is not checked here; callers that only want successful operations
    use :func:`parse_statement`.
    """

    lines = text.split("\n")
    for line_index in range(1, len(lines)):
        line = lines[line_index].strip()
        if not line:
            continue
        values = split_line(line)
        if len(values) < MIN_COLUMNS:
            continue
        yield line_index, _to_raw_row(values)


def parse_statement(text: str, rules: ClassificationRules | None = None) -> list[Transaction]:
    """Parse statement text into classified transactions, newest first.

    ``rules`` defaults to :data:`salary_ledger.rules.DEFAULT_RULES`.
    """

    if rules is None:
        rules = DEFAULT_RULES

    transactions: list[Transaction] = []
    skipped_status = 0
    skipped_date = 0

    for line_index, raw in parse_statement_rows(text):
        if raw.status != rules.success_status:
            skipped_status += 1
            continue
        try:
            when = parse_date(raw.operation_date)
        except ValueError:
            _logger.debug("Skipping line %d: unparsable date %r", line_index, raw.operation_date)
            skipped_date += 1
            continue

        tx = Transaction(
            id=generate_id(raw, line_index),
            date=when,
            amount=raw.operation_amount,
            category=raw.category,
            description=raw.description,
            card_number=raw.card_number,
            mcc=raw.mcc,
            type="expense" if raw.operation_amount < 0 else "income",
        )
        transactions.append(classify(tx, rules))

    _logger.debug(
        "Parsed %d transactions (%d non-success status, %d bad dates)",
        len(transactions),
        skipped_status,
        skipped_date,
    )
    # sorted() is stable with reverse=True, so equal timestamps keep file order.
    return sorted(transactions, key=lambda t: t.date, reverse=True)


__all__ = [
    "MIN_COLUMNS",
    "generate_id",
    "parse_amount",
    "parse_date",
    "parse_statement",
    "parse_statement_rows",
    "rolling_hash",
    "split_line",
]
