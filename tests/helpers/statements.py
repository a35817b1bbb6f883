"""Helpers for building statement exports in tests."""

from __future__ import annotations

HEADER = (
    "Дата операции;Дата платежа;Номер карты;Статус;Сумма операции;Валюта операции;"
    "Сумма платежа;Валюта платежа;Кэшбэк;Категория;MCC;Описание;Бонусы (включая кэшбэк);"
    "Округление на инвесткопилку;Сумма операции с округлением"
)


def row(
    when: str,
    amount: str,
    category: str,
    description: str,
    *,
    status: str = "OK",
    card: str = "*1234",
    mcc: str = "5411",
    trailing: bool = True,
) -> str:
    """Return one quoted statement line; ``amount`` uses a decimal comma."""

    values = [
        when,
        when.split()[0],
        card,
        status,
        amount,
        "RUB",
        amount,
        "RUB",
        "",
        category,
        mcc,
        description,
    ]
    if trailing:
        values += ["0,00", "0,00", amount.lstrip("-")]
    return ";".join(f'"{v}"' for v in values)


def statement(*rows: str) -> str:
    return "\n".join([HEADER, *rows]) + "\n"


# A small two-period statement used across ledger and CLI tests.
#
# Period 2025-10 (23 Oct - 22 Nov): one restaurant expense on the boundary day.
# Period 2025-11 (23 Nov - 22 Dec): groceries, transport, a bank payment,
# a salary, an own-account transfer and a refund.
SAMPLE_ROWS: tuple[str, ...] = (
    row("22.11.2025 14:30", "-150,50", "Рестораны", "Кафе Пример", mcc="5812"),
    row("23.11.2025 09:00", "-1000,00", "Супермаркеты", "Пятерочка"),
    row("23.11.2025 18:15", "-500,00", "Транспорт", "Метро", mcc="4111"),
    row("24.11.2025 10:00", "-20000,00", "Переводы", "Совкомбанк платеж по кредиту", mcc="6012"),
    row("25.11.2025 12:00", "150000,00", "Зарплата", "Зарплата за ноябрь", mcc="0000"),
    row("25.11.2025 13:00", "-3000,00", "Переводы", "Между своими счетами", mcc="6012"),
    row("26.11.2025 08:00", "300,00", "Супермаркеты", "Возврат покупки"),
    row("26.11.2025 09:30", "-250,00", "Супермаркеты", "Магнит"),
    row("26.11.2025 10:00", "-999,00", "Супермаркеты", "Магнит", status="FAILED"),
)

SAMPLE_STATEMENT = statement(*SAMPLE_ROWS)
