"""
Money - integer minor units (cents)

All amounts in the system are plain ints counting cents. The helpers here
keep arithmetic inside the signed 64-bit range the database columns can
hold; nothing in the sales core ever converts money to float.
"""
from decimal import Decimal
from typing import Iterable

from booth_pos.core.exceptions import MoneyOverflow

Money = int

MONEY_MIN: Money = -(2 ** 63)
MONEY_MAX: Money = 2 ** 63 - 1


def check_money(value: Money) -> Money:
    """Return value unchanged if it is an int inside the 64-bit range"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise MoneyOverflow(f"Money must be an integer number of cents, got {value!r}")
    if value < MONEY_MIN or value > MONEY_MAX:
        raise MoneyOverflow(f"Amount {value} is outside the 64-bit cents range")
    return value


def multiply(unit_price: Money, quantity: int) -> Money:
    """unit_price * quantity, rejecting results that leave the 64-bit range"""
    check_money(unit_price)
    return check_money(unit_price * quantity)


def sum_money(amounts: Iterable[Money]) -> Money:
    """Exact sum; every partial sum must stay in range"""
    total = 0
    for amount in amounts:
        total = check_money(total + check_money(amount))
    return total


def to_decimal(cents: Money) -> Decimal:
    """Cents as a two-place Decimal (150 -> Decimal('1.50')), for export only"""
    return Decimal(check_money(cents)).scaleb(-2)


def format_cents(cents: Money) -> str:
    """Fixed two-decimal string: 150 -> '1.50', -5 -> '-0.05'"""
    check_money(cents)
    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), 100)
    return f"{sign}{whole}.{fraction:02d}"
