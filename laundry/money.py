"""
Exact arithmetic for balances and prices.

Every sum and product runs in a context that traps ``Inexact``: if a
result would need more than ``PRECISION`` significant digits, the
operation is rejected with ``InvalidAmountError`` instead of being
rounded, so no money is lost to rounding.
"""

from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow

from .errors import InvalidAmountError

PRECISION = 28

MONEY_CONTEXT = Context(prec=PRECISION, traps=[Inexact, InvalidOperation, Overflow, DivisionByZero])


def to_decimal(value, field: str = "amount") -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidAmountError(field, value, "is not a number") from e
    if not amount.is_finite():
        raise InvalidAmountError(field, value, "must be finite")
    return amount


def add(a: Decimal, b: Decimal) -> Decimal:
    return _exact(MONEY_CONTEXT.add, a, b)


def subtract(a: Decimal, b: Decimal) -> Decimal:
    return _exact(MONEY_CONTEXT.subtract, a, b)


def multiply(a: Decimal, b: Decimal) -> Decimal:
    return _exact(MONEY_CONTEXT.multiply, a, b)


def _exact(operation, a: Decimal, b: Decimal) -> Decimal:
    try:
        return operation(a, b)
    except (Inexact, InvalidOperation, DivisionByZero) as e:
        raise InvalidAmountError(
            "amount", f"{a}, {b}", f"cannot be computed exactly within {PRECISION} digits"
        ) from e
