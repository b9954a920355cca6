"""
Money utilities.

All combo prices are Decimal amounts rounded to the cent so that a combo's
final price always equals its base price plus the sum of its extra charges,
exactly, at every step of the wizard.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated, Any, Iterable

from pydantic import BeforeValidator, PlainSerializer


CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round_money(amount: Any) -> Decimal:
    """Round to 2 decimal places for currency.

    Floats go through their shortest repr so 4.99 stays 4.99 instead of
    picking up binary noise.
    """
    try:
        if isinstance(amount, Decimal):
            value = amount
        elif isinstance(amount, float):
            value = Decimal(repr(amount))
        else:
            value = Decimal(str(amount))
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Not a money amount: {amount!r}") from e


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts, starting from a cent-precision zero."""
    total = ZERO
    for amount in amounts:
        total += amount
    return round_money(total)


# Pydantic field type: accepts int/float/str/Decimal, stores a cent-rounded
# Decimal, and serializes to a float in JSON responses.
Money = Annotated[
    Decimal,
    BeforeValidator(round_money),
    PlainSerializer(lambda value: float(value), return_type=float, when_used="json"),
]
