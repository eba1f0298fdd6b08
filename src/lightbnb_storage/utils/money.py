"""
Currency conversion between dollars and cents.

Prices are stored in minor units (cents). Route handlers receive dollars,
so every dollar amount passes through ``dollars_to_cents`` before it reaches
the query builder.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from ..exceptions import ValidationError

CENTS_PER_DOLLAR = 100

Amount = Union[int, float, Decimal, str]


def dollars_to_cents(amount: Amount, field: str = "amount") -> int:
    """
    Convert a dollar amount to integer cents, rounding half-up on the cent.

    Args:
        amount: Dollar amount as int, float, Decimal or numeric string
        field: Field name reported in the error

    Returns:
        Amount in cents

    Raises:
        ValidationError: If the amount is not numeric, not finite or negative
    """
    if isinstance(amount, bool):
        raise ValidationError(f"{field} must be numeric, got bool", field=field)

    try:
        # str() avoids binary float artifacts (19.99 -> 19.989999...)
        value = Decimal(str(amount).strip()) if isinstance(amount, (float, str)) else Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be numeric, got {amount!r}", field=field) from None

    if not value.is_finite():
        raise ValidationError(f"{field} must be finite, got {amount!r}", field=field)
    if value < 0:
        raise ValidationError(f"{field} must not be negative, got {amount!r}", field=field)

    cents = (value * CENTS_PER_DOLLAR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


def cents_to_dollars(cents: int) -> Decimal:
    """Convert integer cents back to a two-place Decimal dollar amount."""
    return (Decimal(cents) / CENTS_PER_DOLLAR).quantize(Decimal("0.01"))
