from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from ..domain.enums import Currency

_CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Parse ``value`` as a Decimal; anything unparsable becomes 0."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    try:
        parsed = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return parsed if parsed.is_finite() else Decimal(0)


def to_flag(value) -> int:
    """Integer view of a 0/1 flag column; junk parses as 0."""
    if isinstance(value, bool):
        return 0
    return int(to_decimal(value))


def format_currency(amount, currency: str | Currency = Currency.COLONES) -> str:
    """Format ``amount`` with two decimals and en-US thousands grouping.

    Dollars get the ``$`` prefix, everything else the colón sign.
    """
    value = to_decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    symbol = "$" if _currency_key(currency) == Currency.DOLARES.value else "₡"
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def _currency_key(currency) -> str:
    if isinstance(currency, Currency):
        return currency.value
    return str(currency or "").strip().lower()
