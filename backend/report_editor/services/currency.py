"""Currency formatting and parsing for report amounts."""
import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from enum import Enum
from typing import Optional

MISSING_VALUE = "-"

_DECORATION_PATTERN = re.compile(r"[$,\s]")
_NUMBER_PREFIX_PATTERN = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)")
# Wide enough to quantize any finite float to whole units.
_ROUNDING_CONTEXT = Context(prec=400)


class CurrencyFormat(str, Enum):
    """
    Named display conventions for amounts.

    SYMBOL is used by the comparison table ("$1,235", "-$1,235").
    PLAIN is used by the compliance preview ("1,235", "(1,235)").
    The two are not interchangeable.
    """

    SYMBOL = "symbol"
    PLAIN = "plain"


def _whole_units(value: float) -> int:
    # Half away from zero.
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT))


def format_currency_symbol(value: float) -> str:
    """Format as dollars with grouping and no decimals, e.g. ``-$1,235``."""
    units = _whole_units(value)
    sign = "-" if units < 0 else ""
    return f"{sign}${abs(units):,}"


def format_currency_plain(value: Optional[float]) -> str:
    """
    Format for the AASB preview: absolute value, grouped, no decimals, and
    parentheses around negatives. A missing value renders as ``-``.
    """
    if value is None:
        return MISSING_VALUE
    units = _whole_units(value)
    formatted = f"{abs(units):,}"
    return f"({formatted})" if units < 0 else formatted


def format_currency(value: Optional[float], mode: CurrencyFormat) -> str:
    """Format ``value`` with the given display convention."""
    if mode is CurrencyFormat.SYMBOL:
        return format_currency_symbol(value if value is not None else 0.0)
    return format_currency_plain(value)


def strip_currency_decoration(text: str) -> str:
    """Remove dollar signs, thousands separators and whitespace."""
    return _DECORATION_PATTERN.sub("", text or "")


def parse_amount(text: Optional[str]) -> float:
    """
    Parse an amount typed by the user.

    Symbols, commas and whitespace are ignored and a value wrapped in
    parentheses is negative. Only the leading number is read, so trailing
    junk is ignored. Formatting rounds to whole units, which means
    ``parse_amount(format_currency_symbol(v))`` gives back ``v`` rounded.

    Args:
        text: Amount text, formatted or raw

    Returns:
        Parsed amount, or 0.0 when nothing parseable is present
    """
    if not text or not isinstance(text, str):
        return 0.0

    cleaned = strip_currency_decoration(text)
    negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        negative = True
        cleaned = cleaned[1:-1]

    match = _NUMBER_PREFIX_PATTERN.match(cleaned)
    if not match:
        return 0.0

    try:
        value = float(match.group(0))
    except ValueError:
        return 0.0

    if not math.isfinite(value) or value == 0:
        return 0.0
    return -value if negative else value
