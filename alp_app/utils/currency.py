"""
Exact conversion between display amounts and ledger base units.

A display amount such as "1.5" in a currency with 18 decimals is
1_500_000_000_000_000_000 base units. All conversions here work on
integers and strings so that no precision is lost.
"""

import re
from decimal import Decimal
from typing import Optional, Union

from ..errors import InputInvalid

DEFAULT_DECIMALS = 18

_AMOUNT_PATTERN = re.compile(r"^(?P<whole>\d*)(?:\.(?P<frac>\d*))?$")
_COUNT_PATTERN = re.compile(r"^\d+$")


def parse_units(value: str, decimals: int = DEFAULT_DECIMALS,
                field: Optional[str] = None) -> int:
    """
    Convert a decimal display string to base units.

    Args:
        value: Human-entered amount, e.g. "0.1" or "12"
        decimals: Currency unit scale (number of fractional digits)
        field: Input field name, carried on the error for the UI

    Returns:
        Non-negative base-unit integer

    Raises:
        InputInvalid: if the string is not a plain non-negative decimal or
            has more fractional digits than the scale allows
    """
    if not isinstance(value, str):
        raise InputInvalid(
            f"Amount must be a string, got {type(value).__name__}",
            field=field,
            raw_value=repr(value),
        )

    text = value.strip()
    match = _AMOUNT_PATTERN.match(text)
    if not text or match is None or text == ".":
        raise InputInvalid(
            f"Not a valid amount: {value!r}",
            field=field,
            raw_value=value,
        )

    whole = match.group("whole") or "0"
    frac = match.group("frac") or ""

    if len(frac) > decimals:
        raise InputInvalid(
            f"Too many decimal places in {value!r} (max {decimals})",
            field=field,
            raw_value=value,
        )

    return int(whole) * 10 ** decimals + int(frac.ljust(decimals, "0") or "0")


def to_decimal(value: int, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """Convert base units to an exact Decimal in display units."""
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10 ** decimals)
    if decimals == 0:
        return Decimal(f"{sign}{whole}")
    return Decimal(f"{sign}{whole}.{frac:0{decimals}d}")


def format_units(value: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """
    Format base units as a display string.

    Trailing zeros are trimmed but at least one fractional digit is kept,
    so 10**18 formats as "1.0" and 15 * 10**17 as "1.5".
    """
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10 ** decimals)
    if decimals == 0:
        return f"{sign}{whole}.0"
    frac_text = f"{frac:0{decimals}d}".rstrip("0") or "0"
    return f"{sign}{whole}.{frac_text}"


def parse_count(value: Union[str, int], field: Optional[str] = None) -> int:
    """Parse a non-negative integer count such as a milestone number."""
    if isinstance(value, bool):
        raise InputInvalid(f"Not a valid count: {value!r}", field=field, raw_value=repr(value))

    if isinstance(value, int):
        if value < 0:
            raise InputInvalid(f"Count must not be negative: {value}", field=field, raw_value=str(value))
        return value

    text = str(value).strip()
    if not _COUNT_PATTERN.match(text):
        raise InputInvalid(f"Not a valid count: {value!r}", field=field, raw_value=str(value))
    return int(text)


def same_address(a: str, b: str) -> bool:
    """Compare two hex addresses ignoring letter case."""
    return a.lower() == b.lower()
