"""Monetary string normalization.

Bank exports write the same value in many ways: ``$1,234.56``,
``-1234.56``, ``(1,234.56)``, ``£ 12.00``, ``-$5``. :func:`parse_amount`
reduces all of them to an absolute amount in minor units plus a sign flag.
Locale-specific decimal commas are not supported; a comma is always a
thousands separator.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, Overflow

from .models import ParsedAmount

# Dollar, pound, euro, yen, plus every whitespace (including NBSP) and commas.
_STRIP_RE = re.compile(r"[$£€¥,\s]")

# Plain digits with an optional decimal point; no exponent or underscores.
_NUMBER_RE = re.compile(r"^(?:\d+\.?\d*|\.\d+)$")

_CENT = Decimal("0.01")


def parse_amount(raw: str | None) -> ParsedAmount | None:
    """Parse ``raw`` into minor units and a negative flag, or ``None``.

    Steps: strip surrounding parentheses (accounting negative), strip currency
    symbols, whitespace and thousands separators, strip a leading sign, then
    parse the remainder as plain digits with an optional decimal point.
    Exponents, underscores and values too large for the decimal context are
    rejected. The absolute value is rounded half-up to whole minor units.
    """

    if raw is None:
        return None
    s = raw.strip()

    parenthetical = len(s) >= 2 and s.startswith("(") and s.endswith(")")
    if parenthetical:
        s = s[1:-1]

    s = _STRIP_RE.sub("", s)

    has_minus = s.startswith("-")
    if has_minus or s.startswith("+"):
        s = s[1:]

    if not _NUMBER_RE.match(s):
        return None
    try:
        minor = int((Decimal(s) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except (InvalidOperation, Overflow):
        # More digits than the decimal context can hold.
        return None
    return ParsedAmount(amount_minor_units=minor, is_negative=parenthetical or has_minus)


def format_minor_units(amount_minor_units: int, *, negative: bool = False) -> str:
    """Render minor units as a plain two-decimal string (``-12.34``)."""

    d = (Decimal(amount_minor_units) * _CENT).quantize(_CENT, rounding=ROUND_HALF_UP)
    return f"-{d:.2f}" if negative else f"{d:.2f}"


__all__ = ["format_minor_units", "parse_amount"]
