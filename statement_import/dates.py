"""Date inference and normalization to ISO ``YYYY-MM-DD``.

Three textual layouts are recognized (ISO, US ``MM/DD/YYYY`` and EU
``DD/MM/YYYY``) plus the OFX ``YYYYMMDD[HHMMSS...]`` stamp, which is accepted
as a last resort by every layout.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date

from .models import DateFormat

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_OFX_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})")


def _iso(year: int, month: int, day: int) -> str | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def detect_date_format(samples: Iterable[str]) -> DateFormat:
    """Infer the layout used by a column of date strings.

    Samples are inspected in order and the first one that identifies a
    layout decides. An ISO sample is decisive when its month and day are in
    range. A slash sample is decisive only when one side exceeds 12: a first
    group above 12 means ``DD/MM/YYYY``, a second group above 12 means
    ``MM/DD/YYYY``. Samples such as ``05/06/2024`` fit both and are skipped.
    When nothing decides, ``"auto"`` is returned and rows are parsed one by one.
    """

    for raw in samples:
        s = raw.strip()
        m = _ISO_RE.match(s)
        if m:
            month, day = int(m.group(2)), int(m.group(3))
            if 1 <= month <= 12 and 1 <= day <= 31:
                return "YYYY-MM-DD"
            continue
        m = _SLASH_RE.match(s)
        if not m:
            continue
        first, second = int(m.group(1)), int(m.group(2))
        us_ok = 1 <= first <= 12 and 1 <= second <= 31
        eu_ok = 1 <= first <= 31 and 1 <= second <= 12
        if us_ok and second > 12:
            return "MM/DD/YYYY"
        if eu_ok and first > 12:
            return "DD/MM/YYYY"
    return "auto"


def parse_date(raw: str | None, fmt: DateFormat = "auto") -> str | None:
    """Parse ``raw`` using ``fmt`` and return ISO ``YYYY-MM-DD`` or ``None``.

    ``"auto"`` tries ISO, then US, then the OFX stamp. An explicit layout tries
    itself, then the OFX stamp. Impossible calendar dates yield ``None``.
    """

    if raw is None:
        return None
    s = raw.strip()
    if not s:
        return None

    if fmt in ("YYYY-MM-DD", "auto"):
        m = _ISO_RE.match(s)
        if m:
            parsed = _iso(int(m.group(1)), int(m.group(2)), int(m.group(3)))
            if parsed:
                return parsed

    if fmt in ("MM/DD/YYYY", "auto"):
        m = _SLASH_RE.match(s)
        if m:
            parsed = _iso(int(m.group(3)), int(m.group(1)), int(m.group(2)))
            if parsed:
                return parsed

    if fmt == "DD/MM/YYYY":
        m = _SLASH_RE.match(s)
        if m:
            parsed = _iso(int(m.group(3)), int(m.group(2)), int(m.group(1)))
            if parsed:
                return parsed

    m = _OFX_RE.match(s)
    if m:
        return _iso(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    return None


def format_date(d: date, fmt: DateFormat) -> str:
    """Render ``d`` in the given layout (``"auto"`` renders ISO)."""

    if fmt == "MM/DD/YYYY":
        return f"{d.month:02d}/{d.day:02d}/{d.year:04d}"
    if fmt == "DD/MM/YYYY":
        return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


__all__ = ["detect_date_format", "format_date", "parse_date"]
