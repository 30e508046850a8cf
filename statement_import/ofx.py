"""OFX/QFX statement extraction.

OFX 1.x is SGML tag soup: leaf elements usually omit their closing tag and the
value runs to the next ``<`` or the end of the line. Only ``<STMTTRN>`` blocks
are read, and from each only ``DTPOSTED``, ``TRNAMT``, ``NAME``, ``MEMO`` and
``TRNTYPE``. Account info, balances and headers are ignored. The same
extraction works for OFX 2.x XML, where closing tags are present.
"""

from __future__ import annotations

import re
from collections import Counter

from .amounts import parse_amount
from .dates import parse_date
from .logging_setup import get_logger
from .models import ExpenseCategory, ParsedTransaction, RowOutcome, Skipped

_logger = get_logger("statement_import.ofx")

_BLOCK_RE = re.compile(r"<STMTTRN>(.*?)</STMTTRN>", re.IGNORECASE | re.DOTALL)

UNKNOWN_DESCRIPTION = "Unknown Transaction"

# TRNTYPE -> category hint. Anything not listed maps to "other".
_TRNTYPE_CATEGORY: dict[str, ExpenseCategory] = {
    "FEE": "other",
    "SRVCHG": "other",
    "INT": "savings",
    "DIV": "savings",
    "ATM": "personal",
    "POS": "personal",
    "PAYMENT": "debt_payment",
    "DEP": "savings",
    "DIRECTDEP": "savings",
}


def _field(block: str, tag: str) -> str | None:
    m = re.search(rf"<{tag}>([^<\r\n]+)", block, re.IGNORECASE)
    if not m:
        return None
    value = m.group(1).strip()
    return value or None


def map_ofx_type(trntype: str) -> ExpenseCategory:
    """Map an OFX ``TRNTYPE`` code to a category hint."""

    return _TRNTYPE_CATEGORY.get(trntype.strip().upper(), "other")


def _extract_block(position: int, block: str) -> RowOutcome:
    date_raw = _field(block, "DTPOSTED")
    amount_raw = _field(block, "TRNAMT")
    if not date_raw or not amount_raw:
        return Skipped("missing_field", position)

    date = parse_date(date_raw, "auto")
    if date is None:
        return Skipped("bad_date", position)
    amount = parse_amount(amount_raw)
    if amount is None:
        return Skipped("bad_amount", position)

    name = _field(block, "NAME")
    memo = _field(block, "MEMO")
    trntype = _field(block, "TRNTYPE")
    description = name or memo or UNKNOWN_DESCRIPTION

    return ParsedTransaction(
        date=date,
        description=description,
        amount_minor_units=amount.amount_minor_units,
        is_expense=amount.is_negative,
        category=map_ofx_type(trntype) if trntype else None,
        memo=memo if memo and memo != description else None,
    )


def parse_ofx(content: str) -> list[ParsedTransaction]:
    """Parse OFX/QFX text into :class:`ParsedTransaction` rows.

    Blocks without a posted date or amount, or with values that cannot be
    parsed, are dropped.
    """

    transactions: list[ParsedTransaction] = []
    skipped: Counter[str] = Counter()
    blocks = _BLOCK_RE.findall(content)
    for position, block in enumerate(blocks):
        outcome = _extract_block(position, block)
        match outcome:
            case ParsedTransaction():
                transactions.append(outcome)
            case Skipped(reason=reason):
                skipped[reason] += 1
                _logger.debug("parse_ofx:block_skipped position=%d reason=%s", position, reason)

    _logger.info(
        "parse_ofx:done blocks=%d parsed=%d skipped=%d",
        len(blocks),
        len(transactions),
        sum(skipped.values()),
    )
    return transactions


__all__ = ["UNKNOWN_DESCRIPTION", "map_ofx_type", "parse_ofx"]
