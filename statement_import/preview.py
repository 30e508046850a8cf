"""Import preview: parsed transactions annotated for review.

:func:`create_import_preview` is a pure projection of its inputs, so callers
may rebuild it on every UI change. The edit helpers below return new
previews and never mutate their argument. Aggregate counts describe the parsed
file and are carried over unchanged by edits.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from .categorize import resolve_category
from .duplicates import detect_duplicates, parsed_transaction_key
from .logging_setup import get_logger
from .models import (
    EXPENSE_CATEGORIES,
    DateRange,
    ExistingExpense,
    ImportableTransaction,
    ImportPreview,
    ParsedTransaction,
)

_logger = get_logger("statement_import.preview")

# Fields a reviewer may change on a single row.
_EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"selected", "mapped_category", "bucket_id", "description"}
)


def _annotate(tx: ParsedTransaction, *, bucket_id: str, is_duplicate: bool) -> ImportableTransaction:
    return ImportableTransaction(
        date=tx.date,
        description=tx.description,
        amount_minor_units=tx.amount_minor_units,
        is_expense=tx.is_expense,
        category=tx.category,
        memo=tx.memo,
        bucket_id=bucket_id,
        mapped_category=resolve_category(tx),
        is_duplicate=is_duplicate,
        selected=tx.is_expense and not is_duplicate,
    )


def create_import_preview(
    transactions: Iterable[ParsedTransaction],
    existing_expenses: Iterable[ExistingExpense],
    default_bucket_id: str,
) -> ImportPreview:
    """Build the review-ready preview.

    Each row gets its duplicate flag, a mapped category (hint first, then the
    description keyword scan), the default bucket, and ``selected`` set for
    non-duplicate expenses only. ``date_range`` is the min/max ISO date, or
    ``None`` when there are no rows.
    """

    txs = list(transactions)
    duplicate_keys = detect_duplicates(txs, existing_expenses)

    rows = tuple(
        _annotate(
            tx,
            bucket_id=default_bucket_id,
            is_duplicate=parsed_transaction_key(tx) in duplicate_keys,
        )
        for tx in txs
    )

    expense_count = sum(1 for r in rows if r.is_expense)
    duplicate_count = sum(1 for r in rows if r.is_duplicate)
    dates = [r.date for r in rows]
    date_range = DateRange(earliest=min(dates), latest=max(dates)) if dates else None

    _logger.debug(
        "create_import_preview:done total=%d expenses=%d duplicates=%d",
        len(rows),
        expense_count,
        duplicate_count,
    )
    return ImportPreview(
        transactions=rows,
        total_count=len(rows),
        expense_count=expense_count,
        income_count=len(rows) - expense_count,
        duplicate_count=duplicate_count,
        date_range=date_range,
    )


# ---------------------------------------------------------------------------
# Reviewer edits
# ---------------------------------------------------------------------------


def update_transaction(preview: ImportPreview, index: int, **changes: Any) -> ImportPreview:
    """Return a preview with row ``index`` updated.

    Only ``selected``, ``mapped_category``, ``bucket_id`` and ``description``
    may change. A new description is trimmed. Raises ``IndexError`` for a row
    outside the preview and ``ValueError`` for any other field, an unknown
    category or a blank description.
    """

    if not 0 <= index < len(preview.transactions):
        raise IndexError(f"transaction index out of range: {index}")
    unknown = sorted(set(changes) - _EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported preview edit fields: {', '.join(unknown)}")
    category = changes.get("mapped_category")
    if category is not None and category not in EXPENSE_CATEGORIES:
        raise ValueError(f"Unknown category: {category!r}")
    if "description" in changes:
        description = (changes["description"] or "").strip()
        if not description:
            raise ValueError("Description must not be empty")
        changes["description"] = description

    rows = list(preview.transactions)
    rows[index] = replace(rows[index], **changes)
    return replace(preview, transactions=tuple(rows))


def select_all(preview: ImportPreview, selected: bool) -> ImportPreview:
    """Select every eligible row, or clear the selection.

    Income rows and duplicates stay unselected even when ``selected`` is true;
    they can still be picked one at a time with :func:`update_transaction`.
    """

    rows = tuple(
        replace(r, selected=selected and r.is_expense and not r.is_duplicate)
        for r in preview.transactions
    )
    return replace(preview, transactions=rows)


def select_where(
    preview: ImportPreview, predicate: Callable[[ImportableTransaction], bool]
) -> ImportPreview:
    """Set ``selected`` on every row to ``predicate(row)``."""

    rows = tuple(replace(r, selected=bool(predicate(r))) for r in preview.transactions)
    return replace(preview, transactions=rows)


def change_bucket(preview: ImportPreview, bucket_id: str) -> ImportPreview:
    """Assign every row to ``bucket_id``."""

    rows = tuple(replace(r, bucket_id=bucket_id) for r in preview.transactions)
    return replace(preview, transactions=rows)


def selected_count(preview: ImportPreview) -> int:
    return sum(1 for r in preview.transactions if r.selected)


__all__ = [
    "change_bucket",
    "create_import_preview",
    "select_all",
    "select_where",
    "selected_count",
    "update_transaction",
]
