"""Conversion of reviewed transactions into persistable expense payloads.

The payloads are inert: identifiers are assigned and rows written by the
persistence collaborator, which receives the complete list at once.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from .logging_setup import get_logger
from .models import (
    NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    ExpensePayload,
    ImportableTransaction,
    ImportOptions,
)

_logger = get_logger("statement_import.execute")

IMPORT_NOTE = "Imported from bank statement"


def _timestamp(now: datetime | None) -> str:
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _notes(tx: ImportableTransaction) -> str:
    notes = f"Imported: {tx.memo}" if tx.memo else IMPORT_NOTE
    return notes[:NOTES_MAX_LENGTH]


def convert_to_expense_payloads(
    transactions: Iterable[ImportableTransaction],
    options: ImportOptions,
    *,
    now: datetime | None = None,
) -> list[ExpensePayload]:
    """Turn the selected rows into expense payloads.

    Unselected rows are dropped. Names are cut to the stored maximum of
    100 characters; notes record the memo (or a generic marker) as
    provenance. Every payload is non-fixed with ``options.default_frequency``
    and shares one ``created_at``/``updated_at`` stamp (``now`` or the
    current UTC time).
    """

    stamp = _timestamp(now)
    payloads = [
        ExpensePayload(
            plan_id=options.plan_id,
            bucket_id=tx.bucket_id or options.default_bucket_id,
            name=tx.description[:NAME_MAX_LENGTH],
            amount_minor_units=tx.amount_minor_units,
            currency_code=options.currency_code,
            frequency=options.default_frequency,
            category=tx.mapped_category,
            is_fixed=False,
            transaction_date=tx.date,
            notes=_notes(tx),
            created_at=stamp,
            updated_at=stamp,
        )
        for tx in transactions
        if tx.selected
    ]
    _logger.info(
        "convert_to_expense_payloads:done plan_id=%s payloads=%d", options.plan_id, len(payloads)
    )
    return payloads


__all__ = ["IMPORT_NOTE", "convert_to_expense_payloads"]
