"""Duplicate detection against previously stored expenses.

A transaction's fingerprint is ``date|amount_minor_units|description`` where
the description is lowercased, cut to :data:`FINGERPRINT_DESCRIPTION_LENGTH`
characters and trimmed. Matching is exact on that key. Near-misses (a
different day, a reworded payee) are not flagged: a flagged row can be
deselected by the user, a hidden one cannot be recovered.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import ExistingExpense, ParsedTransaction

# Long descriptions that share this prefix on the same day and amount collide.
FINGERPRINT_DESCRIPTION_LENGTH = 50


def transaction_key(*, date: str, amount_minor_units: int, description: str) -> str:
    """Return the fingerprint for a ``(date, amount, description)`` triple."""

    desc_key = description.lower()[:FINGERPRINT_DESCRIPTION_LENGTH].strip()
    return f"{date}|{amount_minor_units}|{desc_key}"


def parsed_transaction_key(tx: ParsedTransaction) -> str:
    return transaction_key(
        date=tx.date, amount_minor_units=tx.amount_minor_units, description=tx.description
    )


def existing_expense_key(expense: ExistingExpense) -> str:
    """Fingerprint a stored expense, dating it by creation when undated."""

    return transaction_key(
        date=expense.effective_date,
        amount_minor_units=expense.amount_minor_units,
        description=expense.name,
    )


def detect_duplicates(
    new_transactions: Iterable[ParsedTransaction],
    existing_expenses: Iterable[ExistingExpense],
) -> set[str]:
    """Return the fingerprints present both in the new batch and in storage."""

    existing_keys = {existing_expense_key(e) for e in existing_expenses}
    return {
        key
        for key in (parsed_transaction_key(tx) for tx in new_transactions)
        if key in existing_keys
    }


__all__ = [
    "FINGERPRINT_DESCRIPTION_LENGTH",
    "detect_duplicates",
    "existing_expense_key",
    "parsed_transaction_key",
    "transaction_key",
]
