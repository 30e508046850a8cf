"""Filesystem helpers used by the CLI to feed the in-memory pipeline.

The pipeline itself never touches storage; these helpers read a statement
file and an existing-expense snapshot so the CLI can hand plain values to it.
"""

from __future__ import annotations

import json
from os import PathLike
from pathlib import Path

from .config import DEFAULT_MAX_FILE_BYTES
from .errors import FileTooLargeError
from .logging_setup import get_logger
from .models import ExistingExpense, existing_expenses_from_records

_logger = get_logger("statement_import.ingest")


def read_statement_file(
    path: str | PathLike[str], *, max_bytes: int = DEFAULT_MAX_FILE_BYTES
) -> str:
    """Return the text of a statement file.

    Decodes UTF-8 (a leading BOM is dropped) and falls back to Latin-1 for
    exports written in a legacy Windows code page. Raises
    :class:`FileTooLargeError` above ``max_bytes``; ``OSError`` subclasses
    propagate.
    """

    p = Path(path)
    size = p.stat().st_size
    if size > max_bytes:
        raise FileTooLargeError(str(p), size, max_bytes)
    data = p.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        _logger.warning("read_statement_file:latin1_fallback path=%s", p)
        return data.decode("latin-1")


def load_existing_expenses(path: str | PathLike[str]) -> list[ExistingExpense]:
    """Load a JSON snapshot of stored expenses.

    Accepts either a top-level list of expense objects or an object with an
    ``"expenses"`` list. Raises ``ValueError`` for other shapes and
    ``pydantic.ValidationError`` for malformed records.
    """

    p = Path(path)
    payload = json.loads(p.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("expenses")
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of expenses in {p}")
    expenses = existing_expenses_from_records(payload)
    _logger.info("load_existing_expenses:done path=%s count=%d", p, len(expenses))
    return expenses


__all__ = ["load_existing_expenses", "read_statement_file"]
