"""Public entry points that route raw statement text through the pipeline.

Format-specific parsing lives in :mod:`statement_import.csv_parser` and
:mod:`statement_import.ofx`; this module picks the parser and composes the
parse → preview stages for callers that hold a whole file in memory.
"""

from __future__ import annotations

from collections.abc import Iterable

from .csv_parser import parse_csv
from .detection import detect_file_type
from .errors import UnsupportedFileTypeError
from .logging_setup import get_logger
from .models import CsvParseOptions, ExistingExpense, ImportPreview, ParsedTransaction
from .ofx import parse_ofx
from .preview import create_import_preview

_logger = get_logger("statement_import.api")


def parse_file(
    filename: str,
    content: str,
    csv_options: CsvParseOptions | None = None,
) -> list[ParsedTransaction]:
    """Detect the format of ``content`` and parse it.

    ``csv_options`` applies to CSV input only. Raises
    :class:`UnsupportedFileTypeError` when the format cannot be identified;
    malformed rows are dropped rather than reported.
    """

    file_type = detect_file_type(filename, content)
    _logger.debug("parse_file:detected filename=%s type=%s", filename, file_type)
    match file_type:
        case "csv":
            return parse_csv(content, csv_options)
        case "ofx" | "qfx":
            return parse_ofx(content)
        case _:
            raise UnsupportedFileTypeError(filename)


def preview_file(
    filename: str,
    content: str,
    *,
    existing_expenses: Iterable[ExistingExpense],
    default_bucket_id: str,
    csv_options: CsvParseOptions | None = None,
) -> ImportPreview:
    """Parse ``content`` and build its :class:`ImportPreview` in one call."""

    transactions = parse_file(filename, content, csv_options)
    return create_import_preview(transactions, existing_expenses, default_bucket_id)


__all__ = ["parse_file", "preview_file"]
