"""Public interface for the ``statement_import`` package.

Bank statement import: parse CSV/OFX/QFX exports, categorize and de-duplicate
the rows, build a reviewable preview, and convert the selection into expense
payloads. There is no runtime logic here, only symbol re-exports.
"""

from .amounts import parse_amount
from .api import parse_file, preview_file
from .categorize import auto_categorize, map_category_hint
from .csv_parser import parse_csv, read_headers
from .dates import detect_date_format, parse_date
from .detection import detect_file_type
from .duplicates import detect_duplicates, transaction_key
from .errors import FileTooLargeError, UnsupportedFileTypeError
from .execute import convert_to_expense_payloads
from .models import (
    ColumnMapping,
    CsvParseOptions,
    ExistingExpense,
    ExpensePayload,
    ImportableTransaction,
    ImportOptions,
    ImportPreview,
    ParsedAmount,
    ParsedTransaction,
)
from .ofx import parse_ofx
from .preview import (
    change_bucket,
    create_import_preview,
    select_all,
    select_where,
    selected_count,
    update_transaction,
)

__all__ = [
    # Pipeline
    "detect_file_type",
    "parse_file",
    "preview_file",
    "parse_csv",
    "read_headers",
    "parse_ofx",
    "parse_amount",
    "detect_date_format",
    "parse_date",
    "auto_categorize",
    "map_category_hint",
    "transaction_key",
    "detect_duplicates",
    "create_import_preview",
    "update_transaction",
    "select_all",
    "select_where",
    "change_bucket",
    "selected_count",
    "convert_to_expense_payloads",
    # Models / types
    "ParsedAmount",
    "ParsedTransaction",
    "ImportableTransaction",
    "ImportPreview",
    "ColumnMapping",
    "CsvParseOptions",
    "ImportOptions",
    "ExistingExpense",
    "ExpensePayload",
    # Errors
    "UnsupportedFileTypeError",
    "FileTooLargeError",
]
