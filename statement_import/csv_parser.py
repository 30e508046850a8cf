"""Schema-free CSV statement parsing.

Bank CSV exports share no common layout, so everything here is inferred:

- the delimiter (comma, semicolon or tab) from the first few lines;
- the role of each column (date, description, amount, optional category) from
  header synonyms, declared as data in :data:`COLUMN_ROLE_SYNONYMS`;
- the date layout from a sample of the date column.

Tokenization follows RFC 4180 via the stdlib :mod:`csv` module (quoted fields
may contain delimiters and newlines; doubled quotes are literal quotes). Rows
that lack a required field or carry an unparseable date/amount are dropped
without raising.
"""

from __future__ import annotations

import csv
from collections import Counter
from collections.abc import Sequence
from io import StringIO

from .amounts import parse_amount
from .dates import detect_date_format, parse_date
from .logging_setup import get_logger
from .models import (
    DELIMITERS,
    POSITIONAL_MAPPING,
    ColumnMapping,
    CsvDelimiter,
    CsvParseOptions,
    DateFormat,
    ParsedTransaction,
    RowOutcome,
    Skipped,
)

_logger = get_logger("statement_import.csv_parser")

_DELIMITER_SAMPLE_LINES = 5
_DATE_SAMPLE_ROWS = 10

# Ordered synonym lists per column role. Earlier synonyms win; extend these to
# support new export dialects.
COLUMN_ROLE_SYNONYMS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("date", ("date", "transaction date", "posted date", "trans date")),
    ("description", ("description", "memo", "name", "payee", "merchant", "narrative")),
    ("amount", ("amount", "debit", "credit", "sum", "value", "transaction amount")),
    ("category", ("category", "type", "classification")),
)
_REQUIRED_ROLES: tuple[str, ...] = ("date", "description", "amount")


# ---------------------------------------------------------------------------
# Delimiter inference
# ---------------------------------------------------------------------------


def _count_unquoted(line: str, delimiter: str) -> int:
    count = 0
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            count += 1
    return count


def detect_delimiter(content: str) -> CsvDelimiter:
    """Pick the most plausible delimiter among comma, semicolon and tab.

    For each candidate, count its unquoted occurrences on each of the first
    five non-empty lines. A count that is identical and non-zero on every line
    scores ``count * 10``; otherwise the score is the smallest per-line count.
    The highest score wins; ties and empty input resolve to a comma.
    """

    lines = [ln.rstrip("\r") for ln in content.split("\n") if ln.strip()]
    lines = lines[:_DELIMITER_SAMPLE_LINES]
    if not lines:
        return ","

    best: CsvDelimiter = ","
    best_score = 0
    for delimiter in DELIMITERS:
        counts = [_count_unquoted(ln, delimiter) for ln in lines]
        if len(set(counts)) == 1 and counts[0] > 0:
            score = counts[0] * 10
        else:
            score = min(counts)
        if score > best_score:
            best, best_score = delimiter, score  # type: ignore[assignment]
    return best


# ---------------------------------------------------------------------------
# Tokenization
# ---------------------------------------------------------------------------


def split_rows(content: str, delimiter: str) -> list[list[str]]:
    """Tokenize ``content`` into rows of trimmed fields, skipping blank lines.

    ``\\r\\n`` and bare ``\\r`` line endings are read as ``\\n``.
    """

    # A lone carriage return would otherwise abort csv.reader mid-file.
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    rows: list[list[str]] = []
    with StringIO(text) as f:
        reader = csv.reader(f, delimiter=delimiter, skipinitialspace=True)
        try:
            for raw in reader:
                fields = [field.strip() for field in raw]
                if not any(fields):
                    continue
                rows.append(fields)
        except csv.Error as exc:
            # Keep whatever was tokenized before the malformed line.
            _logger.warning(
                "split_rows:tokenize_failed line=%d rows=%d error=%s",
                reader.line_num,
                len(rows),
                exc,
            )
    return rows


def read_headers(content: str, delimiter: str | None = None) -> list[str]:
    """Return the first row's tokens, for offering a manual column mapping."""

    rows = split_rows(content, delimiter or detect_delimiter(content))
    return rows[0] if rows else []


# ---------------------------------------------------------------------------
# Column roles
# ---------------------------------------------------------------------------


def _find_column(headers: Sequence[str], synonyms: Sequence[str]) -> int | None:
    for synonym in synonyms:
        for i, header in enumerate(headers):
            if not header:
                continue
            if header == synonym or synonym in header or header in synonym:
                return i
    return None


def detect_column_mapping(headers: Sequence[str]) -> ColumnMapping | None:
    """Infer column roles from header names, or ``None`` when a required role
    (date, description, amount) cannot be resolved."""

    folded = [h.strip().casefold() for h in headers]
    found = {role: _find_column(folded, synonyms) for role, synonyms in COLUMN_ROLE_SYNONYMS}
    if any(found[role] is None for role in _REQUIRED_ROLES):
        return None
    return ColumnMapping(
        date=found["date"],  # type: ignore[arg-type]
        description=found["description"],  # type: ignore[arg-type]
        amount=found["amount"],  # type: ignore[arg-type]
        category=found["category"],
    )


# ---------------------------------------------------------------------------
# Row extraction
# ---------------------------------------------------------------------------


def _cell(row: Sequence[str], index: int | None) -> str:
    if index is None or index < 0 or index >= len(row):
        return ""
    return row[index]


def _extract_row(
    position: int,
    row: Sequence[str],
    mapping: ColumnMapping,
    date_format: DateFormat,
    treat_positive_as_expense: bool,
) -> RowOutcome:
    date_raw = _cell(row, mapping.date)
    description = _cell(row, mapping.description).strip()
    amount_raw = _cell(row, mapping.amount)
    if not date_raw or not description or not amount_raw:
        return Skipped("missing_field", position)

    date = parse_date(date_raw, date_format)
    if date is None:
        return Skipped("bad_date", position)

    amount = parse_amount(amount_raw)
    if amount is None:
        return Skipped("bad_amount", position)

    is_expense = (not amount.is_negative) if treat_positive_as_expense else amount.is_negative
    category = _cell(row, mapping.category).strip() or None
    return ParsedTransaction(
        date=date,
        description=description,
        amount_minor_units=amount.amount_minor_units,
        is_expense=is_expense,
        category=category,
    )


def parse_csv(content: str, options: CsvParseOptions | None = None) -> list[ParsedTransaction]:
    """Parse CSV statement text into :class:`ParsedTransaction` rows.

    Without an explicit ``column_mapping`` the header row (when
    ``has_header``) is matched against :data:`COLUMN_ROLE_SYNONYMS`; if that
    fails, or there is no header, columns 0/1/2 are taken as date,
    description and amount. ``date_format="auto"`` infers the layout from up
    to ten data rows.
    """

    opts = options or CsvParseOptions()
    delimiter = opts.delimiter or detect_delimiter(content)
    rows = split_rows(content, delimiter)
    if not rows:
        return []

    mapping = opts.column_mapping
    data_rows = rows
    if opts.has_header:
        data_rows = rows[1:]
        if mapping is None:
            mapping = detect_column_mapping(rows[0])
    if mapping is None:
        _logger.info("parse_csv:positional_mapping headers=%r", rows[0] if opts.has_header else None)
        mapping = POSITIONAL_MAPPING

    date_format = opts.date_format
    if date_format == "auto":
        samples = [_cell(r, mapping.date) for r in data_rows[:_DATE_SAMPLE_ROWS]]
        date_format = detect_date_format(s for s in samples if s)

    transactions: list[ParsedTransaction] = []
    skipped: Counter[str] = Counter()
    for position, row in enumerate(data_rows):
        outcome = _extract_row(
            position, row, mapping, date_format, opts.treat_positive_as_expense
        )
        match outcome:
            case ParsedTransaction():
                transactions.append(outcome)
            case Skipped(reason=reason):
                skipped[reason] += 1
                _logger.debug("parse_csv:row_skipped position=%d reason=%s", position, reason)

    _logger.info(
        "parse_csv:done rows=%d parsed=%d skipped=%d delimiter=%r date_format=%s",
        len(data_rows),
        len(transactions),
        sum(skipped.values()),
        delimiter,
        date_format,
    )
    return transactions


__all__ = [
    "COLUMN_ROLE_SYNONYMS",
    "detect_column_mapping",
    "detect_delimiter",
    "parse_csv",
    "read_headers",
    "split_rows",
]
