"""CLI for the ``statement_import`` package.

Command handlers (``cmd_*``) return a process exit code and do all error
reporting themselves; the Typer commands below only translate options. A
local ``.env`` is loaded before any command runs (existing environment
variables win), then package logging is pointed at stderr at the level
given by ``--log-level``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from .amounts import format_minor_units
from .api import preview_file
from .config import load_settings
from .csv_parser import detect_column_mapping, detect_delimiter, read_headers
from .detection import detect_file_type
from .errors import FileTooLargeError
from .execute import convert_to_expense_payloads
from .ingest import load_existing_expenses, read_statement_file
from .logging_setup import configure_logging
from .models import (
    CURRENCY_CODES,
    DATE_FORMATS,
    FREQUENCIES,
    CsvParseOptions,
    ExistingExpense,
    ImportOptions,
    ImportPreview,
)
from .preview import select_where

_DELIMITER_ALIASES: dict[str, str] = {",": ",", ";": ";", "\t": "\t", "tab": "\t", "\\t": "\t"}


# ---- Small module-level helpers used by CLI commands -------------------------


def _err(message: str) -> int:
    typer.echo(f"Error: {message}", err=True)
    return 1


def _read(path: str) -> str:
    return read_statement_file(path, max_bytes=load_settings().max_file_bytes)


def _load_existing(existing_path: str | None) -> list[ExistingExpense]:
    if existing_path is None:
        return []
    return load_existing_expenses(existing_path)


def _csv_options(
    *,
    delimiter: str | None,
    date_format: str,
    has_header: bool,
    positive_is_expense: bool,
) -> CsvParseOptions:
    resolved = None
    if delimiter is not None:
        resolved = _DELIMITER_ALIASES.get(delimiter.lower())
        if resolved is None:
            raise ValueError(f"unsupported delimiter {delimiter!r} (use ',', ';' or 'tab')")
    if date_format not in DATE_FORMATS:
        raise ValueError(f"unsupported date format {date_format!r} ({', '.join(DATE_FORMATS)})")
    return CsvParseOptions(
        delimiter=resolved,  # type: ignore[arg-type]
        date_format=date_format,  # type: ignore[arg-type]
        has_header=has_header,
        treat_positive_as_expense=positive_is_expense,
    )


def _render_preview(preview: ImportPreview) -> str:
    lines = [
        f"{'#':>4}  {'sel':3}  {'date':10}  {'amount':>12}  {'category':14}  {'dup':3}  description"
    ]
    for i, row in enumerate(preview.transactions):
        amount = format_minor_units(row.amount_minor_units, negative=row.is_expense)
        lines.append(
            f"{i:>4}  {'[x]' if row.selected else '[ ]'}  {row.date:10}  {amount:>12}  "
            f"{row.mapped_category:14}  {'yes' if row.is_duplicate else '':3}  "
            f"{row.description[:60]}"
        )
    span = (
        f"{preview.date_range.earliest} .. {preview.date_range.latest}"
        if preview.date_range
        else "n/a"
    )
    lines.append("")
    lines.append(
        f"total={preview.total_count} expenses={preview.expense_count} "
        f"income={preview.income_count} duplicates={preview.duplicate_count} dates={span}"
    )
    return "\n".join(lines)


# ---- Command handlers ----------------------------------------------------------


def cmd_detect(path: str) -> int:
    """Print the detected file type of ``path``."""

    try:
        content = _read(path)
    except FileNotFoundError:
        return _err(f"File not found: {path}")
    except (OSError, FileTooLargeError) as e:
        return _err(str(e))
    typer.echo(detect_file_type(Path(path).name, content))
    return 0


def cmd_headers(path: str, *, delimiter: str | None = None) -> int:
    """Print the delimiter, header tokens, and the inferred column roles."""

    try:
        content = _read(path)
        options = _csv_options(
            delimiter=delimiter, date_format="auto", has_header=True, positive_is_expense=False
        )
    except FileNotFoundError:
        return _err(f"File not found: {path}")
    except (OSError, ValueError) as e:
        return _err(str(e))

    resolved = options.delimiter or detect_delimiter(content)
    headers = read_headers(content, resolved)
    if not headers:
        return _err(f"No header row found in {path}")
    mapping = detect_column_mapping(headers)
    roles: dict[int, str] = {}
    if mapping is not None:
        for role in ("date", "description", "amount", "category"):
            idx = getattr(mapping, role)
            if idx is not None:
                roles.setdefault(idx, role)

    typer.echo(f"delimiter: {'tab' if resolved == chr(9) else resolved}")
    for i, header in enumerate(headers):
        typer.echo(f"{i:>3}  {header}  {roles.get(i, '')}".rstrip())
    if mapping is None:
        typer.echo("column roles not recognized; positional columns 0/1/2 will be used")
    return 0


def cmd_preview(
    path: str,
    *,
    bucket_id: str,
    existing_path: str | None = None,
    csv_options: CsvParseOptions | None = None,
    as_json: bool = False,
) -> int:
    """Parse ``path`` and print its import preview."""

    try:
        content = _read(path)
        existing = _load_existing(existing_path)
        preview = preview_file(
            Path(path).name,
            content,
            existing_expenses=existing,
            default_bucket_id=bucket_id,
            csv_options=csv_options,
        )
    except FileNotFoundError as e:
        return _err(f"File not found: {e.filename or path}")
    except ValidationError as e:
        return _err(f"Invalid existing expenses: {e}")
    except (OSError, ValueError) as e:
        # UnsupportedFileTypeError and FileTooLargeError are ValueErrors.
        return _err(str(e))

    if as_json:
        typer.echo(json.dumps(preview.to_dict(), indent=2))
    else:
        typer.echo(_render_preview(preview))
    return 0


def cmd_import(
    path: str,
    *,
    plan_id: str,
    bucket_id: str,
    existing_path: str | None = None,
    csv_options: CsvParseOptions | None = None,
    frequency: str | None = None,
    currency: str | None = None,
    include_duplicates: bool = False,
    include_income: bool = False,
    output: str | None = None,
) -> int:
    """Build payloads for the default selection of ``path`` and emit them as JSON."""

    settings = load_settings()
    frequency = frequency or settings.default_frequency
    currency = currency.upper() if currency else settings.currency_code
    if frequency not in FREQUENCIES:
        return _err(f"unsupported frequency {frequency!r} ({', '.join(FREQUENCIES)})")
    if currency is not None and currency not in CURRENCY_CODES:
        return _err(f"unsupported currency {currency!r} ({', '.join(CURRENCY_CODES)})")

    try:
        content = _read(path)
        existing = _load_existing(existing_path)
        preview = preview_file(
            Path(path).name,
            content,
            existing_expenses=existing,
            default_bucket_id=bucket_id,
            csv_options=csv_options,
        )
    except FileNotFoundError as e:
        return _err(f"File not found: {e.filename or path}")
    except ValidationError as e:
        return _err(f"Invalid existing expenses: {e}")
    except (OSError, ValueError) as e:
        return _err(str(e))

    if include_duplicates or include_income:
        preview = select_where(
            preview,
            lambda r: (r.is_expense or include_income) and (not r.is_duplicate or include_duplicates),
        )

    payloads = convert_to_expense_payloads(
        preview.transactions,
        ImportOptions(
            plan_id=plan_id,
            default_bucket_id=bucket_id,
            default_frequency=frequency,  # type: ignore[arg-type]
            currency_code=currency,  # type: ignore[arg-type]
        ),
    )
    if not payloads:
        return _err("No transactions selected for import")

    text = json.dumps(
        [p.model_dump(mode="json", by_alias=True, exclude_none=True) for p in payloads],
        indent=2,
    )
    if output:
        try:
            Path(output).write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            return _err(f"failed to write {output}: {e}")
        typer.echo(f"Wrote {len(payloads)} expenses to {output}")
    else:
        typer.echo(text)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Preview and convert CSV/OFX/QFX bank statements into expense records.",
)

FileArg = Annotated[Path, typer.Argument(help="Statement file (CSV, OFX or QFX).", dir_okay=False)]
ExistingOpt = Annotated[
    Path | None,
    typer.Option("--existing", help="JSON snapshot of stored expenses for duplicate checks."),
]
DelimiterOpt = Annotated[
    str | None, typer.Option("--delimiter", help="CSV delimiter: ',', ';' or 'tab'.")
]
DateFormatOpt = Annotated[
    str, typer.Option("--date-format", help="auto, YYYY-MM-DD, MM/DD/YYYY or DD/MM/YYYY.")
]
NoHeaderOpt = Annotated[
    bool, typer.Option("--no-header", help="The CSV has no header row.")
]
PositiveOpt = Annotated[
    bool,
    typer.Option("--positive-is-expense", help="Positive CSV amounts are expenses."),
]


def _build_options(
    delimiter: str | None, date_format: str, no_header: bool, positive_is_expense: bool
) -> CsvParseOptions:
    try:
        return _csv_options(
            delimiter=delimiter,
            date_format=date_format,
            has_header=not no_header,
            positive_is_expense=positive_is_expense,
        )
    except ValueError as e:
        raise typer.Exit(_err(str(e))) from e


@app.command("detect")
def detect_cmd(path: FileArg) -> None:
    """Print the detected statement format."""

    raise typer.Exit(cmd_detect(str(path)))


@app.command("headers")
def headers_cmd(path: FileArg, delimiter: DelimiterOpt = None) -> None:
    """Show the CSV header row and the column roles inferred from it."""

    raise typer.Exit(cmd_headers(str(path), delimiter=delimiter))


@app.command("preview")
def preview_cmd(
    path: FileArg,
    bucket_id: Annotated[str, typer.Option("--bucket-id", help="Default bucket for rows.")],
    existing: ExistingOpt = None,
    delimiter: DelimiterOpt = None,
    date_format: DateFormatOpt = "auto",
    no_header: NoHeaderOpt = False,
    positive_is_expense: PositiveOpt = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the preview as JSON.")] = False,
) -> None:
    """Parse a statement and print the import preview."""

    options = _build_options(delimiter, date_format, no_header, positive_is_expense)
    raise typer.Exit(
        cmd_preview(
            str(path),
            bucket_id=bucket_id,
            existing_path=str(existing) if existing else None,
            csv_options=options,
            as_json=as_json,
        )
    )


@app.command("import")
def import_cmd(
    path: FileArg,
    plan_id: Annotated[str, typer.Option("--plan-id", help="Plan that owns the expenses.")],
    bucket_id: Annotated[str, typer.Option("--bucket-id", help="Default bucket for rows.")],
    existing: ExistingOpt = None,
    frequency: Annotated[
        str | None, typer.Option("--frequency", help="Expense frequency (default monthly).")
    ] = None,
    currency: Annotated[str | None, typer.Option("--currency", help="Currency code.")] = None,
    include_duplicates: Annotated[
        bool, typer.Option("--include-duplicates", help="Also import flagged duplicates.")
    ] = False,
    include_income: Annotated[
        bool, typer.Option("--include-income", help="Also import income rows.")
    ] = False,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write payload JSON to this file.")
    ] = None,
    delimiter: DelimiterOpt = None,
    date_format: DateFormatOpt = "auto",
    no_header: NoHeaderOpt = False,
    positive_is_expense: PositiveOpt = False,
) -> None:
    """Convert the selected rows of a statement into expense payload JSON."""

    options = _build_options(delimiter, date_format, no_header, positive_is_expense)
    raise typer.Exit(
        cmd_import(
            str(path),
            plan_id=plan_id,
            bucket_id=bucket_id,
            existing_path=str(existing) if existing else None,
            csv_options=options,
            frequency=frequency,
            currency=currency,
            include_duplicates=include_duplicates,
            include_income=include_income,
            output=str(output) if output else None,
        )
    )


@app.callback()
def _root(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR (default INFO)."),
    ] = None,
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise typer.Exit(_err(str(e))) from e


if __name__ == "__main__":  # pragma: no cover
    app()
