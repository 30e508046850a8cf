"""Data models and type aliases for ``statement_import``.

Values produced by the parsing and preview stages are frozen, slotted
dataclasses: they are ephemeral, cheap to rebuild, and edited only through
``dataclasses.replace``. Records that cross the boundary to the persistence
collaborator (the existing-expense snapshot coming in and the expense payloads
going out) are Pydantic models so their shape is validated at the edge.

Monetary values are always non-negative integers in minor currency units
(cents). The sign travels separately as ``is_expense`` / ``is_negative``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

type ExpenseCategory = Literal[
    "housing",
    "utilities",
    "transportation",
    "groceries",
    "healthcare",
    "insurance",
    "debt_payment",
    "savings",
    "entertainment",
    "dining",
    "personal",
    "subscriptions",
    "other",
]

type Frequency = Literal["weekly", "biweekly", "semimonthly", "monthly", "quarterly", "annual"]

type CurrencyCode = Literal["USD", "EUR", "GBP", "JPY", "CAD", "AUD"]

type DateFormat = Literal["YYYY-MM-DD", "MM/DD/YYYY", "DD/MM/YYYY", "auto"]

type FileType = Literal["csv", "ofx", "qfx", "unknown"]

type CsvDelimiter = Literal[",", ";", "\t"]

EXPENSE_CATEGORIES: tuple[str, ...] = get_args(ExpenseCategory.__value__)
FREQUENCIES: tuple[str, ...] = get_args(Frequency.__value__)
CURRENCY_CODES: tuple[str, ...] = get_args(CurrencyCode.__value__)
DATE_FORMATS: tuple[str, ...] = get_args(DateFormat.__value__)
DELIMITERS: tuple[str, ...] = get_args(CsvDelimiter.__value__)

# Persisted expense schema limits.
NAME_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500


# ---------------------------------------------------------------------------
# Parsing inputs/outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParsedAmount:
    """Result of normalizing a formatted monetary string."""

    amount_minor_units: int
    is_negative: bool


@dataclass(frozen=True, slots=True)
class ColumnMapping:
    """Zero-based column indices for each transaction field in a CSV row."""

    date: int
    description: int
    amount: int
    category: int | None = None


POSITIONAL_MAPPING = ColumnMapping(date=0, description=1, amount=2)


@dataclass(frozen=True, slots=True)
class CsvParseOptions:
    """Caller overrides for CSV parsing.

    ``delimiter=None`` means "infer from content". ``column_mapping=None``
    means "infer from the header row", falling back to positional columns.
    """

    delimiter: CsvDelimiter | None = None
    date_format: DateFormat = "auto"
    has_header: bool = True
    column_mapping: ColumnMapping | None = None
    treat_positive_as_expense: bool = False


@dataclass(frozen=True, slots=True)
class ParsedTransaction:
    """A canonical transaction row produced by the CSV or OFX parsers.

    Attributes
    ----------
    date:
        ISO ``YYYY-MM-DD``.
    description:
        Trimmed, non-empty description.
    amount_minor_units:
        Absolute amount in minor units.
    is_expense:
        Outflow when ``True``; income otherwise.
    category:
        Optional raw category hint (CSV category column or OFX type mapping).
    memo:
        Optional memo kept only when it adds information to ``description``.
    """

    date: str
    description: str
    amount_minor_units: int
    is_expense: bool
    category: str | None = None
    memo: str | None = None


@dataclass(frozen=True, slots=True)
class Skipped:
    """A row the parser dropped, with the reason and its 0-based position."""

    reason: Literal["missing_field", "bad_date", "bad_amount"]
    position: int


type RowOutcome = ParsedTransaction | Skipped


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportableTransaction(ParsedTransaction):
    """A parsed transaction annotated for user review."""

    bucket_id: str
    mapped_category: ExpenseCategory
    is_duplicate: bool
    selected: bool

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "date": self.date,
            "description": self.description,
            "amountMinorUnits": self.amount_minor_units,
            "isExpense": self.is_expense,
            "bucketId": self.bucket_id,
            "mappedCategory": self.mapped_category,
            "isDuplicate": self.is_duplicate,
            "selected": self.selected,
        }
        if self.category is not None:
            out["category"] = self.category
        if self.memo is not None:
            out["memo"] = self.memo
        return out


@dataclass(frozen=True, slots=True)
class DateRange:
    earliest: str
    latest: str


@dataclass(frozen=True, slots=True)
class ImportPreview:
    """Review-ready aggregate of importable transactions and their counts."""

    transactions: tuple[ImportableTransaction, ...]
    total_count: int
    expense_count: int
    income_count: int
    duplicate_count: int
    date_range: DateRange | None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping with camelCase keys."""

        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "totalCount": self.total_count,
            "expenseCount": self.expense_count,
            "incomeCount": self.income_count,
            "duplicateCount": self.duplicate_count,
            "dateRange": (
                {"earliest": self.date_range.earliest, "latest": self.date_range.latest}
                if self.date_range is not None
                else None
            ),
        }


# ---------------------------------------------------------------------------
# Persistence boundary
# ---------------------------------------------------------------------------


class ExistingExpense(BaseModel):
    """Read-only snapshot of a stored expense, used only for duplicate checks.

    Accepts the persisted camelCase shape (``transactionDate``, ``createdAt``,
    ``amountMinorUnits`` or the legacy ``amountCents``) as well as snake_case
    field names. Unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    name: str
    amount_minor_units: int = Field(
        ge=0,
        validation_alias=AliasChoices("amountMinorUnits", "amountCents", "amount_minor_units"),
    )
    transaction_date: str | None = Field(
        default=None, validation_alias=AliasChoices("transactionDate", "transaction_date")
    )
    created_at: str = Field(default="", validation_alias=AliasChoices("createdAt", "created_at"))

    @property
    def effective_date(self) -> str:
        """Transaction date, else the date part of the creation timestamp."""

        return self.transaction_date or self.created_at[:10]


class ExpensePayload(BaseModel):
    """An expense entity ready for persistence, minus its identifier.

    Field constraints mirror the persisted expense schema; ``model_dump(
    by_alias=True)`` yields the camelCase shape the store expects.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", populate_by_name=True, alias_generator=to_camel
    )

    plan_id: str
    bucket_id: str
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    amount_minor_units: int = Field(ge=0)
    currency_code: CurrencyCode | None = None
    frequency: Frequency
    category: ExpenseCategory
    is_fixed: bool
    transaction_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)
    created_at: str
    updated_at: str


@dataclass(frozen=True, slots=True)
class ImportOptions:
    """Settings applied to every emitted expense payload."""

    plan_id: str
    default_bucket_id: str
    default_frequency: Frequency = "monthly"
    currency_code: CurrencyCode | None = None


def existing_expenses_from_records(
    records: list[Mapping[str, Any]],
) -> list[ExistingExpense]:
    """Validate raw mappings (e.g. decoded JSON) into :class:`ExistingExpense`."""

    return [ExistingExpense.model_validate(r) for r in records]


__all__ = [
    "CURRENCY_CODES",
    "DATE_FORMATS",
    "DELIMITERS",
    "EXPENSE_CATEGORIES",
    "FREQUENCIES",
    "NAME_MAX_LENGTH",
    "NOTES_MAX_LENGTH",
    "POSITIONAL_MAPPING",
    "ColumnMapping",
    "CsvDelimiter",
    "CsvParseOptions",
    "CurrencyCode",
    "DateFormat",
    "DateRange",
    "ExistingExpense",
    "ExpenseCategory",
    "ExpensePayload",
    "FileType",
    "Frequency",
    "ImportOptions",
    "ImportPreview",
    "ImportableTransaction",
    "ParsedAmount",
    "ParsedTransaction",
    "RowOutcome",
    "Skipped",
]
