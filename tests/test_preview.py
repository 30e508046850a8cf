import pytest

from statement_import.models import DateRange, ExistingExpense, ParsedTransaction
from statement_import.preview import (
    change_bucket,
    create_import_preview,
    select_all,
    select_where,
    selected_count,
    update_transaction,
)


def _rows() -> list[ParsedTransaction]:
    return [
        ParsedTransaction("2024-01-15", "Coffee Shop", 500, True),
        ParsedTransaction("2024-01-20", "ACME PAYROLL", 250000, False),
        ParsedTransaction("2024-01-10", "NETFLIX", 1599, True, category="Subscription"),
    ]


def _existing() -> list[ExistingExpense]:
    return [
        ExistingExpense.model_validate(
            {"transactionDate": "2024-01-15", "amountMinorUnits": 500, "name": "Coffee Shop"}
        )
    ]


def test_preview_annotates_rows_and_counts():
    preview = create_import_preview(_rows(), _existing(), "bucket-1")

    assert preview.total_count == 3
    assert preview.expense_count == 2
    assert preview.income_count == 1
    assert preview.duplicate_count == 1
    assert preview.date_range == DateRange(earliest="2024-01-10", latest="2024-01-20")

    coffee, payroll, netflix = preview.transactions
    assert (coffee.is_duplicate, coffee.selected, coffee.mapped_category) == (True, False, "dining")
    assert (payroll.is_duplicate, payroll.selected) == (False, False)
    assert (netflix.selected, netflix.mapped_category) == (True, "subscriptions")
    assert {r.bucket_id for r in preview.transactions} == {"bucket-1"}


def test_preview_is_idempotent():
    assert create_import_preview(_rows(), _existing(), "b") == create_import_preview(
        _rows(), _existing(), "b"
    )


def test_empty_preview():
    preview = create_import_preview([], [], "b")
    assert preview.total_count == 0
    assert preview.date_range is None
    assert preview.to_dict()["dateRange"] is None


def test_to_dict_uses_camel_case():
    data = create_import_preview(_rows(), _existing(), "b").to_dict()
    assert data["duplicateCount"] == 1
    assert data["dateRange"] == {"earliest": "2024-01-10", "latest": "2024-01-20"}
    first = data["transactions"][0]
    assert first["amountMinorUnits"] == 500
    assert first["isDuplicate"] is True
    assert "memo" not in first
    assert data["transactions"][2]["category"] == "Subscription"


def test_update_transaction_returns_new_preview():
    preview = create_import_preview(_rows(), _existing(), "b")
    edited = update_transaction(preview, 0, selected=True, mapped_category="groceries")

    assert edited.transactions[0].selected is True
    assert edited.transactions[0].mapped_category == "groceries"
    assert preview.transactions[0].selected is False
    assert edited.duplicate_count == preview.duplicate_count
    assert selected_count(edited) == 2


def test_update_transaction_rejects_bad_input():
    preview = create_import_preview(_rows(), [], "b")
    with pytest.raises(IndexError):
        update_transaction(preview, 3, selected=True)
    with pytest.raises(IndexError):
        update_transaction(preview, -1, selected=True)
    with pytest.raises(ValueError, match="category"):
        update_transaction(preview, 0, mapped_category="snacks")
    with pytest.raises(ValueError, match="amount_minor_units"):
        update_transaction(preview, 0, amount_minor_units=1)


def test_select_all_skips_income_and_duplicates():
    preview = create_import_preview(_rows(), _existing(), "b")
    cleared = select_all(preview, False)
    assert selected_count(cleared) == 0

    # Manually picked duplicate is deselected again by "select all".
    picked = update_transaction(cleared, 0, selected=True)
    reselected = select_all(picked, True)
    assert [r.selected for r in reselected.transactions] == [False, False, True]


def test_select_where_and_change_bucket():
    preview = create_import_preview(_rows(), _existing(), "b")
    everything = select_where(preview, lambda r: True)
    assert selected_count(everything) == 3

    moved = change_bucket(everything, "bucket-2")
    assert {r.bucket_id for r in moved.transactions} == {"bucket-2"}
    assert selected_count(moved) == 3


def test_update_transaction_trims_and_rejects_blank_description():
    preview = create_import_preview(_rows(), [], "b")
    renamed = update_transaction(preview, 0, description="  Corner Cafe  ")
    assert renamed.transactions[0].description == "Corner Cafe"

    for blank in ("", "   ", None):
        with pytest.raises(ValueError, match="Description"):
            update_transaction(preview, 0, description=blank)
    assert preview.transactions[0].description == "Coffee Shop"
