import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from statement_import.config import DEFAULT_MAX_FILE_BYTES, load_settings
from statement_import.errors import FileTooLargeError
from statement_import.ingest import load_existing_expenses, read_statement_file


def test_reads_utf8_with_bom(tmp_path: Path):
    p = tmp_path / "bank.csv"
    p.write_bytes("\ufeffDate,Description,Amount\n2024-01-15,Café,-5\n".encode())
    assert read_statement_file(p).startswith("Date,Description")
    assert "Café" in read_statement_file(p)


def test_falls_back_to_latin1(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
):
    p = tmp_path / "bank.csv"
    p.write_bytes("Date,Description,Amount\n2024-01-15,Caf\xe9,-5\n".encode("latin-1"))
    # The package logger does not propagate once configured; caplog listens on root.
    monkeypatch.setattr(logging.getLogger("statement_import"), "propagate", True)
    with caplog.at_level(logging.WARNING, logger="statement_import"):
        text = read_statement_file(p)
    assert "Café" in text
    assert any("latin1_fallback" in r.getMessage() for r in caplog.records)


def test_rejects_oversized_file(tmp_path: Path):
    p = tmp_path / "big.csv"
    p.write_text("x" * 11)
    with pytest.raises(FileTooLargeError) as exc:
        read_statement_file(p, max_bytes=10)
    assert exc.value.size == 11
    assert "File too large" in str(exc.value)


def test_missing_file_propagates(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_statement_file(tmp_path / "nope.csv")


def test_loads_existing_expenses_list_or_wrapper(tmp_path: Path):
    records = [
        {"name": "Coffee", "amountMinorUnits": 500, "transactionDate": "2024-01-15", "id": "e1"},
        {"name": "Rent", "amountCents": 150000, "createdAt": "2024-01-01T00:00:00Z"},
    ]
    as_list = tmp_path / "list.json"
    as_list.write_text(json.dumps(records))
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"expenses": records}))

    for path in (as_list, wrapped):
        expenses = load_existing_expenses(path)
        assert [e.effective_date for e in expenses] == ["2024-01-15", "2024-01-01"]
        assert [e.amount_minor_units for e in expenses] == [500, 150000]


def test_existing_expenses_shape_errors(tmp_path: Path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"rows": []}))
    with pytest.raises(ValueError, match="Expected a list"):
        load_existing_expenses(p)

    p.write_text(json.dumps([{"name": "Coffee", "amountMinorUnits": -1}]))
    with pytest.raises(ValidationError):
        load_existing_expenses(p)


def test_settings_defaults():
    settings = load_settings()
    assert settings.max_file_bytes == DEFAULT_MAX_FILE_BYTES
    assert settings.default_frequency == "monthly"
    assert settings.currency_code is None


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STATEMENT_IMPORT_MAX_FILE_BYTES", "2048")
    monkeypatch.setenv("STATEMENT_IMPORT_DEFAULT_FREQUENCY", "Weekly")
    monkeypatch.setenv("STATEMENT_IMPORT_CURRENCY", "eur")
    settings = load_settings()
    assert (settings.max_file_bytes, settings.default_frequency, settings.currency_code) == (
        2048,
        "weekly",
        "EUR",
    )


def test_invalid_settings_fall_back(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STATEMENT_IMPORT_MAX_FILE_BYTES", "lots")
    monkeypatch.setenv("STATEMENT_IMPORT_DEFAULT_FREQUENCY", "daily")
    monkeypatch.setenv("STATEMENT_IMPORT_CURRENCY", "BTC")
    settings = load_settings()
    assert settings.max_file_bytes == DEFAULT_MAX_FILE_BYTES
    assert settings.default_frequency == "monthly"
    assert settings.currency_code is None
