from datetime import date, timedelta

import pytest

from statement_import.dates import detect_date_format, format_date, parse_date


def test_detects_iso():
    assert detect_date_format(["2024-01-15", "2024-02-01"]) == "YYYY-MM-DD"


def test_detects_us_from_day_above_twelve():
    assert detect_date_format(["01/05/2024", "01/15/2024"]) == "MM/DD/YYYY"


def test_detects_eu_from_day_above_twelve():
    assert detect_date_format(["05/01/2024", "15/01/2024"]) == "DD/MM/YYYY"


def test_ambiguous_samples_leave_auto():
    assert detect_date_format(["05/06/2024", "01/02/2024"]) == "auto"
    assert detect_date_format([]) == "auto"
    assert detect_date_format(["yesterday"]) == "auto"


def test_parse_auto_prefers_iso_then_us():
    assert parse_date("2024-01-15") == "2024-01-15"
    assert parse_date("01/02/2024") == "2024-01-02"
    assert parse_date(" 1/2/2024 ") == "2024-01-02"


def test_parse_explicit_eu():
    assert parse_date("15/01/2024", "DD/MM/YYYY") == "2024-01-15"
    assert parse_date("01/02/2024", "DD/MM/YYYY") == "2024-02-01"


def test_parse_ofx_stamp_as_last_resort():
    assert parse_date("20240115120000.000[-5:EST]") == "2024-01-15"
    assert parse_date("20240115", "DD/MM/YYYY") == "2024-01-15"


def test_parse_rejects_impossible_or_garbage():
    assert parse_date("2024-02-30") is None
    assert parse_date("13/13/2024") is None
    assert parse_date("15/01/2024", "MM/DD/YYYY") is None
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date("Jan 5 2024") is None


@pytest.mark.parametrize("fmt", ["YYYY-MM-DD", "MM/DD/YYYY", "DD/MM/YYYY"])
def test_render_then_parse_is_identity(fmt):
    d = date(2023, 12, 25)
    # Walk a full leap year plus boundary days.
    for _ in range(400):
        assert parse_date(format_date(d, fmt), fmt) == d.isoformat()
        d += timedelta(days=1)
