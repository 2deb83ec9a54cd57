import datetime

import pytest

from app.services.cells import RowMapping, parse_date, parse_vn_number, to_str


@pytest.mark.parametrize("raw, expected", [
    ("8.622.294", 8622294),
    ("-50.000", -50000),
    ("1.234,5", 1234.5),
    ("1,5", 1.5),
    ("₫257.128.170", 257128170),
    ("12.000đ", 12000),
    ("1234.5", 1234.5),
    ("0.5", 0.5),
    (" 42 ", 42),
    (1500, 1500),
    (12.75, 12.75),
])
def test_parse_vn_number_values(raw, expected):
    assert parse_vn_number(raw) == expected


@pytest.mark.parametrize("raw", ["-", "N/A", "", None, "abc", "nan", "inf", float("nan"), True, [1]])
def test_parse_vn_number_never_fails(raw):
    assert parse_vn_number(raw) == 0


@pytest.mark.parametrize("raw", ["8.622.294", "-50.000", "1.234,5", "0.5", 1500, 99.25, "N/A"])
def test_parse_vn_number_idempotent(raw):
    once = parse_vn_number(raw)
    assert parse_vn_number(str(once)) == once


def test_to_str():
    assert to_str(None) == ""
    assert to_str(576123456789.0) == "576123456789"
    assert to_str("  SKU1 ") == "SKU1"
    assert to_str(1.5) == "1.5"


@pytest.mark.parametrize("raw, expected", [
    ("31/01/2026 23:49:07", datetime.date(2026, 1, 31)),
    ("2026-01-15", datetime.date(2026, 1, 15)),
    ("2026-01-01 00:01", datetime.date(2026, 1, 1)),
    ("01-02-2026", datetime.date(2026, 2, 1)),
    ("2026/03/04", datetime.date(2026, 3, 4)),
    (datetime.datetime(2026, 5, 6, 7, 8), datetime.date(2026, 5, 6)),
    (46023, datetime.date(2026, 1, 1)),
])
def test_parse_date_formats(raw, expected):
    assert parse_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "hôm qua", "31/02/2026", -3])
def test_parse_date_unknown(raw):
    assert parse_date(raw) is None


def test_row_mapping_fails_closed():
    mapping = RowMapping({"qty": 1, "name": 5})
    row = ["A", "3"]

    assert mapping.number(row, "qty") == 3
    assert mapping.text(row, "name") == ""
    assert mapping.number(row, "missing") == 0
    assert mapping.number(None, "qty") == 0
