from datetime import date

import pytest
from pydantic import ValidationError

from gstimport.transform.existing import (
    RowFilters,
    SOURCE_HEADERS,
    filter_rows,
    preview_transformation,
    summarize_rows,
    to_transformation_input,
    transform_existing,
)
from gstimport.transform.synonyms import OUTPUT_COLUMNS


def stored(invno, inv_date, ass, cgst=0, sgst=0, igst=0, *, cust="C001", name="Acme Traders"):
    return {
        "cust_code": cust,
        "cust_name": name,
        "inv_date": inv_date,
        "RE": "stale",
        "invno": invno,
        "part_code": "P-1",
        "part_name": "Brake pad",
        "tariff": "8708",
        "qty": 1,
        "bas_price": ass,
        "ass_val": ass,
        "c_gst": cgst,
        "s_gst": sgst,
        "igst": igst,
        "amot": 0,
        "inv_val": ass + cgst + sgst + igst,
        "igst_yes_no": "yes" if igst else "no",
        "percentage": 0,
    }


@pytest.fixture
def ledger():
    return [
        stored("S-1", "2024-01-10", 100, 9, 9, cust="C001", name="Acme Traders"),
        stored("S-2", "2024-02-10", 200, igst=36, cust="C002", name="Delta Motors"),
        stored("S-3", "2024-03-10", 300, 27, 27, 54, cust="C003", name="Orbit Auto"),
        stored("X-4", "2024-03-20", 50, cust="C004", name="Zenith Spares"),
    ]


def _numbers(rows):
    return [r["invno"] for r in rows]


def test_no_filters_keeps_everything(ledger):
    assert filter_rows(ledger) == ledger
    assert filter_rows(ledger, RowFilters()) == ledger
    assert filter_rows([], RowFilters(customer="acme")) == []


def test_date_range_is_inclusive(ledger):
    f = RowFilters(date_from=date(2024, 2, 10), date_to=date(2024, 3, 10))
    assert _numbers(filter_rows(ledger, f)) == ["S-2", "S-3"]


def test_date_filter_accepts_iso_text(ledger):
    f = RowFilters(date_from="2024-03-01")
    assert _numbers(filter_rows(ledger, f)) == ["S-3", "X-4"]


def test_invalid_filter_date_is_rejected():
    with pytest.raises(ValidationError):
        RowFilters(date_from="31/02/2024")


def test_customer_matches_name_or_code(ledger):
    assert _numbers(filter_rows(ledger, RowFilters(customer="delta"))) == ["S-2"]
    assert _numbers(filter_rows(ledger, RowFilters(customer="c00"))) == ["S-1", "S-2", "S-3", "X-4"]
    assert _numbers(filter_rows(ledger, RowFilters(customer="C003"))) == ["S-3"]


def test_invoice_substring(ledger):
    assert _numbers(filter_rows(ledger, RowFilters(invoice="s-"))) == ["S-1", "S-2", "S-3"]


def test_amount_bounds_use_invoice_value(ledger):
    f = RowFilters(min_amount=118, max_amount=236)
    assert _numbers(filter_rows(ledger, f)) == ["S-1", "S-2"]


@pytest.mark.parametrize("gst_type, expected", [
    ("all", ["S-1", "S-2", "S-3", "X-4"]),
    ("cgst_sgst", ["S-1"]),
    ("igst", ["S-2"]),
    ("mixed", ["S-3"]),
    ("zero_gst", ["X-4"]),
])
def test_gst_type(ledger, gst_type, expected):
    assert _numbers(filter_rows(ledger, RowFilters(gst_type=gst_type))) == expected


def test_summary(ledger):
    summary = summarize_rows(ledger)
    assert summary == {
        "total_records": 4,
        "date_range": {"from": "2024-01-10", "to": "2024-03-20"},
        "unique_invoices": 4,
        "total_value": 118 + 236 + 408 + 50,
    }


def test_summary_of_nothing():
    assert summarize_rows([]) == {
        "total_records": 0, "date_range": None, "unique_invoices": 0, "total_value": 0,
    }


def test_transformation_input_drops_period_code(ledger):
    rows, headers = to_transformation_input(ledger[:1])
    assert headers == SOURCE_HEADERS
    assert "RE" not in headers
    assert rows[0]["invno"] == "S-1"
    assert to_transformation_input([]) == ([], [])


def test_existing_rows_are_regrouped_and_recoded():
    rows = [
        stored("S-9", "2024-01-05", 100, 9, 9),
        stored("S-9", "2024-01-05", 200, 18, 18),
    ]
    result = transform_existing(rows)

    assert result.success, result.errors
    assert len(result.data) == 1
    row = result.data[0]
    assert list(row) == OUTPUT_COLUMNS
    assert row["RE"] == "QA"
    assert row["ass_val"] == 300
    assert row["inv_val"] == 354
    assert row["percentage"] == 18.0


def test_existing_mixed_invoice_is_split():
    rows = [
        stored("S-5", "2024-06-01", 1000, 90, 90),
        stored("S-5", "2024-06-01", 500, igst=90),
    ]
    result = transform_existing(rows)
    assert _numbers(result.data) == ["S-5", "S-5A"]
    assert all(r["RE"] == "QF" for r in result.data)


def test_preview_reports_row_count_change(ledger):
    same = preview_transformation(ledger)
    assert same.estimated_invoices == 4
    assert not same.will_split
    assert same.summary["total_records"] == 4

    merged = preview_transformation([
        stored("S-7", "2024-01-05", 100, 9, 9),
        stored("S-7", "2024-01-05", 200, 18, 18),
    ])
    assert merged.estimated_invoices == 1
    assert merged.will_split


def test_preview_applies_filters(ledger):
    preview = preview_transformation(ledger, RowFilters(gst_type="igst"))
    assert preview.summary["total_records"] == 1
    assert _numbers(preview.result.data) == ["S-2"]


def test_preview_filters_once(ledger, monkeypatch):
    from gstimport.transform import existing

    calls = []
    real = existing.filter_rows

    def counting(rows, filters=None):
        calls.append(filters)
        return real(rows, filters)

    monkeypatch.setattr(existing, "filter_rows", counting)
    preview = existing.preview_transformation(ledger, RowFilters(customer="acme"))
    assert len(calls) == 1
    assert _numbers(preview.result.data) == ["S-1"]
