import io

import pandas as pd

from gstimport.exporters import export_csv, export_xlsx, rows_to_frame
from gstimport.transform.synonyms import OUTPUT_COLUMNS

ROWS = [
    {"invno": "INV1", "cust_code": "C001", "inv_date": "2024-01-15", "RE": "QA",
     "ass_val": 1000.0, "c_gst": 90.0, "s_gst": 90.0, "inv_val": 1180.0,
     "igst_yes_no": "no", "percentage": 18.0},
    {"invno": "INV1A", "cust_code": "C001", "inv_date": "2024-01-15", "RE": "QA",
     "ass_val": 500.0, "igst": 90.0, "inv_val": 590.0, "igst_yes_no": "yes"},
]


def test_frame_has_fixed_columns():
    df = rows_to_frame(ROWS)
    assert list(df.columns) == OUTPUT_COLUMNS
    assert df.loc[1, "percentage"] == 0
    assert df.loc[1, "cust_name"] == ""


def test_csv_header_and_order():
    text = export_csv(ROWS).decode("utf-8")
    lines = text.splitlines()
    assert lines[0] == ",".join(OUTPUT_COLUMNS)
    assert len(lines) == 3
    assert lines[1].startswith("C001,,2024-01-15,QA,INV1,")
    assert lines[2].split(",")[OUTPUT_COLUMNS.index("invno")] == "INV1A"


def test_csv_of_no_rows_is_header_only():
    assert export_csv([]).decode("utf-8").strip() == ",".join(OUTPUT_COLUMNS)


def test_xlsx_reads_back():
    data = export_xlsx(ROWS)
    assert data[:2] == b"PK"
    df = pd.read_excel(io.BytesIO(data), sheet_name="Invoices")
    assert list(df.columns) == OUTPUT_COLUMNS
    assert df["invno"].tolist() == ["INV1", "INV1A"]
    assert df["inv_val"].tolist() == [1180, 590]
