# backend/gstimport/exporters.py
from io import BytesIO
import pandas as pd

from .transform.rows import project
from .transform.synonyms import OUTPUT_COLUMNS

MONEY_COLUMNS = ["bas_price", "ass_val", "c_gst", "s_gst", "igst", "amot", "inv_val"]


def rows_to_frame(rows: list[dict]) -> pd.DataFrame:
    """Transformed rows as a DataFrame in the fixed export column order."""
    return pd.DataFrame([project(r) for r in rows], columns=OUTPUT_COLUMNS)


def export_csv(rows: list[dict]) -> bytes:
    return rows_to_frame(rows).to_csv(index=False).encode("utf-8")


def export_xlsx_styled(df: pd.DataFrame, sheet_name: str = "Invoices"):
    """
    Return XLSX bytes with nice formatting:
      - bold header, freeze top row
      - auto column widths
      - money / quantity / percentage formats for the GST columns
    """
    bio = BytesIO()
    with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        wb  = writer.book
        ws  = writer.sheets[sheet_name]

        # Bold header + freeze
        header_fmt = wb.add_format({"bold": True, "text_wrap": True, "bg_color": "#F5F5F5", "border": 1})
        for col_num, value in enumerate(df.columns.values):
            ws.write(0, col_num, value, header_fmt)
        ws.freeze_panes(1, 0)

        # Auto-width
        widths = {}
        for i, col in enumerate(df.columns):
            col_series = df[col].astype(str)
            widths[col] = min(max([len(str(col))] + [len(s) for s in col_series.head(200)]) + 2, 60)
            ws.set_column(i, i, widths[col])

        money_fmt = wb.add_format({"num_format": "#,##0.00"})
        qty_fmt   = wb.add_format({"num_format": "#,##0"})
        # percentage holds 18 for 18%, not 0.18
        pct_fmt   = wb.add_format({"num_format": "0.00"})

        def col_has(name: str):
            return [i for i, c in enumerate(df.columns) if c == name]

        for key in MONEY_COLUMNS:
            for idx in col_has(key):
                ws.set_column(idx, idx, widths[key], money_fmt)
        for idx in col_has("qty"):
            ws.set_column(idx, idx, widths["qty"], qty_fmt)
        for idx in col_has("percentage"):
            ws.set_column(idx, idx, widths["percentage"], pct_fmt)

    bio.seek(0)
    return bio.getvalue()


def export_xlsx(rows: list[dict]) -> bytes:
    return export_xlsx_styled(rows_to_frame(rows))
