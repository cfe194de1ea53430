# backend/gstimport/transform/existing.py
"""Re-run the engine over rows that are already in canonical shape.

Used when stored invoice lines are exported again (optionally filtered by
date, customer, invoice, amount or GST type) and need the same grouping and
splitting as a fresh import.
"""

from datetime import date
from typing import Literal

import pandas as pd
from pydantic import BaseModel

from ..logging_setup import get_logger
from .engine import TransformationEngine
from .models import TransformationResult
from .rows import project
from .synonyms import OUTPUT_COLUMNS

log = get_logger("gstimport.transform.existing")

# Stored rows carry everything except the period code, which is re-derived
SOURCE_HEADERS = [c for c in OUTPUT_COLUMNS if c != "RE"]


class RowFilters(BaseModel):
    date_from: date | None = None
    date_to: date | None = None
    customer: str | None = None
    invoice: str | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    gst_type: Literal["all", "cgst_sgst", "igst", "mixed", "zero_gst"] = "all"


class ExistingPreview(BaseModel):
    summary: dict
    result: TransformationResult
    will_split: bool
    estimated_invoices: int


def _frame(rows: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame([project(r) for r in rows], columns=OUTPUT_COLUMNS)
    for c in ("c_gst", "s_gst", "igst", "inv_val"):
        df[c] = pd.to_numeric(df[c], errors="coerce").fillna(0)
    return df


def filter_rows(rows: list[dict], filters: RowFilters | None = None) -> list[dict]:
    if not rows:
        return []
    if filters is None:
        return list(rows)

    df = _frame(rows)
    keep = pd.Series(True, index=df.index)

    dates = pd.to_datetime(df["inv_date"], format="%Y-%m-%d", errors="coerce")
    if filters.date_from:
        keep &= dates >= pd.Timestamp(filters.date_from)
    if filters.date_to:
        keep &= dates <= pd.Timestamp(filters.date_to)

    if filters.customer:
        needle = filters.customer.lower()
        keep &= (
            df["cust_name"].astype(str).str.lower().str.contains(needle, regex=False)
            | df["cust_code"].astype(str).str.lower().str.contains(needle, regex=False)
        )
    if filters.invoice:
        keep &= df["invno"].astype(str).str.lower().str.contains(filters.invoice.lower(), regex=False)

    if filters.min_amount is not None:
        keep &= df["inv_val"] >= filters.min_amount
    if filters.max_amount is not None:
        keep &= df["inv_val"] <= filters.max_amount

    split_tax = (df["c_gst"] > 0) | (df["s_gst"] > 0)
    if filters.gst_type == "cgst_sgst":
        keep &= (df["c_gst"] > 0) & (df["s_gst"] > 0) & (df["igst"] == 0)
    elif filters.gst_type == "igst":
        keep &= (df["igst"] > 0) & (df["c_gst"] == 0) & (df["s_gst"] == 0)
    elif filters.gst_type == "mixed":
        keep &= split_tax & (df["igst"] > 0)
    elif filters.gst_type == "zero_gst":
        keep &= (df["c_gst"] == 0) & (df["s_gst"] == 0) & (df["igst"] == 0)

    kept = [r for r, k in zip(rows, keep.tolist()) if k]
    log.debug("Filtered %d rows down to %d", len(rows), len(kept))
    return kept


def summarize_rows(rows: list[dict]) -> dict:
    if not rows:
        return {"total_records": 0, "date_range": None, "unique_invoices": 0, "total_value": 0}
    df = _frame(rows)
    dates = sorted(d for d in df["inv_date"].astype(str) if d)
    return {
        "total_records": len(df),
        "date_range": {"from": dates[0], "to": dates[-1]} if dates else None,
        "unique_invoices": int(df["invno"].nunique()),
        "total_value": float(df["inv_val"].sum()),
    }


def to_transformation_input(rows: list[dict]) -> tuple[list[dict], list[str]]:
    if not rows:
        return [], []
    return [{h: r.get(h) for h in SOURCE_HEADERS} for r in rows], list(SOURCE_HEADERS)


def transform_existing(
    rows: list[dict],
    filters: RowFilters | None = None,
    engine: TransformationEngine | None = None,
) -> TransformationResult:
    engine = engine or TransformationEngine()
    inputs, headers = to_transformation_input(filter_rows(rows, filters))
    return engine.transform_data(inputs, headers)


def preview_transformation(
    rows: list[dict],
    filters: RowFilters | None = None,
    engine: TransformationEngine | None = None,
) -> ExistingPreview:
    engine = engine or TransformationEngine()
    filtered = filter_rows(rows, filters)
    result = engine.transform_data(*to_transformation_input(filtered))
    return ExistingPreview(
        summary=summarize_rows(filtered),
        result=result,
        will_split=len(result.data) != len(filtered),
        estimated_invoices=len(result.data),
    )
