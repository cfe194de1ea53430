# backend/gstimport/transform/derived.py
from datetime import date

from .synonyms import MONTH_CODES, MONTH_CODE_MISSING, YEAR_CODE_MISSING
from .utils import parse_number


def _num(x) -> float:
    return parse_number(x) or 0.0


def invoice_year(inv_date) -> int | None:
    if not inv_date:
        return None
    try:
        return date.fromisoformat(str(inv_date)).year
    except ValueError:
        return None


def generate_re_code(inv_date, year_map: dict[int, str]) -> str:
    """Period code: year letter + month letter (A=Jan .. L=Dec)."""
    if not inv_date:
        return ""
    try:
        d = date.fromisoformat(str(inv_date))
    except ValueError:
        return ""
    year_code = year_map.get(d.year)
    if not year_code:
        return YEAR_CODE_MISSING
    month_code = MONTH_CODES.get(d.month)
    if not month_code:
        return MONTH_CODE_MISSING
    return year_code + month_code


def calculate_igst_flags(row: dict) -> tuple[str, float | None]:
    """(igst_yes_no, percentage) from a row's amounts and any supplied rates."""
    igst_amt = _num(row.get("igst"))
    igst_rate = _num(row.get("igst_rate"))
    cgst_rate = _num(row.get("cgst_rate"))
    sgst_rate = _num(row.get("sgst_rate"))
    ass_val = _num(row.get("ass_val"))

    if igst_amt > 0 or igst_rate > 0:
        # supplied rate only; never back-computed from the amount here
        return "yes", (igst_rate or None)

    if cgst_rate > 0 or sgst_rate > 0:
        return "no", cgst_rate + sgst_rate
    if ass_val > 0:
        total_tax = _num(row.get("c_gst")) + _num(row.get("s_gst"))
        if total_tax > 0:
            return "no", round(total_tax / ass_val * 100, 2)
    return "no", None


def effective_gst_rate(row: dict) -> float:
    """Rate used to sub-group invoice lines; independent of ``percentage``."""
    ass_val = _num(row.get("ass_val"))
    if ass_val <= 0:
        return 0
    igst = _num(row.get("igst"))
    if igst > 0:
        return round(igst / ass_val * 100, 2)
    split_tax = _num(row.get("c_gst")) + _num(row.get("s_gst"))
    if split_tax > 0:
        return round(split_tax / ass_val * 100, 2)
    return 0


def invoice_total(row: dict) -> float:
    return (
        _num(row.get("ass_val"))
        + _num(row.get("c_gst"))
        + _num(row.get("s_gst"))
        + _num(row.get("igst"))
        + _num(row.get("amot"))
    )


def gst_rate_key(row: dict) -> tuple[str, float]:
    """Sub-group key for splitting: which tax applies plus its effective rate.

    An 18% IGST line and an 18% CGST+SGST line land in different groups.
    """
    ass_val = _num(row.get("ass_val"))
    if ass_val > 0 and _num(row.get("igst")) > 0:
        return "igst", effective_gst_rate(row)
    if ass_val > 0 and _num(row.get("c_gst")) + _num(row.get("s_gst")) > 0:
        return "cgst_sgst", effective_gst_rate(row)
    return "none", 0
