# backend/gstimport/transform/utils.py
import math
import re
from datetime import date, datetime

CURRENCY_GLYPHS = re.compile(r"[₹$€£¥]")
_LEADING_NUMBER = re.compile(r"^-?(\d+\.?\d*|\.\d+)")

# Tried in order. True means the day comes first.
DATE_LAYOUTS = [
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), True),   # D/M/YYYY
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), False),  # YYYY-M-D
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), True),   # D-M-YYYY
]

MIN_YEAR, MAX_YEAR = 1900, 2100


def norm_header(h: str) -> str:
    h = re.sub(r"\s+", "_", str(h).strip().lower())
    return re.sub(r"[^a-z0-9_]", "", h)


def _valid_parts(year: int, month: int, day: int) -> str | None:
    if not (MIN_YEAR <= year <= MAX_YEAR):
        return None
    if not (1 <= month <= 12) or not (1 <= day <= 31):
        return None
    try:
        d = date(year, month, day)
    except ValueError:
        # e.g. 31/02/2024
        return None
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date(x):
    """Return ``YYYY-MM-DD`` for a recognised date, else ``None``. Never raises."""
    if x is None:
        return None
    if isinstance(x, datetime):
        x = x.date()
    if isinstance(x, date):
        return _valid_parts(x.year, x.month, x.day)
    s = str(x).strip()
    if not s:
        return None
    for pattern, day_first in DATE_LAYOUTS:
        m = pattern.match(s)
        if not m:
            continue
        a, b, c = (int(g) for g in m.groups())
        day, month, year = (a, b, c) if day_first else (c, b, a)
        iso = _valid_parts(year, month, day)
        if iso:
            return iso
    return None


def parse_number(x):
    """Parse noisy numeric text (currency glyphs, thousands separators,
    accounting parentheses). Returns a float or ``None``; never raises."""
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        v = float(x)
        return v if math.isfinite(v) else None
    s = str(x).strip()
    if s == "":
        return None
    negative = "(" in s and ")" in s
    s = CURRENCY_GLYPHS.sub("", s)
    s = re.sub(r"[,\s()]", "", s)
    try:
        v = float(s)
    except ValueError:
        # keep digits, dot and minus, then take the leading number
        m = _LEADING_NUMBER.match(re.sub(r"[^\d.\-]", "", s))
        if not m:
            return None
        v = float(m.group(0))
    if not math.isfinite(v):
        return None
    return -abs(v) if negative else v


def as_text(x) -> str:
    """Text cell value; integral floats from spreadsheets lose their ``.0``."""
    if x is None:
        return ""
    if isinstance(x, float):
        if not math.isfinite(x):
            return ""
        if x.is_integer():
            return str(int(x))
    return str(x)


PARSERS = {
    "date": parse_date,
    "number": parse_number,
}
