# backend/gstimport/transform/grouping.py
"""Invoice-level grouping and GST-rate splitting.

Lines are grouped by invoice number. An invoice whose lines carry more than one
effective GST rate is split: the sub-group with the largest taxable value keeps
the original number, the others get letter suffixes (``INV1A``, ``INV1B``...).
Every group is summed into a single output row.
"""

from string import ascii_uppercase

from ..logging_setup import get_logger
from .derived import calculate_igst_flags, gst_rate_key, invoice_total
from .rows import fill_defaults
from .synonyms import SUM_COLUMNS
from .utils import parse_number

log = get_logger("gstimport.transform.grouping")


def split_suffix(index: int) -> str:
    """Letter for the ``index``-th extra sub-group (1 -> A).

    Past Z this continues through the ASCII table (27 -> ``[``) rather than
    wrapping to ``AA``; downstream invoice formats rely on the sequence.
    """
    if 1 <= index <= len(ascii_uppercase):
        return ascii_uppercase[index - 1]
    return chr(65 + index - 1)


def unique_invoice_no(base: str, suffix: str, taken: set[str]) -> str:
    """First free number of ``base+suffix``, ``base+suffix+1``, ``base+suffix+2``..."""
    candidate = f"{base}{suffix}"
    n = 0
    while candidate in taken:
        n += 1
        candidate = f"{base}{suffix}{n}"
    return candidate


def _taxable(rows: list[dict]) -> float:
    return sum(parse_number(r.get("ass_val")) or 0.0 for r in rows)


def sum_rows(rows: list[dict], invoice_no: str) -> dict:
    if not rows:
        raise ValueError("cannot sum an empty group")
    template = dict(rows[0])
    template["invno"] = invoice_no
    for col in SUM_COLUMNS:
        template[col] = sum(parse_number(r.get(col)) or 0.0 for r in rows)
    template["inv_val"] = invoice_total(template)
    template["igst_yes_no"], template["percentage"] = calculate_igst_flags(template)
    return fill_defaults(template)


def group_by_rate(rows: list[dict]) -> dict[tuple[str, float], list[dict]]:
    groups: dict[tuple[str, float], list[dict]] = {}
    for r in rows:
        groups.setdefault(gst_rate_key(r), []).append(r)
    return groups


def group_and_split(rows: list[dict]) -> tuple[list[dict], dict[str, list[str]], list[int]]:
    """Group canonical rows into invoices.

    Returns ``(invoices, splits, skipped)`` where ``splits`` maps each split
    invoice number to the numbers emitted for it and ``skipped`` holds the
    1-based positions of rows without an invoice number.
    """
    invoices: dict[str, list[dict]] = {}
    skipped = []
    for i, r in enumerate(rows):
        invno = str(r.get("invno") or "")
        if not invno.strip():
            log.debug("Skipping row %d: no invoice number", i + 1)
            skipped.append(i + 1)
            continue
        invoices.setdefault(invno, []).append(r)

    log.debug("Found %d invoices, skipped %d rows", len(invoices), len(skipped))

    # real numbers count as taken so a suffix never collides with one
    taken = set(invoices)
    out = []
    splits = {}

    for invno, lines in invoices.items():
        groups = list(group_by_rate(lines).items())
        if len(groups) == 1:
            out.append(sum_rows(lines, invno))
            continue

        # largest taxable value first; sorted() keeps encounter order on ties
        groups = sorted(groups, key=lambda g: -_taxable(g[1]))
        emitted = []
        for i, ((kind, rate), group_rows) in enumerate(groups):
            number = invno if i == 0 else unique_invoice_no(invno, split_suffix(i), taken)
            taken.add(number)
            out.append(sum_rows(group_rows, number))
            emitted.append(number)
            log.debug("Invoice %s: %s %s%% -> %s (%d lines)", invno, kind, rate, number, len(group_rows))
        splits[invno] = emitted
        log.debug("Split invoice %s -> [%s]", invno, ", ".join(emitted))

    log.debug("Grouping produced %d rows from %d invoices", len(out), len(invoices))
    return out, splits, skipped
