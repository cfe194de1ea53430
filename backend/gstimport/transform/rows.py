# backend/gstimport/transform/rows.py
from .derived import calculate_igst_flags, generate_re_code, invoice_total
from .models import ColumnMapping, TransformationError
from .synonyms import NUMERIC_COLUMNS, OUTPUT_COLUMNS, RATE_COLUMNS
from .utils import PARSERS, as_text

MSG_REQUIRED_EMPTY = "Required field is missing or invalid"
MSG_REQUIRED_UNMAPPED = "Required column not found in source data"


def default_for(column: str):
    return 0 if column in NUMERIC_COLUMNS else ""


def empty_row() -> dict:
    return {c: default_for(c) for c in [*OUTPUT_COLUMNS, *RATE_COLUMNS]}


def fill_defaults(row: dict) -> dict:
    for c in OUTPUT_COLUMNS:
        if row.get(c) is None:
            row[c] = default_for(c)
    return row


def project(row: dict) -> dict:
    """Canonical export shape: exactly OUTPUT_COLUMNS, in order, no nulls."""
    return {c: (row[c] if row.get(c) is not None else default_for(c)) for c in OUTPUT_COLUMNS}


def _convert(value, mapping: ColumnMapping):
    if mapping.parser:
        value = PARSERS[mapping.parser](value)
    if value is None:
        return default_for(mapping.target_column)
    if mapping.target_column not in NUMERIC_COLUMNS:
        return as_text(value)
    return value


def transform_row(
    raw: dict,
    row_number: int,
    mappings: list[ColumnMapping],
    resolved: dict[str, str],
) -> tuple[dict, list[TransformationError]]:
    """Map one raw row onto the canonical fields. ``row_number`` is 1-based."""
    row = empty_row()
    errors = []

    for m in mappings:
        source = resolved.get(m.target_column)
        if source is None:
            if m.required:
                errors.append(TransformationError(
                    row=row_number, column=m.target_column,
                    message=MSG_REQUIRED_UNMAPPED, value=None,
                ))
            continue

        value = raw.get(source)
        try:
            converted = _convert(value, m)
        except Exception as e:
            errors.append(TransformationError(
                row=row_number, column=m.target_column,
                message=f"Transformation error: {e}", value=value,
            ))
            continue

        row[m.target_column] = converted
        if m.required and (converted is None or converted == ""):
            errors.append(TransformationError(
                row=row_number, column=m.target_column,
                message=MSG_REQUIRED_EMPTY, value=value,
            ))

    return row, errors


def apply_derived_fields(row: dict, row_number: int, year_map: dict[int, str]) -> list[TransformationError]:
    """Period code, IGST flag/percentage and invoice total, guarded per row."""
    try:
        if row.get("inv_date"):
            row["RE"] = generate_re_code(row["inv_date"], year_map)
        row["igst_yes_no"], row["percentage"] = calculate_igst_flags(row)
        row["inv_val"] = invoice_total(row)
    except Exception as e:
        return [TransformationError(
            row=row_number, column="derived_fields",
            message=f"Error calculating derived fields: {e}", value=None,
        )]
    return []


def transform_rows(
    rows: list[dict],
    mappings: list[ColumnMapping],
    resolved: dict[str, str],
    year_map: dict[int, str],
) -> tuple[list[dict], list[TransformationError]]:
    out, errors = [], []
    for i, raw in enumerate(rows):
        row, row_errors = transform_row(raw or {}, i + 1, mappings, resolved)
        row_errors += apply_derived_fields(row, i + 1, year_map)
        errors.extend(row_errors)
        out.append(row)
    return out, errors
