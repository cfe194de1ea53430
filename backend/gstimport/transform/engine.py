# backend/gstimport/transform/engine.py
import pandas as pd

from ..logging_setup import get_logger
from .derived import invoice_year
from .grouping import group_and_split
from .mapping import resolve_column_mappings, suggest_headers
from .models import (
    ColumnMapping,
    TransformationConfig,
    TransformationResult,
    create_preset_config,
    default_config,
)
from .rows import project, transform_rows
from .synonyms import REQUIRED_TARGETS

PREVIEW_ROWS = 10

log = get_logger("gstimport.transform.engine")


def missing_year_codes(rows: list[dict], year_map: dict[int, str]) -> list[int]:
    """Distinct invoice years (discovery order) with no code in ``year_map``."""
    missing = []
    for r in rows:
        year = invoice_year(r.get("inv_date"))
        if year is not None and not year_map.get(year) and year not in missing:
            missing.append(year)
    return missing


class TransformationEngine:
    """Turns raw import rows into canonical, invoice-level GST rows.

    The engine owns its configuration and nothing else; every call to
    :meth:`transform_data` builds a fresh result.
    """

    def __init__(self, config: TransformationConfig | None = None):
        self.config = config.model_copy(deep=True) if config else default_config()

    def transform_data(self, rows: list[dict], headers: list[str]) -> TransformationResult:
        cfg = self.config
        headers = [str(h) for h in headers]

        # ---- header map ----
        mapping = resolve_column_mappings(headers, cfg.column_mappings)
        suggestions = suggest_headers(
            headers, cfg.column_mappings, mapping,
            synonyms=cfg.synonyms, threshold=cfg.fuzzy_threshold,
        )

        # ---- canonical rows + derived fields ----
        canonical, errors = transform_rows(rows, cfg.column_mappings, mapping, cfg.year_map)

        # ---- invoice grouping / GST splitting ----
        grouped, splits, skipped = group_and_split(canonical)
        data = [project(r) for r in grouped]

        # ---- warnings ----
        warnings = []
        missing = missing_year_codes(data, cfg.year_map)
        if missing:
            warnings.append(f"Missing year codes for years: {', '.join(str(y) for y in missing)}")

        log.info(
            "Transformed %d rows into %d invoices (%d errors, %d split, %d skipped)",
            len(rows), len(data), len(errors), len(splits), len(skipped),
        )

        return TransformationResult(
            success=not errors,
            data=data,
            errors=errors,
            warnings=warnings,
            mapping=mapping,
            preview=data[:PREVIEW_ROWS],
            splits=splits,
            skipped_rows=skipped,
            suggestions=suggestions,
        )

    def transform_frame(self, df: pd.DataFrame) -> TransformationResult:
        """Same as :meth:`transform_data` for a decoded sheet; NaN cells become None."""
        df = df.copy()
        df.columns = [str(c) for c in df.columns]
        df = df.astype(object).where(pd.notna(df), None)
        return self.transform_data(df.to_dict(orient="records"), list(df.columns))

    # ---- configuration ----

    def update_year_map(self, year_map: dict[int, str]) -> None:
        merged = {**self.config.year_map, **year_map}
        self.config = TransformationConfig.model_validate(
            {**self.config.model_dump(), "year_map": merged}
        )

    def update_column_mappings(self, mappings: list[ColumnMapping | dict]) -> None:
        self.config = TransformationConfig.model_validate(
            {**self.config.model_dump(), "column_mappings": [
                m.model_dump() if isinstance(m, ColumnMapping) else m for m in mappings
            ]}
        )

    def apply_preset(self, name: str) -> None:
        preset = create_preset_config(name)
        self.config = preset.model_copy(update={"fuzzy_threshold": self.config.fuzzy_threshold})

    def get_config(self) -> TransformationConfig:
        return self.config.model_copy(deep=True)

    def validate_config(self) -> tuple[bool, list[str]]:
        errors = []
        if not self.config.year_map:
            errors.append("Year map is required")
        if not self.config.column_mappings:
            errors.append("Column mappings are required")
        required = {m.target_column for m in self.config.column_mappings if m.required}
        for target in REQUIRED_TARGETS:
            if target not in required:
                errors.append(f"{target} mapping is required")
        return not errors, errors

    @staticmethod
    def export_rows(rows: list[dict]) -> list[dict]:
        return [project(r) for r in rows]
