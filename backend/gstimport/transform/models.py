# backend/gstimport/transform/models.py
"""Configuration and result models for the transformation engine.

Everything here is created per run (results) or owned by one engine instance
(configuration). Defaults are built by :func:`default_config`, which returns a
fresh value on every call so engines never share mutable state.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from .synonyms import (
    DEFAULT_COLUMN_MAPPINGS,
    DEFAULT_YEAR_MAP,
    INDIAN_EXPORT_SYNONYMS,
    basic_year_map,
)


class ColumnMapping(BaseModel):
    """One canonical field and the source headers it may come from.

    ``source_columns`` is ordered: earlier synonyms win over later ones.
    ``parser`` names an entry of :data:`gstimport.transform.utils.PARSERS`.
    """

    target_column: str
    source_columns: list[str]
    parser: Literal["date", "number"] | None = None
    required: bool = False

    @field_validator("target_column")
    @classmethod
    def _target_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("target_column must be non-empty")
        return v


class TransformationConfig(BaseModel):
    year_map: dict[int, str] = Field(default_factory=dict)
    column_mappings: list[ColumnMapping] = Field(default_factory=list)
    synonyms: dict[str, list[str]] = Field(default_factory=dict)
    fuzzy_threshold: int = Field(80, ge=0, le=100)

    @field_validator("year_map")
    @classmethod
    def _single_char_codes(cls, v: dict[int, str]) -> dict[int, str]:
        out = {}
        for year, code in v.items():
            code = code.strip()
            if len(code) != 1:
                raise ValueError(f"year code for {year} must be a single character, got {code!r}")
            out[year] = code
        return out


class TransformationError(BaseModel):
    row: int
    column: str
    message: str
    value: Any = None


class TransformationResult(BaseModel):
    success: bool
    data: list[dict[str, Any]]
    errors: list[TransformationError]
    warnings: list[str]
    mapping: dict[str, str]
    preview: list[dict[str, Any]]
    # original invoice number -> numbers emitted for it (split invoices only)
    splits: dict[str, list[str]] = Field(default_factory=dict)
    skipped_rows: list[int] = Field(default_factory=list)
    suggestions: dict[str, list[str]] = Field(default_factory=dict)


def _mappings(rows) -> list[ColumnMapping]:
    return [
        ColumnMapping(target_column=t, source_columns=list(src), parser=p, required=r)
        for t, src, p, r in rows
    ]


def default_config() -> TransformationConfig:
    return TransformationConfig(
        year_map=dict(DEFAULT_YEAR_MAP),
        column_mappings=_mappings(DEFAULT_COLUMN_MAPPINGS),
        synonyms={},
    )


def create_preset_config(name: str) -> TransformationConfig:
    """Named starting configurations. Unknown names fall back to ``basic``."""
    if name == "indian_export":
        return TransformationConfig(
            year_map=dict(DEFAULT_YEAR_MAP),
            column_mappings=_mappings(DEFAULT_COLUMN_MAPPINGS),
            synonyms={k: list(v) for k, v in INDIAN_EXPORT_SYNONYMS.items()},
        )
    return TransformationConfig(
        year_map=basic_year_map(),
        column_mappings=_mappings(r for r in DEFAULT_COLUMN_MAPPINGS if r[3]),
        synonyms={},
    )
