# backend/gstimport/transform/mapping.py
from rapidfuzz import fuzz

from .models import ColumnMapping
from .utils import norm_header


def find_best_match(headers: list[str], mapping: ColumnMapping) -> str | None:
    """Source header for one descriptor, or None.

    Exact normalized match first (synonym order decides), then substring match
    in either direction. Header order only breaks ties within one synonym.
    """
    normalized = [norm_header(h) for h in headers]
    synonyms = [norm_header(s) for s in mapping.source_columns]

    for syn in synonyms:
        if not syn:
            continue
        for header, norm in zip(headers, normalized):
            if norm and norm == syn:
                return header

    for syn in synonyms:
        if not syn:
            continue
        for header, norm in zip(headers, normalized):
            # an empty normalized header would be a substring of everything
            if norm and (syn in norm or norm in syn):
                return header
    return None


def resolve_column_mappings(headers: list[str], mappings: list[ColumnMapping]) -> dict[str, str]:
    """target column -> source header, unmapped targets omitted."""
    resolved = {}
    for m in mappings:
        match = find_best_match(headers, m)
        if match is not None:
            resolved[m.target_column] = match
    return resolved


def _expand_terms(norm: str, synonyms: dict[str, list[str]]) -> str:
    # rewrite variant tokens to their term: client_code -> customer_code
    variant_to_term = {}
    for term, variants in synonyms.items():
        for v in variants:
            variant_to_term[norm_header(v)] = norm_header(term)
    tokens = [variant_to_term.get(t, t) for t in norm.split("_")]
    return "_".join(tokens)


def suggest_headers(
    headers: list[str],
    mappings: list[ColumnMapping],
    resolved: dict[str, str],
    synonyms: dict[str, list[str]] | None = None,
    threshold: int = 80,
) -> dict[str, list[str]]:
    """Advisory candidates for descriptors the resolver left unmapped.

    Scores come from ``fuzz.ratio`` on normalized names; a header is scored
    both as written and with its tokens rewritten through ``synonyms``.
    """
    synonyms = synonyms or {}
    taken = set(resolved.values())
    out = {}
    for m in mappings:
        if m.target_column in resolved:
            continue
        candidates = [norm_header(s) for s in [m.target_column, *m.source_columns]]
        scored = []
        for h in headers:
            if h in taken:
                continue
            norm = norm_header(h)
            if not norm:
                continue
            forms = {norm, _expand_terms(norm, synonyms)}
            score = max((fuzz.ratio(f, c) for f in forms for c in candidates if c), default=0)
            if score >= threshold:
                scored.append((score, h))
        if scored:
            scored.sort(key=lambda t: -t[0])
            out[m.target_column] = [h for _, h in scored]
    return out
