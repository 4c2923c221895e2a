# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Map spreadsheet headers onto settlement columns.

Workbooks sent by pharmaceutical partners rarely use the registry headers
verbatim: line breaks move, spaces appear, words get abbreviated. Each
header is matched against the registry headers by exact key, then by
normalized equality or containment, then by Levenshtein similarity.
"""

from flask import current_app, has_app_context

from app.services.column_registry import REQUIRED_HEADERS, header_map
from app.utils.constants import DEFAULT_COLUMN_MATCH_THRESHOLD
from app.utils.text import normalize_column_name

CONTAINMENT_SCORE = 0.9


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Similarity in [0, 1]: 1 - distance / length of the longer string."""
    longer = a if len(a) > len(b) else b
    if not longer:
        return 1.0
    return (len(longer) - levenshtein(a, b)) / len(longer)


def _default_threshold() -> float:
    if has_app_context():
        return float(
            current_app.config.get(
                "COLUMN_MATCH_THRESHOLD", DEFAULT_COLUMN_MATCH_THRESHOLD
            )
        )
    return float(DEFAULT_COLUMN_MATCH_THRESHOLD)


def find_best_match(
    header: str, candidates: list[str], threshold: float | None = None
) -> tuple[str, float] | None:
    """Find the candidate closest to a header.

    Candidates are scanned in order. A normalized-equal candidate wins
    immediately with 1.0; containment either way scores 0.9; anything else
    scores its similarity and must reach the threshold. Ties keep the
    earlier candidate.

    Returns:
        ``(candidate, score)`` or None when nothing qualifies.
    """
    if threshold is None:
        threshold = _default_threshold()

    normalized = normalize_column_name(header)
    best: tuple[str, float] | None = None

    for candidate in candidates:
        normalized_candidate = normalize_column_name(candidate)
        if normalized == normalized_candidate:
            return candidate, 1.0

        if normalized in normalized_candidate or normalized_candidate in normalized:
            if best is None or CONTAINMENT_SCORE > best[1]:
                best = (candidate, CONTAINMENT_SCORE)
            continue

        score = similarity(normalized, normalized_candidate)
        if score >= threshold and (best is None or score > best[1]):
            best = (candidate, score)

    return best


def auto_map_columns(headers: list, threshold: float | None = None) -> dict:
    """Propose a registry header for every spreadsheet header.

    Args:
        headers: Header cells of the first worksheet row. Blank cells are
            dropped, the others trimmed.
        threshold: Minimum similarity for a fuzzy match.

    Returns:
        ``{"mappings", "dbColumnOptions", "missingRequired"}`` where each
        mapping is ``{excelColumn, dbColumn, columnKey, score, isRequired}``.
    """
    registry = header_map()
    options = list(registry)

    mappings = []
    for raw in headers:
        excel_column = str(raw).strip() if raw is not None else ""
        if not excel_column:
            continue

        without_breaks = excel_column.replace("\n", "")
        db_column = None
        score = 0.0

        if excel_column in registry:
            db_column, score = excel_column, 1.0
        elif without_breaks in registry:
            db_column, score = without_breaks, 1.0
        else:
            match = find_best_match(excel_column, options, threshold)
            if match:
                db_column, score = match

        mappings.append(
            {
                "excelColumn": excel_column,
                "dbColumn": db_column,
                "columnKey": registry.get(db_column) if db_column else None,
                "score": score,
                "isRequired": db_column in REQUIRED_HEADERS,
            }
        )

    targeted = {m["dbColumn"] for m in mappings}
    return {
        "mappings": mappings,
        "dbColumnOptions": options,
        "missingRequired": [h for h in REQUIRED_HEADERS if h not in targeted],
    }


def apply_mapping(record: dict, mapping: dict | None = None) -> dict:
    """Re-key a header-keyed spreadsheet record by column key.

    ``mapping`` (spreadsheet header -> registry header) overrides the
    registry for the headers it names; a value of None drops the header.
    Headers are trimmed like auto_map_columns trims them. Headers unknown
    to both are ignored, as are values whose column key was already filled
    by an earlier header.
    """
    registry = header_map()
    mapping = {str(key).strip(): target for key, target in (mapping or {}).items()}
    converted: dict = {}

    for raw, value in record.items():
        header = str(raw).strip()
        if header in mapping:
            target = mapping[header]
            if not target:
                continue
            column_key = registry.get(target, target)
        elif header in registry:
            column_key = registry[header]
        elif header.replace("\n", "") in registry:
            column_key = registry[header.replace("\n", "")]
        elif header in registry.values():
            column_key = header
        else:
            continue

        converted.setdefault(column_key, value)

    return converted
