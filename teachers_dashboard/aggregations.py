"""
Aggregation functions: pure functions with no side effects.

Reduces a teacher DataFrame into grouped count tables (by region, by top-N
subject, by qualification). Every output row carries the grand total and a
percentage of that total, so chart tooltips need no further arithmetic.
"""

import logging
from typing import Any

import pandas as pd

from .config import (
    LABEL_ELLIPSIS,
    QUALIFICATION_LABEL_MAX,
    TOP_SUBJECT_COUNT,
    UNASSIGNED_REGION,
)

logger = logging.getLogger(__name__)


def split_multi_valued(value: Any) -> list[str]:
    """Split a comma-joined field into trimmed, non-empty, distinct tokens.

    Order of first appearance is preserved. A token repeated within one
    record is kept once, so a record contributes at most 1 to any group.
    Lists and tuples are accepted and normalised with the same rule.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        parts = [str(v) for v in value if v is not None]
    else:
        if isinstance(value, float) and pd.isna(value):
            return []
        parts = str(value).split(",")

    tokens: list[str] = []
    for part in parts:
        token = part.strip()
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def calc_percentage(count: int, total: int) -> float:
    """Return count as a percentage of total, rounded to one decimal.

    Returns 0.0 if total == 0.
    """
    if not total:
        return 0.0
    return round(count / total * 100, 1)


def truncate_label(label: str, max_chars: int | None) -> str:
    """Cut a display label to max_chars and append an ellipsis marker."""
    if max_chars is None or len(label) <= max_chars:
        return label
    return label[:max_chars] + LABEL_ELLIPSIS


def _is_blank(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, str):
        return not val.strip()
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


def _empty_rows(key: str) -> pd.DataFrame:
    return pd.DataFrame(columns=[key, "label", "count", "total", "percentage"])


def _finalise_rows(
    counts: pd.Series,
    key: str,
    total: int,
    label_max: int | None,
) -> pd.DataFrame:
    """Turn a key -> count series into AggregatedRow columns."""
    rows = counts.rename("count").reset_index()
    rows.columns = [key, "count"]
    rows["count"] = rows["count"].astype(int)
    rows.insert(1, "label", rows[key].map(lambda k: truncate_label(str(k), label_max)))
    rows["total"] = total
    rows["percentage"] = rows["count"].map(lambda c: calc_percentage(int(c), total))
    return rows.reset_index(drop=True)


def explode_multi_valued(records: pd.DataFrame, column: str) -> pd.Series:
    """Return one entry per (record, token) pair of a comma-joined column.

    Records with no usable tokens contribute nothing.
    """
    if records.empty or column not in records.columns:
        return pd.Series(dtype=object)

    tokens = records[column].map(split_multi_valued).explode()
    return tokens.dropna()


def count_by_region(records: pd.DataFrame, label_max: int | None = None) -> pd.DataFrame:
    """Teacher counts per region (LGA).

    Regions appear in order of first appearance. Records with no region are
    counted under UNASSIGNED_REGION so that counts always sum to the total.

    Returns
    -------
    DataFrame with columns: lga, label, count, total, percentage
    """
    total = len(records)
    if total == 0 or "lga" not in records.columns:
        if total:
            logger.warning("Records have no 'lga' column, region breakdown is empty")
        return _empty_rows("lga")

    regions = records["lga"].map(lambda v: UNASSIGNED_REGION if _is_blank(v) else v)
    counts = regions.groupby(regions, sort=False).size()

    rows = _finalise_rows(counts, "lga", total, label_max)
    logger.info("Counted %d teachers across %d regions", total, len(rows))
    return rows


def _count_tokens(records: pd.DataFrame, column: str, key: str) -> tuple[pd.Series, int]:
    total = len(records)
    tokens = explode_multi_valued(records, column)
    if tokens.empty:
        return pd.Series(dtype=int), total

    # groupby(sort=False) lists keys in order of first appearance; that
    # position breaks ties between equal counts
    counts = tokens.groupby(tokens, sort=False).size()
    ranked = pd.DataFrame({"count": counts.values, "first_seen": range(len(counts))}, index=counts.index)
    ranked = ranked.sort_values(["count", "first_seen"], ascending=[False, True])
    result = ranked["count"]
    result.index.name = key
    return result, total


def count_by_subject(records: pd.DataFrame, top_n: int = TOP_SUBJECT_COUNT) -> pd.DataFrame:
    """Top-N subjects by number of teachers teaching them.

    Subjects are multi-valued: one teacher may count towards several rows,
    so percentages need not sum to 100.

    Returns
    -------
    DataFrame with columns: subject, label, count, total, percentage
    """
    counts, total = _count_tokens(records, "subjects_taught", "subject")
    if counts.empty:
        return _empty_rows("subject")

    rows = _finalise_rows(counts.head(top_n), "subject", total, None)
    logger.info("Counted %d distinct subjects, keeping top %d", len(counts), len(rows))
    return rows


def count_by_qualification(
    records: pd.DataFrame,
    label_max: int | None = QUALIFICATION_LABEL_MAX,
) -> pd.DataFrame:
    """Teacher counts per qualification, most common first.

    The full qualification name stays in the ``qualification`` column;
    ``label`` is cut to label_max characters for axis display.

    Returns
    -------
    DataFrame with columns: qualification, label, count, total, percentage
    """
    counts, total = _count_tokens(records, "qualifications", "qualification")
    if counts.empty:
        return _empty_rows("qualification")

    rows = _finalise_rows(counts, "qualification", total, label_max)
    logger.info("Counted %d distinct qualifications", len(rows))
    return rows


def get_teacher_summary(records: pd.DataFrame) -> dict:
    """Return a dict suitable for the top-level summary cards.

    Returns
    -------
    Dict with structure:
    {
        "total_teachers": 42,
        "schools": 4,
        "lgas": 4,
        "subjects": 6,
        "qualifications": 5,
    }
    """
    total = len(records)
    if total == 0:
        return {"total_teachers": 0, "schools": 0, "lgas": 0, "subjects": 0, "qualifications": 0}

    def _distinct(column: str) -> int:
        if column not in records.columns:
            return 0
        return int(records[column].dropna().replace("", pd.NA).dropna().nunique())

    return {
        "total_teachers": total,
        "schools": _distinct("school"),
        "lgas": _distinct("lga"),
        "subjects": int(explode_multi_valued(records, "subjects_taught").nunique()),
        "qualifications": int(explode_multi_valued(records, "qualifications").nunique()),
    }
