"""
Shared utilities for register ingestion: header detection, date normalisation,
column renaming, cell cleaning.
"""

import logging
import re
from typing import Any

import pandas as pd

from ..config import COLUMN_ALIASES

logger = logging.getLogger(__name__)


def normalise_date(val: Any) -> pd.Timestamp | None:
    """Convert Excel serial number, ISO string or datetime to pd.Timestamp.

    Excel serial numbers use the 1899-12-30 epoch. Native datetime objects
    are cast directly. Returns None for blank or unparseable values.
    """
    if val is None:
        return None
    if isinstance(val, pd.Timestamp):
        return None if pd.isna(val) else val
    if isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        if pd.isna(val):
            return None
        try:
            return pd.Timestamp("1899-12-30") + pd.Timedelta(days=int(val))
        except (ValueError, OverflowError):
            logger.warning("Could not convert serial number %s to date", val)
            return None
    if isinstance(val, str) and not val.strip():
        return None
    try:
        ts = pd.Timestamp(val)
    except (ValueError, TypeError):
        logger.warning("Could not parse date value: %s", val)
        return None
    return None if pd.isna(ts) else ts


def to_snake_case(name: str) -> str:
    """Convert a column name to snake_case.

    Handles spaces, camelCase (``subjectsTaught``), slashes and brackets.
    """
    s = str(name).strip()
    s = s.replace("/", "_").replace("(", "").replace(")", "")
    s = s.replace("-", "_").replace(".", "_")
    # CamelCase to snake_case
    s = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s)
    s = re.sub(r"[^a-zA-Z0-9]+", "_", s)
    s = s.lower().strip("_")
    s = re.sub(r"_+", "_", s)
    return s


def canonical_column(name: str) -> str:
    """snake_case a header and resolve known aliases (``Region`` -> ``lga``)."""
    snake = to_snake_case(name)
    return COLUMN_ALIASES.get(snake, snake)


def find_header_row(
    sheet,
    signature: set[str],
    max_rows: int = 20,
) -> int | None:
    """Scan an openpyxl sheet for the row containing signature strings.

    Returns the 1-based row index where at least two cells match values
    in `signature`, or None if not found within `max_rows`.
    """
    for row_idx in range(1, max_rows + 1):
        matches = 0
        for cell in sheet[row_idx]:
            if cell.value is not None and str(cell.value).strip() in signature:
                matches += 1
        if matches >= 2:
            return row_idx
    return None


def clean_text(val: Any) -> str | None:
    """Strip a cell value to text, returning None for blanks and NaN."""
    if val is None:
        return None
    if isinstance(val, float) and pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def safe_int(val: Any) -> int | None:
    """Coerce an identifier cell to int, returning None for non-numeric values."""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return None
    try:
        f = float(val)
    except (ValueError, TypeError):
        return None
    if pd.isna(f):
        return None
    return int(f)
