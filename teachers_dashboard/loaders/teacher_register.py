"""
Loaders for the teacher register and the supporting-document register.

Teacher register: teachers.xlsx (or a .csv export of the same table)
    One row per teacher. The header row may sit below a title banner, so it
    is located by matching known column names. Multi-valued fields
    (qualifications, subjects taught) are comma-joined strings.

Document register: teacher_documents.csv (or .xlsx)
    One row per uploaded file: teacher id, original filename, MIME type,
    stored path, document type tag, upload timestamp.
"""

import logging
from pathlib import Path

import openpyxl
import pandas as pd

from ..config import DOCUMENT_HEADER_SIGNATURE, TEACHER_HEADER_SIGNATURE
from .utils import canonical_column, find_header_row

logger = logging.getLogger(__name__)


def _read_workbook(path: str, signature: set[str], sheet_name: str | None) -> pd.DataFrame:
    """Read one sheet of an .xlsx register into a DataFrame of raw cell values."""
    try:
        wb = openpyxl.load_workbook(path, data_only=True, read_only=False)
    except Exception:
        logger.exception("Failed to open register workbook: %s", path)
        raise

    try:
        if sheet_name is None or sheet_name not in wb.sheetnames:
            if sheet_name is not None:
                logger.warning("Sheet '%s' not found, using '%s'", sheet_name, wb.sheetnames[0])
            sheet_name = wb.sheetnames[0]

        ws = wb[sheet_name]

        header_row = find_header_row(ws, signature)
        if header_row is None:
            logger.warning("No header row recognised in '%s', assuming row 1", sheet_name)
            header_row = 1

        headers: dict[int, str] = {}
        for cell in ws[header_row]:
            if cell.value is not None and str(cell.value).strip():
                headers[cell.column] = canonical_column(cell.value)

        rows = []
        for row in ws.iter_rows(min_row=header_row + 1, values_only=False):
            record = {}
            for cell in row:
                col_name = headers.get(cell.column)
                if col_name is not None:
                    record[col_name] = cell.value
            # Skip fully blank rows (trailing formatting in exported sheets)
            if not any(v is not None and str(v).strip() for v in record.values()):
                continue
            rows.append(record)
    finally:
        wb.close()

    return pd.DataFrame(rows, columns=list(dict.fromkeys(headers.values())))


def _read_csv(path: str) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except Exception:
        logger.exception("Failed to read register CSV: %s", path)
        raise
    df = df.rename(columns={c: canonical_column(c) for c in df.columns})
    # Blank strings mean "no value" in CSV exports
    return df.replace({"": None})


def _load_register(path: str, signature: set[str], sheet_name: str | None) -> pd.DataFrame:
    suffix = Path(path).suffix.lower()
    if suffix in (".xlsx", ".xlsm"):
        return _read_workbook(path, signature, sheet_name)
    if suffix == ".csv":
        return _read_csv(path)
    raise ValueError(f"Unsupported register format: {path}")


def load_teacher_register(path: str, sheet_name: str | None = None) -> pd.DataFrame:
    """Load the teacher register from Excel or CSV.

    Assumptions
    -----------
    - The header row is the first row (within 20) containing at least two
      known column names (name, email, school, lga, qualifications, ...).
    - Headers may be camelCase (``subjectsTaught``) or title case
      (``Subjects Taught``); both are normalised to snake_case.
    - Values are left raw; typing happens in transforms.build_dim_teacher().

    Returns
    -------
    DataFrame with (a subset of) columns:
        id, name, email, qualifications, subjects_taught, school, lga,
        employment_date, created_at, updated_at, user_id
    """
    df = _load_register(path, TEACHER_HEADER_SIGNATURE, sheet_name)

    if df.empty:
        logger.warning("No teacher rows extracted from %s", path)

    logger.info("Loaded %d teacher rows from %s", len(df), path)
    return df


def load_document_register(path: str, sheet_name: str | None = None) -> pd.DataFrame:
    """Load supporting-document metadata from CSV or Excel.

    Returns
    -------
    DataFrame with (a subset of) columns:
        id, teacher_id, filename, mime_type, file_path, document_type,
        uploaded_at
    """
    df = _load_register(path, DOCUMENT_HEADER_SIGNATURE, sheet_name)

    if df.empty:
        logger.warning("No document rows extracted from %s", path)

    logger.info("Loaded %d document rows from %s", len(df), path)
    return df
