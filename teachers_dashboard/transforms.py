"""
Data transforms: coerce raw loader outputs into the typed teacher dimension
and document fact tables used by aggregations, the registry and the UI.
"""

import logging

import pandas as pd

from .aggregations import split_multi_valued
from .config import DOCUMENT_COLUMNS, DOCUMENT_TYPES, TEACHER_COLUMNS
from .loaders.utils import clean_text, normalise_date, safe_int

logger = logging.getLogger(__name__)

_TEXT_COLUMNS = ["name", "email", "qualifications", "subjects_taught", "school", "lga"]
_DATE_COLUMNS = ["employment_date", "created_at", "updated_at"]

LIST_COLUMNS = ["qualification_list", "subject_list"]


def _assign_missing_ids(ids: pd.Series) -> pd.Series:
    """Number rows without an id after the highest existing id."""
    ids = pd.to_numeric(ids, errors="coerce")
    next_id = int(ids.max()) + 1 if ids.notna().any() else 1
    filled = []
    for val in ids:
        if pd.isna(val):
            filled.append(next_id)
            next_id += 1
        else:
            filled.append(int(val))
    return pd.Series(filled, index=ids.index, dtype="int64")


def _to_datetime(values: pd.Series) -> pd.Series:
    return pd.to_datetime(values.map(normalise_date), errors="coerce")


def build_dim_teacher(raw_df: pd.DataFrame) -> pd.DataFrame:
    """Build the typed teacher table from the raw register.

    Parameters
    ----------
    raw_df : From load_teacher_register() or simulator.generate_teacher_records().

    Returns
    -------
    dim_teacher DataFrame with columns:
        id, name, email, qualifications, subjects_taught, school, lga,
        employment_date, created_at, updated_at, user_id,
        qualification_list, subject_list

    The comma-joined ``qualifications`` / ``subjects_taught`` strings are kept
    as stored; the ``*_list`` columns hold the split, trimmed tokens.
    """
    schema_cols = TEACHER_COLUMNS + LIST_COLUMNS

    if raw_df is None or raw_df.empty:
        logger.warning("No teacher rows available. Returning empty dim_teacher with schema.")
        return pd.DataFrame(columns=schema_cols)

    df = raw_df.copy()
    for col in TEACHER_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["id"] = _assign_missing_ids(df["id"].map(safe_int))

    for col in _TEXT_COLUMNS:
        df[col] = df[col].map(clean_text).astype(object)

    # Multi-valued fields are never missing, only empty
    df["qualifications"] = df["qualifications"].fillna("")
    df["subjects_taught"] = df["subjects_taught"].fillna("")

    for col in _DATE_COLUMNS:
        df[col] = _to_datetime(df[col])

    now = pd.Timestamp.now()
    df["created_at"] = df["created_at"].fillna(now)
    df["updated_at"] = df["updated_at"].fillna(df["created_at"])

    df["user_id"] = df["user_id"].map(safe_int).astype("Int64")

    df["qualification_list"] = df["qualifications"].map(split_multi_valued)
    df["subject_list"] = df["subjects_taught"].map(split_multi_valued)

    duplicated = df["email"].notna() & df["email"].str.lower().duplicated(keep="first")
    if duplicated.any():
        logger.warning("%d teacher rows share an email with an earlier row", int(duplicated.sum()))

    result = df[schema_cols].reset_index(drop=True)
    logger.info("Built dim_teacher with %d rows", len(result))
    return result


def build_fact_teacher_document(raw_df: pd.DataFrame | None = None) -> pd.DataFrame:
    """Build the supporting-document table.

    Unknown document type tags are mapped to "Other" so the closed set of
    DOCUMENT_TYPES holds for every row.

    Returns
    -------
    fact_teacher_document DataFrame with columns:
        id, teacher_id, filename, mime_type, file_path, document_type,
        uploaded_at
    """
    if raw_df is None or raw_df.empty:
        logger.warning("No document rows available. Returning empty fact_teacher_document with schema.")
        return pd.DataFrame(columns=DOCUMENT_COLUMNS)

    df = raw_df.copy()
    for col in DOCUMENT_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["id"] = _assign_missing_ids(df["id"].map(safe_int))
    df["teacher_id"] = df["teacher_id"].map(safe_int).astype("Int64")

    for col in ["filename", "mime_type", "file_path", "document_type"]:
        df[col] = df[col].map(clean_text).astype(object)

    unknown = ~df["document_type"].isin(DOCUMENT_TYPES)
    if unknown.any():
        logger.warning("Mapping %d unknown document types to 'Other'", int(unknown.sum()))
        df.loc[unknown, "document_type"] = "Other"

    df["uploaded_at"] = _to_datetime(df["uploaded_at"])

    orphaned = df["teacher_id"].isna()
    if orphaned.any():
        logger.warning("Dropping %d documents without a teacher reference", int(orphaned.sum()))
        df = df[~orphaned]

    result = df[DOCUMENT_COLUMNS].reset_index(drop=True)
    logger.info("Built fact_teacher_document with %d rows", len(result))
    return result
