"""
Record-management operations on the teacher and document tables.

All functions take a DataFrame and return a new one; the caller decides how
to persist the result. Validation mirrors the create/edit form rules.
"""

import logging
import re
from pathlib import Path
from typing import Any

import pandas as pd

from .aggregations import split_multi_valued
from .config import (
    ALLOWED_UPLOAD_EXTENSIONS,
    DOCUMENT_COLUMNS,
    DOCUMENT_TYPES,
    TEACHER_COLUMNS,
    UPLOAD_DIR,
)
from .loaders.utils import clean_text, normalise_date
from .transforms import LIST_COLUMNS

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_SEARCH_COLUMNS = ["name", "school", "lga"]


class TeacherValidationError(ValueError):
    """Submitted teacher form failed validation.

    ``errors`` maps form field name to a human-readable message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class TeacherNotFoundError(KeyError):
    """No teacher with the requested id."""


class DocumentUploadError(ValueError):
    """Uploaded document rejected (bad type tag or file extension)."""


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def search_teachers(records: pd.DataFrame, term: str | None) -> pd.DataFrame:
    """Case-insensitive substring match on name, school or LGA."""
    term = (term or "").strip().lower()
    if not term or records.empty:
        return records

    mask = pd.Series(False, index=records.index)
    for col in _SEARCH_COLUMNS:
        if col in records.columns:
            mask |= records[col].fillna("").astype(str).str.lower().str.contains(term, regex=False)
    return records[mask]


def get_teacher(records: pd.DataFrame, teacher_id: int) -> dict:
    """Return one teacher as a dict, raising TeacherNotFoundError if missing."""
    match = records[records["id"] == teacher_id] if not records.empty else records
    if match.empty:
        raise TeacherNotFoundError(teacher_id)
    return match.iloc[0].to_dict()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _join_tokens(value: Any) -> str:
    return ", ".join(split_multi_valued(value))


def validate_teacher(
    form: dict,
    records: pd.DataFrame,
    teacher_id: int | None = None,
) -> dict:
    """Validate a submitted create/edit form and return normalised fields.

    Rules
    -----
    - name: required.
    - email: optional; when given it must look like an address and not be
      used by another teacher (case-insensitive).
    - qualifications / subjects_taught: list or comma-joined string with at
      least one non-empty entry; stored re-joined with ", ".
    - school, lga: required.
    - employment_date: required, parseable date.

    Raises
    ------
    TeacherValidationError with every failing field.
    """
    errors: dict[str, str] = {}
    cleaned: dict[str, Any] = {}

    name = clean_text(form.get("name"))
    if not name:
        errors["name"] = "Name is required"
    cleaned["name"] = name

    email = clean_text(form.get("email"))
    if email:
        if not _EMAIL_RE.match(email):
            errors["email"] = "Invalid email address"
        elif not records.empty and "email" in records.columns:
            others = records if teacher_id is None else records[records["id"] != teacher_id]
            taken = others["email"].dropna().astype(str).str.lower()
            if email.lower() in set(taken):
                errors["email"] = "Another teacher already uses this email"
    cleaned["email"] = email

    for field, label in (("qualifications", "qualification"), ("subjects_taught", "subject")):
        joined = _join_tokens(form.get(field))
        if not joined:
            errors[field] = f"At least one {label} is required"
        cleaned[field] = joined

    for field, label in (("school", "School"), ("lga", "LGA")):
        value = clean_text(form.get(field))
        if not value:
            errors[field] = f"{label} is required"
        cleaned[field] = value

    employment_date = normalise_date(form.get("employment_date"))
    if employment_date is None:
        errors["employment_date"] = "A valid employment date is required"
    cleaned["employment_date"] = employment_date

    if errors:
        logger.info("Teacher form rejected: %s", ", ".join(sorted(errors)))
        raise TeacherValidationError(errors)

    return cleaned


def _with_lists(record: dict) -> dict:
    record["qualification_list"] = split_multi_valued(record["qualifications"])
    record["subject_list"] = split_multi_valued(record["subjects_taught"])
    return record


def _columns_for(records: pd.DataFrame) -> list[str]:
    if records.empty and len(records.columns) == 0:
        return TEACHER_COLUMNS + LIST_COLUMNS
    return list(records.columns)


# ---------------------------------------------------------------------------
# Create / update / delete
# ---------------------------------------------------------------------------

def add_teacher(
    records: pd.DataFrame,
    form: dict,
    user_id: int | None = None,
) -> tuple[pd.DataFrame, dict]:
    """Validate and append a new teacher.

    Returns
    -------
    (updated records, the new record as a dict)
    """
    cleaned = validate_teacher(form, records)

    next_id = int(records["id"].max()) + 1 if not records.empty else 1
    now = pd.Timestamp.now()
    record = _with_lists({
        "id": next_id,
        **cleaned,
        "created_at": now,
        "updated_at": now,
        "user_id": user_id,
    })

    columns = _columns_for(records)
    new_row = pd.DataFrame([{col: record.get(col) for col in columns}], columns=columns)
    updated = new_row if records.empty else pd.concat([records, new_row], ignore_index=True)

    logger.info("Added teacher %d (%s)", next_id, record["name"])
    return updated, record


def update_teacher(
    records: pd.DataFrame,
    teacher_id: int,
    form: dict,
) -> tuple[pd.DataFrame, dict]:
    """Validate and apply an edit to an existing teacher.

    Raises
    ------
    TeacherNotFoundError if teacher_id is unknown.
    TeacherValidationError if the form is invalid.
    """
    existing = get_teacher(records, teacher_id)
    cleaned = validate_teacher(form, records, teacher_id=teacher_id)

    record = _with_lists({**existing, **cleaned, "updated_at": pd.Timestamp.now()})

    # Rebuild from row dicts: list-valued cells cannot be assigned with .at
    rows = [
        {col: record.get(col) for col in records.columns} if row["id"] == teacher_id else row
        for row in records.to_dict("records")
    ]
    updated = pd.DataFrame(rows, columns=records.columns)

    logger.info("Updated teacher %d", teacher_id)
    return updated, record


def delete_teacher(records: pd.DataFrame, teacher_id: int, is_admin: bool) -> pd.DataFrame:
    """Remove a teacher. Only administrators may delete.

    Raises
    ------
    PermissionError for non-administrators.
    TeacherNotFoundError if teacher_id is unknown.
    """
    if not is_admin:
        raise PermissionError("Only administrators can delete teachers")
    get_teacher(records, teacher_id)

    updated = records[records["id"] != teacher_id].reset_index(drop=True)
    logger.info("Deleted teacher %d", teacher_id)
    return updated


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def stored_filename(filename: str, uploaded_at: pd.Timestamp) -> str:
    """Timestamp-prefixed, filesystem-safe name for an uploaded file."""
    safe = re.sub(r"[^A-Za-z0-9._-]+", "_", Path(filename).name).strip("._") or "document"
    return f"{int(uploaded_at.timestamp() * 1000)}-{safe}"


def add_document(
    documents: pd.DataFrame,
    teacher_id: int,
    filename: str,
    mime_type: str | None,
    document_type: str,
    upload_dir: Path = UPLOAD_DIR,
) -> tuple[pd.DataFrame, dict]:
    """Record metadata for an uploaded supporting document.

    Raises
    ------
    DocumentUploadError if the file or type tag is missing or not allowed.
    """
    filename = clean_text(filename)
    if not filename:
        raise DocumentUploadError("Please select a file and document type")
    if document_type not in DOCUMENT_TYPES:
        raise DocumentUploadError(f"Unknown document type: {document_type!r}")

    extension = Path(filename).suffix.lower()
    if extension not in ALLOWED_UPLOAD_EXTENSIONS:
        raise DocumentUploadError(
            f"File type '{extension or filename}' not allowed; "
            f"accepted: {', '.join(sorted(ALLOWED_UPLOAD_EXTENSIONS))}"
        )

    uploaded_at = pd.Timestamp.now()
    next_id = int(documents["id"].max()) + 1 if not documents.empty else 1
    record = {
        "id": next_id,
        "teacher_id": teacher_id,
        "filename": filename,
        "mime_type": mime_type or "application/octet-stream",
        "file_path": str(Path(upload_dir) / stored_filename(filename, uploaded_at)),
        "document_type": document_type,
        "uploaded_at": uploaded_at,
    }

    new_row = pd.DataFrame([record], columns=DOCUMENT_COLUMNS)
    updated = new_row if documents.empty else pd.concat([documents, new_row], ignore_index=True)

    logger.info("Recorded %s '%s' for teacher %d", document_type, filename, teacher_id)
    return updated, record


def documents_for_teacher(documents: pd.DataFrame, teacher_id: int) -> pd.DataFrame:
    """Documents uploaded for one teacher, newest first."""
    if documents.empty:
        return pd.DataFrame(columns=DOCUMENT_COLUMNS)
    subset = documents[documents["teacher_id"] == teacher_id]
    return subset.sort_values("uploaded_at", ascending=False).reset_index(drop=True)
