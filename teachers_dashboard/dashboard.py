"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end.
Each function returns plain dicts or DataFrames suitable for rendering
cards, charts, and tables.
"""

import logging
from pathlib import Path

import pandas as pd

from .aggregations import (
    count_by_qualification,
    count_by_region,
    count_by_subject,
    get_teacher_summary,
)
from .config import (
    DOCUMENT_REGISTER_FILE,
    PROFILE_BASE_URL,
    QUALIFICATION_LABEL_MAX,
    TEACHER_REGISTER_FILE,
    TOP_SUBJECT_COUNT,
)
from .loaders import load_document_register, load_teacher_register
from .registry import documents_for_teacher, get_teacher, search_teachers
from .sharing import profile_url, share_content, social_share_links
from .simulator import generate_documents, generate_teacher_records
from .transforms import build_dim_teacher, build_fact_teacher_document

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ["id", "name", "school", "lga", "subjects_taught", "qualifications"]


def load_registers(
    teacher_path: Path = TEACHER_REGISTER_FILE,
    document_path: Path = DOCUMENT_REGISTER_FILE,
) -> dict:
    """Load and build the teacher and document tables.

    Simulated records are used only when there is no teacher register; a
    real register without a document file gets an empty document table.

    Returns
    -------
    Dict with keys "teachers", "documents" (built tables) and "simulated".
    """
    teacher_path = Path(teacher_path)
    document_path = Path(document_path)

    if not teacher_path.exists():
        logger.warning("Register %s not found, using simulated records", teacher_path)
        raw_teachers = generate_teacher_records()
        return {
            "teachers": build_dim_teacher(raw_teachers),
            "documents": build_fact_teacher_document(generate_documents(raw_teachers)),
            "simulated": True,
        }

    raw_teachers = load_teacher_register(str(teacher_path))
    raw_documents = None
    if document_path.exists():
        raw_documents = load_document_register(str(document_path))
    else:
        logger.warning("Document register %s not found, no documents loaded", document_path)

    return {
        "teachers": build_dim_teacher(raw_teachers),
        "documents": build_fact_teacher_document(raw_documents),
        "simulated": False,
    }


def get_dashboard_overview(
    records: pd.DataFrame,
    top_subjects: int = TOP_SUBJECT_COUNT,
    qualification_label_max: int | None = QUALIFICATION_LABEL_MAX,
) -> dict:
    """Single entry point the app calls to populate the summary card and charts.

    Returns
    -------
    Dict with structure:
    {
        "summary": {"total_teachers": ..., "schools": ..., ...},
        "by_region": DataFrame(lga, label, count, total, percentage),
        "by_subject": DataFrame(subject, label, count, total, percentage),
        "by_qualification": DataFrame(qualification, label, count, total, percentage),
    }
    """
    if records.empty:
        logger.warning("No teacher records, dashboard overview will be empty")

    return {
        "summary": get_teacher_summary(records),
        "by_region": count_by_region(records),
        "by_subject": count_by_subject(records, top_n=top_subjects),
        "by_qualification": count_by_qualification(records, label_max=qualification_label_max),
    }


def get_teacher_table(records: pd.DataFrame, term: str = "") -> pd.DataFrame:
    """Searchable teacher table.

    Returns
    -------
    DataFrame with columns:
        id, name, school, lga, subjects_taught, qualifications
    """
    if records.empty:
        return pd.DataFrame(columns=TABLE_COLUMNS)

    filtered = search_teachers(records, term)
    available = [c for c in TABLE_COLUMNS if c in filtered.columns]
    return filtered[available].sort_values("name", kind="stable").reset_index(drop=True)


def get_teacher_profile(
    records: pd.DataFrame,
    documents: pd.DataFrame,
    teacher_id: int,
    base_url: str = PROFILE_BASE_URL,
) -> dict:
    """Everything the profile / share page shows for one teacher.

    Raises
    ------
    registry.TeacherNotFoundError if teacher_id is unknown.
    """
    teacher = get_teacher(records, teacher_id)
    name = teacher.get("name") or ""
    achievements = teacher.get("qualifications") or ""

    return {
        "teacher": teacher,
        "documents": documents_for_teacher(documents, teacher_id),
        "profile_url": profile_url(teacher_id, base_url),
        "share": share_content(teacher_id, name, achievements, base_url),
        "share_links": social_share_links(teacher_id, name, achievements, base_url),
    }
