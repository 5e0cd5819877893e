"""
Configuration: reference lists, file paths, display constants.

DOCUMENT_TYPES is the closed set of tags a supporting document may carry.
QUALIFICATION_LABEL_MAX is the character budget for qualification labels on
the x-axis; longer labels are cut and suffixed with LABEL_ELLIPSIS.
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# File paths. Override the data directory with TDP_DATA_DIR
# ---------------------------------------------------------------------------
DATA_DIR = Path(os.environ.get("TDP_DATA_DIR", Path(__file__).resolve().parent.parent / "data"))

TEACHER_REGISTER_FILE = DATA_DIR / "teachers.xlsx"
DOCUMENT_REGISTER_FILE = DATA_DIR / "teacher_documents.csv"
UPLOAD_DIR = DATA_DIR / "uploads"

# ---------------------------------------------------------------------------
# Project identity
# ---------------------------------------------------------------------------
PROJECT_NAME = "Teachers Digitisation Project"

# Profile links and QR codes point here; override with TDP_BASE_URL
PROFILE_BASE_URL = os.environ.get("TDP_BASE_URL", "http://localhost:8501").rstrip("/")

# Delete is reserved for administrators
ADMIN_MODE = os.environ.get("TDP_ADMIN_MODE", "0").lower() in ("1", "true", "yes")

# ---------------------------------------------------------------------------
# Reference lists (form options and simulator vocabulary)
# ---------------------------------------------------------------------------
QUALIFICATIONS = [
    "Bachelor of Education (B.Ed)",
    "Master of Education (M.Ed)",
    "Diploma in Teaching",
    "Bachelor's Degree in Subject Area (B.Sc, B.A)",
    "Postgraduate Certificate in Education (PGCE)",
]

SUBJECTS = [
    "Mathematics",
    "English Language",
    "Science",
    "Social Studies",
    "Information Technology",
    "Arts and Craft",
]

SCHOOLS = [
    "Greenfield High School",
    "Riverbank Secondary School",
    "Sunrise Academy",
    "Oakwood International School",
]

LGAS = [
    "Central City LGA",
    "North Hills LGA",
    "Westfield LGA",
    "Lakeside LGA",
]

DOCUMENT_TYPES = [
    "Qualification Certificate",
    "Teaching License",
    "Identity Document",
    "Professional Certificate",
    "Other",
]

ALLOWED_UPLOAD_EXTENSIONS = {".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png"}

# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------
TEACHER_COLUMNS = [
    "id",
    "name",
    "email",
    "qualifications",
    "subjects_taught",
    "school",
    "lga",
    "employment_date",
    "created_at",
    "updated_at",
    "user_id",
]

DOCUMENT_COLUMNS = [
    "id",
    "teacher_id",
    "filename",
    "mime_type",
    "file_path",
    "document_type",
    "uploaded_at",
]

# Alternative headers seen in register exports, keyed by their snake_case form
COLUMN_ALIASES: dict[str, str] = {
    "subjects": "subjects_taught",
    "subject": "subjects_taught",
    "qualification": "qualifications",
    "region": "lga",
    "lga_name": "lga",
    "school_name": "school",
    "document": "filename",
    "type": "document_type",
}

# Minimum header cells needed to recognise the register's header row
TEACHER_HEADER_SIGNATURE = {
    "name", "Name",
    "email", "Email",
    "school", "School",
    "lga", "LGA",
    "qualifications", "Qualifications",
    "subjectsTaught", "Subjects Taught", "subjects_taught",
}

DOCUMENT_HEADER_SIGNATURE = {
    "teacherId", "Teacher ID", "teacher_id",
    "filename", "Filename", "File Name",
    "mimeType", "MIME Type", "mime_type",
    "documentType", "Document Type", "document_type",
}

# ---------------------------------------------------------------------------
# Display constants
# ---------------------------------------------------------------------------
TOP_SUBJECT_COUNT = 5
QUALIFICATION_LABEL_MAX = 30
LABEL_ELLIPSIS = "..."
UNASSIGNED_REGION = "Unassigned"

CHART_COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884d8"]
REGION_BAR_COLOR = "#8884d8"
QUALIFICATION_BAR_COLOR = "#82ca9d"

QR_DARK_COLOR = "#2D6A4F"
QR_LIGHT_COLOR = "#FFFFFF"
QR_BORDER = 2
QR_BOX_SIZE = 8
