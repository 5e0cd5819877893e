"""
Shared pytest fixtures: small teacher and document registers.

Usage:
    pytest tests/ -v
"""

import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from teachers_dashboard.transforms import build_dim_teacher, build_fact_teacher_document


@pytest.fixture
def example_records():
    """Three teachers: two in North, one in South, overlapping subjects."""
    return pd.DataFrame([
        {"id": 1, "name": "Ada Obi", "lga": "North", "subjects_taught": "Math, Science",
         "qualifications": "B.Ed"},
        {"id": 2, "name": "Bayo Ade", "lga": "North", "subjects_taught": "Math",
         "qualifications": "B.Ed, M.Ed"},
        {"id": 3, "name": "Chi Eze", "lga": "South", "subjects_taught": "Art",
         "qualifications": "PGCE"},
    ])


@pytest.fixture
def raw_register():
    """Raw register rows as a loader would return them."""
    return pd.DataFrame([
        {
            "id": 1,
            "name": "Amina Bello",
            "email": "amina.bello@schools.example.org",
            "qualifications": "Bachelor of Education (B.Ed), Diploma in Teaching",
            "subjects_taught": "Mathematics, Science",
            "school": "Sunrise Academy",
            "lga": "Central City LGA",
            "employment_date": "2015-09-01",
            "created_at": "2025-10-01 09:00:00",
            "updated_at": "2025-10-01 09:00:00",
            "user_id": 1,
        },
        {
            "id": 2,
            "name": "Emeka Eze",
            "email": "emeka.eze@schools.example.org",
            "qualifications": "Master of Education (M.Ed)",
            "subjects_taught": "English Language",
            "school": "Greenfield High School",
            "lga": "North Hills LGA",
            "employment_date": "2012-01-10",
            "created_at": "2025-10-02 10:30:00",
            "updated_at": "2025-10-03 08:00:00",
            "user_id": 1,
        },
        {
            "id": 3,
            "name": "Zainab Musa",
            "email": None,
            "qualifications": "Bachelor of Education (B.Ed)",
            "subjects_taught": "Mathematics, Information Technology",
            "school": "Riverbank Secondary School",
            "lga": "North Hills LGA",
            "employment_date": "2019-04-23",
            "created_at": "2025-10-04 11:15:00",
            "updated_at": "2025-10-04 11:15:00",
            "user_id": 2,
        },
    ])


@pytest.fixture
def teachers(raw_register):
    """Typed teacher table built from raw_register."""
    return build_dim_teacher(raw_register)


@pytest.fixture
def documents():
    return build_fact_teacher_document(pd.DataFrame([
        {"id": 1, "teacher_id": 1, "filename": "bed.pdf", "mime_type": "application/pdf",
         "file_path": "uploads/1-bed.pdf", "document_type": "Qualification Certificate",
         "uploaded_at": "2025-10-01 12:00:00"},
        {"id": 2, "teacher_id": 1, "filename": "licence.png", "mime_type": "image/png",
         "file_path": "uploads/2-licence.png", "document_type": "Teaching License",
         "uploaded_at": "2025-10-05 12:00:00"},
        {"id": 3, "teacher_id": 2, "filename": "id.jpg", "mime_type": "image/jpeg",
         "file_path": "uploads/3-id.jpg", "document_type": "Identity Document",
         "uploaded_at": "2025-10-03 12:00:00"},
    ]))
