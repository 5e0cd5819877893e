"""
Tests for register loaders and ingestion utilities.

Run: pytest tests/test_loaders.py -v
"""

from datetime import datetime

import openpyxl
import pandas as pd
import pytest

from teachers_dashboard.loaders import load_document_register, load_teacher_register
from teachers_dashboard.loaders.utils import (
    canonical_column,
    clean_text,
    normalise_date,
    safe_int,
    to_snake_case,
)


@pytest.fixture
def register_xlsx(tmp_path):
    """Workbook with a title banner above a camelCase header row."""
    path = tmp_path / "teachers.xlsx"
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Teachers"
    ws.append(["Teacher Register - exported 2025-10-16"])
    ws.append([])
    ws.append(["id", "name", "email", "qualifications", "subjectsTaught", "school", "lga", "employmentDate"])
    ws.append([1, "Amina Bello", "amina@example.org", "B.Ed", "Mathematics, Science",
               "Sunrise Academy", "Central City LGA", datetime(2015, 9, 1)])
    ws.append([2, "Emeka Eze", None, "M.Ed, PGCE", "English Language",
               "Greenfield High School", "North Hills LGA", datetime(2012, 1, 10)])
    ws.append([None] * 8)
    wb.save(path)
    return path


class TestColumnNames:

    @pytest.mark.parametrize("raw, expected", [
        ("subjectsTaught", "subjects_taught"),
        ("Subjects Taught", "subjects_taught"),
        ("employmentDate", "employment_date"),
        ("LGA", "lga"),
        ("Teacher ID", "teacher_id"),
        ("MIME Type", "mime_type"),
    ])
    def test_to_snake_case(self, raw, expected):
        assert to_snake_case(raw) == expected

    def test_aliases_resolved(self):
        assert canonical_column("Region") == "lga"
        assert canonical_column("Subjects") == "subjects_taught"
        assert canonical_column("name") == "name"


class TestCellHelpers:

    def test_excel_serial_date(self):
        assert normalise_date(43831) == pd.Timestamp("2020-01-01")

    def test_iso_string_date(self):
        assert normalise_date("2019-04-23") == pd.Timestamp("2019-04-23")

    @pytest.mark.parametrize("value", [None, "", "not a date", pd.NaT, float("nan")])
    def test_unparseable_dates_are_none(self, value):
        assert normalise_date(value) is None

    def test_clean_text(self):
        assert clean_text("  Ada ") == "Ada"
        assert clean_text("   ") is None
        assert clean_text(float("nan")) is None

    def test_safe_int(self):
        assert safe_int("7") == 7
        assert safe_int(3.0) == 3
        assert safe_int("") is None
        assert safe_int("abc") is None


class TestLoadTeacherRegister:

    def test_xlsx_header_detected_below_banner(self, register_xlsx):
        df = load_teacher_register(str(register_xlsx))
        assert len(df) == 2
        assert "subjects_taught" in df.columns
        assert "employment_date" in df.columns
        assert df["name"].tolist() == ["Amina Bello", "Emeka Eze"]

    def test_xlsx_values_raw(self, register_xlsx):
        df = load_teacher_register(str(register_xlsx))
        assert df.loc[0, "subjects_taught"] == "Mathematics, Science"
        assert df.loc[1, "email"] is None

    def test_csv_headers_normalised(self, tmp_path):
        path = tmp_path / "teachers.csv"
        pd.DataFrame({
            "Name": ["Zainab Musa"],
            "Email": [""],
            "Subjects Taught": ["Science"],
            "Qualifications": ["B.Ed"],
            "School": ["Sunrise Academy"],
            "Region": ["Lakeside LGA"],
        }).to_csv(path, index=False)

        df = load_teacher_register(str(path))
        assert set(df.columns) == {"name", "email", "subjects_taught", "qualifications", "school", "lga"}
        assert df.loc[0, "lga"] == "Lakeside LGA"
        assert df.loc[0, "email"] is None

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError):
            load_teacher_register(str(tmp_path / "teachers.json"))

    def test_missing_workbook_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_teacher_register(str(tmp_path / "absent.xlsx"))


class TestLoadDocumentRegister:

    def test_csv(self, tmp_path):
        path = tmp_path / "teacher_documents.csv"
        pd.DataFrame({
            "id": [1],
            "teacherId": [4],
            "filename": ["licence.pdf"],
            "mimeType": ["application/pdf"],
            "filePath": ["uploads/1-licence.pdf"],
            "documentType": ["Teaching License"],
            "uploadedAt": ["2025-10-01T09:00:00"],
        }).to_csv(path, index=False)

        df = load_document_register(str(path))
        assert list(df.columns) == [
            "id", "teacher_id", "filename", "mime_type", "file_path", "document_type", "uploaded_at",
        ]
        assert df.loc[0, "document_type"] == "Teaching License"


class TestWorkbookHandling:

    def test_workbook_closed_when_reading_fails(self, register_xlsx, monkeypatch):
        from teachers_dashboard.loaders import teacher_register

        closed = []
        real_load = openpyxl.load_workbook

        def load_and_track(*args, **kwargs):
            wb = real_load(*args, **kwargs)
            monkeypatch.setattr(wb, "close", lambda: closed.append(True))
            return wb

        def broken_header(*args, **kwargs):
            raise RuntimeError("corrupt sheet")

        monkeypatch.setattr(teacher_register.openpyxl, "load_workbook", load_and_track)
        monkeypatch.setattr(teacher_register, "find_header_row", broken_header)

        with pytest.raises(RuntimeError):
            load_teacher_register(str(register_xlsx))
        assert closed == [True]
