"""
Tests for the simulated register generator.

Run: pytest tests/test_simulator.py -v
"""

import pandas as pd

from teachers_dashboard.aggregations import count_by_region, count_by_subject, split_multi_valued
from teachers_dashboard.config import DOCUMENT_TYPES, LGAS, QUALIFICATIONS, SCHOOLS, SUBJECTS
from teachers_dashboard.simulator import generate_documents, generate_teacher_records
from teachers_dashboard.transforms import build_dim_teacher, build_fact_teacher_document


class TestGenerateTeacherRecords:

    def test_row_count_and_ids(self):
        raw = generate_teacher_records(n_teachers=25)
        assert len(raw) == 25
        assert raw["id"].tolist() == list(range(1, 26))

    def test_reproducible(self):
        pd.testing.assert_frame_equal(generate_teacher_records(seed=3), generate_teacher_records(seed=3))

    def test_values_from_reference_lists(self):
        raw = generate_teacher_records()
        assert raw["lga"].isin(LGAS).all()
        assert raw["school"].isin(SCHOOLS).all()
        for value in raw["subjects_taught"]:
            tokens = split_multi_valued(value)
            assert 1 <= len(tokens) <= 3
            assert set(tokens) <= set(SUBJECTS)
        # "(B.Sc, B.A)" splits on its inner comma like any other entry
        for value in raw["qualifications"]:
            for token in split_multi_valued(value):
                assert any(token in q for q in QUALIFICATIONS)

    def test_some_emails_missing(self):
        raw = generate_teacher_records(n_teachers=200)
        assert raw["email"].isna().any()
        assert raw["email"].notna().any()

    def test_feeds_pipeline(self):
        teachers = build_dim_teacher(generate_teacher_records())
        by_region = count_by_region(teachers)
        assert by_region["count"].sum() == len(teachers)
        assert len(count_by_subject(teachers)) == 5


class TestGenerateDocuments:

    def test_documents_reference_teachers(self):
        raw = generate_teacher_records(n_teachers=30)
        docs = generate_documents(raw)
        assert docs["teacher_id"].isin(raw["id"]).all()
        assert docs["document_type"].isin(DOCUMENT_TYPES).all()
        assert docs["id"].is_unique

    def test_uploaded_after_record_created(self):
        raw = generate_teacher_records(n_teachers=30)
        docs = generate_documents(raw).merge(
            raw[["id", "created_at"]], left_on="teacher_id", right_on="id", suffixes=("", "_teacher"),
        )
        assert (docs["uploaded_at"] > docs["created_at"]).all()

    def test_builds_cleanly(self):
        raw = generate_teacher_records(n_teachers=30)
        docs = build_fact_teacher_document(generate_documents(raw))
        assert len(docs) == len(generate_documents(raw))
