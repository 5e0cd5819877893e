"""
Tests for the aggregation stage: region, subject and qualification counts.

Run: pytest tests/test_aggregations.py -v
"""

import math

import pandas as pd
import pytest

from teachers_dashboard.aggregations import (
    calc_percentage,
    count_by_qualification,
    count_by_region,
    count_by_subject,
    explode_multi_valued,
    get_teacher_summary,
    split_multi_valued,
    truncate_label,
)
from teachers_dashboard.config import UNASSIGNED_REGION


ROW_COLUMNS = ["label", "count", "total", "percentage"]


class TestSplitMultiValued:
    """Comma-joined fields split, trimmed, empties dropped."""

    def test_split_and_trim(self):
        assert split_multi_valued(" Math ,Science,  Art") == ["Math", "Science", "Art"]

    def test_empty_tokens_dropped(self):
        assert split_multi_valued("Math, , ,Science,") == ["Math", "Science"]

    @pytest.mark.parametrize("value", [None, "", "   ", ",,", float("nan")])
    def test_missing_or_blank_yields_no_tokens(self, value):
        assert split_multi_valued(value) == []

    def test_repeat_within_record_counted_once(self):
        assert split_multi_valued("Math, Science, Math") == ["Math", "Science"]

    def test_list_input_normalised(self):
        assert split_multi_valued([" Math", "", "Art ", None]) == ["Math", "Art"]


class TestPercentage:
    """Percentages rounded to one decimal, never NaN."""

    def test_two_thirds(self):
        assert calc_percentage(2, 3) == 66.7

    def test_one_third(self):
        assert calc_percentage(1, 3) == 33.3

    def test_zero_total_returns_zero(self):
        result = calc_percentage(0, 0)
        assert result == 0.0
        assert not math.isnan(result)

    def test_full(self):
        assert calc_percentage(5, 5) == 100.0


class TestTruncateLabel:

    def test_short_label_unchanged(self):
        assert truncate_label("B.Ed", 30) == "B.Ed"

    def test_long_label_cut_with_ellipsis(self):
        label = "Postgraduate Certificate in Education (PGCE)"
        assert truncate_label(label, 30) == label[:30] + "..."

    def test_exact_length_unchanged(self):
        assert truncate_label("x" * 30, 30) == "x" * 30

    def test_no_budget(self):
        label = "Postgraduate Certificate in Education (PGCE)"
        assert truncate_label(label, None) == label


class TestCountByRegion:
    """Region is single-valued: counts sum to the record total."""

    def test_example_counts(self, example_records):
        rows = count_by_region(example_records)
        assert rows["lga"].tolist() == ["North", "South"]
        assert rows["count"].tolist() == [2, 1]
        assert rows["percentage"].tolist() == [66.7, 33.3]
        assert rows["total"].tolist() == [3, 3]

    def test_counts_sum_to_total(self, teachers):
        rows = count_by_region(teachers)
        assert rows["count"].sum() == len(teachers)

    def test_schema(self, example_records):
        rows = count_by_region(example_records)
        assert list(rows.columns) == ["lga"] + ROW_COLUMNS

    def test_missing_region_counted_as_unassigned(self, example_records):
        records = example_records.copy()
        records.loc[2, "lga"] = None
        rows = count_by_region(records)
        assert UNASSIGNED_REGION in rows["lga"].tolist()
        assert rows["count"].sum() == 3

    def test_exact_string_grouping(self):
        records = pd.DataFrame({"lga": ["North", "north", "North"]})
        rows = count_by_region(records)
        assert dict(zip(rows["lga"], rows["count"])) == {"North": 2, "north": 1}

    def test_empty_records(self):
        rows = count_by_region(pd.DataFrame(columns=["lga"]))
        assert rows.empty
        assert list(rows.columns) == ["lga"] + ROW_COLUMNS


class TestCountBySubject:
    """Top-5 subjects, descending, ties in first-encountered order."""

    def test_example_counts(self, example_records):
        rows = count_by_subject(example_records)
        assert rows["subject"].tolist() == ["Math", "Science", "Art"]
        assert rows["count"].tolist() == [2, 1, 1]
        assert rows["percentage"].tolist() == [66.7, 33.3, 33.3]

    def test_top_five_with_ties(self):
        records = pd.DataFrame({"subjects_taught": ["A, B, C", "D, E, F", "F, A"]})
        rows = count_by_subject(records)
        assert len(rows) == 5
        assert rows["subject"].tolist() == ["A", "F", "B", "C", "D"]
        assert rows["count"].is_monotonic_decreasing

    def test_custom_top_n(self, example_records):
        rows = count_by_subject(example_records, top_n=1)
        assert rows["subject"].tolist() == ["Math"]

    def test_no_group_exceeds_total(self):
        records = pd.DataFrame({"subjects_taught": ["Math, Math, Science", "Math"]})
        rows = count_by_subject(records)
        assert rows["count"].max() <= len(records)
        assert rows["percentage"].between(0, 100).all()

    def test_record_with_only_empty_tokens_contributes_nothing(self):
        records = pd.DataFrame({"subjects_taught": [" , ", "Art", None]})
        rows = count_by_subject(records)
        assert rows["subject"].tolist() == ["Art"]
        assert rows["total"].tolist() == [3]
        assert rows["percentage"].tolist() == [33.3]

    def test_empty_records(self):
        rows = count_by_subject(pd.DataFrame(columns=["subjects_taught"]))
        assert rows.empty
        assert list(rows.columns) == ["subject"] + ROW_COLUMNS


class TestCountByQualification:
    """All qualifications, descending, with truncated display labels."""

    def test_counts_and_order(self, example_records):
        rows = count_by_qualification(example_records)
        assert rows["qualification"].tolist() == ["B.Ed", "M.Ed", "PGCE"]
        assert rows["count"].tolist() == [2, 1, 1]

    def test_no_top_n_truncation(self):
        records = pd.DataFrame({"qualifications": ["A, B, C, D, E, F, G"]})
        assert len(count_by_qualification(records)) == 7

    def test_label_truncated_key_kept(self):
        long_name = "Postgraduate Certificate in Education (PGCE)"
        records = pd.DataFrame({"qualifications": [long_name]})
        rows = count_by_qualification(records, label_max=30)
        assert rows["qualification"].iloc[0] == long_name
        assert rows["label"].iloc[0] == long_name[:30] + "..."

    def test_label_budget_disabled(self):
        long_name = "Postgraduate Certificate in Education (PGCE)"
        records = pd.DataFrame({"qualifications": [long_name]})
        rows = count_by_qualification(records, label_max=None)
        assert rows["label"].iloc[0] == long_name

    def test_missing_column_is_empty(self):
        rows = count_by_qualification(pd.DataFrame({"name": ["x"]}))
        assert rows.empty


class TestExplodeAndSummary:

    def test_explode_pairs(self, example_records):
        tokens = explode_multi_valued(example_records, "subjects_taught")
        assert sorted(tokens.tolist()) == ["Art", "Math", "Math", "Science"]

    def test_summary(self, teachers):
        summary = get_teacher_summary(teachers)
        assert summary == {
            "total_teachers": 3,
            "schools": 3,
            "lgas": 2,
            "subjects": 4,
            "qualifications": 3,
        }

    def test_summary_empty(self):
        summary = get_teacher_summary(pd.DataFrame())
        assert summary["total_teachers"] == 0
        assert summary["subjects"] == 0
