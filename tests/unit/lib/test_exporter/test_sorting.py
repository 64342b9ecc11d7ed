"""Tests for the export sort engine."""

from datetime import date

from employee_api.lib.exporter.sorting import SORT_ASC, SORT_DESC, normalize_direction, sort_records

RECORDS = [
    {"id": 1, "first_name": "bob", "salary": 300.0, "hire_date": date(2020, 1, 1)},
    {"id": 2, "first_name": "Alice", "salary": None, "hire_date": date(2019, 1, 1)},
    {"id": 3, "first_name": "carol", "salary": 100.0, "hire_date": None},
    {"id": 4, "first_name": "alice", "salary": 300.0, "hire_date": date(2021, 1, 1)},
]


def _ids(records: list[dict]) -> list[int]:
    return [r["id"] for r in records]


class TestNormalizeDirection:
    def test_desc_any_case(self) -> None:
        assert normalize_direction("DESC") == SORT_DESC
        assert normalize_direction(" desc ") == SORT_DESC

    def test_everything_else_is_asc(self) -> None:
        assert normalize_direction(None) == SORT_ASC
        assert normalize_direction("sideways") == SORT_ASC


class TestSortRecords:
    """Tests for sort_records."""

    def test_numeric_ascending_nulls_first(self) -> None:
        outcome = sort_records(RECORDS, "salary", "asc")
        assert outcome.applied is True
        assert outcome.warning is None
        assert _ids(outcome.records) == [2, 3, 1, 4]

    def test_numeric_descending_nulls_last(self) -> None:
        outcome = sort_records(RECORDS, "salary", "desc")
        assert _ids(outcome.records) == [1, 4, 3, 2]

    def test_stable_for_equal_keys(self) -> None:
        outcome = sort_records(RECORDS, "salary", "asc")
        # ids 1 and 4 share a salary and keep their input order
        assert _ids(outcome.records).index(1) < _ids(outcome.records).index(4)

    def test_strings_case_insensitive(self) -> None:
        outcome = sort_records(RECORDS, "firstName", "asc")
        assert _ids(outcome.records) == [2, 4, 1, 3]

    def test_dates(self) -> None:
        outcome = sort_records(RECORDS, "hireDate", "asc")
        assert _ids(outcome.records) == [3, 2, 1, 4]

    def test_field_name_case_insensitive(self) -> None:
        assert _ids(sort_records(RECORDS, "SALARY", "DESC").records) == [1, 4, 3, 2]

    def test_unknown_field_keeps_order_with_warning(self) -> None:
        outcome = sort_records(RECORDS, "nickname", "asc")
        assert outcome.applied is False
        assert _ids(outcome.records) == [1, 2, 3, 4]
        assert outcome.warning is not None
        assert "nickname" in outcome.warning

    def test_unsortable_field_keeps_order_with_warning(self) -> None:
        outcome = sort_records(RECORDS, "phoneNumber", "asc")
        assert outcome.applied is False
        assert outcome.warning is not None

    def test_empty_sort_by_is_noop(self) -> None:
        outcome = sort_records(RECORDS, "", "desc")
        assert outcome.applied is False
        assert outcome.warning is None
        assert _ids(outcome.records) == [1, 2, 3, 4]

    def test_does_not_mutate_input(self) -> None:
        records = list(RECORDS)
        sort_records(records, "salary", "desc")
        assert _ids(records) == [1, 2, 3, 4]

    def test_empty_input(self) -> None:
        assert sort_records([], "salary", "asc").records == []
