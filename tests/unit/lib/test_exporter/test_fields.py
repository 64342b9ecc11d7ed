"""Tests for the export field catalog."""

from datetime import UTC, date, datetime

from employee_api.lib.exporter.fields import (
    DEFAULT_FIELDS,
    EXPORT_FIELDS,
    SORTABLE_FIELDS,
    format_value,
    header_label,
    lookup_field,
    parse_field_list,
    project_record,
)


class TestLookupField:
    """Tests for lookup_field."""

    def test_exact_name(self) -> None:
        field = lookup_field("firstName")
        assert field is not None
        assert field.attribute == "first_name"

    def test_case_insensitive(self) -> None:
        assert lookup_field("FIRSTNAME") == lookup_field("firstname") == lookup_field("firstName")

    def test_surrounding_whitespace_ignored(self) -> None:
        assert lookup_field("  salary ") is not None

    def test_unknown_returns_none(self) -> None:
        assert lookup_field("ssn") is None


class TestCatalog:
    def test_twelve_fields(self) -> None:
        assert len(EXPORT_FIELDS) == 12

    def test_phone_number_not_sortable(self) -> None:
        assert "phoneNumber" not in SORTABLE_FIELDS
        assert "salary" in SORTABLE_FIELDS


class TestParseFieldList:
    """Tests for parse_field_list."""

    def test_keeps_order(self) -> None:
        assert parse_field_list("salary,id,email") == ["salary", "id", "email"]

    def test_strips_and_drops_blanks(self) -> None:
        assert parse_field_list(" id , ,email,") == ["id", "email"]

    def test_empty_falls_back_to_defaults(self) -> None:
        assert parse_field_list("") == DEFAULT_FIELDS.split(",")
        assert parse_field_list(None) == DEFAULT_FIELDS.split(",")
        assert parse_field_list(" , ") == DEFAULT_FIELDS.split(",")

    def test_duplicates_kept(self) -> None:
        assert parse_field_list("id,id") == ["id", "id"]


class TestHeaderLabel:
    def test_known_fields(self) -> None:
        assert header_label("id") == "ID"
        assert header_label("dateOfBirth") == "Date of Birth"
        assert header_label("HIREDATE") == "Hire Date"

    def test_unknown_echoed(self) -> None:
        assert header_label("nickname") == "nickname"


class TestFormatValue:
    """Tests for format_value."""

    def test_none_is_empty(self) -> None:
        assert format_value(lookup_field("email"), None) == ""

    def test_unknown_field_is_empty(self) -> None:
        assert format_value(None, "anything") == ""

    def test_salary_two_decimals(self) -> None:
        assert format_value(lookup_field("salary"), 95000) == "95000.00"
        assert format_value(lookup_field("salary"), 50000.5) == "50000.50"

    def test_date(self) -> None:
        assert format_value(lookup_field("hireDate"), date(2020, 1, 5)) == "2020-01-05"

    def test_timestamp(self) -> None:
        value = datetime(2024, 3, 4, 5, 6, 7, 123456, tzinfo=UTC)
        assert format_value(lookup_field("createdAt"), value) == "2024-03-04 05:06:07"

    def test_integer(self) -> None:
        assert format_value(lookup_field("id"), 42) == "42"


class TestProjectRecord:
    def test_projects_in_requested_order(self) -> None:
        record = {"id": 7, "first_name": "Ada", "email": "ada@example.com", "salary": 10.0}
        assert project_record(record, ["email", "id", "salary"]) == ["ada@example.com", "7", "10.00"]

    def test_unknown_field_renders_empty_cell(self) -> None:
        assert project_record({"id": 1}, ["id", "bogus"]) == ["1", ""]

    def test_missing_attribute_renders_empty_cell(self) -> None:
        assert project_record({"id": 1}, ["phoneNumber"]) == [""]
