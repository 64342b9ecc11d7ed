"""Tests for the exporter package public API."""

import json
from collections.abc import Iterable, Sequence
from typing import Any

import pytest

from employee_api.lib.exporter import (
    _FORMATS,
    ExportFormat,
    encode_records,
    get_format,
    register_format,
    supported_formats,
)
from employee_api.lib.exporter.fields import project_record


def _encode_json_lines(records: Iterable[dict[str, Any]], fields: Sequence[str]) -> bytes:
    names = list(fields)
    lines = [json.dumps(dict(zip(names, project_record(r, names), strict=True))) for r in records]
    return "\n".join(lines).encode("utf-8")


@pytest.fixture
def jsonl_format() -> Any:
    export_format = ExportFormat(
        name="jsonl",
        media_type="application/x-ndjson",
        extension="jsonl",
        encoder=_encode_json_lines,
    )
    register_format(export_format)
    yield export_format
    _FORMATS.pop("jsonl", None)


class TestFormatRegistry:
    def test_csv_registered_by_default(self) -> None:
        assert "csv" in supported_formats()
        assert get_format("CSV").media_type == "text/csv"

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ValueError, match="Unsupported export type"):
            get_format("xlsx")

    def test_registered_format_is_used(self, jsonl_format: ExportFormat) -> None:
        assert "jsonl" in supported_formats()
        encoded = encode_records([{"id": 1}, {"id": 2}], "jsonl", ["id"])
        assert encoded.media_type == "application/x-ndjson"
        assert encoded.payload == b'{"id": "1"}\n{"id": "2"}'


class TestEncodeRecords:
    def test_csv_metadata(self) -> None:
        encoded = encode_records([{"id": 1}], "csv", ["id"])
        assert encoded.record_count == 1
        assert encoded.extension == "csv"
        assert encoded.size_bytes == len(encoded.payload) == len(b'ID\n"1"\n')

    def test_empty_records(self) -> None:
        encoded = encode_records([], "csv", ["id", "email"])
        assert encoded.record_count == 0
        assert encoded.payload == b"ID,Email\n"
