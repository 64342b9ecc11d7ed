"""Exporter library: public API for employee data export.

Provides the field catalog, the sort engine, format-specific encoders and a
unified encode function.  Encoders are looked up in a registry keyed by
export type so new formats can be added without touching the pipeline.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from employee_api.lib.exporter.csv_writer import encode_csv
from employee_api.lib.exporter.fields import (
    DEFAULT_FIELDS,
    EXPORT_FIELDS,
    SORTABLE_FIELDS,
    ExportField,
    FieldKind,
    header_label,
    lookup_field,
    parse_field_list,
)
from employee_api.lib.exporter.reference import generate_reference_id
from employee_api.lib.exporter.sorting import SortOutcome, normalize_direction, sort_records

Encoder = Callable[[Iterable[dict[str, Any]], Sequence[str]], bytes]


@dataclass(frozen=True)
class ExportFormat:
    """A registered output format."""

    name: str
    media_type: str
    extension: str
    encoder: Encoder


# Format registry mapping export type names to encoders
_FORMATS: dict[str, ExportFormat] = {
    "csv": ExportFormat(name="csv", media_type="text/csv", extension="csv", encoder=encode_csv),
}


def supported_formats() -> list[str]:
    """Names of all registered export types."""
    return list(_FORMATS.keys())


def register_format(export_format: ExportFormat) -> None:
    """Register (or replace) an output format."""
    _FORMATS[export_format.name] = export_format


def get_format(export_type: str) -> ExportFormat:
    """Look up a registered format.

    Raises:
        ValueError: If the export type is not registered.
    """
    export_format = _FORMATS.get(export_type.lower())
    if export_format is None:
        msg = f"Unsupported export type: {export_type}. Supported: {supported_formats()}"
        raise ValueError(msg)
    return export_format


@dataclass
class EncodedExport:
    """Result of an encode operation."""

    payload: bytes
    record_count: int
    media_type: str
    extension: str

    @property
    def size_bytes(self) -> int:
        return len(self.payload)


def encode_records(
    records: Sequence[dict[str, Any]],
    export_type: str,
    fields: Sequence[str],
) -> EncodedExport:
    """Encode sorted records in the requested format.

    Args:
        records: Record dicts keyed by attribute name.
        export_type: Registered format name, e.g. ``csv``.
        fields: Public field names in output order.

    Returns:
        EncodedExport with the payload and its metadata.

    Raises:
        ValueError: If the format is not supported.
    """
    export_format = get_format(export_type)
    payload = export_format.encoder(records, fields)
    return EncodedExport(
        payload=payload,
        record_count=len(records),
        media_type=export_format.media_type,
        extension=export_format.extension,
    )


__all__ = [
    "DEFAULT_FIELDS",
    "EXPORT_FIELDS",
    "SORTABLE_FIELDS",
    "EncodedExport",
    "ExportField",
    "ExportFormat",
    "FieldKind",
    "SortOutcome",
    "encode_csv",
    "encode_records",
    "generate_reference_id",
    "get_format",
    "header_label",
    "lookup_field",
    "normalize_direction",
    "parse_field_list",
    "register_format",
    "sort_records",
    "supported_formats",
]
