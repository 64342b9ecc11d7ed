"""Export field catalog.

Maps the public, camelCase field names accepted in export requests to the
record attribute they read, the header label written to the artifact, and
the value type that governs sorting and rendering.
"""

import enum
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


class FieldKind(enum.StrEnum):
    """Value type of an exportable field."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    STRING = "string"
    DATE = "date"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class ExportField:
    """An exportable record attribute."""

    name: str
    attribute: str
    label: str
    kind: FieldKind
    sortable: bool = True


EXPORT_FIELDS: tuple[ExportField, ...] = (
    ExportField("id", "id", "ID", FieldKind.INTEGER),
    ExportField("firstName", "first_name", "First Name", FieldKind.STRING),
    ExportField("lastName", "last_name", "Last Name", FieldKind.STRING),
    ExportField("email", "email", "Email", FieldKind.STRING),
    ExportField("phoneNumber", "phone_number", "Phone Number", FieldKind.STRING, sortable=False),
    ExportField("dateOfBirth", "date_of_birth", "Date of Birth", FieldKind.DATE),
    ExportField("hireDate", "hire_date", "Hire Date", FieldKind.DATE),
    ExportField("salary", "salary", "Salary", FieldKind.DECIMAL),
    ExportField("position", "position", "Position", FieldKind.STRING),
    ExportField("department", "department", "Department", FieldKind.STRING),
    ExportField("createdAt", "created_at", "Created At", FieldKind.TIMESTAMP),
    ExportField("updatedAt", "updated_at", "Updated At", FieldKind.TIMESTAMP),
)

_FIELDS_BY_KEY: dict[str, ExportField] = {f.name.lower(): f for f in EXPORT_FIELDS}

SORTABLE_FIELDS: tuple[str, ...] = tuple(f.name for f in EXPORT_FIELDS if f.sortable)

DEFAULT_FIELDS = "id,firstName,lastName,email,department,position,salary,hireDate"

DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def lookup_field(name: str) -> ExportField | None:
    """Resolve a field name case-insensitively.

    Args:
        name: Public field name, e.g. ``firstName`` or ``FIRSTNAME``.

    Returns:
        The matching ExportField, or None if the name is not known.
    """
    return _FIELDS_BY_KEY.get(name.strip().lower())


def parse_field_list(fields: str | None) -> list[str]:
    """Split a comma-separated field list, keeping caller order.

    Blank entries are dropped.  An empty or missing list falls back to
    DEFAULT_FIELDS.
    """
    selected = [part.strip() for part in (fields or "").split(",") if part.strip()]
    if not selected:
        selected = DEFAULT_FIELDS.split(",")
    return selected


def header_label(name: str) -> str:
    """Human-readable column header for a field; unknown names are echoed."""
    field = lookup_field(name)
    return field.label if field else name


def format_value(field: ExportField | None, value: Any) -> str:
    """Render a single cell value as text.

    Missing values and unknown fields render as an empty string.
    """
    if field is None or value is None:
        return ""
    if field.kind == FieldKind.DECIMAL:
        return f"{float(value):.2f}"
    if field.kind == FieldKind.TIMESTAMP and isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    if field.kind == FieldKind.DATE and isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    return str(value)


def project_record(record: dict[str, Any], names: list[str]) -> list[str]:
    """Project one record onto the requested fields, in order."""
    cells = []
    for name in names:
        field = lookup_field(name)
        cells.append(format_value(field, record.get(field.attribute) if field else None))
    return cells
