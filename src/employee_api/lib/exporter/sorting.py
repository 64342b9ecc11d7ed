"""Stable single-field ordering of export records."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from loguru import logger

from employee_api.lib.exporter.fields import ExportField, FieldKind, lookup_field

SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass
class SortOutcome:
    """Result of a sort request.

    ``warning`` is set when the sort field was not recognised and the
    input order was kept.
    """

    records: list[dict[str, Any]]
    applied: bool
    warning: str | None = None


def _sort_key(field: ExportField) -> Any:
    """Build a key that places missing values before any present value."""

    def key(record: dict[str, Any]) -> tuple[bool, Any]:
        value = record.get(field.attribute)
        if value is None:
            return (False, 0)
        if field.kind == FieldKind.STRING:
            return (True, str(value).lower())
        return (True, value)

    return key


def normalize_direction(sort_dir: str | None) -> str:
    """Map a caller-supplied direction to ``asc`` or ``desc`` (default ``asc``)."""
    if sort_dir and sort_dir.strip().lower() == SORT_DESC:
        return SORT_DESC
    return SORT_ASC


def sort_records(
    records: Sequence[dict[str, Any]],
    sort_by: str | None,
    sort_dir: str | None = SORT_ASC,
) -> SortOutcome:
    """Sort records by one named field.

    The sort is stable in both directions.  Null values come first in
    ascending order and last in descending order.  An unknown or unsortable field leaves the input
    order untouched and reports a warning instead of failing.

    Args:
        records: Filtered record dicts keyed by attribute name.
        sort_by: Public field name, matched case-insensitively.
        sort_dir: ``asc`` or ``desc``, case-insensitive.

    Returns:
        SortOutcome with the ordered records.
    """
    if not sort_by or not sort_by.strip():
        return SortOutcome(records=list(records), applied=False)

    field = lookup_field(sort_by)
    if field is None or not field.sortable:
        warning = f"Unknown sort field '{sort_by.strip()}'; original order kept"
        logger.warning(warning)
        return SortOutcome(records=list(records), applied=False, warning=warning)

    descending = normalize_direction(sort_dir) == SORT_DESC
    ordered = sorted(records, key=_sort_key(field), reverse=descending)
    return SortOutcome(records=ordered, applied=True)
