"""CSV encoder for export records."""

import csv
import io
from collections.abc import Iterable, Sequence
from typing import Any

from employee_api.lib.exporter.fields import header_label, project_record


def encode_csv(
    records: Iterable[dict[str, Any]],
    fields: Sequence[str],
) -> bytes:
    """Encode records as UTF-8 CSV.

    The header row holds the display label of each requested field.  Every
    data cell is quoted, with embedded double quotes doubled.

    Args:
        records: Record dicts keyed by attribute name, already sorted.
        fields: Public field names in output order.

    Returns:
        The encoded CSV payload.
    """
    buffer = io.StringIO(newline="")
    header_writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    row_writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    names = list(fields)
    header_writer.writerow([header_label(name) for name in names])
    for record in records:
        row_writer.writerow(project_record(record, names))

    return buffer.getvalue().encode("utf-8")
