"""
CSV serialization for batch planning results.

Header row of plain field names, then one row per result with every
field double-quoted and inner quotes doubled. Records are joined by
``\\n`` with no trailing newline.
"""

import csv
import io
from collections.abc import Iterable, Sequence
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def results_to_csv(results: Iterable[BaseModel], fields: Sequence[str]) -> str:
    """
    Serialize results to CSV.

    Args:
        results: Result models exposing every name in ``fields``.
        fields: Column names, in order; also the header row.

    Returns:
        The CSV document as a string.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for result in results:
        writer.writerow([_cell(getattr(result, field)) for field in fields])

    rows = buffer.getvalue().rstrip("\n")
    header = ",".join(fields)
    return f"{header}\n{rows}" if rows else header
