"""Application objects – CSV row import for bulk inserts."""
from __future__ import annotations

import csv
import io
from typing import Any

from object_service.kernel.errors import ValidationError

__all__ = ["rows_from_csv"]


def rows_from_csv(content: str | bytes, delimiter: str = ",") -> list[dict[str, Any]]:
    """Turn CSV text into documents, one per data row.

    The first line is the header; every value stays a string.  A leading
    UTF-8 BOM is ignored.  Raises :class:`ValidationError` when there is no
    data at all.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ValidationError("Csv file is not valid UTF-8", cause=exc) from exc
    else:
        content = content.removeprefix("\ufeff")

    if not content.strip():
        raise ValidationError("Csv file has no data")

    reader = csv.DictReader(io.StringIO(content), delimiter=delimiter)
    if not reader.fieldnames:
        raise ValidationError("Csv file has no data")

    rows: list[dict[str, Any]] = []
    for row in reader:
        if None in row:
            line_no = reader.line_num
            raise ValidationError(
                f"Csv row {line_no} has more values than the header",
                errors=[{"line": line_no, "message": "too many values"}],
            )
        rows.append({key: ("" if value is None else value) for key, value in row.items()})
    if not rows:
        raise ValidationError("Csv file has no data")
    return rows
