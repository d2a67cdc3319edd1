"""
Tabular export of usage data.
"""

import csv
import io
from typing import Sequence

from ..storage.models import ExportRow


def rows_to_csv(rows: Sequence[ExportRow]) -> str:
    """Render export rows as CSV text with a header line.

    Returns an empty string when there is nothing to export.
    """
    if not rows:
        return ""

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=ExportRow.field_names(), lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row.to_dict())
    return buffer.getvalue()
