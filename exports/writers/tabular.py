"""
Tabular writers: CSV and newline-delimited JSON.
"""
from __future__ import annotations

import csv
import io
import json

from exports.writers.base import Writer
from exports.writers.formatting import format_scalar, header_labels, json_scalar


class CSVWriter(Writer):
    """One line per record in column order, with an optional title-cased header."""
    format = 'csv'
    media_type = 'text/csv'
    extension = 'csv'

    def write(self, rows, columns, *, header=True, header_map=None, meta=None) -> bytes:
        buf = io.StringIO()
        writer = csv.writer(buf)
        if header:
            writer.writerow(header_labels(columns, header_map))
        for row in rows:
            writer.writerow([format_scalar(row.get(c)) for c in columns])
        return buf.getvalue().encode('utf-8')


class NDJSONWriter(Writer):
    """One JSON object per record.  ``header`` does not apply."""
    format = 'ndjson'
    media_type = 'application/x-ndjson'
    extension = 'ndjson'

    def write(self, rows, columns, *, header=True, header_map=None, meta=None) -> bytes:
        lines = []
        for row in rows:
            record = {c: json_scalar(row.get(c)) for c in columns}
            lines.append(json.dumps(record, ensure_ascii=False, separators=(',', ':')))
        return ''.join(line + '\n' for line in lines).encode('utf-8')
