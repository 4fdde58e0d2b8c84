"""
Locale-independent scalar formatting shared by every writer.

Two runs over the same data must produce the same bytes, so numbers are
never grouped and temporal values are always ISO 8601.
"""
from __future__ import annotations

import math
from datetime import date, datetime, time
from decimal import Decimal

from exports.errors import WriterError


def format_scalar(value) -> str:
    if value is None:
        return ''
    # bool is an int subclass
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        return format(value, 'f')
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise WriterError(f'Cannot format value of type {type(value).__name__}.')


def title_case(column: str) -> str:
    """``patient_name`` -> ``Patient Name``."""
    return ' '.join(w[:1].upper() + w[1:].lower() for w in column.replace('_', ' ').split(' '))


def header_labels(columns, header_map=None):
    header_map = header_map or {}
    return [header_map.get(c) or title_case(c) for c in columns]


def json_scalar(value):
    """JSON-native values pass through; everything else is formatted as text."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return format_scalar(value)
