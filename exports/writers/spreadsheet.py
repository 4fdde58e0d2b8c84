"""
XLSX writer built on openpyxl.
"""
from __future__ import annotations

import io
import re
from datetime import date, datetime, time
from decimal import Decimal

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from exports.errors import WriterError
from exports.writers.base import Writer
from exports.writers.formatting import format_scalar, header_labels

HEADER_FILL = PatternFill(start_color='3B82F6', end_color='3B82F6', fill_type='solid')
MAX_COLUMN_WIDTH = 50
MAX_SHEET_TITLE = 31
SHEET_TITLE_INVALID = re.compile(r'[\\/*?:\[\]]')


def _cell_value(value):
    # Excel has no time zones; aware values are written in local time
    if isinstance(value, datetime) and timezone.is_aware(value):
        return timezone.localtime(value).replace(tzinfo=None)
    if value is None or isinstance(value, (bool, int, float, Decimal, str, date, time)):
        return value
    raise WriterError(f'Cannot write value of type {type(value).__name__} to a spreadsheet.')


def _sheet_title(name, taken):
    base = SHEET_TITLE_INVALID.sub('-', name).strip()[:MAX_SHEET_TITLE] or 'Sheet'
    title, n = base, 2
    while title in taken:
        suffix = f' ({n})'
        title = base[:MAX_SHEET_TITLE - len(suffix)] + suffix
        n += 1
    return title


def _header_row(ws, labels):
    ws.append(labels)
    for col_idx in range(1, len(labels) + 1):
        cell = ws.cell(row=ws.max_row, column=col_idx)
        cell.font = Font(bold=True, color='FFFFFF')
        cell.fill = HEADER_FILL
    ws.freeze_panes = ws.cell(row=ws.max_row + 1, column=1)


def _fit_columns(ws, columns, first_row):
    for col_idx, column in enumerate(columns, start=1):
        letter = ws.cell(row=first_row, column=col_idx).column_letter
        width = max((len(str(c.value or '')) for c in ws[letter][first_row - 1:]), default=len(column))
        ws.column_dimensions[letter].width = min(width + 2, MAX_COLUMN_WIDTH)


class XLSXWriter(Writer):
    format = 'xlsx'
    media_type = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    extension = 'xlsx'

    def write(self, rows, columns, *, header=True, header_map=None, meta=None) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = 'Export'

        if meta is not None:
            if meta.title:
                ws.append([meta.title])
                ws.cell(row=ws.max_row, column=1).font = Font(bold=True, size=14)
            if meta.subtitle:
                ws.append([meta.subtitle])
            if meta.generated_at:
                ws.append(['Generated', format_scalar(meta.generated_at)])
            if meta.generated_by:
                ws.append(['Generated By', meta.generated_by])
            for key, value in (meta.extra_info or {}).items():
                ws.append([key, value])
            ws.append([])

        first_data_row = ws.max_row + 1 if meta is not None else 1
        if header:
            _header_row(ws, header_labels(columns, header_map))

        for row in rows:
            ws.append([_cell_value(row.get(c)) for c in columns])
        _fit_columns(ws, columns, first_data_row)

        for name, sheet_rows in (meta.sheets if meta is not None else ()):
            sheet = wb.create_sheet(title=_sheet_title(name, wb.sheetnames))
            sheet_columns = list(sheet_rows[0]) if sheet_rows else []
            _header_row(sheet, header_labels(sheet_columns))
            for row in sheet_rows:
                sheet.append([_cell_value(row.get(c)) for c in sheet_columns])
            _fit_columns(sheet, sheet_columns, 1)

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()
