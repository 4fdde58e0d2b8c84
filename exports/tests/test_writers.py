import csv
import io
import json
from datetime import date, datetime, time
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from exports.errors import ValidationError, WriterError
from exports.tests.utils import at
from exports.writers import DocumentMeta, get_writer
from exports.writers.formatting import format_scalar, header_labels, title_case

COLUMNS = ['receipt_no', 'created_at', 'amount', 'reference', 'is_refund']
ROWS = [
    {'receipt_no': 'R00001', 'created_at': at(10, 14), 'amount': Decimal('25000.00'), 'reference': None,
     'is_refund': False},
    {'receipt_no': 'R00002', 'created_at': at(11, 14), 'amount': Decimal('5000.50'),
     'reference': 'TX "12", line\ntwo', 'is_refund': True},
]


def test_format_scalar():
    assert format_scalar(None) == ''
    assert format_scalar(True) == 'true'
    assert format_scalar(0) == '0'
    assert format_scalar(1234567) == '1234567'
    assert format_scalar(Decimal('1E+3')) == '1000'
    assert format_scalar(0.1) == '0.1'
    assert format_scalar(date(2024, 1, 10)) == '2024-01-10'
    assert format_scalar(time(9, 30)) == '09:30:00'
    assert format_scalar(at(10, 14)) == '2024-01-10T14:00:00+00:00'
    with pytest.raises(WriterError):
        format_scalar(object())


def test_header_labels():
    assert title_case('patient_name') == 'Patient Name'
    assert header_labels(['amount', 'method'], {'amount': 'Amount (UGX)'}) == ['Amount (UGX)', 'Method']


def test_csv_round_trip():
    payload = get_writer('csv').write(ROWS, COLUMNS)
    lines = list(csv.reader(io.StringIO(payload.decode('utf-8'))))
    assert lines[0] == ['Receipt No', 'Created At', 'Amount', 'Reference', 'Is Refund']
    assert lines[1] == ['R00001', '2024-01-10T14:00:00+00:00', '25000.00', '', 'false']
    assert lines[2] == ['R00002', '2024-01-11T14:00:00+00:00', '5000.50', 'TX "12", line\ntwo', 'true']


def test_csv_without_header_and_with_subset():
    payload = get_writer('tabular').write(ROWS, ['amount', 'receipt_no'], header=False)
    lines = list(csv.reader(io.StringIO(payload.decode('utf-8'))))
    assert lines == [['25000.00', 'R00001'], ['5000.50', 'R00002']]


def test_csv_output_is_deterministic():
    writer = get_writer('csv')
    assert writer.write(ROWS, COLUMNS) == writer.write(ROWS, COLUMNS)


def test_ndjson():
    payload = get_writer('ndjson').write(ROWS, COLUMNS)
    lines = payload.decode('utf-8').splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert list(first) == COLUMNS
    assert first['amount'] == '25000.00'
    assert first['reference'] is None
    assert first['is_refund'] is False


def test_xlsx():
    meta = DocumentMeta(title='Dayspring Medical Center - Payments', extra_info={'Currency': 'UGX'})
    payload = get_writer('xlsx').write(ROWS, COLUMNS, meta=meta, header_map={'amount': 'Amount (UGX)'})
    ws = load_workbook(io.BytesIO(payload)).active
    values = [list(r) for r in ws.iter_rows(values_only=True)]
    assert values[0][0] == 'Dayspring Medical Center - Payments'
    header_at = next(i for i, r in enumerate(values) if r[0] == 'Receipt No')
    assert values[header_at][2] == 'Amount (UGX)'
    first = values[header_at + 1]
    assert first[0] == 'R00001'
    # 14:00 UTC is 17:00 in Kampala
    assert first[1] == datetime(2024, 1, 10, 17, 0)
    assert first[3] is None


def test_xlsx_refuses_unknown_types():
    with pytest.raises(WriterError):
        get_writer('xlsx').write([{'receipt_no': object()}], ['receipt_no'])


def test_pdf():
    meta = DocumentMeta(title='Payments', subtitle='Information System', extra_info={'Period': '01/01/2024 - 31/01/2024'})
    payload = get_writer('pdf').write(ROWS, COLUMNS, meta=meta)
    assert payload.startswith(b'%PDF')


def test_pdf_grouped_and_landscape():
    rows = [
        {'section': 'Check-ins', 'metric': 'Total', 'value': 2},
        {'section': 'Check-ins', 'metric': 'Complete', 'value': 1},
        {'section': 'Payments', 'metric': 'Total Amount', 'value': Decimal('30000.50')},
    ]
    meta = DocumentMeta(title='Reception Register', group_by='section', landscape=True)
    assert get_writer('document').write(rows, ['section', 'metric', 'value'], meta=meta).startswith(b'%PDF')


def test_pdf_without_rows():
    assert get_writer('pdf').write([], COLUMNS).startswith(b'%PDF')


def test_pdf_refuses_unknown_types():
    with pytest.raises(WriterError):
        get_writer('pdf').write([{'receipt_no': object()}], ['receipt_no'])


def test_unknown_format():
    with pytest.raises(ValidationError) as e:
        get_writer('docx')
    assert e.value.field == 'format'


def test_xlsx_extra_sheets():
    meta = DocumentMeta(sheets=(
        ('A/E: night', ({'metric': 'Waiting', 'value': 3},)),
        ('Export', ({'metric': 'Done', 'value': 1},)),
    ))
    payload = get_writer('xlsx').write(ROWS, COLUMNS, meta=meta)
    wb = load_workbook(io.BytesIO(payload))
    assert wb.sheetnames == ['Export', 'A-E- night', 'Export (2)']
    assert list(wb['A-E- night'].iter_rows(values_only=True)) == [('Metric', 'Value'), ('Waiting', 3)]
