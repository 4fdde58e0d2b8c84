import csv
import io
import json

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from openpyxl import load_workbook

from clinic.models import Patient, Payment, QueueEvent, User
from exports.driver import run_export

pytestmark = pytest.mark.django_db

JANUARY = json.dumps({'from': '2024-01-01', 'to': '2024-01-31'})


def test_export_to_stdout(clinic):
    out, err = io.StringIO(), io.StringIO()
    call_command('run_export', 'payments', filters=JANUARY, stdout=out, stderr=err)
    lines = list(csv.reader(io.StringIO(out.getvalue())))
    assert lines[0][2] == 'Amount (UGX)'
    assert len(lines) == 3
    assert 'Exported 2 rows of payments' in err.getvalue()


def test_export_to_file(clinic, tmp_path):
    target = tmp_path / 'billing.xlsx'
    err = io.StringIO()
    call_command('run_export', 'billing', filters=JANUARY, format='xlsx', output=str(target), stderr=err)
    ws = load_workbook(target).active
    assert any(row[0] == 'B0002' for row in ws.iter_rows(values_only=True))
    assert 'billing_2024-01-01_2024-01-31.xlsx' in err.getvalue()


def test_cli_keeps_clinical_fields_by_default(clinic):
    out = io.StringIO()
    call_command('run_export', 'patients', '--no-header', stdout=out, stderr=io.StringIO())
    assert 'Plot 4, Kira Road' in out.getvalue()


def test_binary_formats_need_an_output_path(clinic):
    with pytest.raises(CommandError):
        call_command('run_export', 'payments', filters=JANUARY, format='pdf')


def test_errors_are_reported_as_command_errors(db):
    with pytest.raises(CommandError, match='not_found'):
        call_command('run_export', 'ledger')
    with pytest.raises(CommandError, match=r'validation: .*\(from\)'):
        call_command('run_export', 'payments', filters='{"from": "2024-02-01", "to": "2024-01-01"}')
    with pytest.raises(CommandError, match='not valid JSON'):
        call_command('run_export', 'payments', filters='{from}')


def test_seed_clinic_feeds_every_dataset(db):
    out = io.StringIO()
    call_command('seed_clinic', patients=12, days=5, seed=7, stdout=out)
    assert Patient.objects.count() == 12
    assert User.objects.filter(role='doctor').count() == 2
    assert QueueEvent.objects.count() == 36
    assert 'Seeded' in out.getvalue()

    rows = list(run_export('patients', {}, 5))
    assert len(rows) == 12
    assert len(list(run_export('payments', {'from': '2000-01-01', 'to': '2100-01-01'}))) == Payment.objects.count()


def test_seed_clinic_is_repeatable_for_staff(db):
    call_command('seed_clinic', patients=2, stdout=io.StringIO())
    call_command('seed_clinic', patients=2, stdout=io.StringIO())
    assert User.objects.filter(username='admin1').count() == 1
    assert Patient.objects.count() == 4
