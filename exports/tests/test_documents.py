from decimal import Decimal

import pytest

from exports.registry import registry
from exports.services.documents import (
    build_meta, department_sheets, export_filename, header_map_for, quick_totals, requested_by,
)
from exports.tests.utils import make_user

pytestmark = pytest.mark.django_db


def test_meta_for_a_filtered_export():
    dataset = registry.get('bed_assignments')
    filters = dataset.validate_filters({'from': '2024-01-01', 'to': '2024-01-31', 'ward': 'Maternity'})
    user = make_user('reception1', name='Brian Ssemanda')
    meta = build_meta(dataset, filters, user)
    assert meta.title == 'Dayspring Medical Center - Bed Assignments'
    assert meta.extra_info['Period'] == '01/01/2024 - 31/01/2024'
    assert meta.extra_info['Ward'] == 'Maternity'
    # the default status of All is not echoed
    assert 'Status' not in meta.extra_info
    assert meta.extra_info['Requested By'] == 'Brian Ssemanda <reception1@example.com>'
    assert meta.landscape is False


def test_meta_for_reports_groups_by_section():
    dataset = registry.get('reception_register')
    meta = build_meta(dataset, dataset.validate_filters({'from': '2024-01-01', 'to': '2024-01-01'}))
    assert meta.group_by == 'section'
    assert 'Requested By' not in meta.extra_info


def test_patients_are_landscape():
    dataset = registry.get('patients')
    assert build_meta(dataset, dataset.validate_filters({})).landscape


def test_filename_and_headers():
    payments = registry.get('payments')
    filters = payments.validate_filters({'from': '2024-01-01', 'to': '2024-01-31'})
    assert export_filename(payments, filters, 'csv') == 'payments_2024-01-01_2024-01-31.csv'
    assert header_map_for(payments) == {'amount': 'Amount (UGX)'}
    assert header_map_for(registry.get('billing')) is None


def test_requested_by_falls_back_to_username():
    user = make_user('cashier1', 'cashier', name='', email='')
    assert requested_by(user) == 'cashier1'
    assert requested_by(None) == ''


REGISTER_ROWS = [
    {'section': 'Check-ins', 'metric': 'Total', 'value': 4},
    {'section': 'Queue', 'metric': 'Waiting', 'value': 1},
    {'section': 'Payments', 'metric': 'Total Amount', 'value': Decimal('30000.50')},
    {'section': 'KPIs', 'metric': 'Avg Wait (min)', 'value': Decimal('12.50')},
]


def test_register_header_carries_quick_totals():
    dataset = registry.get('reception_register')
    meta = build_meta(dataset, dataset.validate_filters({'from': '2024-01-01', 'to': '2024-01-31'}), rows=REGISTER_ROWS)
    assert meta.extra_info['Check-ins Total'] == '4'
    assert meta.extra_info['Queue Waiting'] == '1'
    assert meta.extra_info['Payments Total'] == '30000.50'
    assert meta.extra_info['Avg Wait (min)'] == '12.50'
    assert 'Payments Count' not in meta.extra_info
    assert meta.sheets == ()


def test_quick_totals_only_for_reception_reports():
    assert quick_totals(registry.get('payments'), REGISTER_ROWS) == {}


def test_daily_report_splits_departments_into_sheets():
    rows = [
        {'section': 'Register - Check-ins', 'metric': 'Total', 'value': 2},
        {'section': 'Department - A&E', 'metric': 'Waiting', 'value': 3},
        {'section': 'Department - A&E', 'metric': 'Done', 'value': 1},
        {'section': 'Department - OPD', 'metric': 'Waiting', 'value': 0},
    ]
    dataset = registry.get('reception_daily')
    meta = build_meta(dataset, dataset.validate_filters({'from': '2024-01-01', 'to': '2024-01-31'}), rows=rows)
    assert meta.extra_info['Check-ins Total'] == '2'
    assert department_sheets(rows) == meta.sheets
    assert [name for name, _ in meta.sheets] == ['A&E', 'OPD']
    assert meta.sheets[0][1] == ({'metric': 'Waiting', 'value': 3}, {'metric': 'Done', 'value': 1})
