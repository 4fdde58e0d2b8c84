from datetime import date, time
from decimal import Decimal

import pytest

from clinic.models import Bed, BedAssignment, CheckIn, QueueEntry, QueueEvent
from exports.cursor import encode_cursor
from exports.datasets.base import ExportContext
from exports.driver import run_export
from exports.registry import registry
from exports.tests.utils import JANUARY, at

pytestmark = pytest.mark.django_db


def export(name, filters=None, page_size=None):
    return list(run_export(name, JANUARY if filters is None else filters, page_size))


def by_section(rows):
    return {(r['section'], r['metric']): r['value'] for r in rows}


@pytest.mark.parametrize('name', [d.name for d in registry])
def test_rows_carry_exactly_the_declared_columns(clinic, name):
    rows = export(name)
    assert rows, name
    columns = registry.get(name).default_columns
    assert all(tuple(r) == columns for r in rows)


def test_appointments(clinic):
    rows = export('appointments')
    assert [r['patient_name'] for r in rows] == ['Sarah Nansubuga', 'Joseph Mukasa']
    first = rows[0]
    # 06:30 UTC is 09:30 in Kampala
    assert first['scheduled_date'] == date(2024, 1, 10)
    assert first['scheduled_time'] == time(9, 30)
    assert first['doctor_name'] == 'Dr. Samuel Okello'
    assert rows[1]['doctor_name'] is None


def test_appointments_by_status(clinic):
    rows = export('appointments', {**JANUARY, 'status': 'Completed'})
    assert [r['department'] for r in rows] == ['Dental']


def test_billing_ranges_on_creation_time(clinic):
    rows = export('billing')
    # B0001 was paid in February and B0003 created in December
    assert [r['bill_number'] for r in rows] == ['B0001', 'B0002']
    assert rows[0]['final_amount'] == Decimal('25000.00')
    assert rows[0]['paid_at'] == at(3, month=2)
    assert rows[1]['paid_at'] is None


def test_labs_and_radiology(clinic):
    labs = export('labs', {**JANUARY, 'status': 'Pending'})
    assert [(r['test_name'], r['doctor_name']) for r in labs] == [('Urinalysis', None)]
    radiology = export('radiology')
    assert radiology[0]['radiologist'] == 'Dr. Paul Mugisha'


def test_pharmacy(clinic):
    rows = export('pharmacy', {**JANUARY, 'status': 'Dispensed'})
    assert len(rows) == 1
    assert rows[0]['medication_name'] == 'Coartem'
    assert rows[0]['dispensed_at'] == at(10, 13)


def test_patients_without_a_range(clinic):
    rows = export('patients', {})
    assert [r['patient_number'] for r in rows] == ['DMC000003', 'DMC000001', 'DMC000002']
    assert 'created_at' not in rows[0]


def test_patients_within_a_range(clinic):
    rows = export('patients', JANUARY)
    assert [r['first_name'] for r in rows] == ['Sarah', 'Joseph']


def test_payments_blank_reference(clinic):
    rows = export('payments')
    assert [r['reference'] for r in rows] == ['', 'TX123456']
    assert rows[1]['amount'] == Decimal('5000.50')


def test_payments_by_method_and_patient(clinic):
    assert [r['method'] for r in export('payments', {**JANUARY, 'method': 'mobile_money'})] == ['mobile_money']
    rows = export('payments', {**JANUARY, 'patientId': clinic['sarah'].pk})
    assert [r['first_name'] for r in rows] == ['Sarah']


def test_bed_assignments(clinic):
    rows = export('bed_assignments')
    assert [r['ward'] for r in rows] == ['General', 'Maternity']
    assert rows[0]['assigned_by'] == 'Agnes Namutebi'
    assert rows[0]['patient_name'] == 'Joseph Mukasa'
    assert [r['status'] for r in export('bed_assignments', {**JANUARY, 'status': 'Active'})] == ['Active']
    assert [r['ward'] for r in export('bed_assignments', {**JANUARY, 'ward': 'Maternity'})] == ['Maternity']


def test_queue_events(clinic):
    rows = export('queue_events')
    assert len(rows) == 5
    assert rows[0]['from_status'] is None
    assert rows[0]['event_time'] == at(10, 8)
    dental = export('queue_events', {**JANUARY, 'department': 'Dental'})
    assert {r['department'] for r in dental} == {'Dental'}
    served = export('queue_events', {**JANUARY, 'status': 'in_service'})
    assert [r['first_name'] for r in served] == ['Sarah', 'Joseph']


def test_dental_tooth_notes(clinic):
    rows = export('dental', {})
    assert [r['tooth_notes'] for r in rows] == ['Lower left molar', '']
    assert rows[1]['dentist_name'] is None


def test_obstetrics(clinic):
    rows = export('obstetrics', {})
    assert rows[0]['fetal_heart_rate'] == 142
    assert rows[0]['recorded_by'] == 'Agnes Namutebi'


def test_reception_register(clinic):
    values = by_section(export('reception_register'))
    assert values[('Check-ins', 'Total')] == 2
    assert values[('Check-ins', 'Complete')] == 1
    assert values[('Check-ins', 'In Room')] == 1
    assert values[('Check-ins', 'Arrived')] == 0
    assert values[('Queue', 'In Service')] == 1
    assert values[('Queue', 'Done')] == 1
    assert values[('Payments', 'Count')] == 2
    assert values[('Payments', 'Total Amount')] == Decimal('30000.50')
    assert values[('KPIs', 'Avg Wait (min)')] == Decimal('15.00')
    assert values[('KPIs', 'Avg In Service (min)')] == Decimal('15.00')


def test_reception_register_for_one_department(clinic):
    values = by_section(export('reception_register', {**JANUARY, 'department': 'OPD'}))
    assert values[('Queue', 'In Service')] == 0
    assert values[('KPIs', 'Avg Wait (min)')] == Decimal('10.00')


def test_reception_register_empty_period(clinic):
    values = by_section(export('reception_register', {'from': '2023-06-01', 'to': '2023-06-30'}))
    assert values[('Check-ins', 'Total')] == 0
    assert values[('Payments', 'Total Amount')] == Decimal('0.00')
    assert values[('KPIs', 'Avg Wait (min)')] == Decimal('0.00')


def test_reception_register_detailed(clinic):
    rows = export('reception_register_detailed')
    hours = [(r['metric'], r['value']) for r in rows if r['subsection'] == 'Per Hour']
    assert hours == [('2024-01-10 11:00', 1), ('2024-01-10 12:00', 1)]
    queue = [r['subsection'] for r in rows if r['section'] == 'Queue']
    assert queue[0] == 'Dental' and queue[-1] == 'OPD'
    methods = {(r['subsection'], r['metric']): r['value'] for r in rows if r['section'] == 'Payments'}
    assert methods[('mobile_money', 'Total Amount')] == Decimal('5000.50')


def test_reception_daily(clinic):
    rows = export('reception_daily')
    values = by_section(rows)
    assert values[('Dashboard - KPIs', 'Serviced')] == 2
    assert values[('Dashboard - KPIs', 'Completed')] == 1
    assert values[('Payments by Method', 'cash')] == Decimal('25000.00')
    assert values[('Department - Dental', 'Avg Wait (min)')] == Decimal('20.00')
    assert values[('Department - OPD', 'Avg In Service (min)')] == Decimal('15.00')


def test_reception_daily_restricted_to_department(clinic):
    rows = export('reception_daily', {**JANUARY, 'department': 'OPD'})
    departments = {r['section'] for r in rows if r['section'].startswith('Department - ')}
    assert departments == {'Department - OPD'}


def test_report_pages_honour_the_page_size(clinic):
    dataset = registry.get('reception_register')
    filters = dataset.validate_filters(JANUARY)
    whole = dataset.query_page(ExportContext(), filters, None, 500)
    assert len(whole.rows) == 13
    assert whole.next_cursor is None

    first = dataset.query_page(ExportContext(), filters, None, 2)
    assert first.rows == whole.rows[:2]
    assert first.next_cursor is not None
    second = dataset.query_page(ExportContext(), filters, first.next_cursor, 2)
    assert second.rows == whole.rows[2:4]


def test_report_page_exactly_as_long_as_the_report(clinic):
    dataset = registry.get('reception_register')
    filters = dataset.validate_filters(JANUARY)
    full = dataset.query_page(ExportContext(), filters, None, 13)
    assert len(full.rows) == 13
    assert full.next_cursor is not None
    rest = dataset.query_page(ExportContext(), filters, full.next_cursor, 13)
    assert rest.rows == ()
    assert rest.next_cursor is None


@pytest.mark.parametrize('page_size', [1, 5, 13, 14, 5000])
def test_paged_report_matches_the_whole_report(clinic, page_size):
    assert export('reception_daily', page_size=page_size) == export('reception_daily')


def test_report_cursor_round_trips(clinic):
    dataset = registry.get('reception_register_detailed')
    filters = dataset.validate_filters(JANUARY)
    page = dataset.query_page(ExportContext(), filters, None, 3)
    cursor = dataset.decode_cursor(encode_cursor(page.next_cursor), filters)
    assert cursor.pk == 3


def test_ward_and_department_with_ampersands(clinic):
    nurse = clinic['nurse']
    casualty = Bed.objects.create(ward='A&E', bed_number='A01', bed_type='Trolley')
    BedAssignment.objects.create(bed=casualty, patient=clinic['joseph'], assigned_by=nurse, assigned_at=at(14, 22))
    rows = export('bed_assignments', {**JANUARY, 'ward': 'A&E'})
    assert [(r['ward'], r['bed_number']) for r in rows] == [('A&E', 'A01')]

    checkin = CheckIn.objects.create(patient=clinic['sarah'], created_at=at(16, 8))
    entry = QueueEntry.objects.create(checkin=checkin, department='Ear, Nose & Throat', created_at=at(16, 8))
    QueueEvent.objects.create(queue=entry, to_status='waiting', created_at=at(16, 8))
    rows = export('queue_events', {**JANUARY, 'department': 'Ear, Nose & Throat'})
    assert [r['department'] for r in rows] == ['Ear, Nose & Throat']
    values = by_section(export('reception_register', {**JANUARY, 'department': 'Ear, Nose & Throat'}))
    assert values[('Queue', 'Waiting')] == 1
