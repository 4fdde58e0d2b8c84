from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from clinic.models import (
    Appointment, Bed, BedAssignment, Bill, CheckIn, DentalRecord, LabTest, ObstetricAssessment,
    Patient, Payment, Prescription, QueueEntry, QueueEvent, RadiologyTest, User,
)


def at(day, hour=9, minute=0, second=0, microsecond=0, month=1, year=2024):
    """A UTC timestamp in January 2024 unless told otherwise."""
    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=dt_timezone.utc)


JANUARY = {'from': '2024-01-01T00:00:00Z', 'to': '2024-01-31T23:59:59Z'}


def make_user(username='reception1', role='receptionist', **extra):
    extra.setdefault('name', username.title())
    extra.setdefault('email', f'{username}@example.com')
    return User.objects.create_user(username=username, password='P@ssw0rd1', role=role, **extra)


def make_patient(number=1, **extra):
    defaults = {
        'patient_number': f'DMC{number:06d}',
        'first_name': 'Sarah',
        'last_name': 'Nansubuga',
        'phone': f'+2567000000{number:02d}',
        'address': 'Plot 4, Kira Road',
        'created_at': at(2),
    }
    defaults.update(extra)
    return Patient.objects.create(**defaults)


def make_payment(patient, when, method='cash', amount='10000.00', number=None, **extra):
    number = number or Payment.objects.count() + 1
    return Payment.objects.create(
        receipt_no=f'R{number:05d}', patient=patient, amount=Decimal(amount),
        method=method, created_at=when, **extra,
    )


def seed_clinic_fixture():
    """A small, fully deterministic clinic used by the dataset tests."""
    doctor = make_user('doctor1', 'doctor', name='Dr. Samuel Okello')
    nurse = make_user('nurse1', 'nurse', name='Agnes Namutebi')
    radiologist = make_user('radiology1', 'radiologist', name='Dr. Paul Mugisha')
    dentist = make_user('dentist1', 'dentist', name='Dr. Esther Kyomuhendo')

    sarah = make_patient(1, first_name='Sarah', last_name='Nansubuga', gender='Female', created_at=at(2))
    joseph = make_patient(2, first_name='Joseph', last_name='Mukasa', gender='Male', created_at=at(3))
    old = make_patient(3, first_name='Peter', last_name='Okot', created_at=at(20, month=12, year=2023))

    Appointment.objects.create(patient=sarah, doctor=doctor, department='OPD', scheduled_at=at(10, 6, 30), status='Scheduled')
    Appointment.objects.create(patient=joseph, doctor=None, department='Dental', scheduled_at=at(11, 7), status='Completed')
    Appointment.objects.create(patient=joseph, doctor=doctor, department='OPD', scheduled_at=at(5, month=2), status='Scheduled')

    Bill.objects.create(bill_number='B0001', patient=sarah, final_amount=Decimal('25000.00'), status='Paid',
                        created_at=at(10), paid_at=at(3, month=2))
    Bill.objects.create(bill_number='B0002', patient=joseph, final_amount=Decimal('5000.00'), status='Pending',
                        created_at=at(12))
    Bill.objects.create(bill_number='B0003', patient=old, final_amount=Decimal('1000.00'), status='Paid',
                        created_at=at(28, month=12, year=2023), paid_at=at(10))

    LabTest.objects.create(patient=sarah, doctor=doctor, test_name='Malaria RDT', status='Completed', ordered_at=at(10, 10))
    LabTest.objects.create(patient=joseph, doctor=None, test_name='Urinalysis', status='Pending', ordered_at=at(11, 10))
    RadiologyTest.objects.create(patient=sarah, radiologist=radiologist, test_name='Chest X-ray', status='Completed', ordered_at=at(10, 11))
    Prescription.objects.create(patient=sarah, medication_name='Coartem', status='Dispensed',
                                created_at=at(10, 12), dispensed_at=at(10, 13))
    Prescription.objects.create(patient=joseph, medication_name='Paracetamol 1g', status='Pending', created_at=at(11, 12))

    make_payment(sarah, at(10, 14), method='cash', amount='25000.00', reference=None)
    make_payment(joseph, at(11, 14), method='mobile_money', amount='5000.50', reference='TX123456')

    general = Bed.objects.create(ward='General', bed_number='G01', bed_type='Standard')
    maternity = Bed.objects.create(ward='Maternity', bed_number='M01', bed_type='Standard')
    BedAssignment.objects.create(bed=general, patient=joseph, assigned_by=nurse, status='Discharged',
                                 assigned_at=at(11, 15), discharge_date=at(13, 10))
    BedAssignment.objects.create(bed=maternity, patient=sarah, assigned_by=nurse, status='Active', assigned_at=at(12, 8))

    # Sarah waits 10 minutes in OPD and is served for 15; Joseph waits 20 in Dental and is still in service
    sarah_in = CheckIn.objects.create(patient=sarah, status='Complete', created_at=at(10, 8))
    opd = QueueEntry.objects.create(checkin=sarah_in, department='OPD', status='done', created_at=at(10, 8))
    QueueEvent.objects.create(queue=opd, from_status=None, to_status='waiting', created_at=at(10, 8))
    QueueEvent.objects.create(queue=opd, from_status='waiting', to_status='in_service', created_at=at(10, 8, 10))
    QueueEvent.objects.create(queue=opd, from_status='in_service', to_status='done', created_at=at(10, 8, 25))

    joseph_in = CheckIn.objects.create(patient=joseph, status='In Room', created_at=at(10, 9))
    dental = QueueEntry.objects.create(checkin=joseph_in, department='Dental', status='in_service', created_at=at(10, 9))
    QueueEvent.objects.create(queue=dental, from_status=None, to_status='waiting', created_at=at(10, 9))
    QueueEvent.objects.create(queue=dental, from_status='waiting', to_status='in_service', created_at=at(10, 9, 20))

    DentalRecord.objects.create(patient=joseph, dentist=dentist, visit_date=at(11, 7, 30), diagnosis='Caries',
                                procedure_performed='Filling', tooth_chart={'notes': 'Lower left molar'}, notes='Review in 6 months')
    DentalRecord.objects.create(patient=sarah, dentist=None, visit_date=at(15), diagnosis='Gingivitis',
                                procedure_performed='Scaling', tooth_chart={})
    ObstetricAssessment.objects.create(patient=sarah, recorded_by=nurse, visit_date=at(12, 10), gravida=2, parity=1,
                                       gestational_age_weeks=28, fundal_height_cm=Decimal('28.0'),
                                       fetal_heart_rate=142, presentation='Cephalic', notes='Normal')
    return {'doctor': doctor, 'nurse': nurse, 'sarah': sarah, 'joseph': joseph, 'old': old}
