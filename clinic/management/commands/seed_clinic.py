"""
Management command to populate the clinical store with development data.
"""
from datetime import timedelta
from decimal import Decimal
import random

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from clinic.models import (
    User, Patient, Appointment, Bill, LabTest, RadiologyTest, Prescription,
    Payment, Bed, BedAssignment, CheckIn, QueueEntry, QueueEvent,
    DentalRecord, ObstetricAssessment,
)

STAFF = [
    ("admin1", "admin", "Grace Nakato"),
    ("doctor1", "doctor", "Dr. Samuel Okello"),
    ("doctor2", "doctor", "Dr. Ruth Achieng"),
    ("nurse1", "nurse", "Agnes Namutebi"),
    ("reception1", "receptionist", "Brian Ssemanda"),
    ("cashier1", "cashier", "Irene Auma"),
    ("radiology1", "radiologist", "Dr. Paul Mugisha"),
    ("dentist1", "dentist", "Dr. Esther Kyomuhendo"),
]

FIRST_NAMES = ["Joseph", "Sarah", "Peter", "Mary", "David", "Florence", "John", "Harriet", "Moses", "Ritah"]
LAST_NAMES = ["Mukasa", "Nansubuga", "Okot", "Atim", "Byaruhanga", "Nabirye", "Tumusiime", "Akello"]
DISTRICTS = ["Kampala", "Wakiso", "Mukono", "Gulu", "Mbarara"]
DEPARTMENTS = ["OPD", "Maternity", "Paediatrics", "Dental", "Surgery"]
WARDS = ["General", "Maternity", "Paediatric"]
LAB_TESTS = ["Full blood count", "Malaria RDT", "Urinalysis", "HIV rapid test", "Blood sugar"]
SCANS = ["Chest X-ray", "Abdominal ultrasound", "Obstetric ultrasound", "CT head"]
MEDICATIONS = ["Amoxicillin 500mg", "Paracetamol 1g", "Coartem", "Metformin 500mg", "Ferrous sulphate"]


class Command(BaseCommand):
    help = 'Populate the clinic tables with realistic development data'

    def add_arguments(self, parser):
        parser.add_argument('--patients', type=int, default=40, help='Number of patients to create')
        parser.add_argument('--days', type=int, default=30, help='Spread activity over this many past days')
        parser.add_argument('--seed', type=int, default=1, help='Random seed for repeatable data')

    @transaction.atomic
    def handle(self, *args, **options):
        self.rng = random.Random(options['seed'])
        self.now = timezone.now().replace(microsecond=0)
        self.days = max(1, options['days'])

        staff = self.create_staff()
        patients = self.create_patients(options['patients'])
        beds = self.create_beds()

        for patient in patients:
            self.create_visit(patient, staff, beds)

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {len(staff)} staff, {len(patients)} patients, {len(beds)} beds.'
        ))

    def moment(self):
        """A random timestamp within the seeding window."""
        offset = self.rng.randint(0, self.days * 24 * 60 - 1)
        return self.now - timedelta(minutes=offset)

    def create_staff(self):
        staff = {}
        for username, role, name in STAFF:
            user, created = User.objects.get_or_create(
                username=username,
                defaults={'role': role, 'name': name, 'password': make_password('123456')},
            )
            staff.setdefault(role, []).append(user)
            if created:
                self.stdout.write(f'Created staff: {username} ({role})')
        return staff

    def create_patients(self, count):
        patients = []
        start = Patient.objects.count()
        for i in range(count):
            number = f'DMC{start + i + 1:06d}'
            dob = (self.now - timedelta(days=self.rng.randint(365, 365 * 80))).date()
            patient, _ = Patient.objects.get_or_create(
                patient_number=number,
                defaults={
                    'first_name': self.rng.choice(FIRST_NAMES),
                    'last_name': self.rng.choice(LAST_NAMES),
                    'date_of_birth': dob,
                    'age_years': (self.now.date() - dob).days // 365,
                    'gender': self.rng.choice(['Male', 'Female']),
                    'phone': f'+2567{self.rng.randint(10000000, 99999999)}',
                    'address': f'Plot {self.rng.randint(1, 300)}',
                    'district': self.rng.choice(DISTRICTS),
                    'occupation': self.rng.choice(['Teacher', 'Farmer', 'Trader', 'Student']),
                    'blood_group': self.rng.choice(['A+', 'B+', 'O+', 'AB-']),
                    'next_of_kin_first_name': self.rng.choice(FIRST_NAMES),
                    'next_of_kin_last_name': self.rng.choice(LAST_NAMES),
                    'next_of_kin_country': 'Uganda',
                    'next_of_kin_relation': self.rng.choice(['Spouse', 'Parent', 'Sibling']),
                    'created_at': self.moment(),
                },
            )
            patients.append(patient)
        return patients

    def create_beds(self):
        beds = []
        for ward in WARDS:
            for n in range(1, 6):
                bed, _ = Bed.objects.get_or_create(
                    ward=ward, bed_number=f'{ward[:1]}{n:02d}',
                    defaults={'bed_type': 'Standard' if n < 5 else 'ICU'},
                )
                beds.append(bed)
        return beds

    def create_visit(self, patient, staff, beds):
        rng = self.rng
        at = self.moment()
        department = rng.choice(DEPARTMENTS)
        doctor = rng.choice(staff['doctor'])

        Appointment.objects.create(
            patient=patient, doctor=doctor, department=department, scheduled_at=at,
            status=rng.choice(['Scheduled', 'Completed', 'Cancelled']),
        )

        checkin = CheckIn.objects.create(patient=patient, status='Complete', created_at=at)
        entry = QueueEntry.objects.create(checkin=checkin, department=department, status='done', created_at=at)
        t = at
        for from_status, to_status in [(None, 'waiting'), ('waiting', 'in_service'), ('in_service', 'done')]:
            QueueEvent.objects.create(queue=entry, from_status=from_status, to_status=to_status, created_at=t)
            t += timedelta(minutes=rng.randint(5, 40))

        amount = Decimal(rng.randint(5, 200) * 1000)
        paid = rng.random() < 0.7
        Bill.objects.create(
            bill_number=f'B{patient.patient_number}-{rng.randint(1000, 9999)}',
            patient=patient, final_amount=amount,
            status='Paid' if paid else 'Pending',
            paid_at=at + timedelta(hours=1) if paid else None,
            created_at=at,
        )
        if paid:
            method = rng.choice(['cash', 'card', 'mobile_money', 'bank'])
            Payment.objects.create(
                receipt_no=f'R{patient.patient_number}-{rng.randint(1000, 9999)}',
                patient=patient, amount=amount, method=method,
                reference=None if method == 'cash' else f'TX{rng.randint(100000, 999999)}',
                created_at=at + timedelta(hours=1),
            )

        LabTest.objects.create(
            patient=patient, doctor=doctor, test_name=rng.choice(LAB_TESTS),
            status=rng.choice(['Pending', 'In Progress', 'Completed']), ordered_at=at,
        )
        if rng.random() < 0.3:
            RadiologyTest.objects.create(
                patient=patient, radiologist=staff['radiologist'][0], test_name=rng.choice(SCANS),
                status=rng.choice(['Pending', 'Completed']), ordered_at=at,
            )
        dispensed = rng.random() < 0.6
        Prescription.objects.create(
            patient=patient, medication_name=rng.choice(MEDICATIONS),
            status='Dispensed' if dispensed else 'Pending',
            dispensed_at=at + timedelta(minutes=30) if dispensed else None,
            created_at=at,
        )

        if rng.random() < 0.2:
            discharged = rng.random() < 0.5
            BedAssignment.objects.create(
                bed=rng.choice(beds), patient=patient, assigned_by=staff['nurse'][0],
                status='Discharged' if discharged else 'Active', assigned_at=at,
                discharge_date=at + timedelta(days=2) if discharged else None,
            )
        if department == 'Dental':
            DentalRecord.objects.create(
                patient=patient, dentist=staff['dentist'][0], visit_date=at,
                diagnosis='Dental caries', procedure_performed='Filling',
                tooth_chart={'notes': 'Lower left molar'},
            )
        if department == 'Maternity' and patient.gender == 'Female':
            weeks = rng.randint(8, 38)
            ObstetricAssessment.objects.create(
                patient=patient, recorded_by=staff['nurse'][0], visit_date=at,
                gravida=rng.randint(1, 5), parity=rng.randint(0, 4),
                gestational_age_weeks=weeks,
                edd=(at + timedelta(weeks=40 - weeks)).date(),
                fundal_height_cm=Decimal(weeks),
                fetal_heart_rate=rng.randint(120, 160),
                presentation='Cephalic',
            )
