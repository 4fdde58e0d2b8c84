"""
Database models for the clinical record store.

These tables are written by the day-to-day CRUD screens (reception,
billing, laboratory, pharmacy, wards) and are read, never written, by
the bulk export datasets in :mod:`exports`.  Every table that exports
page through carries an indexed timestamp used as its sort key.  The
timestamps default to ``timezone.now`` rather than ``auto_now_add`` so
imports and fixtures can carry historical values.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Staff account with a single role.

    Roles mirror the capability table in :mod:`exports.permissions`.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('doctor', 'Doctor'),
        ('nurse', 'Nurse'),
        ('receptionist', 'Receptionist'),
        ('cashier', 'Cashier'),
        ('lab_tech', 'Lab Technician'),
        ('radiologist', 'Radiologist'),
        ('pharmacist', 'Pharmacist'),
        ('dentist', 'Dentist'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='receptionist')
    name = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Patient(models.Model):
    """Demographic record for a registered patient."""
    patient_number = models.CharField(max_length=32, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField(null=True, blank=True)
    age_years = models.PositiveIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=16, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    nin = models.CharField(max_length=32, blank=True)
    district = models.CharField(max_length=100, blank=True)
    subcounty = models.CharField(max_length=100, blank=True)
    parish = models.CharField(max_length=100, blank=True)
    village = models.CharField(max_length=100, blank=True)
    occupation = models.CharField(max_length=100, blank=True)
    blood_group = models.CharField(max_length=8, blank=True)
    next_of_kin_first_name = models.CharField(max_length=100, blank=True)
    next_of_kin_last_name = models.CharField(max_length=100, blank=True)
    next_of_kin_country = models.CharField(max_length=100, blank=True)
    next_of_kin_phone = models.CharField(max_length=32, blank=True)
    next_of_kin_relation = models.CharField(max_length=64, blank=True)
    next_of_kin_residence = models.CharField(max_length=255, blank=True)
    insurance_provider = models.CharField(max_length=100, blank=True)
    insurance_member_no = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return f"{self.patient_number} {self.first_name} {self.last_name}"


class Appointment(models.Model):
    STATUS_CHOICES = [
        ('Scheduled', 'Scheduled'),
        ('Completed', 'Completed'),
        ('Cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='appointments')
    doctor = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    department = models.CharField(max_length=100, blank=True)
    # Date and time of the slot in one column so it can serve as the export sort key
    scheduled_at = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='Scheduled', db_index=True)

    def __str__(self) -> str:
        return f"Appointment {self.pk} @ {self.scheduled_at:%F %H:%M}"


class Bill(models.Model):
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Paid', 'Paid'),
        ('Partially Paid', 'Partially Paid'),
        ('Cancelled', 'Cancelled'),
    ]
    bill_number = models.CharField(max_length=32, unique=True)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='bills')
    final_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return self.bill_number


class LabTest(models.Model):
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('In Progress', 'In Progress'),
        ('Completed', 'Completed'),
        ('Cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='lab_tests')
    doctor = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='lab_orders')
    test_name = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    ordered_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return f"{self.test_name} ({self.status})"


class RadiologyTest(models.Model):
    STATUS_CHOICES = LabTest.STATUS_CHOICES
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='radiology_tests')
    radiologist = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='radiology_studies')
    test_name = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    ordered_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return f"{self.test_name} ({self.status})"


class Prescription(models.Model):
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Dispensed', 'Dispensed'),
        ('Cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='prescriptions')
    medication_name = models.CharField(max_length=255)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='Pending')
    dispensed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return f"{self.medication_name} for {self.patient_id}"


class Payment(models.Model):
    METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('mobile_money', 'Mobile money'),
        ('bank', 'Bank'),
    ]
    receipt_no = models.CharField(max_length=32, unique=True)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=16, choices=METHOD_CHOICES, db_index=True)
    reference = models.CharField(max_length=64, blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return f"{self.receipt_no} {self.amount} ({self.method})"


class Bed(models.Model):
    bed_number = models.CharField(max_length=16)
    ward = models.CharField(max_length=100, db_index=True)
    bed_type = models.CharField(max_length=32, blank=True)

    class Meta:
        unique_together = [('ward', 'bed_number')]

    def __str__(self) -> str:
        return f"{self.ward}/{self.bed_number}"


class BedAssignment(models.Model):
    STATUS_CHOICES = [
        ('Active', 'Active'),
        ('Discharged', 'Discharged'),
        ('Transfer', 'Transfer'),
    ]
    bed = models.ForeignKey(Bed, on_delete=models.CASCADE, related_name='assignments')
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='bed_assignments')
    assigned_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='bed_assignments')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='Active')
    assigned_at = models.DateTimeField(default=timezone.now, db_index=True)
    discharge_date = models.DateTimeField(null=True, blank=True)

    def __str__(self) -> str:
        return f"{self.patient_id} -> {self.bed} ({self.status})"


class CheckIn(models.Model):
    """A patient arriving at reception."""
    STATUS_CHOICES = [
        ('Arrived', 'Arrived'),
        ('With Nurse', 'With Nurse'),
        ('In Room', 'In Room'),
        ('Complete', 'Complete'),
        ('Cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='checkins')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='Arrived')
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return f"Check-in {self.pk} ({self.status})"


class QueueEntry(models.Model):
    """A check-in waiting for (or receiving) service in a department."""
    STATUS_CHOICES = [
        ('waiting', 'Waiting'),
        ('in_service', 'In service'),
        ('done', 'Done'),
        ('cancelled', 'Cancelled'),
    ]
    checkin = models.ForeignKey(CheckIn, on_delete=models.CASCADE, related_name='queue_entries')
    department = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='waiting', db_index=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name_plural = 'queue entries'

    def __str__(self) -> str:
        return f"{self.department or 'N/A'} #{self.pk} ({self.status})"


class QueueEvent(models.Model):
    """Records a status transition for a queue entry."""
    queue = models.ForeignKey(QueueEntry, on_delete=models.CASCADE, related_name='events')
    from_status = models.CharField(max_length=16, null=True, blank=True)
    to_status = models.CharField(max_length=16)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        indexes = [
            models.Index(fields=['to_status', 'created_at'], name='queue_event_status_time_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.queue_id}: {self.from_status} → {self.to_status}"


class DentalRecord(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='dental_records')
    dentist = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='dental_records')
    visit_date = models.DateTimeField(default=timezone.now, db_index=True)
    diagnosis = models.TextField(blank=True)
    procedure_performed = models.TextField(blank=True)
    tooth_chart = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"Dental visit {self.pk} ({self.patient_id})"


class ObstetricAssessment(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='obstetric_assessments')
    recorded_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='obstetric_assessments')
    visit_date = models.DateTimeField(default=timezone.now, db_index=True)
    gravida = models.PositiveSmallIntegerField(null=True, blank=True)
    parity = models.PositiveSmallIntegerField(null=True, blank=True)
    gestational_age_weeks = models.PositiveSmallIntegerField(null=True, blank=True)
    edd = models.DateField(null=True, blank=True)
    fundal_height_cm = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    fetal_heart_rate = models.PositiveSmallIntegerField(null=True, blank=True)
    presentation = models.CharField(max_length=32, blank=True)
    notes = models.TextField(blank=True)

    def __str__(self) -> str:
        return f"ANC visit {self.pk} ({self.patient_id})"
