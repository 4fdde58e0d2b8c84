"""
Django admin registrations for the clinical record store.

Superusers use ``/admin/`` to inspect seeded data and to check the rows
an export is expected to contain.  Configuration is kept minimal.
"""

from django.contrib import admin

from .models import (
    User,
    Patient,
    Appointment,
    Bill,
    LabTest,
    RadiologyTest,
    Prescription,
    Payment,
    Bed,
    BedAssignment,
    CheckIn,
    QueueEntry,
    QueueEvent,
    DentalRecord,
    ObstetricAssessment,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'name', 'role', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'name', 'first_name', 'last_name')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('patient_number', 'first_name', 'last_name', 'gender', 'phone', 'district', 'created_at')
    list_filter = ('gender', 'district')
    search_fields = ('patient_number', 'first_name', 'last_name', 'phone', 'nin')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'department', 'scheduled_at', 'status')
    list_filter = ('status', 'department')
    search_fields = ('patient__first_name', 'patient__last_name', 'department')


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('bill_number', 'patient', 'final_amount', 'status', 'created_at', 'paid_at')
    list_filter = ('status',)
    search_fields = ('bill_number', 'patient__patient_number')


@admin.register(LabTest)
class LabTestAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'test_name', 'status', 'ordered_at')
    list_filter = ('status',)
    search_fields = ('test_name', 'patient__last_name')


@admin.register(RadiologyTest)
class RadiologyTestAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'test_name', 'status', 'ordered_at')
    list_filter = ('status',)
    search_fields = ('test_name', 'patient__last_name')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'medication_name', 'status', 'created_at', 'dispensed_at')
    list_filter = ('status',)
    search_fields = ('medication_name', 'patient__last_name')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('receipt_no', 'patient', 'amount', 'method', 'created_at')
    list_filter = ('method',)
    search_fields = ('receipt_no', 'reference', 'patient__patient_number')


@admin.register(Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ('ward', 'bed_number', 'bed_type')
    list_filter = ('ward',)


@admin.register(BedAssignment)
class BedAssignmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'bed', 'patient', 'status', 'assigned_at', 'discharge_date')
    list_filter = ('status', 'bed__ward')


@admin.register(CheckIn)
class CheckInAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'status', 'created_at')
    list_filter = ('status',)


@admin.register(QueueEntry)
class QueueEntryAdmin(admin.ModelAdmin):
    list_display = ('id', 'checkin', 'department', 'status', 'created_at')
    list_filter = ('status', 'department')


@admin.register(QueueEvent)
class QueueEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'queue', 'from_status', 'to_status', 'created_at')
    list_filter = ('to_status',)


@admin.register(DentalRecord)
class DentalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'dentist', 'visit_date')
    search_fields = ('patient__patient_number', 'diagnosis')


@admin.register(ObstetricAssessment)
class ObstetricAssessmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'visit_date', 'gestational_age_weeks', 'edd')
    search_fields = ('patient__patient_number',)
