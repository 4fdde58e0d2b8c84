from django.db.models.functions import TruncDate, TruncTime

from clinic.models import Appointment
from exports.datasets.base import KeysetDataset, full_name
from exports.filters import AppointmentFilterSerializer


class AppointmentsDataset(KeysetDataset):
    name = 'appointments'
    model = Appointment
    sort_field = 'scheduled_at'
    filter_serializer = AppointmentFilterSerializer
    default_columns = (
        'appointment_id',
        'scheduled_date',
        'scheduled_time',
        'status',
        'patient_name',
        'patient_phone',
        'department',
        'doctor_name',
    )
    projection = {
        'appointment_id': 'id',
        'scheduled_date': TruncDate('scheduled_at'),
        'scheduled_time': TruncTime('scheduled_at'),
        'status': 'status',
        'patient_name': full_name('patient__'),
        'patient_phone': 'patient__phone',
        'department': 'department',
        'doctor_name': 'doctor__name',
    }

    def narrow(self, queryset, filters):
        status = filters.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset
