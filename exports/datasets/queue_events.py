from clinic.models import QueueEvent
from exports.datasets.base import KeysetDataset
from exports.filters import QueueEventFilterSerializer


class QueueEventsDataset(KeysetDataset):
    """Queue status transitions.  ``status`` narrows on the transition target."""
    name = 'queue_events'
    model = QueueEvent
    sort_field = 'created_at'
    filter_serializer = QueueEventFilterSerializer
    group_by = 'department'
    default_columns = (
        'event_time', 'from_status', 'to_status', 'department', 'queue_status',
        'patient_number', 'first_name', 'last_name',
    )
    projection = {
        'event_time': 'created_at',
        'from_status': 'from_status',
        'to_status': 'to_status',
        'department': 'queue__department',
        'queue_status': 'queue__status',
        'patient_number': 'queue__checkin__patient__patient_number',
        'first_name': 'queue__checkin__patient__first_name',
        'last_name': 'queue__checkin__patient__last_name',
    }

    def narrow(self, queryset, filters):
        department = filters.get('department')
        if department:
            queryset = queryset.filter(queue__department=department)
        status = filters.get('status')
        if status:
            queryset = queryset.filter(to_status=status)
        return queryset
