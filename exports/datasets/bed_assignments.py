from clinic.models import BedAssignment
from exports.datasets.base import KeysetDataset, full_name
from exports.filters import BedAssignmentFilterSerializer


class BedAssignmentsDataset(KeysetDataset):
    name = 'bed_assignments'
    model = BedAssignment
    sort_field = 'assigned_at'
    filter_serializer = BedAssignmentFilterSerializer
    default_columns = (
        'assignment_id', 'bed_number', 'ward', 'bed_type', 'status', 'assigned_at', 'discharge_date',
        'patient_number', 'patient_first_name', 'patient_last_name', 'patient_name', 'assigned_by',
    )
    projection = {
        'assignment_id': 'id',
        'bed_number': 'bed__bed_number',
        'ward': 'bed__ward',
        'bed_type': 'bed__bed_type',
        'status': 'status',
        'assigned_at': 'assigned_at',
        'discharge_date': 'discharge_date',
        'patient_number': 'patient__patient_number',
        'patient_first_name': 'patient__first_name',
        'patient_last_name': 'patient__last_name',
        'patient_name': full_name('patient__'),
        'assigned_by': 'assigned_by__name',
    }

    def narrow(self, queryset, filters):
        status = filters.get('status', 'All')
        if status != 'All':
            queryset = queryset.filter(status=status)
        ward = filters.get('ward')
        if ward:
            queryset = queryset.filter(bed__ward=ward)
        bed_id = filters.get('bedId')
        if bed_id:
            queryset = queryset.filter(bed_id=bed_id)
        return queryset
