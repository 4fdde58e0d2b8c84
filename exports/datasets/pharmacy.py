from clinic.models import Prescription
from exports.datasets.base import KeysetDataset, full_name
from exports.filters import PharmacyFilterSerializer


class PharmacyDataset(KeysetDataset):
    name = 'pharmacy'
    model = Prescription
    sort_field = 'created_at'
    filter_serializer = PharmacyFilterSerializer
    default_columns = ('prescription_id', 'patient_name', 'medication_name', 'status', 'dispensed_at')
    projection = {
        'prescription_id': 'id',
        'patient_name': full_name('patient__'),
        'medication_name': 'medication_name',
        'status': 'status',
        'dispensed_at': 'dispensed_at',
    }

    def narrow(self, queryset, filters):
        status = filters.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset
