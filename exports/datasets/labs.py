from clinic.models import LabTest
from exports.datasets.base import KeysetDataset, full_name
from exports.filters import OrderFilterSerializer


class LabsDataset(KeysetDataset):
    name = 'labs'
    model = LabTest
    sort_field = 'ordered_at'
    filter_serializer = OrderFilterSerializer
    default_columns = ('test_id', 'ordered_at', 'status', 'patient_name', 'test_name', 'doctor_name')
    projection = {
        'test_id': 'id',
        'ordered_at': 'ordered_at',
        'status': 'status',
        'patient_name': full_name('patient__'),
        'test_name': 'test_name',
        'doctor_name': 'doctor__name',
    }

    def narrow(self, queryset, filters):
        status = filters.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset
