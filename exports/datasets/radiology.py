from clinic.models import RadiologyTest
from exports.datasets.base import KeysetDataset, full_name
from exports.filters import OrderFilterSerializer


class RadiologyDataset(KeysetDataset):
    name = 'radiology'
    model = RadiologyTest
    sort_field = 'ordered_at'
    filter_serializer = OrderFilterSerializer
    default_columns = ('study_id', 'ordered_at', 'status', 'patient_name', 'test_name', 'radiologist')
    projection = {
        'study_id': 'id',
        'ordered_at': 'ordered_at',
        'status': 'status',
        'patient_name': full_name('patient__'),
        'test_name': 'test_name',
        'radiologist': 'radiologist__name',
    }

    def narrow(self, queryset, filters):
        status = filters.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset
