from django.db.models import CharField, Value
from django.db.models.functions import Coalesce

from clinic.models import Payment
from exports.datasets.base import KeysetDataset
from exports.filters import PaymentFilterSerializer


class PaymentsDataset(KeysetDataset):
    name = 'payments'
    model = Payment
    sort_field = 'created_at'
    filter_serializer = PaymentFilterSerializer
    default_columns = (
        'receipt_no', 'created_at', 'amount', 'method', 'reference',
        'patient_number', 'first_name', 'last_name', 'phone',
    )
    projection = {
        'receipt_no': 'receipt_no',
        'created_at': 'created_at',
        'amount': 'amount',
        'method': 'method',
        'reference': Coalesce('reference', Value(''), output_field=CharField()),
        'patient_number': 'patient__patient_number',
        'first_name': 'patient__first_name',
        'last_name': 'patient__last_name',
        'phone': 'patient__phone',
    }

    def narrow(self, queryset, filters):
        method = filters.get('method')
        if method:
            queryset = queryset.filter(method=method)
        patient_id = filters.get('patientId')
        if patient_id:
            queryset = queryset.filter(patient_id=patient_id)
        return queryset
