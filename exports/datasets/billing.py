from clinic.models import Bill
from exports.datasets.base import KeysetDataset, full_name
from exports.filters import BillingFilterSerializer


class BillingDataset(KeysetDataset):
    """Bills in creation order.

    The range and the cursor both use ``created_at``; ``paid_at`` is
    only reported.
    """
    name = 'billing'
    model = Bill
    sort_field = 'created_at'
    filter_serializer = BillingFilterSerializer
    default_columns = ('bill_number', 'patient_name', 'final_amount', 'status', 'paid_at')
    projection = {
        'bill_number': 'bill_number',
        'patient_name': full_name('patient__'),
        'final_amount': 'final_amount',
        'status': 'status',
        'paid_at': 'paid_at',
    }

    def narrow(self, queryset, filters):
        status = filters.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset
