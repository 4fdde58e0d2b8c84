from exports.datasets import reception
from exports.datasets.base import AggregateDataset
from exports.filters import ReceptionFilterSerializer


class ReceptionRegisterDetailedDataset(AggregateDataset):
    """Hourly arrivals, per-department queue state and payments by method."""
    name = 'reception_register_detailed'
    filter_serializer = ReceptionFilterSerializer
    group_by = 'section'
    default_columns = ('section', 'subsection', 'metric', 'value')

    def build_rows(self, context, filters):
        rows = []
        for hour, arrivals in reception.arrivals_per_hour(filters):
            rows.append({'section': 'Check-ins', 'subsection': 'Per Hour', 'metric': hour, 'value': arrivals})

        for entry in reception.queue_counts_by_department(filters.get('department')):
            subsection = entry['department'] or 'N/A'
            for metric, status in reception.QUEUE_METRICS:
                rows.append({'section': 'Queue', 'subsection': subsection, 'metric': metric, 'value': entry[status]})

        for method, count, total in reception.payments_by_method(filters):
            rows.append({'section': 'Payments', 'subsection': method, 'metric': 'Count', 'value': count})
            rows.append({'section': 'Payments', 'subsection': method, 'metric': 'Total Amount', 'value': total})
        return rows
