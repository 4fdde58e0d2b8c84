from exports.datasets import reception
from exports.datasets.base import AggregateDataset
from exports.filters import ReceptionFilterSerializer


class ReceptionRegisterDataset(AggregateDataset):
    """Check-in, queue and payment totals for a period, with wait-time KPIs."""
    name = 'reception_register'
    filter_serializer = ReceptionFilterSerializer
    group_by = 'section'
    default_columns = ('section', 'metric', 'value')

    def build_rows(self, context, filters):
        department = filters.get('department')
        rows = []

        checkins = reception.checkin_counts(filters)
        for metric, key, _ in reception.CHECKIN_METRICS:
            rows.append({'section': 'Check-ins', 'metric': metric, 'value': checkins[key]})

        queue = reception.queue_counts(department)
        for metric, status in reception.QUEUE_METRICS:
            rows.append({'section': 'Queue', 'metric': metric, 'value': queue[status]})

        count, total = reception.payment_totals(filters)
        rows.append({'section': 'Payments', 'metric': 'Count', 'value': count})
        rows.append({'section': 'Payments', 'metric': 'Total Amount', 'value': total})

        rows.append({'section': 'KPIs', 'metric': 'Avg Wait (min)',
                     'value': reception.average_wait(filters, department)})
        rows.append({'section': 'KPIs', 'metric': 'Avg In Service (min)',
                     'value': reception.average_service(filters, department)})
        return rows
