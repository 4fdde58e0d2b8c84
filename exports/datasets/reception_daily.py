from clinic.models import QueueEntry
from exports.datasets import reception
from exports.datasets.base import AggregateDataset
from exports.filters import ReceptionFilterSerializer


class ReceptionDailyDataset(AggregateDataset):
    """End-of-day report: register totals, dashboard KPIs and a block per department."""
    name = 'reception_daily'
    filter_serializer = ReceptionFilterSerializer
    group_by = 'section'
    default_columns = ('section', 'metric', 'value')

    def build_rows(self, context, filters):
        department = filters.get('department')
        rows = []

        def add(section, metric, value):
            rows.append({'section': section, 'metric': metric, 'value': value})

        checkins = reception.checkin_counts(filters)
        for metric, key, _ in reception.CHECKIN_METRICS:
            add('Register - Check-ins', metric, checkins[key])

        queue = reception.queue_counts(department)
        for metric, status in reception.QUEUE_METRICS:
            add('Register - Queue', metric, queue[status])

        count, total = reception.payment_totals(filters)
        add('Register - Payments', 'Count', count)
        add('Register - Payments', 'Total Amount', total)
        for method, _, method_total in reception.payments_by_method(filters):
            add('Payments by Method', method, method_total)

        for hour, arrivals in reception.arrivals_per_hour(filters):
            add('Arrivals Per Hour', hour, arrivals)

        add('Dashboard - KPIs', 'Avg Wait (min)', reception.average_wait(filters, department))
        add('Dashboard - KPIs', 'Avg In Service (min)', reception.average_service(filters, department))
        add('Dashboard - KPIs', 'Arrivals', checkins['total'])
        add('Dashboard - KPIs', 'Serviced', reception.transition_count(filters, 'in_service', department))
        add('Dashboard - KPIs', 'Completed', reception.transition_count(filters, 'done', department))

        departments = QueueEntry.objects.exclude(department__isnull=True).exclude(department='')
        if department:
            departments = departments.filter(department=department)
        names = departments.order_by('department').values_list('department', flat=True).distinct()
        for name in names:
            section = f'Department - {name}'
            counts = reception.queue_counts(name)
            for metric, status in reception.QUEUE_METRICS:
                add(section, metric, counts[status])
            add(section, 'Avg Wait (min)', reception.average_wait(filters, name))
            add(section, 'Avg In Service (min)', reception.average_service(filters, name))
        return rows
