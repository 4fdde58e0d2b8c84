"""
Shared queries for the reception reports.

Each helper takes a validated filter and returns plain Python values;
the report datasets arrange them into section/metric/value rows.
"""
from __future__ import annotations

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncHour

from clinic.models import CheckIn, Payment, QueueEntry, QueueEvent

# (metric label, aggregate key, status)
CHECKIN_METRICS = (
    ('Total', 'total', None),
    ('Arrived', 'arrived', 'Arrived'),
    ('With Nurse', 'with_nurse', 'With Nurse'),
    ('In Room', 'in_room', 'In Room'),
    ('Complete', 'complete', 'Complete'),
    ('Cancelled', 'cancelled', 'Cancelled'),
)
QUEUE_METRICS = (
    ('Waiting', 'waiting'),
    ('In Service', 'in_service'),
    ('Done', 'done'),
)
ZERO = Decimal('0.00')
CENTS = Decimal('0.01')


def _in_range(field, filters):
    return {f'{field}__gte': filters.start, f'{field}__lte': filters.end}


def _minutes(values):
    if not values:
        return ZERO
    seconds = sum(values) / len(values)
    return (Decimal(str(seconds)) / 60).quantize(CENTS, rounding=ROUND_HALF_UP)


def checkin_counts(filters):
    """Check-ins created in the range, total and by status."""
    aggregates = {}
    for _, key, status in CHECKIN_METRICS:
        aggregates[key] = Count('id', filter=Q(status=status)) if status else Count('id')
    return CheckIn.objects.filter(**_in_range('created_at', filters)).aggregate(**aggregates)


def queue_counts(department=None):
    """Current queue entries by status, optionally for one department."""
    qs = QueueEntry.objects.all()
    if department:
        qs = qs.filter(department=department)
    return qs.aggregate(**{status: Count('id', filter=Q(status=status)) for _, status in QUEUE_METRICS})


def queue_counts_by_department(department=None):
    qs = QueueEntry.objects.all()
    if department:
        qs = qs.filter(department=department)
    annotations = {status: Count('id', filter=Q(status=status)) for _, status in QUEUE_METRICS}
    return list(qs.values('department').annotate(**annotations).order_by('department'))


def payment_totals(filters):
    totals = Payment.objects.filter(**_in_range('created_at', filters)).aggregate(
        count=Count('id'), total=Sum('amount'),
    )
    return totals['count'], (totals['total'] or ZERO).quantize(CENTS)


def payments_by_method(filters):
    rows = (
        Payment.objects.filter(**_in_range('created_at', filters))
        .values('method')
        .annotate(count=Count('id'), total=Sum('amount'))
        .order_by('method')
    )
    return [(r['method'], r['count'], (r['total'] or ZERO).quantize(CENTS)) for r in rows]


def arrivals_per_hour(filters):
    rows = (
        CheckIn.objects.filter(**_in_range('created_at', filters))
        .annotate(hour=TruncHour('created_at'))
        .values('hour')
        .annotate(arrivals=Count('id'))
        .order_by('hour')
    )
    return [(r['hour'].strftime('%Y-%m-%d %H:00'), r['arrivals']) for r in rows]


def _events(filters, to_status, department=None):
    qs = QueueEvent.objects.filter(to_status=to_status, **_in_range('created_at', filters))
    if department:
        qs = qs.filter(queue__department=department)
    return qs


def transition_count(filters, to_status, department=None):
    return _events(filters, to_status, department).count()


def average_wait(filters, department=None):
    """Minutes from check-in to entering service, averaged."""
    rows = _events(filters, 'in_service', department).values_list('created_at', 'queue__checkin__created_at')
    return _minutes([(started - arrived).total_seconds() for started, arrived in rows])


def average_service(filters, department=None):
    """Minutes from the latest ``in_service`` to ``done``, averaged over finished entries."""
    done = list(_events(filters, 'done', department).values_list('queue_id', 'created_at'))
    if not done:
        return ZERO
    starts = defaultdict(list)
    in_service = QueueEvent.objects.filter(
        queue_id__in={queue_id for queue_id, _ in done}, to_status='in_service',
    ).values_list('queue_id', 'created_at')
    for queue_id, at in in_service:
        starts[queue_id].append(at)
    durations = []
    for queue_id, done_at in done:
        earlier = [at for at in starts[queue_id] if at <= done_at]
        if earlier:
            durations.append((done_at - max(earlier)).total_seconds())
    return _minutes(durations)
