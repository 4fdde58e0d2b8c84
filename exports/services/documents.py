"""
Presentation helpers for export downloads: titles, branding lines,
report totals, header overrides and the download filename.
"""
from __future__ import annotations

from django.conf import settings
from django.utils import timezone

from exports.writers import DocumentMeta
from exports.writers.formatting import format_scalar, title_case

# Filter fields echoed in the document header, with their label
FILTER_LABELS = (
    ('status', 'Status'),
    ('ward', 'Ward'),
    ('method', 'Method'),
    ('department', 'Department'),
)


def _day(value):
    return timezone.localtime(value).strftime('%d/%m/%Y') if value else '-'


def requested_by(user) -> str:
    if user is None or not getattr(user, 'is_authenticated', False):
        return ''
    name = getattr(user, 'name', '') or user.get_full_name()
    if name and user.email:
        return f'{name} <{user.email}>'
    return name or user.email or user.get_username()


# Header lines for the reception reports: (label, section, metric).
# Sections are named per report in REPORT_SECTIONS.
QUICK_TOTALS = (
    ('Check-ins Total', 'checkins', 'Total'),
    ('Arrived', 'checkins', 'Arrived'),
    ('With Nurse', 'checkins', 'With Nurse'),
    ('In Room', 'checkins', 'In Room'),
    ('Completed', 'checkins', 'Complete'),
    ('Queue Waiting', 'queue', 'Waiting'),
    ('Queue In Service', 'queue', 'In Service'),
    ('Queue Done', 'queue', 'Done'),
    ('Payments Count', 'payments', 'Count'),
    ('Payments Total', 'payments', 'Total Amount'),
    ('Avg Wait (min)', 'kpis', 'Avg Wait (min)'),
    ('Avg In Service (min)', 'kpis', 'Avg In Service (min)'),
)
REPORT_SECTIONS = {
    'reception_register': {
        'checkins': 'Check-ins', 'queue': 'Queue', 'payments': 'Payments', 'kpis': 'KPIs',
    },
    'reception_daily': {
        'checkins': 'Register - Check-ins', 'queue': 'Register - Queue',
        'payments': 'Register - Payments', 'kpis': 'Dashboard - KPIs',
    },
}
DEPARTMENT_PREFIX = 'Department - '


def quick_totals(dataset, rows) -> dict:
    """Headline figures of a reception report, read from its rows."""
    sections = REPORT_SECTIONS.get(dataset.name)
    if not sections:
        return {}
    values = {(r.get('section'), r.get('metric')): r.get('value') for r in rows}
    totals = {}
    for label, key, metric in QUICK_TOTALS:
        value = values.get((sections[key], metric))
        if value is not None:
            totals[label] = format_scalar(value)
    return totals


def department_sheets(rows):
    """``(department, rows)`` pairs for the ``Department - X`` sections of a report."""
    sheets = {}
    for r in rows:
        section = r.get('section')
        if isinstance(section, str) and section.startswith(DEPARTMENT_PREFIX):
            name = section[len(DEPARTMENT_PREFIX):]
            sheets.setdefault(name, []).append({'metric': r.get('metric'), 'value': r.get('value')})
    return tuple((name, tuple(sheet_rows)) for name, sheet_rows in sheets.items())


def build_meta(dataset, filters, user=None, rows=()) -> DocumentMeta:
    """Document details for an export.  ``rows`` feeds the report totals and sheets."""
    organization = settings.EXPORTS_ORGANIZATION
    info = {}
    if filters.start or filters.end:
        info['Period'] = f'{_day(filters.start)} - {_day(filters.end)}'
    for key, label in FILTER_LABELS:
        value = filters.get(key)
        if value and value != 'All':
            info[label] = str(value)
    info['Currency'] = settings.EXPORTS_CURRENCY
    info.update(quick_totals(dataset, rows))
    who = requested_by(user)
    if who:
        info['Requested By'] = who
    info['Organization'] = organization
    return DocumentMeta(
        title=f'{organization} - {title_case(dataset.name)}',
        subtitle=settings.EXPORTS_SUBTITLE,
        logo_path=settings.EXPORTS_LOGO_PATH,
        generated_at=timezone.localtime(),
        generated_by=who,
        extra_info=info,
        landscape=dataset.landscape,
        group_by=dataset.group_by,
        sheets=department_sheets(rows),
    )


def header_map_for(dataset):
    if dataset.name == 'payments':
        return {'amount': f'Amount ({settings.EXPORTS_CURRENCY})'}
    return None


def export_filename(dataset, filters, extension: str) -> str:
    start = timezone.localtime(filters.start).date().isoformat() if filters.start else 'all'
    end = timezone.localtime(filters.end).date().isoformat() if filters.end else 'all'
    return f'{dataset.name}_{start}_{end}.{extension}'
