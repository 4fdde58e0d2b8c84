"""
Filter validation for export datasets.

Each dataset validates its raw filter object with a DRF serializer and
gets back an immutable :class:`ExportFilter`.  Validation never touches
the database.  Range bounds accept full ISO 8601 timestamps or plain
dates; a plain ``from`` date means the start of that day and a plain
``to`` date the end of it, both in the active time zone.
"""
from __future__ import annotations

import hashlib
import html
import json
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional

import bleach
from django.utils.dateparse import parse_date
from rest_framework import serializers

from clinic.models import Appointment, Bill, LabTest, Payment, Prescription, QueueEntry, BedAssignment
from exports.errors import ValidationError

DATE_ONLY_LENGTH = len('2024-01-01')


def _json_safe(value):
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


@dataclass(frozen=True)
class ExportFilter:
    """Validated filter for one export.

    ``start``/``end`` are aware datetimes, or ``None`` where the dataset
    allows an open range.  ``fields`` holds the dataset-specific narrowing
    values (status, department, ward, method, ids) with unset keys omitted.
    """
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.start and self.end and self.start > self.end:
            raise ValidationError('from', '"from" must not be after "to".')
        object.__setattr__(self, 'fields', MappingProxyType(dict(self.fields)))

    def get(self, name: str, default=None):
        return self.fields.get(name, default)

    def summary(self) -> dict:
        data = {
            'from': _json_safe(self.start),
            'to': _json_safe(self.end),
        }
        for key in sorted(self.fields):
            data[key] = _json_safe(self.fields[key])
        return data

    @property
    def fingerprint(self) -> str:
        raw = json.dumps(self.summary(), sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(raw.encode('utf-8')).hexdigest()[:16]


class RangeBoundField(serializers.DateTimeField):
    """A datetime bound that also accepts a plain ``YYYY-MM-DD`` date."""

    def __init__(self, *, end_of_day: bool = False, **kwargs):
        self.end_of_day = end_of_day
        super().__init__(**kwargs)

    def to_internal_value(self, value):
        day = None
        if isinstance(value, date) and not isinstance(value, datetime):
            day = value
        elif isinstance(value, str) and len(value.strip()) == DATE_ONLY_LENGTH:
            try:
                day = parse_date(value.strip())
            except ValueError:
                self.fail('invalid', format='YYYY-MM-DD or ISO 8601')
            if day is None:
                self.fail('invalid', format='YYYY-MM-DD or ISO 8601')
        if day is not None:
            moment = datetime.combine(day, time.max if self.end_of_day else time.min)
            return self.enforce_timezone(moment)
        return super().to_internal_value(value)


class RangeFilterSerializer(serializers.Serializer):
    """Base serializer for datasets ordered by a timestamp.

    ``from`` is a Python keyword, so the field is declared as ``from_``
    and renamed when the fields are built.
    """
    range_required = True

    from_ = RangeBoundField()
    to = RangeBoundField(end_of_day=True)

    def get_fields(self):
        fields = super().get_fields()
        fields['from'] = fields.pop('from_')
        if not self.range_required:
            for name in ('from', 'to'):
                fields[name].required = False
                fields[name].allow_null = True
        return fields

    def validate(self, attrs):
        start, end = attrs.get('from'), attrs.get('to')
        if start and end and start > end:
            raise serializers.ValidationError({'from': '"from" must not be after "to".'})
        return attrs


class CleanTextMixin:
    """Strip tags from the free-text narrowing fields.

    bleach escapes the entities in the text it keeps; they are unescaped
    again so the value still matches what is stored, e.g. ``A&E``.
    """

    def _clean(self, v):
        v = html.unescape(bleach.clean((v or '').strip(), tags=[], strip=True)).strip()
        return v or None

    def validate_department(self, v):
        return self._clean(v)

    def validate_ward(self, v):
        return self._clean(v)


class AppointmentFilterSerializer(RangeFilterSerializer):
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, required=False)


class BillingFilterSerializer(RangeFilterSerializer):
    status = serializers.ChoiceField(choices=Bill.STATUS_CHOICES, required=False)


class OrderFilterSerializer(RangeFilterSerializer):
    """Laboratory and radiology orders share one status vocabulary."""
    status = serializers.ChoiceField(choices=LabTest.STATUS_CHOICES, required=False)


class PharmacyFilterSerializer(RangeFilterSerializer):
    status = serializers.ChoiceField(choices=Prescription.STATUS_CHOICES, required=False)


class OpenRangeFilterSerializer(RangeFilterSerializer):
    range_required = False


class PaymentFilterSerializer(RangeFilterSerializer):
    method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES, required=False)
    patientId = serializers.IntegerField(required=False, min_value=1)


class BedAssignmentFilterSerializer(CleanTextMixin, RangeFilterSerializer):
    status = serializers.ChoiceField(
        choices=[value for value, _ in BedAssignment.STATUS_CHOICES] + ['All'],
        required=False,
        default='All',
    )
    ward = serializers.CharField(required=False, allow_blank=True, max_length=100)
    bedId = serializers.IntegerField(required=False, min_value=1)


class QueueEventFilterSerializer(CleanTextMixin, RangeFilterSerializer):
    department = serializers.CharField(required=False, allow_blank=True, max_length=100)
    status = serializers.ChoiceField(choices=QueueEntry.STATUS_CHOICES, required=False)


class ReceptionFilterSerializer(CleanTextMixin, RangeFilterSerializer):
    department = serializers.CharField(required=False, allow_blank=True, max_length=100)


def build_filter(serializer_class, raw) -> ExportFilter:
    """Validate ``raw`` with ``serializer_class`` and return an :class:`ExportFilter`."""
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValidationError('filters', 'Filters must be an object.')
    serializer = serializer_class(data=dict(raw))
    if not serializer.is_valid():
        raise ValidationError.from_serializer(serializer.errors)
    data = dict(serializer.validated_data)
    start = data.pop('from', None)
    end = data.pop('to', None)
    narrowing = {k: v for k, v in data.items() if v is not None}
    return ExportFilter(start=start, end=end, fields=narrowing)
