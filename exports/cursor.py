"""
Keyset cursors.

A cursor remembers the ``(sort_key, pk)`` of the last row a page
emitted.  Outside the process it travels as a token signed with
``django.core.signing``, so clients cannot forge or edit it.  A cursor
is bound to the dataset and filter fingerprint it came from.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from django.conf import settings
from django.core import signing
from django.core.exceptions import ValidationError as DjangoValidationError

from exports.errors import ValidationError


@dataclass(frozen=True)
class Cursor:
    dataset: str
    fingerprint: str
    key: Any
    pk: int


def _encode_key(value):
    # isoformat keeps microseconds, which the JSON encoder would drop
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


def _salt() -> str:
    return getattr(settings, 'EXPORTS_CURSOR_SALT', 'exports.cursor')


def encode_cursor(cursor: Cursor) -> str:
    payload = {
        'd': cursor.dataset,
        'f': cursor.fingerprint,
        'k': _encode_key(cursor.key),
        'p': cursor.pk,
    }
    return signing.dumps(payload, salt=_salt(), compress=True)


def decode_cursor(token: str, *, dataset: str, fingerprint: str, key_field=None) -> Cursor:
    """Verify ``token`` and return the cursor it carries.

    ``key_field`` is the model field used as the sort key; its
    ``to_python`` turns the stored text back into a comparable value.
    """
    if not isinstance(token, str) or not token:
        raise ValidationError('cursor', 'Cursor must be a non-empty string.')
    try:
        payload = signing.loads(token, salt=_salt())
    except signing.BadSignature:
        raise ValidationError('cursor', 'Cursor is invalid or has been tampered with.')
    if not isinstance(payload, dict) or not {'d', 'f', 'k', 'p'} <= set(payload):
        raise ValidationError('cursor', 'Cursor is malformed.')
    if payload['d'] != dataset:
        raise ValidationError('cursor', 'Cursor belongs to a different dataset.')
    if payload['f'] != fingerprint:
        raise ValidationError('cursor', 'Cursor was issued for different filters.')
    key = payload['k']
    if key_field is not None and key is not None:
        try:
            key = key_field.to_python(key)
        except DjangoValidationError:
            raise ValidationError('cursor', 'Cursor is malformed.')
    return Cursor(dataset=dataset, fingerprint=fingerprint, key=key, pk=payload['p'])
