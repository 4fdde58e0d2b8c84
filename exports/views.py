"""
Export API views.

``direct`` builds the whole file and returns it as a download;
``page`` hands one page and an opaque cursor to clients that page
themselves; ``datasets`` lists what can be exported; ``consent``
records why a user is exporting.  The payload is built completely
before the response starts, so a failed export never produces a
partial file.
"""
from __future__ import annotations

import logging

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from exports.cursor import encode_cursor
from exports.datasets.base import ExportContext
from exports.driver import resolve_page_size, run_export
from exports.errors import SourceError, ValidationError, WriterError
from exports.metrics import EXPORT_FAILURES
from exports.models import ExportConsent
from exports.permissions import CanExport, CanListExports
from exports.redaction import redact_row
from exports.registry import registry
from exports.serializers import ConsentSerializer, ExportRequestSerializer, PageRequestSerializer
from exports.services.audit import log_action
from exports.services.documents import build_meta, export_filename, header_map_for
from exports.writers import get_writer
from exports.writers.formatting import json_scalar

logger = logging.getLogger(__name__)


def _validated(serializer_class, data):
    s = serializer_class(data=data)
    if not s.is_valid():
        raise ValidationError.from_serializer(s.errors)
    return s.validated_data


def _columns(dataset, requested):
    if not requested:
        return list(dataset.default_columns)
    unknown = [c for c in requested if c not in dataset.default_columns]
    if unknown:
        raise ValidationError('columns', f'Unknown columns for {dataset.name}: {", ".join(unknown)}')
    return list(dict.fromkeys(requested))


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanListExports])
def list_datasets(request):
    return Response({'ok': True, 'data': registry.describe()})


@api_view(['POST'])
@permission_classes([IsAuthenticated, CanExport])
def direct_export(request):
    data = _validated(ExportRequestSerializer, request.data)
    writer = get_writer(data['format'])
    run = run_export(
        data['dataset'], data.get('filters'), data.get('pageSize'),
        context=ExportContext.for_user(request.user),
    )
    dataset = run.dataset
    columns = _columns(dataset, data.get('columns'))
    profile = data['redactionProfile']

    rows = []
    for record in run:
        redacted = redact_row(record, profile)
        rows.append({c: redacted.get(c) for c in columns})

    try:
        payload = writer.write(
            rows, columns,
            header=data['header'],
            header_map=header_map_for(dataset),
            meta=build_meta(dataset, run.filters, request.user, rows),
        )
    except WriterError:
        logger.error('Writing %s as %s failed with filters %s', dataset.name, writer.format, run.filters.summary())
        EXPORT_FAILURES.labels(dataset=dataset.name, kind='writer').inc()
        raise

    log_action(
        user=request.user,
        action='export',
        object_type='dataset',
        object_id=dataset.name,
        detail={
            **run.summary(),
            'format': writer.format,
            'columns': columns,
            'redaction_profile': profile,
        },
    )

    response = HttpResponse(payload, content_type=writer.media_type)
    response['Content-Disposition'] = f'attachment; filename="{export_filename(dataset, run.filters, writer.extension)}"'
    return response


@api_view(['POST'])
@permission_classes([IsAuthenticated, CanExport])
def export_page(request):
    data = _validated(PageRequestSerializer, request.data)
    dataset = registry.get(data['dataset'])
    page_size = resolve_page_size(data.get('pageSize'))
    filters = dataset.validate_filters(data.get('filters'))
    token = data.get('cursor')
    cursor = dataset.decode_cursor(token, filters) if token else None
    try:
        page = dataset.query_page(ExportContext.for_user(request.user), filters, cursor, page_size)
    except SourceError:
        logger.error('Page of %s failed at cursor %s with filters %s', dataset.name, token, filters.summary())
        EXPORT_FAILURES.labels(dataset=dataset.name, kind='source').inc()
        raise
    rows = [{c: json_scalar(v) for c, v in row.items()} for row in page.rows]
    return Response({
        'ok': True,
        'rows': rows,
        'nextCursor': encode_cursor(page.next_cursor) if page.next_cursor else None,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def record_consent(request):
    """Record why the caller is about to export data and what they will export."""
    data = _validated(ConsentSerializer, request.data)
    consent = ExportConsent.objects.create(user=request.user, rationale=data['rationale'], scope=data['scope'])
    return Response({'ok': True, 'id': consent.pk}, status=status.HTTP_201_CREATED)
