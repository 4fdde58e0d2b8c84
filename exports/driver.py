"""
Export driver.

:func:`run_export` resolves a dataset, validates the page size and the
filters, and returns an :class:`ExportRun` that pages through the source
lazily.  All of the checks happen before any query runs.
"""
from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping, Optional

from django.conf import settings
from django.utils import timezone

from exports.datasets.base import DEFAULT_PAGE_SIZE, Dataset, ExportContext, Record
from exports.errors import SourceError, ValidationError
from exports.filters import ExportFilter
from exports.metrics import EXPORT_FAILURES, EXPORT_ROWS, EXPORTS_COMPLETED

logger = logging.getLogger(__name__)


def resolve_page_size(page_size) -> int:
    """Default, type-check and cap a requested page size."""
    if page_size is None:
        return getattr(settings, 'EXPORTS_DEFAULT_PAGE_SIZE', DEFAULT_PAGE_SIZE)
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise ValidationError('pageSize', 'Page size must be a positive integer.')
    limit = getattr(settings, 'EXPORTS_MAX_PAGE_SIZE', None)
    if limit and page_size > limit:
        raise ValidationError('pageSize', f'Page size must not exceed {limit}.')
    return page_size


class ExportRun:
    """One forward-only traversal of a dataset.

    Iterating fetches pages one after another, each starting after the
    last row of the previous one, and stops at the first page that comes
    back without a cursor.  A run can be iterated once; call
    :func:`run_export` again for a fresh traversal.

    There is no snapshot isolation.  Rows inserted while the run is in
    progress appear if their sort key is still ahead of the cursor when
    their page is read, and are missed otherwise.  If a page fetch fails
    the run stops with :class:`SourceError`; rows already yielded stay
    yielded.  To cancel, stop iterating.
    """

    def __init__(self, dataset: Dataset, filters: ExportFilter, page_size: int,
                 context: Optional[ExportContext] = None):
        self.dataset = dataset
        self.filters = filters
        self.page_size = page_size
        self.context = context or ExportContext()
        self.row_count = 0
        self.pages_fetched = 0
        self.started_at = None
        self.finished_at = None
        self._consumed = False

    @property
    def completed(self) -> bool:
        return self.finished_at is not None

    def __iter__(self) -> Iterator[Record]:
        if self._consumed:
            raise RuntimeError('An export run cannot be restarted; call run_export() again.')
        self._consumed = True
        return self._rows()

    def _rows(self) -> Iterator[Record]:
        self.started_at = timezone.now()
        cursor = None
        while True:
            try:
                page = self.dataset.query_page(self.context, self.filters, cursor, self.page_size)
            except SourceError:
                logger.error(
                    'Export of %s failed at cursor %s with filters %s',
                    self.dataset.name,
                    (cursor.key, cursor.pk) if cursor else None,
                    self.filters.summary(),
                )
                EXPORT_FAILURES.labels(dataset=self.dataset.name, kind='source').inc()
                raise
            self.pages_fetched += 1
            for row in page.rows:
                self.row_count += 1
                yield row
            if page.next_cursor is None:
                break
            cursor = page.next_cursor

        self.finished_at = timezone.now()
        EXPORTS_COMPLETED.labels(dataset=self.dataset.name).inc()
        EXPORT_ROWS.labels(dataset=self.dataset.name).inc(self.row_count)
        logger.info(
            'Exported %d rows of %s in %d pages',
            self.row_count, self.dataset.name, self.pages_fetched,
        )

    def summary(self) -> dict:
        """Metadata for the audit trail."""
        return {
            'dataset': self.dataset.name,
            'filters': self.filters.summary(),
            'row_count': self.row_count,
            'pages_fetched': self.pages_fetched,
            'page_size': self.page_size,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
        }


def run_export(dataset_name: str, raw_filters: Optional[Mapping[str, Any]], page_size: Optional[int] = None, *,
               context: Optional[ExportContext] = None, registry=None) -> ExportRun:
    if registry is None:
        from exports.registry import registry
    dataset = registry.get(dataset_name)
    size = resolve_page_size(page_size)
    filters = dataset.validate_filters(raw_filters)
    return ExportRun(dataset, filters, size, context=context)
