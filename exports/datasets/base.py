"""
Dataset contract and the generic keyset implementation.

A dataset knows its public name, its default columns, how to validate a
raw filter object and how to fetch one page of records.  Most datasets
are a :class:`KeysetDataset`: a model, a timestamp sort field and a
column projection.  The paging and cursor bookkeeping lives here once.

Pages are ordered by ``(sort_field, pk)`` and the cursor carries both,
so rows sharing a timestamp across a page boundary are neither skipped
nor repeated.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from django.db import DatabaseError
from django.db.models import CharField, F, Q, Value
from django.db.models.functions import Concat

from exports.cursor import Cursor, decode_cursor
from exports.errors import SourceError, ValidationError
from exports.filters import ExportFilter, build_filter

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 5000

Record = Dict[str, Any]


@dataclass(frozen=True)
class ExportContext:
    """Who is asking.  Datasets may scope by it; none currently do."""
    user_id: Optional[int] = None
    role: Optional[str] = None

    @classmethod
    def for_user(cls, user) -> 'ExportContext':
        if user is None or not getattr(user, 'is_authenticated', False):
            return cls()
        return cls(user_id=user.pk, role=getattr(user, 'role', None))


@dataclass(frozen=True)
class Page:
    rows: Tuple[Record, ...]
    next_cursor: Optional[Cursor] = None


def full_name(prefix: str = '') -> Concat:
    """``first_name last_name`` of the related patient (or of the model itself)."""
    return Concat(
        f'{prefix}first_name', Value(' '), f'{prefix}last_name',
        output_field=CharField(),
    )


class Dataset:
    name: str = ''
    default_columns: Tuple[str, ...] = ()
    filter_serializer = None
    # Datasets whose document export groups rows under headings
    group_by: Optional[str] = None
    landscape: bool = False
    # 'records' for row datasets, 'report' for computed summaries
    kind: str = 'records'

    def validate_filters(self, raw: Optional[Mapping[str, Any]]) -> ExportFilter:
        return build_filter(self.filter_serializer, raw)

    def query_page(self, context: ExportContext, filters: ExportFilter, cursor: Optional[Cursor] = None,
                   page_size: int = DEFAULT_PAGE_SIZE) -> Page:
        raise NotImplementedError

    def decode_cursor(self, token: str, filters: ExportFilter) -> Cursor:
        return decode_cursor(token, dataset=self.name, fingerprint=filters.fingerprint)

    def describe(self) -> dict:
        return {'name': self.name, 'columns': list(self.default_columns), 'kind': self.kind}

    def __repr__(self) -> str:
        return f'<{type(self).__name__} {self.name}>'


class KeysetDataset(Dataset):
    """A dataset read from one model in ``(sort_field, pk)`` order.

    ``projection`` maps every output column to either a field path or an
    expression.  A column whose source is a field of the same name is
    selected as-is; anything else is selected under an internal alias so
    it cannot clash with a model field.
    """
    model = None
    sort_field: str = ''
    projection: Mapping[str, Any] = {}

    alias_prefix = 'export_'

    def __init__(self):
        missing = [c for c in self.default_columns if c not in self.projection]
        if missing:
            raise ValueError(f'{self.name}: no source for columns {missing}')

    def narrow(self, queryset, filters: ExportFilter):
        """Apply the dataset-specific narrowing fields."""
        return queryset

    def get_queryset(self, filters: ExportFilter):
        qs = self.model.objects.all()
        if filters.start is not None:
            qs = qs.filter(**{f'{self.sort_field}__gte': filters.start})
        if filters.end is not None:
            qs = qs.filter(**{f'{self.sort_field}__lte': filters.end})
        return self.narrow(qs, filters)

    def _selection(self):
        plain, aliased = [], {}
        for column in self.default_columns:
            source = self.projection[column]
            if source == column:
                plain.append(column)
            elif isinstance(source, str):
                aliased[self.alias_prefix + column] = F(source)
            else:
                aliased[self.alias_prefix + column] = source
        fetched = list(dict.fromkeys(['pk', self.sort_field, *plain]))
        return fetched, aliased

    def _record(self, row) -> Record:
        record = {}
        for column in self.default_columns:
            key = column if self.projection[column] == column else self.alias_prefix + column
            record[column] = row[key]
        return record

    def query_page(self, context: ExportContext, filters: ExportFilter, cursor: Optional[Cursor] = None,
                   page_size: int = DEFAULT_PAGE_SIZE) -> Page:
        qs = self.get_queryset(filters)
        if cursor is not None:
            qs = qs.filter(
                Q(**{f'{self.sort_field}__gt': cursor.key})
                | Q(**{self.sort_field: cursor.key, 'pk__gt': cursor.pk})
            )
        fetched, aliased = self._selection()
        qs = qs.order_by(self.sort_field, 'pk').values(*fetched, **aliased)[:page_size]

        try:
            raw_rows = list(qs)
        except DatabaseError as exc:
            raise SourceError(f'Failed to read {self.name}: {exc}') from exc

        logger.debug('%s: fetched %d rows after %s', self.name, len(raw_rows),
                      (cursor.key, cursor.pk) if cursor else None)

        next_cursor = None
        if raw_rows and len(raw_rows) == page_size:
            last = raw_rows[-1]
            next_cursor = Cursor(
                dataset=self.name,
                fingerprint=filters.fingerprint,
                key=last[self.sort_field],
                pk=last['pk'],
            )
        return Page(rows=tuple(self._record(r) for r in raw_rows), next_cursor=next_cursor)

    def decode_cursor(self, token: str, filters: ExportFilter) -> Cursor:
        return decode_cursor(
            token,
            dataset=self.name,
            fingerprint=filters.fingerprint,
            key_field=self.model._meta.get_field(self.sort_field),
        )


class AggregateDataset(Dataset):
    """A report computed in one pass and paged by row position.

    Every page recomputes the report, so a client paging through it sees
    the figures as of each request.  The cursor's key and pk both hold
    the number of rows already handed out.
    """
    kind = 'report'

    def build_rows(self, context: ExportContext, filters: ExportFilter) -> Sequence[Record]:
        raise NotImplementedError

    def query_page(self, context: ExportContext, filters: ExportFilter, cursor: Optional[Cursor] = None,
                   page_size: int = DEFAULT_PAGE_SIZE) -> Page:
        offset = cursor.pk if cursor is not None else 0
        try:
            rows = self.build_rows(context, filters)
        except DatabaseError as exc:
            raise SourceError(f'Failed to build {self.name}: {exc}') from exc
        chunk = rows[offset:offset + page_size]

        next_cursor = None
        if chunk and len(chunk) == page_size:
            position = offset + len(chunk)
            next_cursor = Cursor(dataset=self.name, fingerprint=filters.fingerprint, key=position, pk=position)
        return Page(
            rows=tuple({c: row.get(c) for c in self.default_columns} for row in chunk),
            next_cursor=next_cursor,
        )

    def decode_cursor(self, token: str, filters: ExportFilter) -> Cursor:
        cursor = super().decode_cursor(token, filters)
        if isinstance(cursor.pk, bool) or not isinstance(cursor.pk, int) or cursor.pk < 0:
            raise ValidationError('cursor', 'Cursor is malformed.')
        return cursor
