"""
Error taxonomy for the export pipeline.

Every error is a DRF ``APIException`` so the project exception handler
renders it as ``{'ok': False, 'error': {...}}`` with the right status.
"""
from __future__ import annotations

from typing import Optional

from rest_framework import status
from rest_framework.exceptions import APIException


class ExportError(APIException):
    kind = 'export'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = 'export_error'

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(detail=message, code=code or self.default_code)
        self.message = message

    def as_dict(self) -> dict:
        return {'kind': self.kind, 'code': self.default_code, 'message': self.message}

    def __str__(self) -> str:
        return self.message


class ValidationError(ExportError):
    """A filter, cursor or page size the caller can correct."""
    kind = 'validation'
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'invalid'

    def __init__(self, field: Optional[str], message: str):
        super().__init__(message)
        self.field = field

    def as_dict(self) -> dict:
        data = super().as_dict()
        if self.field:
            data['field'] = self.field
        return data

    @classmethod
    def from_serializer(cls, errors) -> 'ValidationError':
        """Build from DRF ``serializer.errors``, keeping the first failing field path."""
        path = []
        node = errors
        while isinstance(node, dict) and node:
            key, node = next(iter(node.items()))
            path.append(str(key))
        while isinstance(node, (list, tuple)) and node:
            node = node[0]
            if isinstance(node, dict) and node:
                key, node = next(iter(node.items()))
                path.append(str(key))
        field = '.'.join(p for p in path if p != 'non_field_errors') or None
        return cls(field, str(node))


class NotFoundError(ExportError):
    kind = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND
    default_code = 'not_found'


class SourceError(ExportError):
    """The record store failed while a page was being fetched."""
    kind = 'source'
    default_code = 'source_error'


class WriterError(ExportError):
    """A writer could not build the payload."""
    kind = 'writer'
    default_code = 'writer_error'
