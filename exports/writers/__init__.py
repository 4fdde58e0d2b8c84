"""
Output writers keyed by format name.
"""
from exports.errors import ValidationError
from exports.writers.base import DocumentMeta, Writer  # noqa: F401
from exports.writers.document import PDFWriter
from exports.writers.formatting import format_scalar  # noqa: F401
from exports.writers.spreadsheet import XLSXWriter
from exports.writers.tabular import CSVWriter, NDJSONWriter

WRITERS = {
    writer.format: writer
    for writer in (CSVWriter(), NDJSONWriter(), XLSXWriter(), PDFWriter())
}

ALIASES = {
    'tabular': 'csv',
    'document': 'pdf',
}

FORMAT_CHOICES = tuple(WRITERS) + tuple(ALIASES)


def get_writer(name: str) -> Writer:
    writer = WRITERS.get(ALIASES.get(name, name))
    if writer is None:
        raise ValidationError('format', f'Unsupported format "{name}".')
    return writer
