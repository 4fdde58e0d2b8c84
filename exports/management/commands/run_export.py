"""
Run an export from the command line and write the payload to a file or stdout.

    python manage.py run_export payments --filters '{"from": "2024-01-01", "to": "2024-01-31"}' \
        --format xlsx --output payments.xlsx
"""
import json

from django.core.management.base import BaseCommand, CommandError

from exports.driver import run_export
from exports.errors import ExportError
from exports.redaction import PROFILES, redact_row
from exports.services.documents import build_meta, export_filename, header_map_for
from exports.writers import FORMAT_CHOICES, get_writer

TEXT_FORMATS = ('csv', 'ndjson')


class Command(BaseCommand):
    help = 'Export a dataset to CSV, NDJSON, XLSX or PDF'

    def add_arguments(self, parser):
        parser.add_argument('dataset', help='Registered dataset name')
        parser.add_argument('--filters', default='{}', help='Filters as a JSON object')
        parser.add_argument('--format', default='csv', choices=FORMAT_CHOICES)
        parser.add_argument('--output', '-o', help='Write to this path instead of stdout')
        parser.add_argument('--page-size', type=int, dest='page_size')
        parser.add_argument('--no-header', action='store_false', dest='header')
        parser.add_argument('--redaction-profile', default='clinical', choices=PROFILES, dest='profile')

    def handle(self, *args, **opts):
        try:
            raw_filters = json.loads(opts['filters'])
        except json.JSONDecodeError as exc:
            raise CommandError(f'--filters is not valid JSON: {exc}')

        try:
            writer = get_writer(opts['format'])
            if writer.format not in TEXT_FORMATS and not opts['output']:
                raise CommandError(f'--output is required for {writer.format} exports')
            run = run_export(opts['dataset'], raw_filters, opts['page_size'])
            rows = [redact_row(r, opts['profile']) for r in run]
            columns = list(run.dataset.default_columns)
            payload = writer.write(
                rows, columns,
                header=opts['header'],
                header_map=header_map_for(run.dataset),
                meta=build_meta(run.dataset, run.filters, rows=rows),
            )
        except ExportError as exc:
            field = getattr(exc, 'field', None)
            raise CommandError(f'{exc.kind}: {exc.message}' + (f' ({field})' if field else ''))

        path = opts['output']
        if path:
            with open(path, 'wb') as fh:
                fh.write(payload)
            self.stderr.write(self.style.SUCCESS(
                f'Wrote {run.row_count} rows to {path} (suggested name {export_filename(run.dataset, run.filters, writer.extension)})'
            ))
        else:
            self.stdout.write(payload.decode('utf-8'), ending='')
            self.stderr.write(self.style.SUCCESS(f'Exported {run.row_count} rows of {run.dataset.name}.'))
