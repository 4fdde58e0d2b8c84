"""
PDF writer built on reportlab's platypus layer.

The document has a header block (logo, title, subtitle, generation
details and any extra key/value lines) followed by one table.  With
``meta.group_by`` set, a heading is emitted each time that column's
value changes and the rows under it form their own table without the
grouping column.
"""
from __future__ import annotations

import io
import os
from itertools import groupby
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Image, LongTable, Paragraph, SimpleDocTemplate, Spacer, TableStyle
from reportlab.platypus.doctemplate import LayoutError

from exports.errors import WriterError
from exports.writers.base import DocumentMeta, Writer
from exports.writers.formatting import format_scalar, header_labels

HEADER_BG = colors.HexColor('#3B82F6')
ROW_ALT_BG = colors.HexColor('#F3F4F6')
TEXT = colors.HexColor('#111827')
BRAND = colors.HexColor('#0EA5E9')
MARGIN = 0.5 * inch


class PDFWriter(Writer):
    format = 'pdf'
    media_type = 'application/pdf'
    extension = 'pdf'

    def write(self, rows, columns, *, header=True, header_map=None, meta=None) -> bytes:
        meta = meta or DocumentMeta()
        pagesize = landscape(A4) if meta.landscape else A4
        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf, pagesize=pagesize, title=meta.title or 'Export',
            leftMargin=MARGIN, rightMargin=MARGIN, topMargin=MARGIN, bottomMargin=MARGIN,
        )
        styles = getSampleStyleSheet()
        cell_style = ParagraphStyle('ExportCell', parent=styles['Normal'], fontSize=7, leading=9, textColor=TEXT)
        head_style = ParagraphStyle('ExportHead', parent=cell_style, textColor=colors.white, fontName='Helvetica-Bold')

        story = self._header(meta, styles)
        rows = list(rows)
        group_by = meta.group_by if meta.group_by in columns else None
        if group_by:
            table_columns = [c for c in columns if c != group_by]
            group_style = ParagraphStyle('ExportGroup', parent=styles['Heading3'], textColor=BRAND)
            for value, grouped in groupby(rows, key=lambda r: r.get(group_by)):
                story.append(Paragraph(escape(format_scalar(value)) or '-', group_style))
                story.append(self._table(list(grouped), table_columns, header, header_map,
                                         doc.width, cell_style, head_style))
                story.append(Spacer(1, 0.15 * inch))
        if not rows:
            story.append(Paragraph('No records for the selected filters.', styles['Italic']))
        elif not group_by:
            story.append(self._table(rows, list(columns), header, header_map, doc.width, cell_style, head_style))

        try:
            doc.build(story)
        except LayoutError as exc:
            raise WriterError(f'Could not lay out the document: {exc}') from exc
        return buf.getvalue()

    def _header(self, meta: DocumentMeta, styles):
        story = []
        if meta.logo_path and os.path.isfile(meta.logo_path):
            story.append(Image(meta.logo_path, width=0.6 * inch, height=0.6 * inch, hAlign='LEFT'))
        if meta.title:
            title_style = ParagraphStyle('ExportTitle', parent=styles['Title'], textColor=BRAND, alignment=0)
            story.append(Paragraph(escape(meta.title), title_style))
        if meta.subtitle:
            story.append(Paragraph(escape(meta.subtitle), styles['Normal']))
        info_style = ParagraphStyle('ExportInfo', parent=styles['Normal'], fontSize=8, textColor=colors.grey)
        lines = []
        if meta.generated_at:
            lines.append(('Generated', meta.generated_at.strftime('%Y-%m-%d %H:%M')))
        if meta.generated_by:
            lines.append(('Generated By', meta.generated_by))
        lines.extend((meta.extra_info or {}).items())
        for key, value in lines:
            story.append(Paragraph(f'<b>{escape(str(key))}:</b> {escape(str(value))}', info_style))
        if story:
            story.append(Spacer(1, 0.2 * inch))
        return story

    def _table(self, rows, columns, header, header_map, width, cell_style, head_style):
        data = []
        if header:
            data.append([Paragraph(escape(label), head_style) for label in header_labels(columns, header_map)])
        for row in rows:
            data.append([Paragraph(escape(format_scalar(row.get(c))), cell_style) for c in columns])
        table = LongTable(data, colWidths=[width / max(len(columns), 1)] * len(columns), repeatRows=1 if header else 0)
        commands = [
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('GRID', (0, 0), (-1, -1), 0.25, colors.HexColor('#E5E7EB')),
        ]
        if header:
            commands.append(('BACKGROUND', (0, 0), (-1, 0), HEADER_BG))
        start = 1 if header else 0
        for idx in range(start, len(data)):
            if (idx - start) % 2 == 1:
                commands.append(('BACKGROUND', (0, idx), (-1, idx), ROW_ALT_BG))
        table.setStyle(TableStyle(commands))
        return table
