"""
PDF generation utilities for report exports
"""

import io
from typing import Any, List, Mapping, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


class PDFGenerator:
    """Renders tabular reports to PDF bytes"""

    def __init__(self, page_size=landscape(A4), margins=None):
        self.page_size = page_size
        self.margins = margins or {'top': 1.5*cm, 'bottom': 1.5*cm, 'left': 1.5*cm, 'right': 1.5*cm}
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles"""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=18,
            textColor=colors.darkblue,
            spaceAfter=12,
            alignment=TA_CENTER
        ))

        self.styles.add(ParagraphStyle(
            name='ReportMeta',
            parent=self.styles['Normal'],
            fontSize=9,
            textColor=colors.grey,
            spaceAfter=6
        ))

        self.styles.add(ParagraphStyle(
            name='TableCell',
            parent=self.styles['Normal'],
            fontSize=7,
            leading=9
        ))

    def _create_table(self, headers: List[str], data: List[List[Any]]) -> Table:
        """Create a formatted table with a repeating header row"""
        cell_style = self.styles['TableCell']
        table_data = [headers]
        for row in data:
            table_data.append([
                Paragraph(escape("" if value is None else str(value)), cell_style) for value in row
            ])

        table = Table(table_data, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#366092')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 7),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F5F7FA')]),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey)
        ]))
        return table

    def generate_report(self, title: str, headers: List[str], data: List[List[Any]],
                        header_info: Optional[Mapping[str, Any]] = None) -> bytes:
        """Generate a report PDF and return its bytes"""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.page_size,
            topMargin=self.margins['top'],
            bottomMargin=self.margins['bottom'],
            leftMargin=self.margins['left'],
            rightMargin=self.margins['right'],
            title=title
        )

        story = [Paragraph(escape(title), self.styles['ReportTitle'])]
        if header_info:
            for key, value in header_info.items():
                story.append(Paragraph(f"<b>{escape(str(key))}:</b> {escape(str(value))}", self.styles['ReportMeta']))
            story.append(Spacer(1, 12))

        if data:
            story.append(self._create_table(headers, data))
        else:
            story.append(Paragraph("No records found", self.styles['Normal']))

        doc.build(story)
        return buffer.getvalue()
