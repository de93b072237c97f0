"""
PDF Renderer - Draws an InvoiceDocument on an A4 page with reportlab

Layout (mm from the top edge, 20 mm side margins):
  - logo 40x40 at the top-left, business block right-aligned beside it
  - title + invoice number at 80, date below
  - customer name, then the HT/TVA/TTC table
  - amount in words, then the optional footer notes
"""
import io
import logging

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from .base import DocumentRenderer, InvoiceDocument

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 20 * mm
LOGO_SIZE = 40 * mm
FOOTER_FONT = "Helvetica-Oblique"
FOOTER_FONT_SIZE = 9
FOOTER_LEADING = 4.5 * mm


class ReportLabRenderer(DocumentRenderer):

    def render(self, document: InvoiceDocument) -> bytes:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(document.metadata.get("title", document.title))
        if document.metadata.get("author"):
            pdf.setAuthor(document.metadata["author"])

        right = PAGE_WIDTH - MARGIN

        # Header: logo + business info
        y = 20 * mm
        if document.logo:
            self._draw_logo(pdf, document.logo, y)

        pdf.setFont("Helvetica", 11)
        for index, line in enumerate(document.business_lines):
            pdf.drawRightString(right, self._top(y + 5 * mm + index * 6 * mm), line)

        # Title, number and date
        y = 80 * mm
        pdf.setFont("Helvetica-Bold", 20)
        pdf.drawRightString(right, self._top(y), document.title)

        y += 10 * mm
        pdf.setFont("Helvetica", 12)
        pdf.drawRightString(right, self._top(y), document.date_line)

        # Customer
        y += 20 * mm
        pdf.setFont("Helvetica-Bold", 11)
        pdf.drawString(MARGIN, self._top(y), document.customer_line)

        # Breakdown table
        y += 12 * mm
        table = Table(
            [list(document.table_header)] + [list(row) for row in document.table_rows],
            colWidths=[120 * mm, 50 * mm],
        )
        table.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 0.3, colors.black),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]))
        _, table_height = table.wrapOn(pdf, PAGE_WIDTH - 2 * MARGIN, PAGE_HEIGHT)
        table.drawOn(pdf, MARGIN, self._top(y) - table_height)
        y += table_height + 10 * mm

        # Amount in words
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(MARGIN, self._top(y), document.amount_words_heading)
        y += 7 * mm
        pdf.setFont("Helvetica", 10)
        pdf.drawString(MARGIN, self._top(y), document.amount_words)
        y += 15 * mm

        # Footer notes
        if document.footer_notes:
            self._draw_footer(pdf, document.footer_notes, y)

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    @staticmethod
    def _top(offset: float) -> float:
        """Distance from the top edge -> reportlab y coordinate"""
        return PAGE_HEIGHT - offset

    def _draw_logo(self, pdf: canvas.Canvas, logo: bytes, y: float) -> None:
        try:
            image = ImageReader(io.BytesIO(logo))
            pdf.drawImage(
                image, MARGIN, self._top(y + LOGO_SIZE),
                width=LOGO_SIZE, height=LOGO_SIZE,
                preserveAspectRatio=True, mask="auto"
            )
        except Exception as e:
            # Continue without logo
            logger.warning(f"Failed to add logo to PDF: {e}")

    def _draw_footer(self, pdf: canvas.Canvas, notes: str, y: float) -> None:
        width = PAGE_WIDTH - 2 * MARGIN
        lines = []
        for paragraph in notes.splitlines():
            lines.extend(simpleSplit(paragraph, FOOTER_FONT, FOOTER_FONT_SIZE, width) or [""])

        pdf.setFont(FOOTER_FONT, FOOTER_FONT_SIZE)
        for line in lines:
            if y > PAGE_HEIGHT - MARGIN:
                pdf.showPage()
                pdf.setFont(FOOTER_FONT, FOOTER_FONT_SIZE)
                y = MARGIN
            pdf.drawString(MARGIN, self._top(y), line)
            y += FOOTER_LEADING
