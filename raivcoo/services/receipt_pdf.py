"""
Order receipt PDF generator
"""

import io
import logging
from datetime import datetime
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..domain.billing.pricing import format_storage
from ..models import Order

logger = logging.getLogger(__name__)


class ReceiptPDFGenerator:
    """Renders a one-page receipt for a completed order"""

    def __init__(self, order: Order, customer_email: Optional[str]):
        self.order = order
        self.customer_email = customer_email or "N/A"

        self.page_width, self.page_height = letter
        self.margin = 0.75 * inch

        self.brand_color = colors.HexColor("#0f172a")
        self.dark_gray = colors.HexColor("#1e293b")
        self.light_gray = colors.HexColor("#f1f5f9")

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        logger.info(f"📄 Generating receipt PDF for order {self.order.id}")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=self.margin,
            leftMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
            title=f"Receipt {self.order.id}",
        )

        story = []
        styles = getSampleStyleSheet()

        title_style = ParagraphStyle(
            "ReceiptTitle",
            parent=styles["Heading1"],
            fontSize=24,
            textColor=self.brand_color,
            spaceAfter=6,
            alignment=1,
        )
        body_style = ParagraphStyle(
            "ReceiptBody",
            parent=styles["Normal"],
            fontSize=10,
            textColor=self.dark_gray,
            spaceAfter=6,
            alignment=1,
        )

        story.append(Paragraph("RECEIPT", title_style))
        story.append(Paragraph("Raivcoo", body_style))
        story.append(Spacer(1, 0.3 * inch))

        info_table = Table(self._rows(), colWidths=[2 * inch, 4.5 * inch])
        info_table.setStyle(
            TableStyle(
                [
                    ("FONT", (0, 0), (0, -1), "Helvetica-Bold", 10),
                    ("FONT", (1, 0), (1, -1), "Helvetica", 10),
                    ("TEXTCOLOR", (0, 0), (-1, -1), self.dark_gray),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
                    ("LINEABOVE", (0, -1), (-1, -1), 1, self.dark_gray),
                    ("FONT", (0, -1), (-1, -1), "Helvetica-Bold", 12),
                    ("BACKGROUND", (0, -1), (-1, -1), self.light_gray),
                ]
            )
        )
        story.append(info_table)
        story.append(Spacer(1, 0.5 * inch))
        story.append(
            Paragraph(
                "<i>Thank you for your purchase!</i>",
                ParagraphStyle(
                    "Footer",
                    parent=body_style,
                    fontSize=9,
                    textColor=colors.grey,
                ),
            )
        )

        doc.build(story)

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(f"✅ Generated receipt PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    def _rows(self) -> list[list[str]]:
        order = self.order
        metadata = order.order_metadata or {}
        completed = order.completed_at or order.created_at or datetime.utcnow()

        rows = [
            ["Order ID:", order.id],
            ["Transaction ID:", order.transaction_id or "N/A"],
            ["Date:", completed.strftime("%B %d, %Y")],
            ["Email:", self.customer_email],
            ["Plan:", order.plan_name or order.plan_id or "N/A"],
        ]
        storage_gb = metadata.get("storage_gb")
        if storage_gb:
            rows.append(["Storage:", format_storage(float(storage_gb))])
        rows.append(["Total:", f"${order.amount:.2f} {order.currency or 'USD'}"])
        return rows


def generate_receipt_pdf(order: Order, customer_email: Optional[str]) -> bytes:
    return ReceiptPDFGenerator(order, customer_email).generate()
