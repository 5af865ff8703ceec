"""Invoice PDF rendering."""

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List

from fastapi import Request
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from checkout.models import Order

logger = logging.getLogger(__name__)

PLACEHOLDER = "N/A"
TIMESTAMP_FORMAT = "%d %b %Y, %H:%M:%S"


def format_number(value) -> str:
    """Whole numbers without decimals, anything else to two places."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}"


def invoice_lines(order: Order, generated_at: datetime) -> List[str]:
    return [
        f"Order ID: {order.id}",
        f"Payment ID: {order.payment_id}",
        f"Customer: {order.customer_name}",
        f"Email: {order.customer_email}",
        f"Product ID: {order.product_id or PLACEHOLDER}",
        f"Quantity: {format_number(order.quantity or 1)}",
        f"Total Paid: INR {format_number(order.amount)}",
        f"Date: {generated_at.strftime(TIMESTAMP_FORMAT)}",
    ]


class InvoiceRenderer:
    def __init__(self, directory: Path, title: str):
        self.directory = Path(directory)
        self.title = title

    def path_for(self, order: Order) -> Path:
        return self.directory / order.invoice_filename

    def _draw(self, order: Order, target: Path) -> None:
        width, height = A4
        pdf = canvas.Canvas(str(target), pagesize=A4)
        pdf.setTitle(f"{self.title} {order.id}")

        pdf.setFont("Helvetica-Bold", 20)
        pdf.drawCentredString(width / 2, height - 30 * mm, self.title)

        pdf.setFont("Helvetica", 12)
        y = height - 50 * mm
        for line in invoice_lines(order, datetime.now()):
            pdf.drawString(25 * mm, y, line)
            y -= 8 * mm

        pdf.showPage()
        pdf.save()

    def render(self, order: Order) -> Path:
        """Write the invoice for `order`; the final file appears only once complete."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(order)
        # Unique per render; concurrent renders of one order must not share it.
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=path.name + ".", suffix=".tmp")
        os.close(fd)
        tmp_path = Path(tmp_name)

        try:
            self._draw(order, tmp_path)
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

        logger.info("Invoice rendered", extra={"order_id": order.id, "path": str(path)})
        return path


def get_invoices(request: Request) -> InvoiceRenderer:
    return request.app.state.invoices
