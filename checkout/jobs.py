"""
Invoice retry job.

Re-renders invoices for orders whose invoice is still pending or whose last
render failed. Run with `python -m checkout.jobs` (e.g. from cron).
"""
import logging

from sqlalchemy.orm import sessionmaker

from checkout.config import Settings
from checkout.database import make_engine, make_session_factory
from checkout.invoices import InvoiceRenderer
from checkout.logging_config import setup_logging
from checkout.models import Order, INVOICE_FAILED, INVOICE_GENERATED, INVOICE_PENDING

logger = logging.getLogger(__name__)


def regenerate_invoices(session_factory: sessionmaker, invoices: InvoiceRenderer) -> int:
    """Returns the number of invoices rendered successfully."""
    db = session_factory()
    rendered = 0
    try:
        orders = (
            db.query(Order)
            .filter(Order.invoice_status.in_([INVOICE_PENDING, INVOICE_FAILED]))
            .order_by(Order.created_at)
            .all()
        )
        for order in orders:
            try:
                invoices.render(order)
            except Exception:
                logger.exception("Invoice retry failed", extra={"order_id": order.id})
                order.invoice_status = INVOICE_FAILED
            else:
                order.invoice_status = INVOICE_GENERATED
                rendered += 1
            db.commit()
    finally:
        db.close()

    logger.info("Invoice retry finished", extra={"candidates": len(orders), "rendered": rendered})
    return rendered


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    engine = make_engine(settings.database_url)
    try:
        count = regenerate_invoices(
            make_session_factory(engine),
            InvoiceRenderer(settings.invoice_dir, settings.invoice_title),
        )
    finally:
        engine.dispose()
    print(f"Regenerated {count} invoice(s)")


if __name__ == "__main__":
    main()
