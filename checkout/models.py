import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, DateTime
from checkout.database import Base

INVOICE_PENDING = "pending"
INVOICE_GENERATED = "generated"
INVOICE_FAILED = "failed"


def _new_order_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    price = Column(Float, nullable=False)               # major units (INR)


class Coupon(Base):
    __tablename__ = "coupons"

    code = Column(String, primary_key=True)
    type = Column(String, nullable=False)               # percentage | percent | flat
    value = Column(Float, nullable=False)


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=_new_order_id)
    product_id = Column(String, nullable=True)
    quantity = Column(Float, nullable=False, default=1)
    coupon_code = Column(String, nullable=True)
    amount = Column(Float, nullable=False)
    gateway_order_id = Column(String, index=True)
    payment_id = Column(String, unique=True, index=True, nullable=False)   # Razorpay payment ID
    customer_name = Column(String)
    customer_email = Column(String)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    invoice_status = Column(String, nullable=False, default=INVOICE_PENDING)   # pending | generated | failed

    @property
    def invoice_filename(self) -> str:
        return f"invoice-{self.id}.pdf"
