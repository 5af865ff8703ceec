import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from checkout.auth import create_invoice_token, verify_invoice_token
from checkout.config import Settings
from checkout.database import get_db
from checkout.exceptions import (
    CheckoutError,
    IncompleteOrder,
    InvalidPrice,
    InvoiceGenerationFailed,
    ProductNotFound,
    SignatureMismatch,
    UpstreamFailure,
)
from checkout.invoices import InvoiceRenderer, get_invoices
from checkout.models import Coupon, Order, Product, INVOICE_FAILED, INVOICE_GENERATED
from checkout.pricing import compute_total, parse_discount, to_minor_units
from checkout.razorpay_service import RazorpayGateway, get_gateway

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[str] = Field(default=None, alias="productId")
    price: Optional[float] = None
    quantity: Optional[float] = None
    coupon_code: Optional[str] = Field(default=None, alias="couponCode")


class VerifyPaymentRequest(BaseModel):
    """Everything is optional at parse time so a forged callback is always
    answered as a signature mismatch, whatever else it omits."""

    model_config = ConfigDict(populate_by_name=True)

    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    product_id: Optional[str] = Field(default=None, alias="productId")
    quantity: Optional[float] = None
    coupon_code: Optional[str] = Field(default=None, alias="couponCode")
    final_amount: Optional[float] = Field(default=None, alias="finalAmount")
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")

    def missing_order_fields(self) -> List[str]:
        return [
            alias for alias, value in (
                ("finalAmount", self.final_amount),
                ("customerName", self.customer_name),
                ("customerEmail", self.customer_email),
            )
            if value is None
        ]


@router.get("/", response_class=PlainTextResponse)
def liveness():
    return "Server running"


def resolve_price(db: Session, request: CreateOrderRequest, pricing_mode: str) -> float:
    if pricing_mode == "direct":
        if request.price is None or request.price <= 0:
            raise InvalidPrice(request.price)
        return request.price

    product = db.get(Product, request.product_id) if request.product_id else None
    if product is None:
        raise ProductNotFound(request.product_id)
    return product.price


def lookup_discount(db: Session, coupon_code: Optional[str]):
    if not coupon_code:
        return None
    coupon = db.get(Coupon, coupon_code)
    if coupon is None:
        return None
    return parse_discount(coupon.type, coupon.value)


@router.post("/create-order")
def create_order_api(
    request: CreateOrderRequest,
    db: Session = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    try:
        price = resolve_price(db, request, settings.pricing_mode)
        discount = lookup_discount(db, request.coupon_code)
        final_amount = compute_total(price, request.quantity, discount)
        order = gateway.create_order(to_minor_units(final_amount))
    except CheckoutError:
        raise
    except Exception as exc:
        logger.exception("Order creation failed")
        raise UpstreamFailure("Order failed") from exc

    logger.info(
        "Gateway order created",
        extra={"gateway_order_id": order.get("id"), "final_amount": final_amount},
    )
    return {"order": order, "finalAmount": final_amount}


def invoice_url(base_url: str, order: Order, settings: Settings) -> str:
    token = create_invoice_token(
        order.id, order.customer_email, settings.jwt_secret, settings.invoice_token_ttl_days
    )
    return f"{base_url}/{order.invoice_filename}?token={token}"


def record_order(db: Session, request: VerifyPaymentRequest) -> Order:
    """Persist the order once per gateway payment id and return it."""
    existing = db.query(Order).filter_by(payment_id=request.razorpay_payment_id).first()
    if existing:
        logger.info("Replayed verification", extra={"order_id": existing.id, "payment_id": existing.payment_id})
        return existing

    missing = request.missing_order_fields()
    if missing:
        raise IncompleteOrder(missing)

    order = Order(
        product_id=request.product_id,
        quantity=request.quantity or 1,
        coupon_code=request.coupon_code or None,
        amount=request.final_amount,
        gateway_order_id=request.razorpay_order_id,
        payment_id=request.razorpay_payment_id,
        customer_name=request.customer_name,
        customer_email=request.customer_email,
    )
    db.add(order)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent verification for the same payment won the insert.
        db.rollback()
        return db.query(Order).filter_by(payment_id=request.razorpay_payment_id).one()
    db.refresh(order)
    return order


def ensure_invoice(db: Session, order: Order, invoices: InvoiceRenderer) -> None:
    if order.invoice_status == INVOICE_GENERATED and invoices.path_for(order).exists():
        return
    try:
        invoices.render(order)
    except Exception as exc:
        logger.exception("Invoice generation failed", extra={"order_id": order.id})
        order.invoice_status = INVOICE_FAILED
        db.commit()
        raise InvoiceGenerationFailed(order.id) from exc
    order.invoice_status = INVOICE_GENERATED
    db.commit()


@router.post("/verify-payment")
def verify_payment_api(
    request: VerifyPaymentRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_gateway),
    invoices: InvoiceRenderer = Depends(get_invoices),
    settings: Settings = Depends(get_settings),
):
    if not gateway.verify_signature(
        request.razorpay_order_id, request.razorpay_payment_id, request.razorpay_signature
    ):
        logger.warning(
            "Payment signature mismatch",
            extra={"gateway_order_id": request.razorpay_order_id, "payment_id": request.razorpay_payment_id},
        )
        raise SignatureMismatch()

    try:
        order = record_order(db, request)
        ensure_invoice(db, order, invoices)
    except CheckoutError:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Payment verification failed")
        raise UpstreamFailure("Verification failed") from exc

    base_url = settings.public_base_url or str(http_request.base_url).rstrip("/")
    logger.info("Payment verified", extra={"order_id": order.id, "payment_id": order.payment_id})
    return {"success": True, "invoiceUrl": invoice_url(base_url, order, settings)}


@router.get("/invoice-{order_id}.pdf")
def get_invoice_api(
    order_id: str,
    token: Optional[str] = None,
    db: Session = Depends(get_db),
    invoices: InvoiceRenderer = Depends(get_invoices),
    settings: Settings = Depends(get_settings),
):
    verify_invoice_token(token, order_id, settings.jwt_secret)

    order = db.get(Order, order_id)
    if order is None or order.invoice_status != INVOICE_GENERATED:
        raise HTTPException(status_code=404, detail="Invoice not found")
    path = invoices.path_for(order)
    if not path.exists():
        raise HTTPException(status_code=404, detail="Invoice not found")

    return FileResponse(path, media_type="application/pdf", filename=order.invoice_filename)
