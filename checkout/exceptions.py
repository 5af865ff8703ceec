"""Checkout error taxonomy.

Every error knows its HTTP status and the JSON body the client receives, so
route handlers only raise and a single exception handler renders them.
"""

from typing import Any, Dict


class CheckoutError(Exception):
    """Base exception for the checkout service"""

    status_code = 500

    def payload(self) -> Dict[str, Any]:
        return {"error": str(self)}


class ProductNotFound(CheckoutError):
    """Catalog lookup did not resolve the product id"""

    status_code = 404

    def __init__(self, product_id=None):
        super().__init__("Product not found")
        self.product_id = product_id


class InvalidPrice(CheckoutError):
    """Directly supplied price is missing or not positive"""

    status_code = 400

    def __init__(self, price=None):
        super().__init__("Invalid price")
        self.price = price


class SignatureMismatch(CheckoutError):
    """Payment callback signature does not match the expected HMAC"""

    status_code = 400

    def __init__(self):
        super().__init__("Invalid signature")

    def payload(self) -> Dict[str, Any]:
        return {"success": False, "message": str(self)}


class UpstreamFailure(CheckoutError):
    """Gateway or record store call raised"""

    status_code = 500


class InvoiceGenerationFailed(CheckoutError):
    """Order record was persisted but its invoice could not be rendered"""

    status_code = 500

    def __init__(self, order_id: str):
        super().__init__("Verification failed")
        self.order_id = order_id

    def payload(self) -> Dict[str, Any]:
        return {"error": str(self), "orderId": self.order_id, "invoiceStatus": "failed"}


class IncompleteOrder(CheckoutError):
    """Verified payment lacks the details needed to record the order"""

    status_code = 422

    def __init__(self, fields):
        super().__init__("Missing order details")
        self.fields = list(fields)

    def payload(self) -> Dict[str, Any]:
        return {"error": str(self), "fields": self.fields}
