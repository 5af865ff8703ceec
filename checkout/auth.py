from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from jose import JWTError, jwt

ALGORITHM = "HS256"
INVOICE_SCOPE = "invoice"


def create_invoice_token(order_id: str, customer_email: str, secret: str, ttl_days: int = 30) -> str:
    claims = {
        "sub": order_id,
        "email": customer_email,
        "scope": INVOICE_SCOPE,
        "exp": datetime.now(timezone.utc) + timedelta(days=ttl_days),
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def verify_invoice_token(token: str, order_id: str, secret: str) -> dict:
    """Check that `token` grants access to the invoice of `order_id`."""
    try:
        if not token:
            raise ValueError("missing token")
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM])
        if claims.get("scope") != INVOICE_SCOPE:
            raise ValueError("wrong scope")
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or missing token")

    if claims.get("sub") != order_id:
        raise HTTPException(status_code=403, detail="Token does not grant access to this invoice")
    return claims
