import hashlib
import hmac

import pytest
from fastapi.testclient import TestClient

from checkout.config import Settings
from checkout.main import create_app
from checkout.razorpay_service import RazorpayGateway

KEY_ID = "rzp_test_key"
KEY_SECRET = "rzp_test_secret"


def sign(order_id, payment_id, secret=KEY_SECRET):
    return hmac.new(
        secret.encode("utf-8"), f"{order_id}|{payment_id}".encode("utf-8"), hashlib.sha256
    ).hexdigest()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'checkout.db'}",
        razorpay_key_id=KEY_ID,
        razorpay_key_secret=KEY_SECRET,
        jwt_secret="jwt_test_secret",
        public_base_url="https://shop.example.com",
        invoice_dir=tmp_path / "invoices",
    )


@pytest.fixture
def gateway():
    return RazorpayGateway(KEY_ID, KEY_SECRET)


@pytest.fixture
def fastapi_app(settings, gateway):
    return create_app(settings, gateway=gateway)


@pytest.fixture
def client(fastapi_app):
    with TestClient(fastapi_app) as c:
        yield c


@pytest.fixture
def db(client, fastapi_app):
    session = fastapi_app.state.session_factory()
    yield session
    session.close()
