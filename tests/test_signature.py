import pytest

from checkout.razorpay_service import RazorpayGateway
from conftest import KEY_ID, KEY_SECRET, sign


@pytest.fixture
def gw():
    return RazorpayGateway(KEY_ID, KEY_SECRET)


def test_valid_signature_is_accepted(gw):
    signature = sign("order_ABC", "pay_123")
    assert gw.expected_signature("order_ABC", "pay_123") == signature
    assert gw.verify_signature("order_ABC", "pay_123", signature) is True


def test_every_single_character_mutation_is_rejected(gw):
    signature = sign("order_ABC", "pay_123")
    for i, ch in enumerate(signature):
        replacement = "0" if ch != "0" else "1"
        forged = signature[:i] + replacement + signature[i + 1:]
        assert gw.verify_signature("order_ABC", "pay_123", forged) is False


def test_signature_for_other_payment_is_rejected(gw):
    assert gw.verify_signature("order_ABC", "pay_999", sign("order_ABC", "pay_123")) is False


def test_signature_with_other_secret_is_rejected(gw):
    assert gw.verify_signature("order_ABC", "pay_123", sign("order_ABC", "pay_123", "other")) is False


@pytest.mark.parametrize("signature", ["", "not-hex", "ü" * 64])
def test_malformed_signatures_are_rejected(gw, signature):
    assert gw.verify_signature("order_ABC", "pay_123", signature) is False


def test_create_order_sends_paise_in_inr(gw, mocker):
    create = mocker.patch.object(gw.client.order, "create", return_value={"id": "order_1"})

    assert gw.create_order(89800) == {"id": "order_1"}
    create.assert_called_once_with(data={"amount": 89800, "currency": "INR"})
