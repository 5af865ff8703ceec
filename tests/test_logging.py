import json
import logging

from checkout.logging_config import SERVICE_NAME, json_formatter


def test_records_are_json_with_service_metadata():
    record = logging.LogRecord(
        "checkout.routes", logging.INFO, __file__, 10, "Payment verified", None, None
    )
    record.order_id = "ord42"

    line = json.loads(json_formatter().format(record))

    assert line["message"] == "Payment verified"
    assert line["level"] == "INFO"
    assert line["name"] == "checkout.routes"
    assert line["service"] == SERVICE_NAME
    assert line["order_id"] == "ord42"
    assert "timestamp" in line
    assert "levelname" not in line
