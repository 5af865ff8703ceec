"""JSON logs on stdout for the checkout service and its invoice job."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "checkout"

# Chatty HTTP client used by the Razorpay SDK.
QUIET_LOGGERS = ("urllib3",)


def json_formatter() -> JsonFormatter:
    return JsonFormatter(
        "%(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level"},
        static_fields={"service": SERVICE_NAME},
        timestamp=True,
    )


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(json_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))
