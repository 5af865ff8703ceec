import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from checkout.config import Settings
from checkout.database import Base, make_engine, make_session_factory
from checkout.exceptions import CheckoutError
from checkout.invoices import InvoiceRenderer
from checkout.logging_config import setup_logging
from checkout.razorpay_service import RazorpayGateway
from checkout.routes import router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, gateway: Optional[RazorpayGateway] = None) -> FastAPI:
    """Build the application; collaborators are constructed at startup, not at import."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_settings = settings or Settings.from_env()
        setup_logging(app_settings.log_level)

        engine = make_engine(app_settings.database_url)
        Base.metadata.create_all(bind=engine)

        app.state.settings = app_settings
        app.state.session_factory = make_session_factory(engine)
        app.state.gateway = gateway or RazorpayGateway(
            app_settings.razorpay_key_id, app_settings.razorpay_key_secret
        )
        app.state.invoices = InvoiceRenderer(app_settings.invoice_dir, app_settings.invoice_title)
        logger.info("Checkout service started", extra={"pricing_mode": app_settings.pricing_mode})

        yield

        engine.dispose()
        logger.info("Checkout service stopped")

    app = FastAPI(title="Checkout Payment Service", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CheckoutError)
    async def checkout_error_handler(request: Request, exc: CheckoutError):
        return JSONResponse(status_code=exc.status_code, content=exc.payload())

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "checkout.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "10000")),
        log_level="info",
    )
