import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

PRICING_MODES = ("catalog", "direct")


@dataclass(frozen=True)
class Settings:
    database_url: str
    razorpay_key_id: str
    razorpay_key_secret: str
    jwt_secret: str
    pricing_mode: str = "catalog"
    public_base_url: Optional[str] = None
    invoice_dir: Path = BASE_DIR / "invoices"
    invoice_title: str = "MuscleOxy Nutrition Invoice"
    invoice_token_ttl_days: int = 30
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv(dotenv_path=ENV_PATH)

        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise RuntimeError("DATABASE_URL is not set. Check your .env file.")

        key_id = os.getenv("RAZORPAY_KEY_ID")
        key_secret = os.getenv("RAZORPAY_KEY_SECRET")
        if not key_id or not key_secret:
            raise RuntimeError(
                "RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must be set. Check your .env file."
            )

        pricing_mode = os.getenv("PRICING_MODE", "catalog").lower()
        if pricing_mode not in PRICING_MODES:
            raise RuntimeError(f"PRICING_MODE must be one of {PRICING_MODES}, got {pricing_mode!r}")

        public_base_url = os.getenv("PUBLIC_BASE_URL") or None
        if public_base_url:
            public_base_url = public_base_url.rstrip("/")

        return cls(
            database_url=database_url,
            razorpay_key_id=key_id,
            razorpay_key_secret=key_secret,
            jwt_secret=os.getenv("JWT_SECRET") or key_secret,
            pricing_mode=pricing_mode,
            public_base_url=public_base_url,
            invoice_dir=Path(os.getenv("INVOICE_DIR", str(BASE_DIR / "invoices"))),
            invoice_title=os.getenv("INVOICE_TITLE", "MuscleOxy Nutrition Invoice"),
            invoice_token_ttl_days=int(os.getenv("INVOICE_TOKEN_TTL_DAYS", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
