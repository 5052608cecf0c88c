import os
from pathlib import Path
from dotenv import load_dotenv

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./stripe_cartridge.db")

STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")

JWT_SECRET = os.getenv("JWT_SECRET")

SITE_ID = os.getenv("SITE_ID", "RefArch")

# SFRA storefronts use Checkout-Begin stages, SiteGenesis uses COBilling/COSummary
STOREFRONT_SFRA = _flag("STOREFRONT_SFRA", "true")
STOREFRONT_URL_PREFIX = os.getenv("STOREFRONT_URL_PREFIX", "").rstrip("/")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
