import os
from dotenv import load_dotenv

# Load .env from the backend directory
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> list[str]:
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


APP_TITLE: str = os.getenv("APP_TITLE", "Craftify Catalog API")
APP_VERSION: str = "0.1.0"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ALLOWED_ORIGINS: list[str] = _env_list("CORS_ALLOWED_ORIGINS", "*")

# Demo data is seeded once at startup, never at import time
SEED_DEMO_DATA: bool = _env_bool("SEED_DEMO_DATA", "true")

# Paging
DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "500"))

# Categories with these names always count as referenced
CATEGORY_IN_USE_NAMES: list[str] = _env_list("CATEGORY_IN_USE_NAMES", "Component")

# Units of measure offered to clients
KNOWN_UOMS: list[str] = ["pcs", "ea", "kg", "L", "box", "pack"]

# Bearer-token guard (JWT, HS256 by default)
SECURITY_DISABLED: bool = _env_bool("SECURITY_DISABLED", "true")
JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "craftify-dev-secret-change-in-prod")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
JWT_ISSUER: str = os.getenv("JWT_ISSUER", "")
