"""Application configuration.

Environment variables override all defaults.
SECRET_KEY is the identity provider's JWT signing secret and must be set in production.
"""

import os
import warnings
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

_BACKEND_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)


def _csv_env(name: str, default: str) -> List[str]:
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


class Settings:
    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./pharmacy.db")

    # Bearer token verification (tokens are issued by the external identity provider)
    SECRET_KEY: str = os.getenv("SECRET_KEY", None)
    if not SECRET_KEY:
        if os.getenv("ENVIRONMENT", "development") == "production":
            raise ValueError(
                "SECRET_KEY must be set in production environment. "
                "Use the JWT secret of the identity provider that signs caller tokens."
            )
        warnings.warn(
            "SECRET_KEY not set in environment. Using development default. "
            "Set SECRET_KEY in .env to the identity provider's JWT secret.",
            RuntimeWarning
        )
        SECRET_KEY = "development-only-weak-default-change-in-production"

    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    # Empty string disables the audience check
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "authenticated")
    # Only used when minting tokens locally (tests, dev tooling)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # CORS for the REST surface
    CORS_ORIGINS: List[str] = _csv_env(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    )
    ALLOWED_HOSTS: List[str] = _csv_env("ALLOWED_HOSTS", "*")

    # CORS for the function endpoints (called from the browser client)
    FUNCTION_CORS_ORIGINS: List[str] = _csv_env("FUNCTION_CORS_ORIGINS", "*")
    FUNCTION_CORS_HEADERS: Dict[str, str] = {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
    }

    # Sales
    BILL_NUMBER_ATTEMPTS: int = int(os.getenv("BILL_NUMBER_ATTEMPTS", "3"))

    # Bulk import: read ambiguous dates like 03/04/2026 as day-first
    DATE_DAYFIRST: bool = os.getenv("DATE_DAYFIRST", "false").lower() in ("1", "true", "yes")

    # Reports
    LOW_STOCK_THRESHOLD: int = int(os.getenv("LOW_STOCK_THRESHOLD", "10"))
    EXPIRY_ALERT_DAYS: int = int(os.getenv("EXPIRY_ALERT_DAYS", "90"))
    REPORT_LIST_LIMIT: int = 50

    # Runtime
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
