"""
Environment configuration.
Everything comes from env vars (loaded from .env at startup).

Required values fail fast: a missing variable raises ConfigurationError,
which the API turns into a 500 naming the variable.
"""

import os
from typing import List

from .errors import ConfigurationError


SUPABASE_URL = "SUPABASE_URL"
SUPABASE_SERVICE_KEY = "SUPABASE_SERVICE_KEY"
STRIPE_SECRET_KEY = "STRIPE_SECRET_KEY"
STRIPE_WEBHOOK_SECRET = "STRIPE_WEBHOOK_SECRET"
FRONTEND_URL = "FRONTEND_URL"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",  # Vite dev server
    "http://localhost:3000",
]

SUCCESS_PATH = "/assinatura/sucesso"
CANCEL_PATH = "/assinatura/cancelada"


def require_env(name: str) -> str:
    """Return a required env var or raise ConfigurationError."""
    value = os.environ.get(name)
    if not value:
        raise ConfigurationError(name)
    return value


def get_frontend_url() -> str:
    """Public base URL of the web app, without trailing slash."""
    return require_env(FRONTEND_URL).rstrip("/")


def default_success_url() -> str:
    return get_frontend_url() + SUCCESS_PATH


def default_cancel_url() -> str:
    return get_frontend_url() + CANCEL_PATH


def get_cors_origins() -> List[str]:
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO")


def is_development() -> bool:
    return os.environ.get("APP_ENV") == "development"
