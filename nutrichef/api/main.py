"""
Main FastAPI application.
Server-side billing glue for the NutriChef web app.

Endpoints:
- /webhooks/stripe - Stripe webhook handler (source of truth for access)
- /checkout/session - Start a Stripe-hosted checkout
- /subscription/* - Plans and the caller's subscription state

Run:
    uvicorn nutrichef.api.main:app --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from ..core.config import get_cors_origins, get_log_level, is_development
from ..core.errors import ConfigurationError
from ..core.logging_config import setup_logging

# Load environment variables
load_dotenv()
setup_logging(get_log_level())

VERSION = "1.0.0"

# Create app
app = FastAPI(
    title="NutriChef Billing API",
    description="Stripe subscription sync and checkout for NutriChef",
    version=VERSION,
    docs_url="/docs" if is_development() else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Missing env vars are server errors that name the variable."""
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": VERSION}


# Import and include routers
from .routes import checkout, subscriptions, webhooks

app.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
app.include_router(subscriptions.router, prefix="/subscription", tags=["subscription"])
app.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
