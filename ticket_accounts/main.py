"""
Ticket Accounts API - Main Application Entry Point

Account service of the ticketing platform:
- Registration and login with JWT session tokens delivered as HTTP-only cookies
- Self-service profile read and update
- Account deletion that returns reserved tickets to their events
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from ticket_accounts.core.config import get_settings
from ticket_accounts.core.exceptions import AccountError, account_error_handler, validation_error_handler
from ticket_accounts.core.logging import setup_logging, get_logger
from ticket_accounts.core.metrics import metrics_endpoint
from ticket_accounts.api.router import api_router
from ticket_accounts.api.middleware import RequestLoggingMiddleware
from ticket_accounts.db.session import engine

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    yield

    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="User registration, login and self-service account management",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

# Error rendering
app.add_exception_handler(AccountError, account_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# Routes
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
