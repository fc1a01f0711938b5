"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from ticket_accounts.api.routes import auth

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
