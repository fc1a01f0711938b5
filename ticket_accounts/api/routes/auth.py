"""
Authentication and self-service account endpoints.

Bodies are taken as raw JSON and validated inside the services so that
every failure maps onto the account API's own status codes instead of
FastAPI's 422.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_accounts.api.deps import get_current_user
from ticket_accounts.db.session import get_db
from ticket_accounts.models.user import User
from ticket_accounts.schemas.user import (
    UserEnvelope, UserResponse, TokenResponse, LogoutResponse, MessageResponse,
)
from ticket_accounts.services.auth_service import register_user, authenticate_user
from ticket_accounts.services.account_service import update_profile, delete_account, DELETED_MESSAGE
from ticket_accounts.core.security import get_current_user_id
from ticket_accounts.core.tokens import issue_token, logout_cookie
from ticket_accounts.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


def send_token_response(user: User, response: Response) -> TokenResponse:
    """Issue a session token, set it as a cookie and echo it in the body."""
    token, options = issue_token(user.id)
    response.set_cookie(**options.as_kwargs())
    return TokenResponse(id=user.id, name=user.name, email=user.email, token=token)


@router.post("/register", response_model=TokenResponse)
async def register(
    response: Response,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Create a new user and log them in."""
    user = await register_user(db, payload)
    return send_token_response(user, response)


@router.post("/login", response_model=TokenResponse)
async def login(
    response: Response,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Authenticate with email and password and receive a session token."""
    user = await authenticate_user(db, payload)
    return send_token_response(user, response)


@router.get("/logout", response_model=LogoutResponse)
async def logout(response: Response, user: User = Depends(get_current_user)):
    """Overwrite the session cookie with a sentinel that expires in 10 seconds."""
    response.set_cookie(**logout_cookie().as_kwargs())
    logger.info("user_logged_out", user_id=user.id)
    return LogoutResponse()


@router.get("/me", response_model=UserEnvelope)
async def get_me(user: User = Depends(get_current_user)):
    """Return the current user's profile."""
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.put("/me", response_model=UserEnvelope)
async def update_me(
    payload: Any = Body(None),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Update the current user's name and/or tel. Other fields are ignored."""
    user = await update_profile(db, user_id, payload)
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.delete("/me", response_model=MessageResponse)
async def delete_me(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete the current account and its reservations, returning tickets to their events."""
    await delete_account(db, user_id)
    return MessageResponse(message=DELETED_MESSAGE)
