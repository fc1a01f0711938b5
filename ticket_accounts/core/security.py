"""
Password hashing and session token verification.
"""

from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ticket_accounts.core.config import Settings, get_settings
from ticket_accounts.core.exceptions import NotAuthorizedError
from ticket_accounts.core.logging import get_logger
from ticket_accounts.core.tokens import COOKIE_NAME

logger = get_logger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


def decode_access_token(token: str, settings: Optional[Settings] = None) -> int:
    """
    Verify a session token and return the user id it was issued for.
    Raises NotAuthorizedError on bad signature, expiry or malformed payload.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return int(payload["sub"])
    except jwt.ExpiredSignatureError:
        logger.info("token_rejected", reason="expired")
        raise NotAuthorizedError()
    except (jwt.InvalidTokenError, KeyError, ValueError):
        logger.info("token_rejected", reason="invalid")
        raise NotAuthorizedError()


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> int:
    """
    Resolve the authenticated user id.
    A Bearer header takes precedence over the session cookie.
    """
    if credentials is not None:
        token = credentials.credentials
    else:
        token = request.cookies.get(COOKIE_NAME)

    if not token:
        raise NotAuthorizedError()
    return decode_access_token(token)
