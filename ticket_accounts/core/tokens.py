"""
Session token issuance and cookie policy.

Tokens are stateless HS256 JWTs carrying the user id in `sub`. The same
token is returned in the response body and set as an HTTP-only cookie whose
lifetime comes from JWT_COOKIE_EXPIRE_DAYS.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt

from ticket_accounts.core.config import Settings, get_settings

COOKIE_NAME = "token"
LOGOUT_COOKIE_VALUE = "none"
LOGOUT_COOKIE_TTL = timedelta(seconds=10)


@dataclass(frozen=True)
class CookieOptions:
    value: str
    expires: datetime
    httponly: bool = True
    secure: bool = False

    def as_kwargs(self) -> dict:
        """Keyword arguments for `Response.set_cookie`."""
        return {
            "key": COOKIE_NAME,
            "value": self.value,
            "expires": self.expires,
            "httponly": self.httponly,
            "secure": self.secure,
        }


def create_access_token(
    user_id: int,
    now: Optional[datetime] = None,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or get_settings()
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def issue_token(
    user_id: int,
    now: Optional[datetime] = None,
    settings: Optional[Settings] = None,
) -> Tuple[str, CookieOptions]:
    """Sign a session token for `user_id` and build the cookie that carries it."""
    settings = settings or get_settings()
    now = now or datetime.now(timezone.utc)

    token = create_access_token(user_id, now=now, settings=settings)
    options = CookieOptions(
        value=token,
        expires=now + timedelta(days=settings.JWT_COOKIE_EXPIRE_DAYS),
        httponly=True,
        secure=settings.is_production,
    )
    return token, options


def logout_cookie(now: Optional[datetime] = None) -> CookieOptions:
    """Sentinel cookie that overwrites the session token and expires almost immediately."""
    now = now or datetime.now(timezone.utc)
    return CookieOptions(
        value=LOGOUT_COOKIE_VALUE,
        expires=now + LOGOUT_COOKIE_TTL,
        httponly=True,
    )
