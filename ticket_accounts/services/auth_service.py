"""
Authentication service handling user registration and login.

Failures are deliberately vague towards the caller: registration never says
why it failed, and login answers unknown emails and wrong passwords with the
same message so accounts cannot be enumerated.
"""

from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from ticket_accounts.models.user import User
from ticket_accounts.schemas.user import UserCreate, UserLogin
from ticket_accounts.core.exceptions import AccountError, BadRequestError, NotAuthorizedError
from ticket_accounts.core.logging import get_logger
from ticket_accounts.core.metrics import record_auth_attempt

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


async def register_user(db: AsyncSession, payload: Any) -> User:
    """
    Register a new user with hashed password.
    Raises a bare 400 on any failure; the reason only goes to the log.
    """
    try:
        user_data = UserCreate.model_validate(payload)
    except ValidationError as exc:
        logger.warning("registration_failed", reason="validation", error_count=exc.error_count())
        record_auth_attempt("register", "rejected")
        raise BadRequestError()

    result = await db.execute(select(User.id).where(User.email == user_data.email))
    if result.scalar_one_or_none() is not None:
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        record_auth_attempt("register", "rejected")
        raise BadRequestError()

    user = User(
        name=user_data.name,
        email=user_data.email,
        tel=user_data.tel,
        role=user_data.role,
    )
    try:
        user.set_password(user_data.password)
        db.add(user)
        await db.flush()
        await db.refresh(user)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        logger.warning("registration_failed", reason="integrity_error", email=user_data.email)
        record_auth_attempt("register", "rejected")
        raise BadRequestError()
    except Exception:
        await db.rollback()
        logger.exception("registration_failed", reason="unexpected", email=user_data.email)
        record_auth_attempt("register", "error")
        raise BadRequestError()

    logger.info("user_registered", user_id=user.id, email=user.email, role=user.role)
    record_auth_attempt("register", "success")
    return user


async def authenticate_user(db: AsyncSession, payload: Any) -> User:
    """
    Check email and password and return the matching user.
    Unexpected failures answer 401, never 500.
    """
    if not isinstance(payload, dict) or not payload.get("email") or not payload.get("password"):
        record_auth_attempt("login", "rejected")
        raise BadRequestError("Please provide an email and password")

    try:
        login_data = UserLogin.model_validate(payload)
        result = await db.execute(
            select(User)
            .options(undefer(User.hashed_password))
            .where(User.email == login_data.email)
        )
        user = result.scalar_one_or_none()

        if user is None:
            logger.warning("login_failed", reason="unknown_email")
            record_auth_attempt("login", "rejected")
            raise BadRequestError(INVALID_CREDENTIALS)

        if not user.check_password(login_data.password):
            logger.warning("login_failed", reason="password_mismatch", user_id=user.id)
            record_auth_attempt("login", "rejected")
            raise NotAuthorizedError(INVALID_CREDENTIALS)

    except AccountError:
        raise
    except Exception as exc:
        logger.warning("login_failed", reason="unexpected", error_type=type(exc).__name__)
        record_auth_attempt("login", "error")
        raise NotAuthorizedError("Cannot convert email or password to string")

    logger.info("user_logged_in", user_id=user.id)
    record_auth_attempt("login", "success")
    return user
