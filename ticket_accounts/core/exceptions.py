"""
Account API exceptions and their JSON rendering.

Every failure leaves the service as `{"success": false, ...}` with an
optional `message` and, outside production, an optional `error` detail.
"""

from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AccountError(Exception):
    """Base exception carrying the HTTP status and the client-facing message."""

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        error: Optional[str] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.error = error
        super().__init__(message or f"HTTP {status_code}")

    def to_content(self) -> dict:
        content = {"success": False}
        if self.message is not None:
            content["message"] = self.message
        if self.error is not None:
            content["error"] = self.error
        return content


class BadRequestError(AccountError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(400, message)


class NotAuthorizedError(AccountError):
    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(401, message)


class NotFoundError(AccountError):
    def __init__(self, message: str = "User not found"):
        super().__init__(404, message)


class ServerError(AccountError):
    """500 whose error text is only exposed outside production."""

    def __init__(self, exc: Exception, expose: bool):
        super().__init__(500, "Server Error", str(exc) if expose else None)


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed request bodies never leak parser detail
    return JSONResponse(status_code=400, content={"success": False})
