from ticket_accounts.schemas.user import (
    UserCreate, UserLogin, UserUpdate, UserResponse, UserEnvelope,
    TokenResponse, LogoutResponse, MessageResponse,
)

__all__ = [
    "UserCreate", "UserLogin", "UserUpdate", "UserResponse", "UserEnvelope",
    "TokenResponse", "LogoutResponse", "MessageResponse",
]
