"""
Shared route dependencies.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_accounts.core.exceptions import NotAuthorizedError
from ticket_accounts.core.security import get_current_user_id
from ticket_accounts.db.session import get_db
from ticket_accounts.models.user import User


async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Load the authenticated user; a valid token for a deleted user is rejected."""
    user = await db.get(User, user_id)
    if user is None:
        raise NotAuthorizedError()
    return user
