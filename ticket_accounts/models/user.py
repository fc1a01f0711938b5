"""
User model with secure password storage.

The password hash is a deferred column: ordinary reads never load it and
only the login path asks for it explicitly.
"""

from sqlalchemy import Column, Integer, String, CheckConstraint
from sqlalchemy.orm import deferred, relationship

from ticket_accounts.core.security import hash_password, verify_password
from ticket_accounts.db.base import Base, TimestampMixin

ROLES = ("member", "admin")


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    tel = Column(String(20), nullable=False)
    hashed_password = deferred(Column(String(255), nullable=False))
    role = Column(String(20), nullable=False, default="member")

    # Relationships
    reservations = relationship("Reservation", back_populates="user", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("role IN ('member', 'admin')", name="check_user_role"),
    )

    def set_password(self, password: str) -> None:
        self.hashed_password = hash_password(password)

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
