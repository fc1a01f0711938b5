"""
Reservation model: tickets a user holds for an event.

Reservations are removed together with their owner. The event reference
is nulled if the event itself is deleted, leaving an orphan that account
deletion tolerates.
"""

from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from ticket_accounts.db.base import Base, TimestampMixin


class Reservation(Base, TimestampMixin):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="SET NULL"), nullable=True, index=True)
    ticket_amount = Column(Integer, nullable=False, default=1)

    # Relationships
    user = relationship("User", back_populates="reservations")
    event = relationship("Event", back_populates="reservations")

    __table_args__ = (
        CheckConstraint("ticket_amount > 0", name="check_reservation_ticket_amount_positive"),
    )

    def __repr__(self) -> str:
        return f"<Reservation(id={self.id}, user={self.user_id}, event={self.event_id}, tickets={self.ticket_amount})>"
