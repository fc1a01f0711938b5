"""
Event model with ticket inventory tracking.

`available_tickets` is decremented when tickets are reserved and credited
back when reservations are removed. `version` is bumped on every inventory
change so concurrent writers can detect each other.
"""

from sqlalchemy import Column, Integer, String, DateTime, Index, CheckConstraint
from sqlalchemy.orm import relationship

from ticket_accounts.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    date = Column(DateTime(timezone=True), nullable=False)
    venue = Column(String(255), nullable=True)
    total_tickets = Column(Integer, nullable=False)
    available_tickets = Column(Integer, nullable=False)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    reservations = relationship("Reservation", back_populates="event", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("available_tickets >= 0", name="check_available_tickets_non_negative"),
        CheckConstraint("total_tickets > 0", name="check_total_tickets_positive"),
        Index("ix_events_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, available={self.available_tickets}/{self.total_tickets})>"
