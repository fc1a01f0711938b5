from ticket_accounts.models.user import User
from ticket_accounts.models.event import Event
from ticket_accounts.models.reservation import Reservation

__all__ = ["User", "Event", "Reservation"]
