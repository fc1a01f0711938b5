"""
Self-service account operations: profile read, profile update and account deletion.

ACCOUNT DELETION
================

Deleting an account also removes every reservation the user holds, and the
tickets behind those reservations go back on sale:

  1. Load the user (404 if it is already gone)
  2. List the user's reservations
  3. For each reservation, one at a time, credit its ticket_amount back to
     the event's available_tickets. Reservations whose event no longer
     exists are skipped.
  4. Bulk-delete the reservations
  5. Delete the user

The credit is a single UPDATE ... SET available_tickets = available_tickets + n,
so two reservations for the same event can never overwrite each other's
credit. All steps share the request transaction: any failure rolls the whole
sequence back instead of leaving inventory credited for reservations that
still exist.
"""

from typing import Any

from pydantic import ValidationError
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_accounts.models.user import User
from ticket_accounts.models.event import Event
from ticket_accounts.models.reservation import Reservation
from ticket_accounts.schemas.user import UserUpdate
from ticket_accounts.core.config import get_settings
from ticket_accounts.core.exceptions import AccountError, BadRequestError, NotFoundError, ServerError
from ticket_accounts.core.logging import get_logger
from ticket_accounts.core.metrics import record_auth_attempt, record_account_deletion

logger = get_logger(__name__)

UPDATABLE_FIELDS = ("name", "tel")

DELETED_MESSAGE = "User account and all associated reservations deleted successfully"


def pick_profile_changes(payload: Any) -> dict:
    """Copy the allow-listed profile fields out of a request body, ignoring everything else."""
    if not isinstance(payload, dict):
        return {}
    changes = {}
    for field in UPDATABLE_FIELDS:
        if payload.get(field) is not None:
            changes[field] = payload[field]
    return changes


async def update_profile(db: AsyncSession, user_id: int, payload: Any) -> User:
    """Update name and/or tel of the user. Nothing else is writable here."""
    changes = pick_profile_changes(payload)
    if not changes:
        raise BadRequestError("Please provide name or tel to update")

    try:
        UserUpdate.model_validate(changes)
    except ValidationError as exc:
        logger.warning("profile_update_rejected", user_id=user_id, error_count=exc.error_count())
        record_auth_attempt("update", "rejected")
        raise BadRequestError("Invalid name or tel")

    try:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError()

        for field, value in changes.items():
            setattr(user, field, value)
        await db.flush()
        await db.refresh(user)

    except AccountError:
        raise
    except Exception as exc:
        logger.exception("profile_update_failed", user_id=user_id)
        record_auth_attempt("update", "error")
        raise ServerError(exc, expose=not get_settings().is_production)

    logger.info("profile_updated", user_id=user_id, fields=sorted(changes))
    record_auth_attempt("update", "success")
    return user


async def restore_tickets(db: AsyncSession, reservation: Reservation) -> int:
    """
    Credit a reservation's tickets back to its event.
    Returns the number of tickets restored (0 for orphaned reservations).
    """
    if reservation.event_id is None:
        logger.info("ticket_restore_skipped", reservation_id=reservation.id, reason="no_event")
        return 0

    result = await db.execute(
        update(Event)
        .where(Event.id == reservation.event_id)
        .values(
            available_tickets=Event.available_tickets + reservation.ticket_amount,
            version=Event.version + 1,
        )
        # Loaded Event objects are not synchronized; callers refresh if they need the new count
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.info(
            "ticket_restore_skipped",
            reservation_id=reservation.id,
            event_id=reservation.event_id,
            reason="event_missing",
        )
        return 0

    return reservation.ticket_amount


async def delete_account(db: AsyncSession, user_id: int) -> int:
    """
    Delete the user, their reservations, and return tickets to events.
    Returns the total number of tickets restored.
    """
    try:
        user = await db.get(User, user_id)
        if user is None:
            record_account_deletion("not_found")
            raise NotFoundError()

        result = await db.execute(
            select(Reservation)
            .where(Reservation.user_id == user_id)
            .order_by(Reservation.id)
        )
        reservations = list(result.scalars().all())

        # One at a time: several reservations may credit the same event
        restored = 0
        for reservation in reservations:
            restored += await restore_tickets(db, reservation)

        await db.execute(delete(Reservation).where(Reservation.user_id == user_id))
        # User goes last, after everything that references it
        await db.execute(delete(User).where(User.id == user_id))
        await db.flush()

    except AccountError:
        raise
    except Exception as exc:
        await db.rollback()
        logger.exception("account_deletion_failed", user_id=user_id)
        record_account_deletion("error")
        raise ServerError(exc, expose=not get_settings().is_production)

    logger.info(
        "account_deleted",
        user_id=user_id,
        reservations=len(reservations),
        tickets_restored=restored,
    )
    record_account_deletion("success", restored)
    return restored
