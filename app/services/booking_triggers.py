"""Handlers fired once per created boarding / transportation booking.

Each handler sends a customer email and a business email, then marks the
booking with email_sent. A failed send leaves the flag unset, which is the
only record of the failure. A handler that runs twice for the same booking
may resend if the flag write failed the first time.
"""
import asyncio
import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.clock import utc_naive_now
from app.core.config import settings
from app.core.db import async_session_maker
from app.core.errors import NotificationError
from app.models.booking import BoardingBooking, PetTransportation
from app.services.email_service import (
    build_boarding_business_html,
    build_boarding_customer_html,
    build_transportation_business_html,
    build_transportation_customer_html,
    send_email,
)

logger = logging.getLogger(__name__)

EmailSender = Callable[[str, str, str], None]


async def _notify_booking_created(
    session_factory: async_sessionmaker[AsyncSession],
    model: type[BoardingBooking] | type[PetTransportation],
    booking_id: int,
    render: Callable[[BoardingBooking | PetTransportation], list[tuple[str, str, str]]],
    sender: EmailSender,
) -> bool:
    label = model.__tablename__
    async with session_factory() as session:
        booking = await session.get(model, booking_id)
        if booking is None:
            logger.error("No %s document with id %s", label, booking_id)
            return False
        if not booking.customer_email:
            logger.error("Missing customer email on %s %s", label, booking_id)
            return False
        try:
            for to_email, subject, html in render(booking):
                await asyncio.to_thread(sender, to_email, subject, html)
        except NotificationError:
            logger.exception("Sending %s notification emails failed for %s", label, booking_id)
            return False
        booking.email_sent = True
        booking.email_sent_at = utc_naive_now()
        session.add(booking)
        try:
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            logger.exception("Emails sent but marking %s %s failed", label, booking_id)
            return False
    logger.info("%s notification emails sent for booking %s", label, booking_id)
    return True


def _boarding_emails(booking: BoardingBooking) -> list[tuple[str, str, str]]:
    return [
        (
            booking.customer_email,
            f"Pet Boarding Request Received - {settings.site_name}",
            build_boarding_customer_html(booking),
        ),
        (
            settings.notification_inbox,
            f"New Pet Boarding Request - {booking.pet_name}",
            build_boarding_business_html(booking),
        ),
    ]


def _transportation_emails(booking: PetTransportation) -> list[tuple[str, str, str]]:
    return [
        (
            booking.customer_email,
            f"Pet Transportation Request Received - {settings.site_name}",
            build_transportation_customer_html(booking),
        ),
        (
            settings.notification_inbox,
            f"New Pet Transportation Request - {booking.pet_name}",
            build_transportation_business_html(booking),
        ),
    ]


async def on_boarding_booking_created(
    booking_id: int,
    session_factory: async_sessionmaker[AsyncSession] = async_session_maker,
    sender: EmailSender = send_email,
) -> bool:
    return await _notify_booking_created(
        session_factory, BoardingBooking, booking_id, _boarding_emails, sender
    )


async def on_pet_transportation_created(
    booking_id: int,
    session_factory: async_sessionmaker[AsyncSession] = async_session_maker,
    sender: EmailSender = send_email,
) -> bool:
    return await _notify_booking_created(
        session_factory, PetTransportation, booking_id, _transportation_emails, sender
    )
