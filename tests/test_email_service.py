"""Email rendering and delivery failure handling."""
import smtplib
from datetime import datetime

import pytest

from app.core.config import settings
from app.core.errors import NotificationError
from app.models.appointment import AppointmentPublic, AppointmentStatus
from app.services import email_service
from app.services.email_service import (
    build_appointment_status_html,
    build_provider_new_appointment_html,
    send_appointment_status_email,
    send_email,
    send_provider_new_appointment_email,
)


def make_appointment(status: AppointmentStatus, client_email: str | None = "asha@petmail.com") -> AppointmentPublic:
    return AppointmentPublic(
        id=12,
        provider_id=1,
        provider_name="Meera Rao",
        slot_id=3,
        appointment_date=datetime(2026, 3, 13),
        start_time="09:00",
        end_time="09:30",
        client_name="Asha & family",
        client_email=client_email,
        pet_name="Bruno",
        status=status,
        created_at=datetime(2026, 3, 1),
        updated_at=datetime(2026, 3, 1),
    )


@pytest.mark.parametrize(
    "status,heading",
    [
        (AppointmentStatus.PENDING, "Appointment Booked"),
        (AppointmentStatus.CONFIRMED, "Appointment Confirmed"),
        (AppointmentStatus.COMPLETED, "Appointment Completed"),
        (AppointmentStatus.CANCELLED, "Appointment Cancelled"),
    ],
)
def test_status_email_copy(status, heading):
    subject, html = build_appointment_status_html(make_appointment(status))
    assert subject == f"{heading} - {settings.site_name}"
    assert "Hi Asha &amp; family" in html
    assert "Friday, March 13, 2026" in html
    assert "Dr. Meera Rao" in html


def test_send_is_skipped_without_smtp(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "")

    def fail(*args, **kwargs):
        raise AssertionError("SMTP must not be contacted")

    monkeypatch.setattr(email_service.smtplib, "SMTP", fail)
    send_email("asha@petmail.com", "Hello", "<p>hi</p>")


class RefusingSMTP:
    def __init__(self, *args, **kwargs):
        raise smtplib.SMTPConnectError(421, "try later")


def test_smtp_failure_raises_notification_error(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.petmail.com")
    monkeypatch.setattr(settings, "smtp_user", "mailer")
    monkeypatch.setattr(settings, "smtp_password", "secret")
    monkeypatch.setattr(settings, "from_email", "bookings@petzify.com")
    monkeypatch.setattr(email_service.smtplib, "SMTP", RefusingSMTP)
    with pytest.raises(NotificationError):
        send_email("asha@petmail.com", "Hello", "<p>hi</p>")


def test_status_email_failure_is_swallowed_and_logged(monkeypatch, caplog):
    def refuse(*args, **kwargs):
        raise NotificationError("Email failed: try later")

    monkeypatch.setattr(email_service, "send_email", refuse)
    send_appointment_status_email(make_appointment(AppointmentStatus.CONFIRMED))
    assert "Status email for appointment 12 not delivered" in caplog.text


def test_status_email_needs_client_address(monkeypatch):
    monkeypatch.setattr(email_service, "send_email", lambda *a: pytest.fail("no address, no email"))
    send_appointment_status_email(make_appointment(AppointmentStatus.CONFIRMED, client_email=None))


def test_provider_notice_for_new_booking():
    appointment = make_appointment(AppointmentStatus.PENDING)
    subject, html = build_provider_new_appointment_html(appointment)
    assert subject == "New Appointment Request - Asha & family"
    assert "Dr. Meera Rao" in html
    assert "(#12)" in html
    assert "asha@petmail.com" in html
    assert "Please review this appointment request in your dashboard." in html


def test_provider_notice_is_best_effort(monkeypatch, caplog):
    sent: list[str] = []

    def refuse(to_email, subject, html):
        sent.append(to_email)
        raise NotificationError("Email failed: mailbox full")

    monkeypatch.setattr(email_service, "send_email", refuse)
    send_provider_new_appointment_email(make_appointment(AppointmentStatus.PENDING), None)
    assert sent == []
    send_provider_new_appointment_email(make_appointment(AppointmentStatus.PENDING), "meera@petzify.com")
    assert sent == ["meera@petzify.com"]
    assert "Provider email for appointment 12 not delivered" in caplog.text
