import logging
import smtplib
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.core.config import settings
from app.core.errors import NotificationError
from app.models.appointment import AppointmentPublic, AppointmentStatus
from app.models.booking import BoardingBooking, PetTransportation

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, html_body: str) -> None:
    """Send email via SMTP (blocking). Raises NotificationError when delivery fails."""
    if not settings.email_enabled:
        logger.debug("Email disabled (SMTP not configured), skipping send to %s", to_email)
        return
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.from_name} <{settings.from_email}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.from_email, [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to_email, e)
        raise NotificationError(f"Email failed: {e}") from e
    logger.info("Email sent to %s", to_email)


def _html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _text(value: object | None, fallback: str = "Not provided") -> str:
    if value is None or value == "":
        return fallback
    return _html_escape(str(value))


def _format_day(value: datetime | None) -> str:
    return value.strftime("%A, %B %d, %Y") if value else "N/A"


def _render_email(title: str, heading: str, intro: str, rows: list[tuple[str, str]], closing: str = "") -> str:
    """Shared card layout; row values must already be escaped."""
    logo_html = ""
    if settings.email_logo_url:
        logo_html = f'<img src="{settings.email_logo_url}" alt="{settings.site_name}" width="120" style="display:block;margin-bottom:24px;" />'
    detail_rows = "".join(
        f"""
                <tr>
                  <td style="padding:8px 24px;font-size:12px;text-transform:uppercase;letter-spacing:0.5px;color:#6b7280;width:40%;">{label}</td>
                  <td style="padding:8px 24px;font-size:15px;font-weight:600;color:#111827;">{value}</td>
                </tr>"""
        for label, value in rows
    )
    closing_html = f'<p style="margin:0 0 8px 0;font-size:14px;color:#374151;">{closing}</p>' if closing else ""
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
</head>
<body style="margin:0;padding:0;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Oxygen,Ubuntu,sans-serif;background-color:#f3f4f6;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color:#f3f4f6;">
    <tr>
      <td align="center" style="padding:40px 16px;">
        <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width:560px;background:#ffffff;border-radius:12px;box-shadow:0 4px 6px rgba(0,0,0,0.05);overflow:hidden;">
          <tr>
            <td style="padding:32px 32px 24px 32px;">
              {logo_html}
              <h1 style="margin:0 0 8px 0;font-size:22px;font-weight:600;color:#111827;">{heading}</h1>
              <p style="margin:0 0 24px 0;font-size:15px;color:#6b7280;">{intro}</p>
              <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background:#f9fafb;border-radius:8px;margin-bottom:24px;">{detail_rows}
              </table>
              {closing_html}
            </td>
          </tr>
          <tr>
            <td style="padding:24px 32px 32px 32px;background:#f9fafb;border-top:1px solid #e5e7eb;">
              <p style="margin:0 0 4px 0;font-size:13px;font-weight:600;color:#111827;">{settings.site_name}</p>
              <p style="margin:0;font-size:13px;color:#6b7280;">
                {settings.contact_email} &nbsp;·&nbsp; {settings.contact_phone}<br>
                {settings.contact_address}
              </p>
              <p style="margin:8px 0 0 0;font-size:12px;color:#9ca3af;">© {datetime.now(UTC).year} {settings.site_name}. All rights reserved.</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def _customer_rows(booking: BoardingBooking | PetTransportation) -> list[tuple[str, str]]:
    return [
        ("Customer", _text(booking.customer_name)),
        ("Email", _text(booking.customer_email)),
        ("Phone", _text(booking.customer_phone)),
        ("Pet", _text(booking.pet_name)),
        ("Pet type", _text(booking.pet_type, "Not specified")),
        ("Pet size", _text(booking.pet_size, "Not specified")),
    ]


def build_boarding_customer_html(booking: BoardingBooking) -> str:
    return _render_email(
        title="Pet Boarding Request Received",
        heading="Boarding Request Received",
        intro=f"Dear {_text(booking.customer_name, 'there')}, we have received your boarding request for {_text(booking.pet_name)}.",
        rows=[
            ("Boarding center", _text(booking.center_name)),
            ("Address", _text(booking.center_address)),
            ("Check-in", _format_day(booking.check_in_date)),
            ("Check-out", _format_day(booking.check_out_date)),
            ("Pet type", _text(booking.pet_type, "Not specified")),
        ],
        closing=f"The boarding center will confirm your booking shortly. Questions? Write to {settings.contact_email}.",
    )


def build_boarding_business_html(booking: BoardingBooking) -> str:
    return _render_email(
        title="New Pet Boarding Request",
        heading="New Pet Boarding Request",
        intro=f"A new boarding request was placed at {_text(booking.center_name)}.",
        rows=_customer_rows(booking)
        + [
            ("Check-in", _format_day(booking.check_in_date)),
            ("Check-out", _format_day(booking.check_out_date)),
            ("Notes", _text(booking.notes, "None")),
        ],
        closing="Please review the request in the admin portal.",
    )


def build_transportation_customer_html(booking: PetTransportation) -> str:
    return _render_email(
        title="Pet Transportation Request Received",
        heading="Transportation Request Received",
        intro=f"Dear {_text(booking.customer_name, 'there')}, we have received your transportation request for {_text(booking.pet_name)}.",
        rows=[
            ("Pickup date", _format_day(booking.pickup_date)),
            ("Pickup address", _text(booking.pickup_address)),
            ("Drop-off address", _text(booking.dropoff_address)),
            ("Transport type", _text(booking.transport_type, "Standard")),
        ],
        closing=f"Our team will contact you to confirm the pickup. Questions? Write to {settings.contact_email}.",
    )


def build_transportation_business_html(booking: PetTransportation) -> str:
    return _render_email(
        title="New Pet Transportation Request",
        heading="New Pet Transportation Request",
        intro="A new pet transportation request was placed.",
        rows=_customer_rows(booking)
        + [
            ("Transport type", _text(booking.transport_type, "Standard")),
            ("Pickup address", _text(booking.pickup_address)),
            ("Drop-off address", _text(booking.dropoff_address)),
            ("Pickup date", _format_day(booking.pickup_date)),
            ("Notes", _text(booking.notes, "None")),
        ],
        closing="Please schedule the pickup in the admin portal.",
    )


def _appointment_rows(appointment: AppointmentPublic) -> list[tuple[str, str]]:
    return [
        ("Doctor", f"Dr. {_text(appointment.provider_name)}"),
        ("Date", _format_day(appointment.appointment_date)),
        ("Time", f"{appointment.start_time} – {appointment.end_time}"),
        ("Pet", _text(appointment.pet_name)),
    ]


_STATUS_COPY = {
    AppointmentStatus.PENDING: ("Appointment Booked", "your appointment request has been received and is awaiting confirmation."),
    AppointmentStatus.CONFIRMED: ("Appointment Confirmed", "your appointment has been confirmed."),
    AppointmentStatus.COMPLETED: ("Appointment Completed", "thank you for visiting us. Your appointment is complete."),
    AppointmentStatus.CANCELLED: ("Appointment Cancelled", "your appointment has been cancelled."),
}


def build_appointment_status_html(appointment: AppointmentPublic) -> tuple[str, str]:
    """Returns (subject, html) for the client email matching the appointment's status."""
    heading, sentence = _STATUS_COPY[AppointmentStatus(appointment.status)]
    html = _render_email(
        title=heading,
        heading=heading,
        intro=f"Hi {_text(appointment.client_name, 'there')}, {sentence}",
        rows=_appointment_rows(appointment),
        closing=f"If you need to reschedule or cancel, please contact us at least 24 hours in advance at {settings.contact_email}.",
    )
    return f"{heading} - {settings.site_name}", html


def send_appointment_status_email(appointment: AppointmentPublic) -> None:
    """Best-effort client notification (call from background task)."""
    if not appointment.client_email:
        return
    subject, html = build_appointment_status_html(appointment)
    try:
        send_email(appointment.client_email, subject, html)
    except NotificationError:
        logger.exception("Status email for appointment %s not delivered", appointment.id)


def build_provider_new_appointment_html(appointment: AppointmentPublic) -> tuple[str, str]:
    """Returns (subject, html) for the provider's new-booking notice."""
    pet = _text(appointment.pet_name)
    if appointment.pet_type:
        pet = f"{pet} ({_text(appointment.pet_type)})"
    html = _render_email(
        title="New Appointment Request",
        heading="New Appointment Request",
        intro=f"Dr. {_text(appointment.provider_name)}, a new appointment (#{appointment.id}) was booked in one of your slots.",
        rows=[
            ("Client", _text(appointment.client_name)),
            ("Email", _text(appointment.client_email)),
            ("Phone", _text(appointment.client_phone)),
            ("Pet", pet),
            ("Date", _format_day(appointment.appointment_date)),
            ("Time", f"{appointment.start_time} – {appointment.end_time}"),
            ("Notes", _text(appointment.notes, "Not specified")),
        ],
        closing="Please review this appointment request in your dashboard.",
    )
    return f"New Appointment Request - {appointment.client_name}", html


def send_provider_new_appointment_email(appointment: AppointmentPublic, provider_email: str | None) -> None:
    """Best-effort provider notification for a new booking (call from background task)."""
    if not provider_email:
        return
    subject, html = build_provider_new_appointment_html(appointment)
    try:
        send_email(provider_email, subject, html)
    except NotificationError:
        logger.exception("Provider email for appointment %s not delivered", appointment.id)
