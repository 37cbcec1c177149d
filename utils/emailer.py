import logging
import smtplib
from email.message import EmailMessage
from html import escape

logger = logging.getLogger(__name__)


class Mailer:
    """SMTP transport built from app config; one instance lives in ``app.extensions``."""

    def __init__(self, host=None, port=587, username=None, password=None, from_email=None, use_tls=True):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email or username
        self.use_tls = use_tls

    @classmethod
    def from_config(cls, config):
        return cls(
            host=config.get("SMTP_HOST"),
            port=config.get("SMTP_PORT", 587),
            username=config.get("SMTP_USERNAME"),
            password=config.get("SMTP_PASSWORD"),
            from_email=config.get("SMTP_FROM_EMAIL"),
            use_tls=config.get("SMTP_USE_TLS", True),
        )

    def send(self, to_email: str, subject: str, html: str):
        """Returns ``(sent, error)``; never raises for transport failures."""
        if not self.host or not self.from_email:
            return False, "Email not configured"
        if not to_email:
            return False, "Missing recipient"

        msg = EmailMessage()
        msg["From"] = self.from_email
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
            return True, None
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("Sending '%s' to %s failed: %s", subject, to_email, exc)
            return False, str(exc)


def _details(service_name, date_str, time_str, duration, price):
    return (
        "<h2>Booking Details:</h2>"
        "<ul>"
        f"<li>Service: {escape(service_name)}</li>"
        f"<li>Date: {date_str}</li>"
        f"<li>Time: {time_str}</li>"
        f"<li>Duration: {duration} minutes</li>"
        f"<li>Price: ${price:.2f}</li>"
        "</ul>"
    )


def _when(start_time):
    # e.g. "January 6, 2031" and "9:00 AM"
    date_str = f"{start_time.strftime('%B')} {start_time.day}, {start_time.year}"
    hour = start_time.hour % 12 or 12
    time_str = f"{hour}:{start_time.minute:02d} {'AM' if start_time.hour < 12 else 'PM'}"
    return date_str, time_str


def booking_confirmation_email(customer_name, provider_name, service_name, start_time, duration, price) -> str:
    date_str, time_str = _when(start_time)
    return (
        "<h1>Booking Confirmation</h1>"
        f"<p>Hello {escape(customer_name)},</p>"
        f"<p>Your booking with {escape(provider_name)} has been received.</p>"
        + _details(service_name, date_str, time_str, duration, price)
        + "<p>Thank you for choosing our service!</p>"
    )


def provider_notification_email(provider_name, customer_name, service_name, start_time, duration, price) -> str:
    date_str, time_str = _when(start_time)
    return (
        "<h1>New Booking Notification</h1>"
        f"<p>Hello {escape(provider_name)},</p>"
        f"<p>You have received a new booking from {escape(customer_name)}.</p>"
        + _details(service_name, date_str, time_str, duration, price)
        + "<p>Please log in to your dashboard to manage this booking.</p>"
    )
