"""
Journey Backend — SMTP Mailer
==============================

What:  Mailer implementation that delivers the owner confirmation email over
       SMTP (Mailpit on localhost:1025 in development).
How:   1. Load the trip through the store
       2. Validate sender and recipient addresses
       3. Build a multipart (plain text + HTML) message
       4. Send it with smtplib inside Starlette's thread pool, so the blocking
          socket I/O never stalls the event loop
Who:   Invoked by TripService from a detached background task.
"""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from starlette.concurrency import run_in_threadpool

from journey.config import Settings
from journey.exceptions import JourneyError, MailerError
from journey.models.trip import Trip
from journey.services.mailer_base import Mailer
from journey.services.store_base import TripStore

logger = logging.getLogger(__name__)


class SmtpMailer(Mailer):
    """Sends one message per call; opens a fresh SMTP connection each time."""

    SUBJECT = "Confirm Your Trip"

    def __init__(self, store: TripStore, settings: Settings):
        self.store = store
        self.settings = settings

    async def send_trip_confirmation(self, trip_id: UUID) -> None:
        try:
            trip = await self.store.get_trip(trip_id)
        except JourneyError as e:
            raise MailerError(
                message="failed to load trip for confirmation email",
                context={"trip_id": str(trip_id), "cause": e.message},
            ) from e

        sender = self._checked_address(self.settings.mail_sender, "sender", trip_id)
        recipient = self._checked_address(trip.owner_email, "recipient", trip_id)
        message = self.build_message(trip, sender, recipient)

        try:
            await run_in_threadpool(self._deliver, sender, recipient, message)
        except (smtplib.SMTPException, OSError) as e:
            raise MailerError(
                message="failed to send confirmation email",
                context={"trip_id": str(trip_id), "error_type": type(e).__name__},
            ) from e

        logger.info("Confirmation email for trip %s sent to owner", trip_id)

    def _checked_address(self, address: str, role: str, trip_id: UUID) -> str:
        try:
            return validate_email(address, check_deliverability=False).normalized
        except EmailNotValidError as e:
            raise MailerError(
                message=f"invalid {role} address",
                context={"trip_id": str(trip_id), "role": role},
            ) from e

    def confirm_link(self, trip: Trip) -> str:
        return f"{self.settings.app_base_url.rstrip('/')}/trips/{trip.id}/confirm"

    def build_message(self, trip: Trip, sender: str, recipient: str) -> MIMEMultipart:
        start_date = trip.starts_at.date().isoformat()
        link = self.confirm_link(trip)

        message = MIMEMultipart("alternative")
        message["From"] = sender
        message["To"] = recipient
        message["Subject"] = self.SUBJECT

        text = (
            f"Hello, {trip.owner_name},\n\n"
            f"Your trip to {trip.destination} on {start_date} must be confirmed.\n\n"
            f"Confirm Trip: {link}\n"
        )
        body = f"""
        <html>
          <body>
            <p>Hello, {html.escape(trip.owner_name)},<br><br>
               Your trip to <b>{html.escape(trip.destination)}</b> on {start_date} must be confirmed.<br><br>
               <a href="{html.escape(link)}">Confirm Trip</a>
            </p>
          </body>
        </html>
        """

        # Last part is the preferred one for mail clients
        message.attach(MIMEText(text, "plain", "utf-8"))
        message.attach(MIMEText(body, "html", "utf-8"))
        return message

    def _deliver(self, sender: str, recipient: str, message: MIMEMultipart) -> None:
        s = self.settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout) as server:
            if s.smtp_use_tls:
                server.starttls()
            if s.smtp_username:
                server.login(s.smtp_username, s.smtp_password)
            server.sendmail(sender, [recipient], message.as_string())
