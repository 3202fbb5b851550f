"""
Journey Backend — Trip Service (Creation Orchestrator)
=======================================================

What:  Turns a validated CreateTripRequest into a persisted trip and kicks off
       the owner confirmation email.
Why:   Keeps the "commit first, notify later" ordering in one place,
       independent of HTTP.

Orchestration Flow (POST /trips):
    ┌──────────┐    ┌──────────────────┐    ┌──────────┐
    │  Route   │───▶│ Store.create_trip│───▶│ Response │
    │(validated│    │ (one transaction)│    │   201    │
    │  body)   │    └──────────────────┘    └──────────┘
    └──────────┘              │
                              └──▶ detached task: Mailer.send_trip_confirmation
                                   (failure logged, never surfaced)
"""

import logging
from uuid import UUID

from journey.exceptions import MailerError, RequestFailedError, StoreError
from journey.schemas.trip import CreateTripRequest, CreateTripResponse
from journey.services.background import BackgroundDispatcher
from journey.services.mailer_base import Mailer
from journey.services.store_base import TripStore

logger = logging.getLogger(__name__)


class TripService:
    """
    Business logic for trip creation.

    Holds no per-request state: the store, mailer and dispatcher are shared,
    immutable collaborators injected at startup.
    """

    def __init__(self, store: TripStore, mailer: Mailer, dispatcher: BackgroundDispatcher):
        self.store = store
        self.mailer = mailer
        self.dispatcher = dispatcher

    async def create_trip(self, request: CreateTripRequest) -> CreateTripResponse:
        """
        Persist the trip with its invitees, then schedule the owner email.

        Raises:
            RequestFailedError: The store failed at any step; nothing was
                persisted. The cause is logged here, not returned.
        """
        try:
            trip_id = await self.store.create_trip(request)
        except StoreError as e:
            logger.error(
                "Failed to create trip: %s | Context: %s", e.message, e.context
            )
            raise RequestFailedError(
                message="Failed to create trip. Try again later.",
                context=e.context,
            ) from e

        # Only the id crosses into the detached task
        self.dispatcher.spawn(
            self._send_owner_confirmation(trip_id),
            name=f"trip-confirmation-email-{trip_id}",
        )
        return CreateTripResponse(trip_id=trip_id)

    async def _send_owner_confirmation(self, trip_id: UUID) -> None:
        try:
            await self.mailer.send_trip_confirmation(trip_id)
        except MailerError as e:
            logger.error(
                "Failed to send confirmation email to trip owner: trip_id=%s %s | Context: %s",
                trip_id,
                e.message,
                e.context,
            )
