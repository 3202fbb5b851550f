"""
Journey Backend — Participant Service (Confirmation State Machine)
==================================================================

What:  Confirms a participant's attendance.
How:   parse id → look up → refuse if already confirmed → conditional update.

State machine:
    unconfirmed ──confirm──▶ confirmed (terminal)
    confirmed   ──confirm──▶ AlreadyConfirmedError, state unchanged

    The lookup gives precise errors ("not found" vs "already confirmed");
    the conditional update in the store closes the gap between lookup and
    write, so of two concurrent confirmations exactly one wins.
"""

import logging
from uuid import UUID

from journey.exceptions import (
    AlreadyConfirmedError,
    InvalidIdentifierError,
    NotFoundError,
    RequestFailedError,
    StoreError,
)
from journey.services.store_base import TripStore

logger = logging.getLogger(__name__)


class ParticipantService:
    """Business logic for participant confirmation."""

    def __init__(self, store: TripStore):
        self.store = store

    async def confirm_participant(self, raw_participant_id: str) -> None:
        """
        Confirm the participant identified by `raw_participant_id`.

        Raises:
            InvalidIdentifierError: Not a UUID.
            NotFoundError: No such participant.
            AlreadyConfirmedError: Confirmed before, or by a concurrent request.
            RequestFailedError: Store failure (logged with the id).
        """
        participant_id = parse_uuid(raw_participant_id)

        try:
            participant = await self.store.get_participant(participant_id)
        except NotFoundError:
            raise
        except StoreError as e:
            logger.error(
                "Failed to get participant during confirmation: participant_id=%s | Context: %s",
                raw_participant_id,
                e.context,
            )
            raise RequestFailedError() from e

        if participant.is_confirmed:
            raise AlreadyConfirmedError(participant_id=str(participant_id))

        try:
            transitioned = await self.store.confirm_participant(participant_id)
        except StoreError as e:
            logger.error(
                "Failed to confirm participant: participant_id=%s | Context: %s",
                raw_participant_id,
                e.context,
            )
            raise RequestFailedError() from e

        if not transitioned:
            raise AlreadyConfirmedError(participant_id=str(participant_id))

        logger.info("Participant %s confirmed", participant_id)


def parse_uuid(value: str) -> UUID:
    """Parse a path identifier, raising InvalidIdentifierError when malformed."""
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError(value=str(value)) from None
