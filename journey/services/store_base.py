"""
Journey Backend — Abstract Trip Store Interface
================================================

What:  Abstract base class for every persistence operation of the core.
Why:   TripService, ParticipantService and the mailer depend on this contract
       only, so tests can substitute an in-memory store and production wires
       in SqlTripStore.
How:   Concrete implementations inherit from TripStore and implement all
       abstract methods. They translate driver exceptions into StoreError and
       missing rows into NotFoundError.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from journey.models.trip import Participant, Trip
from journey.schemas.trip import CreateTripRequest


class TripStore(ABC):
    """
    Persistence contract for trips and participants.

    Contract:
        - Only the store issues writes
        - create_trip is all-or-nothing
        - confirm_participant is a conditional transition, never a blind write
    """

    @abstractmethod
    async def create_trip(self, request: CreateTripRequest) -> UUID:
        """
        Insert a trip and one participant per invitee in one transaction.

        Returns:
            The new trip's id.

        Raises:
            StoreError: begin, insert_trip, insert_participants or commit
                failed. Nothing was persisted.
        """
        ...

    @abstractmethod
    async def get_trip(self, trip_id: UUID) -> Trip:
        """
        Raises:
            NotFoundError: No trip with that id.
            StoreError: The query itself failed.
        """
        ...

    @abstractmethod
    async def get_participant(self, participant_id: UUID) -> Participant:
        """
        Raises:
            NotFoundError: No participant with that id.
            StoreError: The query itself failed.
        """
        ...

    @abstractmethod
    async def confirm_participant(self, participant_id: UUID) -> bool:
        """
        Move a participant from unconfirmed to confirmed.

        Returns:
            True if this call performed the transition, False if the row was
            already confirmed (or does not exist) when the update ran.

        Raises:
            StoreError: The update failed.
        """
        ...
