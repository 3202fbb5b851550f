"""
Journey Backend — Abstract Mailer Interface
============================================

What:  Contract for sending the "confirm your trip" email to a trip owner.
Why:   TripService only knows this interface; the SMTP implementation and the
       test doubles are interchangeable.
"""

from abc import ABC, abstractmethod
from uuid import UUID


class Mailer(ABC):
    """
    Owner-notification capability.

    Contract:
        - Resolves the trip itself from the id it is given
        - Never mutates trip or participant state
        - Every failure is raised as MailerError; callers only log it
    """

    @abstractmethod
    async def send_trip_confirmation(self, trip_id: UUID) -> None:
        """
        Email the owner of `trip_id` asking them to confirm the trip.

        Raises:
            MailerError: Trip lookup, address validation or delivery failed.
        """
        ...
