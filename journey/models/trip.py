"""
Journey Backend — Trip & Participant SQLAlchemy Models
=======================================================

What:  ORM models for the `trips` and `participants` tables.
Why:   Maps rows to Python objects for the store; Alembic mirrors them.
Who:   Used by SqlTripStore for every read and write, and by the mailer
       (through the store) to render the owner email.

Table Design Rationale:
    - UUID primary keys, generated in Python so the id is known right after
      flush (before commit), which lets participants reference a fresh trip
      inside the same transaction
    - TIMESTAMP WITH TIME ZONE for trip dates
    - participants.trip_id indexed: every participant lookup by trip uses it
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journey.database import Base


class Trip(Base):
    """
    A planned trip owned by one person.

    Lifecycle:
        1. Created together with its invited participants (one transaction)
        2. Read by the mailer to build the owner confirmation email
        3. Never deleted
    """

    __tablename__ = "trips"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    destination: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_email: Mapped[str] = mapped_column(String(320), nullable=False)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # Owner-side confirmation; the workflow that sets it is not built yet
    is_confirmed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    participants: Mapped[List["Participant"]] = relationship(
        back_populates="trip",
        cascade="all, delete-orphan",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Trip(id={self.id}, destination='{self.destination}')>"


class Participant(Base):
    """
    Someone invited to a trip.

    State machine:
        unconfirmed (is_confirmed=False) → confirmed (is_confirmed=True)
        The transition happens at most once; nothing moves a participant back.
    """

    __tablename__ = "participants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    is_confirmed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    trip: Mapped[Trip] = relationship(back_populates="participants", lazy="raise")

    __table_args__ = (
        Index("idx_participants_trip_id", "trip_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Participant(id={self.id}, trip_id={self.trip_id}, "
            f"is_confirmed={self.is_confirmed})>"
        )
