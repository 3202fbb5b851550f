"""
Journey Backend — SQLAlchemy Trip Store
========================================

What:  TripStore implementation backed by the async SQLAlchemy engine.
Why:   Owns the one multi-row write of the core (trip + participants) and the
       guarded participant transition.
How:   create_trip runs each step of its transaction separately so a failure
       is reported with the step that failed; every failure rolls the whole
       transaction back.

Transaction layout (create_trip):
    begin ──▶ insert trip (flush → id) ──▶ bulk insert participants ──▶ commit
      │              │                            │                       │
      └──────────────┴──────── any failure: rollback, StoreError ─────────┘
"""

import asyncio
import logging
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from journey.database import Database
from journey.exceptions import NotFoundError, StoreError
from journey.models.trip import Participant, Trip
from journey.schemas.trip import CreateTripRequest
from journey.services.store_base import TripStore

logger = logging.getLogger(__name__)

# SQLAlchemy only wraps DBAPI errors. asyncpg connection failures surface raw
# from pool checkout: OSError for refused/reset sockets, TimeoutError on connect
STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class SqlTripStore(TripStore):
    """Relational store. One short-lived session per operation."""

    def __init__(self, database: Database):
        self.database = database

    async def create_trip(self, request: CreateTripRequest) -> UUID:
        async with self.database.session() as session:
            try:
                await self._begin(session)
                trip_id = await self._insert_trip(session, request)
                await self._insert_participants(session, trip_id, request.emails_to_invite)
                await self._commit(session)
            except Exception:
                await session.rollback()
                raise

        logger.info(
            "Trip %s created with %d invited participants",
            trip_id,
            len(request.emails_to_invite),
        )
        return trip_id

    async def _begin(self, session: AsyncSession) -> None:
        try:
            await session.begin()
            # Check out the pooled connection now so an unreachable database
            # is reported as a begin failure
            await session.connection()
        except STORE_ERRORS as e:
            raise StoreError(
                step="begin",
                message="failed to begin transaction for create_trip",
                context={"error_type": type(e).__name__},
            ) from e

    async def _insert_trip(self, session: AsyncSession, request: CreateTripRequest) -> UUID:
        trip = Trip(
            destination=request.destination,
            owner_name=request.owner_name,
            owner_email=str(request.owner_email),
            starts_at=request.starts_at,
            ends_at=request.ends_at,
        )
        session.add(trip)
        try:
            await session.flush()
        except STORE_ERRORS as e:
            raise StoreError(
                step="insert_trip",
                message="failed to insert trip for create_trip",
                context={"error_type": type(e).__name__},
            ) from e
        return trip.id

    async def _insert_participants(
        self, session: AsyncSession, trip_id: UUID, emails: list
    ) -> None:
        # An empty parameter list would execute a single-row INSERT
        if not emails:
            return
        try:
            await session.execute(
                insert(Participant),
                [{"trip_id": trip_id, "email": str(email)} for email in emails],
            )
        except STORE_ERRORS as e:
            raise StoreError(
                step="insert_participants",
                message="failed to insert participants for create_trip",
                context={"trip_id": str(trip_id), "error_type": type(e).__name__},
            ) from e

    async def _commit(self, session: AsyncSession) -> None:
        try:
            await session.commit()
        except STORE_ERRORS as e:
            raise StoreError(
                step="commit",
                message="failed to commit transaction for create_trip",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_trip(self, trip_id: UUID) -> Trip:
        try:
            async with self.database.session() as session:
                result = await session.execute(select(Trip).where(Trip.id == trip_id))
                trip = result.scalar_one_or_none()
        except STORE_ERRORS as e:
            raise StoreError(
                step="get_trip",
                context={"trip_id": str(trip_id), "error_type": type(e).__name__},
            ) from e

        if trip is None:
            raise NotFoundError(resource="trip", resource_id=str(trip_id))
        return trip

    async def get_participant(self, participant_id: UUID) -> Participant:
        try:
            async with self.database.session() as session:
                result = await session.execute(
                    select(Participant).where(Participant.id == participant_id)
                )
                participant = result.scalar_one_or_none()
        except STORE_ERRORS as e:
            raise StoreError(
                step="get_participant",
                context={"participant_id": str(participant_id), "error_type": type(e).__name__},
            ) from e

        if participant is None:
            raise NotFoundError(resource="participant", resource_id=str(participant_id))
        return participant

    async def confirm_participant(self, participant_id: UUID) -> bool:
        # Guarded by the prior state: of two concurrent confirmations only one
        # matches `is_confirmed = false`
        stmt = (
            update(Participant)
            .where(Participant.id == participant_id, Participant.is_confirmed.is_(False))
            .values(is_confirmed=True)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self.database.unit_of_work() as session:
                result = await session.execute(stmt)
                transitioned = result.rowcount == 1
        except STORE_ERRORS as e:
            raise StoreError(
                step="confirm_participant",
                context={"participant_id": str(participant_id), "error_type": type(e).__name__},
            ) from e

        logger.debug(
            "Participant %s confirmation transitioned=%s", participant_id, transitioned
        )
        return transitioned
