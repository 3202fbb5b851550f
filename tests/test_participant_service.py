"""
Journey Backend — Participant Service Unit Tests
=================================================

What:  The participant confirmation state machine.

What we test:
    ✅ Malformed id is rejected before any store call
    ✅ "not found" and "invalid identifier" are distinguishable
    ✅ Lookup failures become a generic error, logged with the id
    ✅ Confirming twice: second call refused, state unchanged
    ✅ Losing the race at the conditional update → already confirmed
    ✅ Two concurrent confirmations → exactly one succeeds (fake and SQL store)
    ✅ A database outage during confirmation → generic "try again"
"""

import asyncio
import logging
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy import select

from journey.exceptions import (
    AlreadyConfirmedError,
    InvalidIdentifierError,
    NotFoundError,
    RequestFailedError,
    StoreError,
)
from journey.models.trip import Participant
from journey.services.participant_service import ParticipantService, parse_uuid
from journey.services.store_base import TripStore
from journey.services.trip_store import SqlTripStore


def mock_store(participant=None, lookup_error=None, transitioned=True):
    store = AsyncMock(spec=TripStore)
    if lookup_error is not None:
        store.get_participant.side_effect = lookup_error
    else:
        store.get_participant.return_value = participant
    store.confirm_participant.return_value = transitioned
    return store


def unconfirmed():
    return Participant(id=uuid4(), trip_id=uuid4(), email="bruno@x.com", is_confirmed=False)


class TestParseUuid:

    def test_valid(self):
        value = uuid4()
        assert parse_uuid(str(value)) == value

    @pytest.mark.parametrize("raw", ["not-a-uuid", "", "1234"])
    def test_invalid(self, raw):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            parse_uuid(raw)
        assert exc_info.value.message == "Invalid UUID."


class TestConfirmParticipant:

    @pytest.mark.asyncio
    async def test_malformed_id_never_reaches_store(self):
        store = mock_store()
        service = ParticipantService(store)

        with pytest.raises(InvalidIdentifierError):
            await service.confirm_participant("not-a-uuid")

        store.get_participant.assert_not_awaited()
        store.confirm_participant.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_found(self):
        missing = uuid4()
        store = mock_store(lookup_error=NotFoundError(resource="participant", resource_id=str(missing)))
        service = ParticipantService(store)

        with pytest.raises(NotFoundError) as exc_info:
            await service.confirm_participant(str(missing))

        assert exc_info.value.message == "Participant not found."
        assert not isinstance(exc_info.value, InvalidIdentifierError)
        store.confirm_participant.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookup_failure_is_generic_and_logged(self, caplog):
        participant_id = str(uuid4())
        store = mock_store(lookup_error=StoreError(step="get_participant"))
        service = ParticipantService(store)

        with caplog.at_level(logging.ERROR, logger="journey.services.participant_service"):
            with pytest.raises(RequestFailedError) as exc_info:
                await service.confirm_participant(participant_id)

        assert exc_info.value.message == "Something went wrong. Try again."
        assert participant_id in caplog.text

    @pytest.mark.asyncio
    async def test_already_confirmed_is_refused_without_write(self):
        participant = unconfirmed()
        participant.is_confirmed = True
        store = mock_store(participant=participant)
        service = ParticipantService(store)

        with pytest.raises(AlreadyConfirmedError) as exc_info:
            await service.confirm_participant(str(participant.id))

        assert exc_info.value.message == "Participant is already confirmed."
        store.confirm_participant.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_success(self):
        participant = unconfirmed()
        store = mock_store(participant=participant)
        service = ParticipantService(store)

        result = await service.confirm_participant(str(participant.id))

        assert result is None
        store.confirm_participant.assert_awaited_once_with(participant.id)

    @pytest.mark.asyncio
    async def test_lost_race_at_update_is_already_confirmed(self):
        participant = unconfirmed()
        store = mock_store(participant=participant, transitioned=False)
        service = ParticipantService(store)

        with pytest.raises(AlreadyConfirmedError):
            await service.confirm_participant(str(participant.id))

    @pytest.mark.asyncio
    async def test_update_failure_is_generic(self):
        participant = unconfirmed()
        store = mock_store(participant=participant)
        store.confirm_participant.side_effect = StoreError(step="confirm_participant")
        service = ParticipantService(store)

        with pytest.raises(RequestFailedError):
            await service.confirm_participant(str(participant.id))


class TestConfirmationAgainstStores:

    @pytest.mark.asyncio
    async def test_confirm_twice_with_sql_store(self, sql_store, trip_request):
        trip_id = await sql_store.create_trip(trip_request)
        async with sql_store.database.session() as session:
            participant = (
                await session.execute(select(Participant).where(Participant.trip_id == trip_id))
            ).scalars().first()
        service = ParticipantService(sql_store)

        await service.confirm_participant(str(participant.id))
        with pytest.raises(AlreadyConfirmedError):
            await service.confirm_participant(str(participant.id))

        assert (await sql_store.get_participant(participant.id)).is_confirmed is True

    @pytest.mark.asyncio
    async def test_concurrent_confirmations_exactly_one_wins(self, memory_store):
        participant = memory_store.add_participant(uuid4(), "bruno@x.com")
        service = ParticipantService(memory_store)

        results = await asyncio.gather(
            service.confirm_participant(str(participant.id)),
            service.confirm_participant(str(participant.id)),
            return_exceptions=True,
        )

        successes = [r for r in results if r is None]
        refusals = [r for r in results if isinstance(r, AlreadyConfirmedError)]
        assert len(successes) == 1
        assert len(refusals) == 1
        # Both passed the read check; the conditional update decided
        assert memory_store.confirm_calls == 2
        assert memory_store.participants[participant.id].is_confirmed is True

    @pytest.mark.asyncio
    async def test_concurrent_confirmations_with_sql_store(self, file_database, trip_request):
        store = SqlTripStore(file_database)
        trip_id = await store.create_trip(trip_request)
        async with file_database.session() as session:
            participant = (
                await session.execute(select(Participant).where(Participant.trip_id == trip_id))
            ).scalars().first()
        service = ParticipantService(store)

        results = await asyncio.gather(
            service.confirm_participant(str(participant.id)),
            service.confirm_participant(str(participant.id)),
            return_exceptions=True,
        )

        successes = [r for r in results if r is None]
        refusals = [r for r in results if isinstance(r, AlreadyConfirmedError)]
        assert len(successes) == 1
        assert len(refusals) == 1
        assert (await store.get_participant(participant.id)).is_confirmed is True

    @pytest.mark.asyncio
    async def test_database_outage_is_generic(self, refusing_database):
        service = ParticipantService(SqlTripStore(refusing_database))

        with pytest.raises(RequestFailedError) as exc_info:
            await service.confirm_participant(str(uuid4()))

        assert exc_info.value.message == "Something went wrong. Try again."
