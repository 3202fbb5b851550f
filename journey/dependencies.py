"""
Journey Backend — FastAPI Dependencies
=======================================

What:  Resolve the services built in the lifespan for route handlers.
Why:   Services live on `app.state`, constructed once around one Database.
       Tests replace these providers with `app.dependency_overrides`.
"""

from fastapi import Request

from journey.database import Database
from journey.services.participant_service import ParticipantService
from journey.services.trip_service import TripService


def get_trip_service(request: Request) -> TripService:
    return request.app.state.trip_service


def get_participant_service(request: Request) -> ParticipantService:
    return request.app.state.participant_service


def get_database(request: Request) -> Database:
    return request.app.state.database
