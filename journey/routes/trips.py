"""
Journey Backend — Trip Route Handlers
======================================

What:  POST /trips plus the trip endpoints that are declared but not built.
How:   FastAPI decodes and validates the body into CreateTripRequest (failures
       become 400 via the RequestValidationError handler), then TripService
       does the work.

The stub endpoints raise UnimplementedError so callers get an explicit 501
instead of an empty success.
"""

import logging

from fastapi import APIRouter, Depends

from journey.dependencies import get_trip_service
from journey.exceptions import UnimplementedError
from journey.schemas.trip import CreateTripRequest, CreateTripResponse, ErrorResponse
from journey.services.trip_service import TripService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["Trips"])

_NOT_IMPLEMENTED = {501: {"description": "Not implemented", "model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=CreateTripResponse,
    responses={
        201: {"description": "Trip created", "model": CreateTripResponse},
        400: {"description": "Invalid body or creation failure", "model": ErrorResponse},
    },
    summary="Create a new trip",
)
async def create_trip(
    body: CreateTripRequest,
    service: TripService = Depends(get_trip_service),
) -> CreateTripResponse:
    """
    Create a trip and invite participants.

    Returns as soon as the transaction commits; the owner confirmation email
    is sent afterwards by a detached task.
    """
    logger.info(
        "Received create trip request: destination=%s invitees=%d",
        body.destination,
        len(body.emails_to_invite),
    )
    return await service.create_trip(body)


@router.get("/{trip_id}", responses=_NOT_IMPLEMENTED, summary="Get a trip details")
async def get_trip(trip_id: str):
    raise UnimplementedError(operation="Get trip")


@router.put("/{trip_id}", responses=_NOT_IMPLEMENTED, summary="Update a trip")
async def update_trip(trip_id: str):
    raise UnimplementedError(operation="Update trip")


@router.get("/{trip_id}/activities", responses=_NOT_IMPLEMENTED, summary="Get a trip activities")
async def list_activities(trip_id: str):
    raise UnimplementedError(operation="List trip activities")


@router.post("/{trip_id}/activities", responses=_NOT_IMPLEMENTED, summary="Create a trip activity")
async def create_activity(trip_id: str):
    raise UnimplementedError(operation="Create trip activity")


@router.get(
    "/{trip_id}/confirm",
    responses=_NOT_IMPLEMENTED,
    summary="Confirm a trip and send e-mail invitations",
)
async def confirm_trip(trip_id: str):
    raise UnimplementedError(operation="Confirm trip")


@router.post("/{trip_id}/invites", responses=_NOT_IMPLEMENTED, summary="Invite someone to the trip")
async def create_invite(trip_id: str):
    raise UnimplementedError(operation="Invite to trip")


@router.get("/{trip_id}/links", responses=_NOT_IMPLEMENTED, summary="Get a trip links")
async def list_links(trip_id: str):
    raise UnimplementedError(operation="List trip links")


@router.post("/{trip_id}/links", responses=_NOT_IMPLEMENTED, summary="Create a trip link")
async def create_link(trip_id: str):
    raise UnimplementedError(operation="Create trip link")


@router.get(
    "/{trip_id}/participants",
    responses=_NOT_IMPLEMENTED,
    summary="Get a trip participants",
)
async def list_participants(trip_id: str):
    raise UnimplementedError(operation="List trip participants")
