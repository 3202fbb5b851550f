"""
Journey Backend — Participant Route Handlers
=============================================

What:  PATCH /participants/{participant_id}/confirm.
Why the id is a plain `str`: a malformed id must answer 400 "Invalid UUID."
       from the service, not FastAPI's generic 422 path validation.
"""

from fastapi import APIRouter, Depends, Response

from journey.dependencies import get_participant_service
from journey.schemas.trip import ErrorResponse
from journey.services.participant_service import ParticipantService

router = APIRouter(prefix="/participants", tags=["Participants"])


@router.patch(
    "/{participant_id}/confirm",
    status_code=204,
    response_class=Response,
    responses={
        204: {"description": "Participant confirmed"},
        400: {
            "description": "Invalid id, not found, already confirmed or internal failure",
            "model": ErrorResponse,
        },
    },
    summary="Confirms a participant on a trip",
)
async def confirm_participant(
    participant_id: str,
    service: ParticipantService = Depends(get_participant_service),
) -> Response:
    await service.confirm_participant(participant_id)
    return Response(status_code=204)
