import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.rsvps.dtos import EVENT_NOT_VIEWABLE_MESSAGE, EventNotFoundError, ValidationFailed
from src.rsvps.features.submit_rsvp.dtos import RsvpSummary, SubmitRsvpRequest, SubmitRsvpResponse
from src.rsvps.features.submit_rsvp.write_model import RsvpCreateWriteModel, SqlRsvpCreateWriteModel
from src.rsvps.identity import GuestIdentityStore, get_identity_store
from src.rsvps.repository.read_models import hash_from_public_id
from src.rsvps.urls import SUBMIT_RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


def get_rsvp_create_write_model() -> RsvpCreateWriteModel:
    """Dependency to get RSVP create write model instance."""
    return SqlRsvpCreateWriteModel()


@router.post(
    SUBMIT_RSVP_URL,
    response_model=SubmitRsvpResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_rsvp(
    public_id: str,
    rsvp_data: SubmitRsvpRequest,
    write_model: RsvpCreateWriteModel = Depends(get_rsvp_create_write_model),
    identity_store: GuestIdentityStore = Depends(get_identity_store),
) -> SubmitRsvpResponse:
    """
    Submit an RSVP for a published event.

    On success the RSVP token is remembered in the guest's session so the guest
    can cancel it later. Rejected submissions get one generic message; which
    field failed is only logged.
    """
    try:
        rsvp = await write_model.submit_rsvp(
            public_id=public_id,
            name=rsvp_data.name,
            response=rsvp_data.response,
            custom_field_responses=rsvp_data.custom_field_responses,
        )
    except EventNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_VIEWABLE_MESSAGE)
    except ValidationFailed as e:
        logger.info("RSVP for event %s rejected: %s", public_id, e)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.user_message)

    identity_store.record(hash_from_public_id(public_id), rsvp.token)

    return SubmitRsvpResponse(
        message="Thank you for responding!",
        rsvp=RsvpSummary(name=rsvp.name, response=rsvp.response, token=rsvp.token),
    )
