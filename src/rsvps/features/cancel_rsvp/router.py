from fastapi import APIRouter, Depends, HTTPException, status

from src.rsvps.dtos import EVENT_NOT_VIEWABLE_MESSAGE, EventNotFoundError
from src.rsvps.features.cancel_rsvp.write_model import RsvpCancelWriteModel, SqlRsvpCancelWriteModel
from src.rsvps.features.get_event.router import (
    EventPageResponse,
    build_event_page_response,
    get_event_read_model,
)
from src.rsvps.identity import GuestIdentityStore, get_identity_store
from src.rsvps.repository.read_models import EventReadModel, hash_from_public_id
from src.rsvps.urls import CANCEL_RSVP_URL

router = APIRouter()


def get_rsvp_cancel_write_model() -> RsvpCancelWriteModel:
    """Dependency to get RSVP cancel write model instance."""
    return SqlRsvpCancelWriteModel()


@router.delete(CANCEL_RSVP_URL, response_model=EventPageResponse)
async def cancel_rsvp(
    public_id: str,
    token: str,
    write_model: RsvpCancelWriteModel = Depends(get_rsvp_cancel_write_model),
    read_model: EventReadModel = Depends(get_event_read_model),
    identity_store: GuestIdentityStore = Depends(get_identity_store),
) -> EventPageResponse:
    """
    Cancel one of the guest's own RSVPs and return the updated event page.

    The answer is the same whether or not anything was deleted: unknown
    tokens, other guests' tokens and repeated cancellations are all ignored.
    """
    try:
        await write_model.cancel_rsvp(public_id=public_id, token=token, identity_store=identity_store)
    except EventNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_VIEWABLE_MESSAGE)

    user_tokens = identity_store.tokens(hash_from_public_id(public_id))
    page = await read_model.get_event_page(public_id, user_tokens)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_VIEWABLE_MESSAGE)

    return build_event_page_response(page)
