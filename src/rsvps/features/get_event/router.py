from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from src.rsvps.dtos import EVENT_NOT_VIEWABLE_MESSAGE, EventPageDTO, FieldType, RsvpResponse
from src.rsvps.identity import GuestIdentityStore, get_identity_store
from src.rsvps.repository.read_models import (
    EventReadModel,
    SqlEventReadModel,
    hash_from_public_id,
)
from src.rsvps.urls import EVENT_ADMIN_URL, GET_EVENT_URL

router = APIRouter()


class CustomFieldResponseModel(BaseModel):
    """A question shown on the RSVP form."""

    id: UUID
    field_name: str
    field_type: FieldType
    required: bool
    position: int
    options: list[str] = []


class RsvpEntry(BaseModel):
    """One RSVP on the event page. ``token`` is only set for the guest's own RSVPs."""

    name: str
    response: RsvpResponse
    can_cancel: bool = False
    token: str | None = None


class EventPageResponse(BaseModel):
    public_id: str
    title: str
    body: str | None = None
    date: datetime | None = None
    custom_fields: list[CustomFieldResponseModel]
    rsvps: list[RsvpEntry]
    responded: bool


class AdminAnswer(BaseModel):
    field_name: str
    value: str | None = None


class AdminRsvpEntry(BaseModel):
    name: str
    response: RsvpResponse
    answers: list[AdminAnswer]


class EventAdminResponse(BaseModel):
    public_id: str
    title: str
    published: bool
    custom_fields: list[CustomFieldResponseModel]
    rsvps: list[AdminRsvpEntry]


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


def build_custom_fields(page: EventPageDTO) -> list[CustomFieldResponseModel]:
    return [
        CustomFieldResponseModel(
            id=custom_field.id,
            field_name=custom_field.field_name,
            field_type=custom_field.field_type,
            required=custom_field.required,
            position=custom_field.position,
            options=list(custom_field.options),
        )
        for custom_field in page.event.custom_fields
    ]


def build_event_page_response(page: EventPageDTO) -> EventPageResponse:
    rsvps = []
    for rsvp in page.rsvps:
        own = rsvp.token in page.user_tokens
        rsvps.append(
            RsvpEntry(
                name=rsvp.name,
                response=rsvp.response,
                can_cancel=own,
                token=rsvp.token if own else None,
            )
        )

    return EventPageResponse(
        public_id=page.event.public_id,
        title=page.event.title,
        body=page.event.body,
        date=page.event.date,
        custom_fields=build_custom_fields(page),
        rsvps=rsvps,
        responded=page.responded,
    )


@router.get(GET_EVENT_URL, response_model=EventPageResponse)
async def get_event(
    public_id: str,
    read_model: EventReadModel = Depends(get_event_read_model),
    identity_store: GuestIdentityStore = Depends(get_identity_store),
) -> EventPageResponse:
    """
    Get the guest page of a published event.
    Includes the RSVP questions, who has responded, and which RSVPs this guest may cancel.
    """
    user_tokens = identity_store.tokens(hash_from_public_id(public_id))
    page = await read_model.get_event_page(public_id, user_tokens)

    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EVENT_NOT_VIEWABLE_MESSAGE)

    return build_event_page_response(page)


@router.get(EVENT_ADMIN_URL, response_model=EventAdminResponse)
async def get_event_admin(
    public_id: str,
    admin_token: str,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> EventAdminResponse:
    """
    Get every RSVP of an event with the answers to each question, in question order.
    """
    page = await read_model.get_admin_summary(public_id, admin_token)

    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")

    return EventAdminResponse(
        public_id=page.event.public_id,
        title=page.event.title,
        published=page.event.published,
        custom_fields=build_custom_fields(page),
        rsvps=[
            AdminRsvpEntry(
                name=rsvp.name,
                response=rsvp.response,
                answers=[
                    AdminAnswer(
                        field_name=custom_field.field_name,
                        value=rsvp.answers.get(custom_field.id),
                    )
                    for custom_field in page.event.custom_fields
                ],
            )
            for rsvp in page.rsvps
        ],
    )
