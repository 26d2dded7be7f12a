from fastapi import APIRouter, Depends, HTTPException, status

from src.rsvps.dtos import SchemaCreationError
from src.rsvps.features.create_event.dtos import (
    CreateEventRequest,
    CreateEventResponse,
    RawCustomFieldDTO,
)
from src.rsvps.features.create_event.write_model import (
    EventCreateWriteModel,
    SqlEventCreateWriteModel,
)
from src.rsvps.urls import CREATE_EVENT_URL

router = APIRouter()


def get_event_create_write_model() -> EventCreateWriteModel:
    """Dependency to get event create write model instance."""
    return SqlEventCreateWriteModel()


@router.post(
    CREATE_EVENT_URL,
    response_model=CreateEventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    request: CreateEventRequest,
    write_model: EventCreateWriteModel = Depends(get_event_create_write_model),
) -> CreateEventResponse:
    """
    Create an event with its custom RSVP questions.

    Questions without a name or type are ignored. If any other question is
    invalid nothing is created and 422 is returned.
    The admin token in the response is the only way to see the answers later.
    """
    custom_fields = [
        RawCustomFieldDTO(
            field_name=field.field_name,
            field_type=field.field_type,
            required=field.required,
            options=field.options,
        )
        for field in request.custom_fields.values()
    ]

    try:
        created = await write_model.create_event(
            title=request.title,
            body=request.body,
            date=request.date,
            custom_fields=custom_fields,
        )
    except SchemaCreationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return CreateEventResponse(
        message="Your event has been created!",
        public_id=created.public_id,
        admin_token=created.admin_token,
        custom_field_count=created.custom_field_count,
    )
