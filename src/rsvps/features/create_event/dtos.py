"""DTOs for create event feature."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class RawCustomFieldDTO:
    """A custom field exactly as the organizer typed it."""

    field_name: str | None = None
    field_type: str | None = None
    required: bool = False
    options: str | None = None


class CustomFieldSubmit(BaseModel):
    """One question from the event form. ``options`` holds one option per line."""

    field_name: str | None = None
    field_type: str | None = None
    required: bool = False
    options: str | None = None


class CreateEventRequest(BaseModel):
    """Request body for creating an event.

    ``custom_fields`` is keyed by the form's row index; its order is the order
    the questions are shown and validated in.
    """

    title: str = Field(min_length=1, max_length=255)
    body: str | None = None
    date: datetime | None = None
    custom_fields: dict[str, CustomFieldSubmit] = {}


class CreateEventResponse(BaseModel):
    message: str
    public_id: str
    admin_token: str
    custom_field_count: int
