"""DTOs for submit RSVP feature."""

from pydantic import BaseModel

from src.rsvps.dtos import RsvpResponse


class SubmitRsvpRequest(BaseModel):
    """Request body for an RSVP.

    ``response`` is the label of the button the guest pressed (Yes, Maybe, No).
    ``custom_field_responses`` maps custom field ids to answers.
    """

    name: str | None = None
    response: str | None = None
    custom_field_responses: dict[str, str | None] = {}


class RsvpSummary(BaseModel):
    name: str
    response: RsvpResponse
    token: str


class SubmitRsvpResponse(BaseModel):
    message: str
    rsvp: RsvpSummary
