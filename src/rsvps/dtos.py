from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

MAX_VALUE_LENGTH = 255

GENERIC_VALIDATION_MESSAGE = "Please complete all required fields"
EVENT_NOT_VIEWABLE_MESSAGE = "This event is no longer viewable."


class FieldType(str, Enum):
    TEXT = "text"
    DROPDOWN = "dropdown"


class RsvpResponse(str, Enum):
    YES = "yes"
    MAYBE = "maybe"
    NO = "no"


# =============================================================================
# Errors
# =============================================================================


class RsvpError(Exception):
    """Base class for every error raised by the RSVP domain."""


class EventNotFoundError(RsvpError):
    """Raised when an event is unknown or no longer published."""

    def __init__(self, public_id: str) -> None:
        self.public_id = public_id
        super().__init__(EVENT_NOT_VIEWABLE_MESSAGE)


class SchemaCreationError(RsvpError):
    """Raised when a custom field batch cannot be committed as a whole."""

    def __init__(self, position: int, reason: str) -> None:
        self.position = position
        self.reason = reason
        # set when the event itself was kept
        self.public_id: str | None = None
        super().__init__(f"Custom field at position {position} is invalid: {reason}")


class ValidationFailed(RsvpError):
    """A submission was rejected.

    Subclasses carry the field-level detail for logs and tests. Guests only
    ever see ``GENERIC_VALIDATION_MESSAGE``.
    """

    user_message = GENERIC_VALIDATION_MESSAGE


class MissingRequiredField(ValidationFailed):
    def __init__(self, field_ids: list[str]) -> None:
        self.field_ids = field_ids
        super().__init__(f"Missing required fields: {', '.join(field_ids)}")

    @property
    def field_id(self) -> str:
        return self.field_ids[0]


class UnknownField(ValidationFailed):
    def __init__(self, field_id: str) -> None:
        self.field_id = field_id
        super().__init__(f"Field {field_id!r} does not belong to this event")


class InvalidOption(ValidationFailed):
    def __init__(self, field_id: str, value: str) -> None:
        self.field_id = field_id
        self.value = value
        super().__init__(f"{value!r} is not an option of field {field_id}")


class ValueTooLong(ValidationFailed):
    def __init__(self, field_id: str, length: int) -> None:
        self.field_id = field_id
        self.length = length
        super().__init__(
            f"Answer to field {field_id} is {length} characters, max is {MAX_VALUE_LENGTH}"
        )


class MissingName(ValidationFailed):
    def __init__(self) -> None:
        super().__init__("RSVP name is blank")


class InvalidResponseChoice(ValidationFailed):
    def __init__(self, choice: str | None) -> None:
        self.choice = choice
        super().__init__(f"{choice!r} is not one of yes, maybe, no")


class ResponseCreationFailed(ValidationFailed):
    """The RSVP and its answers could not be written as one unit; nothing was kept."""


# =============================================================================
# DTOs
# =============================================================================


@dataclass(frozen=True)
class CustomFieldSpec:
    """One organizer-submitted question, already cleaned and positioned."""

    field_name: str
    field_type: FieldType
    required: bool
    position: int
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class CustomFieldDTO:
    """Immutable snapshot of a custom field, safe to validate against."""

    id: UUID
    field_name: str
    field_type: FieldType
    required: bool
    position: int
    options: tuple[str, ...] = ()

    @property
    def is_dropdown(self) -> bool:
        return self.field_type == FieldType.DROPDOWN


@dataclass(frozen=True)
class ValidatedAnswer:
    custom_field: CustomFieldDTO
    value: str


@dataclass(frozen=True)
class RsvpDTO:
    id: UUID
    name: str
    response: RsvpResponse
    token: str
    created_at: datetime | None = None
    answers: dict[UUID, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EventDTO:
    id: UUID
    public_id: str
    public_hash: str
    title: str
    body: str | None
    date: datetime | None
    published: bool
    custom_fields: tuple[CustomFieldDTO, ...] = ()


@dataclass(frozen=True)
class CreatedEventDTO:
    public_id: str
    admin_token: str
    custom_field_count: int


@dataclass(frozen=True)
class EventPageDTO:
    """What a guest sees: the event, its questions, who responded, and what they may cancel."""

    event: EventDTO
    rsvps: list[RsvpDTO]
    user_tokens: list[str]

    @property
    def responded(self) -> bool:
        return any(rsvp.token in self.user_tokens for rsvp in self.rsvps)
