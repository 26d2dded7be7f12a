import re
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp
from src.rsvps.dtos import (
    MAX_VALUE_LENGTH,
    CustomFieldDTO,
    EventDTO,
    FieldType,
    RsvpDTO,
    RsvpResponse,
)


def new_token() -> str:
    return uuid4().hex


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:60].rstrip("-")


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    public_hash: Mapped[str] = mapped_column(
        String(32), nullable=False, unique=True, index=True, default=new_token
    )
    admin_token: Mapped[str] = mapped_column(
        String(32), nullable=False, unique=True, default=new_token
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=True)
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def public_id(self) -> str:
        slug = slugify(self.title or "")
        return f"{self.public_hash}-{slug}" if slug else self.public_hash

    def to_dto(self, custom_fields: list["CustomField"] | None = None) -> EventDTO:
        return EventDTO(
            id=self.uuid,
            public_id=self.public_id,
            public_hash=self.public_hash,
            title=self.title,
            body=self.body,
            date=self.date,
            published=self.published,
            custom_fields=tuple(field.to_dto() for field in custom_fields or ()),
        )

    def __repr__(self) -> str:
        return f"<Event {self.title} ({self.public_hash})>"


class CustomField(Base, TimeStamp):
    __tablename__ = TableNames.CUSTOM_FIELDS.value
    __table_args__ = (Index("ix_custom_fields_event_id_position", "event_id", "position"),)

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field_name: Mapped[str] = mapped_column(String(255), nullable=False)
    field_type: Mapped[str] = mapped_column(
        Enum(FieldType, name="field_type_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # JSON array of strings, in display order. Empty for text fields.
    options: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    @property
    def is_dropdown(self) -> bool:
        return FieldType(self.field_type) == FieldType.DROPDOWN

    @property
    def options_array(self) -> list[str]:
        if not self.is_dropdown or not self.options:
            return []
        return list(self.options)

    def to_dto(self) -> CustomFieldDTO:
        return CustomFieldDTO(
            id=self.uuid,
            field_name=self.field_name,
            field_type=FieldType(self.field_type),
            required=self.required,
            position=self.position,
            options=tuple(self.options_array),
        )

    def __repr__(self) -> str:
        return f"<CustomField {self.field_name} ({self.field_type}) at {self.position}>"


class Rsvp(Base, TimeStamp):
    __tablename__ = TableNames.RSVPS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    response: Mapped[str] = mapped_column(
        Enum(RsvpResponse, name="rsvp_response_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    identity_token: Mapped[str] = mapped_column(
        String(32), nullable=False, unique=True, index=True, default=new_token
    )

    def to_dto(self, answers: dict[UUID, str] | None = None) -> RsvpDTO:
        return RsvpDTO(
            id=self.uuid,
            name=self.name,
            response=RsvpResponse(self.response),
            token=self.identity_token,
            created_at=self.created_at,
            answers=answers or {},
        )

    def __repr__(self) -> str:
        return f"<Rsvp {self.name} - {self.response}>"


class CustomFieldResponse(Base, TimeStamp):
    __tablename__ = TableNames.CUSTOM_FIELD_RESPONSES.value
    __table_args__ = (
        UniqueConstraint("rsvp_id", "custom_field_id", name="uq_custom_field_responses_rsvp_field"),
    )

    rsvp_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.RSVPS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    custom_field_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.CUSTOM_FIELDS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    response_value: Mapped[str] = mapped_column(String(MAX_VALUE_LENGTH), nullable=True)

    def errors_against(self, custom_field: CustomField) -> list[str]:
        """Save-time checks of this answer against the field it answers."""
        errors = []
        value = self.response_value or ""
        if custom_field.required and not value.strip():
            errors.append("can't be blank")
        if len(value) > MAX_VALUE_LENGTH:
            errors.append(f"is too long (maximum is {MAX_VALUE_LENGTH} characters)")
        if custom_field.is_dropdown and value not in custom_field.options_array:
            errors.append("is not included in the list")
        return errors

    def __repr__(self) -> str:
        return f"<CustomFieldResponse {self.custom_field_id} for rsvp {self.rsvp_id}>"
