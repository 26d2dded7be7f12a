"""Write model for creating an event together with its custom RSVP questions.

The organizer submits the questions once, alongside the event. Each question
is cleaned and checked up front; the batch is either stored whole or not at
all.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps.dtos import (
    MAX_VALUE_LENGTH,
    CreatedEventDTO,
    CustomFieldSpec,
    FieldType,
    SchemaCreationError,
)
from src.rsvps.features.create_event.dtos import RawCustomFieldDTO
from src.rsvps.repository.orm_models import CustomField, Event
from src.rsvps.repository.read_models import get_event_by_public_id
from src.rsvps.validation import is_blank

logger = logging.getLogger(__name__)


def parse_options(raw_options: str | None) -> tuple[str, ...]:
    """One option per line; lines are trimmed and blank lines dropped."""
    if not raw_options:
        return ()
    return tuple(line.strip() for line in raw_options.split("\n") if line.strip())


def build_custom_field_specs(raw_fields: Sequence[RawCustomFieldDTO]) -> list[CustomFieldSpec]:
    """Turn raw organizer input into positioned field specs.

    Rows without a name or a type are skipped, but still use up their
    position. Raises SchemaCreationError if any remaining row is invalid.
    """
    specs = []
    for position, raw in enumerate(raw_fields):
        if is_blank(raw.field_name) or is_blank(raw.field_type):
            continue

        field_name = raw.field_name.strip()
        if len(field_name) > MAX_VALUE_LENGTH:
            raise SchemaCreationError(position, f"field name is longer than {MAX_VALUE_LENGTH}")

        try:
            field_type = FieldType(raw.field_type.strip().lower())
        except ValueError:
            raise SchemaCreationError(position, f"unknown field type {raw.field_type!r}") from None

        options: tuple[str, ...] = ()
        if field_type == FieldType.DROPDOWN:
            options = parse_options(raw.options)
            if not options:
                raise SchemaCreationError(position, "dropdown fields need at least one option")

        specs.append(
            CustomFieldSpec(
                field_name=field_name,
                field_type=field_type,
                required=bool(raw.required),
                position=position,
                options=options,
            )
        )
    return specs


class EventCreateWriteModel(ABC):
    """Abstract base class for event creation write operations."""

    @abstractmethod
    async def create_event(
        self,
        title: str,
        body: str | None = None,
        date: datetime | None = None,
        custom_fields: Sequence[RawCustomFieldDTO] = (),
        keep_event_on_schema_error: bool = False,
    ) -> CreatedEventDTO:
        """Create an event and its custom fields. Returns DTO.

        Args:
            title: Event title, also used for the public id slug
            body: Optional description
            date: Optional date of the event
            custom_fields: Raw questions in display order
            keep_event_on_schema_error: Commit the event without questions
                when the question batch is invalid (SchemaCreationError is
                still raised)
        """
        raise NotImplementedError

    @abstractmethod
    async def unpublish_event(self, public_id: str) -> bool:
        """Hide an event from guests. Returns False if there is no such event."""
        raise NotImplementedError


class SqlEventCreateWriteModel(EventCreateWriteModel):
    """SQL implementation of event creation write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_event(
        self,
        title: str,
        body: str | None = None,
        date: datetime | None = None,
        custom_fields: Sequence[RawCustomFieldDTO] = (),
        keep_event_on_schema_error: bool = False,
    ) -> CreatedEventDTO:
        schema_error: SchemaCreationError | None = None
        try:
            specs = build_custom_field_specs(custom_fields)
        except SchemaCreationError as e:
            if not keep_event_on_schema_error:
                logger.info("Event %r not created: %s", title, e)
                raise
            schema_error = e
            specs = []

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = Event(title=title, body=body, date=date, published=True)
            session.add(event)
            await session.flush()

            for spec in specs:
                session.add(
                    CustomField(
                        event_id=event.uuid,
                        field_name=spec.field_name,
                        field_type=spec.field_type,
                        required=spec.required,
                        options=list(spec.options),
                        position=spec.position,
                    )
                )
            await session.flush()

            created = CreatedEventDTO(
                public_id=event.public_id,
                admin_token=event.admin_token,
                custom_field_count=len(specs),
            )

        if schema_error is not None:
            logger.info("Event %s created without custom fields: %s", created.public_id, schema_error)
            schema_error.public_id = created.public_id
            raise schema_error

        logger.info("Created event %s with %d custom fields", created.public_id, len(specs))
        return created

    async def unpublish_event(self, public_id: str) -> bool:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await get_event_by_public_id(session, public_id, published_only=False)
            if event is None:
                return False
            event.published = False
            await session.flush()
        logger.info("Unpublished event %s", public_id)
        return True
