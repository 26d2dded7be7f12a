"""Write model for submitting an RSVP with answers to the event's custom fields.

The RSVP row and all of its answers are written in one transaction. Either the
guest's whole submission is stored, or nothing is.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from functools import partial

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps.dtos import (
    EventNotFoundError,
    ResponseCreationFailed,
    RsvpDTO,
    RsvpResponse,
    ValidatedAnswer,
)
from src.rsvps.repository.orm_models import CustomField, CustomFieldResponse, Rsvp
from src.rsvps.repository.read_models import get_custom_fields, get_event_by_public_id
from src.rsvps.validation import clean_name, parse_response_choice, validate_answers

logger = logging.getLogger(__name__)


class RsvpCreateWriteModel(ABC):
    """Abstract base class for RSVP submission."""

    @abstractmethod
    async def submit_rsvp(
        self,
        public_id: str,
        name: str | None,
        response: str | None,
        custom_field_responses: Mapping[str, str | None],
    ) -> RsvpDTO:
        """Validate and store an RSVP with its answers. Returns DTO.

        Args:
            public_id: Public id of a published event
            name: Guest name
            response: yes, maybe or no, in any case
            custom_field_responses: Raw answers keyed by custom field id

        Raises:
            EventNotFoundError: the event is unknown or unpublished
            ValidationFailed: the submission was rejected, nothing was stored
        """
        raise NotImplementedError


class SqlRsvpCreateWriteModel(RsvpCreateWriteModel):
    """SQL implementation of RSVP submission."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def submit_rsvp(
        self,
        public_id: str,
        name: str | None,
        response: str | None,
        custom_field_responses: Mapping[str, str | None],
    ) -> RsvpDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await get_event_by_public_id(session, public_id)
            if not event:
                raise EventNotFoundError(public_id)

            # Validate against a frozen snapshot of the schema, before writing anything
            custom_fields = await get_custom_fields(session, event.uuid)
            cleaned_name = clean_name(name)
            choice = parse_response_choice(response)
            answers = validate_answers(
                [custom_field.to_dto() for custom_field in custom_fields],
                custom_field_responses,
            )

            try:
                rsvp = await self._persist(session, event.uuid, cleaned_name, choice, answers, custom_fields)
            except (ResponseCreationFailed, IntegrityError) as e:
                await session.rollback()
                logger.warning("RSVP for event %s rolled back: %s", public_id, e)
                if isinstance(e, ResponseCreationFailed):
                    raise
                raise ResponseCreationFailed(str(e.orig)) from e

            result = rsvp.to_dto({answer.custom_field.id: answer.value for answer in answers})

        logger.info("Stored RSVP %s (%s) for event %s", result.token, choice.value, public_id)
        return result

    async def _persist(
        self,
        session: AsyncSession,
        event_id,
        name: str,
        choice: RsvpResponse,
        answers: tuple[ValidatedAnswer, ...],
        custom_fields: list[CustomField],
    ) -> Rsvp:
        """Insert the RSVP and one row per answer, checking each answer as it is saved."""
        fields_by_id = {custom_field.uuid: custom_field for custom_field in custom_fields}

        rsvp = Rsvp(event_id=event_id, name=name, response=choice)
        session.add(rsvp)
        await session.flush()

        for answer in answers:
            custom_field = fields_by_id.get(answer.custom_field.id)
            if custom_field is None:
                raise ResponseCreationFailed(f"Field {answer.custom_field.id} no longer exists")

            field_response = CustomFieldResponse(
                rsvp_id=rsvp.uuid,
                custom_field_id=custom_field.uuid,
                response_value=answer.value,
            )
            errors = field_response.errors_against(custom_field)
            if errors:
                raise ResponseCreationFailed(
                    f"Answer to {custom_field.field_name!r} {', '.join(errors)}"
                )
            session.add(field_response)

        await session.flush()
        return rsvp
