import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps.dtos import EventDTO, EventPageDTO, RsvpDTO
from src.rsvps.repository.orm_models import CustomField, CustomFieldResponse, Event, Rsvp


def hash_from_public_id(public_id: str) -> str:
    """Only the part before the first ``-`` identifies the event; the rest is a slug."""
    return str(public_id).split("-", 1)[0]


async def get_event_by_public_id(
    session: AsyncSession, public_id: str, published_only: bool = True
) -> Event | None:
    stmt = select(Event).where(Event.public_hash == hash_from_public_id(public_id))
    if published_only:
        stmt = stmt.where(Event.published.is_(True))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_custom_fields(session: AsyncSession, event_id: UUID) -> list[CustomField]:
    stmt = (
        select(CustomField)
        .where(CustomField.event_id == event_id)
        .order_by(CustomField.position, CustomField.created_at)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_rsvps(session: AsyncSession, event_id: UUID) -> list[Rsvp]:
    stmt = select(Rsvp).where(Rsvp.event_id == event_id).order_by(Rsvp.created_at.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_answers(session: AsyncSession, rsvp_ids: list[UUID]) -> dict[UUID, dict[UUID, str]]:
    """Answers per RSVP, keyed by custom field id."""
    answers: dict[UUID, dict[UUID, str]] = {rsvp_id: {} for rsvp_id in rsvp_ids}
    if not rsvp_ids:
        return answers
    result = await session.execute(
        select(CustomFieldResponse).where(CustomFieldResponse.rsvp_id.in_(rsvp_ids))
    )
    for response in result.scalars().all():
        answers[response.rsvp_id][response.custom_field_id] = response.response_value
    return answers


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_published_event(self, public_id: str) -> EventDTO | None:
        """
        Get a published event, with its ordered custom fields, by public id.
        Returns None for unknown and unpublished events alike.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_event_page(self, public_id: str, user_tokens: list[str]) -> EventPageDTO | None:
        """
        Get everything the guest event page shows.
        ``user_tokens`` are the RSVP tokens held in the guest's session.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def custom_field_value_for(self, rsvp_token: str, custom_field_id: UUID) -> str | None:
        """Get the stored answer of one RSVP to one custom field."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_admin_summary(self, public_id: str, admin_token: str) -> EventPageDTO | None:
        """
        Get the organizer view: every RSVP with its answers.
        Returns None unless ``admin_token`` matches the event.
        """
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    """SQL implementation of the event read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_published_event(self, public_id: str) -> EventDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await get_event_by_public_id(session, public_id)
            if not event:
                return None
            custom_fields = await get_custom_fields(session, event.uuid)
            return event.to_dto(custom_fields)

    async def get_event_page(self, public_id: str, user_tokens: list[str]) -> EventPageDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await get_event_by_public_id(session, public_id)
            if not event:
                return None
            custom_fields = await get_custom_fields(session, event.uuid)
            rsvps = await get_rsvps(session, event.uuid)
            return EventPageDTO(
                event=event.to_dto(custom_fields),
                rsvps=[rsvp.to_dto() for rsvp in rsvps],
                user_tokens=list(user_tokens),
            )

    async def custom_field_value_for(self, rsvp_token: str, custom_field_id: UUID) -> str | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(CustomFieldResponse.response_value)
                .join(Rsvp, Rsvp.uuid == CustomFieldResponse.rsvp_id)
                .where(Rsvp.identity_token == rsvp_token)
                .where(CustomFieldResponse.custom_field_id == custom_field_id)
            )
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_admin_summary(self, public_id: str, admin_token: str) -> EventPageDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await get_event_by_public_id(session, public_id, published_only=False)
            if not event or event.admin_token != admin_token:
                return None
            custom_fields = await get_custom_fields(session, event.uuid)
            rsvps = await get_rsvps(session, event.uuid)
            answers = await get_answers(session, [rsvp.uuid for rsvp in rsvps])
            return EventPageDTO(
                event=event.to_dto(custom_fields),
                rsvps=[rsvp.to_dto(answers[rsvp.uuid]) for rsvp in rsvps],
                user_tokens=[],
            )
