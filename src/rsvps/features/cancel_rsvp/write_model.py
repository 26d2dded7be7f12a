"""Write model for a guest cancelling their own RSVP.

A guest may only cancel RSVPs whose token is in their identity store. Anything
else is ignored without telling the caller, so tokens cannot be probed.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps.dtos import EventNotFoundError
from src.rsvps.identity import GuestIdentityStore
from src.rsvps.repository.orm_models import CustomFieldResponse, Rsvp
from src.rsvps.repository.read_models import get_event_by_public_id

logger = logging.getLogger(__name__)


class RsvpCancelWriteModel(ABC):
    """Abstract base class for RSVP cancellation."""

    @abstractmethod
    async def cancel_rsvp(
        self,
        public_id: str,
        token: str,
        identity_store: GuestIdentityStore,
    ) -> bool:
        """Delete the RSVP with ``token`` if the guest holds that token.

        Returns True if a row was deleted. Repeating a cancellation, or
        cancelling someone else's RSVP, returns False and changes nothing.

        Raises:
            EventNotFoundError: the event is unknown or unpublished
        """
        raise NotImplementedError


class SqlRsvpCancelWriteModel(RsvpCancelWriteModel):
    """SQL implementation of RSVP cancellation."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def cancel_rsvp(
        self,
        public_id: str,
        token: str,
        identity_store: GuestIdentityStore,
    ) -> bool:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await get_event_by_public_id(session, public_id)
            if not event:
                raise EventNotFoundError(public_id)

            if not identity_store.contains(event.public_hash, token):
                logger.debug("Ignoring cancel of %s for event %s: not held by guest", token, public_id)
                return False

            result = await session.execute(
                select(Rsvp).where(Rsvp.event_id == event.uuid, Rsvp.identity_token == token)
            )
            rsvp = result.scalar_one_or_none()

            deleted = False
            if rsvp:
                await session.execute(
                    delete(CustomFieldResponse).where(CustomFieldResponse.rsvp_id == rsvp.uuid)
                )
                await session.delete(rsvp)
                await session.flush()
                deleted = True

            event_key = event.public_hash

        identity_store.revoke(event_key, token)
        if deleted:
            logger.info("Cancelled RSVP %s for event %s", token, public_id)
        return deleted
