"""Write model for promoting a plus-one to a guest-list user.

The plus-one becomes a User row linked to the inviting guest through partner_id
(both directions) and gets an attending RSVP submitted on their behalf.
Returns DTOs instead of ORM models.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import (
    AccountStatus,
    GuestDTO,
    GuestNotFoundError,
    PlusOneConflictError,
    PlusOneDTO,
    PlusOneNotAllowedError,
    PlusOneResultDTO,
    ResponseStatus,
    RSVPDTO,
)
from src.guests.repository.orm_models import User
from src.guests.repository.read_models import find_user_by_name, get_active_user
from src.guests.repository.write_models import set_partner, upsert_rsvp

logger = logging.getLogger(__name__)


class PlusOneGuestWriteModel(ABC):
    """Abstract base class for plus-one promotion."""

    @abstractmethod
    async def create_plus_one_guest(
        self,
        inviting_user_id: UUID,
        plus_one_data: PlusOneDTO,
    ) -> PlusOneResultDTO:
        """
        Create (or reuse) the plus-one user and record their attending RSVP.
        """
        raise NotImplementedError

    @abstractmethod
    def set_session_overwrite(self, session: AsyncSession) -> None:
        """
        Set the session to use for database operations.
        """
        raise NotImplementedError


class SqlPlusOneGuestWriteModel(PlusOneGuestWriteModel):
    """SQL implementation of plus-one promotion."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    def set_session_overwrite(self, session: AsyncSession) -> None:
        self._session_overwrite = session

    async def create_plus_one_guest(
        self,
        inviting_user_id: UUID,
        plus_one_data: PlusOneDTO,
    ) -> PlusOneResultDTO:
        """
        Raises PlusOneNotAllowedError if the inviting guest may not bring anyone.
        Raises PlusOneConflictError if the name belongs to someone else on the
        list, or if the inviting guest already has a different partner.
        """
        async with self.async_session_manager(session_overwrite=self._session_overwrite) as session:
            inviter = await get_active_user(session, inviting_user_id)
            if inviter is None:
                raise GuestNotFoundError()
            if not inviter.plus_one_allowed:
                raise PlusOneNotAllowedError()

            current_partner = await get_active_user(session, inviter.partner_id)
            existing = await find_user_by_name(
                session, plus_one_data.first_name, plus_one_data.last_name
            )

            created = False
            if existing is not None:
                if existing.id == inviter.id:
                    raise PlusOneConflictError("You cannot be your own plus-one")
                if current_partner is None or existing.id != current_partner.id:
                    raise PlusOneConflictError(
                        f"{existing.full_name} is already on the guest list"
                    )
                plus_one = existing
            else:
                if current_partner is not None:
                    raise PlusOneConflictError(
                        f"You are already bringing {current_partner.full_name}"
                    )
                plus_one = User(
                    first_name=plus_one_data.first_name.strip(),
                    last_name=plus_one_data.last_name.strip(),
                    account_status=AccountStatus.GUEST,
                    plus_one_allowed=False,
                    is_admin=False,
                )
                session.add(plus_one)
                await session.flush()
                await set_partner(session, inviter, plus_one)
                created = True
                logger.info("Promoted plus-one %s for guest %s", plus_one.id, inviter.id)

            rsvp = await upsert_rsvp(
                session,
                user_id=plus_one.id,
                response_status=ResponseStatus.ATTENDING,
                dietary_restrictions=plus_one_data.dietary_restrictions,
                submitted_by=inviter.id,
            )

            return PlusOneResultDTO(
                guest=GuestDTO.from_user(plus_one, partner=inviter),
                rsvp=RSVPDTO.from_rsvp(rsvp),
                created=created,
            )
