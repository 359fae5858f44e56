"""RSVP models - Read and write models that return DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import (
    ConflictingPartnerResponseError,
    GuestNotFoundError,
    PartnerRequiredError,
    PlusOneDTO,
    ResponseStatus,
    RSVPDTO,
    RSVPResultDTO,
    RSVPSubmissionDTO,
)
from src.guests.repository.orm_models import RSVP, User
from src.guests.repository.read_models import get_active_user
from src.models.base import utcnow

if TYPE_CHECKING:
    from src.guests.features.create_plus_one_guest.write_model import PlusOneGuestWriteModel

logger = logging.getLogger(__name__)


async def upsert_rsvp(
    session: AsyncSession,
    user_id: UUID,
    response_status: ResponseStatus,
    dietary_restrictions: str | None = None,
    message: str | None = None,
    submitted_by: UUID | None = None,
) -> RSVP:
    """Create or update the single RSVP row of a person."""
    result = await session.execute(select(RSVP).where(RSVP.user_id == user_id))
    rsvp = result.scalar_one_or_none()

    if rsvp is None:
        rsvp = RSVP(user_id=user_id)
        session.add(rsvp)

    rsvp.response_status = response_status
    rsvp.dietary_restrictions = dietary_restrictions
    rsvp.message = message
    rsvp.partner_id = submitted_by
    rsvp.responded_at = utcnow()
    await session.flush()
    return rsvp


async def set_partner(session: AsyncSession, user: User, partner: User | None) -> None:
    """
    Link user and partner to each other, or unlink user when partner is None.
    Any previous partner of either side loses its back-link.
    """
    new_pair = {user.id, partner.id} if partner else {user.id}
    for person in (user, partner):
        if person is None or person.partner_id is None or person.partner_id in new_pair:
            continue
        previous = await session.get(User, person.partner_id)
        if previous is not None and previous.partner_id == person.id:
            previous.partner_id = None

    user.partner_id = partner.id if partner else None
    if partner is not None:
        partner.partner_id = user.id
    await session.flush()


def _same_name(user: User, plus_one: PlusOneDTO) -> bool:
    return (
        user.first_name.strip().lower() == plus_one.first_name.strip().lower()
        and user.last_name.strip().lower() == plus_one.last_name.strip().lower()
    )


class RSVPWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(
        self,
        user_id: UUID,
        submission: RSVPSubmissionDTO,
    ) -> RSVPResultDTO:
        """
        Submit RSVP for a guest, optionally for their partner and plus-one.
        Returns DTO instead of ORM model.
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """Write operations for RSVP. Returns DTOs, never ORM models."""

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        plus_one_guest_write_model: "PlusOneGuestWriteModel | None" = None,
    ):
        self._session_overwrite = session_overwrite
        self._plus_one_guest_write_model = plus_one_guest_write_model

    async def submit_rsvp(
        self,
        user_id: UUID,
        submission: RSVPSubmissionDTO,
    ) -> RSVPResultDTO:
        """
        Submit RSVP for a guest.

        The guest's own row is always written. A partner response writes a
        second row for the partner, marked as submitted by this guest. Plus-one
        details are only honoured when the guest is attending.
        Raises GuestNotFoundError, PartnerRequiredError, ConflictingPartnerResponseError
        when the partner is also named as plus-one, and the plus-one errors.
        """
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            if self._plus_one_guest_write_model:
                self._plus_one_guest_write_model.set_session_overwrite(session)

            user = await get_active_user(session, user_id)
            if user is None:
                raise GuestNotFoundError()

            partner = None
            if submission.partner_response_status is not None:
                partner = await get_active_user(session, user.partner_id)
                if partner is None:
                    raise PartnerRequiredError()
                if (
                    submission.plus_one is not None
                    and submission.response_status == ResponseStatus.ATTENDING
                    and _same_name(partner, submission.plus_one)
                ):
                    raise ConflictingPartnerResponseError()

            user_rsvp = await upsert_rsvp(
                session,
                user_id=user.id,
                response_status=submission.response_status,
                dietary_restrictions=submission.dietary_restrictions,
                message=submission.message,
            )
            user_rsvp_dto = RSVPDTO.from_rsvp(user_rsvp)

            partner_rsvp_dto = None
            if partner is not None:
                partner_rsvp = await upsert_rsvp(
                    session,
                    user_id=partner.id,
                    response_status=submission.partner_response_status,
                    dietary_restrictions=submission.partner_dietary_restrictions,
                    message=submission.partner_message,
                    submitted_by=user.id,
                )
                partner_rsvp_dto = RSVPDTO.from_rsvp(partner_rsvp)

            plus_one = None
            if (
                submission.plus_one is not None
                and submission.response_status == ResponseStatus.ATTENDING
                and self._plus_one_guest_write_model
            ):
                plus_one = await self._plus_one_guest_write_model.create_plus_one_guest(
                    inviting_user_id=user.id,
                    plus_one_data=submission.plus_one,
                )

        logger.info(
            "RSVP submitted by %s: %s (partner: %s, plus-one: %s)",
            user_id,
            submission.response_status.value,
            partner_rsvp_dto.response_status.value if partner_rsvp_dto else None,
            plus_one.guest.id if plus_one else None,
        )
        return RSVPResultDTO(
            user_rsvp=user_rsvp_dto,
            partner_rsvp=partner_rsvp_dto,
            plus_one=plus_one,
        )
