import abc
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import (
    GuestDTO,
    GuestLookupDTO,
    HouseholdDTO,
    ResponseStatus,
    RSVPDTO,
    RSVPSummaryDTO,
    UserRSVPDTO,
)
from src.guests.repository.orm_models import RSVP, User


def active_users():
    return select(User).where(User.deleted_at.is_(None))


async def get_active_user(session: AsyncSession, user_id: UUID | None) -> User | None:
    if user_id is None:
        return None
    result = await session.execute(active_users().where(User.id == user_id))
    return result.scalar_one_or_none()


async def find_user_by_name(session: AsyncSession, first_name: str, last_name: str) -> User | None:
    """Case-insensitive match on trimmed names among active users."""
    stmt = (
        active_users()
        .where(func.lower(User.first_name) == first_name.strip().lower())
        .where(func.lower(User.last_name) == last_name.strip().lower())
        .order_by(User.created_at)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def get_rsvp_for_user(session: AsyncSession, user_id: UUID | None) -> RSVP | None:
    if user_id is None:
        return None
    result = await session.execute(select(RSVP).where(RSVP.user_id == user_id))
    return result.scalar_one_or_none()


class GuestReadModel(abc.ABC):
    @abc.abstractmethod
    async def lookup_guest(self, first_name: str, last_name: str) -> GuestLookupDTO | None:
        """Find a guest by name, with their partner summary."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guest(self, user_id: UUID) -> GuestDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_guests(self) -> list[GuestDTO]:
        raise NotImplementedError


class SqlGuestReadModel(GuestReadModel):
    """SQL implementation of guest read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def lookup_guest(self, first_name: str, last_name: str) -> GuestLookupDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            user = await find_user_by_name(session, first_name, last_name)
            if user is None:
                return None
            partner = await get_active_user(session, user.partner_id)
            return GuestLookupDTO(guest=GuestDTO.from_user(user, partner=partner))

    async def get_guest(self, user_id: UUID) -> GuestDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            user = await get_active_user(session, user_id)
            if user is None:
                return None
            partner = await get_active_user(session, user.partner_id)
            rsvp = await get_rsvp_for_user(session, user.id)
            return GuestDTO.from_user(
                user,
                partner=partner,
                response_status=ResponseStatus(rsvp.response_status) if rsvp else None,
            )

    async def list_guests(self) -> list[GuestDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            users = (
                await session.execute(active_users().order_by(User.last_name, User.first_name))
            ).scalars().all()
            by_id = {user.id: user for user in users}
            statuses = await _statuses_by_user(session)
            return [
                GuestDTO.from_user(
                    user,
                    partner=by_id.get(user.partner_id),
                    response_status=statuses.get(user.id),
                )
                for user in users
            ]


async def _statuses_by_user(session: AsyncSession) -> dict[UUID, ResponseStatus]:
    result = await session.execute(select(RSVP.user_id, RSVP.response_status))
    return {user_id: ResponseStatus(status) for user_id, status in result.all()}


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_rsvp(self, user_id: UUID) -> UserRSVPDTO | None:
        """
        Get the RSVP of a guest and of their partner.
        Returns None when the guest does not exist.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_rsvp_summary(self) -> RSVPSummaryDTO:
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_rsvp(self, user_id: UUID) -> UserRSVPDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            user = await get_active_user(session, user_id)
            if user is None:
                return None
            partner = await get_active_user(session, user.partner_id)
            user_rsvp = await get_rsvp_for_user(session, user.id)
            partner_rsvp = await get_rsvp_for_user(session, partner.id) if partner else None

            return UserRSVPDTO(
                guest=GuestDTO.from_user(user, partner=partner),
                user_rsvp=RSVPDTO.from_rsvp(user_rsvp) if user_rsvp else None,
                partner_rsvp=RSVPDTO.from_rsvp(partner_rsvp) if partner_rsvp else None,
            )

    async def get_rsvp_summary(self) -> RSVPSummaryDTO:
        """
        Summarise responses per household.
        A couple is listed once, under whichever partner sorts first by name.
        """
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            users = (
                await session.execute(active_users().order_by(User.last_name, User.first_name))
            ).scalars().all()
            rsvps = {
                rsvp.user_id: RSVPDTO.from_rsvp(rsvp)
                for rsvp in (await session.execute(select(RSVP))).scalars().all()
            }

        by_id = {user.id: user for user in users}
        seen: set[UUID] = set()
        households: list[HouseholdDTO] = []
        for user in users:
            if user.id in seen:
                continue
            seen.add(user.id)
            partner = by_id.get(user.partner_id)
            if partner is not None:
                seen.add(partner.id)
            households.append(
                HouseholdDTO(
                    guest=GuestDTO.from_user(user, partner=partner),
                    rsvp=rsvps.get(user.id),
                    partner=GuestDTO.from_user(partner, partner=user) if partner else None,
                    partner_rsvp=rsvps.get(partner.id) if partner else None,
                )
            )

        statuses = [
            rsvps[user.id].response_status if user.id in rsvps else ResponseStatus.PENDING
            for user in users
        ]
        attending = statuses.count(ResponseStatus.ATTENDING)
        not_attending = statuses.count(ResponseStatus.NOT_ATTENDING)
        return RSVPSummaryDTO(
            total_households=len(households),
            total_guests=len(users),
            responded=attending + not_attending,
            attending=attending,
            not_attending=not_attending,
            pending=statuses.count(ResponseStatus.PENDING),
            households=households,
        )
