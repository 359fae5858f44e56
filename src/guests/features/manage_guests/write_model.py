"""Write model for admin guest-list management.

Guests are created with names only; email and password come later through
registration. Partner links are always written on both sides.
Returns DTOs instead of ORM models.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.orm_models import UserSession
from src.config.database import async_session_manager
from src.guests.dtos import (
    AccountStatus,
    GuestAlreadyExistsError,
    GuestDTO,
    GuestNotFoundError,
    GuestUpdateDTO,
    InvalidPartnerError,
)
from src.guests.repository.orm_models import User
from src.guests.repository.read_models import find_user_by_name, get_active_user
from src.guests.repository.write_models import set_partner
from src.models.base import utcnow

logger = logging.getLogger(__name__)


class GuestAdminWriteModel(ABC):
    """Abstract base class for guest-list write operations."""

    @abstractmethod
    async def create_guest(
        self,
        first_name: str,
        last_name: str,
        plus_one_allowed: bool = False,
        admin_notes: str | None = None,
        partner_id: UUID | None = None,
        is_admin: bool = False,
    ) -> GuestDTO:
        """Add a person to the guest list, optionally linked to a partner."""
        raise NotImplementedError

    @abstractmethod
    async def update_guest(self, guest_id: UUID, changes: GuestUpdateDTO) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def link_partners(self, guest_id: UUID, partner_id: UUID | None) -> GuestDTO:
        """Link two guests as partners, or unlink the guest when partner_id is None."""
        raise NotImplementedError

    @abstractmethod
    async def delete_guest(self, guest_id: UUID) -> None:
        """Soft delete a guest."""
        raise NotImplementedError


class SqlGuestAdminWriteModel(GuestAdminWriteModel):
    """SQL implementation of guest-list write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_guest(
        self,
        first_name: str,
        last_name: str,
        plus_one_allowed: bool = False,
        admin_notes: str | None = None,
        partner_id: UUID | None = None,
        is_admin: bool = False,
    ) -> GuestDTO:
        """
        Raises GuestAlreadyExistsError when the name is taken, GuestNotFoundError
        when the partner does not exist.
        """
        first_name = first_name.strip()
        last_name = last_name.strip()
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            if await find_user_by_name(session, first_name, last_name) is not None:
                raise GuestAlreadyExistsError(f"{first_name} {last_name}")

            partner = None
            if partner_id is not None:
                partner = await self._get_user(session, partner_id, "Partner not found")

            user = User(
                first_name=first_name,
                last_name=last_name,
                plus_one_allowed=plus_one_allowed,
                is_admin=is_admin,
                admin_notes=admin_notes,
                account_status=AccountStatus.GUEST,
            )
            session.add(user)
            await session.flush()

            if partner is not None:
                await set_partner(session, user, partner)

            logger.info("Added guest %s (%s)", user.id, user.full_name)
            return GuestDTO.from_user(user, partner=partner)

    async def update_guest(self, guest_id: UUID, changes: GuestUpdateDTO) -> GuestDTO:
        """Raises GuestAlreadyExistsError when renaming onto another guest's name."""
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            user = await self._get_user(session, guest_id)

            first_name = (changes.first_name or user.first_name).strip()
            last_name = (changes.last_name or user.last_name).strip()
            existing = await find_user_by_name(session, first_name, last_name)
            if existing is not None and existing.id != user.id:
                raise GuestAlreadyExistsError(f"{first_name} {last_name}")

            user.first_name = first_name
            user.last_name = last_name
            if changes.plus_one_allowed is not None:
                user.plus_one_allowed = changes.plus_one_allowed
            if changes.is_admin is not None:
                user.is_admin = changes.is_admin
            if changes.admin_notes is not None:
                user.admin_notes = changes.admin_notes
            await session.flush()

            partner = await get_active_user(session, user.partner_id)
            return GuestDTO.from_user(user, partner=partner)

    async def link_partners(self, guest_id: UUID, partner_id: UUID | None) -> GuestDTO:
        """Raises InvalidPartnerError when linking a guest to themselves."""
        if partner_id is not None and partner_id == guest_id:
            raise InvalidPartnerError("A guest cannot be their own partner")

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            user = await self._get_user(session, guest_id)
            partner = None
            if partner_id is not None:
                partner = await self._get_user(session, partner_id, "Partner not found")

            await set_partner(session, user, partner)
            logger.info("Linked guest %s to partner %s", user.id, partner_id)
            return GuestDTO.from_user(user, partner=partner)

    async def delete_guest(self, guest_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            user = await self._get_user(session, guest_id)

            await set_partner(session, user, None)
            user.deleted_at = utcnow()
            user.account_status = AccountStatus.DELETED
            # frees the email for another guest to register with
            user.email = None
            user.password_hash = None
            await session.execute(delete(UserSession).where(UserSession.user_id == user.id))
            await session.flush()
            logger.info("Deleted guest %s", user.id)

    async def _get_user(
        self, session: AsyncSession, user_id: UUID, message: str = "Guest not found"
    ) -> User:
        user = await get_active_user(session, user_id)
        if user is None:
            raise GuestNotFoundError(message)
        return user
