"""Write model for guest accounts: registration and login sessions.

Returns DTOs instead of ORM models.
"""

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from functools import partial
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dtos import (
    AlreadyRegisteredError,
    EmailInUseError,
    InvalidCredentialsError,
    LoginDTO,
    NameMismatchError,
)
from src.auth.orm_models import UserSession
from src.auth.security import hash_password, new_session_id, verify_password
from src.config.database import async_session_manager
from src.config.settings import settings
from src.guests.dtos import AccountStatus, GuestDTO, GuestNotFoundError
from src.guests.repository.orm_models import User
from src.guests.repository.read_models import active_users, get_active_user
from src.models.base import utcnow

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthWriteModel(ABC):
    """Abstract base class for account write operations."""

    @abstractmethod
    async def register(
        self,
        user_id: UUID,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> GuestDTO:
        """Attach email and password to an existing guest-list user."""
        raise NotImplementedError

    @abstractmethod
    async def login(self, email: str, password: str) -> LoginDTO:
        """Check credentials and open a session."""
        raise NotImplementedError

    @abstractmethod
    async def logout(self, session_id: str) -> None:
        raise NotImplementedError


class SqlAuthWriteModel(AuthWriteModel):
    """SQL implementation of account write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def register(
        self,
        user_id: UUID,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> GuestDTO:
        """
        Raises GuestNotFoundError, NameMismatchError, AlreadyRegisteredError
        and EmailInUseError.
        """
        email = normalize_email(email)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            user = await get_active_user(session, user_id)
            if user is None:
                raise GuestNotFoundError("User not found")

            if (
                user.first_name.lower() != first_name.strip().lower()
                or user.last_name.lower() != last_name.strip().lower()
            ):
                raise NameMismatchError()

            if user.email is not None and user.account_status == AccountStatus.REGISTERED:
                raise AlreadyRegisteredError()

            result = await session.execute(
                active_users().where(func.lower(User.email) == email).where(User.id != user.id)
            )
            if result.scalars().first() is not None:
                raise EmailInUseError(email)

            user.email = email
            user.password_hash = hash_password(password)
            user.account_status = AccountStatus.REGISTERED
            await session.flush()

            partner = await get_active_user(session, user.partner_id)
            logger.info("Guest %s registered an account", user.id)
            return GuestDTO.from_user(user, partner=partner)

    async def login(self, email: str, password: str) -> LoginDTO:
        """Raises InvalidCredentialsError."""
        email = normalize_email(email)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                active_users()
                .where(func.lower(User.email) == email)
                .where(User.account_status == AccountStatus.REGISTERED)
            )
            user = result.scalars().first()
            if user is None or not verify_password(password, user.password_hash):
                raise InvalidCredentialsError()

            # drop this user's stale sessions while we are here
            await session.execute(
                delete(UserSession)
                .where(UserSession.user_id == user.id)
                .where(UserSession.expires_at <= utcnow())
            )

            user_session = UserSession(
                sid=new_session_id(),
                user_id=user.id,
                expires_at=utcnow() + timedelta(hours=settings.session_ttl_hours),
            )
            session.add(user_session)
            await session.flush()

            partner = await get_active_user(session, user.partner_id)
            logger.info("Guest %s logged in", user.id)
            return LoginDTO(
                session_id=user_session.sid,
                expires_at=user_session.expires_at,
                guest=GuestDTO.from_user(user, partner=partner),
            )

    async def logout(self, session_id: str) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await session.execute(delete(UserSession).where(UserSession.sid == session_id))
