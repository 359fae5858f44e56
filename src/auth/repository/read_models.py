import abc

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.orm_models import UserSession
from src.config.database import async_session_manager
from src.guests.dtos import AccountStatus, GuestDTO
from src.guests.repository.orm_models import User
from src.guests.repository.read_models import get_active_user
from src.models.base import utcnow


class SessionReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_session_user(self, session_id: str) -> GuestDTO | None:
        """
        Get the registered user a session belongs to.
        Returns None for unknown or expired sessions and for inactive users.
        """
        raise NotImplementedError


class SqlSessionReadModel(SessionReadModel):
    """SQL implementation of session read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_session_user(self, session_id: str) -> GuestDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(User)
                .join(UserSession, UserSession.user_id == User.id)
                .where(UserSession.sid == session_id)
                .where(UserSession.expires_at > utcnow())
                .where(User.deleted_at.is_(None))
                .where(User.account_status == AccountStatus.REGISTERED)
            )
            user = result.scalar_one_or_none()
            if user is None:
                # expired, or the user lost access since logging in
                await session.execute(delete(UserSession).where(UserSession.sid == session_id))
                return None

            partner = await get_active_user(session, user.partner_id)
            return GuestDTO.from_user(user, partner=partner)
