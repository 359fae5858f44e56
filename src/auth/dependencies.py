from fastapi import Depends, HTTPException, Request, status

from src.auth.repository.read_models import SessionReadModel, SqlSessionReadModel
from src.config.settings import settings
from src.guests.dtos import GuestDTO


def get_session_read_model() -> SessionReadModel:
    """Dependency to get session read model instance."""
    return SqlSessionReadModel()


def get_session_id(request: Request) -> str | None:
    return request.cookies.get(settings.session_cookie_name)


async def get_optional_user(
    session_id: str | None = Depends(get_session_id),
    read_model: SessionReadModel = Depends(get_session_read_model),
) -> GuestDTO | None:
    if not session_id:
        return None
    return await read_model.get_session_user(session_id)


async def get_current_user(user: GuestDTO | None = Depends(get_optional_user)) -> GuestDTO:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user


async def require_admin(user: GuestDTO = Depends(get_current_user)) -> GuestDTO:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
    return user
