from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.auth.dependencies import get_current_user, get_optional_user, get_session_id
from src.auth.dtos import (
    AlreadyRegisteredError,
    EmailInUseError,
    InvalidCredentialsError,
    NameMismatchError,
)
from src.auth.repository.write_models import AuthWriteModel, SqlAuthWriteModel
from src.auth.urls import LOGIN_URL, LOGOUT_URL, ME_URL, REGISTER_URL, STATUS_URL
from src.config.settings import settings
from src.guests.dtos import GuestDTO, GuestNotFoundError
from src.guests.schemas import GuestResponse
from src.responses import StandardResponse

router = APIRouter()


class RegisterRequest(BaseModel):
    user_id: UUID
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthStatusResponse(BaseModel):
    authenticated: bool
    user_id: UUID | None = None


def get_auth_write_model() -> AuthWriteModel:
    """Dependency to get auth write model instance."""
    return SqlAuthWriteModel()


@router.post(
    REGISTER_URL,
    response_model=StandardResponse[GuestResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    write_model: AuthWriteModel = Depends(get_auth_write_model),
) -> StandardResponse[GuestResponse]:
    """
    Turn a guest-list entry into a login account.
    The guest is found beforehand through the lookup endpoint.
    """
    try:
        guest = await write_model.register(
            user_id=request.user_id,
            email=str(request.email),
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NameMismatchError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (AlreadyRegisteredError, EmailInUseError) as e:
        raise HTTPException(status_code=409, detail=str(e))

    return StandardResponse(
        message="User account created successfully",
        data=GuestResponse.from_dto(guest),
    )


@router.post(LOGIN_URL, response_model=StandardResponse[GuestResponse])
async def login(
    request: LoginRequest,
    response: Response,
    write_model: AuthWriteModel = Depends(get_auth_write_model),
) -> StandardResponse[GuestResponse]:
    try:
        login_dto = await write_model.login(email=str(request.email), password=request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))

    response.set_cookie(
        key=settings.session_cookie_name,
        value=login_dto.session_id,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return StandardResponse(
        message="Login successful",
        data=GuestResponse.from_dto(login_dto.guest),
    )


@router.post(LOGOUT_URL, response_model=StandardResponse[None])
async def logout(
    response: Response,
    session_id: str | None = Depends(get_session_id),
    write_model: AuthWriteModel = Depends(get_auth_write_model),
) -> StandardResponse[None]:
    response.delete_cookie(settings.session_cookie_name)
    if not session_id:
        return StandardResponse(message="Already logged out")
    await write_model.logout(session_id)
    return StandardResponse(message="Logout successful")


@router.get(ME_URL, response_model=StandardResponse[GuestResponse])
async def me(user: GuestDTO = Depends(get_current_user)) -> StandardResponse[GuestResponse]:
    return StandardResponse(data=GuestResponse.from_dto(user))


@router.get(STATUS_URL, response_model=StandardResponse[AuthStatusResponse])
async def auth_status(
    user: GuestDTO | None = Depends(get_optional_user),
) -> StandardResponse[AuthStatusResponse]:
    return StandardResponse(
        data=AuthStatusResponse(
            authenticated=user is not None,
            user_id=user.id if user else None,
        )
    )
