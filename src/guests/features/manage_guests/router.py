from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.auth.dependencies import require_admin
from src.guests.dtos import (
    GuestAlreadyExistsError,
    GuestDTO,
    GuestNotFoundError,
    GuestUpdateDTO,
    InvalidPartnerError,
    ResponseStatus,
)
from src.guests.features.manage_guests.write_model import (
    GuestAdminWriteModel,
    SqlGuestAdminWriteModel,
)
from src.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from src.guests.schemas import GuestResponse
from src.guests.urls import GUEST_PARTNER_URL, GUEST_URL, GUESTS_URL
from src.responses import StandardResponse

router = APIRouter(dependencies=[Depends(require_admin)])


class GuestCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    plus_one_allowed: bool = False
    admin_notes: str | None = None
    partner_id: UUID | None = None


class GuestUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    plus_one_allowed: bool | None = None
    is_admin: bool | None = None
    admin_notes: str | None = None


class PartnerLink(BaseModel):
    partner_id: UUID | None = None


class AdminGuestResponse(GuestResponse):
    admin_notes: str | None = None
    response_status: ResponseStatus | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "AdminGuestResponse":
        return cls(
            **GuestResponse.from_dto(guest).model_dump(),
            admin_notes=guest.admin_notes,
            response_status=guest.response_status,
        )


class GuestListResponse(BaseModel):
    guests: list[AdminGuestResponse]
    count: int


def get_guest_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


def get_guest_admin_write_model() -> GuestAdminWriteModel:
    """Dependency to get guest admin write model instance."""
    return SqlGuestAdminWriteModel()


@router.get(GUESTS_URL, response_model=StandardResponse[GuestListResponse])
async def list_guests(
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> StandardResponse[GuestListResponse]:
    guests = await read_model.list_guests()
    return StandardResponse(
        data=GuestListResponse(
            guests=[AdminGuestResponse.from_dto(guest) for guest in guests],
            count=len(guests),
        )
    )


@router.get(GUEST_URL, response_model=StandardResponse[AdminGuestResponse])
async def get_guest(
    guest_id: UUID,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> StandardResponse[AdminGuestResponse]:
    guest = await read_model.get_guest(guest_id)
    if guest is None:
        raise HTTPException(status_code=404, detail="Guest not found")
    return StandardResponse(data=AdminGuestResponse.from_dto(guest))


@router.post(
    GUESTS_URL,
    response_model=StandardResponse[AdminGuestResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_guest(
    guest_data: GuestCreate,
    write_model: GuestAdminWriteModel = Depends(get_guest_admin_write_model),
) -> StandardResponse[AdminGuestResponse]:
    try:
        guest = await write_model.create_guest(
            first_name=guest_data.first_name,
            last_name=guest_data.last_name,
            plus_one_allowed=guest_data.plus_one_allowed,
            admin_notes=guest_data.admin_notes,
            partner_id=guest_data.partner_id,
        )
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except GuestAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return StandardResponse(
        message="Guest created successfully",
        data=AdminGuestResponse.from_dto(guest),
    )


@router.patch(GUEST_URL, response_model=StandardResponse[AdminGuestResponse])
async def update_guest(
    guest_id: UUID,
    guest_data: GuestUpdate,
    write_model: GuestAdminWriteModel = Depends(get_guest_admin_write_model),
) -> StandardResponse[AdminGuestResponse]:
    try:
        guest = await write_model.update_guest(
            guest_id,
            GuestUpdateDTO(**guest_data.model_dump()),
        )
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except GuestAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return StandardResponse(
        message="Guest updated successfully",
        data=AdminGuestResponse.from_dto(guest),
    )


@router.put(GUEST_PARTNER_URL, response_model=StandardResponse[AdminGuestResponse])
async def link_partner(
    guest_id: UUID,
    link: PartnerLink,
    write_model: GuestAdminWriteModel = Depends(get_guest_admin_write_model),
) -> StandardResponse[AdminGuestResponse]:
    """Set (or clear, with a null partner_id) the guest's partner on both sides."""
    try:
        guest = await write_model.link_partners(guest_id, link.partner_id)
    except InvalidPartnerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return StandardResponse(
        message="Partner updated successfully",
        data=AdminGuestResponse.from_dto(guest),
    )


@router.delete(GUEST_URL, response_model=StandardResponse[None])
async def delete_guest(
    guest_id: UUID,
    write_model: GuestAdminWriteModel = Depends(get_guest_admin_write_model),
) -> StandardResponse[None]:
    try:
        await write_model.delete_guest(guest_id)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return StandardResponse(message="Guest deleted successfully")
