from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from src.guests.schemas import PartnerResponse
from src.guests.urls import LOOKUP_GUEST_URL
from src.responses import StandardResponse

router = APIRouter()


class LookupGuestRequest(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class LookupGuestResponse(BaseModel):
    """Guest record as needed by the registration form."""

    user_id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: str | None = None
    has_partner: bool
    partner: PartnerResponse | None = None
    plus_one_allowed: bool
    needs_email: bool
    has_user_account: bool


def get_guest_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


@router.post(LOOKUP_GUEST_URL, response_model=StandardResponse[LookupGuestResponse])
async def lookup_guest(
    request: LookupGuestRequest,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> StandardResponse[LookupGuestResponse]:
    """
    Find a guest on the list by first and last name (case-insensitive).
    Used before registration to show who the guest is and whether they have a partner.
    """
    first_name = request.first_name.strip()
    last_name = request.last_name.strip()
    if not first_name or not last_name:
        raise HTTPException(status_code=400, detail="First name and last name are required")

    lookup = await read_model.lookup_guest(first_name, last_name)
    if lookup is None:
        raise HTTPException(
            status_code=404,
            detail="Guest record not found. Please check the spelling of your name.",
        )

    guest = lookup.guest
    return StandardResponse(
        data=LookupGuestResponse(
            user_id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            full_name=guest.full_name,
            email=guest.email,
            has_partner=guest.partner_id is not None,
            partner=PartnerResponse.from_dto(guest.partner),
            plus_one_allowed=guest.plus_one_allowed,
            needs_email=lookup.needs_email,
            has_user_account=guest.has_user_account,
        )
    )
