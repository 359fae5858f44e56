from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.auth.dependencies import get_current_user
from src.guests.dtos import GuestDTO
from src.guests.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from src.guests.schemas import GuestResponse, RSVPResponse
from src.guests.urls import RSVPS_URL
from src.responses import StandardResponse

router = APIRouter()


class UserRSVPResponse(BaseModel):
    user_rsvp: RSVPResponse | None = None
    partner_rsvp: RSVPResponse | None = None
    user_info: GuestResponse


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()


@router.get(RSVPS_URL, response_model=StandardResponse[UserRSVPResponse])
async def get_rsvp(
    user: GuestDTO = Depends(get_current_user),
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> StandardResponse[UserRSVPResponse]:
    """
    Get the logged-in guest's RSVP, and their partner's when they have one.
    Used to prefill the RSVP form.
    """
    rsvp = await read_model.get_rsvp(user.id)
    if rsvp is None:
        raise HTTPException(status_code=404, detail="Guest not found")

    return StandardResponse(
        data=UserRSVPResponse(
            user_rsvp=RSVPResponse.from_dto(rsvp.user_rsvp),
            partner_rsvp=RSVPResponse.from_dto(rsvp.partner_rsvp),
            user_info=GuestResponse.from_dto(rsvp.guest),
        )
    )
