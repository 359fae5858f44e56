from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.auth.dependencies import get_current_user
from src.guests.dtos import (
    ConflictingPartnerResponseError,
    GuestDTO,
    GuestNotFoundError,
    PartnerRequiredError,
    PlusOneConflictError,
    PlusOneDTO,
    PlusOneNotAllowedError,
    ResponseStatus,
    RSVPSubmissionDTO,
)
from src.guests.features.create_plus_one_guest.write_model import (
    SqlPlusOneGuestWriteModel,
)
from src.guests.repository.write_models import RSVPWriteModel, SqlRSVPWriteModel
from src.guests.schemas import GuestResponse, RSVPResponse
from src.guests.urls import RSVPS_URL
from src.responses import StandardResponse

router = APIRouter()


class PlusOneSubmit(BaseModel):
    """Submit plus one details."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    dietary_restrictions: str | None = None


class RSVPSubmit(BaseModel):
    response_status: ResponseStatus
    dietary_restrictions: str | None = None
    message: str | None = None
    partner_response_status: ResponseStatus | None = None
    partner_dietary_restrictions: str | None = None
    partner_message: str | None = None
    plus_one: PlusOneSubmit | None = None


class PlusOneResponse(BaseModel):
    guest: GuestResponse
    rsvp: RSVPResponse
    created: bool


class RSVPSubmitResponse(BaseModel):
    user_rsvp: RSVPResponse
    partner_rsvp: RSVPResponse | None = None
    plus_one: PlusOneResponse | None = None


def get_rsvp_write_model() -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel(plus_one_guest_write_model=SqlPlusOneGuestWriteModel())


@router.post(
    RSVPS_URL,
    response_model=StandardResponse[RSVPSubmitResponse],
    status_code=status.HTTP_201_CREATED,
)
async def submit_rsvp(
    rsvp_data: RSVPSubmit,
    user: GuestDTO = Depends(get_current_user),
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> StandardResponse[RSVPSubmitResponse]:
    """
    Submit the logged-in guest's RSVP.
    Partners can answer for each other; guests allowed a plus-one can name them here.
    """
    plus_one_dto = None
    if rsvp_data.plus_one:
        plus_one_dto = PlusOneDTO(
            first_name=rsvp_data.plus_one.first_name.strip(),
            last_name=rsvp_data.plus_one.last_name.strip(),
            dietary_restrictions=rsvp_data.plus_one.dietary_restrictions,
        )
        if not plus_one_dto.first_name or not plus_one_dto.last_name:
            raise HTTPException(status_code=400, detail="Plus-one first and last name are required")

    submission = RSVPSubmissionDTO(
        response_status=rsvp_data.response_status,
        dietary_restrictions=rsvp_data.dietary_restrictions,
        message=rsvp_data.message,
        partner_response_status=rsvp_data.partner_response_status,
        partner_dietary_restrictions=rsvp_data.partner_dietary_restrictions,
        partner_message=rsvp_data.partner_message,
        plus_one=plus_one_dto,
    )

    try:
        result = await write_model.submit_rsvp(user_id=user.id, submission=submission)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (PartnerRequiredError, ConflictingPartnerResponseError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlusOneNotAllowedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except PlusOneConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    plus_one = None
    if result.plus_one:
        plus_one = PlusOneResponse(
            guest=GuestResponse.from_dto(result.plus_one.guest),
            rsvp=RSVPResponse.from_dto(result.plus_one.rsvp),
            created=result.plus_one.created,
        )

    return StandardResponse(
        message="RSVP submitted successfully!",
        data=RSVPSubmitResponse(
            user_rsvp=RSVPResponse.from_dto(result.user_rsvp),
            partner_rsvp=RSVPResponse.from_dto(result.partner_rsvp),
            plus_one=plus_one,
        ),
    )
