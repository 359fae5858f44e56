from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.auth.dependencies import require_admin
from src.guests.dtos import GuestDTO
from src.guests.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from src.guests.schemas import GuestResponse, RSVPResponse
from src.guests.urls import RSVP_SUMMARY_URL
from src.responses import StandardResponse

router = APIRouter()


class SummaryTotals(BaseModel):
    total_households: int
    total_guests: int
    responded: int
    attending: int
    not_attending: int
    pending: int
    total_attending_count: int


class HouseholdResponse(BaseModel):
    guest: GuestResponse
    rsvp: RSVPResponse | None = None
    partner: GuestResponse | None = None
    partner_rsvp: RSVPResponse | None = None


class RSVPSummaryResponse(BaseModel):
    summary: SummaryTotals
    households: list[HouseholdResponse]


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()


@router.get(RSVP_SUMMARY_URL, response_model=StandardResponse[RSVPSummaryResponse])
async def rsvp_summary(
    _: GuestDTO = Depends(require_admin),
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> StandardResponse[RSVPSummaryResponse]:
    """Admin overview of responses, one row per household."""
    summary = await read_model.get_rsvp_summary()

    return StandardResponse(
        data=RSVPSummaryResponse(
            summary=SummaryTotals(
                total_households=summary.total_households,
                total_guests=summary.total_guests,
                responded=summary.responded,
                attending=summary.attending,
                not_attending=summary.not_attending,
                pending=summary.pending,
                total_attending_count=summary.total_attending_count,
            ),
            households=[
                HouseholdResponse(
                    guest=GuestResponse.from_dto(household.guest),
                    rsvp=RSVPResponse.from_dto(household.rsvp),
                    partner=GuestResponse.from_dto(household.partner) if household.partner else None,
                    partner_rsvp=RSVPResponse.from_dto(household.partner_rsvp),
                )
                for household in summary.households
            ],
        )
    )
