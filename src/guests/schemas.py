"""Response models shared by the guest, RSVP and auth routers."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.guests.dtos import AccountStatus, GuestDTO, PartnerDTO, ResponseStatus, RSVPDTO


class PartnerResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: str | None = None

    @classmethod
    def from_dto(cls, partner: PartnerDTO | None) -> "PartnerResponse | None":
        if partner is None:
            return None
        return cls(
            id=partner.id,
            first_name=partner.first_name,
            last_name=partner.last_name,
            full_name=partner.full_name,
            email=partner.email,
        )


class GuestResponse(BaseModel):
    user_id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: str | None = None
    account_status: AccountStatus
    plus_one_allowed: bool
    is_admin: bool = False
    has_partner: bool
    partner: PartnerResponse | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        return cls(
            user_id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            full_name=guest.full_name,
            email=guest.email,
            account_status=guest.account_status,
            plus_one_allowed=guest.plus_one_allowed,
            is_admin=guest.is_admin,
            has_partner=guest.partner_id is not None,
            partner=PartnerResponse.from_dto(guest.partner),
        )


class RSVPResponse(BaseModel):
    id: UUID
    user_id: UUID
    partner_id: UUID | None = None
    response_status: ResponseStatus
    dietary_restrictions: str | None = None
    message: str | None = None
    responded_at: datetime | None = None

    @classmethod
    def from_dto(cls, rsvp: RSVPDTO | None) -> "RSVPResponse | None":
        if rsvp is None:
            return None
        return cls(
            id=rsvp.id,
            user_id=rsvp.user_id,
            partner_id=rsvp.partner_id,
            response_status=rsvp.response_status,
            dietary_restrictions=rsvp.dietary_restrictions,
            message=rsvp.message,
            responded_at=rsvp.responded_at,
        )
