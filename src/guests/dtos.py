from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.guests.repository.orm_models import RSVP, User


class GuestNotFoundError(Exception):
    """Raised when no active user matches the lookup."""

    def __init__(self, message: str = "Guest not found") -> None:
        super().__init__(message)


class GuestAlreadyExistsError(Exception):
    """Raised when the guest list already holds someone with the same name."""

    def __init__(self, full_name: str) -> None:
        self.full_name = full_name
        super().__init__(f"'{full_name}' is already on the guest list")


class PartnerRequiredError(Exception):
    """Raised when a partner response is submitted by someone without a partner."""

    def __init__(self) -> None:
        super().__init__("You have no partner on the guest list to respond for")


class ConflictingPartnerResponseError(Exception):
    """Raised when the partner is answered for and also named as the plus-one."""

    def __init__(self) -> None:
        super().__init__("Your partner cannot be both answered for and named as your plus-one")


class PlusOneNotAllowedError(Exception):
    """Raised when a guest without plus-one permission names a plus-one."""

    def __init__(self) -> None:
        super().__init__("Plus-one not allowed for this guest")


class PlusOneConflictError(Exception):
    """Raised when a plus-one cannot be linked to the inviting guest."""

    pass


class InvalidPartnerError(Exception):
    """Raised when a partner link is not possible."""

    pass


class AccountStatus(str, Enum):
    GUEST = "guest"
    REGISTERED = "registered"
    DELETED = "deleted"


class ResponseStatus(str, Enum):
    ATTENDING = "attending"
    NOT_ATTENDING = "not_attending"
    PENDING = "pending"


@dataclass(frozen=True)
class PartnerDTO:
    """Short partner summary embedded in guest payloads."""

    id: UUID
    first_name: str
    last_name: str
    email: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_user(cls, user: "User") -> "PartnerDTO":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )


@dataclass(frozen=True)
class GuestDTO:
    """DTO for a user row."""

    id: UUID
    first_name: str
    last_name: str
    account_status: AccountStatus
    plus_one_allowed: bool = False
    is_admin: bool = False
    email: str | None = None
    partner_id: UUID | None = None
    partner: PartnerDTO | None = None
    admin_notes: str | None = None
    response_status: ResponseStatus | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def has_user_account(self) -> bool:
        return self.email is not None and self.account_status == AccountStatus.REGISTERED

    @classmethod
    def from_user(
        cls,
        user: "User",
        partner: "User | None" = None,
        response_status: ResponseStatus | None = None,
    ) -> "GuestDTO":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            account_status=AccountStatus(user.account_status),
            plus_one_allowed=user.plus_one_allowed,
            is_admin=user.is_admin,
            email=user.email,
            partner_id=user.partner_id,
            partner=PartnerDTO.from_user(partner) if partner else None,
            admin_notes=user.admin_notes,
            response_status=response_status,
        )


@dataclass(frozen=True)
class GuestUpdateDTO:
    """Admin changes to a guest. None leaves a field untouched."""

    first_name: str | None = None
    last_name: str | None = None
    plus_one_allowed: bool | None = None
    is_admin: bool | None = None
    admin_notes: str | None = None


@dataclass(frozen=True)
class GuestLookupDTO:
    """Result of looking a guest up by name before registration."""

    guest: GuestDTO

    @property
    def needs_email(self) -> bool:
        return self.guest.email is None


@dataclass(frozen=True)
class RSVPDTO:
    """DTO for one person's RSVP row."""

    id: UUID
    user_id: UUID
    response_status: ResponseStatus
    partner_id: UUID | None = None
    dietary_restrictions: str | None = None
    message: str | None = None
    responded_at: datetime | None = None

    @classmethod
    def from_rsvp(cls, rsvp: "RSVP") -> "RSVPDTO":
        return cls(
            id=rsvp.id,
            user_id=rsvp.user_id,
            partner_id=rsvp.partner_id,
            response_status=ResponseStatus(rsvp.response_status),
            dietary_restrictions=rsvp.dietary_restrictions,
            message=rsvp.message,
            responded_at=rsvp.responded_at,
        )


@dataclass(frozen=True)
class PlusOneDTO:
    """Plus-one details named by the inviting guest."""

    first_name: str
    last_name: str
    dietary_restrictions: str | None = None


@dataclass(frozen=True)
class RSVPSubmissionDTO:
    """Everything a guest can send in one RSVP submission."""

    response_status: ResponseStatus
    dietary_restrictions: str | None = None
    message: str | None = None
    partner_response_status: ResponseStatus | None = None
    partner_dietary_restrictions: str | None = None
    partner_message: str | None = None
    plus_one: PlusOneDTO | None = None


@dataclass(frozen=True)
class PlusOneResultDTO:
    guest: GuestDTO
    rsvp: RSVPDTO
    created: bool


@dataclass(frozen=True)
class RSVPResultDTO:
    """Rows written by one submission."""

    user_rsvp: RSVPDTO
    partner_rsvp: RSVPDTO | None = None
    plus_one: PlusOneResultDTO | None = None


@dataclass(frozen=True)
class UserRSVPDTO:
    """Current RSVP state for a guest and their partner."""

    guest: GuestDTO
    user_rsvp: RSVPDTO | None = None
    partner_rsvp: RSVPDTO | None = None


@dataclass(frozen=True)
class HouseholdDTO:
    """One row of the RSVP summary: a guest and, for couples, their partner."""

    guest: GuestDTO
    rsvp: RSVPDTO | None = None
    partner: GuestDTO | None = None
    partner_rsvp: RSVPDTO | None = None


@dataclass(frozen=True)
class RSVPSummaryDTO:
    total_households: int
    total_guests: int
    responded: int
    attending: int
    not_attending: int
    pending: int
    households: list[HouseholdDTO] = field(default_factory=list)

    @property
    def total_attending_count(self) -> int:
        return self.attending
