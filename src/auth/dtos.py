from dataclasses import dataclass
from datetime import datetime

from src.guests.dtos import GuestDTO


class InvalidCredentialsError(Exception):
    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class AlreadyRegisteredError(Exception):
    """Raised when the guest already has a login account."""

    def __init__(self) -> None:
        super().__init__("An account already exists for this guest. Please log in instead.")


class EmailInUseError(Exception):
    """Raised when another guest registered with the same email."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"The email address '{email}' is already registered")


class NameMismatchError(Exception):
    """Raised when registration names do not match the guest record."""

    def __init__(self) -> None:
        super().__init__("Name does not match the guest record")


@dataclass(frozen=True)
class LoginDTO:
    session_id: str
    expires_at: datetime
    guest: GuestDTO
