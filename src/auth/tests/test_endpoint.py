from datetime import timedelta
from uuid import UUID, uuid4

import pytest

from src.auth.dependencies import get_current_user, get_session_read_model
from src.auth.dtos import (
    AlreadyRegisteredError,
    InvalidCredentialsError,
    LoginDTO,
    NameMismatchError,
)
from src.auth.repository.read_models import SessionReadModel
from src.auth.repository.write_models import AuthWriteModel
from src.auth.router import get_auth_write_model
from src.auth.urls import LOGIN_URL, LOGOUT_URL, ME_URL, REGISTER_URL, STATUS_URL
from src.config.settings import settings
from src.guests.dtos import AccountStatus, GuestDTO, GuestNotFoundError
from src.guests.features.manage_guests.write_model import SqlGuestAdminWriteModel
from src.guests.urls import RSVPS_URL
from src.models.base import utcnow


class InMemoryAuthWriteModel(AuthWriteModel):
    """In-memory write model for testing."""

    def __init__(self, guest: GuestDTO, password: str = "correct-horse"):
        self.guest = guest
        self.password = password
        self.sessions: dict[str, UUID] = {}

    async def register(
        self, user_id: UUID, email: str, password: str, first_name: str, last_name: str
    ) -> GuestDTO:
        if user_id != self.guest.id:
            raise GuestNotFoundError("User not found")
        if first_name.lower() != self.guest.first_name.lower():
            raise NameMismatchError()
        if self.guest.account_status == AccountStatus.REGISTERED:
            raise AlreadyRegisteredError()
        return GuestDTO(
            id=self.guest.id,
            first_name=self.guest.first_name,
            last_name=self.guest.last_name,
            account_status=AccountStatus.REGISTERED,
            email=email.lower(),
        )

    async def login(self, email: str, password: str) -> LoginDTO:
        if email != self.guest.email or password != self.password:
            raise InvalidCredentialsError()
        sid = f"session-{len(self.sessions)}"
        self.sessions[sid] = self.guest.id
        return LoginDTO(session_id=sid, expires_at=utcnow() + timedelta(days=1), guest=self.guest)

    async def logout(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


class InMemorySessionReadModel(SessionReadModel):
    def __init__(self, sessions: dict[str, GuestDTO]):
        self._sessions = sessions

    async def get_session_user(self, session_id: str) -> GuestDTO | None:
        return self._sessions.get(session_id)


@pytest.mark.asyncio
async def test_register(client_factory, make_guest):
    guest = make_guest(account_status=AccountStatus.GUEST, email=None)
    overrides = {get_auth_write_model: lambda: InMemoryAuthWriteModel(guest)}
    payload = {
        "user_id": str(guest.id),
        "email": "Alex@Example.com",
        "password": "long-enough",
        "first_name": "alex",
        "last_name": "guest",
    }

    async with client_factory(overrides) as client:
        response = await client.post(REGISTER_URL, json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User account created successfully"
    assert body["data"]["account_status"] == "registered"
    assert body["data"]["email"] == "alex@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes, status_code",
    [
        ({"user_id": str(uuid4())}, 404),
        ({"first_name": "Someone"}, 400),
        ({"password": "short"}, 400),
        ({"email": "not-an-email"}, 400),
    ],
)
async def test_register_errors(client_factory, make_guest, changes, status_code):
    guest = make_guest(account_status=AccountStatus.GUEST, email=None)
    overrides = {get_auth_write_model: lambda: InMemoryAuthWriteModel(guest)}
    payload = {
        "user_id": str(guest.id),
        "email": "alex@example.com",
        "password": "long-enough",
        "first_name": "Alex",
        "last_name": "Guest",
    }
    payload.update(changes)

    async with client_factory(overrides) as client:
        response = await client.post(REGISTER_URL, json=payload)

    assert response.status_code == status_code
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_register_twice_conflicts(client_factory, make_guest):
    guest = make_guest()
    overrides = {get_auth_write_model: lambda: InMemoryAuthWriteModel(guest)}
    payload = {
        "user_id": str(guest.id),
        "email": "alex@example.com",
        "password": "long-enough",
        "first_name": "Alex",
        "last_name": "Guest",
    }

    async with client_factory(overrides) as client:
        response = await client.post(REGISTER_URL, json=payload)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_login_sets_session_cookie(client_factory, make_guest):
    guest = make_guest()
    overrides = {get_auth_write_model: lambda: InMemoryAuthWriteModel(guest)}

    async with client_factory(overrides) as client:
        response = await client.post(
            LOGIN_URL, json={"email": "alex@example.com", "password": "correct-horse"}
        )

    assert response.status_code == 200
    assert response.json()["data"]["user_id"] == str(guest.id)
    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"{settings.session_cookie_name}=session-0")
    assert "HttpOnly" in cookie
    assert "SameSite=lax" in cookie


@pytest.mark.asyncio
async def test_login_with_wrong_password(client_factory, make_guest):
    overrides = {get_auth_write_model: lambda: InMemoryAuthWriteModel(make_guest())}

    async with client_factory(overrides) as client:
        response = await client.post(LOGIN_URL, json={"email": "alex@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_logout_without_session(client_factory, make_guest):
    overrides = {get_auth_write_model: lambda: InMemoryAuthWriteModel(make_guest())}

    async with client_factory(overrides) as client:
        response = await client.post(LOGOUT_URL)

    assert response.status_code == 200
    assert response.json()["message"] == "Already logged out"


@pytest.mark.asyncio
async def test_me_and_status_with_session(client_factory, make_guest):
    guest = make_guest()
    overrides = {get_session_read_model: lambda: InMemorySessionReadModel({"abc": guest})}

    async with client_factory(overrides) as client:
        cookie = {"Cookie": f"{settings.session_cookie_name}=abc"}
        me_response = await client.get(ME_URL, headers=cookie)
        status_response = await client.get(STATUS_URL, headers=cookie)

    assert me_response.status_code == 200
    assert me_response.json()["data"]["full_name"] == "Alex Guest"
    assert status_response.json()["data"] == {"authenticated": True, "user_id": str(guest.id)}


@pytest.mark.asyncio
async def test_status_without_session(client_factory):
    overrides = {get_session_read_model: lambda: InMemorySessionReadModel({})}

    async with client_factory(overrides) as client:
        status_response = await client.get(STATUS_URL)
        me_response = await client.get(ME_URL)

    assert status_response.json()["data"] == {"authenticated": False, "user_id": None}
    assert me_response.status_code == 401


@pytest.mark.asyncio
async def test_me_override(client_factory, make_guest):
    guest = make_guest(is_admin=True)

    async with client_factory({get_current_user: lambda: guest}) as client:
        response = await client.get(ME_URL)

    assert response.json()["data"]["is_admin"] is True


@pytest.mark.asyncio
async def test_register_login_and_rsvp_flow(client_factory):
    """Full round trip through the real models on the test database."""
    guest = await SqlGuestAdminWriteModel().create_guest(first_name="Maria", last_name="Lopez")

    async with client_factory() as client:
        register = await client.post(
            REGISTER_URL,
            json={
                "user_id": str(guest.id),
                "email": "maria@example.com",
                "password": "s3cret-password",
                "first_name": "Maria",
                "last_name": "Lopez",
            },
        )
        login = await client.post(
            LOGIN_URL, json={"email": "MARIA@example.com", "password": "s3cret-password"}
        )
        me = await client.get(ME_URL)
        rsvp = await client.post(RSVPS_URL, json={"response_status": "attending"})
        logout = await client.post(LOGOUT_URL)
        client.cookies.clear()
        after_logout = await client.get(STATUS_URL)

    assert register.status_code == 201
    assert login.status_code == 200
    assert me.json()["data"]["email"] == "maria@example.com"
    assert rsvp.status_code == 201
    assert rsvp.json()["data"]["user_rsvp"]["response_status"] == "attending"
    assert logout.json()["message"] == "Logout successful"
    assert after_logout.json()["data"]["authenticated"] is False
