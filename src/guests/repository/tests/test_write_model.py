"""Tests for SqlRSVPWriteModel and the RSVP read model against the test database."""

import pytest
from sqlalchemy import func, select

from src.guests.dtos import (
    ConflictingPartnerResponseError,
    GuestNotFoundError,
    GuestUpdateDTO,
    PartnerRequiredError,
    PlusOneConflictError,
    PlusOneDTO,
    PlusOneNotAllowedError,
    ResponseStatus,
    RSVPSubmissionDTO,
)
from src.guests.features.create_plus_one_guest.write_model import SqlPlusOneGuestWriteModel
from src.guests.features.manage_guests.write_model import SqlGuestAdminWriteModel
from src.guests.repository.orm_models import RSVP, User
from src.guests.repository.read_models import SqlRSVPReadModel
from src.guests.repository.write_models import SqlRSVPWriteModel


def rsvp_write_model(session) -> SqlRSVPWriteModel:
    return SqlRSVPWriteModel(
        session_overwrite=session,
        plus_one_guest_write_model=SqlPlusOneGuestWriteModel(),
    )


async def create_couple(session):
    admin = SqlGuestAdminWriteModel(session_overwrite=session)
    maria = await admin.create_guest(first_name="Maria", last_name="Lopez")
    juan = await admin.create_guest(first_name="Juan", last_name="Lopez", partner_id=maria.id)
    return maria, juan


async def test_submit_rsvp_for_self_and_partner(db_session):
    maria, juan = await create_couple(db_session)

    result = await rsvp_write_model(db_session).submit_rsvp(
        user_id=maria.id,
        submission=RSVPSubmissionDTO(
            response_status=ResponseStatus.ATTENDING,
            dietary_restrictions="vegetarian",
            partner_response_status=ResponseStatus.NOT_ATTENDING,
            partner_message="Sorry!",
        ),
    )

    assert result.user_rsvp.user_id == maria.id
    assert result.user_rsvp.response_status == ResponseStatus.ATTENDING
    assert result.user_rsvp.partner_id is None
    assert result.partner_rsvp.user_id == juan.id
    assert result.partner_rsvp.response_status == ResponseStatus.NOT_ATTENDING
    # partner_id on an RSVP row records who answered on the person's behalf
    assert result.partner_rsvp.partner_id == maria.id
    assert result.partner_rsvp.message == "Sorry!"

    count = await db_session.scalar(select(func.count()).select_from(RSVP))
    assert count == 2


async def test_resubmitting_updates_the_existing_row(db_session):
    maria, _ = await create_couple(db_session)
    write_model = rsvp_write_model(db_session)

    first = await write_model.submit_rsvp(
        maria.id, RSVPSubmissionDTO(response_status=ResponseStatus.PENDING)
    )
    second = await write_model.submit_rsvp(
        maria.id,
        RSVPSubmissionDTO(response_status=ResponseStatus.ATTENDING, message="See you there"),
    )

    assert second.user_rsvp.id == first.user_rsvp.id
    assert second.user_rsvp.response_status == ResponseStatus.ATTENDING
    count = await db_session.scalar(
        select(func.count()).select_from(RSVP).where(RSVP.user_id == maria.id)
    )
    assert count == 1


async def test_partner_response_requires_a_partner(db_session):
    single = await SqlGuestAdminWriteModel(session_overwrite=db_session).create_guest(
        first_name="Sam", last_name="Reed"
    )

    with pytest.raises(PartnerRequiredError):
        await rsvp_write_model(db_session).submit_rsvp(
            single.id,
            RSVPSubmissionDTO(
                response_status=ResponseStatus.ATTENDING,
                partner_response_status=ResponseStatus.ATTENDING,
            ),
        )


async def test_submit_rsvp_for_unknown_user(db_session, make_guest):
    with pytest.raises(GuestNotFoundError):
        await rsvp_write_model(db_session).submit_rsvp(
            make_guest().id, RSVPSubmissionDTO(response_status=ResponseStatus.ATTENDING)
        )


async def test_plus_one_is_promoted_and_linked_both_ways(db_session):
    sam = await SqlGuestAdminWriteModel(session_overwrite=db_session).create_guest(
        first_name="Sam", last_name="Reed", plus_one_allowed=True
    )

    result = await rsvp_write_model(db_session).submit_rsvp(
        sam.id,
        RSVPSubmissionDTO(
            response_status=ResponseStatus.ATTENDING,
            plus_one=PlusOneDTO(first_name="Kim", last_name="Park", dietary_restrictions="vegan"),
        ),
    )

    assert result.plus_one is not None
    assert result.plus_one.created is True
    assert result.plus_one.guest.full_name == "Kim Park"
    assert result.plus_one.guest.plus_one_allowed is False
    assert result.plus_one.rsvp.response_status == ResponseStatus.ATTENDING
    assert result.plus_one.rsvp.partner_id == sam.id
    assert result.plus_one.rsvp.dietary_restrictions == "vegan"

    sam_row = await db_session.get(User, sam.id)
    kim_row = await db_session.get(User, result.plus_one.guest.id)
    assert sam_row.partner_id == kim_row.id
    assert kim_row.partner_id == sam_row.id


async def test_plus_one_resubmission_reuses_the_partner(db_session):
    sam = await SqlGuestAdminWriteModel(session_overwrite=db_session).create_guest(
        first_name="Sam", last_name="Reed", plus_one_allowed=True
    )
    submission = RSVPSubmissionDTO(
        response_status=ResponseStatus.ATTENDING,
        plus_one=PlusOneDTO(first_name="Kim", last_name="Park"),
    )
    write_model = rsvp_write_model(db_session)

    first = await write_model.submit_rsvp(sam.id, submission)
    second = await write_model.submit_rsvp(sam.id, submission)

    assert second.plus_one.created is False
    assert second.plus_one.guest.id == first.plus_one.guest.id
    users = await db_session.scalar(select(func.count()).select_from(User))
    assert users == 2


async def test_plus_one_not_allowed(db_session):
    sam = await SqlGuestAdminWriteModel(session_overwrite=db_session).create_guest(
        first_name="Sam", last_name="Reed"
    )

    with pytest.raises(PlusOneNotAllowedError):
        await rsvp_write_model(db_session).submit_rsvp(
            sam.id,
            RSVPSubmissionDTO(
                response_status=ResponseStatus.ATTENDING,
                plus_one=PlusOneDTO(first_name="Kim", last_name="Park"),
            ),
        )


async def test_plus_one_ignored_when_not_attending(db_session):
    sam = await SqlGuestAdminWriteModel(session_overwrite=db_session).create_guest(
        first_name="Sam", last_name="Reed", plus_one_allowed=True
    )

    result = await rsvp_write_model(db_session).submit_rsvp(
        sam.id,
        RSVPSubmissionDTO(
            response_status=ResponseStatus.NOT_ATTENDING,
            plus_one=PlusOneDTO(first_name="Kim", last_name="Park"),
        ),
    )

    assert result.plus_one is None
    users = await db_session.scalar(select(func.count()).select_from(User))
    assert users == 1


async def test_plus_one_named_after_another_guest_conflicts(db_session):
    admin = SqlGuestAdminWriteModel(session_overwrite=db_session)
    sam = await admin.create_guest(first_name="Sam", last_name="Reed", plus_one_allowed=True)
    await admin.create_guest(first_name="Kim", last_name="Park")

    with pytest.raises(PlusOneConflictError, match="already on the guest list"):
        await rsvp_write_model(db_session).submit_rsvp(
            sam.id,
            RSVPSubmissionDTO(
                response_status=ResponseStatus.ATTENDING,
                plus_one=PlusOneDTO(first_name="kim", last_name="park"),
            ),
        )


async def test_plus_one_conflicts_with_existing_partner(db_session):
    admin = SqlGuestAdminWriteModel(session_overwrite=db_session)
    maria, _ = await create_couple(db_session)
    await admin.update_guest(maria.id, GuestUpdateDTO(plus_one_allowed=True))

    with pytest.raises(PlusOneConflictError, match="already bringing Juan Lopez"):
        await rsvp_write_model(db_session).submit_rsvp(
            maria.id,
            RSVPSubmissionDTO(
                response_status=ResponseStatus.ATTENDING,
                plus_one=PlusOneDTO(first_name="Kim", last_name="Park"),
            ),
        )


async def test_partner_answer_and_partner_as_plus_one_are_rejected(db_session):
    admin = SqlGuestAdminWriteModel(session_overwrite=db_session)
    maria, juan = await create_couple(db_session)
    await admin.update_guest(maria.id, GuestUpdateDTO(plus_one_allowed=True))

    with pytest.raises(ConflictingPartnerResponseError):
        await rsvp_write_model(db_session).submit_rsvp(
            maria.id,
            RSVPSubmissionDTO(
                response_status=ResponseStatus.ATTENDING,
                partner_response_status=ResponseStatus.NOT_ATTENDING,
                plus_one=PlusOneDTO(first_name=" juan ", last_name="LOPEZ"),
            ),
        )

    count = await db_session.scalar(select(func.count()).select_from(RSVP))
    assert count == 0
    rsvp = await SqlRSVPReadModel(session_overwrite=db_session).get_rsvp(juan.id)
    assert rsvp.user_rsvp is None


async def test_get_rsvp_returns_both_partners(db_session):
    maria, juan = await create_couple(db_session)
    await rsvp_write_model(db_session).submit_rsvp(
        juan.id,
        RSVPSubmissionDTO(
            response_status=ResponseStatus.ATTENDING,
            partner_response_status=ResponseStatus.ATTENDING,
        ),
    )

    rsvp = await SqlRSVPReadModel(session_overwrite=db_session).get_rsvp(maria.id)

    assert rsvp.guest.id == maria.id
    assert rsvp.guest.partner.full_name == "Juan Lopez"
    assert rsvp.user_rsvp.response_status == ResponseStatus.ATTENDING
    assert rsvp.user_rsvp.partner_id == juan.id
    assert rsvp.partner_rsvp.user_id == juan.id


async def test_rsvp_summary_counts_people_and_households(db_session):
    admin = SqlGuestAdminWriteModel(session_overwrite=db_session)
    maria, juan = await create_couple(db_session)
    sam = await admin.create_guest(first_name="Sam", last_name="Reed")
    await admin.create_guest(first_name="Ann", last_name="Zed")
    write_model = rsvp_write_model(db_session)

    # partner attends even though the submitting guest does not
    await write_model.submit_rsvp(
        maria.id,
        RSVPSubmissionDTO(
            response_status=ResponseStatus.NOT_ATTENDING,
            partner_response_status=ResponseStatus.ATTENDING,
        ),
    )
    await write_model.submit_rsvp(sam.id, RSVPSubmissionDTO(response_status=ResponseStatus.ATTENDING))

    summary = await SqlRSVPReadModel(session_overwrite=db_session).get_rsvp_summary()

    assert summary.total_guests == 4
    assert summary.total_households == 3
    assert summary.attending == 2
    assert summary.not_attending == 1
    assert summary.pending == 1
    assert summary.responded == 3
    assert summary.total_attending_count == 2

    couple = next(h for h in summary.households if h.partner is not None)
    assert {couple.guest.id, couple.partner.id} == {maria.id, juan.id}
