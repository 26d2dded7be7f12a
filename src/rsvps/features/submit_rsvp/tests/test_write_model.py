"""Tests for SqlRsvpCreateWriteModel."""

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from src.config.database import async_session_maker
from src.rsvps.dtos import (
    EventNotFoundError,
    InvalidOption,
    InvalidResponseChoice,
    MissingName,
    MissingRequiredField,
    ResponseCreationFailed,
    RsvpResponse,
    UnknownField,
    ValidatedAnswer,
    ValueTooLong,
)
from src.rsvps.features.create_event.dtos import RawCustomFieldDTO
from src.rsvps.features.create_event.write_model import SqlEventCreateWriteModel
from src.rsvps.features.submit_rsvp import write_model as submit_write_model
from src.rsvps.features.submit_rsvp.write_model import SqlRsvpCreateWriteModel
from src.rsvps.repository.orm_models import CustomFieldResponse, Rsvp
from src.rsvps.repository.read_models import SqlEventReadModel, get_event_by_public_id


async def count_rows(model) -> int:
    async with async_session_maker() as session:
        return await session.scalar(select(func.count()).select_from(model))


@pytest_asyncio.fixture
async def event(db):
    """An event asking for allergies (optional text) and a meal (required dropdown)."""
    created = await SqlEventCreateWriteModel().create_event(
        title="Dinner",
        custom_fields=[
            RawCustomFieldDTO(field_name="Allergies", field_type="text"),
            RawCustomFieldDTO(
                field_name="Meal", field_type="dropdown", required=True, options="Veg\nMeat"
            ),
        ],
    )
    event = await SqlEventReadModel().get_published_event(created.public_id)
    allergies, meal = event.custom_fields
    return {"public_id": created.public_id, "allergies": allergies, "meal": meal}


async def test_submit_rsvp(event):
    """Test a valid submission stores the RSVP and only the non-blank answers."""
    meal = event["meal"]
    allergies = event["allergies"]

    result = await SqlRsvpCreateWriteModel().submit_rsvp(
        public_id=event["public_id"],
        name="Ann",
        response="Yes",
        custom_field_responses={str(meal.id): "Veg", str(allergies.id): ""},
    )

    assert result.name == "Ann"
    assert result.response == RsvpResponse.YES
    assert len(result.token) == 32
    assert result.answers == {meal.id: "Veg"}

    read_model = SqlEventReadModel()
    assert await read_model.custom_field_value_for(result.token, meal.id) == "Veg"
    assert await read_model.custom_field_value_for(result.token, allergies.id) is None
    assert await count_rows(Rsvp) == 1
    assert await count_rows(CustomFieldResponse) == 1


async def test_submit_rsvp_round_trip_trimmed_values(event):
    meal = event["meal"]
    allergies = event["allergies"]

    result = await SqlRsvpCreateWriteModel().submit_rsvp(
        public_id=event["public_id"],
        name="  Bob ",
        response="maybe",
        custom_field_responses={str(meal.id): " Meat ", str(allergies.id): " peanuts "},
    )

    read_model = SqlEventReadModel()
    assert result.name == "Bob"
    assert await read_model.custom_field_value_for(result.token, meal.id) == "Meat"
    assert await read_model.custom_field_value_for(result.token, allergies.id) == "peanuts"


@pytest.mark.parametrize(
    "name, response, answers, error",
    [
        ("Ann", "yes", {"meal": "Fish"}, InvalidOption),
        ("Ann", "yes", {}, MissingRequiredField),
        ("Ann", "yes", {"meal": "Veg", "allergies": "x" * 256}, ValueTooLong),
        ("", "yes", {"meal": "Veg"}, MissingName),
        ("Ann", "definitely", {"meal": "Veg"}, InvalidResponseChoice),
    ],
)
async def test_submit_rsvp_rejected_stores_nothing(event, name, response, answers, error):
    """Test every rejected submission leaves no rows behind."""
    custom_field_responses = {str(event[key].id): value for key, value in answers.items()}

    with pytest.raises(error):
        await SqlRsvpCreateWriteModel().submit_rsvp(
            public_id=event["public_id"],
            name=name,
            response=response,
            custom_field_responses=custom_field_responses,
        )

    assert await count_rows(Rsvp) == 0
    assert await count_rows(CustomFieldResponse) == 0


async def test_submit_rsvp_field_of_other_event(event):
    other = await SqlEventCreateWriteModel().create_event(
        title="Lunch",
        custom_fields=[RawCustomFieldDTO(field_name="Drink", field_type="text")],
    )
    other_event = await SqlEventReadModel().get_published_event(other.public_id)
    drink = other_event.custom_fields[0]

    with pytest.raises(UnknownField):
        await SqlRsvpCreateWriteModel().submit_rsvp(
            public_id=event["public_id"],
            name="Ann",
            response="yes",
            custom_field_responses={str(event["meal"].id): "Veg", str(drink.id): "Water"},
        )

    assert await count_rows(Rsvp) == 0


async def test_submit_rsvp_unknown_event(db):
    with pytest.raises(EventNotFoundError):
        await SqlRsvpCreateWriteModel().submit_rsvp(
            public_id="0000-nothing", name="Ann", response="yes", custom_field_responses={}
        )


async def test_submit_rsvp_unpublished_event(event):
    await SqlEventCreateWriteModel().unpublish_event(event["public_id"])

    with pytest.raises(EventNotFoundError):
        await SqlRsvpCreateWriteModel().submit_rsvp(
            public_id=event["public_id"],
            name="Ann",
            response="yes",
            custom_field_responses={str(event["meal"].id): "Veg"},
        )


async def test_submit_rsvp_answer_invalid_at_save_time_rolls_back(event, monkeypatch):
    """Test the RSVP row is removed when an answer fails its save-time check."""
    meal = event["meal"]
    # Simulates the option list changing between validation and saving
    monkeypatch.setattr(
        submit_write_model,
        "validate_answers",
        lambda custom_fields, answers: (ValidatedAnswer(custom_field=meal, value="Fish"),),
    )

    with pytest.raises(ResponseCreationFailed):
        await SqlRsvpCreateWriteModel().submit_rsvp(
            public_id=event["public_id"],
            name="Ann",
            response="yes",
            custom_field_responses={str(meal.id): "Fish"},
        )

    assert await count_rows(Rsvp) == 0
    assert await count_rows(CustomFieldResponse) == 0


async def test_submit_rsvp_duplicate_answer_rolls_back(event, monkeypatch):
    """Test a second answer to the same field aborts the whole submission."""
    meal = event["meal"]
    monkeypatch.setattr(
        submit_write_model,
        "validate_answers",
        lambda custom_fields, answers: (
            ValidatedAnswer(custom_field=meal, value="Veg"),
            ValidatedAnswer(custom_field=meal, value="Meat"),
        ),
    )

    with pytest.raises(ResponseCreationFailed):
        await SqlRsvpCreateWriteModel().submit_rsvp(
            public_id=event["public_id"],
            name="Ann",
            response="yes",
            custom_field_responses={str(meal.id): "Veg"},
        )

    assert await count_rows(Rsvp) == 0
    assert await count_rows(CustomFieldResponse) == 0


async def test_event_page_lists_rsvps_in_creation_order(event):
    write_model = SqlRsvpCreateWriteModel()
    answers = {str(event["meal"].id): "Veg"}
    first = await write_model.submit_rsvp(event["public_id"], "Ann", "yes", answers)
    second = await write_model.submit_rsvp(event["public_id"], "Bob", "no", answers)

    page = await SqlEventReadModel().get_event_page(event["public_id"], [second.token])

    assert [rsvp.name for rsvp in page.rsvps] == ["Ann", "Bob"]
    assert [rsvp.token for rsvp in page.rsvps] == [first.token, second.token]
    assert page.responded is True


async def test_admin_summary_includes_answers(event):
    meal = event["meal"]
    allergies = event["allergies"]
    await SqlRsvpCreateWriteModel().submit_rsvp(
        event["public_id"], "Ann", "yes", {str(meal.id): "Veg", str(allergies.id): "Nuts"}
    )
    created = await SqlEventCreateWriteModel().create_event(title="Other")

    read_model = SqlEventReadModel()
    assert await read_model.get_admin_summary(event["public_id"], created.admin_token) is None

    async with async_session_maker() as session:
        event_row = await get_event_by_public_id(session, event["public_id"])
        admin_token = event_row.admin_token

    summary = await read_model.get_admin_summary(event["public_id"], admin_token)
    assert summary.rsvps[0].answers == {meal.id: "Veg", allergies.id: "Nuts"}
