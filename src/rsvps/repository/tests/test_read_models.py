"""Tests for SqlEventReadModel."""

from src.rsvps.features.create_event.dtos import RawCustomFieldDTO
from src.rsvps.features.create_event.write_model import SqlEventCreateWriteModel
from src.rsvps.repository.read_models import SqlEventReadModel


async def test_get_published_event_orders_fields(db):
    created = await SqlEventCreateWriteModel().create_event(
        title="Picnic",
        custom_fields=[
            RawCustomFieldDTO(field_name="Dish", field_type="text"),
            RawCustomFieldDTO(field_name="", field_type="text"),
            RawCustomFieldDTO(field_name="Seats", field_type="dropdown", options="1\n2"),
        ],
    )

    event = await SqlEventReadModel().get_published_event(created.public_id)

    assert event.title == "Picnic"
    assert [(f.field_name, f.position) for f in event.custom_fields] == [("Dish", 0), ("Seats", 2)]
    assert event.custom_fields[1].options == ("1", "2")


async def test_lookup_ignores_slug(db):
    created = await SqlEventCreateWriteModel().create_event(title="Picnic")
    event_hash = created.public_id.split("-", 1)[0]

    read_model = SqlEventReadModel()
    assert (await read_model.get_published_event(event_hash)).public_id == created.public_id
    assert (await read_model.get_published_event(f"{event_hash}-renamed")) is not None


async def test_unpublished_event_is_hidden_from_guests_only(db):
    write_model = SqlEventCreateWriteModel()
    created = await write_model.create_event(title="Picnic")
    await write_model.unpublish_event(created.public_id)

    read_model = SqlEventReadModel()
    assert await read_model.get_published_event(created.public_id) is None
    assert await read_model.get_event_page(created.public_id, []) is None

    summary = await read_model.get_admin_summary(created.public_id, created.admin_token)
    assert summary.event.published is False
    assert summary.rsvps == []


async def test_unknown_event(db):
    read_model = SqlEventReadModel()
    assert await read_model.get_published_event("nope-picnic") is None
    assert await read_model.get_admin_summary("nope-picnic", "token") is None
