"""End to end tests: organizer creates an event, guests RSVP and cancel.

Runs against the test database with the real signed-cookie session, so each
``AsyncClient`` behaves like a separate browser.
"""

import pytest

from src.rsvps.urls import CANCEL_RSVP_URL, CREATE_EVENT_URL, EVENT_ADMIN_URL, GET_EVENT_URL, SUBMIT_RSVP_URL


async def create_dinner(client) -> dict:
    response = await client.post(
        CREATE_EVENT_URL,
        json={
            "title": "Dinner",
            "custom_fields": {
                "0": {"field_name": "Allergies", "field_type": "text", "required": "0"},
                "1": {
                    "field_name": "Meal",
                    "field_type": "dropdown",
                    "required": "1",
                    "options": "Veg\nMeat",
                },
            },
        },
    )
    assert response.status_code == 201
    created = response.json()

    page = (await client.get(GET_EVENT_URL.format(public_id=created["public_id"]))).json()
    fields = {field["field_name"]: field["id"] for field in page["custom_fields"]}
    return {**created, "fields": fields}


@pytest.mark.asyncio
async def test_guest_flow(db, client_factory):
    async with client_factory() as organizer, client_factory() as ann, client_factory() as bob:
        event = await create_dinner(organizer)
        public_id = event["public_id"]
        meal = event["fields"]["Meal"]
        allergies = event["fields"]["Allergies"]

        rejected = await ann.post(
            SUBMIT_RSVP_URL.format(public_id=public_id),
            json={"name": "Ann", "response": "Yes", "custom_field_responses": {meal: "Fish"}},
        )
        assert rejected.status_code == 422
        assert rejected.json()["detail"] == "Please complete all required fields"

        accepted = await ann.post(
            SUBMIT_RSVP_URL.format(public_id=public_id),
            json={"name": "Ann", "response": "Yes", "custom_field_responses": {meal: "Veg"}},
        )
        assert accepted.status_code == 201
        ann_token = accepted.json()["rsvp"]["token"]

        accepted = await bob.post(
            SUBMIT_RSVP_URL.format(public_id=public_id),
            json={
                "name": "Bob",
                "response": "no",
                "custom_field_responses": {meal: "Meat", allergies: "Gluten"},
            },
        )
        assert accepted.status_code == 201
        bob_token = accepted.json()["rsvp"]["token"]

        ann_page = (await ann.get(GET_EVENT_URL.format(public_id=public_id))).json()
        assert ann_page["responded"] is True
        assert [(r["name"], r["can_cancel"]) for r in ann_page["rsvps"]] == [("Ann", True), ("Bob", False)]

        # Ann cannot cancel Bob's RSVP even knowing its token
        response = await ann.delete(CANCEL_RSVP_URL.format(public_id=public_id, token=bob_token))
        assert response.status_code == 200
        assert [r["name"] for r in response.json()["rsvps"]] == ["Ann", "Bob"]

        response = await ann.delete(CANCEL_RSVP_URL.format(public_id=public_id, token=ann_token))
        assert response.status_code == 200
        assert [r["name"] for r in response.json()["rsvps"]] == ["Bob"]
        assert response.json()["responded"] is False

        response = await ann.delete(CANCEL_RSVP_URL.format(public_id=public_id, token=ann_token))
        assert response.status_code == 200

        admin = await organizer.get(
            EVENT_ADMIN_URL.format(public_id=public_id, admin_token=event["admin_token"])
        )
        assert admin.status_code == 200
        assert admin.json()["rsvps"] == [
            {
                "name": "Bob",
                "response": "no",
                "answers": [
                    {"field_name": "Allergies", "value": "Gluten"},
                    {"field_name": "Meal", "value": "Meat"},
                ],
            }
        ]


@pytest.mark.asyncio
async def test_invalid_schema_creates_no_event(db, client):
    response = await client.post(
        CREATE_EVENT_URL,
        json={
            "title": "Dinner",
            "custom_fields": {"0": {"field_name": "Meal", "field_type": "dropdown", "options": ""}},
        },
    )

    assert response.status_code == 422
