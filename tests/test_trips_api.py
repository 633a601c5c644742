import os

os.environ.setdefault("USE_MOCK_DATA", "true")
os.environ.setdefault("SUPABASE_URL", "https://mock-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "mock-key")

from fastapi.testclient import TestClient  # noqa: E402

from backend.app.main import app  # noqa: E402
from backend.app.services.supabase_client import SupabaseAPIError  # noqa: E402

import pytest  # noqa: E402

COMPLETE_FIELDS = [
    ("basic", "trip_title", "Goa Trip"),
    ("basic", "trip_overview", "Fun in the sun"),
    ("basic", "destination", "Goa"),
    ("basic", "categories", ["Family Packages"]),
    ("basic", "trip_theme", ["Nature"]),
    ("basic", "pickup_location", "Mumbai"),
    ("basic", "drop_location", "Mumbai"),
    ("basic", "days", 2),
    (
        "itinerary",
        "entries",
        [
            {"day": 1, "title": "Day 1: Arrival", "description": "Check in", "activities": ["Beach Activities"]},
            {"day": 2, "title": "Day 2: Departure", "description": "Fly home", "activities": ["Shopping"]},
        ],
    ),
    ("media", "hero_image", "https://cdn.example.com/goa.jpg"),
    ("pricing", "pricing_model", "customized"),
    ("pricing", "base_price", 25000),
    ("pricing", "discount", 3001),
    ("details", "highlights", ["Sunset cruise"]),
    ("details", "inclusions", ["Breakfast"]),
    ("details", "exclusions", ["Flights"]),
    ("policies", "terms_conditions", "Standard terms"),
    ("policies", "privacy_policy", "Privacy"),
    ("policies", "payment_terms", "25% advance"),
]


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def _new_draft(client):
    response = client.post("/api/trips/drafts")
    assert response.status_code == 200
    return response.json()["draft_id"]


def _fill(client, draft_id):
    view = None
    for tab, name, value in COMPLETE_FIELDS:
        response = client.patch(
            f"/api/trips/drafts/{draft_id}/fields",
            json={"tab": tab, "name": name, "value": value},
        )
        assert response.status_code == 200, response.text
        view = response.json()
    return view


def test_new_draft_starts_empty(client):
    response = client.post("/api/trips/drafts")
    view = response.json()
    assert view["active_tab"] == "basic"
    assert view["progress"] == 0.0
    assert view["completed_tabs"] == []
    assert view["can_publish"] is False
    assert [tab["id"] for tab in view["tabs"]] == [
        "basic", "itinerary", "media", "pricing", "details", "policies",
    ]
    basic = view["tabs"][0]
    assert basic["fields"]["days"] == 5
    assert basic["fields"]["nights"] == 4
    assert "trip_title" in basic["missing"]


def test_field_events_drive_completion(client):
    draft_id = _new_draft(client)
    view = _fill(client, draft_id)
    assert view["progress"] == 1.0
    assert view["can_publish"] is True
    pricing = next(tab for tab in view["tabs"] if tab["id"] == "pricing")
    assert pricing["fields"]["final_price"] == 21999
    assert view["active_tab"] == "basic"

    switched = client.put(
        f"/api/trips/drafts/{draft_id}/active-tab", json={"tab": "pricing"}
    )
    assert switched.json()["active_tab"] == "pricing"


def test_toggle_endpoint(client):
    draft_id = _new_draft(client)
    url = f"/api/trips/drafts/{draft_id}/toggle"
    client.post(url, json={"tab": "basic", "name": "categories", "item": "Friends"})
    view = client.post(
        url, json={"tab": "basic", "name": "categories", "item": "Solo Trips"}
    ).json()
    assert view["tabs"][0]["fields"]["categories"] == ["Friends", "Solo Trips"]
    view = client.post(
        url, json={"tab": "basic", "name": "categories", "item": "Friends"}
    ).json()
    assert view["tabs"][0]["fields"]["categories"] == ["Solo Trips"]


def test_invalid_field_updates(client):
    draft_id = _new_draft(client)
    url = f"/api/trips/drafts/{draft_id}/fields"
    derived = client.patch(url, json={"tab": "basic", "name": "nights", "value": 9})
    assert derived.status_code == 400
    unknown = client.patch(url, json={"tab": "media", "name": "video", "value": "x"})
    assert unknown.status_code == 400
    invalid = client.patch(
        url, json={"tab": "pricing", "name": "pricing_model", "value": "auction"}
    )
    assert invalid.status_code == 422
    assert invalid.json()["detail"]["errors"]


def test_unknown_draft_is_404(client):
    assert client.get("/api/trips/drafts/nope").status_code == 404


def test_incomplete_draft_cannot_publish(client):
    draft_id = _new_draft(client)
    _fill(client, draft_id)
    client.patch(
        f"/api/trips/drafts/{draft_id}/fields",
        json={"tab": "media", "name": "hero_image", "value": ""},
    )
    response = client.post(f"/api/trips/drafts/{draft_id}/publish")
    assert response.status_code == 409
    activity = client.get("/api/system/activity", params={"source": "wizard"}).json()
    assert activity[-1]["status"] == "rejected"


def test_publish_and_read_trip(client):
    draft_id = _new_draft(client)
    _fill(client, draft_id)
    response = client.post(f"/api/trips/drafts/{draft_id}/publish")
    assert response.status_code == 200
    view = response.json()
    published = view["published"]
    assert len(published["trip_id"]) == 6
    assert published["url"].endswith(f"/trip/{published['trip_id']}")
    assert view["can_publish"] is False

    closed = client.patch(
        f"/api/trips/drafts/{draft_id}/fields",
        json={"tab": "basic", "name": "trip_title", "value": "Changed"},
    )
    assert closed.status_code == 409
    again = client.post(f"/api/trips/drafts/{draft_id}/publish")
    assert again.status_code == 409

    trip = client.get(f"/api/trips/{published['trip_id']}").json()
    assert trip["basic_info"]["trip_title"] == "Goa Trip"
    assert trip["pricing"]["final_price"] == 21999
    assert len(trip["itinerary"]) == 2

    summary = client.get("/api/dashboard/summary").json()
    assert summary["published_drafts"] == 1


def test_publish_failure_is_retryable(client, monkeypatch):
    draft_id = _new_draft(client)
    _fill(client, draft_id)
    data_client = client.app.state.data_client
    original = data_client.create_trip

    async def failing_create_trip(payload):
        raise SupabaseAPIError(503, {"message": "unavailable"})

    monkeypatch.setattr(data_client, "create_trip", failing_create_trip)
    failed = client.post(f"/api/trips/drafts/{draft_id}/publish")
    assert failed.status_code == 502
    assert failed.json()["detail"] == "Failed to publish trip. Please try again."

    view = client.get(f"/api/trips/drafts/{draft_id}").json()
    assert view["progress"] == 1.0
    assert view["published"] is None
    assert view["can_publish"] is True

    monkeypatch.setattr(data_client, "create_trip", original)
    retried = client.post(f"/api/trips/drafts/{draft_id}/publish")
    assert retried.status_code == 200


def test_discard_draft(client):
    draft_id = _new_draft(client)
    response = client.delete(f"/api/trips/drafts/{draft_id}")
    assert response.status_code == 200
    assert client.get("/api/trips/drafts").json() == []


def test_trip_page_enquiry_creates_lead(client):
    draft_id = _new_draft(client)
    _fill(client, draft_id)
    trip_id = client.post(f"/api/trips/drafts/{draft_id}/publish").json()["published"]["trip_id"]

    response = client.post(
        f"/api/trips/{trip_id}/enquiries",
        json={
            "name": "Neha Joshi",
            "email": "neha@example.com",
            "mobile": "9876543210",
            "kind": "booking",
        },
    )
    assert response.status_code == 200
    lead = response.json()
    assert lead["source"] == "trip_page"
    assert lead["status"] == "new"
    assert lead["pickup"] == "Mumbai"
    assert "Goa Trip" in lead["comments"]

    missing = client.post(
        "/api/trips/unknown/enquiries",
        json={"name": "X", "email": "x@example.com", "mobile": "1"},
    )
    assert missing.status_code == 404


def test_form_options(client):
    response = client.get("/api/trips/options")
    assert response.status_code == 200
    options = response.json()
    assert "Goa" in options["destinations"]
    assert "Breakfast" in options["meals"]
    assert options["policy_templates"]["payment_terms"].startswith("1. PAYMENT SCHEDULE")


def test_list_item_endpoints(client):
    draft_id = _new_draft(client)
    items = f"/api/trips/drafts/{draft_id}/items"

    view = client.patch(
        f"{items}/0",
        json={
            "tab": "itinerary",
            "name": "entries",
            "changes": {"description": "Check in", "activities": ["Beach Activities"]},
        },
    ).json()
    first_day = view["tabs"][1]["fields"]["entries"][0]
    assert first_day["title"] == "Day 1: Arrival"
    assert first_day["description"] == "Check in"
    assert "entries[0].description" not in view["tabs"][1]["missing"]

    for highlight in ("Sunset cruise", "Spice farm"):
        view = client.post(
            items, json={"tab": "details", "name": "highlights", "item": highlight}
        ).json()
    assert view["tabs"][4]["fields"]["highlights"] == ["Sunset cruise", "Spice farm"]

    view = client.delete(
        f"{items}/0", params={"tab": "details", "name": "highlights"}
    ).json()
    assert view["tabs"][4]["fields"]["highlights"] == ["Spice farm"]

    out_of_range = client.delete(
        f"{items}/5", params={"tab": "details", "name": "highlights"}
    )
    assert out_of_range.status_code == 422


def test_list_item_update_rejects_derived_keys(client):
    draft_id = _new_draft(client)
    items = f"/api/trips/drafts/{draft_id}/items"
    client.post(
        items,
        json={"tab": "pricing", "name": "packages", "item": {"title": "Twin", "base_price": 100}},
    )
    response = client.patch(
        f"{items}/0",
        json={"tab": "pricing", "name": "packages", "changes": {"final_price": 1}},
    )
    assert response.status_code == 400
    package = client.get(f"/api/trips/drafts/{draft_id}").json()["tabs"][3]["fields"]["packages"][0]
    assert package["final_price"] == 100


def test_days_above_limit_is_422(client):
    draft_id = _new_draft(client)
    response = client.patch(
        f"/api/trips/drafts/{draft_id}/fields",
        json={"tab": "basic", "name": "days", "value": 200000},
    )
    assert response.status_code == 422
    view = client.get(f"/api/trips/drafts/{draft_id}").json()
    assert view["tabs"][0]["fields"]["days"] == 5
    assert len(view["tabs"][1]["fields"]["entries"]) == 5


def test_draft_rejects_edits_while_publishing(client):
    draft_id = _new_draft(client)
    _fill(client, draft_id)
    client.app.state.trip_drafts[draft_id].publishing = True

    edit = client.patch(
        f"/api/trips/drafts/{draft_id}/fields",
        json={"tab": "basic", "name": "trip_title", "value": "Edited mid-publish"},
    )
    assert edit.status_code == 409
    append = client.post(
        f"/api/trips/drafts/{draft_id}/items",
        json={"tab": "details", "name": "highlights", "item": "Late addition"},
    )
    assert append.status_code == 409
    assert client.post(f"/api/trips/drafts/{draft_id}/publish").status_code == 409

    client.app.state.trip_drafts[draft_id].publishing = False
    view = client.get(f"/api/trips/drafts/{draft_id}").json()
    assert view["tabs"][0]["fields"]["trip_title"] == "Goa Trip"
    assert client.post(f"/api/trips/drafts/{draft_id}/publish").status_code == 200
