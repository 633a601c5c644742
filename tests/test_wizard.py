import asyncio

import pytest

from backend.app.wizard import (
    FieldStore,
    FlowClosedError,
    InvalidFieldValueError,
    PublishFailedError,
    PublishInProgressError,
    PublishNotAllowedError,
    ReadOnlyFieldError,
    TabId,
    UnknownFieldError,
    UnknownTabError,
    WizardController,
    build_trip_payload,
    can_publish,
    recompute,
)
from backend.app.wizard.tabs import (
    MAX_DAYS,
    BasicInfo,
    Details,
    Itinerary,
    Media,
    Policies,
    Pricing,
    coerce_int,
)
from backend.app.wizard.validators import VALIDATORS, missing_requirements


class RecordingPersister:
    def __init__(self, failures: int = 0):
        self.failures = failures
        self.payloads = []

    async def create_trip(self, payload):
        self.payloads.append(payload)
        if self.failures:
            self.failures -= 1
            raise RuntimeError("backend unavailable")
        return {"id": "abc123"}


def trip_url(trip_id):
    return f"https://trips.example.com/trip/{trip_id}"


def fill_basic(controller, days=3):
    controller.set_field("basic", "trip_title", "Goa Trip")
    controller.set_field("basic", "trip_overview", "Fun")
    controller.set_field("basic", "destination", "Goa")
    controller.toggle_item("basic", "categories", "Family Packages")
    controller.toggle_item("basic", "trip_theme", "Nature")
    controller.set_field("basic", "pickup_location", "Mumbai")
    controller.set_field("basic", "drop_location", "Mumbai")
    controller.set_field("basic", "days", days)


def fill_all(controller):
    fill_basic(controller, days=3)
    for idx in range(3):
        controller.update_list_item(
            "itinerary",
            "entries",
            idx,
            {"description": f"Day {idx + 1} plan", "activities": ["Sightseeing"]},
        )
    controller.set_field("media", "hero_image", "hero.jpg")
    controller.set_field(
        "pricing",
        "date_slots",
        [{"from_date": "2025-12-01", "to_date": "2025-12-04", "available_slots": 12}],
    )
    controller.set_field(
        "pricing", "packages", [{"title": "Twin Sharing", "base_price": 18000}]
    )
    controller.append_item("details", "highlights", "Beach sunset cruise")
    controller.append_item("details", "inclusions", "Breakfast")
    controller.append_item("details", "exclusions", "Flights")
    controller.set_field("policies", "terms_conditions", "Standard terms")
    controller.set_field("policies", "privacy_policy", "We keep data safe")
    controller.set_field("policies", "payment_terms", "25% advance")


# --- Field store ---


def test_set_field_preserves_other_fields():
    store = FieldStore()
    store.set_field("basic", "trip_title", "Kerala Escape")
    store.set_field("basic", "destination", "Kerala")
    assert store.get_field("basic", "trip_title") == "Kerala Escape"
    assert store.get_field("basic", "destination") == "Kerala"
    assert store.get_field("basic", "hotel_category") == 3


def test_get_field_returns_default_for_unknown_name():
    store = FieldStore()
    assert store.get_field("media", "video", "none") == "none"
    assert store.get_field("media", "hero_image") is None


def test_unknown_field_and_tab_are_rejected():
    store = FieldStore()
    with pytest.raises(UnknownFieldError):
        store.set_field("media", "video", "clip.mp4")
    with pytest.raises(UnknownFieldError):
        store.set_field("media", "tab", "pricing")
    with pytest.raises(UnknownTabError):
        store.set_field("reviews", "rating", 5)


def test_derived_fields_are_read_only():
    store = FieldStore()
    with pytest.raises(ReadOnlyFieldError):
        store.set_field("basic", "nights", 10)
    with pytest.raises(ReadOnlyFieldError):
        store.set_field("pricing", "final_price", 100)


def test_structurally_invalid_value_is_rejected():
    store = FieldStore()
    with pytest.raises(InvalidFieldValueError):
        store.set_field("itinerary", "entries", "not a list")
    assert len(store.get_field("itinerary", "entries")) == 5


@pytest.mark.parametrize("days", [1, 2, 5, 14, 30])
def test_nights_follow_days(days):
    store = FieldStore()
    store.set_field("basic", "days", days)
    assert store.get_field("basic", "nights") == days - 1


def test_zero_days_gives_zero_nights():
    store = FieldStore()
    store.set_field("basic", "days", 0)
    assert store.get_field("basic", "nights") == 0


@pytest.mark.parametrize(
    "base, discount", [(25000, 3001), (1000, 0), (0, 0), (500, 800)]
)
def test_final_price_is_base_minus_discount(base, discount):
    store = FieldStore()
    store.set_field("pricing", "base_price", base)
    store.set_field("pricing", "discount", discount)
    assert store.get_field("pricing", "final_price") == base - discount


def test_package_final_price_is_derived():
    store = FieldStore()
    store.set_field(
        "pricing",
        "packages",
        [{"title": "Quad", "base_price": 12000, "discount": 2000, "final_price": 1}],
    )
    assert store.get_field("pricing", "packages")[0].final_price == 10000


def test_malformed_numbers_coerce_to_zero():
    store = FieldStore()
    store.set_field("basic", "days", "five")
    assert store.get_field("basic", "days") == 0
    store.set_field("pricing", "base_price", "12,000")
    assert store.get_field("pricing", "base_price") == 0
    store.set_field("pricing", "base_price", " 1500 ")
    assert store.get_field("pricing", "base_price") == 1500
    assert coerce_int("7.9") == 7
    assert coerce_int(None, default=1) == 1


def test_get_field_returns_a_copy():
    store = FieldStore()
    store.set_field("details", "highlights", ["Snorkelling"])
    highlights = store.get_field("details", "highlights")
    highlights.append("Leak")
    assert store.get_field("details", "highlights") == ["Snorkelling"]


# --- Validators ---


def test_basic_info_scenario_is_valid():
    fields = BasicInfo(
        trip_title="Goa Trip",
        trip_overview="Fun",
        destination="Goa",
        categories=["Family Packages"],
        trip_theme=["Nature"],
        pickup_location="Mumbai",
        drop_location="Mumbai",
        days=5,
    )
    assert VALIDATORS[TabId.BASIC](fields) is True
    assert fields.nights == 4


def test_basic_info_whitespace_title_is_blank():
    fields = BasicInfo(
        trip_title="   ",
        trip_overview="Fun",
        destination="Goa",
        categories=["Family Packages"],
        trip_theme=["Nature"],
        pickup_location="Mumbai",
        drop_location="Mumbai",
        days=5,
    )
    assert missing_requirements(fields) == ["trip_title"]


def test_itinerary_requires_description_and_activity_per_day():
    itinerary = Itinerary(
        entries=[
            {"day": 1, "title": "Arrival", "description": "Check in", "activities": ["Beach Activities"]},
            {"day": 2, "title": "Explore", "description": "", "activities": []},
        ]
    )
    assert missing_requirements(itinerary) == [
        "entries[1].description",
        "entries[1].activities",
    ]
    assert VALIDATORS[TabId.ITINERARY](Itinerary(entries=[])) is False


def test_fixed_pricing_without_slots_is_invalid():
    pricing = Pricing(
        pricing_model="fixed",
        packages=[{"title": "Twin Sharing", "base_price": 18000}],
    )
    assert VALIDATORS[TabId.PRICING](pricing) is False
    assert "date_slots" in missing_requirements(pricing)


def test_fixed_pricing_slot_needs_both_dates():
    pricing = Pricing(
        date_slots=[{"from_date": "2025-12-01", "to_date": ""}],
        packages=[{"title": "Twin Sharing", "base_price": 18000}],
    )
    assert missing_requirements(pricing) == ["date_slots[0].to_date"]


def test_customized_pricing_requires_positive_final_price():
    assert VALIDATORS[TabId.PRICING](
        Pricing(pricing_model="customized", base_price=25000, discount=3001)
    )
    negative = Pricing(pricing_model="customized", base_price=1000, discount=1500)
    assert negative.final_price == -500
    assert missing_requirements(negative) == ["final_price"]


FIXED_SLOT = {"from_date": "2025-12-01", "to_date": "2025-12-04"}


@pytest.mark.parametrize(
    "fields, expected",
    [
        (Details(highlights=["Cruise"], inclusions=["Breakfast"], exclusions=[]), ["exclusions"]),
        (Details(highlights=["Cruise"], inclusions=[], exclusions=["Flights"]), ["inclusions"]),
        (
            Policies(terms_conditions="T", privacy_policy="P", payment_terms="  \n "),
            ["payment_terms"],
        ),
        (
            Pricing(date_slots=[FIXED_SLOT], packages=[{"title": "Twin", "base_price": 0}]),
            ["packages[0].base_price"],
        ),
        (
            Pricing(date_slots=[FIXED_SLOT], packages=[{"title": " ", "base_price": 18000}]),
            ["packages[0].title"],
        ),
        (Media(hero_image=""), ["hero_image"]),
    ],
)
def test_blank_required_values_are_reported(fields, expected):
    assert missing_requirements(fields) == expected
    assert VALIDATORS[TabId(fields.tab)](fields) is False


# --- Completion tracker and controller ---


def test_new_controller_starts_on_first_tab_with_no_progress():
    controller = WizardController()
    assert controller.active_tab is TabId.BASIC
    assert controller.progress == 0.0
    assert controller.state.completed_tabs == frozenset()


def test_recompute_is_idempotent():
    controller = WizardController()
    fill_basic(controller)
    first = recompute(controller.state)
    second = recompute(controller.state)
    assert first == second
    assert first.completed_tabs == frozenset({TabId.BASIC})
    assert first.progress == pytest.approx(1 / 6)


def test_tab_leaves_completed_set_when_invalidated():
    controller = WizardController()
    controller.set_field("media", "hero_image", "hero.jpg")
    assert TabId.MEDIA in controller.state.completed_tabs
    controller.set_field("media", "hero_image", None)
    assert TabId.MEDIA not in controller.state.completed_tabs


def test_progress_only_depends_on_set_membership():
    first = WizardController()
    first.set_field("media", "hero_image", "hero.jpg")
    first.set_field("policies", "terms_conditions", "T")
    first.set_field("policies", "privacy_policy", "P")
    first.set_field("policies", "payment_terms", "Pay")

    second = WizardController()
    second.set_field("policies", "payment_terms", "Pay")
    second.set_field("policies", "privacy_policy", "P")
    second.set_field("policies", "terms_conditions", "T")
    second.set_field("media", "hero_image", "hero.jpg")

    assert first.snapshot.completed_tabs == second.snapshot.completed_tabs
    assert first.progress == second.progress == pytest.approx(2 / 6)


def test_tabs_change_only_on_explicit_selection():
    controller = WizardController()
    fill_basic(controller)
    assert controller.active_tab is TabId.BASIC
    controller.select_tab("pricing")
    assert controller.active_tab is TabId.PRICING
    with pytest.raises(UnknownTabError):
        controller.select_tab("summary")


def test_toggle_twice_restores_selection():
    controller = WizardController()
    controller.toggle_item("basic", "categories", "Friends")
    original = controller.get_field("basic", "categories")
    for item in ("Solo Trips", "Friends"):
        controller.toggle_item("basic", "categories", item)
        controller.toggle_item("basic", "categories", item)
    assert controller.get_field("basic", "categories") == original


def test_days_change_resizes_itinerary():
    controller = WizardController()
    assert len(controller.get_field("itinerary", "entries")) == 5
    controller.update_list_item("itinerary", "entries", 0, {"description": "Welcome"})
    controller.set_field("basic", "days", 2)
    entries = controller.get_field("itinerary", "entries")
    assert [e.day for e in entries] == [1, 2]
    assert entries[0].description == "Welcome"
    controller.set_field("basic", "days", 4)
    entries = controller.get_field("itinerary", "entries")
    assert [e.day for e in entries] == [1, 2, 3, 4]
    assert entries[3].title == "Day 4: Departure"


def test_growing_itinerary_retitles_default_headings():
    controller = WizardController()
    controller.update_list_item("itinerary", "entries", 1, {"title": "Old Goa walk"})
    controller.set_field("basic", "days", 7)
    titles = [e.title for e in controller.get_field("itinerary", "entries")]
    assert titles == [
        "Day 1: Arrival",
        "Old Goa walk",
        "Day 3: Exploration",
        "Day 4: Exploration",
        "Day 5: Exploration",
        "Day 6: Exploration",
        "Day 7: Departure",
    ]


def test_days_above_limit_are_rejected():
    controller = WizardController()
    with pytest.raises(InvalidFieldValueError):
        controller.set_field("basic", "days", 200_000)
    assert controller.get_field("basic", "days") == 5
    assert len(controller.get_field("itinerary", "entries")) == 5
    controller.set_field("basic", "days", MAX_DAYS)
    assert len(controller.get_field("itinerary", "entries")) == MAX_DAYS


def test_update_list_item_rejects_derived_keys():
    controller = WizardController()
    controller.append_item("pricing", "packages", {"title": "Twin", "base_price": 100})
    with pytest.raises(ReadOnlyFieldError):
        controller.update_list_item("pricing", "packages", 0, {"final_price": 5})


def test_append_and_remove_items():
    controller = WizardController()
    controller.append_item("details", "inclusions", "  Breakfast  ")
    controller.append_item("details", "inclusions", "   ")
    assert controller.get_field("details", "inclusions") == ["Breakfast"]
    controller.remove_item("details", "inclusions", 0)
    assert controller.get_field("details", "inclusions") == []
    with pytest.raises(InvalidFieldValueError):
        controller.remove_item("details", "inclusions", 3)


def test_full_draft_reaches_complete_progress():
    controller = WizardController()
    fill_all(controller)
    assert controller.progress == 1.0
    assert controller.snapshot.completed_tabs == frozenset(TabId)
    assert can_publish(controller.state)


# --- Publish gate ---


def test_publish_rejected_when_incomplete():
    controller = WizardController()
    fill_all(controller)
    controller.set_field("media", "hero_image", None)
    assert controller.progress == pytest.approx(5 / 6)
    before = build_trip_payload(controller.state)
    persister = RecordingPersister()

    with pytest.raises(PublishNotAllowedError):
        asyncio.run(controller.publish(persister, trip_url))

    assert persister.payloads == []
    assert build_trip_payload(controller.state) == before
    assert controller.published is None


def test_publish_failure_keeps_state_and_is_retryable():
    controller = WizardController()
    fill_all(controller)
    persister = RecordingPersister(failures=1)

    with pytest.raises(PublishFailedError):
        asyncio.run(controller.publish(persister, trip_url))
    assert controller.progress == 1.0
    assert controller.publishing is False
    assert controller.published is None
    assert controller.can_publish

    published = asyncio.run(controller.publish(persister, trip_url))
    assert published.trip_id == "abc123"
    assert published.url == "https://trips.example.com/trip/abc123"
    assert len(persister.payloads) == 2


def test_published_flow_is_closed():
    controller = WizardController()
    fill_all(controller)
    asyncio.run(controller.publish(RecordingPersister(), trip_url))
    assert not controller.can_publish
    with pytest.raises(FlowClosedError):
        controller.set_field("basic", "trip_title", "Changed")
    with pytest.raises(FlowClosedError):
        asyncio.run(controller.publish(RecordingPersister(), trip_url))


class SlowPersister(RecordingPersister):
    async def create_trip(self, payload):
        await asyncio.sleep(0.01)
        return await super().create_trip(payload)


def test_draft_is_locked_while_publishing():
    controller = WizardController()
    fill_all(controller)
    persister = SlowPersister()

    async def edit_during_publish():
        task = asyncio.create_task(controller.publish(persister, trip_url))
        await asyncio.sleep(0)
        assert controller.publishing
        assert not controller.can_publish
        with pytest.raises(PublishInProgressError):
            controller.set_field("basic", "trip_title", "Edited mid-publish")
        with pytest.raises(PublishInProgressError):
            controller.append_item("details", "highlights", "Late addition")
        with pytest.raises(PublishInProgressError):
            await controller.publish(persister, trip_url)
        return await task

    published = asyncio.run(edit_during_publish())
    assert published.trip_id == "abc123"
    assert len(persister.payloads) == 1
    assert persister.payloads[0]["basic_info"]["trip_title"] == "Goa Trip"
    assert controller.get_field("basic", "trip_title") == "Goa Trip"
    assert controller.get_field("details", "highlights") == ["Beach sunset cruise"]


def test_payload_merges_every_tab():
    controller = WizardController()
    fill_all(controller)
    payload = build_trip_payload(controller.state)
    assert set(payload) == {
        "basic_info", "itinerary", "media", "pricing", "details", "policies",
    }
    assert payload["basic_info"]["nights"] == 2
    assert len(payload["itinerary"]) == 3
    assert payload["pricing"]["pricing_model"] == "fixed"
    assert payload["pricing"]["date_slots"][0]["from_date"] == "2025-12-01"
    assert payload["pricing"]["packages"][0]["final_price"] == 18000
    assert "base_price" not in payload["pricing"]

    controller.set_field("pricing", "pricing_model", "customized")
    controller.set_field("pricing", "base_price", 25000)
    controller.set_field("pricing", "discount", 3001)
    pricing = build_trip_payload(controller.state)["pricing"]
    assert pricing == {
        "pricing_model": "customized",
        "price_type": "person",
        "base_price": 25000,
        "discount": 3001,
        "final_price": 21999,
    }
