"""Per-tab field sets for the trip authoring wizard.

Each wizard tab owns an independent field set. The field sets form a tagged
union keyed by the ``tab`` discriminator so that every tab can be validated
against its own schema.
"""

from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Type, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class TabId(str, Enum):
    """Wizard tab identifiers, in display order."""

    BASIC = "basic"
    ITINERARY = "itinerary"
    MEDIA = "media"
    PRICING = "pricing"
    DETAILS = "details"
    POLICIES = "policies"


TAB_ORDER: Tuple[TabId, ...] = tuple(TabId)

TAB_LABELS: Dict[TabId, str] = {
    TabId.BASIC: "Basic Info",
    TabId.ITINERARY: "Itinerary",
    TabId.MEDIA: "Media",
    TabId.PRICING: "Pricing",
    TabId.DETAILS: "Details",
    TabId.POLICIES: "Policies",
}

DESTINATIONS = [
    "Goa", "Kerala", "Rajasthan", "Himachal Pradesh", "Kashmir", "Uttarakhand",
    "Maharashtra", "Karnataka", "Tamil Nadu", "Andhra Pradesh",
]
CATEGORY_OPTIONS = [
    "Honeymoon Packages",
    "Family Packages",
    "Friends",
    "Group Packages",
    "Solo Trips",
    "All-Girls Trips",
    "All-Boys Trips",
    "Volunteer Trips",
]
THEME_OPTIONS = ["Adventure", "Nature", "Religious", "Wildlife", "Water Activities"]
CITIES = [
    "Mumbai", "Delhi", "Bangalore", "Chennai", "Kolkata", "Hyderabad",
    "Pune", "Ahmedabad", "Jaipur", "Surat", "Lucknow", "Kanpur",
]
ACTIVITY_OPTIONS = [
    "Sightseeing", "Adventure Sports", "Cultural Tour", "Beach Activities",
    "Trekking", "Wildlife Safari", "Temple Visit", "Shopping",
    "Local Cuisine", "Photography", "Boating", "Museum Visit",
]
MEAL_OPTIONS = ["Breakfast", "Lunch", "Dinner"]

DEFAULT_DAYS = 5
MAX_DAYS = 60


def coerce_number(value: Any, default: float = 0) -> float:
    """Parse numeric form input, falling back to ``default`` for junk."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return default
    return number if math.isfinite(number) else default


def coerce_int(value: Any, default: int = 0) -> int:
    """Integer variant of :func:`coerce_number`; fractions are truncated."""
    return int(coerce_number(value, default))


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:8]}"


class FieldSet(BaseModel):
    """Common base for the per-tab field sets."""

    model_config = ConfigDict(frozen=True, extra="ignore")


# --- Basic info ---


class BasicInfo(FieldSet):
    tab: Literal[TabId.BASIC] = TabId.BASIC
    trip_title: str = Field(default="", max_length=100)
    trip_overview: str = ""
    destination: str = ""
    destination_type: Literal["domestic", "international"] = "domestic"
    categories: List[str] = Field(default_factory=list)
    trip_theme: List[str] = Field(default_factory=list)
    hotel_category: int = Field(default=3, ge=1, le=5)
    pickup_location: str = ""
    drop_location: str = ""
    days: int = Field(default=DEFAULT_DAYS, le=MAX_DAYS)

    @field_validator("days", mode="before")
    @classmethod
    def _coerce_days(cls, value: Any) -> int:
        return coerce_int(value)

    @field_validator("hotel_category", mode="before")
    @classmethod
    def _coerce_hotel_category(cls, value: Any) -> int:
        return coerce_int(value, default=3)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def nights(self) -> int:
        return max(0, self.days - 1)


# --- Itinerary ---


class Accommodation(BaseModel):
    model_config = ConfigDict(frozen=True)

    hotel_name: str = ""
    gallery: List[str] = Field(default_factory=list)
    meals: List[str] = Field(default_factory=list)


class ItineraryDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: int = 1
    title: str = ""
    description: str = ""
    images: List[str] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)
    accommodation: Accommodation = Field(default_factory=Accommodation)


def seed_day(day: int, total: int) -> ItineraryDay:
    """Blank itinerary entry with the default day heading."""
    if day == 1:
        label = "Arrival"
    elif day == total:
        label = "Departure"
    else:
        label = "Exploration"
    return ItineraryDay(day=day, title=f"Day {day}: {label}")


def resize_itinerary(entries: List[ItineraryDay], days: int) -> List[ItineraryDay]:
    """Keep existing entries, append blank days or drop trailing ones.

    Entries still carrying their default heading are re-titled for the new
    length, so a former last day stops reading "Departure".
    """
    days = max(0, days)
    kept = []
    for entry in entries[:days]:
        if entry.title == seed_day(entry.day, len(entries)).title:
            entry = entry.model_copy(update={"title": seed_day(entry.day, days).title})
        kept.append(entry)
    return kept + [seed_day(day, days) for day in range(len(kept) + 1, days + 1)]


class Itinerary(FieldSet):
    tab: Literal[TabId.ITINERARY] = TabId.ITINERARY
    entries: List[ItineraryDay] = Field(
        default_factory=lambda: resize_itinerary([], DEFAULT_DAYS)
    )


# --- Media ---


class Media(FieldSet):
    tab: Literal[TabId.MEDIA] = TabId.MEDIA
    hero_image: Optional[str] = None
    gallery: List[str] = Field(default_factory=list)


# --- Pricing ---


class DateSlot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: _new_id("slot"))
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    available_slots: int = 10

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def _blank_date(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("available_slots", mode="before")
    @classmethod
    def _coerce_slots(cls, value: Any) -> int:
        return coerce_int(value)


class PricingPackage(BaseModel):
    """Priced variant offered under the fixed-departure model."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: _new_id("package"))
    title: str = ""
    description: str = ""
    base_price: float = 0
    discount: float = 0
    booking_amount: float = 0
    gst_percentage: float = 18

    @field_validator(
        "base_price", "discount", "booking_amount", "gst_percentage", mode="before"
    )
    @classmethod
    def _coerce_amounts(cls, value: Any) -> float:
        return coerce_number(value)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def final_price(self) -> float:
        # Not clamped: a discount above the base price yields a negative price.
        return self.base_price - self.discount


class Pricing(FieldSet):
    tab: Literal[TabId.PRICING] = TabId.PRICING
    pricing_model: Literal["fixed", "customized"] = "fixed"
    date_slots: List[DateSlot] = Field(default_factory=list)
    packages: List[PricingPackage] = Field(default_factory=list)
    price_type: Literal["person", "package"] = "person"
    base_price: float = 0
    discount: float = 0

    @field_validator("base_price", "discount", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> float:
        return coerce_number(value)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def final_price(self) -> float:
        return self.base_price - self.discount


# --- Details ---


class Faq(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: _new_id("faq"))
    question: str = ""
    answer: str = ""


class Details(FieldSet):
    tab: Literal[TabId.DETAILS] = TabId.DETAILS
    highlights: List[str] = Field(default_factory=list)
    inclusions: List[str] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    faqs: List[Faq] = Field(default_factory=list)


# --- Policies ---


class CustomPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: _new_id("policy"))
    title: str = ""
    content: str = ""


class Policies(FieldSet):
    tab: Literal[TabId.POLICIES] = TabId.POLICIES
    terms_conditions: str = ""
    privacy_policy: str = ""
    payment_terms: str = ""
    custom_policies: List[CustomPolicy] = Field(default_factory=list)


TabFieldSet = Annotated[
    Union[BasicInfo, Itinerary, Media, Pricing, Details, Policies],
    Field(discriminator="tab"),
]

TAB_MODELS: Dict[TabId, Type[FieldSet]] = {
    TabId.BASIC: BasicInfo,
    TabId.ITINERARY: Itinerary,
    TabId.MEDIA: Media,
    TabId.PRICING: Pricing,
    TabId.DETAILS: Details,
    TabId.POLICIES: Policies,
}

DEFAULT_TERMS_CONDITIONS = """1. BOOKING CONFIRMATION
- All bookings are subject to availability and confirmation
- A booking confirmation will be sent via email within 24 hours

2. CANCELLATION POLICY
- Cancellations made 30+ days before departure: 10% penalty
- Cancellations made 15-29 days before departure: 25% penalty
- Cancellations made 7-14 days before departure: 50% penalty
- Cancellations made less than 7 days: 100% penalty

3. TRAVEL DOCUMENTS
- Valid passport/ID required for all travelers
- Travel insurance is recommended"""

DEFAULT_PRIVACY_POLICY = """1. INFORMATION COLLECTION
We collect name, contact details, identity documents and travel preferences to process your booking.

2. INFORMATION SHARING
We share personal information only with travel service providers, when legally required, or with your explicit consent.

3. YOUR RIGHTS
You may access, correct or request deletion of your data and opt out of marketing communications."""

DEFAULT_PAYMENT_TERMS = """1. PAYMENT SCHEDULE
- Booking Amount: 25% of total package cost at confirmation
- Balance Payment: 75% due 15 days before departure
- Last-minute bookings: Full payment required immediately

2. PAYMENT METHODS
- Credit/Debit Cards, Bank Transfer, UPI and Digital Wallets"""


def form_options() -> Dict[str, Any]:
    """Choice lists and policy templates offered by the trip forms."""
    return {
        "destinations": DESTINATIONS,
        "categories": CATEGORY_OPTIONS,
        "themes": THEME_OPTIONS,
        "cities": CITIES,
        "activities": ACTIVITY_OPTIONS,
        "meals": MEAL_OPTIONS,
        "policy_templates": {
            "terms_conditions": DEFAULT_TERMS_CONDITIONS,
            "privacy_policy": DEFAULT_PRIVACY_POLICY,
            "payment_terms": DEFAULT_PAYMENT_TERMS,
        },
    }
