"""Pydantic models for lead/CRM API interactions."""

from datetime import date
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from backend.app.wizard.tabs import coerce_int

LeadStatus = Literal["new", "contacted", "quoted", "booked", "awaiting_payment", "failed"]
LeadPriority = Literal["low", "medium", "high"]

LEAD_STATUSES = ("new", "contacted", "quoted", "booked", "awaiting_payment", "failed")
PIPELINE_ORDER = ("new", "contacted", "quoted", "awaiting_payment", "booked", "failed")
LEAD_PRIORITIES = ("low", "medium", "high")

DESTINATION_TYPES = [
    "Beach Destinations",
    "Hill Stations",
    "Adventure Tourism",
    "Cultural Heritage",
    "Wildlife Safari",
    "Spiritual Tourism",
    "International Destinations",
    "Honeymoon Packages",
    "Family Packages",
    "Corporate Tours",
]
HOTEL_CATEGORIES = [
    "Budget (1-2 Star)",
    "Standard (3 Star)",
    "Deluxe (4 Star)",
    "Luxury (5 Star)",
    "Heritage Hotels",
    "Resorts",
]

# Optional date columns reject empty strings, so blanks travel as null.
_DATE_FIELDS = ("travel_date_from", "travel_date_to", "follow_up_date")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class LeadBase(BaseModel):
    """Fields shared by lead creation and update."""

    destination_type: Optional[str] = None
    pickup: Optional[str] = None
    drop_location: Optional[str] = None
    travel_date_from: Optional[date] = None
    travel_date_to: Optional[date] = None
    budget: Optional[str] = None
    hotel_category: Optional[str] = None
    comments: Optional[str] = None

    @field_validator(*_DATE_FIELDS, mode="before", check_fields=False)
    @classmethod
    def _blank_dates(cls, value: Any) -> Any:
        return _blank_to_none(value)


class LeadCreateRequest(LeadBase):
    """Payload of the add-lead form."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    mobile: str = Field(..., min_length=1)
    no_of_adults: int = 1
    no_of_children: int = 0
    priority: LeadPriority = "medium"
    source: str = "website"

    @field_validator("no_of_adults", mode="before")
    @classmethod
    def _coerce_adults(cls, value: Any) -> int:
        return coerce_int(value, default=1)

    @field_validator("no_of_children", mode="before")
    @classmethod
    def _coerce_children(cls, value: Any) -> int:
        return coerce_int(value, default=0)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize into a data store row, status always starting at ``new``."""
        payload = self.model_dump(mode="json")
        payload["status"] = "new"
        return payload


class LeadUpdateRequest(LeadBase):
    """Partial update from the lead detail view."""

    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    no_of_adults: Optional[int] = None
    no_of_children: Optional[int] = None
    status: Optional[LeadStatus] = None
    priority: Optional[LeadPriority] = None
    assigned_to: Optional[str] = None
    follow_up_date: Optional[date] = None

    @field_validator("no_of_adults", "no_of_children", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        return coerce_int(value)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize only the fields the caller actually sent."""
        return self.model_dump(mode="json", exclude_unset=True)


class CommentCreateRequest(BaseModel):
    """Payload for appending a lead comment."""

    comment: str = Field(..., min_length=1)
    user_name: Optional[str] = None

    @field_validator("comment")
    @classmethod
    def _strip_comment(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Comment must not be blank")
        return stripped


class DocumentCreateRequest(BaseModel):
    """Metadata of a document stored elsewhere."""

    file_name: str = Field(..., min_length=1)
    file_url: str = Field(..., min_length=1)
    file_type: str = "application/octet-stream"

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()
