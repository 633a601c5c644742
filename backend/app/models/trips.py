"""Pydantic models for trip wizard and trip page operations."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from backend.app.models.leads import LeadCreateRequest
from backend.app.wizard import TAB_LABELS, TabId, WizardController


class FieldUpdateRequest(BaseModel):
    """One field-update event for a wizard draft."""

    tab: TabId
    name: str
    value: Any = None


class ToggleRequest(BaseModel):
    """Add or remove one item of a selection list."""

    tab: TabId
    name: str
    item: Any


class ActiveTabRequest(BaseModel):
    tab: TabId


class ItemAppendRequest(BaseModel):
    """Append one entry to a list field."""

    tab: TabId
    name: str
    item: Any


class ItemUpdateRequest(BaseModel):
    """Merge changes into one object of a list field."""

    tab: TabId
    name: str
    changes: Dict[str, Any] = Field(default_factory=dict)


class TripEnquiryRequest(LeadCreateRequest):
    """Booking or enquiry submitted from a published trip page."""

    kind: str = Field(default="enquiry", pattern="^(booking|enquiry)$")
    source: str = "trip_page"

    def to_lead_payload(self, trip: Dict[str, Any]) -> Dict[str, Any]:
        """Turn the request into a lead row referencing the trip."""
        payload = self.model_dump(mode="json", exclude={"kind"})
        payload["status"] = "new"
        basic = trip.get("basic_info") or {}
        if not payload.get("pickup"):
            payload["pickup"] = basic.get("pickup_location")
        if not payload.get("drop_location"):
            payload["drop_location"] = basic.get("drop_location")
        title = basic.get("trip_title") or trip.get("id")
        note = f"{self.kind.title()} request for trip '{title}' ({trip.get('id')})"
        payload["comments"] = f"{note}\n{payload['comments']}" if payload.get("comments") else note
        return payload


def draft_view(draft_id: str, controller: WizardController) -> Dict[str, Any]:
    """Serialize a wizard draft for the frontend."""
    snapshot = controller.snapshot
    store = controller.state.store
    tabs: List[Dict[str, Any]] = []
    for tab in controller.state.tabs:
        tabs.append(
            {
                "id": tab.value,
                "label": TAB_LABELS[tab],
                "complete": tab in snapshot.completed_tabs,
                "missing": snapshot.missing.get(tab, []),
                "fields": store.fieldset(tab).model_dump(mode="json", exclude={"tab"}),
            }
        )
    published: Optional[Dict[str, str]] = None
    if controller.published is not None:
        published = {
            "trip_id": controller.published.trip_id,
            "url": controller.published.url,
        }
    return {
        "draft_id": draft_id,
        "active_tab": controller.active_tab.value,
        "tabs": tabs,
        "completed_tabs": [tab.value for tab in controller.state.tabs if tab in snapshot.completed_tabs],
        "progress": snapshot.progress,
        "can_publish": controller.can_publish,
        "publishing": controller.publishing,
        "published": published,
    }
