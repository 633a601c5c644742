"""Publish gate for completed trip drafts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Protocol

from loguru import logger

from backend.app.wizard.completion import recompute
from backend.app.wizard.errors import PublishFailedError, PublishNotAllowedError
from backend.app.wizard.store import WizardState
from backend.app.wizard.tabs import Pricing, TabId


class TripPersister(Protocol):
    """Anything able to store a trip payload and hand back its identifier."""

    async def create_trip(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PublishedTrip:
    """Terminal marker of a successfully published wizard flow."""

    trip_id: str
    url: str


def can_publish(state: WizardState) -> bool:
    return recompute(state).progress == 1.0


def _pricing_payload(pricing: Pricing) -> Dict[str, Any]:
    if pricing.pricing_model == "fixed":
        include = {"pricing_model", "date_slots", "packages"}
    else:
        include = {"pricing_model", "price_type", "base_price", "discount", "final_price"}
    return pricing.model_dump(mode="json", include=include)


def build_trip_payload(state: WizardState) -> Dict[str, Any]:
    """Merge every tab's field set into one composite trip object."""
    store = state.store
    return {
        "basic_info": store.fieldset(TabId.BASIC).model_dump(mode="json", exclude={"tab"}),
        "itinerary": store.fieldset(TabId.ITINERARY).model_dump(mode="json")["entries"],
        "media": store.fieldset(TabId.MEDIA).model_dump(mode="json", exclude={"tab"}),
        "pricing": _pricing_payload(store.fieldset(TabId.PRICING)),  # type: ignore[arg-type]
        "details": store.fieldset(TabId.DETAILS).model_dump(mode="json", exclude={"tab"}),
        "policies": store.fieldset(TabId.POLICIES).model_dump(mode="json", exclude={"tab"}),
    }


async def publish(
    state: WizardState,
    persister: TripPersister,
    url_for: Callable[[str], str],
) -> PublishedTrip:
    """Persist a complete draft; the state is never modified here."""
    if not can_publish(state):
        raise PublishNotAllowedError("Every wizard tab must be complete before publishing")

    payload = build_trip_payload(state)
    try:
        response = await persister.create_trip(payload)
    except Exception as exc:  # noqa: BLE001
        logger.error("Trip publish failed: {error}", error=str(exc))
        raise PublishFailedError("Failed to publish trip. Please try again.") from exc

    trip_id = response.get("id") if isinstance(response, dict) else None
    if not trip_id:
        logger.error("Trip publish returned no identifier: {response}", response=response)
        raise PublishFailedError("Persistence returned no trip identifier")

    logger.info("Trip published as {trip_id}", trip_id=trip_id)
    return PublishedTrip(trip_id=str(trip_id), url=url_for(str(trip_id)))
