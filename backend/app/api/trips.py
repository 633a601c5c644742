"""Trip authoring wizard and published trip endpoints."""

from typing import Any, Dict, List
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from loguru import logger

from backend.app.api.activity import error_response, record_activity
from backend.app.api.deps import (
    get_activity_log,
    get_app_settings,
    get_data_client,
    get_trip_draft,
    get_trip_drafts,
)
from backend.app.config import Settings
from backend.app.models.trips import (
    ActiveTabRequest,
    FieldUpdateRequest,
    ItemAppendRequest,
    ItemUpdateRequest,
    ToggleRequest,
    TripEnquiryRequest,
    draft_view,
)
from backend.app.services.supabase_client import SupabaseAPIError
from backend.app.wizard import (
    FlowClosedError,
    InvalidFieldValueError,
    PublishFailedError,
    PublishInProgressError,
    PublishNotAllowedError,
    TabId,
    WizardController,
    WizardError,
)
from backend.app.wizard.tabs import form_options

router = APIRouter(prefix="/api/trips", tags=["trips"])


def _wizard_http_error(exc: WizardError) -> HTTPException:
    """Map wizard exceptions onto HTTP status codes."""
    if isinstance(exc, InvalidFieldValueError):
        return HTTPException(
            status_code=422,
            detail={"message": str(exc), "errors": exc.errors},
        )
    if isinstance(
        exc, (FlowClosedError, PublishInProgressError, PublishNotAllowedError)
    ):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, PublishFailedError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/options")
async def trip_form_options() -> Dict[str, Any]:
    """Choice lists and default policy texts for the trip forms."""
    return form_options()


# --- Wizard drafts ---


@router.post("/drafts")
async def create_draft(
    drafts: Dict[str, WizardController] = Depends(get_trip_drafts),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Start a new trip authoring session."""
    draft_id = uuid4().hex[:12]
    drafts[draft_id] = WizardController()
    logger.info("Trip draft {draft_id} started", draft_id=draft_id)
    record_activity(
        activity_log,
        action="trips.draft.create",
        method="POST",
        endpoint=f"/api/trips/drafts/{draft_id}",
        status="success",
        source="wizard",
    )
    return draft_view(draft_id, drafts[draft_id])


@router.get("/drafts")
async def list_drafts(
    drafts: Dict[str, WizardController] = Depends(get_trip_drafts),
) -> List[Dict[str, Any]]:
    """Summaries of every draft held by this backend."""
    return [
        {
            "draft_id": draft_id,
            "title": controller.get_field("basic", "trip_title"),
            "progress": controller.progress,
            "published": controller.published is not None,
        }
        for draft_id, controller in drafts.items()
    ]


@router.get("/drafts/{draft_id}")
async def get_draft(
    draft_id: str = Path(...),
    controller: WizardController = Depends(get_trip_draft),
) -> Dict[str, Any]:
    """Return the full state of a draft."""
    return draft_view(draft_id, controller)


@router.delete("/drafts/{draft_id}")
async def discard_draft(
    draft_id: str = Path(...),
    controller: WizardController = Depends(get_trip_draft),
    drafts: Dict[str, WizardController] = Depends(get_trip_drafts),
) -> Dict[str, str]:
    """Discard a draft without publishing it."""
    if controller.publishing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Draft is being published",
        )
    drafts.pop(draft_id, None)
    logger.info("Trip draft {draft_id} discarded", draft_id=draft_id)
    return {"status": "discarded", "draft_id": draft_id}


@router.put("/drafts/{draft_id}/active-tab")
async def select_tab(
    payload: ActiveTabRequest,
    draft_id: str = Path(...),
    controller: WizardController = Depends(get_trip_draft),
) -> Dict[str, Any]:
    """Switch the active wizard tab."""
    controller.select_tab(payload.tab)
    return draft_view(draft_id, controller)


@router.patch("/drafts/{draft_id}/fields")
async def update_field(
    payload: FieldUpdateRequest,
    draft_id: str = Path(...),
    controller: WizardController = Depends(get_trip_draft),
) -> Dict[str, Any]:
    """Apply one field-update event to a draft."""
    try:
        controller.set_field(payload.tab, payload.name, payload.value)
    except WizardError as exc:
        raise _wizard_http_error(exc) from exc
    return draft_view(draft_id, controller)


@router.post("/drafts/{draft_id}/toggle")
async def toggle_item(
    payload: ToggleRequest,
    draft_id: str = Path(...),
    controller: WizardController = Depends(get_trip_draft),
) -> Dict[str, Any]:
    """Add or remove one entry of a selection list (categories, themes...)."""
    try:
        controller.toggle_item(payload.tab, payload.name, payload.item)
    except WizardError as exc:
        raise _wizard_http_error(exc) from exc
    return draft_view(draft_id, controller)


@router.post("/drafts/{draft_id}/items")
async def append_item(
    payload: ItemAppendRequest,
    draft_id: str = Path(...),
    controller: WizardController = Depends(get_trip_draft),
) -> Dict[str, Any]:
    """Append an entry (highlight, gallery image, day slot...) to a list field."""
    try:
        controller.append_item(payload.tab, payload.name, payload.item)
    except WizardError as exc:
        raise _wizard_http_error(exc) from exc
    return draft_view(draft_id, controller)


@router.patch("/drafts/{draft_id}/items/{index}")
async def update_item(
    payload: ItemUpdateRequest,
    draft_id: str = Path(...),
    index: int = Path(..., ge=0),
    controller: WizardController = Depends(get_trip_draft),
) -> Dict[str, Any]:
    """Edit one object of a list field, such as a single itinerary day."""
    try:
        controller.update_list_item(payload.tab, payload.name, index, payload.changes)
    except WizardError as exc:
        raise _wizard_http_error(exc) from exc
    return draft_view(draft_id, controller)


@router.delete("/drafts/{draft_id}/items/{index}")
async def remove_item(
    tab: TabId = Query(...),
    name: str = Query(...),
    draft_id: str = Path(...),
    index: int = Path(..., ge=0),
    controller: WizardController = Depends(get_trip_draft),
) -> Dict[str, Any]:
    """Remove the entry at ``index`` from a list field."""
    try:
        controller.remove_item(tab, name, index)
    except WizardError as exc:
        raise _wizard_http_error(exc) from exc
    return draft_view(draft_id, controller)


@router.post("/drafts/{draft_id}/publish")
async def publish_draft(
    draft_id: str = Path(...),
    controller: WizardController = Depends(get_trip_draft),
    client: Any = Depends(get_data_client),
    settings: Settings = Depends(get_app_settings),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Publish a complete draft through the data store."""
    try:
        published = await controller.publish(client, settings.trip_url)
    except PublishFailedError as exc:
        record_activity(
            activity_log,
            action="trips.publish",
            method="POST",
            endpoint="/trips",
            payload={"draft_id": draft_id},
            status="error",
            response=error_response(exc.__cause__ or exc),
        )
        raise _wizard_http_error(exc) from exc
    except WizardError as exc:
        record_activity(
            activity_log,
            action="trips.publish",
            method="POST",
            endpoint="/trips",
            payload={"draft_id": draft_id, "progress": controller.progress},
            status="rejected",
            response={"error": str(exc)},
            source="wizard",
        )
        raise _wizard_http_error(exc) from exc

    record_activity(
        activity_log,
        action="trips.publish",
        method="POST",
        endpoint="/trips",
        payload={"draft_id": draft_id},
        status="success",
        response={"trip_id": published.trip_id, "url": published.url},
    )
    return draft_view(draft_id, controller)


# --- Published trips ---


@router.get("/{trip_id}")
async def get_trip(
    trip_id: str = Path(...),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Return a published trip for the read-only detail page."""
    try:
        response = await client.get_trip(trip_id)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="trips.detail",
            method="GET",
            endpoint=f"/trips/{trip_id}",
            status="error",
            response=error_response(exc),
        )
        if isinstance(exc, ValueError) or (
            isinstance(exc, SupabaseAPIError) and exc.status_code == 404
        ):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Trip not found",
            ) from exc
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch trip",
        ) from exc

    record_activity(
        activity_log,
        action="trips.detail",
        method="GET",
        endpoint=f"/trips/{trip_id}",
        status="success",
        response={"id": response.get("id")},
    )
    return response


@router.post("/{trip_id}/enquiries")
async def submit_enquiry(
    payload: TripEnquiryRequest,
    trip_id: str = Path(...),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Record a booking or enquiry request from the trip page as a lead."""
    trip = await get_trip(trip_id, client, activity_log)
    body = payload.to_lead_payload(trip)
    try:
        response = await client.create_lead(body)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="trips.enquiry",
            method="POST",
            endpoint="/leads",
            payload=body,
            status="error",
            response=error_response(exc),
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to submit request",
        ) from exc

    record_activity(
        activity_log,
        action="trips.enquiry",
        method="POST",
        endpoint="/leads",
        payload=body,
        status="success",
        response=response,
    )
    return response
