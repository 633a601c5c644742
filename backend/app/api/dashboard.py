"""Dashboard overview endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from backend.app.api.deps import get_activity_log, get_data_client, get_trip_drafts
from backend.app.api.leads import fetch_all_leads
from backend.app.services.lead_filters import summarize_leads

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary")
async def dashboard_summary(
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
    drafts=Depends(get_trip_drafts),
) -> Dict[str, Any]:
    """Lead pipeline counts plus open and published trip drafts."""
    leads = await fetch_all_leads(client, activity_log)
    summary = summarize_leads(leads)
    summary["recent_leads"] = leads[:5]
    summary["open_drafts"] = sum(1 for d in drafts.values() if d.published is None)
    summary["published_drafts"] = sum(1 for d in drafts.values() if d.published is not None)
    return summary
