"""Lead management endpoints backed by the hosted data store."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from backend.app.api.activity import error_response, record_activity
from backend.app.api.deps import get_activity_log, get_app_settings, get_data_client
from backend.app.config import Settings
from backend.app.models.leads import (
    CommentCreateRequest,
    DocumentCreateRequest,
    LeadCreateRequest,
    LeadUpdateRequest,
)
from backend.app.services.lead_filters import filter_leads, group_by_status
from backend.app.services.supabase_client import SupabaseAPIError

router = APIRouter(prefix="/api/leads", tags=["leads"])


def _not_found(exc: Exception) -> bool:
    if isinstance(exc, SupabaseAPIError):
        return exc.status_code == status.HTTP_404_NOT_FOUND
    return isinstance(exc, ValueError)


async def fetch_all_leads(
    client: Any, activity_log: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Load every lead, translating data store failures into HTTP errors."""
    try:
        leads = await client.list_leads()
    except SupabaseAPIError as exc:
        record_activity(
            activity_log,
            action="leads.list",
            method="GET",
            endpoint="/leads",
            status="error",
            response=error_response(exc),
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch leads",
        ) from exc
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.list",
            method="GET",
            endpoint="/leads",
            status="error",
            response=error_response(exc),
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected lead listing error",
        ) from exc

    record_activity(
        activity_log,
        action="leads.list",
        method="GET",
        endpoint="/leads",
        status="success",
        response={"count": len(leads)},
    )
    return leads


@router.get("")
async def list_leads(
    search: Optional[str] = Query(default=None),
    status_filter: str = Query(default="all", alias="status"),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> List[Dict[str, Any]]:
    """List leads newest first, narrowed by search term and status."""
    leads = await fetch_all_leads(client, activity_log)
    return filter_leads(leads, search, status_filter)


@router.get("/pipeline")
async def lead_pipeline(
    search: Optional[str] = Query(default=None),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> List[Dict[str, Any]]:
    """Kanban columns of leads, one per pipeline status."""
    leads = await fetch_all_leads(client, activity_log)
    return group_by_status(filter_leads(leads, search, "all"))


@router.post("")
async def create_lead(
    payload: LeadCreateRequest,
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Insert a new lead from the add-lead form."""
    body = payload.to_payload()
    try:
        response = await client.create_lead(body)
    except SupabaseAPIError as exc:
        record_activity(
            activity_log,
            action="leads.create",
            method="POST",
            endpoint="/leads",
            payload=body,
            status="error",
            response=error_response(exc),
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to add lead",
        ) from exc
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.create",
            method="POST",
            endpoint="/leads",
            payload=body,
            status="error",
            response=error_response(exc),
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected lead creation error",
        ) from exc

    record_activity(
        activity_log,
        action="leads.create",
        method="POST",
        endpoint="/leads",
        payload=body,
        status="success",
        response=response,
    )
    return response


@router.get("/{lead_id}")
async def get_lead(
    lead_id: str = Path(...),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Return a single lead."""
    try:
        response = await client.get_lead(lead_id)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.detail",
            method="GET",
            endpoint=f"/leads/{lead_id}",
            status="error",
            response=error_response(exc),
        )
        if _not_found(exc):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Lead not found",
            ) from exc
        if isinstance(exc, SupabaseAPIError):
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to fetch lead",
            ) from exc
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected lead retrieval error",
        ) from exc

    record_activity(
        activity_log,
        action="leads.detail",
        method="GET",
        endpoint=f"/leads/{lead_id}",
        status="success",
        response=response,
    )
    return response


@router.put("/{lead_id}")
async def update_lead(
    payload: LeadUpdateRequest,
    lead_id: str = Path(...),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Update lead fields, status and assignment."""
    body = payload.to_payload()
    try:
        response = await client.update_lead(lead_id, body)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.update",
            method="PATCH",
            endpoint=f"/leads/{lead_id}",
            payload=body,
            status="error",
            response=error_response(exc),
        )
        if _not_found(exc):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Lead not found",
            ) from exc
        if isinstance(exc, SupabaseAPIError):
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to update lead",
            ) from exc
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected lead update error",
        ) from exc

    record_activity(
        activity_log,
        action="leads.update",
        method="PATCH",
        endpoint=f"/leads/{lead_id}",
        payload=body,
        status="success",
        response=response,
    )
    return response


@router.delete("/{lead_id}")
async def delete_lead(
    lead_id: str = Path(...),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Delete a lead."""
    try:
        response = await client.delete_lead(lead_id)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.delete",
            method="DELETE",
            endpoint=f"/leads/{lead_id}",
            status="error",
            response=error_response(exc),
        )
        if _not_found(exc):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Lead not found",
            ) from exc
        if isinstance(exc, SupabaseAPIError):
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to delete lead",
            ) from exc
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected lead deletion error",
        ) from exc

    record_activity(
        activity_log,
        action="leads.delete",
        method="DELETE",
        endpoint=f"/leads/{lead_id}",
        status="success",
        response=response,
    )
    return response


@router.get("/{lead_id}/comments")
async def list_comments(
    lead_id: str = Path(...),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> List[Dict[str, Any]]:
    """Return the comment thread of a lead, newest first."""
    try:
        response = await client.list_comments(lead_id)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.comments",
            method="GET",
            endpoint="/lead_comments",
            payload={"lead_id": lead_id},
            status="error",
            response=error_response(exc),
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch comments",
        ) from exc
    return response


@router.post("/{lead_id}/comments")
async def add_comment(
    payload: CommentCreateRequest,
    lead_id: str = Path(...),
    client: Any = Depends(get_data_client),
    settings: Settings = Depends(get_app_settings),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Append a comment to a lead."""
    body = {
        "user_name": payload.user_name or settings.comment_author,
        "comment": payload.comment,
    }
    try:
        response = await client.add_comment(lead_id, body)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.comment",
            method="POST",
            endpoint="/lead_comments",
            payload=body,
            status="error",
            response=error_response(exc),
        )
        if _not_found(exc):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Lead not found",
            ) from exc
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to add comment",
        ) from exc

    record_activity(
        activity_log,
        action="leads.comment",
        method="POST",
        endpoint="/lead_comments",
        payload=body,
        status="success",
        response=response,
    )
    return response


@router.get("/{lead_id}/documents")
async def list_documents(
    lead_id: str = Path(...),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> List[Dict[str, Any]]:
    """Return document metadata attached to a lead."""
    try:
        response = await client.list_documents(lead_id)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.documents",
            method="GET",
            endpoint="/lead_documents",
            payload={"lead_id": lead_id},
            status="error",
            response=error_response(exc),
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch documents",
        ) from exc
    return response


@router.post("/{lead_id}/documents")
async def add_document(
    payload: DocumentCreateRequest,
    lead_id: str = Path(...),
    client: Any = Depends(get_data_client),
    activity_log=Depends(get_activity_log),
) -> Dict[str, Any]:
    """Record metadata of a document that already lives in storage."""
    body = payload.to_payload()
    try:
        response = await client.add_document(lead_id, body)
    except Exception as exc:  # noqa: BLE001
        record_activity(
            activity_log,
            action="leads.document",
            method="POST",
            endpoint="/lead_documents",
            payload=body,
            status="error",
            response=error_response(exc),
        )
        if _not_found(exc):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Lead not found",
            ) from exc
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to record document",
        ) from exc

    record_activity(
        activity_log,
        action="leads.document",
        method="POST",
        endpoint="/lead_documents",
        payload=body,
        status="success",
        response=response,
    )
    return response
