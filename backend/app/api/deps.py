"""FastAPI dependency helpers."""

from typing import Any, Dict, List

from fastapi import Depends, HTTPException, Path, Request, status

from backend.app.config import Settings, get_settings
from backend.app.wizard import WizardController


def get_app_settings() -> Settings:
    """Provide application settings."""
    return get_settings()


def get_data_client(
    request: Request, settings: Settings = Depends(get_app_settings)
) -> Any:
    """Retrieve data store client from app state."""
    client = request.app.state.data_client  # type: ignore[attr-defined]
    return client


def get_activity_log(request: Request) -> List[Dict[str, Any]]:
    """Return activity log stored in app state."""
    log: List[Dict[str, Any]] = request.app.state.activity_log  # type: ignore[attr-defined]
    return log


def get_trip_drafts(request: Request) -> Dict[str, WizardController]:
    """Return the in-memory wizard drafts keyed by draft id."""
    drafts: Dict[str, WizardController] = request.app.state.trip_drafts  # type: ignore[attr-defined]
    return drafts


def get_trip_draft(
    draft_id: str = Path(...),
    drafts: Dict[str, WizardController] = Depends(get_trip_drafts),
) -> WizardController:
    """Resolve a wizard draft or answer 404."""
    controller = drafts.get(draft_id)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip draft not found",
        )
    return controller
