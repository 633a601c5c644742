"""Entrypoint for the travel back-office FastAPI backend."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from fastapi import FastAPI
from loguru import logger

from backend.app.api import dashboard, leads, system, trips
from backend.app.config import Settings, get_settings
from backend.app.services.mock_client import MockSupabaseClient
from backend.app.services.supabase_client import SupabaseClient
from backend.app.wizard import WizardController


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup/shutdown routines."""
    settings: Settings = get_settings()
    client: SupabaseClient | MockSupabaseClient
    if settings.use_mock_data:
        client = MockSupabaseClient(settings)
    else:
        client = SupabaseClient(settings)
    activity_log: List[Dict[str, Any]] = []
    trip_drafts: Dict[str, WizardController] = {}

    app.state.settings = settings  # type: ignore[attr-defined]
    app.state.data_client = client  # type: ignore[attr-defined]
    app.state.activity_log = activity_log  # type: ignore[attr-defined]
    app.state.trip_drafts = trip_drafts  # type: ignore[attr-defined]

    logger.info(
        "Starting {app_name} backend (mock mode = {mock})",
        app_name=settings.app_name,
        mock=settings.use_mock_data,
    )
    try:
        yield
    finally:
        await client.close()
        logger.info(
            "Backend shutdown complete, {count} draft(s) discarded",
            count=sum(1 for d in trip_drafts.values() if d.published is None),
        )


app = FastAPI(
    title="Wandercraft Back Office Backend",
    version="0.1.0",
    lifespan=lifespan,
)


app.include_router(system.router)
app.include_router(dashboard.router)
app.include_router(leads.router)
app.include_router(trips.router)


@app.get("/")
async def root() -> Dict[str, str]:
    """Simple root endpoint for manual verification."""
    return {"message": "Back-office backend is running"}
