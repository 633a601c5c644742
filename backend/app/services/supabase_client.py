"""HTTP client wrapper around the hosted data store REST API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from loguru import logger

from backend.app.config import Settings


class SupabaseAPIError(Exception):
    """Raised when the data store returns an unexpected response."""

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"Data store request failed with status {status_code}")


class SupabaseClient:
    """Async client for the PostgREST tables backing the back office."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=f"{str(settings.supabase_url).rstrip('/')}/rest/v1",
            timeout=httpx.Timeout(10.0, read=30.0),
            headers={
                "apikey": settings.supabase_key,
                "Authorization": f"Bearer {settings.supabase_key}",
            },
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    @asynccontextmanager
    async def lifespan(self) -> AsyncIterator["SupabaseClient"]:
        """Async context manager to ensure resource cleanup."""
        try:
            yield self
        finally:
            await self.close()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Perform a data store request and decode the JSON body."""
        headers = {"Content-Type": "application/json"}
        if method in {"POST", "PATCH", "DELETE"}:
            headers["Prefer"] = "return=representation"

        logger.debug("Data store request {method} {url}", method=method, url=url)
        response = await self._client.request(
            method, url, headers=headers, params=params, json=json
        )
        if response.status_code >= 400:
            logger.error(
                "Data store error {status} on {url}: {body}",
                status=response.status_code,
                url=url,
                body=response.text,
            )
            raise SupabaseAPIError(response.status_code, response.text)
        if not response.content:
            return []
        return response.json()

    async def _select_one(self, table: str, record_id: str) -> Dict[str, Any]:
        rows = await self._request(
            "GET", f"/{table}", params={"select": "*", "id": f"eq.{record_id}"}
        )
        if not rows:
            raise SupabaseAPIError(404, f"{table} record {record_id} not found")
        return rows[0]

    async def _insert(self, table: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._request("POST", f"/{table}", json=[payload])
        if not rows:
            raise SupabaseAPIError(500, f"{table} insert returned no rows")
        return rows[0]

    # --- Leads ---

    async def list_leads(self) -> List[Dict[str, Any]]:
        """Return every lead, newest first."""
        return await self._request(
            "GET", "/leads", params={"select": "*", "order": "created_at.desc"}
        )

    async def get_lead(self, lead_id: str) -> Dict[str, Any]:
        """Retrieve a lead by id."""
        return await self._select_one("leads", lead_id)

    async def create_lead(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new lead."""
        return await self._insert("leads", payload)

    async def update_lead(self, lead_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing lead."""
        body = {**payload, "updated_at": datetime.now(timezone.utc).isoformat()}
        rows = await self._request(
            "PATCH", "/leads", params={"id": f"eq.{lead_id}"}, json=body
        )
        if not rows:
            raise SupabaseAPIError(404, f"leads record {lead_id} not found")
        return rows[0]

    async def delete_lead(self, lead_id: str) -> Dict[str, Any]:
        """Delete a lead."""
        rows = await self._request("DELETE", "/leads", params={"id": f"eq.{lead_id}"})
        if not rows:
            raise SupabaseAPIError(404, f"leads record {lead_id} not found")
        return {"id": lead_id, "status": "deleted"}

    # --- Lead comments & documents ---

    async def list_comments(self, lead_id: str) -> List[Dict[str, Any]]:
        """Return comments attached to a lead, newest first."""
        params = {
            "select": "*",
            "lead_id": f"eq.{lead_id}",
            "order": "created_at.desc",
        }
        return await self._request("GET", "/lead_comments", params=params)

    async def add_comment(self, lead_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Append a comment to a lead."""
        return await self._insert("lead_comments", {**payload, "lead_id": lead_id})

    async def list_documents(self, lead_id: str) -> List[Dict[str, Any]]:
        """Return document metadata attached to a lead, newest first."""
        params = {
            "select": "*",
            "lead_id": f"eq.{lead_id}",
            "order": "created_at.desc",
        }
        return await self._request("GET", "/lead_documents", params=params)

    async def add_document(self, lead_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Record document metadata for a lead."""
        return await self._insert("lead_documents", {**payload, "lead_id": lead_id})

    # --- Trips ---

    async def create_trip(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a published trip package."""
        return await self._insert("trips", payload)

    async def get_trip(self, trip_id: str) -> Dict[str, Any]:
        """Retrieve a published trip package."""
        return await self._select_one("trips", trip_id)
