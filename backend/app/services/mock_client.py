"""Mock data store client providing local demo data."""

from __future__ import annotations

import asyncio
import copy
import random
import string
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger

from backend.app.config import Settings


def _random_id(prefix: Optional[str] = None, k: int = 6) -> str:
    token = "".join(random.choices(string.ascii_lowercase + string.digits, k=k))
    return f"{prefix}_{token}" if prefix else token


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _newest_first(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda row: row.get("created_at") or "", reverse=True)


class MockSupabaseClient:
    """In-memory mock client mimicking the hosted data store."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._leads: List[Dict[str, Any]] = [
            {
                "id": "lead_priya1",
                "name": "Priya Sharma",
                "email": "priya.sharma@example.com",
                "mobile": "9820012345",
                "destination_type": "Family Packages",
                "pickup": "Mumbai",
                "drop_location": "Mumbai",
                "travel_date_from": "2025-12-20",
                "travel_date_to": "2025-12-25",
                "no_of_adults": 2,
                "no_of_children": 2,
                "status": "new",
                "priority": "high",
                "assigned_to": None,
                "follow_up_date": None,
                "source": "website",
                "budget": "45000",
                "hotel_category": "Deluxe (4 Star)",
                "comments": "Looking for a Goa beach resort.",
                "created_at": "2025-11-03T09:15:00+00:00",
                "updated_at": "2025-11-03T09:15:00+00:00",
            },
            {
                "id": "lead_rahul2",
                "name": "Rahul Kumar",
                "email": "rahul.kumar@example.com",
                "mobile": "9811122233",
                "destination_type": "Honeymoon Packages",
                "pickup": "Delhi",
                "drop_location": "Delhi",
                "travel_date_from": "2026-01-10",
                "travel_date_to": "2026-01-16",
                "no_of_adults": 2,
                "no_of_children": 0,
                "status": "quoted",
                "priority": "medium",
                "assigned_to": "Anita",
                "follow_up_date": "2025-11-10",
                "source": "referral",
                "budget": "75000",
                "hotel_category": "Luxury (5 Star)",
                "comments": "Kerala backwaters and houseboat.",
                "created_at": "2025-11-01T12:40:00+00:00",
                "updated_at": "2025-11-02T08:00:00+00:00",
            },
            {
                "id": "lead_amit3",
                "name": "Amit Patel",
                "email": "amit.patel@example.com",
                "mobile": "9900011122",
                "destination_type": "Cultural Heritage",
                "pickup": "Ahmedabad",
                "drop_location": "Jaipur",
                "travel_date_from": "2025-12-01",
                "travel_date_to": "2025-12-07",
                "no_of_adults": 4,
                "no_of_children": 1,
                "status": "booked",
                "priority": "low",
                "assigned_to": "Vikram",
                "follow_up_date": None,
                "source": "whatsapp",
                "budget": "120000",
                "hotel_category": "Heritage Hotels",
                "comments": None,
                "created_at": "2025-10-28T16:05:00+00:00",
                "updated_at": "2025-10-30T10:30:00+00:00",
            },
        ]
        self._comments: List[Dict[str, Any]] = [
            {
                "id": "comment_seed1",
                "lead_id": "lead_rahul2",
                "user_name": "Anita",
                "comment": "Shared the houseboat quotation.",
                "created_at": "2025-11-02T08:00:00+00:00",
            }
        ]
        self._documents: List[Dict[str, Any]] = [
            {
                "id": "doc_seed1",
                "lead_id": "lead_amit3",
                "file_name": "booking-voucher.pdf",
                "file_url": "https://cdn.example.com/docs/booking-voucher.pdf",
                "file_type": "application/pdf",
                "created_at": "2025-10-30T10:30:00+00:00",
            }
        ]
        self._trips: Dict[str, Dict[str, Any]] = {}

    async def close(self) -> None:
        """Mock close to align with SupabaseClient interface."""
        await asyncio.sleep(0)

    def _find_lead(self, lead_id: str) -> Dict[str, Any]:
        for lead in self._leads:
            if lead["id"] == lead_id:
                return lead
        raise ValueError("Lead not found")

    # --- Leads ---

    async def list_leads(self) -> List[Dict[str, Any]]:
        """Return mock leads, newest first."""
        return copy.deepcopy(_newest_first(self._leads))

    async def get_lead(self, lead_id: str) -> Dict[str, Any]:
        """Retrieve mock lead."""
        return copy.deepcopy(self._find_lead(lead_id))

    async def create_lead(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create mock lead."""
        lead = payload.copy()
        lead["id"] = _random_id("lead")
        lead.setdefault("status", "new")
        lead.setdefault("priority", "medium")
        lead.setdefault("source", "website")
        lead["created_at"] = lead["updated_at"] = _now()
        self._leads.append(lead)
        logger.debug("Mock lead created: {lead}", lead=lead)
        return copy.deepcopy(lead)

    async def update_lead(self, lead_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Update mock lead."""
        lead = self._find_lead(lead_id)
        lead.update(payload)
        lead["updated_at"] = _now()
        return copy.deepcopy(lead)

    async def delete_lead(self, lead_id: str) -> Dict[str, Any]:
        """Delete mock lead together with its comments and documents."""
        lead = self._find_lead(lead_id)
        self._leads.remove(lead)
        self._comments = [c for c in self._comments if c["lead_id"] != lead_id]
        self._documents = [d for d in self._documents if d["lead_id"] != lead_id]
        return {"id": lead_id, "status": "deleted"}

    # --- Lead comments & documents ---

    async def list_comments(self, lead_id: str) -> List[Dict[str, Any]]:
        """Return mock comments for a lead."""
        rows = [c for c in self._comments if c["lead_id"] == lead_id]
        return copy.deepcopy(_newest_first(rows))

    async def add_comment(self, lead_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Append mock comment."""
        self._find_lead(lead_id)
        comment = {
            **payload,
            "id": _random_id("comment"),
            "lead_id": lead_id,
            "created_at": _now(),
        }
        self._comments.append(comment)
        return copy.deepcopy(comment)

    async def list_documents(self, lead_id: str) -> List[Dict[str, Any]]:
        """Return mock document metadata for a lead."""
        rows = [d for d in self._documents if d["lead_id"] == lead_id]
        return copy.deepcopy(_newest_first(rows))

    async def add_document(self, lead_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Record mock document metadata."""
        self._find_lead(lead_id)
        document = {
            **payload,
            "id": _random_id("doc"),
            "lead_id": lead_id,
            "created_at": _now(),
        }
        self._documents.append(document)
        return copy.deepcopy(document)

    # --- Trips ---

    async def create_trip(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Store a published trip under a short generated id."""
        trip_id = _random_id()
        while trip_id in self._trips:
            trip_id = _random_id()
        trip = {**copy.deepcopy(payload), "id": trip_id, "created_at": _now()}
        self._trips[trip_id] = trip
        logger.debug("Mock trip stored: {trip_id}", trip_id=trip_id)
        return copy.deepcopy(trip)

    async def get_trip(self, trip_id: str) -> Dict[str, Any]:
        """Retrieve a published mock trip."""
        trip = self._trips.get(trip_id)
        if trip is None:
            raise ValueError("Trip not found")
        return copy.deepcopy(trip)
