"""Pure helpers for searching, grouping and summarising leads."""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from backend.app.models.leads import LEAD_PRIORITIES, LEAD_STATUSES, PIPELINE_ORDER


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def matches_search(lead: Dict[str, Any], search_term: str) -> bool:
    """Case-insensitive match on name/email/destination, substring on mobile."""
    needle = search_term.lower()
    return (
        needle in _text(lead.get("name")).lower()
        or needle in _text(lead.get("email")).lower()
        or search_term in _text(lead.get("mobile"))
        or needle in _text(lead.get("destination_type")).lower()
    )


def filter_leads(
    leads: Iterable[Dict[str, Any]],
    search_term: Optional[str] = None,
    status_filter: Optional[str] = "all",
) -> List[Dict[str, Any]]:
    """Return the leads matching the search term and status filter.

    An empty search term and the ``all`` status disable their filter. The
    input order is preserved.
    """
    filtered = list(leads)
    if search_term:
        filtered = [lead for lead in filtered if matches_search(lead, search_term)]
    if status_filter and status_filter != "all":
        filtered = [lead for lead in filtered if lead.get("status") == status_filter]
    return filtered


def group_by_status(leads: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Build kanban columns in pipeline order."""
    columns: Dict[str, List[Dict[str, Any]]] = {status: [] for status in PIPELINE_ORDER}
    for lead in leads:
        status = lead.get("status") or "new"
        if status in columns:
            columns[status].append(lead)
    return [
        {"status": status, "count": len(items), "leads": items}
        for status, items in columns.items()
    ]


def summarize_leads(
    leads: Iterable[Dict[str, Any]], today: Optional[date] = None
) -> Dict[str, Any]:
    """Aggregate lead counts for the dashboard overview."""
    rows = list(leads)
    today = today or date.today()
    by_status = Counter(lead.get("status") or "new" for lead in rows)
    by_priority = Counter(lead.get("priority") or "medium" for lead in rows)

    follow_ups_due = 0
    for lead in rows:
        raw = lead.get("follow_up_date")
        if not raw or lead.get("status") in {"booked", "failed"}:
            continue
        try:
            due = date.fromisoformat(str(raw)[:10])
        except ValueError:
            continue
        if due <= today:
            follow_ups_due += 1

    total = len(rows)
    return {
        "total": total,
        "by_status": {status: by_status.get(status, 0) for status in LEAD_STATUSES},
        "by_priority": {p: by_priority.get(p, 0) for p in LEAD_PRIORITIES},
        "conversion_rate": round(by_status.get("booked", 0) / total, 4) if total else 0.0,
        "follow_ups_due": follow_ups_due,
    }
