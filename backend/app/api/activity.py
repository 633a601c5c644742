"""Helpers to record request/response activity."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def record_activity(
    log: List[Dict[str, Any]],
    *,
    action: str,
    method: str,
    endpoint: str,
    payload: Optional[Any] = None,
    response: Optional[Any] = None,
    status: str = "success",
    source: str = "data-store",
) -> None:
    """Append a structured entry to the in-memory activity log.

    ``source`` tells data store round-trips apart from purely local wizard
    events (``"wizard"``).
    """
    log.append(
        {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "method": method,
            "endpoint": endpoint,
            "payload": payload,
            "response": response,
            "status": status,
            "source": source,
        }
    )


def error_response(exc: Exception) -> Dict[str, Any]:
    """Shape an exception for the activity log."""
    status_code = getattr(exc, "status_code", None)
    if status_code is not None:
        return {"status_code": status_code, "payload": getattr(exc, "payload", None)}
    return {"error": str(exc)}
