"""Synchronous client for the back-office FastAPI backend."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

import httpx

DEFAULT_BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")


class BackendError(Exception):
    """Backend answered with an error status; carries its ``detail``."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        message = detail.get("message") if isinstance(detail, dict) else detail
        super().__init__(f"{status_code}: {message}")


class BackendClient:
    """Thin wrapper issuing one short-lived httpx request per call."""

    def __init__(self, base_url: str = DEFAULT_BACKEND_URL):
        self.base_url = base_url.rstrip("/")

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform HTTP request to backend and parse JSON response."""
        url = f"{self.base_url}{path}"
        with httpx.Client(timeout=httpx.Timeout(10.0, read=30.0)) as client:
            response = client.request(method, url, params=params, json=json)
            if response.is_error:
                try:
                    body = response.json()
                except ValueError:
                    body = None
                detail = body.get("detail", response.text) if isinstance(body, dict) else response.text
                raise BackendError(response.status_code, detail)
            if not response.content:
                return {}
            return response.json()

    def get(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, *, json: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, *, json: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, *, json: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("DELETE", path, params=params)
