"""
Notes API: HTTP Client Wrapper
===============================

What:  Async client for the Notes REST API, used by the list view and form.
How:   Thin layer over httpx.AsyncClient. Successful calls return the decoded
       envelope; failures raise ApiClientError carrying status, message and
       field errors.

Error messages:
    422 → all field messages joined with ", "
    other HTTP errors → the envelope's `message`, else "HTTP <status>"
    transport failures → the httpx error text
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8082/api"


class ApiClientError(Exception):
    """A request to the Notes API failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[Dict[str, List[str]]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}
        super().__init__(message)

    @property
    def is_validation_error(self) -> bool:
        return self.status_code == 422


class NotesClient:
    """
    Async wrapper for the notes endpoints.

    Usage:
        async with NotesClient("http://localhost:8082/api") as client:
            envelope = await client.list_notes(q="laravel", page=2)

    Args:
        base_url:  API root including the prefix
        transport: Optional httpx transport (e.g. ASGITransport in tests)
        timeout:   Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    async def __aenter__(self) -> "NotesClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Endpoints ─────────────────────────────────────────────────────────

    async def list_notes(self, q: str = "", page: int = 1) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if q:
            params["q"] = q
        if page > 1:
            params["page"] = page
        return await self._request("GET", "/notes", params=params)

    async def get_note(self, note_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/notes/{note_id}")

    async def create_note(self, title: str, content: Optional[str] = None) -> Dict[str, Any]:
        return await self._request("POST", "/notes", json={"title": title, "content": content})

    async def update_note(
        self, note_id: int, title: str, content: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self._request(
            "PUT", f"/notes/{note_id}", json={"title": title, "content": content}
        )

    async def delete_note(self, note_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/notes/{note_id}")

    async def check_health(self) -> Dict[str, Any]:
        return await self._request("GET", "/health")

    # ── Internals ─────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        logger.debug("Making %s request to: %s", method, path)
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("API request %s %s failed: %s", method, path, str(e))
            raise ApiClientError(str(e) or type(e).__name__) from e

        if response.is_error:
            error = _error_from_response(response)
            logger.error("API error %d on %s %s: %s", response.status_code, method, path, error.message)
            raise error
        return response.json()


def _error_from_response(response: httpx.Response) -> ApiClientError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    errors = body.get("errors") or {}
    if response.status_code == 422 and errors:
        message = ", ".join(msg for messages in errors.values() for msg in messages)
    else:
        message = body.get("message") or f"HTTP {response.status_code}"
    return ApiClientError(message, status_code=response.status_code, errors=errors)
