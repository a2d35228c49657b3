"""HTTP client for the Loops.so REST API"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from loops_panel.exceptions import ExternalApiError

logger = logging.getLogger(__name__)


class LoopsClient:
    """Authenticated calls against the Loops.so API.

    Every non-2xx response and every transport failure is raised as
    ExternalApiError. Nothing is retried here; callers decide what a failure
    means for them.
    """

    def __init__(
        self,
        base_url: str = "https://app.loops.so/api/v1",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def call(
        self,
        endpoint: str,
        api_key: str,
        payload: Optional[Dict[str, Any]] = None,
        method: str = "POST",
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

        try:
            response = await self._client.request(
                method,
                url,
                headers=headers,
                json=(payload or {}) if method == "POST" else None,
            )
        except httpx.HTTPError as e:
            logger.error(f"Error calling Loops.so API ({endpoint}): {e}")
            raise ExternalApiError(None, endpoint, str(e) or type(e).__name__) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            return body if body is not None else {}

        message = self._error_message(response, body)
        logger.error(f"Loops.so API error {response.status_code} ({endpoint}): {message}")
        raise ExternalApiError(
            response.status_code,
            endpoint,
            f"Loops.so API Error {response.status_code} ({url}): {message}",
        )

    @staticmethod
    def _error_message(response: httpx.Response, body: Any) -> str:
        """Upstream message if the body carries one, else the status text"""
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        if body:
            return response.text
        return response.reason_phrase or "Unknown error from Loops.so"

    async def create_contact(self, api_key: str, email: str) -> Any:
        return await self.call("/contacts/create", api_key, {"email": email})

    async def find_contact(self, api_key: str, email: str) -> Any:
        return await self.call(f"/contacts/find?email={quote(email)}", api_key, method="GET")

    async def delete_contact(self, api_key: str, email: str) -> Any:
        return await self.call("/contacts/delete", api_key, {"email": email})

    async def send_transactional(self, api_key: str, payload: Dict[str, Any]) -> Any:
        return await self.call("/transactional/send", api_key, payload)

    async def test_api_key(self, api_key: str) -> Any:
        return await self.call("/api-key", api_key, method="GET")

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def close(self):
        await self._client.aclose()
