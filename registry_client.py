"""
Registry API client

Thin wrapper around the permit registry's REST API: create/update a business,
fetch its details for editing, and read lookup option lists.  Every response
comes in a {success, message, data} envelope which is unwrapped here.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from config import REGISTRY_API_TOKEN, REGISTRY_API_URL, REGISTRY_TIMEOUT

logger = logging.getLogger(__name__)


class RegistryAPIError(Exception):
    """Raised when the registry API call fails or answers success=false."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[str] = None,
                 server_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.server_message = server_message   # what the registry itself said, if anything


def _server_message(response: Optional[requests.Response]) -> Optional[str]:
    """Pull the envelope's `message` out of an error body, if there is one."""
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


class RegistryClient:

    def __init__(self, base_url: str = REGISTRY_API_URL, token: str = REGISTRY_API_TOKEN,
                 timeout: float = REGISTRY_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(
                method,
                url,
                headers=self._get_headers(),
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            failed = getattr(e, "response", None)
            server_message = _server_message(failed)
            logger.error(f"Registry call {method} {path} failed: {e}")
            raise RegistryAPIError(
                server_message or f"{method} {path} failed: {e}",
                status_code=getattr(failed, "status_code", None),
                response_body=getattr(failed, "text", None),
                server_message=server_message,
            )

        try:
            body = response.json()
        except ValueError:
            raise RegistryAPIError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
                response_body=response.text,
            )

        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                logger.error(f"Registry rejected {method} {path}: {body.get('message')}")
                raise RegistryAPIError(
                    body.get("message") or f"{method} {path} was rejected",
                    status_code=response.status_code,
                    response_body=response.text,
                    server_message=body.get("message") or None,
                )
            return body.get("data")
        return body

    # ── Business ────────────────────────────────────────────────────

    def create_business(self, payload: Dict[str, Any]) -> Any:
        return self._request("POST", "/Business", payload)

    def update_business(self, business_id: str, payload: Dict[str, Any]) -> Any:
        return self._request("PUT", f"/Business/{business_id}", payload)

    def get_business_details(self, business_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/Business/{business_id}/details")

    # ── Lookups ─────────────────────────────────────────────────────

    def get_lookup_options(self, lookup_type: str) -> List[Any]:
        """Option list for a dropdown (gender, civilstatus, nationality, ownershiptype)."""
        data = self._request("GET", f"/Lookup/{lookup_type}")
        return data if isinstance(data, list) else []


class AsyncRegistryClient:
    """Runs the blocking client in worker threads so the event loop stays free."""

    def __init__(self, client: Optional[RegistryClient] = None):
        self._client = client or RegistryClient()

    async def create_business(self, payload: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(self._client.create_business, payload)

    async def update_business(self, business_id: str, payload: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(self._client.update_business, business_id, payload)

    async def get_business_details(self, business_id: str) -> Dict[str, Any]:
        return await asyncio.to_thread(self._client.get_business_details, business_id)

    async def get_lookup_options(self, lookup_type: str) -> List[Any]:
        return await asyncio.to_thread(self._client.get_lookup_options, lookup_type)
