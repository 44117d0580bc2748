"""
HTTP client for server-delivered form specs.
"""

from typing import Any, Optional

import httpx

from payform.errors import PayFormError

DEFAULT_BASE_URL = "https://api.stripe.com"
DEFAULT_FORM_SPECS_PATH = "/v1/elements/sessions"


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "payform/0.1.0", "Accept": "application/json"},
            timeout=30.0,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        if self._token:
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    @staticmethod
    def _unwrap(json_data: Any) -> Any:
        """Form specs arrive either bare or under a `payment_method_specs` key."""
        if isinstance(json_data, dict) and "payment_method_specs" in json_data:
            return json_data["payment_method_specs"]
        return json_data

    async def get(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        try:
            resp = await self._client.get(path, params=params, headers=self._auth_headers())
        except httpx.HTTPError as e:
            raise PayFormError("http_error", f"Request to {path} failed: {e}") from e
        if resp.status_code >= 400:
            raise PayFormError("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}")
        try:
            return resp.json()
        except ValueError as e:
            raise PayFormError("http_error", f"Response from {path} is not JSON: {resp.text[:200]}") from e

    async def get_form_specs(self, path: str = DEFAULT_FORM_SPECS_PATH) -> list[dict[str, Any]]:
        data = self._unwrap(await self.get(path))
        if not isinstance(data, list):
            raise PayFormError("http_error", f"Expected a list of form specs from {path}")
        return data

    async def close(self) -> None:
        await self._client.aclose()
