"""Thin synchronous HTTP client for the payment gateway.

One `httpx.Client` is shared across initiation and every poll round. Responses
are read fully by httpx before they are returned, so no body outlives a call.
"""

from typing import Any
from urllib.parse import quote

import httpx

from momocollect.common.config import Settings
from momocollect.common.errors import ParseError, TransportError
from momocollect.common.logging import logger


COLLECT_PATH = "/api/collect/"
STATUS_PATH = "/api/transaction/{reference}/"


class GatewayClient:
    """Owns base URL, token auth headers and the pooled connection."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Token {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.BaseTransport | None = None) -> "GatewayClient":
        return cls(
            base_url=settings.base_url,
            api_key=settings.api_key,
            timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
        )

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def post_json(self, path: str, payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        """POST a JSON payload and return (status_code, decoded body)."""

        try:
            response = self._client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise TransportError(f"request to {path} failed: {exc}") from exc
        return response.status_code, self._decode(response)

    def get_json(self, path: str) -> tuple[int, dict[str, Any]]:
        """GET a resource and return (status_code, decoded body)."""

        try:
            response = self._client.get(path)
        except httpx.HTTPError as exc:
            raise TransportError(f"request to {path} failed: {exc}") from exc
        return response.status_code, self._decode(response)

    def collect(self, payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        return self.post_json(COLLECT_PATH, payload)

    def transaction_status(self, reference: str) -> tuple[int, dict[str, Any]]:
        return self.get_json(STATUS_PATH.format(reference=quote(reference, safe="")))

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            logger.debug("undecodable gateway body status=%s body=%r", response.status_code, response.text[:200])
            raise ParseError(f"gateway returned a non-JSON body (HTTP {response.status_code})") from exc
        if not isinstance(data, dict):
            raise ParseError(f"gateway returned a JSON {type(data).__name__}, expected an object")
        return data
