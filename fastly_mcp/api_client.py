"""Fastly REST API client."""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from fastly_mcp.config import Settings
from fastly_mcp.errors import ApiError
from fastly_mcp.schemas import ApiResult

logger = structlog.get_logger()

_BODY_METHODS = ("POST", "PUT")


def _param_value(value: Any) -> str:
    """Coerce a query parameter value to its string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


class FastlyApiClient:
    """Async passthrough client for the Fastly API.

    The account key is attached to every outbound request as ``Fastly-Key``.
    Responses are returned as-is: 4xx and 5xx are data for the caller, only a
    failed exchange raises.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self._credential = settings.credential
        self.base_url = settings.fastly_api_base_url.rstrip("/") + "/"
        self._client = client or httpx.AsyncClient(timeout=settings.fastly_http_timeout)

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def build_url(self, path: str, params: dict[str, Any] | None = None) -> httpx.URL:
        """Resolve ``path`` against the base URL and append ``params`` in order."""
        relative = path[1:] if path.startswith("/") else path
        url = httpx.URL(self.base_url).join(relative)
        for key, value in (params or {}).items():
            url = url.copy_add_param(str(key), _param_value(value))
        return url

    def build_request(
        self,
        path: str,
        method: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Request:
        headers = {
            "Fastly-Key": self._credential.reveal(),
            "Accept": "application/json",
        }
        content = None
        if method.upper() in _BODY_METHODS and body is not None:
            headers["Content-Type"] = "application/json"
            content = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

        return self._client.build_request(
            method,
            self.build_url(path, params),
            headers=headers,
            content=content,
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(
        self,
        path: str,
        method: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> ApiResult:
        """Send one request to the Fastly API and normalize the response."""
        logger.info("fastly_api_request", method=method, path=path)
        try:
            request = self.build_request(path, method, body, params)
            logger.debug("fastly_api_sending", url=str(request.url))
            resp = await self._client.send(request)
            data = self._parse_body(resp)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("fastly_api_error", method=method, path=path, error=str(e))
            raise ApiError(str(e) or type(e).__name__) from e

        logger.info("fastly_api_response", method=method, path=path, status=resp.status_code)
        return ApiResult(
            status=resp.status_code,
            status_text=resp.reason_phrase,
            headers=dict(resp.headers.items()),
            data=data,
        )

    def _parse_body(self, resp: httpx.Response) -> Any:
        content_type = resp.headers.get("content-type", "")
        if "application/json" not in content_type:
            return resp.text
        try:
            return resp.json()
        except ValueError as e:
            logger.warning("fastly_api_invalid_json", status=resp.status_code, error=str(e))
            return resp.text

    async def aclose(self) -> None:
        await self._client.aclose()
