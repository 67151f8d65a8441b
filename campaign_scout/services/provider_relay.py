from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from campaign_scout.core.config import Settings
from campaign_scout.core.exceptions import (
    ProviderError,
    ProviderNotConfiguredError,
    RateLimitError,
)
from campaign_scout.core.resilience import call_with_retries

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = "API key not configured or invalid"
MAX_ERROR_BODY_CHARS = 300


def is_error_payload(payload: Any) -> bool:
    return not isinstance(payload, dict) or bool(payload.get("error"))


def is_not_configured(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("error") == NOT_CONFIGURED_ERROR


class ProviderRelay:
    """
    Thin forwarding client for a third-party music data API.

    ``fetch_json`` raises the ``APIError`` family; ``call`` never raises and
    returns the provider JSON verbatim, or an ``{"error", "status", "details"}``
    payload once retries are exhausted.
    """

    PROVIDER = "Provider"

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def base_url(self) -> str:
        raise NotImplementedError

    @property
    def api_key(self) -> str | None:
        raise NotImplementedError

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "apikey": self.api_key or ""}

    async def _get(self, path: str, params: dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.settings.PROVIDER_TIMEOUT_SECONDS) as client:
            response = await client.get(
                f"{self.base_url.rstrip('/')}/{path.lstrip('/')}",
                params=params,
                headers=self._headers(),
            )
            response.raise_for_status()
            return response

    async def fetch_json(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """GET ``path`` with retries; non-object JSON is wrapped as ``{"data": ...}``."""
        if not self.is_configured():
            raise ProviderNotConfiguredError(self.PROVIDER)

        query = dict(params or {})
        try:
            response = await call_with_retries(
                lambda: self._get(path, query),
                retries=self.settings.PROVIDER_MAX_RETRIES,
                delay=self.settings.PROVIDER_RETRY_DELAY_SECONDS,
            )
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("%s API returned status %s for '%s'", self.PROVIDER, status, path)
            if status == 429:
                raise RateLimitError(self.PROVIDER, _retry_after(exc.response)) from exc
            raise ProviderError(
                f"{self.PROVIDER} API responded with status {status}",
                status_code=status,
                provider=self.PROVIDER,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("%s request failed for '%s': %s", self.PROVIDER, path, exc)
            raise ProviderError(f"Error calling {self.PROVIDER} API", provider=self.PROVIDER) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("%s API returned invalid JSON for '%s'", self.PROVIDER, path)
            raise ProviderError(
                "Invalid response format",
                status_code=response.status_code,
                provider=self.PROVIDER,
            ) from exc

        if not isinstance(payload, dict):
            return {"data": payload}
        return payload

    async def call(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """Forward a GET to the provider and return its JSON or an error payload."""
        try:
            return await self.fetch_json(path, params)
        except ProviderNotConfiguredError:
            return _error_payload(NOT_CONFIGURED_ERROR, details=f"Please configure a valid {self.PROVIDER} API key")
        except ProviderError as exc:
            return _error_payload(str(exc), status=exc.status_code, details=_error_details(exc))


def _error_payload(message: str, status: int | None = None, details: str = "") -> dict[str, Any]:
    return {"error": message, "status": status, "details": details}


def _error_details(exc: ProviderError) -> str:
    cause = exc.__cause__
    if isinstance(cause, httpx.HTTPStatusError):
        return cause.response.text[:MAX_ERROR_BODY_CHARS]
    if isinstance(cause, json.JSONDecodeError):
        return cause.doc[:MAX_ERROR_BODY_CHARS]
    if isinstance(cause, UnicodeDecodeError):
        return cause.object.decode("utf-8", errors="replace")[:MAX_ERROR_BODY_CHARS]
    if cause is not None:
        return str(cause) or type(cause).__name__
    return ""


def _retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("Retry-After")
    return int(value) if value and value.isdigit() else None
