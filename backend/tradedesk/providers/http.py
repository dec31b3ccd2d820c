from __future__ import annotations

import http.client
import json
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from tradedesk.config.settings import settings
from tradedesk.errors import (
    MalformedPayloadError,
    ProviderError,
    ProviderHTTPError,
    RateLimitedError,
)


_RELAY_PATH = "/get"


def build_url(base_url: str, path: str, params: dict[str, str] | None = None) -> str:
    url = f"{base_url.rstrip('/')}{path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return url


def get_json(url: str, provider: str) -> Any:
    request = Request(url, headers={"Accept": "application/json"})
    timeout = settings.providers.request_timeout_seconds
    try:
        with urlopen(request, timeout=timeout) as response:
            body = response.read().decode("utf-8")
    except HTTPError as exc:
        if exc.code == 429:
            raise RateLimitedError(provider, "rate limited") from exc
        raise ProviderHTTPError(provider, exc.code) from exc
    except (URLError, OSError, http.client.HTTPException) as exc:
        raise ProviderError(provider, f"network error: {exc}") from exc

    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(provider, "response is not JSON") from exc


def get_json_via_relay(target_url: str, provider: str) -> Any:
    """Fetch ``target_url`` through the CORS relay.

    The relay answers ``{"contents": "<body as string>", "status": {...}}``,
    so the body needs a second JSON parse.
    """
    relay_url = (
        f"{settings.providers.relay_base_url.rstrip('/')}{_RELAY_PATH}"
        f"?url={quote(target_url, safe='')}"
    )
    wrapper = get_json(relay_url, provider)
    if not isinstance(wrapper, dict) or not isinstance(wrapper.get("contents"), str):
        raise MalformedPayloadError(provider, "relay response has no contents")

    status = wrapper.get("status")
    if isinstance(status, dict) and status.get("http_code") == 429:
        raise RateLimitedError(provider, "rate limited behind relay")

    try:
        return json.loads(wrapper["contents"])
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(provider, "relay contents are not JSON") from exc


def to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
