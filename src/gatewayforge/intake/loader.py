from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping
from urllib.parse import urlparse

import pydantic

from gatewayforge.domain.models import HTTP_METHODS, EndpointDescriptor
from gatewayforge.errors import EndpointInputError

_PATH_KEYS = ("path", "endpoint")
_URI_KEYS = ("backend_target", "backendUri", "backend_uri")
_KEY_KEYS = ("requires_key", "apiKeyRequired", "api_key_required")

EXAMPLE_ENDPOINTS: tuple[dict[str, Any], ...] = (
    {
        "path": "/person/users/api/auth",
        "method": "POST",
        "backend_target": "https://personapi.api.com/person/users/api/auth",
        "requires_key": True,
    },
    {
        "path": "/person/users/api/profile",
        "method": "GET",
        "backend_target": "https://personapi.api.com/person/users/api/profile",
        "requires_key": True,
    },
    {
        "path": "/person/users/api/profile",
        "method": "PUT",
        "backend_target": "https://personapi.api.com/person/users/api/profile",
        "requires_key": True,
    },
    {
        "path": "/orders/api/create",
        "method": "POST",
        "backend_target": "https://orderapi.api.com/orders/api/create",
        "requires_key": False,
    },
    {
        "path": "/orders/api/status",
        "method": "GET",
        "backend_target": "https://orderapi.api.com/orders/api/status",
        "requires_key": False,
    },
)


def _first(row: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for k in keys:
        if k in row and row[k] is not None:
            return row[k]
    return None


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _is_absolute_uri(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


def parse_endpoint_rows(rows: Iterable[Mapping[str, Any]]) -> list[EndpointDescriptor]:
    """
    Turn loosely filled rows into validated descriptors.

    Rows missing either the path or the backend URI are dropped silently,
    so half-filled rows never block the complete ones. Accepts both snake_case keys
    and endpoint/backendUri/apiKeyRequired.
    """
    kept: list[Mapping[str, Any]] = []
    for row in rows:
        if not isinstance(row, Mapping):
            raise EndpointInputError(f"Endpoint rows must be objects, got {type(row).__name__}")
        if _text(_first(row, _PATH_KEYS)) and _text(_first(row, _URI_KEYS)):
            kept.append(row)

    if not kept:
        raise EndpointInputError(
            "Please add at least one valid endpoint with both endpoint path and backend URI"
        )

    out: list[EndpointDescriptor] = []
    for n, row in enumerate(kept, start=1):
        path = _text(_first(row, _PATH_KEYS))
        uri = _text(_first(row, _URI_KEYS))
        method = _text(row.get("method")).upper() or "GET"

        if not _is_absolute_uri(uri):
            raise EndpointInputError(
                f"Endpoint {n}: Please enter a valid backend URI "
                "(e.g., https://api.example.com/path)"
            )
        if method not in HTTP_METHODS:
            raise EndpointInputError(
                f"Endpoint {n}: Unsupported HTTP method {method!r} "
                f"(expected one of {', '.join(HTTP_METHODS)})"
            )

        try:
            out.append(
                EndpointDescriptor(
                    path=path,
                    method=method,
                    backend_target=uri,
                    requires_key=_first(row, _KEY_KEYS) or False,
                )
            )
        except pydantic.ValidationError as e:
            raise EndpointInputError(f"Endpoint {n}: {e}") from e

    return out


def load_endpoints(path: Path) -> list[EndpointDescriptor]:
    """Read endpoint rows from a JSON file: a list, or {"endpoints": [...]}."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise EndpointInputError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise EndpointInputError(f"{path} is not valid JSON: {e}") from e

    if isinstance(payload, dict):
        payload = payload.get("endpoints")
    if not isinstance(payload, list):
        raise EndpointInputError(f"{path} must hold a list of endpoints")

    return parse_endpoint_rows(payload)


def apply_requires_key(
    endpoints: Iterable[EndpointDescriptor], value: bool
) -> list[EndpointDescriptor]:
    return [ep.model_copy(update={"requires_key": value}) for ep in endpoints]
