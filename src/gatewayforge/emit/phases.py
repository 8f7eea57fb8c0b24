from __future__ import annotations

import logging
from typing import Iterable, Sequence

from gatewayforge.domain.models import EndpointDescriptor
from gatewayforge.emit.hcl import (
    INTEGRATION,
    METHOD,
    RESOURCE,
    REST_API,
    depends_on,
    quote,
    ref,
    render_block,
)
from gatewayforge.paths.normalize import resource_name, segment_path
from gatewayforge.tree.model import ResourceTree

logger = logging.getLogger(__name__)

DEFAULT_REST_API = "this"


def method_name(ep: EndpointDescriptor) -> str:
    return f"{resource_name(segment_path(ep.path))}_{ep.method.lower()}"


def integration_name(ep: EndpointDescriptor) -> str:
    return f"{method_name(ep)}_integration"


def emit_resources(
    tree: ResourceTree,
    emitted: set[str],
    rest_api_name: str = DEFAULT_REST_API,
) -> str:
    """
    Phase 1: one aws_api_gateway_resource per tree node, parents first.

    `emitted` is the caller's per-generation record; names already in it are
    skipped and every name written here is added to it.
    """
    rest_api_id = ref(REST_API, rest_api_name, "id")
    out: list[str] = []

    for _, node in tree.depth_ordered():
        if node.identifier in emitted:
            continue

        parent = tree.parent_of(node)
        if parent is None:
            attrs = [
                ("rest_api_id", rest_api_id),
                ("parent_id", ref(REST_API, rest_api_name, "root_resource_id")),
                ("path_part", quote(node.last_segment)),
            ]
        else:
            attrs = [
                ("rest_api_id", rest_api_id),
                ("parent_id", ref(RESOURCE, parent.identifier, "id")),
                ("path_part", quote(node.last_segment)),
                ("depends_on", depends_on(ref(RESOURCE, parent.identifier))),
            ]

        out.append(render_block(RESOURCE, node.identifier, [attrs]))
        emitted.add(node.identifier)

    logger.debug("resource phase: %d blocks", len(out))
    return "".join(out)


def emit_methods(
    endpoints: Sequence[EndpointDescriptor],
    rest_api_name: str = DEFAULT_REST_API,
) -> str:
    """Phase 2: one aws_api_gateway_method per endpoint (never de-duplicated)."""
    out: list[str] = []
    for ep in endpoints:
        resource = resource_name(segment_path(ep.path))
        attrs = [
            ("rest_api_id", ref(REST_API, rest_api_name, "id")),
            ("resource_id", ref(RESOURCE, resource, "id")),
            ("http_method", quote(ep.method.upper())),
            ("authorization", quote("NONE")),
            ("api_key_required", "true" if ep.requires_key else "false"),
            ("depends_on", depends_on(ref(RESOURCE, resource))),
        ]
        out.append(render_block(METHOD, method_name(ep), [attrs]))
    return "".join(out)


def emit_integrations(
    endpoints: Iterable[EndpointDescriptor],
    rest_api_name: str = DEFAULT_REST_API,
) -> str:
    """Phase 3: one HTTP_PROXY aws_api_gateway_integration per endpoint."""
    out: list[str] = []
    for ep in endpoints:
        resource = resource_name(segment_path(ep.path))
        method = method_name(ep)
        target = [
            ("rest_api_id", ref(REST_API, rest_api_name, "id")),
            ("resource_id", ref(RESOURCE, resource, "id")),
            ("http_method", ref(METHOD, method, "http_method")),
        ]
        backend = [
            ("integration_http_method", quote(ep.method.upper())),
            ("type", quote("HTTP_PROXY")),
            ("uri", quote(ep.backend_target)),
            ("depends_on", depends_on(ref(METHOD, method))),
        ]
        out.append(render_block(INTEGRATION, integration_name(ep), [target, backend]))
    return "".join(out)


def find_method_collisions(endpoints: Iterable[EndpointDescriptor]) -> dict[str, list[str]]:
    """Method block names written more than once, e.g. x_get <- GET /x, GET /x."""
    by_name: dict[str, list[str]] = {}
    for ep in endpoints:
        by_name.setdefault(method_name(ep), []).append(f"{ep.method} {ep.path}")
    return {name: eps for name, eps in by_name.items() if len(eps) > 1}
