from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from gatewayforge.domain.models import EndpointDescriptor
from gatewayforge.emit.phases import (
    DEFAULT_REST_API,
    emit_integrations,
    emit_methods,
    emit_resources,
    find_method_collisions,
)
from gatewayforge.errors import GenerationError, IdentifierCollisionError
from gatewayforge.tree.builder import build_resource_tree, find_identifier_collisions

logger = logging.getLogger(__name__)

SECTION_HEADER = "# AWS API Gateway Resources\n\n"


@dataclass(frozen=True)
class GenerateResult:
    text: str
    resource_count: int
    method_count: int
    integration_count: int
    collisions: dict[str, list[str]]


def run_generate(
    endpoints: Sequence[EndpointDescriptor],
    rest_api_name: str = DEFAULT_REST_API,
    strict: bool = False,
) -> GenerateResult:
    """
    One generation: tree -> resources -> methods -> integrations.

    The emitted-name record lives only for the duration of this call, so
    repeated calls never suppress each other's resource blocks. Whatever goes
    wrong is raised as a single GenerationError; nothing partial is returned.
    """
    emitted: set[str] = set()

    try:
        endpoints = list(endpoints)
        tree = build_resource_tree(endpoints)

        collisions = find_identifier_collisions(tree)
        duplicates = find_method_collisions(endpoints)
        if strict and (collisions or duplicates):
            raise IdentifierCollisionError({**collisions, **duplicates})
        for name, keys in sorted(collisions.items()):
            logger.warning(
                "paths %s share resource name %r; only %s is emitted",
                ", ".join(keys),
                name,
                keys[0],
            )
        for name, eps in sorted(duplicates.items()):
            logger.warning("%s is written %d times (%s)", name, len(eps), ", ".join(eps))

        resources = emit_resources(tree, emitted, rest_api_name=rest_api_name)
        methods = emit_methods(endpoints, rest_api_name=rest_api_name)
        integrations = emit_integrations(endpoints, rest_api_name=rest_api_name)
    except Exception as e:
        raise GenerationError(str(e)) from e

    logger.debug(
        "generated %d resources, %d methods, %d integrations",
        len(emitted),
        len(endpoints),
        len(endpoints),
    )

    return GenerateResult(
        text=SECTION_HEADER + resources + methods + integrations,
        resource_count=len(emitted),
        method_count=len(endpoints),
        integration_count=len(endpoints),
        collisions=collisions,
    )


def generate_terraform(
    endpoints: Sequence[EndpointDescriptor],
    rest_api_name: str = DEFAULT_REST_API,
    strict: bool = False,
) -> str:
    return run_generate(endpoints, rest_api_name=rest_api_name, strict=strict).text


def generate_single(
    path: str,
    method: str,
    backend_target: str,
    requires_key: bool = False,
) -> str:
    """Shortcut for a gateway with exactly one endpoint."""
    try:
        ep = EndpointDescriptor(
            path=path,
            method=method,
            backend_target=backend_target,
            requires_key=requires_key,
        )
    except Exception as e:
        raise GenerationError(str(e)) from e
    return generate_terraform([ep])
