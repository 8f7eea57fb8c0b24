from __future__ import annotations


class GatewayForgeError(Exception):
    """Base class for everything gatewayforge raises on purpose."""


class ValidationError(GatewayForgeError, ValueError):
    """A path could not be normalized into at least one segment."""


class IdentifierCollisionError(GatewayForgeError):
    """Two different paths normalize to the same resource name (strict mode only)."""

    def __init__(self, collisions: dict[str, list[str]]):
        self.collisions = collisions
        details = "; ".join(
            f"{name} <- {', '.join(paths)}" for name, paths in sorted(collisions.items())
        )
        super().__init__(f"Resource name collision: {details}")


class GenerationError(GatewayForgeError):
    """
    Single error surfaced by a failed generation call.

    The original exception is kept as __cause__ and its text as original_message.
    """

    PREFIX = "Failed to generate Terraform configuration"

    def __init__(self, original_message: str):
        self.original_message = original_message
        super().__init__(f"{self.PREFIX}: {original_message}")


class EndpointInputError(GatewayForgeError, ValueError):
    """Endpoint rows supplied by a user were missing fields or malformed."""
