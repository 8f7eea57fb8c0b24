from __future__ import annotations

import re
from typing import Sequence

from gatewayforge.errors import ValidationError

ROOT_PATH = "/"

_UNSAFE = re.compile(r"[^a-z0-9_]")


def segment_path(path: str) -> list[str]:
    """
    Split a raw endpoint path into its non-empty segments.

      "/person/users/"  -> ["person", "users"]
      "a//b"            -> ["a", "b"]
      "///"             -> ValidationError
    """
    if not isinstance(path, str):
        raise ValidationError("Endpoint must be a non-empty string")

    segments = [s for s in path.strip("/").split("/") if s]
    if not segments:
        raise ValidationError("Endpoint must contain at least one path segment")
    return segments


def path_key(segments: Sequence[str]) -> str:
    # "/" is reserved for the root sentinel
    return ROOT_PATH + "/".join(segments)


def resource_name(segments: Sequence[str]) -> str:
    """
    Terraform-safe identifier for a path prefix.

    Distinct paths can share a name (/a/b and /a_b both give a_b); see
    tree.builder.find_identifier_collisions.
    """
    return _UNSAFE.sub("_", "_".join(segments).lower())
