from __future__ import annotations

from typing import Sequence

RESOURCE = "aws_api_gateway_resource"
METHOD = "aws_api_gateway_method"
INTEGRATION = "aws_api_gateway_integration"
REST_API = "aws_api_gateway_rest_api"

Attr = tuple[str, str]


def quote(value: str) -> str:
    # values are written verbatim; no escaping
    return f'"{value}"'


def ref(kind: str, name: str, attr: str | None = None) -> str:
    return f"{kind}.{name}.{attr}" if attr else f"{kind}.{name}"


def depends_on(*targets: str) -> str:
    return "[" + ", ".join(targets) + "]"


def render_block(kind: str, name: str, groups: Sequence[Sequence[Attr]]) -> str:
    """
    Render one `resource "<kind>" "<name>" { ... }` block followed by a blank line.

    Each group is a run of attributes with their `=` aligned the way
    `terraform fmt` aligns them; groups are separated by an empty line.
    """
    lines = [f'resource "{kind}" "{name}" {{']

    for gi, group in enumerate(groups):
        if gi:
            lines.append("")
        width = max(len(k) for k, _ in group)
        for key, value in group:
            lines.append(f"  {key.ljust(width)} = {value}")

    lines.append("}")
    return "\n".join(lines) + "\n\n"
