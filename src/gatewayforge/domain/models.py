from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

HTTP_METHODS: tuple[str, ...] = get_args(HttpMethod)


class EndpointDescriptor(BaseModel):
    """One API route to expose through the gateway."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = Field(validation_alias=AliasChoices("path", "endpoint"))
    method: HttpMethod = "GET"
    backend_target: str = Field(
        validation_alias=AliasChoices("backend_target", "backendUri", "backend_uri")
    )
    requires_key: bool = Field(
        default=False,
        validation_alias=AliasChoices("requires_key", "apiKeyRequired", "api_key_required"),
    )

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v
