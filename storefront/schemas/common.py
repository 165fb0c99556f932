"""Common schemas and field types shared by requests, responses and caches."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from annotated_types import Ge
from pydantic import BaseModel, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Non-negative amount in euros; serialised as a JSON number.
Money = Annotated[
    Decimal,
    Ge(0),
    PlainSerializer(float, return_type=float, when_used="json"),
]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_json_dict(self) -> dict[str, Any]:
        """Dump as the camelCase JSON-compatible dict used on the wire and in caches."""
        return self.model_dump(mode="json", by_alias=True)


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = Field(default=False)
    error: str = Field(description="Error message")
    error_type: str = Field(description="Error type/class name")
    detail: dict[str, Any] | None = Field(default=None, description="Additional error details")

    model_config = {"extra": "forbid"}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Health status (ok, degraded)")
    version: str = Field(description="Service version")
    environment: str = Field(description="Environment name")
    timestamp: datetime = Field(default_factory=utc_now, description="Server time")
    checks: dict[str, bool] = Field(default_factory=dict, description="Individual health checks")

    model_config = {"extra": "forbid"}
