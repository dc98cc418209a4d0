"""Pydantic bases for booking API payloads: unknown fields are an error."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Response DTO base."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class StrictRequestModel(StrictModel):
    """Request DTO base; a client-supplied ``amount`` or any other stray field is rejected."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, str_strip_whitespace=True)
