"""Pydantic API response models used in OpenAPI contracts."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from nfa_form.controls.model import ControlKind


class ApiErrorResponse(BaseModel):
    """Stable error envelope for API responses."""

    error_code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    field: str | None = Field(
        default=None, description="Question key of the first failing field"
    )


class HealthResponse(BaseModel):
    """Health check response payload."""

    status: Literal["ok"]


class ControlState(BaseModel):
    """Live state of one page control (one option for radio/checkbox groups)."""

    model_config = ConfigDict(extra="forbid")

    name: str
    kind: ControlKind
    value: str = ""
    checked: bool = False
    disabled: bool = False


class StateTokenResponse(BaseModel):
    """Encoded state token and the fragment to store in the location."""

    token: str
    fragment: str


class StateDecodeResponse(BaseModel):
    """Record restored from a fragment; ``restored`` is false when it was unusable."""

    record: dict[str, Any]
    restored: bool


class ControlsRecordResponse(BaseModel):
    """Record serialized from page controls."""

    record: dict[str, Any]
    fragment: str


class ControlsStateResponse(BaseModel):
    """Page controls derived from a record."""

    controls: list[ControlState]


class FieldValidationResponse(BaseModel):
    key: str
    valid: bool
    message: str = ""


class ValidationResponse(BaseModel):
    """Outcome of every monitored validation rule."""

    valid: bool
    results: list[FieldValidationResponse]
    first_invalid: str | None = None


class FieldOperationResponse(BaseModel):
    field_name: str
    operation: Literal["set_text", "set_choice", "select"]
    value: str | None = None


class FieldMappingResponse(BaseModel):
    """Template field operations a generation pass would apply."""

    operations: list[FieldOperationResponse]
