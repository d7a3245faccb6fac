"""Public API response contracts."""

from nfa_form.api.contracts.models import (
    ApiErrorResponse,
    ControlsRecordResponse,
    ControlsStateResponse,
    ControlState,
    FieldMappingResponse,
    FieldOperationResponse,
    FieldValidationResponse,
    HealthResponse,
    StateDecodeResponse,
    StateTokenResponse,
    ValidationResponse,
)

__all__ = [
    "ApiErrorResponse",
    "ControlsRecordResponse",
    "ControlsStateResponse",
    "ControlState",
    "FieldMappingResponse",
    "FieldOperationResponse",
    "FieldValidationResponse",
    "HealthResponse",
    "StateDecodeResponse",
    "StateTokenResponse",
    "ValidationResponse",
]
