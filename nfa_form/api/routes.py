"""Route registration for the questionnaire state, preview and generation API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable

from fastapi import FastAPI
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict

from nfa_form.api.contracts import (
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
from nfa_form.api.errors import ApiError, ApiErrorCode
from nfa_form.controls.codec import from_record, to_record
from nfa_form.controls.model import Control, ControlSet
from nfa_form.core.config import AppConfig
from nfa_form.documents.generation_service import DocumentGenerationService
from nfa_form.mapping.engine import map_record_to_fields
from nfa_form.questionnaire.catalog import build_controls
from nfa_form.questionnaire.record import AnswerRecord
from nfa_form.questionnaire.validation import first_failure, validate_values
from nfa_form.state.token import encode, fragment_for, load_fragment


class RecordRequest(BaseModel):
    """Payload carrying one answer record."""

    model_config = ConfigDict(extra="forbid")

    record: AnswerRecord


class FragmentRequest(BaseModel):
    """Payload carrying a location fragment, with or without the leading ``#``."""

    model_config = ConfigDict(extra="forbid")

    fragment: str = ""


class ControlsRequest(BaseModel):
    """Payload carrying the live state of page controls."""

    model_config = ConfigDict(extra="forbid")

    controls: list[ControlState]


class ValidationRequest(BaseModel):
    """Payload carrying monitored field values keyed by question key."""

    model_config = ConfigDict(extra="forbid")

    values: dict[str, str]


@dataclass(frozen=True)
class QuestionnaireRouteDeps:
    """Dependencies required to mount questionnaire routes."""

    config: AppConfig
    generation_service: DocumentGenerationService
    today: Callable[[], date]
    on_shutdown: Callable[[], None]


def _find_control(controls: ControlSet, state: ControlState) -> Control | None:
    first = controls.first(state.name)
    if first is not None and first.is_toggle and controls.is_group(state.name):
        return controls.option(state.name, state.value)
    return first


def apply_control_states(controls: ControlSet, states: list[ControlState]) -> None:
    """Overlay submitted control states onto a catalog control set."""
    for state in states:
        control = _find_control(controls, state)
        if control is None or control.kind != state.kind:
            raise ApiError(
                status_code=422,
                error_code=ApiErrorCode.VALIDATION_ERROR,
                message="The submitted answers are not valid.",
                field=state.name,
            )
        if control.is_toggle:
            control.checked = state.checked
        else:
            control.value = state.value
        control.disabled = state.disabled


def control_states(controls: ControlSet) -> list[ControlState]:
    return [
        ControlState(
            name=control.name,
            kind=control.kind,
            value=control.value,
            checked=control.checked,
            disabled=control.disabled,
        )
        for control in controls
    ]


def register_questionnaire_routes(
    app: FastAPI, *, deps: QuestionnaireRouteDeps
) -> None:
    """Register health, state, preview and generation endpoints."""

    @app.on_event("shutdown")
    async def shutdown_generation_worker() -> None:
        deps.on_shutdown()

    @app.get(
        "/api/health",
        response_model=HealthResponse,
    )
    def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post(
        "/api/state/encode",
        response_model=StateTokenResponse,
        responses={422: {"model": ApiErrorResponse}},
    )
    def encode_state(payload: RecordRequest) -> StateTokenResponse:
        return StateTokenResponse(
            token=encode(payload.record), fragment=fragment_for(payload.record)
        )

    @app.post(
        "/api/state/decode",
        response_model=StateDecodeResponse,
    )
    def decode_state(payload: FragmentRequest) -> StateDecodeResponse:
        record = load_fragment(payload.fragment)
        return StateDecodeResponse(
            record=record.as_dict(), restored=not record.is_empty()
        )

    @app.post(
        "/api/controls/record",
        response_model=ControlsRecordResponse,
        responses={422: {"model": ApiErrorResponse}},
    )
    def record_from_controls(payload: ControlsRequest) -> ControlsRecordResponse:
        controls = build_controls()
        apply_control_states(controls, payload.controls)
        record = to_record(controls, today=deps.today())
        return ControlsRecordResponse(
            record=record.as_dict(), fragment=fragment_for(record)
        )

    @app.post(
        "/api/controls/restore",
        response_model=ControlsStateResponse,
        responses={422: {"model": ApiErrorResponse}},
    )
    def restore_controls(payload: RecordRequest) -> ControlsStateResponse:
        controls = build_controls()
        from_record(payload.record, controls, today=deps.today())
        return ControlsStateResponse(controls=control_states(controls))

    @app.post(
        "/api/validation",
        response_model=ValidationResponse,
    )
    def validate(payload: ValidationRequest) -> ValidationResponse:
        results = validate_values(payload.values, today=deps.today())
        failure = first_failure(results)
        return ValidationResponse(
            valid=failure is None,
            results=[
                FieldValidationResponse(
                    key=result.key, valid=result.valid, message=result.message
                )
                for result in results
            ],
            first_invalid=failure.key if failure else None,
        )

    @app.post(
        "/api/field-mapping",
        response_model=FieldMappingResponse,
        responses={422: {"model": ApiErrorResponse}},
    )
    def field_mapping(payload: RecordRequest) -> FieldMappingResponse:
        mapping = map_record_to_fields(payload.record, today=deps.today())
        return FieldMappingResponse(
            operations=[FieldOperationResponse(**row) for row in mapping.as_list()]
        )

    @app.post(
        "/api/documents/generate",
        response_class=Response,
        responses={
            200: {"content": {"application/pdf": {}}},
            422: {"model": ApiErrorResponse},
            503: {"model": ApiErrorResponse},
        },
    )
    async def generate_document(payload: RecordRequest) -> Response:
        document = await deps.generation_service.generate(payload.record)
        return Response(
            content=document.content,
            media_type=document.media_type,
            headers={
                "Content-Disposition": f'attachment; filename="{document.filename}"'
            },
        )
