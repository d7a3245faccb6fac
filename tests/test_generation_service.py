from __future__ import annotations

import asyncio
import threading
import time
from pathlib import Path

import pytest

from nfa_form.core.config import AppConfig, LoggingConfig, SecurityConfig, TemplateConfig
from nfa_form.documents.generation_service import (
    DocumentGenerationService,
    RecordValidationError,
    build_generation_service,
)
from nfa_form.mapping import fields
from nfa_form.mapping.operations import FieldMapping, SetText
from nfa_form.pdf.filler import FillIssue, FillResult
from nfa_form.pdf.template import TemplateLoadError
from nfa_form.questionnaire.record import AnswerRecord
from tests.mock_answers import TODAY, mock_record


class _DummyTemplateSource:
    location = "memory://template.pdf"

    def __init__(self, fail: bool = False) -> None:
        self.loads = 0
        self._fail = fail

    def load(self) -> bytes:
        self.loads += 1
        if self._fail:
            raise TemplateLoadError("template missing")
        return b"%PDF-template"


class _DummyFiller:
    def __init__(self, delay: float = 0.0) -> None:
        self.mappings: list[FieldMapping] = []
        self._delay = delay
        self._active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def fill(self, template_bytes: bytes, mapping: FieldMapping) -> FillResult:
        with self._lock:
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        time.sleep(self._delay)
        with self._lock:
            self._active -= 1
        self.mappings.append(mapping)
        return FillResult(
            content=template_bytes + b"-filled",
            filled_fields=list(mapping),
            issues=[FillIssue("missing", "field_not_found")],
        )


def _service(
    source: _DummyTemplateSource | None = None, filler: _DummyFiller | None = None
) -> DocumentGenerationService:
    return DocumentGenerationService(
        template_source=source or _DummyTemplateSource(),
        filler=filler or _DummyFiller(),
        output_filename="5320.23.pdf",
        today=lambda: TODAY,
    )


def test_generation_service_maps_record_and_returns_document() -> None:
    filler = _DummyFiller()
    service = _service(filler=filler)

    document = service.generate_sync(AnswerRecord(q2_fullName="jane"))
    service.shutdown()

    assert document.content == b"%PDF-template-filled"
    assert document.filename == "5320.23.pdf"
    assert document.media_type == "application/pdf"
    assert document.issues == [FillIssue("missing", "field_not_found")]
    assert filler.mappings[0].get(fields.CERTIFICATION_DATE_FIELD) == SetText("03/05/2024")


def test_generation_service_blocks_invalid_record_before_loading_template() -> None:
    source = _DummyTemplateSource()
    service = _service(source=source)

    with pytest.raises(RecordValidationError) as exc_info:
        service.generate_sync(mock_record(q3c_email="not-an-email"))
    service.shutdown()

    assert exc_info.value.field_name == "q3c_email"
    assert "PLEASE FIX" in exc_info.value.message
    assert source.loads == 0


def test_generation_service_propagates_template_load_error() -> None:
    service = _service(source=_DummyTemplateSource(fail=True))

    with pytest.raises(TemplateLoadError):
        service.generate_sync(AnswerRecord())
    service.shutdown()


def test_generation_service_serializes_concurrent_requests() -> None:
    filler = _DummyFiller(delay=0.05)
    service = _service(filler=filler)

    async def scenario() -> list[bytes]:
        documents = await asyncio.gather(
            *(service.generate(AnswerRecord(q2_fullName=f"p{i}")) for i in range(3))
        )
        return [document.content for document in documents]

    contents = asyncio.run(scenario())
    service.shutdown()

    assert len(contents) == 3
    assert filler.max_active == 1


def test_build_generation_service_resolves_relative_template_path(tmp_path: Path) -> None:
    config = AppConfig(
        logging=LoggingConfig(level="INFO"),
        security=SecurityConfig(cors_allowed_origins=[], request_max_bytes=1024),
        template=TemplateConfig(
            path=Path("static/missing.pdf"),
            url="",
            fetch_timeout_seconds=5,
            output_filename="out.pdf",
        ),
    )
    service = build_generation_service(config, root=tmp_path, today=lambda: TODAY)

    with pytest.raises(TemplateLoadError, match="missing.pdf"):
        service.generate_sync(AnswerRecord())
    service.shutdown()
