"""Application service behind the document generation endpoint and CLI."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, Protocol

from nfa_form.core.config import AppConfig
from nfa_form.mapping.engine import map_record_to_fields
from nfa_form.mapping.operations import FieldMapping
from nfa_form.pdf.filler import FillIssue, FillResult, TemplateFiller
from nfa_form.pdf.template import TemplateSource
from nfa_form.questionnaire.record import AnswerRecord
from nfa_form.questionnaire.validation import (
    GENERATION_BLOCKED_MESSAGE,
    first_failure,
    validate_values,
    values_from_record,
)

LOGGER = logging.getLogger(__name__)


class RecordValidationError(ValueError):
    """The record failed a field rule; generation was not attempted."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.message = message


class TemplateSourceProtocol(Protocol):
    """Protocol of the template byte source used by the service."""

    @property
    def location(self) -> str:
        """Human-readable template location for logs."""

    def load(self) -> bytes:
        """Return raw template bytes or raise ``TemplateLoadError``."""


class TemplateFillerProtocol(Protocol):
    """Protocol of the fill engine used by the service."""

    def fill(self, template_bytes: bytes, mapping: FieldMapping) -> FillResult:
        """Produce the finalized PDF for one mapping."""


@dataclass(frozen=True)
class GeneratedDocument:
    content: bytes
    filename: str
    media_type: str = "application/pdf"
    issues: list[FillIssue] = field(default_factory=list)


class DocumentGenerationService:
    """Validate, map and fill; one generation runs at a time."""

    def __init__(
        self,
        *,
        template_source: TemplateSourceProtocol,
        filler: TemplateFillerProtocol,
        output_filename: str,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._template_source = template_source
        self._filler = filler
        self._output_filename = output_filename
        self._today = today
        self._lock = asyncio.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="pdf-generation"
        )

    def ensure_valid(self, record: AnswerRecord, *, today: date) -> None:
        """Raise :class:`RecordValidationError` for the first failing field."""
        results = validate_values(values_from_record(record), today=today)
        failure = first_failure(results)
        if failure is not None:
            LOGGER.info(
                "generation_blocked_by_validation",
                extra={"field_name": failure.key, "reason": failure.message},
            )
            raise RecordValidationError(failure.key, GENERATION_BLOCKED_MESSAGE)

    def generate_sync(self, record: AnswerRecord) -> GeneratedDocument:
        """Run one full generation pass on the calling thread."""
        today = self._today()
        self.ensure_valid(record, today=today)
        mapping = map_record_to_fields(record, today=today)
        LOGGER.info("template_loading location=%s", self._template_source.location)
        template_bytes = self._template_source.load()
        result = self._filler.fill(template_bytes, mapping)
        if result.issues:
            LOGGER.warning(
                "generation_completed_with_issues count=%d", len(result.issues)
            )
        if not result.pages_pruned:
            LOGGER.warning("generation_completed_without_pruning")
        return GeneratedDocument(
            content=result.content,
            filename=self._output_filename,
            issues=list(result.issues),
        )

    async def generate(self, record: AnswerRecord) -> GeneratedDocument:
        """Serialize generation requests and run each off the event loop."""
        async with self._lock:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(
                self._executor, self.generate_sync, record
            )

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


def build_generation_service(
    config: AppConfig, *, root: Path, today: Callable[[], date] = date.today
) -> DocumentGenerationService:
    """Wire the service from config; relative template paths resolve under root."""
    template_path = config.template.path
    if not template_path.is_absolute():
        template_path = root / template_path
    return DocumentGenerationService(
        template_source=TemplateSource(
            path=template_path,
            url=config.template.url,
            timeout_seconds=config.template.fetch_timeout_seconds,
        ),
        filler=TemplateFiller(),
        output_filename=config.template.output_filename,
        today=today,
    )
