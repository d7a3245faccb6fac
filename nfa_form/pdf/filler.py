"""Apply field operations to the template, prune unused pages and flatten."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from nfa_form.mapping.fields import (
    CITIZENSHIP_USA_FIELD,
    DOB_FIELD,
    ETHNICITY_FIELDS,
    RACE_FIELDS,
    UPIN_NO_FIELD,
)
from nfa_form.mapping.operations import FieldMapping, Operation, Select, operation_kind
from nfa_form.pdf.template import (
    FitzTemplate,
    Rect,
    TemplateDocument,
    TemplateWidget,
    WidgetKind,
)

LOGGER = logging.getLogger(__name__)

# Per-field (dx0, dy0, dx1, dy1) shifts for widgets misplaced in the template.
GEOMETRY_CORRECTIONS: tuple[tuple[str, Rect], ...] = (
    (UPIN_NO_FIELD, (2.5, 0, 2.5, 0)),
    (CITIZENSHIP_USA_FIELD, (1.5, 0, 1.5, 0)),
    (ETHNICITY_FIELDS["NOT HISPANIC OR LATINO"], (1, 0, 1, 0)),
    (RACE_FIELDS["WHITE"], (1, 0, 1, 0)),
    (DOB_FIELD, (0, -0.5, 0, 0.5)),
)

# Instruction pages removed from the output, by original position.
PRUNED_PAGE_INDICES: tuple[int, ...] = (2, 3)

_TOGGLE_KINDS = frozenset({WidgetKind.CHECKBOX, WidgetKind.RADIO})


def variant_field_name(name: str) -> str:
    """Name of the same field on the template's second page set."""
    return (
        name.replace("Page1[0]", "Page5[0]", 1)
        .replace("Page2[0]", "Page6[0]", 1)
        .replace("#field[24]", "#field[22]", 1)
    )


def candidate_names(name: str) -> list[str]:
    variant = variant_field_name(name)
    return [name] if variant == name else [name, variant]


def index_widgets(doc: TemplateDocument) -> dict[str, TemplateWidget]:
    widgets: dict[str, TemplateWidget] = {}
    for widget in doc.widgets():
        name = widget.name
        if name and name not in widgets:
            widgets[name] = widget
    return widgets


@dataclass(frozen=True)
class FillIssue:
    """A field left at its template default, and why."""

    field_name: str
    reason: str


@dataclass
class FillResult:
    content: bytes
    filled_fields: list[str] = field(default_factory=list)
    issues: list[FillIssue] = field(default_factory=list)
    corrections_applied: int = 0
    pages_pruned: bool = True


class TemplateFiller:
    """Runs one fill pass per call over a freshly opened template."""

    def __init__(
        self,
        *,
        open_template: Callable[[bytes], TemplateDocument] = FitzTemplate.open,
        corrections: tuple[tuple[str, Rect], ...] = GEOMETRY_CORRECTIONS,
        pruned_pages: tuple[int, ...] = PRUNED_PAGE_INDICES,
    ) -> None:
        self._open_template = open_template
        self._corrections = corrections
        self._pruned_pages = pruned_pages

    def fill(self, template_bytes: bytes, mapping: FieldMapping) -> FillResult:
        """Fill, prune, flatten and serialize; the handle is always closed.

        Raises ``TemplateLoadError`` when the bytes cannot be opened.
        """
        doc = self._open_template(template_bytes)
        try:
            widgets = index_widgets(doc)
            corrections_applied = self._apply_corrections(widgets)
            filled_fields, issues = self._apply_operations(widgets, mapping)
            widgets.clear()
            pages_pruned = self._prune_pages(doc)
            doc.flatten()
            content = doc.to_bytes()
        finally:
            doc.close()

        LOGGER.info(
            "template_filled filled=%d issues=%d", len(filled_fields), len(issues)
        )
        return FillResult(
            content=content,
            filled_fields=filled_fields,
            issues=issues,
            corrections_applied=corrections_applied,
            pages_pruned=pages_pruned,
        )

    def _apply_corrections(self, widgets: dict[str, TemplateWidget]) -> int:
        applied = 0
        for field_name, (dx0, dy0, dx1, dy1) in self._corrections:
            for name in candidate_names(field_name):
                widget = widgets.get(name)
                if widget is None:
                    continue
                try:
                    x0, y0, x1, y1 = widget.get_rect()
                    widget.set_rect((x0 + dx0, y0 + dy0, x1 + dx1, y1 + dy1))
                    widget.update()
                except Exception:
                    LOGGER.exception(
                        "template_geometry_correction_failed",
                        extra={"field_name": name},
                    )
                    continue
                applied += 1
        return applied

    def _apply_operations(
        self, widgets: dict[str, TemplateWidget], mapping: FieldMapping
    ) -> tuple[list[str], list[FillIssue]]:
        filled: list[str] = []
        issues: list[FillIssue] = []
        for field_name, operation in mapping.items():
            found = False
            for name in candidate_names(field_name):
                widget = widgets.get(name)
                if widget is None:
                    continue
                found = True
                issue = self._apply(widget, operation)
                if issue is None:
                    filled.append(name)
                else:
                    issues.append(issue)
            if not found:
                LOGGER.warning(
                    "template_field_missing",
                    extra={
                        "field_name": field_name,
                        "operation": operation_kind(operation),
                    },
                )
                issues.append(FillIssue(field_name, "field_not_found"))
        return filled, issues

    def _apply(self, widget: TemplateWidget, operation: Operation) -> FillIssue | None:
        name = widget.name
        kind = widget.kind
        try:
            if isinstance(operation, Select):
                if kind not in _TOGGLE_KINDS:
                    return self._skip(name, "select_on_value_field", operation, kind)
                widget.activate()
            else:
                if kind in _TOGGLE_KINDS:
                    return self._skip(name, "value_on_toggle_field", operation, kind)
                if kind == WidgetKind.CHOICE:
                    widget.set_choice(operation.value)
                else:
                    widget.set_text(operation.value)
            widget.update()
        except Exception:
            LOGGER.exception(
                "template_field_fill_failed",
                extra={"field_name": name, "operation": operation_kind(operation)},
            )
            return FillIssue(name, "fill_failed")
        return None

    @staticmethod
    def _skip(
        name: str, reason: str, operation: Operation, kind: WidgetKind
    ) -> FillIssue:
        LOGGER.warning(
            "template_field_skipped kind=%s",
            kind,
            extra={
                "field_name": name,
                "operation": operation_kind(operation),
                "reason": reason,
            },
        )
        return FillIssue(name, reason)

    def _prune_pages(self, doc: TemplateDocument) -> bool:
        # Descending order keeps the remaining original indices valid.
        try:
            for index in sorted(self._pruned_pages, reverse=True):
                doc.delete_page(index)
                LOGGER.info("template_page_deleted", extra={"page_index": index})
        except Exception:
            LOGGER.exception("template_page_prune_failed")
            return False
        return True
