"""Offline check of a template PDF against the field catalog."""

from __future__ import annotations

from typing import Any, Callable

from nfa_form.mapping.fields import referenced_field_names
from nfa_form.pdf.filler import (
    GEOMETRY_CORRECTIONS,
    PRUNED_PAGE_INDICES,
    index_widgets,
    variant_field_name,
)
from nfa_form.pdf.template import FitzTemplate, TemplateDocument


def check_template_catalog(
    template_bytes: bytes,
    *,
    open_template: Callable[[bytes], TemplateDocument] = FitzTemplate.open,
) -> dict[str, Any]:
    """Compare the template's widgets with every field the mapping can emit."""
    doc = open_template(template_bytes)
    try:
        widgets = index_widgets(doc)
        kinds = {name: str(widget.kind) for name, widget in widgets.items()}
        page_count = doc.page_count()
    finally:
        doc.close()

    field_report: list[dict[str, Any]] = []
    missing: list[str] = []
    for field_name in referenced_field_names():
        variant = variant_field_name(field_name)
        primary_present = field_name in kinds
        variant_present = variant != field_name and variant in kinds
        if not primary_present and not variant_present:
            missing.append(field_name)
        field_report.append(
            {
                "field_name": field_name,
                "kind": kinds.get(field_name) or kinds.get(variant, ""),
                "primary_present": primary_present,
                "variant_name": variant if variant != field_name else "",
                "variant_present": variant_present,
            }
        )

    geometry_missing = [
        field_name
        for field_name, _ in GEOMETRY_CORRECTIONS
        if field_name not in kinds and variant_field_name(field_name) not in kinds
    ]
    pruned_pages_present = all(index < page_count for index in PRUNED_PAGE_INDICES)

    return {
        "ok": not missing and not geometry_missing and pruned_pages_present,
        "page_count": page_count,
        "widget_count": len(kinds),
        "checked_fields": len(field_report),
        "missing_fields": missing,
        "geometry_targets_missing": geometry_missing,
        "pruned_pages_present": pruned_pages_present,
        "fields": field_report,
    }
