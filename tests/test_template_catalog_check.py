from __future__ import annotations

from nfa_form.mapping import fields
from nfa_form.pdf.catalog_check import check_template_catalog
from nfa_form.pdf.filler import GEOMETRY_CORRECTIONS, variant_field_name
from nfa_form.pdf.template import WidgetKind
from tests.test_template_filler import _DummyDocument, _DummyWidget


def _check(widgets: list[_DummyWidget], pages: int = 6) -> tuple[dict, _DummyDocument]:
    doc = _DummyDocument(widgets, pages=pages)
    return check_template_catalog(b"%PDF", open_template=lambda _data: doc), doc


def test_catalog_check_passes_when_every_field_is_present() -> None:
    widgets = [
        _DummyWidget(name, WidgetKind.TEXT) for name in fields.referenced_field_names()
    ]

    report, doc = _check(widgets)

    assert report["ok"] is True
    assert report["missing_fields"] == []
    assert report["geometry_targets_missing"] == []
    assert report["pruned_pages_present"] is True
    assert report["checked_fields"] == len(fields.referenced_field_names())
    assert doc.closed == 1


def test_catalog_check_accepts_variant_only_fields_and_reports_gaps() -> None:
    names = fields.referenced_field_names()
    widgets = [_DummyWidget(variant_field_name(names[0]), WidgetKind.CHECKBOX)]

    report, _ = _check(widgets, pages=3)
    rows = {row["field_name"]: row for row in report["fields"]}

    assert report["ok"] is False
    assert names[0] not in report["missing_fields"]
    assert rows[names[0]]["variant_present"] is True
    assert rows[names[0]]["kind"] == "checkbox"
    assert names[1] in report["missing_fields"]
    assert len(report["geometry_targets_missing"]) == len(GEOMETRY_CORRECTIONS)
    assert report["pruned_pages_present"] is False
