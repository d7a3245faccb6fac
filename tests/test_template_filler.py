from __future__ import annotations

import pytest

from nfa_form.mapping import fields
from nfa_form.mapping.operations import SELECT, FieldMapping, SetChoice, SetText
from nfa_form.pdf.filler import (
    GEOMETRY_CORRECTIONS,
    TemplateFiller,
    candidate_names,
    variant_field_name,
)
from nfa_form.pdf.template import Rect, TemplateLoadError, WidgetKind


class _DummyWidget:
    def __init__(
        self, name: str, kind: WidgetKind, rect: Rect = (10, 10, 20, 20), fail: bool = False
    ) -> None:
        self.name = name
        self.kind = kind
        self.rect = rect
        self.text: str | None = None
        self.choice: str | None = None
        self.active = False
        self.updates = 0
        self._fail = fail

    def get_rect(self) -> Rect:
        return self.rect

    def set_rect(self, rect: Rect) -> None:
        self.rect = rect

    def set_text(self, value: str) -> None:
        if self._fail:
            raise RuntimeError("widget is read-only")
        self.text = value

    def set_choice(self, value: str) -> None:
        self.choice = value

    def activate(self) -> None:
        self.active = True

    def update(self) -> None:
        self.updates += 1


class _DummyDocument:
    def __init__(
        self, widgets: list[_DummyWidget], pages: int = 6, fail_on: str = ""
    ) -> None:
        self._widgets = widgets
        self.pages = list(range(pages))
        self.deleted: list[int] = []
        self.flattened = False
        self.closed = 0
        self._fail_on = fail_on

    def widgets(self):
        return iter(self._widgets)

    def page_count(self) -> int:
        return len(self.pages)

    def delete_page(self, index: int) -> None:
        if self._fail_on == "delete_page":
            raise RuntimeError("page tree is damaged")
        self.deleted.append(index)
        self.pages.pop(index)

    def flatten(self) -> None:
        self.flattened = True

    def to_bytes(self) -> bytes:
        if self._fail_on == "to_bytes":
            raise RuntimeError("serialization failed")
        return b"%PDF-filled"

    def close(self) -> None:
        self.closed += 1


def _filler(doc: _DummyDocument) -> TemplateFiller:
    return TemplateFiller(open_template=lambda _data: doc)


def test_variant_field_name_rewrites_page_sets_and_dob_index() -> None:
    assert variant_field_name(fields.APPLICANT_FIELD) == (
        "topmostSubform[0].Page5[0].applicantaddress[0]"
    )
    assert variant_field_name(fields.UPIN_NO_FIELD) == (
        "topmostSubform[0].Page6[0].no17[0]"
    )
    assert variant_field_name(fields.DOB_FIELD) == "topmostSubform[0].Page5[0].#field[22]"
    assert candidate_names("plain") == ["plain"]


def test_filler_writes_primary_and_variant_widgets() -> None:
    primary = _DummyWidget(fields.APPLICANT_FIELD, WidgetKind.TEXT)
    variant = _DummyWidget(variant_field_name(fields.APPLICANT_FIELD), WidgetKind.TEXT)
    checkbox = _DummyWidget(fields.FORM_TYPE_FIELDS["ATF FORM 4"], WidgetKind.CHECKBOX)
    doc = _DummyDocument([primary, variant, checkbox])
    mapping = FieldMapping()
    mapping.add(fields.APPLICANT_FIELD, SetText("JANE DOE"))
    mapping.add(fields.FORM_TYPE_FIELDS["ATF FORM 4"], SELECT)

    result = _filler(doc).fill(b"%PDF", mapping)

    assert primary.text == variant.text == "JANE DOE"
    assert checkbox.active is True
    assert result.filled_fields == [primary.name, variant.name, checkbox.name]
    assert result.issues == []
    assert result.content == b"%PDF-filled"
    assert doc.deleted == [3, 2]
    assert doc.flattened is True
    assert doc.closed == 1


def test_filler_routes_values_by_widget_kind_and_skips_mismatches() -> None:
    choice = _DummyWidget("choice", WidgetKind.CHOICE)
    unknown = _DummyWidget("unknown", WidgetKind.UNKNOWN)
    text = _DummyWidget("text", WidgetKind.TEXT)
    radio = _DummyWidget("radio", WidgetKind.RADIO)
    doc = _DummyDocument([choice, unknown, text, radio])
    mapping = FieldMapping()
    mapping.add("choice", SetChoice("OPTION"))
    mapping.add("unknown", SetText("FALLBACK"))
    mapping.add("text", SELECT)
    mapping.add("radio", SetText("IGNORED"))
    mapping.add("absent", SetText("NOWHERE"))

    result = _filler(doc).fill(b"%PDF", mapping)

    assert choice.choice == "OPTION"
    assert unknown.text == "FALLBACK"
    assert text.text is None and radio.active is False
    assert [(i.field_name, i.reason) for i in result.issues] == [
        ("text", "select_on_value_field"),
        ("radio", "value_on_toggle_field"),
        ("absent", "field_not_found"),
    ]


def test_filler_continues_after_widget_failure() -> None:
    broken = _DummyWidget("broken", WidgetKind.TEXT, fail=True)
    healthy = _DummyWidget("healthy", WidgetKind.TEXT)
    doc = _DummyDocument([broken, healthy])
    mapping = FieldMapping()
    mapping.add("broken", SetText("A"))
    mapping.add("healthy", SetText("B"))

    result = _filler(doc).fill(b"%PDF", mapping)

    assert healthy.text == "B"
    assert [(i.field_name, i.reason) for i in result.issues] == [("broken", "fill_failed")]


def test_filler_applies_geometry_corrections_to_primary_and_variant() -> None:
    upin_no = _DummyWidget(fields.UPIN_NO_FIELD, WidgetKind.CHECKBOX, (100, 50, 110, 60))
    dob_variant = _DummyWidget(
        variant_field_name(fields.DOB_FIELD), WidgetKind.TEXT, (10, 20, 90, 30)
    )
    doc = _DummyDocument([upin_no, dob_variant])

    result = _filler(doc).fill(b"%PDF", FieldMapping())

    assert upin_no.rect == (102.5, 50, 112.5, 60)
    assert dob_variant.rect == (10, 19.5, 90, 30.5)
    assert result.corrections_applied == 2
    assert len(GEOMETRY_CORRECTIONS) == 5


def test_filler_tolerates_pruning_failure() -> None:
    doc = _DummyDocument([], fail_on="delete_page")

    result = _filler(doc).fill(b"%PDF", FieldMapping())

    assert result.pages_pruned is False
    assert doc.flattened is True
    assert doc.closed == 1


def test_filler_closes_document_when_serialization_fails() -> None:
    doc = _DummyDocument([], fail_on="to_bytes")

    with pytest.raises(RuntimeError):
        _filler(doc).fill(b"%PDF", FieldMapping())

    assert doc.closed == 1


def test_filler_propagates_template_load_error() -> None:
    def open_template(_data: bytes):
        raise TemplateLoadError("not a pdf")

    with pytest.raises(TemplateLoadError):
        TemplateFiller(open_template=open_template).fill(b"junk", FieldMapping())
