from __future__ import annotations

from pathlib import Path

import fitz
import pytest
import requests

from nfa_form.mapping import fields
from nfa_form.mapping.operations import SELECT, FieldMapping, SetText
from nfa_form.pdf.filler import TemplateFiller, variant_field_name
from nfa_form.pdf.template import (
    FitzTemplate,
    TemplateLoadError,
    TemplateSource,
    WidgetKind,
)


def _add_widget(page: fitz.Page, name: str, field_type: int, rect: fitz.Rect) -> None:
    widget = fitz.Widget()
    widget.field_name = name
    widget.field_type = field_type
    widget.rect = rect
    if field_type == fitz.PDF_WIDGET_TYPE_CHECKBOX:
        widget.field_value = False
    page.add_widget(widget)


def _template_bytes() -> bytes:
    doc = fitz.open()
    for _ in range(6):
        doc.new_page()
    first = doc[0]
    _add_widget(
        first, fields.APPLICANT_FIELD, fitz.PDF_WIDGET_TYPE_TEXT, fitz.Rect(50, 50, 300, 80)
    )
    _add_widget(
        first,
        fields.FORM_TYPE_FIELDS["ATF FORM 4"],
        fitz.PDF_WIDGET_TYPE_CHECKBOX,
        fitz.Rect(50, 100, 62, 112),
    )
    _add_widget(first, fields.DOB_FIELD, fitz.PDF_WIDGET_TYPE_TEXT, fitz.Rect(50, 130, 200, 150))
    _add_widget(
        doc[4],
        variant_field_name(fields.APPLICANT_FIELD),
        fitz.PDF_WIDGET_TYPE_TEXT,
        fitz.Rect(50, 50, 300, 80),
    )
    data = doc.tobytes()
    doc.close()
    return data


def test_fitz_template_lists_widgets_with_kinds() -> None:
    template = FitzTemplate.open(_template_bytes())
    try:
        widgets = {widget.name: widget.kind for widget in template.widgets()}
        assert template.page_count() == 6
    finally:
        template.close()

    assert widgets[fields.APPLICANT_FIELD] == WidgetKind.TEXT
    assert widgets[fields.FORM_TYPE_FIELDS["ATF FORM 4"]] == WidgetKind.CHECKBOX
    assert variant_field_name(fields.APPLICANT_FIELD) in widgets


def test_fitz_template_rejects_non_pdf_bytes() -> None:
    with pytest.raises(TemplateLoadError):
        FitzTemplate.open(b"definitely not a pdf")


def test_fitz_fill_prunes_flattens_and_renders_values() -> None:
    mapping = FieldMapping()
    mapping.add(fields.APPLICANT_FIELD, SetText("JANE DOE"))
    mapping.add(fields.FORM_TYPE_FIELDS["ATF FORM 4"], SELECT)
    mapping.add(fields.DOB_FIELD, SetText("07/14/1980"))

    result = TemplateFiller().fill(_template_bytes(), mapping)

    assert result.issues == []
    assert result.pages_pruned is True
    assert result.corrections_applied == 1
    with fitz.open(stream=result.content, filetype="pdf") as output:
        assert output.page_count == 4
        assert all(not list(page.widgets()) for page in output)
        assert "JANE DOE" in output[0].get_text()
        # The Page5 copy now sits at index 2 after pages 2 and 3 were removed.
        assert "JANE DOE" in output[2].get_text()


def test_template_source_reads_local_pdf(tmp_path: Path) -> None:
    template = tmp_path / "template.pdf"
    template.write_bytes(_template_bytes())
    not_pdf = tmp_path / "template.txt"
    not_pdf.write_text("hello", encoding="utf-8")

    assert TemplateSource(path=template).load().startswith(b"%PDF")
    with pytest.raises(TemplateLoadError):
        TemplateSource(path=not_pdf).load()
    with pytest.raises(TemplateLoadError):
        TemplateSource(path=tmp_path / "missing.pdf").load()


class _DummyResponse:
    def __init__(self, content: bytes, status_code: int = 200, content_type: str = "") -> None:
        self.content = content
        self.status_code = status_code
        self.headers = {"content-type": content_type}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


def test_template_source_fetches_url(monkeypatch, tmp_path: Path) -> None:
    calls: list[tuple[str, int]] = []
    responses = {
        "https://example.test/ok.pdf": _DummyResponse(b"%PDF-1.7 body"),
        "https://example.test/html": _DummyResponse(b"<html>", content_type="text/html"),
        "https://example.test/gone": _DummyResponse(b"", status_code=404),
    }

    def fake_get(url: str, timeout: int) -> _DummyResponse:
        calls.append((url, timeout))
        return responses[url]

    monkeypatch.setattr(requests, "get", fake_get)

    source = TemplateSource(
        path=tmp_path / "unused.pdf", url="https://example.test/ok.pdf", timeout_seconds=7
    )
    assert source.load() == b"%PDF-1.7 body"
    assert source.location == "https://example.test/ok.pdf"
    assert calls == [("https://example.test/ok.pdf", 7)]
    for url in ("https://example.test/html", "https://example.test/gone"):
        with pytest.raises(TemplateLoadError):
            TemplateSource(path=tmp_path / "unused.pdf", url=url).load()
