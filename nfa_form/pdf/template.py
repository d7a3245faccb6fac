"""PyMuPDF adapter over the questionnaire template and its byte source."""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Iterator, Protocol

import fitz
import requests

LOGGER = logging.getLogger(__name__)

Rect = tuple[float, float, float, float]


class TemplateLoadError(RuntimeError):
    """The template could not be fetched or is not a PDF."""


class WidgetKind(StrEnum):
    TEXT = "text"
    CHOICE = "choice"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    UNKNOWN = "unknown"


class TemplateWidget(Protocol):
    """Named interactive field as seen by the fill engine."""

    @property
    def name(self) -> str:
        """Fully qualified field name."""

    @property
    def kind(self) -> WidgetKind:
        """Widget kind used to pick the write operation."""

    def get_rect(self) -> Rect:
        """Return the widget rectangle as (x0, y0, x1, y1)."""

    def set_rect(self, rect: Rect) -> None:
        """Move or resize the widget."""

    def set_text(self, value: str) -> None:
        """Write a text value."""

    def set_choice(self, value: str) -> None:
        """Select a value of a combo/list box."""

    def activate(self) -> None:
        """Turn a checkbox or radio button on."""

    def update(self) -> None:
        """Commit pending changes to the document."""


class TemplateDocument(Protocol):
    """Open template handle owned by one fill pass."""

    def widgets(self) -> Iterator[TemplateWidget]:
        """Yield every named widget, page by page."""

    def page_count(self) -> int:
        """Return the current number of pages."""

    def delete_page(self, index: int) -> None:
        """Remove the page at ``index``."""

    def flatten(self) -> None:
        """Turn every interactive field into static page content."""

    def to_bytes(self) -> bytes:
        """Serialize the document."""

    def close(self) -> None:
        """Release the underlying document."""


_KIND_BY_FITZ_TYPE = {
    fitz.PDF_WIDGET_TYPE_TEXT: WidgetKind.TEXT,
    fitz.PDF_WIDGET_TYPE_COMBOBOX: WidgetKind.CHOICE,
    fitz.PDF_WIDGET_TYPE_LISTBOX: WidgetKind.CHOICE,
    fitz.PDF_WIDGET_TYPE_CHECKBOX: WidgetKind.CHECKBOX,
    fitz.PDF_WIDGET_TYPE_RADIOBUTTON: WidgetKind.RADIO,
}


class FitzWidget:
    """TemplateWidget backed by a PyMuPDF ``Widget``."""

    def __init__(self, widget: fitz.Widget) -> None:
        self._widget = widget

    @property
    def name(self) -> str:
        return str(self._widget.field_name or "").strip()

    @property
    def kind(self) -> WidgetKind:
        return _KIND_BY_FITZ_TYPE.get(self._widget.field_type, WidgetKind.UNKNOWN)

    def get_rect(self) -> Rect:
        rect = self._widget.rect
        return (float(rect.x0), float(rect.y0), float(rect.x1), float(rect.y1))

    def set_rect(self, rect: Rect) -> None:
        self._widget.rect = fitz.Rect(*rect)

    def set_text(self, value: str) -> None:
        self._widget.field_value = value

    def set_choice(self, value: str) -> None:
        self._widget.field_value = value

    def activate(self) -> None:
        # Explicit export values render more reliably than bool assignment.
        on_state = self._widget.on_state()
        self._widget.field_value = (
            on_state if isinstance(on_state, str) and on_state else True
        )

    def update(self) -> None:
        self._widget.update()


class FitzTemplate:
    """TemplateDocument backed by a PyMuPDF ``Document``."""

    def __init__(self, doc: fitz.Document) -> None:
        self._doc = doc
        # Widgets reference their page; keep pages alive while widgets are in use.
        self._pages: list[fitz.Page] = []

    @classmethod
    def open(cls, data: bytes) -> "FitzTemplate":
        """Open template bytes, rejecting anything that is not a PDF."""
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            raise TemplateLoadError("Template bytes could not be opened as PDF.") from exc
        if not doc.is_pdf:
            doc.close()
            raise TemplateLoadError("Template is not a PDF document.")
        return cls(doc)

    def widgets(self) -> Iterator[FitzWidget]:
        for page in self._doc:
            self._pages.append(page)
            for widget in page.widgets() or []:
                yield FitzWidget(widget)

    def page_count(self) -> int:
        return self._doc.page_count

    def delete_page(self, index: int) -> None:
        self._pages.clear()
        self._doc.delete_page(index)

    def flatten(self) -> None:
        self._pages.clear()
        self._doc.bake(annots=False, widgets=True)

    def to_bytes(self) -> bytes:
        return self._doc.tobytes(garbage=3, deflate=True)

    def close(self) -> None:
        self._pages.clear()
        self._doc.close()


def _is_pdf_bytes(content: bytes) -> bool:
    return content.startswith(b"%PDF")


class TemplateSource:
    """Loads the raw template bytes from a URL or a local path."""

    def __init__(self, *, path: Path, url: str = "", timeout_seconds: int = 20) -> None:
        self._path = path
        self._url = url.strip()
        self._timeout_seconds = timeout_seconds

    @property
    def location(self) -> str:
        return self._url or str(self._path)

    def load(self) -> bytes:
        """Return template bytes or raise :class:`TemplateLoadError`."""
        if self._url:
            return self._fetch()
        data = self._read()
        if not _is_pdf_bytes(data):
            raise TemplateLoadError(
                f"Template at {self.location} does not look like a PDF."
            )
        return data

    def _read(self) -> bytes:
        try:
            return self._path.read_bytes()
        except OSError as exc:
            raise TemplateLoadError(f"Template not readable: {self._path}") from exc

    def _fetch(self) -> bytes:
        try:
            resp = requests.get(self._url, timeout=self._timeout_seconds)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TemplateLoadError(f"Template fetch failed: {self._url}") from exc
        content_type = (resp.headers.get("content-type") or "").lower()
        data = resp.content or b""
        if not _is_pdf_bytes(data) and "application/pdf" not in content_type:
            raise TemplateLoadError(
                f"Template URL does not look like PDF (content-type={content_type})."
            )
        return data
