"""Compact URL-fragment state token for answer records.

A token is the record's compact JSON, UTF-8 encoded and rendered in the
URL-safe base64 alphabet with the trailing padding removed, so it never
needs percent-escaping inside a location fragment.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re

from pydantic import ValidationError

from nfa_form.questionnaire.record import AnswerRecord

LOGGER = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]*={0,2}")


class StateDecodeError(ValueError):
    """Raised when a state token cannot be turned back into a record."""


def _token_text(raw: bytes) -> str:
    # Earlier tokens were base64 over Latin-1 text rather than UTF-8.
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def encode(record: AnswerRecord) -> str:
    """Encode a record as a padding-free URL-safe token ("" when empty)."""
    data = record.as_dict()
    if not data:
        return ""
    json_text = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    raw = base64.urlsafe_b64encode(json_text.encode("utf-8"))
    return raw.decode("ascii").rstrip("=")


def decode(token: str) -> AnswerRecord:
    """Decode a token produced by :func:`encode`.

    Raises :class:`StateDecodeError` for anything that is not a valid token.
    """
    cleaned = (token or "").strip()
    if not cleaned:
        return AnswerRecord()
    if not _TOKEN_RE.fullmatch(cleaned):
        raise StateDecodeError(
            "State token has characters outside the URL-safe alphabet."
        )
    padded = cleaned + "=" * (-len(cleaned) % 4)
    try:
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        data = json.loads(_token_text(raw))
    except (UnicodeError, binascii.Error, ValueError, RecursionError) as exc:
        raise StateDecodeError(f"State token is not valid: {exc}") from exc
    if not isinstance(data, dict):
        raise StateDecodeError("State token does not hold an object.")
    try:
        return AnswerRecord.model_validate(data)
    except ValidationError as exc:
        raise StateDecodeError(f"State token holds an invalid record: {exc}") from exc


def fragment_for(record: AnswerRecord) -> str:
    """Return ``#<token>``, or an empty string for an empty record."""
    token = encode(record)
    return f"#{token}" if token else ""


def location_for(path: str, query: str, record: AnswerRecord) -> str:
    """Build the location to store: bare ``path?query`` when nothing is answered."""
    location = path
    if query:
        location += query if query.startswith("?") else f"?{query}"
    return location + fragment_for(record)


def load_fragment(fragment: str | None) -> AnswerRecord:
    """Restore a record from a location fragment.

    A missing fragment yields an empty record; a malformed one is logged and
    also yields an empty record.
    """
    token = (fragment or "").removeprefix("#")
    if not token:
        return AnswerRecord()
    try:
        return decode(token)
    except StateDecodeError:
        LOGGER.warning("state_fragment_decode_failed", exc_info=True)
        return AnswerRecord()
