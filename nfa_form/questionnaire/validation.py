"""Per-field validation rules checked on blur and before PDF generation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable

from nfa_form.controls.model import ControlSet
from nfa_form.questionnaire.record import AnswerRecord

GENERATION_BLOCKED_MESSAGE = (
    "PLEASE FIX THE HIGHLIGHTED VALIDATION ERRORS BEFORE GENERATING THE PDF."
)

_PHONE_RE = re.compile(r"[\d\s()\-]+", re.ASCII)
_EMAIL_RE = re.compile(r".+@.+")
_SSN_RE = re.compile(r"\d{3}-\d{2}-\d{4}|\d{9}|[a-zA-Z0-9]{8}", re.ASCII)


@dataclass(frozen=True)
class ValidationResult:
    key: str
    valid: bool
    message: str = ""


@dataclass(frozen=True)
class Rule:
    check: Callable[[str, date], bool]
    message: str


def _dob_not_in_future(value: str, today: date) -> bool:
    try:
        return date.fromisoformat(value) <= today
    except ValueError:
        return False


RULES: dict[str, Rule] = {
    "q3b_telephone": Rule(
        check=lambda value, _today: bool(_PHONE_RE.fullmatch(value)),
        message="Must only contain digits and separators.",
    ),
    "q3c_email": Rule(
        check=lambda value, _today: bool(_EMAIL_RE.search(value)),
        message="Must be a valid email format.",
    ),
    "q3f_ssn": Rule(
        check=lambda value, _today: bool(_SSN_RE.fullmatch(value)),
        message="Must be a 9-digit SSN or 8-character UPIN.",
    ),
    "q3g_dob": Rule(
        check=_dob_not_in_future,
        message="Date of Birth cannot be in the future.",
    ),
}


def validate_field(key: str, value: str | None, *, today: date) -> ValidationResult:
    """Evaluate one monitored key; blank values and unmonitored keys pass."""
    rule = RULES.get(key)
    text = value or ""
    if rule is None or not text or rule.check(text, today):
        return ValidationResult(key=key, valid=True)
    return ValidationResult(key=key, valid=False, message=rule.message)


def validate_values(values: dict[str, str], *, today: date) -> list[ValidationResult]:
    return [validate_field(key, values.get(key), today=today) for key in RULES]


def first_failure(results: list[ValidationResult]) -> ValidationResult | None:
    return next((result for result in results if not result.valid), None)


def values_from_controls(controls: ControlSet) -> dict[str, str]:
    return {key: controls.text(key) for key in RULES}


def values_from_record(record: AnswerRecord) -> dict[str, str]:
    data = record.as_dict()
    return {key: str(data[key]) for key in RULES if key in data}
