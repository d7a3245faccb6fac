"""Input normalization applied to controls while the user types."""

from __future__ import annotations

import re

from nfa_form.controls.model import TEXT_ENTRY_KINDS, Control

TEXTAREA_LINE_LIMITS: dict[str, int] = {
    "q2_address": 2,
    "q3a_homeAddress": 7,
    "q5_address": 2,
    "q4b_address": 2,
    "q3d_otherNames": 2,
}


def _digits(value: str) -> str:
    return re.sub(r"\D", "", value)


def normalize_uppercase(control: Control) -> None:
    if control.kind in TEXT_ENTRY_KINDS:
        control.value = control.value.upper()


def limit_lines(control: Control) -> None:
    max_lines = TEXTAREA_LINE_LIMITS.get(control.name)
    if not max_lines:
        return
    lines = control.value.split("\n")
    if len(lines) > max_lines:
        control.value = "\n".join(lines[:max_lines])


def format_phone(value: str) -> str:
    """Render ten digits as ``(AAA) BBB-CCCC``; anything else is left as typed."""
    digits = _digits(value)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return value


def format_ssn(value: str) -> str:
    digits = _digits(value)
    if len(digits) == 9:
        return f"{digits[:3]}-{digits[3:5]}-{digits[5:]}"
    return value


BLUR_FORMATTERS = {
    "q3b_telephone": format_phone,
    "q3f_ssn": format_ssn,
}


def format_on_blur(control: Control) -> None:
    formatter = BLUR_FORMATTERS.get(control.name)
    if formatter is not None:
        control.value = formatter(control.value)
    normalize_uppercase(control)
