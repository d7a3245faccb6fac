"""Conversion between live page controls and the canonical answer record."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from nfa_form.controls.dependencies import apply_defaults, apply_dependencies
from nfa_form.controls.model import TEXT_ENTRY_KINDS, ControlKind, ControlSet
from nfa_form.questionnaire.record import (
    CERTIFICATION_DATE_KEY,
    OTHER,
    SAME_AS_KEY,
    AnswerRecord,
)

LOGGER = logging.getLogger(__name__)

OTHER_SUFFIX = "_other"
# Lone checkboxes recorded only when unchecked; checked is the implicit default.
RECORD_ONLY_WHEN_UNCHECKED = frozenset({SAME_AS_KEY})


def _is_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _other_selector_checked(controls: ControlSet, companion: str) -> bool:
    base = companion.removesuffix(OTHER_SUFFIX)
    selector = controls.option(base, OTHER)
    return selector is not None and selector.checked


def to_record(controls: ControlSet, *, today: date) -> AnswerRecord:
    """Serialize enabled controls into an answer record."""
    data: dict[str, Any] = {}
    processed_checkbox_groups: set[str] = set()
    today_string = today.isoformat()

    for control in controls:
        name = control.name
        if not name or control.disabled:
            continue

        if control.kind == ControlKind.CHECKBOX:
            if name in processed_checkbox_groups:
                continue
            processed_checkbox_groups.add(name)
            if not controls.is_group(name):
                if name in RECORD_ONLY_WHEN_UNCHECKED:
                    if not control.checked:
                        data[name] = False
                else:
                    data[name] = control.checked
                continue
            checked_values = controls.checked_values(name)
            if checked_values:
                data[name] = checked_values
        elif control.kind == ControlKind.RADIO:
            if control.checked and control.value:
                data[name] = control.value
        elif control.kind in TEXT_ENTRY_KINDS:
            if name.endswith(OTHER_SUFFIX):
                if control.value and _other_selector_checked(controls, name):
                    data[name] = control.value.upper()
            elif control.value:
                data[name] = control.value.upper()
        elif control.kind == ControlKind.DATE:
            if not control.value:
                continue
            if not _is_iso_date(control.value):
                LOGGER.warning("date_control_unparseable", extra={"field_name": name})
                continue
            if name == CERTIFICATION_DATE_KEY and control.value == today_string:
                continue
            data[name] = control.value
        elif control.value:
            data[name] = control.value

    return AnswerRecord.model_validate(data)


def from_record(record: AnswerRecord, controls: ControlSet, *, today: date) -> None:
    """Restore controls from a record, then re-derive dependent state."""
    controls.reset()
    for key, value in record.as_dict().items():
        group = controls.group(key)
        if not group:
            continue
        first = group[0]
        if first.kind == ControlKind.RADIO:
            for radio in group:
                radio.checked = radio.value == value
        elif first.kind == ControlKind.CHECKBOX:
            if isinstance(value, bool):
                first.checked = value
            else:
                for checkbox in group:
                    checkbox.checked = checkbox.value in value
        elif first.kind in TEXT_ENTRY_KINDS:
            first.value = str(value).upper()
        else:
            first.value = str(value)

    apply_dependencies(controls)
    apply_defaults(controls, today=today)
