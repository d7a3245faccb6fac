"""Behaviour of the questionnaire page, driven by input/change/blur events.

The page owns a control set, keeps dependent controls consistent after every
event, formats and validates on blur, and persists the answer record to the
location fragment through :class:`FragmentPersister`.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

from nfa_form.controls.codec import from_record, to_record
from nfa_form.controls.dependencies import apply_defaults, apply_dependencies
from nfa_form.controls.formatting import format_on_blur, limit_lines, normalize_uppercase
from nfa_form.controls.model import Control, ControlSet
from nfa_form.questionnaire.catalog import (
    EXCEPTION_KEY,
    PROHIBITOR_KEYS,
    QUESTION_GROUPS,
    build_controls,
)
from nfa_form.questionnaire.record import NO, NOT_APPLICABLE, AnswerRecord
from nfa_form.questionnaire.validation import (
    RULES,
    ValidationResult,
    first_failure,
    validate_field,
    validate_values,
    values_from_controls,
)
from nfa_form.state.persistence import DEFAULT_DEBOUNCE_SECONDS, FragmentPersister
from nfa_form.state.token import load_fragment


def _discard_location(_fragment: str) -> None:
    return None


class QuestionnairePage:
    def __init__(
        self,
        *,
        write_location: Callable[[str], None] = _discard_location,
        today: Callable[[], date] = date.today,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        controls: ControlSet | None = None,
    ) -> None:
        self.controls = controls if controls is not None else build_controls()
        self._today = today
        self._errors: dict[str, str] = {}
        self.persister = FragmentPersister(
            self.record, write_location, debounce_seconds=debounce_seconds
        )
        apply_dependencies(self.controls)
        apply_defaults(self.controls, today=self._today())

    @property
    def errors(self) -> dict[str, str]:
        """Messages of monitored fields currently marked invalid."""
        return dict(self._errors)

    def record(self) -> AnswerRecord:
        return to_record(self.controls, today=self._today())

    def _control(self, name: str) -> Control:
        control = self.controls.first(name)
        if control is None:
            raise KeyError(f"Unknown control: {name}")
        return control

    def restore(self, record: AnswerRecord) -> None:
        from_record(record, self.controls, today=self._today())
        self.validate_all()

    def load(self, fragment: str | None) -> AnswerRecord:
        """Restore from a location fragment; bad fragments restore nothing."""
        record = load_fragment(fragment)
        self.restore(record)
        return record

    def input(self, name: str, value: str) -> None:
        """Typing into a text-entry control."""
        control = self._control(name)
        control.value = value
        normalize_uppercase(control)
        limit_lines(control)
        apply_dependencies(self.controls, changed=name)
        self.persister.on_input()

    def change(self, name: str, value: str | None = None, checked: bool = True) -> None:
        """Toggling an option, or committing a select/date value."""
        control = self._control(name)
        if control.is_toggle:
            self.controls.check(name, value, checked)
        else:
            control.value = value or ""
        apply_dependencies(self.controls, changed=name)
        self.persister.on_change()

    def blur(self, name: str) -> ValidationResult:
        control = self._control(name)
        format_on_blur(control)
        return self._validate(name, control.value)

    def _validate(self, name: str, value: str) -> ValidationResult:
        result = validate_field(name, value, today=self._today())
        if result.valid:
            self._errors.pop(name, None)
        else:
            self._errors[name] = result.message
        return result

    def validate_all(self) -> list[ValidationResult]:
        results = validate_values(values_from_controls(self.controls), today=self._today())
        self._errors = {r.key: r.message for r in results if not r.valid}
        return results

    def first_invalid(self) -> ValidationResult | None:
        """Run every rule and return the first failure, if any."""
        return first_failure(self.validate_all())

    def mark_all_no(self) -> None:
        """Answer every prohibitor NO and the nonimmigrant exception N/A."""
        for key in PROHIBITOR_KEYS:
            self.controls.check(key, NO)
            apply_dependencies(self.controls, changed=key)
        self.controls.check(EXCEPTION_KEY, NOT_APPLICABLE)
        self.persister.on_change()

    def clear(self) -> None:
        """Reset the whole page; the fragment is cleared as well."""
        self.controls.reset()
        for control in self.controls:
            control.disabled = False
        apply_dependencies(self.controls)
        apply_defaults(self.controls, today=self._today())
        self.validate_all()
        self.persister.on_change()

    def clear_group(self, group: str) -> None:
        names = QUESTION_GROUPS.get(group)
        if names is None:
            raise KeyError(f"Unknown question group: {group}")
        for name in names:
            for control in self.controls.group(name):
                control.reset()
        apply_dependencies(self.controls)
        for name in names:
            if name in RULES:
                self._validate(name, self.controls.text(name))
        self.persister.on_change()
