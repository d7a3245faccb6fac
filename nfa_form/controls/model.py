"""In-memory model of the questionnaire page controls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable, Iterator


class ControlKind(StrEnum):
    """Input kinds used by the questionnaire page."""

    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    TEXTAREA = "textarea"
    DATE = "date"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"


TEXT_ENTRY_KINDS = frozenset(
    {ControlKind.TEXT, ControlKind.EMAIL, ControlKind.TEL, ControlKind.TEXTAREA}
)


@dataclass
class Control:
    """One named page control with its live and default state."""

    name: str
    kind: ControlKind
    value: str = ""
    checked: bool = False
    disabled: bool = False
    default_value: str = ""
    default_checked: bool = False

    @property
    def is_toggle(self) -> bool:
        return self.kind in (ControlKind.CHECKBOX, ControlKind.RADIO)

    def reset(self) -> None:
        # Option values are fixed; only their checked state has a default.
        if self.is_toggle:
            self.checked = self.default_checked
        else:
            self.value = self.default_value


class ControlSet:
    """Ordered collection of controls, addressable by name like form elements."""

    def __init__(self, controls: Iterable[Control]) -> None:
        self._controls = list(controls)

    def __iter__(self) -> Iterator[Control]:
        return iter(self._controls)

    def __len__(self) -> int:
        return len(self._controls)

    def group(self, name: str) -> list[Control]:
        return [control for control in self._controls if control.name == name]

    def first(self, name: str) -> Control | None:
        return next((c for c in self._controls if c.name == name), None)

    def option(self, name: str, value: str) -> Control | None:
        return next(
            (c for c in self._controls if c.name == name and c.value == value), None
        )

    def is_group(self, name: str) -> bool:
        return len(self.group(name)) > 1

    def text(self, name: str) -> str:
        control = self.first(name)
        return control.value if control else ""

    def checked_value(self, name: str) -> str:
        """Return the checked option of a radio group, or an empty string."""
        for control in self.group(name):
            if control.checked:
                return control.value
        return ""

    def checked_values(self, name: str) -> list[str]:
        return [c.value for c in self.group(name) if c.checked]

    def set_value(self, name: str, value: str) -> None:
        control = self.first(name)
        if control is None:
            raise KeyError(f"Unknown control: {name}")
        control.value = value

    def check(self, name: str, value: str | None = None, checked: bool = True) -> None:
        """Set the checked state of an option (or of a lone checkbox).

        Checking a radio option unchecks the rest of its group.
        """
        group = self.group(name)
        if not group:
            raise KeyError(f"Unknown control: {name}")
        if value is None:
            group[0].checked = checked
            return
        target = self.option(name, value)
        if target is None:
            raise KeyError(f"Unknown option {value!r} for control {name}")
        if target.kind == ControlKind.RADIO and checked:
            for control in group:
                control.checked = False
        target.checked = checked

    def reset(self) -> None:
        for control in self._controls:
            control.reset()
