"""Declarative enable/disable/default rules between page controls.

Each rule names a controller key, the dependent control (optionally a single
option of a radio/checkbox group) and a function that derives the dependent
state from the current controls. ``apply_dependencies`` is the single
reactive pass that evaluates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable

from nfa_form.controls.model import Control, ControlKind, ControlSet
from nfa_form.questionnaire.record import (
    CERTIFICATION_DATE_KEY,
    NO,
    NOT_APPLICABLE,
    OTHER,
    SAME_AS_KEY,
    YES,
)


@dataclass(frozen=True)
class Effect:
    """Derived state for a dependent control."""

    enabled: bool
    clear: bool = False
    checked: bool | None = None
    mirror: str | None = None


@dataclass(frozen=True)
class DependencyRule:
    controller: str
    dependent: str
    option: str | None
    evaluate: Callable[[ControlSet], Effect]


def _enabled_when_selected(controller: str, value: str) -> Callable[[ControlSet], Effect]:
    def evaluate(controls: ControlSet) -> Effect:
        if value in controls.checked_values(controller):
            return Effect(enabled=True)
        return Effect(enabled=False, clear=True)

    return evaluate


def _same_as_applicant(controls: ControlSet) -> Effect:
    same_as = controls.first(SAME_AS_KEY)
    if same_as is not None and same_as.checked:
        return Effect(enabled=False, mirror="q2_address")
    return Effect(enabled=True)


def _exception_answer(controls: ControlSet) -> Effect:
    nonimmigrant = controls.checked_value("q6m1_nonimmigrant")
    if nonimmigrant == YES:
        return Effect(enabled=True)
    return Effect(enabled=False, clear=True)


def _exception_not_applicable(controls: ControlSet) -> Effect:
    nonimmigrant = controls.checked_value("q6m1_nonimmigrant")
    if nonimmigrant == NO:
        return Effect(enabled=True, checked=True)
    return Effect(enabled=False, clear=True)


DEPENDENCY_RULES: tuple[DependencyRule, ...] = (
    DependencyRule(SAME_AS_KEY, "q3a_homeAddress", None, _same_as_applicant),
    DependencyRule("q2_address", "q3a_homeAddress", None, _same_as_applicant),
    DependencyRule(
        "q4a_firearmType",
        "q4a_firearmType_other",
        None,
        _enabled_when_selected("q4a_firearmType", OTHER),
    ),
    DependencyRule("q6m1_nonimmigrant", "q6m2_exception", YES, _exception_answer),
    DependencyRule("q6m1_nonimmigrant", "q6m2_exception", NO, _exception_answer),
    DependencyRule(
        "q6m1_nonimmigrant",
        "q6m2_exception",
        NOT_APPLICABLE,
        _exception_not_applicable,
    ),
    DependencyRule(
        "q8_hasUpin", "q8_upinNumber", None, _enabled_when_selected("q8_hasUpin", YES)
    ),
    DependencyRule(
        "q9a_citizenship",
        "q9a_citizenship_other",
        None,
        _enabled_when_selected("q9a_citizenship", OTHER),
    ),
    DependencyRule(
        "q9c_birthCountry",
        "q9c_birthCountry_other",
        None,
        _enabled_when_selected("q9c_birthCountry", OTHER),
    ),
)


def dependents_of(controller: str) -> tuple[DependencyRule, ...]:
    return tuple(rule for rule in DEPENDENCY_RULES if rule.controller == controller)


def _targets(controls: ControlSet, rule: DependencyRule) -> list[Control]:
    if rule.option is None:
        return controls.group(rule.dependent)
    option = controls.option(rule.dependent, rule.option)
    return [option] if option is not None else []


def _apply_effect(controls: ControlSet, target: Control, effect: Effect) -> None:
    target.disabled = not effect.enabled
    if effect.mirror is not None:
        target.value = controls.text(effect.mirror)
    if effect.clear:
        if target.is_toggle:
            target.checked = False
        else:
            target.value = ""
    if effect.checked is not None:
        if effect.checked and target.kind == ControlKind.RADIO:
            controls.check(target.name, target.value)
        else:
            target.checked = effect.checked


def apply_dependencies(controls: ControlSet, changed: str | None = None) -> list[str]:
    """Re-derive dependent control state.

    With ``changed`` set only the rules driven by that key run; otherwise
    every rule runs in table order. Returns the dependent keys touched.
    """
    rules = DEPENDENCY_RULES if changed is None else dependents_of(changed)
    touched: list[str] = []
    for rule in rules:
        effect = rule.evaluate(controls)
        for target in _targets(controls, rule):
            _apply_effect(controls, target, effect)
        if rule.dependent not in touched:
            touched.append(rule.dependent)
    return touched


def apply_defaults(controls: ControlSet, *, today: date) -> None:
    """Fill implicit defaults: the signing date defaults to today."""
    certification = controls.first(CERTIFICATION_DATE_KEY)
    if certification is not None and not certification.value:
        certification.value = today.isoformat()
