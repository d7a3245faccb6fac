"""Fixed control layout of the questionnaire page."""

from __future__ import annotations

from typing import Any, get_args

from nfa_form.controls.model import Control, ControlKind, ControlSet
from nfa_form.questionnaire.record import (
    SAME_AS_KEY,
    Country,
    Ethnicity,
    FirearmType,
    FormType,
    Race,
    YesNo,
    YesNoNotApplicable,
)

PROHIBITOR_KEYS = (
    "q6a_intent",
    "q6b_sell",
    "q6c_indictment",
    "q6d_convicted",
    "q6e_fugitive",
    "q6f_user",
    "q6g_mental",
    "q6h_dishonorable",
    "q6i_restraining",
    "q6j_domestic",
    "q6k_renounced",
    "q6l_illegal",
    "q6m1_nonimmigrant",
)
EXCEPTION_KEY = "q6m2_exception"

# Question groups as laid out on the page, used by "clear section".
QUESTION_GROUPS: dict[str, tuple[str, ...]] = {
    "q1": ("q1_formType",),
    "q2": ("q2_fullName", "q2_address"),
    "q3": (
        "q3a_fullName",
        "q3a_homeAddress",
        SAME_AS_KEY,
        "q3b_telephone",
        "q3c_email",
        "q3d_otherNames",
        "q3f_ssn",
        "q3g_dob",
        "q3h_ethnicity",
        "q3i_race",
    ),
    "q4": (
        "q4a_firearmType",
        "q4a_firearmType_other",
        "q4b_name",
        "q4b_address",
        "q4c_model",
        "q4d_caliber",
        "q4e_serial",
    ),
    "q5": ("q5_agencyName", "q5_officialName", "q5_officialTitle", "q5_address"),
    "q6": (*PROHIBITOR_KEYS, EXCEPTION_KEY),
    "q7": ("q7_alienNumber",),
    "q8": ("q8_hasUpin", "q8_upinNumber"),
    "q9": (
        "q9a_citizenship",
        "q9a_citizenship_other",
        "q9b_birthState",
        "q9c_birthCountry",
        "q9c_birthCountry_other",
    ),
    "certification": ("certificationDate",),
}


def _options(name: str, kind: ControlKind, choices: Any) -> list[Control]:
    return [Control(name=name, kind=kind, value=value) for value in get_args(choices)]


def _field(name: str, kind: ControlKind = ControlKind.TEXT) -> Control:
    return Control(name=name, kind=kind)


def build_controls() -> ControlSet:
    """Return a fresh control set in page order with default state."""
    controls: list[Control] = []
    controls += _options("q1_formType", ControlKind.RADIO, FormType)

    controls += [_field("q2_fullName"), _field("q2_address", ControlKind.TEXTAREA)]

    controls += [
        _field("q3a_fullName"),
        _field("q3a_homeAddress", ControlKind.TEXTAREA),
        Control(
            name=SAME_AS_KEY,
            kind=ControlKind.CHECKBOX,
            value="on",
            checked=True,
            default_checked=True,
        ),
        _field("q3b_telephone", ControlKind.TEL),
        _field("q3c_email", ControlKind.EMAIL),
        _field("q3d_otherNames", ControlKind.TEXTAREA),
        _field("q3f_ssn"),
        _field("q3g_dob", ControlKind.DATE),
    ]
    controls += _options("q3h_ethnicity", ControlKind.RADIO, Ethnicity)
    controls += _options("q3i_race", ControlKind.RADIO, Race)

    controls += _options("q4a_firearmType", ControlKind.RADIO, FirearmType)
    controls += [
        _field("q4a_firearmType_other"),
        _field("q4b_name"),
        _field("q4b_address", ControlKind.TEXTAREA),
        _field("q4c_model"),
        _field("q4d_caliber"),
        _field("q4e_serial"),
    ]

    controls += [
        _field("q5_agencyName"),
        _field("q5_officialName"),
        _field("q5_officialTitle"),
        _field("q5_address", ControlKind.TEXTAREA),
    ]

    for key in PROHIBITOR_KEYS:
        controls += _options(key, ControlKind.RADIO, YesNo)
    controls += _options(EXCEPTION_KEY, ControlKind.RADIO, YesNoNotApplicable)

    controls.append(_field("q7_alienNumber"))

    controls += _options("q8_hasUpin", ControlKind.RADIO, YesNo)
    controls.append(_field("q8_upinNumber"))

    controls += _options("q9a_citizenship", ControlKind.CHECKBOX, Country)
    controls += [_field("q9a_citizenship_other"), _field("q9b_birthState")]
    controls += _options("q9c_birthCountry", ControlKind.RADIO, Country)
    controls.append(_field("q9c_birthCountry_other"))

    controls.append(_field("certificationDate", ControlKind.DATE))
    return ControlSet(controls)
