"""Translate an answer record into operations on the template's fields.

The mapping is a pure function of the record and the calendar date passed
in; the date is only consulted for the default signing date.
"""

from __future__ import annotations

from datetime import date
from typing import Mapping

from nfa_form.mapping import fields
from nfa_form.mapping.operations import SELECT, FieldMapping, SetText
from nfa_form.questionnaire.record import NO, OTHER, USA, YES, AnswerRecord


def _upper(value: str | None) -> str:
    return (value or "").upper()


def _join_lines(*parts: str) -> str:
    return "\n".join(part for part in parts if part)


def format_date(value: date) -> str:
    """Format as the template expects: MM/DD/YYYY."""
    return f"{value.month:02d}/{value.day:02d}/{value.year:04d}"


def _set_text(mapping: FieldMapping, field_name: str, value: str | None) -> None:
    text = _upper(value)
    if text:
        mapping.add(field_name, SetText(text))


def _select_from(
    mapping: FieldMapping, table: Mapping[str, str], token: str | None
) -> None:
    field_name = table.get(token or "")
    if field_name:
        mapping.add(field_name, SELECT)


def _map_applicant(record: AnswerRecord, mapping: FieldMapping) -> None:
    applicant = _join_lines(_upper(record.q2_fullName), _upper(record.q2_address))
    _set_text(mapping, fields.APPLICANT_FIELD, applicant)


def _map_responsible_person(record: AnswerRecord, mapping: FieldMapping) -> None:
    home_address = _upper(record.q3a_homeAddress)
    if not home_address and record.follows_applicant_address:
        home_address = _upper(record.q2_address)
    responsible = _join_lines(_upper(record.q3a_fullName), home_address)
    _set_text(mapping, fields.RESPONSIBLE_PERSON_FIELD, responsible)


def _map_firearm(record: AnswerRecord, mapping: FieldMapping) -> None:
    firearm_type = _upper(record.q4a_firearmType)
    if firearm_type == OTHER and record.q4a_firearmType_other:
        firearm_type = _upper(record.q4a_firearmType_other)
    _set_text(mapping, fields.FIREARM_TYPE_FIELD, firearm_type)

    maker = _join_lines(_upper(record.q4b_name), _upper(record.q4b_address))
    _set_text(mapping, fields.MAKER_FIELD, maker)
    _set_text(mapping, fields.MODEL_FIELD, record.q4c_model)
    _set_text(mapping, fields.CALIBER_FIELD, record.q4d_caliber)
    _set_text(mapping, fields.SERIAL_FIELD, record.q4e_serial)


def _map_law_enforcement(record: AnswerRecord, mapping: FieldMapping) -> None:
    official = _upper(record.q5_officialName)
    if official and record.q5_officialTitle:
        official = f"{official}, {_upper(record.q5_officialTitle)}"
    lines = [
        line
        for line in (_upper(record.q5_agencyName), official, _upper(record.q5_address))
        if line
    ]
    # Blank parts collapse upward: lines fill the template boxes in order.
    for field_name, line in zip(fields.LAW_ENFORCEMENT_FIELDS, lines):
        mapping.add(field_name, SetText(line))


def _map_prohibitors(record: AnswerRecord, mapping: FieldMapping) -> None:
    for key, (yes_field, no_field) in fields.PROHIBITOR_FIELDS.items():
        answer = getattr(record, key)
        if answer == YES:
            mapping.add(yes_field, SELECT)
        elif answer == NO:
            mapping.add(no_field, SELECT)
    _select_from(mapping, fields.EXCEPTION_FIELDS, record.q6m2_exception)


def _map_upin(record: AnswerRecord, mapping: FieldMapping) -> None:
    if record.q8_hasUpin == YES:
        mapping.add(fields.UPIN_YES_FIELD, SELECT)
        _set_text(mapping, fields.UPIN_NUMBER_FIELD, record.q8_upinNumber)
    elif record.q8_hasUpin == NO:
        mapping.add(fields.UPIN_NO_FIELD, SELECT)


def _map_citizenship(record: AnswerRecord, mapping: FieldMapping) -> None:
    citizenship = record.q9a_citizenship or []
    if USA in citizenship:
        mapping.add(fields.CITIZENSHIP_USA_FIELD, SELECT)
    if OTHER in citizenship and record.q9a_citizenship_other:
        mapping.add(fields.CITIZENSHIP_OTHER_FIELD, SELECT)
        _set_text(
            mapping, fields.CITIZENSHIP_OTHER_TEXT_FIELD, record.q9a_citizenship_other
        )

    _set_text(mapping, fields.BIRTH_STATE_FIELD, record.q9b_birthState)

    if record.q9c_birthCountry == USA:
        mapping.add(fields.BIRTH_COUNTRY_FIELD, SetText(fields.UNITED_STATES))
    elif record.q9c_birthCountry == OTHER and record.q9c_birthCountry_other:
        _set_text(mapping, fields.BIRTH_COUNTRY_FIELD, record.q9c_birthCountry_other)


def map_record_to_fields(record: AnswerRecord, *, today: date) -> FieldMapping:
    """Build the ordered field operations for one generation pass."""
    mapping = FieldMapping()

    _select_from(mapping, fields.FORM_TYPE_FIELDS, record.q1_formType)
    _map_applicant(record, mapping)

    _map_responsible_person(record, mapping)
    _set_text(mapping, fields.TELEPHONE_FIELD, record.q3b_telephone)
    _set_text(mapping, fields.EMAIL_FIELD, record.q3c_email)
    _set_text(mapping, fields.OTHER_NAMES_FIELD, record.q3d_otherNames)
    _set_text(mapping, fields.SSN_FIELD, record.q3f_ssn)
    if record.q3g_dob is not None:
        mapping.add(fields.DOB_FIELD, SetText(format_date(record.q3g_dob)))
    _select_from(mapping, fields.ETHNICITY_FIELDS, record.q3h_ethnicity)
    _select_from(mapping, fields.RACE_FIELDS, record.q3i_race)

    _map_firearm(record, mapping)
    _map_law_enforcement(record, mapping)
    _map_prohibitors(record, mapping)
    _set_text(mapping, fields.ALIEN_NUMBER_FIELD, record.q7_alienNumber)
    _map_upin(record, mapping)
    _map_citizenship(record, mapping)

    signing_date = record.certificationDate or today
    mapping.add(fields.CERTIFICATION_DATE_FIELD, SetText(format_date(signing_date)))
    return mapping
