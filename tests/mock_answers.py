from __future__ import annotations

from copy import deepcopy
from datetime import date

from nfa_form.questionnaire.record import AnswerRecord

TODAY = date(2024, 3, 5)

MOCK_ANSWERS = {
    "q1_formType": "ATF FORM 4",
    "q2_fullName": "ACME HOLDINGS TRUST",
    "q2_address": "1 MAIN ST\nSPRINGFIELD, IL 62701",
    "q3a_fullName": "JANE Q DOE",
    "q3a_sameAs2": False,
    "q3a_homeAddress": "22 ELM RD\nSPRINGFIELD, IL 62704",
    "q3b_telephone": "(217) 555-0100",
    "q3c_email": "JANE@EXAMPLE.COM",
    "q3d_otherNames": "JANE SMITH",
    "q3f_ssn": "123-45-6789",
    "q3g_dob": "1980-07-14",
    "q3h_ethnicity": "NOT HISPANIC OR LATINO",
    "q3i_race": "WHITE",
    "q4a_firearmType": "SILENCER",
    "q4b_name": "EXAMPLE ARMS LLC",
    "q4b_address": "9 FORGE WAY\nOGDEN, UT 84401",
    "q4c_model": "QUIET-1",
    "q4d_caliber": "5.56",
    "q4e_serial": "QA12345",
    "q5_agencyName": "SPRINGFIELD POLICE DEPARTMENT",
    "q5_officialName": "CHIEF ROBERT ROE",
    "q5_officialTitle": "CHIEF OF POLICE",
    "q5_address": "100 CIVIC PLAZA\nSPRINGFIELD, IL 62701",
    "q6a_intent": "NO",
    "q6b_sell": "NO",
    "q6c_indictment": "NO",
    "q6d_convicted": "NO",
    "q6e_fugitive": "NO",
    "q6f_user": "NO",
    "q6g_mental": "NO",
    "q6h_dishonorable": "NO",
    "q6i_restraining": "NO",
    "q6j_domestic": "NO",
    "q6k_renounced": "NO",
    "q6l_illegal": "NO",
    "q6m1_nonimmigrant": "NO",
    "q6m2_exception": "N/A",
    "q8_hasUpin": "YES",
    "q8_upinNumber": "AB12CD34",
    "q9a_citizenship": ["USA"],
    "q9b_birthState": "ILLINOIS",
    "q9c_birthCountry": "USA",
    "certificationDate": "2024-03-01",
}


def mock_answers() -> dict:
    return deepcopy(MOCK_ANSWERS)


def mock_record(**overrides: object) -> AnswerRecord:
    data = mock_answers()
    data.update(overrides)
    return AnswerRecord.model_validate({k: v for k, v in data.items() if v is not None})
