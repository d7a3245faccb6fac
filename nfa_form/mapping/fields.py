"""Template field catalog for ATF Form 5320.23.

Names are the template's fully qualified widget names. Primary fields live
on the Page1/Page2 subforms; the template repeats them on Page5/Page6 (see
``nfa_form.pdf.filler.variant_field_name``). Any change to the template PDF
must be re-checked against this module with ``main.py check-template``.
"""

from __future__ import annotations

P1 = "topmostSubform[0].Page1[0]."
P2 = "topmostSubform[0].Page2[0]."

FORM_TYPE_FIELDS = {
    "ATF FORM 1": P1 + "form1[0]",
    "ATF FORM 4": P1 + "form4[0]",
    "ATF FORM 5": P1 + "form5[0]",
}

APPLICANT_FIELD = P1 + "applicantaddress[0]"
RESPONSIBLE_PERSON_FIELD = P1 + "responsibleaddress[0]"
TELEPHONE_FIELD = P1 + "telephone[0]"
EMAIL_FIELD = P1 + "email[0]"
OTHER_NAMES_FIELD = P1 + "othernames[0]"
SSN_FIELD = P1 + "ssn2f[0]"
DOB_FIELD = P1 + "#field[24]"

ETHNICITY_FIELDS = {
    "HISPANIC OR LATINO": P1 + "ehl[0]",
    "NOT HISPANIC OR LATINO": P1 + "nhl[0]",
}

RACE_FIELDS = {
    "AMERICAN INDIAN OR ALASKA NATIVE": P1 + "aian[0]",
    "ASIAN": P1 + "a[0]",
    "BLACK OR AFRICAN AMERICAN": P1 + "baa[0]",
    "NATIVE HAWAIIAN OR OTHER PACIFIC ISLANDER": P1 + "nhopi[0]",
    "WHITE": P1 + "w[0]",
}

FIREARM_TYPE_FIELD = P1 + "firearmtype[0]"
MAKER_FIELD = P1 + "importeraddress[0]"
MODEL_FIELD = P1 + "Model[0]"
CALIBER_FIELD = P1 + "caliber[0]"
SERIAL_FIELD = P1 + "serial[0]"

# Law enforcement notification lines, filled positionally.
LAW_ENFORCEMENT_FIELDS = (
    P1 + "TextField3[0]",
    P1 + "TextField4[0]",
    P1 + "TextField5[0]",
)

PROHIBITOR_FIELDS: dict[str, tuple[str, str]] = {
    "q6a_intent": (P2 + "CheckBoxYes6a[0]", P2 + "CheckBoxno6a[0]"),
    "q6b_sell": (P2 + "CheckBoxYes6b[0]", P2 + "CheckBoxno6b[0]"),
    "q6c_indictment": (P2 + "CheckBoxYes1[0]", P2 + "CheckBoxno1[0]"),
    "q6d_convicted": (P2 + "CheckBoxYes2[0]", P2 + "CheckBoxno2[0]"),
    "q6e_fugitive": (P2 + "CheckBoxYes3[0]", P2 + "CheckBoxno3[0]"),
    "q6f_user": (P2 + "CheckBoxYes4[0]", P2 + "CheckBoxno4[0]"),
    "q6g_mental": (P2 + "CheckBoxYes5[0]", P2 + "CheckBoxno5[0]"),
    "q6h_dishonorable": (P2 + "CheckBoxYes6[0]", P2 + "CheckBoxno6[0]"),
    "q6i_restraining": (P2 + "CheckBoxYes7[0]", P2 + "CheckBoxno7[0]"),
    "q6j_domestic": (P2 + "CheckBoxYes8[0]", P2 + "CheckBoxno8[0]"),
    "q6k_renounced": (P2 + "CheckBoxYes9[0]", P2 + "CheckBoxno9[0]"),
    "q6l_illegal": (P2 + "CheckBoxYes10[0]", P2 + "CheckBoxno10[0]"),
    "q6m1_nonimmigrant": (P2 + "CheckBoxYes11[0]", P2 + "CheckBoxno11[0]"),
}

EXCEPTION_FIELDS = {
    "YES": P2 + "CheckBoxYes12[0]",
    "NO": P2 + "CheckBoxno12[0]",
    "N/A": P2 + "CheckBoxNA[0]",
}

ALIEN_NUMBER_FIELD = P2 + "TextFieldalien[0]"
UPIN_YES_FIELD = P2 + "yes17[0]"
UPIN_NO_FIELD = P2 + "no17[0]"
UPIN_NUMBER_FIELD = P2 + "please17[0]"

CITIZENSHIP_USA_FIELD = P2 + "usacheckbox[0]"
CITIZENSHIP_OTHER_FIELD = P2 + "othercountrycheckbox[0]"
CITIZENSHIP_OTHER_TEXT_FIELD = P2 + "Othercountry[0]"
BIRTH_STATE_FIELD = P2 + "statebirth[0]"
BIRTH_COUNTRY_FIELD = P2 + "statecountry[0]"
UNITED_STATES = "UNITED STATES OF AMERICA"

CERTIFICATION_DATE_FIELD = P2 + "DateField9[0]"


def referenced_field_names() -> list[str]:
    """Every primary field name the mapping tables can emit, in catalog order."""
    names: list[str] = []
    names += FORM_TYPE_FIELDS.values()
    names += [
        APPLICANT_FIELD,
        RESPONSIBLE_PERSON_FIELD,
        TELEPHONE_FIELD,
        EMAIL_FIELD,
        OTHER_NAMES_FIELD,
        SSN_FIELD,
        DOB_FIELD,
    ]
    names += ETHNICITY_FIELDS.values()
    names += RACE_FIELDS.values()
    names += [FIREARM_TYPE_FIELD, MAKER_FIELD, MODEL_FIELD, CALIBER_FIELD, SERIAL_FIELD]
    names += LAW_ENFORCEMENT_FIELDS
    for yes_field, no_field in PROHIBITOR_FIELDS.values():
        names += [yes_field, no_field]
    names += EXCEPTION_FIELDS.values()
    names += [
        ALIEN_NUMBER_FIELD,
        UPIN_YES_FIELD,
        UPIN_NO_FIELD,
        UPIN_NUMBER_FIELD,
        CITIZENSHIP_USA_FIELD,
        CITIZENSHIP_OTHER_FIELD,
        CITIZENSHIP_OTHER_TEXT_FIELD,
        BIRTH_STATE_FIELD,
        BIRTH_COUNTRY_FIELD,
        CERTIFICATION_DATE_FIELD,
    ]
    return names
