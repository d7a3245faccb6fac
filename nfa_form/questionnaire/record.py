"""Canonical answer record for the NFA responsible person questionnaire."""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

YES = "YES"
NO = "NO"
NOT_APPLICABLE = "N/A"
OTHER = "OTHER"
USA = "USA"

FormType = Literal["ATF FORM 1", "ATF FORM 4", "ATF FORM 5"]
Ethnicity = Literal["HISPANIC OR LATINO", "NOT HISPANIC OR LATINO"]
Race = Literal[
    "AMERICAN INDIAN OR ALASKA NATIVE",
    "ASIAN",
    "BLACK OR AFRICAN AMERICAN",
    "NATIVE HAWAIIAN OR OTHER PACIFIC ISLANDER",
    "WHITE",
]
FirearmType = Literal[
    "MACHINEGUN",
    "SHORT-BARRELED RIFLE",
    "SHORT-BARRELED SHOTGUN",
    "SILENCER",
    "DESTRUCTIVE DEVICE",
    "ANY OTHER WEAPON",
    "OTHER",
]
YesNo = Literal["YES", "NO"]
YesNoNotApplicable = Literal["YES", "NO", "N/A"]
Country = Literal["USA", "OTHER"]

SAME_AS_KEY = "q3a_sameAs2"
CERTIFICATION_DATE_KEY = "certificationDate"
DATE_KEYS = ("q3g_dob", CERTIFICATION_DATE_KEY)
TEXT_KEYS = (
    "q2_fullName",
    "q2_address",
    "q3a_fullName",
    "q3a_homeAddress",
    "q3b_telephone",
    "q3c_email",
    "q3d_otherNames",
    "q3f_ssn",
    "q4a_firearmType_other",
    "q4b_name",
    "q4b_address",
    "q4c_model",
    "q4d_caliber",
    "q4e_serial",
    "q5_agencyName",
    "q5_officialName",
    "q5_officialTitle",
    "q5_address",
    "q7_alienNumber",
    "q8_upinNumber",
    "q9a_citizenship_other",
    "q9b_birthState",
    "q9c_birthCountry_other",
)


class AnswerRecord(BaseModel):
    """Typed snapshot of every questionnaire answer.

    A field left at ``None`` was not answered. Field declaration order is the
    canonical key order used when the record is serialized.

    ``q3a_sameAs2`` is three-state: ``None`` (unset, the responsible person's
    address follows question 2), ``False`` (explicitly not the same) and
    ``True``. Controls only ever record ``False``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    q1_formType: FormType | None = None

    q2_fullName: str | None = None
    q2_address: str | None = None

    q3a_fullName: str | None = None
    q3a_homeAddress: str | None = None
    q3a_sameAs2: bool | None = None
    q3b_telephone: str | None = None
    q3c_email: str | None = None
    q3d_otherNames: str | None = None
    q3f_ssn: str | None = None
    q3g_dob: date | None = None
    q3h_ethnicity: Ethnicity | None = None
    q3i_race: Race | None = None

    q4a_firearmType: FirearmType | None = None
    q4a_firearmType_other: str | None = None
    q4b_name: str | None = None
    q4b_address: str | None = None
    q4c_model: str | None = None
    q4d_caliber: str | None = None
    q4e_serial: str | None = None

    q5_agencyName: str | None = None
    q5_officialName: str | None = None
    q5_officialTitle: str | None = None
    q5_address: str | None = None

    q6a_intent: YesNo | None = None
    q6b_sell: YesNo | None = None
    q6c_indictment: YesNo | None = None
    q6d_convicted: YesNo | None = None
    q6e_fugitive: YesNo | None = None
    q6f_user: YesNo | None = None
    q6g_mental: YesNo | None = None
    q6h_dishonorable: YesNo | None = None
    q6i_restraining: YesNo | None = None
    q6j_domestic: YesNo | None = None
    q6k_renounced: YesNo | None = None
    q6l_illegal: YesNo | None = None
    q6m1_nonimmigrant: YesNo | None = None
    q6m2_exception: YesNoNotApplicable | None = None

    q7_alienNumber: str | None = None

    q8_hasUpin: YesNo | None = None
    q8_upinNumber: str | None = None

    q9a_citizenship: list[Country] | None = None
    q9a_citizenship_other: str | None = None
    q9b_birthState: str | None = None
    q9c_birthCountry: Country | None = None
    q9c_birthCountry_other: str | None = None

    certificationDate: date | None = None

    @field_validator(*TEXT_KEYS)
    @classmethod
    def _uppercase_text(cls, value: str | None) -> str | None:
        return value.upper() if value is not None else None

    @field_validator("q9a_citizenship", mode="before")
    @classmethod
    def _wrap_single_citizenship(cls, value: Any) -> Any:
        # Older tokens stored a lone checked value as a plain string.
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("q9a_citizenship")
    @classmethod
    def _non_empty_citizenship(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        if not value:
            raise ValueError("q9a_citizenship must contain at least one choice")
        return list(dict.fromkeys(value))

    @property
    def follows_applicant_address(self) -> bool:
        """True unless the same-as-question-2 flag was explicitly cleared."""
        return self.q3a_sameAs2 is not False

    def as_dict(self) -> dict[str, Any]:
        """Return answered keys only, JSON-ready, in canonical order."""
        return self.model_dump(mode="json", exclude_none=True)

    def is_empty(self) -> bool:
        return not self.as_dict()


QUESTION_KEYS: tuple[str, ...] = tuple(AnswerRecord.model_fields)
