"""
Pydantic models for TACF tracker data validation.

This module defines the data structures exchanged with the API and CLI:
- Reference lists: organizational units and the TFM exercise catalogue
- People: evaluated personnel (birth date and sex drive the mention tables)
- TACF records: physical test results with their computed mentions
- TFM logs: ad-hoc daily training sessions
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tacf_tracker.mentions import Grade, Sex, parse_sex


# ============================================================================
# Reference lists
# ============================================================================


class OrganizationCreate(BaseModel):
    """Organizational unit to register."""

    acronym: str = Field(..., min_length=1, description="Short designation (sigla), e.g. BAGL")
    name: str = Field(..., min_length=1, description="Full name")
    group: Optional[str] = Field(None, description="Regional grouping, e.g. GUARNAE-RJ")


class OrganizationRead(OrganizationCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


class ExerciseCreate(BaseModel):
    """TFM catalogue entry and the detail fields its logs record."""

    name: str = Field(..., min_length=1, description="Display name")
    required_fields: List[str] = Field(
        default_factory=list,
        description="Detail keys kept on a log of this exercise, e.g. ['distance_km', 'duration_min']",
    )

    @field_validator("required_fields")
    @classmethod
    def unique_fields(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("required_fields must not repeat")
        return value


class ExerciseRead(ExerciseCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


# ============================================================================
# People
# ============================================================================


class PersonBase(BaseModel):
    """Fields shared by every person representation."""

    name: str = Field(..., min_length=1, description="Full name")
    saram: str = Field(
        ...,
        pattern=r"^\d{5,10}$",
        description="Service number (SARAM), digits only",
    )
    email: str = Field(
        ...,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Contact e-mail",
    )
    rank: Optional[str] = Field(None, description="Military rank (posto/graduação)")
    birth_date: Optional[date] = Field(None, description="Birth date, used to compute age on test date")
    sex: Optional[Sex] = Field(None, description="M or F; selects the mention table")
    organization_id: Optional[int] = Field(None, description="Organizational unit the person belongs to")

    @field_validator("sex", mode="before")
    @classmethod
    def parse_sex_value(cls, value):
        """Accept M/F and their spelled-out forms, reject anything else."""
        if value is None:
            return None
        return parse_sex(value)


class PersonCreate(PersonBase):
    """Payload for registering a person."""


class PersonUpdate(BaseModel):
    """
    Editable person fields.

    SARAM and e-mail are identity fields and cannot be changed here.
    """

    name: str = Field(..., min_length=1)
    rank: Optional[str] = None
    birth_date: Optional[date] = None
    sex: Optional[Sex] = None
    organization_id: Optional[int] = None

    @field_validator("sex", mode="before")
    @classmethod
    def parse_sex_value(cls, value):
        if value is None:
            return None
        return parse_sex(value)


class PersonRead(PersonBase):
    """Person as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int


# ============================================================================
# TACF
# ============================================================================


class TacfInput(BaseModel):
    """
    Raw TACF test results as entered by the evaluator.

    Scores are left unconstrained here; the mention engine is the single
    place that decides whether a score is valid. A null score means the
    exercise was not administered.
    """

    test_date: date = Field(..., description="Date the test was performed")
    cooper_distance: Optional[float] = Field(None, description="Cooper 12 min run distance in meters")
    abdominal_reps: Optional[float] = Field(None, description="Abdominal repetitions")
    push_up_reps: Optional[float] = Field(None, description="Push-up repetitions")
    pull_up_reps: Optional[int] = Field(None, ge=0, description="Pull-up repetitions (recorded, not graded)")
    weight: Optional[float] = Field(None, gt=0, description="Body weight in kg")
    height_cm: Optional[float] = Field(None, gt=0, description="Height in centimeters")
    waist: Optional[float] = Field(None, gt=0, description="Waist circumference in cm")

    @property
    def height_m(self) -> Optional[float]:
        """Height converted to meters, as stored."""
        if self.height_cm is None:
            return None
        return self.height_cm / 100


class TacfSubmission(TacfInput):
    """TACF results together with the profile needed to grade them."""

    birth_date: date = Field(..., description="Birth date as YYYY-MM-DD")
    sex: Sex = Field(..., description="M or F")

    @field_validator("birth_date", mode="before")
    @classmethod
    def birth_date_is_calendar_date(cls, value):
        """Numbers would otherwise be read as Unix timestamps."""
        if not isinstance(value, (str, date)):
            raise ValueError("birth_date must be a YYYY-MM-DD string")
        return value

    @field_validator("sex", mode="before")
    @classmethod
    def parse_sex_value(cls, value):
        return parse_sex(value)


class TacfMentions(BaseModel):
    """Mentions for the graded exercises. None means not administered."""

    cooper: Optional[Grade] = None
    abdominal: Optional[Grade] = None
    push_up: Optional[Grade] = None

    def graded_count(self) -> int:
        return sum(1 for grade in (self.cooper, self.abdominal, self.push_up) if grade is not None)


class TacfRecordRead(BaseModel):
    """Stored TACF record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    person_id: int
    test_date: date
    cooper_distance: Optional[float] = None
    abdominal_reps: Optional[float] = None
    push_up_reps: Optional[float] = None
    pull_up_reps: Optional[int] = None
    cooper_mention: Optional[Grade] = None
    abdominal_mention: Optional[Grade] = None
    push_up_mention: Optional[Grade] = None
    weight: Optional[float] = None
    height: Optional[float] = Field(None, description="Height in meters")
    waist: Optional[float] = None


class HistoryPoint(BaseModel):
    """One point of a person's evolution chart."""

    test_date: date
    weight: Optional[float] = None
    cooper: Optional[float] = None
    push_up: Optional[float] = None
    pull_up: Optional[int] = None


# ============================================================================
# TFM
# ============================================================================


class TfmLogInput(BaseModel):
    """A logged training session."""

    training_date: date = Field(..., description="Date of the session")
    exercise_id: int = Field(..., description="Catalogue exercise performed")
    perceived_intensity: Optional[int] = Field(
        None, ge=1, le=10, description="Perceived exertion on a 1-10 scale"
    )
    details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Session details keyed by the exercise's fields, e.g. {'distance_km': 5, 'duration_min': 30}",
    )


class TfmLogRead(TfmLogInput):
    """Stored TFM log."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    person_id: int
    exercise_name: str


class TfmLogList(BaseModel):
    logs: List[TfmLogRead]
    count: int
