"""
API Request Models

Pydantic models for API request validation. Person, TACF and TFM payloads
reuse the domain schemas directly.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tacf_tracker.mentions import ExerciseKind, Sex, parse_sex


class ClassifyRequest(BaseModel):
    """
    Request model for a stateless mention classification.

    Either `age` or both `birth_date` and `test_date` must be given.
    """

    exercise: ExerciseKind = Field(..., description="cooper, abdominal or push_up")
    sex: Sex = Field(..., description="M or F")
    raw_score: Optional[float] = Field(
        None, description="Distance in meters or repetitions; null if not administered"
    )
    age: Optional[int] = Field(None, description="Age in completed years on the test date")
    birth_date: Optional[date] = Field(None, description="Birth date (used when age is omitted)")
    test_date: Optional[date] = Field(None, description="Test date (used when age is omitted)")

    @field_validator("sex", mode="before")
    @classmethod
    def parse_sex_value(cls, value):
        return parse_sex(value)

    @model_validator(mode="after")
    def validate_age_source(self):
        """Require an explicit age or the two dates to derive it."""
        if self.age is None and (self.birth_date is None or self.test_date is None):
            raise ValueError("Provide either 'age' or both 'birth_date' and 'test_date'")
        return self
