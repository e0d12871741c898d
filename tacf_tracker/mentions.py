"""
TACF mention classification engine.

Maps a raw physical test result (Cooper distance in meters, or a repetition
count) to the official mention of ICA 54-1 (2011), Annex H. The mention
depends on the exercise, the sex of the evaluated person and their age
bracket on the test date.

Everything here is pure: no I/O, no logging, no mutable module state. The
threshold table is built once at import and exposed read-only.

Pipeline:
    age_in_years -> age_bracket -> lookup -> classify
"""

import math
import numbers
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tacf_tracker.errors import (
    InvalidAge,
    InvalidDateRange,
    InvalidScore,
    MissingScore,
    UnknownCombination,
)


# ============================================================================
# Enumerations
# ============================================================================

class ExerciseKind(str, Enum):
    """Graded TACF exercises."""
    COOPER = "cooper"
    ABDOMINAL = "abdominal"
    PUSH_UP = "push_up"

    def __str__(self) -> str:
        return self.value

    @property
    def unit(self) -> str:
        """Unit of the raw score."""
        return "m" if self is ExerciseKind.COOPER else "reps"


class Sex(str, Enum):
    """Top-level partition of the threshold table."""
    MALE = "M"
    FEMALE = "F"

    def __str__(self) -> str:
        return self.value


class AgeBracket(str, Enum):
    """Regulation age ranges used to select the threshold row."""
    UP_TO_29 = "<=29"
    FROM_30_TO_39 = "30-39"
    FROM_40_TO_49 = "40-49"
    FROM_50_TO_59 = "50-59"
    FROM_60 = ">=60"

    def __str__(self) -> str:
        return self.value

    @property
    def lower(self) -> int:
        """Inclusive lower bound in years."""
        return _BRACKET_RANGES[self][0]

    @property
    def upper(self) -> Optional[int]:
        """Inclusive upper bound in years (None for the open-ended bracket)."""
        return _BRACKET_RANGES[self][1]


class Grade(str, Enum):
    """Mention, ordered from worst to best."""
    BELOW_MINIMUM = "MAB"
    BELOW_AVERAGE = "ABN"
    AVERAGE = "NOR"
    ABOVE_AVERAGE = "ACN"
    WELL_ABOVE_AVERAGE = "MAC"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        """Position in the worst-to-best ordering (0 = MAB, 4 = MAC)."""
        return list(Grade).index(self)


_BRACKET_RANGES: Dict[AgeBracket, Tuple[int, Optional[int]]] = {
    AgeBracket.UP_TO_29: (0, 29),
    AgeBracket.FROM_30_TO_39: (30, 39),
    AgeBracket.FROM_40_TO_49: (40, 49),
    AgeBracket.FROM_50_TO_59: (50, 59),
    AgeBracket.FROM_60: (60, None),
}


# ============================================================================
# Value types
# ============================================================================

class GradeThresholds(BaseModel):
    """
    Inclusive upper bounds of the four lowest mentions for one table row.

    A score above `above_average` is MAC.
    """

    model_config = ConfigDict(frozen=True)

    below_minimum: int = Field(..., ge=0, description="Upper bound of MAB")
    below_average: int = Field(..., ge=0, description="Upper bound of ABN")
    average: int = Field(..., ge=0, description="Upper bound of NOR")
    above_average: int = Field(..., ge=0, description="Upper bound of ACN")

    @classmethod
    def of(cls, b0: int, b1: int, b2: int, b3: int) -> "GradeThresholds":
        return cls(below_minimum=b0, below_average=b1, average=b2, above_average=b3)

    @model_validator(mode="after")
    def validate_ascending(self):
        """Boundaries must be non-decreasing."""
        bounds = self.as_tuple()
        if any(lo > hi for lo, hi in zip(bounds, bounds[1:])):
            raise ValueError(f"Threshold boundaries must be non-decreasing, got {bounds}")
        return self

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.below_minimum, self.below_average, self.average, self.above_average)

    def grade_for(self, score: float) -> Grade:
        """Compare a validated score against the bounds, inclusive upper."""
        if score <= self.below_minimum:
            return Grade.BELOW_MINIMUM
        if score <= self.below_average:
            return Grade.BELOW_AVERAGE
        if score <= self.average:
            return Grade.AVERAGE
        if score <= self.above_average:
            return Grade.ABOVE_AVERAGE
        return Grade.WELL_ABOVE_AVERAGE


class MentionDecision(BaseModel):
    """Classification outcome together with the row that produced it."""

    exercise: ExerciseKind
    sex: Sex
    age: int = Field(..., ge=0)
    bracket: AgeBracket
    thresholds: GradeThresholds
    raw_score: float
    grade: Grade


# ============================================================================
# Threshold table (ICA 54-1, Annex H)
# ============================================================================

_t = GradeThresholds.of
_E, _S, _B = ExerciseKind, Sex, AgeBracket

MENTION_TABLE: Mapping[Tuple[ExerciseKind, Sex, AgeBracket], GradeThresholds] = MappingProxyType({
    # Male, Cooper 12 min run (OIC 05), meters
    (_E.COOPER, _S.MALE, _B.UP_TO_29): _t(1880, 2070, 2590, 2830),
    (_E.COOPER, _S.MALE, _B.FROM_30_TO_39): _t(1800, 2040, 2490, 2720),
    (_E.COOPER, _S.MALE, _B.FROM_40_TO_49): _t(1740, 1950, 2410, 2660),
    (_E.COOPER, _S.MALE, _B.FROM_50_TO_59): _t(1550, 1810, 2270, 2540),
    (_E.COOPER, _S.MALE, _B.FROM_60): _t(1280, 1570, 2070, 2490),
    # Male, abdominal (OIC 04), reps
    (_E.ABDOMINAL, _S.MALE, _B.UP_TO_29): _t(20, 29, 41, 49),
    (_E.ABDOMINAL, _S.MALE, _B.FROM_30_TO_39): _t(14, 22, 34, 42),
    (_E.ABDOMINAL, _S.MALE, _B.FROM_40_TO_49): _t(9, 18, 30, 36),
    (_E.ABDOMINAL, _S.MALE, _B.FROM_50_TO_59): _t(7, 14, 25, 34),
    (_E.ABDOMINAL, _S.MALE, _B.FROM_60): _t(2, 8, 21, 26),
    # Male, push-up (OIC 03), reps
    (_E.PUSH_UP, _S.MALE, _B.UP_TO_29): _t(9, 17, 34, 48),
    (_E.PUSH_UP, _S.MALE, _B.FROM_30_TO_39): _t(5, 13, 27, 36),
    (_E.PUSH_UP, _S.MALE, _B.FROM_40_TO_49): _t(4, 9, 21, 30),
    (_E.PUSH_UP, _S.MALE, _B.FROM_50_TO_59): _t(2, 6, 17, 28),
    (_E.PUSH_UP, _S.MALE, _B.FROM_60): _t(1, 5, 16, 25),
    # Female, Cooper 12 min run (OIC 10), meters
    (_E.COOPER, _S.FEMALE, _B.UP_TO_29): _t(1420, 1730, 2120, 2330),
    (_E.COOPER, _S.FEMALE, _B.FROM_30_TO_39): _t(1410, 1640, 2060, 2240),
    (_E.COOPER, _S.FEMALE, _B.FROM_40_TO_49): _t(1330, 1540, 1960, 2160),
    (_E.COOPER, _S.FEMALE, _B.FROM_50_TO_59): _t(1280, 1450, 1850, 2090),
    (_E.COOPER, _S.FEMALE, _B.FROM_60): _t(1200, 1350, 1710, 1900),
    # Female, abdominal (OIC 09), reps. MAB bound is 0 from 40 up.
    (_E.ABDOMINAL, _S.FEMALE, _B.UP_TO_29): _t(11, 21, 34, 43),
    (_E.ABDOMINAL, _S.FEMALE, _B.FROM_30_TO_39): _t(6, 15, 27, 34),
    (_E.ABDOMINAL, _S.FEMALE, _B.FROM_40_TO_49): _t(0, 9, 23, 28),
    (_E.ABDOMINAL, _S.FEMALE, _B.FROM_50_TO_59): _t(0, 4, 17, 26),
    (_E.ABDOMINAL, _S.FEMALE, _B.FROM_60): _t(0, 3, 15, 20),
    # Female, push-up (OIC 08), reps. MAB bound is 0 from 50 up.
    (_E.PUSH_UP, _S.FEMALE, _B.UP_TO_29): _t(2, 10, 25, 37),
    (_E.PUSH_UP, _S.FEMALE, _B.FROM_30_TO_39): _t(1, 9, 24, 36),
    (_E.PUSH_UP, _S.FEMALE, _B.FROM_40_TO_49): _t(1, 6, 22, 32),
    (_E.PUSH_UP, _S.FEMALE, _B.FROM_50_TO_59): _t(0, 6, 17, 30),
    (_E.PUSH_UP, _S.FEMALE, _B.FROM_60): _t(0, 3, 15, 29),
})

del _t, _E, _S, _B


# ============================================================================
# Engine
# ============================================================================

DateLike = Union[date, datetime, str]

_SEX_ALIASES = {
    "M": Sex.MALE,
    "MALE": Sex.MALE,
    "MASCULINO": Sex.MALE,
    "F": Sex.FEMALE,
    "FEMALE": Sex.FEMALE,
    "FEMININO": Sex.FEMALE,
}


def parse_sex(value: Union[Sex, str]) -> Sex:
    """
    Parse a stored or user-supplied sex value.

    Raises:
        ValueError: If the value is not a recognized sex
    """
    if isinstance(value, Sex):
        return value
    if isinstance(value, str):
        sex = _SEX_ALIASES.get(value.strip().upper())
        if sex is not None:
            return sex
    raise ValueError(f"Unrecognized sex: {value!r}")


def _as_calendar_date(value: DateLike) -> date:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        # Wall-clock date; the offset is discarded, never applied
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def age_in_years(birth_date: DateLike, as_of_date: DateLike) -> int:
    """
    Completed years between two calendar dates.

    The age increments on the birthday itself.

    Raises:
        InvalidDateRange: If as_of_date precedes birth_date
    """
    birth = _as_calendar_date(birth_date)
    as_of = _as_calendar_date(as_of_date)
    if as_of < birth:
        raise InvalidDateRange(birth, as_of)

    age = as_of.year - birth.year
    if (as_of.month, as_of.day) < (birth.month, birth.day):
        age -= 1
    return age


def age_bracket(age: int) -> AgeBracket:
    """
    Resolve the age bracket for an age in years.

    Raises:
        InvalidAge: If age is negative or not an integer
    """
    if isinstance(age, bool) or not isinstance(age, int) or age < 0:
        raise InvalidAge(age)

    for bracket, (lower, upper) in _BRACKET_RANGES.items():
        if age >= lower and (upper is None or age <= upper):
            return bracket
    raise InvalidAge(age)


def lookup(exercise: ExerciseKind, sex: Sex, bracket: AgeBracket) -> GradeThresholds:
    """
    Fetch the threshold row for a triple.

    Raises:
        UnknownCombination: If the table has no such row
    """
    try:
        return MENTION_TABLE[(exercise, sex, bracket)]
    except KeyError:
        raise UnknownCombination(exercise, sex, bracket) from None


def _validate_score(exercise: ExerciseKind, raw_score) -> float:
    if raw_score is None:
        raise MissingScore(exercise)
    if isinstance(raw_score, bool) or not isinstance(raw_score, numbers.Real):
        raise InvalidScore(exercise, raw_score)
    if math.isnan(raw_score) or math.isinf(raw_score) or raw_score < 0:
        raise InvalidScore(exercise, raw_score)
    return float(raw_score)


def explain(
    exercise: ExerciseKind,
    sex: Sex,
    age: int,
    raw_score: Optional[float],
) -> MentionDecision:
    """
    Classify a score and return the decision with the row that produced it.

    Raises:
        MissingScore: If raw_score is None (exercise not administered)
        InvalidScore: If raw_score is negative, NaN, infinite or non-numeric
        InvalidAge: If age is negative
        UnknownCombination: If the table has no row for the triple
        ValueError: If exercise or sex is not a valid enumeration value
    """
    exercise = ExerciseKind(exercise)
    sex = Sex(sex)
    score = _validate_score(exercise, raw_score)

    bracket = age_bracket(age)
    thresholds = lookup(exercise, sex, bracket)

    return MentionDecision(
        exercise=exercise,
        sex=sex,
        age=age,
        bracket=bracket,
        thresholds=thresholds,
        raw_score=score,
        grade=thresholds.grade_for(score),
    )


def classify(
    exercise: ExerciseKind,
    sex: Sex,
    age: int,
    raw_score: Optional[float],
) -> Grade:
    """Mention for a raw score. See `explain` for the errors raised."""
    return explain(exercise, sex, age, raw_score).grade
