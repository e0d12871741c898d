"""
TACF scoring.

Turns a full TACF test (three graded exercises plus anthropometric data)
into per-exercise mentions for one person. This is the caller side of the
mention engine: it computes the age on the test date, asks the engine for
each exercise and treats an exercise that was not administered as "no
mention" rather than a failure.
"""

from datetime import date
from typing import Optional, Union

from loguru import logger

from tacf_tracker.errors import MissingScore
from tacf_tracker.mentions import ExerciseKind, Grade, Sex, age_in_years, classify, parse_sex
from tacf_tracker.schemas import TacfInput, TacfMentions


class IncompleteProfile(ValueError):
    """The person lacks the birth date or sex needed to compute mentions."""


class TacfScorer:
    """
    Computes the mentions of a TACF test for one person.

    Invalid scores and impossible dates propagate as engine errors; only
    missing scores are absorbed into a None mention.
    """

    def __init__(self, birth_date: date, sex: Union[Sex, str]):
        """
        Initialize scorer for a person.

        Args:
            birth_date: Birth date of the evaluated person
            sex: Sex of the evaluated person (Sex or a parseable string)
        """
        self.birth_date = birth_date
        self.sex = parse_sex(sex)

    @classmethod
    def for_person(cls, person) -> "TacfScorer":
        """
        Build a scorer from anything with `birth_date` and `sex` attributes.

        Raises:
            IncompleteProfile: If birth date or sex is missing
        """
        if not person.birth_date or not person.sex:
            raise IncompleteProfile(
                "Incomplete person data (birth date or sex) to compute mentions."
            )
        return cls(person.birth_date, person.sex)

    def age_on(self, test_date: date) -> int:
        return age_in_years(self.birth_date, test_date)

    def score(self, test: TacfInput) -> TacfMentions:
        """
        Compute the mentions of a test.

        Args:
            test: Raw test results

        Returns:
            TacfMentions with None for exercises not administered

        Raises:
            InvalidDateRange: If the test date precedes the birth date
            InvalidScore: If any administered score is malformed
        """
        age = self.age_on(test.test_date)

        mentions = TacfMentions(
            cooper=self._mention(ExerciseKind.COOPER, age, test.cooper_distance),
            abdominal=self._mention(ExerciseKind.ABDOMINAL, age, test.abdominal_reps),
            push_up=self._mention(ExerciseKind.PUSH_UP, age, test.push_up_reps),
        )
        logger.debug(
            f"Scored TACF of {test.test_date} (sex={self.sex}, age={age}): "
            f"cooper={mentions.cooper}, abdominal={mentions.abdominal}, push_up={mentions.push_up}"
        )
        return mentions

    def _mention(self, exercise: ExerciseKind, age: int, raw_score: Optional[float]) -> Optional[Grade]:
        try:
            return classify(exercise, self.sex, age, raw_score)
        except MissingScore:
            return None
