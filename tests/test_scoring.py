"""
Tests for TACF scoring.

Covers:
- Mentions computed from birth date, sex and test date
- Missing exercises kept as None mentions
- Engine errors propagated
"""

from datetime import date
from types import SimpleNamespace

import pytest

from tacf_tracker.errors import InvalidDateRange, InvalidScore
from tacf_tracker.mentions import Grade, Sex
from tacf_tracker.schemas import TacfInput
from tacf_tracker.scoring import IncompleteProfile, TacfScorer


@pytest.fixture
def male_scorer():
    """Male born 1995-05-10 (29 on 2024-05-10)."""
    return TacfScorer(date(1995, 5, 10), Sex.MALE)


@pytest.fixture
def female_scorer():
    """Female born 1980-01-15 (44 in 2024)."""
    return TacfScorer(date(1980, 1, 15), "F")


def test_full_test_scored(male_scorer):
    test = TacfInput(
        test_date="2024-05-10",
        cooper_distance=2831,
        abdominal_reps=41,
        push_up_reps=9,
    )

    mentions = male_scorer.score(test)

    assert mentions.cooper == Grade.WELL_ABOVE_AVERAGE
    assert mentions.abdominal == Grade.AVERAGE
    assert mentions.push_up == Grade.BELOW_MINIMUM
    assert mentions.graded_count() == 3


def test_missing_exercises_have_no_mention(male_scorer):
    """A partial test is a valid result: absent scores get no mention."""
    test = TacfInput(test_date="2024-05-10", cooper_distance=1881)

    mentions = male_scorer.score(test)

    assert mentions.cooper == Grade.BELOW_AVERAGE
    assert mentions.abdominal is None
    assert mentions.push_up is None


def test_zero_reps_graded(female_scorer):
    """Zero is a real score and differs from not administered."""
    test = TacfInput(test_date="2024-03-01", abdominal_reps=0)

    mentions = female_scorer.score(test)

    assert mentions.abdominal == Grade.BELOW_MINIMUM
    assert mentions.push_up is None


def test_age_uses_test_date(male_scorer):
    """The bracket follows the age on the test date, not today."""
    assert male_scorer.age_on(date(2024, 5, 9)) == 28
    assert male_scorer.age_on(date(2025, 5, 10)) == 30

    # 2060 m: ABN under 30, NOR from 30
    before = male_scorer.score(TacfInput(test_date="2025-05-09", cooper_distance=2060))
    after = male_scorer.score(TacfInput(test_date="2025-05-10", cooper_distance=2060))

    assert before.cooper == Grade.BELOW_AVERAGE
    assert after.cooper == Grade.AVERAGE


def test_invalid_score_propagates(male_scorer):
    test = TacfInput(test_date="2024-05-10", cooper_distance=2400, push_up_reps=-1)
    with pytest.raises(InvalidScore):
        male_scorer.score(test)


def test_test_before_birth_propagates(male_scorer):
    with pytest.raises(InvalidDateRange):
        male_scorer.score(TacfInput(test_date="1990-01-01", cooper_distance=2400))


def test_scorer_parses_sex_strings():
    assert TacfScorer(date(1990, 1, 1), "feminino").sex == Sex.FEMALE


def test_scorer_rejects_unknown_sex():
    with pytest.raises(ValueError):
        TacfScorer(date(1990, 1, 1), "X")


def test_for_person():
    person = SimpleNamespace(birth_date=date(1990, 1, 1), sex="M")
    scorer = TacfScorer.for_person(person)

    assert scorer.sex == Sex.MALE
    assert scorer.birth_date == date(1990, 1, 1)


@pytest.mark.parametrize(
    "birth_date,sex",
    [(None, "M"), (date(1990, 1, 1), None), (None, None)],
)
def test_for_person_incomplete(birth_date, sex):
    with pytest.raises(IncompleteProfile):
        TacfScorer.for_person(SimpleNamespace(birth_date=birth_date, sex=sex))
