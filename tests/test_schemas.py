"""
Tests for Pydantic schema validation.

Ensures that schemas properly validate data and enforce constraints.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from tacf_tracker.mentions import Grade, Sex
from tacf_tracker.schemas import (
    ExerciseCreate,
    OrganizationCreate,
    PersonCreate,
    PersonUpdate,
    TacfInput,
    TacfMentions,
    TfmLogInput,
)


@pytest.fixture
def person_data():
    return {
        "name": "Maria Souza",
        "saram": "1234567",
        "email": "maria.souza@fab.mil.br",
        "rank": "2S",
        "birth_date": "1992-04-18",
        "sex": "F",
    }


# Person Schema Tests


def test_person_parses_dates_and_sex(person_data):
    person = PersonCreate(**person_data)

    assert person.birth_date == date(1992, 4, 18)
    assert person.sex == Sex.FEMALE


def test_person_accepts_spelled_out_sex(person_data):
    person_data["sex"] = "Masculino"
    assert PersonCreate(**person_data).sex == Sex.MALE


def test_person_rejects_unknown_sex(person_data):
    """Unknown sex values are rejected, not defaulted to F."""
    person_data["sex"] = "X"
    with pytest.raises(ValidationError):
        PersonCreate(**person_data)


def test_person_birth_date_and_sex_optional(person_data):
    del person_data["birth_date"]
    del person_data["sex"]

    person = PersonCreate(**person_data)

    assert person.birth_date is None
    assert person.sex is None


@pytest.mark.parametrize("saram", ["12AB567", "12", ""])
def test_person_saram_must_be_digits(person_data, saram):
    person_data["saram"] = saram
    with pytest.raises(ValidationError):
        PersonCreate(**person_data)


def test_person_email_format(person_data):
    person_data["email"] = "not-an-email"
    with pytest.raises(ValidationError):
        PersonCreate(**person_data)


def test_person_update_requires_name():
    with pytest.raises(ValidationError):
        PersonUpdate(name="")


# TACF Schema Tests


def test_tacf_input_scores_optional():
    """A test may leave exercises out."""
    test = TacfInput(test_date="2024-05-02", cooper_distance=2400)

    assert test.cooper_distance == 2400
    assert test.abdominal_reps is None
    assert test.push_up_reps is None


def test_tacf_input_keeps_negative_scores_for_the_engine():
    """Score validity is decided by the mention engine, not the schema."""
    test = TacfInput(test_date="2024-05-02", push_up_reps=-3)
    assert test.push_up_reps == -3


def test_tacf_input_height_converted_to_meters():
    test = TacfInput(test_date="2024-05-02", height_cm=178)
    assert test.height_m == pytest.approx(1.78)


def test_tacf_input_height_absent():
    assert TacfInput(test_date="2024-05-02").height_m is None


@pytest.mark.parametrize("field", ["weight", "height_cm", "waist"])
def test_tacf_input_measures_positive(field):
    with pytest.raises(ValidationError):
        TacfInput(test_date="2024-05-02", **{field: 0})


def test_tacf_input_requires_test_date():
    with pytest.raises(ValidationError):
        TacfInput(cooper_distance=2400)


def test_mentions_graded_count():
    mentions = TacfMentions(cooper=Grade.AVERAGE, push_up=Grade.BELOW_MINIMUM)

    assert mentions.graded_count() == 2
    assert mentions.abdominal is None


def test_mentions_serialize_as_codes():
    mentions = TacfMentions(cooper=Grade.WELL_ABOVE_AVERAGE)
    assert mentions.model_dump(mode="json") == {"cooper": "MAC", "abdominal": None, "push_up": None}


# TFM Schema Tests


def test_tfm_log_defaults():
    log = TfmLogInput(training_date="2024-06-01", exercise_id=1)

    assert log.details == {}
    assert log.perceived_intensity is None


@pytest.mark.parametrize("intensity", [0, 11])
def test_tfm_intensity_range(intensity):
    with pytest.raises(ValidationError):
        TfmLogInput(training_date="2024-06-01", exercise_id=1, perceived_intensity=intensity)


def test_tfm_log_requires_exercise_id():
    with pytest.raises(ValidationError):
        TfmLogInput(training_date="2024-06-01")


# Reference List Schema Tests


def test_exercise_fields_default_empty():
    assert ExerciseCreate(name="Yoga").required_fields == []


def test_exercise_fields_must_not_repeat():
    with pytest.raises(ValidationError, match="must not repeat"):
        ExerciseCreate(name="Running", required_fields=["distance_km", "distance_km"])


def test_organization_group_optional():
    organization = OrganizationCreate(acronym="BAGL", name="Base Aérea do Galeão")
    assert organization.group is None
