"""
Mention API Routes

Stateless endpoints exposing the mention engine and its reference table.
"""

from typing import Optional

from fastapi import APIRouter

from tacf_tracker.api.models.requests import ClassifyRequest
from tacf_tracker.api.models.responses import ClassifyResponse, ThresholdRow, ThresholdTableResponse
from tacf_tracker.mentions import MENTION_TABLE, ExerciseKind, Sex, age_in_years, explain

router = APIRouter()


@router.post("/mentions/classify", response_model=ClassifyResponse)
def classify_score(request: ClassifyRequest) -> ClassifyResponse:
    """
    Classify a single raw score.

    The age is taken from the request, or computed from birth and test
    dates when omitted. Engine errors (missing or invalid score, test date
    before birth date) are turned into 400 responses by the application's
    exception handler.

    Example:
        POST /api/mentions/classify
        {"exercise": "cooper", "sex": "M", "age": 25, "raw_score": 2831}

        Response:
        {"mention": "MAC", "decision": {...}}
    """
    age = request.age
    if age is None:
        age = age_in_years(request.birth_date, request.test_date)

    decision = explain(request.exercise, request.sex, age, request.raw_score)
    return ClassifyResponse(mention=decision.grade.value, decision=decision)


@router.get("/mentions/table", response_model=ThresholdTableResponse)
def get_mention_table(
    exercise: Optional[ExerciseKind] = None,
    sex: Optional[Sex] = None,
) -> ThresholdTableResponse:
    """
    List the mention thresholds, optionally filtered by exercise and sex.

    Each row gives the inclusive upper bound of MAB, ABN, NOR and ACN; any
    score above the last bound is MAC.
    """
    rows = [
        ThresholdRow(
            exercise=row_exercise,
            sex=row_sex,
            bracket=bracket,
            unit=row_exercise.unit,
            thresholds=thresholds,
        )
        for (row_exercise, row_sex, bracket), thresholds in MENTION_TABLE.items()
        if (exercise is None or row_exercise == exercise) and (sex is None or row_sex == sex)
    ]
    return ThresholdTableResponse(rows=rows, count=len(rows))
