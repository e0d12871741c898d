"""
TFM API Routes

Endpoints for daily training logs.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status
from loguru import logger
from sqlalchemy.orm import Session, joinedload

from tacf_tracker.api.routes.lists import _require_exercise
from tacf_tracker.api.routes.people import _get_person
from tacf_tracker.database import Exercise, TfmLog, get_db_session
from tacf_tracker.schemas import TfmLogInput, TfmLogList, TfmLogRead

router = APIRouter()


def _get_log(db: Session, person_id: int, log_id: int) -> TfmLog:
    log = (
        db.query(TfmLog)
        .filter(TfmLog.id == log_id, TfmLog.person_id == person_id)
        .one_or_none()
    )
    if log is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="TFM log not found or does not belong to this person",
        )
    return log


def _relevant_details(exercise: Exercise, details: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the detail keys the exercise records."""
    kept = {key: value for key, value in details.items() if key in exercise.required_fields}
    dropped = sorted(set(details) - set(kept))
    if dropped:
        logger.debug(f"Ignoring details {dropped} not recorded by {exercise.name}")
    return kept


@router.post(
    "/people/{person_id}/tfm",
    response_model=TfmLogRead,
    status_code=status.HTTP_201_CREATED,
)
def create_tfm(person_id: int, payload: TfmLogInput, db: Session = Depends(get_db_session)) -> TfmLogRead:
    """
    Log a training session.

    Raises:
        HTTPException: 404 if the person does not exist
        HTTPException: 400 if the exercise is not in the catalogue
    """
    _get_person(db, person_id)
    exercise = _require_exercise(db, payload.exercise_id)
    log = TfmLog(
        person_id=person_id,
        exercise_id=exercise.id,
        training_date=payload.training_date,
        perceived_intensity=payload.perceived_intensity,
        details=_relevant_details(exercise, payload.details),
    )
    db.add(log)
    db.commit()
    db.refresh(log)

    logger.info(f"Saved TFM {log.id} ({exercise.name}) for person {person_id}")
    return TfmLogRead.model_validate(log)


@router.get("/people/{person_id}/tfm", response_model=TfmLogList)
def list_tfm(person_id: int, db: Session = Depends(get_db_session)) -> TfmLogList:
    """List a person's training sessions with their exercise names, newest first."""
    _get_person(db, person_id)
    logs = (
        db.query(TfmLog)
        .options(joinedload(TfmLog.exercise))
        .filter(TfmLog.person_id == person_id)
        .order_by(TfmLog.training_date.desc(), TfmLog.id.desc())
        .all()
    )
    return TfmLogList(logs=[TfmLogRead.model_validate(log) for log in logs], count=len(logs))


@router.put("/people/{person_id}/tfm/{log_id}", response_model=TfmLogRead)
def update_tfm(
    person_id: int,
    log_id: int,
    payload: TfmLogInput,
    db: Session = Depends(get_db_session),
) -> TfmLogRead:
    """
    Edit a training session.

    Raises:
        HTTPException: 404 if the log does not belong to the person
        HTTPException: 400 if the exercise is not in the catalogue
    """
    log = _get_log(db, person_id, log_id)
    exercise = _require_exercise(db, payload.exercise_id)
    log.exercise_id = exercise.id
    log.training_date = payload.training_date
    log.perceived_intensity = payload.perceived_intensity
    log.details = _relevant_details(exercise, payload.details)
    db.commit()
    db.refresh(log)

    logger.info(f"Updated TFM {log.id} ({exercise.name}) for person {person_id}")
    return TfmLogRead.model_validate(log)


@router.delete("/people/{person_id}/tfm/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tfm(person_id: int, log_id: int, db: Session = Depends(get_db_session)) -> Response:
    """Delete a training session."""
    log = _get_log(db, person_id, log_id)
    db.delete(log)
    db.commit()

    logger.info(f"Deleted TFM {log_id} of person {person_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
