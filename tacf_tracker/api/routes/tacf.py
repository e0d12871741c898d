"""
TACF API Routes

Endpoints for saving, listing, editing and deleting TACF test records.
Mentions are computed on every save from the person's stored birth date
and sex.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from loguru import logger
from sqlalchemy.orm import Session

from tacf_tracker.api.models.responses import TacfListResponse, TacfSaveResponse
from tacf_tracker.api.routes.people import _get_person
from tacf_tracker.database import TacfLog, get_db_session
from tacf_tracker.schemas import TacfInput, TacfMentions, TacfRecordRead
from tacf_tracker.scoring import TacfScorer

router = APIRouter()


def _get_record(db: Session, person_id: int, record_id: int) -> TacfLog:
    record = (
        db.query(TacfLog)
        .filter(TacfLog.id == record_id, TacfLog.person_id == person_id)
        .one_or_none()
    )
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="TACF record not found or does not belong to this person",
        )
    return record


def _apply(record: TacfLog, payload: TacfInput, mentions: TacfMentions) -> None:
    """Copy raw results and computed mentions onto a record."""
    record.test_date = payload.test_date
    record.cooper_distance = payload.cooper_distance
    record.abdominal_reps = payload.abdominal_reps
    record.push_up_reps = payload.push_up_reps
    record.pull_up_reps = payload.pull_up_reps
    record.cooper_mention = mentions.cooper.value if mentions.cooper else None
    record.abdominal_mention = mentions.abdominal.value if mentions.abdominal else None
    record.push_up_mention = mentions.push_up.value if mentions.push_up else None
    record.weight = payload.weight
    record.height = payload.height_m
    record.waist = payload.waist


@router.post(
    "/people/{person_id}/tacf",
    response_model=TacfSaveResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_tacf(
    person_id: int,
    payload: TacfInput,
    db: Session = Depends(get_db_session),
) -> TacfSaveResponse:
    """
    Save a TACF test and its mentions.

    Exercises with a null score are stored without a mention.

    Raises:
        HTTPException: 404 if the person does not exist
    """
    person = _get_person(db, person_id)
    mentions = TacfScorer.for_person(person).score(payload)

    record = TacfLog(person_id=person.id)
    _apply(record, payload, mentions)
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"Saved TACF {record.id} for person {person.id} ({mentions.graded_count()} graded)")
    return TacfSaveResponse(
        message="TACF saved",
        record=TacfRecordRead.model_validate(record),
        mentions=mentions,
    )


@router.get("/people/{person_id}/tacf", response_model=TacfListResponse)
def list_tacf(person_id: int, db: Session = Depends(get_db_session)) -> TacfListResponse:
    """List a person's TACF records, newest first."""
    _get_person(db, person_id)
    records = (
        db.query(TacfLog)
        .filter(TacfLog.person_id == person_id)
        .order_by(TacfLog.test_date.desc(), TacfLog.id.desc())
        .all()
    )
    return TacfListResponse(
        records=[TacfRecordRead.model_validate(record) for record in records],
        count=len(records),
    )


@router.put("/people/{person_id}/tacf/{record_id}", response_model=TacfSaveResponse)
def update_tacf(
    person_id: int,
    record_id: int,
    payload: TacfInput,
    db: Session = Depends(get_db_session),
) -> TacfSaveResponse:
    """Edit a TACF record and recompute its mentions."""
    person = _get_person(db, person_id)
    record = _get_record(db, person_id, record_id)
    mentions = TacfScorer.for_person(person).score(payload)

    _apply(record, payload, mentions)
    db.commit()
    db.refresh(record)

    logger.info(f"Updated TACF {record.id} for person {person.id}")
    return TacfSaveResponse(
        message="TACF updated",
        record=TacfRecordRead.model_validate(record),
        mentions=mentions,
    )


@router.delete("/people/{person_id}/tacf/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tacf(person_id: int, record_id: int, db: Session = Depends(get_db_session)) -> Response:
    """Delete a TACF record."""
    record = _get_record(db, person_id, record_id)
    db.delete(record)
    db.commit()

    logger.info(f"Deleted TACF {record_id} of person {person_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
