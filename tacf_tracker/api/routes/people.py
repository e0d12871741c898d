"""
People API Routes

Endpoints for registering evaluated personnel and reading their history.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tacf_tracker.api.models.responses import HistoryResponse
from tacf_tracker.api.routes.lists import _require_organization
from tacf_tracker.database import Person, TacfLog, get_db_session
from tacf_tracker.schemas import HistoryPoint, PersonCreate, PersonRead, PersonUpdate

router = APIRouter()


def _get_person(db: Session, person_id: int) -> Person:
    """
    Fetch a person by ID.

    Raises:
        HTTPException: 404 if the person does not exist
    """
    person = db.get(Person, person_id)
    if person is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Person {person_id} not found",
        )
    return person


@router.post("/people", response_model=PersonRead, status_code=status.HTTP_201_CREATED)
def create_person(payload: PersonCreate, db: Session = Depends(get_db_session)) -> PersonRead:
    """
    Register a person.

    Raises:
        HTTPException: 400 if the organization does not exist
        HTTPException: 409 if the SARAM or e-mail is already registered
    """
    _require_organization(db, payload.organization_id)
    person = Person(
        saram=payload.saram,
        email=payload.email,
        name=payload.name,
        rank=payload.rank,
        birth_date=payload.birth_date,
        sex=payload.sex.value if payload.sex else None,
        organization_id=payload.organization_id,
    )
    db.add(person)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="SARAM or e-mail already registered",
        )
    db.refresh(person)

    logger.info(f"Registered person {person.id} (SARAM {person.saram})")
    return PersonRead.model_validate(person)


@router.get("/people/{person_id}", response_model=PersonRead)
def get_person(person_id: int, db: Session = Depends(get_db_session)) -> PersonRead:
    """Fetch a person."""
    return PersonRead.model_validate(_get_person(db, person_id))


@router.put("/people/{person_id}", response_model=PersonRead)
def update_person(
    person_id: int,
    payload: PersonUpdate,
    db: Session = Depends(get_db_session),
) -> PersonRead:
    """
    Update the editable fields of a person.

    Stored mentions are not recomputed; they reflect the data at the time
    each test was saved.
    """
    person = _get_person(db, person_id)
    _require_organization(db, payload.organization_id)
    person.name = payload.name
    person.rank = payload.rank
    person.birth_date = payload.birth_date
    person.sex = payload.sex.value if payload.sex else None
    person.organization_id = payload.organization_id
    db.commit()
    db.refresh(person)

    logger.info(f"Updated person {person.id}")
    return PersonRead.model_validate(person)


@router.get("/people/{person_id}/history", response_model=HistoryResponse)
def get_history(person_id: int, db: Session = Depends(get_db_session)) -> HistoryResponse:
    """
    Evolution data for charts: TACF results ordered by test date ascending.
    """
    _get_person(db, person_id)
    logs = (
        db.query(TacfLog)
        .filter(TacfLog.person_id == person_id)
        .order_by(TacfLog.test_date.asc(), TacfLog.id.asc())
        .all()
    )
    points = [
        HistoryPoint(
            test_date=log.test_date,
            weight=log.weight,
            cooper=log.cooper_distance,
            push_up=log.push_up_reps,
            pull_up=log.pull_up_reps,
        )
        for log in logs
    ]
    return HistoryResponse(points=points)
