"""
Reference List API Routes

Organizational units and the TFM exercise catalogue.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tacf_tracker.database import Exercise, Organization, get_db_session
from tacf_tracker.schemas import ExerciseCreate, ExerciseRead, OrganizationCreate, OrganizationRead

router = APIRouter()


def _require_organization(db: Session, organization_id: Optional[int]) -> None:
    """
    Check that a referenced organization exists.

    Raises:
        HTTPException: 400 if the id does not match any organization
    """
    if organization_id is not None and db.get(Organization, organization_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Organization {organization_id} does not exist",
        )


def _require_exercise(db: Session, exercise_id: int) -> Exercise:
    """
    Fetch a referenced catalogue exercise.

    Raises:
        HTTPException: 400 if the id does not match any exercise
    """
    exercise = db.get(Exercise, exercise_id)
    if exercise is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Exercise {exercise_id} does not exist",
        )
    return exercise


@router.get("/lists/organizations", response_model=List[OrganizationRead])
def list_organizations(
    group: Optional[str] = Query(None, description="Only units of this group, e.g. GUARNAE-RJ"),
    db: Session = Depends(get_db_session),
) -> List[OrganizationRead]:
    """Organizational units ordered by acronym."""
    query = db.query(Organization)
    if group is not None:
        query = query.filter(Organization.group == group)
    return [OrganizationRead.model_validate(org) for org in query.order_by(Organization.acronym).all()]


@router.post(
    "/lists/organizations",
    response_model=OrganizationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_organization(payload: OrganizationCreate, db: Session = Depends(get_db_session)) -> OrganizationRead:
    """
    Register an organizational unit.

    Raises:
        HTTPException: 409 if the acronym is already registered
    """
    organization = Organization(**payload.model_dump())
    db.add(organization)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Organization {payload.acronym} already registered",
        )
    db.refresh(organization)

    logger.info(f"Registered organization {organization.id} ({organization.acronym})")
    return OrganizationRead.model_validate(organization)


@router.get("/lists/exercises", response_model=List[ExerciseRead])
def list_exercises(db: Session = Depends(get_db_session)) -> List[ExerciseRead]:
    """TFM exercise catalogue ordered by name, with the detail fields of each."""
    exercises = db.query(Exercise).order_by(Exercise.name).all()
    return [ExerciseRead.model_validate(exercise) for exercise in exercises]


@router.post(
    "/lists/exercises",
    response_model=ExerciseRead,
    status_code=status.HTTP_201_CREATED,
)
def create_exercise(payload: ExerciseCreate, db: Session = Depends(get_db_session)) -> ExerciseRead:
    """
    Add an exercise to the catalogue.

    Raises:
        HTTPException: 409 if an exercise with this name exists
    """
    exercise = Exercise(name=payload.name, required_fields=payload.required_fields)
    db.add(exercise)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Exercise {payload.name} already exists",
        )
    db.refresh(exercise)

    logger.info(f"Added exercise {exercise.id} ({exercise.name}) with fields {exercise.required_fields}")
    return ExerciseRead.model_validate(exercise)
