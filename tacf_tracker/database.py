"""
SQLAlchemy Database Models for the TACF Tracker

Provides persistent storage for:
- Organizational units and the TFM exercise catalogue
- Evaluated personnel (birth date and sex drive the mention tables)
- TACF test records with their computed mentions
- TFM daily training logs
"""

from datetime import datetime
from typing import Dict, Iterator, List, Optional

from loguru import logger
from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

from tacf_tracker.config import get_settings

Base = declarative_base()


class Organization(Base):
    """
    Military organizational unit.

    Attributes:
        id: Primary key
        acronym: Short designation (sigla), unique
        name: Full name
        group: Regional grouping used to filter the list (e.g. GUARNAE-RJ)
    """

    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True)
    acronym = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    group = Column(String, nullable=True, index=True)

    # Relationships
    members = relationship("Person", back_populates="organization")

    def __repr__(self):
        return f"<Organization(id={self.id}, acronym='{self.acronym}')>"


class Person(Base):
    """
    Evaluated military member.

    Attributes:
        id: Primary key
        saram: Service number, unique
        email: Contact e-mail, unique
        name: Full name
        rank: Military rank (posto/graduação)
        birth_date: Birth date (needed to compute mentions)
        sex: 'M' or 'F' (needed to compute mentions)
        organization_id: Foreign key to organizations table (optional)
        created_at: Registration timestamp
    """

    __tablename__ = "people"

    id = Column(Integer, primary_key=True)
    saram = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    rank = Column(String, nullable=True)
    birth_date = Column(Date, nullable=True)
    sex = Column(String(1), nullable=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    organization = relationship("Organization", back_populates="members")
    tacf_logs = relationship("TacfLog", back_populates="person", cascade="all, delete-orphan")
    tfm_logs = relationship("TfmLog", back_populates="person", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Person(id={self.id}, saram='{self.saram}', sex={self.sex})>"


class TacfLog(Base):
    """
    One TACF test session.

    Mentions are computed when the record is saved or updated and stored
    as their short codes (MAB/ABN/NOR/ACN/MAC). A null mention means the
    exercise was not administered.

    Attributes:
        id: Primary key
        person_id: Foreign key to people table
        test_date: Date of the test
        cooper_distance: Cooper run distance (meters)
        abdominal_reps: Abdominal repetitions
        push_up_reps: Push-up repetitions
        pull_up_reps: Pull-up repetitions (not graded)
        cooper_mention / abdominal_mention / push_up_mention: Mention codes
        weight: Body weight (kg)
        height: Height (meters)
        waist: Waist circumference (cm)
    """

    __tablename__ = "tacf_logs"

    id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("people.id"), nullable=False, index=True)
    test_date = Column(Date, nullable=False, index=True)

    # Raw scores
    cooper_distance = Column(Float, nullable=True)
    abdominal_reps = Column(Float, nullable=True)
    push_up_reps = Column(Float, nullable=True)
    pull_up_reps = Column(Integer, nullable=True)

    # Computed mentions
    cooper_mention = Column(String(3), nullable=True)
    abdominal_mention = Column(String(3), nullable=True)
    push_up_mention = Column(String(3), nullable=True)

    # Anthropometric measures
    weight = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    waist = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    person = relationship("Person", back_populates="tacf_logs")

    def __repr__(self):
        return (
            f"<TacfLog(id={self.id}, date='{self.test_date}', cooper={self.cooper_mention}, "
            f"abdominal={self.abdominal_mention}, push_up={self.push_up_mention})>"
        )


class Exercise(Base):
    """
    TFM exercise catalogue entry.

    Attributes:
        id: Primary key
        name: Display name, unique
        required_fields: Detail keys a log of this exercise records
    """

    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    required_fields = Column(JSON, nullable=False, default=list)

    # Relationships
    tfm_logs = relationship("TfmLog", back_populates="exercise")

    def __repr__(self):
        return f"<Exercise(id={self.id}, name='{self.name}', fields={self.required_fields})>"


class TfmLog(Base):
    """
    Ad-hoc training session.

    Attributes:
        id: Primary key
        person_id: Foreign key to people table
        exercise_id: Foreign key to exercises table
        training_date: Date of the session
        perceived_intensity: Perceived exertion (1-10)
        details: Session details keyed by the exercise's fields
    """

    __tablename__ = "tfm_logs"

    id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("people.id"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False, index=True)
    training_date = Column(Date, nullable=False, index=True)
    perceived_intensity = Column(Integer, nullable=True)
    details = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    person = relationship("Person", back_populates="tfm_logs")
    exercise = relationship("Exercise", back_populates="tfm_logs")

    @property
    def exercise_name(self) -> str:
        return self.exercise.name

    def __repr__(self):
        return f"<TfmLog(id={self.id}, date='{self.training_date}', exercise_id={self.exercise_id})>"


# Catalogue loaded into an empty exercises table
DEFAULT_EXERCISES: Dict[str, List[str]] = {
    "Running": ["distance_km", "duration_min", "pace_min_km", "avg_hr_bpm"],
    "Swimming": ["distance_m", "duration_min", "pace_100m"],
    "Interval training": ["work_time_s", "rest_time_s", "sessions"],
    "Strength training": ["muscle_group", "duration_min"],
    "Other activity": ["activity_name", "duration_min"],
}


def seed_exercises(session: Session) -> int:
    """
    Load the default exercise catalogue if the table is empty.

    Returns:
        Number of exercises added
    """
    if session.query(Exercise).count() > 0:
        return 0
    session.add_all(
        Exercise(name=name, required_fields=fields) for name, fields in DEFAULT_EXERCISES.items()
    )
    session.commit()
    return len(DEFAULT_EXERCISES)


# Database connection and session management

_session_factory: Optional[sessionmaker] = None


def get_engine(database_url: str = "sqlite:///tacf_tracker.db") -> Engine:
    """
    Create SQLAlchemy engine.

    In-memory SQLite shares a single connection so every session sees the
    same database.

    Args:
        database_url: Database connection string (default: SQLite file)

    Returns:
        SQLAlchemy Engine instance
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=False, **kwargs)
    return create_engine(database_url, echo=False)


def get_session_factory(engine: Engine) -> sessionmaker:
    """
    Create session factory.

    Args:
        engine: SQLAlchemy Engine instance

    Returns:
        Session factory (sessionmaker)
    """
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_database(database_url: str = "sqlite:///tacf_tracker.db") -> sessionmaker:
    """
    Initialize database, create all tables, seed the exercise catalogue and
    install the session factory used by `get_db_session`.

    Args:
        database_url: Database connection string

    Returns:
        Session factory bound to the new engine
    """
    global _session_factory

    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    _session_factory = get_session_factory(engine)
    with _session_factory() as session:
        seeded = seed_exercises(session)
    if seeded:
        logger.info(f"Seeded {seeded} catalogue exercises")
    logger.info(f"Database initialized ({engine.url.render_as_string(hide_password=True)})")
    return _session_factory


def get_db_session() -> Iterator[Session]:
    """
    Dependency for FastAPI to get database session.

    Yields:
        SQLAlchemy Session instance

    Usage:
        @router.get("/endpoint")
        def endpoint(db: Session = Depends(get_db_session)):
            ...
    """
    if _session_factory is None:
        init_database(get_settings().database_url)

    db = _session_factory()
    try:
        yield db
    finally:
        db.close()
