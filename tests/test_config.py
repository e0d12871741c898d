"""
Tests for settings and database bootstrap.
"""

from tacf_tracker import database
from tacf_tracker.config import Settings
from tacf_tracker.database import DEFAULT_EXERCISES, Exercise, Person, get_db_session, init_database, seed_exercises


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "LOG_LEVEL", "LOG_FILE", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:///tacf_tracker.db"
    assert settings.log_level == "INFO"
    assert settings.log_file is None
    assert "http://localhost:5173" in settings.cors_origin_list


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "https://painel.example.org, http://localhost:3000")

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite://"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origin_list == ["https://painel.example.org", "http://localhost:3000"]


def test_invalid_log_level_defaults_to_info(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    assert Settings(_env_file=None).log_level == "INFO"


def test_init_database_installs_session_factory(monkeypatch):
    monkeypatch.setattr(database, "_session_factory", None)
    init_database("sqlite://")

    sessions = get_db_session()
    db = next(sessions)
    try:
        assert db.query(Person).count() == 0
    finally:
        sessions.close()


def test_init_database_seeds_exercise_catalogue(monkeypatch):
    monkeypatch.setattr(database, "_session_factory", None)
    session_factory = init_database("sqlite://")

    with session_factory() as db:
        names = {exercise.name for exercise in db.query(Exercise).all()}
        assert names == set(DEFAULT_EXERCISES)
        # Second run leaves an existing catalogue alone
        assert seed_exercises(db) == 0
