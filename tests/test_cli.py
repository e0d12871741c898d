"""
Tests for the command-line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from tacf_tracker.cli import app

runner = CliRunner()


def test_classify_with_age():
    result = runner.invoke(app, ["classify", "--exercise", "cooper", "--sex", "M", "--age", "25", "--score", "2831"])

    assert result.exit_code == 0
    assert "MAC" in result.output
    assert "<=29" in result.output


def test_classify_with_birth_date():
    result = runner.invoke(
        app,
        [
            "classify", "-e", "abdominal", "-s", "F",
            "--birth-date", "1980-01-15", "--test-date", "2024-03-01",
            "--score", "23",
        ],
    )

    assert result.exit_code == 0
    assert "NOR" in result.output
    assert "40-49" in result.output


def test_classify_missing_score_fails():
    result = runner.invoke(app, ["classify", "-e", "push_up", "-s", "M", "--age", "40"])

    assert result.exit_code == 1
    assert "MissingScore" in result.output


def test_classify_negative_score_fails():
    result = runner.invoke(app, ["classify", "-e", "push_up", "-s", "M", "--age", "40", "--score=-1"])

    assert result.exit_code == 1
    assert "InvalidScore" in result.output


def test_classify_rejects_unknown_sex():
    result = runner.invoke(app, ["classify", "-e", "cooper", "-s", "X", "--age", "25", "--score", "2000"])
    assert result.exit_code != 0


def test_table_filtered():
    result = runner.invoke(app, ["table", "--exercise", "cooper", "--sex", "F"])

    assert result.exit_code == 0
    assert "cooper / F" in result.output
    assert "cooper / M" not in result.output
    assert "1420" in result.output


def test_table_all():
    result = runner.invoke(app, ["table"])

    assert result.exit_code == 0
    for title in ["cooper / M", "abdominal / M", "push_up / M", "cooper / F", "abdominal / F", "push_up / F"]:
        assert title in result.output


@pytest.fixture
def tacf_file(tmp_path):
    path = tmp_path / "tacf.json"
    path.write_text(
        json.dumps(
            {
                "birth_date": "1995-05-10",
                "sex": "M",
                "test_date": "2024-05-10",
                "cooper_distance": 2831,
                "abdominal_reps": 41,
                "push_up_reps": None,
                "pull_up_reps": 7,
            }
        )
    )
    return path


def test_score_file(tacf_file):
    result = runner.invoke(app, ["score", "--file", str(tacf_file)])

    assert result.exit_code == 0
    assert "MAC" in result.output
    assert "NOR" in result.output
    assert "not administered" in result.output
    assert "not graded" in result.output


def test_score_file_without_profile(tmp_path):
    path = tmp_path / "tacf.json"
    path.write_text(json.dumps({"test_date": "2024-05-10", "cooper_distance": 2000}))

    result = runner.invoke(app, ["score", "--file", str(path)])

    assert result.exit_code == 1
    assert "birth_date" in result.output
    assert "sex" in result.output


def test_score_file_invalid_score(tmp_path):
    path = tmp_path / "tacf.json"
    path.write_text(
        json.dumps({"birth_date": "1995-05-10", "sex": "M", "test_date": "2024-05-10", "push_up_reps": -4})
    )

    result = runner.invoke(app, ["score", "--file", str(path)])

    assert result.exit_code == 1


@pytest.mark.parametrize(
    "profile",
    [
        {"birth_date": 19950510, "sex": "M"},
        {"birth_date": "10/05/1995", "sex": "M"},
        {"birth_date": "1995-05-10", "sex": "X"},
        {"birth_date": None, "sex": "M"},
    ],
)
def test_score_file_invalid_profile(tmp_path, profile):
    """Bad profile data ends with the error message, not a traceback."""
    path = tmp_path / "tacf.json"
    path.write_text(json.dumps({**profile, "test_date": "2024-05-10", "cooper_distance": 2000}))

    result = runner.invoke(app, ["score", "--file", str(path)])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "Failed to load test" in result.output


def test_score_file_not_an_object(tmp_path):
    path = tmp_path / "tacf.json"
    path.write_text(json.dumps([1, 2, 3]))

    result = runner.invoke(app, ["score", "--file", str(path)])

    assert result.exit_code == 1
    assert "Expected a JSON object" in result.output
