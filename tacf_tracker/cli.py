"""
Command-line interface for the TACF tracker.

Provides commands for:
- Classifying a single score into a mention
- Viewing the mention threshold table
- Scoring a full TACF test from a JSON file
- Running the API server
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tacf_tracker.errors import MentionError
from tacf_tracker.mentions import (
    MENTION_TABLE,
    AgeBracket,
    ExerciseKind,
    Grade,
    MentionDecision,
    age_in_years,
    explain,
    parse_sex,
)
from tacf_tracker.schemas import TacfInput, TacfMentions, TacfSubmission
from tacf_tracker.scoring import TacfScorer

# Initialize Typer app and Rich console
app = typer.Typer(help="TACF Tracker - physical-fitness test mentions (ICA 54-1, Annex H)")
console = Console()

GRADE_COLORS = {
    Grade.BELOW_MINIMUM: "red",
    Grade.BELOW_AVERAGE: "dark_orange",
    Grade.AVERAGE: "yellow",
    Grade.ABOVE_AVERAGE: "green",
    Grade.WELL_ABOVE_AVERAGE: "bright_green",
}


# ===== DISPLAY HELPER FUNCTIONS =====


def _format_grade(grade: Optional[Grade]) -> str:
    if grade is None:
        return "[dim]not administered[/dim]"
    color = GRADE_COLORS[grade]
    return f"[{color}]{grade.value}[/{color}]"


def _parse_date(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}", param_hint=option)


def _display_decision(decision: MentionDecision):
    """
    Display a classification decision with the row used.

    Args:
        decision: MentionDecision from the engine
    """
    unit = decision.exercise.unit
    console.print(
        Panel(
            f"Mention: [bold]{_format_grade(decision.grade)}[/bold]\n"
            f"Score: {decision.raw_score:g} {unit}\n"
            f"Age: {decision.age} (bracket {decision.bracket.value})",
            title=f"{decision.exercise.value} / {decision.sex.value}",
            border_style=GRADE_COLORS[decision.grade],
        )
    )

    table = Table(title="Thresholds (inclusive upper bounds)", box=box.ROUNDED)
    for grade in Grade:
        table.add_column(grade.value, justify="right")
    bounds = decision.thresholds.as_tuple()
    table.add_row(*[f"≤ {b}" for b in bounds], f"> {bounds[-1]}")
    console.print(table)


def _display_mentions(test: TacfInput, mentions: TacfMentions, age: int):
    """
    Display the mentions of a full TACF test.

    Args:
        test: Raw test results
        mentions: Computed mentions
        age: Age on the test date
    """
    table = Table(title=f"TACF of {test.test_date} (age {age})", box=box.ROUNDED)
    table.add_column("Exercise", style="cyan")
    table.add_column("Result", justify="right")
    table.add_column("Mention", justify="center")

    rows = [
        (ExerciseKind.COOPER, test.cooper_distance, mentions.cooper),
        (ExerciseKind.ABDOMINAL, test.abdominal_reps, mentions.abdominal),
        (ExerciseKind.PUSH_UP, test.push_up_reps, mentions.push_up),
    ]
    for exercise, raw, grade in rows:
        result = "-" if raw is None else f"{raw:g} {exercise.unit}"
        table.add_row(exercise.value, result, _format_grade(grade))
    if test.pull_up_reps is not None:
        table.add_row("pull_up", f"{test.pull_up_reps} reps", "[dim]not graded[/dim]")

    console.print(table)


# ===== CLI COMMANDS =====


@app.command()
def classify(
    exercise: ExerciseKind = typer.Option(..., "--exercise", "-e", help="Exercise to grade"),
    sex: str = typer.Option(..., "--sex", "-s", help="M or F"),
    score: Optional[float] = typer.Option(
        None, "--score", help="Distance in meters or repetitions (omit if not administered)"
    ),
    age: Optional[int] = typer.Option(None, "--age", "-a", help="Age in completed years"),
    birth_date: Optional[str] = typer.Option(None, "--birth-date", help="Birth date (YYYY-MM-DD)"),
    test_date: Optional[str] = typer.Option(
        None, "--test-date", help="Test date (YYYY-MM-DD, defaults to today)"
    ),
):
    """
    Classify one score into a mention.

    Give either --age or --birth-date (with an optional --test-date).
    """
    try:
        parsed_sex = parse_sex(sex)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--sex")

    try:
        if age is None:
            if birth_date is None:
                raise typer.BadParameter("Provide --age or --birth-date", param_hint="--age")
            as_of = _parse_date(test_date, "--test-date") if test_date else date.today()
            age = age_in_years(_parse_date(birth_date, "--birth-date"), as_of)
        decision = explain(exercise, parsed_sex, age, score)
    except MentionError as e:
        console.print(f"[red]✗ {type(e).__name__}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _display_decision(decision)


@app.command()
def table(
    exercise: Optional[ExerciseKind] = typer.Option(None, "--exercise", "-e", help="Only this exercise"),
    sex: Optional[str] = typer.Option(None, "--sex", "-s", help="Only this sex (M or F)"),
):
    """
    Show the mention threshold table.
    """
    parsed_sex = None
    if sex is not None:
        try:
            parsed_sex = parse_sex(sex)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--sex")

    groups = {}
    for (row_exercise, row_sex, bracket), thresholds in MENTION_TABLE.items():
        if exercise is not None and row_exercise != exercise:
            continue
        if parsed_sex is not None and row_sex != parsed_sex:
            continue
        groups.setdefault((row_exercise, row_sex), {})[bracket] = thresholds

    for (row_exercise, row_sex), rows in groups.items():
        grid = Table(
            title=f"{row_exercise.value} / {row_sex.value} ({row_exercise.unit})",
            box=box.ROUNDED,
        )
        grid.add_column("Age", style="cyan")
        for grade in Grade:
            grid.add_column(grade.value, justify="right", style=GRADE_COLORS[grade])

        for bracket in AgeBracket:
            if bracket not in rows:
                continue
            b0, b1, b2, b3 = rows[bracket].as_tuple()
            grid.add_row(
                bracket.value,
                f"≤ {b0}",
                f"{b0 + 1}-{b1}",
                f"{b1 + 1}-{b2}",
                f"{b2 + 1}-{b3}",
                f"≥ {b3 + 1}",
            )
        console.print(grid)


@app.command()
def score(
    file: Path = typer.Option(
        ...,
        "--file",
        "-f",
        help="JSON file with birth_date, sex and the TACF results",
        exists=True,
    ),
):
    """
    Score a full TACF test from a JSON file.

    The file must carry birth_date (YYYY-MM-DD) and sex next to the results.

    Example file:
        {"birth_date": "1995-03-10", "sex": "M", "test_date": "2024-05-02",
         "cooper_distance": 2650, "abdominal_reps": 38, "push_up_reps": null}
    """
    try:
        with open(file) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object")
        test = TacfSubmission(**data)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]✗ Failed to load test: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        scorer = TacfScorer.for_person(test)
        mentions = scorer.score(test)
    except ValueError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _display_mentions(test, mentions, scorer.age_on(test.test_date))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """
    Run the API server.
    """
    import uvicorn

    uvicorn.run("tacf_tracker.api.main:app", host=host, port=port, reload=reload, log_level="info")


if __name__ == "__main__":
    app()
